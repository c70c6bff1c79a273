"""Tests for account snapshots."""

import json

import pytest

from ljkit.core.friends import Friendship
from ljkit.errors import SnapshotError
from ljkit.protocol.account import Account
from ljkit.protocol.registry import AccountRegistry
from ljkit.storage.snapshot import (
    SNAPSHOT_VERSION,
    AccountSnapshot,
    decode_snapshot,
    encode_snapshot,
    load_snapshot,
    save_snapshot,
)

from conftest import FakeTransport


@pytest.fixture
def logged_in(account):
    account.login("secret")
    account.download_friends()
    account.custom_info["theme"] = "dark"
    return account


class TestAccountSnapshot:

    def test_excludes_credentials_and_message(self, logged_in):
        document = encode_snapshot(logged_in.to_snapshot())
        text = json.dumps(document)

        assert logged_in.hashed_password not in text
        assert "Welcome back!" not in text
        assert document["version"] == SNAPSHOT_VERSION

    def test_restore(self, logged_in, temp_dir):
        path = temp_dir / "alice.json"
        logged_in.write_to_file(path)

        restored = Account.from_file(path, FakeTransport())

        assert not restored.is_logged_in
        assert restored.hashed_password is None
        assert restored.login_message is None
        assert restored.identifier == logged_in.identifier
        assert restored.fullname == "Alice Example"
        assert restored.moods == logged_in.moods
        assert restored.moods.highest_mood_id == 7
        assert restored.journals == logged_in.journals
        assert restored.user_pictures == logged_in.user_pictures
        assert restored.custom_info == {"theme": "dark"}
        assert restored.friend_named("bob").friendship == Friendship.MUTUAL
        assert restored.groups[1].name == "Family"

    def test_restore_becomes_default_by_identifier(self, logged_in, temp_dir):
        path = temp_dir / "alice.json"
        logged_in.write_to_file(path)
        registry = AccountRegistry(default_identifier=logged_in.identifier)
        Account("bob", FakeTransport(), registry=registry)

        restored = Account.from_file(path, FakeTransport(), registry=registry)

        assert registry.default is restored
        assert restored.is_default

    def test_restored_moods_drive_next_login(self, logged_in, temp_dir):
        path = temp_dir / "alice.json"
        logged_in.write_to_file(path)
        transport = FakeTransport({"login": {"success": "OK"}})

        restored = Account.from_file(path, transport)
        restored.login("secret")

        assert transport.calls[0][1]["getmoods"] == "7"
        assert restored.moods.id_for_name("happy") == 1

    def test_unserializable_custom_info(self, account, temp_dir):
        account.custom_info["callback"] = object()
        with pytest.raises(SnapshotError):
            account.write_to_file(temp_dir / "bad.json")


class TestDecodeSnapshot:

    def test_round_trip(self):
        snapshot = AccountSnapshot("alice", "www.example.com", 443, moods={"1": "happy"})
        assert decode_snapshot(encode_snapshot(snapshot)) == snapshot

    def test_unknown_version(self):
        with pytest.raises(SnapshotError, match="version"):
            decode_snapshot({"version": 99, "account": {}})

    def test_missing_fields(self):
        with pytest.raises(SnapshotError):
            decode_snapshot({"version": SNAPSHOT_VERSION, "account": {"username": "alice"}})

    def test_empty_username(self):
        with pytest.raises(SnapshotError):
            decode_snapshot({"version": SNAPSHOT_VERSION, "account": {"username": "", "host": "h", "port": 1}})

    @pytest.mark.parametrize(
        "section, record",
        [
            ("friends", {"fullname": "No Name"}),
            ("friends", {"username": ""}),
            ("friends", {"username": 42}),
            ("friends", "bob"),
            ("friends", {"username": "bob", "group_mask": "lots"}),
            ("groups", {"name": "Family"}),
            ("groups", {"number": "first", "name": "Family"}),
            ("groups", {"number": 0, "name": "Family"}),
            ("groups", {"number": 31, "name": "Family"}),
            ("groups", ["Family"]),
        ],
    )
    def test_malformed_friend_records(self, section, record, temp_dir):
        document = encode_snapshot(AccountSnapshot("alice", "www.example.com", 443))
        document["account"][section] = [record]
        path = temp_dir / "alice.json"
        path.write_text(json.dumps(document))

        with pytest.raises(SnapshotError):
            decode_snapshot(document)
        with pytest.raises(SnapshotError):
            Account.from_file(path, FakeTransport())

    def test_friend_records_are_normalized(self):
        document = encode_snapshot(AccountSnapshot("alice", "www.example.com", 443))
        document["account"]["friends"] = [{"username": "bob", "group_mask": "3"}]
        document["account"]["groups"] = [{"number": "1", "name": "Family"}]

        snapshot = decode_snapshot(document)

        assert snapshot.friends[0]["group_mask"] == 3
        assert snapshot.friends[0]["fullname"] == "bob"
        assert snapshot.groups[0]["number"] == 1

    def test_non_numeric_mood_id(self):
        document = encode_snapshot(AccountSnapshot("alice", "www.example.com", 443))
        document["account"]["moods"] = {"happy": "1"}
        with pytest.raises(SnapshotError):
            decode_snapshot(document)

    def test_missing_file(self, temp_dir):
        with pytest.raises(SnapshotError):
            load_snapshot(temp_dir / "missing.json")

    def test_invalid_json(self, temp_dir):
        path = temp_dir / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotError):
            load_snapshot(path)

    def test_save_creates_directories(self, temp_dir):
        path = temp_dir / "nested" / "dir" / "alice.json"
        save_snapshot(AccountSnapshot("alice", "www.example.com", 443), path)
        assert load_snapshot(path).username == "alice"
