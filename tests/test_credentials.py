"""Tests for keyring password storage."""

import keyring
from keyring.errors import KeyringError

from ljkit.credentials import get_password, set_password
from ljkit.protocol.account import Account

from conftest import FakeTransport


class TestCredentials:

    def test_get_password(self, monkeypatch):
        lookups = []

        def fake_get(service, username):
            lookups.append((service, username))
            return "secret"

        monkeypatch.setattr(keyring, "get_password", fake_get)
        account = Account("alice", FakeTransport())

        assert get_password(account) == "secret"
        assert lookups == [("ljkit:alice@www.example.com:443", "alice")]

    def test_keyring_unavailable(self, monkeypatch):
        def broken(service, username):
            raise KeyringError("no backend")

        monkeypatch.setattr(keyring, "get_password", broken)
        assert get_password(Account("alice", FakeTransport())) is None

    def test_set_password(self, monkeypatch):
        stored = {}
        monkeypatch.setattr(
            keyring, "set_password",
            lambda service, username, password: stored.update({(service, username): password}),
        )

        set_password(Account("alice", FakeTransport()), "secret")

        assert stored == {("ljkit:alice@www.example.com:443", "alice"): "secret"}
