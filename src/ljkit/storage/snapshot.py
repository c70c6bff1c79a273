# =============================================================================
# Account Snapshots
# =============================================================================
# Saves the offline-useful part of an Account so a client can show moods,
# journals and userpics before (or without) logging in, and so the next login
# only has to download moods it doesn't know yet.
#
# A snapshot NEVER contains the password digest or the server's login
# message. Credentials live in the system keyring, not in our files.
#
# File format (JSON):
#
#     {
#       "version": 1,
#       "account": {
#         "username": "alice",
#         "host": "www.livejournal.com",
#         "port": 443,
#         "moods": {"1": "happy", "2": "sad"},
#         "journals": ["alice", "some_community"],
#         ...
#       }
#     }
#
# Bump SNAPSHOT_VERSION whenever the "account" layout changes incompatibly.
# =============================================================================

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ljkit.core.friends import MAX_GROUPS, Friend, Group
from ljkit.errors import SnapshotError

logger = logging.getLogger(__name__)

# Current snapshot format version
SNAPSHOT_VERSION = 1


@dataclass
class AccountSnapshot:
    """
    Serializable state of an Account.

    Attributes:
        username: Account login name.
        host: Server hostname.
        port: Server port.
        fullname: Display name from the last login.
        moods: Mood directory as an id -> name map.
        journals: Journal names, own journal first.
        user_pictures: Userpic keyword -> URL.
        default_user_picture_url: URL of the default userpic, if any.
        custom_info: Caller-owned data. Must be JSON-serializable.
        friends: Friend records (see Friend.to_dict()).
        groups: Group records (see Group.to_dict()).
    """
    username: str
    host: str
    port: int
    fullname: str = ""
    moods: dict[str, str] = field(default_factory=dict)
    journals: list[str] = field(default_factory=list)
    user_pictures: dict[str, str] = field(default_factory=dict)
    default_user_picture_url: str = ""
    custom_info: dict[str, Any] = field(default_factory=dict)
    friends: list[dict[str, Any]] = field(default_factory=list)
    groups: list[dict[str, Any]] = field(default_factory=list)

    @property
    def identifier(self) -> str:
        return f"{self.username}@{self.host}:{self.port}"


def encode_snapshot(snapshot: AccountSnapshot) -> dict[str, Any]:
    """Convert a snapshot into a JSON-ready document."""
    return {
        "version": SNAPSHOT_VERSION,
        "account": {
            "username": snapshot.username,
            "host": snapshot.host,
            "port": snapshot.port,
            "fullname": snapshot.fullname,
            "moods": dict(snapshot.moods),
            "journals": list(snapshot.journals),
            "user_pictures": dict(snapshot.user_pictures),
            "default_user_picture_url": snapshot.default_user_picture_url,
            "custom_info": dict(snapshot.custom_info),
            "friends": list(snapshot.friends),
            "groups": list(snapshot.groups),
        },
    }


def decode_snapshot(document: dict[str, Any]) -> AccountSnapshot:
    """
    Convert a document produced by encode_snapshot() back into a snapshot.

    Raises:
        SnapshotError: If the version is unsupported, fields are missing
                       or of the wrong type, or a friend or group record
                       is invalid.
    """
    if not isinstance(document, dict):
        raise SnapshotError("Snapshot document must be an object")

    version = document.get("version")
    if version != SNAPSHOT_VERSION:
        raise SnapshotError(f"Unsupported snapshot version: {version!r}")

    data = document.get("account")
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot has no account section")

    try:
        snapshot = AccountSnapshot(
            username=str(data["username"]),
            host=str(data["host"]),
            port=int(data["port"]),
            fullname=str(data.get("fullname", "")),
            moods={str(int(k)): str(v) for k, v in data.get("moods", {}).items()},
            journals=[str(name) for name in data.get("journals", [])],
            user_pictures={str(k): str(v) for k, v in data.get("user_pictures", {}).items()},
            default_user_picture_url=str(data.get("default_user_picture_url", "")),
            custom_info=dict(data.get("custom_info", {})),
            friends=[_friend_record(record) for record in data.get("friends", [])],
            groups=[_group_record(record) for record in data.get("groups", [])],
        )
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise SnapshotError(f"Malformed snapshot: {e}") from e

    if not snapshot.username:
        raise SnapshotError("Snapshot has an empty username")
    return snapshot


def _friend_record(record: Any) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise SnapshotError(f"Friend record must be an object, not {type(record).__name__}")
    username = record.get("username")
    if not isinstance(username, str) or not username:
        raise SnapshotError(f"Friend record has no username: {record!r}")
    return Friend.from_dict(record).to_dict()


def _group_record(record: Any) -> dict[str, Any]:
    if not isinstance(record, dict):
        raise SnapshotError(f"Group record must be an object, not {type(record).__name__}")
    group = Group.from_dict(record)
    if not 1 <= group.number <= MAX_GROUPS:
        raise SnapshotError(f"Group number {group.number} is outside 1-{MAX_GROUPS}")
    return group.to_dict()


def save_snapshot(snapshot: AccountSnapshot, path: Path) -> None:
    """
    Write a snapshot to disk as JSON.

    Creates the parent directory if it doesn't exist.

    Raises:
        SnapshotError: If custom_info holds values JSON can't represent.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        text = json.dumps(encode_snapshot(snapshot), indent=2, sort_keys=True)
    except (TypeError, ValueError) as e:
        raise SnapshotError(f"Snapshot for {snapshot.identifier} isn't serializable: {e}") from e

    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    logger.info(f"Saved snapshot for {snapshot.identifier} to {path}")


def load_snapshot(path: Path) -> AccountSnapshot:
    """
    Read a snapshot written by save_snapshot().

    Raises:
        SnapshotError: If the file is missing, isn't JSON, or is malformed.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            document = json.load(f)
    except FileNotFoundError as e:
        raise SnapshotError(f"No snapshot at {path}") from e
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Invalid snapshot file {path}: {e}") from e

    return decode_snapshot(document)
