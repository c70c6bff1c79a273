# =============================================================================
# Friends and Groups
# =============================================================================
# An account's friends, friend-ofs and friend groups as returned by the
# "getfriends" protocol mode, plus the variables for uploading edits and
# the "checkfriends" poll result.
#
# The reply has three numbered sections:
#
#   friend_N_*    users the account lists as friends (outgoing)
#   friendof_N_*  users that list the account as a friend (incoming)
#   frgrp_N_*     friend groups; N is the group number (1-30)
#
# A user in both sections is a mutual friend and appears once, with both
# friendship bits set. Group membership is a bitmask where group N is
# bit N (bit 0 is reserved by the protocol).
# =============================================================================

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import IntFlag
from typing import Any

from ljkit.errors import ProtocolParseError

# The protocol allows at most 30 friend groups, numbered 1..30
MAX_GROUPS = 30


class Friendship(IntFlag):
    """
    Direction of a friendship.

        - OUTGOING: The account lists this user as a friend.
        - INCOMING: This user lists the account as a friend.
        - MUTUAL: Both.
    """
    NONE = 0
    OUTGOING = 1
    INCOMING = 2
    MUTUAL = OUTGOING | INCOMING


@dataclass
class Friend:
    """
    A user related to the account through the friends list.

    Attributes:
        username: Login name of the friend.
        fullname: Display name reported by the server (defaults to username).
        foreground_color: HTML color the account uses for this friend.
        background_color: HTML color the account uses for this friend.
        foreground_color_for_you: Color this friend uses for the account
                                  (only known for incoming friendships).
        background_color_for_you: See foreground_color_for_you.
        group_mask: Bitmask of the account's groups this friend belongs to.
        account_type: "" for a regular user, otherwise e.g. "community".
        account_status: "" when active, otherwise e.g. "deleted", "suspended".
        birthday: Birthday string as sent by the server ("YYYY-MM-DD" or
                  "MM-DD"), empty if unknown.
        friendship: Direction of the friendship.
    """
    username: str
    fullname: str = ""
    foreground_color: str = ""
    background_color: str = ""
    foreground_color_for_you: str = ""
    background_color_for_you: str = ""
    group_mask: int = 1
    account_type: str = ""
    account_status: str = ""
    birthday: str = ""
    friendship: Friendship = Friendship.NONE

    def __post_init__(self) -> None:
        if not self.fullname:
            self.fullname = self.username

    @property
    def is_community(self) -> bool:
        return self.account_type == "community"

    @property
    def is_listed(self) -> bool:
        """True if the user is on the account's friends list."""
        return bool(self.friendship & Friendship.OUTGOING)

    def to_dict(self) -> dict[str, Any]:
        return {
            "username": self.username,
            "fullname": self.fullname,
            "foreground_color": self.foreground_color,
            "background_color": self.background_color,
            "foreground_color_for_you": self.foreground_color_for_you,
            "background_color_for_you": self.background_color_for_you,
            "group_mask": self.group_mask,
            "account_type": self.account_type,
            "account_status": self.account_status,
            "birthday": self.birthday,
            "friendship": int(self.friendship),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Friend":
        return cls(
            username=data["username"],
            fullname=data.get("fullname", ""),
            foreground_color=data.get("foreground_color", ""),
            background_color=data.get("background_color", ""),
            foreground_color_for_you=data.get("foreground_color_for_you", ""),
            background_color_for_you=data.get("background_color_for_you", ""),
            group_mask=int(data.get("group_mask", 1)),
            account_type=data.get("account_type", ""),
            account_status=data.get("account_status", ""),
            birthday=data.get("birthday", ""),
            friendship=Friendship(int(data.get("friendship", 0))),
        )


@dataclass
class Group:
    """
    A friend group.

    Attributes:
        number: Group number, 1-30. The group's bit in a mask is 1 << number.
        name: Group name.
        sort_order: Position hint for display (0-255).
        is_public: Whether other users can see the group.
    """
    number: int
    name: str
    sort_order: int = 50
    is_public: bool = False

    @property
    def mask(self) -> int:
        return 1 << self.number

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "name": self.name,
            "sort_order": self.sort_order,
            "is_public": self.is_public,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Group":
        return cls(
            number=int(data["number"]),
            name=data.get("name", ""),
            sort_order=int(data.get("sort_order", 50)),
            is_public=bool(data.get("is_public", False)),
        )


@dataclass
class FriendsInfo:
    """Parsed result of a getfriends reply."""
    friends: dict[str, Friend] = field(default_factory=dict)
    groups: dict[int, Group] = field(default_factory=dict)


@dataclass
class FriendsCheck:
    """
    Parsed result of a checkfriends reply.

    Attributes:
        last_update: Opaque marker to send with the next check.
        has_new: True if a friend posted since last_update.
        interval: Seconds the server asks clients to wait before checking
                  again.
    """
    last_update: str
    has_new: bool
    interval: int


# =============================================================================
# Reply Parsing
# =============================================================================

def _int_field(reply: Mapping[str, Any], key: str, default: int = 0) -> int:
    raw = reply.get(key)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except (TypeError, ValueError) as e:
        raise ProtocolParseError(f"Invalid {key} {raw!r}", dict(reply)) from e


def _text(reply: Mapping[str, Any], key: str) -> str:
    value = reply.get(key)
    return "" if value is None else str(value)


def parse_friends_reply(reply: Mapping[str, Any]) -> FriendsInfo:
    """
    Parse a getfriends reply.

    Args:
        reply: Flat reply map.

    Returns:
        FriendsInfo with friends keyed by username and groups by number.

    Raises:
        ProtocolParseError: If a count, mask or group number isn't valid.
    """
    info = FriendsInfo()

    for i in range(1, _int_field(reply, "friend_count") + 1):
        prefix = f"friend_{i}"
        username = _text(reply, f"{prefix}_user")
        if not username:
            continue
        info.friends[username] = Friend(
            username=username,
            fullname=_text(reply, f"{prefix}_name"),
            foreground_color=_text(reply, f"{prefix}_fg"),
            background_color=_text(reply, f"{prefix}_bg"),
            group_mask=_int_field(reply, f"{prefix}_groupmask", 1),
            account_type=_text(reply, f"{prefix}_type"),
            account_status=_text(reply, f"{prefix}_status"),
            birthday=_text(reply, f"{prefix}_birthday"),
            friendship=Friendship.OUTGOING,
        )

    for i in range(1, _int_field(reply, "friendof_count") + 1):
        prefix = f"friendof_{i}"
        username = _text(reply, f"{prefix}_user")
        if not username:
            continue
        friend = info.friends.get(username)
        if friend is None:
            friend = Friend(
                username=username,
                fullname=_text(reply, f"{prefix}_name"),
                account_type=_text(reply, f"{prefix}_type"),
                account_status=_text(reply, f"{prefix}_status"),
                group_mask=0,
            )
            info.friends[username] = friend
        friend.foreground_color_for_you = _text(reply, f"{prefix}_fg")
        friend.background_color_for_you = _text(reply, f"{prefix}_bg")
        friend.friendship |= Friendship.INCOMING

    max_group = _int_field(reply, "frgrp_maxnum")
    for number in range(1, min(max_group, MAX_GROUPS) + 1):
        prefix = f"frgrp_{number}"
        name = _text(reply, f"{prefix}_name")
        if not name:
            continue
        info.groups[number] = Group(
            number=number,
            name=name,
            sort_order=_int_field(reply, f"{prefix}_sortorder", 50),
            is_public=_text(reply, f"{prefix}_public") == "1",
        )

    return info


def mask_for_groups(groups: Iterable[Group]) -> int:
    """Return the group mask selecting the given groups."""
    mask = 0
    for group in groups:
        mask |= group.mask
    return mask


def groups_for_mask(groups: Mapping[int, Group], mask: int) -> list[Group]:
    """Return the known groups selected by mask, ordered by group number."""
    return [groups[number] for number in sorted(groups) if mask & (1 << number)]


def parse_checkfriends_reply(reply: Mapping[str, Any]) -> FriendsCheck:
    """
    Parse a checkfriends reply.

    Raises:
        ProtocolParseError: If the interval isn't a number.
    """
    return FriendsCheck(
        last_update=_text(reply, "lastupdate"),
        has_new=_text(reply, "new") == "1",
        interval=_int_field(reply, "interval"),
    )


def parse_friends_added(reply: Mapping[str, Any]) -> dict[str, str]:
    """Return username -> full name for the friends an editfriends reply added."""
    added = {}
    for i in range(1, _int_field(reply, "friends_added") + 1):
        username = _text(reply, f"friend_added_{i}_user")
        if username:
            added[username] = _text(reply, f"friend_added_{i}_name")
    return added


# =============================================================================
# Edit Requests
# =============================================================================
# Uploading edits takes two modes. "editfriendgroups" creates, renames and
# deletes groups and moves existing friends between them:
#
#   efg_set_N_name / _sort / _public    create or update group N
#   efg_delete_N                        delete group N
#   editfriend_groupmask_USER           new group mask of USER
#
# "editfriends" adds and removes friends:
#
#   editfriend_add_N_user / _fg / _bg / _groupmask
#   editfriend_delete_USER
#
# Both builders compare the last synced state with the edited one and only
# return the variables for what changed.
# =============================================================================

def _listed(friends: Mapping[str, Friend], username: str) -> bool:
    friend = friends.get(username)
    return friend is not None and friend.is_listed


def group_edit_parameters(
    synced_groups: Mapping[int, Group],
    groups: Mapping[int, Group],
    synced_friends: Mapping[str, Friend],
    friends: Mapping[str, Friend],
) -> dict[str, str]:
    """Build "editfriendgroups" variables for group and membership changes."""
    parameters = {}
    for number in sorted(groups):
        group = groups[number]
        if synced_groups.get(number) == group:
            continue
        parameters[f"efg_set_{number}_name"] = group.name
        parameters[f"efg_set_{number}_sort"] = str(group.sort_order)
        parameters[f"efg_set_{number}_public"] = "1" if group.is_public else "0"

    for number in sorted(set(synced_groups) - set(groups)):
        parameters[f"efg_delete_{number}"] = "1"

    # New friends get their mask with the add request instead
    for username in sorted(friends):
        friend = friends[username]
        if not friend.is_listed or not _listed(synced_friends, username):
            continue
        if synced_friends[username].group_mask != friend.group_mask:
            parameters[f"editfriend_groupmask_{username}"] = str(friend.group_mask)
    return parameters


def friend_edit_parameters(
    synced_friends: Mapping[str, Friend],
    friends: Mapping[str, Friend],
) -> dict[str, str]:
    """
    Build "editfriends" variables for added and removed friends.

    A listed friend whose colors changed is sent as an add too; the server
    treats adding an existing friend as an update.
    """
    parameters = {}
    for username in sorted(synced_friends):
        if _listed(synced_friends, username) and not _listed(friends, username):
            parameters[f"editfriend_delete_{username}"] = "1"

    number = 0
    for username in sorted(friends):
        friend = friends[username]
        if not friend.is_listed:
            continue
        synced = synced_friends.get(username)
        if synced is not None and synced.is_listed and (
            synced.foreground_color == friend.foreground_color
            and synced.background_color == friend.background_color
        ):
            continue
        number += 1
        prefix = f"editfriend_add_{number}"
        parameters[f"{prefix}_user"] = username
        if friend.foreground_color:
            parameters[f"{prefix}_fg"] = friend.foreground_color
        if friend.background_color:
            parameters[f"{prefix}_bg"] = friend.background_color
        parameters[f"{prefix}_groupmask"] = str(friend.group_mask)
    return parameters
