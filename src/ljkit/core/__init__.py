# =============================================================================
# LJKit Core Module
# =============================================================================
# Domain models for LJKit. These have no network or file dependencies and can
# be imported anywhere without causing circular imports.
#
#   - LoginFlags: Options controlling what a login downloads
#   - MoodDirectory / Mood: Sorted name <-> ID mood registry
#   - JournalList / Journal: Journals an account can post into
#   - MenuItem: Web menu tree sent with the login reply
#   - Friend / Group: Friends list data from "getfriends" and edit uploads
# =============================================================================

from ljkit.core.flags import LoginFlags, validate_login_flags
from ljkit.core.friends import (
    Friend,
    FriendsCheck,
    FriendsInfo,
    Friendship,
    Group,
    friend_edit_parameters,
    group_edit_parameters,
    groups_for_mask,
    mask_for_groups,
    parse_checkfriends_reply,
    parse_friends_added,
    parse_friends_reply,
)
from ljkit.core.journal import Journal, JournalList, JournalType
from ljkit.core.menu import MenuItem, parse_menu
from ljkit.core.moods import Mood, MoodDirectory

__all__ = [
    "LoginFlags",
    "validate_login_flags",
    "Mood",
    "MoodDirectory",
    "Journal",
    "JournalList",
    "JournalType",
    "MenuItem",
    "parse_menu",
    "Friend",
    "FriendsCheck",
    "FriendsInfo",
    "Friendship",
    "Group",
    "friend_edit_parameters",
    "group_edit_parameters",
    "groups_for_mask",
    "mask_for_groups",
    "parse_checkfriends_reply",
    "parse_friends_added",
    "parse_friends_reply",
]
