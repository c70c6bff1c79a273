# =============================================================================
# Pytest Configuration and Fixtures
# =============================================================================
# Shared fixtures for the LJKit test suite.
# =============================================================================

import pytest
import tempfile
from pathlib import Path

from ljkit.protocol.account import Account
from ljkit.protocol.registry import AccountRegistry


class FakeTransport:
    """
    Transport stand-in that records requests and returns canned replies.

    Replies are looked up by mode; a reply that is an exception instance
    is raised instead of returned.
    """

    host = "www.example.com"
    port = 443

    def __init__(self, replies=None):
        self.replies = dict(replies or {})
        self.calls = []
        self.use_fast_servers = False
        self.closed = False

    def execute(self, mode, parameters):
        self.calls.append((mode, dict(parameters)))
        reply = self.replies.get(mode, {"success": "OK"})
        if isinstance(reply, Exception):
            raise reply
        return dict(reply)

    def close(self):
        self.closed = True

    @property
    def modes(self):
        return [mode for mode, _ in self.calls]


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def login_reply():
    """A full login reply with moods, journals, userpics and a menu."""
    return {
        "success": "OK",
        "name": "Alice Example",
        "message": "Welcome back!",
        "mood_count": "3",
        "mood_1_name": "happy",
        "mood_1_id": "1",
        "mood_2_name": "sad",
        "mood_2_id": "2",
        "mood_3_name": "Hungry",
        "mood_3_id": "7",
        "access_count": "2",
        "access_1": "friends_only_comm",
        "access_2": "alice",
        "pickw_count": "2",
        "pickw_1": "smile",
        "pickwurl_1": "https://userpic.example.com/1/1",
        "pickw_2": "coffee",
        "pickwurl_2": "https://userpic.example.com/1/2",
        "defaultpicurl": "https://userpic.example.com/1/0",
        "menu_0_count": "2",
        "menu_0_1_text": "Update Journal",
        "menu_0_1_url": "https://www.example.com/update.bml",
        "menu_0_2_text": "Your Journal",
        "menu_0_2_sub": "1",
        "menu_1_count": "1",
        "menu_1_1_text": "Recent Entries",
        "menu_1_1_url": "https://alice.example.com/",
        "fastserver": "1",
    }


@pytest.fixture
def friends_reply():
    """A getfriends reply with a mutual friend, a community and two groups."""
    return {
        "success": "OK",
        "friend_count": "2",
        "friend_1_user": "bob",
        "friend_1_name": "Bob",
        "friend_1_fg": "#000000",
        "friend_1_bg": "#ffffff",
        "friend_1_groupmask": "3",
        "friend_1_birthday": "1980-04-01",
        "friend_2_user": "cooking",
        "friend_2_name": "Cooking Community",
        "friend_2_type": "community",
        "friend_2_groupmask": "1",
        "friendof_count": "2",
        "friendof_1_user": "bob",
        "friendof_1_fg": "#112233",
        "friendof_1_bg": "#445566",
        "friendof_2_user": "knitting",
        "friendof_2_type": "community",
        "frgrp_maxnum": "2",
        "frgrp_1_name": "Family",
        "frgrp_1_sortorder": "10",
        "frgrp_1_public": "1",
        "frgrp_2_name": "Work",
    }


@pytest.fixture
def transport(login_reply, friends_reply):
    """A FakeTransport that answers login and getfriends."""
    return FakeTransport({"login": login_reply, "getfriends": friends_reply})


@pytest.fixture
def registry():
    """An empty AccountRegistry."""
    return AccountRegistry()


@pytest.fixture
def account(transport, registry):
    """A logged-out account for "alice" on the fake transport."""
    return Account("alice", transport, registry=registry)


@pytest.fixture
def recorded_events(account):
    """Names of every event the account emits, in order."""
    names = []
    account.events.subscribe(lambda event: names.append(event.name))
    return names
