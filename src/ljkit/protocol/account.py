# =============================================================================
# Account Session Engine
# =============================================================================
# An Account represents a user's account on a server speaking the flat
# client/server protocol. It's the object everything else talks through:
#
#   - login() authenticates and downloads moods, journals, userpics and the
#     web menu, depending on the LoginFlags given.
#   - send_request() is the general request/reply primitive for any mode.
#   - logout() forgets the credentials (no network traffic; the protocol
#     is stateless).
#   - download_friends() fetches the friends list and friend groups;
#     add_friend(), new_group() and their remove_ twins edit them locally;
#     upload_friends() sends the changes back.
#   - check_friends() asks whether friends posted anything new.
#   - close() releases a transport the account created itself.
#
# Session states:
#
#     LOGGED_OUT --login()--> CONNECTING --ok--> LOGGED_IN
#                                  |
#                                  +--error--> back to the previous state
#     LOGGED_IN --logout()--> LOGGED_OUT
#
# A failed login never leaves a half-updated account behind: the reply is
# parsed into fresh objects first and only committed once everything parsed.
#
# Design notes:
#   - Everything is synchronous; a request blocks until the transport
#     returns. Callers must not run two requests on the same account at
#     once. Separate accounts are independent.
#   - No retries. The protocol is stateless, so retrying is up to the caller.
#   - The plaintext password is never stored, only its digest, and only
#     while logged in.
# =============================================================================

import copy
import logging
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum, auto
from pathlib import Path
from typing import Any

from ljkit.core.flags import LoginFlags, validate_login_flags
from ljkit.core.friends import (
    MAX_GROUPS,
    Friend,
    FriendsCheck,
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
from ljkit.core.journal import Journal, JournalList
from ljkit.core.menu import MenuItem, parse_menu
from ljkit.core.moods import MoodDirectory
from ljkit.errors import (
    AuthenticationError,
    ConnectionVetoedError,
    LJError,
    NotLoggedInError,
    ProtocolParseError,
    ServerError,
)
from ljkit.protocol.digest import md5_hex_digest
from ljkit.protocol.events import (
    DID_CONNECT,
    DID_DOWNLOAD_FRIENDS,
    DID_LOGIN,
    DID_LOGOUT,
    DID_NOT_LOGIN,
    INFO_CONNECTION,
    INFO_ERROR,
    INFO_MODE,
    INFO_PARAMETERS,
    INFO_REPLY,
    WILL_CONNECT,
    WILL_DOWNLOAD_FRIENDS,
    WILL_LOGIN,
    AccountEvent,
    EventEmitter,
    next_connection_id,
)
from ljkit.protocol.registry import AccountRegistry
from ljkit.protocol.transport import HTTPTransport, Transport
from ljkit.storage.snapshot import AccountSnapshot, load_snapshot, save_snapshot

logger = logging.getLogger(__name__)

# Sent as "clientversion" when the caller doesn't identify itself
DEFAULT_CLIENT_NAME = "LJKit"
DEFAULT_CLIENT_VERSION = "1.0.0"
DEFAULT_CLIENT_VERSION_STRING = f"{DEFAULT_CLIENT_NAME}/{DEFAULT_CLIENT_VERSION}"

# Protocol version sent with every request (1 = UTF-8 aware)
PROTOCOL_VERSION = "1"

LOGIN_MODE = "login"
GET_FRIENDS_MODE = "getfriends"
EDIT_FRIENDS_MODE = "editfriends"
EDIT_FRIEND_GROUPS_MODE = "editfriendgroups"
CHECK_FRIENDS_MODE = "checkfriends"

# Modes that may be sent without a logged-in session
PRE_AUTH_MODES = frozenset({LOGIN_MODE, "getchallenge"})

# Server error messages that mean "the credentials are wrong"
_AUTH_ERROR_PATTERN = re.compile(
    r"password|invalid user|unknown user|no such user|bad login", re.IGNORECASE
)

# Type alias for the connect veto hook
ConnectHook = Callable[["Account"], bool]


class SessionState(Enum):
    """Login state of an Account."""
    LOGGED_OUT = auto()     # No credentials held
    CONNECTING = auto()     # Login request in flight
    LOGGED_IN = auto()      # Credentials accepted by the server


@dataclass
class _LoginResult:
    """Everything parsed out of a login reply, committed in one go."""
    fullname: str
    login_message: str | None
    moods: MoodDirectory
    journals: JournalList
    user_pictures: dict[str, str]
    default_user_picture_url: str
    menu: list[MenuItem] | None
    use_fast_servers: bool


class Account:
    """
    A user's account on a flat protocol server.

    Usage:
        >>> registry = AccountRegistry()
        >>> account = Account("alice", registry=registry)
        >>> account.login("secret")
        >>> account.moods.id_for_name("happy")
        1
        >>> reply = account.send_request("getdaycounts", {})
        >>> account.logout()

    Attributes:
        username: Login name.
        host: Server hostname (part of the identifier).
        port: Server port (part of the identifier).
        transport: Protocol transport used for every request.
        events: Emitter for lifecycle events (see ljkit.protocol.events).
        should_connect: Optional veto hook. Called before every network
                        request; returning False raises
                        ConnectionVetoedError and nothing is sent.
        registry: The AccountRegistry this account belongs to, if any.
        client_version: "clientversion" value sent at login.

        hashed_password: Password digest while logged in, otherwise None.
        login_message: Message the server sent with the last login, if any.
        fullname: Display name from the last login (defaults to username).
        moods: Mood directory. Survives logout and can be set before login
               so only new moods are downloaded.
        journals: Journals this account can post to, own journal first.
        user_pictures: Userpic keyword -> URL.
        default_user_picture_url: URL of the default userpic, if known.
        menu: Web menu from the last login, or None if not requested.
        custom_info: Free-form dictionary for the caller's own data.
                     Saved in snapshots; never read by LJKit.
        friends: Friends keyed by username, or None until downloaded.
        groups: Friend groups keyed by number, or None until downloaded.
    """

    def __init__(
        self,
        username: str,
        transport: Transport | None = None,
        *,
        host: str | None = None,
        port: int | None = None,
        registry: AccountRegistry | None = None,
        client_version: str | None = None,
        should_connect: ConnectHook | None = None,
    ) -> None:
        """
        Initialize an account. No network traffic happens until login().

        Args:
            username: The user's login name.
            transport: Transport to send requests with. Defaults to an
                       HTTPTransport for the default server, which
                       close() shuts down.
            host: Server hostname for the identifier. Defaults to the
                  transport's host.
            port: Server port for the identifier. Defaults to the
                  transport's port.
            registry: Registry to add this account to.
            client_version: "clientversion" to send at login. Defaults to
                            DEFAULT_CLIENT_VERSION_STRING.
            should_connect: Optional connect veto hook.
        """
        if not username:
            raise ValueError("An account needs a username")

        self.username = username
        self._owns_transport = transport is None
        self.transport: Transport = transport if transport is not None else HTTPTransport()
        self.host = host or getattr(self.transport, "host", "") or "localhost"
        self.port = port or getattr(self.transport, "port", 0) or 80
        self.client_version = client_version or DEFAULT_CLIENT_VERSION_STRING
        self.should_connect = should_connect
        self.events = EventEmitter()

        # Session
        self._state = SessionState.LOGGED_OUT
        self.hashed_password: str | None = None
        self.login_message: str | None = None

        # Data downloaded at login
        self.fullname = username
        self.moods = MoodDirectory()
        self.journals = JournalList(username)
        self.user_pictures: dict[str, str] = {}
        self.default_user_picture_url = ""
        self.menu: list[MenuItem] | None = None

        # Friends (downloaded on request)
        self.friends: dict[str, Friend] | None = None
        self.groups: dict[int, Group] | None = None
        # Copies of what the server has, for working out what to upload
        self._synced_friends: dict[str, Friend] = {}
        self._synced_groups: dict[int, Group] = {}

        self.custom_info: dict[str, Any] = {}

        self.registry = registry
        if registry is not None:
            registry.register(self)

    # =========================================================================
    # Identity
    # =========================================================================

    @property
    def identifier(self) -> str:
        """Unique identifier of the form "username@host:port"."""
        return f"{self.username}@{self.host}:{self.port}"

    @property
    def keyring_service(self) -> str:
        """
        Service name used for keyring password storage.

            keyring get ljkit:alice@www.livejournal.com:443 alice
        """
        return f"ljkit:{self.identifier}"

    @property
    def is_default(self) -> bool:
        """True if this is the registry's default account."""
        return self.registry is not None and self.registry.is_default(self)

    def set_default(self) -> None:
        """
        Make this the default account of its registry.

        Raises:
            LJError: If the account isn't in a registry.
        """
        if self.registry is None:
            raise LJError(f"{self.identifier} is not in a registry")
        self.registry.set_default(self)

    # =========================================================================
    # Session State
    # =========================================================================

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_logged_in(self) -> bool:
        return self._state is SessionState.LOGGED_IN

    @property
    def uses_fast_servers(self) -> bool:
        return bool(getattr(self.transport, "use_fast_servers", False))

    # =========================================================================
    # Login / Logout
    # =========================================================================

    def login(self, password: str, flags: int = LoginFlags.DEFAULT) -> None:
        """
        Log in to the server.

        The password is hashed before it's sent and only the digest is
        kept, so later requests can be authenticated. If GET_MOODS is set,
        only moods newer than moods.highest_mood_id are requested and
        merged into the existing directory.

        Args:
            password: The user's password.
            flags: Bitwise OR of LoginFlags values.

        Raises:
            LoginConfigError: If flags sets reserved bits (nothing is sent).
            ConnectionVetoedError: If should_connect refused.
            TransportError: If the server couldn't be reached.
            AuthenticationError: If the server rejected the credentials.
            ServerError: If the server refused the login for another reason.
            ProtocolParseError: If the reply couldn't be understood.
        """
        flags = validate_login_flags(flags)
        self._emit(WILL_LOGIN)

        previous_state = self._state
        self._state = SessionState.CONNECTING
        hashed_password = md5_hex_digest(password)
        logger.info(f"Logging in {self.identifier}")

        try:
            reply = self.send_request(LOGIN_MODE, self._login_parameters(hashed_password, flags))
            result = self._parse_login_reply(reply, flags)
        except Exception as e:
            self._state = previous_state
            logger.warning(f"Login failed for {self.identifier}: {e}")
            self._emit(DID_NOT_LOGIN, {INFO_ERROR: e})
            raise

        # Commit everything at once
        self.hashed_password = hashed_password
        self.login_message = result.login_message
        self.fullname = result.fullname
        self.moods = result.moods
        self.journals = result.journals
        self.user_pictures = result.user_pictures
        self.default_user_picture_url = result.default_user_picture_url
        self.menu = result.menu
        if hasattr(self.transport, "use_fast_servers"):
            self.transport.use_fast_servers = result.use_fast_servers
        self._state = SessionState.LOGGED_IN

        logger.info(f"Logged in {self.identifier} ({len(self.journals)} journals, {len(self.moods)} moods)")
        self._emit(DID_LOGIN)

    def _login_parameters(self, hashed_password: str, flags: LoginFlags) -> dict[str, str]:
        """Build the login request variables for the given flags."""
        parameters = {
            "user": self.username,
            "hpassword": hashed_password,
            "clientversion": self.client_version,
            "ver": PROTOCOL_VERSION,
        }
        if flags & LoginFlags.GET_MOODS:
            parameters["getmoods"] = str(self.moods.highest_mood_id)
        if flags & LoginFlags.GET_MENU:
            parameters["getmenus"] = "1"
        if flags & LoginFlags.GET_USER_PICTURES:
            parameters["getpickws"] = "1"
            parameters["getpickwurls"] = "1"
        return parameters

    def _parse_login_reply(self, reply: Mapping[str, Any], flags: LoginFlags) -> _LoginResult:
        """
        Parse a login reply without touching the account.

        Raises:
            ProtocolParseError: If any section of the reply is malformed.
        """
        if flags & LoginFlags.GET_MOODS:
            moods = self.moods.copy()
            moods.merge_from_reply(reply)
        else:
            moods = self.moods

        journals = JournalList.from_login_reply(self.username, reply)

        user_pictures = dict(self.user_pictures)
        default_user_picture_url = self.default_user_picture_url
        if flags & LoginFlags.GET_USER_PICTURES:
            user_pictures = self._parse_user_pictures(reply)
            default_user_picture_url = str(reply.get("defaultpicurl") or "")

        menu = parse_menu(reply) if flags & LoginFlags.GET_MENU else None

        message = reply.get("message")
        use_fast_servers = (
            str(reply.get("fastserver", "")) == "1"
            and not flags & LoginFlags.DO_NOT_USE_FAST_SERVERS
        )

        return _LoginResult(
            fullname=str(reply.get("name") or self.username),
            login_message=str(message) if message else None,
            moods=moods,
            journals=journals,
            user_pictures=user_pictures,
            default_user_picture_url=default_user_picture_url,
            menu=menu,
            use_fast_servers=use_fast_servers,
        )

    @staticmethod
    def _parse_user_pictures(reply: Mapping[str, Any]) -> dict[str, str]:
        raw_count = reply.get("pickw_count", 0)
        try:
            count = int(raw_count or 0)
        except (TypeError, ValueError) as e:
            raise ProtocolParseError(f"Invalid pickw_count {raw_count!r}", dict(reply)) from e

        pictures = {}
        for i in range(1, count + 1):
            keyword = reply.get(f"pickw_{i}")
            if keyword:
                pictures[str(keyword)] = str(reply.get(f"pickwurl_{i}") or "")
        return pictures

    def logout(self) -> None:
        """
        Forget the stored credentials.

        No request is sent; the protocol has no sessions on the server side.
        Moods, journals and other downloaded data are kept. Calling this
        while logged out does nothing.
        """
        if self._state is not SessionState.LOGGED_IN:
            return

        self.hashed_password = None
        self._state = SessionState.LOGGED_OUT
        if hasattr(self.transport, "use_fast_servers"):
            self.transport.use_fast_servers = False

        logger.info(f"Logged out {self.identifier}")
        self._emit(DID_LOGOUT)

    def close(self) -> None:
        """
        Release the transport if this account created it.

        A transport passed to the constructor belongs to the caller and is
        left open.
        """
        if self._owns_transport:
            logger.debug(f"Closing transport of {self.identifier}")
            self.transport.close()

    # =========================================================================
    # Requests
    # =========================================================================

    def send_request(self, mode: str, parameters: Mapping[str, Any] | None = None) -> dict[str, Any]:
        """
        Send a request to the server and return the reply.

        Blocks until the transport returns. For logged-in accounts the
        username, password digest and protocol version are added unless
        the parameters already contain them.

        Args:
            mode: Protocol mode (e.g., "getfriends").
            parameters: Request variables.

        Returns:
            The reply map.

        Raises:
            NotLoggedInError: If mode needs a session and there isn't one.
            ConnectionVetoedError: If should_connect refused.
            TransportError: If the server couldn't be reached.
            AuthenticationError: If the server rejected the credentials.
            ServerError: If the server answered success=FAIL.
            ProtocolParseError: If the reply couldn't be understood.

        Anything else a custom transport raises is passed through as is.
        """
        if mode not in PRE_AUTH_MODES and not self.is_logged_in:
            raise NotLoggedInError(f"Mode {mode!r} requires {self.identifier} to be logged in")

        request = dict(parameters or {})
        if self.is_logged_in:
            request.setdefault("user", self.username)
            request.setdefault("hpassword", self.hashed_password)
        request.setdefault("ver", PROTOCOL_VERSION)

        if self.should_connect is not None and not self.should_connect(self):
            raise ConnectionVetoedError(f"Connection for {self.identifier} was vetoed")

        connection_id = next_connection_id()
        info: dict[str, Any] = {
            INFO_MODE: mode,
            INFO_PARAMETERS: dict(request),
            INFO_CONNECTION: connection_id,
        }
        self._emit(WILL_CONNECT, info)
        logger.debug(f"Request #{connection_id} mode={mode} for {self.identifier}")

        try:
            reply = self.transport.execute(mode, request)
            if not isinstance(reply, Mapping):
                raise ProtocolParseError(f"Transport returned {type(reply).__name__}, not a mapping")
            reply = dict(reply)
            self._check_reply(mode, reply)
        except Exception as e:
            # Foreign transport errors are re-raised unchanged
            self._emit(DID_CONNECT, {**info, INFO_ERROR: e})
            raise

        self._emit(DID_CONNECT, {**info, INFO_REPLY: reply})
        return reply

    @staticmethod
    def _check_reply(mode: str, reply: dict[str, Any]) -> None:
        """
        Raise if the server reported a failure.

        A reply without a "success" field is treated as successful.
        """
        success = reply.get("success")
        if success is None or str(success).upper() == "OK":
            return

        if str(success).upper() != "FAIL":
            raise ProtocolParseError(f"Unexpected success value {success!r}", reply)

        message = str(reply.get("errmsg") or "Unknown server error")
        if _AUTH_ERROR_PATTERN.search(message) or (mode == LOGIN_MODE and "username" in message.lower()):
            raise AuthenticationError(message, reply)
        raise ServerError(f"Server refused {mode!r}: {message}", reply)

    def _emit(self, name: str, info: dict[str, Any] | None = None) -> None:
        self.events.emit(AccountEvent(name=name, account=self, info=info or {}))

    # =========================================================================
    # Journals and User Pictures
    # =========================================================================

    @property
    def default_journal(self) -> Journal:
        """The account's own journal."""
        return self.journals.default

    def journal_named(self, name: str) -> Journal | None:
        return self.journals.named(name)

    @property
    def user_picture_keywords(self) -> list[str]:
        """Userpic keywords, sorted."""
        return sorted(self.user_pictures)

    # =========================================================================
    # Friends
    # =========================================================================

    def download_friends(self) -> None:
        """
        Download friends, friend-ofs and friend groups.

        Replaces any previously downloaded friends and groups.

        Raises:
            NotLoggedInError: If the account isn't logged in.
            Plus any error send_request() can raise.
        """
        if not self.is_logged_in:
            raise NotLoggedInError(f"{self.identifier} must be logged in to download friends")

        self._emit(WILL_DOWNLOAD_FRIENDS)
        try:
            reply = self.send_request(
                GET_FRIENDS_MODE,
                {"includegroups": "1", "includefriendof": "1", "includebdays": "1"},
            )
            info = parse_friends_reply(reply)
        except Exception as e:
            self._emit(DID_DOWNLOAD_FRIENDS, {INFO_ERROR: e})
            raise

        self.friends = info.friends
        self.groups = info.groups
        self._mark_friends_synced()
        logger.info(f"Downloaded {len(info.friends)} friends and {len(info.groups)} groups for {self.identifier}")
        self._emit(DID_DOWNLOAD_FRIENDS)

    def friend_named(self, username: str) -> Friend | None:
        """Return a friend or friend-of by username, or None."""
        if not self.friends:
            return None
        return self.friends.get(username)

    def _friends_matching(self, friendship: Friendship, communities: bool) -> list[Friend]:
        if not self.friends:
            return []
        return sorted(
            (
                friend for friend in self.friends.values()
                if friend.friendship & friendship and friend.is_community == communities
            ),
            key=lambda friend: friend.username,
        )

    @property
    def watched_communities(self) -> list[Friend]:
        """Communities on the account's friends list."""
        return self._friends_matching(Friendship.OUTGOING, communities=True)

    @property
    def joined_communities(self) -> list[Friend]:
        """Communities the account is a member of."""
        return self._friends_matching(Friendship.INCOMING, communities=True)

    def groups_for_mask(self, mask: int) -> list[Group]:
        return groups_for_mask(self.groups or {}, mask)

    def mask_for_groups(self, groups: list[Group]) -> int:
        return mask_for_groups(groups)

    def check_friends(self, last_update: str = "", group_mask: int = 0) -> FriendsCheck:
        """
        Ask the server whether friends have posted since last_update.

        Pass the returned last_update to the next call, and wait at least
        the returned interval before making it. Polling is up to the caller.

        Args:
            last_update: Marker from the previous check, empty the first time.
            group_mask: Only watch friends in these groups (0 for everyone).

        Raises:
            NotLoggedInError: If the account isn't logged in.
            Plus any error send_request() can raise.
        """
        parameters = {"lastupdate": last_update}
        if group_mask:
            parameters["mask"] = str(group_mask)
        return parse_checkfriends_reply(self.send_request(CHECK_FRIENDS_MODE, parameters))

    # =========================================================================
    # Friend Editing
    # =========================================================================
    # Edits change friends and groups locally; upload_friends() sends them.

    def _mark_friends_synced(self) -> None:
        self._synced_friends = copy.deepcopy(self.friends or {})
        self._synced_groups = copy.deepcopy(self.groups or {})

    def _editable_friends(self) -> tuple[dict[str, Friend], dict[int, Group]]:
        if self.friends is None or self.groups is None:
            raise LJError(f"Download friends for {self.identifier} before editing them")
        return self.friends, self.groups

    def add_friend(self, username: str) -> Friend:
        """
        Put a user on the friends list.

        Returns the existing entry if the user is already listed.

        Raises:
            LJError: If friends haven't been downloaded or restored.
        """
        friends, _ = self._editable_friends()
        if not username:
            raise ValueError("A friend needs a username")

        friend = friends.get(username)
        if friend is None:
            friend = Friend(username=username, friendship=Friendship.OUTGOING)
            friends[username] = friend
        elif not friend.is_listed:
            friend.friendship |= Friendship.OUTGOING
            friend.group_mask = 1
        return friend

    def remove_friend(self, friend: Friend | str) -> None:
        """
        Take a user off the friends list.

        Someone who still lists the account stays as a friend-of.
        """
        friends, _ = self._editable_friends()
        username = friend if isinstance(friend, str) else friend.username
        existing = friends.get(username)
        if existing is None or not existing.is_listed:
            return

        existing.friendship &= ~Friendship.OUTGOING
        existing.group_mask = 0
        if not existing.friendship:
            del friends[username]

    def new_group(self, name: str, is_public: bool = False) -> Group:
        """
        Create a friend group with the lowest free number.

        Raises:
            LJError: If all MAX_GROUPS numbers are taken, or friends haven't
                     been downloaded.
        """
        _, groups = self._editable_friends()
        for number in range(1, MAX_GROUPS + 1):
            if number not in groups:
                group = Group(number=number, name=name, is_public=is_public)
                groups[number] = group
                return group
        raise LJError(f"{self.identifier} already has {MAX_GROUPS} friend groups")

    def remove_group(self, group: Group | int) -> None:
        """Delete a friend group and take every friend out of it."""
        friends, groups = self._editable_friends()
        number = group if isinstance(group, int) else group.number
        if groups.pop(number, None) is None:
            return
        for friend in friends.values():
            friend.group_mask &= ~(1 << number)

    def upload_friends(self) -> bool:
        """
        Send local friend and group edits to the server.

        Group changes go first so friends can be added straight into new
        groups. The full names of added friends are filled in from the
        reply.

        Returns:
            True if anything was sent, False if there were no changes.

        Raises:
            NotLoggedInError: If the account isn't logged in.
            LJError: If friends haven't been downloaded or restored.
            Plus any error send_request() can raise.
        """
        if not self.is_logged_in:
            raise NotLoggedInError(f"{self.identifier} must be logged in to upload friends")
        friends, groups = self._editable_friends()

        group_parameters = group_edit_parameters(self._synced_groups, groups, self._synced_friends, friends)
        friend_parameters = friend_edit_parameters(self._synced_friends, friends)
        if not group_parameters and not friend_parameters:
            logger.debug(f"No friend changes to upload for {self.identifier}")
            return False

        if group_parameters:
            self.send_request(EDIT_FRIEND_GROUPS_MODE, group_parameters)
            self._synced_groups = copy.deepcopy(groups)
            for username, synced in self._synced_friends.items():
                friend = friends.get(username)
                if friend is not None and friend.is_listed and synced.is_listed:
                    synced.group_mask = friend.group_mask

        if friend_parameters:
            reply = self.send_request(EDIT_FRIENDS_MODE, friend_parameters)
            for username, fullname in parse_friends_added(reply).items():
                if username in friends and fullname:
                    friends[username].fullname = fullname

        self._mark_friends_synced()
        logger.info(f"Uploaded friend changes for {self.identifier}")
        return True

    # =========================================================================
    # Snapshots
    # =========================================================================

    def to_snapshot(self) -> AccountSnapshot:
        """
        Capture the persistable state of this account.

        The password digest and login message are never included.
        """
        return AccountSnapshot(
            username=self.username,
            host=self.host,
            port=self.port,
            fullname=self.fullname,
            moods=self.moods.to_dict(),
            journals=self.journals.to_list(),
            user_pictures=dict(self.user_pictures),
            default_user_picture_url=self.default_user_picture_url,
            custom_info=dict(self.custom_info),
            friends=[friend.to_dict() for friend in (self.friends or {}).values()],
            groups=[group.to_dict() for group in (self.groups or {}).values()],
        )

    @classmethod
    def from_snapshot(
        cls,
        snapshot: AccountSnapshot,
        transport: Transport | None = None,
        *,
        registry: AccountRegistry | None = None,
        client_version: str | None = None,
        should_connect: ConnectHook | None = None,
    ) -> "Account":
        """
        Rebuild an account from a snapshot. The result is logged out.

        If a registry is given, the account is registered in it; when its
        identifier matches the registry's default identifier it becomes
        the default account.

        Raises:
            ProtocolParseError: If the saved moods or journals are invalid.
        """
        account = cls(
            snapshot.username,
            transport,
            host=snapshot.host,
            port=snapshot.port,
            client_version=client_version,
            should_connect=should_connect,
        )
        account.fullname = snapshot.fullname or snapshot.username
        account.moods = MoodDirectory.from_dict(snapshot.moods)
        if snapshot.journals:
            account.journals = JournalList.from_list(snapshot.journals)
        account.user_pictures = dict(snapshot.user_pictures)
        account.default_user_picture_url = snapshot.default_user_picture_url
        account.custom_info = dict(snapshot.custom_info)
        if snapshot.friends:
            account.friends = {data["username"]: Friend.from_dict(data) for data in snapshot.friends}
        if snapshot.groups:
            account.groups = {int(data["number"]): Group.from_dict(data) for data in snapshot.groups}
        if account.friends is not None or account.groups is not None:
            account.friends = account.friends or {}
            account.groups = account.groups or {}
            account._mark_friends_synced()

        if registry is not None:
            account.registry = registry
            registry.register(account)
            if registry.default_identifier == account.identifier:
                logger.info(f"Restored default account {account.identifier}")
        return account

    def write_to_file(self, path: Path) -> None:
        """Save a snapshot of this account to a JSON file."""
        save_snapshot(self.to_snapshot(), path)

    @classmethod
    def from_file(cls, path: Path, transport: Transport | None = None, **kwargs: Any) -> "Account":
        """
        Load an account saved with write_to_file().

        Keyword arguments are passed on to from_snapshot().

        Raises:
            SnapshotError: If the file can't be read.
        """
        return cls.from_snapshot(load_snapshot(path), transport, **kwargs)

    def __repr__(self) -> str:
        return f"Account({self.identifier!r}, state={self._state.name})"
