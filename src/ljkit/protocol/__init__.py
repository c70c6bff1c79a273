# =============================================================================
# LJKit Protocol Module
# =============================================================================
# Talking to the server:
#
#   - Account: Session engine (login, logout, requests, friends)
#   - AccountRegistry: Live accounts and the default account
#   - Transport / HTTPTransport: Carries one request/reply exchange
#   - encode_request / parse_reply: Flat protocol wire format
#   - md5_hex_digest: Password digest sent instead of the plaintext
#   - EventEmitter / AccountEvent: Lifecycle notifications
# =============================================================================

from ljkit.protocol.account import PRE_AUTH_MODES, Account, SessionState
from ljkit.protocol.codec import encode_request, parse_reply
from ljkit.protocol.digest import md5_hex_digest
from ljkit.protocol.events import (
    ALL_EVENTS,
    DID_CONNECT,
    DID_DOWNLOAD_FRIENDS,
    DID_LOGIN,
    DID_LOGOUT,
    DID_NOT_LOGIN,
    WILL_CONNECT,
    WILL_DOWNLOAD_FRIENDS,
    WILL_LOGIN,
    AccountEvent,
    EventEmitter,
)
from ljkit.protocol.registry import AccountRegistry
from ljkit.protocol.transport import DEFAULT_SERVER_URL, HTTPTransport, Transport

__all__ = [
    # Session
    "Account",
    "SessionState",
    "PRE_AUTH_MODES",
    "AccountRegistry",
    # Transport
    "Transport",
    "HTTPTransport",
    "DEFAULT_SERVER_URL",
    "encode_request",
    "parse_reply",
    "md5_hex_digest",
    # Events
    "AccountEvent",
    "EventEmitter",
    "ALL_EVENTS",
    "WILL_CONNECT",
    "DID_CONNECT",
    "WILL_LOGIN",
    "DID_LOGIN",
    "DID_NOT_LOGIN",
    "DID_LOGOUT",
    "WILL_DOWNLOAD_FRIENDS",
    "DID_DOWNLOAD_FRIENDS",
]
