# =============================================================================
# Exceptions
# =============================================================================
# Every error raised by LJKit derives from LJError, so callers can catch the
# whole family in one place. The subclasses let a UI tell apart the cases
# that need different handling:
#
#   - LoginConfigError / ConnectionVetoedError / NotLoggedInError:
#       raised before any network activity happens.
#   - TransportError:        network trouble, "try again later".
#   - AuthenticationError:   bad credentials, "ask for a new password".
#   - ServerError:           the server refused the request for another reason.
#   - ProtocolParseError:    the reply didn't have the shape we expected.
#
# ConfigError and SnapshotError cover the local files we read and write.
# =============================================================================

from typing import Any


class LJError(Exception):
    """Base exception for all LJKit errors."""
    pass


class LoginConfigError(LJError):
    """Raised when login flags set any of the reserved bits."""
    pass


class ConnectionVetoedError(LJError):
    """Raised when the account's connect hook refuses a connection."""
    pass


class NotLoggedInError(LJError):
    """Raised when a mode that needs a session is used while logged out."""
    pass


class TransportError(LJError):
    """Raised when the request never got a usable reply from the server."""
    pass


class ServerError(LJError):
    """
    Raised when the server answers with success=FAIL.

    Attributes:
        reply: The raw reply map, kept for diagnostics.
    """

    def __init__(self, message: str, reply: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.reply = dict(reply or {})


class AuthenticationError(ServerError):
    """Raised when the server rejects the username/password combination."""
    pass


class ProtocolParseError(LJError):
    """
    Raised when a reply is malformed or missing fields we depend on.

    Attributes:
        reply: The raw reply map (or None when the raw text couldn't even
               be split into fields).
        raw_text: The reply body text, when the error came from
                  splitting it into fields.
    """

    def __init__(
        self,
        message: str,
        reply: dict[str, Any] | None = None,
        raw_text: str | None = None,
    ) -> None:
        super().__init__(message)
        self.reply = dict(reply) if reply is not None else None
        self.raw_text = raw_text


class ConfigError(LJError):
    """Raised when there's an error loading or parsing configuration."""
    pass


class SnapshotError(LJError):
    """Raised when a saved account snapshot can't be read back."""
    pass
