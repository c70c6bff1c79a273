# =============================================================================
# Account Events
# =============================================================================
# Lifecycle notifications emitted by an Account. Listeners are plain
# callables registered on the account's EventEmitter:
#
#     def on_event(event: AccountEvent) -> None:
#         print(event.name, event.account.identifier)
#
#     unsubscribe = account.events.subscribe(on_event, DID_LOGIN)
#
# Events are delivered synchronously, in the order they happen, on the
# thread that made the call. Exceptions raised by a listener propagate to
# the caller of the operation that emitted the event.
#
# Order during a login:
#     willLogin -> willConnect -> didConnect -> didLogin | didNotLogin
# =============================================================================

import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ljkit.protocol.account import Account

logger = logging.getLogger(__name__)

# Event names
WILL_CONNECT = "willConnect"
DID_CONNECT = "didConnect"
WILL_LOGIN = "willLogin"
DID_LOGIN = "didLogin"
DID_NOT_LOGIN = "didNotLogin"
DID_LOGOUT = "didLogout"
WILL_DOWNLOAD_FRIENDS = "willDownloadFriends"
DID_DOWNLOAD_FRIENDS = "didDownloadFriends"

ALL_EVENTS = (
    WILL_CONNECT,
    DID_CONNECT,
    WILL_LOGIN,
    DID_LOGIN,
    DID_NOT_LOGIN,
    DID_LOGOUT,
    WILL_DOWNLOAD_FRIENDS,
    DID_DOWNLOAD_FRIENDS,
)

# Keys used in AccountEvent.info
INFO_MODE = "mode"
INFO_PARAMETERS = "parameters"
INFO_CONNECTION = "connection_id"
INFO_REPLY = "reply"
INFO_ERROR = "error"

# Connection IDs are unique per process
_connection_ids = itertools.count(1)


def next_connection_id() -> int:
    """Return a new connection identifier."""
    return next(_connection_ids)


@dataclass
class AccountEvent:
    """
    A single notification.

    Attributes:
        name: One of the event name constants (e.g., DID_LOGIN).
        account: The account that emitted the event.
        info: Payload. Connection events carry mode, parameters and
              connection_id, plus reply or error once the call completes.
              DID_NOT_LOGIN carries the error.
    """
    name: str
    account: "Account"
    info: dict[str, Any] = field(default_factory=dict)


Listener = Callable[[AccountEvent], None]


class EventEmitter:
    """Synchronous listener list."""

    def __init__(self) -> None:
        self._listeners: list[tuple[str | None, Listener]] = []

    def subscribe(self, listener: Listener, event: str | None = None) -> Callable[[], None]:
        """
        Register a listener.

        Args:
            listener: Called with each matching AccountEvent.
            event: Only deliver events with this name; None for all events.

        Returns:
            A function that removes the listener again.

        Raises:
            ValueError: If event isn't a known event name.
        """
        if event is not None and event not in ALL_EVENTS:
            raise ValueError(f"Unknown event name: {event!r}")
        entry = (event, listener)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    def emit(self, event: AccountEvent) -> None:
        """Deliver an event to every matching listener, in subscription order."""
        logger.debug(f"Event {event.name} for {event.account.identifier}")
        # Copy so listeners can unsubscribe while being called
        for wanted, listener in list(self._listeners):
            if wanted is None or wanted == event.name:
                listener(event)

    def __len__(self) -> int:
        return len(self._listeners)
