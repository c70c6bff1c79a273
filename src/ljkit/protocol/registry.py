# =============================================================================
# Account Registry
# =============================================================================
# Keeps track of live Account objects and which one is the default.
#
# The application creates one registry and hands it to the accounts it
# builds; there's no hidden module-level instance. The default is tracked by
# identifier ("username@host:port"), so it can be written to the config file
# and picked up again when a saved account is restored in a later run.
#
# Changes to the registry are guarded by a lock, so accounts on different
# threads can register themselves and change the default safely.
# =============================================================================

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ljkit.protocol.account import Account

logger = logging.getLogger(__name__)


class AccountRegistry:
    """
    Registry of accounts, keyed by identifier.

    Usage:
        >>> registry = AccountRegistry(default_identifier=config.default_account)
        >>> account = Account("alice", registry=registry)
        >>> registry.lookup("alice@www.livejournal.com:443") is account
        True
        >>> registry.set_default(account)

    Attributes:
        default_identifier: Identifier of the designated default account,
                            even if that account isn't loaded yet.
    """

    def __init__(self, default_identifier: str = "") -> None:
        self._accounts: dict[str, "Account"] = {}
        self._lock = threading.RLock()
        self.default_identifier = default_identifier

    def register(self, account: "Account") -> None:
        """
        Add an account.

        If its identifier matches default_identifier it becomes the default.
        An account already registered under the same identifier is replaced.
        """
        with self._lock:
            self._accounts[account.identifier] = account
            logger.debug(f"Registered account {account.identifier}")

    def unregister(self, account: "Account") -> None:
        """Remove an account. Unknown accounts are ignored."""
        with self._lock:
            if self._accounts.get(account.identifier) is account:
                del self._accounts[account.identifier]

    def lookup(self, identifier: str) -> "Account | None":
        """Return the account with the given identifier, or None."""
        with self._lock:
            return self._accounts.get(identifier)

    def accounts(self) -> list["Account"]:
        """All registered accounts, in registration order."""
        with self._lock:
            return list(self._accounts.values())

    @property
    def default(self) -> "Account | None":
        """
        The default account.

        Returns the account matching default_identifier if it's loaded,
        otherwise the first registered account, or None if the registry
        is empty.
        """
        with self._lock:
            account = self._accounts.get(self.default_identifier)
            if account is not None:
                return account
            return next(iter(self._accounts.values()), None)

    def set_default(self, account: "Account") -> None:
        """Make an account the default, registering it if needed."""
        with self._lock:
            self._accounts.setdefault(account.identifier, account)
            self.default_identifier = account.identifier
            logger.info(f"Default account is now {account.identifier}")

    def is_default(self, account: "Account") -> bool:
        with self._lock:
            return self.default is account

    def __contains__(self, account: object) -> bool:
        with self._lock:
            return any(known is account for known in self._accounts.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._accounts)
