# =============================================================================
# Password Storage
# =============================================================================
# Passwords live in the system keyring, never in our config or snapshot
# files. Each account gets its own keyring service:
#
#     keyring set ljkit:alice@www.livejournal.com:443 alice
#
# The Account engine itself never touches the keyring; only the command
# line front end does.
# =============================================================================

import logging
from typing import TYPE_CHECKING

import keyring
from keyring.errors import KeyringError

if TYPE_CHECKING:
    from ljkit.protocol.account import Account

logger = logging.getLogger(__name__)


def get_password(account: "Account") -> str | None:
    """
    Look up an account's password in the keyring.

    Returns:
        The stored password, or None if there isn't one or no keyring
        backend is available.
    """
    try:
        return keyring.get_password(account.keyring_service, account.username)
    except KeyringError as e:
        logger.warning(f"Keyring unavailable for {account.identifier}: {e}")
        return None


def set_password(account: "Account", password: str) -> None:
    """
    Store an account's password in the keyring.

    Raises:
        KeyringError: If the keyring backend refuses to store it.
    """
    keyring.set_password(account.keyring_service, account.username, password)
    logger.info(f"Saved password for {account.identifier} to keyring")
