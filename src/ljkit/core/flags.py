# =============================================================================
# Login Flags
# =============================================================================
# Options for Account.login(), stored as a bitmask. Each bit asks the server
# for one optional category of data (or turns off fast server access).
# Flags are combined with the bitwise OR operator:
#
#     account.login(password, LoginFlags.GET_MOODS | LoginFlags.GET_MENU)
#
# The high bits are reserved and must always be zero.
# =============================================================================

from enum import IntFlag

from ljkit.errors import LoginConfigError


class LoginFlags(IntFlag):
    """
    Login options, stored as a bitmask.

    Flags:
        - GET_MOODS: Download moods. Only moods newer than the highest
          mood ID already known are requested, so a restored mood
          directory is topped up rather than replaced.
        - GET_MENU: Download the web menu (available as Account.menu).
        - GET_USER_PICTURES: Download userpic keywords and URLs.
        - DO_NOT_USE_FAST_SERVERS: Don't enable fast server access even
          if the server offers it.

    DEFAULT combines the first three. RESERVED is the 32-bit reserved mask
    of the wire format; validate_login_flags() rejects any bit above
    DO_NOT_USE_FAST_SERVERS, including bits past 32.
    """
    NONE = 0
    GET_MOODS = 1 << 0
    GET_MENU = 1 << 1
    GET_USER_PICTURES = 1 << 2
    DO_NOT_USE_FAST_SERVERS = 1 << 3

    DEFAULT = GET_MOODS | GET_MENU | GET_USER_PICTURES
    RESERVED = 0xFFFFFFF0


# Every bit a caller may set; anything else is reserved
_KNOWN_FLAGS = (
    LoginFlags.GET_MOODS
    | LoginFlags.GET_MENU
    | LoginFlags.GET_USER_PICTURES
    | LoginFlags.DO_NOT_USE_FAST_SERVERS
)


def validate_login_flags(flags: int) -> LoginFlags:
    """
    Check that no reserved bit is set and normalize to LoginFlags.

    Args:
        flags: A LoginFlags value or a plain integer bitmask.

    Returns:
        The flags as a LoginFlags value.

    Raises:
        LoginConfigError: If any reserved bit is set.
    """
    value = int(flags)
    if value < 0 or value & ~int(_KNOWN_FLAGS):
        raise LoginConfigError(f"Login flags {value:#x} set reserved bits")
    return LoginFlags(value)
