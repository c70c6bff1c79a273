# =============================================================================
# Flat Protocol Codec
# =============================================================================
# Encoding and decoding for the "flat" client/server protocol.
#
# Requests are ordinary URL-encoded form posts, with the mode first:
#
#     mode=login&user=alice&hpassword=...&ver=1
#
# Replies are plain text, alternating key and value lines:
#
#     success
#     OK
#     name
#     Alice
#
# Keys are case-insensitive; we lower-case them. Values are kept verbatim
# (apart from a trailing carriage return on CRLF servers).
# =============================================================================

from collections.abc import Mapping
from urllib.parse import urlencode

from ljkit.errors import ProtocolParseError


def encode_request(mode: str, parameters: Mapping[str, object]) -> str:
    """
    Build the form body for a request.

    Args:
        mode: Protocol mode (e.g., "login").
        parameters: Request variables. None values are dropped; everything
                    else is sent as str(value).

    Returns:
        URL-encoded body with mode as the first pair.
    """
    pairs = [("mode", mode)]
    for key, value in parameters.items():
        if key == "mode" or value is None:
            continue
        pairs.append((key, str(value)))
    return urlencode(pairs, encoding="utf-8")


def parse_reply(text: str) -> dict[str, str]:
    """
    Split a reply body into a key/value map.

    Args:
        text: Reply body, already decoded.

    Returns:
        Dictionary of lower-cased keys to values.

    Raises:
        ProtocolParseError: If a key has no value line after it. The body
                            is attached as raw_text.
    """
    lines = text.split("\n")
    # A body ending in a newline leaves an empty last element
    if lines and lines[-1] == "":
        lines.pop()
    lines = [line[:-1] if line.endswith("\r") else line for line in lines]

    if len(lines) % 2:
        raise ProtocolParseError(f"Reply ends with key {lines[-1]!r} but no value", raw_text=text)

    reply: dict[str, str] = {}
    for i in range(0, len(lines), 2):
        key = lines[i].strip().lower()
        if not key:
            continue
        reply[key] = lines[i + 1]
    return reply
