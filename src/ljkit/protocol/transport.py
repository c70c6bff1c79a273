# =============================================================================
# Protocol Transport
# =============================================================================
# Moves a (mode, parameters) request to the server and brings the reply back.
#
# The Account engine only depends on the Transport protocol below, so tests
# and alternative backends can plug in anything with an execute() method.
# HTTPTransport is the real one: it posts to the flat protocol endpoint with
# requests and parses the plain-text reply.
#
# A transport is only concerned with getting bytes there and back. If the
# server answers success=FAIL, that's still a successful transport call;
# the Account decides what the failure means.
# =============================================================================

import logging
from collections.abc import Mapping
from typing import Protocol, runtime_checkable
from urllib.parse import urlsplit

import requests

from ljkit.errors import TransportError
from ljkit.protocol.codec import encode_request, parse_reply

logger = logging.getLogger(__name__)

# Default endpoint for the flat protocol
DEFAULT_SERVER_URL = "https://www.livejournal.com/interface/flat"

# Sent with every request; the caller's session headers are left alone
REQUEST_HEADERS = {"Content-Type": "application/x-www-form-urlencoded; charset=utf-8"}


@runtime_checkable
class Transport(Protocol):
    """Anything that can send a request and return the reply map."""

    def execute(self, mode: str, parameters: Mapping[str, str]) -> dict[str, str]:
        """
        Send one request.

        Raises:
            TransportError: If no reply could be obtained.
        """
        ...


class HTTPTransport:
    """
    Flat protocol over HTTP(S), using requests.

    Usage:
        >>> transport = HTTPTransport()
        >>> transport.execute("getchallenge", {})
        {'success': 'OK', 'challenge': '...', ...}

    Attributes:
        url: Flat protocol endpoint.
        proxy_url: Optional HTTP proxy; None for a direct connection.
        timeout: Request timeout in seconds.
        use_fast_servers: Send the fast server cookie. The Account turns this
                          on after a login reply offers fast servers.
    """

    TIMEOUT = 30

    def __init__(
        self,
        url: str = DEFAULT_SERVER_URL,
        proxy_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            url: Flat protocol endpoint.
            proxy_url: Optional proxy URL (e.g., "http://proxy:3128").
            timeout: Request timeout in seconds (default: TIMEOUT).
            session: Optional pre-built requests.Session (handy for tests).
        """
        self.url = url
        self.proxy_url = proxy_url
        self.timeout = timeout if timeout is not None else self.TIMEOUT
        self.use_fast_servers = False

        self.session = session or requests.Session()

    @property
    def host(self) -> str:
        """Hostname of the server, used in account identifiers."""
        return urlsplit(self.url).hostname or ""

    @property
    def port(self) -> int:
        """Port of the server, falling back to the scheme's default."""
        parts = urlsplit(self.url)
        if parts.port:
            return parts.port
        return 443 if parts.scheme == "https" else 80

    def execute(self, mode: str, parameters: Mapping[str, str]) -> dict[str, str]:
        """
        POST a request and parse the reply.

        Args:
            mode: Protocol mode.
            parameters: Request variables.

        Returns:
            The reply map.

        Raises:
            TransportError: On connection failure or a non-2xx response.
            ProtocolParseError: If the body isn't a key/value reply.
        """
        body = encode_request(mode, parameters)

        kwargs: dict = {
            "data": body.encode("utf-8"),
            "headers": REQUEST_HEADERS,
            "timeout": self.timeout,
        }
        if self.proxy_url:
            kwargs["proxies"] = {"http": self.proxy_url, "https": self.proxy_url}
        if self.use_fast_servers:
            kwargs["cookies"] = {"ljfastserver": "1"}

        logger.debug(f"POST {self.url} mode={mode}")
        try:
            response = self.session.post(self.url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed (mode={mode}): {e}")
            raise TransportError(f"Could not reach {self.url}: {e}") from e

        if not response.ok:
            raise TransportError(
                f"Server returned HTTP {response.status_code} for mode {mode!r}"
            )

        # The protocol is UTF-8; don't let requests guess from the headers
        if not response.encoding or response.encoding.lower() == "iso-8859-1":
            response.encoding = "utf-8"
        return parse_reply(response.text)

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __repr__(self) -> str:
        return f"HTTPTransport(url={self.url!r}, proxy_url={self.proxy_url!r})"
