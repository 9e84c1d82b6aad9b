"""HTTP transport used by the Jellyfin client."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Protocol, Self

import aiohttp
from yarl import URL

from .const import DEFAULT_TIMEOUT, DEFAULT_VERIFY_SSL
from .exceptions import JellyfinNetworkError

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TransportResponse:
    """A completed HTTP exchange.

    Attributes:
        status: HTTP status code.
        reason: HTTP reason phrase, if the server sent one.
        body: Raw response body.
    """

    status: int
    reason: str | None = None
    body: bytes = b""

    @property
    def ok(self) -> bool:
        """Return whether the status is in the 2xx range."""
        return 200 <= self.status < 300

    @property
    def text(self) -> str:
        """Return the body decoded as UTF-8."""
        return self.body.decode("utf-8", errors="replace")


class Transport(Protocol):
    """Interface the client uses for all network I/O.

    Implementations return a TransportResponse for every completed exchange,
    whatever its status, and raise JellyfinNetworkError for anything that
    prevents one.
    """

    async def request(
        self,
        method: str,
        url: URL | str,
        *,
        headers: Mapping[str, str],
        json: object | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send one request and return the response."""
        ...

    async def close(self) -> None:
        """Release any resources held by the transport."""
        ...


class AiohttpTransport:
    """Transport backed by an aiohttp client session.

    Example:
        ```python
        async with AiohttpTransport(timeout=5) as transport:
            response = await transport.request(
                "GET",
                "http://jellyfin.local:8096/System/Info/Public",
                headers={"Accept": "application/json"},
            )
        ```
    """

    def __init__(
        self,
        *,
        verify_ssl: bool = DEFAULT_VERIFY_SSL,
        timeout: float = DEFAULT_TIMEOUT,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            verify_ssl: Whether to verify TLS certificates. Defaults to True.
            timeout: Total request timeout in seconds. Defaults to 10.
            session: Optional aiohttp session to reuse. If not provided,
                     a new session will be created on first use.
        """
        self._verify_ssl = verify_ssl
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Self:
        """Enter async context manager."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Exit async context manager."""
        await self.close()

    @property
    def timeout(self) -> float | None:
        """Return the total request timeout in seconds."""
        return self._timeout.total

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create the aiohttp session.

        Returns:
            Active aiohttp client session.
        """
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self._timeout,
            )
            self._owns_session = True
        return self._session

    async def request(
        self,
        method: str,
        url: URL | str,
        *,
        headers: Mapping[str, str],
        json: object | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send one HTTP request.

        Args:
            method: HTTP method (GET, POST, etc.).
            url: Absolute request URL.
            headers: Request headers.
            json: Optional body, serialized as JSON.
            params: Optional query string parameters.

        Returns:
            The status, reason and raw body of the response.

        Raises:
            JellyfinNetworkError: The exchange could not be completed.
        """
        session = await self._get_session()

        try:
            async with session.request(
                method,
                url,
                headers=dict(headers),
                json=json,
                params=dict(params) if params else None,
                ssl=self._verify_ssl,
            ) as response:
                body = await response.read()
                return TransportResponse(
                    status=response.status,
                    reason=response.reason,
                    body=body,
                )

        except aiohttp.ClientSSLError as err:
            _LOGGER.error("Jellyfin SSL error for %s %s: %s", method, url, err)
            raise JellyfinNetworkError(f"SSL certificate error: {err}", err) from err

        except TimeoutError as err:
            _LOGGER.error("Jellyfin timeout for %s %s", method, url)
            raise JellyfinNetworkError(
                f"Request timed out after {self._timeout.total}s", err
            ) from err

        except aiohttp.ClientConnectorError as err:
            _LOGGER.error("Jellyfin connection error for %s %s: %s", method, url, err)
            raise JellyfinNetworkError(f"Failed to connect to {URL(str(url)).host}: {err}", err) from err

        except aiohttp.ClientError as err:
            _LOGGER.error("Jellyfin client error for %s %s: %s", method, url, err)
            raise JellyfinNetworkError(f"Client error: {err}", err) from err

    async def close(self) -> None:
        """Close the aiohttp session.

        Only closes the session if it was created by this transport.
        Sessions provided externally are not closed.
        """
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
