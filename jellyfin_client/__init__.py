"""Async client for the Jellyfin media server API."""

from __future__ import annotations

from .client import JellyfinClient, parse_server_url
from .const import __version__
from .exceptions import (
    ErrorKind,
    JellyfinAuthNotFoundError,
    JellyfinError,
    JellyfinHttpRequestError,
    JellyfinNetworkError,
    JellyfinUrlParseError,
)
from .models import (
    AuthenticationResult,
    ClientIdentity,
    Credentials,
    SubtitleMode,
    UserIdCredentials,
    UsernameCredentials,
)
from .transport import AiohttpTransport, Transport, TransportResponse

__all__ = [
    "AiohttpTransport",
    "AuthenticationResult",
    "ClientIdentity",
    "Credentials",
    "ErrorKind",
    "JellyfinAuthNotFoundError",
    "JellyfinClient",
    "JellyfinError",
    "JellyfinHttpRequestError",
    "JellyfinNetworkError",
    "JellyfinUrlParseError",
    "SubtitleMode",
    "Transport",
    "TransportResponse",
    "UserIdCredentials",
    "UsernameCredentials",
    "__version__",
    "parse_server_url",
]
