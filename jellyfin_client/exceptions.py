"""Exceptions for the Jellyfin client.

Every failure surfaced by the client is one of exactly four kinds, so a
caller can handle all of them with a single ``except JellyfinError`` or a
``match`` over the concrete classes.
"""

from __future__ import annotations

from enum import StrEnum
from http import HTTPStatus
from collections.abc import Mapping
from typing import Any, ClassVar, final


class ErrorKind(StrEnum):
    """Closed set of failure kinds."""

    NETWORK = "network_error"
    URL_PARSE = "url_parse_error"
    AUTH_NOT_FOUND = "auth_not_found"
    HTTP_REQUEST = "http_request_error"


class JellyfinError(Exception):
    """Base exception for the Jellyfin client.

    Only the four subclasses defined in this module exist; defining another
    subclass elsewhere raises TypeError.

    Attributes:
        kind: The failure kind, for callers that prefer branching on a value.
    """

    kind: ClassVar[ErrorKind]

    def __init_subclass__(cls, **kwargs: object) -> None:
        """Reject subclasses declared outside this module."""
        super().__init_subclass__(**kwargs)
        if cls.__module__ != __name__:
            raise TypeError(f"{cls.__name__} cannot extend the closed JellyfinError taxonomy")


@final
class JellyfinNetworkError(JellyfinError):
    """Exception raised when the HTTP transport fails.

    This includes refused connections, timeouts, DNS resolution and TLS
    failures. The underlying transport error is kept on ``error`` and chained
    as ``__cause__``.
    """

    kind = ErrorKind.NETWORK
    __match_args__ = ("error",)

    def __init__(self, message: str, error: BaseException | None = None) -> None:
        """Initialize with the transport error.

        Args:
            message: The error message.
            error: The transport exception that caused the failure.
        """
        super().__init__(message)
        self.error = error


@final
class JellyfinUrlParseError(JellyfinError):
    """Exception raised when the server address is not a usable URL."""

    kind = ErrorKind.URL_PARSE
    __match_args__ = ("url",)

    def __init__(self, message: str, url: str = "") -> None:
        """Initialize with the rejected address.

        Args:
            message: The error message.
            url: The address supplied by the caller.
        """
        super().__init__(message)
        self.url = url


@final
class JellyfinAuthNotFoundError(JellyfinError):
    """Exception raised when no usable session token is available.

    Raised when an authentication response lacks a token, or when an
    operation that needs a token is called on an unauthenticated client.
    """

    kind = ErrorKind.AUTH_NOT_FOUND

    def __init__(self, message: str = "Unauthorized.") -> None:
        """Initialize authentication error.

        Args:
            message: The error message.
        """
        super().__init__(message)


@final
class JellyfinHttpRequestError(JellyfinError):
    """Exception raised when the server answers with a non-success status.

    Also raised for a success status whose body is not valid JSON.

    Attributes:
        status: The literal HTTP status code.
        message: Human readable description of the failure.
        type_: RFC 7807 ``type`` field, if the body carried one.
        title: RFC 7807 ``title`` field.
        detail: RFC 7807 ``detail`` field.
        instance: RFC 7807 ``instance`` field.
        extensions: Any other members of the problem body, keyed by name.
    """

    kind = ErrorKind.HTTP_REQUEST
    __match_args__ = ("status", "message")

    def __init__(
        self,
        status: int,
        message: str = "",
        *,
        type_: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        instance: str | None = None,
        extensions: Mapping[str, Any] | None = None,
    ) -> None:
        """Initialize with the response details.

        Args:
            status: The HTTP status code.
            message: Description of the failure. Defaults to the standard
                reason phrase for ``status``.
            type_: Problem type URI.
            title: Problem title.
            detail: Problem detail.
            instance: Problem instance URI.
            extensions: Additional problem members.
        """
        self.status = status
        self.message = message or reason_phrase(status)
        self.type_ = type_
        self.title = title
        self.detail = detail
        self.instance = instance
        self.extensions = dict(extensions or {})
        super().__init__(self._render())

    def _render(self) -> str:
        text = f"HTTP Request Error (Status {self.status}): {self.message}"
        for label, value in (
            ("Type", self.type_),
            ("Title", self.title),
            ("Detail", self.detail),
            ("Instance", self.instance),
        ):
            if value:
                text += f", {label}: {value}"
        return text


def reason_phrase(status: int) -> str:
    """Return the standard reason phrase for an HTTP status code.

    Args:
        status: HTTP status code.

    Returns:
        The phrase, or a generic description for non-standard codes.
    """
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return f"HTTP status {status}"
