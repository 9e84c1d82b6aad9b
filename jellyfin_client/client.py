"""Jellyfin API client."""

from __future__ import annotations

import hashlib
import json
import logging
import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Self, cast

from yarl import URL

from .const import (
    DEFAULT_TIMEOUT,
    DEFAULT_VERIFY_SSL,
    ENDPOINT_AUTHENTICATE_BY_ID,
    ENDPOINT_AUTHENTICATE_BY_NAME,
    ENDPOINT_FORGOT_PASSWORD,
    ENDPOINT_FORGOT_PASSWORD_PIN,
    ENDPOINT_SYSTEM_INFO_PUBLIC,
    ENDPOINT_USER,
    ENDPOINT_USER_CONFIGURATION,
    ENDPOINT_USER_ME,
    ENDPOINT_USER_NEW,
    ENDPOINT_USER_PASSWORD,
    ENDPOINT_USER_POLICY,
    ENDPOINT_USER_PUBLIC,
    ENDPOINT_USERS,
    ERROR_MESSAGE_KEYS,
    HEADER_AUTHORIZATION,
    HTTP_DELETE,
    HTTP_GET,
    HTTP_POST,
    SUPPORTED_SCHEMES,
    sanitize_token,
)
from .exceptions import (
    JellyfinAuthNotFoundError,
    JellyfinHttpRequestError,
    JellyfinUrlParseError,
)
from .models import (
    AuthenticationResult,
    ClientIdentity,
    Credentials,
    UserIdCredentials,
    UsernameCredentials,
)
from .transport import AiohttpTransport, Transport, TransportResponse

if TYPE_CHECKING:
    import aiohttp

    from .const import (
        JellyfinProblemDetails,
        JellyfinPublicSystemInfo,
        JellyfinUser,
        JellyfinUserConfiguration,
        JellyfinUserPolicy,
    )

_LOGGER = logging.getLogger(__name__)

# Registered names (letters, digits, hyphens, underscores) or IP literals.
_HOST_PATTERN = re.compile(
    r"[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)*\.?"
    r"|[0-9A-Fa-f.]*:[0-9A-Fa-f:.]*(?:%[A-Za-z0-9_.~-]+)?"
)

# RFC 7807 members carried as named attributes rather than extensions.
_PROBLEM_MEMBERS = frozenset({"type", "title", "status", "detail", "instance"})


def parse_server_url(base_url: str) -> URL:
    """Parse and validate a server address.

    Args:
        base_url: Address of the Jellyfin server, e.g. ``http://host:8096``.

    Returns:
        Absolute http(s) URL without a trailing slash.

    Raises:
        JellyfinUrlParseError: The address is not an absolute http(s) URL
            with a valid host, or it carries a query string or fragment.
    """
    if not isinstance(base_url, str):
        raise JellyfinUrlParseError(
            f"Server URL must be a string, got {type(base_url).__name__}", repr(base_url)
        )

    candidate = base_url.strip().rstrip("/")
    try:
        url = URL(candidate)
        _ = url.port  # force port validation
    except (TypeError, ValueError) as err:
        raise JellyfinUrlParseError(f"Invalid server URL {base_url!r}: {err}", base_url) from err

    if not url.host:
        raise JellyfinUrlParseError(
            f"Invalid server URL {base_url!r}: relative URL without a base", base_url
        )
    if url.scheme not in SUPPORTED_SCHEMES:
        raise JellyfinUrlParseError(
            f"Invalid server URL {base_url!r}: unsupported scheme {url.scheme!r}", base_url
        )
    if not _HOST_PATTERN.fullmatch(url.raw_host or ""):
        raise JellyfinUrlParseError(
            f"Invalid server URL {base_url!r}: invalid host {url.raw_host!r}", base_url
        )
    if url.query_string or url.fragment:
        raise JellyfinUrlParseError(
            f"Invalid server URL {base_url!r}: query strings and fragments are not allowed",
            base_url,
        )
    return url


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def http_error_from_response(response: TransportResponse) -> JellyfinHttpRequestError:
    """Build the error for a non-success response.

    The message comes from the JSON body when it has one of the usual
    message fields, else from the raw body, else from the reason phrase.

    Args:
        response: The failed response.

    Returns:
        Error carrying the status code and message.
    """
    text = response.text.strip()
    try:
        data = json.loads(text) if text else None
    except ValueError:
        data = None

    if isinstance(data, Mapping):
        problem = cast("JellyfinProblemDetails", data)
        message = next(
            (str(data[key]) for key in ERROR_MESSAGE_KEYS if data.get(key)),
            text,
        )
        return JellyfinHttpRequestError(
            response.status,
            message,
            type_=_optional_str(problem.get("type")),
            title=_optional_str(problem.get("title")),
            detail=_optional_str(problem.get("detail")),
            instance=_optional_str(problem.get("instance")),
            extensions={
                str(key): value for key, value in data.items() if key not in _PROBLEM_MEMBERS
            },
        )

    return JellyfinHttpRequestError(response.status, text or response.reason or "")


class JellyfinClient:
    """Async client for the Jellyfin API.

    The client couples a server address with an optional session token.
    Requests carry the token once an authentication succeeds; every failure
    is raised as one of the JellyfinError kinds.

    Example:
        ```python
        async with await JellyfinClient.authenticate_by_credentials(
            "http://192.168.1.100:8096",
            "alice",
            "secret",
        ) as client:
            me = await client.async_get_current_user()
            print(f"Logged in as {me['Name']}")
        ```
    """

    def __init__(
        self,
        base_url: str,
        *,
        identity: ClientIdentity | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        verify_ssl: bool = DEFAULT_VERIFY_SSL,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        """Initialize the client. Performs no network I/O.

        Args:
            base_url: Address of the Jellyfin server.
            identity: How the client identifies itself. Defaults to a
                ClientIdentity for the local host.
            timeout: Request timeout in seconds. Defaults to 10.
            verify_ssl: Whether to verify TLS certificates. Defaults to True.
            session: Optional aiohttp session to reuse. Ignored when
                     ``transport`` is given.
            transport: Optional transport to send requests through.

        Raises:
            JellyfinUrlParseError: ``base_url`` is not a valid server address.
        """
        self._url = parse_server_url(base_url)
        self._identity = identity or ClientIdentity()
        if transport is None:
            transport = AiohttpTransport(verify_ssl=verify_ssl, timeout=timeout, session=session)
            self._owns_transport = True
        else:
            self._owns_transport = False
        self._transport = transport
        self._auth: AuthenticationResult | None = None

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

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    @classmethod
    async def connect(cls, base_url: str, **options: Any) -> Self:
        """Create an unauthenticated client.

        No request is sent; use async_get_public_system_info() to check
        that the server is reachable.

        Args:
            base_url: Address of the Jellyfin server.
            **options: Keyword arguments forwarded to the constructor.

        Returns:
            Client without a session token.

        Raises:
            JellyfinUrlParseError: ``base_url`` is not a valid server address.
        """
        return cls(base_url, **options)

    @classmethod
    async def authenticate_by_credentials(
        cls,
        base_url: str,
        username: str,
        password: str,
        **options: Any,
    ) -> Self:
        """Create a client authenticated by user name and password.

        Args:
            base_url: Address of the Jellyfin server.
            username: The account name.
            password: The account password.
            **options: Keyword arguments forwarded to the constructor.

        Returns:
            Client holding the session token from the server.

        Raises:
            JellyfinUrlParseError: ``base_url`` is not a valid server address.
            JellyfinNetworkError: The request could not be completed.
            JellyfinHttpRequestError: The server rejected the request.
            JellyfinAuthNotFoundError: The response carried no token.
        """
        return await cls._create_authenticated(
            base_url, UsernameCredentials(username, password), options
        )

    @classmethod
    async def authenticate_by_user_id(
        cls,
        base_url: str,
        user_id: str,
        password: str,
        **options: Any,
    ) -> Self:
        """Create a client authenticated by user id and password.

        Same contract as authenticate_by_credentials().
        """
        return await cls._create_authenticated(
            base_url, UserIdCredentials(user_id, password), options
        )

    @classmethod
    async def _create_authenticated(
        cls,
        base_url: str,
        credentials: Credentials,
        options: dict[str, Any],
    ) -> Self:
        client = cls(base_url, **options)
        try:
            await client.authenticate(credentials)
        except BaseException:
            await client.close()
            raise
        return client

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def url(self) -> URL:
        """Return the validated server URL."""
        return self._url

    @property
    def base_url(self) -> str:
        """Return the base URL for API requests, without a trailing slash."""
        return str(self._url)

    @property
    def identity(self) -> ClientIdentity:
        """Return the client identity sent with every request."""
        return self._identity

    @property
    def auth(self) -> AuthenticationResult | None:
        """Return the current session, or None if not authenticated."""
        return self._auth

    @property
    def is_authenticated(self) -> bool:
        """Return whether a session token is held."""
        return self._auth is not None

    @property
    def access_token(self) -> str | None:
        """Return the session token, or None if not authenticated."""
        return self._auth.access_token if self._auth else None

    @property
    def user_id(self) -> str | None:
        """Return the authenticated user's id, if known."""
        return self._auth.user_id if self._auth else None

    # -------------------------------------------------------------------------
    # Request plumbing
    # -------------------------------------------------------------------------

    def _get_headers(self, token: str | None) -> dict[str, str]:
        """Build headers for API requests.

        Args:
            token: Session token to attach, or None.

        Returns:
            Dictionary of HTTP headers.
        """
        return {
            "User-Agent": self._identity.user_agent,
            "Accept": "application/json",
            HEADER_AUTHORIZATION: self._identity.authorization_header(token),
        }

    def _build_url(self, path: str) -> URL:
        return self._url / path.lstrip("/")

    async def _send(
        self,
        method: str,
        path: str,
        *,
        token: str | None,
        body: object | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        """Send a request and reject non-success responses.

        Raises:
            JellyfinNetworkError: The request could not be completed.
            JellyfinHttpRequestError: The server answered with a non-2xx status.
        """
        method = method.upper()
        _LOGGER.debug(
            "Jellyfin API request: %s %s (token=%s)",
            method,
            path,
            sanitize_token(token),
        )

        response = await self._transport.request(
            method,
            self._build_url(path),
            headers=self._get_headers(token),
            json=body,
            params=params,
        )

        _LOGGER.debug(
            "Jellyfin API response: %s %s for %s %s",
            response.status,
            response.reason,
            method,
            path,
        )

        if not response.ok:
            raise http_error_from_response(response)
        return response

    @staticmethod
    def _decode(response: TransportResponse) -> Any:
        """Decode a success body as JSON.

        Returns:
            The decoded value, or None for an empty body.

        Raises:
            JellyfinHttpRequestError: The body is not valid JSON.
        """
        if not response.body.strip():
            return None
        try:
            return json.loads(response.body)
        except ValueError as err:
            raise JellyfinHttpRequestError(
                response.status, f"Server returned invalid JSON: {err}"
            ) from err

    async def call(
        self,
        method: str,
        path: str,
        body: object | None = None,
        *,
        params: Mapping[str, str] | None = None,
        require_auth: bool = False,
    ) -> Any:
        """Make a request to the Jellyfin API.

        The session token is attached when the client holds one; otherwise
        the request goes out with the client identity only.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: API endpoint path, e.g. ``/Users/Me``.
            body: Optional JSON body.
            params: Optional query string parameters.
            require_auth: Fail without sending anything if no token is held.

        Returns:
            Decoded JSON response, or None for an empty body.

        Raises:
            JellyfinAuthNotFoundError: ``require_auth`` is set and the client
                is not authenticated.
            JellyfinNetworkError: The request could not be completed.
            JellyfinHttpRequestError: Non-2xx status or invalid JSON body.
        """
        auth = self._auth
        if require_auth and auth is None:
            raise JellyfinAuthNotFoundError(f"Authentication required for {method} {path}")

        response = await self._send(
            method,
            path,
            token=auth.access_token if auth else None,
            body=body,
            params=params,
        )
        return self._decode(response)

    # -------------------------------------------------------------------------
    # Authentication
    # -------------------------------------------------------------------------

    async def authenticate(self, credentials: Credentials) -> AuthenticationResult:
        """Authenticate and store the session token.

        The request is sent without any existing token. A failed attempt
        leaves the current session untouched.

        Args:
            credentials: Name-based or id-based credentials.

        Returns:
            The new session.

        Raises:
            JellyfinNetworkError: The request could not be completed.
            JellyfinHttpRequestError: The server rejected the request.
            JellyfinAuthNotFoundError: The response carried no token.
        """
        if isinstance(credentials, UsernameCredentials):
            _LOGGER.debug("Authenticating %s by name", credentials.username)
            response = await self._send(
                HTTP_POST,
                ENDPOINT_AUTHENTICATE_BY_NAME,
                token=None,
                body={"Username": credentials.username, "Pw": credentials.password},
            )
        elif isinstance(credentials, UserIdCredentials):
            _LOGGER.debug("Authenticating user id %s", credentials.user_id)
            password_hash = hashlib.sha1(
                credentials.password.encode(), usedforsecurity=False
            ).hexdigest()
            response = await self._send(
                HTTP_POST,
                ENDPOINT_AUTHENTICATE_BY_ID.format(user_id=credentials.user_id),
                token=None,
                params={"pw": credentials.password, "password": password_hash},
            )
        else:
            raise TypeError(f"Unsupported credentials type: {type(credentials).__name__}")

        result = AuthenticationResult.from_response(self._decode(response))
        if result is None:
            raise JellyfinAuthNotFoundError(
                "Authentication response did not contain an access token"
            )

        self._auth = result
        _LOGGER.debug(
            "Authenticated as user %s (token=%s)",
            result.user_id,
            sanitize_token(result.access_token),
        )
        return result

    # -------------------------------------------------------------------------
    # System
    # -------------------------------------------------------------------------

    async def async_get_public_system_info(self) -> JellyfinPublicSystemInfo:
        """Get public server information (no authentication required).

        Useful for checking server availability before authentication.

        Returns:
            Public server information.

        Raises:
            JellyfinNetworkError: Connection failed.
        """
        response = await self.call(HTTP_GET, ENDPOINT_SYSTEM_INFO_PUBLIC)
        return response  # type: ignore[no-any-return]

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    async def async_get_users(
        self,
        is_hidden: bool = False,
        is_disabled: bool = False,
    ) -> list[JellyfinUser]:
        """Get the users visible to the authenticated user.

        Args:
            is_hidden: Filter for hidden users.
            is_disabled: Filter for disabled users.

        Returns:
            List of user objects.
        """
        response = await self.call(
            HTTP_GET,
            ENDPOINT_USERS,
            params={
                "isHidden": str(is_hidden).lower(),
                "isDisabled": str(is_disabled).lower(),
            },
            require_auth=True,
        )
        return response or []

    async def async_get_user_by_id(self, user_id: str) -> JellyfinUser:
        """Get a user by id."""
        response = await self.call(
            HTTP_GET, ENDPOINT_USER.format(user_id=user_id), require_auth=True
        )
        return response  # type: ignore[no-any-return]

    async def async_get_current_user(self) -> JellyfinUser:
        """Get the user the current session belongs to."""
        response = await self.call(HTTP_GET, ENDPOINT_USER_ME, require_auth=True)
        return response  # type: ignore[no-any-return]

    async def async_get_public_users(self) -> list[JellyfinUser]:
        """Get the users shown on the login screen (no authentication required)."""
        response = await self.call(HTTP_GET, ENDPOINT_USER_PUBLIC)
        return response or []

    async def async_create_user(self, name: str, password: str) -> JellyfinUser:
        """Create a user.

        Args:
            name: Name of the new user.
            password: Password of the new user.

        Returns:
            The created user object.
        """
        response = await self.call(
            HTTP_POST,
            ENDPOINT_USER_NEW,
            {"Name": name, "Password": password},
            require_auth=True,
        )
        return response  # type: ignore[no-any-return]

    async def async_update_user(self, user_id: str, user: JellyfinUser) -> None:
        """Replace a user's top-level information."""
        await self.call(HTTP_POST, ENDPOINT_USER.format(user_id=user_id), user, require_auth=True)

    async def async_delete_user(self, user_id: str) -> None:
        """Delete a user."""
        await self.call(HTTP_DELETE, ENDPOINT_USER.format(user_id=user_id), require_auth=True)

    async def async_update_user_configuration(
        self,
        user_id: str,
        configuration: JellyfinUserConfiguration,
    ) -> None:
        """Replace a user's configuration."""
        await self.call(
            HTTP_POST,
            ENDPOINT_USER_CONFIGURATION.format(user_id=user_id),
            configuration,
            require_auth=True,
        )

    async def async_update_user_password(self, user_id: str, new_password: str) -> None:
        """Set a user's password."""
        await self.call(
            HTTP_POST,
            ENDPOINT_USER_PASSWORD.format(user_id=user_id),
            {"NewPw": new_password},
            require_auth=True,
        )

    async def async_update_user_policy(self, user_id: str, policy: JellyfinUserPolicy) -> None:
        """Replace a user's policy."""
        await self.call(
            HTTP_POST,
            ENDPOINT_USER_POLICY.format(user_id=user_id),
            policy,
            require_auth=True,
        )

    async def async_forgot_password(self, username: str) -> None:
        """Start the forgot-password flow for an account (no authentication required)."""
        await self.call(HTTP_POST, ENDPOINT_FORGOT_PASSWORD, {"EnteredUsername": username})

    async def async_redeem_forgot_password_pin(self, pin: str) -> None:
        """Redeem a forgot-password PIN (no authentication required)."""
        await self.call(HTTP_POST, ENDPOINT_FORGOT_PASSWORD_PIN, {"Pin": pin})

    async def close(self) -> None:
        """Close the transport.

        Only closes the transport if it was created by this client.
        Transports provided externally are not closed.
        """
        if self._owns_transport:
            await self._transport.close()
