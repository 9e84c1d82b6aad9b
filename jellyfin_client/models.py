"""Data models for the Jellyfin client."""

from __future__ import annotations

import hashlib
import socket
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, cast

from .const import (
    ACCESS_TOKEN_KEYS,
    AUTH_SCHEME,
    DEFAULT_CLIENT_NAME,
    USER_AGENT_TEMPLATE,
    __version__,
)

if TYPE_CHECKING:
    from .const import JellyfinAuthenticationResponse, JellyfinSessionInfo, JellyfinUser


class SubtitleMode(StrEnum):
    """Subtitle mode enumeration.

    Maps to the SubtitleMode field of a user's configuration.
    """

    DEFAULT = "Default"
    ALWAYS = "Always"
    ONLY_FORCED = "OnlyForced"
    NONE = "None"
    SMART = "Smart"


@dataclass(frozen=True, slots=True)
class UsernameCredentials:
    """Credentials for name-based authentication.

    Attributes:
        username: The account name.
        password: The account password.
    """

    username: str
    password: str = field(repr=False)


@dataclass(frozen=True, slots=True)
class UserIdCredentials:
    """Credentials for user-id-based authentication.

    Attributes:
        user_id: The account's user id.
        password: The account password.
    """

    user_id: str
    password: str = field(repr=False)


Credentials = UsernameCredentials | UserIdCredentials


def default_device_name() -> str:
    """Return the local host name with spaces replaced by underscores."""
    return (socket.gethostname() or "unknown").replace(" ", "_")


def device_id_for(device_name: str) -> str:
    """Derive a stable device id from a device name.

    Args:
        device_name: The device name sent to the server.

    Returns:
        32-character hex md5 digest of the name.
    """
    return hashlib.md5(device_name.encode(), usedforsecurity=False).hexdigest()


@dataclass(frozen=True, slots=True)
class ClientIdentity:
    """How this client identifies itself to the server.

    Jellyfin requires a client, device, device id and version in the
    ``MediaBrowser`` authorization header, with or without a token.

    Attributes:
        client: Application name.
        version: Application version.
        device_name: Device name shown in the server dashboard.
        device_id: Unique device identifier.
    """

    client: str = DEFAULT_CLIENT_NAME
    version: str = __version__
    device_name: str = field(default_factory=default_device_name)
    device_id: str = ""

    def __post_init__(self) -> None:
        """Derive the device id from the device name when not given."""
        if not self.device_id:
            object.__setattr__(self, "device_id", device_id_for(self.device_name))

    @property
    def user_agent(self) -> str:
        """Return the User-Agent header value."""
        return USER_AGENT_TEMPLATE.format(client=self.client, version=self.version)

    def authorization_header(self, token: str | None = None) -> str:
        """Build the Authorization header value.

        Args:
            token: Session token to include, or None for an anonymous header.

        Returns:
            Header value in the ``MediaBrowser key="value", ...`` format.
        """
        params = {
            "Client": self.client,
            "Device": self.device_name,
            "DeviceId": self.device_id,
            "Version": self.version,
        }
        if token:
            params["Token"] = token
        param_line = ", ".join(f'{key}="{value}"' for key, value in params.items())
        return f"{AUTH_SCHEME} {param_line}"


@dataclass(frozen=True, slots=True)
class AuthenticationResult:
    """Session established by a successful authentication.

    Attributes:
        access_token: The session token attached to later requests.
        user_id: Id of the authenticated user, if the server reported it.
        server_id: Id of the server, if reported.
        user: The authenticated user object, if reported.
        session_info: The server-side session object, if reported.
    """

    access_token: str = field(repr=False)
    user_id: str | None = None
    server_id: str | None = None
    user: JellyfinUser | None = None
    session_info: JellyfinSessionInfo | None = None

    @classmethod
    def from_response(cls, data: object) -> AuthenticationResult | None:
        """Build a result from a decoded authentication response.

        Args:
            data: Decoded JSON body of the authentication response.

        Returns:
            The result, or None when the body carries no usable token.
        """
        if not isinstance(data, Mapping):
            return None
        token = next(
            (data[key] for key in ACCESS_TOKEN_KEYS if isinstance(data.get(key), str)),
            "",
        )
        if not token:
            return None
        response = cast("JellyfinAuthenticationResponse", data)
        user = response.get("User")
        user = user if isinstance(user, Mapping) else None
        session_info = response.get("SessionInfo")
        user_id = user.get("Id") if user else None
        server_id = response.get("ServerId")
        return cls(
            access_token=token,
            user_id=str(user_id) if user_id else None,
            server_id=str(server_id) if server_id else None,
            user=user,  # type: ignore[arg-type]
            session_info=session_info if isinstance(session_info, Mapping) else None,  # type: ignore[arg-type]
        )
