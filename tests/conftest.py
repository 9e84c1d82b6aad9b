"""Fixtures for Jellyfin client tests."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import pytest

from jellyfin_client.models import ClientIdentity
from jellyfin_client.transport import TransportResponse


@dataclass
class RecordedRequest:
    """A request captured by FakeTransport."""

    method: str
    url: str
    headers: dict[str, str]
    json: object | None
    params: dict[str, str] | None


@dataclass
class FakeTransport:
    """Transport returning queued responses instead of touching the network.

    Queue a TransportResponse to answer the next request, or an exception
    to raise from it.
    """

    replies: list[TransportResponse | BaseException] = field(default_factory=list)
    requests: list[RecordedRequest] = field(default_factory=list)
    closed: bool = False

    def reply(self, status: int = 200, body: object = None, reason: str = "OK") -> None:
        """Queue a JSON (or raw bytes/str) response."""
        if body is None:
            raw = b""
        elif isinstance(body, bytes):
            raw = body
        elif isinstance(body, str):
            raw = body.encode()
        else:
            raw = json.dumps(body).encode()
        self.replies.append(
            TransportResponse(
                status=status,
                reason=reason,
                body=raw,
            )
        )

    def fail(self, error: BaseException) -> None:
        """Queue an exception for the next request."""
        self.replies.append(error)

    async def request(
        self,
        method: str,
        url: Any,
        *,
        headers: Mapping[str, str],
        json: object | None = None,
        params: Mapping[str, str] | None = None,
    ) -> TransportResponse:
        self.requests.append(
            RecordedRequest(
                method=method,
                url=str(url),
                headers=dict(headers),
                json=json,
                params=dict(params) if params else None,
            )
        )
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_transport() -> FakeTransport:
    """Return an empty fake transport."""
    return FakeTransport()


@pytest.fixture
def identity() -> ClientIdentity:
    """Return a fixed client identity."""
    return ClientIdentity(
        client="jellyfin-client-tests",
        version="1.2.3",
        device_name="test_device",
        device_id="device-id-123",
    )


@pytest.fixture
def mock_user() -> dict[str, Any]:
    """Return mock user response."""
    return {
        "Name": "alice",
        "ServerId": "test-server-id-12345",
        "Id": "user-1",
        "HasPassword": True,
        "HasConfiguredPassword": True,
        "HasConfiguredEasyPassword": False,
        "EnableAutoLogin": False,
        "Configuration": {"SubtitleMode": "Default", "PlayDefaultAudioTrack": True},
        "Policy": {"IsAdministrator": True, "IsHidden": False, "IsDisabled": False},
    }


@pytest.fixture
def mock_auth_response(mock_user: dict[str, Any]) -> dict[str, Any]:
    """Return mock /Users/AuthenticateByName response."""
    return {
        "User": mock_user,
        "SessionInfo": {"Id": "session-1", "UserId": "user-1", "Client": "jellyfin-client"},
        "AccessToken": "abc123def456",
        "ServerId": "test-server-id-12345",
    }


@pytest.fixture
def mock_public_info() -> dict[str, Any]:
    """Return mock public system info response."""
    return {
        "Id": "test-server-id-12345",
        "ServerName": "Test Jellyfin Server",
        "Version": "10.9.11",
        "ProductName": "Jellyfin Server",
        "LocalAddress": "http://192.168.1.100:8096",
        "StartupWizardCompleted": True,
    }
