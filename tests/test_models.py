"""Tests for Jellyfin client data models."""

from __future__ import annotations

import dataclasses
import hashlib
from typing import Any
from unittest.mock import patch

import pytest

from jellyfin_client.models import (
    AuthenticationResult,
    ClientIdentity,
    SubtitleMode,
    UserIdCredentials,
    UsernameCredentials,
    default_device_name,
    device_id_for,
)


class TestCredentials:
    """Test credential variants."""

    def test_password_not_in_repr(self) -> None:
        """Test passwords never appear in repr output."""
        by_name = UsernameCredentials("alice", "s3cret")
        by_id = UserIdCredentials("user-1", "s3cret")
        assert "s3cret" not in repr(by_name)
        assert "s3cret" not in repr(by_id)
        assert "alice" in repr(by_name)

    def test_credentials_are_frozen(self) -> None:
        """Test credentials cannot be mutated."""
        creds = UsernameCredentials("alice", "pw")
        with pytest.raises(dataclasses.FrozenInstanceError):
            creds.username = "bob"  # type: ignore[misc]


class TestClientIdentity:
    """Test the client identity header."""

    def test_device_name_from_hostname(self) -> None:
        """Test spaces in the host name are replaced."""
        with patch("jellyfin_client.models.socket.gethostname", return_value="Living Room PC"):
            assert default_device_name() == "Living_Room_PC"

    def test_device_id_derived_from_name(self) -> None:
        """Test the device id is the md5 of the device name."""
        identity = ClientIdentity(device_name="test_device")
        assert identity.device_id == hashlib.md5(b"test_device").hexdigest()
        assert identity.device_id == device_id_for("test_device")

    def test_explicit_device_id_kept(self, identity: ClientIdentity) -> None:
        """Test an explicit device id is not overwritten."""
        assert identity.device_id == "device-id-123"

    def test_header_without_token(self, identity: ClientIdentity) -> None:
        """Test the anonymous header omits the token."""
        assert identity.authorization_header() == (
            'MediaBrowser Client="jellyfin-client-tests", Device="test_device", '
            'DeviceId="device-id-123", Version="1.2.3"'
        )

    def test_header_with_token(self, identity: ClientIdentity) -> None:
        """Test the token is appended when present."""
        header = identity.authorization_header("abc123")
        assert header.startswith("MediaBrowser ")
        assert header.endswith('Token="abc123"')

    def test_user_agent(self, identity: ClientIdentity) -> None:
        """Test the User-Agent value."""
        assert identity.user_agent == "jellyfin-client-tests/1.2.3"


class TestAuthenticationResult:
    """Test parsing of authentication responses."""

    def test_from_jellyfin_response(self, mock_auth_response: dict[str, Any]) -> None:
        """Test a full Jellyfin response."""
        result = AuthenticationResult.from_response(mock_auth_response)
        assert result is not None
        assert result.access_token == "abc123def456"
        assert result.user_id == "user-1"
        assert result.server_id == "test-server-id-12345"
        assert result.user is not None
        assert result.user["Name"] == "alice"
        assert result.session_info == mock_auth_response["SessionInfo"]

    def test_from_minimal_token_response(self) -> None:
        """Test a bare token field is accepted."""
        result = AuthenticationResult.from_response({"token": "abc123"})
        assert result is not None
        assert result.access_token == "abc123"
        assert result.user_id is None
        assert result.user is None

    @pytest.mark.parametrize(
        "body",
        [
            None,
            [],
            "abc123",
            {},
            {"User": {"Id": "user-1"}},
            {"AccessToken": ""},
            {"AccessToken": None},
            {"AccessToken": 12345},
        ],
    )
    def test_no_usable_token(self, body: object) -> None:
        """Test bodies without a usable token yield None."""
        assert AuthenticationResult.from_response(body) is None

    def test_token_not_in_repr(self) -> None:
        """Test the token never appears in repr output."""
        result = AuthenticationResult(access_token="abc123def456")
        assert "abc123def456" not in repr(result)


class TestSubtitleMode:
    """Test the subtitle mode enumeration."""

    def test_values_match_server_strings(self) -> None:
        """Test members serialize to the server's strings."""
        assert SubtitleMode("OnlyForced") is SubtitleMode.ONLY_FORCED
        assert SubtitleMode.NONE == "None"
        assert [mode.value for mode in SubtitleMode] == [
            "Default",
            "Always",
            "OnlyForced",
            "None",
            "Smart",
        ]

    def test_unknown_value_rejected(self) -> None:
        """Test an unknown mode raises ValueError."""
        with pytest.raises(ValueError):
            SubtitleMode("Sometimes")
