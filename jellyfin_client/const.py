"""Constants for the Jellyfin client."""

from __future__ import annotations

from typing import Final, NotRequired, TypedDict

# Version for User-Agent and authorization headers
__version__: Final = "0.1.0"

# Configuration defaults
DEFAULT_TIMEOUT: Final = 10
DEFAULT_VERIFY_SSL: Final = True
DEFAULT_CLIENT_NAME: Final = "jellyfin-client"

# HTTP methods
HTTP_GET: Final = "GET"
HTTP_POST: Final = "POST"
HTTP_DELETE: Final = "DELETE"

# Headers
HEADER_AUTHORIZATION: Final = "Authorization"
AUTH_SCHEME: Final = "MediaBrowser"
USER_AGENT_TEMPLATE: Final = "{client}/{version}"

# URL schemes accepted for the server address
SUPPORTED_SCHEMES: Final = ("http", "https")

# Authentication response keys carrying the session token, in lookup order
ACCESS_TOKEN_KEYS: Final = ("AccessToken", "access_token", "token")

# Error body keys carrying a human readable message, in lookup order
ERROR_MESSAGE_KEYS: Final = ("message", "Message", "detail", "title")

# API endpoints
ENDPOINT_AUTHENTICATE_BY_NAME: Final = "/Users/AuthenticateByName"
ENDPOINT_AUTHENTICATE_BY_ID: Final = "/Users/{user_id}/Authenticate"
ENDPOINT_USERS: Final = "/Users"
ENDPOINT_USER: Final = "/Users/{user_id}"
ENDPOINT_USER_ME: Final = "/Users/Me"
ENDPOINT_USER_NEW: Final = "/Users/New"
ENDPOINT_USER_PUBLIC: Final = "/Users/Public"
ENDPOINT_USER_CONFIGURATION: Final = "/Users/{user_id}/Configuration"
ENDPOINT_USER_PASSWORD: Final = "/Users/{user_id}/Password"
ENDPOINT_USER_POLICY: Final = "/Users/{user_id}/Policy"
ENDPOINT_FORGOT_PASSWORD: Final = "/Users/ForgotPassword"
ENDPOINT_FORGOT_PASSWORD_PIN: Final = "/Users/ForgotPassword/Pin"
ENDPOINT_SYSTEM_INFO_PUBLIC: Final = "/System/Info/Public"


# =============================================================================
# TypedDicts for API Responses
# =============================================================================
# Note: TypedDicts are for API payloads (external data, PascalCase keys)
# Dataclasses are for internal models (see models.py)
# =============================================================================


class JellyfinPublicSystemInfo(TypedDict, total=False):
    """Type definition for /System/Info/Public response."""

    Id: str
    ServerName: str
    Version: str
    ProductName: str
    LocalAddress: str
    StartupWizardCompleted: bool


class JellyfinUserConfiguration(TypedDict, total=False):
    """Type definition for a user's configuration block."""

    AudioLanguagePreference: str | None
    PlayDefaultAudioTrack: bool
    SubtitleLanguagePreference: str
    DisplayMissingEpisodes: bool
    GroupedFolders: list[str]
    SubtitleMode: str
    DisplayCollectionsView: bool
    EnableLocalPassword: bool
    OrderedViews: list[str]
    LatestItemsExcludes: list[str]
    MyMediaExcludes: list[str]
    HidePlayedInLatest: bool
    RememberAudioSelections: bool
    RememberSubtitleSelections: bool
    EnableNextEpisodeAutoPlay: bool


class JellyfinAccessSchedule(TypedDict):
    """Type definition for a parental access schedule entry."""

    UserId: str
    DayOfWeek: str
    StartHour: int
    EndHour: int


class JellyfinUserPolicy(TypedDict, total=False):
    """Type definition for a user's policy block."""

    IsAdministrator: bool
    IsHidden: bool
    IsDisabled: bool
    MaxParentalRating: int | None
    BlockedTags: list[str]
    EnableUserPreferenceAccess: bool
    AccessSchedules: list[JellyfinAccessSchedule]
    BlockUnratedItems: list[str]
    EnableRemoteControlOfOtherUsers: bool
    EnableSharedDeviceControl: bool
    EnableRemoteAccess: bool
    EnableLiveTvManagement: bool
    EnableLiveTvAccess: bool
    EnableMediaPlayback: bool
    EnableAudioPlaybackTranscoding: bool
    EnableVideoPlaybackTranscoding: bool
    EnablePlaybackRemuxing: bool
    ForceRemoteSourceTranscoding: bool
    EnableContentDeletion: bool
    EnableContentDeletionFromFolders: list[str]
    EnableContentDownloading: bool
    EnableSyncTranscoding: bool
    EnableMediaConversion: bool
    EnabledDevices: list[str]
    EnableAllDevices: bool
    EnabledChannels: list[str]
    EnableAllChannels: bool
    EnabledFolders: list[str]
    EnableAllFolders: bool
    InvalidLoginAttemptCount: int
    LoginAttemptsBeforeLockout: int
    MaxActiveSessions: int
    EnablePublicSharing: bool
    BlockedMediaFolders: list[str]
    BlockedChannels: list[str]
    RemoteClientBitrateLimit: int
    AuthenticationProviderId: str
    PasswordResetProviderId: str
    SyncPlayAccess: str


class JellyfinUser(TypedDict):
    """Type definition for user object."""

    Name: str
    ServerId: str
    Id: str
    HasPassword: bool
    HasConfiguredPassword: bool
    HasConfiguredEasyPassword: NotRequired[bool]
    EnableAutoLogin: NotRequired[bool]
    ServerName: NotRequired[str | None]
    PrimaryImageTag: NotRequired[str | None]
    LastLoginDate: NotRequired[str | None]
    LastActivityDate: NotRequired[str | None]
    Configuration: NotRequired[JellyfinUserConfiguration]
    Policy: NotRequired[JellyfinUserPolicy]
    PrimaryImageAspectRatio: NotRequired[float | None]


class JellyfinSessionInfo(TypedDict, total=False):
    """Type definition for the session block of an authentication result."""

    Id: str
    UserId: str
    UserName: str
    Client: str
    DeviceId: str
    DeviceName: str
    ApplicationVersion: str
    RemoteEndPoint: str
    LastActivityDate: str
    IsActive: bool
    SupportsRemoteControl: bool


class JellyfinAuthenticationResponse(TypedDict, total=False):
    """Type definition for /Users/AuthenticateByName response."""

    User: JellyfinUser
    SessionInfo: JellyfinSessionInfo
    AccessToken: str
    ServerId: str


class JellyfinProblemDetails(TypedDict, total=False):
    """Type definition for RFC 7807 error bodies returned by Jellyfin."""

    type: str
    title: str
    status: int
    detail: str
    instance: str


# =============================================================================
# Utility Functions
# =============================================================================


def sanitize_token(token: str | None) -> str:
    """Sanitize an access token for safe logging.

    Args:
        token: The full access token, or None when unauthenticated.

    Returns:
        Truncated token safe for logging (first 4 + last 2 chars).
    """
    if not token:
        return "N/A"
    if len(token) <= 6:
        return "***"
    return f"{token[:4]}...{token[-2:]}"
