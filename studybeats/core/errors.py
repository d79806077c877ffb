"""Error taxonomy shared by the services and the HTTP layer."""
from typing import Dict, Optional


class StudyBeatsError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, original_error: Optional[Exception] = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message
        self.original_error = original_error

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class AuthRequired(StudyBeatsError):
    """Missing, malformed or expired app credential."""

    status_code = 401
    default_message = "Could not validate credentials"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class SpotifyNotConnected(StudyBeatsError):
    """The action needs a Spotify link the user does not have."""

    status_code = 400
    default_message = "Spotify not connected"


class ReauthRequired(StudyBeatsError):
    """Spotify rejected the refresh token; the OAuth flow must be restarted."""

    status_code = 403
    default_message = "Spotify authorization expired, please reconnect your account"


class ProviderUnavailable(StudyBeatsError):
    """Network failure, timeout, 5xx or undecodable payload from Spotify."""

    status_code = 500
    default_message = "Spotify is currently unavailable"


class ValidationError(StudyBeatsError):
    """Malformed or unacceptable request input."""

    status_code = 400
    default_message = "Invalid request"


class ProviderAuthError(Exception):
    """Spotify answered 401 for an access token. Never leaves the service layer."""


class TokenRejected(Exception):
    """Spotify refused a refresh token or authorization code."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        super().__init__(message)
        self.error_code = error_code
