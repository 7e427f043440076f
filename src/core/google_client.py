"""
Google Calendar client setup with lazy initialization.
"""

from google.auth.exceptions import RefreshError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from core.config import (
    GOOGLE_CLIENT_ID,
    GOOGLE_CLIENT_SECRET,
    GOOGLE_REFRESH_TOKEN,
    GOOGLE_SCOPES,
    GOOGLE_TOKEN_URI,
    TOKEN_PATH,
)

_calendar_service = None


class GoogleAuthError(RuntimeError):
    """No usable Google credentials."""


def credentials_configured() -> bool:
    """Whether a refresh token or a stored token file is available."""
    has_refresh_token = bool(GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN)
    return has_refresh_token or TOKEN_PATH.exists()


def load_credentials() -> Credentials:
    """
    Build credentials from the environment refresh token, else the token file.

    Raises:
        GoogleAuthError: if nothing is configured or the refresh fails
    """
    if GOOGLE_CLIENT_ID and GOOGLE_CLIENT_SECRET and GOOGLE_REFRESH_TOKEN:
        creds = Credentials(
            token=None,
            refresh_token=GOOGLE_REFRESH_TOKEN,
            token_uri=GOOGLE_TOKEN_URI,
            client_id=GOOGLE_CLIENT_ID,
            client_secret=GOOGLE_CLIENT_SECRET,
            scopes=GOOGLE_SCOPES,
        )
    elif TOKEN_PATH.exists():
        creds = Credentials.from_authorized_user_file(str(TOKEN_PATH), GOOGLE_SCOPES)
    else:
        raise GoogleAuthError(
            "Missing Google OAuth credentials. Set GOOGLE_CLIENT_ID, GOOGLE_CLIENT_SECRET and "
            f"GOOGLE_REFRESH_TOKEN, or run scripts/get_refresh_token.py to create {TOKEN_PATH}."
        )

    if not creds.valid:
        if not creds.refresh_token:
            raise GoogleAuthError("Google credentials are invalid and have no refresh token")
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise GoogleAuthError(f"Failed to refresh Google access token: {e}") from e

    return creds


def get_calendar_service():
    """Get or create the Google Calendar v3 service (lazy initialization)."""
    global _calendar_service
    if _calendar_service is None:
        _calendar_service = build(
            "calendar", "v3", credentials=load_credentials(), cache_discovery=False
        )
    return _calendar_service
