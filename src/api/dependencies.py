"""FastAPI dependencies for authentication and request context."""

import secrets
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Header, HTTPException, status

from api.models.responses import ErrorCodes
from core.config import DEFAULT_TIMEZONE, DIARY_API_KEY


def _error(status_code: int, message: str, code: str, details: list[str] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status_code,
        detail={"error": message, "code": code, "details": details or []},
    )


async def verify_api_key(x_api_key: str = Header(..., alias="X-API-Key")) -> str:
    """
    Check the X-API-Key header against DIARY_API_KEY.

    Raises:
        HTTPException: 500 when no key is configured, 401 on mismatch
    """
    if not DIARY_API_KEY:
        raise _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "API key not configured on server",
            ErrorCodes.INTERNAL_ERROR,
        )

    # Constant-time comparison
    if not secrets.compare_digest(x_api_key, DIARY_API_KEY):
        raise _error(status.HTTP_401_UNAUTHORIZED, "Invalid or missing API key", ErrorCodes.UNAUTHORIZED)

    return x_api_key


def parse_timezone(name: str | None) -> ZoneInfo:
    """Resolve an IANA zone name, falling back to DEFAULT_TIMEZONE when empty."""
    name = (name or "").strip() or DEFAULT_TIMEZONE
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        raise _error(
            status.HTTP_400_BAD_REQUEST,
            "Unknown timezone",
            ErrorCodes.INVALID_REQUEST,
            [f"Received: {name}"],
        )


async def viewer_timezone(x_timezone: str | None = Header(None, alias="X-Timezone")) -> ZoneInfo:
    """The viewer's local zone from the X-Timezone header."""
    return parse_timezone(x_timezone)
