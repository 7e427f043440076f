"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION
from core.google_client import credentials_configured

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Health check endpoint for monitoring.

    Returns 200 when Google credentials are configured, 503 otherwise.
    Aggregation of posted events works either way.
    """
    configured = credentials_configured()
    timestamp = datetime.now(timezone.utc).isoformat()

    if configured:
        return HealthResponse(
            status="healthy",
            version=API_VERSION,
            calendar_configured=True,
            timestamp=timestamp,
        )
    return JSONResponse(
        status_code=503,
        content=HealthResponse(
            status="unhealthy",
            version=API_VERSION,
            calendar_configured=False,
            timestamp=timestamp,
            error="Google Calendar credentials not configured",
        ).model_dump(),
    )
