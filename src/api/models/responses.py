"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    calendar_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class BucketOut(BaseModel):
    """One aggregation bucket."""

    date: str | None = None  # YYYY-MM-DD, absent for single-day views
    category: str
    minutes: float
    count: int


class SummaryOut(BaseModel):
    """Headline statistics."""

    total_events: int
    active_hours: float
    most_common_category: str | None = None


class StatsResponse(BaseModel):
    """Aggregated time statistics for a range."""

    granularity: str
    start_date: str | None = None
    end_date: str | None = None
    label: str
    buckets: list[BucketOut]
    summary: SummaryOut
    stats: dict
    chart_type: str
    chart: dict
    text: str


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    TOO_MANY_EVENTS = "TOO_MANY_EVENTS"
    CALENDAR_UNAVAILABLE = "CALENDAR_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
