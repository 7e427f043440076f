"""API Pydantic models."""

from .requests import EventIn, StatsRequest
from .responses import BucketOut, ErrorCodes, ErrorResponse, HealthResponse, StatsResponse, SummaryOut

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "BucketOut",
    "SummaryOut",
    "StatsResponse",
    "EventIn",
    "StatsRequest",
]
