"""Request logging for API."""

import logging
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone

logger = logging.getLogger("api.requests")


@dataclass
class RequestLog:
    """Captured request/response data for logging."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    granularity: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    event_count: int | None = None
    total_hours: float | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (type, message)


def log_request(log: RequestLog) -> None:
    """Emit a request log record; failures are logged at warning level or above."""
    record = asdict(log)
    details = record.pop("details")

    if log.status_code >= 500:
        level = logging.ERROR
    elif log.status_code >= 400:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger.log(
        level,
        "%s %s -> %d in %dms (events=%s, hours=%s, error=%s)",
        log.method,
        log.endpoint,
        log.status_code,
        log.processing_time_ms,
        log.event_count,
        log.total_hours,
        log.error_code,
        extra={"request": record},
    )
    for detail_type, message in details:
        logger.log(level, "[%s] %s: %s", log.request_id, detail_type, message)
