"""Time statistics and report endpoints."""

import asyncio
import time
from datetime import date, datetime
from typing import Annotated
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import Response

from api.dependencies import parse_timezone, verify_api_key, viewer_timezone
from api.logging import RequestLog, log_request
from api.models.requests import StatsRequest
from api.models.responses import BucketOut, ErrorCodes, StatsResponse, SummaryOut
from core.aggregation import BucketKey, aggregate, summarize
from core.config import MAX_EVENTS_PER_REQUEST
from core.google_client import GoogleAuthError
from core.periods import DateRange, Granularity, date_range_for, range_label, resolve_period
from models.events import Bucket, CalendarEvent, Category
from services.calendar import CalendarFetchError, fetch_diary_events
from services.reports import create_excel_report_to_bytes
from services.stats import build_time_stats, chart_series, default_chart_type, format_stats_summary

router = APIRouter(prefix="/v1")

PERIOD_GRANULARITY = {
    "today": Granularity.DAY,
    "yesterday": Granularity.DAY,
    "this_week": Granularity.WEEK,
    "last_week": Granularity.WEEK,
    "this_month": Granularity.MONTH,
    "last_month": Granularity.MONTH,
}


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _bucket_out(key: BucketKey, bucket: Bucket) -> BucketOut:
    if isinstance(key, Category):
        day, category = None, key
    else:
        day, category = key
    return BucketOut(
        date=day.isoformat() if day else None,
        category=category.value,
        minutes=round(bucket.minutes, 2),
        count=bucket.count,
    )


def build_stats_response(
    events: list[CalendarEvent],
    granularity: Granularity,
    tz: ZoneInfo,
    reference_date: date | None = None,
    date_range: DateRange | None = None,
    label: str | None = None,
) -> StatsResponse:
    """Aggregate events and assemble every view of the result."""
    if date_range is None and reference_date is not None:
        date_range = date_range_for(granularity, reference_date)
    if label is None:
        label = range_label(granularity, reference_date) if reference_date else ""

    buckets = aggregate(
        events,
        granularity,
        tz=tz,
        reference_date=reference_date,
        date_range=date_range,
    )
    stats = build_time_stats(buckets, date_range, label)
    summary = summarize(buckets)

    return StatsResponse(
        granularity=granularity.value,
        start_date=date_range.start.isoformat() if date_range else None,
        end_date=date_range.end.isoformat() if date_range else None,
        label=label,
        buckets=[_bucket_out(key, bucket) for key, bucket in buckets.items()],
        summary=SummaryOut(**summary.to_dict()),
        stats=stats,
        chart_type=default_chart_type(date_range) if date_range else (
            "doughnut" if granularity == Granularity.DAY else "bar"
        ),
        chart=chart_series(buckets),
        text=format_stats_summary(stats),
    )


def _check_event_count(count: int):
    if count > MAX_EVENTS_PER_REQUEST:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": f"Too many events (maximum {MAX_EVENTS_PER_REQUEST})",
                "code": ErrorCodes.TOO_MANY_EVENTS,
                "details": [f"Received: {count}"],
            },
        )


def _finish_log(request_log: RequestLog, start_time: float, exc: HTTPException | None = None):
    if exc is not None:
        request_log.status_code = exc.status_code
        if isinstance(exc.detail, dict):
            request_log.error_code = exc.detail.get("code")
            request_log.error_message = exc.detail.get("error")
            for detail in exc.detail.get("details", []):
                request_log.details.append(("error_detail", detail))
        else:
            request_log.error_message = str(exc.detail)
    request_log.processing_time_ms = int((time.time() - start_time) * 1000)


@router.post("/stats", response_model=StatsResponse)
async def stats_endpoint(
    request: Request,
    body: StatsRequest,
    header_tz: ZoneInfo = Depends(viewer_timezone),
    _api_key: str = Depends(verify_api_key),
):
    """
    Aggregate a supplied event list.

    The body's timezone wins over the X-Timezone header.
    """
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/stats",
        method="POST",
        client_ip=get_client_ip(request),
        granularity=body.granularity.value,
        event_count=len(body.events),
    )

    try:
        _check_event_count(len(body.events))
        tz = parse_timezone(body.timezone) if body.timezone else header_tz
        events = [e.to_event() for e in body.events]

        response = build_stats_response(events, body.granularity, tz, reference_date=body.reference_date)

        request_log.status_code = 200
        request_log.total_hours = response.summary.active_hours
        _finish_log(request_log, start_time)
        return response

    except HTTPException as e:
        _finish_log(request_log, start_time, e)
        raise

    finally:
        if not request_log.status_code:
            request_log.status_code = 500
        log_request(request_log)


@router.get("/stats/calendar", response_model=StatsResponse)
async def calendar_stats_endpoint(
    request: Request,
    period: Annotated[str, Query(description="today, yesterday, this_week, last_week, this_month, last_month, custom")] = "this_week",
    on_date: Annotated[date | None, Query(alias="date", description="Single day (YYYY-MM-DD), overrides period")] = None,
    from_date: Annotated[date | None, Query(description="Custom range start (YYYY-MM-DD)")] = None,
    to_date: Annotated[date | None, Query(description="Custom range end (YYYY-MM-DD)")] = None,
    today: Annotated[date | None, Query(description="Reference 'today', defaults to the current date in the viewer's zone")] = None,
    tz: ZoneInfo = Depends(viewer_timezone),
    _api_key: str = Depends(verify_api_key),
):
    """Fetch diary calendar events from Google and aggregate them."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/stats/calendar",
        method="GET",
        client_ip=get_client_ip(request),
    )

    try:
        reference_today = today or datetime.now(tz).date()
        try:
            date_range, label = resolve_period(period, reference_today, on_date, from_date, to_date)
        except ValueError as e:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail={"error": "Invalid period", "code": ErrorCodes.INVALID_REQUEST, "details": [str(e)]},
            )

        if date_range.is_single_day:
            granularity = Granularity.DAY
        else:
            granularity = PERIOD_GRANULARITY.get(period, Granularity.WEEK)
        request_log.granularity = granularity.value

        # Google client is synchronous
        events = await asyncio.to_thread(fetch_diary_events, date_range.start, date_range.end, tz)
        request_log.event_count = len(events)

        response = build_stats_response(events, granularity, tz, date_range=date_range, label=label)

        request_log.status_code = 200
        request_log.total_hours = response.summary.active_hours
        _finish_log(request_log, start_time)
        return response

    except HTTPException as e:
        _finish_log(request_log, start_time, e)
        raise

    except (CalendarFetchError, GoogleAuthError) as e:
        exc = HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Calendar service unavailable",
                "code": ErrorCodes.CALENDAR_UNAVAILABLE,
                "details": [str(e)],
            },
        )
        _finish_log(request_log, start_time, exc)
        raise exc

    finally:
        if not request_log.status_code:
            request_log.status_code = 500
        log_request(request_log)


@router.post("/reports/excel")
async def excel_report_endpoint(
    request: Request,
    body: StatsRequest,
    header_tz: ZoneInfo = Depends(viewer_timezone),
    _api_key: str = Depends(verify_api_key),
):
    """Aggregate a supplied event list and return it as an Excel workbook."""
    start_time = time.time()
    request_log = RequestLog(
        endpoint="/v1/reports/excel",
        method="POST",
        client_ip=get_client_ip(request),
        granularity=body.granularity.value,
        event_count=len(body.events),
    )

    try:
        _check_event_count(len(body.events))
        tz = parse_timezone(body.timezone) if body.timezone else header_tz
        events = [e.to_event() for e in body.events]

        buckets = aggregate(events, body.granularity, tz=tz, reference_date=body.reference_date)
        excel_bytes = await asyncio.to_thread(create_excel_report_to_bytes, buckets, events, tz)

        if body.reference_date:
            stem = f"time_report_{body.granularity.value}_{body.reference_date.strftime('%Y_%m_%d')}"
        else:
            stem = f"time_report_{body.granularity.value}"

        request_log.status_code = 200
        request_log.total_hours = summarize(buckets).active_hours
        _finish_log(request_log, start_time)

        return Response(
            content=excel_bytes,
            media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            headers={"Content-Disposition": f'attachment; filename="{stem}.xlsx"'},
        )

    except HTTPException as e:
        _finish_log(request_log, start_time, e)
        raise

    finally:
        if not request_log.status_code:
            request_log.status_code = 500
        log_request(request_log)
