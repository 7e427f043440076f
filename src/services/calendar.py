"""
Calendar discovery and event fetching from Google Calendar.
"""

import logging
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from googleapiclient.errors import HttpError

from core.aggregation import resolve_timezone
from core.classification import classify
from core.config import DIARY_CALENDAR_PATTERN
from core.google_client import get_calendar_service
from models.events import CalendarEvent, CalendarInfo

logger = logging.getLogger(__name__)

PAGE_SIZE = 250


class CalendarFetchError(RuntimeError):
    """Calendar API request failed."""


def list_calendars() -> list[dict]:
    """All calendars on the account's calendar list, following pagination."""
    service = get_calendar_service()
    calendars = []
    page_token = None

    try:
        while True:
            response = service.calendarList().list(pageToken=page_token).execute()
            calendars.extend(response.get("items", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
    except HttpError as e:
        raise CalendarFetchError(f"Failed to list calendars: {e}") from e

    return calendars


def discover_diary_calendars() -> list[CalendarInfo]:
    """
    Find calendars whose name contains DIARY_CALENDAR_PATTERN (case-insensitive).

    Returns:
        List of CalendarInfo dicts with calendar_id, calendar_name, category
    """
    pattern = DIARY_CALENDAR_PATTERN.lower()
    found = []

    for calendar in list_calendars():
        name = calendar.get("summary") or ""
        if pattern and pattern not in name.lower():
            continue
        found.append(
            {
                "calendar_id": calendar["id"],
                "calendar_name": name,
                "category": classify(name).value,
            }
        )
        logger.info("Found diary calendar: %s", name)

    return found


def _parse_timestamp(value: dict | None, tz: ZoneInfo) -> datetime | None:
    """Parse a Google start/end object. All-day dates map to local midnight."""
    if not value:
        return None
    try:
        if value.get("dateTime"):
            return datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00"))
        if value.get("date"):
            return datetime.combine(date.fromisoformat(value["date"]), time.min, tzinfo=tz)
    except ValueError:
        logger.debug("Unparsable timestamp %r", value)
    return None


def parse_event(item: dict, calendar_name: str, tz: ZoneInfo | str | None = None) -> CalendarEvent:
    """
    Parse a Google Calendar event resource into our format.

    All-day events become zero-length events at the start of their date so
    they are counted on the right day without contributing time.
    """
    tz = resolve_timezone(tz)
    start = _parse_timestamp(item.get("start"), tz)
    end = _parse_timestamp(item.get("end"), tz)

    start_info = item.get("start") or {}
    if start_info.get("date") and not start_info.get("dateTime"):
        end = start

    return CalendarEvent(
        calendar_name=calendar_name,
        start=start,
        end=end,
        title=item.get("summary") or "",
    )


def fetch_calendar_events(
    calendar_id: str,
    calendar_name: str,
    start_date: date,
    end_date: date,
    tz: ZoneInfo | str | None = None,
) -> list[CalendarEvent]:
    """
    Fetch all events from a calendar within an inclusive local date range.

    Handles pagination; recurring events are expanded into instances.

    Raises:
        CalendarFetchError: if the API request fails
    """
    tz = resolve_timezone(tz)
    service = get_calendar_service()

    # End date should include the full day
    time_min = datetime.combine(start_date, time.min, tzinfo=tz).isoformat()
    time_max = datetime.combine(end_date + timedelta(days=1), time.min, tzinfo=tz).isoformat()

    events = []
    page_token = None
    try:
        while True:
            response = (
                service.events()
                .list(
                    calendarId=calendar_id,
                    timeMin=time_min,
                    timeMax=time_max,
                    singleEvents=True,
                    orderBy="startTime",
                    maxResults=PAGE_SIZE,
                    pageToken=page_token,
                )
                .execute()
            )
            for item in response.get("items", []):
                if item.get("status") == "cancelled":
                    continue
                events.append(parse_event(item, calendar_name, tz))
            page_token = response.get("nextPageToken")
            if not page_token:
                break
    except HttpError as e:
        raise CalendarFetchError(f"Failed to fetch events from {calendar_name}: {e}") from e

    return events


def fetch_diary_events(start_date: date, end_date: date, tz: ZoneInfo | str | None = None) -> list[CalendarEvent]:
    """Fetch events from every diary calendar, ordered by start time."""
    all_events = []
    for cal in discover_diary_calendars():
        events = fetch_calendar_events(cal["calendar_id"], cal["calendar_name"], start_date, end_date, tz)
        logger.info("Fetched %d events from %s", len(events), cal["calendar_name"])
        all_events.extend(events)

    return sorted(all_events, key=lambda e: (e.start is None, e.start.timestamp() if e.start else 0.0))
