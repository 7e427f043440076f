"""
Event aggregation into per-day / per-category buckets, and summary statistics.

Both functions are pure: same events and parameters in, same buckets out.
Malformed events are counted with zero duration rather than raising.
"""

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Iterable
from zoneinfo import ZoneInfo

from core.classification import CategoryRule, classify
from core.config import DEFAULT_TIMEZONE
from core.periods import DateRange, Granularity, date_range_for
from models.events import CATEGORY_ORDER, Bucket, CalendarEvent, Category, Summary

logger = logging.getLogger(__name__)

# Key is a Category for the single-day view, (day, Category) otherwise
BucketKey = Category | tuple[date | None, Category]


def resolve_timezone(tz: ZoneInfo | str | None) -> ZoneInfo:
    """Reference timezone for bucketing, defaulting to DEFAULT_TIMEZONE."""
    if tz is None:
        return ZoneInfo(DEFAULT_TIMEZONE)
    if isinstance(tz, str):
        return ZoneInfo(tz)
    return tz


def to_zone(dt: datetime, tz: ZoneInfo) -> datetime:
    """Normalize into tz. Naive datetimes are taken as wall-clock time in tz."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def event_duration(event: CalendarEvent, tz: ZoneInfo) -> timedelta:
    """end - start on absolute time, clamped at zero. Missing timestamps give zero."""
    if event.start is None or event.end is None:
        return timedelta(0)

    start_utc = to_zone(event.start, tz).astimezone(timezone.utc)
    end_utc = to_zone(event.end, tz).astimezone(timezone.utc)
    duration = end_utc - start_utc
    if duration < timedelta(0):
        logger.debug("Event %r ends before it starts; counting zero duration", event.title)
        return timedelta(0)
    return duration


def event_day(event: CalendarEvent, tz: ZoneInfo) -> date | None:
    """Local calendar day the event is attributed to (its start day)."""
    if event.start is not None:
        return to_zone(event.start, tz).date()
    if event.end is not None:
        return to_zone(event.end, tz).date()
    return None


def _key_sort(key: BucketKey) -> tuple:
    if isinstance(key, Category):
        return (date.min, CATEGORY_ORDER.index(key))
    day, category = key
    return (day or date.min, CATEGORY_ORDER.index(category))


def aggregate(
    events: Iterable[CalendarEvent],
    granularity: Granularity | str = Granularity.DAY,
    *,
    tz: ZoneInfo | str | None = None,
    reference_date: date | None = None,
    date_range: DateRange | None = None,
    rules: tuple[CategoryRule, ...] | None = None,
) -> dict[BucketKey, Bucket]:
    """
    Tally event durations and counts by day and category.

    Args:
        events: Events to aggregate; never mutated
        granularity: day collapses to per-category buckets; week, month,
            quarter and year keep one bucket per (day, category)
        tz: Reference timezone used to decide an event's day
        reference_date: Injected "today". When given, every day/category of the
            granularity's range containing it gets a bucket, zero if empty.
        date_range: Explicit range to pre-populate instead (custom periods)
        rules: Category rules, defaults to the configured table

    Returns:
        Buckets ordered by day, then category order
    """
    granularity = Granularity.parse(granularity)
    tz = resolve_timezone(tz)
    single_day = granularity == Granularity.DAY

    buckets: dict[BucketKey, Bucket] = {}
    range_start = None

    if single_day:
        for category in CATEGORY_ORDER:
            buckets[category] = Bucket()
    elif date_range is not None or reference_date is not None:
        if date_range is None:
            date_range = date_range_for(granularity, reference_date)
        range_start = date_range.start
        for day in date_range.days():
            for category in CATEGORY_ORDER:
                buckets[(day, category)] = Bucket()

    classified = []
    for event in events:
        category = classify(event.calendar_name, rules)
        classified.append((event_day(event, tz), category, event_duration(event, tz)))

    if not single_day:
        fallback_day = range_start
        if fallback_day is None:
            known_days = [day for day, _, _ in classified if day is not None]
            fallback_day = min(known_days) if known_days else None

    for day, category, duration in classified:
        if single_day:
            key: BucketKey = category
        else:
            key = (day if day is not None else fallback_day, category)
        buckets.setdefault(key, Bucket()).add(duration)

    return {key: buckets[key] for key in sorted(buckets, key=_key_sort)}


def summarize(buckets: dict[BucketKey, Bucket]) -> Summary:
    """Total events, active time and the category with the most time."""
    per_category = {category: Bucket() for category in CATEGORY_ORDER}
    for key, bucket in buckets.items():
        category = key if isinstance(key, Category) else key[1]
        per_category[category].duration += bucket.duration
        per_category[category].count += bucket.count

    total_events = sum(b.count for b in per_category.values())
    total_duration = sum((b.duration for b in per_category.values()), timedelta(0))

    most_common = None
    for category in CATEGORY_ORDER:
        bucket = per_category[category]
        if bucket.count == 0:
            continue
        # Strict comparison keeps the earlier category on ties
        if most_common is None or bucket.duration > per_category[most_common].duration:
            most_common = category

    return Summary(
        total_events=total_events,
        total_duration=total_duration,
        most_common_category=most_common,
    )
