"""
Date range utilities for dashboard views and named reporting periods.

All functions take the reference date explicitly; nothing here reads the clock.
"""

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from enum import Enum
from typing import Iterator


class Granularity(str, Enum):
    """Dashboard range selection."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def parse(cls, value: "Granularity | str") -> "Granularity":
        """Accept enum members or their string values ('today' is an alias for day)."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "today":
            return cls.DAY
        try:
            return cls(normalized)
        except ValueError:
            valid = ", ".join(g.value for g in cls)
            raise ValueError(f"Unknown granularity '{value}' (expected one of {valid})")


@dataclass(frozen=True)
class DateRange:
    """Inclusive range of calendar days."""

    start: date
    end: date

    @property
    def is_single_day(self) -> bool:
        return self.start == self.end

    def days(self) -> Iterator[date]:
        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end


def _last_day_of_month(year: int, month: int) -> date:
    _, last_day = calendar.monthrange(year, month)
    return date(year, month, last_day)


def _add_months(d: date, months: int) -> date:
    """Move by whole months, clamping the day to the target month's length."""
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def week_start(d: date) -> date:
    """Monday of the week containing d."""
    return d - timedelta(days=d.weekday())


def date_range_for(granularity: Granularity | str, reference_date: date) -> DateRange:
    """Range of the given granularity that contains reference_date."""
    granularity = Granularity.parse(granularity)

    if granularity == Granularity.DAY:
        return DateRange(reference_date, reference_date)
    if granularity == Granularity.WEEK:
        start = week_start(reference_date)
        return DateRange(start, start + timedelta(days=6))
    if granularity == Granularity.MONTH:
        return DateRange(
            reference_date.replace(day=1),
            _last_day_of_month(reference_date.year, reference_date.month),
        )
    if granularity == Granularity.QUARTER:
        first_month = (reference_date.month - 1) // 3 * 3 + 1
        return DateRange(
            date(reference_date.year, first_month, 1),
            _last_day_of_month(reference_date.year, first_month + 2),
        )
    return DateRange(date(reference_date.year, 1, 1), date(reference_date.year, 12, 31))


def shift_reference_date(reference_date: date, granularity: Granularity | str, direction: int) -> date:
    """Step the reference date one range backwards (-1) or forwards (+1)."""
    granularity = Granularity.parse(granularity)

    if granularity == Granularity.DAY:
        return reference_date + timedelta(days=direction)
    if granularity == Granularity.WEEK:
        return reference_date + timedelta(days=7 * direction)
    if granularity == Granularity.MONTH:
        return _add_months(reference_date, direction)
    if granularity == Granularity.QUARTER:
        return _add_months(reference_date, 3 * direction)
    return _add_months(reference_date, 12 * direction)


def format_date_short(d: date) -> str:
    """Format date as 'Mon D' (platform-safe, e.g., 'Nov 7')."""
    return f"{d.strftime('%b')} {d.day}"


def range_label(granularity: Granularity | str, reference_date: date) -> str:
    """Header text for the current dashboard range."""
    granularity = Granularity.parse(granularity)

    if granularity == Granularity.DAY:
        return f"{reference_date.strftime('%A')}, {format_date_short(reference_date)}"
    if granularity == Granularity.YEAR:
        return str(reference_date.year)
    if granularity == Granularity.QUARTER:
        quarter = (reference_date.month - 1) // 3 + 1
        return f"Q{quarter} {reference_date.year}"

    date_range = date_range_for(granularity, reference_date)
    return f"{format_date_short(date_range.start)} - {format_date_short(date_range.end)}"


# =============================================================================
# NAMED PERIODS
# =============================================================================

NAMED_PERIODS = ("today", "yesterday", "this_week", "last_week", "this_month", "last_month", "custom")


def resolve_period(
    period: str | None,
    today: date,
    single_date: date | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
) -> tuple[DateRange, str]:
    """
    Resolve a named period relative to `today`.

    An explicit single_date overrides the period. Unknown periods fall back to
    this_week.

    Returns:
        Tuple of (date_range, period_label)

    Raises:
        ValueError: for a custom period without both bounds, or with from > to
    """
    if single_date:
        label = f"{single_date.strftime('%A, %B')} {single_date.day}, {single_date.year}"
        return DateRange(single_date, single_date), label

    if period == "today":
        return DateRange(today, today), "Today"

    if period == "yesterday":
        yesterday = today - timedelta(days=1)
        return DateRange(yesterday, yesterday), "Yesterday"

    if period == "last_week":
        start = week_start(today) - timedelta(days=7)
        return DateRange(start, start + timedelta(days=6)), "Last Week"

    if period == "this_month":
        return DateRange(today.replace(day=1), today), "This Month"

    if period == "last_month":
        end = today.replace(day=1) - timedelta(days=1)
        return DateRange(end.replace(day=1), end), "Last Month"

    if period == "custom":
        if not from_date or not to_date:
            raise ValueError("from and to dates are required for custom period")
        if from_date > to_date:
            raise ValueError(f"from date {from_date} is after to date {to_date}")
        return DateRange(from_date, to_date), f"{from_date.isoformat()} to {to_date.isoformat()}"

    # this_week and anything unrecognised
    return DateRange(week_start(today), today), "This Week"
