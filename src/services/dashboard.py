"""
Dashboard state holder with debounced recomputation.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable

from core.aggregation import BucketKey, aggregate, summarize
from core.config import DEBOUNCE_DELAY_MS, DEFAULT_TIMEZONE
from core.debounce import Debouncer
from core.periods import DateRange, Granularity, date_range_for, range_label, shift_reference_date
from models.events import Bucket, CalendarEvent, Summary
from services.calendar import fetch_diary_events

logger = logging.getLogger(__name__)

# fetch_events(start_date, end_date, tz) -> events in that inclusive range
EventFetcher = Callable[[date, date, str], list[CalendarEvent]]


@dataclass
class DashboardView:
    """One recomputed view of the current range."""

    granularity: Granularity
    reference_date: date
    label: str
    date_range: DateRange
    events: list[CalendarEvent] = field(default_factory=list)
    buckets: dict[BucketKey, Bucket] = field(default_factory=dict)
    summary: Summary | None = None


class TimeStatsDashboard:
    """
    Tracks the selected range and pushes a fresh view whenever it changes.

    Every recompute fetches the events of the range being shown, so a view
    never carries events left over from a previous range. Requests go through
    a Debouncer: a burst of changes (range navigation, view mode switches,
    viewport resizes) results in one fetch and one recomputation using the
    most recent settings. Results are pushed to `on_update`.
    """

    def __init__(
        self,
        on_update: Callable[[DashboardView], None],
        reference_date: date,
        granularity: Granularity | str = Granularity.DAY,
        timezone: str = DEFAULT_TIMEZONE,
        delay_ms: int = DEBOUNCE_DELAY_MS,
        fetch_events: EventFetcher | None = None,
    ):
        self.on_update = on_update
        self.reference_date = reference_date
        self.granularity = Granularity.parse(granularity)
        self.timezone = timezone
        self.fetch_events = fetch_events or fetch_diary_events
        self.view: DashboardView | None = None
        self._debouncer = Debouncer(self._recompute, delay_ms=delay_ms)

    @property
    def date_range(self) -> DateRange:
        return date_range_for(self.granularity, self.reference_date)

    def refresh(self) -> None:
        """Refetch the current range (e.g. after the calendar changed)."""
        self.request_recompute()

    def set_granularity(self, granularity: Granularity | str) -> None:
        self.granularity = Granularity.parse(granularity)
        self.request_recompute()

    def navigate(self, direction: int) -> None:
        """Move to the previous (-1) or next (+1) range."""
        self.reference_date = shift_reference_date(self.reference_date, self.granularity, direction)
        self.request_recompute()

    def request_recompute(self) -> None:
        self._debouncer(self.granularity, self.reference_date)

    def flush(self) -> bool:
        """Run a pending recompute immediately."""
        return self._debouncer.flush()

    def close(self) -> None:
        self._debouncer.cancel()

    def compute(
        self,
        granularity: Granularity,
        reference_date: date,
        events: list[CalendarEvent],
    ) -> DashboardView:
        date_range = date_range_for(granularity, reference_date)
        buckets = aggregate(
            events,
            granularity,
            tz=self.timezone,
            reference_date=reference_date,
        )
        return DashboardView(
            granularity=granularity,
            reference_date=reference_date,
            label=range_label(granularity, reference_date),
            date_range=date_range,
            events=list(events),
            buckets=buckets,
            summary=summarize(buckets),
        )

    def _recompute(self, granularity: Granularity, reference_date: date) -> None:
        date_range = date_range_for(granularity, reference_date)
        events = self.fetch_events(date_range.start, date_range.end, self.timezone)

        view = self.compute(granularity, reference_date, events)
        logger.debug("Recomputed %s view for %s: %d events", granularity.value, view.label, view.summary.total_events)
        self.view = view
        self.on_update(view)
