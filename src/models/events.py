"""
Data models for calendar events and aggregation results.

Calendar discovery results stay TypedDicts; events and buckets are dataclasses
since the aggregation code works with them directly.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import TypedDict


class Category(str, Enum):
    """Activity category. Declaration order is the tie-break order."""

    PRODUCTION = "production"
    NON_PRODUCTION = "non_production"
    ADMIN_REST = "admin_rest"
    OTHER = "other"


CATEGORY_ORDER = list(Category)


class CalendarInfo(TypedDict):
    """Calendar discovery result."""
    calendar_id: str
    calendar_name: str
    category: str


@dataclass(frozen=True)
class CalendarEvent:
    """Parsed calendar event."""
    calendar_name: str | None
    start: datetime | None
    end: datetime | None
    title: str = ""


@dataclass
class Bucket:
    """Cumulative duration and event count for one aggregation key."""
    duration: timedelta = timedelta(0)
    count: int = 0

    def add(self, duration: timedelta) -> None:
        self.duration += duration
        self.count += 1

    @property
    def minutes(self) -> float:
        return self.duration.total_seconds() / 60

    @property
    def hours(self) -> float:
        return self.duration.total_seconds() / 3600


@dataclass(frozen=True)
class Summary:
    """Headline statistics for a set of buckets."""
    total_events: int
    total_duration: timedelta
    most_common_category: Category | None

    @property
    def active_hours(self) -> float:
        """Active hours rounded for display."""
        return round(self.total_duration.total_seconds() / 3600, 2)

    def to_dict(self) -> dict:
        return {
            "total_events": self.total_events,
            "active_hours": self.active_hours,
            "most_common_category": (
                self.most_common_category.value if self.most_common_category else None
            ),
        }
