"""Pydantic request models for API endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from core.periods import Granularity
from models.events import CalendarEvent


class EventIn(BaseModel):
    """Calendar event as delivered by the calendar-fetch collaborator."""

    model_config = ConfigDict(populate_by_name=True)

    calendar_name: str | None = Field(default=None, alias="calendarName")
    start: datetime | None = None
    end: datetime | None = None
    title: str = ""

    def to_event(self) -> CalendarEvent:
        return CalendarEvent(
            calendar_name=self.calendar_name,
            start=self.start,
            end=self.end,
            title=self.title or "",
        )


class StatsRequest(BaseModel):
    """Events plus the view to aggregate them for."""

    model_config = ConfigDict(populate_by_name=True)

    events: list[EventIn] = []
    granularity: Granularity = Granularity.DAY
    reference_date: date | None = Field(default=None, alias="referenceDate")
    timezone: str | None = None
