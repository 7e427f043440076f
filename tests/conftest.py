"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo

import pytest

# Add src and the fixture helpers to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
sys.path.insert(0, str(Path(__file__).parent / "fixtures"))

from models.events import CalendarEvent  # noqa: E402

DENVER = ZoneInfo("America/Denver")


@pytest.fixture
def tz():
    """Reference timezone used across tests."""
    return DENVER


@pytest.fixture
def day():
    return date(2026, 10, 14)


@pytest.fixture
def sample_event(day):
    """Two-hour production event."""
    return CalendarEvent(
        calendar_name="Actual Diary - Prod",
        start=datetime(2026, 10, 14, 9, 0, tzinfo=DENVER),
        end=datetime(2026, 10, 14, 11, 0, tzinfo=DENVER),
        title="Deep work",
    )


@pytest.fixture
def sample_events(sample_event):
    """Prod 2h, admin 30m and an unnamed 1h event on the same day."""
    return [
        sample_event,
        CalendarEvent(
            calendar_name="Actual Diary - Admin",
            start=datetime(2026, 10, 14, 11, 0, tzinfo=DENVER),
            end=datetime(2026, 10, 14, 11, 30, tzinfo=DENVER),
            title="Email",
        ),
        CalendarEvent(
            calendar_name=None,
            start=datetime(2026, 10, 14, 14, 0, tzinfo=DENVER),
            end=datetime(2026, 10, 14, 15, 0, tzinfo=DENVER),
            title="Walk",
        ),
    ]
