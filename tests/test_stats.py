"""
Tests for the time stats payload and its text rendering.
"""

from datetime import date, datetime, timedelta

from core.aggregation import aggregate
from core.periods import DateRange, date_range_for
from models.events import CalendarEvent
from services.stats import (
    build_time_stats,
    chart_series,
    default_chart_type,
    format_duration,
    format_stats_summary,
)


def test_day_stats(sample_events, tz, day):
    buckets = aggregate(sample_events, "day", tz=tz)
    stats = build_time_stats(buckets, DateRange(day, day), "Today")

    assert stats["period"] == "Today"
    assert stats["start_date"] == stats["end_date"] == "2026-10-14"
    assert stats["total_minutes"] == 210
    assert stats["total_hours"] == 3.5
    assert stats["daily_breakdown"] == []

    production = stats["categories"]["production"]
    assert production == {
        "label": "Production Work",
        "minutes": 120,
        "hours": 2.0,
        "count": 1,
        "percentage": 57,
    }
    assert stats["categories"]["non_production"]["percentage"] == 0
    assert stats["summary"]["most_common_category"] == "production"


def test_week_stats_daily_breakdown(sample_events, tz, day):
    buckets = aggregate(sample_events, "week", tz=tz, reference_date=day)
    stats = build_time_stats(buckets, date_range_for("week", day), "This Week")

    breakdown = stats["daily_breakdown"]
    assert len(breakdown) == 7
    assert breakdown[0]["date"] == "2026-10-12"
    wednesday = breakdown[2]
    assert wednesday["display_date"] == "Wed, Oct 14"
    assert wednesday["total"] == 210
    assert wednesday["admin_rest"] == 30
    assert breakdown[3]["total"] == 0


def test_chart_types():
    assert default_chart_type(None) == "doughnut"
    assert default_chart_type(DateRange(date(2026, 10, 14), date(2026, 10, 14))) == "doughnut"
    assert default_chart_type(DateRange(date(2026, 10, 12), date(2026, 10, 18))) == "bar"


def test_chart_series_single_day(sample_events, tz):
    series = chart_series(aggregate(sample_events, "day", tz=tz))
    assert series == {
        "labels": ["production", "non_production", "admin_rest", "other"],
        "values": [120, 0, 30, 60],
    }


def test_chart_series_multi_day(sample_events, tz, day):
    series = chart_series(aggregate(sample_events, "week", tz=tz, reference_date=day))
    assert series["labels"][0] == "2026-10-12"
    assert series["series"]["production"] == [0, 0, 120, 0, 0, 0, 0]


def test_format_duration():
    assert format_duration(150) == "2h 30m"
    assert format_duration(120) == "2h"
    assert format_duration(45) == "45m"
    assert format_duration(0) == "0m"


def test_format_summary(sample_events, tz):
    stats = build_time_stats(aggregate(sample_events, "day", tz=tz), label="Today")
    text = format_stats_summary(stats)

    assert text.startswith("Time Stats for Today")
    assert "Total tracked time: 3h 30m" in text
    assert "Production Work: 2h (57%)" in text
    assert "Non-Production" not in text
    assert text.endswith("Most time spent on: Production Work")


def test_format_summary_empty(tz):
    stats = build_time_stats(aggregate([], "day", tz=tz), label="Yesterday")
    assert format_stats_summary(stats) == (
        "Time Stats for Yesterday\n\nNo tracked activities found for this period."
    )


def test_hours_share_summary_precision(tz):
    start = datetime(2026, 10, 14, 9, tzinfo=tz)
    events = [CalendarEvent("Actual Diary - Prod", start, start + timedelta(minutes=20))]

    stats = build_time_stats(aggregate(events, "day", tz=tz), label="Today")

    assert stats["summary"]["active_hours"] == 0.33
    assert stats["total_hours"] == 0.33
    assert stats["categories"]["production"]["hours"] == 0.33
