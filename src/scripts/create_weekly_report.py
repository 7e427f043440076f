#!/usr/bin/env python3
"""
Create weekly time report from the diary calendars.

Finds the 'Actual Diary - ...' calendars, fetches the week's events,
aggregates them per day and category, and writes a Numbers report.

Usage:
    uv run python src/scripts/create_weekly_report.py --date 2026-10-18
"""

import argparse
import sys
import traceback
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.aggregation import aggregate, summarize
from core.classification import default_rules
from core.config import DEFAULT_TIMEZONE, OUTPUT_DIR
from core.periods import Granularity, date_range_for
from services.calendar import discover_diary_calendars, fetch_calendar_events
from services.reports import create_weekly_numbers_report
from services.stats import build_time_stats, format_stats_summary


# =============================================================================
# DATE UTILITIES
# =============================================================================


def parse_as_of_date(as_of_date_str: str | None) -> date:
    """Parse YYYY-MM-DD, defaulting to today."""
    if as_of_date_str:
        return datetime.strptime(as_of_date_str, "%Y-%m-%d").date()
    return date.today()


# =============================================================================
# MAIN
# =============================================================================


def main(as_of_date_str: str | None = None, timezone: str = DEFAULT_TIMEZONE):
    """Main entry point."""
    try:
        # 0. Load category rules (a bad rules file fails here)
        rules = default_rules()
        print(f"Loaded {len(rules)} category rules")

        # 1. Calculate date range (Monday to Sunday of the as-of week)
        as_of = parse_as_of_date(as_of_date_str)
        date_range = date_range_for(Granularity.WEEK, as_of)
        print(f"Generating weekly report for {date_range.start} to {date_range.end}")

        # 2. Discover diary calendars
        calendars = discover_diary_calendars()

        if not calendars:
            print("No diary calendars found!")
            return

        # 3. Fetch events from all calendars
        print(f"\nFetching events from {len(calendars)} calendar(s)...")
        all_events = []
        for cal in calendars:
            print(f"  Fetching from {cal['calendar_name']} ({cal['category']})...")
            events = fetch_calendar_events(
                cal["calendar_id"],
                cal["calendar_name"],
                date_range.start,
                date_range.end,
                timezone,
            )
            print(f"    Found {len(events)} events")
            all_events.extend(events)

        print(f"\nTotal events: {len(all_events)}")

        # 4. Aggregate per day and category
        buckets = aggregate(all_events, Granularity.WEEK, tz=timezone, reference_date=as_of)
        summary = summarize(buckets)
        print(f"Active hours: {summary.active_hours}")

        stats = build_time_stats(buckets, date_range, f"week of {date_range.start}")
        print()
        print(format_stats_summary(stats))

        # 5. Generate Numbers file
        output_dir = OUTPUT_DIR / "reports" / "weekly"
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"time_weekly_report_{date_range.start.strftime('%Y_%m_%d')}.numbers"
        create_weekly_numbers_report(buckets, all_events, output_path, timezone)

        print("\nDone!")

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate weekly time report")
    parser.add_argument(
        "--date",
        help="As-of date (YYYY-MM-DD). Reports the Monday-Sunday week containing it. Defaults to today.",
    )
    parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help=f"IANA timezone used to assign events to days (default: {DEFAULT_TIMEZONE})",
    )
    args = parser.parse_args()

    main(args.date, args.timezone)
