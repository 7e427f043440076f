#!/usr/bin/env python3
"""
Create monthly time report from the diary calendars.

Generates Excel report with three sheets:
- Daily Breakdown: Hours per day and category with SUM formulas
- Event Detail: One row per event
- Summary: Totals, most common category and category shares

Usage:
    uv run python src/scripts/create_monthly_report.py --month 2026-09
"""

import argparse
import sys
import traceback
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.aggregation import aggregate, summarize
from core.classification import default_rules
from core.config import DEFAULT_TIMEZONE, OUTPUT_DIR
from core.periods import Granularity, date_range_for, shift_reference_date
from services.calendar import fetch_diary_events
from services.reports import create_excel_report


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_month_reference(month_str: str | None, today: date) -> date:
    """
    First day of the target month.

    Args:
        month_str: Optional month string (YYYY-MM). Uses previous month if None.
        today: Reference date for the default
    """
    if month_str:
        year, month = map(int, month_str.split("-"))
        return date(year, month, 1)
    return shift_reference_date(today.replace(day=1), Granularity.MONTH, -1)


# =============================================================================
# MAIN
# =============================================================================


def main(month_str: str | None = None, timezone: str = DEFAULT_TIMEZONE):
    """Main entry point for monthly report."""
    try:
        # 0. Load category rules (a bad rules file fails here)
        rules = default_rules()
        print(f"Loaded {len(rules)} category rules")

        # 1. Calculate date range (full month)
        reference = get_month_reference(month_str, date.today())
        date_range = date_range_for(Granularity.MONTH, reference)
        print(f"Generating monthly report for {date_range.start} to {date_range.end}")

        # 2. Fetch events from all diary calendars
        events = fetch_diary_events(date_range.start, date_range.end, timezone)
        print(f"\nTotal events: {len(events)}")

        if not events:
            print("No tracked activities found for this month.")

        # 3. Aggregate per day and category
        buckets = aggregate(events, Granularity.MONTH, tz=timezone, reference_date=reference)
        summary = summarize(buckets)
        print(f"Active hours: {summary.active_hours}")
        if summary.most_common_category:
            print(f"Most common category: {summary.most_common_category.value}")

        # 4. Generate Excel file
        output_dir = OUTPUT_DIR / "reports" / "monthly"
        output_dir.mkdir(parents=True, exist_ok=True)
        output_path = output_dir / f"time_monthly_report_{reference.strftime('%Y_%m')}.xlsx"
        create_excel_report(buckets, events, output_path, timezone)

        print("\nDone!")

    except Exception as e:
        print(f"\nError: {e}")
        traceback.print_exc()
        raise


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate monthly time report")
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to previous month.",
    )
    parser.add_argument(
        "--timezone",
        default=DEFAULT_TIMEZONE,
        help=f"IANA timezone used to assign events to days (default: {DEFAULT_TIMEZONE})",
    )
    args = parser.parse_args()

    main(args.month, args.timezone)
