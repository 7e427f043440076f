#!/usr/bin/env python3
"""
List the account's Google calendars and the category each would get.

Usage:
    uv run python src/scripts/list_calendars.py
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.classification import classify, default_rules
from core.config import DIARY_CALENDAR_PATTERN
from services.calendar import list_calendars


def main():
    """List all calendars with their category."""
    rules = default_rules()
    print(f"Loaded {len(rules)} category rules")

    print("Fetching calendars from Google...\n")
    calendars = list_calendars()

    print(f"Found {len(calendars)} calendars\n")
    print("=" * 80)

    pattern = DIARY_CALENDAR_PATTERN.lower()
    for cal in calendars:
        name = cal.get("summary") or ""
        marker = "*" if pattern and pattern in name.lower() else " "
        print(f"\n{marker} {name}")
        print(f"  ID: {cal['id']}")
        print(f"  Category: {classify(name).value}")
        if cal.get("timeZone"):
            print(f"  Time zone: {cal['timeZone']}")
        print("-" * 80)

    print(f"\n* = matches diary pattern '{DIARY_CALENDAR_PATTERN}'")
    print("\nDone!")


if __name__ == "__main__":
    main()
