"""
Tests for report script helpers.
"""

import json
from datetime import date

import pytest

from core import classification
from scripts import create_monthly_report, create_weekly_report
from scripts.create_monthly_report import get_month_reference
from scripts.create_weekly_report import parse_as_of_date


@pytest.fixture
def bad_rules(monkeypatch, tmp_path):
    path = tmp_path / "rules.json"
    path.write_text(json.dumps([{"category": "fun", "contains": ["game"]}]))
    monkeypatch.setattr(classification, "CATEGORY_RULES_PATH", str(path))
    classification.default_rules.cache_clear()
    yield path
    classification.default_rules.cache_clear()


def _fail_fetch(*args, **kwargs):
    raise AssertionError("calendar fetched despite invalid category rules")


def test_month_reference_explicit():
    assert get_month_reference("2026-09", date(2026, 10, 18)) == date(2026, 9, 1)


def test_month_reference_defaults_to_previous_month():
    assert get_month_reference(None, date(2026, 10, 18)) == date(2026, 9, 1)
    assert get_month_reference(None, date(2026, 1, 31)) == date(2025, 12, 1)


def test_parse_as_of_date():
    assert parse_as_of_date("2026-10-18") == date(2026, 10, 18)


def test_monthly_report_rejects_bad_rules_before_fetching(bad_rules, monkeypatch):
    monkeypatch.setattr(create_monthly_report, "fetch_diary_events", _fail_fetch)
    with pytest.raises(ValueError, match="unknown category"):
        create_monthly_report.main("2026-09")


def test_weekly_report_rejects_bad_rules_before_fetching(bad_rules, monkeypatch):
    monkeypatch.setattr(create_weekly_report, "discover_diary_calendars", _fail_fetch)
    with pytest.raises(ValueError, match="unknown category"):
        create_weekly_report.main("2026-10-14")
