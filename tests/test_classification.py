"""
Tests for calendar name classification.
"""

import json

import pytest

from core.classification import CategoryRule, build_rules, classify, load_category_rules
from models.events import Category


class TestClassify:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Actual Diary - Prod", Category.PRODUCTION),
            ("Actual Diary - Nonprod", Category.NON_PRODUCTION),
            ("Actual Diary - Admin/Rest/Routine", Category.ADMIN_REST),
            ("Admin", Category.ADMIN_REST),
            ("Rest days", Category.ADMIN_REST),
            ("Birthdays", Category.OTHER),
            ("Production support", Category.PRODUCTION),
        ],
    )
    def test_diary_calendars(self, name, expected):
        assert classify(name) == expected

    def test_nonprod_is_not_production(self):
        # "Nonprod" contains "prod"; the exclusion must win
        assert classify("Actual Diary - Nonprod") == Category.NON_PRODUCTION
        assert classify("NONPROD") == Category.NON_PRODUCTION

    def test_case_insensitive(self):
        assert classify("ADMIN Tasks") == classify("admin tasks") == Category.ADMIN_REST
        assert classify("actual diary - PROD") == Category.PRODUCTION

    @pytest.mark.parametrize("name", [None, ""])
    def test_missing_name_is_other(self, name):
        assert classify(name) == Category.OTHER

    def test_prod_checked_before_admin(self):
        assert classify("Prod admin") == Category.PRODUCTION

    def test_routine_alone_is_other(self):
        assert classify("Routine") == Category.OTHER

    def test_every_name_gets_one_category(self):
        names = ["x", "prod", "nonprod", "admin", "rest", "   ", "Ünïcode", "interest"]
        for name in names:
            assert classify(name) in set(Category)


class TestRules:
    def test_custom_rules_replace_defaults(self):
        rules = build_rules([("admin_rest", ["routine"], [])])
        assert classify("Routine", rules) == Category.ADMIN_REST
        assert classify("Actual Diary - Prod", rules) == Category.OTHER

    def test_first_match_wins(self):
        rules = (
            CategoryRule(Category.NON_PRODUCTION, ("work",)),
            CategoryRule(Category.PRODUCTION, ("work",)),
        )
        assert classify("Work", rules) == Category.NON_PRODUCTION

    def test_patterns_are_lowercased(self):
        rules = build_rules([("production", ["PROD"], ["NonProd"])])
        assert classify("prod", rules) == Category.PRODUCTION
        assert classify("nonprod", rules) == Category.OTHER

    def test_load_from_json(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(
            json.dumps(
                [
                    {"category": "production", "contains": ["prod"], "excludes": ["nonprod"]},
                    {"category": "non_production", "contains": ["nonprod"]},
                    {"category": "admin_rest", "contains": ["admin", "rest", "routine"]},
                ]
            )
        )
        rules = load_category_rules(path)
        assert len(rules) == 3
        assert classify("Routine", rules) == Category.ADMIN_REST
        assert classify("Nonprod", rules) == Category.NON_PRODUCTION

    def test_load_rejects_unknown_category(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([{"category": "fun", "contains": ["game"]}]))
        with pytest.raises(ValueError, match="unknown category"):
            load_category_rules(path)

    def test_load_rejects_non_list(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps({"category": "production"}))
        with pytest.raises(ValueError, match="JSON list"):
            load_category_rules(path)

    def test_load_rejects_empty_contains(self, tmp_path):
        path = tmp_path / "rules.json"
        path.write_text(json.dumps([{"category": "production", "contains": []}]))
        with pytest.raises(ValueError, match="contains"):
            load_category_rules(path)
