"""
Calendar name classification.

Categories are assigned from the calendar's display name only; event titles
are not consulted.
"""

import json
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from core.config import CATEGORY_RULES, CATEGORY_RULES_PATH
from models.events import Category


@dataclass(frozen=True)
class CategoryRule:
    """Matches when the lower-cased name contains any of `contains` and none of `excludes`."""

    category: Category
    contains: tuple[str, ...]
    excludes: tuple[str, ...] = ()

    def matches(self, name: str) -> bool:
        if any(pattern in name for pattern in self.excludes):
            return False
        return any(pattern in name for pattern in self.contains)


def build_rules(table) -> tuple[CategoryRule, ...]:
    """Build rules from (category, contains, excludes) rows."""
    rules = []
    for row in table:
        category, contains, *rest = row
        excludes = rest[0] if rest else ()
        rules.append(
            CategoryRule(
                category=Category(category),
                contains=tuple(p.lower() for p in contains),
                excludes=tuple(p.lower() for p in excludes),
            )
        )
    return tuple(rules)


def load_category_rules(path: Path) -> tuple[CategoryRule, ...]:
    """
    Load an ordered rule table from a JSON file.

    Expected format:
        [{"category": "production", "contains": ["prod"], "excludes": ["nonprod"]}, ...]

    Raises:
        ValueError: if the file is not a list of rules or names an unknown category
    """
    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Category rules in {path} must be a JSON list")

    table = []
    for idx, entry in enumerate(data):
        if not isinstance(entry, dict) or "category" not in entry:
            raise ValueError(f"Rule {idx} in {path} is missing 'category'")
        contains = entry.get("contains") or []
        if isinstance(contains, str) or not contains:
            raise ValueError(f"Rule {idx} in {path} needs a non-empty 'contains' list")
        try:
            Category(entry["category"])
        except ValueError:
            valid = ", ".join(c.value for c in Category)
            raise ValueError(
                f"Rule {idx} in {path} has unknown category '{entry['category']}' (expected one of {valid})"
            )
        table.append((entry["category"], contains, entry.get("excludes") or ()))

    return build_rules(table)


@lru_cache(maxsize=1)
def default_rules() -> tuple[CategoryRule, ...]:
    """Rules from CATEGORY_RULES_PATH when set, otherwise the built-in table."""
    if CATEGORY_RULES_PATH:
        return load_category_rules(Path(CATEGORY_RULES_PATH))
    return build_rules(CATEGORY_RULES)


def classify(calendar_name: str | None, rules: tuple[CategoryRule, ...] | None = None) -> Category:
    """Assign a category to a calendar name. First matching rule wins."""
    if not calendar_name:
        return Category.OTHER

    name = calendar_name.lower()
    for rule in rules if rules is not None else default_rules():
        if rule.matches(name):
            return rule.category
    return Category.OTHER
