"""
Time statistics views built from aggregation buckets.

Everything here returns plain dicts keyed by category value so any chart or
template layer can render it without further business logic.
"""

from datetime import date, timedelta

from core.aggregation import BucketKey, summarize
from core.config import CATEGORY_LABELS
from core.periods import DateRange
from models.events import CATEGORY_ORDER, Bucket, Category


def category_totals(buckets: dict[BucketKey, Bucket]) -> dict[Category, Bucket]:
    """Collapse any bucket mapping to one bucket per category."""
    totals = {category: Bucket() for category in CATEGORY_ORDER}
    for key, bucket in buckets.items():
        category = key if isinstance(key, Category) else key[1]
        totals[category].duration += bucket.duration
        totals[category].count += bucket.count
    return totals


def daily_breakdown(buckets: dict[BucketKey, Bucket]) -> dict[date | None, dict[Category, Bucket]]:
    """Per-day category buckets. Single-day buckets have no day and are skipped."""
    days: dict[date | None, dict[Category, Bucket]] = {}
    for key, bucket in buckets.items():
        if isinstance(key, Category):
            continue
        day, category = key
        row = days.setdefault(day, {c: Bucket() for c in CATEGORY_ORDER})
        row[category] = bucket
    return days


def _minutes(bucket: Bucket) -> float:
    return round(bucket.minutes, 2)


def _hours(duration: timedelta) -> float:
    """Hours at the same display precision as Summary.active_hours."""
    return round(duration.total_seconds() / 3600, 2)


def _percentage(part: timedelta, total: timedelta) -> int:
    if total <= timedelta(0):
        return 0
    return round(part / total * 100)


def build_time_stats(
    buckets: dict[BucketKey, Bucket],
    date_range: DateRange | None = None,
    label: str = "",
) -> dict:
    """
    Assemble the stats payload for renderers.

    Contains totals, per-category minutes/hours/percentage, the daily
    breakdown (multi-day buckets only) and the summary.
    """
    totals = category_totals(buckets)
    total = sum((b.duration for b in totals.values()), timedelta(0))
    total_minutes = round(total.total_seconds() / 60, 2)

    categories = {}
    for category, bucket in totals.items():
        minutes = _minutes(bucket)
        categories[category.value] = {
            "label": CATEGORY_LABELS[category.value],
            "minutes": minutes,
            "hours": _hours(bucket.duration),
            "count": bucket.count,
            "percentage": _percentage(bucket.duration, total),
        }

    breakdown = []
    for day, row in daily_breakdown(buckets).items():
        day_total = sum((b.duration for b in row.values()), timedelta(0))
        entry = {
            "date": day.isoformat() if day else None,
            "display_date": f"{day.strftime('%a, %b')} {day.day}" if day else "",
            "total": round(day_total.total_seconds() / 60, 2),
        }
        for category, bucket in row.items():
            entry[category.value] = _minutes(bucket)
        breakdown.append(entry)

    return {
        "period": label,
        "start_date": date_range.start.isoformat() if date_range else None,
        "end_date": date_range.end.isoformat() if date_range else None,
        "total_minutes": total_minutes,
        "total_hours": _hours(total),
        "categories": categories,
        "daily_breakdown": breakdown,
        "summary": summarize(buckets).to_dict(),
    }


def default_chart_type(date_range: DateRange | None) -> str:
    """Doughnut for a single day, stacked bars otherwise."""
    if date_range is None or date_range.is_single_day:
        return "doughnut"
    return "bar"


def chart_series(buckets: dict[BucketKey, Bucket]) -> dict:
    """
    Chart-ready series in minutes.

    Single-day buckets give {"labels": [category...], "values": [...]};
    multi-day buckets give {"labels": [date...], "series": {category: [...]}}.
    """
    breakdown = daily_breakdown(buckets)
    if not breakdown:
        totals = category_totals(buckets)
        return {
            "labels": [c.value for c in CATEGORY_ORDER],
            "values": [_minutes(totals[c]) for c in CATEGORY_ORDER],
        }

    return {
        "labels": [day.isoformat() if day else "" for day in breakdown],
        "series": {
            category.value: [_minutes(row[category]) for row in breakdown.values()]
            for category in CATEGORY_ORDER
        },
    }


def format_duration(minutes: float) -> str:
    """Format minutes as '2h 30m', '2h' or '45m'."""
    hours = int(minutes // 60)
    mins = int(minutes % 60)
    if hours > 0 and mins > 0:
        return f"{hours}h {mins}m"
    if hours > 0:
        return f"{hours}h"
    return f"{mins}m"


def format_stats_summary(stats: dict) -> str:
    """Plain-text summary of a build_time_stats payload."""
    label = stats.get("period") or "selected period"
    if stats["total_minutes"] <= 0 and stats["summary"]["total_events"] == 0:
        return f"Time Stats for {label}\n\nNo tracked activities found for this period."

    lines = [
        f"Time Stats for {label}",
        "",
        f"Total tracked time: {format_duration(stats['total_minutes'])}",
        f"Events: {stats['summary']['total_events']}",
        "",
    ]
    for category in CATEGORY_ORDER:
        entry = stats["categories"][category.value]
        if entry["minutes"] > 0:
            lines.append(
                f"{entry['label']}: {format_duration(entry['minutes'])} ({entry['percentage']}%)"
            )

    most_common = stats["summary"]["most_common_category"]
    if most_common:
        lines.append("")
        lines.append(f"Most time spent on: {CATEGORY_LABELS[most_common]}")

    return "\n".join(lines)
