"""
Tests for the debouncer and the dashboard recompute flow.
"""

import threading
from datetime import date, timedelta
from zoneinfo import ZoneInfo

import pytest

from core.debounce import Debouncer
from core.periods import Granularity
from models.events import Category
from services.calendar import CalendarFetchError
from services.dashboard import TimeStatsDashboard


class TestDebouncer:
    def test_burst_runs_once_with_last_arguments(self):
        calls = []
        done = threading.Event()

        def record(value):
            calls.append(value)
            done.set()

        debounced = Debouncer(record, delay_ms=50)
        for value in range(5):
            debounced(value)

        assert done.wait(2)
        # Give a superseded timer a chance to misfire
        threading.Event().wait(0.15)
        assert calls == [4]
        assert not debounced.pending

    def test_flush_runs_pending_now(self):
        calls = []
        debounced = Debouncer(calls.append, delay_ms=10_000)

        debounced("a")
        debounced("b")
        assert debounced.pending

        assert debounced.flush() is True
        assert calls == ["b"]
        assert debounced.flush() is False
        assert calls == ["b"]

    def test_cancel_drops_pending(self):
        calls = []
        debounced = Debouncer(calls.append, delay_ms=30)

        debounced("a")
        debounced.cancel()
        threading.Event().wait(0.1)

        assert calls == []
        assert not debounced.pending

    def test_kwargs_passed_through(self):
        calls = []
        debounced = Debouncer(lambda **kw: calls.append(kw), delay_ms=10_000)
        debounced(granularity="week")
        debounced(granularity="month")
        debounced.flush()
        assert calls == [{"granularity": "month"}]

    def test_errors_on_timer_thread_are_logged(self, caplog):
        done = threading.Event()

        def boom():
            done.set()
            raise RuntimeError("recompute failed")

        debounced = Debouncer(boom, delay_ms=10)
        with caplog.at_level("ERROR", logger="core.debounce"):
            debounced()
            assert done.wait(2)
            threading.Event().wait(0.1)

        assert "Debounced call" in caplog.text

    def test_flush_propagates_errors(self):
        def boom():
            raise RuntimeError("recompute failed")

        debounced = Debouncer(boom, delay_ms=10_000)
        debounced()
        with pytest.raises(RuntimeError):
            debounced.flush()

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            Debouncer(print, delay_ms=-1)


class FakeFetcher:
    """Serves events from a fixed pool and records each requested range."""

    def __init__(self, events):
        self.events = events
        self.calls = []

    def __call__(self, start_date, end_date, tz):
        self.calls.append((start_date, end_date))
        zone = ZoneInfo(tz) if isinstance(tz, str) else tz
        return [e for e in self.events if start_date <= e.start.astimezone(zone).date() <= end_date]


@pytest.fixture
def fetcher(sample_events):
    return FakeFetcher(sample_events)


class TestDashboard:
    def _dashboard(self, views, day, fetcher, **kwargs):
        kwargs.setdefault("delay_ms", 10_000)
        return TimeStatsDashboard(views.append, reference_date=day, fetch_events=fetcher, **kwargs)

    def test_burst_of_changes_yields_single_fetch_and_update(self, fetcher, day):
        views = []
        dashboard = self._dashboard(views, day, fetcher)

        dashboard.refresh()
        dashboard.set_granularity("week")
        dashboard.navigate(-1)
        dashboard.navigate(1)
        dashboard.set_granularity("month")

        assert dashboard.flush() is True
        assert len(views) == 1
        assert fetcher.calls == [(date(2026, 10, 1), date(2026, 10, 31))]

        view = views[0]
        assert view.granularity == Granularity.MONTH
        assert view.reference_date == day
        assert view.label == "Oct 1 - Oct 31"
        assert view.summary.total_events == 3
        assert view.summary.most_common_category == Category.PRODUCTION
        assert len(view.buckets) == 31 * 4

    def test_day_view(self, fetcher, day):
        views = []
        dashboard = self._dashboard(views, day, fetcher)
        dashboard.refresh()
        dashboard.flush()

        view = views[0]
        assert fetcher.calls == [(day, day)]
        assert view.label == "Wednesday, Oct 14"
        assert view.buckets[Category.ADMIN_REST].duration == timedelta(minutes=30)
        assert view.summary.active_hours == 3.5

    def test_navigating_away_fetches_the_new_range(self, fetcher, day):
        views = []
        dashboard = self._dashboard(views, day, fetcher)
        dashboard.refresh()
        dashboard.flush()

        dashboard.navigate(-1)
        dashboard.flush()

        assert fetcher.calls[-1] == (date(2026, 10, 13), date(2026, 10, 13))
        view = views[-1]
        assert view.label == "Tuesday, Oct 13"
        assert view.events == []
        assert view.summary.total_events == 0
        assert view.summary.active_hours == 0
        assert view.summary.most_common_category is None

    def test_previous_week_view_is_empty(self, fetcher, day):
        views = []
        dashboard = self._dashboard(views, day, fetcher, granularity="week")
        dashboard.navigate(-1)
        dashboard.flush()

        assert dashboard.reference_date == date(2026, 10, 7)
        assert dashboard.date_range.start == date(2026, 10, 5)
        assert fetcher.calls == [(date(2026, 10, 5), date(2026, 10, 11))]

        view = views[0]
        assert view.label == "Oct 5 - Oct 11"
        assert view.summary.total_events == 0
        assert {key[0] for key in view.buckets} == set(view.date_range.days())

    def test_switching_granularity_refetches(self, fetcher, day):
        views = []
        dashboard = self._dashboard(views, day - timedelta(days=1), fetcher)
        dashboard.refresh()
        dashboard.flush()
        assert views[-1].summary.total_events == 0

        dashboard.set_granularity("week")
        dashboard.flush()

        assert fetcher.calls[-1] == (date(2026, 10, 12), date(2026, 10, 18))
        assert views[-1].summary.total_events == 3
        assert views[-1].summary.active_hours == 3.5
        assert dashboard.view is views[-1]

    def test_update_delivered_from_timer(self, fetcher, day):
        views = []
        delivered = threading.Event()

        def on_update(view):
            views.append(view)
            delivered.set()

        dashboard = TimeStatsDashboard(on_update, reference_date=day, delay_ms=20, fetch_events=fetcher)
        dashboard.refresh()
        dashboard.set_granularity("week")

        assert delivered.wait(2)
        threading.Event().wait(0.1)
        assert len(views) == 1
        assert len(fetcher.calls) == 1
        assert views[0].granularity == Granularity.WEEK

    def test_fetch_errors_propagate_from_flush(self, day):
        def failing_fetch(start_date, end_date, tz):
            raise CalendarFetchError("quota exceeded")

        views = []
        dashboard = self._dashboard(views, day, failing_fetch)
        dashboard.refresh()

        with pytest.raises(CalendarFetchError):
            dashboard.flush()
        assert views == []

    def test_close_cancels_pending(self, fetcher, day):
        views = []
        dashboard = self._dashboard(views, day, fetcher)
        dashboard.refresh()
        dashboard.close()
        assert dashboard.flush() is False
        assert views == []
        assert fetcher.calls == []
