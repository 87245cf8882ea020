"""Tests for the aligned daily series."""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from call_analytics.dataset import CallDataset
from call_analytics.models import CustomWindow, RelativeWindow
from call_analytics.periods import resolve_periods
from call_analytics.timeseries import build_time_series, day_label, day_range, event_minutes

UTC = ZoneInfo("UTC")


def _series(events, window, now):
    periods = resolve_periods(window, now=now)
    subsets = CallDataset(events).partition(periods)
    return build_time_series(subsets.current, subsets.previous, periods, UTC), periods


def _by_label(buckets):
    return {bucket.label: bucket for bucket in buckets}


def test_day_label() -> None:
    assert day_label(date(2026, 1, 5)) == "Jan 5"
    assert day_label(date(2026, 12, 31)) == "Dec 31"


def test_day_range_is_oldest_first() -> None:
    assert day_range(date(2026, 3, 2), 3) == [date(2026, 2, 28), date(2026, 3, 1), date(2026, 3, 2)]


def test_one_row_per_day_ending_today(now: datetime) -> None:
    series, _ = _series([], RelativeWindow(days=7), now)

    assert [bucket.label for bucket in series.counts] == [
        "Mar 5", "Mar 6", "Mar 7", "Mar 8", "Mar 9", "Mar 10", "Mar 11",
    ]
    assert len(series.minutes) == 7
    assert all(bucket.current == 0 and bucket.previous == 0 for bucket in series.counts)


def test_current_events_land_on_their_day(now: datetime, make_event) -> None:
    events = [
        make_event(at=datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc), duration=90),
        make_event(at=datetime(2026, 3, 10, 17, 0, tzinfo=timezone.utc), duration=40),
    ]

    series, _ = _series(events, RelativeWindow(days=7), now)

    assert _by_label(series.counts)["Mar 10"].current == 2
    # Minutes are rounded per call before summing.
    assert _by_label(series.minutes)["Mar 10"].current == 3


def test_previous_event_aligns_with_counterpart(now: datetime, make_event) -> None:
    periods = resolve_periods(RelativeWindow(days=7), now=now)
    offset = timedelta(days=2, hours=1)
    previous_event = make_event(at=periods.previous.start + offset)
    current_event = make_event(at=periods.current.start + offset)

    series, _ = _series([previous_event, current_event], RelativeWindow(days=7), now)

    aligned = _by_label(series.counts)["Mar 6"]
    assert aligned.current == 1
    assert aligned.previous == 1


def test_days_outside_label_set_are_dropped(now: datetime, make_event) -> None:
    periods = resolve_periods(RelativeWindow(days=7), now=now)
    # Both fall on Mar 4 after alignment, which is not one of the seven labels.
    late_first_day = make_event(at=periods.current.start + timedelta(hours=3))
    shifted_onto_first_day = make_event(at=periods.previous.start + timedelta(hours=3))

    series, _ = _series([late_first_day, shifted_onto_first_day], RelativeWindow(days=7), now)

    assert sum(bucket.current for bucket in series.counts) == 0
    assert sum(bucket.previous for bucket in series.counts) == 0


def test_custom_window_uses_its_own_days(now: datetime, make_event) -> None:
    events = [
        make_event(at=datetime(2026, 1, 2, 10, 0, tzinfo=timezone.utc), duration=120),
        make_event(at=datetime(2025, 12, 30, 10, 0, tzinfo=timezone.utc), duration=300),
    ]

    series, periods = _series(events, CustomWindow(start=date(2026, 1, 1), end=date(2026, 1, 3)), now)

    assert periods.span_days == 3
    assert [bucket.label for bucket in series.minutes] == ["Jan 1", "Jan 2", "Jan 3"]
    jan_2 = _by_label(series.minutes)["Jan 2"]
    assert jan_2.current == 2
    assert jan_2.previous == 5


def test_buckets_carry_their_date(now: datetime) -> None:
    series, _ = _series([], RelativeWindow(days=2), now)

    assert [bucket.day for bucket in series.counts] == [date(2026, 3, 10), date(2026, 3, 11)]


def test_negative_duration_adds_no_minutes(make_event) -> None:
    assert event_minutes(make_event(duration=-300)) == 0
    assert event_minutes(make_event(duration=None)) == 0
    assert event_minutes(make_event(duration=90)) == 2
