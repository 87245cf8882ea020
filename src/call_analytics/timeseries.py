"""
Per-day series for the "latest vs previous period" line charts.

Previous-period events are shifted forward by the span length before their
day is looked up, so both lines share the current period's x-axis. Events
whose (shifted) day is not one of the current period's day labels are
dropped, so the previous line can under-count near period boundaries.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable, Dict, Iterable, List
from zoneinfo import ZoneInfo

from .dataset import LocalizedEvent
from .distribution import duration_value
from .models import Bucket, CallEvent, ResolvedPeriods, TimeSeries
from .utils import round_half_up, to_local

ValueFn = Callable[[CallEvent], float]


def day_label(day: date) -> str:
    return f"{day.strftime('%b')} {day.day}"


def day_range(end_day: date, span_days: int) -> List[date]:
    """``span_days`` consecutive days ending on ``end_day``, oldest first."""
    return [end_day - timedelta(days=span_days - 1 - offset) for offset in range(span_days)]


def event_minutes(event: CallEvent) -> float:
    return round_half_up(duration_value(event) / 60)


def event_count(event: CallEvent) -> float:
    return 1


def build_series(
    current: Iterable[LocalizedEvent],
    previous: Iterable[LocalizedEvent],
    days: List[date],
    span_days: int,
    value_fn: ValueFn,
) -> List[Bucket]:
    totals: Dict[date, List[float]] = {day: [0, 0] for day in days}
    shift = timedelta(days=span_days)

    for event, local_time in current:
        entry = totals.get(local_time.date())
        if entry is not None:
            entry[0] += value_fn(event)

    for event, local_time in previous:
        entry = totals.get((local_time + shift).date())
        if entry is not None:
            entry[1] += value_fn(event)

    return [
        Bucket(label=day_label(day), day=day, current=values[0], previous=values[1])
        for day, values in totals.items()
    ]


def build_time_series(
    current: Iterable[LocalizedEvent],
    previous: Iterable[LocalizedEvent],
    periods: ResolvedPeriods,
    tz: ZoneInfo,
) -> TimeSeries:
    current = tuple(current)
    previous = tuple(previous)
    end_day = _last_day(periods.current.end, tz)
    days = day_range(end_day, periods.span_days)

    return TimeSeries(
        minutes=build_series(current, previous, days, periods.span_days, event_minutes),
        counts=build_series(current, previous, days, periods.span_days, event_count),
    )


def _last_day(end: datetime, tz: ZoneInfo) -> date:
    return to_local(end, tz).date()
