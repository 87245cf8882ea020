from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence

from .configuration import EvaluationConfig
from .distribution import duration_value
from .models import CallEvent, MetricResult
from .utils import round_half_up, safe_ratio

DEFAULT_SUCCESS_MARKERS = EvaluationConfig().success_markers

NEGATIONS = frozenset({"not", "no", "never", "non"})

_WORD = re.compile(r"[a-z']+")


def calc_change(current: float, previous: float) -> float:
    """Relative change in percent; a zero baseline reports 0, never infinity."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def calc_point_change(current: float, previous: float, previous_size: int) -> float:
    if previous_size == 0:
        return 0.0
    return current - previous


def is_successful(event: CallEvent, markers: Sequence[str] = DEFAULT_SUCCESS_MARKERS) -> bool:
    """
    A call succeeds when a word of its evaluation starts with one of the
    markers and the word before it is not a negation. ``untrue`` and
    ``unsuccessful`` are different words; ``not passed`` is negated.
    """

    if not event.evaluation:
        return False
    words = _WORD.findall(event.evaluation.lower())
    prefixes = tuple(marker.lower() for marker in markers if marker)
    for index, word in enumerate(words):
        if not prefixes or not word.startswith(prefixes):
            continue
        before = words[index - 1] if index else ""
        if before in NEGATIONS or before.endswith("n't"):
            continue
        return True
    return False


def total_minutes(events: Iterable[CallEvent]) -> int:
    seconds = sum(duration_value(event) for event in events)
    return round_half_up(seconds / 60)


def success_rate(events: Sequence[CallEvent], markers: Sequence[str] = DEFAULT_SUCCESS_MARKERS) -> float:
    successful = sum(1 for event in events if is_successful(event, markers))
    return safe_ratio(successful, len(events)) * 100


def average_duration(events: Iterable[CallEvent]) -> int:
    durations = [event.duration_seconds for event in events if event.duration_seconds and event.duration_seconds > 0]
    if not durations:
        return 0
    return round_half_up(sum(durations) / len(durations))


def unique_callers(events: Iterable[CallEvent]) -> int:
    return len({event.from_number for event in events if event.from_number})


def _build_metric(
    key: str,
    label: str,
    value: float,
    previous: float,
    unit: Optional[str] = None,
) -> MetricResult:
    return MetricResult(
        key=key,
        label=label,
        current=value,
        previous=previous,
        change=calc_change(value, previous),
        change_kind="percent",
        unit=unit,
        has_baseline=previous > 0,
    )


def build_metrics(
    current: Sequence[CallEvent],
    previous: Sequence[CallEvent],
    success_markers: Sequence[str] = DEFAULT_SUCCESS_MARKERS,
) -> List[MetricResult]:
    current_rate = success_rate(current, success_markers)
    previous_rate = success_rate(previous, success_markers)

    return [
        _build_metric("total_minutes", "Total Call Minutes", total_minutes(current), total_minutes(previous), unit="min"),
        _build_metric("call_count", "Number of Calls", len(current), len(previous), unit="calls"),
        MetricResult(
            key="success_rate",
            label="Success Rate",
            current=current_rate,
            previous=previous_rate,
            change=calc_point_change(current_rate, previous_rate, len(previous)),
            change_kind="points",
            unit="%",
            has_baseline=len(previous) > 0,
        ),
        _build_metric(
            "avg_duration_seconds",
            "Avg Call Duration",
            average_duration(current),
            average_duration(previous),
            unit="s",
        ),
        _build_metric("unique_callers", "Unique Callers", unique_callers(current), unique_callers(previous)),
    ]
