from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .models import CallEvent, HistogramBin

# (label, inclusive lower bound, exclusive upper bound) in seconds, ascending.
DURATION_BINS: Sequence[Tuple[str, int, Optional[int]]] = (
    ("0-30s", 0, 30),
    ("30-60s", 30, 60),
    ("1-2m", 60, 120),
    ("2-5m", 120, 300),
    ("5-10m", 300, 600),
    ("10m+", 600, None),
)


def duration_value(event: CallEvent) -> int:
    return max(event.duration_seconds or 0, 0)


def build_duration_histogram(
    events: Iterable[CallEvent],
    bins: Sequence[Tuple[str, int, Optional[int]]] = DURATION_BINS,
) -> List[HistogramBin]:
    template = [HistogramBin(label=label, lower=lower, upper=upper) for label, lower, upper in bins]
    counts = [0] * len(template)

    for event in events:
        value = duration_value(event)
        for index, item in enumerate(template):
            if item.contains(value):
                counts[index] += 1
                break

    return [
        HistogramBin(label=item.label, lower=item.lower, upper=item.upper, count=count)
        for item, count in zip(template, counts)
    ]
