from __future__ import annotations

from typing import Iterable, List

from .dataset import LocalizedEvent
from .models import Heatmap, HeatmapCell

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


def build_heatmap(events: Iterable[LocalizedEvent]) -> Heatmap:
    """
    Count calls per (weekday, hour) of their local start time. Monday is day 0.

    Intensities are relative to the busiest cell, with a denominator of at
    least 1 so an empty grid stays at 0 everywhere.
    """

    counts: List[List[int]] = [[0] * HOURS_PER_DAY for _ in range(DAYS_PER_WEEK)]
    for _, local_time in events:
        counts[local_time.weekday()][local_time.hour] += 1

    max_cell = max(1, max(max(row) for row in counts))
    grid = [
        [
            HeatmapCell(day=day, hour=hour, count=count, intensity=count / max_cell)
            for hour, count in enumerate(row)
        ]
        for day, row in enumerate(counts)
    ]
    return Heatmap(grid=grid, max_cell=max_cell, total=sum(sum(row) for row in counts))
