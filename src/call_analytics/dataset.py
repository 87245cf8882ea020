from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, Sequence, Tuple
from zoneinfo import ZoneInfo

from .models import CallEvent, Period, ResolvedPeriods
from .utils import coerce_timezone, to_local

logger = logging.getLogger(__name__)

LocalizedEvent = Tuple[CallEvent, datetime]


@dataclass(frozen=True)
class PartitionedEvents:
    current: Sequence[LocalizedEvent]
    previous: Sequence[LocalizedEvent]

    @property
    def current_events(self) -> Sequence[CallEvent]:
        return tuple(event for event, _ in self.current)

    @property
    def previous_events(self) -> Sequence[CallEvent]:
        return tuple(event for event, _ in self.previous)


@dataclass
class CallDataset:
    events: Sequence[CallEvent]
    timezone: str = "UTC"
    tz: ZoneInfo = field(init=False, repr=False)

    def __post_init__(self) -> None:
        # Input order is kept; the subsets preserve it.
        self.events = tuple(self.events)
        self.tz = coerce_timezone(self.timezone)

    def iter_localized(self) -> Iterator[LocalizedEvent]:
        """
        Yield ``(event, localized_start)`` for every event carrying a start
        timestamp, so callers can use ``.date()`` / ``.hour`` directly.
        """

        for event in self.events:
            if event.started_at is None:
                continue
            yield event, to_local(event.started_at, self.tz)

    def iter_events(self, period: Period) -> Iterator[LocalizedEvent]:
        for event, local_time in self.iter_localized():
            if period.contains(local_time):
                yield event, local_time

    def partition(self, periods: ResolvedPeriods) -> PartitionedEvents:
        # The two periods never overlap, so each event lands in at most one subset.
        current = tuple(self.iter_events(periods.current))
        previous = tuple(self.iter_events(periods.previous))

        undated = sum(1 for event in self.events if event.started_at is None)
        if undated:
            logger.debug("Skipped %s events without a start timestamp", undated)
        return PartitionedEvents(current=current, previous=previous)
