from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence, Union

from .categories import build_direction_split, build_end_reason_breakdown
from .configuration import AnalyticsConfig
from .dataset import CallDataset, PartitionedEvents
from .distribution import build_duration_histogram
from .heatmap import build_heatmap
from .metrics import build_metrics
from .models import AnalyticsResult, CallEvent, ReportingWindow, ResolvedPeriods
from .periods import parse_window, resolve_periods
from .timeseries import build_time_series

logger = logging.getLogger(__name__)


class CallAnalyticsService:
    """
    Aggregates call logs into the comparative analytics shown on the agent
    analytics page.

    The service is a pure function of (events, window, now): it never fetches
    data and keeps no state between ``build`` calls.
    """

    def __init__(self, events: Sequence[CallEvent], config: Optional[AnalyticsConfig] = None) -> None:
        self.config = config or AnalyticsConfig()
        self.dataset = CallDataset(events=events, timezone=self.config.calendar.timezone)

    def resolve(
        self,
        window: Union[ReportingWindow, Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> ResolvedPeriods:
        return resolve_periods(parse_window(window), now=now, config=self.config)

    def build(
        self,
        window: Union[ReportingWindow, Mapping[str, Any]],
        now: Optional[datetime] = None,
    ) -> AnalyticsResult:
        periods = self.resolve(window, now=now)
        subsets = self.dataset.partition(periods)
        logger.debug(
            "Analytics over %s days: %s current / %s previous of %s events",
            periods.span_days,
            len(subsets.current),
            len(subsets.previous),
            len(self.dataset.events),
        )
        return self._build_result(periods, subsets)

    def _build_result(self, periods: ResolvedPeriods, subsets: PartitionedEvents) -> AnalyticsResult:
        palette = self.config.presentation.palette
        current_events = subsets.current_events

        return AnalyticsResult(
            periods=periods,
            metrics=build_metrics(
                current_events,
                subsets.previous_events,
                self.config.evaluation.success_markers,
            ),
            time_series=build_time_series(subsets.current, subsets.previous, periods, self.dataset.tz),
            duration_histogram=build_duration_histogram(current_events),
            end_reason_breakdown=build_end_reason_breakdown(current_events, palette),
            direction_split=build_direction_split(current_events, palette),
            heatmap=build_heatmap(subsets.current),
        )


def compute_analytics(
    events: Sequence[CallEvent],
    window: Union[ReportingWindow, Mapping[str, Any]],
    now: Optional[datetime] = None,
    config: Optional[AnalyticsConfig] = None,
) -> AnalyticsResult:
    return CallAnalyticsService(events, config=config).build(window, now=now)
