from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional, Sequence, Union


@dataclass(frozen=True)
class CallEvent:
    """
    One call (or chat) record as captured by the telephony provider.

    ``metadata`` mirrors the flexible JSON payload stored next to every call
    log and carries provider details such as the disconnection reason.
    """

    id: str
    started_at: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    status: Optional[str] = None
    direction: Optional[str] = None
    evaluation: Optional[str] = None
    from_number: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def disconnection_reason(self) -> Optional[str]:
        reason = self.metadata.get("disconnection_reason")
        return str(reason) if reason else None


@dataclass(frozen=True)
class RelativeWindow:
    """The last ``days`` days, ending at "now"."""

    days: int = 7


@dataclass(frozen=True)
class CustomWindow:
    """
    Explicit calendar range. ``start`` is taken at its first instant and
    ``end`` through its last instant. Missing bounds degrade to the default
    relative span.
    """

    start: Optional[date] = None
    end: Optional[date] = None


ReportingWindow = Union[RelativeWindow, CustomWindow]


@dataclass(frozen=True)
class Period:
    start: datetime
    end: datetime
    closed: bool = False
    """When set, ``end`` itself belongs to the period (custom end-of-day bounds)."""

    def contains(self, moment: datetime) -> bool:
        if self.closed:
            return self.start <= moment <= self.end
        return self.start <= moment < self.end


@dataclass(frozen=True)
class ResolvedPeriods:
    current: Period
    previous: Period
    span_days: int


@dataclass(frozen=True)
class MetricResult:
    key: str
    label: str
    current: float
    previous: float
    change: float
    change_kind: str = "percent"
    unit: Optional[str] = None
    has_baseline: bool = False


@dataclass(frozen=True)
class Bucket:
    label: str
    day: date
    current: float = 0
    previous: float = 0


@dataclass(frozen=True)
class TimeSeries:
    minutes: Sequence[Bucket] = field(default_factory=list)
    counts: Sequence[Bucket] = field(default_factory=list)


@dataclass(frozen=True)
class HistogramBin:
    label: str
    lower: int
    upper: Optional[int]
    count: int = 0

    def contains(self, value: float) -> bool:
        if value < self.lower:
            return False
        return self.upper is None or value < self.upper


@dataclass(frozen=True)
class CategoryGroup:
    key: str
    label: str
    count: int
    rank: int
    share: float = 0.0
    color: Optional[str] = None


@dataclass(frozen=True)
class HeatmapCell:
    day: int
    hour: int
    count: int
    intensity: float


@dataclass(frozen=True)
class Heatmap:
    grid: Sequence[Sequence[HeatmapCell]]
    max_cell: int
    total: int
    day_labels: Sequence[str] = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class AnalyticsResult:
    periods: ResolvedPeriods
    metrics: Sequence[MetricResult]
    time_series: TimeSeries
    duration_histogram: Sequence[HistogramBin]
    end_reason_breakdown: Sequence[CategoryGroup]
    direction_split: Sequence[CategoryGroup]
    heatmap: Heatmap

    def metric(self, key: str) -> MetricResult:
        for item in self.metrics:
            if item.key == key:
                return item
        raise KeyError(key)

    def as_dict(self) -> Dict[str, Any]:
        """
        Convert the nested dataclasses into a JSON-serialisable structure.

        The HTTP envelope and any external cache can ship the aggregates to the
        UI without taking a dependency on dataclasses.
        """

        def _serialize(obj: Any) -> Any:
            if isinstance(obj, AnalyticsResult):
                return {
                    "periods": _serialize(obj.periods),
                    "metrics": [_serialize(metric) for metric in obj.metrics],
                    "timeSeries": _serialize(obj.time_series),
                    "durationHistogram": [_serialize(item) for item in obj.duration_histogram],
                    "endReasonBreakdown": [_serialize(group) for group in obj.end_reason_breakdown],
                    "directionSplit": [_serialize(group) for group in obj.direction_split],
                    "heatmap": _serialize(obj.heatmap),
                }
            if isinstance(obj, ResolvedPeriods):
                return {
                    "current": _serialize(obj.current),
                    "previous": _serialize(obj.previous),
                    "spanDays": obj.span_days,
                }
            if isinstance(obj, Period):
                return {"start": obj.start.isoformat(), "end": obj.end.isoformat()}
            if isinstance(obj, MetricResult):
                return {
                    "key": obj.key,
                    "label": obj.label,
                    "current": obj.current,
                    "previous": obj.previous,
                    "change": obj.change,
                    "changeKind": obj.change_kind,
                    "unit": obj.unit,
                    "hasBaseline": obj.has_baseline,
                }
            if isinstance(obj, TimeSeries):
                return {
                    "minutes": [_serialize(bucket) for bucket in obj.minutes],
                    "counts": [_serialize(bucket) for bucket in obj.counts],
                }
            if isinstance(obj, Bucket):
                return {
                    "label": obj.label,
                    "date": obj.day.isoformat(),
                    "current": obj.current,
                    "previous": obj.previous,
                }
            if isinstance(obj, HistogramBin):
                return {"label": obj.label, "lower": obj.lower, "upper": obj.upper, "count": obj.count}
            if isinstance(obj, CategoryGroup):
                return {
                    "key": obj.key,
                    "label": obj.label,
                    "count": obj.count,
                    "rank": obj.rank,
                    "share": obj.share,
                    "color": obj.color,
                }
            if isinstance(obj, Heatmap):
                return {
                    "grid": [[_serialize(cell) for cell in row] for row in obj.grid],
                    "maxCell": obj.max_cell,
                    "total": obj.total,
                    "dayLabels": list(obj.day_labels),
                }
            if isinstance(obj, HeatmapCell):
                return {"day": obj.day, "hour": obj.hour, "count": obj.count, "intensity": obj.intensity}
            if isinstance(obj, Iterable) and not isinstance(obj, (str, bytes)):
                return [_serialize(item) for item in obj]
            return obj

        return _serialize(self)
