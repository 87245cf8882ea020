"""
Call analytics aggregation engine.

This package turns raw call logs into the comparative KPIs, aligned daily
series, duration histogram, categorical breakdowns and weekday/hour heatmap
rendered on the agent analytics page. It is a pure computation: callers
supply the events and the reporting window.
"""

from .configuration import AnalyticsConfig, load_analytics_config  # noqa: F401
from .models import (  # noqa: F401
    AnalyticsResult,
    Bucket,
    CallEvent,
    CategoryGroup,
    CustomWindow,
    Heatmap,
    HeatmapCell,
    HistogramBin,
    MetricResult,
    Period,
    RelativeWindow,
    ResolvedPeriods,
    TimeSeries,
)
from .periods import InvalidWindowError, parse_window, resolve_periods  # noqa: F401
from .repository import (  # noqa: F401
    CallEventRepository,
    RepositoryConfig,
    SQLCallEventRepository,
    build_repository_from_env,
)
from .service import CallAnalyticsService, compute_analytics  # noqa: F401
