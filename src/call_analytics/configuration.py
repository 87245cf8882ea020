# config parameters for the call analytics engine

from __future__ import annotations

import os
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel

# ========== 1. Reporting windows ==========

class WindowConfig(BaseModel):
    default_days: int = 7
    """Relative span used when a custom window is missing a bound"""


# ========== 2. Calendar ==========

class CalendarConfig(BaseModel):
    timezone: str = "UTC"
    """IANA zone used for day labels, weekday and hour-of-day buckets"""


# ========== 3. Call evaluation ==========

class EvaluationConfig(BaseModel):
    success_markers: Tuple[str, ...] = ("true", "success", "passed")
    """
    Case-insensitive word prefixes; an evaluation with a word starting with
    one of them, not preceded by a negation, counts the call as successful.
    """


# ========== 4. Presentation hints ==========

class PresentationConfig(BaseModel):
    palette: Tuple[str, ...] = (
        "#2563eb",
        "#10b981",
        "#f59e0b",
        "#ef4444",
        "#8b5cf6",
        "#ec4899",
        "#06b6d4",
        "#84cc16",
    )
    """Colours assigned cyclically to ranked category groups"""


# ========== 5. Combined config ==========

class AnalyticsConfig(BaseModel):
    """Configuration for the call analytics engine."""

    window: WindowConfig = WindowConfig()
    calendar: CalendarConfig = CalendarConfig()
    evaluation: EvaluationConfig = EvaluationConfig()
    presentation: PresentationConfig = PresentationConfig()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_list(name: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = os.getenv(name)
    if raw is None:
        return default
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    return items or default


def load_analytics_config(overrides: Optional[Dict[str, Any]] = None) -> AnalyticsConfig:
    """
    Build the engine configuration from defaults, then ``overrides``, then
    environment variables (environment wins).
    """

    cfg = AnalyticsConfig()
    overrides = overrides or {}

    window_cfg = overrides.get("window", {})
    cfg.window = WindowConfig(
        default_days=_env_int(
            "ANALYTICS_DEFAULT_DAYS", window_cfg.get("default_days", cfg.window.default_days)
        ),
    )

    calendar_cfg = overrides.get("calendar", {})
    cfg.calendar = CalendarConfig(
        timezone=os.getenv("ANALYTICS_TIMEZONE", calendar_cfg.get("timezone", cfg.calendar.timezone)),
    )

    evaluation_cfg = overrides.get("evaluation", {})
    cfg.evaluation = EvaluationConfig(
        success_markers=_env_list(
            "ANALYTICS_SUCCESS_MARKERS",
            tuple(evaluation_cfg.get("success_markers", cfg.evaluation.success_markers)),
        ),
    )

    presentation_cfg = overrides.get("presentation", {})
    cfg.presentation = PresentationConfig(
        palette=tuple(presentation_cfg.get("palette", cfg.presentation.palette)),
    )

    return cfg
