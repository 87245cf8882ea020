"""
Turn a reporting window selection into the current/previous period pair.

Both periods always span the same number of whole days and the previous one
ends exactly where the current one starts.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Mapping, Optional, Union

from .configuration import AnalyticsConfig
from .models import CustomWindow, Period, RelativeWindow, ReportingWindow, ResolvedPeriods
from .utils import coerce_timezone, round_half_up, to_local

logger = logging.getLogger(__name__)

ONE_DAY = timedelta(days=1)


class InvalidWindowError(ValueError):
    """Raised for a window object that cannot be interpreted at all."""


def parse_window(payload: Union[ReportingWindow, Mapping[str, Any]]) -> ReportingWindow:
    """
    Build a window from its JSON form::

        {"mode": "relative", "days": 30}
        {"mode": "custom", "start": "2026-01-01", "end": "2026-01-31"}
    """

    if isinstance(payload, (RelativeWindow, CustomWindow)):
        return payload
    if not isinstance(payload, Mapping):
        raise InvalidWindowError(f"window must be a mapping, got {type(payload).__name__}")

    mode = str(payload.get("mode") or "relative").lower()
    if mode == "relative":
        days = payload.get("days", 7)
        if isinstance(days, str) and days.strip().lstrip("-").isdigit():
            days = int(days)
        return RelativeWindow(days=days)
    if mode == "custom":
        return CustomWindow(start=_parse_day(payload.get("start")), end=_parse_day(payload.get("end")))
    raise InvalidWindowError(f"unknown window mode: {mode!r}")


def _parse_day(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError as exc:
            raise InvalidWindowError(f"invalid date: {value!r}") from exc
    raise InvalidWindowError(f"invalid date: {value!r}")


def resolve_periods(
    window: ReportingWindow,
    now: Optional[datetime] = None,
    config: Optional[AnalyticsConfig] = None,
) -> ResolvedPeriods:
    cfg = config or AnalyticsConfig()
    tz = coerce_timezone(cfg.calendar.timezone)
    reference = to_local(now, tz) if now is not None else datetime.now(tz)

    if isinstance(window, RelativeWindow):
        return _resolve_relative(window.days, reference)
    if isinstance(window, CustomWindow):
        if window.start is None or window.end is None:
            logger.warning(
                "Custom window is missing a bound (start=%s, end=%s); using the last %s days",
                window.start,
                window.end,
                cfg.window.default_days,
            )
            return _resolve_relative(cfg.window.default_days, reference)
        return _resolve_custom(_local_day(window.start, tz), _local_day(window.end, tz), tz)
    raise InvalidWindowError(f"unsupported window: {window!r}")


def _resolve_relative(days: Any, now: datetime) -> ResolvedPeriods:
    if isinstance(days, bool) or not isinstance(days, int):
        raise InvalidWindowError(f"relative window days must be an integer, got {days!r}")
    if days < 1:
        logger.info("Relative window of %s days clamped to 1", days)
        days = 1

    current = Period(start=now - timedelta(days=days), end=now)
    previous = Period(start=current.start - timedelta(days=days), end=current.start)
    return ResolvedPeriods(current=current, previous=previous, span_days=days)


def _resolve_custom(start_day: date, end_day: date, tz) -> ResolvedPeriods:
    if end_day < start_day:
        logger.warning("Custom window ends (%s) before it starts (%s); using a single day", end_day, start_day)
        end_day = start_day

    current_start = datetime.combine(start_day, time.min, tzinfo=tz)
    current_end = datetime.combine(end_day, time.max, tzinfo=tz)
    span_days = max(1, round_half_up((current_end - current_start) / ONE_DAY))

    # The end is the last microsecond of the end day and is itself included.
    current = Period(start=current_start, end=current_end, closed=True)
    previous = Period(start=current_start - timedelta(days=span_days), end=current_start)
    return ResolvedPeriods(current=current, previous=previous, span_days=span_days)


def _local_day(value: Any, tz) -> date:
    if isinstance(value, datetime):
        return to_local(value, tz).date()
    if isinstance(value, date):
        return value
    raise InvalidWindowError(f"custom window bounds must be dates, got {value!r}")
