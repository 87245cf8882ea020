"""Small helpers shared by the period resolver and the builders."""

from __future__ import annotations

import logging
import math
from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

logger = logging.getLogger(__name__)


def coerce_timezone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning("Unknown timezone %r, falling back to UTC", name)
        return ZoneInfo("UTC")


def to_local(dt: datetime, tz: ZoneInfo) -> datetime:
    """Naive datetimes are taken as already local; aware ones are converted."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def round_half_up(value: float) -> int:
    # round() rounds half to even, 2.5 must give 3 here.
    return int(math.floor(value + 0.5))


def safe_ratio(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator
