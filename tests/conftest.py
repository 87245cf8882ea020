"""
Shared fixtures: a fixed clock and a call event factory.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from itertools import count
from typing import Any, Callable, Dict, Optional

import pytest

from call_analytics.models import CallEvent

# Wednesday, noon UTC.
FIXED_NOW = datetime(2026, 3, 11, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def make_event() -> Callable[..., CallEvent]:
    ids = count(1)

    def _make(
        *,
        at: Optional[datetime] = None,
        days_ago: Optional[float] = None,
        duration: Optional[int] = 60,
        status: Optional[str] = "completed",
        direction: Optional[str] = "inbound",
        evaluation: Optional[str] = None,
        from_number: Optional[str] = None,
        reason: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> CallEvent:
        started_at = at
        if started_at is None and days_ago is not None:
            started_at = FIXED_NOW - timedelta(days=days_ago)
        meta = dict(metadata or {})
        if reason is not None:
            meta["disconnection_reason"] = reason
        return CallEvent(
            id=f"call-{next(ids)}",
            started_at=started_at,
            duration_seconds=duration,
            status=status,
            direction=direction,
            evaluation=evaluation,
            from_number=from_number,
            metadata=meta,
        )

    return _make
