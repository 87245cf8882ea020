"""
Categorical breakdowns of the current period.

Each aggregator is a ``classify(event) -> key`` function plus the shared
counting/ranking step, so the classification rules can be tested on their own.
"""

from __future__ import annotations

import re
from collections import Counter
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

from .configuration import PresentationConfig
from .models import CallEvent, CategoryGroup
from .utils import safe_ratio

Accessor = Callable[[CallEvent], Optional[str]]

DEFAULT_PALETTE = PresentationConfig().palette

UNKNOWN_REASON = "Unknown"

# Tried in order; the first non-empty value wins.
END_REASON_ACCESSORS: Tuple[Accessor, ...] = (
    lambda event: event.disconnection_reason,
    lambda event: event.status,
)

INBOUND = "inbound"
OUTBOUND = "outbound"
UNKNOWN_DIRECTION = "unknown"
DIRECTION_ORDER = (INBOUND, OUTBOUND, UNKNOWN_DIRECTION)
DIRECTION_LABELS = {INBOUND: "Inbound", OUTBOUND: "Outbound", UNKNOWN_DIRECTION: "Unknown"}

_WORD_START = re.compile(r"\b\w")


def first_present(event: CallEvent, accessors: Sequence[Accessor], default: str) -> str:
    for accessor in accessors:
        value = accessor(event)
        if value:
            return value
    return default


def normalize_label(raw: str) -> str:
    """``user_hangup`` -> ``User Hangup``; the rest of each word is left as is."""
    return _WORD_START.sub(lambda match: match.group(0).upper(), raw.replace("_", " "))


def classify_end_reason(event: CallEvent) -> str:
    return normalize_label(first_present(event, END_REASON_ACCESSORS, UNKNOWN_REASON))


def classify_direction(event: CallEvent) -> str:
    direction = (event.direction or "").strip().lower()
    if direction in (INBOUND, OUTBOUND):
        return direction
    return UNKNOWN_DIRECTION


def rank_groups(
    counts: Dict[str, int],
    palette: Sequence[str] = DEFAULT_PALETTE,
    labels: Optional[Dict[str, str]] = None,
) -> List[CategoryGroup]:
    """
    Sort by count descending. ``sorted`` is stable, so ties keep the order in
    which ``counts`` first saw each key.
    """

    total = sum(counts.values())
    ordered = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    labels = labels or {}
    return [
        CategoryGroup(
            key=key,
            label=labels.get(key, key),
            count=count,
            rank=index + 1,
            share=safe_ratio(count, total) * 100,
            color=palette[index % len(palette)] if palette else None,
        )
        for index, (key, count) in enumerate(ordered)
    ]


def build_end_reason_breakdown(
    events: Iterable[CallEvent],
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> List[CategoryGroup]:
    counts: Dict[str, int] = Counter()
    for event in events:
        counts[classify_end_reason(event)] += 1
    return rank_groups(dict(counts), palette)


def build_direction_split(
    events: Iterable[CallEvent],
    palette: Sequence[str] = DEFAULT_PALETTE,
) -> List[CategoryGroup]:
    totals = Counter(classify_direction(event) for event in events)
    counts = {key: totals[key] for key in DIRECTION_ORDER if totals[key] > 0}
    if counts.get(INBOUND) or counts.get(OUTBOUND):
        counts.pop(UNKNOWN_DIRECTION, None)
    return rank_groups(counts, palette, labels=DIRECTION_LABELS)
