"""Tests for the call duration histogram."""

from __future__ import annotations

import pytest

from call_analytics.distribution import DURATION_BINS, build_duration_histogram


def _counts(histogram):
    return {item.label: item.count for item in histogram}


def test_two_calls_land_in_expected_bins(make_event) -> None:
    histogram = build_duration_histogram([make_event(duration=65), make_event(duration=610)])

    assert _counts(histogram) == {
        "0-30s": 0,
        "30-60s": 0,
        "1-2m": 1,
        "2-5m": 0,
        "5-10m": 0,
        "10m+": 1,
    }


@pytest.mark.parametrize(
    "seconds, label",
    [
        (0, "0-30s"),
        (29, "0-30s"),
        (30, "30-60s"),
        (59, "30-60s"),
        (60, "1-2m"),
        (120, "2-5m"),
        (300, "5-10m"),
        (599, "5-10m"),
        (600, "10m+"),
        (7200, "10m+"),
    ],
)
def test_lower_bounds_are_inclusive(make_event, seconds: int, label: str) -> None:
    counts = _counts(build_duration_histogram([make_event(duration=seconds)]))

    assert counts[label] == 1
    assert sum(counts.values()) == 1


def test_missing_and_negative_durations_count_as_zero(make_event) -> None:
    counts = _counts(build_duration_histogram([make_event(duration=None), make_event(duration=-4)]))

    assert counts["0-30s"] == 2


def test_bins_sum_to_event_count(make_event) -> None:
    events = [make_event(duration=seconds) for seconds in (5, 45, 90, 200, 450, 900, None, 0)]

    assert sum(item.count for item in build_duration_histogram(events)) == len(events)


def test_bins_are_contiguous_and_last_is_open() -> None:
    histogram = build_duration_histogram([])

    assert [item.label for item in histogram] == [label for label, _, _ in DURATION_BINS]
    for lower_bin, upper_bin in zip(histogram, histogram[1:]):
        assert lower_bin.upper == upper_bin.lower
    assert histogram[0].lower == 0
    assert histogram[-1].upper is None
