# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Tests for the interval search functions."""

from datetime import datetime, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from frequenz.timerecords import (
    TimeInterval,
    TimeSeries,
    find_inner,
    find_outer,
    get_inner,
    get_outer,
    keep_latest,
    view_inner,
    view_outer,
)

_finite = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False)


@pytest.mark.parametrize(
    "bounds, inner, outer",
    [
        ((-5, -2), range(0, 0), range(0, 1)),
        ((-2, 2), range(0, 2), range(0, 2)),
        ((-1.9, 2.1), range(0, 2), range(0, 3)),
        ((2, 4), range(1, 4), range(1, 4)),
        ((2.1, 4.1), range(2, 4), range(1, 5)),
        ((4, 6), range(3, 5), range(3, 5)),
        ((4.1, 6.1), range(4, 5), range(3, 5)),
        ((7, 9), range(5, 5), range(4, 5)),
        ((2.1, 2.2), range(2, 2), range(1, 3)),
    ],
)
def test_find(
    ramp: TimeSeries[float],
    bounds: tuple[float, float],
    inner: range,
    outer: range,
) -> None:
    """Test the inner and outer ranges of intervals around a ramp."""
    interval = TimeInterval(*bounds)
    assert find_inner(ramp, interval) == inner
    assert find_outer(ramp, interval) == outer


def test_find_empty_series() -> None:
    """Test searching an empty series gives empty ranges."""
    series = TimeSeries[float]()
    interval = TimeInterval(0, 1)
    assert len(find_inner(series, interval)) == 0
    assert find_outer(series, interval) == range(0, 0)


def test_get_and_view(ramp: TimeSeries[float]) -> None:
    """Test copies and views match the found ranges."""
    interval = TimeInterval(2.1, 4.1)

    inner = get_inner(ramp, interval)
    assert isinstance(inner, TimeSeries)
    assert inner == ramp[2:4]
    assert view_inner(ramp, interval) == inner

    outer = get_outer(ramp, interval)
    assert outer == ramp[1:5]
    assert view_outer(ramp, interval) == outer

    assert len(get_inner(ramp, TimeInterval(7, 9))) == 0
    assert len(view_inner(ramp, TimeInterval(7, 9))) == 0
    assert get_outer(ramp, TimeInterval(7, 9)) == ramp[4:5]


def test_get_outer_datetimes() -> None:
    """Test searching a series of datetimes with a datetime interval."""

    def at(seconds: int, micros: int) -> datetime:
        return datetime(2024, 1, 1, 0, 0, seconds, micros, tzinfo=timezone.utc)

    series = TimeSeries(
        [at(48, 393000), at(49, 275000), at(50, 470000)], [1.0, 2.0, 3.0]
    )
    interval = TimeInterval(at(48, 928000), at(49, 115000))

    assert get_outer(series, interval) == series[0:2]
    assert len(get_inner(series, interval)) == 0


def test_keep_latest() -> None:
    """Test truncating the history of a series."""

    def ramp() -> TimeSeries[int]:
        return TimeSeries(range(1, 6), range(1, 6))

    assert keep_latest(ramp(), 4).timestamps == [4, 5]
    assert keep_latest(ramp(), 2.5).timestamps == [2, 3, 4, 5]
    assert keep_latest(ramp()).timestamps == [5]
    assert keep_latest(ramp(), 0).timestamps == [1, 2, 3, 4, 5]
    assert keep_latest(ramp(), 9).timestamps == [5]

    series = ramp()
    assert keep_latest(series, 3) is series
    assert len(keep_latest(TimeSeries[int]())) == 0


@given(
    st.lists(_finite, unique=True, max_size=30),
    st.floats(min_value=-1e6, max_value=1e6, allow_nan=False),
)
def test_keep_latest_idempotent(timestamps: list[float], timestamp: float) -> None:
    """Test truncating twice at the same time doesn't drop anything else."""
    series = keep_latest(TimeSeries(timestamps, timestamps), timestamp)
    expected = series.copy()
    assert keep_latest(series, timestamp) == expected


@given(st.lists(_finite, unique=True, min_size=1, max_size=30), _finite, _finite)
def test_inner_within_outer(timestamps: list[float], lo: float, hi: float) -> None:
    """Test the inner range is contained in the outer one, which brackets it."""
    series = TimeSeries(timestamps, timestamps)
    interval = TimeInterval(lo, hi)
    inner = find_inner(series, interval)
    outer = find_outer(series, interval)

    assert len(outer) > 0
    assert outer.start <= inner.start
    assert inner.stop <= outer.stop
    assert all(series[i].timestamp in interval for i in inner)

    if series[0].timestamp <= interval.lo:
        assert series[outer.start].timestamp <= interval.lo
    if series[-1].timestamp >= interval.hi:
        assert series[outer.stop - 1].timestamp >= interval.hi
