# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Tests for the integration and averaging functions."""

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from frequenz.timerecords import (
    EmptyTimeSeriesError,
    TimeInterval,
    TimeSeries,
    UnsupportedValueTypeError,
    accumulate,
    average,
    integral,
    integrate,
)


@pytest.mark.parametrize(
    "order, expected",
    [
        (0, [1.5, 2.5]),
        (1, [2.0, 3.0]),
    ],
)
def test_integrate(ramp: TimeSeries[float], order: int, expected: list[float]) -> None:
    """Test integrating between consecutive query times."""
    result = integrate(ramp, [1.5, 2.5, 3.5], order=order)
    assert result.timestamps == [2.5, 3.5]
    assert result.values == pytest.approx(expected)


@pytest.mark.parametrize(
    "order, expected",
    [
        (0, [1.5, 2.5]),
        (1, [2.0, 3.0]),
    ],
)
def test_average(ramp: TimeSeries[float], order: int, expected: list[float]) -> None:
    """Test averaging between consecutive query times."""
    result = average(ramp, [1.5, 2.5, 3.5], order=order)
    assert result.timestamps == [2.5, 3.5]
    assert result.values == pytest.approx(expected)


def test_average_zero_width(ramp: TimeSeries[float]) -> None:
    """Test the average over a zero-width interval is the interpolated value."""
    result = average(ramp, [2.5, 2.5, 3.5], order=1)
    assert result.values == pytest.approx([2.5, 3.0])
    assert average(ramp, [2.5, 2.5], order=0).values == [2.0]


@pytest.mark.parametrize(
    "order, expected",
    [
        (0, [1.0, 3.0, 6.0, 10.0]),
        (1, [1.5, 4.0, 7.5, 12.0]),
    ],
)
def test_accumulate(ramp: TimeSeries[float], order: int, expected: list[float]) -> None:
    """Test integrating cumulatively over the series own timestamps."""
    result = accumulate(ramp, order=order)
    assert result.timestamps == [2, 3, 4, 5]
    assert result.values == pytest.approx(expected)


def test_accumulate_single_record() -> None:
    """Test a single record accumulates to nothing."""
    assert len(accumulate(TimeSeries([1], [1.0]))) == 0


def test_integral_outside_series(ramp: TimeSeries[float]) -> None:
    """Test integrals outside the series use the saturated values."""
    assert integral(ramp, TimeInterval(-1, 0), order=1) == pytest.approx(1.0)
    assert integral(ramp, TimeInterval(6, 8), order=1) == pytest.approx(10.0)
    assert integral(ramp, TimeInterval(0, 6), order=0) == pytest.approx(16.0)
    assert integral(ramp, TimeInterval(0, 6), order=1) == pytest.approx(18.0)


def test_integral_empty_interval(ramp: TimeSeries[float]) -> None:
    """Test the integral over a zero-width interval is zero."""
    assert integral(ramp, TimeInterval(2.5, 2.5)) == 0.0


@pytest.mark.parametrize("hint", [None, -1, 0, 2, 4, 100])
def test_integral_hint(ramp: TimeSeries[float], hint: int | None) -> None:
    """Test the hint never changes the result."""
    interval = TimeInterval(3.5, 4.5)
    assert integral(ramp, interval, order=1, hint=hint) == pytest.approx(4.0)
    assert integral(ramp, interval, order=0, hint=hint) == pytest.approx(3.5)


def test_integrate_arrays() -> None:
    """Test integrating vector values."""
    series = TimeSeries([0, 1, 2], [np.zeros(2), np.ones(2), np.array([2.0, 0.0])])
    result = integrate(series, [0, 2], order=1)
    assert np.allclose(result[0].value, [2.0, 1.0])


def test_unsorted_query_times(ramp: TimeSeries[float]) -> None:
    """Test query times must be ascending."""
    with pytest.raises(ValueError):
        integrate(ramp, [3, 2])
    with pytest.raises(ValueError):
        average(ramp, [1, 3, 2])


def test_empty_series() -> None:
    """Test integrating an empty series fails."""
    with pytest.raises(EmptyTimeSeriesError):
        integral(TimeSeries[float](), TimeInterval(0, 1))
    with pytest.raises(EmptyTimeSeriesError):
        integrate(TimeSeries[float](), [0, 1])
    with pytest.raises(EmptyTimeSeriesError):
        average(TimeSeries[float](), [0, 1])
    with pytest.raises(EmptyTimeSeriesError):
        accumulate(TimeSeries[float]())


def test_unsupported_values() -> None:
    """Test values without arithmetic can't be integrated with any order."""
    series = TimeSeries([1, 2], ["off", "on"])
    for order in (0, 1):
        with pytest.raises(UnsupportedValueTypeError):
            integrate(series, [1, 2], order=order)
        with pytest.raises(UnsupportedValueTypeError):
            accumulate(series, order=order)


def test_invalid_order(ramp: TimeSeries[float]) -> None:
    """Test only orders 0 and 1 are accepted."""
    with pytest.raises(ValueError):
        integral(ramp, TimeInterval(1, 2), order=3)


_records = st.lists(
    st.tuples(
        st.floats(min_value=-1e3, max_value=1e3, allow_nan=False),
        st.floats(min_value=0, max_value=1e3, allow_nan=False),
    ),
    min_size=1,
    max_size=30,
    unique_by=lambda record: record[0],
)


@given(_records, st.sampled_from([0, 1]))
def test_accumulate_non_decreasing(
    records: list[tuple[float, float]], order: int
) -> None:
    """Test accumulating non-negative values never decreases."""
    series = TimeSeries([t for t, _ in records], [v for _, v in records])
    totals = accumulate(series, order=order).values
    assert all(prev <= curr for prev, curr in zip(totals, totals[1:]))


@given(
    _records,
    st.lists(
        st.floats(min_value=-2e3, max_value=2e3, allow_nan=False),
        min_size=2,
        max_size=10,
    ),
    st.sampled_from([0, 1]),
)
def test_integrate_is_additive(
    records: list[tuple[float, float]], times: list[float], order: int
) -> None:
    """Test the integrals over consecutive intervals add up to the whole."""
    series = TimeSeries([t for t, _ in records], [v for _, v in records])
    times.sort()
    pieces = integrate(series, times, order=order).values
    whole = integral(series, TimeInterval(times[0], times[-1]), order=order)
    assert sum(pieces) == pytest.approx(whole, rel=1e-9, abs=1e-6)
