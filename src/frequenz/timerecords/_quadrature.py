# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Integrals and averages of time series over time.

Integrals are computed exactly for the chosen interpolation: with order 0 the
area under the zero-order hold (a sum of rectangles), with order 1 the area
under the piecewise-linear interpolant (a sum of trapezoids). Outside the time
range of the series the values saturate to the nearest record, as they do in
[`interpolate()`][frequenz.timerecords.interpolate].

Values must support addition and multiplication by a scalar.
"""

import functools
import itertools
import operator
from collections.abc import Iterable, Sequence
from typing import Any

from ._base_types import Timestamp, TimeInterval, TimeRecord, ValueT, to_timestamp
from ._exceptions import EmptyTimeSeriesError
from ._interpolation import check_linear, check_order, value_at
from ._search import first_at_or_after, last_at_or_before
from ._time_series import TimeSeries


def _segment(start_value: Any, end_value: Any, width: float, order: int) -> Any:
    if order == 0:
        return start_value * width
    return (start_value + end_value) * (0.5 * width)


def _check_integrable(series: Sequence[TimeRecord[Any]], order: int, name: str) -> None:
    check_order(order)
    if not series:
        raise EmptyTimeSeriesError(name)
    check_linear(series[0].value, name)


def _valid_hint(
    series: Sequence[TimeRecord[Any]], timestamp: float, hint: int | None
) -> int:
    """Return the hint if no record before it is needed to integrate from `timestamp`."""
    if hint is None or not 0 <= hint < len(series):
        return 0
    if series[hint].timestamp > timestamp:
        return 0
    return hint


def _integral(
    series: Sequence[TimeRecord[Any]], lo: float, hi: float, order: int, hint: int
) -> tuple[Any, int]:
    """Integrate a non-empty series from `lo` to `hi`.

    Args:
        series: A non-empty, chronologically sorted sequence of records.
        lo: The start of the integration interval.
        hi: The end of the integration interval.
        order: The interpolation order.
        hint: A position at or before the last record at or before `lo`.

    Returns:
        The integral and a hint that is valid for an interval starting at `hi`.
    """
    # Breakpoints are the records strictly inside the interval
    first = last_at_or_before(series, lo, lo=hint) + 1
    stop = first_at_or_after(series, hi, lo=first)

    prev_timestamp = lo
    prev_value = value_at(series, lo, order, lo=hint)
    contributions = []
    for index in range(first, stop):
        record = series[index]
        contributions.append(
            _segment(prev_value, record.value, record.timestamp - prev_timestamp, order)
        )
        prev_timestamp, prev_value = record.timestamp, record.value
    end_value = value_at(series, hi, order, lo=max(stop - 1, 0))
    contributions.append(_segment(prev_value, end_value, hi - prev_timestamp, order))

    return functools.reduce(operator.add, contributions), max(stop - 1, 0)


def _query_times(timestamps: Iterable[Timestamp]) -> list[float]:
    queries = [to_timestamp(t) for t in timestamps]
    for prev, curr in itertools.pairwise(queries):
        if curr < prev:
            raise ValueError(
                f"Query times must be in ascending order, but {curr} comes after {prev}"
            )
    return queries


def integral(
    series: Sequence[TimeRecord[ValueT]],
    interval: TimeInterval,
    *,
    order: int = 1,
    hint: int | None = None,
) -> ValueT:
    """Integrate a time series over an interval.

    When integrating over consecutive intervals, passing the position of a
    record at or before the start of the interval as `hint` narrows the
    searches. The hint never changes the result: an invalid hint is ignored.

    Example:
        ```python
        series = TimeSeries([1, 2, 3, 4, 5], [1.0, 2.0, 3.0, 4.0, 5.0])

        assert integral(series, TimeInterval(1.5, 2.5), order=0) == 1.5
        assert integral(series, TimeInterval(1.5, 2.5), order=1) == 2.0
        ```

    Args:
        series: The time series to integrate.
        interval: The interval to integrate over.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).
        hint: The position of a record at or before `interval.lo`.

    Returns:
        The value of the integral, in value units times seconds.
    """
    _check_integrable(series, order, "integrate")
    result, _ = _integral(
        series,
        interval.lo,
        interval.hi,
        order,
        _valid_hint(series, interval.lo, hint),
    )
    return result  # type: ignore[no-any-return]


def integrate(
    series: Sequence[TimeRecord[ValueT]],
    timestamps: Iterable[Timestamp],
    *,
    order: int = 1,
) -> TimeSeries[ValueT]:
    """Integrate a time series between consecutive query times.

    Args:
        series: The time series to integrate.
        timestamps: The ascending query times. `m` query times produce `m - 1`
            integrals.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).

    Returns:
        A time series with one integral per pair of consecutive query times,
            stamped with the end of each interval.

    Raises:
        ValueError: If the query times are not in ascending order.
    """
    queries = _query_times(timestamps)
    _check_integrable(series, order, "integrate")

    integrals = []
    hint = 0
    for lo, hi in itertools.pairwise(queries):
        result, hint = _integral(series, lo, hi, order, hint)
        integrals.append(result)
    return TimeSeries(queries[1:], integrals)


def average(
    series: Sequence[TimeRecord[ValueT]],
    timestamps: Iterable[Timestamp],
    *,
    order: int = 1,
) -> TimeSeries[ValueT]:
    """Average a time series over time between consecutive query times.

    Each average is the integral over the interval divided by its width. The
    average over a zero-width interval is the interpolated value at that time.

    Example:
        ```python
        series = TimeSeries([1, 2, 3, 4, 5], [1.0, 2.0, 3.0, 4.0, 5.0])

        assert average(series, [1.5, 2.5, 3.5], order=0).values == [1.5, 2.5]
        assert average(series, [1.5, 2.5, 3.5], order=1).values == [2.0, 3.0]
        ```

    Args:
        series: The time series to average.
        timestamps: The ascending query times. `m` query times produce `m - 1`
            averages.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).

    Returns:
        A time series with one average per pair of consecutive query times,
            stamped with the end of each interval.

    Raises:
        ValueError: If the query times are not in ascending order.
    """
    queries = _query_times(timestamps)
    _check_integrable(series, order, "average")

    averages = []
    hint = 0
    for lo, hi in itertools.pairwise(queries):
        if hi == lo:
            averages.append(value_at(series, lo, order, lo=hint))
            continue
        result, hint = _integral(series, lo, hi, order, hint)
        averages.append(result * (1.0 / (hi - lo)))
    return TimeSeries(queries[1:], averages)


def accumulate(
    series: Sequence[TimeRecord[ValueT]], *, order: int = 1
) -> TimeSeries[ValueT]:
    """Integrate a time series cumulatively over its own timestamps.

    Example:
        ```python
        series = TimeSeries([1, 2, 3, 4, 5], [1.0, 2.0, 3.0, 4.0, 5.0])

        assert accumulate(series, order=0).values == [1.0, 3.0, 6.0, 10.0]
        assert accumulate(series, order=1).values == [1.5, 4.0, 7.5, 12.0]
        ```

    Args:
        series: The time series to integrate.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).

    Returns:
        A time series with `len(series) - 1` records: the integral from the
            first timestamp up to each of the following timestamps.
    """
    _check_integrable(series, order, "accumulate")

    totals: list[Any] = []
    for prev, curr in itertools.pairwise(series):
        contribution = _segment(
            prev.value, curr.value, curr.timestamp - prev.timestamp, order
        )
        totals.append(contribution if not totals else totals[-1] + contribution)
    return TimeSeries([r.timestamp for r in series][1:], totals)
