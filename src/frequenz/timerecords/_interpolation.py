# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Estimation of time series values at arbitrary timestamps.

Two interpolation orders are supported:

* Order 0 (zero-order hold): the value of the latest record at or before the
  requested time.
* Order 1 (linear): the straight line between the records that bracket the
  requested time. Values must support addition and multiplication by a scalar.

Outside the time range of the series both orders saturate to the value of the
nearest record, no slope is ever extrapolated.
"""

import numbers
from collections.abc import Callable, Iterable, Sequence
from datetime import datetime
from typing import Any, TypeVar, overload

from ._base_types import Timestamp, TimeRecord, ValueT, to_timestamp
from ._exceptions import EmptyTimeSeriesError, UnsupportedValueTypeError
from ._search import last_at_or_before
from ._time_series import TimeSeries

ResultT = TypeVar("ResultT")
"""Type variable for the values produced by a mapping function."""


def check_order(order: int) -> None:
    """Check that an interpolation order is supported.

    Args:
        order: The interpolation order to check.

    Raises:
        ValueError: If the order is not 0 or 1.
    """
    if order not in (0, 1):
        raise ValueError(f"Interpolation order must be 0 or 1, not {order!r}")


def check_linear(value: Any, operation: str) -> None:
    """Check that a value supports the arithmetic of linear combinations.

    Args:
        value: A sample value of a time series.
        operation: The name of the operation that needs the arithmetic, used
            in the error message.

    Raises:
        UnsupportedValueTypeError: If the value can't be added to another
            value or multiplied by a scalar.
    """
    try:
        _ = value * 0.5 + value
    except TypeError as err:
        raise UnsupportedValueTypeError(value, operation) from err


def value_at(
    series: Sequence[TimeRecord[Any]], timestamp: float, order: int, *, lo: int = 0
) -> Any:
    """Interpolate the value of a non-empty series at a timestamp.

    No checks are done, callers must make sure the series is not empty, the
    order is valid and, for order 1, that the values support linear
    combinations.

    Args:
        series: A non-empty, chronologically sorted sequence of records.
        timestamp: The time at which to interpolate, in seconds.
        order: The interpolation order.
        lo: The position from which to search for the bracketing records. The
            record at this position must not be after `timestamp`, unless it
            is the first one.

    Returns:
        The interpolated value.
    """
    index = last_at_or_before(series, timestamp, lo)
    if index < 0:
        return series[0].value
    before = series[index]
    if order == 0 or index == len(series) - 1 or before.timestamp == timestamp:
        return before.value
    after = series[index + 1]
    weight = (timestamp - before.timestamp) / (after.timestamp - before.timestamp)
    return before.value * (1.0 - weight) + after.value * weight


def _is_scalar(timestamps: Any) -> bool:
    return isinstance(timestamps, (numbers.Real, datetime))


@overload
def interpolate(
    series: Sequence[TimeRecord[ValueT]], timestamps: Timestamp, *, order: int = 1
) -> TimeRecord[ValueT]: ...


@overload
def interpolate(
    series: Sequence[TimeRecord[ValueT]],
    timestamps: Iterable[Timestamp],
    *,
    order: int = 1,
) -> TimeSeries[ValueT]: ...


def interpolate(
    series: Sequence[TimeRecord[ValueT]],
    timestamps: Timestamp | Iterable[Timestamp],
    *,
    order: int = 1,
) -> TimeRecord[ValueT] | TimeSeries[ValueT]:
    """Interpolate a time series at one or more timestamps.

    Example:
        ```python
        series = TimeSeries([1, 2, 3, 4, 5], [1.0, 2.0, 3.0, 4.0, 5.0])

        assert interpolate(series, 2.5, order=0).value == 2.0
        assert interpolate(series, 2.5, order=1).value == 2.5
        assert interpolate(series, [0, 6], order=1).values == [1.0, 5.0]
        ```

    Args:
        series: The time series to interpolate.
        timestamps: A single timestamp or an iterable of timestamps.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).

    Returns:
        A record with the interpolated value for a single timestamp, or a time
            series with one record per requested timestamp.

    Raises:
        EmptyTimeSeriesError: If the time series is empty.
    """
    check_order(order)
    if not series:
        raise EmptyTimeSeriesError("interpolate")
    if order == 1:
        check_linear(series[0].value, "linearly interpolate")

    if _is_scalar(timestamps):
        timestamp = to_timestamp(timestamps)  # type: ignore[arg-type]
        return TimeRecord(timestamp, value_at(series, timestamp, order))

    queries = [to_timestamp(t) for t in timestamps]  # type: ignore[union-attr]
    return TimeSeries(queries, [value_at(series, t, order) for t in queries])


@overload
def strict_interpolate(
    series: Sequence[TimeRecord[ValueT]], timestamps: Timestamp, *, order: int = 1
) -> TimeRecord[ValueT | None]: ...


@overload
def strict_interpolate(
    series: Sequence[TimeRecord[ValueT]],
    timestamps: Iterable[Timestamp],
    *,
    order: int = 1,
) -> TimeSeries[ValueT | None]: ...


def strict_interpolate(
    series: Sequence[TimeRecord[ValueT]],
    timestamps: Timestamp | Iterable[Timestamp],
    *,
    order: int = 1,
) -> TimeRecord[ValueT | None] | TimeSeries[ValueT | None]:
    """Interpolate a time series without extrapolating outside its time range.

    Works like [`interpolate()`][frequenz.timerecords.interpolate], but the
    value is `None` for any timestamp strictly before the first record or
    strictly after the last one. This is not an error: `None` is the expected
    result for times the series knows nothing about.

    Args:
        series: The time series to interpolate.
        timestamps: A single timestamp or an iterable of timestamps.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).

    Returns:
        A record with the interpolated value (or `None`) for a single
            timestamp, or a time series with one record per requested timestamp.
    """
    check_order(order)
    if series and order == 1:
        check_linear(series[0].value, "linearly interpolate")

    def strict_value_at(timestamp: float) -> ValueT | None:
        if (
            not series
            or timestamp < series[0].timestamp
            or timestamp > series[-1].timestamp
        ):
            return None
        return value_at(series, timestamp, order)  # type: ignore[no-any-return]

    if _is_scalar(timestamps):
        timestamp = to_timestamp(timestamps)  # type: ignore[arg-type]
        return TimeRecord(timestamp, strict_value_at(timestamp))

    queries = [to_timestamp(t) for t in timestamps]  # type: ignore[union-attr]
    return TimeSeries(queries, [strict_value_at(t) for t in queries])


def map_values(
    function: Callable[[ValueT], ResultT], series: Sequence[TimeRecord[ValueT]]
) -> TimeSeries[ResultT]:
    """Apply a function to every value of a time series.

    A type can be used as function to convert the values, for example
    `map_values(float, series)`.

    Args:
        function: The function to apply to each value.
        series: The time series to map.

    Returns:
        A new time series with the same timestamps and the mapped values.
    """
    return TimeSeries(
        [r.timestamp for r in series], [function(r.value) for r in series]
    )


def map_values_inplace(
    function: Callable[[ValueT], ValueT], series: TimeSeries[ValueT]
) -> TimeSeries[ValueT]:
    """Apply a function to every value of a time series, in place.

    Timestamps are never touched.

    Args:
        function: The function to apply to each value.
        series: The time series to update.

    Returns:
        The same time series, for chaining.
    """
    series[:] = [function(r.value) for r in series]
    return series
