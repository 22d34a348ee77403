# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Merging of multiple time series into one."""

import itertools
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from ._base_types import Timestamp, TimeRecord, to_timestamp
from ._exceptions import EmptyTimeSeriesError
from ._interpolation import check_linear, check_order, value_at
from ._time_series import TimeSeries


def _pack(*values: Any) -> tuple[Any, ...]:
    return values


def merge(
    *series: Sequence[TimeRecord[Any]],
    times: Iterable[Timestamp] | None = None,
    combiner: Callable[..., Any] | None = None,
    order: int = 1,
) -> TimeSeries[Any]:
    """Merge several time series into one by interpolating them at common times.

    Every series is interpolated (saturating flat outside its own time range)
    at every query time, and the values of all series at each time are combined
    into a single value with `combiner`, which receives one positional argument
    per series.

    Note:
        The default combiner packs the values into a `tuple`. Tuples don't do
        element-wise arithmetic, so if the merged values need to be added or
        scaled later (for example to integrate them), use a combiner that
        produces a type that does, like `lambda *v: numpy.array(v)`.

    Example:
        ```python
        first = TimeSeries([1, 2, 3], [1.0, 2.0, 3.0])
        second = TimeSeries([1.5, 2.5], [10.0, 20.0])

        merged = merge(first, second, order=0)
        assert merged.timestamps == [1.0, 1.5, 2.0, 2.5, 3.0]
        assert merged.values[1] == (1.0, 10.0)

        total = merge(first, second, combiner=lambda a, b: a + b, order=0)
        assert total.values[1] == 11.0
        ```

    Args:
        *series: The time series to merge.
        times: The ascending query times. Defaults to the sorted union of the
            timestamps of all series.
        combiner: The function that combines the per-series values at a query
            time. Defaults to building a tuple.
        order: The interpolation order, 0 (zero-order hold) or 1 (linear).

    Returns:
        A time series with one combined value per query time.

    Raises:
        ValueError: If no series are given.
        EmptyTimeSeriesError: If any of the series is empty.
    """
    check_order(order)
    if not series:
        raise ValueError("At least one time series is needed to merge")
    for single in series:
        if not single:
            raise EmptyTimeSeriesError("merge")
        if order == 1:
            check_linear(single[0].value, "merge")

    if times is None:
        queries = sorted(
            {r.timestamp for r in itertools.chain.from_iterable(series)}
        )
    else:
        queries = [to_timestamp(t) for t in times]

    combine = combiner if combiner is not None else _pack
    columns = [[value_at(single, t, order) for t in queries] for single in series]
    return TimeSeries(queries, [combine(*row) for row in zip(*columns)])
