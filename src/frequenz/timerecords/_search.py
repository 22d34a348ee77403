# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Interval search over time series.

All the searches rely on the chronological order of the records and are done
with binary searches, so they take logarithmic time.

The *inner* range of an interval is made of the records that fall inside it.
The *outer* range is the smallest range of records that brackets the interval,
that is, the inner range plus the closest record on each side, when there is
one.

Example:
    ```python
    series = TimeSeries([1, 2, 3, 4, 5], [1, 2, 3, 4, 5])

    assert find_inner(series, TimeInterval(2.1, 4.1)) == range(2, 4)
    assert find_outer(series, TimeInterval(2.1, 4.1)) == range(1, 5)

    # Intervals outside the series give empty inner ranges and clamped outer ones
    assert find_inner(series, TimeInterval(7, 9)) == range(5, 5)
    assert find_outer(series, TimeInterval(7, 9)) == range(4, 5)
    ```
"""

import bisect
from collections.abc import Sequence
from typing import Any

from ._base_types import Timestamp, TimeInterval, TimeRecord, ValueT, to_timestamp
from ._time_series import TimeSeries, TimeSeriesView


def _timestamp(record: TimeRecord[Any]) -> float:
    return record.timestamp


def first_at_or_after(
    series: Sequence[TimeRecord[Any]], timestamp: float, lo: int = 0
) -> int:
    """Find the first position with a timestamp at or after the given one.

    Args:
        series: A chronologically sorted sequence of records.
        timestamp: The timestamp to look for.
        lo: The position from which to start searching.

    Returns:
        The smallest position `i >= lo` with `series[i].timestamp >= timestamp`,
            or `len(series)` if there is none.
    """
    return bisect.bisect_left(series, timestamp, lo=lo, key=_timestamp)


def last_at_or_before(
    series: Sequence[TimeRecord[Any]], timestamp: float, lo: int = 0
) -> int:
    """Find the last position with a timestamp at or before the given one.

    Args:
        series: A chronologically sorted sequence of records.
        timestamp: The timestamp to look for.
        lo: The position from which to start searching.

    Returns:
        The biggest position `i` with `series[i].timestamp <= timestamp`, or
            `lo - 1` if there is none.
    """
    return bisect.bisect_right(series, timestamp, lo=lo, key=_timestamp) - 1


def find_inner(series: Sequence[TimeRecord[Any]], interval: TimeInterval) -> range:
    """Find the range of records that fall inside an interval.

    Args:
        series: A chronologically sorted sequence of records.
        interval: The interval to look for.

    Returns:
        The positions of the records with `interval.lo <= t <= interval.hi`.
            The range is empty if there are no such records, its start is then
            the position where a record inside the interval would be inserted.
    """
    start = first_at_or_after(series, interval.lo)
    stop = bisect.bisect_right(series, interval.hi, lo=start, key=_timestamp)
    return range(start, stop)


def find_outer(series: Sequence[TimeRecord[Any]], interval: TimeInterval) -> range:
    """Find the smallest range of records that brackets an interval.

    The range starts at the last record at or before `interval.lo` (or the
    first record, if there is none) and ends at the first record at or after
    `interval.hi` (or the last record, if there is none).

    Args:
        series: A chronologically sorted sequence of records.
        interval: The interval to look for.

    Returns:
        The bracketing positions. The range is never empty, unless the series
            is.
    """
    if not series:
        return range(0, 0)
    start = max(last_at_or_before(series, interval.lo), 0)
    last = min(first_at_or_after(series, interval.hi, lo=start), len(series) - 1)
    return range(start, last + 1)


def get_inner(series: TimeSeries[ValueT], interval: TimeInterval) -> TimeSeries[ValueT]:
    """Copy the records that fall inside an interval.

    Args:
        series: The time series to search.
        interval: The interval to look for.

    Returns:
        A new time series with the records of the inner range.
    """
    window = find_inner(series, interval)
    return series[window.start : window.stop]


def get_outer(series: TimeSeries[ValueT], interval: TimeInterval) -> TimeSeries[ValueT]:
    """Copy the records that bracket an interval.

    Args:
        series: The time series to search.
        interval: The interval to look for.

    Returns:
        A new time series with the records of the outer range.
    """
    window = find_outer(series, interval)
    return series[window.start : window.stop]


def view_inner(
    series: TimeSeries[ValueT], interval: TimeInterval
) -> TimeSeriesView[ValueT]:
    """View the records that fall inside an interval, without copying them.

    Args:
        series: The time series to search.
        interval: The interval to look for.

    Returns:
        A view on the records of the inner range.
    """
    return series.view(find_inner(series, interval))


def view_outer(
    series: TimeSeries[ValueT], interval: TimeInterval
) -> TimeSeriesView[ValueT]:
    """View the records that bracket an interval, without copying them.

    Args:
        series: The time series to search.
        interval: The interval to look for.

    Returns:
        A view on the records of the outer range.
    """
    return series.view(find_outer(series, interval))


def keep_latest(
    series: TimeSeries[ValueT], timestamp: Timestamp | None = None
) -> TimeSeries[ValueT]:
    """Drop the history of a time series, in place.

    Without a timestamp, only the last record is kept. With a timestamp, the
    records from the last one at or before it (or the first record, if there is
    none) through the end are kept, so the value in effect at `timestamp` is
    still known.

    Args:
        series: The time series to truncate.
        timestamp: The time from which the current state must be kept.

    Returns:
        The same time series, for chaining.
    """
    if not series:
        return series
    if timestamp is None:
        del series[:-1]
    else:
        del series[: max(last_at_or_before(series, to_timestamp(timestamp)), 0)]
    return series
