# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Chronologically sorted sequences of timestamped records."""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Sequence
from datetime import datetime
from typing import Any, Generic, overload

import numpy as np

from ._base_types import Timestamp, TimeRecord, ValueT, to_datetime, to_timestamp


def _timestamp(record: TimeRecord[Any]) -> float:
    return record.timestamp


def _is_sorted(records: Sequence[TimeRecord[Any]]) -> bool:
    return all(
        prev.timestamp <= curr.timestamp for prev, curr in zip(records, records[1:])
    )


def _is_nan(value: Any) -> bool:
    try:
        return bool(np.any(np.isnan(value)))
    except TypeError:
        return False


class TimeSeries(Sequence[TimeRecord[ValueT]], Generic[ValueT]):
    """A sequence of records kept sorted by timestamp.

    The records are always in chronological order (`t[i] <= t[i+1]`), records
    sharing a timestamp are kept in the order they were added.

    A time series owns its records. Values can be replaced in place, but
    timestamps can't: use [`retime()`][frequenz.timerecords.TimeSeries.retime]
    to move a record, which deletes it and pushes it back at the right position.

    Example:
        ```python
        series = TimeSeries([3, 1, 2], ["c", "a", "b"])
        assert series.values == ["a", "b", "c"]

        series.push(TimeRecord(2.5, "x"))
        assert series.timestamps == [1.0, 2.0, 2.5, 3.0]

        series[0] = "z"
        assert series[0] == TimeRecord(1.0, "z")
        ```
    """

    def __init__(
        self,
        timestamps: Iterable[Timestamp] = (),
        values: Iterable[ValueT] = (),
    ) -> None:
        """Create a time series from parallel timestamp and value collections.

        The records are sorted by timestamp if the given order is not already
        chronological. The sort is stable.

        Args:
            timestamps: The timestamps of the records.
            values: The values of the records, one per timestamp.

        Raises:
            ValueError: If the number of timestamps and values differ.
        """
        timestamps = list(timestamps)
        values = list(values)
        if len(timestamps) != len(values):
            raise ValueError(
                f"Got {len(timestamps)} timestamps but {len(values)} values"
            )
        records = [TimeRecord(t, v) for t, v in zip(timestamps, values)]
        if not _is_sorted(records):
            records.sort(key=_timestamp)
        self._records: list[TimeRecord[ValueT]] = records

    @classmethod
    def from_records(cls, records: Iterable[TimeRecord[ValueT]]) -> TimeSeries[ValueT]:
        """Create a time series from records.

        Args:
            records: The records, in any order.

        Returns:
            A new time series holding the records in chronological order.
        """
        series: TimeSeries[ValueT] = cls()
        series._records = sorted(records, key=_timestamp)
        return series

    @property
    def timestamps(self) -> list[float]:
        """The timestamps of all records, in seconds since the UNIX epoch."""
        return [r.timestamp for r in self._records]

    @property
    def datetimes(self) -> list[datetime]:
        """The timestamps of all records, as UTC datetimes."""
        return [to_datetime(r.timestamp) for r in self._records]

    @property
    def values(self) -> list[ValueT]:
        """The values of all records."""
        return [r.value for r in self._records]

    def copy(self) -> TimeSeries[ValueT]:
        """Return a shallow copy of this time series.

        Returns:
            A new time series with the same records.
        """
        return self._from_sorted(self._records)

    def view(self, index: slice | range) -> TimeSeriesView[ValueT]:
        """Return a non-owning view over a contiguous range of records.

        The view shares the storage of this time series, so it must not be
        used after records are pushed to or deleted from the series.

        Args:
            index: The range of positions to view. Steps are not supported.

        Returns:
            A view on the requested records.

        Raises:
            ValueError: If a step other than 1 is requested.
        """
        window = range(len(self._records))[
            index if isinstance(index, slice) else slice(index.start, index.stop)
        ]
        if window.step != 1:
            raise ValueError("Views with a step other than 1 are not supported")
        return TimeSeriesView(self._records, window.start, window.stop)

    def push(self, record: TimeRecord[ValueT], *, hint: int | None = None) -> int:
        """Insert a record keeping the chronological order.

        The record is placed after any record with the same timestamp.

        Args:
            record: The record to insert.
            hint: A guess of the insertion position. If it keeps the series
                sorted it is used as is, otherwise it is ignored and the
                position is searched for.

        Returns:
            The position where the record was inserted.
        """
        records = self._records
        timestamp = record.timestamp
        if not records or records[-1].timestamp <= timestamp:
            index = len(records)
        elif hint is not None and self._is_insertion_point(hint, timestamp):
            index = hint
        else:
            index = bisect.bisect_right(records, timestamp, key=_timestamp)
        records.insert(index, record)
        return index

    def retime(self, index: int, timestamp: Timestamp) -> int:
        """Change the timestamp of the record at a given position.

        The record is removed and pushed back with the new timestamp, using its
        old position as hint, so it is only moved if the order requires it or
        if it now shares its timestamp with the records that followed it.

        Args:
            index: The position of the record to change.
            timestamp: The new timestamp.

        Returns:
            The new position of the record.
        """
        index = range(len(self._records))[index]
        record = self._records.pop(index)
        return self.push(TimeRecord(timestamp, record.value), hint=index)

    def _is_insertion_point(self, index: int, timestamp: float) -> bool:
        records = self._records
        if not 0 <= index <= len(records):
            return False
        if index > 0 and records[index - 1].timestamp > timestamp:
            return False
        if index < len(records) and records[index].timestamp <= timestamp:
            return False
        return True

    @classmethod
    def _from_sorted(
        cls, records: Iterable[TimeRecord[ValueT]]
    ) -> TimeSeries[ValueT]:
        series: TimeSeries[ValueT] = cls()
        series._records = list(records)
        return series

    def __len__(self) -> int:
        """Get the number of records.

        Returns:
            The number of records in this time series.
        """
        return len(self._records)

    @overload
    def __getitem__(self, index: int) -> TimeRecord[ValueT]: ...

    @overload
    def __getitem__(self, index: slice) -> TimeSeries[ValueT]: ...

    def __getitem__(
        self, index: int | slice
    ) -> TimeRecord[ValueT] | TimeSeries[ValueT]:
        """Get a record or a copy of a range of records.

        Args:
            index: The position of the record or a slice of positions.

        Returns:
            The record at the position, or a new time series with the records
                in the slice.

        Raises:
            ValueError: If the slice has a negative step.
        """
        if isinstance(index, slice):
            if index.step is not None and index.step < 0:
                raise ValueError("Slicing with a negative step would break the order")
            return self._from_sorted(self._records[index])
        return self._records[index]

    @overload
    def __setitem__(self, index: int, value: ValueT) -> None: ...

    @overload
    def __setitem__(self, index: slice, value: Iterable[ValueT]) -> None: ...

    def __setitem__(self, index: int | slice, value: Any) -> None:
        """Replace the value of one or more records, keeping their timestamps.

        Args:
            index: The position of the record or a slice of positions.
            value: The new value, or an iterable of new values for a slice.

        Raises:
            ValueError: If the number of values doesn't match the slice length.
        """
        records = self._records
        if not isinstance(index, slice):
            records[index] = TimeRecord(records[index].timestamp, value)
            return

        positions = range(len(records))[index]
        values = list(value)
        if len(values) != len(positions):
            raise ValueError(
                f"Can't assign {len(values)} values to {len(positions)} records"
            )
        for position, new_value in zip(positions, values):
            records[position] = TimeRecord(records[position].timestamp, new_value)

    def __delitem__(self, index: int | slice) -> None:
        """Delete one or more records.

        Args:
            index: The position of the record or a slice of positions.
        """
        del self._records[index]

    def __eq__(self, other: object) -> bool:
        """Compare this time series to another sequence of records.

        Args:
            other: The object to compare with.

        Returns:
            `True` if the other object is a sequence with equal records.
        """
        if isinstance(other, (TimeSeries, TimeSeriesView)):
            return len(self) == len(other) and all(
                a == b for a, b in zip(self, other)
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Get the string representation of this time series.

        Returns:
            The string representation of this time series.
        """
        return (
            f"{self.__class__.__name__}"
            f"(timestamps={self.timestamps!r}, values={self.values!r})"
        )


class TimeSeriesView(Sequence[TimeRecord[ValueT]], Generic[ValueT]):
    """A read-only window over the records of a time series.

    Views don't copy any records. They are cheap to create, but they are only
    valid as long as the underlying time series doesn't grow or shrink.
    """

    def __init__(
        self, records: list[TimeRecord[ValueT]], start: int, stop: int
    ) -> None:
        """Create an instance.

        Args:
            records: The storage of the viewed time series.
            start: The position of the first record in the view.
            stop: The position past the last record in the view.
        """
        super().__init__()
        self._records = records
        self._start = start
        self._stop = max(start, stop)

    @property
    def timestamps(self) -> list[float]:
        """The timestamps of the viewed records."""
        return [r.timestamp for r in self]

    @property
    def values(self) -> list[ValueT]:
        """The values of the viewed records."""
        return [r.value for r in self]

    def copy(self) -> TimeSeries[ValueT]:
        """Materialize this view into an owning time series.

        Returns:
            A new time series with the viewed records.
        """
        return TimeSeries.from_records(self)

    def __len__(self) -> int:
        """Get the number of viewed records.

        Returns:
            The number of records in this view.
        """
        return self._stop - self._start

    @overload
    def __getitem__(self, index: int) -> TimeRecord[ValueT]: ...

    @overload
    def __getitem__(self, index: slice) -> TimeSeriesView[ValueT]: ...

    def __getitem__(
        self, index: int | slice
    ) -> TimeRecord[ValueT] | TimeSeriesView[ValueT]:
        """Get a record or a narrower view.

        Args:
            index: The position of the record or a slice of positions.

        Returns:
            The record at the position, or a view on the sliced range.

        Raises:
            ValueError: If the slice has a step other than 1.
        """
        window = range(self._start, self._stop)
        if isinstance(index, slice):
            window = window[index]
            if window.step != 1:
                raise ValueError("Views with a step other than 1 are not supported")
            return TimeSeriesView(self._records, window.start, window.stop)
        return self._records[window[index]]

    def __eq__(self, other: object) -> bool:
        """Compare this view to another sequence of records.

        Args:
            other: The object to compare with.

        Returns:
            `True` if the other object is a sequence with equal records.
        """
        if isinstance(other, (TimeSeries, TimeSeriesView)):
            return len(self) == len(other) and all(
                a == b for a, b in zip(self, other)
            )
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Get the string representation of this view.

        Returns:
            The string representation of this view.
        """
        return (
            f"{self.__class__.__name__}"
            f"(timestamps={self.timestamps!r}, values={self.values!r})"
        )


def drop_nan(series: Sequence[TimeRecord[ValueT]]) -> TimeSeries[ValueT]:
    """Return a copy of a time series without its NaN values.

    A value counts as NaN if it is a NaN float or an array holding any NaN.

    Args:
        series: The time series to filter.

    Returns:
        A new time series without the NaN records.
    """
    return TimeSeries._from_sorted(  # pylint: disable=protected-access
        r for r in series if not _is_nan(r.value)
    )


def drop_nan_inplace(series: TimeSeries[ValueT]) -> TimeSeries[ValueT]:
    """Remove the records with NaN values from a time series.

    Args:
        series: The time series to filter in place.

    Returns:
        The same time series, for chaining.
    """
    kept = [r for r in series if not _is_nan(r.value)]
    del series[:]
    for record in kept:
        series.push(record)
    return series
