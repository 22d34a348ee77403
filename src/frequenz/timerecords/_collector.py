# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Buffering of labelled records into periodic snapshots."""

from __future__ import annotations

import asyncio
import inspect
import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Generic

from ._base_types import Timestamp, TimeInterval, TimeRecord, ValueT, to_timestamp
from ._search import first_at_or_after
from ._time_series import TimeSeries

_logger = logging.getLogger(__name__)


SnapshotCallback = Callable[[Mapping[str, TimeSeries[Any]], TimeInterval], Any]
"""A consumer of snapshots.

It is called with the per-label time series of a snapshot and the interval the
snapshot covers. It can be a plain function or a coroutine function.
"""


def _is_async(callback: SnapshotCallback) -> bool:
    return inspect.iscoroutinefunction(callback) or inspect.iscoroutinefunction(
        getattr(callback, "__call__", None)
    )


async def _call(callback: SnapshotCallback, snapshot: Snapshot[Any]) -> Any:
    """Run a snapshot callback, in a worker thread if it is not a coroutine function."""
    if _is_async(callback):
        return await callback(snapshot.data, snapshot.interval)
    result = await asyncio.to_thread(callback, snapshot.data, snapshot.interval)
    # Callables returning an awaitable without being coroutine functions
    if inspect.isawaitable(result):
        return await result
    return result


@dataclass(frozen=True)
class CollectorConfig:
    """Time series collector configuration."""

    interval: timedelta = timedelta(0)
    """The width of the chunks in which records are collected.

    Chunk boundaries are aligned to multiples of this interval since the UNIX
    epoch. A zero interval means a snapshot is emitted for every distinct new
    timestamp.

    It must not be negative.
    """

    delay: timedelta = timedelta(0)
    """The grace period before a chunk is closed.

    A chunk ending at `t` is only emitted when a record at or after
    `t + delay` arrives, so records arriving out of order by less than `delay`
    still make it into the right chunk.

    It must not be negative.
    """

    def __post_init__(self) -> None:
        """Check that config values are valid.

        Raises:
            ValueError: If any value is out of range.
        """
        if self.interval < timedelta(0):
            raise ValueError(f"interval ({self.interval}) must not be negative")
        if self.delay < timedelta(0):
            raise ValueError(f"delay ({self.delay}) must not be negative")


@dataclass(frozen=True)
class Snapshot(Generic[ValueT]):
    """The records of a closed chunk, per label."""

    data: dict[str, TimeSeries[ValueT]]
    """The records of each label with a timestamp before the end of the interval.

    The first record of each series is usually the latest record at or before
    the start of the interval, so the value in effect at the start is known.
    """

    interval: TimeInterval
    """The time covered by this snapshot, from the previous boundary to the new one."""


class TimeSeriesCollector(Generic[ValueT]):
    """Collect labelled records and split them into time chunks.

    Records are pushed per label with [`apply()`][frequenz.timerecords.TimeSeriesCollector.apply].
    The collector keeps a boundary (the `timer`) separating what was already
    emitted from the chunk being filled. When a record shows that a later
    boundary is due, all the records before the new boundary are emitted as a
    [`Snapshot`][frequenz.timerecords.Snapshot] and dropped from the
    collector, except for the latest record of each label at or before the
    boundary, which is kept as the starting state of the next chunk. Records
    sitting exactly on the boundary are never emitted before it, so they are
    all kept.

    The new boundary for a record at `t` is
    `floor((t - delay) / interval) * interval`, or `t - delay` for a zero
    interval.

    Records older than the current boundary are still stored and go out with
    the next snapshot, mixed with the records of a chunk they don't belong
    to, and are dropped after it. Use a `delay` big enough to cover the
    expected out of order arrivals.

    The collector is not thread-safe, it must be used by a single writer.

    Example:
        ```python
        from datetime import timedelta

        collector = TimeSeriesCollector[float](
            CollectorConfig(interval=timedelta(seconds=1)), start=0.0
        )
        assert collector.apply("A", TimeRecord(0.2, 1.0)) is None

        snapshot = collector.apply("A", TimeRecord(1.3, 2.0))
        assert snapshot is not None
        assert snapshot.interval == TimeInterval(0.0, 1.0)
        assert snapshot.data["A"].values == [1.0]
        ```
    """

    def __init__(
        self,
        config: CollectorConfig | None = None,
        *,
        start: Timestamp | None = None,
    ) -> None:
        """Initialize this collector.

        Args:
            config: The collector configuration. If `None`, the defaults of
                [`CollectorConfig`][frequenz.timerecords.CollectorConfig] are
                used.
            start: The creation time, used to place the first boundary. If
                `None`, the current time is used.
        """
        self._config = CollectorConfig() if config is None else config
        self._interval_s = self._config.interval.total_seconds()
        self._delay_s = self._config.delay.total_seconds()

        now = datetime.now(timezone.utc) if start is None else start
        self._timer: float = self._align(to_timestamp(now))
        """The boundary between the emitted records and the chunk being filled."""

        self._data: dict[str, TimeSeries[ValueT]] = {}
        self._tasks: set[asyncio.Task[Any]] = set()

    @property
    def config(self) -> CollectorConfig:
        """The configuration of this collector."""
        return self._config

    @property
    def timer(self) -> float:
        """The current chunk boundary, in seconds since the UNIX epoch."""
        return self._timer

    @property
    def data(self) -> Mapping[str, TimeSeries[ValueT]]:
        """The records currently held, per label."""
        return self._data

    @property
    def tasks(self) -> frozenset[asyncio.Task[Any]]:
        """The callback tasks spawned by `dispatch()` that haven't finished yet."""
        return frozenset(self._tasks)

    def apply(self, label: str, record: TimeRecord[ValueT]) -> Snapshot[ValueT] | None:
        """Add a record and emit a snapshot if a chunk got closed.

        Args:
            label: The label of the channel the record belongs to.
            record: The record to add.

        Returns:
            The snapshot of the closed chunk, or `None` if no chunk was closed.
        """
        series = self._data.get(label)
        if series is None:
            series = self._data[label] = TimeSeries()
        series.push(record)

        if record.timestamp < self._timer:
            _logger.debug(
                "Late record for %r at %s, before the current boundary %s",
                label,
                record.timestamp,
                self._timer,
            )

        boundary = self._boundary(record.timestamp)
        if boundary <= self._timer:
            return None
        return self._flush(boundary)

    def dispatch(
        self,
        callback: SnapshotCallback,
        label: str,
        record: TimeRecord[ValueT],
    ) -> asyncio.Task[Any] | None:
        """Add a record and hand any emitted snapshot to a callback.

        The callback runs in a new task, concurrently with the caller: coroutine
        functions (and objects with an `async def __call__`) are awaited on the
        running loop, other callables run in a worker thread, and an awaitable
        they return is awaited on the loop. There is no guarantee that
        callbacks spawned by successive snapshots finish in the order they
        were spawned.

        Args:
            callback: The consumer of the snapshot.
            label: The label of the channel the record belongs to.
            record: The record to add.

        Returns:
            The task running the callback, or `None` if no chunk was closed.

        Raises:
            RuntimeError: If called without a running event loop.
        """
        # Fail before touching any state if no task can be spawned
        asyncio.get_running_loop()

        snapshot = self.apply(label, record)
        if snapshot is None:
            return None

        task = asyncio.create_task(
            _call(callback, snapshot),
            name=f"snapshot-callback-{snapshot.interval.hi}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._on_callback_done)
        _logger.debug("Spawned %s", task.get_name())
        return task

    def take(self, timestamp: Timestamp) -> Snapshot[ValueT]:
        """Close the chunks that are due at a given time, without adding a record.

        This is useful to drain the collector when no records are arriving,
        for example on an idle timeout or on shutdown.

        Args:
            timestamp: The time at which to evaluate the boundary.

        Returns:
            The snapshot of the closed chunks. If no boundary is due yet, its
                interval is empty and it only holds the records kept from the
                previous snapshot.
        """
        boundary = max(self._boundary(to_timestamp(timestamp)), self._timer)
        return self._flush(boundary)

    def _align(self, timestamp: float) -> float:
        if self._interval_s > 0:
            return math.floor(timestamp / self._interval_s) * self._interval_s
        return timestamp

    def _boundary(self, timestamp: float) -> float:
        return self._align(timestamp - self._delay_s)

    def _flush(self, boundary: float) -> Snapshot[ValueT]:
        interval = TimeInterval(self._timer, boundary)
        data: dict[str, TimeSeries[ValueT]] = {}
        for label, series in self._data.items():
            stop = first_at_or_after(series, boundary)
            data[label] = series[:stop]
            if stop < len(series) and series[stop].timestamp == boundary:
                # A record on the boundary is the next starting state
                del series[:stop]
            else:
                del series[: max(stop - 1, 0)]
        self._timer = boundary

        _logger.debug(
            "Emitting snapshot for %s with %s records",
            interval,
            sum(len(s) for s in data.values()),
        )
        return Snapshot(data, interval)

    def _on_callback_done(self, task: asyncio.Task[Any]) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        if (error := task.exception()) is not None:
            _logger.warning("%s failed", task.get_name(), exc_info=error)
