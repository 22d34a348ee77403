# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""A background task feeding a collector from a channel."""

import asyncio
import logging
from types import TracebackType
from typing import Generic, Self

from frequenz.channels import Receiver, Sender

from ._base_types import Timestamp, TimeRecord, ValueT
from ._collector import Snapshot, TimeSeriesCollector

_logger = logging.getLogger(__name__)


class CollectorService(Generic[ValueT]):
    """Collect labelled records from a channel and send out the snapshots.

    Every `(label, record)` pair received is applied to the collector, and
    every snapshot it emits is sent through the snapshot sender, in order.
    The work is done by a single background task, created by
    [`start()`][frequenz.timerecords.CollectorService.start]. The task ends
    when the records channel is closed, or when the service is stopped.

    The service can be used as an async context manager, it is started when
    entering the context and stopped when leaving it.

    !!! warning

        A reference to the service must be kept for as long as it is expected
        to run, otherwise its task can be garbage collected.

    Example:
        ```python
        import asyncio
        from datetime import timedelta

        from frequenz.channels import Broadcast

        async def run() -> None:
            records = Broadcast[tuple[str, TimeRecord[float]]](name="records")
            snapshots = Broadcast[Snapshot[float]](name="snapshots")
            snapshot_recv = snapshots.new_receiver()

            collector = TimeSeriesCollector[float](
                CollectorConfig(interval=timedelta(seconds=1)), start=0.0
            )
            async with CollectorService(
                collector, records.new_receiver(), snapshots.new_sender()
            ):
                sender = records.new_sender()
                await sender.send(("A", TimeRecord(0.2, 1.0)))
                await sender.send(("A", TimeRecord(1.3, 2.0)))
                snapshot = await snapshot_recv.receive()
                print(snapshot.interval, snapshot.data["A"])

        asyncio.run(run())
        ```
    """

    def __init__(
        self,
        collector: TimeSeriesCollector[ValueT],
        records_recv: Receiver[tuple[str, TimeRecord[ValueT]]],
        snapshot_sender: Sender[Snapshot[ValueT]],
        *,
        name: str | None = None,
    ) -> None:
        """Initialize this service.

        Args:
            collector: The collector to feed.
            records_recv: The receiver of labelled records.
            snapshot_sender: The sender for the emitted snapshots.
            name: The name of this service, used for debugging. If `None`,
                `str(id(self))` is used.
        """
        self._name: str = str(id(self)) if name is None else name
        self._collector = collector
        self._records_recv = records_recv
        self._snapshot_sender = snapshot_sender
        self._task: asyncio.Task[None] | None = None

    @property
    def name(self) -> str:
        """The name of this service."""
        return self._name

    @property
    def collector(self) -> TimeSeriesCollector[ValueT]:
        """The collector fed by this service."""
        return self._collector

    @property
    def is_running(self) -> bool:
        """Whether the collecting task is still running."""
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start collecting records.

        Does nothing if the service is already running.
        """
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name=f"collect-{self._name}")

    async def stop(self, *, flush_at: Timestamp | None = None) -> None:
        """Stop collecting records.

        Records still waiting in the channel are not applied. The records
        held by the collector are kept, and can be emitted by closing the
        chunks that are due at a given time.

        Args:
            flush_at: If given, the chunks due at this time are closed with
                [`take()`][frequenz.timerecords.TimeSeriesCollector.take] and
                the resulting snapshot is sent before returning.

        Raises:
            Exception: Any exception the collecting task failed with. No
                snapshot is flushed in that case.
        """
        task = self._task
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

        if flush_at is not None:
            await self._snapshot_sender.send(self._collector.take(flush_at))

    async def wait(self) -> None:
        """Wait until the collecting task is done.

        Raises:
            Exception: Any exception the collecting task failed with.
        """
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        """Apply received records and send the snapshots.

        Raises:
            asyncio.CancelledError: if the service task is cancelled.
        """
        try:
            async for label, record in self._records_recv:
                snapshot = self._collector.apply(label, record)
                if snapshot is not None:
                    await self._snapshot_sender.send(snapshot)
        except asyncio.CancelledError:
            _logger.info("%s has been cancelled.", self)
            raise

        _logger.error("%s: records channel has been closed", self)

    async def __aenter__(self) -> Self:
        """Start collecting when entering an async context.

        Returns:
            This service.
        """
        self.start()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Stop collecting when leaving an async context.

        Args:
            exc_type: The type of the exception raised, if any.
            exc_val: The exception raised, if any.
            exc_tb: The traceback of the exception raised, if any.
        """
        await self.stop()

    def __repr__(self) -> str:
        """Return a string representation of this instance.

        Returns:
            A string representation of this instance.
        """
        return (
            f"{type(self).__name__}(name={self._name!r}, "
            f"collector_timer={self._collector.timer}, running={self.is_running})"
        )

    def __str__(self) -> str:
        """Return a string representation of this instance.

        Returns:
            A string representation of this instance.
        """
        return f"{type(self).__name__}[{self._name}]"
