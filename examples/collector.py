# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Collect two noisy channels and average every chunk on common timestamps."""

import asyncio
import random
from datetime import datetime, timedelta, timezone

import numpy as np
from frequenz.channels import Broadcast

from frequenz.timerecords import (
    CollectorConfig,
    CollectorService,
    Snapshot,
    TimeRecord,
    TimeSeriesCollector,
    average,
    merge,
)

CHUNK = timedelta(seconds=1)


async def _produce(
    sender_chan: Broadcast[tuple[str, TimeRecord[float]]], start: float
) -> None:
    sender = sender_chan.new_sender()
    now = start
    for _ in range(100):
        now += random.uniform(0.01, 0.1)
        label = random.choice(["voltage", "current"])
        await sender.send((label, TimeRecord(now, random.gauss(230.0, 1.0))))
        await asyncio.sleep(0)
    await sender_chan.close()


def _print_averages(snapshot: Snapshot[float]) -> None:
    if any(len(series) == 0 for series in snapshot.data.values()):
        return
    merged = merge(*snapshot.data.values(), combiner=lambda *v: np.array(v))
    lo, hi = snapshot.interval.lo, snapshot.interval.hi
    averages = average(merged, [lo, hi], order=1)
    labels = ", ".join(snapshot.data)
    print(f"{snapshot.interval.datetimes[0]} ({labels}): {averages[0].value}")


async def run() -> None:
    """Feed random records to a collector service and print the chunk averages."""
    start = datetime.now(timezone.utc).timestamp()
    records = Broadcast[tuple[str, TimeRecord[float]]](name="records")
    snapshots = Broadcast[Snapshot[float]](name="snapshots")
    snapshot_recv = snapshots.new_receiver()

    collector = TimeSeriesCollector[float](CollectorConfig(interval=CHUNK), start=start)
    async with CollectorService(
        collector, records.new_receiver(), snapshots.new_sender(), name="example"
    ) as service:
        producer = asyncio.create_task(_produce(records, start))
        while not producer.done() or service.is_running:
            try:
                async with asyncio.timeout(0.5):
                    _print_averages(await snapshot_recv.receive())
            except TimeoutError:
                break
        await producer


asyncio.run(run())
