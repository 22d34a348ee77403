# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Performance test for integrating over consecutive intervals."""

import random
import timeit
from datetime import datetime, timedelta, timezone

import numpy as np

from frequenz.timerecords import TimeInterval, TimeRecord, TimeSeries, integral, integrate

MINUTES_IN_A_DAY = 24 * 60


def fill_series(days: int, series: TimeSeries[float]) -> None:
    """Fill the given series with one record per minute, pushed in random order."""
    random.seed(0)
    basetime = datetime(2022, 1, 1, tzinfo=timezone.utc)
    print("..filling", end="", flush=True)

    for day in range(days):
        for i in random.sample(range(MINUTES_IN_A_DAY), MINUTES_IN_A_DAY):
            series.push(
                TimeRecord(basetime + timedelta(days=day, minutes=i), float(i % 60))
            )


def hourly_times(days: int) -> list[float]:
    """Get the hour boundaries of the given number of days."""
    basetime = datetime(2022, 1, 1, tzinfo=timezone.utc).timestamp()
    return list(np.arange(days * 24 + 1) * 3600.0 + basetime)


def integrate_hinted(series: TimeSeries[float], times: list[float]) -> float:
    """Integrate every hour, reusing the position found for the previous hour."""
    return sum(integrate(series, times, order=1).values)


def integrate_unhinted(series: TimeSeries[float], times: list[float]) -> float:
    """Integrate every hour, searching the whole series each time."""
    return sum(
        integral(series, TimeInterval(lo, hi), order=1)
        for lo, hi in zip(times, times[1:])
    )


def main() -> None:
    """Run benchmark."""
    num_runs = 20
    days = 29

    series = TimeSeries[float]()
    fill_time = timeit.Timer(lambda: fill_series(days, series)).timeit(number=1)
    print("")

    times = hourly_times(days)
    hinted = timeit.Timer(lambda: integrate_hinted(series, times)).timeit(
        number=num_runs
    )
    unhinted = timeit.Timer(lambda: integrate_unhinted(series, times)).timeit(
        number=num_runs
    )

    print(f"Time to fill {days} days with data: {fill_time} seconds")
    print(
        f"Hourly integrals over {days} days:\n\t"
        + f"Hinted:   {hinted / num_runs} seconds\n\t"
        + f"Unhinted: {unhinted / num_runs} seconds\n\t"
        + f"Diff:     {hinted / num_runs - unhinted / num_runs}"
    )


if __name__ == "__main__":
    main()
