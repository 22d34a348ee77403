# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Timestamped record basic types."""

import math
import numbers
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Generic, Self, TypeVar

UNIX_EPOCH = datetime.fromtimestamp(0.0, tz=timezone.utc)
"""The UNIX epoch (in UTC)."""

ValueT = TypeVar("ValueT")
"""Type variable for the value carried by a record."""

Timestamp = float | int | datetime
"""Anything that can be used as a timestamp.

Numbers are seconds since the UNIX epoch, naive datetimes are interpreted as UTC.
"""


def to_timestamp(timestamp: Timestamp) -> float:
    """Convert a timestamp to seconds since the UNIX epoch.

    Args:
        timestamp: A number of seconds since the UNIX epoch or a datetime.
            Naive datetimes are interpreted as UTC.

    Returns:
        The number of seconds since the UNIX epoch.

    Raises:
        TypeError: If the timestamp is neither a real number nor a datetime.
    """
    if isinstance(timestamp, datetime):
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)
        return (timestamp - UNIX_EPOCH).total_seconds()
    if isinstance(timestamp, numbers.Real) and not isinstance(timestamp, bool):
        return float(timestamp)
    raise TypeError(f"Not a valid timestamp: {timestamp!r}")


def to_datetime(timestamp: float) -> datetime:
    """Convert seconds since the UNIX epoch to an aware UTC datetime.

    Args:
        timestamp: Seconds since the UNIX epoch.

    Returns:
        The corresponding UTC datetime.
    """
    return UNIX_EPOCH + timedelta(seconds=timestamp)


def _to_seconds(delta: float | int | timedelta) -> float:
    if isinstance(delta, timedelta):
        return delta.total_seconds()
    return float(delta)


@dataclass(frozen=True)
class TimeRecord(Generic[ValueT]):
    """A value observed at a particular point in time.

    Records are ordered by their timestamp only, two records with the same
    timestamp are neither smaller nor bigger than each other. Equality compares
    both the timestamp and the value.
    """

    timestamp: float
    """Seconds since the UNIX epoch at which the value was observed."""

    value: ValueT
    """The observed value."""

    def __post_init__(self) -> None:
        """Normalize the timestamp to seconds since the UNIX epoch.

        Raises:
            ValueError: If the timestamp is NaN.
        """
        timestamp = to_timestamp(self.timestamp)
        if math.isnan(timestamp):
            raise ValueError("A record timestamp can't be NaN")
        object.__setattr__(self, "timestamp", timestamp)

    @property
    def datetime(self) -> datetime:
        """The timestamp of this record as a UTC datetime."""
        return to_datetime(self.timestamp)

    def __lt__(self, other: Any) -> bool:
        """Compare by timestamp."""
        if not isinstance(other, TimeRecord):
            return NotImplemented
        return self.timestamp < other.timestamp

    def __le__(self, other: Any) -> bool:
        """Compare by timestamp."""
        if not isinstance(other, TimeRecord):
            return NotImplemented
        return self.timestamp <= other.timestamp

    def __gt__(self, other: Any) -> bool:
        """Compare by timestamp."""
        if not isinstance(other, TimeRecord):
            return NotImplemented
        return self.timestamp > other.timestamp

    def __ge__(self, other: Any) -> bool:
        """Compare by timestamp."""
        if not isinstance(other, TimeRecord):
            return NotImplemented
        return self.timestamp >= other.timestamp


@dataclass(frozen=True)
class TimeInterval:
    """A closed range of time between two timestamps.

    The bounds can be given in any order, they are sorted on construction so
    that `lo <= hi` always holds.

    Example:
        ```python
        from datetime import datetime, timezone

        interval = TimeInterval(5.0, 2.0)
        assert (interval.lo, interval.hi) == (2.0, 5.0)

        # Shifting an interval moves both bounds
        assert interval + 0.5 == TimeInterval(2.5, 5.5)

        # Datetimes are converted to seconds since the UNIX epoch
        interval = TimeInterval(
            datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc),
            datetime(1970, 1, 1, 0, 2, tzinfo=timezone.utc),
        )
        assert (interval.lo, interval.hi) == (60.0, 120.0)
        ```
    """

    lo: float
    """The lower bound, in seconds since the UNIX epoch."""

    hi: float
    """The upper bound, in seconds since the UNIX epoch."""

    def __post_init__(self) -> None:
        """Convert and sort the bounds.

        Raises:
            ValueError: If any of the bounds is NaN.
        """
        lo = to_timestamp(self.lo)
        hi = to_timestamp(self.hi)
        if math.isnan(lo) or math.isnan(hi):
            raise ValueError(f"Interval bounds can't be NaN: ({self.lo}, {self.hi})")
        if hi < lo:
            lo, hi = hi, lo
        object.__setattr__(self, "lo", lo)
        object.__setattr__(self, "hi", hi)

    @property
    def width(self) -> float:
        """The length of the interval in seconds."""
        return self.hi - self.lo

    @property
    def datetimes(self) -> tuple[datetime, datetime]:
        """The bounds of the interval as UTC datetimes."""
        return to_datetime(self.lo), to_datetime(self.hi)

    def __add__(self, delta: float | int | timedelta) -> Self:
        """Shift both bounds forward.

        Args:
            delta: Seconds (or a timedelta) to shift the interval by.

        Returns:
            A new, shifted interval.
        """
        if not isinstance(delta, (numbers.Real, timedelta)):
            return NotImplemented
        seconds = _to_seconds(delta)
        return self.__class__(self.lo + seconds, self.hi + seconds)

    def __sub__(self, delta: float | int | timedelta) -> Self:
        """Shift both bounds backwards.

        Args:
            delta: Seconds (or a timedelta) to shift the interval by.

        Returns:
            A new, shifted interval.
        """
        if not isinstance(delta, (numbers.Real, timedelta)):
            return NotImplemented
        seconds = _to_seconds(delta)
        return self.__class__(self.lo - seconds, self.hi - seconds)

    def __contains__(self, timestamp: Timestamp) -> bool:
        """Check whether a timestamp falls within the (closed) interval.

        Args:
            timestamp: The timestamp to check.

        Returns:
            `True` if `lo <= timestamp <= hi`.
        """
        return self.lo <= to_timestamp(timestamp) <= self.hi
