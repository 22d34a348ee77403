# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Tests for the timestamp, record and interval types."""

from datetime import datetime, timedelta, timezone

import pytest

from frequenz.timerecords import (
    UNIX_EPOCH,
    TimeInterval,
    TimeRecord,
    to_datetime,
    to_timestamp,
)


def test_to_timestamp() -> None:
    """Test conversion of numbers and datetimes to seconds since the epoch."""
    assert to_timestamp(3) == 3.0
    assert to_timestamp(2.5) == 2.5
    assert to_timestamp(UNIX_EPOCH) == 0.0
    assert to_timestamp(datetime(1970, 1, 1, 0, 1, tzinfo=timezone.utc)) == 60.0
    # Naive datetimes are UTC
    assert to_timestamp(datetime(1970, 1, 1, 0, 1)) == 60.0
    with pytest.raises(TypeError):
        to_timestamp("2024-01-01")  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        to_timestamp(True)


def test_to_datetime() -> None:
    """Test conversion of seconds since the epoch to datetimes."""
    assert to_datetime(0.0) == UNIX_EPOCH
    assert to_datetime(86400.5) == datetime(
        1970, 1, 2, 0, 0, 0, 500000, tzinfo=timezone.utc
    )


def test_record_ordering() -> None:
    """Test records are ordered by timestamp only."""
    early = TimeRecord(1.0, 10)
    late = TimeRecord(2.0, 0)
    same_time = TimeRecord(1.0, 20)

    assert early < late
    assert late > early
    assert early <= same_time
    assert early >= same_time
    assert not early < same_time
    assert early != same_time
    assert early == TimeRecord(1, 10)
    assert sorted([late, early]) == [early, late]


def test_record_datetime() -> None:
    """Test records accept and expose datetimes."""
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    record = TimeRecord(when, 1.0)
    assert record.timestamp == when.timestamp()
    assert record.datetime == when


def test_record_invalid_timestamp() -> None:
    """Test records can't be created with timestamps that can't be ordered."""
    with pytest.raises(ValueError):
        TimeRecord(float("nan"), 1.0)
    with pytest.raises(TypeError):
        TimeRecord("2024-01-01", 1.0)  # type: ignore[arg-type]


def test_record_is_frozen() -> None:
    """Test the timestamp of a record can't be changed."""
    record = TimeRecord(1.0, 1.0)
    with pytest.raises(AttributeError):
        record.timestamp = 2.0  # type: ignore[misc]


def test_interval_sorted() -> None:
    """Test interval bounds are sorted on construction."""
    assert TimeInterval(5, 2) == TimeInterval(2, 5)
    interval = TimeInterval(5, 2)
    assert (interval.lo, interval.hi) == (2.0, 5.0)
    assert interval.width == 3.0


def test_interval_invalid() -> None:
    """Test malformed intervals fail on construction."""
    with pytest.raises(ValueError):
        TimeInterval(float("nan"), 1.0)
    with pytest.raises(TypeError):
        TimeInterval("a", 1.0)  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        TimeInterval(None, 1.0)  # type: ignore[arg-type]


def test_interval_shift() -> None:
    """Test shifting intervals."""
    interval = TimeInterval(-5, -2)
    assert interval + 0.5 == TimeInterval(-4.5, -1.5)
    assert interval - 1 == TimeInterval(-6, -3)
    assert interval + timedelta(seconds=2) == TimeInterval(-3, 0)


def test_interval_contains() -> None:
    """Test the interval contains its bounds."""
    interval = TimeInterval(1, 2)
    assert 1 in interval
    assert 1.5 in interval
    assert 2 in interval
    assert 2.1 not in interval
    assert datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc) in interval


def test_interval_datetimes() -> None:
    """Test intervals built from datetimes."""
    start = datetime(2024, 1, 1, 0, 0, 48, 928000, tzinfo=timezone.utc)
    end = datetime(2024, 1, 1, 0, 0, 49, 115000, tzinfo=timezone.utc)
    interval = TimeInterval(end, start)
    assert interval.datetimes == (start, end)
    assert interval.width == pytest.approx(0.187)
