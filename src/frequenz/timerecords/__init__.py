# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""
Tools for irregularly sampled, timestamped records.

Measurements coming from historians or telemetry buses are rarely sampled at
the same times for every channel. This package turns them into what
multivariate algorithms need: values aligned on common timestamps,
interpolated, integrated and averaged over time.

# Timestamps

Timestamps are `float` seconds since the `UNIX_EPOCH`. Every function that
takes a timestamp also accepts a `datetime` (naive datetimes are taken as UTC).

# Time series

A [`TimeSeries`][frequenz.timerecords.TimeSeries] is a sequence of
[`TimeRecord`][frequenz.timerecords.TimeRecord]s always sorted by timestamp.
On top of it:

* [`find_inner()`][frequenz.timerecords.find_inner] and
  [`find_outer()`][frequenz.timerecords.find_outer] locate the records inside
  or bracketing a [`TimeInterval`][frequenz.timerecords.TimeInterval].
* [`interpolate()`][frequenz.timerecords.interpolate] estimates values at any
  time, with a zero-order hold (`order=0`) or linearly (`order=1`).
* [`integrate()`][frequenz.timerecords.integrate],
  [`average()`][frequenz.timerecords.average] and
  [`accumulate()`][frequenz.timerecords.accumulate] integrate over time.
* [`merge()`][frequenz.timerecords.merge] combines several series on common
  timestamps.

# Collecting

A [`TimeSeriesCollector`][frequenz.timerecords.TimeSeriesCollector] buffers
labelled records and emits a [`Snapshot`][frequenz.timerecords.Snapshot] of
every closed time chunk. Chunks are aligned to multiples of the configured
interval since the `UNIX_EPOCH`:

```
       timer (boundary)          new boundary
       |                         |
|------|-----------|-------------|-----|------
0      1           2             3     |
                                      record at 3.4 (delay = 0)
```

A record at 3.4 closes the chunks up to 3, so the records between the previous
boundary (1) and 3 are emitted in a single snapshot covering `[1, 3)`.
"""

from ._base_types import (
    UNIX_EPOCH,
    Timestamp,
    TimeInterval,
    TimeRecord,
    to_datetime,
    to_timestamp,
)
from ._collector import CollectorConfig, Snapshot, SnapshotCallback, TimeSeriesCollector
from ._collector_service import CollectorService
from ._exceptions import EmptyTimeSeriesError, UnsupportedValueTypeError
from ._interpolation import (
    interpolate,
    map_values,
    map_values_inplace,
    strict_interpolate,
)
from ._merge import merge
from ._quadrature import accumulate, average, integral, integrate
from ._search import (
    find_inner,
    find_outer,
    get_inner,
    get_outer,
    keep_latest,
    view_inner,
    view_outer,
)
from ._time_series import TimeSeries, TimeSeriesView, drop_nan, drop_nan_inplace

__all__ = [
    "CollectorConfig",
    "CollectorService",
    "EmptyTimeSeriesError",
    "Snapshot",
    "SnapshotCallback",
    "TimeInterval",
    "TimeRecord",
    "TimeSeries",
    "TimeSeriesCollector",
    "TimeSeriesView",
    "Timestamp",
    "UNIX_EPOCH",
    "UnsupportedValueTypeError",
    "accumulate",
    "average",
    "drop_nan",
    "drop_nan_inplace",
    "find_inner",
    "find_outer",
    "get_inner",
    "get_outer",
    "integral",
    "integrate",
    "interpolate",
    "keep_latest",
    "map_values",
    "map_values_inplace",
    "merge",
    "strict_interpolate",
    "to_datetime",
    "to_timestamp",
    "view_inner",
    "view_outer",
]
