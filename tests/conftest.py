# License: MIT
# Copyright © 2026 Frequenz Energy-as-a-Service GmbH

"""Setup for all the tests."""
from collections.abc import Iterator

import pytest
import time_machine

from frequenz.timerecords import TimeSeries


@pytest.fixture
def fake_time() -> Iterator[time_machine.Coordinates]:
    """Replace real time with a time machine that doesn't automatically tick."""
    with time_machine.travel(0, tick=False) as traveller:
        yield traveller


@pytest.fixture
def ramp() -> TimeSeries[float]:
    """Return a series with values equal to their timestamps, from 1 to 5."""
    return TimeSeries([1, 2, 3, 4, 5], [1.0, 2.0, 3.0, 4.0, 5.0])
