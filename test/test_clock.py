from __future__ import annotations

import pytest

from loxone_lib.clock import ClockService
from loxone_lib.errors import LoxoneNotConnectedError
from loxone_lib.states import StateCache
from loxone_lib.structure import DeviceGraph
from loxone_lib.types import AggregationInterval, CommandResponse, StatisticsPeriod

GRAPH = DeviceGraph.from_json({"globalStates": {"miniserverTime": "T1"}})


class _FakeSession:
    def __init__(self, value=None, error=None) -> None:
        self.value = value
        self.error = error
        self.sent = []

    async def send_command(self, text):
        self.sent.append(text)
        if self.error is not None:
            raise self.error
        return CommandResponse(code=200, value=self.value)


async def _clock(value, error=None):
    session = _FakeSession(value, error)
    cache = StateCache()
    clock = ClockService(session, cache)
    await clock.update_structure(GRAPH)
    return clock, session, cache


@pytest.mark.asyncio
async def test_reads_miniserver_time_into_cache() -> None:
    clock, session, cache = await _clock("2017-07-03 13:01:36 +02:00:00")
    assert session.sent == ["jdev/sps/io/T1"]
    assert cache.get_value("T1") == "2017-07-03 13:01:36 +02:00:00"
    assert clock.get_controller_time_offset() == "+02:00"


@pytest.mark.asyncio
async def test_negative_offsets() -> None:
    clock, _, _ = await _clock("2024-01-01 08:00:00 -05:30")
    assert clock.get_controller_time_offset() == "-05:30"
    assert clock.convert_timestamp_to_controller_time(0) == "1969-12-31 18:30:00"


@pytest.mark.asyncio
async def test_offset_defaults_to_utc() -> None:
    session = _FakeSession("unused")
    clock = ClockService(session, StateCache())
    assert clock.get_controller_time_offset() == "+00:00"

    await clock.update_structure(DeviceGraph.from_json({}))
    assert session.sent == []
    assert clock.get_controller_time_offset() == "+00:00"

    garbled, _, _ = await _clock("no offset here")
    assert garbled.get_controller_time_offset() == "+00:00"


@pytest.mark.asyncio
async def test_update_failure_is_logged_not_raised(caplog) -> None:
    clock, _, cache = await _clock(None, LoxoneNotConnectedError("Not connected to Miniserver"))
    assert cache.has("T1") is False
    assert "Failed to get miniserver time" in caplog.text
    assert clock.get_controller_time_offset() == "+00:00"


@pytest.mark.asyncio
async def test_convert_timestamp_to_controller_time() -> None:
    clock, _, _ = await _clock("2017-07-03 13:01:36 +02:00:00")
    assert clock.convert_timestamp_to_controller_time(1499079696) == "2017-07-03 13:01:36"
    assert clock.convert_timestamp_to_controller_time(1499079696, iso=True) == "2017-07-03T13:01:36+02:00"


def test_calculate_time_range() -> None:
    clock = ClockService(_FakeSession(), StateCache(), clock=lambda: 1_000_000.7)

    hour = clock.calculate_time_range(StatisticsPeriod.LAST_HOUR)
    assert (hour.from_timestamp, hour.to_timestamp) == (1_000_000 - 3600, 1_000_000)
    assert hour.aggregation_interval is AggregationInterval.MINUTE

    expected = {
        "last24hours": (86400, AggregationInterval.HOUR),
        "lastWeek": (7 * 86400, AggregationInterval.HOUR),
        "lastMonth": (30 * 86400, AggregationInterval.DAY),
        "lastYear": (365 * 86400, AggregationInterval.MONTH),
    }
    for period, (span, interval) in expected.items():
        result = clock.calculate_time_range(period, now=2_000_000)
        assert result.to_timestamp - result.from_timestamp == span
        assert result.aggregation_interval is interval

    with pytest.raises(ValueError):
        clock.calculate_time_range("lastDecade")
