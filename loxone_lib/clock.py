"""
loxone_lib/clock.py

ClockService: Miniserver wall-clock offset and statistics time ranges.

The Miniserver reports its local time through the `miniserverTime` global
state, e.g. "2017-07-03 13:01:36 +02:00:00". The offset in that string is the
controller's timezone; it is read once per graph load and kept in the cache.
"""

from __future__ import annotations

import logging
import re
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from .errors import LoxoneError
from .session import ConnectionSession
from .states import StateCache
from .structure import DeviceGraph
from .types import AggregationInterval, StatisticsPeriod, TimeRange

MINISERVER_TIME_STATE = "miniserverTime"
DEFAULT_OFFSET = "+00:00"

_OFFSET_RE = re.compile(r"([+-]\d{2}:\d{2}(?::\d{2})?)")
_OFFSET_PARTS_RE = re.compile(r"([+-])(\d{2}):(\d{2})")

_DAY_S = 86400

# period -> (span in seconds, aggregation)
PERIODS: dict[StatisticsPeriod, tuple[int, AggregationInterval]] = {
    StatisticsPeriod.LAST_HOUR: (3600, AggregationInterval.MINUTE),
    StatisticsPeriod.LAST_24_HOURS: (_DAY_S, AggregationInterval.HOUR),
    StatisticsPeriod.LAST_WEEK: (7 * _DAY_S, AggregationInterval.HOUR),
    StatisticsPeriod.LAST_MONTH: (30 * _DAY_S, AggregationInterval.DAY),
    StatisticsPeriod.LAST_YEAR: (365 * _DAY_S, AggregationInterval.MONTH),
}


class ClockService:
    def __init__(
        self,
        session: ConnectionSession,
        cache: StateCache,
        *,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._session = session
        self._cache = cache
        self._clock = clock
        self._log = logger or logging.getLogger(__name__)
        self._graph: Optional[DeviceGraph] = None

    @property
    def time_state_id(self) -> Optional[str]:
        if self._graph is None:
            return None
        return self._graph.global_states.get(MINISERVER_TIME_STATE)

    async def update_structure(self, graph: Optional[DeviceGraph]) -> None:
        self._graph = graph
        await self.update()

    async def update(self) -> None:
        """Read the Miniserver clock into the cache. Failures are logged, not raised."""
        state_id = self.time_state_id
        if not state_id:
            return
        try:
            response = await self._session.send_command(f"jdev/sps/io/{state_id}")
        except LoxoneError as err:
            self._log.error("Failed to get miniserver time: %s", err)
            return
        if response.value:
            self._cache.update_value(state_id, response.value)
            self._log.debug("Miniserver time: %s", response.value)

    def get_controller_time_offset(self) -> str:
        """Return the controller UTC offset as "+HH:MM" (UTC when unknown)."""
        state_id = self.time_state_id
        if not state_id:
            self._log.warning("No miniserverTime state found in globalStates")
            return DEFAULT_OFFSET
        value = self._cache.get_value(state_id)
        if not value or not isinstance(value, str):
            self._log.warning("No miniserverTime value in state cache")
            return DEFAULT_OFFSET
        match = _OFFSET_RE.search(value)
        if not match:
            self._log.warning("Could not parse offset from miniserverTime: %s", value)
            return DEFAULT_OFFSET
        hours, minutes = match.group(1).split(":")[:2]
        return f"{hours}:{minutes}"

    def controller_timezone(self) -> timezone:
        match = _OFFSET_PARTS_RE.fullmatch(self.get_controller_time_offset())
        if not match:
            return timezone.utc
        sign = 1 if match.group(1) == "+" else -1
        return timezone(sign * timedelta(hours=int(match.group(2)), minutes=int(match.group(3))))

    def convert_timestamp_to_controller_time(self, timestamp: float, iso: bool = False) -> str:
        """
        Render a unix timestamp in controller local time.

        iso=True gives "2017-07-03T13:01:36+02:00"; otherwise
        "2017-07-03 13:01:36".
        """
        local = datetime.fromtimestamp(timestamp, tz=self.controller_timezone())
        if iso:
            return local.isoformat(timespec="seconds")
        return local.strftime("%Y-%m-%d %H:%M:%S")

    def calculate_time_range(self, period: StatisticsPeriod | str, now: Optional[float] = None) -> TimeRange:
        span, interval = PERIODS[StatisticsPeriod(period)]
        to_ts = int(self._clock() if now is None else now)
        return TimeRange(from_timestamp=to_ts - span, to_timestamp=to_ts, aggregation_interval=interval)
