"""
loxone_lib/router.py

EventRouter: moves push events from the session's channels into the StateCache.

Rules:
- Subscriptions are made at construction and released by cleanup().
- Events whose id cannot be decoded, or that carry no value, are dropped
  without raising.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, Optional

from .events import UNSET, decode_state_id, event_field
from .session import ConnectionSession
from .states import StateCache


class EventRouter:
    def __init__(
        self,
        session: ConnectionSession,
        cache: StateCache,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._cache = cache
        self._log = logger or logging.getLogger(__name__)
        self._unsubscribers: list[Callable[[], None]] = [
            session.value_events.subscribe(self.process_event),
            session.text_events.subscribe(self.process_text_event),
            session.value_tables.subscribe(self.process_event_table),
            session.text_tables.subscribe(self.process_text_event_table),
        ]

    @property
    def subscribed(self) -> bool:
        return bool(self._unsubscribers)

    def process_event(self, event: Any) -> bool:
        """Store a value event. Returns True when the cache was updated."""
        return self._store(event, "value")

    def process_text_event(self, event: Any) -> bool:
        return self._store(event, "text")

    def process_event_table(self, events: Iterable[Any]) -> int:
        return sum(1 for event in events or () if self.process_event(event))

    def process_text_event_table(self, events: Iterable[Any]) -> int:
        return sum(1 for event in events or () if self.process_text_event(event))

    def cleanup(self) -> None:
        """Unsubscribe from all channels. Safe to call repeatedly."""
        unsubscribers, self._unsubscribers = self._unsubscribers, []
        for unsubscribe in unsubscribers:
            unsubscribe()
        if unsubscribers:
            self._log.debug("Event router unsubscribed")

    def _store(self, event: Any, payload_field: str) -> bool:
        raw_id = event_field(event, "uuid", None)
        if raw_id is None:
            raw_id = event_field(event, "id", None)
        state_id = decode_state_id(raw_id)
        if state_id is None:
            return False
        value = event_field(event, payload_field, UNSET)
        if value is UNSET or value is None:
            return False
        self._cache.update_value(state_id, value)
        self._log.debug("State %s <- %r", state_id, value)
        return True
