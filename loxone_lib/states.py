"""
loxone_lib/states.py

StateCache: the single mutable store of live state values.

Principles:
- Keyed by state id (many devices may point at the same state id).
- Whole-entry overwrite; no per-entry expiry.
- Readers that iterate take get_all_snapshot() and never hold the live dict.
- Single writer (the EventRouter / ClockService on the event loop); no locking.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .types import StateValue

NowFn = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StateCache:
    def __init__(self, *, now: NowFn = _utcnow, logger: Optional[logging.Logger] = None) -> None:
        self._states: Dict[str, StateValue] = {}
        self._now = now
        self._log = logger or logging.getLogger(__name__)

    def get(self, state_id: str) -> Optional[StateValue]:
        return self._states.get(state_id)

    def get_value(self, state_id: str) -> Any:
        """Return the bare value for state_id, or None when unknown."""
        state = self._states.get(state_id)
        return state.value if state is not None else None

    def set(self, state_id: str, value: StateValue) -> None:
        self._states[state_id] = value

    def update_value(self, state_id: str, value: Any) -> None:
        """Store a raw value, stamped with the current time."""
        self.set(state_id, StateValue(state_id=state_id, value=value, last_updated=self._now()))

    def delete(self, state_id: str) -> bool:
        return self._states.pop(state_id, None) is not None

    def clear(self) -> None:
        self._states.clear()

    def has(self, state_id: str) -> bool:
        return state_id in self._states

    def __contains__(self, state_id: object) -> bool:
        return state_id in self._states

    def __len__(self) -> int:
        return len(self._states)

    @property
    def size(self) -> int:
        return len(self._states)

    def get_all_snapshot(self) -> Dict[str, StateValue]:
        """Return an independent copy; mutating it never touches the live cache."""
        return dict(self._states)

    def cleanup(self) -> None:
        self.clear()
        self._log.debug("State cache cleared")
