"""
loxone_lib/events.py

Push-event shapes delivered by the external client, and state-id decoding.

Rules:
- The client may deliver mappings ({"uuid": ..., "value": ...}) or objects with
  the same attribute names; both are accepted.
- A uuid is either a ready string id or a binary uuid exposing data1..data4
  byte fields; binary ids render as lower-case hex parts joined with "-".
- Anything that cannot be decoded yields None; callers drop such events.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class ValueEvent:
    KIND = "event_value"

    uuid: Any
    value: Any = None


@dataclass(frozen=True, slots=True)
class TextEvent:
    KIND = "event_text"

    uuid: Any
    text: Optional[str] = None


UNSET = object()


def event_field(event: Any, name: str, default: Any = UNSET) -> Any:
    """Read `name` from a mapping- or attribute-shaped event."""
    if isinstance(event, Mapping):
        return event.get(name, default)
    return getattr(event, name, default)


def decode_state_id(uuid: Any) -> Optional[str]:
    if isinstance(uuid, str):
        return uuid or None
    if uuid is None:
        return None
    data1 = event_field(uuid, "data1", None)
    if not data1:
        return None
    parts = [data1]
    for name in ("data2", "data3", "data4"):
        part = event_field(uuid, name, None)
        if part is None:
            return None
        parts.append(part)
    try:
        return "-".join(_hex(part) for part in parts)
    except (TypeError, ValueError):
        return None


def _hex(part: Any) -> str:
    if isinstance(part, (bytes, bytearray, memoryview)):
        return bytes(part).hex()
    if isinstance(part, str):
        # Already hex-rendered by the client.
        bytes.fromhex(part)
        return part.lower()
    raise TypeError(f"unsupported uuid part {type(part).__name__}")
