"""
loxone_lib/structure.py

Immutable device graph parsed from the Miniserver structure snapshot:

    {rooms: {id -> {name}}, cats: {id -> {name, type?}},
     controls: {id -> descriptor}, globalStates?: {id -> stateId}}

The graph is replaced wholesale on every (re)load and never patched in place.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from .types import Category, Room

_EMPTY: Mapping[str, Any] = MappingProxyType({})


@dataclass(frozen=True, slots=True)
class DeviceDescriptor:
    device_id: str
    type_tag: str
    name: str
    room_id: Optional[str] = None
    category_id: Optional[str] = None
    # logical state name -> global state id
    states: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    details: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    sub_devices: Mapping[str, "DeviceDescriptor"] = field(default_factory=lambda: _EMPTY)
    has_statistics: bool = False

    @classmethod
    def from_json(cls, device_id: str, data: Mapping[str, Any]) -> "DeviceDescriptor":
        raw_states = data.get("states")
        states = {}
        if isinstance(raw_states, Mapping):
            # Some states are lists of ids (e.g. per-circuit values); only scalar ids are tracked.
            states = {name: sid for name, sid in raw_states.items() if isinstance(sid, str)}

        details = data.get("details")
        if not isinstance(details, Mapping):
            details = {}

        raw_subs = data.get("subControls")
        subs = {}
        if isinstance(raw_subs, Mapping):
            subs = {
                sub_id: cls.from_json(sub_id, sub)
                for sub_id, sub in raw_subs.items()
                if isinstance(sub, Mapping)
            }

        return cls(
            device_id=device_id,
            type_tag=str(data.get("type") or ""),
            name=str(data.get("name") or ""),
            room_id=_opt_str(data.get("room")),
            category_id=_opt_str(data.get("cat")),
            states=MappingProxyType(states),
            details=MappingProxyType(dict(details)),
            sub_devices=MappingProxyType(subs),
            has_statistics=bool(data.get("statistic") or data.get("statisticV2")),
        )


@dataclass(frozen=True, slots=True)
class DeviceGraph:
    rooms: Mapping[str, Room] = field(default_factory=lambda: _EMPTY)
    categories: Mapping[str, Category] = field(default_factory=lambda: _EMPTY)
    devices: Mapping[str, DeviceDescriptor] = field(default_factory=lambda: _EMPTY)
    global_states: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    raw: Mapping[str, Any] = field(default_factory=lambda: _EMPTY, repr=False, compare=False)

    def room_name(self, room_id: Optional[str]) -> Optional[str]:
        if not room_id:
            return None
        room = self.rooms.get(room_id)
        return room.name if room is not None else None

    def category_name(self, category_id: Optional[str]) -> Optional[str]:
        if not category_id:
            return None
        cat = self.categories.get(category_id)
        return cat.name if cat is not None else None

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "DeviceGraph":
        if not isinstance(data, Mapping):
            raise ValueError(f"device graph must be a mapping (got {type(data).__name__})")

        rooms = {
            rid: Room(id=rid, name=str(room.get("name") or ""))
            for rid, room in _mapping(data.get("rooms")).items()
            if isinstance(room, Mapping)
        }
        cats = {
            cid: Category(id=cid, name=str(cat.get("name") or ""), type=_opt_str(cat.get("type")))
            for cid, cat in _mapping(data.get("cats")).items()
            if isinstance(cat, Mapping)
        }
        devices = {
            did: DeviceDescriptor.from_json(did, ctrl)
            for did, ctrl in _mapping(data.get("controls")).items()
            if isinstance(ctrl, Mapping)
        }
        global_states = {
            name: sid
            for name, sid in _mapping(data.get("globalStates")).items()
            if isinstance(sid, str)
        }
        return cls(
            rooms=MappingProxyType(rooms),
            categories=MappingProxyType(cats),
            devices=MappingProxyType(devices),
            global_states=MappingProxyType(global_states),
            raw=MappingProxyType(dict(data)),
        )


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _opt_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)
