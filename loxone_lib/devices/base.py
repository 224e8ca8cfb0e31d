"""
loxone_lib/devices/base.py

The uniform device contract and the shared state-filtering policy.

A Device is a disposable view built from a DeviceDescriptor, the DeviceGraph
and a StateCache snapshot. It is rebuilt on every request and never cached.

Command grammar (text sent to the Miniserver):
    jdev/sps/io/<id>/<command>            pulse
    jdev/sps/io/<id>/<value>              direct scalar set
    jdev/sps/io/<id>/<command>/<value>    named parameterized command
    jdev/sps/io/<id>/<command>(<csv>)     composite (color, white temperature)
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, ClassVar, Mapping, Optional

from ..errors import LoxoneInvalidCommandError
from ..structure import DeviceDescriptor, DeviceGraph
from ..types import DeviceCommand, DeviceState, StateFormat, StateValue, ValueType
from ..utils import value_type_of

COMMAND_PREFIX = "jdev/sps/io"

# Substring matches, case-insensitive.
IMPORTANT_STATES = (
    "tempActual",
    "tempTarget",
    "currentMode",
    "activeMode",
    "value",
    "position",
    "active",
    "on",
    "power",
    "volume",
    "activeOutput",
    "comfortTemperature",
    "operatingMode",
    "textAndIcon",
    "iconAndColor",
    "text",
    "state",
    "message",
    "status",
)

IGNORED_STATES = (
    "jLocked",
    "jLockable",
    "error",
    "errorCode",
    "locked",
    "config",
    "serialNr",
    "firmwareVersion",
    "hardwareVersion",
    "connectedInputs",
)

# Substring matches, case-sensitive.
CONFIG_MARKERS = ("Config", "Setting", "Param", "Threshold")


def _contains_any(name: str, needles: tuple[str, ...]) -> bool:
    lowered = name.lower()
    return any(needle.lower() in lowered for needle in needles)


def is_important_state(name: str) -> bool:
    return _contains_any(name, IMPORTANT_STATES)


def default_should_filter(state: DeviceState) -> bool:
    """Shared filtering policy: True means the state is hidden."""
    if is_important_state(state.name):
        return False
    if state.value is None or state.value == "":
        return True
    if _contains_any(state.name, IGNORED_STATES):
        return True
    return any(marker in state.name for marker in CONFIG_MARKERS)


def wire_value(value: Any) -> str:
    """Render a command value for embedding in a command path."""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def detail_number(details: Mapping[str, Any], key: str, default: float) -> float:
    """Numeric detail with the default applied when absent or zero."""
    value = details.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
        return default
    return value


class Device:
    """Base class for every device kind."""

    TYPE_TAG: ClassVar[str] = ""
    LABEL: ClassVar[str] = ""

    def __init__(
        self,
        descriptor: DeviceDescriptor,
        graph: DeviceGraph,
        states_snapshot: Mapping[str, StateValue],
    ) -> None:
        self.descriptor = descriptor
        self._graph = graph
        self._snapshot = states_snapshot

    # --------------------------
    # Descriptor views
    # --------------------------

    @property
    def device_id(self) -> str:
        return self.descriptor.device_id

    @property
    def type_tag(self) -> str:
        return self.descriptor.type_tag or self.TYPE_TAG

    @property
    def name(self) -> str:
        return self.descriptor.name

    @property
    def room(self) -> Optional[str]:
        return self._graph.room_name(self.descriptor.room_id)

    @property
    def category(self) -> Optional[str]:
        return self._graph.category_name(self.descriptor.category_id)

    @property
    def has_statistics(self) -> bool:
        return self.descriptor.has_statistics

    @property
    def details(self) -> Mapping[str, Any]:
        return self.descriptor.details

    # --------------------------
    # Contract
    # --------------------------

    def format_state(self, name: str, value: Any) -> StateFormat:
        return StateFormat(value_type_of(value))

    def available_commands(self) -> list[DeviceCommand]:
        return []

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command)

    def summarize(self) -> str:
        return f"{self.LABEL or self.type_tag}"

    def should_filter_state(self, state: DeviceState) -> bool:
        return default_should_filter(state)

    def type_specific_data(self) -> Optional[dict[str, Any]]:
        return None

    # --------------------------
    # Rendering
    # --------------------------

    @cached_property
    def states(self) -> list[DeviceState]:
        """Every mapped state resolved against the snapshot, in descriptor order."""
        result: list[DeviceState] = []
        for name, state_id in self.descriptor.states.items():
            cached = self._snapshot.get(state_id)
            raw = cached.value if cached is not None else None
            fmt = self.format_state(name, raw)
            result.append(
                DeviceState(
                    name=name,
                    state_id=state_id,
                    value=fmt.value if fmt.value is not None else raw,
                    value_type=fmt.value_type,
                    unit=fmt.unit,
                )
            )
        return result

    @property
    def formatted_states(self) -> dict[str, dict[str, Any]]:
        out: dict[str, dict[str, Any]] = {}
        for state in self.states:
            if self.should_filter_state(state):
                continue
            entry: dict[str, Any] = {"value": state.value, "type": state.value_type.value}
            if state.unit:
                entry["unit"] = state.unit
            out[state.name] = entry
        return out

    @property
    def formatted_commands(self) -> list[dict[str, Any]]:
        return [command.to_json() for command in self.available_commands()]

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.device_id,
            "name": self.name,
            "type": self.type_tag,
            "room": self.room,
            "category": self.category,
            "has_statistics": self.has_statistics,
            "current_states": self.formatted_states,
            "available_commands": self.formatted_commands,
            "summary": self.summarize(),
        }
        extra = self.type_specific_data()
        if extra:
            data.update(extra)
        return data

    # --------------------------
    # Helpers for variants
    # --------------------------

    def _state(self, *names: str) -> Optional[DeviceState]:
        for state in self.states:
            if state.name in names:
                return state
        return None

    def _value(self, *names: str) -> Any:
        state = self._state(*names)
        return state.value if state is not None else None

    def _invalid(self, command: str, detail: Optional[str] = None) -> LoxoneInvalidCommandError:
        return LoxoneInvalidCommandError(self.type_tag, command, detail)

    def _require_value(self, command: str, value: Any) -> str:
        if value is None or (isinstance(value, str) and not value.strip()):
            raise self._invalid(command, "a value is required")
        return wire_value(value)

    def _path(self, suffix: str, target: Optional[str] = None) -> str:
        return f"{COMMAND_PREFIX}/{target or self.device_id}/{suffix}"

    def _pulse(self, command: str, target: Optional[str] = None) -> str:
        return self._path(command, target)

    def _direct(self, command: str, value: Any) -> str:
        return self._path(self._require_value(command, value))

    def _named(self, command: str, value: Any, wire_name: Optional[str] = None, target: Optional[str] = None) -> str:
        return self._path(f"{wire_name or command}/{self._require_value(command, value)}", target)

    def _composite(self, command: str, value: Any, wire_name: Optional[str] = None, target: Optional[str] = None) -> str:
        csv = self._require_value(command, value).replace("(", "").replace(")", "")
        if not csv.strip():
            raise self._invalid(command, "a value is required")
        return self._path(f"{wire_name or command}({csv})", target)


class CentralDevice(Device):
    """Fan-out command target; has no state of its own."""

    UNIT_NOUN: ClassVar[str] = "devices"

    def format_state(self, name: str, value: Any) -> StateFormat:
        return StateFormat(ValueType.STRING)

    def should_filter_state(self, state: DeviceState) -> bool:
        return True

    @property
    def linked_count(self) -> int:
        controls = self.details.get("controls")
        return len(controls) if isinstance(controls, (list, tuple)) else 0

    def summarize(self) -> str:
        return f"{self.LABEL} ({self.linked_count} {self.UNIT_NOUN})"
