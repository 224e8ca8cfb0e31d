"""Fallback for device kinds without a dedicated variant."""

from __future__ import annotations

from typing import Any

from ..types import StateFormat, ValueType
from ..utils import extract_unit, value_type_of
from .base import Device


class GenericDevice(Device):
    """
    Best-effort rendering for any type tag.

    States are typed from their names and values; no commands are advertised,
    but raw "pulse" and "setValue" are still accepted.
    """

    LABEL = "Unknown Type"

    def format_state(self, name: str, value: Any) -> StateFormat:
        unit = extract_unit(self.details.get("format"))
        lowered = name.lower()
        if "temp" in lowered:
            return StateFormat(ValueType.NUMBER, unit=unit or "°C")
        if "humid" in lowered:
            return StateFormat(ValueType.NUMBER, unit=unit or "%")
        if name in ("value", "position"):
            return StateFormat(ValueType.NUMBER, unit=unit)
        if name in ("active", "on") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value), unit=unit)

    def build_command(self, command: str, value: Any = None) -> str:
        if command == "pulse":
            return self._pulse(command)
        if command == "setValue":
            return self._direct(command, value)
        raise self._invalid(command)

    def summarize(self) -> str:
        label = self.descriptor.type_tag or self.LABEL
        states = self.states
        active = self._state("active", "on")
        value = self._state("value")
        position = self._state("position")
        state = self._state("state")
        if active is not None:
            status = "ON" if active.value else "OFF"
        elif value is not None and value.value is not None:
            status = f"{value.value}{value.unit or ''}"
        elif position is not None and position.value is not None:
            status = f"{position.value}%"
        elif state is not None and state.value is not None:
            status = str(state.value)
        elif states:
            status = f"{states[0].name}: {states[0].value}"
        else:
            status = "No state"
        return f"{label} ({status})"
