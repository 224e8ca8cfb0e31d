"""Switches, push buttons, sliders and radio selectors."""

from __future__ import annotations

import re
from typing import Any

from ..types import CommandKind, DeviceCommand, StateFormat, ValueType
from ..utils import extract_unit, format_value, value_type_of
from .base import Device, detail_number

_OUTPUT_ID = re.compile(r"^\d+$")


class SwitchDevice(Device):
    TYPE_TAG = "Switch"
    LABEL = "Switch"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("active", "on") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value, ValueType.BOOLEAN))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("on", "Turn on"),
            DeviceCommand("off", "Turn off"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("on", "off"):
            return self._pulse(command)
        raise self._invalid(command)

    def summarize(self) -> str:
        return f"Switch ({'ON' if self._value('active', 'on') else 'OFF'})"


class PushbuttonDevice(Device):
    TYPE_TAG = "Pushbutton"
    LABEL = "Pushbutton"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name == "active" or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value, ValueType.BOOLEAN))

    def available_commands(self) -> list[DeviceCommand]:
        return [DeviceCommand("pulse", "Trigger the pushbutton")]

    def build_command(self, command: str, value: Any = None) -> str:
        if command == "pulse":
            return self._pulse(command)
        raise self._invalid(command)

    def summarize(self) -> str:
        return f"Pushbutton ({'ACTIVE' if self._value('active') else 'IDLE'})"


class SliderDevice(Device):
    TYPE_TAG = "Slider"
    LABEL = "Slider"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name == "value":
            return StateFormat(ValueType.NUMBER, unit=extract_unit(self.details.get("format")))
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        low = detail_number(self.details, "min", 0)
        high = detail_number(self.details, "max", 100)
        return [
            DeviceCommand(
                "setValue",
                f"Set value ({low}-{high})",
                kind=CommandKind.SET_VALUE,
                value_type=ValueType.NUMBER,
                min=low,
                max=high,
                step=detail_number(self.details, "step", 1),
            )
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command == "setValue":
            return self._direct(command, value)
        raise self._invalid(command)

    def summarize(self) -> str:
        value = self._value("value")
        if value is None:
            return "Slider (?)"
        return f"Slider ({format_value(self.details.get('format'), value)})"


class RadioDevice(Device):
    """Radio selector: exactly one of N outputs (or none) is active."""

    TYPE_TAG = "Radio"
    LABEL = "Radio Selector"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("activeOutput", "value"):
            return StateFormat(ValueType.NUMBER)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    @property
    def outputs(self) -> dict[str, str]:
        raw = self.details.get("outputs")
        if not isinstance(raw, dict):
            return {}
        return {str(key): str(label) for key, label in raw.items()}

    def available_commands(self) -> list[DeviceCommand]:
        commands = [
            DeviceCommand(f"select/{int(output_id)}", f"Select {label}", kind=CommandKind.SET_VALUE)
            for output_id, label in self.outputs.items()
            if _OUTPUT_ID.match(output_id)
        ]
        commands.append(DeviceCommand("reset", "Deselect all outputs (All Off)"))
        return commands

    def build_command(self, command: str, value: Any = None) -> str:
        if command.startswith("select/"):
            output_id = command[len("select/"):]
            if _OUTPUT_ID.match(output_id):
                return self._path(output_id)
            raise self._invalid(command, "use select/N or reset")
        if command == "reset":
            return self._pulse(command)
        if _OUTPUT_ID.match(command):
            return self._path(command)
        raise self._invalid(command, "use select/N or reset")

    def summarize(self) -> str:
        active = self._value("activeOutput")
        if active is None:
            label = "none"
        elif active == 0:
            all_off = self.details.get("allOff")
            label = all_off if isinstance(all_off, str) else "All Off"
        else:
            key = str(int(active)) if isinstance(active, (int, float)) and not isinstance(active, bool) else str(active)
            label = self.outputs.get(key) or f"Output {active}"
        return f"Radio Selector ({label})"
