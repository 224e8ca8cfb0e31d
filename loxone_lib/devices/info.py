"""Read-only information blocks: digital/analog values, text displays and meters."""

from __future__ import annotations

import json
from typing import Any, Optional

from ..types import StateFormat, ValueType
from ..utils import extract_unit, format_value
from .base import Device


class InfoOnlyDigitalDevice(Device):
    TYPE_TAG = "InfoOnlyDigital"
    LABEL = "Info"

    def format_state(self, name: str, value: Any) -> StateFormat:
        return StateFormat(ValueType.BOOLEAN)

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command, "InfoOnlyDigital devices are read-only and have no commands")

    def summarize(self) -> str:
        value = self._value("value", "state", "active")
        if value is True or value == 1:
            status = "ON"
        elif value is None or value is False or value == 0:
            status = "OFF"
        else:
            status = str(value)
        return f"Info ({status})"


class InfoOnlyAnalogDevice(Device):
    TYPE_TAG = "InfoOnlyAnalog"
    LABEL = "Info"

    def format_state(self, name: str, value: Any) -> StateFormat:
        return StateFormat(ValueType.NUMBER, unit=extract_unit(self.details.get("format")))

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command, "InfoOnlyAnalog devices are read-only and have no commands")

    def summarize(self) -> str:
        state = self._state("value") or self._state("state")
        if state is None and self.states:
            state = self.states[0]
        if state is None or state.value is None:
            return "Info (No data)"
        return f"Info ({format_value(self.details.get('format'), state.value)})"


class TextStateDevice(Device):
    TYPE_TAG = "TextState"
    LABEL = "Display"

    TEXT_STATES = ("textAndIcon", "text", "value", "state", "message", "status")

    def _entry_text(self, value: Any) -> Any:
        # Numeric values index into details["entries"] when present.
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return value
        entries = self.details.get("entries")
        if isinstance(entries, dict):
            key = str(int(value)) if float(value).is_integer() else str(value)
            return entries.get(key, entries.get(value, value))
        if isinstance(entries, (list, tuple)) and float(value).is_integer() and 0 <= int(value) < len(entries):
            return entries[int(value)]
        return value

    def format_state(self, name: str, value: Any) -> StateFormat:
        shown = self._entry_text(value)
        if name == "iconAndColor":
            return StateFormat(ValueType.OBJECT, value=shown)
        return StateFormat(ValueType.STRING, value=shown)

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command, "TextState devices are read-only")

    def summarize(self) -> str:
        text = "N/A"
        for name in self.TEXT_STATES:
            value = self._value(name)
            if value is not None and value != "":
                text = str(self._entry_text(value))
                break
        icon = " [icon]" if _has_icon(self._value("iconAndColor")) else ""
        escaped = text.replace('"', '\\"')
        return f"Display: {escaped}{icon}"


def _has_icon(raw: Any) -> bool:
    if not raw:
        return False
    data: Optional[Any] = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except ValueError:
            return False
    return isinstance(data, dict) and bool(data.get("icon"))


class MeterDevice(Device):
    TYPE_TAG = "Meter"
    LABEL = "Meter"

    ACTUAL_STATES = ("actual", "actualPower", "value")
    TOTAL_STATES = ("total", "totalEnergy")
    DEFAULT_UNITS = {"power": "W", "consumption": "kWh", "flow": "l/min"}

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in self.ACTUAL_STATES:
            fmt = self.details.get("actualFormat")
            unit = extract_unit(fmt) if fmt else "kW"
        elif name in self.TOTAL_STATES:
            fmt = self.details.get("totalFormat")
            unit = extract_unit(fmt) if fmt else "kWh"
        else:
            fmt = self.details.get("format")
            unit = (extract_unit(fmt) if fmt else None) or self.DEFAULT_UNITS.get(name)
        return StateFormat(ValueType.NUMBER, unit=unit)

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command, "Meter devices are read-only and have no commands")

    def summarize(self) -> str:
        actual_fmt = self.details.get("actualFormat")
        total_fmt = self.details.get("totalFormat")
        parts = []

        actual = self._value(*self.ACTUAL_STATES)
        power = self._value("power")
        flow = self._value("flow")
        if actual is not None:
            parts.append(format_value(actual_fmt if isinstance(actual_fmt, str) else "%.2fkW", actual))
        elif power is not None:
            parts.append(format_value("%.0fW", power))
        elif flow is not None:
            parts.append(format_value("%.1fl/min", flow))

        total = self._value(*self.TOTAL_STATES)
        if total is not None:
            parts.append(f"Total: {format_value(total_fmt if isinstance(total_fmt, str) else '%.2fkWh', total)}")

        return f"Meter ({', '.join(parts) if parts else 'No data'})"
