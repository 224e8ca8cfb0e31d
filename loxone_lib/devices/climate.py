"""Room climate controllers and saunas."""

from __future__ import annotations

from typing import Any, Optional

from ..types import CommandKind, CommandOption, DeviceCommand, DeviceState, StateFormat, ValueType
from ..utils import extract_unit, format_value, value_type_of
from .base import Device, default_should_filter, detail_number

MODE_NAMES = {
    0: "Eco",
    1: "Comfort",
    2: "Building Protection",
    3: "Manual",
    4: "Off",
}

MODE_STATES = ("currentMode", "activeMode", "operatingMode")


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class IRoomControllerV2Device(Device):
    TYPE_TAG = "IRoomControllerV2"
    LABEL = "Room"

    HIDDEN_STATES = frozenset(
        {
            "averageOutdoorTemp",
            "temperatureBoundaryInfo",
            "capabilities",
            "openWindow",
            "frostProtectTemperature",
            "heatProtectTemperature",
            "humidityActual",
            "actualOutdoorTemp",
            "shadingOut",
            "prepareState",
            "useOutdoor",
            "overrideReason",
            "excessEnergyTempOffset",
            "co2",
            "CO2",
            "overrideEntries",
        }
    )

    @property
    def timer_modes(self) -> list[dict[str, Any]]:
        modes = self.details.get("timerModes")
        if not isinstance(modes, (list, tuple)):
            return []
        return [mode for mode in modes if isinstance(mode, dict)]

    def mode_text(self, mode: Any, state_name: Optional[str] = None) -> str:
        if mode is None:
            return "unknown"
        if state_name != "activeMode":
            for entry in self.timer_modes:
                if entry.get("id") == mode:
                    return entry.get("name") or entry.get("description") or _fallback_mode(mode)
        return _fallback_mode(mode)

    def format_state(self, name: str, value: Any) -> StateFormat:
        unit = extract_unit(self.details.get("format"))
        shown = self.mode_text(value, name) if name in MODE_STATES else value
        if "temp" in name.lower():
            return StateFormat(ValueType.NUMBER, unit=unit or "°C", value=shown)
        if name in ("mode", "operatingMode"):
            return StateFormat(ValueType.NUMBER, value=shown)
        if name in ("active", "on") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN, value=shown)
        return StateFormat(value_type_of(value, ValueType.NUMBER), unit=unit, value=shown)

    def available_commands(self) -> list[DeviceCommand]:
        commands = [
            DeviceCommand(
                "setTemperature",
                "Set target temperature",
                kind=CommandKind.SET_VALUE,
                value_type=ValueType.NUMBER,
                min=detail_number(self.details, "min", 0),
                max=detail_number(self.details, "max", 35),
                step=detail_number(self.details, "step", 0.5),
            )
        ]
        options = tuple(
            CommandOption(value=mode.get("id"), label=str(mode.get("name") or ""))
            for mode in self.timer_modes
        )
        if options:
            commands.append(
                DeviceCommand("setMode", "Set operating mode", kind=CommandKind.SET_ENUM, options=options)
            )
        return commands

    def build_command(self, command: str, value: Any = None) -> str:
        if command == "setTemperature":
            return self._named(command, value, wire_name="setComfortTemperature")
        if command == "setMode":
            return self._named(command, value, wire_name="setOperatingMode")
        raise self._invalid(command)

    def should_filter_state(self, state: DeviceState) -> bool:
        if state.name in self.HIDDEN_STATES:
            return True
        if state.name in ("currentMode", "operatingMode") and self._state("activeMode") is not None:
            return True
        return default_should_filter(state)

    def summarize(self) -> str:
        fmt = self.details.get("format") or "%.1f°C"
        actual = self._value("tempActual")
        target = self._value("tempTarget")
        mode = self._state("activeMode") or self._state("currentMode", "operatingMode")
        mode_label = self.mode_text(mode.value if mode else None, mode.name if mode else None)
        actual_text = format_value(fmt, actual) if actual is not None else "?°C"
        target_text = format_value(fmt, target) if target is not None else "?°C"
        return f"Room {actual_text} (target {target_text}, mode: {mode_label})"


def _fallback_mode(mode: Any) -> str:
    if _is_number(mode):
        return MODE_NAMES.get(int(mode), f"mode {mode}") if float(mode).is_integer() else f"mode {mode}"
    return str(mode)


class SaunaDevice(Device):
    TYPE_TAG = "Sauna"
    LABEL = "Sauna"

    _UNITS = {
        "tempActual": "°C",
        "tempTarget": "°C",
        "tempBench": "°C",
        "timer": "seconds",
        "timerTotal": "seconds",
        "elapsedTime": "seconds",
        "humidityActual": "%",
        "humidityTarget": "%",
    }
    _FLAGS = frozenset(
        {"power", "active", "fan", "drying", "doorClosed", "presence", "error", "lessWater", "saunaError"}
    )
    _TEXT = frozenset({"mode", "operatingMode", "status"})

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in self._UNITS:
            return StateFormat(ValueType.NUMBER, unit=self._UNITS[name])
        if name in self._FLAGS:
            return StateFormat(ValueType.BOOLEAN)
        if name in self._TEXT:
            return StateFormat(ValueType.STRING)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("on", "Turn sauna on"),
            DeviceCommand("off", "Turn sauna off"),
            DeviceCommand("fan-on", "Turn fan on"),
            DeviceCommand("fan-off", "Turn fan off"),
            DeviceCommand(
                "setTemperature",
                "Set target temperature",
                kind=CommandKind.SET_VALUE,
                value_type=ValueType.NUMBER,
                min=40,
                max=110,
                step=1,
            ),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("on", "off"):
            return self._pulse(command)
        if command == "fan-on":
            return self._pulse("fanon")
        if command == "fan-off":
            return self._pulse("fanoff")
        if command == "setTemperature":
            try:
                float(self._require_value(command, value))
            except ValueError:
                raise self._invalid(command, "temperature must be numeric") from None
            return self._named(command, value, wire_name="temp")
        raise self._invalid(command)

    def summarize(self) -> str:
        if not self._value("active", "on"):
            return "Sauna (OFF)"

        parts = []
        actual = self._value("tempActual")
        target = self._value("tempTarget")
        if _is_number(actual) and actual:
            if _is_number(target) and target:
                parts.append(f"Temperature {actual}°C → {target}°C")
            else:
                parts.append(f"Temperature {actual}°C")
        elif _is_number(target) and target:
            parts.append(f"Temperature target: {target}°C")

        humidity = self._value("humidityActual")
        humidity_target = self._value("humidityTarget")
        if _is_number(humidity) and humidity:
            if _is_number(humidity_target) and humidity_target:
                parts.append(f"Humidity {humidity}% → {humidity_target}%")
            else:
                parts.append(f"Humidity {humidity}%")
        elif _is_number(humidity_target) and humidity_target:
            parts.append(f"Humidity target: {humidity_target}%")

        if self._value("doorClosed"):
            parts.append("DOOR CLOSED")
        if self._value("presence"):
            parts.append("PRESENCE")
        if self._value("error", "saunaError"):
            parts.append("ERROR")
        if self._value("lessWater"):
            parts.append("Evaporator runs out of water")

        timer = self._value("timer")
        if _is_number(timer) and timer > 0:
            parts.append(f"{timer / 60:g}min left")
        if self._value("power"):
            parts.append("HEATING")
        if self._value("fan"):
            parts.append("Airing phase")

        mode = self._value("mode", "operatingMode")
        if isinstance(mode, str) and mode:
            parts.append(mode.upper())

        return f"Sauna ({', '.join(parts) if parts else 'Unknown'})"
