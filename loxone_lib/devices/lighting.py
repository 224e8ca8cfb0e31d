"""Dimmers, color pickers and light controllers."""

from __future__ import annotations

import re
from typing import Any, Optional

from ..types import CommandKind, DeviceCommand, DeviceState, StateFormat, ValueType
from ..utils import value_type_of
from .base import Device, default_should_filter, detail_number

HSV_HINT = 'Set RGB color. Use "0,100,100" for red, "120,100,100" for green, "240,100,100" for blue'
TEMP_HINT = 'Set warm/cool white. Use "100,2700" for warm, "100,6500" for cool'

_SCENE_ENTRY = re.compile(r'(\d+)="([^"]+)"')


def _color_format(name: str, value: Any) -> StateFormat:
    if name in ("color", "hsv"):
        return StateFormat(ValueType.STRING)
    if name in ("brightness", "value"):
        return StateFormat(ValueType.NUMBER, unit="%")
    if name in ("temperature", "kelvin"):
        return StateFormat(ValueType.NUMBER, unit="K")
    if name in ("active", "on") or isinstance(value, bool):
        return StateFormat(ValueType.BOOLEAN)
    return StateFormat(value_type_of(value))


class DimmerDevice(Device):
    TYPE_TAG = "Dimmer"
    LABEL = "Dimmer"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("position", "value"):
            return StateFormat(ValueType.NUMBER, unit="%")
        if name in ("active", "on") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("on", "Turn on"),
            DeviceCommand("off", "Turn off"),
            DeviceCommand(
                "setValue",
                "Set brightness level (0-100)",
                kind=CommandKind.SET_VALUE,
                value_type=ValueType.NUMBER,
                min=0,
                max=100,
                step=1,
            ),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("on", "off"):
            return self._pulse(command)
        if command == "setValue":
            return self._direct(command, value)
        raise self._invalid(command)

    def summarize(self) -> str:
        level = self._value("value", "position")
        if isinstance(level, (int, float)) and not isinstance(level, bool) and level > 0:
            return f"{self.LABEL} (ON {level}%)"
        return f"{self.LABEL} (OFF)"


class EIBDimmerDevice(DimmerDevice):
    TYPE_TAG = "EIBDimmer"
    LABEL = "EIB Dimmer"


class ColorPickerDevice(Device):
    TYPE_TAG = "ColorPicker"
    LABEL = "Color Light"

    def format_state(self, name: str, value: Any) -> StateFormat:
        return _color_format(name, value)

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand(
                "hsv",
                'Set HSV color. Format: "hue,saturation,value" (H=0-360, S=0-100, V=0-100)',
                kind=CommandKind.HSV,
                value_type=ValueType.STRING,
            )
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        # on/off and lumitech are accepted but not advertised.
        if command in ("on", "off"):
            return self._pulse(command)
        if command in ("hsv", "lumitech"):
            return self._composite(command, value)
        raise self._invalid(command)

    def summarize(self) -> str:
        status = "ON" if self._value("active") else "OFF"
        level = self._value("value")
        if level:
            status += f" {level}%"
        color = self._value("color")
        if color:
            status += f" HSV:{color}"
        return f"{self.LABEL} ({status})"


class ColorPickerV2Device(ColorPickerDevice):
    TYPE_TAG = "ColorPickerV2"
    LABEL = "RGB Light"

    def available_commands(self) -> list[DeviceCommand]:
        low = detail_number(self.details, "min", 0)
        high = detail_number(self.details, "max", 100)
        step = detail_number(self.details, "step", 0.5)
        return [
            DeviceCommand("hsv", HSV_HINT, kind=CommandKind.HSV, value_type=ValueType.STRING),
            DeviceCommand("temp", TEMP_HINT, kind=CommandKind.TEMP, value_type=ValueType.STRING),
            DeviceCommand(
                "setBrightness",
                "Set brightness level from 0 to 100",
                kind=CommandKind.SET_BRIGHTNESS,
                value_type=ValueType.NUMBER,
                min=low,
                max=high,
                step=step,
            ),
            DeviceCommand(
                "daylight",
                "Set daylight mode with brightness (0-100)",
                kind=CommandKind.DAYLIGHT,
                value_type=ValueType.NUMBER,
                min=low,
                max=high,
                step=step,
            ),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command == "setBrightness":
            return self._named(command, value)
        if command in ("hsv", "temp", "daylight"):
            return self._composite(command, value)
        raise self._invalid(command)


class LightControllerDevice(Device):
    """Scene-based light controller (mood numbers 0-9)."""

    TYPE_TAG = "LightController"
    LABEL = "Light Controller"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name == "activeScene":
            return StateFormat(ValueType.NUMBER)
        if name == "sceneList":
            return StateFormat(ValueType.STRING)
        if name in ("active", "on") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("on", "All lights on (scene 9)"),
            DeviceCommand("off", "All lights off (scene 0)"),
            DeviceCommand(
                "setScene",
                "Activate a specific scene (0-9)",
                kind=CommandKind.SET_VALUE,
                value_type=ValueType.NUMBER,
                min=0,
                max=9,
                step=1,
            ),
            DeviceCommand("plus", "Switch to next scene"),
            DeviceCommand("minus", "Switch to previous scene"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("on", "off", "plus", "minus"):
            return self._pulse(command)
        if command == "setScene":
            return self._direct(command, value)
        if command == "learnScene":
            # value is "<sceneNumber>,<sceneName>"
            raw = self._require_value(command, value)
            scene, _, label = raw.partition(",")
            if not scene.strip():
                raise self._invalid(command, "expected '<scene>,<name>'")
            return self._path(f"{scene.strip()}/learn/{label.strip()}")
        raise self._invalid(command)

    def should_filter_state(self, state: DeviceState) -> bool:
        if state.name in ("activeScene", "sceneList"):
            return False
        return default_should_filter(state)

    def summarize(self) -> str:
        summary = self.LABEL
        scene = self._value("activeScene")
        if scene is not None:
            summary += f" (Scene {scene})"
        scene_list = self._value("sceneList")
        if scene_list:
            scenes = []
            for entry in str(scene_list).split(","):
                match = _SCENE_ENTRY.search(entry.strip())
                if match:
                    scenes.append(f"{match.group(1)}:{match.group(2)}")
            scenes = scenes[:3]
            if scenes:
                summary += f" [{', '.join(scenes)}{'' if len(scenes) < 3 else '...'}]"
        return summary


class LightControllerV2Device(Device):
    """Mood-based light controller; color commands go to its color picker."""

    TYPE_TAG = "LightControllerV2"
    LABEL = "Light Controller V2"

    HIDDEN_STATES = ("activeMoods", "moodList", "activeMoodsNum", "circuitNames", "daylightConfig", "presence")
    COLOR_COMMANDS = ("hsv", "temp", "setBrightness")

    def format_state(self, name: str, value: Any) -> StateFormat:
        return StateFormat(value_type_of(value, ValueType.BOOLEAN))

    @property
    def has_color_picker(self) -> bool:
        return self.color_target is not None

    @property
    def color_target(self) -> Optional[str]:
        """Id of the device color commands are forwarded to."""
        master = self.details.get("masterColor")
        if master:
            return str(master)
        subs = self.descriptor.sub_devices
        for tag in ("ColorPickerV2", "ColorPicker"):
            for sub_id, sub in subs.items():
                if sub.type_tag == tag:
                    return sub_id
        return None

    def available_commands(self) -> list[DeviceCommand]:
        commands = [
            DeviceCommand("on", "Turn on"),
            DeviceCommand("off", "Turn off"),
        ]
        if self.has_color_picker:
            commands += [
                DeviceCommand("hsv", HSV_HINT, kind=CommandKind.HSV, value_type=ValueType.STRING),
                DeviceCommand("temp", TEMP_HINT, kind=CommandKind.TEMP, value_type=ValueType.STRING),
                DeviceCommand(
                    "setBrightness",
                    "Set brightness level from 0 to 100",
                    kind=CommandKind.SET_BRIGHTNESS,
                    value_type=ValueType.NUMBER,
                    min=detail_number(self.details, "min", 0),
                    max=detail_number(self.details, "max", 100),
                    step=detail_number(self.details, "step", 0.5),
                ),
            ]
        return commands

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("on", "off"):
            return self._pulse(command)
        if command in self.COLOR_COMMANDS:
            target = self.color_target
            if target is None:
                raise self._invalid(command, f"{self.TYPE_TAG} {self.device_id} does not have color control capability")
            if command == "setBrightness":
                return self._named(command, value, target=target)
            return self._composite(command, value, target=target)
        raise self._invalid(command)

    def should_filter_state(self, state: DeviceState) -> bool:
        if state.name in self.HIDDEN_STATES:
            return True
        return default_should_filter(state)

    def summarize(self) -> str:
        if self.has_color_picker:
            return "RGB Light Controller - use 'hsv' command with color code (eg. \"0,100,100\" for red)"
        return self.LABEL

    def type_specific_data(self) -> Optional[dict[str, Any]]:
        if not self.has_color_picker:
            return None
        return {
            "rgb_instructions": {
                "to_turn_red": 'Use command "hsv" with value "0,100,100"',
                "to_turn_green": 'Use command "hsv" with value "120,100,100"',
                "to_turn_blue": 'Use command "hsv" with value "240,100,100"',
                "to_set_warm_white": 'Use command "temp" with value "100,2700"',
                "to_set_cool_white": 'Use command "temp" with value "100,6500"',
                "note": "You can use these commands directly on the LightControllerV2 id",
            }
        }
