"""Audio zones."""

from __future__ import annotations

from typing import Any

from ..types import CommandKind, DeviceCommand, DeviceState, StateFormat, ValueType
from ..utils import value_type_of
from .base import CentralDevice, Device, detail_number

# playState: -1 unknown, 0 stopped, 1 paused, 2 playing
PLAY_STATES = {2: "PLAYING", 1: "PAUSED", 0: "STOPPED"}


def _volume_command(name: str, description: str, details: Any) -> DeviceCommand:
    return DeviceCommand(
        name,
        description,
        kind=CommandKind.SET_VALUE,
        value_type=ValueType.NUMBER,
        min=detail_number(details, "min", 0),
        max=detail_number(details, "max", 100),
        step=detail_number(details, "step", 0.5),
    )


class AudioZoneDevice(Device):
    TYPE_TAG = "AudioZone"
    LABEL = "Audio Zone"

    PULSES = ("play", "pause", "stop", "next", "previous", "volumeUp", "volumeDown", "mute")

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name == "volume":
            return StateFormat(ValueType.NUMBER, unit="%")
        if name in ("activeOutput", "favoriteId"):
            return StateFormat(ValueType.NUMBER)
        if name in ("power", "muted") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        if name in ("mode", "source"):
            return StateFormat(ValueType.STRING)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("play", "Start playback"),
            DeviceCommand("pause", "Pause playback"),
            DeviceCommand("stop", "Stop playback"),
            DeviceCommand("next", "Next track"),
            DeviceCommand("previous", "Previous track"),
            DeviceCommand("volumeUp", "Increase volume"),
            DeviceCommand("volumeDown", "Decrease volume"),
            _volume_command("setVolume", "Set volume level (0-100)", self.details),
            DeviceCommand("mute", "Toggle mute"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in self.PULSES:
            return self._pulse(command)
        if command == "setVolume":
            return self._named(command, value, wire_name="volume")
        raise self._invalid(command)

    def summarize(self) -> str:
        status = "ON" if self._value("power") else "OFF"
        volume = self._value("volume")
        if self._value("muted"):
            status += " (MUTED)"
        elif volume is not None:
            status += f" Vol:{volume}%"
        return f"Audio Zone ({status})"


class AudioZoneV2Device(Device):
    TYPE_TAG = "AudioZoneV2"
    LABEL = "Audio Zone V2"

    PULSES = ("play", "pause", "next", "prev", "volUp", "volDown")
    VISIBLE_STATES = ("playState", "volume")

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name == "volume":
            return StateFormat(ValueType.NUMBER, unit="%")
        if name == "playState":
            return StateFormat(ValueType.NUMBER)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("play", "Play (turns on if needed)"),
            DeviceCommand("pause", "Pause"),
            DeviceCommand("next", "Next track"),
            DeviceCommand("prev", "Previous track"),
            DeviceCommand("volUp", "Volume up"),
            DeviceCommand("volDown", "Volume down"),
            _volume_command("volume", "Set volume", self.details),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in self.PULSES:
            return self._pulse(command)
        if command == "volume":
            return self._named(command, value)
        raise self._invalid(command)

    def should_filter_state(self, state: DeviceState) -> bool:
        return state.name not in self.VISIBLE_STATES

    def summarize(self) -> str:
        play_state = self._value("playState")
        status = PLAY_STATES.get(play_state, "UNKNOWN") if isinstance(play_state, (int, float)) else "UNKNOWN"
        volume = self._value("volume")
        if volume is not None:
            status += f" Vol:{volume}%"
        return f"Audio Zone V2 ({status})"


class CentralAudioZoneDevice(CentralDevice):
    TYPE_TAG = "CentralAudioZone"
    LABEL = "Central Audio"
    UNIT_NOUN = "zones"

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("play", "Play all linked audio zones"),
            DeviceCommand("pause", "Pause all linked audio zones"),
            DeviceCommand("volumeUp", "Increase volume on all zones"),
            DeviceCommand("volumeDown", "Decrease volume on all zones"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("play", "pause", "volumeUp", "volumeDown"):
            return self._pulse(command)
        raise self._invalid(command)
