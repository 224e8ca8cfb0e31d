"""Blinds, gates and their central (group) controllers."""

from __future__ import annotations

from typing import Any

from ..types import CommandKind, DeviceCommand, StateFormat, ValueType
from ..utils import value_type_of
from .base import CentralDevice, Device, detail_number


def _position_command(name: str, description: str, details: Any) -> DeviceCommand:
    return DeviceCommand(
        name,
        description,
        kind=CommandKind.SET_VALUE,
        value_type=ValueType.NUMBER,
        min=detail_number(details, "min", 0),
        max=detail_number(details, "max", 100),
        step=detail_number(details, "step", 0.5),
    )


class JalousieDevice(Device):
    TYPE_TAG = "Jalousie"
    LABEL = "Blinds"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("position", "value"):
            return StateFormat(ValueType.NUMBER, unit="%")
        if name in ("active", "moving") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("up", "Move up"),
            DeviceCommand("down", "Move down"),
            DeviceCommand("stop", "Stop movement"),
            _position_command("setPosition", "Set position", self.details),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("up", "down", "stop"):
            return self._pulse(command)
        if command == "setPosition":
            return self._direct(command, value)
        raise self._invalid(command)

    def summarize(self) -> str:
        position = self._value("position")
        return f"Blinds at {position if position is not None else 0}%"


class GateDevice(Device):
    TYPE_TAG = "Gate"
    LABEL = "Gate"

    def format_state(self, name: str, value: Any) -> StateFormat:
        # active: -1 closing, 0 idle, 1 opening
        if name in ("position", "active"):
            return StateFormat(ValueType.NUMBER)
        if name in ("preventOpen", "preventClose") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("open", "Open the gate"),
            DeviceCommand("close", "Close the gate"),
            DeviceCommand("stop", "Stop gate movement"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("open", "close", "stop"):
            return self._pulse(command)
        raise self._invalid(command)

    def summarize(self) -> str:
        moving = self._value("active")
        position = self._value("position")
        if moving == 1:
            status = "OPENING"
        elif moving == -1:
            status = "CLOSING"
        elif isinstance(position, (int, float)) and not isinstance(position, bool):
            # position is 0 (closed) .. 1 (open)
            percent = round(position * 100)
            if percent == 100:
                status = "OPEN"
            elif percent == 0:
                status = "CLOSED"
            else:
                status = f"{percent}% open"
        else:
            status = "UNKNOWN"

        blocked = []
        if self._value("preventOpen") == 1:
            blocked.append("open blocked")
        if self._value("preventClose") == 1:
            blocked.append("close blocked")
        if blocked:
            status += f" ({', '.join(blocked)})"
        return f"Gate ({status})"


class CentralJalousieDevice(CentralDevice):
    TYPE_TAG = "CentralJalousie"
    LABEL = "Central Jalousie"
    UNIT_NOUN = "blinds"

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("fullUp", "Move all blinds fully up"),
            DeviceCommand("fullDown", "Move all blinds fully down"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("fullUp", "fullDown"):
            return self._pulse(command)
        raise self._invalid(command)


class CentralGateDevice(CentralDevice):
    TYPE_TAG = "CentralGate"
    LABEL = "Central Gate"
    UNIT_NOUN = "gates"

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("open", "Open all linked gates"),
            DeviceCommand("close", "Close all linked gates"),
            DeviceCommand("stop", "Stop all linked gates"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("open", "close", "stop"):
            return self._pulse(command)
        raise self._invalid(command)


class CentralWindowDevice(CentralDevice):
    TYPE_TAG = "CentralWindow"
    LABEL = "Central Window"
    UNIT_NOUN = "windows"

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("toggle", "Toggle all windows"),
            DeviceCommand("fullOpen", "Fully open all windows"),
            DeviceCommand("fullClose", "Fully close all windows"),
            _position_command("moveToPosition", "Move all windows to position", self.details),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("toggle", "fullOpen", "fullClose"):
            return self._pulse(command)
        if command == "moveToPosition":
            return self._named(command, value)
        if command in ("open", "close"):
            # open/on, open/off, close/on, close/off
            if value in ("on", "off"):
                return self._named(command, value)
            raise self._invalid(command, "value must be 'on' or 'off'")
        raise self._invalid(command)
