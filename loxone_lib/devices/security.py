"""Burglar alarms and intercoms."""

from __future__ import annotations

from typing import Any

from ..types import DeviceCommand, StateFormat, ValueType
from ..utils import value_type_of
from .base import Device


class AlarmDevice(Device):
    TYPE_TAG = "Alarm"
    LABEL = "Alarm"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("armed", "triggered", "active") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        if name in ("level", "zone"):
            return StateFormat(ValueType.NUMBER)
        return StateFormat(value_type_of(value, ValueType.BOOLEAN))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("arm", "Arm the alarm"),
            DeviceCommand("disarm", "Disarm the alarm"),
            DeviceCommand("acknowledge", "Acknowledge alarm"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("arm", "disarm", "acknowledge"):
            return self._pulse(command)
        raise self._invalid(command)

    def summarize(self) -> str:
        # triggered > armed > disarmed
        if self._value("triggered"):
            status = "TRIGGERED"
        elif self._value("armed"):
            status = "ARMED"
        else:
            status = "DISARMED"
        level = self._value("level")
        if isinstance(level, (int, float)) and not isinstance(level, bool) and level > 0:
            status += f" (Level {level})"
        return f"Alarm ({status})"


class CentralAlarmDevice(Device):
    TYPE_TAG = "CentralAlarm"
    LABEL = "Central Alarm"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("armed", "triggered", "active", "armedStay", "armedAway") or isinstance(value, bool):
            return StateFormat(ValueType.BOOLEAN)
        if name in ("mode", "zone", "level"):
            return StateFormat(ValueType.NUMBER)
        return StateFormat(value_type_of(value, ValueType.BOOLEAN))

    def available_commands(self) -> list[DeviceCommand]:
        return [
            DeviceCommand("on", "Arm the alarm"),
            DeviceCommand("off", "Disarm the alarm"),
            DeviceCommand("quit", "Quit/acknowledge alarm"),
            DeviceCommand("delayedOn", "Arm with delay"),
        ]

    def build_command(self, command: str, value: Any = None) -> str:
        if command in ("on", "off", "quit", "delayedOn"):
            return self._pulse(command)
        raise self._invalid(command)

    def summarize(self) -> str:
        if self._value("triggered"):
            status = "TRIGGERED"
        elif self._value("armedAway"):
            status = "ARMED (Away)"
        elif self._value("armedStay"):
            status = "ARMED (Stay)"
        elif self._value("armed"):
            status = "ARMED"
        else:
            status = "DISARMED"
        return f"Central Alarm ({status})"


class IntercomV2Device(Device):
    """Door intercom. Read-only from this API."""

    TYPE_TAG = "IntercomV2"
    LABEL = "Intercom"

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in ("bell", "muted"):
            return StateFormat(ValueType.BOOLEAN)
        return StateFormat(value_type_of(value))

    def summarize(self) -> str:
        parts = []
        if self._value("bell"):
            parts.append("BELL RINGING")
        if self._value("muted"):
            parts.append("MUTED")
        return f"Intercom ({', '.join(parts) if parts else 'IDLE'})"
