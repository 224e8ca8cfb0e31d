"""Energy manager and energy flow monitor (read-only)."""

from __future__ import annotations

from typing import Any

from ..types import StateFormat, ValueType
from ..utils import value_type_of
from .base import Device


def _number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _grid_part(grid: Any) -> list[str]:
    if not _number(grid) or not grid:
        return []
    if grid > 0:
        return [f"Grid Import: {grid:.1f}kW"]
    return [f"Grid Export: {abs(grid):.1f}kW"]


def _storage_part(storage: Any) -> list[str]:
    if not _number(storage) or not storage:
        return []
    if storage > 0:
        return [f"Storage Charging: {storage:.1f}kW"]
    return [f"Storage Discharging: {abs(storage):.1f}kW"]


class EnergyManager2Device(Device):
    TYPE_TAG = "EnergyManager2"
    LABEL = "Energy Manager"

    UNITS = {"Gpwr": "kW", "Spwr": "kW", "Ppwr": "kW", "MaxSpwr": "kW", "Ssoc": "%", "MinSoc": "%"}

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in self.UNITS:
            return StateFormat(ValueType.NUMBER, unit=self.UNITS[name])
        if name == "loads":
            return StateFormat(ValueType.OBJECT)
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command, "Energy Manager Gen. 2 has no commands")

    def summarize(self) -> str:
        parts = _grid_part(self._value("Gpwr"))
        production = self._value("Ppwr")
        if _number(production) and production > 0:
            parts.append(f"Production: {production:.1f}kW")
        if self.details.get("HasSpwr") is True:
            parts += _storage_part(self._value("Spwr"))
        soc = self._value("Ssoc")
        if self.details.get("HasSsoc") is True and _number(soc) and soc:
            parts.append(f"SOC: {round(soc)}%")
        return f"Energy Manager ({', '.join(parts) if parts else 'No data'})"


class EnergyFlowMonitorDevice(Device):
    TYPE_TAG = "EnergyFlowMonitor"
    LABEL = "Energy Flow Monitor"

    UNITS = {"Ppwr": "kW", "Gpwr": "kW", "Spwr": "kW", "CO2": "kg/kWh"}

    @property
    def nodes(self) -> list[Any]:
        nodes = self.details.get("nodes")
        return list(nodes) if isinstance(nodes, (list, tuple)) else []

    def format_state(self, name: str, value: Any) -> StateFormat:
        if name in self.UNITS:
            return StateFormat(ValueType.NUMBER, unit=self.UNITS[name])
        if name.startswith("actual"):
            return StateFormat(ValueType.NUMBER, unit="kW")
        return StateFormat(value_type_of(value, ValueType.NUMBER))

    def build_command(self, command: str, value: Any = None) -> str:
        raise self._invalid(command, "Energy Flow Monitor has no commands")

    def summarize(self) -> str:
        parts = []
        production = self._value("Ppwr")
        if _number(production) and production > 0:
            parts.append(f"Production: {production:.1f}kW")
        parts += _grid_part(self._value("Gpwr"))
        parts += _storage_part(self._value("Spwr"))

        nodes = self.nodes
        actuals = [state for state in self.states if state.name.startswith("actual")]
        for index, state in enumerate(actuals):
            node = nodes[index] if index < len(nodes) else None
            title = node.get("title") if isinstance(node, dict) and node.get("title") else "Unknown"
            if _number(state.value) and state.value:
                parts.append(f"{title}: {state.value:.1f}kW")

        co2 = self._value("CO2")
        if _number(co2) and co2:
            parts.append(f"CO2: {co2:.3f}kg/kWh")
        return f"Energy Flow Monitor ({', '.join(parts) if parts else 'No data'})"
