"""
loxone_lib/devices/registry.py

Static mapping from vendor type tag to device class.

Rules:
- Aliases map renamed/merged tags onto their current variant.
- Known tags without a dedicated variant render through GenericDevice.
- Tags outside KNOWN_TYPE_TAGS are unsupported; listings skip them.
"""

from __future__ import annotations

from typing import Mapping, Optional

from ..structure import DeviceDescriptor, DeviceGraph
from ..types import StateValue
from .audio import AudioZoneDevice, AudioZoneV2Device, CentralAudioZoneDevice
from .base import Device
from .basic import PushbuttonDevice, RadioDevice, SliderDevice, SwitchDevice
from .climate import IRoomControllerV2Device, SaunaDevice
from .energy import EnergyFlowMonitorDevice, EnergyManager2Device
from .generic import GenericDevice
from .info import InfoOnlyAnalogDevice, InfoOnlyDigitalDevice, MeterDevice, TextStateDevice
from .lighting import (
    ColorPickerDevice,
    ColorPickerV2Device,
    DimmerDevice,
    EIBDimmerDevice,
    LightControllerDevice,
    LightControllerV2Device,
)
from .security import AlarmDevice, CentralAlarmDevice, IntercomV2Device
from .shading import (
    CentralGateDevice,
    CentralJalousieDevice,
    CentralWindowDevice,
    GateDevice,
    JalousieDevice,
)

DEVICE_CLASSES: tuple[type[Device], ...] = (
    SwitchDevice,
    PushbuttonDevice,
    SliderDevice,
    RadioDevice,
    DimmerDevice,
    EIBDimmerDevice,
    ColorPickerDevice,
    ColorPickerV2Device,
    LightControllerDevice,
    LightControllerV2Device,
    JalousieDevice,
    GateDevice,
    CentralJalousieDevice,
    CentralGateDevice,
    CentralWindowDevice,
    AlarmDevice,
    CentralAlarmDevice,
    IntercomV2Device,
    IRoomControllerV2Device,
    SaunaDevice,
    AudioZoneDevice,
    AudioZoneV2Device,
    CentralAudioZoneDevice,
    InfoOnlyDigitalDevice,
    InfoOnlyAnalogDevice,
    TextStateDevice,
    MeterDevice,
    EnergyManager2Device,
    EnergyFlowMonitorDevice,
)

DEVICE_TYPES: Mapping[str, type[Device]] = {cls.TYPE_TAG: cls for cls in DEVICE_CLASSES}

TYPE_ALIASES: Mapping[str, str] = {
    "DigitalInput": "InfoOnlyDigital",
    "IRoomController": "IRoomControllerV2",
    "Intercom": "IntercomV2",
    "EFM": "EnergyFlowMonitor",
}

# Every tag the Miniserver is known to report.
KNOWN_TYPE_TAGS: frozenset[str] = frozenset(DEVICE_TYPES) | frozenset(TYPE_ALIASES) | frozenset(
    {
        "AalEmergency",
        "AalSmartAlarm",
        "ACControl",
        "AlarmChain",
        "AlarmClock",
        "Application",
        "CarCharger",
        "ClimateController",
        "ClimateControllerUS",
        "Daytimer",
        "EnergyManager",
        "Fronius",
        "Heatmixer",
        "Hourcounter",
        "InfoOnlyText",
        "Irrigation",
        "LightsceneRGB",
        "LoadManager",
        "MailBox",
        "MsShortcut",
        "NFCCodeTouch",
        "PoolController",
        "PowerUnit",
        "PresenceDetector",
        "PulseAt",
        "Remote",
        "Sequential",
        "SmokeAlarm",
        "SolarPumpController",
        "SpotPriceOptimizer",
        "StatusMonitor",
        "SteakThermo",
        "SystemScheme",
        "TextInput",
        "TimedSwitch",
        "Tracker",
        "UpDownLeftRightDigital",
        "UpDownLeftRightAnalog",
        "ValueSelector",
        "Ventilation",
        "Wallbox2",
        "WallboxManager",
        "Webpage",
        "Window",
        "WindowMonitor",
    }
)


def resolve_type_tag(type_tag: str) -> str:
    return TYPE_ALIASES.get(type_tag, type_tag)


def is_supported(type_tag: Optional[str]) -> bool:
    return bool(type_tag) and type_tag in KNOWN_TYPE_TAGS


def device_class_for(type_tag: Optional[str]) -> type[Device]:
    """Dedicated class for the tag (after aliasing), else GenericDevice."""
    if not type_tag:
        return GenericDevice
    return DEVICE_TYPES.get(resolve_type_tag(type_tag), GenericDevice)


def create_device(
    descriptor: DeviceDescriptor,
    graph: DeviceGraph,
    states_snapshot: Mapping[str, StateValue],
) -> Device:
    cls = device_class_for(descriptor.type_tag)
    return cls(descriptor, graph, states_snapshot)
