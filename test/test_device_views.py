from __future__ import annotations

from loxone_lib.devices import create_device, default_should_filter
from loxone_lib.devices.info import InfoOnlyDigitalDevice
from loxone_lib.states import StateCache
from loxone_lib.structure import DeviceGraph
from loxone_lib.types import DeviceState, ValueType

DEVICE_ID = "dev-1"


def _device(type_tag, states=None, values=None, details=None):
    graph = DeviceGraph.from_json(
        {
            "rooms": {"r1": {"name": "Kitchen"}},
            "cats": {"c1": {"name": "Lights"}},
            "controls": {
                DEVICE_ID: {
                    "type": type_tag,
                    "name": "Test device",
                    "room": "r1",
                    "cat": "c1",
                    "states": states or {},
                    "details": details or {},
                    "statistic": {"frequency": 1},
                }
            },
        }
    )
    cache = StateCache()
    for state_id, value in (values or {}).items():
        cache.update_value(state_id, value)
    return create_device(graph.devices[DEVICE_ID], graph, cache.get_all_snapshot())


def _state(name, value):
    return DeviceState(name=name, state_id="x", value=value, value_type=ValueType.NUMBER)


EXPECTED_SUMMARIES = [
    ("Switch", {"active": "S1"}, {"S1": 1}, {}, "Switch (ON)"),
    ("Switch", {"active": "S1"}, {"S1": 0}, {}, "Switch (OFF)"),
    ("Dimmer", {"position": "S2"}, {"S2": 50}, {}, "Dimmer (ON 50%)"),
    ("EIBDimmer", {"position": "S2"}, {"S2": 0}, {}, "EIB Dimmer (OFF)"),
    ("Slider", {"value": "S1"}, {"S1": 12.5}, {"format": "%.1f°C"}, "Slider (12.5°C)"),
    ("Slider", {"value": "S1"}, {}, {}, "Slider (?)"),
    ("Radio", {"activeOutput": "S1"}, {"S1": 2}, {"outputs": {"1": "Red", "2": "Blue"}}, "Radio Selector (Blue)"),
    ("Radio", {"activeOutput": "S1"}, {"S1": 0}, {"outputs": {"1": "Red"}}, "Radio Selector (All Off)"),
    ("Radio", {"activeOutput": "S1"}, {"S1": 5}, {"outputs": {"1": "Red"}}, "Radio Selector (Output 5)"),
    ("Jalousie", {"position": "S1"}, {"S1": 30}, {}, "Blinds at 30%"),
    ("Gate", {"position": "S1", "active": "S2"}, {"S1": 0.5, "S2": 0}, {}, "Gate (50% open)"),
    ("Gate", {"position": "S1", "active": "S2"}, {"S1": 0, "S2": 1}, {}, "Gate (OPENING)"),
    (
        "Gate",
        {"position": "S1", "preventOpen": "S2"},
        {"S1": 1, "S2": 1},
        {},
        "Gate (OPEN (open blocked))",
    ),
    ("CentralJalousie", {}, {}, {"controls": [{}, {}, {}]}, "Central Jalousie (3 blinds)"),
    ("CentralGate", {}, {}, {}, "Central Gate (0 gates)"),
    ("Alarm", {"armed": "S1", "level": "S2"}, {"S1": 1, "S2": 2}, {}, "Alarm (ARMED (Level 2))"),
    (
        "CentralAlarm",
        {"armed": "S1", "armedAway": "S2"},
        {"S1": 1, "S2": 1},
        {},
        "Central Alarm (ARMED (Away))",
    ),
    ("IntercomV2", {"bell": "S1", "muted": "S2"}, {"S1": 1, "S2": 1}, {}, "Intercom (BELL RINGING, MUTED)"),
    (
        "IRoomControllerV2",
        {"tempActual": "S1", "tempTarget": "S2", "activeMode": "S3"},
        {"S1": 21.5, "S2": 22, "S3": 1},
        {"format": "%.1f°C"},
        "Room 21.5°C (target 22.0°C, mode: Comfort)",
    ),
    ("IRoomControllerV2", {}, {}, {}, "Room ?°C (target ?°C, mode: unknown)"),
    ("Sauna", {"active": "S1"}, {"S1": 0}, {}, "Sauna (OFF)"),
    (
        "Sauna",
        {"active": "S1", "tempActual": "S2", "tempTarget": "S3", "timer": "S4"},
        {"S1": 1, "S2": 80, "S3": 90, "S4": 600},
        {},
        "Sauna (Temperature 80°C → 90°C, 10min left)",
    ),
    ("AudioZone", {"power": "S1", "volume": "S2"}, {"S1": 1, "S2": 40}, {}, "Audio Zone (ON Vol:40%)"),
    ("AudioZoneV2", {"playState": "S1", "volume": "S2"}, {"S1": 2, "S2": 30}, {}, "Audio Zone V2 (PLAYING Vol:30%)"),
    ("InfoOnlyDigital", {"active": "S1"}, {"S1": 1}, {}, "Info (ON)"),
    ("InfoOnlyAnalog", {"value": "S1"}, {"S1": 21.456}, {"format": "%.1f°C"}, "Info (21.5°C)"),
    ("InfoOnlyAnalog", {"value": "S1"}, {}, {}, "Info (No data)"),
    ("TextState", {"textAndIcon": "S1"}, {"S1": "Hello"}, {}, "Display: Hello"),
    ("Meter", {"actual": "S1", "total": "S2"}, {"S1": 1.234, "S2": 100}, {}, "Meter (1.23kW, Total: 100.00kWh)"),
    (
        "EnergyManager2",
        {"Gpwr": "S1", "Ppwr": "S2"},
        {"S1": -2.5, "S2": 3},
        {},
        "Energy Manager (Grid Export: 2.5kW, Production: 3.0kW)",
    ),
    ("EnergyManager2", {}, {}, {}, "Energy Manager (No data)"),
    (
        "EnergyFlowMonitor",
        {"Ppwr": "S1", "actual0": "S2"},
        {"S1": 4, "S2": 1.5},
        {"nodes": [{"title": "Heat pump"}]},
        "Energy Flow Monitor (Production: 4.0kW, Heat pump: 1.5kW)",
    ),
    (
        "LightController",
        {"activeScene": "S1", "sceneList": "S2"},
        {"S1": 1, "S2": '1="Bright",2="Dim",3="Off",4="Party"'},
        {},
        "Light Controller (Scene 1) [1:Bright, 2:Dim, 3:Off...]",
    ),
    ("Window", {"position": "S1"}, {"S1": 40}, {}, "Window (40%)"),
    ("Window", {}, {}, {}, "Window (No state)"),
]


def test_summaries() -> None:
    for type_tag, states, values, details, expected in EXPECTED_SUMMARIES:
        device = _device(type_tag, states, values, details)
        assert device.summarize() == expected, type_tag


def test_alias_renders_with_target_variant() -> None:
    device = _device("DigitalInput", {"active": "S1"}, {"S1": 1})
    assert isinstance(device, InfoOnlyDigitalDevice)
    assert device.type_tag == "DigitalInput"
    assert device.summarize() == "Info (ON)"


def test_device_json_view() -> None:
    device = _device("Switch", {"active": "S1", "jLocked": "S2"}, {"S1": 1, "S2": 0})
    data = device.to_json()
    assert data["id"] == DEVICE_ID
    assert data["name"] == "Test device"
    assert data["type"] == "Switch"
    assert data["room"] == "Kitchen"
    assert data["category"] == "Lights"
    assert data["has_statistics"] is True
    assert data["current_states"] == {"active": {"value": 1, "type": "boolean"}}
    assert [c["command"] for c in data["available_commands"]] == ["on", "off"]
    assert data["summary"] == "Switch (ON)"


def test_state_units_and_format_override() -> None:
    room = _device(
        "IRoomControllerV2",
        {"tempActual": "S1", "activeMode": "S2"},
        {"S1": 21.5, "S2": 0},
        {"format": "%.1f°C"},
    )
    states = room.formatted_states
    assert states["tempActual"] == {"value": 21.5, "type": "number", "unit": "°C"}
    assert states["activeMode"]["value"] == "Eco"

    text = _device("TextState", {"value": "S1"}, {"S1": 2}, {"entries": {"2": "Open"}})
    assert text.formatted_states["value"]["value"] == "Open"


def test_default_filter_policy() -> None:
    # Important names are kept even without a value.
    assert default_should_filter(_state("tempActual", None)) is False
    assert default_should_filter(_state("position", 0)) is False
    # Empty values are hidden.
    assert default_should_filter(_state("foo", None)) is True
    assert default_should_filter(_state("foo", "")) is True
    # Noise and configuration names are hidden.
    assert default_should_filter(_state("jLocked", 0)) is True
    assert default_should_filter(_state("serialNr", "123")) is True
    assert default_should_filter(_state("maxThreshold", 5)) is True
    assert default_should_filter(_state("someSetting", 5)) is True
    # Anything else with a value is kept.
    assert default_should_filter(_state("foo", 3)) is False


def test_variant_filter_overrides() -> None:
    light = _device("LightControllerV2", {"moodList": "S1", "active": "S2"}, {"S1": "[]", "S2": 1})
    assert list(light.formatted_states) == ["active"]

    room = _device(
        "IRoomControllerV2",
        {"activeMode": "S1", "currentMode": "S2", "openWindow": "S3"},
        {"S1": 1, "S2": 1, "S3": 0},
    )
    assert list(room.formatted_states) == ["activeMode"]

    central = _device("CentralGate", {"foo": "S1"}, {"S1": 1})
    assert central.formatted_states == {}

    audio = _device("AudioZoneV2", {"playState": "S1", "volume": "S2", "station": "S3"}, {"S1": 2, "S2": 5, "S3": 1})
    assert list(audio.formatted_states) == ["playState", "volume"]


def test_devices_share_state_ids() -> None:
    states = {"active": "shared"}
    first = _device("Switch", states, {"shared": 1})
    second = _device("InfoOnlyDigital", states, {"shared": 1})
    assert first.summarize() == "Switch (ON)"
    assert second.summarize() == "Info (ON)"
