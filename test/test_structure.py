from __future__ import annotations

import pytest

from loxone_lib.structure import DeviceGraph

STRUCTURE = {
    "rooms": {"r1": {"name": "Kitchen"}, "bad": "not-a-room"},
    "cats": {"c1": {"name": "Lights", "type": "lights"}},
    "globalStates": {"miniserverTime": "T1", "notifications": ["ignored"]},
    "controls": {
        "lc1": {
            "type": "LightControllerV2",
            "name": "Ceiling",
            "room": "r1",
            "cat": "",
            "states": {"activeMoods": "S1", "circuitValues": ["S2", "S3"]},
            "details": {"masterColor": "mc-1"},
            "statisticV2": {"groups": []},
            "subControls": {
                "lc1/c1": {"type": "ColorPickerV2", "name": "Color", "states": {"color": "S4"}},
            },
        },
        "broken": None,
    },
}


def test_graph_parsing() -> None:
    graph = DeviceGraph.from_json(STRUCTURE)

    assert list(graph.rooms) == ["r1"]
    assert graph.room_name("r1") == "Kitchen"
    assert graph.room_name("missing") is None
    assert graph.room_name(None) is None
    assert graph.categories["c1"].type == "lights"
    assert graph.category_name("c1") == "Lights"
    assert dict(graph.global_states) == {"miniserverTime": "T1"}
    assert list(graph.devices) == ["lc1"]

    light = graph.devices["lc1"]
    assert light.type_tag == "LightControllerV2"
    assert light.room_id == "r1"
    assert light.category_id is None
    assert dict(light.states) == {"activeMoods": "S1"}
    assert light.details["masterColor"] == "mc-1"
    assert light.has_statistics is True
    assert light.sub_devices["lc1/c1"].type_tag == "ColorPickerV2"
    assert light.sub_devices["lc1/c1"].states["color"] == "S4"


def test_graph_is_read_only() -> None:
    graph = DeviceGraph.from_json(STRUCTURE)
    with pytest.raises(TypeError):
        graph.devices["new"] = graph.devices["lc1"]  # type: ignore[index]


def test_empty_and_invalid_snapshots() -> None:
    empty = DeviceGraph.from_json({})
    assert len(empty.devices) == 0
    assert len(empty.rooms) == 0
    with pytest.raises(ValueError):
        DeviceGraph.from_json(["not", "a", "mapping"])  # type: ignore[arg-type]
