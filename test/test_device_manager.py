from __future__ import annotations

import logging

import pytest

from loxone_lib.devices import (
    DEVICE_TYPES,
    GenericDevice,
    KNOWN_TYPE_TAGS,
    device_class_for,
    is_supported,
    resolve_type_tag,
)
from loxone_lib.devices.climate import IRoomControllerV2Device
from loxone_lib.devices.energy import EnergyFlowMonitorDevice
from loxone_lib.errors import (
    LoxoneInvalidCommandError,
    LoxoneNotConnectedError,
    LoxoneNotFoundError,
    LoxoneNotReadyError,
)
from loxone_lib.manager import DeviceManager
from loxone_lib.states import StateCache
from loxone_lib.structure import DeviceGraph
from loxone_lib.types import CommandResponse

STRUCTURE = {
    "rooms": {"r1": {"name": "Kitchen"}, "r2": {"name": "Office"}},
    "cats": {"c1": {"name": "Lights", "type": "lights"}, "c2": {"name": "Shading"}},
    "controls": {
        "a": {"type": "Switch", "name": "Ceiling", "room": "r1", "cat": "c1", "states": {"active": "S1"}},
        "b": {"type": "Dimmer", "name": "Spots", "room": "r1", "cat": "c2", "states": {"position": "S2"}},
        "c": {"type": "Jalousie", "name": "Blinds", "room": "r2", "cat": "c1", "states": {"position": "S3"}},
        "d": {"type": "Bogus", "name": "Mystery", "room": "r1", "cat": "c1", "states": {"value": "S4"}},
    },
}


class _FakeSession:
    def __init__(self, *, connected: bool = True, code: int = 200) -> None:
        self.connected = connected
        self.code = code
        self.sent: list[str] = []

    def is_connected(self) -> bool:
        return self.connected

    async def send_command(self, text: str) -> CommandResponse:
        self.sent.append(text)
        return CommandResponse(code=self.code, value="1", control=text)


def _manager(session=None, *, loaded: bool = True):
    cache = StateCache()
    cache.update_value("S1", 1)
    cache.update_value("S2", 40)
    manager = DeviceManager(session or _FakeSession(), cache)
    if loaded:
        manager.update_structure(DeviceGraph.from_json(STRUCTURE))
    return manager


def test_registry_table() -> None:
    assert len(DEVICE_TYPES) == 29
    assert resolve_type_tag("IRoomController") == "IRoomControllerV2"
    assert device_class_for("IRoomController") is IRoomControllerV2Device
    assert device_class_for("EFM") is EnergyFlowMonitorDevice
    assert device_class_for("Window") is GenericDevice
    assert device_class_for("") is GenericDevice
    assert is_supported("Window") is True
    assert is_supported("Intercom") is True
    assert is_supported("Bogus") is False
    assert is_supported(None) is False
    assert set(DEVICE_TYPES) <= KNOWN_TYPE_TAGS


def test_rooms_and_categories() -> None:
    manager = _manager()
    assert [(room.id, room.name) for room in manager.get_rooms()] == [("r1", "Kitchen"), ("r2", "Office")]
    cats = manager.get_categories()
    assert [(cat.id, cat.name, cat.type) for cat in cats] == [("c1", "Lights", "lights"), ("c2", "Shading", None)]


def test_queries_before_graph_load() -> None:
    manager = _manager(loaded=False)
    assert manager.get_rooms() == []
    assert manager.get_categories() == []
    assert manager.get_devices() == []
    with pytest.raises(LoxoneNotReadyError):
        manager.get_device("a")


def test_get_devices_skips_unsupported_kinds(caplog) -> None:
    manager = _manager()
    with caplog.at_level(logging.WARNING):
        devices = manager.get_devices()
    assert [device.device_id for device in devices] == ["a", "b", "c"]
    assert "Skipping unsupported device d" in caplog.text


def test_get_devices_filters_are_and_combined() -> None:
    manager = _manager()
    assert [d.device_id for d in manager.get_devices("r1")] == ["a", "b"]
    assert [d.device_id for d in manager.get_devices(category_id="c1")] == ["a", "c"]
    assert [d.device_id for d in manager.get_devices("r1", "c1")] == ["a"]
    assert manager.get_devices("r2", "c2") == []
    assert manager.get_devices("nowhere") == []


def test_get_device_renders_live_state() -> None:
    manager = _manager()
    assert manager.get_device("a").summarize() == "Switch (ON)"
    assert manager.get_device("b").summarize() == "Dimmer (ON 40%)"
    # Unsupported kinds are still viewable one at a time.
    assert isinstance(manager.get_device("d"), GenericDevice)
    with pytest.raises(LoxoneNotFoundError) as excinfo:
        manager.get_device("zzz")
    assert str(excinfo.value) == "Device zzz not found"


def test_views_are_rebuilt_from_fresh_snapshots() -> None:
    manager = _manager()
    before = manager.get_device("a")
    manager._cache.update_value("S1", 0)
    assert before.summarize() == "Switch (ON)"
    assert manager.get_device("a").summarize() == "Switch (OFF)"


@pytest.mark.asyncio
async def test_set_device_sends_built_command() -> None:
    session = _FakeSession()
    manager = _manager(session)
    assert await manager.set_device("b", "setValue", 75) is True
    assert session.sent == ["jdev/sps/io/b/75"]


@pytest.mark.asyncio
async def test_set_device_reports_non_200_as_failure() -> None:
    session = _FakeSession(code=500)
    manager = _manager(session)
    assert await manager.set_device("a", "on") is False


@pytest.mark.asyncio
async def test_set_device_error_order() -> None:
    disconnected = _manager(_FakeSession(connected=False), loaded=False)
    with pytest.raises(LoxoneNotConnectedError):
        await disconnected.set_device("missing", "on")

    not_loaded = _manager(_FakeSession(), loaded=False)
    with pytest.raises(LoxoneNotReadyError) as excinfo:
        await not_loaded.set_device("missing", "on")
    assert not isinstance(excinfo.value, LoxoneNotConnectedError)

    with pytest.raises(LoxoneNotFoundError):
        await _manager().set_device("missing", "on")


@pytest.mark.asyncio
async def test_set_device_propagates_invalid_command() -> None:
    session = _FakeSession()
    manager = _manager(session)
    with pytest.raises(LoxoneInvalidCommandError):
        await manager.set_device("a", "explode")
    with pytest.raises(LoxoneInvalidCommandError):
        await manager.set_device("b", "setValue")
    assert session.sent == []


def test_update_structure_replaces_graph() -> None:
    manager = _manager()
    manager.update_structure(DeviceGraph.from_json({"rooms": {"r9": {"name": "Attic"}}}))
    assert [room.id for room in manager.get_rooms()] == ["r9"]
    assert manager.get_devices() == []
