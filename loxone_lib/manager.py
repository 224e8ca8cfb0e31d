"""
loxone_lib/manager.py

DeviceManager: the query/command surface over the current device graph.

Responsibilities:
- Hold the current DeviceGraph (replaced wholesale by update_structure()).
- Project rooms and categories into flat lists.
- Build fresh Device views from a cache snapshot on every request.
- Build and send device commands through the ConnectionSession.

Non-responsibilities (explicit):
- Loading the graph (ConnectionSession does that and publishes graph_loaded).
- Caching Device views; they are cheap and always rebuilt.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from .devices import Device, create_device, is_supported
from .errors import LoxoneNotConnectedError, LoxoneNotFoundError, LoxoneNotReadyError
from .session import ConnectionSession
from .states import StateCache
from .structure import DeviceDescriptor, DeviceGraph
from .types import Category, Room

_NOT_READY = "Connecting to Smart Home. Try again later."


class DeviceManager:
    def __init__(
        self,
        session: ConnectionSession,
        cache: StateCache,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._session = session
        self._cache = cache
        self._log = logger or logging.getLogger(__name__)
        self._graph: Optional[DeviceGraph] = None

    @property
    def graph(self) -> Optional[DeviceGraph]:
        return self._graph

    def update_structure(self, graph: Optional[DeviceGraph]) -> None:
        self._graph = graph
        if graph is not None:
            self._log.debug("Device graph updated: %s devices", len(graph.devices))

    # --------------------------
    # Queries
    # --------------------------

    def get_rooms(self) -> list[Room]:
        if self._graph is None:
            return []
        return list(self._graph.rooms.values())

    def get_categories(self) -> list[Category]:
        if self._graph is None:
            return []
        return list(self._graph.categories.values())

    def get_devices(self, room_id: Optional[str] = None, category_id: Optional[str] = None) -> list[Device]:
        """
        Return Device views for every supported descriptor.

        room_id and category_id are AND-combined; None disables a filter.
        Descriptors with an unsupported type tag are skipped with a warning.
        """
        graph = self._graph
        if graph is None:
            return []
        snapshot = self._cache.get_all_snapshot()
        devices: list[Device] = []
        for device_id, descriptor in graph.devices.items():
            if not is_supported(descriptor.type_tag):
                self._log.warning("Skipping unsupported device %s (type %r)", device_id, descriptor.type_tag)
                continue
            if room_id and descriptor.room_id != room_id:
                continue
            if category_id and descriptor.category_id != category_id:
                continue
            devices.append(create_device(descriptor, graph, snapshot))
        return devices

    def get_device(self, device_id: str) -> Device:
        graph = self._graph
        if graph is None:
            raise LoxoneNotReadyError(_NOT_READY)
        descriptor = self._descriptor(graph, device_id)
        return create_device(descriptor, graph, self._cache.get_all_snapshot())

    # --------------------------
    # Commands
    # --------------------------

    async def set_device(self, device_id: str, command: str, value: Any = None) -> bool:
        """Build and send a command. Returns True when the Miniserver answered 200."""
        if not self._session.is_connected():
            raise LoxoneNotConnectedError("Not connected to Miniserver")
        graph = self._graph
        if graph is None:
            raise LoxoneNotReadyError(_NOT_READY)
        descriptor = self._descriptor(graph, device_id)

        # Command building needs no live state.
        device = create_device(descriptor, graph, {})
        text = device.build_command(command, value)
        self._log.info("Sending command: %s", text)
        response = await self._session.send_command(text)
        if not response.ok:
            self._log.warning("Command %s answered with code %s", text, response.code)
        return response.ok

    @staticmethod
    def _descriptor(graph: DeviceGraph, device_id: str) -> DeviceDescriptor:
        descriptor = graph.devices.get(device_id)
        if descriptor is None:
            raise LoxoneNotFoundError(device_id)
        return descriptor
