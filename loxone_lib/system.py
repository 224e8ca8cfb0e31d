"""
loxone_lib/system.py

LoxoneSystem: assembles the gateway core around one Miniserver.

Construction order is cache -> session -> router -> manager -> clock; every
collaborator is handed its dependencies explicitly. A LoxoneSystem is single
use: after shutdown() build a new one.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from .clock import ClockService
from .errors import LoxoneNotReadyError
from .manager import DeviceManager
from .router import EventRouter
from .session import ClientFactory, ConnectionSession
from .states import StateCache
from .structure import DeviceGraph
from .types import LoxoneConfig


class LoxoneSystem:
    def __init__(
        self,
        config: LoxoneConfig | Mapping[str, Any],
        *,
        client_factory: ClientFactory,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._log = logger or logging.getLogger(__name__)
        self._config = config
        self._shut_down = False

        self.cache = StateCache(logger=logger)
        self.session = ConnectionSession(client_factory=client_factory, logger=logger)
        self.router = EventRouter(self.session, self.cache, logger=logger)
        self.manager = DeviceManager(self.session, self.cache, logger=logger)
        self.clock = ClockService(self.session, self.cache, logger=logger)

        self.session.graph_loaded.subscribe(self._on_graph_loaded)

    async def __aenter__(self) -> "LoxoneSystem":
        await self.open()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.shutdown()

    async def open(self) -> None:
        """Initialize and connect the session. No-op when already connected."""
        if self._shut_down:
            raise LoxoneNotReadyError("System has been shut down")
        if self.session.is_connected():
            self._log.debug("Loxone system already open")
            return
        if self.session.config is None:
            self.session.initialize(self._config)
        await self.session.connect()
        self._log.info("Loxone system ready")

    async def shutdown(self) -> None:
        if self._shut_down:
            return
        self._shut_down = True
        self.router.cleanup()
        self.cache.cleanup()
        await self.session.close()
        self.manager.update_structure(None)
        self._log.info("Loxone system shut down")

    async def _on_graph_loaded(self, graph: DeviceGraph) -> None:
        self.manager.update_structure(graph)
        await self.clock.update_structure(graph)
