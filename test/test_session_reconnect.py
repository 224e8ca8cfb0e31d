from __future__ import annotations

import asyncio
import logging

import pytest

from loxone_lib.session import ConnectionSession, SessionState

CONFIG = {
    "host": "192.168.1.77",
    "username": "admin",
    "password": "secret",
    "auth_timeout_s": 0.01,
    "graph_retry_base_s": 0,
    "max_reconnect_attempts": 3,
    "reconnect_base_s": 0.001,
    "reconnect_max_s": 0.004,
}

STRUCTURE = {"rooms": {}, "cats": {}, "controls": {}}


class _FakeClient:
    def __init__(self, config) -> None:
        self.handlers: dict[str, list] = {}
        self.authenticate = True
        self.connect_calls = 0
        self.disconnect_calls = 0
        self.structure_broken = False

    def on(self, event, callback) -> None:
        self.handlers.setdefault(event, []).append(callback)

    def off(self, event, callback) -> None:
        callbacks = self.handlers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event, *args) -> None:
        for callback in list(self.handlers.get(event, [])):
            callback(*args)

    async def connect(self) -> None:
        self.connect_calls += 1
        if self.authenticate:
            self.emit("authenticated")

    async def disconnect(self) -> None:
        self.disconnect_calls += 1

    async def send_text_command(self, text):
        return {"code": 200}

    async def get_structure_file(self):
        if self.structure_broken:
            raise OSError("structure download failed")
        return STRUCTURE

    async def enable_updates(self) -> None:
        return None


async def _connected_session():
    clients: list[_FakeClient] = []

    def _factory(config):
        clients.append(_FakeClient(config))
        return clients[-1]

    session = ConnectionSession(client_factory=_factory)
    session.initialize(CONFIG)
    await session.connect()
    return session, clients[0]


async def _wait_reconnect(session: ConnectionSession) -> None:
    task = session._reconnect_task
    assert task is not None
    await asyncio.wait_for(task, timeout=2)


@pytest.mark.asyncio
async def test_unsolicited_disconnect_reconnects() -> None:
    session, client = await _connected_session()
    reasons = []
    session.disconnected.subscribe(reasons.append)
    loads = []
    session.graph_loaded.subscribe(loads.append)

    client.emit("disconnected", "socket closed")
    assert session.state is SessionState.DISCONNECTED
    assert session.reconnecting is True

    await _wait_reconnect(session)

    assert session.is_connected() is True
    assert session.reconnect_attempts == 0
    assert client.connect_calls == 2
    assert reasons == ["socket closed"]
    assert len(loads) == 1


@pytest.mark.asyncio
async def test_reconnect_gives_up_after_cap() -> None:
    session, client = await _connected_session()
    client.authenticate = False

    client.emit("disconnected", "socket closed")
    await _wait_reconnect(session)

    assert session.is_connected() is False
    assert session.state is SessionState.DISCONNECTED
    assert session.reconnect_attempts == 3
    assert client.connect_calls == 1 + 3

    # Further disconnect reports schedule nothing once the cap is reached.
    client.emit("disconnected", "socket closed")
    await asyncio.sleep(0.02)
    assert session.reconnecting is False
    assert client.connect_calls == 1 + 3
    assert session.is_connected() is False


@pytest.mark.asyncio
async def test_only_one_reconnect_task_at_a_time() -> None:
    session, client = await _connected_session()
    client.emit("disconnected", "first")
    task = session._reconnect_task

    session._schedule_reconnect()
    assert session._reconnect_task is task

    await _wait_reconnect(session)
    assert session.is_connected() is True


@pytest.mark.asyncio
async def test_close_cancels_pending_reconnect() -> None:
    session, client = await _connected_session()
    client.authenticate = False
    client.emit("disconnected", "socket closed")
    assert session.reconnecting is True

    await session.close()

    assert session.reconnecting is False
    assert session.state is SessionState.DISCONNECTED
    calls = client.connect_calls
    await asyncio.sleep(0.02)
    assert client.connect_calls == calls


@pytest.mark.asyncio
async def test_disconnect_while_not_connected_does_not_reconnect() -> None:
    clients: list[_FakeClient] = []

    def _factory(config):
        clients.append(_FakeClient(config))
        return clients[-1]

    session = ConnectionSession(client_factory=_factory)
    session.initialize(CONFIG)
    clients[0].emit("disconnected", "idle")

    assert session.reconnecting is False
    assert session.state is SessionState.DISCONNECTED


@pytest.mark.asyncio
async def test_reconnect_is_bounded_when_graph_load_keeps_failing(caplog) -> None:
    caplog.set_level(logging.INFO, logger="loxone_lib.session")
    session, client = await _connected_session()
    client.structure_broken = True

    client.emit("disconnected", "socket closed")
    await _wait_reconnect(session)

    assert client.connect_calls == 1 + 3
    assert session.state is SessionState.DISCONNECTED
    assert session.reconnecting is False
    assert session.reconnect_attempts == 3
    # Each attempt that authenticated but failed afterwards drops the transport.
    assert client.disconnect_calls == 3
    assert "Attempting reconnect 1/3 in 0.002s" in caplog.text
    assert "Attempting reconnect 2/3 in 0.004s" in caplog.text
    assert "Giving up after 3 reconnect attempts" in caplog.text
