"""
Connection session for a Loxone Miniserver.

Responsibilities:
- Own the external client handle and drive the connection state machine.
- Race authentication against a timeout, then enable live updates and load the
  device graph (with retry).
- Re-establish the session after unsolicited disconnects with bounded
  exponential backoff.
- Republish client push events on typed channels the router subscribes to.

Non-responsibilities (explicit):
- The wire protocol (framing, handshake, keep-alive) belongs to the client.
- Writing state values; the EventRouter does that.
"""

from __future__ import annotations

import asyncio
import contextlib
import inspect
import logging
from enum import Enum
from typing import Any, Callable, Generic, Mapping, Optional, Protocol, TypeVar

import aiohttp

from .config import validate_config
from .errors import (
    LoxoneAuthTimeoutError,
    LoxoneConnectionError,
    LoxoneError,
    LoxoneGraphLoadError,
    LoxoneNotConnectedError,
    LoxoneNotReadyError,
)
from .redact import redact_for_diagnostics
from .structure import DeviceGraph
from .types import CommandResponse, FetchResult, LoxoneConfig
from .utils import retry

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SessionState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZED = "initialized"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class MiniserverClient(Protocol):
    """The external client that implements the wire protocol."""

    async def connect(self) -> None: ...

    async def disconnect(self) -> None: ...

    async def send_text_command(self, text: str) -> Mapping[str, Any]: ...

    async def get_structure_file(self) -> Mapping[str, Any]: ...

    async def enable_updates(self) -> None: ...

    def on(self, event: str, callback: Callable[..., Any]) -> None: ...

    def off(self, event: str, callback: Callable[..., Any]) -> None: ...


ClientFactory = Callable[[LoxoneConfig], MiniserverClient]


class _Channel(Generic[T]):
    """A typed fan-out channel. Callback errors are logged once per type."""

    def __init__(self, name: str, log: logging.Logger) -> None:
        self.name = name
        self._log = log
        self._callbacks: list[Callable[[T], Any]] = []
        self._error_types: set[type] = set()
        self._pending: set[asyncio.Future[Any]] = set()

    def __len__(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: Callable[[T], Any]) -> Callable[[], None]:
        if callback not in self._callbacks:
            self._callbacks.append(callback)
        return lambda: self.unsubscribe(callback)

    def unsubscribe(self, callback: Callable[[T], Any]) -> bool:
        if callback not in self._callbacks:
            return False
        self._callbacks.remove(callback)
        return True

    def clear(self) -> None:
        self._callbacks.clear()

    def emit(self, payload: T) -> None:
        for cb in list(self._callbacks):
            try:
                result = cb(payload)
            except Exception as exc:  # noqa: BLE001
                self._report(exc)
                continue
            if inspect.isawaitable(result):
                task = asyncio.ensure_future(result)
                self._pending.add(task)
                task.add_done_callback(self._task_done)

    async def emit_async(self, payload: T) -> None:
        for cb in list(self._callbacks):
            try:
                result = cb(payload)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # noqa: BLE001
                self._report(exc)

    def _task_done(self, task: asyncio.Future[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            self._report(exc)

    def _report(self, exc: BaseException) -> None:
        exc_type = type(exc)
        if exc_type in self._error_types:
            return
        self._error_types.add(exc_type)
        self._log.warning("Subscriber callback on %s failed: %s: %s", self.name, exc_type.__name__, exc)


class ConnectionSession:
    """
    Long-lived session to one Miniserver.

    Typical usage:
        session = ConnectionSession(client_factory=MyClient)
        session.initialize(config)
        await session.connect()          # authenticates and loads the device graph
        resp = await session.send_command("jdev/sps/io/<id>/on")
        await session.close()
    """

    def __init__(self, *, client_factory: ClientFactory, logger: Optional[logging.Logger] = None) -> None:
        self._client_factory = client_factory
        self._log = logger or logging.getLogger(__name__)

        self._config: Optional[LoxoneConfig] = None
        self._client: Optional[MiniserverClient] = None
        self._state = SessionState.UNINITIALIZED
        self._graph: Optional[DeviceGraph] = None

        self._auth_waiter: Optional[asyncio.Future[None]] = None
        self._reconnect_task: Optional[asyncio.Task[None]] = None
        self._reconnect_attempts = 0
        self._closing = False

        self.value_events: _Channel[Any] = _Channel("value_events", self._log)
        self.text_events: _Channel[Any] = _Channel("text_events", self._log)
        self.value_tables: _Channel[Any] = _Channel("value_tables", self._log)
        self.text_tables: _Channel[Any] = _Channel("text_tables", self._log)
        self.graph_loaded: _Channel[DeviceGraph] = _Channel("graph_loaded", self._log)
        self.disconnected: _Channel[Optional[str]] = _Channel("disconnected", self._log)

        self._client_handlers: dict[str, Callable[..., Any]] = {
            "connected": self._on_connected,
            "authenticated": self._on_authenticated,
            "disconnected": self._on_disconnected,
            "event_value": self.value_events.emit,
            "event_text": self.text_events.emit,
            "event_table_values": self.value_tables.emit,
            "event_table_text": self.text_tables.emit,
        }

    # --------------------------
    # Introspection
    # --------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def config(self) -> Optional[LoxoneConfig]:
        return self._config

    @property
    def graph(self) -> Optional[DeviceGraph]:
        return self._graph

    @property
    def reconnect_attempts(self) -> int:
        return self._reconnect_attempts

    @property
    def reconnecting(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def is_connected(self) -> bool:
        return self._state is SessionState.CONNECTED

    def is_structure_loaded(self) -> bool:
        return self._graph is not None

    # --------------------------
    # Lifecycle
    # --------------------------

    def initialize(self, config: LoxoneConfig | Mapping[str, Any]) -> "ConnectionSession":
        """Validate config and construct the client handle."""
        cfg = validate_config(config)
        if self._client is not None:
            self._detach(self._client)
        self._log.debug("Initializing session with %s", redact_for_diagnostics(cfg.to_json()))
        self._config = cfg
        client = self._client_factory(cfg)
        for event, handler in self._client_handlers.items():
            client.on(event, handler)
        self._client = client
        self._set_state(SessionState.INITIALIZED)
        return self

    async def connect(self) -> None:
        client = self._client
        cfg = self._config
        if client is None or cfg is None or self._state is SessionState.UNINITIALIZED:
            raise LoxoneNotReadyError("Session not initialized; call initialize() first")
        if self._state is SessionState.CONNECTED:
            self._log.warning("Already connected to %s", cfg.host)
            return
        if self._state is SessionState.CONNECTING:
            self._log.warning("Connection to %s already in progress", cfg.host)
            return

        self._set_state(SessionState.CONNECTING)
        self._log.info("Connecting to Miniserver at %s:%s", cfg.host, cfg.port)
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._auth_waiter = waiter
        try:
            try:
                await client.connect()
            except LoxoneError:
                raise
            except Exception as err:
                raise LoxoneConnectionError(f"Connection failed: {err}") from err

            try:
                await asyncio.wait_for(waiter, timeout=cfg.auth_timeout_s)
            except asyncio.TimeoutError as err:
                await self._teardown_transport(client)
                raise LoxoneAuthTimeoutError("Authentication timeout") from err
            finally:
                self._auth_waiter = None

            self._set_state(SessionState.CONNECTED)
            await self._enable_updates(client)
            await self._load_device_graph()
        except Exception as err:
            self._set_state(SessionState.ERROR)
            self._log.error("Connection to %s failed: %s", cfg.host, err)
            raise

    async def close(self) -> None:
        """Release the client and all subscriptions. Safe to call repeatedly."""
        if self._closing:
            self._log.debug("Close already in progress")
            return
        self._closing = True
        try:
            if self._client is not None:
                self._set_state(SessionState.DISCONNECTING)
            await self._cancel_reconnect()
            self._fail_auth_waiter(LoxoneConnectionError("Session closed"))

            client = self._client
            self._client = None
            if client is not None:
                self._detach(client)
                await self._teardown_transport(client)

            for channel in self._channels():
                channel.clear()
            self._graph = None
            self._reconnect_attempts = 0
            if self._state is not SessionState.UNINITIALIZED:
                self._set_state(SessionState.DISCONNECTED)
        finally:
            self._closing = False

    # --------------------------
    # Requests
    # --------------------------

    async def send_command(self, text: str) -> CommandResponse:
        client = self._client
        if client is None:
            raise LoxoneNotReadyError("Session not initialized")
        if self._state is not SessionState.CONNECTED:
            raise LoxoneNotConnectedError("Not connected to Miniserver")
        self._log.debug("Sending command %s", text)
        try:
            raw = await client.send_text_command(text)
        except LoxoneError:
            raise
        except Exception as err:
            raise LoxoneConnectionError(f"Command {text!r} failed: {err}") from err
        return CommandResponse.from_json(raw)

    async def get_structure(self) -> DeviceGraph:
        """Return the device graph, loading it on first use."""
        if self._graph is None:
            return await self._load_device_graph()
        return self._graph

    async def fetch(self, path: str) -> FetchResult:
        """Raw authenticated HTTP GET against the Miniserver."""
        cfg = self._config
        if cfg is None:
            raise LoxoneNotReadyError("Session not initialized")
        url = f"{cfg.base_url}/{path.lstrip('/')}"
        timeout = aiohttp.ClientTimeout(total=cfg.http_timeout_s)
        auth = aiohttp.BasicAuth(cfg.username, cfg.password)
        self._log.debug("Fetching %s", url)
        try:
            async with aiohttp.ClientSession(timeout=timeout, auth=auth) as http:
                async with http.get(url) as resp:
                    body = await resp.read()
                    return FetchResult(status=resp.status, body=body, content_type=resp.content_type)
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise LoxoneConnectionError(f"Fetch of {path!r} failed: {err}") from err

    # --------------------------
    # Internals
    # --------------------------

    def _channels(self) -> tuple[_Channel[Any], ...]:
        return (
            self.value_events,
            self.text_events,
            self.value_tables,
            self.text_tables,
            self.graph_loaded,
            self.disconnected,
        )

    def _set_state(self, state: SessionState) -> None:
        if state is not self._state:
            self._log.debug("Session state %s -> %s", self._state.value, state.value)
            self._state = state

    def _detach(self, client: MiniserverClient) -> None:
        for event, handler in self._client_handlers.items():
            try:
                client.off(event, handler)
            except Exception as err:  # noqa: BLE001
                self._log.debug("Detaching %s handler failed: %s", event, err)

    async def _teardown_transport(self, client: MiniserverClient) -> None:
        try:
            await client.disconnect()
        except Exception as err:  # noqa: BLE001
            self._log.warning("Error while disconnecting client: %s", err)

    async def _enable_updates(self, client: MiniserverClient) -> None:
        self._log.info("Enabling live updates")
        try:
            await client.enable_updates()
        except LoxoneError:
            raise
        except Exception as err:
            raise LoxoneConnectionError(f"Enabling live updates failed: {err}") from err

    async def _load_device_graph(self) -> DeviceGraph:
        cfg = self._config
        if self._client is None or cfg is None:
            raise LoxoneNotReadyError("Session not initialized")

        async def _fetch() -> DeviceGraph:
            client = self._client
            if client is None:
                raise LoxoneConnectionError("Client released during structure load")
            return DeviceGraph.from_json(await client.get_structure_file())

        self._log.info("Fetching structure file")
        try:
            graph = await retry(_fetch, attempts=cfg.graph_load_attempts, base_delay_s=cfg.graph_retry_base_s)
        except Exception as err:
            raise LoxoneGraphLoadError(f"Failed to load structure: {err}") from err

        self._graph = graph
        self._log.info("Structure loaded. Found %s controls", len(graph.devices))
        await self.graph_loaded.emit_async(graph)
        return graph

    def _fail_auth_waiter(self, exc: BaseException) -> None:
        waiter = self._auth_waiter
        if waiter is not None and not waiter.done():
            waiter.set_exception(exc)

    # Client event handlers

    def _on_connected(self, *_: Any) -> None:
        self._log.info("Transport connected")

    def _on_authenticated(self, *_: Any) -> None:
        self._log.info("Authenticated")
        # The reconnect loop owns the counter while it runs.
        if not self.reconnecting:
            self._reconnect_attempts = 0
        waiter = self._auth_waiter
        if waiter is not None and not waiter.done():
            waiter.set_result(None)

    def _on_disconnected(self, reason: Optional[str] = None, *_: Any) -> None:
        self._log.warning("Disconnected: %s", reason)
        was_connected = self._state is SessionState.CONNECTED
        self._fail_auth_waiter(LoxoneConnectionError(f"Connection failed: {reason}"))
        if self._state is not SessionState.DISCONNECTING:
            self._set_state(SessionState.DISCONNECTED)
        self.disconnected.emit(reason)
        if was_connected and not self._closing:
            self._schedule_reconnect()

    # Reconnect

    def _schedule_reconnect(self) -> None:
        cfg = self._config
        if cfg is None or self._client is None:
            return
        if self.reconnecting:
            return
        if self._reconnect_attempts >= cfg.max_reconnect_attempts:
            self._log.warning("Reconnect cap of %s reached; not reconnecting", cfg.max_reconnect_attempts)
            return
        self._log.debug("Creating reconnect task")
        self._reconnect_task = asyncio.get_running_loop().create_task(self._reconnect_loop())

    async def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task is None or task is asyncio.current_task():
            return
        if not task.done():
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _reconnect_loop(self) -> None:
        """Reconnect with exponential backoff until successful or the cap is reached."""
        cfg = self._config
        if cfg is None:
            return
        for attempt in range(1, cfg.max_reconnect_attempts + 1):
            self._reconnect_attempts = attempt
            delay = min(cfg.reconnect_base_s * 2**attempt, cfg.reconnect_max_s)
            self._log.info("Attempting reconnect %s/%s in %ss", attempt, cfg.max_reconnect_attempts, delay)
            await asyncio.sleep(delay)
            client = self._client
            if client is None:
                return
            try:
                await self.connect()
            except Exception as err:  # noqa: BLE001
                self._log.debug("Reconnect attempt %s failed: %s", attempt, err)
                # Authentication may have succeeded before a later step failed.
                await self._teardown_transport(client)
                continue
            self._reconnect_attempts = 0
            self._log.info("Connection restored")
            return
        self._log.error("Giving up after %s reconnect attempts", cfg.max_reconnect_attempts)
        self._set_state(SessionState.DISCONNECTED)
