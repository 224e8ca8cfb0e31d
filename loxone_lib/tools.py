"""
loxone_lib/tools.py

Transport-neutral tool table over the DeviceManager.

Each ToolSpec carries a JSON-schema description (for whatever transport lists
tools to its callers), a voluptuous validator for incoming arguments, and the
handler. LoxoneTools.call() is the single dispatch point; errors surface as the
typed LoxoneError subclasses for the transport to translate.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import asdict, dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import voluptuous as vol

from .errors import LoxoneInvalidArgument, LoxoneNotConnectedError, LoxoneNotReadyError
from .manager import DeviceManager
from .session import ConnectionSession

Handler = Callable[["LoxoneTools", Mapping[str, Any]], Union[Any, Awaitable[Any]]]

_ID = vol.All(str, vol.Strip, vol.Length(min=1))
_OPTIONAL_ID = vol.Any(None, vol.All(str, vol.Strip))


@dataclass(frozen=True, slots=True)
class ToolSpec:
    name: str
    description: str
    input_schema: Mapping[str, Any]
    validator: vol.Schema
    handler: Handler
    requires_connection: bool = False


def _get_rooms(tools: "LoxoneTools", args: Mapping[str, Any]) -> list[dict[str, Any]]:
    return [asdict(room) for room in tools.manager.get_rooms()]


def _get_categories(tools: "LoxoneTools", args: Mapping[str, Any]) -> list[dict[str, Any]]:
    return [asdict(cat) for cat in tools.manager.get_categories()]


def _get_devices(tools: "LoxoneTools", args: Mapping[str, Any]) -> list[dict[str, Any]]:
    devices = tools.manager.get_devices(args.get("room_id") or None, args.get("category_id") or None)
    return [device.to_json() for device in devices]


def _get_device(tools: "LoxoneTools", args: Mapping[str, Any]) -> dict[str, Any]:
    return tools.manager.get_device(args["id"]).to_json()


async def _set_device(tools: "LoxoneTools", args: Mapping[str, Any]) -> dict[str, Any]:
    device_id = args["id"]
    command = args["command"]
    success = await tools.manager.set_device(device_id, command, args.get("value"))
    if success:
        message = f"Command '{command}' sent successfully to device {device_id}"
    else:
        message = f"Failed to send command '{command}' to device {device_id}"
    return {"success": success, "message": message}


_NO_ARGS = {"type": "object", "properties": {}, "required": []}

TOOLS: Mapping[str, ToolSpec] = {
    spec.name: spec
    for spec in (
        ToolSpec(
            name="get_rooms",
            description="Get all rooms from Smart Home",
            input_schema=_NO_ARGS,
            validator=vol.Schema({}),
            handler=_get_rooms,
        ),
        ToolSpec(
            name="get_categories",
            description="Get all categories from Smart Home",
            input_schema=_NO_ARGS,
            validator=vol.Schema({}),
            handler=_get_categories,
        ),
        ToolSpec(
            name="get_devices",
            description=(
                "Get devices with optional room/category filter. Returns devices with their "
                "current state values and available commands."
            ),
            input_schema={
                "type": "object",
                "properties": {
                    "room_id": {"type": "string", "description": "Optional: Filter by room id"},
                    "category_id": {"type": "string", "description": "Optional: Filter by category id"},
                },
                "required": [],
            },
            validator=vol.Schema(
                {
                    vol.Optional("room_id"): _OPTIONAL_ID,
                    vol.Optional("category_id"): _OPTIONAL_ID,
                }
            ),
            handler=_get_devices,
        ),
        ToolSpec(
            name="get_device",
            description="Get one device. Returns the device with its current state values and available commands.",
            input_schema={
                "type": "object",
                "properties": {"id": {"type": "string", "description": "Device id"}},
                "required": ["id"],
            },
            validator=vol.Schema({vol.Required("id"): _ID}),
            handler=_get_device,
        ),
        ToolSpec(
            name="set_device",
            description="Send a command to a device",
            input_schema={
                "type": "object",
                "properties": {
                    "id": {"type": "string", "description": "Device id"},
                    "command": {
                        "type": "string",
                        "description": 'Command name (e.g., "on", "off", "setValue", "setTemperature")',
                    },
                    "value": {
                        "type": ["string", "number", "boolean"],
                        "description": "Optional value for commands that require it",
                    },
                },
                "required": ["id", "command"],
            },
            validator=vol.Schema(
                {
                    vol.Required("id"): _ID,
                    vol.Required("command"): _ID,
                    vol.Optional("value"): vol.Any(None, str, int, float, bool),
                }
            ),
            handler=_set_device,
            requires_connection=True,
        ),
    )
}


class LoxoneTools:
    def __init__(
        self,
        manager: DeviceManager,
        session: ConnectionSession,
        *,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.manager = manager
        self.session = session
        self._log = logger or logging.getLogger(__name__)

    @staticmethod
    def describe() -> list[dict[str, Any]]:
        """Tool listing in the shape transports advertise: name, description, inputSchema."""
        return [
            {"name": spec.name, "description": spec.description, "inputSchema": dict(spec.input_schema)}
            for spec in TOOLS.values()
        ]

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Any:
        spec = TOOLS.get(name)
        if spec is None:
            raise LoxoneInvalidArgument(f"Unknown tool: {name}")
        try:
            args = spec.validator(dict(arguments or {}))
        except vol.Invalid as err:
            raise LoxoneInvalidArgument(f"Invalid arguments for {name}: {err}") from err

        if spec.requires_connection and not self.session.is_connected():
            raise LoxoneNotConnectedError("Not connected to Loxone. Try again later.")
        if not self.session.is_structure_loaded():
            raise LoxoneNotReadyError("Tool has not loaded the Smart Home data yet. Try again later.")

        self._log.debug("Calling tool %s", name)
        result = spec.handler(self, args)
        if inspect.isawaitable(result):
            result = await result
        return result
