"""Gateway core for Loxone Miniserver home-automation controllers."""

from .clock import ClockService
from .config import CONFIG_SCHEMA, config_from_env, validate_config
from .devices import Device, GenericDevice, create_device, is_supported
from .errors import (
    LoxoneAuthTimeoutError,
    LoxoneCommandError,
    LoxoneConfigError,
    LoxoneConnectionError,
    LoxoneError,
    LoxoneGraphLoadError,
    LoxoneInvalidArgument,
    LoxoneInvalidCommandError,
    LoxoneNotConnectedError,
    LoxoneNotFoundError,
    LoxoneNotReadyError,
    LoxoneProtocolNotSupportedError,
)
from .events import TextEvent, ValueEvent, decode_state_id
from .manager import DeviceManager
from .redact import redact_for_diagnostics
from .router import EventRouter
from .session import ConnectionSession, MiniserverClient, SessionState
from .states import StateCache
from .structure import DeviceDescriptor, DeviceGraph
from .system import LoxoneSystem
from .tools import TOOLS, LoxoneTools, ToolSpec
from .types import (
    AggregationInterval,
    Category,
    CommandKind,
    CommandResponse,
    DeviceCommand,
    DeviceState,
    FetchResult,
    LoxoneConfig,
    Room,
    StateValue,
    StatisticsPeriod,
    TimeRange,
    ValueType,
)

__all__ = [
    "AggregationInterval",
    "CONFIG_SCHEMA",
    "Category",
    "ClockService",
    "CommandKind",
    "CommandResponse",
    "ConnectionSession",
    "Device",
    "DeviceCommand",
    "DeviceDescriptor",
    "DeviceGraph",
    "DeviceManager",
    "DeviceState",
    "EventRouter",
    "FetchResult",
    "GenericDevice",
    "LoxoneAuthTimeoutError",
    "LoxoneCommandError",
    "LoxoneConfig",
    "LoxoneConfigError",
    "LoxoneConnectionError",
    "LoxoneError",
    "LoxoneGraphLoadError",
    "LoxoneInvalidArgument",
    "LoxoneInvalidCommandError",
    "LoxoneNotConnectedError",
    "LoxoneNotFoundError",
    "LoxoneNotReadyError",
    "LoxoneProtocolNotSupportedError",
    "LoxoneSystem",
    "LoxoneTools",
    "MiniserverClient",
    "Room",
    "SessionState",
    "StateCache",
    "StateValue",
    "StatisticsPeriod",
    "TOOLS",
    "TextEvent",
    "TimeRange",
    "ToolSpec",
    "ValueEvent",
    "config_from_env",
    "create_device",
    "decode_state_id",
    "is_supported",
    "redact_for_diagnostics",
    "validate_config",
]
