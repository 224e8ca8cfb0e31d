"""Public types for loxone_lib."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping, Optional


@dataclass(frozen=True, slots=True)
class LoxoneConfig:
    """
    Immutable connection configuration.

    Provided once to ConnectionSession.initialize() and treated as read-only
    thereafter. Use loxone_lib.config.validate_config() to build one from a raw
    mapping.
    """

    host: str
    username: str
    password: str
    port: int = 80
    protocol: str = "http"
    ws_protocol: str = "ws"
    serial_number: Optional[str] = None

    auth_timeout_s: float = 10.0
    graph_load_attempts: int = 3
    graph_retry_base_s: float = 1.0
    max_reconnect_attempts: int = 3
    reconnect_base_s: float = 1.0
    reconnect_max_s: float = 30.0
    http_timeout_s: float = 30.0

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.host}:{self.port}"

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-serializable representation (no redaction applied)."""
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "LoxoneConfig":
        """Create a LoxoneConfig from a mapping, ignoring unknown keys."""
        known = {name: data[name] for name in cls.__dataclass_fields__ if name in data}
        return cls(**known)


class ValueType(str, Enum):
    """Rendering hint for a device state or command value."""

    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    OBJECT = "object"


class CommandKind(str, Enum):
    """How a command is rendered on the wire."""

    PULSE = "pulse"
    SET_VALUE = "set_value"
    SET_ENUM = "set_enum"
    HSV = "hsv"
    SET_BRIGHTNESS = "set_brightness"
    TEMP = "temp"
    DAYLIGHT = "daylight"


@dataclass(frozen=True, slots=True)
class Room:
    id: str
    name: str


@dataclass(frozen=True, slots=True)
class Category:
    id: str
    name: str
    type: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CommandOption:
    value: Any
    label: str


@dataclass(frozen=True, slots=True)
class DeviceCommand:
    """
    Descriptive metadata for one command a device kind accepts.

    Returned to callers only; never persisted.
    """

    name: str
    description: str
    kind: CommandKind = CommandKind.PULSE
    value_type: Optional[ValueType] = None
    min: Optional[float] = None
    max: Optional[float] = None
    step: Optional[float] = None
    options: tuple[CommandOption, ...] = ()

    @property
    def requires_value(self) -> bool:
        return self.value_type is not None or bool(self.options)

    def to_json(self) -> dict[str, Any]:
        info: dict[str, Any] = {
            "command": self.name,
            "description": self.description,
            "type": self.kind.value,
        }
        if self.requires_value:
            info["requires_value"] = True
            if self.value_type is not None:
                info["value_type"] = self.value_type.value
            if self.min is not None:
                info["min"] = self.min
            if self.max is not None:
                info["max"] = self.max
            if self.step is not None:
                info["step"] = self.step
            if self.options:
                info["options"] = [{"value": o.value, "label": o.label} for o in self.options]
        return info


@dataclass(frozen=True, slots=True)
class StateFormat:
    """
    Result of Device.format_state().

    A non-None value replaces the raw cached value for display purposes
    (e.g. an enumeration index resolved to its text).
    """

    value_type: ValueType
    unit: Optional[str] = None
    value: Any = None


@dataclass(frozen=True, slots=True)
class DeviceState:
    name: str
    state_id: str
    value: Any
    value_type: ValueType
    unit: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CommandResponse:
    """Parsed response to a text command: {code, LL?: {value, control?, Code?}}."""

    code: Optional[int]
    value: Any = None
    control: Optional[str] = None
    raw: Mapping[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.code == 200

    @classmethod
    def from_json(cls, data: Any) -> "CommandResponse":
        if not isinstance(data, Mapping):
            return cls(code=None, raw={})
        ll = data.get("LL")
        if not isinstance(ll, Mapping):
            ll = {}
        code = data.get("code")
        if code is None:
            code = ll.get("Code", ll.get("code"))
        return cls(
            code=_coerce_code(code),
            value=ll.get("value"),
            control=ll.get("control"),
            raw=data,
        )


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Result of a raw HTTP fetch against the Miniserver."""

    status: int
    body: bytes
    content_type: Optional[str] = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def text(self, encoding: str = "utf-8") -> str:
        return self.body.decode(encoding, errors="replace")


class StatisticsPeriod(str, Enum):
    LAST_HOUR = "lastHour"
    LAST_24_HOURS = "last24hours"
    LAST_WEEK = "lastWeek"
    LAST_MONTH = "lastMonth"
    LAST_YEAR = "lastYear"


class AggregationInterval(str, Enum):
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    MONTH = "month"


@dataclass(frozen=True, slots=True)
class TimeRange:
    from_timestamp: int
    to_timestamp: int
    aggregation_interval: AggregationInterval


@dataclass(frozen=True, slots=True)
class StateValue:
    """Last known value of one state id. Keyed by state id, not device id."""

    state_id: str
    value: Any
    last_updated: datetime


def _coerce_code(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None
