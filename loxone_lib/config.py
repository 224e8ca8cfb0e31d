"""
loxone_lib/config.py

Configuration validation and environment loading.

validate_config() is the single gate every LoxoneConfig passes through before a
session is built; it rejects secure protocol variants as not implemented.
"""

from __future__ import annotations

import os
from dataclasses import asdict
from typing import Any, Mapping, Optional

import voluptuous as vol

from .errors import LoxoneConfigError, LoxoneProtocolNotSupportedError
from .types import LoxoneConfig

CONF_HOST = "host"
CONF_USERNAME = "username"
CONF_PASSWORD = "password"
CONF_PORT = "port"
CONF_PROTOCOL = "protocol"
CONF_WS_PROTOCOL = "ws_protocol"
CONF_SERIAL_NUMBER = "serial_number"

DEFAULT_PORT = 80

ENV_VARS = {
    CONF_HOST: "LOXONE_HOST",
    CONF_USERNAME: "LOXONE_USERNAME",
    CONF_PASSWORD: "LOXONE_PASSWORD",
    CONF_PORT: "LOXONE_PORT",
    CONF_PROTOCOL: "LOXONE_PROTOCOL",
    CONF_WS_PROTOCOL: "LOXONE_WS_PROTOCOL",
    CONF_SERIAL_NUMBER: "LOXONE_SERIAL_NUMBER",
}

_NON_EMPTY = vol.All(str, vol.Strip, vol.Length(min=1))
_POSITIVE = vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False))
_COUNT = vol.All(vol.Coerce(int), vol.Range(min=1))

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): _NON_EMPTY,
        vol.Required(CONF_USERNAME): _NON_EMPTY,
        vol.Required(CONF_PASSWORD): vol.All(str, vol.Length(min=1)),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(vol.Coerce(int), vol.Range(min=1, max=65535)),
        vol.Optional(CONF_PROTOCOL, default="http"): vol.All(vol.Lower, vol.In(["http", "https"])),
        vol.Optional(CONF_WS_PROTOCOL, default="ws"): vol.All(vol.Lower, vol.In(["ws", "wss"])),
        vol.Optional(CONF_SERIAL_NUMBER, default=None): vol.Any(None, str),
        vol.Optional("auth_timeout_s"): _POSITIVE,
        vol.Optional("graph_load_attempts"): _COUNT,
        vol.Optional("graph_retry_base_s"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("max_reconnect_attempts"): vol.All(vol.Coerce(int), vol.Range(min=0)),
        vol.Optional("reconnect_base_s"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("reconnect_max_s"): vol.All(vol.Coerce(float), vol.Range(min=0)),
        vol.Optional("http_timeout_s"): _POSITIVE,
    }
)


def validate_config(config: LoxoneConfig | Mapping[str, Any]) -> LoxoneConfig:
    """
    Validate and normalize a configuration.

    Raises LoxoneConfigError for missing/invalid fields and
    LoxoneProtocolNotSupportedError for https/wss.
    """
    if isinstance(config, LoxoneConfig):
        raw: dict[str, Any] = asdict(config)
    elif isinstance(config, Mapping):
        raw = {key: value for key, value in config.items() if value is not None or key == CONF_SERIAL_NUMBER}
    else:
        raise LoxoneConfigError(f"config must be a LoxoneConfig or mapping (got {type(config).__name__})")

    for key in (CONF_HOST, CONF_USERNAME, CONF_PASSWORD):
        if not raw.get(key):
            raise LoxoneConfigError("Miniserver host, username and password must be provided")

    try:
        data = CONFIG_SCHEMA(raw)
    except vol.Invalid as err:
        raise LoxoneConfigError(f"Invalid configuration: {err}") from err

    if data[CONF_PROTOCOL] == "https" or data[CONF_WS_PROTOCOL] == "wss":
        raise LoxoneProtocolNotSupportedError("HTTPS/WSS protocol is not supported")

    return LoxoneConfig.from_mapping(data)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> LoxoneConfig:
    """Build a validated LoxoneConfig from LOXONE_* environment variables."""
    env = os.environ if environ is None else environ
    raw = {key: env[var] for key, var in ENV_VARS.items() if env.get(var)}
    return validate_config(raw)
