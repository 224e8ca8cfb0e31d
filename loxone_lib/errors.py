"""
loxone_lib/errors.py

Typed failures surfaced by the public API.

Callers (tool/transport layers) are expected to catch LoxoneError and translate
the concrete subclass into their own error envelope.
"""

from __future__ import annotations

from typing import Optional


class LoxoneError(Exception):
    """Base exception for all loxone_lib failures."""


# -------------------------
# Configuration
# -------------------------

class LoxoneConfigError(LoxoneError, ValueError):
    """Raised when the connection configuration is missing or invalid."""


class LoxoneProtocolNotSupportedError(LoxoneConfigError, NotImplementedError):
    """Raised for secure protocol variants (https/wss) that are not implemented."""


# -------------------------
# Connection lifecycle
# -------------------------

class LoxoneConnectionError(LoxoneError, ConnectionError):
    """Raised when the Miniserver connection cannot be established or is lost."""


class LoxoneAuthTimeoutError(LoxoneConnectionError, TimeoutError):
    """Raised when no authentication confirmation arrives in time."""


class LoxoneGraphLoadError(LoxoneError):
    """Raised when the device graph could not be fetched after all retries."""


# -------------------------
# Readiness
# -------------------------

class LoxoneNotReadyError(LoxoneError):
    """Raised when an operation runs before the session or graph is ready."""


class LoxoneNotConnectedError(LoxoneNotReadyError):
    """Raised when an operation requires a CONNECTED session."""


# -------------------------
# Commands
# -------------------------

class LoxoneCommandError(LoxoneError):
    """Base exception for command dispatch failures. Never retried."""


class LoxoneInvalidCommandError(LoxoneCommandError, ValueError):
    """Raised when a device kind does not accept a command (or its value)."""

    def __init__(self, kind: str, command: str, detail: Optional[str] = None) -> None:
        self.kind = kind
        self.command = command
        self.detail = detail
        message = f"Invalid command {command!r} for {kind}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class LoxoneNotFoundError(LoxoneCommandError, LookupError):
    """Raised when a device id is not present in the loaded graph."""

    def __init__(self, device_id: str) -> None:
        self.device_id = device_id
        super().__init__(f"Device {device_id} not found")


class LoxoneInvalidArgument(LoxoneError, ValueError):
    """Raised when tool arguments fail schema validation."""
