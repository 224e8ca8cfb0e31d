from __future__ import annotations

import dataclasses
from enum import Enum

import loxone_lib
from loxone_lib import (
    CommandResponse,
    DeviceCommand,
    DeviceGraph,
    LoxoneAuthTimeoutError,
    LoxoneConfig,
    LoxoneConnectionError,
    LoxoneError,
    LoxoneInvalidCommandError,
    LoxoneNotConnectedError,
    LoxoneNotFoundError,
    LoxoneNotReadyError,
    LoxoneProtocolNotSupportedError,
    SessionState,
    StateValue,
    ValueType,
)


def test_public_names_resolve() -> None:
    for name in loxone_lib.__all__:
        assert hasattr(loxone_lib, name), name


def test_public_types_are_dataclasses_or_enums() -> None:
    assert dataclasses.is_dataclass(LoxoneConfig)
    assert dataclasses.is_dataclass(DeviceGraph)
    assert dataclasses.is_dataclass(DeviceCommand)
    assert dataclasses.is_dataclass(StateValue)
    assert issubclass(SessionState, Enum)
    assert issubclass(ValueType, Enum)


def test_error_taxonomy() -> None:
    assert issubclass(LoxoneAuthTimeoutError, LoxoneConnectionError)
    assert issubclass(LoxoneAuthTimeoutError, TimeoutError)
    assert issubclass(LoxoneNotConnectedError, LoxoneNotReadyError)
    assert issubclass(LoxoneProtocolNotSupportedError, NotImplementedError)
    assert issubclass(LoxoneNotFoundError, LookupError)
    assert issubclass(LoxoneInvalidCommandError, ValueError)
    for exc in (LoxoneConnectionError, LoxoneNotReadyError, LoxoneNotFoundError, LoxoneInvalidCommandError):
        assert issubclass(exc, LoxoneError)


def test_command_response_parsing() -> None:
    assert CommandResponse.from_json({"code": 200}).ok is True
    nested = CommandResponse.from_json({"LL": {"control": "jdev/sps/io/x/on", "value": "1", "Code": "200"}})
    assert nested.ok is True
    assert nested.value == "1"
    assert nested.control == "jdev/sps/io/x/on"
    assert CommandResponse.from_json({"LL": {"Code": "500"}}).ok is False
    assert CommandResponse.from_json(None).ok is False
