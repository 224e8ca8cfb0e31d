from .base import (
    COMMAND_PREFIX,
    CentralDevice,
    Device,
    default_should_filter,
    is_important_state,
    wire_value,
)
from .generic import GenericDevice
from .registry import (
    DEVICE_CLASSES,
    DEVICE_TYPES,
    KNOWN_TYPE_TAGS,
    TYPE_ALIASES,
    create_device,
    device_class_for,
    is_supported,
    resolve_type_tag,
)

__all__ = [
    "COMMAND_PREFIX",
    "CentralDevice",
    "DEVICE_CLASSES",
    "DEVICE_TYPES",
    "Device",
    "GenericDevice",
    "KNOWN_TYPE_TAGS",
    "TYPE_ALIASES",
    "create_device",
    "default_should_filter",
    "device_class_for",
    "is_important_state",
    "is_supported",
    "resolve_type_tag",
    "wire_value",
]
