"""Redaction helpers for logging and diagnostics output."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

REDACTED = "***"

_SECRET_MARKERS = ("password", "passwd", "token", "secret", "key", "authorization", "credential", "access_code")


def _is_secret_key(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    lowered = key.lower()
    return any(marker in lowered for marker in _SECRET_MARKERS)


def redact_for_diagnostics(obj: Any) -> Any:
    """
    Return a JSON-friendly copy of obj with secret-looking values replaced.

    Mappings and sequences are walked recursively; other values pass through.
    """
    if isinstance(obj, Mapping):
        return {
            key: (REDACTED if _is_secret_key(key) and value is not None else redact_for_diagnostics(value))
            for key, value in obj.items()
        }
    if isinstance(obj, (str, bytes, bytearray)):
        return obj
    if isinstance(obj, Sequence):
        return [redact_for_diagnostics(item) for item in obj]
    return obj
