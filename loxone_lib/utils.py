"""Value formatting and retry helpers shared across loxone_lib."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Awaitable, Callable, Optional, TypeVar

from .types import ValueType

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]

_PRINTF_SPEC = re.compile(r"%[-+0-9.]*[diouxXeEfFgGaAcspn%](.*)")


async def retry(
    fn: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base_delay_s: float = 1.0,
    sleep: SleepFn = asyncio.sleep,
) -> T:
    """
    Await fn() up to `attempts` times with exponential backoff.

    The delay before retry n (0-based) is base_delay_s * 2**n. The last error is
    re-raised once attempts are exhausted.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1 (got {attempts!r})")
    attempt = 0
    while True:
        try:
            return await fn()
        except Exception as err:  # noqa: BLE001
            attempt += 1
            if attempt >= attempts:
                raise
            delay = base_delay_s * (2 ** (attempt - 1))
            logger.debug("Attempt %s/%s failed (%s); retrying in %ss", attempt, attempts, err, delay)
            await sleep(delay)


def value_type_of(value: Any, default: ValueType = ValueType.STRING) -> ValueType:
    if value is None:
        return default
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueType.NUMBER
    if isinstance(value, str):
        return ValueType.STRING
    return ValueType.OBJECT


def format_value(fmt: Optional[str], value: Any) -> str:
    """
    Render value with a Miniserver format string.

    Supports "<v>" templates ("<v>°C") and printf-style formats ("%.1f°C",
    "%.0f%%"). Falls back to value followed by the format when it cannot be
    applied.
    """
    if not fmt or value is None:
        return "" if value is None else str(value)
    if "<v>" in fmt:
        return fmt.replace("<v>", str(value), 1)
    try:
        return fmt % (value,)
    except (TypeError, ValueError):
        return f"{value}{fmt}"


def extract_unit(fmt: Optional[str]) -> Optional[str]:
    """Return the unit suffix of a format string ("%.1f°C" -> "°C")."""
    if not fmt:
        return None
    if "<v>" in fmt:
        return fmt.replace("<v>", "").strip() or None
    match = _PRINTF_SPEC.search(fmt)
    if match and match.group(1):
        return match.group(1).replace("%%", "%").strip() or None
    return None
