"""Classification of raw wire values into usable numbers or absent data."""

from __future__ import annotations

import math
from typing import Any, Optional

from models.records import Reading
from models.wire import ERROR_STRINGS, FAULT_SENTINEL, FAULT_SENTINEL_VALUE, VALID_STATUS


def is_fault_status(status: Optional[str]) -> bool:
    """A non-empty status other than ``"Valid"`` is a device fault code."""
    return bool(status) and status != VALID_STATUS


def sanitize(raw: Any, status: Optional[str] = None) -> Optional[float]:
    """Return a finite float for ``raw`` or ``None`` when it is not usable data.

    Pass ``status`` only where validity flags should suppress values (tabular
    exports); aggregators call this without it.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if is_fault_status(status):
        return None

    if isinstance(raw, str):
        candidate = raw.strip()
        if not candidate or candidate in ERROR_STRINGS or candidate == FAULT_SENTINEL:
            return None
        try:
            value = float(candidate)
        except ValueError:
            return None
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        return None

    if not math.isfinite(value) or value == FAULT_SENTINEL_VALUE:
        return None
    return value


def reading_value(reading: Reading, key: str, status_aware: bool = False) -> Optional[float]:
    status = reading.status(key) if status_aware else None
    return sanitize(reading.raw(key), status)
