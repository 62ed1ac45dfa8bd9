"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

POLLUTANT_KEYS = (
    "AQI",
    "O3",
    "CO",
    "SO2",
    "NO",
    "NO2",
    "NOX",
    "PM10",
    "PM25",
    "WS",
    "WD",
    "Temp",
    "RH",
    "BP",
    "Rain",
    "SR",
)

WIND_DIRECTION_KEY = "WD"


class DirectionMode(str, Enum):
    """Whether wind direction is reported as the source or the heading."""

    from_ = "from"
    to = "to"

    @classmethod
    def parse(cls, value: "DirectionMode | str") -> "DirectionMode":
        if isinstance(value, cls):
            return value
        candidate = str(value).strip().lower()
        for member in cls:
            if member.value == candidate:
                return member
        raise ValueError(f"Unknown direction mode {value!r}; expected 'from' or 'to'.")


@dataclass(slots=True)
class Reading:
    """A single multi-pollutant sample from one station.

    ``values`` holds the raw wire values untouched; callers route them through
    :func:`services.sanitizer.sanitize` before doing arithmetic.
    """

    timestamp: Optional[datetime]
    values: Dict[str, Any] = field(default_factory=dict)
    status_by_key: Dict[str, str] = field(default_factory=dict)
    dominant_pollutant: Optional[str] = None

    @property
    def is_timed(self) -> bool:
        return self.timestamp is not None

    def raw(self, key: str) -> Any:
        return self.values.get(key)

    def status(self, key: str) -> Optional[str]:
        return self.status_by_key.get(key)
