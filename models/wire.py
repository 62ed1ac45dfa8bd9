"""Upstream sensor API row format."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Iterable, List, Mapping, Optional

from models.records import POLLUTANT_KEYS, Reading

TIMESTAMP_FIELD = "Date_Time"
DOMINANT_FIELD = "Dominant_Pollutant"
STATUS_PREFIX = "Status_"

# Device fault code the upstream API writes in place of a measurement.
FAULT_SENTINEL = "-9999.0000000"
FAULT_SENTINEL_VALUE = -9999.0

ERROR_STRINGS = frozenset({"Incomplete", "N/A", "Invalid"})
VALID_STATUS = "Valid"


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-like station-local timestamp, returning ``None`` when unusable."""
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    candidate = value.strip()
    if not candidate:
        return None
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"

    try:
        return datetime.fromisoformat(candidate)
    except ValueError:
        return None


def parse_reading(row: Mapping[str, Any]) -> Reading:
    values = {key: row[key] for key in POLLUTANT_KEYS if key in row}
    statuses: dict[str, str] = {}
    for key in POLLUTANT_KEYS:
        status = row.get(f"{STATUS_PREFIX}{key}")
        if isinstance(status, str) and status.strip():
            statuses[key] = status.strip()

    dominant = row.get(DOMINANT_FIELD)
    return Reading(
        timestamp=parse_timestamp(row.get(TIMESTAMP_FIELD)),
        values=values,
        status_by_key=statuses,
        dominant_pollutant=dominant if isinstance(dominant, str) and dominant else None,
    )


def parse_rows(rows: Iterable[Any]) -> List[Reading]:
    """Convert upstream rows, silently ignoring entries that are not objects."""
    return [parse_reading(row) for row in rows if isinstance(row, Mapping)]
