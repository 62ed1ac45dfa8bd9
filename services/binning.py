"""Compass sector assignment for wind-direction readings.

Sector 0 always covers the wedge that renderers draw centred on North. Bin
assignment is a plain floor-divide of the normalised degree; the half-sector
rotation renderers need to centre that wedge is exposed here as
:func:`display_rotation` so the two never drift apart.
"""

from __future__ import annotations

import math
from typing import List

from models.records import DirectionMode

_LABELS = {
    4: ("N", "E", "S", "W"),
    8: ("N", "NE", "E", "SE", "S", "SW", "W", "NW"),
    16: (
        "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
        "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
    ),
}


def _check_count(sector_count: int) -> None:
    if sector_count < 1:
        raise ValueError(f"Sector count must be positive, got {sector_count}.")


def sector_width(sector_count: int) -> float:
    _check_count(sector_count)
    return 360.0 / sector_count


def sector(degree: float, sector_count: int = 8, mode: DirectionMode | str = DirectionMode.from_) -> int:
    """Return the sector index in ``[0, sector_count)`` for a finite ``degree``."""
    width = sector_width(sector_count)
    if DirectionMode.parse(mode) is DirectionMode.to:
        degree = (degree + 180.0) % 360.0
    normalized = degree % 360.0
    return int(math.floor(normalized / width)) % sector_count


def display_rotation(sector_count: int) -> float:
    """Degrees renderers rotate every wedge by so sector 0 is centred on North."""
    return -sector_width(sector_count) / 2


def sector_span(index: int, sector_count: int) -> tuple[float, float]:
    """Start and end bearing, in degrees clockwise from North, of a drawn wedge."""
    width = sector_width(sector_count)
    start = display_rotation(sector_count) + index * width
    return start, start + width


def sector_labels(sector_count: int) -> List[str]:
    _check_count(sector_count)
    labels = _LABELS.get(sector_count)
    if labels is not None:
        return list(labels)
    width = 360.0 / sector_count
    return [f"{index * width:g}°" for index in range(sector_count)]
