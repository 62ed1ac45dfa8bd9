"""Severity band tables and their parsed range bounds."""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Tuple, Union

from settings import get_settings

logger = logging.getLogger(__name__)

_NON_NUMERIC = re.compile(r"[^0-9.\-]")


@dataclass(frozen=True)
class ClosedRange:
    kind: ClassVar[str] = "closed"
    min: float
    max: float

    def contains(self, value: float) -> bool:
        return self.min <= value <= self.max


@dataclass(frozen=True)
class BelowRange:
    kind: ClassVar[str] = "lt"
    max: float

    def contains(self, value: float) -> bool:
        return value < self.max


@dataclass(frozen=True)
class AboveRange:
    kind: ClassVar[str] = "gt"
    min: float

    def contains(self, value: float) -> bool:
        return value > self.min


@dataclass(frozen=True)
class AtLeastRange:
    kind: ClassVar[str] = "gte"
    min: float

    def contains(self, value: float) -> bool:
        return value >= self.min


RangeBound = Union[ClosedRange, BelowRange, AboveRange, AtLeastRange]


@dataclass(frozen=True)
class Band:
    """A named severity band. ``color`` is an opaque token for renderers."""

    name: str
    color: str
    range_text: str
    bounds: RangeBound

    def contains(self, value: float) -> bool:
        return self.bounds.contains(value)


CategoryTable = Tuple[Band, ...]
CategoryTables = Dict[str, CategoryTable]


def _parse_number(text: str, source: str) -> float:
    digits = _NON_NUMERIC.sub("", text)
    try:
        return float(digits)
    except ValueError as exc:
        raise ValueError(f"Range {source!r} does not contain a number.") from exc


def parse_range(text: str) -> RangeBound:
    """Parse a display range such as ``"15.1-35 µg/m³"``, ``"< 10°C"`` or ``"401+"``.

    A bare number (``"0 mm"``) becomes a closed range of width zero.
    """
    candidate = text.strip()
    if "-" in candidate and not candidate.startswith(("<", ">")):
        parts = candidate.split("-")
        if len(parts) != 2:
            raise ValueError(f"Range {text!r} is ambiguous.")
        return ClosedRange(
            min=_parse_number(parts[0], text),
            max=_parse_number(parts[1], text),
        )
    if "<" in candidate:
        return BelowRange(max=_parse_number(candidate, text))
    if ">" in candidate:
        return AboveRange(min=_parse_number(candidate, text))
    if "+" in candidate:
        return AtLeastRange(min=_parse_number(candidate, text))
    value = _parse_number(candidate, text)
    return ClosedRange(min=value, max=value)


def build_table(entries: Iterable[Mapping[str, Any]]) -> CategoryTable:
    bands = []
    for entry in entries:
        name = entry.get("name")
        range_text = entry.get("range")
        if not isinstance(name, str) or not name:
            raise ValueError(f"Category entry {dict(entry)!r} is missing a name.")
        if not isinstance(range_text, str):
            raise ValueError(f"Category {name!r} is missing a range.")
        bands.append(
            Band(
                name=name,
                color=str(entry.get("color") or ""),
                range_text=range_text,
                bounds=parse_range(range_text),
            )
        )
    return tuple(bands)


def _severity(unit: str, edges: Iterable[str]) -> list[dict[str, str]]:
    names = (
        ("Good", "#268504"),
        ("Satisfactory", "#42e607"),
        ("Moderate", "#edcd3e"),
        ("Unhealthy for Sensitive Groups", "#d18306"),
        ("Unhealthy", "#e60b0b"),
        ("Very Unhealthy", "#9307de"),
        ("Hazardous", "#910101"),
    )
    suffix = f" {unit}" if unit else ""
    return [
        {"name": name, "color": color, "range": f"{edge}{suffix}"}
        for (name, color), edge in zip(names, edges)
    ]


_NITROGEN = ("0-40", "40.1-80", "80.1-130", "130.1-180", "180.1-380", "380.1-580", "580.1+")

DEFAULT_CATEGORY_DEFINITIONS: Dict[str, list[dict[str, str]]] = {
    "AQI": _severity("", ("0-50", "51-100", "101-150", "151-200", "201-300", "301-400", "401+")),
    "O3": _severity(
        "µg/m³",
        ("0-65", "65.1-130", "130.1-195", "195.1-260", "260.1-450", "450.1-550", "550.1+"),
    ),
    "CO": _severity(
        "mg/m³", ("0-2.5", "2.6-5", "5.1-7.5", "7.6-10", "10.1-25", "25.1-40", "40.1+")
    ),
    "SO2": _severity(
        "µg/m³",
        ("0-60", "60.1-120", "120.1-220", "220.1-320", "320.1-800", "800.1-1600", "1600.1+"),
    ),
    "NO": _severity("µg/m³", _NITROGEN),
    "NO2": _severity("µg/m³", _NITROGEN),
    "NOX": _severity("µg/m³", _NITROGEN),
    "PM10": _severity(
        "µg/m³",
        ("0-75", "75.1-150", "150.1-250", "250.1-350", "350.1-450", "450.1-550", "550.1+"),
    ),
    "PM25": _severity(
        "µg/m³",
        ("0-15", "15.1-35", "35.1-70", "70.1-150", "150.1-250", "250.1-350", "350.1+"),
    ),
    "Temp": [
        {"name": "Cold", "color": "#0066cc", "range": "< 10°C"},
        {"name": "Cool", "color": "#0099ff", "range": "10-20°C"},
        {"name": "Mild", "color": "#00ccff", "range": "20-25°C"},
        {"name": "Warm", "color": "#ffcc00", "range": "25-30°C"},
        {"name": "Hot", "color": "#ff6600", "range": "30-35°C"},
        {"name": "Very Hot", "color": "#cc0000", "range": "> 35°C"},
    ],
    "RH": [
        {"name": "Very Dry", "color": "#cc6600", "range": "< 30%"},
        {"name": "Dry", "color": "#ff9900", "range": "30-50%"},
        {"name": "Moderate", "color": "#ffff00", "range": "50-60%"},
        {"name": "Comfortable", "color": "#00ff00", "range": "60-70%"},
        {"name": "Humid", "color": "#00ccff", "range": "70-80%"},
        {"name": "Very Humid", "color": "#0066cc", "range": "> 80%"},
    ],
    "BP": [
        {"name": "Low", "color": "#cc0000", "range": "< 1000 hPa"},
        {"name": "Below Normal", "color": "#ff6600", "range": "1000-1010 hPa"},
        {"name": "Normal", "color": "#00ff00", "range": "1010-1020 hPa"},
        {"name": "Above Normal", "color": "#0099ff", "range": "1020-1030 hPa"},
        {"name": "High", "color": "#0066cc", "range": "1030-1040 hPa"},
        {"name": "Very High", "color": "#0000cc", "range": "> 1040 hPa"},
    ],
    "Rain": [
        {"name": "None", "color": "#ffffff", "range": "0 mm"},
        {"name": "Light", "color": "#00ccff", "range": "0.1-2.5 mm"},
        {"name": "Moderate", "color": "#0099ff", "range": "2.6-7.5 mm"},
        {"name": "Heavy", "color": "#0066cc", "range": "7.6-15 mm"},
        {"name": "Very Heavy", "color": "#0033cc", "range": "15.1-30 mm"},
        {"name": "Extreme", "color": "#0000cc", "range": "> 30 mm"},
    ],
    "WS": [
        {"name": "Calm", "color": "#00ff00", "range": "0-1 m/s"},
        {"name": "Light", "color": "#ffff00", "range": "1-3 m/s"},
        {"name": "Moderate", "color": "#ffcc00", "range": "3-5 m/s"},
        {"name": "Fresh", "color": "#ff9900", "range": "5-8 m/s"},
        {"name": "Strong", "color": "#ff6600", "range": "8-12 m/s"},
        {"name": "Very Strong", "color": "#cc0000", "range": "> 12 m/s"},
    ],
    "WD": [
        {"name": "N", "color": "#ff0000", "range": "0-22.5°"},
        {"name": "NE", "color": "#ff6600", "range": "22.6-67.5°"},
        {"name": "E", "color": "#ffff00", "range": "67.6-112.5°"},
        {"name": "SE", "color": "#00ff00", "range": "112.6-157.5°"},
        {"name": "S", "color": "#00ccff", "range": "157.6-202.5°"},
        {"name": "SW", "color": "#0066cc", "range": "202.6-247.5°"},
        {"name": "W", "color": "#0000cc", "range": "247.6-292.5°"},
        {"name": "NW", "color": "#6600cc", "range": "292.6-337.5°"},
    ],
    "SR": [
        {"name": "Low", "color": "#00ff00", "range": "0-100 W/m²"},
        {"name": "Moderate", "color": "#ffff00", "range": "100-200 W/m²"},
        {"name": "High", "color": "#ffcc00", "range": "200-400 W/m²"},
        {"name": "Very High", "color": "#ff6600", "range": "400-800 W/m²"},
        {"name": "Extreme", "color": "#ff0000", "range": "800-1200 W/m²"},
        {"name": "Dangerous", "color": "#cc0000", "range": "> 1200 W/m²"},
    ],
}


def build_tables(definitions: Mapping[str, Iterable[Mapping[str, Any]]]) -> CategoryTables:
    return {key: build_table(entries) for key, entries in definitions.items()}


def load_category_tables(path: Optional[Path] = None) -> CategoryTables:
    """Parse the built-in tables, or a JSON file of the same shape when ``path`` is given."""
    if path is None:
        return build_tables(DEFAULT_CATEGORY_DEFINITIONS)

    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ValueError(f"Unable to read category tables from {path}: {exc}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Category tables in {path} must be a JSON object.")
    for key, entries in payload.items():
        if not isinstance(entries, list):
            raise ValueError(f"Category table for {key!r} must be a list.")

    tables = build_tables(payload)
    logger.info("Loaded %d category tables from %s", len(tables), path)
    return tables


@lru_cache
def build_default_tables() -> CategoryTables:
    settings = get_settings()
    path = Path(settings.category_tables_path) if settings.category_tables_path else None
    return load_category_tables(path)
