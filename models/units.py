"""Measurement units and display labels per pollutant key."""

from __future__ import annotations

from typing import Optional

UNIT_MAP = {
    "AQI": "AQI",
    "O3": "µg/m³",
    "CO": "mg/m³",
    "SO2": "µg/m³",
    "NO": "µg/m³",
    "NO2": "µg/m³",
    "NOX": "µg/m³",
    "PM10": "µg/m³",
    "PM25": "µg/m³",
    "WS": "m/s",
    "WD": "Deg",
    "Temp": "°C",
    "RH": "%",
    "BP": "hPa",
    "Rain": "mm",
    "SR": "W/m²",
}

_DISPLAY_NAMES = {"PM25": "PM2.5"}


def display_name_for_key(key: str) -> str:
    return _DISPLAY_NAMES.get(key, key)


def normalize_unit_for_export(unit: Optional[str]) -> Optional[str]:
    if not unit:
        return unit
    return unit.replace("µg/m³", "µg/m3").replace("W/m²", "W/m2")


def label_with_unit(key: str, display_name: Optional[str] = None, export: bool = False) -> str:
    """Return ``"PM2.5 (µg/m³)"`` style labels; AQI never carries a unit suffix."""
    name = display_name or display_name_for_key(key)
    unit = UNIT_MAP.get(key)
    if export:
        name = name.replace("µg/m³", "µg/m3")
        unit = normalize_unit_for_export(unit)
    if unit and unit != "AQI":
        return f"{name} ({unit})"
    return name
