"""Unit tests for raw value sanitisation."""

from __future__ import annotations

import math
from datetime import datetime

import pytest

from models.records import Reading
from models.wire import parse_reading, parse_timestamp
from services.sanitizer import is_fault_status, reading_value, sanitize


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (12, 12.0),
        (12.5, 12.5),
        (0, 0.0),
        ("42", 42.0),
        (" 3.25 ", 3.25),
        ("-4", -4.0),
        ("1e2", 100.0),
    ],
)
def test_sanitize_accepts_finite_numbers(raw, expected) -> None:
    assert sanitize(raw) == expected


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "Incomplete",
        "N/A",
        "Invalid",
        "-9999.0000000",
        -9999.0,
        "",
        "   ",
        "abc",
        "12 µg",
        "nan",
        "inf",
        float("nan"),
        float("-inf"),
        True,
        [1, 2],
        {"value": 1},
    ],
)
def test_sanitize_rejects_unusable_values(raw) -> None:
    assert sanitize(raw) is None


def test_sanitize_never_raises_and_returns_finite_or_none() -> None:
    samples = [None, 1, "1", "x", "Invalid", "-9999.0000000", object(), b"1", 1e308 * 10]
    for raw in samples:
        result = sanitize(raw)
        assert result is None or math.isfinite(result)


def test_zero_is_a_reading_not_missing_data() -> None:
    assert sanitize("0") == 0.0
    assert sanitize(0.0) == 0.0


def test_status_suppresses_value_only_when_fault() -> None:
    assert sanitize("10", status="Valid") == 10.0
    assert sanitize("10", status=None) == 10.0
    assert sanitize("10", status="") == 10.0
    assert sanitize("10", status="Calibration") is None


def test_is_fault_status() -> None:
    assert is_fault_status("Maintenance")
    assert not is_fault_status("Valid")
    assert not is_fault_status(None)
    assert not is_fault_status("")


def test_reading_value_status_aware() -> None:
    reading = Reading(
        timestamp=datetime(2024, 1, 1),
        values={"PM25": "18"},
        status_by_key={"PM25": "PowerFail"},
    )

    assert reading_value(reading, "PM25") == 18.0
    assert reading_value(reading, "PM25", status_aware=True) is None
    assert reading_value(reading, "NO2") is None


def test_parse_reading_maps_wire_fields() -> None:
    reading = parse_reading(
        {
            "Date_Time": "2024-05-06 07:00:00",
            "AQI": 88,
            "PM25": "31.2",
            "Status_PM25": "Valid",
            "Status_NO2": " ",
            "Dominant_Pollutant": "PM25",
            "Unrelated": 1,
        }
    )

    assert reading.timestamp == datetime(2024, 5, 6, 7, 0)
    assert reading.values == {"AQI": 88, "PM25": "31.2"}
    assert reading.status_by_key == {"PM25": "Valid"}
    assert reading.dominant_pollutant == "PM25"


@pytest.mark.parametrize("raw", [None, "", "yesterday", "2024-13-01 00:00:00", 1700000000])
def test_parse_timestamp_rejects_unusable_values(raw) -> None:
    assert parse_timestamp(raw) is None


def test_parse_timestamp_accepts_iso_variants() -> None:
    assert parse_timestamp("2024-01-02T03:04:05") == datetime(2024, 1, 2, 3, 4, 5)
    assert parse_timestamp("2024-01-02 03:04:05") == datetime(2024, 1, 2, 3, 4, 5)
    parsed = parse_timestamp("2024-01-02T03:04:05Z")
    assert parsed is not None and parsed.hour == 3 and parsed.tzinfo is not None
