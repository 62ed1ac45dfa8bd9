"""Tests for range parsing, table loading and classification."""

from __future__ import annotations

import json

import pytest

from models.categories import (
    AboveRange,
    AtLeastRange,
    BelowRange,
    ClosedRange,
    load_category_tables,
    parse_range,
)
from services.classifier import CategoryClassifier, classify, classify_index


@pytest.fixture(scope="module")
def tables():
    return load_category_tables()


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("0-50", ClosedRange(min=0.0, max=50.0)),
        ("15.1-35 µg/m³", ClosedRange(min=15.1, max=35.0)),
        ("100-200 W/m²", ClosedRange(min=100.0, max=200.0)),
        ("< 10°C", BelowRange(max=10.0)),
        ("> 1200 W/m²", AboveRange(min=1200.0)),
        ("401+", AtLeastRange(min=401.0)),
        ("550.1+ µg/m³", AtLeastRange(min=550.1)),
        ("0 mm", ClosedRange(min=0.0, max=0.0)),
    ],
)
def test_parse_range_shapes(text: str, expected) -> None:
    assert parse_range(text) == expected


@pytest.mark.parametrize("text", ["", "high", "1-2-3", "-"])
def test_parse_range_rejects_malformed_text(text: str) -> None:
    with pytest.raises(ValueError):
        parse_range(text)


def test_default_tables_cover_every_classified_key(tables) -> None:
    expected = {"AQI", "O3", "CO", "SO2", "NO", "NO2", "NOX", "PM10", "PM25", "Temp", "RH", "BP", "Rain", "WS", "WD", "SR"}
    assert set(tables) == expected
    assert [band.name for band in tables["AQI"]][-1] == "Hazardous"
    assert tables["PM25"][1].range_text == "15.1-35 µg/m³"


def test_classify_aqi_in_table_order(tables) -> None:
    aqi = tables["AQI"]

    assert classify(25, aqi).name == "Good"
    assert classify(50, aqi).name == "Good"
    assert classify(100, aqi).name == "Satisfactory"
    assert classify(500, aqi).name == "Hazardous"


def test_classify_falls_back_to_last_band_when_nothing_matches(tables) -> None:
    aqi = tables["AQI"]

    # Below the first band's floor, and inside the gap between 50 and 51.
    assert classify(-5, aqi).name == "Hazardous"
    assert classify(50.5, aqi).name == "Hazardous"


def test_classify_open_ended_shapes(tables) -> None:
    temp = tables["Temp"]

    assert classify(5, temp).name == "Cold"
    assert classify(10, temp).name == "Cool"
    assert classify(40, temp).name == "Very Hot"
    assert classify(0, tables["Rain"]).name == "None"
    assert classify(0.05, tables["Rain"]).name == "Extreme"


def test_classify_without_table_returns_none(tables) -> None:
    assert classify(10, ()) is None
    assert classify(10, None) is None

    classifier = CategoryClassifier(tables)
    assert classifier.classify(10, "Unknown") is None
    assert not classifier.has_table("Unknown")
    assert classifier.classify(10, "PM25").name == "Good"


def test_load_category_tables_from_json(tmp_path) -> None:
    path = tmp_path / "tables.json"
    path.write_text(
        json.dumps(
            {
                "PM25": [
                    {"name": "Low", "color": "#0f0", "range": "0-10"},
                    {"name": "High", "color": "#f00", "range": "10.1+"},
                ]
            }
        ),
        encoding="utf-8",
    )

    tables = load_category_tables(path)

    assert list(tables) == ["PM25"]
    assert classify(12, tables["PM25"]).name == "High"


@pytest.mark.parametrize(
    "payload",
    [
        "not json",
        json.dumps(["PM25"]),
        json.dumps({"PM25": {"name": "Low"}}),
        json.dumps({"PM25": [{"color": "#fff", "range": "0-1"}]}),
        json.dumps({"PM25": [{"name": "Low", "range": "lots"}]}),
    ],
)
def test_load_category_tables_rejects_bad_files(tmp_path, payload: str) -> None:
    path = tmp_path / "tables.json"
    path.write_text(payload, encoding="utf-8")

    with pytest.raises(ValueError):
        load_category_tables(path)


def test_classify_index_reports_band_position(tables) -> None:
    classifier = CategoryClassifier(tables)

    assert classify_index(25, tables["AQI"]) == 0
    assert classify_index(-5, tables["AQI"]) == len(tables["AQI"]) - 1
    assert classify_index(1, ()) is None
    assert classifier.classify_index(60, "PM25") == 2
    assert classifier.classify_index(60, "Unknown") is None
