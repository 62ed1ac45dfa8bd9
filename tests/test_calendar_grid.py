from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from models.categories import load_category_tables
from models.records import Reading
from services.calendar_grid import NO_DATA_CATEGORY, CalendarAggregator, leading_blanks
from services.classifier import CategoryClassifier


@pytest.fixture()
def aggregator() -> CalendarAggregator:
    return CalendarAggregator(CategoryClassifier(load_category_tables()))


@pytest.mark.parametrize(
    ("year", "month", "expected"),
    [(2024, 1, 1), (2024, 2, 4), (2023, 10, 0), (2024, 3, 5), (2024, 6, 6)],
)
def test_leading_blanks_counts_from_sunday(year: int, month: int, expected: int) -> None:
    assert leading_blanks(year, month) == expected


def test_groups_days_by_month_in_order(aggregator: CalendarAggregator) -> None:
    readings = [
        Reading(timestamp=datetime(2024, 2, 1), values={"AQI": 120}),
        Reading(timestamp=datetime(2024, 1, 30), values={"AQI": 40}),
        Reading(timestamp=datetime(2024, 1, 31), values={"AQI": 75}),
    ]

    result = aggregator.aggregate(readings, "AQI")

    assert [month.label for month in result.months] == ["January 2024", "February 2024"]
    assert [month.leading_blanks for month in result.months] == [1, 4]
    january = result.months[0]
    assert [cell.date for cell in january.cells] == [date(2024, 1, 30), date(2024, 1, 31)]
    assert [cell.category for cell in january.cells] == ["Good", "Satisfactory"]
    assert result.months[1].cells[0].category == "Moderate"
    assert result.months[1].cells[0].color == "#edcd3e"


def test_first_reading_of_a_day_wins(aggregator: CalendarAggregator) -> None:
    start = datetime(2024, 5, 4)
    readings = [
        Reading(timestamp=start + timedelta(hours=hour), values={"AQI": 10 + hour})
        for hour in range(3)
    ]

    result = aggregator.aggregate(readings, "AQI")

    assert len(result.cells) == 1
    assert result.cells[0].value == 10.0


def test_day_without_valid_value_is_no_data(aggregator: CalendarAggregator) -> None:
    readings = [
        Reading(timestamp=datetime(2024, 5, 4), values={"AQI": "Incomplete"}),
        Reading(timestamp=datetime(2024, 5, 5), values={"AQI": 30}),
        Reading(timestamp=None, values={"AQI": 30}),
    ]

    cells = aggregator.aggregate(readings, "AQI").cells

    assert len(cells) == 2
    assert cells[0].value is None
    assert cells[0].category == NO_DATA_CATEGORY
    assert cells[0].color is None
    assert cells[1].category == "Good"


def test_pollutant_without_table_has_no_category() -> None:
    aggregator = CalendarAggregator(CategoryClassifier({}))

    cells = aggregator.aggregate([Reading(timestamp=datetime(2024, 5, 4), values={"AQI": 30})], "AQI").cells

    assert cells[0].value == 30.0
    assert cells[0].category is None


def test_calendar_table(aggregator: CalendarAggregator) -> None:
    readings = [
        Reading(timestamp=datetime(2024, 5, 4), values={"PM25": 12}),
        Reading(timestamp=datetime(2024, 5, 5), values={"PM25": "N/A"}),
    ]

    table = aggregator.aggregate(readings, "PM25").table()

    assert table.headers == ["Date", "PM2.5 (µg/m3)"]
    assert table.rows == [["2024-05-04", "12"], ["2024-05-05", ""]]


def test_empty_input(aggregator: CalendarAggregator) -> None:
    result = aggregator.aggregate([], "AQI")

    assert result.months == []
    assert result.table().is_empty
