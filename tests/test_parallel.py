from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

from models.records import Reading
from services.parallel import ParallelHourAggregator, Point


def _hourly(start: datetime, values, pollutant: str = "NO2"):
    return [
        Reading(timestamp=start + timedelta(hours=index), values={pollutant: value})
        for index, value in enumerate(values)
    ]


def test_keeps_only_target_hour_per_station() -> None:
    # Two days of hourly data; value encodes day * 100 + hour.
    values = [day * 100 + hour for day in range(2) for hour in range(24)]
    series = {"a": _hourly(datetime(2024, 4, 1), values)}

    result = ParallelHourAggregator().aggregate(series, "NO2", hour=12)

    assert result.hour == 12
    assert result.series["a"] == [
        Point(x=datetime(2024, 4, 1, 12), y=12.0),
        Point(x=datetime(2024, 4, 2, 12), y=112.0),
    ]
    assert result.values_by_date == {
        date(2024, 4, 1): {"a": 12.0},
        date(2024, 4, 2): {"a": 112.0},
    }


def test_invalid_values_and_untimed_readings_are_dropped() -> None:
    readings = [
        Reading(timestamp=datetime(2024, 4, 1, 9), values={"NO2": "N/A"}),
        Reading(timestamp=datetime(2024, 4, 2, 9), values={"NO2": 14}),
        Reading(timestamp=None, values={"NO2": 99}),
    ]

    result = ParallelHourAggregator().aggregate({"a": readings, "b": []}, "NO2", hour=9)

    assert result.series == {"a": [Point(x=datetime(2024, 4, 2, 9), y=14.0)]}
    assert result.stations == ["a", "b"]


def test_hour_is_clamped_into_clock_range() -> None:
    readings = [Reading(timestamp=datetime(2024, 4, 1, 23), values={"NO2": 5})]

    assert ParallelHourAggregator().aggregate({"a": readings}, "NO2", hour=30).hour == 23
    assert ParallelHourAggregator().aggregate({"a": readings}, "NO2", hour=-4).hour == 0


def test_date_range_filters_by_calendar_day() -> None:
    values = [7] * (24 * 4)
    series = {"a": _hourly(datetime(2024, 4, 1), values)}

    result = ParallelHourAggregator().aggregate(
        series,
        "NO2",
        hour=6,
        date_range=(datetime(2024, 4, 2, 18), date(2024, 4, 3)),
    )

    assert [point.x.date() for point in result.series["a"]] == [date(2024, 4, 2), date(2024, 4, 3)]


def test_offset_stations_share_the_wall_clock_axis() -> None:
    plus_three = timezone(timedelta(hours=3))
    series = {
        "a": [Reading(timestamp=datetime(2024, 4, 1, 12, tzinfo=plus_three), values={"NO2": 1})],
        "b": [Reading(timestamp=datetime(2024, 4, 1, 12), values={"NO2": 2})],
    }

    result = ParallelHourAggregator().aggregate(series, "NO2", hour=12)

    assert result.series["a"][0].x == result.series["b"][0].x
    assert result.x_bounds == (datetime(2024, 4, 1, 12), datetime(2024, 4, 1, 12))


def test_table_leaves_missing_cells_blank() -> None:
    series = {
        "a": [
            Reading(timestamp=datetime(2024, 4, 1, 12), values={"NO2": 12.0}),
            Reading(timestamp=datetime(2024, 4, 2, 12), values={"NO2": 13.5}),
        ],
        "b": [Reading(timestamp=datetime(2024, 4, 2, 12), values={"NO2": 40})],
    }

    table = ParallelHourAggregator().aggregate(series, "NO2", hour=12).table({"b": "Bravo"})

    assert table.headers == ["Date", "a", "Bravo"]
    assert table.rows == [["2024-04-01", "12", ""], ["2024-04-02", "13.5", "40"]]


def test_empty_input() -> None:
    result = ParallelHourAggregator().aggregate({}, "NO2", hour=12)

    assert result.series == {}
    assert result.x_bounds is None
    assert result.table().is_empty
