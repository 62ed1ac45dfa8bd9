from __future__ import annotations

import math
from datetime import datetime, timedelta

import pytest

from models.records import Reading
from services.histogram import HistogramAggregator


def _series(*values, pollutant: str = "PM25"):
    start = datetime(2024, 2, 1)
    return [
        Reading(timestamp=start + timedelta(hours=index), values={pollutant: value})
        for index, value in enumerate(values)
    ]


def test_shared_edges_and_top_value_lands_in_last_bin() -> None:
    series = {
        "a": _series(0, 5, 10),
        "b": _series(10, "N/A", "-9999.0000000"),
    }

    result = HistogramAggregator().aggregate(series, "PM25", bin_count=2)

    assert result.edges == [0.0, 5.0, 10.0]
    assert result.per_station_counts == {"a": [1, 2], "b": [0, 1]}
    assert result.bin_labels == ["0.00 – 5.00", "5.00 – 10.00"]


def test_counts_sum_to_valid_values_per_station() -> None:
    series = {
        "north": _series(1.5, 2.25, 99, None, "Invalid", 40),
        "south": _series(17, 18, 19),
    }

    result = HistogramAggregator().aggregate(series, "PM25", bin_count=7)

    assert result.bin_count == 7
    assert len(result.edges) == 8
    assert sum(result.per_station_counts["north"]) == 4
    assert sum(result.per_station_counts["south"]) == 3
    assert result.per_station_counts["north"][-1] == 1


def test_degenerate_range_widens_upper_edge() -> None:
    result = HistogramAggregator().aggregate({"only": _series(7, 7)}, "PM25", bin_count=2)

    assert result.edges == [7.0, 7.5, 8.0]
    assert result.per_station_counts == {"only": [2, 0]}


def test_default_bin_count_applies() -> None:
    result = HistogramAggregator(default_bins=5).aggregate({"a": _series(1, 2, 3)}, "PM25")

    assert result.bin_count == 5


def test_no_valid_values_yields_empty_result() -> None:
    series = {"a": _series("N/A", None), "b": []}

    result = HistogramAggregator().aggregate(series, "PM25", bin_count=4)

    assert result.edges == []
    assert result.per_station_counts == {}
    assert result.table().is_empty


def test_untimed_readings_are_ignored() -> None:
    series = {"a": [Reading(timestamp=None, values={"PM25": 500})] + _series(1, 2)}

    result = HistogramAggregator().aggregate(series, "PM25", bin_count=1)

    assert result.edges == [1.0, 2.0]
    assert result.per_station_counts["a"] == [2]


def test_histogram_table_uses_station_labels() -> None:
    result = HistogramAggregator().aggregate({"a": _series(0, 10)}, "PM25", bin_count=2)

    table = result.table({"a": "Alpha Station"})

    assert table.headers == ["Bin", "Alpha Station"]
    assert table.rows == [["0.00 – 5.00", "1"], ["5.00 – 10.00", "1"]]


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (1e17, [1, 0, 0, 0, 0]),
        (-1e17, [1, 0, 0, 0, 0]),
        (-1.7976931348623157e308, [1, 0, 0, 0, 0]),
        # No room above the largest float, so the range widens downwards.
        (1.7976931348623157e308, [0, 0, 0, 0, 1]),
    ],
)
def test_degenerate_large_value_is_binned(value: float, expected: list) -> None:
    result = HistogramAggregator().aggregate({"a": _series(value)}, "PM25", bin_count=5)

    assert result.per_station_counts["a"] == expected
    assert all(math.isfinite(edge) for edge in result.edges)
    assert result.edges == sorted(result.edges)
    assert result.edges[0] < result.edges[-1]


def test_range_spanning_the_float_limits_keeps_finite_edges() -> None:
    series = {"a": _series(-1e308, 0, 1e308)}

    result = HistogramAggregator().aggregate(series, "PM25", bin_count=4)

    assert all(math.isfinite(edge) for edge in result.edges)
    assert result.edges[0] == -1e308
    assert result.edges[-1] == 1e308
    assert result.per_station_counts["a"] == [1, 0, 1, 1]
