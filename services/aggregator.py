"""Aggregation facade over the rose, histogram, parallel, calendar and comparison engines."""

from __future__ import annotations

from datetime import date
from typing import Iterable, Mapping, Optional, Sequence

from models.categories import CategoryTables
from models.records import DirectionMode, Reading
from services.calendar_grid import CalendarAggregator, CalendarResult
from services.classifier import CategoryClassifier
from services.comparison import ComparisonAggregator, DualAxisResult, ScatterResult
from services.histogram import HistogramAggregator, HistogramResult
from services.parallel import ParallelHourAggregator, ParallelResult
from services.rose import RoseAggregator, RoseResult
from services.tables import Table, build_timeseries_table


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation.

    Holds no state between calls beyond the injected category tables, so the
    same input always yields the same output.
    """

    def __init__(self, tables: CategoryTables, histogram_bins: int = 20) -> None:
        self.classifier = CategoryClassifier(tables)
        self._rose = RoseAggregator(self.classifier)
        self._histogram = HistogramAggregator(default_bins=histogram_bins)
        self._parallel = ParallelHourAggregator()
        self._calendar = CalendarAggregator(self.classifier)
        self._comparison = ComparisonAggregator()

    def rose(
        self,
        readings: Iterable[Reading],
        pollutant: str,
        sector_count: int = 8,
        mode: DirectionMode | str = DirectionMode.from_,
    ) -> RoseResult:
        return self._rose.aggregate(readings, pollutant, sector_count, mode)

    def histogram(
        self,
        station_series: Mapping[str, Sequence[Reading]],
        pollutant: str,
        bin_count: Optional[int] = None,
    ) -> HistogramResult:
        return self._histogram.aggregate(station_series, pollutant, bin_count)

    def parallel(
        self,
        station_series: Mapping[str, Sequence[Reading]],
        pollutant: str,
        hour: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> ParallelResult:
        return self._parallel.aggregate(station_series, pollutant, hour, (start, end))

    def calendar(self, readings: Iterable[Reading], pollutant: str) -> CalendarResult:
        return self._calendar.aggregate(readings, pollutant)

    def dual_axis(self, readings: Iterable[Reading], primary: str, secondary: str) -> DualAxisResult:
        return self._comparison.dual_axis(readings, primary, secondary)

    def scatter(self, readings: Iterable[Reading], x_pollutant: str, y_pollutant: str) -> ScatterResult:
        return self._comparison.scatter(readings, x_pollutant, y_pollutant)

    def timeseries(
        self,
        station_series: Mapping[str, Sequence[Reading]],
        pollutants: Sequence[str],
        labels: Optional[Mapping[str, str]] = None,
    ) -> Table:
        return build_timeseries_table(station_series, pollutants, labels)
