"""Orchestration of upstream fetches and aggregation for the API layer."""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Dict, Mapping, Optional, Sequence

from models.categories import CategoryTable, build_default_tables
from models.records import DirectionMode
from models.stations import build_default_station_labels
from services.aggregator import Aggregator
from services.calendar_grid import CalendarResult
from services.comparison import DualAxisResult, ScatterResult
from services.histogram import HistogramResult
from services.parallel import ParallelResult
from services.rose import RoseResult
from services.tables import Table
from services.upstream import DAILY_INTERVAL, HOURLY_INTERVAL, ReadingSource, TimeWindow, build_default_source
from settings import get_settings

logger = logging.getLogger(__name__)


class AnalyticsService:
    """Coordinates the reading source and the aggregation engines."""

    def __init__(
        self,
        source: ReadingSource,
        aggregator: Aggregator,
        station_labels: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.source = source
        self.aggregator = aggregator
        self.station_labels: Dict[str, str] = dict(station_labels or {})

    def categories(self, pollutant: str) -> CategoryTable:
        return self.aggregator.classifier.table_for(pollutant)

    def rose(
        self,
        station: str,
        pollutant: str,
        window: TimeWindow,
        sector_count: int = 8,
        mode: DirectionMode | str = DirectionMode.from_,
    ) -> RoseResult:
        readings = self.source.fetch(station, window)
        return self.aggregator.rose(readings, pollutant, sector_count, mode)

    def histogram(
        self,
        stations: Sequence[str],
        pollutant: str,
        window: TimeWindow,
        bin_count: Optional[int] = None,
    ) -> HistogramResult:
        series = self.source.fetch_many(stations, window)
        return self.aggregator.histogram(series, pollutant, bin_count)

    def parallel(
        self,
        stations: Sequence[str],
        pollutant: str,
        hour: int,
        start: datetime,
        end: datetime,
    ) -> ParallelResult:
        window = TimeWindow.periodic(start, end, HOURLY_INTERVAL)
        series = self.source.fetch_many(stations, window)
        return self.aggregator.parallel(series, pollutant, hour, start.date(), end.date())

    def calendar(self, station: str, pollutant: str, start: datetime, end: datetime) -> CalendarResult:
        window = TimeWindow.periodic(start, end, DAILY_INTERVAL)
        readings = self.source.fetch(station, window)
        return self.aggregator.calendar(readings, pollutant)

    def dual_axis(self, station: str, primary: str, secondary: str, window: TimeWindow) -> DualAxisResult:
        readings = self.source.fetch(station, window)
        return self.aggregator.dual_axis(readings, primary, secondary)

    def scatter(self, station: str, x_pollutant: str, y_pollutant: str, window: TimeWindow) -> ScatterResult:
        readings = self.source.fetch(station, window)
        return self.aggregator.scatter(readings, x_pollutant, y_pollutant)

    def timeseries(
        self,
        stations: Sequence[str],
        pollutants: Sequence[str],
        window: TimeWindow,
    ) -> Table:
        series = self.source.fetch_many(stations, window)
        return self.aggregator.timeseries(series, pollutants, self.station_labels)

    def shutdown(self) -> None:
        """Release the HTTP client and fetch pool during application shutdown."""
        self.source.close()


@lru_cache
def build_default_service() -> AnalyticsService:
    """Factory that wires the service from settings."""
    settings = get_settings()
    aggregator = Aggregator(build_default_tables(), histogram_bins=settings.histogram_bins)
    return AnalyticsService(
        source=build_default_source(),
        aggregator=aggregator,
        station_labels=build_default_station_labels(),
    )
