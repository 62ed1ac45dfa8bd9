"""Same-clock-hour comparison across days and stations."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from models.records import Reading
from services.sanitizer import reading_value
from services.tables import Table, format_number, station_label

logger = logging.getLogger(__name__)

DateRange = Tuple[Optional[date], Optional[date]]


@dataclass(frozen=True)
class Point:
    x: datetime
    y: float


@dataclass
class ParallelResult:
    pollutant: str
    hour: int
    stations: List[str] = field(default_factory=list)
    series: Dict[str, List[Point]] = field(default_factory=dict)
    values_by_date: Dict[date, Dict[str, float]] = field(default_factory=dict)

    @property
    def x_bounds(self) -> Optional[Tuple[datetime, datetime]]:
        stamps = [point.x for points in self.series.values() for point in points]
        if not stamps:
            return None
        return min(stamps), max(stamps)

    def table(self, labels: Optional[Mapping[str, str]] = None) -> Table:
        if not self.stations:
            return Table()
        headers = ["Date", *(station_label(station, labels) for station in self.stations)]
        rows = []
        for day in sorted(self.values_by_date):
            cells = self.values_by_date[day]
            rows.append(
                [day.isoformat(), *(format_number(cells.get(station)) for station in self.stations)]
            )
        return Table(headers=headers, rows=rows)


def _as_date(value: date | datetime | None) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    return value


class ParallelHourAggregator:
    """Keeps only readings taken at one clock hour, day after day."""

    def aggregate(
        self,
        station_series: Mapping[str, Sequence[Reading]],
        pollutant: str,
        hour: int,
        date_range: Optional[DateRange] = None,
    ) -> ParallelResult:
        target_hour = min(max(int(hour), 0), 23)
        start, end = (None, None) if date_range is None else date_range
        start_day = _as_date(start)
        end_day = _as_date(end)

        result = ParallelResult(pollutant=pollutant, hour=target_hour, stations=list(station_series))
        for station, readings in station_series.items():
            points: List[Point] = []
            for reading in readings:
                stamp = reading.timestamp
                if stamp is None or stamp.hour != target_hour:
                    continue
                value = reading_value(reading, pollutant)
                if value is None:
                    continue
                day = stamp.date()
                if start_day is not None and day < start_day:
                    continue
                if end_day is not None and day > end_day:
                    continue
                # Station-local wall clock, so series from different offsets line up.
                at_hour = datetime(day.year, day.month, day.day, target_hour)
                points.append(Point(x=at_hour, y=value))
                result.values_by_date.setdefault(day, {})[station] = value
            if points:
                result.series[station] = sorted(points, key=lambda point: point.x)

        logger.debug(
            "Collected %d stations at hour %02d",
            len(result.series),
            target_hour,
            extra={"pollutant": pollutant, "row_count": len(result.values_by_date)},
        )
        return result
