"""Two-pollutant views of one station: shared time axis and value scatter."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Tuple

from models.records import Reading
from models.units import display_name_for_key, label_with_unit
from services.parallel import Point
from services.sanitizer import reading_value
from services.tables import Table, format_number

logger = logging.getLogger(__name__)

_TIME_FORMAT = "%Y-%m-%d %H:%M"


@dataclass(frozen=True)
class PairPoint:
    x: float
    y: float


@dataclass
class DualAxisResult:
    """Two independent series drawn against their own value axis."""

    primary: str
    secondary: str
    primary_series: List[Point] = field(default_factory=list)
    secondary_series: List[Point] = field(default_factory=list)

    def table(self) -> Table:
        by_time: Dict[datetime, List[Optional[float]]] = {}
        for slot, series in enumerate((self.primary_series, self.secondary_series)):
            for point in series:
                by_time.setdefault(point.x, [None, None])[slot] = point.y
        if not by_time:
            return Table()
        headers = [
            "Time",
            label_with_unit(self.primary, export=True),
            label_with_unit(self.secondary, export=True),
        ]
        rows = [
            [stamp.strftime(_TIME_FORMAT), *(format_number(value) for value in values)]
            for stamp, values in sorted(by_time.items())
        ]
        return Table(headers=headers, rows=rows)


@dataclass
class ScatterResult:
    x_pollutant: str
    y_pollutant: str
    points: List[PairPoint] = field(default_factory=list)

    @property
    def label(self) -> str:
        return f"{display_name_for_key(self.x_pollutant)} vs {display_name_for_key(self.y_pollutant)}"

    def table(self) -> Table:
        if not self.points:
            return Table()
        headers = [
            label_with_unit(self.x_pollutant, export=True),
            label_with_unit(self.y_pollutant, export=True),
        ]
        return Table(
            headers=headers,
            rows=[[format_number(point.x), format_number(point.y)] for point in self.points],
        )


class ComparisonAggregator:
    """Pairs two pollutants from the same readings, in input order."""

    def dual_axis(self, readings: Iterable[Reading], primary: str, secondary: str) -> DualAxisResult:
        result = DualAxisResult(primary=primary, secondary=secondary)
        for reading in readings:
            stamp = reading.timestamp
            if stamp is None:
                continue
            first = reading_value(reading, primary)
            second = reading_value(reading, secondary)
            # Each axis drops its own unusable values; the other series keeps the row.
            if first is not None:
                result.primary_series.append(Point(x=stamp, y=first))
            if second is not None:
                result.secondary_series.append(Point(x=stamp, y=second))

        logger.debug(
            "Built dual-axis series",
            extra={
                "pollutant": f"{primary}/{secondary}",
                "row_count": len(result.primary_series) + len(result.secondary_series),
            },
        )
        return result

    def scatter(self, readings: Iterable[Reading], x_pollutant: str, y_pollutant: str) -> ScatterResult:
        """Pair the two values of every reading; a pair with either side unusable is dropped."""
        pairs: List[Tuple[Optional[float], Optional[float]]] = [
            (reading_value(reading, x_pollutant), reading_value(reading, y_pollutant))
            for reading in readings
            if reading.timestamp is not None
        ]
        points = [PairPoint(x=x, y=y) for x, y in pairs if x is not None and y is not None]

        logger.debug(
            "Paired %d of %d readings",
            len(points),
            len(pairs),
            extra={"pollutant": f"{x_pollutant}/{y_pollutant}"},
        )
        return ScatterResult(x_pollutant=x_pollutant, y_pollutant=y_pollutant, points=points)
