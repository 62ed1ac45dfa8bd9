"""Month grids of daily values for calendar plots."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, List, Optional

from models.records import Reading
from models.units import label_with_unit
from services.classifier import CategoryClassifier
from services.sanitizer import reading_value
from services.tables import Table, format_number

logger = logging.getLogger(__name__)

NO_DATA_CATEGORY = "No Data"


@dataclass
class CalendarCell:
    date: date
    value: Optional[float]
    category: Optional[str]
    color: Optional[str] = None


@dataclass
class MonthGroup:
    label: str
    year: int
    month: int
    leading_blanks: int
    cells: List[CalendarCell] = field(default_factory=list)


@dataclass
class CalendarResult:
    pollutant: str
    months: List[MonthGroup] = field(default_factory=list)

    @property
    def cells(self) -> List[CalendarCell]:
        return [cell for month in self.months for cell in month.cells]

    def table(self) -> Table:
        cells = self.cells
        if not cells:
            return Table()
        return Table(
            headers=["Date", label_with_unit(self.pollutant, export=True)],
            rows=[[cell.date.isoformat(), format_number(cell.value)] for cell in cells],
        )


def leading_blanks(year: int, month: int) -> int:
    """Weekday of the first of the month with Sunday as 0."""
    return (date(year, month, 1).weekday() + 1) % 7


class CalendarAggregator:
    """Buckets one value per day into calendar months."""

    def __init__(self, classifier: CategoryClassifier) -> None:
        self.classifier = classifier

    def _cell(self, day: date, value: Optional[float], pollutant: str) -> CalendarCell:
        if value is None:
            return CalendarCell(date=day, value=None, category=NO_DATA_CATEGORY)
        band = self.classifier.classify(value, pollutant)
        if band is None:
            return CalendarCell(date=day, value=value, category=None)
        return CalendarCell(date=day, value=value, category=band.name, color=band.color)

    def aggregate(self, readings: Iterable[Reading], pollutant: str) -> CalendarResult:
        first_by_day: Dict[date, Optional[float]] = {}
        for reading in readings:
            if reading.timestamp is None:
                continue
            day = reading.timestamp.date()
            if day not in first_by_day:
                first_by_day[day] = reading_value(reading, pollutant)

        months: Dict[tuple[int, int], MonthGroup] = {}
        for day in sorted(first_by_day):
            key = (day.year, day.month)
            group = months.get(key)
            if group is None:
                group = MonthGroup(
                    label=day.strftime("%B %Y"),
                    year=day.year,
                    month=day.month,
                    leading_blanks=leading_blanks(day.year, day.month),
                )
                months[key] = group
            group.cells.append(self._cell(day, first_by_day[day], pollutant))

        logger.debug(
            "Grouped %d days into %d months",
            len(first_by_day),
            len(months),
            extra={"pollutant": pollutant, "row_count": len(first_by_day)},
        )
        return CalendarResult(pollutant=pollutant, months=list(months.values()))
