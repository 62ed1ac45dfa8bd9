"""Wind/pollution rose: per-sector severity distribution."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Sequence

from models.records import WIND_DIRECTION_KEY, DirectionMode, Reading
from services.binning import sector, sector_labels
from services.classifier import CategoryClassifier
from services.sanitizer import reading_value
from services.tables import Table

logger = logging.getLogger(__name__)

PercentStrategy = Callable[[Sequence[int]], List[int]]


def correct_to_largest(counts: Sequence[int]) -> List[int]:
    """Round each share half-up, then push the drift onto the largest share."""
    total = sum(counts)
    if total <= 0:
        return [0] * len(counts)
    percents = [(count * 200 + total) // (2 * total) for count in counts]
    drift = 100 - sum(percents)
    if drift:
        largest = counts.index(max(counts))
        percents[largest] += drift
    return percents


def distribute_by_rank(counts: Sequence[int]) -> List[int]:
    """Floor each share, then hand out the remaining points one at a time by count rank."""
    total = sum(counts)
    if total <= 0:
        return [0] * len(counts)
    percents = [count * 100 // total for count in counts]
    remainder = 100 - sum(percents)
    ranked = sorted(range(len(counts)), key=lambda index: counts[index], reverse=True)
    for index in ranked:
        if remainder <= 0:
            break
        percents[index] += 1
        remainder -= 1
    return percents


@dataclass
class CategoryShare:
    name: str
    color: str
    count: int
    percent: int


@dataclass
class RoseResult:
    pollutant: str
    sector_count: int
    mode: DirectionMode
    sector_labels: List[str]
    categories: List[str]
    per_sector: List[List[int]]
    per_sector_counts: List[List[int]]
    per_category: List[CategoryShare] = field(default_factory=list)

    @property
    def sample_count(self) -> int:
        return sum(share.count for share in self.per_category)

    def table(self) -> Table:
        if not self.categories:
            return Table()
        rows = [
            [label, *(f"{percent}%" for percent in percents)]
            for label, percents in zip(self.sector_labels, self.per_sector)
        ]
        return Table(headers=["Direction", *self.categories], rows=rows)


class RoseAggregator:
    """Combines sector binning and severity classification."""

    def __init__(
        self,
        classifier: CategoryClassifier,
        sector_strategy: PercentStrategy = correct_to_largest,
        legend_strategy: PercentStrategy = distribute_by_rank,
    ) -> None:
        self.classifier = classifier
        self.sector_strategy = sector_strategy
        self.legend_strategy = legend_strategy

    def aggregate(
        self,
        readings: Iterable[Reading],
        pollutant: str,
        sector_count: int = 8,
        mode: DirectionMode | str = DirectionMode.from_,
    ) -> RoseResult:
        direction_mode = DirectionMode.parse(mode)
        labels = sector_labels(sector_count)
        table = self.classifier.table_for(pollutant)

        sector_counts = [[0] * len(table) for _ in range(sector_count)]
        totals = [0] * len(table)
        skipped = 0

        for reading in readings:
            if reading.timestamp is None:
                skipped += 1
                continue
            direction = reading_value(reading, WIND_DIRECTION_KEY)
            value = reading_value(reading, pollutant)
            if direction is None or value is None:
                skipped += 1
                continue
            index = self.classifier.classify_index(value, pollutant)
            if index is None:
                skipped += 1
                continue
            sector_counts[sector(direction, sector_count, direction_mode)][index] += 1
            totals[index] += 1

        legend = self.legend_strategy(totals)
        logger.debug(
            "Built rose from %d samples (%d skipped)",
            sum(totals),
            skipped,
            extra={"pollutant": pollutant, "row_count": sum(totals)},
        )
        return RoseResult(
            pollutant=pollutant,
            sector_count=sector_count,
            mode=direction_mode,
            sector_labels=labels,
            categories=[band.name for band in table],
            per_sector=[self.sector_strategy(counts) for counts in sector_counts],
            per_sector_counts=sector_counts,
            per_category=[
                CategoryShare(name=band.name, color=band.color, count=totals[index], percent=legend[index])
                for index, band in enumerate(table)
            ],
        )
