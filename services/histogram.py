"""Multi-station value histograms over shared bin edges."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from models.records import Reading
from services.sanitizer import reading_value
from services.tables import Table, station_label

logger = logging.getLogger(__name__)


@dataclass
class HistogramResult:
    pollutant: str
    edges: List[float] = field(default_factory=list)
    per_station_counts: Dict[str, List[int]] = field(default_factory=dict)

    @property
    def bin_count(self) -> int:
        return max(len(self.edges) - 1, 0)

    @property
    def bin_labels(self) -> List[str]:
        return [
            f"{self.edges[index]:.2f} – {self.edges[index + 1]:.2f}"
            for index in range(self.bin_count)
        ]

    def table(self, labels: Optional[Mapping[str, str]] = None) -> Table:
        if not self.edges:
            return Table()
        stations = list(self.per_station_counts)
        headers = ["Bin", *(station_label(station, labels) for station in stations)]
        rows = [
            [bin_label, *(str(self.per_station_counts[station][index]) for station in stations)]
            for index, bin_label in enumerate(self.bin_labels)
        ]
        return Table(headers=headers, rows=rows)


def _bounds(values: Sequence[float]) -> Tuple[float, float]:
    """Global min/max, widened when every value is the same."""
    low = min(values)
    high = max(values)
    if high > low:
        return low, high
    # A +1 step vanishes at large magnitudes, so scale it with the value.
    step = max(1.0, abs(low) * 1e-9)
    if math.isfinite(low + step):
        return low, low + step
    return low - step, low


def _bin_width(low: float, high: float, bins: int) -> float:
    span = high - low
    if math.isfinite(span):
        return span / bins
    # The span of near-max magnitudes overflows; divide first.
    return high / bins - low / bins


class HistogramAggregator:
    """Counts values per station against one global set of bins."""

    def __init__(self, default_bins: int = 20) -> None:
        self.default_bins = max(1, default_bins)

    def aggregate(
        self,
        station_series: Mapping[str, Sequence[Reading]],
        pollutant: str,
        bin_count: Optional[int] = None,
    ) -> HistogramResult:
        bins = max(1, bin_count or self.default_bins)

        values_by_station: Dict[str, List[float]] = {}
        for station, readings in station_series.items():
            values_by_station[station] = [
                value
                for value in (reading_value(reading, pollutant) for reading in readings if reading.is_timed)
                if value is not None
            ]

        all_values = [value for values in values_by_station.values() for value in values]
        if not all_values:
            return HistogramResult(pollutant=pollutant)

        low, high = _bounds(all_values)
        width = _bin_width(low, high, bins)
        edges = [low + index * width for index in range(bins)] + [high]

        counts_by_station: Dict[str, List[int]] = {}
        for station, values in values_by_station.items():
            counts = [0] * bins
            for value in values:
                position = (value - low) / width if width > 0 else 0.0
                index = int(math.floor(position)) if math.isfinite(position) else bins - 1
                counts[min(max(index, 0), bins - 1)] += 1
            counts_by_station[station] = counts

        logger.debug(
            "Binned %d values across %d stations",
            len(all_values),
            len(counts_by_station),
            extra={"pollutant": pollutant, "row_count": len(all_values)},
        )
        return HistogramResult(pollutant=pollutant, edges=edges, per_station_counts=counts_by_station)
