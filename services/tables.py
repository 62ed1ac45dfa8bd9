"""Display-ready tables shared by every aggregation and the CSV export."""

from __future__ import annotations

import csv
import io
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from models.records import Reading
from models.units import display_name_for_key, label_with_unit
from services.sanitizer import is_fault_status, sanitize

_TIME_KEY_FORMAT = "%Y-%m-%d %H:%M"
_SUMMARY_LABELS = ("Min", "MinDate", "Max", "MaxDate", "Avg")


@dataclass
class Table:
    headers: List[str] = field(default_factory=list)
    rows: List[List[str]] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.headers


def format_number(value: Optional[float]) -> str:
    """Render a number the way the dashboard prints it: ``12`` not ``12.0``."""
    if value is None:
        return ""
    if math.isfinite(value) and value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    return repr(float(value))


def station_label(station: str, labels: Optional[Mapping[str, str]]) -> str:
    if labels and labels.get(station):
        return labels[station]
    return station


def to_csv(table: Table) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(table.headers)
    for row in table.rows:
        writer.writerow(["" if cell == "N/A" else cell for cell in row])
    return buffer.getvalue()


def _summary_rows(
    width: int, rows: Sequence[Sequence[str]], value_columns: Sequence[int]
) -> List[List[str]]:
    summary = [[label] + [""] * (width - 1) for label in _SUMMARY_LABELS]
    min_row, min_date_row, max_row, max_date_row, avg_row = summary

    for column in value_columns:
        min_value: Optional[float] = None
        max_value: Optional[float] = None
        total = 0.0
        count = 0
        for row in rows:
            value = sanitize(row[column])
            if value is None:
                continue
            if min_value is None or value < min_value:
                min_value = value
                min_date_row[column] = row[0]
            if max_value is None or value > max_value:
                max_value = value
                max_date_row[column] = row[0]
            total += value
            count += 1
        if count:
            min_row[column] = f"{min_value:.3f}"
            max_row[column] = f"{max_value:.3f}"
            avg_row[column] = f"{total / count:.3f}"

    return summary


def build_timeseries_table(
    station_series: Mapping[str, Sequence[Reading]],
    pollutants: Sequence[str],
    labels: Optional[Mapping[str, str]] = None,
    include_summary: bool = True,
) -> Table:
    """Station-grouped time table with validity status and dominant pollutant columns.

    A reading whose status for a pollutant is a fault code shows the fault in
    the status column and leaves the value cell empty.
    """
    if not station_series or not pollutants:
        return Table()

    values: Dict[tuple[str, str, str], float] = {}
    statuses: Dict[tuple[str, str, str], str] = {}
    dominants: Dict[tuple[str, str], str] = {}
    time_keys: set[str] = set()

    for station, readings in station_series.items():
        for reading in readings:
            if reading.timestamp is None:
                continue
            key = reading.timestamp.strftime(_TIME_KEY_FORMAT)
            time_keys.add(key)
            for pollutant in pollutants:
                status = reading.status(pollutant)
                if is_fault_status(status):
                    statuses[(station, pollutant, key)] = status  # type: ignore[assignment]
                    continue
                value = sanitize(reading.raw(pollutant))
                if value is not None:
                    values[(station, pollutant, key)] = value
            if "AQI" in pollutants:
                dominants[(station, key)] = reading.dominant_pollutant or ""

    if not time_keys:
        return Table()

    headers = ["Time"]
    value_columns: List[int] = []
    for station in station_series:
        name = station_label(station, labels)
        for pollutant in pollutants:
            value_columns.append(len(headers))
            headers.append(f"{name} • {label_with_unit(pollutant, export=True)}")
            headers.append(f"{name} • Dominant" if pollutant == "AQI" else f"{name} • Status")

    rows: List[List[str]] = []
    for key in sorted(time_keys):
        row = [key]
        for station in station_series:
            for pollutant in pollutants:
                value = values.get((station, pollutant, key))
                row.append(f"{value:.3f}" if value is not None else "")
                if pollutant == "AQI":
                    dominant = dominants.get((station, key), "")
                    row.append(display_name_for_key(dominant) if dominant and dominant != "N/A" else "")
                else:
                    row.append(statuses.get((station, pollutant, key), ""))
        rows.append(row)

    if include_summary:
        rows.extend(_summary_rows(len(headers), rows, value_columns))
    return Table(headers=headers, rows=rows)

