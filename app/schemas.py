"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

import datetime as dt
from datetime import datetime
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from models.categories import CategoryTable
from models.units import label_with_unit
from services.calendar_grid import CalendarResult
from services.comparison import DualAxisResult, ScatterResult
from services.histogram import HistogramResult
from services.parallel import ParallelResult
from services.rose import RoseResult
from services.tables import Table


class OutputFormat(str, Enum):
    """Representations an aggregate route can return."""

    json = "json"
    csv = "csv"


def _labels_for(stations: Iterable[str], labels: Optional[Mapping[str, str]]) -> Dict[str, str]:
    """Display names for the stations that have one configured."""
    if not labels:
        return {}
    return {station: labels[station] for station in stations if labels.get(station)}


class TableSchema(BaseModel):
    """Display-ready header row plus string cells."""

    headers: List[str] = Field(default_factory=list)
    rows: List[List[str]] = Field(default_factory=list)

    @classmethod
    def from_table(cls, table: Table) -> "TableSchema":
        return cls(headers=list(table.headers), rows=[list(row) for row in table.rows])


class BandSchema(BaseModel):
    name: str
    color: str
    range: str
    kind: str


class CategoriesResponse(BaseModel):
    pollutant: str
    bands: List[BandSchema] = Field(default_factory=list)

    @classmethod
    def from_table(cls, pollutant: str, table: CategoryTable) -> "CategoriesResponse":
        return cls(
            pollutant=pollutant,
            bands=[
                BandSchema(name=band.name, color=band.color, range=band.range_text, kind=band.bounds.kind)
                for band in table
            ],
        )


class CategoryShareSchema(BaseModel):
    name: str
    color: str
    count: int = Field(..., ge=0)
    percent: int


class RoseResponse(BaseModel):
    """Per-sector category percentages plus the direction-independent legend."""

    pollutant: str
    sector_count: int = Field(..., ge=1)
    direction: str
    sector_labels: List[str]
    categories: List[str]
    per_sector: List[List[int]]
    per_category: List[CategoryShareSchema]
    table: TableSchema

    @classmethod
    def from_result(cls, result: RoseResult) -> "RoseResponse":
        return cls(
            pollutant=result.pollutant,
            sector_count=result.sector_count,
            direction=result.mode.value,
            sector_labels=result.sector_labels,
            categories=result.categories,
            per_sector=result.per_sector,
            per_category=[
                CategoryShareSchema(name=share.name, color=share.color, count=share.count, percent=share.percent)
                for share in result.per_category
            ],
            table=TableSchema.from_table(result.table()),
        )


class HistogramResponse(BaseModel):
    pollutant: str
    edges: List[float] = Field(default_factory=list)
    bin_labels: List[str] = Field(default_factory=list)
    per_station_counts: Dict[str, List[int]] = Field(default_factory=dict)
    station_labels: Dict[str, str] = Field(default_factory=dict)
    table: TableSchema

    @classmethod
    def from_result(
        cls, result: HistogramResult, labels: Optional[Mapping[str, str]] = None
    ) -> "HistogramResponse":
        return cls(
            pollutant=result.pollutant,
            edges=result.edges,
            bin_labels=result.bin_labels,
            per_station_counts=result.per_station_counts,
            station_labels=_labels_for(result.per_station_counts, labels),
            table=TableSchema.from_table(result.table(labels)),
        )


class PointSchema(BaseModel):
    x: datetime
    y: float


class ParallelResponse(BaseModel):
    pollutant: str
    hour: int = Field(..., ge=0, le=23)
    series: Dict[str, List[PointSchema]] = Field(default_factory=dict)
    x_min: Optional[datetime] = None
    x_max: Optional[datetime] = None
    station_labels: Dict[str, str] = Field(default_factory=dict)
    table: TableSchema

    @classmethod
    def from_result(
        cls, result: ParallelResult, labels: Optional[Mapping[str, str]] = None
    ) -> "ParallelResponse":
        bounds = result.x_bounds
        return cls(
            pollutant=result.pollutant,
            hour=result.hour,
            series={
                station: [PointSchema(x=point.x, y=point.y) for point in points]
                for station, points in result.series.items()
            },
            x_min=bounds[0] if bounds else None,
            x_max=bounds[1] if bounds else None,
            station_labels=_labels_for(result.stations, labels),
            table=TableSchema.from_table(result.table(labels)),
        )


class CalendarCellSchema(BaseModel):
    date: dt.date
    value: Optional[float] = None
    category: Optional[str] = None
    color: Optional[str] = None


class MonthGroupSchema(BaseModel):
    label: str
    leading_blanks: int = Field(..., ge=0, le=6)
    cells: List[CalendarCellSchema] = Field(default_factory=list)


class CalendarResponse(BaseModel):
    pollutant: str
    months: List[MonthGroupSchema] = Field(default_factory=list)
    table: TableSchema

    @classmethod
    def from_result(cls, result: CalendarResult) -> "CalendarResponse":
        return cls(
            pollutant=result.pollutant,
            months=[
                MonthGroupSchema(
                    label=month.label,
                    leading_blanks=month.leading_blanks,
                    cells=[
                        CalendarCellSchema(
                            date=cell.date, value=cell.value, category=cell.category, color=cell.color
                        )
                        for cell in month.cells
                    ],
                )
                for month in result.months
            ],
            table=TableSchema.from_table(result.table()),
        )


class DualAxisResponse(BaseModel):
    """Two pollutants over time, each on its own value axis."""

    primary: str
    secondary: str
    primary_label: str
    secondary_label: str
    primary_series: List[PointSchema] = Field(default_factory=list)
    secondary_series: List[PointSchema] = Field(default_factory=list)
    table: TableSchema

    @classmethod
    def from_result(cls, result: DualAxisResult) -> "DualAxisResponse":
        return cls(
            primary=result.primary,
            secondary=result.secondary,
            primary_label=label_with_unit(result.primary),
            secondary_label=label_with_unit(result.secondary),
            primary_series=[PointSchema(x=point.x, y=point.y) for point in result.primary_series],
            secondary_series=[PointSchema(x=point.x, y=point.y) for point in result.secondary_series],
            table=TableSchema.from_table(result.table()),
        )


class PairPointSchema(BaseModel):
    x: float
    y: float


class ScatterResponse(BaseModel):
    x_pollutant: str
    y_pollutant: str
    label: str
    points: List[PairPointSchema] = Field(default_factory=list)
    table: TableSchema

    @classmethod
    def from_result(cls, result: ScatterResult) -> "ScatterResponse":
        return cls(
            x_pollutant=result.x_pollutant,
            y_pollutant=result.y_pollutant,
            label=result.label,
            points=[PairPointSchema(x=point.x, y=point.y) for point in result.points],
            table=TableSchema.from_table(result.table()),
        )
