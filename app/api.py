"""HTTP route definitions for the service."""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from app.schemas import (
    CalendarResponse,
    CategoriesResponse,
    DualAxisResponse,
    HistogramResponse,
    OutputFormat,
    ParallelResponse,
    RoseResponse,
    ScatterResponse,
    TableSchema,
)
from models.records import POLLUTANT_KEYS, DirectionMode
from services.analytics import AnalyticsService, build_default_service
from services.tables import Table, to_csv
from services.upstream import HOURLY_INTERVAL, TimeWindow, UpstreamError, WindowKind

router = APIRouter()


def get_service() -> AnalyticsService:
    return build_default_service()


def _bad_request(exc: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


def _check_pollutant(pollutant: str) -> str:
    if pollutant not in POLLUTANT_KEYS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown pollutant {pollutant!r}.",
        )
    return pollutant


def _window(kind: WindowKind, start: Optional[datetime], end: Optional[datetime], interval: int) -> TimeWindow:
    try:
        return TimeWindow(kind=kind, start=start, end=end, interval=interval)
    except ValueError as exc:
        raise _bad_request(exc) from exc


def _csv(table: Table) -> Response:
    return Response(content=to_csv(table), media_type="text/csv; charset=utf-8")


@router.get(
    "/categories/{pollutant}",
    response_model=CategoriesResponse,
    summary="Severity bands used to classify a pollutant.",
)
async def get_categories(
    pollutant: str,
    service: AnalyticsService = Depends(get_service),
) -> CategoriesResponse:
    _check_pollutant(pollutant)
    return CategoriesResponse.from_table(pollutant, service.categories(pollutant))


@router.get(
    "/stations/{station}/rose",
    response_model=RoseResponse,
    summary="Per-direction severity distribution for one station.",
)
def get_rose(
    station: str,
    pollutant: str = Query("AQI"),
    sectors: int = Query(8, ge=1, le=36),
    direction: DirectionMode = Query(DirectionMode.from_),
    window: WindowKind = Query(WindowKind.daily),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    interval: int = Query(HOURLY_INTERVAL, ge=1),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[RoseResponse, Response]:
    _check_pollutant(pollutant)
    time_window = _window(window, start, end, interval)
    try:
        result = service.rose(station, pollutant, time_window, sectors, direction)
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if output is OutputFormat.csv:
        return _csv(result.table())
    return RoseResponse.from_result(result)


@router.get(
    "/stations/{station}/calendar",
    response_model=CalendarResponse,
    summary="Daily values grouped into calendar months.",
)
def get_calendar(
    station: str,
    start: datetime,
    end: datetime,
    pollutant: str = Query("AQI"),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[CalendarResponse, Response]:
    _check_pollutant(pollutant)
    try:
        result = service.calendar(station, pollutant, start, end)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if output is OutputFormat.csv:
        return _csv(result.table())
    return CalendarResponse.from_result(result)


@router.get(
    "/stations/{station}/dual-axis",
    response_model=DualAxisResponse,
    summary="Two pollutants over time on separate value axes.",
)
def get_dual_axis(
    station: str,
    primary: str = Query("AQI"),
    secondary: str = Query("PM25"),
    window: WindowKind = Query(WindowKind.daily),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    interval: int = Query(HOURLY_INTERVAL, ge=1),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[DualAxisResponse, Response]:
    _check_pollutant(primary)
    _check_pollutant(secondary)
    time_window = _window(window, start, end, interval)
    try:
        result = service.dual_axis(station, primary, secondary, time_window)
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if output is OutputFormat.csv:
        return _csv(result.table())
    return DualAxisResponse.from_result(result)


@router.get(
    "/stations/{station}/scatter",
    response_model=ScatterResponse,
    summary="One pollutant plotted against another, reading by reading.",
)
def get_scatter(
    station: str,
    x: str = Query("AQI"),
    y: str = Query("PM25"),
    window: WindowKind = Query(WindowKind.daily),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    interval: int = Query(HOURLY_INTERVAL, ge=1),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[ScatterResponse, Response]:
    _check_pollutant(x)
    _check_pollutant(y)
    time_window = _window(window, start, end, interval)
    try:
        result = service.scatter(station, x, y, time_window)
    except UpstreamError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    if output is OutputFormat.csv:
        return _csv(result.table())
    return ScatterResponse.from_result(result)

@router.get(
    "/histogram",
    response_model=HistogramResponse,
    summary="Value distribution across stations over shared bins.",
)
def get_histogram(
    start: datetime,
    end: datetime,
    stations: List[str] = Query(...),
    pollutant: str = Query("AQI"),
    bins: Optional[int] = Query(None, ge=1, le=500),
    interval: int = Query(HOURLY_INTERVAL, ge=1),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[HistogramResponse, Response]:
    _check_pollutant(pollutant)
    time_window = _window(WindowKind.periodic, start, end, interval)
    result = service.histogram(stations, pollutant, time_window, bins)
    if output is OutputFormat.csv:
        return _csv(result.table(service.station_labels))
    return HistogramResponse.from_result(result, service.station_labels)


@router.get(
    "/parallel",
    response_model=ParallelResponse,
    summary="One clock hour compared across days and stations.",
)
def get_parallel(
    start: datetime,
    end: datetime,
    stations: List[str] = Query(...),
    pollutant: str = Query("AQI"),
    hour: int = Query(12, ge=0, le=23),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[ParallelResponse, Response]:
    _check_pollutant(pollutant)
    try:
        result = service.parallel(stations, pollutant, hour, start, end)
    except ValueError as exc:
        raise _bad_request(exc) from exc
    if output is OutputFormat.csv:
        return _csv(result.table(service.station_labels))
    return ParallelResponse.from_result(result, service.station_labels)


@router.get(
    "/timeseries",
    response_model=TableSchema,
    summary="Station-grouped readings with validity status columns.",
)
def get_timeseries(
    stations: List[str] = Query(...),
    pollutants: List[str] = Query(...),
    window: WindowKind = Query(WindowKind.daily),
    start: Optional[datetime] = Query(None),
    end: Optional[datetime] = Query(None),
    interval: int = Query(HOURLY_INTERVAL, ge=1),
    output: OutputFormat = Query(OutputFormat.json, alias="format"),
    service: AnalyticsService = Depends(get_service),
) -> Union[TableSchema, Response]:
    for pollutant in pollutants:
        _check_pollutant(pollutant)
    time_window = _window(window, start, end, interval)
    table = service.timeseries(stations, pollutants, time_window)
    if output is OutputFormat.csv:
        return _csv(table)
    return TableSchema.from_table(table)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
