from __future__ import annotations

import logging
from datetime import datetime

import httpx
import pytest

from datastore.response_cache import ResponseCache
from services.upstream import ReadingSource, TimeWindow, UpstreamError, WindowKind


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


ROWS = [
    {"Date_Time": "2024-03-01 12:00:00", "PM25": 20, "WD": 10, "Status_PM25": "Valid"},
    {"Date_Time": "2024-03-01 13:00:00", "PM25": 60, "WD": 100},
]


def _handler(calls: list):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        station = request.url.path.rsplit("/", 1)[-1]
        if station == "down":
            return httpx.Response(503)
        if station == "garbled":
            return httpx.Response(200, content=b"<html>")
        if station == "refused":
            return httpx.Response(200, json={"error": "station not found"})
        if station == "boom":
            raise httpx.ConnectError("connection refused", request=request)
        return httpx.Response(200, json={station: ROWS})

    return handler


@pytest.fixture()
def calls() -> list:
    return []


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def source(calls, clock):
    reading_source = ReadingSource(
        base_url="http://upstream.test",
        api_key="secret",
        cache=ResponseCache(ttl_seconds=3600, clock=clock),
        workers=2,
        transport=httpx.MockTransport(_handler(calls)),
    )
    yield reading_source
    reading_source.close()


def test_time_window_paths_and_params() -> None:
    window = TimeWindow.periodic(datetime(2024, 3, 1, 0, 0, 45), datetime(2024, 3, 2, 23, 59, 59), 60)

    assert TimeWindow.daily().path("s 1") == "/daily/s%201"
    assert TimeWindow.monthly().params() == {}
    assert window.params() == {
        "start_datetime": "2024-03-01 00:00:00",
        "end_datetime": "2024-03-02 23:59:00",
        "interval": "60",
    }
    assert not window.cacheable
    assert TimeWindow.daily().cacheable


def test_periodic_window_requires_both_ends() -> None:
    with pytest.raises(ValueError):
        TimeWindow(kind=WindowKind.periodic, start=datetime(2024, 1, 1))
    with pytest.raises(ValueError):
        TimeWindow.periodic(datetime(2024, 1, 1), datetime(2024, 1, 2), interval=0)


def test_fetch_parses_rows_and_sends_api_key(source: ReadingSource, calls: list) -> None:
    readings = source.fetch("s1", TimeWindow.daily())

    assert [reading.timestamp for reading in readings] == [
        datetime(2024, 3, 1, 12),
        datetime(2024, 3, 1, 13),
    ]
    assert readings[0].status("PM25") == "Valid"
    assert calls[0].headers["X-API-Key"] == "secret"
    assert calls[0].url.path == "/daily/s1"


def test_daily_window_is_cached_until_ttl(source: ReadingSource, calls: list, clock: FakeClock) -> None:
    source.fetch("s1", TimeWindow.daily())
    source.fetch("s1", TimeWindow.daily())
    assert len(calls) == 1

    clock.now += 3601
    source.fetch("s1", TimeWindow.daily())
    assert len(calls) == 2

    source.fetch("s1", TimeWindow.monthly())
    assert len(calls) == 3


def test_periodic_window_is_never_cached(source: ReadingSource, calls: list) -> None:
    window = TimeWindow.periodic(datetime(2024, 3, 1), datetime(2024, 3, 2))

    source.fetch("s1", window)
    source.fetch("s1", window)

    assert len(calls) == 2
    assert calls[0].url.params["interval"] == "60"


@pytest.mark.parametrize("station", ["down", "garbled", "refused", "boom"])
def test_fetch_failures_raise_upstream_error(source: ReadingSource, station: str) -> None:
    with pytest.raises(UpstreamError) as excinfo:
        source.fetch(station, TimeWindow.daily())

    assert excinfo.value.station == station


def test_missing_station_key_yields_no_readings() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"other": ROWS}))
    source = ReadingSource(base_url="http://upstream.test", transport=transport)
    try:
        assert source.fetch("s1", TimeWindow.daily()) == []
    finally:
        source.close()


def test_fetch_many_isolates_failed_stations(source: ReadingSource, caplog) -> None:
    caplog.set_level(logging.WARNING, logger="services.upstream")

    results = source.fetch_many(["s1", "down", "s2", "s1"], TimeWindow.daily())

    assert list(results) == ["s1", "down", "s2"]
    assert len(results["s1"]) == 2
    assert results["down"] == []
    assert len(results["s2"]) == 2
    failures = [record for record in caplog.records if getattr(record, "station_id", None) == "down"]
    assert failures and failures[0].reason == "HTTP 503"


def test_time_window_describe() -> None:
    window = TimeWindow.periodic(datetime(2024, 3, 1), datetime(2024, 3, 31), 1440)

    assert TimeWindow.daily().describe() == "daily"
    assert TimeWindow.monthly().params() == {}
    assert window.describe() == "periodic[2024-03-01 00:00:00..2024-03-31 00:00:00/1440]"
