"""HTTP client for the upstream sensor-network API."""

from __future__ import annotations

import logging
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import quote

import httpx

from datastore.response_cache import ResponseCache, build_default_cache
from models.records import Reading
from models.wire import parse_rows
from settings import get_settings

logger = logging.getLogger(__name__)

_PERIODIC_FORMAT = "%Y-%m-%d %H:%M:%S"
HOURLY_INTERVAL = 60
DAILY_INTERVAL = 1440


class UpstreamError(Exception):
    """The upstream API could not deliver readings for a station."""

    def __init__(self, station: str, reason: str) -> None:
        super().__init__(f"Fetching readings for {station!r} failed: {reason}")
        self.station = station
        self.reason = reason


class WindowKind(str, Enum):
    daily = "daily"
    monthly = "monthly"
    periodic = "periodic"


@dataclass(frozen=True)
class TimeWindow:
    """Which slice of history to request: last 24h, last 30 days, or an explicit span."""

    kind: WindowKind
    start: Optional[datetime] = None
    end: Optional[datetime] = None
    interval: int = HOURLY_INTERVAL

    def __post_init__(self) -> None:
        if self.kind is WindowKind.periodic and (self.start is None or self.end is None):
            raise ValueError("A periodic window needs both start and end.")
        if self.interval <= 0:
            raise ValueError(f"Interval must be positive, got {self.interval}.")

    @classmethod
    def daily(cls) -> "TimeWindow":
        return cls(kind=WindowKind.daily)

    @classmethod
    def monthly(cls) -> "TimeWindow":
        return cls(kind=WindowKind.monthly)

    @classmethod
    def periodic(cls, start: datetime, end: datetime, interval: int = HOURLY_INTERVAL) -> "TimeWindow":
        return cls(kind=WindowKind.periodic, start=start, end=end, interval=interval)

    @property
    def cacheable(self) -> bool:
        return self.kind is not WindowKind.periodic

    def path(self, station: str) -> str:
        return f"/{self.kind.value}/{quote(station, safe='')}"

    def params(self) -> Dict[str, str]:
        if self.kind is not WindowKind.periodic or self.start is None or self.end is None:
            return {}
        return {
            "start_datetime": self.start.replace(second=0, microsecond=0).strftime(_PERIODIC_FORMAT),
            "end_datetime": self.end.replace(second=0, microsecond=0).strftime(_PERIODIC_FORMAT),
            "interval": str(self.interval),
        }

    def describe(self) -> str:
        if self.kind is not WindowKind.periodic:
            return self.kind.value
        params = self.params()
        return f"periodic[{params['start_datetime']}..{params['end_datetime']}/{self.interval}]"


class ReadingSource:
    """Fetches station readings, caching the fixed daily/monthly windows."""

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 30.0,
        cache: Optional[ResponseCache] = None,
        workers: int = 4,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.cache = cache
        headers = {"X-API-Key": api_key} if api_key else {}
        self._client = httpx.Client(
            base_url=base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )
        self.executor = ThreadPoolExecutor(max_workers=workers)

    def close(self) -> None:
        self.executor.shutdown(wait=False, cancel_futures=True)
        self._client.close()

    def fetch(self, station: str, window: TimeWindow) -> List[Reading]:
        """Return readings for one station or raise :class:`UpstreamError`."""
        cache_key = f"{station}_{window.kind.value}"
        if window.cacheable and self.cache is not None:
            cached, expired = self.cache.get(cache_key)
            if cached is not None and not expired:
                logger.debug("Serving cached readings", extra={"cache_key": cache_key})
                return list(cached)

        readings = parse_rows(self._request(station, window))
        if window.cacheable and self.cache is not None:
            self.cache.set(cache_key, readings)
        return list(readings)

    def fetch_many(self, stations: Iterable[str], window: TimeWindow) -> Dict[str, List[Reading]]:
        """Fetch every station concurrently; a failed station contributes no rows."""
        futures: Dict[str, Future[List[Reading]]] = {}
        for station in stations:
            if station not in futures:
                futures[station] = self.executor.submit(self.fetch, station, window)

        results: Dict[str, List[Reading]] = {}
        for station, future in futures.items():
            try:
                results[station] = future.result()
            except UpstreamError as exc:
                logger.warning(
                    "Skipping station after failed fetch",
                    extra={"station_id": station, "window": window.describe(), "reason": exc.reason},
                )
                results[station] = []
        return results

    def _request(self, station: str, window: TimeWindow) -> List[Any]:
        start_time = time.perf_counter()
        try:
            response = self._client.get(window.path(station), params=window.params())
        except httpx.HTTPError as exc:
            raise UpstreamError(station, str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise UpstreamError(station, f"HTTP {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(station, "response is not valid JSON") from exc

        if isinstance(payload, dict) and payload.get("error"):
            raise UpstreamError(station, str(payload["error"]))

        rows = payload.get(station) if isinstance(payload, dict) else None
        logger.debug(
            "Fetched upstream readings",
            extra={
                "station_id": station,
                "window": window.describe(),
                "row_count": len(rows) if isinstance(rows, list) else 0,
                "elapsed_ms": int((time.perf_counter() - start_time) * 1000),
            },
        )
        return rows if isinstance(rows, list) else []


@lru_cache
def build_default_source() -> ReadingSource:
    """Factory that wires the reading source from settings."""
    settings = get_settings()
    return ReadingSource(
        base_url=settings.api_base_url,
        api_key=settings.api_key,
        timeout=settings.http_timeout,
        cache=build_default_cache(),
        workers=settings.fetch_workers,
    )
