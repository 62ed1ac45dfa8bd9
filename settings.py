from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_BASE_URL_ENV = "AQ_API_BASE_URL"
_API_KEY_ENV = "AQ_API_KEY"
_HTTP_TIMEOUT_ENV = "AQ_HTTP_TIMEOUT"
_CACHE_TTL_ENV = "AQ_CACHE_TTL_SECONDS"
_FETCH_WORKERS_ENV = "AQ_FETCH_WORKERS"
_HISTOGRAM_BINS_ENV = "AQ_HISTOGRAM_BINS"
_CATEGORY_TABLES_ENV = "AQ_CATEGORY_TABLES_PATH"
_STATION_LABELS_ENV = "AQ_STATION_LABELS_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    api_base_url: str
    api_key: str
    http_timeout: float
    cache_ttl_seconds: float
    fetch_workers: int
    histogram_bins: int
    category_tables_path: Optional[str]
    station_labels_path: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_base_url=_read_str_env(_API_BASE_URL_ENV, "http://localhost:5000").rstrip("/"),
        api_key=_read_str_env(_API_KEY_ENV, ""),
        http_timeout=_read_positive_float(_HTTP_TIMEOUT_ENV, 30.0),
        cache_ttl_seconds=_read_positive_float(_CACHE_TTL_ENV, 3600.0),
        fetch_workers=_read_positive_int(_FETCH_WORKERS_ENV, 4),
        histogram_bins=_read_positive_int(_HISTOGRAM_BINS_ENV, 20),
        category_tables_path=_read_optional_env(_CATEGORY_TABLES_ENV, None),
        station_labels_path=_read_optional_env(_STATION_LABELS_ENV, None),
        log_level=_read_log_level("INFO"),
    )
