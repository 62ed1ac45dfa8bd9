from __future__ import annotations

import time
from functools import lru_cache
from threading import Lock
from typing import Any, Callable, Dict, Optional, Tuple

from settings import get_settings


class ResponseCache:
    """In-memory cache of upstream responses with a fixed expiry."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._items: Dict[str, Tuple[float, Any]] = {}
        self._lock = Lock()

    def get(self, key: str) -> Tuple[Optional[Any], bool]:
        """Return ``(value, is_expired)``; a missing key reports ``(None, True)``."""
        with self._lock:
            entry = self._items.get(key)
        if entry is None:
            return None, True
        stored_at, value = entry
        return value, self._clock() - stored_at > self.ttl_seconds

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._items[key] = (self._clock(), value)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


@lru_cache
def build_default_cache(ttl_seconds: Optional[float] = None) -> ResponseCache:
    settings = get_settings()
    ttl = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds
    return ResponseCache(ttl_seconds=ttl)
