"""In-memory expiring cache shared by the market-data lookups."""

from __future__ import annotations

import time
from threading import Lock
from typing import Callable, NamedTuple


class _Entry(NamedTuple):
    value: object
    expires_at: float


class TTLCache:
    """Expiring key/value store.

    Lookups are fanned out to worker threads by the portfolio service, so every
    access goes through the lock. ``None`` is never stored: a cached ``None``
    would be indistinguishable from a miss.
    """

    def __init__(self, default_ttl_seconds: int = 60) -> None:
        self.default_ttl_seconds = max(1, default_ttl_seconds)
        self._entries: dict[str, _Entry] = {}
        self._lock = Lock()

    def get(self, key: str) -> object | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.expires_at < time.time():
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        if value is None:
            return
        lifetime = max(1, ttl_seconds) if ttl_seconds is not None else self.default_ttl_seconds
        with self._lock:
            self._entries[key] = _Entry(value, time.time() + lifetime)

    def get_or_set(self, key: str, factory: Callable[[], object | None], ttl_seconds: int | None = None) -> object | None:
        hit = self.get(key)
        if hit is not None:
            return hit
        value = factory()
        self.set(key, value, ttl_seconds=ttl_seconds)
        return value

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
