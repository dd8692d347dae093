"""
In-Memory TTL Cache Service.

Process-local store for short-lived markers (webhook identities, recent
qualifications). Survives across warm Lambda invocations and is lost on a
cold start.
"""

import time
from collections import OrderedDict
from threading import Lock
from typing import Any, Callable, Optional


class TTLCache:
    """Thread-safe LRU cache whose entries expire ``ttl_seconds`` after insert."""

    def __init__(
        self,
        max_size: int = 1000,
        ttl_seconds: float = 300,
        clock: Callable[[], float] = time.time,
    ):
        self.max_size = max_size
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._cache: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = Lock()

    def _now(self, now: Optional[float]) -> float:
        return self._clock() if now is None else now

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at >= self.ttl_seconds

    def get(self, key: str, now: Optional[float] = None) -> Optional[Any]:
        """Get value from cache if exists and not expired."""
        now = self._now(now)
        with self._lock:
            if key not in self._cache:
                return None

            value, stored_at = self._cache[key]
            if self._expired(stored_at, now):
                del self._cache[key]
                return None

            self._cache.move_to_end(key)
            return value

    def set(self, key: str, value: Any, now: Optional[float] = None) -> None:
        """Set value in cache, restarting its TTL."""
        now = self._now(now)
        with self._lock:
            if key in self._cache:
                self._cache.move_to_end(key)
            self._cache[key] = (value, now)

            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)

    def add_if_absent(self, key: str, value: Any = True, now: Optional[float] = None) -> bool:
        """
        Insert ``key`` unless a live entry already holds it.

        Check and insert happen under one lock acquisition, so two callers
        racing on the same key see exactly one ``True``.
        """
        now = self._now(now)
        with self._lock:
            existing = self._cache.get(key)
            if existing is not None and not self._expired(existing[1], now):
                return False
            self._cache[key] = (value, now)
            self._cache.move_to_end(key)
            while len(self._cache) > self.max_size:
                self._cache.popitem(last=False)
            return True

    def pop(self, key: str, now: Optional[float] = None) -> Optional[Any]:
        """Remove ``key`` and return its value if it was still live."""
        now = self._now(now)
        with self._lock:
            entry = self._cache.pop(key, None)
            if entry is None or self._expired(entry[1], now):
                return None
            return entry[0]

    def delete(self, key: str) -> bool:
        """Delete key from cache."""
        with self._lock:
            if key in self._cache:
                del self._cache[key]
                return True
            return False

    def purge_expired(self, now: Optional[float] = None) -> list[str]:
        """Drop every expired entry and return the evicted keys."""
        now = self._now(now)
        with self._lock:
            stale = [k for k, (_, ts) in self._cache.items() if self._expired(ts, now)]
            for key in stale:
                del self._cache[key]
            return stale

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)
