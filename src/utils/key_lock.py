"""Per-key locks used to serialize work on the same customer."""

from contextlib import contextmanager
from threading import Lock
from typing import Dict, Hashable, Iterator


class KeyedLock:
    """Hands out one lock per key and forgets it once nobody holds it."""

    def __init__(self):
        self._guard = Lock()
        self._locks: Dict[Hashable, Lock] = {}
        self._waiters: Dict[Hashable, int] = {}

    @contextmanager
    def hold(self, key: Hashable) -> Iterator[None]:
        with self._guard:
            lock = self._locks.setdefault(key, Lock())
            self._waiters[key] = self._waiters.get(key, 0) + 1
        lock.acquire()
        try:
            yield
        finally:
            lock.release()
            with self._guard:
                self._waiters[key] -= 1
                if self._waiters[key] == 0:
                    del self._waiters[key]
                    del self._locks[key]

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
