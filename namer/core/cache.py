# /namer/core/cache.py

"""
Short-lived, in-process key/value cache.

Used as the side channel for cooperative cancellation: the cancel endpoint
writes a flag, and background workers poll it at their checkpoints. The
store is a bounded `cachetools.TTLCache`, so expired flags are evicted on
every write and the oldest entries give way once `maxsize` is reached. The
database row status stays authoritative; this cache only lets workers
notice a cancellation without a round trip.
"""

import threading
import time
from typing import Any, Callable, Optional

from cachetools import TTLCache

from . import config


class FlagCache:
    def __init__(self, maxsize: int, ttl_seconds: float, timer: Callable[[], float] = time.monotonic):
        self._entries = TTLCache(maxsize=maxsize, ttl=ttl_seconds, timer=timer)
        # cachetools caches are not thread-safe; routers run in a threadpool
        # while workers run on the event loop.
        self._lock = threading.Lock()

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = value

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            return self._entries.get(key)

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._entries.expire()
            return len(self._entries)


# Process-wide instance shared by the API layer and background tasks.
flag_cache = FlagCache(
    maxsize=config.CANCELLATION_FLAG_MAX_ENTRIES,
    ttl_seconds=config.CANCELLATION_FLAG_TTL_SECONDS,
)
