"""Bounded in-process cache with insertion-time expiry."""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache(Generic[T]):
    """Key/value store with a fixed TTL and a capacity bound.

    Entries expire ``ttl_seconds`` after insertion; reads never extend them.
    Expired entries are dropped lazily on read. When a new key would exceed
    ``max_entries`` the oldest inserted entry is evicted (FIFO, not LRU).

    Not guarded by a lock: all access happens on the event loop thread and
    no call suspends between reading and writing.
    """

    def __init__(
        self,
        max_entries: int = 500,
        ttl_seconds: float = 15.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._store: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()

    def get(self, key: str) -> Optional[T]:
        entry = self._store.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            del self._store[key]
            return None
        return entry.value

    def set(self, key: str, value: T, ttl_seconds: Optional[float] = None) -> None:
        """Store value; ``ttl_seconds`` overrides the default TTL for this entry."""
        if key in self._store:
            # Replacing a key refreshes its slot, nothing else is evicted
            del self._store[key]
        elif len(self._store) >= self.max_entries:
            self._store.popitem(last=False)
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self._store[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)

    def remaining(self, key: str) -> Optional[float]:
        """Seconds until the entry expires, or None if absent or expired."""
        if self.get(key) is None:
            return None
        return self._store[key].expires_at - self._clock()

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: Any) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._store)
