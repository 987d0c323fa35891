"""Process-local shared cache (default backend)."""

import time
from typing import Callable, Optional

from cerberus.cache.base import SharedCache
from cerberus.cache.ttl import TTLCache

# One entry per distinct mint pair seen by the risk signal
DEFAULT_MAX_ENTRIES = 10_000


class MemorySharedCache(SharedCache):
    """In-process store with per-entry expiry and a size bound.

    Backed by TTLCache, so the oldest entries are evicted once
    ``max_entries`` is reached. Decisions are not shared between worker
    processes.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._store: TTLCache[str] = TTLCache(max_entries=max_entries, clock=clock)

    @property
    def backend(self) -> str:
        return "memory"

    async def get(self, key: str) -> Optional[str]:
        return self._store.get(key)

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self._store.set(key, value, ttl_seconds=ttl_seconds)

    def __len__(self) -> int:
        return len(self._store)
