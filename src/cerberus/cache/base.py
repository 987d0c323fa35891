"""Abstract interface for the optional cross-process cache."""

from abc import ABC, abstractmethod
from typing import Optional


class SharedCache(ABC):
    """String key/value store with per-entry TTL.

    Used to memoize safety gate decisions. Values are serialized by the
    caller; implementations store them verbatim.
    """

    @property
    @abstractmethod
    def backend(self) -> str:
        """Backend identifier (e.g. "memory", "redis")."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when absent or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store a value that expires after ttl_seconds."""
        pass

    async def close(self) -> None:
        """Release any connections held by the backend."""
        return None
