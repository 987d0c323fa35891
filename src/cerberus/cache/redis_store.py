"""Redis-backed shared cache for multi-instance deployments."""

import logging
from typing import Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from cerberus.cache.base import SharedCache

logger = logging.getLogger(__name__)


class RedisSharedCache(SharedCache):
    """Shared cache on top of redis.asyncio.

    Redis failures degrade to a miss (reads) or a dropped write, so an
    unreachable store only costs cross-instance sharing.
    """

    def __init__(self, client: Redis):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisSharedCache":
        return cls(Redis.from_url(url, decode_responses=True))

    @property
    def backend(self) -> str:
        return "redis"

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self._client.get(key)
        except RedisError as e:
            logger.warning(f"Shared cache read failed for {key}: {e}")
            return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self._client.set(key, value, ex=max(1, ttl_seconds))
        except RedisError as e:
            logger.warning(f"Shared cache write failed for {key}: {e}")

    async def close(self) -> None:
        await self._client.aclose()
