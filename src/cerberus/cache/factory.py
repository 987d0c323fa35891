"""Factory for the shared cache backend."""

import logging

from cerberus.cache.base import SharedCache
from cerberus.cache.memory import MemorySharedCache
from cerberus.config import Settings

logger = logging.getLogger(__name__)


def create_shared_cache(settings: Settings) -> SharedCache:
    """Create the configured shared cache.

    Uses Redis when REDIS_URL is set, otherwise an in-process map.
    """
    if settings.redis_url:
        from cerberus.cache.redis_store import RedisSharedCache

        logger.info(f"Using Redis shared cache at {settings._redact_url(settings.redis_url)}")
        return RedisSharedCache.from_url(settings.redis_url)

    logger.warning(
        "REDIS_URL not set - safety gate decisions are process-local "
        "and will diverge across instances"
    )
    return MemorySharedCache()
