"""Caching primitives.

- TTLCache: bounded in-process quote/build cache
- SharedCache: optional cross-process store for safety gate decisions
"""

from cerberus.cache.base import SharedCache
from cerberus.cache.factory import create_shared_cache
from cerberus.cache.keys import build_key, quote_key, shield_key
from cerberus.cache.memory import MemorySharedCache
from cerberus.cache.ttl import CacheEntry, TTLCache

__all__ = [
    "CacheEntry",
    "TTLCache",
    "SharedCache",
    "MemorySharedCache",
    "create_shared_cache",
    "quote_key",
    "build_key",
    "shield_key",
]
