"""Tests for the caching primitives."""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from cerberus.cache.factory import create_shared_cache
from cerberus.cache.keys import build_key, quote_key, shield_key
from cerberus.cache.memory import MemorySharedCache
from cerberus.cache.redis_store import RedisSharedCache
from cerberus.cache.ttl import TTLCache
from cerberus.routing.base import BuildRequest, SwapQuoteRequest
from tests.helpers import SOL_MINT, USDC_MINT, WALLET_A, WALLET_B, FakeClock, make_settings


class TestTTLCache:
    """Tests for the bounded TTL cache."""

    def test_get_missing_returns_none(self):
        cache = TTLCache()
        assert cache.get("nope") is None

    def test_set_then_get(self):
        cache = TTLCache()
        cache.set("k", {"a": 1})
        assert cache.get("k") == {"a": 1}

    def test_entry_expires_after_ttl(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=15, clock=clock)
        cache.set("k", "v")

        clock.advance(14.9)
        assert cache.get("k") == "v"

        clock.advance(0.2)
        assert cache.get("k") is None
        # Expired entry is removed on read
        assert len(cache) == 0

    def test_reads_do_not_extend_expiry(self):
        """TTL is measured from insertion, not last access."""
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=10, clock=clock)
        cache.set("k", "v")

        for _ in range(3):
            clock.advance(3)
            assert cache.get("k") == "v"

        clock.advance(2)
        assert cache.get("k") is None

    def test_capacity_evicts_oldest_inserted(self):
        cache = TTLCache(max_entries=3)
        for key in ("a", "b", "c"):
            cache.set(key, key)

        # Reading "a" does not protect it (FIFO, not LRU)
        assert cache.get("a") == "a"
        cache.set("d", "d")

        assert cache.get("a") is None
        assert cache.get("b") == "b"
        assert cache.get("c") == "c"
        assert cache.get("d") == "d"
        assert len(cache) == 3

    def test_replacing_key_does_not_evict(self):
        cache = TTLCache(max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 3)

        assert len(cache) == 2
        assert cache.get("a") == 3
        assert cache.get("b") == 2

    def test_replaced_key_becomes_newest(self):
        cache = TTLCache(max_entries=3)
        for key in ("a", "b", "c"):
            cache.set(key, key)
        cache.set("a", "a2")
        cache.set("d", "d")

        assert cache.get("b") is None
        assert cache.get("a") == "a2"

    def test_contains_honours_expiry(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=1, clock=clock)
        cache.set("k", "v")
        assert "k" in cache
        clock.advance(2)
        assert "k" not in cache

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            TTLCache(max_entries=0)

    def test_per_entry_ttl_override(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=15, clock=clock)
        cache.set("short", "v", ttl_seconds=2)
        cache.set("default", "v")

        clock.advance(3)
        assert cache.get("short") is None
        assert cache.get("default") == "v"

    def test_remaining(self):
        clock = FakeClock()
        cache = TTLCache(ttl_seconds=15, clock=clock)
        cache.set("k", "v")

        clock.advance(10)
        assert cache.remaining("k") == pytest.approx(5)
        assert cache.remaining("missing") is None

        clock.advance(6)
        assert cache.remaining("k") is None


class TestFingerprints:
    """Tests for cache key construction."""

    def test_quote_key_is_pipe_joined(self):
        assert quote_key(SOL_MINT, USDC_MINT, "1000000", 50) == f"{SOL_MINT}|{USDC_MINT}|1000000|50"

    def test_build_key_extends_quote_key(self):
        key = build_key(SOL_MINT, USDC_MINT, "1000000", 50, WALLET_A)
        assert key == quote_key(SOL_MINT, USDC_MINT, "1000000", 50) + "|" + WALLET_A

    def test_build_keys_differ_by_signer(self):
        a = BuildRequest(SOL_MINT, USDC_MINT, "1000000", 50, WALLET_A)
        b = BuildRequest(SOL_MINT, USDC_MINT, "1000000", 50, WALLET_B)
        assert a.cache_key() != b.cache_key()
        assert a.quote_key() == b.quote_key()

    def test_quote_and_build_cached_independently(self):
        quote = SwapQuoteRequest(SOL_MINT, USDC_MINT, "1000000", 50)
        build = BuildRequest(SOL_MINT, USDC_MINT, "1000000", 50, WALLET_A)
        assert quote.cache_key() != build.cache_key()
        assert quote.cache_key() == build.quote_key()

    def test_keys_are_deterministic_and_order_sensitive(self):
        assert quote_key("A" * 32, "B" * 32, "1", 1) == quote_key("A" * 32, "B" * 32, "1", "1")
        assert quote_key("A" * 32, "B" * 32, "1", 1) != quote_key("B" * 32, "A" * 32, "1", 1)

    def test_shield_key(self):
        assert shield_key(SOL_MINT, USDC_MINT) == f"shield:{SOL_MINT}:{USDC_MINT}"


class TestMemorySharedCache:
    """Tests for the process-local shared cache."""

    @pytest.mark.asyncio
    async def test_set_get_and_expire(self):
        clock = FakeClock()
        cache = MemorySharedCache(clock=clock)

        await cache.set("k", "v", ttl_seconds=60)
        assert await cache.get("k") == "v"

        clock.advance(61)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_backend_name(self):
        assert MemorySharedCache().backend == "memory"

    @pytest.mark.asyncio
    async def test_size_is_bounded(self):
        clock = FakeClock()
        cache = MemorySharedCache(max_entries=100, clock=clock)

        for i in range(5000):
            await cache.set(f"shield:{i}:out", "{}", ttl_seconds=60)

        assert len(cache) == 100
        # Oldest entries were evicted, newest kept
        assert await cache.get("shield:0:out") is None
        assert await cache.get("shield:4999:out") == "{}"

    @pytest.mark.asyncio
    async def test_expired_entries_do_not_accumulate(self):
        clock = FakeClock()
        cache = MemorySharedCache(max_entries=100, clock=clock)

        for i in range(5000):
            await cache.set(f"shield:{i}:out", "{}", ttl_seconds=60)
        clock.advance(3600)
        await cache.set("shield:fresh:out", "{}", ttl_seconds=60)

        assert len(cache) <= 100
        assert await cache.get("shield:fresh:out") == "{}"


class TestRedisSharedCache:
    """Tests for the Redis-backed shared cache."""

    @pytest.mark.asyncio
    async def test_get_and_set_delegate_to_client(self):
        client = AsyncMock()
        client.get.return_value = '{"allowed": true}'
        cache = RedisSharedCache(client)

        assert await cache.get("k") == '{"allowed": true}'
        await cache.set("k", "v", ttl_seconds=60)

        client.get.assert_awaited_once_with("k")
        client.set.assert_awaited_once_with("k", "v", ex=60)

    @pytest.mark.asyncio
    async def test_read_error_is_a_miss(self):
        client = AsyncMock()
        client.get.side_effect = RedisConnectionError("down")
        cache = RedisSharedCache(client)

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_write_error_is_dropped(self):
        client = AsyncMock()
        client.set.side_effect = RedisConnectionError("down")
        cache = RedisSharedCache(client)

        await cache.set("k", "v", ttl_seconds=60)
        client.set.assert_awaited_once()


class TestSharedCacheFactory:
    """Tests for backend selection."""

    def test_defaults_to_memory(self):
        cache = create_shared_cache(make_settings(redis_url=None))
        assert isinstance(cache, MemorySharedCache)

    @pytest.mark.asyncio
    async def test_redis_when_url_configured(self):
        cache = create_shared_cache(make_settings(redis_url="redis://localhost:6379/0"))
        try:
            assert isinstance(cache, RedisSharedCache)
            assert cache.backend == "redis"
        finally:
            await cache.close()
