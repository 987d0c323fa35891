"""Process-wide services, built once at startup.

Handlers receive the context through FastAPI dependencies instead of
importing module-level singletons.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional

import httpx

from cerberus.cache.base import SharedCache
from cerberus.cache.factory import create_shared_cache
from cerberus.cache.ttl import TTLCache
from cerberus.config import Settings
from cerberus.monitoring.metrics import MetricsCollector
from cerberus.routing.jupiter import JupiterClient
from cerberus.safety import SafetyGate
from cerberus.utils.ratelimit import RateLimiter
from cerberus.web.services.order_service import OrderService
from cerberus.web.services.passthrough_service import PassthroughService

logger = logging.getLogger(__name__)


@dataclass
class ProxyContext:
    settings: Settings
    http: httpx.AsyncClient
    shared_cache: SharedCache
    quote_cache: TTLCache
    metrics: MetricsCollector
    gate: SafetyGate
    upstream: JupiterClient
    orders: OrderService
    passthrough: PassthroughService
    rate_limiter: RateLimiter

    async def aclose(self) -> None:
        """Close network resources."""
        await self.shared_cache.close()
        await self.http.aclose()
        logger.info("Proxy context closed")


def build_context(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
    shared_cache: Optional[SharedCache] = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> ProxyContext:
    """Wire all services from settings.

    Args:
        settings: Application settings
        transport: Optional httpx transport (tests pass a MockTransport)
        shared_cache: Override the configured shared cache backend
        sleep: Delay function for upstream retry backoff
    """
    http = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream_timeout),
        transport=transport,
        headers={"User-Agent": "cerberus-proxy"},
    )
    shared = shared_cache if shared_cache is not None else create_shared_cache(settings)

    quote_cache: TTLCache[dict] = TTLCache(
        max_entries=settings.quote_cache_max,
        ttl_seconds=settings.quote_cache_ttl_ms / 1000,
    )
    metrics = MetricsCollector()
    gate = SafetyGate(
        blocked=settings.blocked_set,
        allowed=settings.allowed_set,
        http=http,
        shield_base=settings.shield_base or None,
        cache=shared,
        cache_ttl=settings.shield_cache_ttl,
    )
    upstream = JupiterClient(
        http=http,
        backends=settings.backend_list,
        build_url=settings.build_url,
        api_key=settings.jup_api_key or None,
        max_attempts=settings.upstream_max_attempts,
        backoff_seconds=settings.upstream_backoff_ms / 1000,
        sleep=sleep,
    )

    return ProxyContext(
        settings=settings,
        http=http,
        shared_cache=shared,
        quote_cache=quote_cache,
        metrics=metrics,
        gate=gate,
        upstream=upstream,
        orders=OrderService(gate=gate, upstream=upstream, cache=quote_cache, metrics=metrics),
        passthrough=PassthroughService(http=http, base_url=settings.lite_base),
        rate_limiter=RateLimiter(limit=settings.rate_limit_per_minute),
    )
