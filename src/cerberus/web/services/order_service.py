"""Order service: the quote/build request lifecycle behind GET /order.

This service never signs anything. Build requests return an unsigned
transaction that the caller's wallet signs client-side.
"""

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from cerberus.cache.ttl import TTLCache
from cerberus.errors import CerberusError, InternalError, PolicyDenied, UpstreamError
from cerberus.monitoring.metrics import MetricsCollector
from cerberus.routing.base import BuildRequest, SwapQuoteRequest
from cerberus.routing.jupiter import JupiterClient, out_amount, route_labels
from cerberus.safety import SafetyGate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderResult:
    """Payload plus whether it was served from cache."""

    payload: dict
    cache_hit: bool

    @property
    def cache_status(self) -> str:
        return "HIT" if self.cache_hit else "MISS"


class OrderService:
    """Validates policy, serves from cache, or fetches from upstream.

    Within one request the gate always completes before any cache lookup,
    and a cache write only follows a successful upstream response.
    Concurrent identical misses each call upstream (no single-flight).
    """

    def __init__(
        self,
        gate: SafetyGate,
        upstream: JupiterClient,
        cache: TTLCache[dict],
        metrics: MetricsCollector,
        clock: Callable[[], float] = time.perf_counter,
    ):
        self.gate = gate
        self.upstream = upstream
        self.cache = cache
        self.metrics = metrics
        self._clock = clock

    async def get_order(self, request: Union[SwapQuoteRequest, BuildRequest]) -> OrderResult:
        """Run one /order request.

        Raises:
            PolicyDenied: the safety gate rejected the pair
            UpstreamError: the aggregator failed (already counted)
            InternalError: anything unexpected (already counted and logged)
        """
        self.metrics.order_request()
        started = self._clock()

        try:
            return await self._run(request, started)
        except CerberusError:
            raise
        except Exception:
            logger.exception(
                f"Unhandled error serving order {request.input_mint}->{request.output_mint}"
            )
            self.metrics.upstream_failure()
            raise InternalError()

    async def _run(self, request: Union[SwapQuoteRequest, BuildRequest], started: float) -> OrderResult:
        verdict = await self.gate.check(request.input_mint, request.output_mint)
        if not verdict.allowed:
            self.metrics.safety_block()
            logger.info(
                f"Safety gate denied {request.input_mint}->{request.output_mint}: {verdict.code}"
            )
            raise PolicyDenied(verdict.code, verdict.reason)

        key = request.cache_key()
        cached = self.cache.get(key)
        if cached is not None:
            self.metrics.cache_hit()
            self._observe(started)
            return OrderResult(payload=cached, cache_hit=True)

        try:
            quote, ttl = await self._quote(request)
            if request.build_tx:
                payload = await self._build(request, quote)
            else:
                payload = quote
        except UpstreamError as e:
            self.metrics.upstream_failure()
            logger.warning(f"Upstream failure for {key}: {e.code} {e.message}")
            raise

        self.cache.set(key, payload, ttl_seconds=ttl)
        self.metrics.cache_miss()
        self._observe(started)
        return OrderResult(payload=payload, cache_hit=False)

    async def _quote(self, request: SwapQuoteRequest) -> Tuple[dict, Optional[float]]:
        """Quote for the request, reusing a cached quote on the build path.

        Returns the quote and, when it came from the cache, its remaining
        TTL. A build made from that quote must not outlive it.
        """
        quote_key = request.quote_key()
        if request.build_tx:
            cached = self.cache.get(quote_key)
            remaining = self.cache.remaining(quote_key)
            if cached is not None and remaining is not None:
                return cached, remaining

        quote = await self.upstream.fetch_quote(request)
        labels = route_labels(quote)
        logger.info(
            f"Quote {request.input_mint}->{request.output_mint} amount={request.amount}: "
            f"out={out_amount(quote)} via {' > '.join(labels) if labels else 'unknown route'}"
        )
        if request.build_tx:
            self.cache.set(quote_key, quote)
        return quote, None

    async def _build(self, request: BuildRequest, quote: dict) -> dict:
        built = await self.upstream.build_transaction(
            quote, request.user_public_key, request.slippage_bps
        )
        # New dict: the cached quote must stay untouched
        return {**quote, **built}

    def _observe(self, started: float) -> None:
        self.metrics.observe((self._clock() - started) * 1000)
