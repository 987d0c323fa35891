"""
Metrics Collector

Process-wide counters for the /order lifecycle plus a rolling latency
window. Exposed read-only through GET /metrics.
"""

import time
from collections import deque
from typing import Callable

from pydantic import BaseModel, ConfigDict, Field


class LatencySummary(BaseModel):
    avg: int = 0
    p50: float = 0
    p95: float = 0


class MetricsSnapshot(BaseModel):
    """Read-only view over the collector state."""

    model_config = ConfigDict(populate_by_name=True)

    uptime_seconds: int = Field(..., alias="uptimeSeconds")
    request_count: int = Field(..., alias="requestCount")
    cache_hits: int = Field(..., alias="cacheHits")
    cache_misses: int = Field(..., alias="cacheMisses")
    safety_blocks: int = Field(..., alias="safetyBlocks")
    upstream_failures: int = Field(..., alias="upstreamFailures")
    latency: LatencySummary


def percentile(p: float, values: list[float]) -> float:
    """Nearest-rank-below percentile: index floor(p/100 * (n-1)) of the sorted values."""
    if not values:
        return 0
    ordered = sorted(values)
    return ordered[int((p / 100) * (len(ordered) - 1))]


class MetricsCollector:
    """
    Collects /order counters and latency samples.

    Mutated only from the event loop thread, so no locking.
    """

    def __init__(self, window: int = 200, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self.started_at = clock()
        self.requests = 0
        self.hits = 0
        self.misses = 0
        self.safety_blocks = 0
        self.upstream_failures = 0
        self.durations: deque[float] = deque(maxlen=window)

    def order_request(self) -> None:
        self.requests += 1

    def cache_hit(self) -> None:
        self.hits += 1

    def cache_miss(self) -> None:
        self.misses += 1

    def safety_block(self) -> None:
        self.safety_blocks += 1

    def upstream_failure(self) -> None:
        self.upstream_failures += 1

    def observe(self, ms: float) -> None:
        self.durations.append(ms)

    def snapshot(self) -> MetricsSnapshot:
        samples = list(self.durations)
        avg = round(sum(samples) / len(samples)) if samples else 0
        return MetricsSnapshot(
            uptime_seconds=int(self._clock() - self.started_at),
            request_count=self.requests,
            cache_hits=self.hits,
            cache_misses=self.misses,
            safety_blocks=self.safety_blocks,
            upstream_failures=self.upstream_failures,
            latency=LatencySummary(
                avg=avg,
                p50=percentile(50, samples),
                p95=percentile(95, samples),
            ),
        )
