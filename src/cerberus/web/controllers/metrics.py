"""Metrics endpoint."""

from fastapi import APIRouter, Depends

from cerberus.api.deps import get_context
from cerberus.context import ProxyContext
from cerberus.monitoring.metrics import MetricsSnapshot

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_model=MetricsSnapshot, response_model_by_alias=True)
async def get_metrics(context: ProxyContext = Depends(get_context)) -> MetricsSnapshot:
    """Counters and latency percentiles for /order."""
    return context.metrics.snapshot()
