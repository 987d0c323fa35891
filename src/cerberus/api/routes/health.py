"""Health check endpoints."""

from fastapi import APIRouter, Depends

from cerberus.api.deps import get_context
from cerberus.context import ProxyContext
from cerberus.web.contracts.orders import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health_check(context: ProxyContext = Depends(get_context)) -> HealthResponse:
    """Service status and configured upstream addresses."""
    settings = context.settings
    return HealthResponse(
        backends=context.upstream.backends,
        build=context.upstream.build_url,
        lite=settings.lite_base,
        shield=context.gate.shield_base,
        apiKey=bool(settings.jup_api_key),
        sharedCache=context.shared_cache.backend,
    )


@router.get("/health/detailed")
async def detailed_health(context: ProxyContext = Depends(get_context)):
    """Detailed health check with configuration info."""
    return {
        "status": "healthy",
        "service": "cerberus",
        "version": "0.1.0",
        "config": context.settings.get_safe_dict(),
    }
