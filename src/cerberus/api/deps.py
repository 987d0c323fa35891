"""FastAPI dependencies."""

from fastapi import Depends, Request

from cerberus.context import ProxyContext


def get_context(request: Request) -> ProxyContext:
    """Resolve the proxy context from FastAPI app state."""
    context = getattr(request.app.state, "context", None)
    if context is None:
        raise RuntimeError("Proxy context is not initialized in app.state.context")
    return context


async def enforce_rate_limit(
    request: Request,
    context: ProxyContext = Depends(get_context),
) -> None:
    """Per-IP throttle; raises RateLimited when over budget."""
    client = request.client.host if request.client else "unknown"
    context.rate_limiter.hit(client)
