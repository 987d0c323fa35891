"""FastAPI application factory."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cerberus.config import Settings, get_settings
from cerberus.context import ProxyContext, build_context
from cerberus.errors import CerberusError


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    owned = app.state.context is None
    if owned:
        app.state.context = build_context(app.state.settings)
    yield
    # Shutdown
    if owned:
        await app.state.context.aclose()
        app.state.context = None


async def cerberus_error_handler(request: Request, exc: CerberusError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(
    settings: Optional[Settings] = None,
    context: Optional[ProxyContext] = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to environment)
        context: Pre-built services; when omitted they are built on startup
            and closed on shutdown
    """
    settings = settings or (context.settings if context else get_settings())

    app = FastAPI(
        title="Cerberus API",
        description="Non-custodial swap proxy for the Jupiter aggregator",
        version="0.1.0",
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.settings = settings
    app.state.context = context

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=["x-cache"],
    )

    app.add_exception_handler(CerberusError, cerberus_error_handler)

    # Register routes
    from cerberus.api.routes import health
    from cerberus.web.controllers import metrics, orders, tokens

    app.include_router(health.router, tags=["Health"])
    app.include_router(orders.router)
    app.include_router(metrics.router)
    app.include_router(tokens.router)

    return app


# Default app instance
app = create_app()
