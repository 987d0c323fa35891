"""Token list and shield passthrough endpoints."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from cerberus.api.deps import get_context
from cerberus.context import ProxyContext
from cerberus.errors import ClientInputError
from cerberus.web.services.passthrough_service import ProxiedResponse

router = APIRouter(tags=["tokens"])


def _relay(proxied: ProxiedResponse) -> JSONResponse:
    return JSONResponse(
        status_code=proxied.status_code,
        content=proxied.body,
        headers=proxied.headers,
    )


@router.get("/tokens")
async def get_tokens(context: ProxyContext = Depends(get_context)) -> JSONResponse:
    """Relay the upstream token list."""
    return _relay(await context.passthrough.get_tokens())


@router.get("/shield")
async def get_shield(
    mints: str = Query(default=""),
    context: ProxyContext = Depends(get_context),
) -> JSONResponse:
    """Relay the upstream shield (risk warnings) lookup for comma-separated mints."""
    if not mints.strip():
        raise ClientInputError("mints")
    return _relay(await context.passthrough.get_shield(mints.strip()))
