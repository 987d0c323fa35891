"""Order API endpoint.

GET /order returns a quote, or a quote merged with an unsigned transaction
when buildTx=true. Signing always happens in the caller's wallet.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from cerberus.api.deps import enforce_rate_limit, get_context
from cerberus.context import ProxyContext
from cerberus.web.contracts.orders import ErrorResponse, parse_order_params

router = APIRouter(tags=["orders"])


@router.get(
    "/order",
    dependencies=[Depends(enforce_rate_limit)],
    responses={
        400: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        429: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def get_order(request: Request, context: ProxyContext = Depends(get_context)) -> JSONResponse:
    """Quote (and optionally build) a swap.

    Query: inputMint, outputMint, amount, slippageBps, and optionally
    buildTx=true with userPublicKey. The x-cache header reports HIT or MISS.
    """
    order = parse_order_params(request.query_params)
    result = await context.orders.get_order(order)
    return JSONResponse(content=result.payload, headers={"x-cache": result.cache_status})
