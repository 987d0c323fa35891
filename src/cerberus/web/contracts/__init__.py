"""Request parsing and response contracts for the HTTP boundary."""

from cerberus.web.contracts.orders import (
    ErrorResponse,
    HealthResponse,
    parse_order_params,
    resolve_mint,
)

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "parse_order_params",
    "resolve_mint",
]
