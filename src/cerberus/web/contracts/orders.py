"""Order request parsing and response contracts."""

import re
from typing import Mapping, Optional, Union

from pydantic import BaseModel, Field

from cerberus.errors import ClientInputError
from cerberus.routing.base import BuildRequest, SwapQuoteRequest
from cerberus.routing.jupiter import SOLANA_TOKENS

# Base58 alphabet (no 0, O, I, l), 32-64 characters
ADDRESS_RE = re.compile(r"^[1-9A-HJ-NP-Za-km-z]{32,64}$")
DIGITS_RE = re.compile(r"^[0-9]+$")

MAX_SLIPPAGE_BPS = 10_000


def _require(query: Mapping[str, str], key: str) -> str:
    value = query.get(key)
    if not isinstance(value, str) or not value.strip():
        raise ClientInputError(key)
    return value.strip()


def resolve_mint(value: str) -> str:
    """Map a well-known symbol (SOL, USDC...) to its mint, else return as-is."""
    return SOLANA_TOKENS.get(value.upper(), value)


def _address(query: Mapping[str, str], key: str, resolve: bool = True) -> str:
    raw = _require(query, key)
    value = resolve_mint(raw) if resolve else raw
    if not ADDRESS_RE.match(value):
        raise ClientInputError(key, f"Param '{key}' must be a base58 address")
    return value


def _digits(query: Mapping[str, str], key: str) -> str:
    value = _require(query, key)
    if not DIGITS_RE.match(value):
        raise ClientInputError(key, f"Param '{key}' must be a non-negative integer")
    return value


def parse_order_params(query: Mapping[str, str]) -> Union[SwapQuoteRequest, BuildRequest]:
    """Validate /order query parameters.

    Raises:
        ClientInputError: naming the first missing or malformed field
    """
    input_mint = _address(query, "inputMint")
    output_mint = _address(query, "outputMint")
    amount = _digits(query, "amount")
    slippage_bps = int(_digits(query, "slippageBps"))
    if slippage_bps > MAX_SLIPPAGE_BPS:
        raise ClientInputError("slippageBps", f"Param 'slippageBps' must be <= {MAX_SLIPPAGE_BPS}")

    build_tx = str(query.get("buildTx") or "").strip().lower() == "true"
    if not build_tx:
        return SwapQuoteRequest(input_mint, output_mint, amount, slippage_bps)

    user_public_key = _address(query, "userPublicKey", resolve=False)
    return BuildRequest(input_mint, output_mint, amount, slippage_bps, user_public_key)


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable message")
    field: Optional[str] = Field(None, description="Offending parameter (400 only)")


class HealthResponse(BaseModel):
    ok: bool = True
    status: str = "healthy"
    service: str = "cerberus"
    backends: list[str] = Field(default_factory=list)
    build: str
    lite: str
    shield: Optional[str] = None
    apiKey: bool = False
    sharedCache: str = "memory"
