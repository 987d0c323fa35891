"""Jupiter aggregator client with retry and multi-backend fallback.

Quote API docs: https://station.jup.ag/docs/apis/swap-api

Quotes are idempotent, so they are retried and failed over across the
configured mirrors. Builds embed a recent blockhash and are sent once.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from cerberus.errors import (
    UpstreamError,
    UpstreamPermanentError,
    UpstreamTransientError,
    UpstreamUnavailable,
)
from cerberus.routing.base import RETRYABLE_STATUSES, SwapQuoteRequest

logger = logging.getLogger(__name__)

# Well-known mint addresses on Solana mainnet, accepted by symbol
SOLANA_TOKENS = {
    "SOL": "So11111111111111111111111111111111111111112",  # Wrapped SOL
    "USDT": "Es9vMFrzaCERmJfrF4H2FYD4KCoNkY11McCe8BenwNYB",
    "USDC": "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v",
    "RAY": "4k3Dyjzvzp8eMZWUXbBCjEvwSkkk59S5iCNLY3QrkX6R",
    "ORCA": "orcaEKTdK7LKz57vaAYr9QeNsVEPfiu6QeMU1kektZE",
    "JUP": "JUPyiwrYJFskUPiHa7hkeR8VUtAeFoSYbKedZNsDvCN",
    "BONK": "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263",
    "WIF": "EKpQGSJtjMFqKZ9KQanSqYXRcF8fBopzLHYxdM65zcjm",
    "PYTH": "HZ1JovNiVvGrGNiiYvEozEVgZ58xaU3RKwX8eACQBCt3",
    "MSOL": "mSoLzYCxHdYgdzU16g5QSh3i5K3z3KZK7ytfqcJm7So",
}

# Fields copied from the upstream build response. Anything else, signed
# payloads included, is dropped.
BUILD_PASSTHROUGH_FIELDS = (
    "lastValidBlockHeight",
    "prioritizationFeeLamports",
    "computeUnitLimit",
)

Sleep = Callable[[float], Awaitable[Any]]


def route_labels(quote: dict) -> list[str]:
    """DEX labels of each hop in the quote's routePlan."""
    labels = []
    for step in quote.get("routePlan") or []:
        if not isinstance(step, dict):
            continue
        swap_info = step.get("swapInfo") or {}
        labels.append(swap_info.get("label") or "Unknown")
    return labels


def out_amount(quote: dict) -> Optional[str]:
    """Output amount in base units, if the quote carries one."""
    value = quote.get("outAmount")
    return str(value) if value is not None else None


def _json_object(response: httpx.Response, backend: str) -> dict:
    """Decode a success body, rejecting anything but a JSON object."""
    try:
        data = response.json()
    except ValueError:
        raise UpstreamPermanentError(
            f"Upstream returned non-JSON body (status {response.status_code})",
            status=response.status_code,
            body=response.text,
            backend=backend,
        )
    if not isinstance(data, dict):
        raise UpstreamPermanentError(
            "Upstream returned a JSON value that is not an object",
            status=response.status_code,
            body=response.text,
            backend=backend,
        )
    return data


def _status_error(response: httpx.Response, backend: str, action: str) -> UpstreamError:
    message = f"{action} failed: {response.status_code}"
    if response.status_code in RETRYABLE_STATUSES:
        return UpstreamTransientError(
            message, status=response.status_code, body=response.text, backend=backend
        )
    return UpstreamPermanentError(
        message, status=response.status_code, body=response.text, backend=backend
    )


class JupiterClient:
    """Quote and build client for the Jupiter swap API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        backends: list[str],
        build_url: str,
        api_key: Optional[str] = None,
        max_attempts: int = 3,
        backoff_seconds: float = 0.12,
        sleep: Sleep = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            http: Shared httpx client (owns timeout and connection pool)
            backends: Quote API base URLs in priority order
            build_url: Full URL of the swap build endpoint
            api_key: Optional key, sent to the build endpoint only
            max_attempts: Attempts per backend for transient failures
            backoff_seconds: Linear backoff step (step * attempt number)
            sleep: Delay function, replaceable in tests
        """
        if not backends:
            raise ValueError("At least one quote backend is required")
        self.http = http
        self.backends = [b.rstrip("/") for b in backends]
        self.build_url = build_url
        self.api_key = api_key
        self.max_attempts = max(1, max_attempts)
        self.backoff_seconds = backoff_seconds
        self._sleep = sleep

    @property
    def name(self) -> str:
        return "Jupiter"

    def _build_headers(self) -> dict:
        headers = {"Accept": "application/json", "Content-Type": "application/json"}
        if self.api_key:
            headers["x-api-key"] = self.api_key
        return headers

    async def fetch_quote(self, request: SwapQuoteRequest) -> dict:
        """Fetch a quote, walking the backend list until one succeeds.

        Raises:
            UpstreamUnavailable: every backend failed; carries one failure
                record per backend.
        """
        failures = []
        for backend in self.backends:
            try:
                return await self._quote_from(backend, request)
            except UpstreamError as e:
                logger.warning(f"Quote backend {backend} failed: {e.message}")
                failures.append(e.describe())

        logger.error(
            f"No quote for {request.input_mint}->{request.output_mint}: "
            f"all {len(self.backends)} backend(s) failed"
        )
        raise UpstreamUnavailable(failures)

    async def _quote_from(self, backend: str, request: SwapQuoteRequest) -> dict:
        """Try one backend up to max_attempts times.

        Transient errors are retried with linear backoff; a permanent error
        is raised immediately so the caller moves on to the next backend.
        """
        url = f"{backend}/quote"
        last_error: Optional[UpstreamError] = None

        for attempt in range(1, self.max_attempts + 1):
            try:
                response = await self.http.get(
                    url,
                    params=request.to_query(),
                    headers={"Accept": "application/json"},
                )
            except httpx.TimeoutException as e:
                last_error = UpstreamTransientError(f"Quote timed out: {e}", backend=backend)
            except httpx.TransportError as e:
                last_error = UpstreamTransientError(
                    f"Quote connection error: {type(e).__name__}: {e}", backend=backend
                )
            else:
                if response.is_success:
                    quote = _json_object(response, backend)
                    logger.debug(
                        f"Quote from {backend} (attempt {attempt}): "
                        f"out={out_amount(quote)} route={' > '.join(route_labels(quote)) or '-'}"
                    )
                    return quote
                last_error = _status_error(response, backend, "Quote")
                if isinstance(last_error, UpstreamPermanentError):
                    raise last_error

            if attempt < self.max_attempts:
                logger.warning(
                    f"Transient quote failure from {backend} "
                    f"(attempt {attempt}/{self.max_attempts}): {last_error.message}"
                )
                await self._sleep(self.backoff_seconds * attempt)

        raise last_error

    async def build_transaction(
        self,
        quote: dict,
        user_public_key: str,
        slippage_bps: int,
    ) -> dict:
        """Build an unsigned swap transaction for the signer.

        Sent once: a retried build can embed a stale blockhash.

        Returns:
            Dict with ``unsignedTransactionBase64`` plus whitelisted
            metadata from the upstream response.
        """
        body = {
            "quoteResponse": quote,
            "userPublicKey": user_public_key,
            "wrapAndUnwrapSol": True,
            "slippageBps": slippage_bps,
            "asLegacyTransaction": False,
            "dynamicComputeUnitLimit": True,
        }

        try:
            response = await self.http.post(self.build_url, json=body, headers=self._build_headers())
        except httpx.TimeoutException as e:
            raise UpstreamTransientError(f"Swap build timed out: {e}", backend=self.build_url)
        except httpx.TransportError as e:
            raise UpstreamTransientError(
                f"Swap build connection error: {type(e).__name__}: {e}", backend=self.build_url
            )

        if not response.is_success:
            raise _status_error(response, self.build_url, "Swap build")

        data = _json_object(response, self.build_url)
        unsigned = data.get("swapTransaction")
        if not isinstance(unsigned, str) or not unsigned:
            raise UpstreamPermanentError(
                "Swap build response missing swapTransaction",
                status=response.status_code,
                body=response.text,
                backend=self.build_url,
            )

        result = {"unsignedTransactionBase64": unsigned}
        for field in BUILD_PASSTHROUGH_FIELDS:
            if field in data:
                result[field] = data[field]
        return result
