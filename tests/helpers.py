"""Shared fakes and constants for the test suite."""

import json
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional

import httpx
from httpx import ASGITransport, AsyncClient

from cerberus.cache.memory import MemorySharedCache
from cerberus.config import Settings
from cerberus.context import ProxyContext, build_context

SOL_MINT = "So11111111111111111111111111111111111111112"
USDC_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
BONK_MINT = "DezXAZ8z7PnrnRJjz3wXBoRgixCa6xjnB7YaB1pPB263"
WALLET_A = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
WALLET_B = "9WzDXwBbmkg8ZTbNMqUxvQRAyrZzDsGYdLVL9zYtAWWM"

PRIMARY = "https://primary.test/v6"
SECONDARY = "https://secondary.test/v6"
BUILD_URL = "https://primary.test/v6/swap"
LITE_BASE = "https://lite.test"
SHIELD_BASE = "https://shield.test"

QUOTE_BODY = {
    "inputMint": SOL_MINT,
    "outputMint": USDC_MINT,
    "inAmount": "1000000",
    "outAmount": "171234",
    "slippageBps": 50,
    "priceImpactPct": "0.0001",
    "routePlan": [{"swapInfo": {"ammKey": "amm1", "label": "Orca"}, "percent": 100}],
    "contextSlot": 1,
}


def respond(status_code: int = 200, json=None, text=None, headers=None) -> Callable:
    """Responder building a fresh httpx.Response per request."""

    def _make(request: httpx.Request) -> httpx.Response:
        if text is not None:
            return httpx.Response(status_code, text=text, headers=headers, request=request)
        return httpx.Response(status_code, json=json, headers=headers, request=request)

    return _make


def connect_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def timeout_error(request: httpx.Request) -> httpx.Response:
    raise httpx.ReadTimeout("timed out", request=request)


def build_body(wallet: str) -> dict:
    return {
        "swapTransaction": f"unsigned-tx-for-{wallet}",
        "lastValidBlockHeight": 279_000_000,
        "prioritizationFeeLamports": 5000,
    }


def echo_build(request: httpx.Request) -> httpx.Response:
    """Build responder returning a transaction addressed to the requested signer."""
    payload = json.loads(request.content)
    return httpx.Response(200, json=build_body(payload["userPublicKey"]), request=request)


class FakeUpstream:
    """Routes mocked requests by (host, path suffix).

    Each route holds a queue of responders; the last one repeats.
    """

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], list[Callable]] = {}

    def on(self, base_url: str, endpoint: str, *responders: Callable) -> "FakeUpstream":
        host = httpx.URL(base_url).host
        self.routes[(host, endpoint)] = list(responders)
        return self

    def calls(self, endpoint: str, base_url: Optional[str] = None) -> list[httpx.Request]:
        host = httpx.URL(base_url).host if base_url else None
        return [
            r for r in self.requests
            if r.url.path.endswith(endpoint) and (host is None or r.url.host == host)
        ]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (host, endpoint), responders in self.routes.items():
            if request.url.host == host and request.url.path.endswith(endpoint):
                responder = responders.pop(0) if len(responders) > 1 else responders[0]
                return responder(request)
        return httpx.Response(404, text="not found", request=request)


def default_upstream() -> FakeUpstream:
    """Fake aggregator where every backend answers with QUOTE_BODY."""
    fake = FakeUpstream()
    fake.on(PRIMARY, "/quote", respond(200, json=QUOTE_BODY))
    fake.on(SECONDARY, "/quote", respond(200, json=QUOTE_BODY))
    fake.on(BUILD_URL, "/swap", echo_build)
    return fake


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


async def no_sleep(_seconds: float) -> None:
    return None


def make_settings(**overrides) -> Settings:
    """Settings pointing at the fake upstream hosts."""
    values = dict(
        quote_backends=f"{PRIMARY},{SECONDARY}",
        build_url=BUILD_URL,
        lite_base=LITE_BASE,
        shield_base="",
        redis_url=None,
        rate_limit_per_minute=0,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_context(settings: Settings, upstream: FakeUpstream) -> ProxyContext:
    return build_context(
        settings,
        transport=httpx.MockTransport(upstream),
        shared_cache=MemorySharedCache(),
        sleep=no_sleep,
    )


@asynccontextmanager
async def api_client(context: ProxyContext) -> AsyncGenerator[AsyncClient, None]:
    """Async test client bound to an app using the given context."""
    from cerberus.api.app import create_app

    app = create_app(context=context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
