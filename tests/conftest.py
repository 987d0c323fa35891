"""Pytest configuration and fixtures."""

import os
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient

# Set test environment
os.environ["ENVIRONMENT"] = "test"
os.environ["DEBUG"] = "false"
os.environ.pop("REDIS_URL", None)

from cerberus.config import Settings
from cerberus.context import ProxyContext
from tests.helpers import FakeUpstream, api_client, default_upstream, make_context, make_settings


@pytest.fixture
def upstream() -> FakeUpstream:
    """Fake aggregator answering quotes and builds."""
    return default_upstream()


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest_asyncio.fixture
async def context(settings, upstream) -> AsyncGenerator[ProxyContext, None]:
    """Proxy services wired to the fake upstream."""
    ctx = make_context(settings, upstream)
    yield ctx
    await ctx.aclose()


@pytest_asyncio.fixture
async def client(context) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client."""
    async with api_client(context) as ac:
        yield ac
