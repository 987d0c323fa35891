"""Read-only passthrough to the token list and shield endpoints.

Relays the upstream status and body. No caching and no interpretation.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from cerberus.errors import UpstreamPermanentError

logger = logging.getLogger(__name__)

# Upstream headers safe to relay
FORWARDED_HEADERS = ("cache-control", "etag")


@dataclass
class ProxiedResponse:
    status_code: int
    body: Any
    headers: dict = field(default_factory=dict)


class PassthroughService:
    """Forwards GET requests to the lite API."""

    def __init__(self, http: httpx.AsyncClient, base_url: str):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def get_tokens(self) -> ProxiedResponse:
        return await self._forward("/tokens")

    async def get_shield(self, mints: str) -> ProxiedResponse:
        return await self._forward("/shield", params={"mints": mints})

    async def _forward(self, path: str, params: Optional[dict] = None) -> ProxiedResponse:
        url = f"{self.base_url}{path}"
        try:
            response = await self.http.get(url, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Passthrough {path} failed: {type(e).__name__}: {e}")
            raise UpstreamPermanentError(str(e) or "Upstream error", backend=url)

        headers = {
            name: response.headers[name] for name in FORWARDED_HEADERS if name in response.headers
        }

        content_type = response.headers.get("content-type", "").lower()
        body: Any = None
        if "application/json" in content_type:
            try:
                body = response.json()
            except ValueError:
                body = None
            if body is None:
                body = {"ok": False, "status": response.status_code}
        else:
            body = {"ok": response.is_success, "status": response.status_code, "body": response.text}

        return ProxiedResponse(status_code=response.status_code, body=body, headers=headers)
