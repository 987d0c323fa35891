"""Token safety gate.

Decides whether an asset pair may be quoted or built, before any upstream
work happens. Checks run in a fixed order:

1. Denylist (BLOCKED_MINTS): either mint listed -> BLOCKED
2. Allowlist (ALLOWED_MINTS): when non-empty, both mints must be listed
   -> otherwise NOT_ALLOWED
3. Optional risk signal (SHIELD_BASE): a flagged pair -> FLAGGED

The risk signal is best effort. If it cannot be reached or answers with
anything unusable, the pair is allowed: a degraded third party must never
block legitimate swaps.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Iterable, Optional

import httpx

from cerberus.cache.base import SharedCache
from cerberus.cache.keys import shield_key

logger = logging.getLogger(__name__)

BLOCKED = "BLOCKED"
NOT_ALLOWED = "NOT_ALLOWED"
FLAGGED = "FLAGGED"


@dataclass(frozen=True)
class GateResult:
    """Outcome of a safety check."""

    allowed: bool
    code: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def allow(cls) -> "GateResult":
        return cls(allowed=True)

    @classmethod
    def deny(cls, code: str, reason: str) -> "GateResult":
        return cls(allowed=False, code=code, reason=reason)

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str) -> "GateResult":
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError("Gate decision is not a JSON object")
        return cls(
            allowed=bool(data.get("allowed")),
            code=data.get("code"),
            reason=data.get("reason"),
        )


def _mentions_flag(data) -> bool:
    # Any mention of a flag anywhere in the signal body counts
    return "flag" in json.dumps(data).lower()


class SafetyGate:
    """Policy check run before every quote or build."""

    def __init__(
        self,
        blocked: Iterable[str] = (),
        allowed: Iterable[str] = (),
        http: Optional[httpx.AsyncClient] = None,
        shield_base: Optional[str] = None,
        cache: Optional[SharedCache] = None,
        cache_ttl: int = 60,
    ):
        """Initialize the gate.

        Args:
            blocked: Mints that are always rejected
            allowed: If non-empty, the only mints accepted
            http: Client for the risk signal (required with shield_base)
            shield_base: Risk signal base URL; None/empty disables the signal
            cache: Shared store memoizing signal decisions
            cache_ttl: Seconds a signal decision is memoized
        """
        self.blocked = frozenset(blocked)
        self.allowed = frozenset(allowed)
        self.http = http
        self.shield_base = shield_base.rstrip("/") if shield_base else None
        self.cache = cache
        self.cache_ttl = cache_ttl

    @property
    def signal_enabled(self) -> bool:
        return bool(self.shield_base and self.http is not None)

    async def check(self, input_mint: str, output_mint: str) -> GateResult:
        """Run the policy checks for a pair."""
        if input_mint in self.blocked or output_mint in self.blocked:
            return GateResult.deny(BLOCKED, "Mint blocked by policy")

        if self.allowed and (input_mint not in self.allowed or output_mint not in self.allowed):
            return GateResult.deny(NOT_ALLOWED, "Mint not in allowlist")

        if not self.signal_enabled:
            return GateResult.allow()

        return await self._check_signal(input_mint, output_mint)

    async def _check_signal(self, input_mint: str, output_mint: str) -> GateResult:
        key = shield_key(input_mint, output_mint)

        if self.cache is not None:
            cached = await self.cache.get(key)
            if cached:
                try:
                    return GateResult.from_json(cached)
                except ValueError:
                    logger.warning(f"Discarding unreadable gate decision cached under {key}")

        try:
            response = await self.http.get(
                f"{self.shield_base}/shield",
                params={"mints": f"{input_mint},{output_mint}"},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.warning(f"Risk signal unreachable, allowing {input_mint}->{output_mint}: {e}")
            return GateResult.allow()

        if not response.is_success:
            logger.warning(
                f"Risk signal returned {response.status_code}, "
                f"allowing {input_mint}->{output_mint}"
            )
            return GateResult.allow()

        try:
            data = response.json()
        except ValueError:
            logger.warning(f"Risk signal returned non-JSON, allowing {input_mint}->{output_mint}")
            return GateResult.allow()

        if _mentions_flag(data):
            result = GateResult.deny(FLAGGED, "Token failed safety check")
            logger.info(f"Risk signal flagged {input_mint}->{output_mint}")
        else:
            result = GateResult.allow()

        if self.cache is not None:
            await self.cache.set(key, result.to_json(), self.cache_ttl)
        return result
