"""Swap request types shared by the upstream client and the order service."""

from dataclasses import dataclass

from cerberus.cache.keys import build_key, quote_key

# Statuses worth retrying against the same backend
RETRYABLE_STATUSES = frozenset({429, 500, 502, 503, 504})


@dataclass(frozen=True)
class SwapQuoteRequest:
    """A validated quote request.

    ``amount`` stays a digit string in base units so it is forwarded
    upstream exactly as received.
    """

    input_mint: str
    output_mint: str
    amount: str
    slippage_bps: int

    @property
    def build_tx(self) -> bool:
        return False

    def to_query(self) -> dict:
        """Upstream /quote query parameters."""
        return {
            "inputMint": self.input_mint,
            "outputMint": self.output_mint,
            "amount": self.amount,
            "slippageBps": str(self.slippage_bps),
        }

    def quote_key(self) -> str:
        return quote_key(self.input_mint, self.output_mint, self.amount, self.slippage_bps)

    def cache_key(self) -> str:
        return self.quote_key()


@dataclass(frozen=True)
class BuildRequest(SwapQuoteRequest):
    """Quote request that also asks for an unsigned transaction."""

    user_public_key: str = ""

    @property
    def build_tx(self) -> bool:
        return True

    def cache_key(self) -> str:
        return build_key(
            self.input_mint,
            self.output_mint,
            self.amount,
            self.slippage_bps,
            self.user_public_key,
        )
