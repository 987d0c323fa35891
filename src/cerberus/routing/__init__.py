"""Upstream aggregator access (quotes and unsigned transaction builds)."""

from cerberus.routing.base import RETRYABLE_STATUSES, BuildRequest, SwapQuoteRequest
from cerberus.routing.jupiter import JupiterClient, out_amount, route_labels

__all__ = [
    "RETRYABLE_STATUSES",
    "SwapQuoteRequest",
    "BuildRequest",
    "JupiterClient",
    "route_labels",
    "out_amount",
]
