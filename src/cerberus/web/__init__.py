"""Web boundary layer for non-custodial operations.

SECURITY PRINCIPLES:
1. Nothing in this layer holds keys or signs transactions.
2. Build responses expose only the unsigned transaction; any signed field
   an upstream might return is dropped before caching.
3. All operations are read-only or prepare data for client-side signing.
"""

__all__ = [
    "contracts",
    "services",
    "controllers",
]
