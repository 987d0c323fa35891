"""Utility modules."""

from cerberus.utils.ratelimit import RateLimiter

__all__ = ["RateLimiter"]
