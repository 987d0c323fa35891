"""HTTP controllers for the non-custodial proxy."""

from cerberus.web.controllers import metrics, orders, tokens

__all__ = ["metrics", "orders", "tokens"]
