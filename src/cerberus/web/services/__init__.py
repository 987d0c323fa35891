"""Service layer behind the HTTP controllers."""

from cerberus.web.services.order_service import OrderResult, OrderService
from cerberus.web.services.passthrough_service import PassthroughService, ProxiedResponse

__all__ = [
    "OrderResult",
    "OrderService",
    "PassthroughService",
    "ProxiedResponse",
]
