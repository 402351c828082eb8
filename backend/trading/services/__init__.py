"""Business services."""

from trading.services.order_service import OrderQuote, OrderService
from trading.services.expiry_tracker import ExpiryTracker

__all__ = [
    "OrderQuote",
    "OrderService",
    "ExpiryTracker",
]
