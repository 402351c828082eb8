"""Storage adapters."""

from trading.storage.order_repo import InMemoryOrderRepository
from trading.storage.price_feed import InMemoryPriceFeed

__all__ = [
    "InMemoryOrderRepository",
    "InMemoryPriceFeed",
]
