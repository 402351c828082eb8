"""Engine data models."""

from settlement.models.config import AssetTradingConfig
from settlement.models.order import Direction, Order, Outcome, generate_order_id

__all__ = [
    "AssetTradingConfig",
    "Direction",
    "Order",
    "Outcome",
    "generate_order_id",
]
