"""In-memory order repository.

Implements settlement.protocols.OrderRepository. Used by the CLI and
tests; a database-backed repository can replace it without changes to
the order service.
"""

from __future__ import annotations

import asyncio
import logging

from settlement.models import Order

logger = logging.getLogger(__name__)


class InMemoryOrderRepository:
    """Orders keyed by id, guarded by an asyncio lock."""

    def __init__(self) -> None:
        self._orders: dict[str, Order] = {}
        self._lock = asyncio.Lock()

    async def save(self, order: Order) -> None:
        async with self._lock:
            existing = self._orders.get(order.id)
            if existing is not None and existing.is_terminal and existing != order:
                # Terminal orders are immutable
                raise ValueError(f"order {order.id} is already terminal")
            self._orders[order.id] = order

    async def get_by_id(self, order_id: str) -> Order | None:
        return self._orders.get(order_id)

    async def get_pending(self, asset_id: str | None = None) -> list[Order]:
        return [
            o
            for o in self._orders.values()
            if not o.is_terminal and (asset_id is None or o.asset_id == asset_id)
        ]

    def __len__(self) -> int:
        return len(self._orders)
