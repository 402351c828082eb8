"""Collaborator protocols for order persistence and prices.

Any storage backend or price source (database, cache, in-memory replay)
can implement these to be used by the order service.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from settlement.models.order import Order


@runtime_checkable
class OrderRepository(Protocol):
    """Protocol that order storage backends must implement."""

    async def save(self, order: Order) -> None:
        """Persist a new or settled order."""
        ...

    async def get_by_id(self, order_id: str) -> Order | None:
        """Get a single order by its ID."""
        ...

    async def get_pending(self, asset_id: str | None = None) -> list[Order]:
        """Get all orders that have not been settled."""
        ...


@runtime_checkable
class PriceFeed(Protocol):
    """Protocol for asset price lookups."""

    async def price_at(self, asset_id: str, timestamp: int) -> Decimal | None:
        """Price of the asset at the given second, or None if unknown."""
        ...
