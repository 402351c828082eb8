"""Expiry tracking for pending orders.

Holds PENDING orders and settles each one once the supplied time
reaches its expiry. Intended to be driven by an external scheduler
(timer, polling job, queue consumer) calling check(now).

Rules:
- An order is due when now >= expiry_timestamp
- Each order is settled at most once; DoubleSettlement from a duplicate
  trigger drops the order without changing it
- If no exit price is available yet, or settlement fails for any other
  reason, the order stays pending and is retried on the next check
- A failing callback does not stop the others
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from settlement.errors import DoubleSettlement, PriceUnavailable
from settlement.models import Order
from trading.services.order_service import OrderService

logger = logging.getLogger(__name__)

OnSettledCallback = Callable[[Order], Awaitable[None]]


class ExpiryTracker:
    """Track pending orders and settle them when they expire."""

    def __init__(self, order_service: OrderService):
        self._service = order_service
        self._pending: dict[str, Order] = {}
        self._callbacks: list[OnSettledCallback] = []
        self._lock = asyncio.Lock()
        self._settled_count = 0

    def on_settled(self, callback: OnSettledCallback) -> None:
        """Register callback for settled orders.

        Note: Duplicate callbacks are ignored.
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def off_settled(self, callback: OnSettledCallback) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    def add_order(self, order: Order) -> None:
        """Add a PENDING order to track. Terminal orders are ignored."""
        if order.is_terminal:
            logger.debug(f"Order {order.id} already {order.outcome.value}, not tracked")
            return
        self._pending[order.id] = order

    async def load_pending(self) -> int:
        """Load pending orders from the order repository."""
        repo = self._service.order_repo
        if repo is None:
            return 0
        orders = await repo.get_pending()
        async with self._lock:
            for order in orders:
                self._pending[order.id] = order
        logger.info(f"Loaded {len(orders)} pending orders")
        return len(orders)

    def next_expiry(self) -> int | None:
        """Earliest expiry among tracked orders, for scheduling the next check."""
        if not self._pending:
            return None
        return min(o.expiry_timestamp for o in self._pending.values())

    async def check(self, now: int | None = None) -> list[Order]:
        """Settle every tracked order whose expiry has been reached.

        Returns:
            Orders settled by this call
        """
        ts = now if now is not None else self._service.clock.now()
        settled: list[Order] = []

        async with self._lock:
            due = sorted(
                (o for o in self._pending.values() if o.is_expired(ts)),
                key=lambda o: o.expiry_timestamp,
            )
            for order in due:
                try:
                    result = await self._service.settle_order(order, now=ts)
                except DoubleSettlement:
                    self._pending.pop(order.id, None)
                    continue
                except PriceUnavailable as e:
                    logger.warning(f"Order {order.id} not settled yet: {e}")
                    continue
                except Exception as e:
                    logger.error(f"Error settling order {order.id}: {e}")
                    continue

                self._pending.pop(order.id, None)
                self._settled_count += 1
                settled.append(result)

        for result in settled:
            for callback in self._callbacks:
                try:
                    await callback(result)
                except Exception as e:
                    logger.error(f"Settled callback error for {result.id}: {e}")

        return settled

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    @property
    def settled_count(self) -> int:
        return self._settled_count
