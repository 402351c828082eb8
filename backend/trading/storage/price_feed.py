"""In-memory price feed.

Implements settlement.protocols.PriceFeed over recorded (timestamp,
price) ticks per asset. price_at() returns the last price recorded at
or before the requested second, i.e. the price "as of" that instant.
"""

from __future__ import annotations

import bisect
from decimal import Decimal


class InMemoryPriceFeed:
    """Per-asset sorted price history."""

    def __init__(self) -> None:
        self._timestamps: dict[str, list[int]] = {}
        self._prices: dict[str, list[Decimal]] = {}

    def record(self, asset_id: str, timestamp: int, price: Decimal | str | int) -> None:
        """Record a price tick. A tick at an existing second replaces it."""
        ts_list = self._timestamps.setdefault(asset_id, [])
        price_list = self._prices.setdefault(asset_id, [])
        value = Decimal(str(price))

        idx = bisect.bisect_left(ts_list, timestamp)
        if idx < len(ts_list) and ts_list[idx] == timestamp:
            price_list[idx] = value
        else:
            ts_list.insert(idx, timestamp)
            price_list.insert(idx, value)

    async def price_at(self, asset_id: str, timestamp: int) -> Decimal | None:
        ts_list = self._timestamps.get(asset_id)
        if not ts_list:
            return None
        idx = bisect.bisect_right(ts_list, timestamp)
        if idx == 0:
            return None
        return self._prices[asset_id][idx - 1]
