"""Order creation and settlement pipeline.

Creation:  validate asset/direction/duration/stake → compute expiry →
           persist PENDING
Settlement: check state and expiry → resolve outcome → compute payout →
           persist terminal order

The clock is sampled once per call and the value is threaded through
every downstream calculation.
"""

from __future__ import annotations

import asyncio
import logging
from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from settlement.clock import Clock, SystemClock, ensure_timestamp, is_within_sane_range
from settlement.durations import Duration
from settlement.errors import (
    DoubleSettlement,
    InvalidTimestamp,
    OrderValidationError,
    PriceUnavailable,
    SettlementTooEarly,
    StakeOutOfRange,
)
from settlement.expiry import OrderTiming, plan_order_timing
from settlement.models import AssetTradingConfig, Direction, Order
from settlement.outcome import parse_direction, resolve
from settlement.payout import payout, potential_payout, to_money
from settlement.protocols import OrderRepository, PriceFeed
from trading.asset_config import AssetRegistry
from trading.config import Settings, get_settings

logger = logging.getLogger(__name__)


class OrderQuote(BaseModel):
    """What an order would look like if placed now."""

    model_config = ConfigDict(frozen=True)

    asset_id: str
    direction: Direction
    stake: Decimal
    profit_rate: Decimal
    potential_payout: Decimal
    timing: OrderTiming


class OrderService:
    """
    Create and settle binary-option orders.

    Supports:
    - Deterministic, idempotent order creation (same inputs → same order)
    - Exactly-once settlement (terminal orders are never overwritten)
    - Optional persistence and price feed collaborators
    """

    def __init__(
        self,
        assets: AssetRegistry,
        clock: Clock | None = None,
        order_repo: OrderRepository | None = None,
        price_feed: PriceFeed | None = None,
        settings: Settings | None = None,
    ):
        """
        Args:
            assets: Asset trading configuration lookup
            clock: Time source (SystemClock if None)
            order_repo: Optional order storage
            price_feed: Optional price source for entry/exit prices
            settings: Engine settings (get_settings() if None)
        """
        self.assets = assets
        self.clock = clock or SystemClock()
        self.order_repo = order_repo
        self.price_feed = price_feed
        self.settings = settings or get_settings()

        # Serialises settlement so a duplicate trigger sees the terminal state
        self._settle_lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _resolve_duration(self, config: AssetTradingConfig, duration) -> Duration:
        catalog = config.duration_catalog(self.settings.duration_tolerance_minutes)
        return catalog.resolve(duration)

    def _check_stake(self, config: AssetTradingConfig, stake) -> Decimal:
        try:
            amount = to_money(stake)
        except (ArithmeticError, TypeError, ValueError):
            raise StakeOutOfRange(stake, config.min_stake, config.max_stake) from None
        if not amount.is_finite() or not config.stake_in_range(amount):
            raise StakeOutOfRange(amount, config.min_stake, config.max_stake)
        return amount

    def _resolve_entry(self, entry_timestamp, now: int) -> int:
        if entry_timestamp is None:
            return now
        entry = ensure_timestamp(entry_timestamp)
        if not is_within_sane_range(entry, now, self.settings.max_clock_skew_seconds):
            raise InvalidTimestamp(
                f"entry timestamp {entry} is more than "
                f"{self.settings.max_clock_skew_seconds}s away from now ({now})"
            )
        return entry

    async def _price(self, asset_id: str, timestamp: int) -> Decimal:
        if self.price_feed is None:
            raise PriceUnavailable(f"no price feed configured for '{asset_id}'")
        price = await self.price_feed.price_at(asset_id, timestamp)
        if price is None:
            raise PriceUnavailable(f"no price for '{asset_id}' at {timestamp}")
        return price

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def quote(
        self,
        asset_id: str,
        direction: Direction | str,
        stake,
        duration: float | Duration,
        entry_timestamp: int | None = None,
    ) -> OrderQuote:
        """Validate a request and compute its timing without placing it."""
        now = self.clock.now()
        entry = self._resolve_entry(entry_timestamp, now)
        config = self.assets.get(asset_id)
        side = parse_direction(direction)
        dur = self._resolve_duration(config, duration)
        amount = self._check_stake(config, stake)

        timing = plan_order_timing(
            entry, dur, self.settings.end_of_candle_threshold_seconds
        )
        return OrderQuote(
            asset_id=asset_id,
            direction=side,
            stake=amount,
            profit_rate=config.profit_rate,
            potential_payout=potential_payout(
                amount,
                config.profit_rate,
                self.settings.currency_quantum,
                self.settings.rounding_mode,
            ),
            timing=timing,
        )

    async def create_order(
        self,
        asset_id: str,
        direction: Direction | str,
        stake,
        duration: float | Duration,
        entry_timestamp: int | None = None,
        entry_price: Decimal | None = None,
    ) -> Order:
        """
        Validate and create a PENDING order.

        Args:
            asset_id: Asset to trade
            direction: CALL or PUT
            stake: Stake amount (rupiah)
            duration: Requested duration in minutes, or a Duration
            entry_timestamp: Entry time; now if None
            entry_price: Entry price; read from the price feed if None

        Returns:
            The persisted order. A retry with identical inputs returns the
            order already stored.

        Raises:
            OrderValidationError: request rejected, nothing persisted
            PriceUnavailable: no entry price available
        """
        try:
            q = self.quote(asset_id, direction, stake, duration, entry_timestamp)
        except OrderValidationError as e:
            logger.warning(f"Order rejected for {asset_id}: {e}")
            raise

        timing = q.timing
        if entry_price is None:
            entry_price = await self._price(asset_id, timing.entry_timestamp)

        order = Order(
            asset_id=asset_id,
            direction=q.direction,
            stake=q.stake,
            profit_rate=q.profit_rate,
            duration_seconds=timing.duration_seconds,
            entry_timestamp=timing.entry_timestamp,
            expiry_timestamp=timing.expiry_timestamp,
            entry_price=to_money(entry_price),
        )

        if self.order_repo is not None:
            existing = await self.order_repo.get_by_id(order.id)
            if existing is not None:
                logger.info(f"Order {order.id} already exists, returning stored order")
                return existing
            await self.order_repo.save(order)

        logger.info(
            f"Order {order.id} created: {asset_id} {order.direction.value} "
            f"stake={order.stake} {timing.duration_display} "
            f"entry={timing.entry_display} expiry={timing.expiry_display}"
        )
        return order

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    async def settle_order(
        self,
        order: Order | str,
        exit_price: Decimal | None = None,
        now: int | None = None,
    ) -> Order:
        """
        Resolve a PENDING order into WON or LOST.

        Args:
            order: The order, or its id (requires an order repository)
            exit_price: Exit price; read from the price feed at expiry if None
            now: Settlement time; sampled from the clock if None

        Raises:
            DoubleSettlement: order is already terminal
            SettlementTooEarly: expiry not reached yet
            PriceUnavailable: no exit price available
        """
        async with self._settle_lock:
            current = await self._load(order)
            settled_at = ensure_timestamp(now) if now is not None else self.clock.now()

            if current.is_terminal:
                logger.error(
                    f"Double settlement rejected for order {current.id} "
                    f"(already {current.outcome.value})"
                )
                raise DoubleSettlement(current.id, current.outcome)

            if settled_at < current.expiry_timestamp:
                raise SettlementTooEarly(current.id, current.expiry_timestamp, settled_at)

            if exit_price is None:
                exit_price = await self._price(current.asset_id, current.expiry_timestamp)
            exit_price = to_money(exit_price)

            outcome = resolve(current.direction, current.entry_price, exit_price)
            amount = payout(
                current.stake,
                current.profit_rate,
                outcome,
                self.settings.currency_quantum,
                self.settings.rounding_mode,
            )
            settled = current.settle(exit_price, outcome, amount, settled_at)

            if self.order_repo is not None:
                await self.order_repo.save(settled)

        logger.info(
            f"Order {settled.id} settled {outcome.value}: "
            f"entry={settled.entry_price} exit={exit_price} payout={amount}"
        )
        return settled

    async def _load(self, order: Order | str) -> Order:
        """Fetch the stored copy so state checks see the latest outcome."""
        order_id = order if isinstance(order, str) else order.id
        if self.order_repo is None:
            if isinstance(order, str):
                raise ValueError("settling by id requires an order repository")
            return order
        stored = await self.order_repo.get_by_id(order_id)
        if stored is None:
            if isinstance(order, str):
                raise KeyError(f"order {order_id} not found")
            return order
        return stored

