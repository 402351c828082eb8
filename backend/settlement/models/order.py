"""Order data model and its settlement transition."""

from __future__ import annotations

import hashlib
from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from settlement.clock import SECONDS_PER_MINUTE, end_of_current_minute, seconds_until
from settlement.errors import DoubleSettlement


class Direction(str, Enum):
    """Trade direction."""

    CALL = "CALL"  # Price rises
    PUT = "PUT"  # Price falls


class Outcome(str, Enum):
    """Order outcome status."""

    PENDING = "PENDING"
    WON = "WON"
    LOST = "LOST"

    @property
    def is_terminal(self) -> bool:
        return self is not Outcome.PENDING


def generate_order_id(
    asset_id: str,
    direction: Direction,
    stake: Decimal,
    duration_seconds: int,
    entry_timestamp: int,
) -> str:
    """Generate deterministic order ID based on order attributes.

    A retried creation with identical inputs produces the same ID, so
    the persistence layer can deduplicate it.
    """
    key = f"{asset_id}:{direction.value}:{stake.normalize()}:{duration_seconds}:{entry_timestamp}"
    return hashlib.sha256(key.encode()).hexdigest()[:32]


class Order(BaseModel):
    """A binary-option order.

    Frozen: settlement returns a new instance, and a terminal order can
    never be changed again.
    """

    model_config = ConfigDict(frozen=True)

    id: str = ""  # Will be set in model_post_init
    asset_id: str
    direction: Direction
    stake: Decimal = Field(gt=0)
    profit_rate: Decimal = Field(gt=0)
    duration_seconds: int = Field(gt=0)
    entry_timestamp: int
    expiry_timestamp: int
    entry_price: Decimal
    exit_price: Decimal | None = None
    outcome: Outcome = Outcome.PENDING
    payout: Decimal | None = None
    settled_at: int | None = None

    @model_validator(mode="after")
    def _check_invariants(self):
        if self.expiry_timestamp <= self.entry_timestamp:
            raise ValueError(
                f"expiry_timestamp {self.expiry_timestamp} must be after "
                f"entry_timestamp {self.entry_timestamp}"
            )
        if self.expiry_timestamp % SECONDS_PER_MINUTE != 0:
            raise ValueError(
                f"expiry_timestamp {self.expiry_timestamp} is not minute-aligned"
            )
        expected = (
            end_of_current_minute(self.entry_timestamp)
            + (self.duration_seconds // SECONDS_PER_MINUTE) * SECONDS_PER_MINUTE
        )
        if self.expiry_timestamp != expected:
            raise ValueError(
                f"expiry_timestamp {self.expiry_timestamp} does not match "
                f"{self.duration_seconds}s duration from entry {self.entry_timestamp} "
                f"(expected {expected})"
            )
        if self.outcome.is_terminal:
            if self.payout is None or self.exit_price is None:
                raise ValueError("settled order requires exit_price and payout")
        elif self.payout is not None or self.exit_price is not None:
            raise ValueError("pending order cannot have exit_price or payout")
        return self

    def model_post_init(self, __context) -> None:
        """Generate deterministic ID after model initialization."""
        if not self.id:
            object.__setattr__(
                self,
                "id",
                generate_order_id(
                    self.asset_id,
                    self.direction,
                    self.stake,
                    self.duration_seconds,
                    self.entry_timestamp,
                ),
            )

    @property
    def is_terminal(self) -> bool:
        return self.outcome.is_terminal

    @property
    def profit(self) -> Decimal | None:
        """Net balance change once settled (negative stake when lost)."""
        if self.payout is None:
            return None
        return self.payout - self.stake

    def is_expired(self, now: int) -> bool:
        return now >= self.expiry_timestamp

    def seconds_until_expiry(self, now: int) -> int:
        return seconds_until(self.expiry_timestamp, now)

    def settle(
        self,
        exit_price: Decimal,
        outcome: Outcome,
        payout: Decimal,
        settled_at: int | None = None,
    ) -> Order:
        """Return the terminal copy of this order.

        Raises:
            DoubleSettlement: if the order is already terminal
            ValueError: if outcome is PENDING
        """
        if self.is_terminal:
            raise DoubleSettlement(self.id, self.outcome)
        if not outcome.is_terminal:
            raise ValueError("cannot settle an order as PENDING")
        return Order.model_validate(
            {
                **self.model_dump(),
                "exit_price": exit_price,
                "outcome": outcome,
                "payout": payout,
                "settled_at": settled_at,
            }
        )
