"""Order engine exceptions."""

from __future__ import annotations


class OrderError(Exception):
    """Base class for all order engine errors."""


class OrderValidationError(OrderError, ValueError):
    """An order request was rejected before anything was persisted."""


class InvalidTimestamp(OrderValidationError):
    """Timestamp is not a finite integer number of epoch seconds, or is out of range."""


class InvalidDuration(OrderValidationError):
    """Requested duration does not match any allowed duration."""


class InvalidDirection(OrderValidationError):
    """Direction is not CALL or PUT."""


class StakeOutOfRange(OrderValidationError):
    """Stake is below the asset minimum or above its maximum."""

    def __init__(self, stake, min_stake, max_stake):
        self.stake = stake
        self.min_stake = min_stake
        self.max_stake = max_stake
        super().__init__(
            f"stake {stake} outside allowed range [{min_stake}, {max_stake}]"
        )


class UnknownAsset(OrderValidationError):
    """No trading configuration exists for the asset."""


class DoubleSettlement(OrderError):
    """Settlement attempted on an order that is already terminal.

    Always an integration error: the caller must check the order state
    before settling. The existing outcome is never overwritten.
    """

    def __init__(self, order_id: str, outcome):
        self.order_id = order_id
        self.outcome = outcome
        super().__init__(
            f"order {order_id} already settled with outcome {getattr(outcome, 'value', outcome)}"
        )


class SettlementTooEarly(OrderError):
    """Settlement attempted before the order's expiry was reached."""

    def __init__(self, order_id: str, expiry_timestamp: int, now: int):
        self.order_id = order_id
        self.expiry_timestamp = expiry_timestamp
        self.now = now
        super().__init__(
            f"order {order_id} expires at {expiry_timestamp}, now is {now}"
        )


class PriceUnavailable(OrderError):
    """The price feed has no price for the requested asset and time."""
