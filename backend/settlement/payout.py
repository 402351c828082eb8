"""Profit and payout arithmetic.

Money is Decimal throughout. Each public function rounds its result
once, to a multiple of the currency quantum (whole rupiah by default),
using ROUND_HALF_UP. Intermediate values are never rounded.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from settlement.models.order import Outcome

CURRENCY_QUANTUM = Decimal("1")
ROUNDING = ROUND_HALF_UP

_HUNDRED = Decimal("100")
_ONE = Decimal("1")


def to_money(value) -> Decimal:
    """Convert int/str/Decimal to Decimal; floats go through str()."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(
    amount: Decimal,
    quantum: Decimal = CURRENCY_QUANTUM,
    rounding: str = ROUNDING,
) -> Decimal:
    """Round to the nearest multiple of quantum (1, 500, 1000, 0.05, ...)."""
    units = (amount / quantum).quantize(_ONE, rounding=rounding)
    return units * quantum


def profit(
    stake,
    profit_rate,
    quantum: Decimal = CURRENCY_QUANTUM,
    rounding: str = ROUNDING,
) -> Decimal:
    """Profit on a winning order: stake * profit_rate / 100."""
    raw = to_money(stake) * to_money(profit_rate) / _HUNDRED
    return round_money(raw, quantum, rounding)


def payout(
    stake,
    profit_rate,
    outcome: Outcome,
    quantum: Decimal = CURRENCY_QUANTUM,
    rounding: str = ROUNDING,
) -> Decimal:
    """Amount returned to the trader: stake + profit if WON, 0 if LOST."""
    if outcome is Outcome.WON:
        raw = to_money(stake) + to_money(stake) * to_money(profit_rate) / _HUNDRED
        return round_money(raw, quantum, rounding)
    if outcome is Outcome.LOST:
        return round_money(Decimal("0"), quantum, rounding)
    raise ValueError("payout is undefined for a PENDING order")


def potential_payout(
    stake,
    profit_rate,
    quantum: Decimal = CURRENCY_QUANTUM,
    rounding: str = ROUNDING,
) -> Decimal:
    """Payout the order would receive if it wins."""
    return payout(stake, profit_rate, Outcome.WON, quantum, rounding)


def net_result(stake, payout_amount) -> Decimal:
    """Balance delta after settlement (payout minus stake)."""
    return to_money(payout_amount) - to_money(stake)
