"""Win/loss determination from entry and exit prices.

Rules:
- CALL: exit > entry → WON
- PUT: exit < entry → WON
- exit == entry → LOST under both directions (no push; ties go to the house)
"""

from __future__ import annotations

from decimal import Decimal

from settlement.errors import InvalidDirection
from settlement.models.order import Direction, Outcome


def parse_direction(value: Direction | str) -> Direction:
    """Normalise a direction value, case-insensitively for strings."""
    if isinstance(value, Direction):
        return value
    if isinstance(value, str):
        try:
            return Direction(value.strip().upper())
        except ValueError:
            pass
    raise InvalidDirection(f"direction must be CALL or PUT, got {value!r}")


def resolve(
    direction: Direction | str,
    entry_price: Decimal,
    exit_price: Decimal,
) -> Outcome:
    """Resolve an order outcome. Pure; never returns PENDING."""
    d = parse_direction(direction)
    if d is Direction.CALL:
        return Outcome.WON if exit_price > entry_price else Outcome.LOST
    return Outcome.WON if exit_price < entry_price else Outcome.LOST
