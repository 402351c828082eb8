"""Candle-aligned expiry scheduling.

An order never starts counting mid-candle: entry is first rounded up to
the next one-minute boundary, then the requested number of whole
minutes is added. The resulting expiry is always minute-aligned and
lies in (d*60, d*60 + 60] seconds after entry for d >= 1 minute.

Entries within the end-of-candle threshold are flagged as near the
candle close, but the flag does not change the computed expiry. Both
branches produce the same timestamp; settlement timing depends on this.
Sub-minute durations advance zero whole minutes and therefore settle at
the next candle boundary.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from settlement.clock import (
    SECONDS_PER_MINUTE,
    ensure_timestamp,
    remaining_seconds_in_minute,
)
from settlement.durations import Duration
from settlement.formatting import format_duration_label, format_timestamp

logger = logging.getLogger(__name__)

END_OF_CANDLE_THRESHOLD_SECONDS = 20


def _as_duration(duration: Duration | float) -> Duration:
    if isinstance(duration, Duration):
        return duration
    return Duration.from_minutes(duration)


def is_near_candle_close(
    entry_timestamp: int,
    threshold_seconds: int = END_OF_CANDLE_THRESHOLD_SECONDS,
) -> bool:
    """True if the entry falls within threshold_seconds of its candle close."""
    return remaining_seconds_in_minute(entry_timestamp) <= threshold_seconds


def compute_expiry(
    entry_timestamp: int,
    duration: Duration | float,
    end_of_candle_threshold_seconds: int = END_OF_CANDLE_THRESHOLD_SECONDS,
) -> int:
    """Compute the expiry timestamp for an order.

    Args:
        entry_timestamp: Entry time in epoch seconds
        duration: A Duration, or a number of minutes
        end_of_candle_threshold_seconds: Near-close window, reported only

    Returns:
        Minute-aligned expiry timestamp, strictly after entry
    """
    entry = ensure_timestamp(entry_timestamp)
    dur = _as_duration(duration)

    remaining = remaining_seconds_in_minute(entry)
    candle_boundary = entry + remaining

    if remaining <= end_of_candle_threshold_seconds:
        # Near close: same rule as the regular branch
        expiry = candle_boundary + dur.whole_minutes * SECONDS_PER_MINUTE
    else:
        expiry = candle_boundary + dur.whole_minutes * SECONDS_PER_MINUTE

    return expiry


class OrderTiming(BaseModel):
    """Entry/expiry pair for an order, with display strings."""

    model_config = ConfigDict(frozen=True)

    entry_timestamp: int
    expiry_timestamp: int
    candle_boundary: int
    remaining_in_candle: int
    is_near_candle_close: bool
    duration_seconds: int
    entry_display: str
    expiry_display: str
    duration_display: str

    @property
    def seconds_to_expiry(self) -> int:
        return self.expiry_timestamp - self.entry_timestamp


def plan_order_timing(
    entry_timestamp: int,
    duration: Duration | float,
    end_of_candle_threshold_seconds: int = END_OF_CANDLE_THRESHOLD_SECONDS,
) -> OrderTiming:
    """Compute expiry plus the near-close flag and display fields."""
    entry = ensure_timestamp(entry_timestamp)
    dur = _as_duration(duration)
    remaining = remaining_seconds_in_minute(entry)
    near_close = remaining <= end_of_candle_threshold_seconds
    expiry = compute_expiry(entry, dur, end_of_candle_threshold_seconds)

    if near_close:
        logger.debug(
            "Entry %d is %ds before candle close (threshold %ds), expiry %d",
            entry, remaining, end_of_candle_threshold_seconds, expiry,
        )

    return OrderTiming(
        entry_timestamp=entry,
        expiry_timestamp=expiry,
        candle_boundary=entry + remaining,
        remaining_in_candle=remaining,
        is_near_candle_close=near_close,
        duration_seconds=dur.seconds,
        entry_display=format_timestamp(entry),
        expiry_display=format_timestamp(expiry),
        duration_display=format_duration_label(dur),
    )
