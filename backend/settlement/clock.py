"""Second-resolution time source and candle-boundary arithmetic.

All timestamps are integer seconds since the Unix epoch. The platform
displays times in WIB (UTC+7, no DST); since the offset is a whole
number of hours, minute boundaries are identical in UTC and WIB.
"""

from __future__ import annotations

import math
import time
from datetime import datetime, timedelta, timezone
from typing import Protocol, runtime_checkable

from settlement.errors import InvalidTimestamp

SECONDS_PER_MINUTE = 60
MAX_CLOCK_SKEW_SECONDS = 3600

PLATFORM_UTC_OFFSET_HOURS = 7
PLATFORM_TZ = timezone(timedelta(hours=PLATFORM_UTC_OFFSET_HOURS), "WIB")

TIMEFRAME_SECONDS: dict[str, int] = {
    "1s": 1,
    "1m": 60,
    "5m": 300,
    "15m": 900,
    "30m": 1800,
    "1h": 3600,
    "4h": 14400,
    "1d": 86400,
}


@runtime_checkable
class Clock(Protocol):
    """Source of the current time."""

    def now(self) -> int:
        """Current time in integer epoch seconds."""
        ...


class SystemClock:
    """Wall clock, truncated to whole seconds."""

    def now(self) -> int:
        return math.floor(time.time())


class FixedClock:
    """Clock pinned to a settable instant, for tests and replay."""

    def __init__(self, timestamp: int):
        self._now = ensure_timestamp(timestamp)

    def now(self) -> int:
        return self._now

    def set(self, timestamp: int) -> None:
        self._now = ensure_timestamp(timestamp)

    def advance(self, seconds: int) -> int:
        self._now = ensure_timestamp(self._now + seconds)
        return self._now


def ensure_timestamp(value) -> int:
    """Validate and normalise an epoch-seconds value.

    Integral floats (as produced by JSON decoders) are accepted and
    returned as int. Booleans, non-numbers, NaN/inf and fractional
    values raise InvalidTimestamp.
    """
    if isinstance(value, bool):
        raise InvalidTimestamp(f"timestamp must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidTimestamp(f"timestamp must be finite, got {value!r}")
        if not value.is_integer():
            raise InvalidTimestamp(f"timestamp must be whole seconds, got {value!r}")
        return int(value)
    raise InvalidTimestamp(f"timestamp must be an integer, got {type(value).__name__}")


def remaining_seconds_in_minute(timestamp: int) -> int:
    """Seconds until the next minute boundary, in [1, 60].

    A timestamp exactly on a boundary has a full minute remaining (60).
    """
    t = ensure_timestamp(timestamp)
    return SECONDS_PER_MINUTE - (t % SECONDS_PER_MINUTE)


def end_of_current_minute(timestamp: int) -> int:
    """Next minute boundary strictly after the timestamp."""
    t = ensure_timestamp(timestamp)
    return t + remaining_seconds_in_minute(t)


def start_of_minute(timestamp: int) -> int:
    """Start of the one-minute candle containing the timestamp."""
    t = ensure_timestamp(timestamp)
    return t - (t % SECONDS_PER_MINUTE)


def is_minute_aligned(timestamp: int) -> bool:
    return ensure_timestamp(timestamp) % SECONDS_PER_MINUTE == 0


def timeframe_seconds(timeframe: str) -> int:
    """Length of a candle timeframe ("1s", "1m", ..., "1d") in seconds."""
    try:
        return TIMEFRAME_SECONDS[timeframe]
    except KeyError:
        raise ValueError(
            f"unknown timeframe '{timeframe}', expected one of {list(TIMEFRAME_SECONDS)}"
        ) from None


def candle_start(timestamp: int, timeframe: str = "1m") -> int:
    """Open time of the candle of the given timeframe containing the timestamp."""
    t = ensure_timestamp(timestamp)
    step = timeframe_seconds(timeframe)
    return (t // step) * step


def is_within_sane_range(
    timestamp: int,
    now: int,
    max_skew_seconds: int = MAX_CLOCK_SKEW_SECONDS,
) -> bool:
    """Reject timestamps more than max_skew_seconds away from now."""
    t = ensure_timestamp(timestamp)
    return abs(t - ensure_timestamp(now)) <= max_skew_seconds


def is_expired(expiry_timestamp: int, now: int) -> bool:
    return ensure_timestamp(now) >= ensure_timestamp(expiry_timestamp)


def seconds_until(expiry_timestamp: int, now: int) -> int:
    """Seconds left until expiry, never negative."""
    return max(0, ensure_timestamp(expiry_timestamp) - ensure_timestamp(now))


def to_datetime(timestamp: int) -> datetime:
    """Convert epoch seconds to an aware datetime in platform time (WIB)."""
    return datetime.fromtimestamp(ensure_timestamp(timestamp), tz=PLATFORM_TZ)


def from_datetime(dt: datetime) -> int:
    """Convert an aware datetime to epoch seconds (sub-second part dropped)."""
    if dt.tzinfo is None:
        raise InvalidTimestamp("naive datetime has no timezone")
    return math.floor(dt.timestamp())
