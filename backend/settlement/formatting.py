"""Display helpers for durations, countdowns, timestamps and money."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from settlement.clock import to_datetime
from settlement.durations import Duration


def format_duration_label(duration: Duration | float) -> str:
    """Short label: "1s", "15m", "1h", "1h 30m"."""
    if not isinstance(duration, Duration):
        duration = Duration.from_minutes(duration)
    if duration.is_sub_minute:
        return f"{duration.seconds}s"
    minutes, seconds = divmod(duration.seconds, 60)
    if seconds:
        return f"{minutes}m {seconds}s"
    if minutes < 60:
        return f"{minutes}m"
    hours, mins = divmod(minutes, 60)
    return f"{hours}h {mins}m" if mins else f"{hours}h"


def format_countdown(seconds: int) -> str:
    """Time remaining as "1h 2m 3s", "2m 3s" or "3s"."""
    seconds = max(0, int(seconds))
    hours, rest = divmod(seconds, 3600)
    minutes, secs = divmod(rest, 60)
    if hours > 0:
        return f"{hours}h {minutes}m {secs}s"
    if minutes > 0:
        return f"{minutes}m {secs}s"
    return f"{secs}s"


def format_timestamp(timestamp: int) -> str:
    """YYYY-MM-DD HH:MM:SS in platform time (WIB)."""
    return to_datetime(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def format_time(timestamp: int) -> str:
    return to_datetime(timestamp).strftime("%H:%M:%S")


def format_date(timestamp: int) -> str:
    return to_datetime(timestamp).strftime("%d/%m/%Y")


def format_currency(amount) -> str:
    """Rupiah with dot thousands separators, e.g. "Rp 18.500"."""
    value = Decimal(str(amount)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    digits = f"{abs(value):,}".replace(",", ".")
    return f"{sign}Rp {digits}"
