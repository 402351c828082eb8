"""Trade durations and per-asset duration catalogs.

Durations are held as whole seconds. Asset configuration expresses them
in minutes, with sub-minute trades stored as small fractions (0.0167 for
one second), so the float-tolerance comparison is applied only when
those legacy minute values are read in.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Iterable, Iterator

from settlement.errors import InvalidDuration

# Matching tolerance in minutes (~6 ms)
DURATION_TOLERANCE_MINUTES = 0.0001

_DURATION_RE = re.compile(r"^(\d+)(s|m|h)$")
_UNIT_SECONDS = {"s": 1, "m": 60, "h": 3600}


@dataclass(frozen=True, slots=True, order=True)
class Duration:
    """A trade duration in whole seconds."""

    seconds: int

    def __post_init__(self) -> None:
        if isinstance(self.seconds, bool) or not isinstance(self.seconds, int):
            raise InvalidDuration(f"duration seconds must be an int, got {self.seconds!r}")
        if self.seconds <= 0:
            raise InvalidDuration(f"duration must be positive, got {self.seconds}s")

    @classmethod
    def from_minutes(cls, minutes: float) -> Duration:
        """Build from a minute value, rounding to the nearest second."""
        if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
            raise InvalidDuration(f"duration must be a number of minutes, got {minutes!r}")
        if not math.isfinite(minutes) or minutes <= 0:
            raise InvalidDuration(f"duration must be positive and finite, got {minutes!r}")
        seconds = round(minutes * 60)
        if seconds <= 0:
            raise InvalidDuration(f"duration {minutes!r} min is shorter than one second")
        return cls(seconds)

    @property
    def minutes(self) -> float:
        return self.seconds / 60

    @property
    def whole_minutes(self) -> int:
        """Number of complete minutes; zero for sub-minute durations."""
        return self.seconds // 60

    @property
    def is_sub_minute(self) -> bool:
        return self.seconds < 60

    def __str__(self) -> str:
        # settlement.formatting imports this module
        from settlement.formatting import format_duration_label

        return format_duration_label(self)


def parse_duration(text: str) -> Duration:
    """Parse a short label such as "1s", "15m" or "1h"."""
    match = _DURATION_RE.match(text.strip()) if isinstance(text, str) else None
    if not match:
        raise InvalidDuration(
            f"invalid duration format '{text}', use a form like 1s, 1m, 15m, 1h"
        )
    value, unit = match.groups()
    return Duration(int(value) * _UNIT_SECONDS[unit])


def is_valid_duration(
    requested: float,
    allowed: Iterable[float],
    tolerance: float = DURATION_TOLERANCE_MINUTES,
) -> bool:
    """True if some allowed minute value is within tolerance of requested."""
    return any(abs(a - requested) < tolerance for a in allowed)


class DurationCatalog:
    """The discrete set of durations an asset accepts."""

    def __init__(
        self,
        allowed_minutes: Iterable[float],
        tolerance: float = DURATION_TOLERANCE_MINUTES,
    ):
        self._allowed_minutes = tuple(sorted(float(m) for m in allowed_minutes))
        if not self._allowed_minutes:
            raise InvalidDuration("duration catalog must not be empty")
        self._tolerance = tolerance
        self._durations = tuple(Duration.from_minutes(m) for m in self._allowed_minutes)

    @property
    def allowed_minutes(self) -> tuple[float, ...]:
        return self._allowed_minutes

    def resolve(self, requested: float | Duration) -> Duration:
        """Return the catalog duration matching the request.

        Raises InvalidDuration if nothing matches within tolerance.
        """
        if isinstance(requested, Duration):
            if requested in self._durations:
                return requested
            raise InvalidDuration(
                f"duration {requested} not allowed, expected one of {self.labels()}"
            )
        if isinstance(requested, bool) or not isinstance(requested, (int, float)):
            raise InvalidDuration(f"duration must be a number of minutes, got {requested!r}")
        for minutes, duration in zip(self._allowed_minutes, self._durations):
            if abs(minutes - requested) < self._tolerance:
                return duration
        raise InvalidDuration(
            f"duration {requested} min not allowed, expected one of {self.labels()}"
        )

    def labels(self) -> list[str]:
        return [str(d) for d in self._durations]

    def __contains__(self, requested) -> bool:
        try:
            self.resolve(requested)
        except InvalidDuration:
            return False
        return True

    def __iter__(self) -> Iterator[Duration]:
        return iter(self._durations)

    def __len__(self) -> int:
        return len(self._durations)
