"""Asset trading configuration models."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, model_validator

from settlement.durations import DurationCatalog
from settlement.errors import InvalidDuration

# Defaults used by the trading page when an asset has no trading settings
DEFAULT_MIN_STAKE = Decimal("10000")
DEFAULT_MAX_STAKE = Decimal("10000000")
DEFAULT_PROFIT_RATE = Decimal("85")
DEFAULT_DURATIONS: list[float] = [1, 2, 3, 4, 5, 10, 15, 30, 45, 60]


class AssetTradingConfig(BaseModel):
    """Per-asset trading limits.

    allowed_durations are minutes; sub-minute trades appear as fractions
    (0.0167 for one second).
    """

    model_config = ConfigDict(frozen=True)

    asset_id: str
    name: str = ""
    allowed_durations: list[float] = DEFAULT_DURATIONS
    min_stake: Decimal = DEFAULT_MIN_STAKE
    max_stake: Decimal = DEFAULT_MAX_STAKE
    profit_rate: Decimal = DEFAULT_PROFIT_RATE

    @model_validator(mode="after")
    def _validate(self):
        if not self.allowed_durations:
            raise ValueError(f"asset '{self.asset_id}' has no allowed durations")
        if any(d <= 0 for d in self.allowed_durations):
            raise ValueError(f"asset '{self.asset_id}' has a non-positive duration")
        try:
            DurationCatalog(self.allowed_durations)
        except InvalidDuration as e:
            raise ValueError(f"asset '{self.asset_id}' has an unusable duration: {e}") from None
        if self.min_stake <= 0:
            raise ValueError(f"asset '{self.asset_id}' min_stake must be positive")
        if self.min_stake >= self.max_stake:
            raise ValueError(
                f"asset '{self.asset_id}' min_stake {self.min_stake} "
                f"must be below max_stake {self.max_stake}"
            )
        if self.profit_rate <= 0:
            raise ValueError(f"asset '{self.asset_id}' profit_rate must be positive")
        return self

    @property
    def display_name(self) -> str:
        return self.name or self.asset_id

    def duration_catalog(self, tolerance: float | None = None) -> DurationCatalog:
        if tolerance is None:
            return DurationCatalog(self.allowed_durations)
        return DurationCatalog(self.allowed_durations, tolerance=tolerance)

    def stake_in_range(self, stake: Decimal) -> bool:
        return self.min_stake <= stake <= self.max_stake
