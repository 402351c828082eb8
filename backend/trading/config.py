"""Application configuration."""

from decimal import ROUND_HALF_UP, Decimal
from functools import lru_cache
from pathlib import Path

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ROUNDING_MODES = (
    "ROUND_HALF_UP",
    "ROUND_HALF_EVEN",
    "ROUND_HALF_DOWN",
    "ROUND_DOWN",
    "ROUND_UP",
    "ROUND_FLOOR",
    "ROUND_CEILING",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Expiry scheduling
    end_of_candle_threshold_seconds: int = 20
    max_clock_skew_seconds: int = 3600  # Reject entry times further than 1h from now

    # Duration matching tolerance (minutes, ~6 ms)
    duration_tolerance_minutes: float = 0.0001

    # Money: quantise to whole rupiah
    currency_quantum: Decimal = Decimal("1")
    rounding_mode: str = ROUND_HALF_UP

    # Asset configuration file
    assets_path: Path | None = None

    # Logging
    log_level: str = "INFO"

    @field_validator("rounding_mode")
    @classmethod
    def _check_rounding(cls, value: str) -> str:
        mode = value.upper()
        if mode not in _ROUNDING_MODES:
            raise ValueError(
                f"rounding_mode must be one of {_ROUNDING_MODES}, got '{value}'"
            )
        return mode

    @field_validator("currency_quantum")
    @classmethod
    def _check_quantum(cls, value: Decimal) -> Decimal:
        if value <= 0:
            raise ValueError("currency_quantum must be positive")
        return value


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
