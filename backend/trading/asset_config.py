"""Asset trading configuration loaded from assets.yaml.

Supports:
- Per-asset allowed durations (minutes, 0.0167 = one-second trade)
- Per-asset stake limits and profit rate
- Backward compatible: no YAML file = single default asset
"""

import logging
from decimal import Decimal
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

from settlement.errors import UnknownAsset
from settlement.models import AssetTradingConfig
from settlement.models.config import (
    DEFAULT_DURATIONS,
    DEFAULT_MAX_STAKE,
    DEFAULT_MIN_STAKE,
    DEFAULT_PROFIT_RATE,
)

logger = logging.getLogger(__name__)

DEFAULT_ASSETS: list[AssetTradingConfig] = [
    AssetTradingConfig(asset_id="IDX_STC", name="IDX STC"),
]


class AssetEntry(BaseModel):
    """A single asset entry in the YAML config."""

    id: str
    name: str = ""
    allowed_durations: list[float] = DEFAULT_DURATIONS
    min_stake: Decimal = DEFAULT_MIN_STAKE
    max_stake: Decimal = DEFAULT_MAX_STAKE
    profit_rate: Decimal = DEFAULT_PROFIT_RATE

    def to_trading_config(self) -> AssetTradingConfig:
        return AssetTradingConfig(
            asset_id=self.id,
            name=self.name,
            allowed_durations=self.allowed_durations,
            min_stake=self.min_stake,
            max_stake=self.max_stake,
            profit_rate=self.profit_rate,
        )


class AssetsFile(BaseModel):
    """Top-level assets.yaml configuration."""

    assets: list[AssetEntry] = []

    @model_validator(mode="after")
    def _validate(self):
        seen: set[str] = set()
        for entry in self.assets:
            if entry.id in seen:
                raise ValueError(f"duplicate asset id '{entry.id}'")
            seen.add(entry.id)
        return self


class AssetRegistry:
    """Read-only lookup of asset trading configs by asset id."""

    def __init__(self, configs: list[AssetTradingConfig]):
        self._configs = {c.asset_id: c for c in configs}

    def get(self, asset_id: str) -> AssetTradingConfig:
        try:
            return self._configs[asset_id]
        except KeyError:
            raise UnknownAsset(f"no trading configuration for asset '{asset_id}'") from None

    def __contains__(self, asset_id: str) -> bool:
        return asset_id in self._configs

    def __iter__(self):
        return iter(self._configs.values())

    def __len__(self) -> int:
        return len(self._configs)


_DEFAULT_PATH = Path(__file__).parent.parent / "assets.yaml"


def load_asset_configs(path: Path | None = None) -> AssetRegistry:
    """Load asset configs from YAML file.

    Falls back to DEFAULT_ASSETS if the file doesn't exist.
    """
    config_path = Path(path) if path else _DEFAULT_PATH

    env_path = config_path.parent / ".env"
    load_dotenv(env_path, override=False)

    if not config_path.exists():
        logger.info(
            "No assets.yaml found at %s, using %d default asset(s)",
            config_path,
            len(DEFAULT_ASSETS),
        )
        return AssetRegistry(list(DEFAULT_ASSETS))

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    parsed = AssetsFile(**raw)
    configs = [entry.to_trading_config() for entry in parsed.assets]
    if not configs:
        logger.warning("assets.yaml at %s lists no assets, using defaults", config_path)
        configs = list(DEFAULT_ASSETS)

    logger.info("Loaded %d asset config(s) from %s", len(configs), config_path)
    return AssetRegistry(configs)
