"""Tests for asset_config.py and config.py."""

import textwrap
from decimal import Decimal

import pytest
from pydantic import ValidationError

from settlement.errors import UnknownAsset
from trading.asset_config import (
    DEFAULT_ASSETS,
    AssetEntry,
    AssetRegistry,
    AssetsFile,
    load_asset_configs,
)
from trading.config import Settings


# ── AssetsFile model tests ────────────────────────────────────────────────


class TestAssetsFile:
    def test_empty_by_default(self):
        assert AssetsFile().assets == []

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError, match="duplicate asset id"):
            AssetsFile(assets=[AssetEntry(id="A"), AssetEntry(id="A")])

    def test_entry_to_trading_config(self):
        entry = AssetEntry(
            id="BTC_USD",
            name="Bitcoin",
            allowed_durations=[1, 5],
            min_stake=Decimal("25000"),
            max_stake=Decimal("5000000"),
            profit_rate=Decimal("80"),
        )
        config = entry.to_trading_config()
        assert config.asset_id == "BTC_USD"
        assert config.display_name == "Bitcoin"
        assert config.allowed_durations == [1, 5]
        assert config.profit_rate == Decimal("80")

    def test_invalid_limits_surface_on_conversion(self):
        entry = AssetEntry(id="X", min_stake=Decimal("500"), max_stake=Decimal("100"))
        with pytest.raises(ValidationError, match="must be below max_stake"):
            entry.to_trading_config()


# ── AssetRegistry tests ───────────────────────────────────────────────────


class TestAssetRegistry:
    def test_lookup(self):
        registry = AssetRegistry(list(DEFAULT_ASSETS))
        assert registry.get("IDX_STC").asset_id == "IDX_STC"
        assert "IDX_STC" in registry
        assert len(registry) == 1

    def test_unknown_asset(self):
        registry = AssetRegistry(list(DEFAULT_ASSETS))
        with pytest.raises(UnknownAsset, match="NOPE"):
            registry.get("NOPE")


# ── load_asset_configs tests ──────────────────────────────────────────────


class TestLoadAssetConfigs:
    def test_missing_file_returns_defaults(self, tmp_path):
        registry = load_asset_configs(tmp_path / "nonexistent.yaml")
        assert [c.asset_id for c in registry] == [c.asset_id for c in DEFAULT_ASSETS]

    def test_load_yaml(self, tmp_path):
        config_file = tmp_path / "assets.yaml"
        config_file.write_text(textwrap.dedent("""\
            assets:
              - id: IDX_STC
                allowed_durations: [0.0167, 1, 5]
                min_stake: 10000
                max_stake: 1000000
                profit_rate: 85
              - id: BTC_USD
                name: Bitcoin
                profit_rate: 80
        """))
        registry = load_asset_configs(config_file)
        assert len(registry) == 2
        stc = registry.get("IDX_STC")
        assert stc.allowed_durations == [0.0167, 1, 5]
        assert stc.max_stake == Decimal("1000000")
        btc = registry.get("BTC_USD")
        assert btc.profit_rate == Decimal("80")
        assert btc.min_stake == Decimal("10000")

    def test_empty_yaml_returns_defaults(self, tmp_path):
        config_file = tmp_path / "assets.yaml"
        config_file.write_text("")
        registry = load_asset_configs(config_file)
        assert "IDX_STC" in registry

    def test_duplicate_ids_in_yaml(self, tmp_path):
        config_file = tmp_path / "assets.yaml"
        config_file.write_text(textwrap.dedent("""\
            assets:
              - id: A
              - id: A
        """))
        with pytest.raises(ValueError, match="duplicate asset id"):
            load_asset_configs(config_file)

    def test_bundled_assets_yaml_loads(self):
        registry = load_asset_configs()
        stc = registry.get("IDX_STC")
        assert 0.0167 in stc.allowed_durations


# ── Settings tests ────────────────────────────────────────────────────────


class TestSettings:
    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.end_of_candle_threshold_seconds == 20
        assert settings.max_clock_skew_seconds == 3600
        assert settings.duration_tolerance_minutes == 0.0001
        assert settings.currency_quantum == Decimal("1")
        assert settings.rounding_mode == "ROUND_HALF_UP"

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("END_OF_CANDLE_THRESHOLD_SECONDS", "10")
        monkeypatch.setenv("ROUNDING_MODE", "round_half_even")
        settings = Settings(_env_file=None)
        assert settings.end_of_candle_threshold_seconds == 10
        assert settings.rounding_mode == "ROUND_HALF_EVEN"

    def test_invalid_rounding_mode(self):
        with pytest.raises(ValidationError, match="rounding_mode"):
            Settings(_env_file=None, rounding_mode="BANKERS")

    def test_non_positive_quantum(self):
        with pytest.raises(ValidationError, match="currency_quantum"):
            Settings(_env_file=None, currency_quantum=Decimal("0"))
