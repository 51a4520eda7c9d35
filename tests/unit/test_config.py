"""
Unit tests for settings loading, validation and pair metadata.
"""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from trendsignals.config.pair_config import PairConfigManager, TradingPair
from trendsignals.config.settings import PairConfig, Settings, load_settings, validate_settings

ENV_VARS = [
    "CONFIG_PATH",
    "MA_MODE",
    "FAST_MA_PERIOD",
    "SLOW_MA_PERIOD",
    "ENABLED_STRATEGIES",
    "LOG_LEVEL",
    "LOG_FORMAT",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def write_config(tmp_path, text: str) -> str:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return str(path)


class TestLoadSettings:
    """Tests for YAML + environment settings loading."""

    def test_defaults_when_file_missing(self, tmp_path):
        """A missing file leaves defaults in place."""
        settings = load_settings(str(tmp_path / "missing.yaml"))
        assert settings.indicators.fast_ma_period == 9
        assert settings.indicators.slow_ma_period == 21
        assert settings.indicators.ma_mode == "sma"
        assert settings.indicators.macd_signal_period == 9
        assert settings.strategy.enabled == ["macd", "ma_cross", "ma_trend_change"]
        assert settings.pairs == []

    def test_load_from_yaml(self, tmp_path):
        """Values in the file override defaults, missing keys keep them."""
        path = write_config(tmp_path, """
indicators:
  fast_ma_period: 5
  ma_mode: ema
strategy:
  enabled: [macd]
default_price_dps: 3
pairs:
  - symbol: BTC/USD
    price_dps: 1
  - ETH/USD
logging:
  level: DEBUG
  format: text
""")
        settings = load_settings(path)

        assert settings.indicators.fast_ma_period == 5
        assert settings.indicators.slow_ma_period == 21
        assert settings.indicators.ma_mode == "ema"
        assert settings.strategy.enabled == ["macd"]
        assert settings.default_price_dps == 3
        assert settings.pairs == [
            PairConfig(symbol="BTC/USD", price_dps=1),
            PairConfig(symbol="ETH/USD", price_dps=2),
        ]
        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "text"

    def test_pairs_as_mapping(self, tmp_path):
        """Pairs may be given as symbol -> params."""
        path = write_config(tmp_path, """
pairs:
  XRP/USD:
    price_dps: 5
  SOL/USD:
""")
        settings = load_settings(path)
        assert settings.pairs == [
            PairConfig(symbol="XRP/USD", price_dps=5),
            PairConfig(symbol="SOL/USD", price_dps=2),
        ]

    def test_env_overrides(self, tmp_path, monkeypatch):
        """Environment variables take precedence over the file."""
        path = write_config(tmp_path, "indicators:\n  fast_ma_period: 5\n")
        monkeypatch.setenv("FAST_MA_PERIOD", "7")
        monkeypatch.setenv("MA_MODE", "EMA")
        monkeypatch.setenv("ENABLED_STRATEGIES", "ma_cross, ma_trend_change")
        monkeypatch.setenv("LOG_LEVEL", "warning")

        settings = load_settings(path)
        assert settings.indicators.fast_ma_period == 7
        assert settings.indicators.ma_mode == "ema"
        assert settings.strategy.enabled == ["ma_cross", "ma_trend_change"]
        assert settings.logging.level == "WARNING"

    def test_config_path_env(self, tmp_path, monkeypatch):
        """CONFIG_PATH is used when no explicit path is given."""
        path = write_config(tmp_path, "indicators:\n  slow_ma_period: 30\n")
        monkeypatch.setenv("CONFIG_PATH", path)
        assert load_settings().indicators.slow_ma_period == 30

    @pytest.mark.parametrize("body", [
        "indicators:\n  fast_ma_period: 0\n",
        "indicators:\n  macd_signal_period: -3\n",
        "indicators:\n  macd_fast_period: 30\n  macd_slow_period: 26\n",
        "indicators:\n  macd_fast_period: 26\n",
        "indicators:\n  ma_mode: wma\n",
        "strategy:\n  enabled: [rsi]\n",
        "pairs:\n  - symbol: BTC/USD\n    price_dps: -1\n",
        "logging:\n  format: xml\n",
    ])
    def test_invalid_config(self, tmp_path, body):
        """Invalid values are rejected when loading."""
        with pytest.raises(ValueError):
            load_settings(write_config(tmp_path, body))

    def test_validate_requires_symbol(self):
        settings = Settings(pairs=[PairConfig(symbol="")])
        with pytest.raises(ValueError):
            validate_settings(settings)


class TestPairConfigManager:
    """Tests for pair metadata lookup."""

    def test_lookup(self):
        settings = Settings(
            pairs=[PairConfig(symbol="BTC/USD", price_dps=1)],
            default_price_dps=3
        )
        manager = PairConfigManager(settings)

        assert manager.get_pair("BTC/USD") == TradingPair("BTC/USD", 1)
        assert manager.has_pair_config("BTC/USD")
        assert manager.get_all_pairs() == ["BTC/USD"]

    def test_default_precision(self):
        manager = PairConfigManager(Settings(default_price_dps=3))
        pair = manager.get_pair("DOGE/USD")
        assert pair.symbol == "DOGE/USD"
        assert pair.get_price_dps() == 3
        assert not manager.has_pair_config("DOGE/USD")

    def test_summary(self):
        manager = PairConfigManager(Settings(pairs=[PairConfig(symbol="BTC/USD", price_dps=1)]))
        assert "BTC/USD: 1 dps" in manager.summary()
