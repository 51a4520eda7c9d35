"""
Configuration loading and management.
Loads settings from YAML files and environment variables.
"""

import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import yaml

from ..strategy.base_strategy import ALL_STRATEGIES

MA_MODES = ("sma", "ema")
LOG_FORMATS = ("json", "text")


@dataclass
class IndicatorConfig:
    """Indicator window configuration."""
    # Fast/slow moving averages used by the crossover and trend strategies
    fast_ma_period: int = 9
    slow_ma_period: int = 21
    ma_mode: str = "sma"  # "sma" or "ema"

    # MACD
    macd_fast_period: int = 12
    macd_slow_period: int = 26
    macd_signal_period: int = 9


@dataclass
class StrategyConfig:
    """Which decision rules are evaluated on each tick."""
    enabled: list[str] = field(default_factory=lambda: list(ALL_STRATEGIES))


@dataclass
class PairConfig:
    """Instrument metadata."""
    symbol: str = ""
    price_dps: int = 2


@dataclass
class LoggingConfig:
    """Logging configuration."""
    level: str = "INFO"
    format: str = "json"


@dataclass
class Settings:
    """Main application settings container."""
    indicators: IndicatorConfig = field(default_factory=IndicatorConfig)
    strategy: StrategyConfig = field(default_factory=StrategyConfig)
    pairs: list[PairConfig] = field(default_factory=list)
    default_price_dps: int = 2
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _find_config_file() -> Optional[Path]:
    """
    Find the configuration file.

    Returns:
        Path to config file or None if not found.
    """
    # Check environment variable first
    env_config = os.environ.get("CONFIG_PATH")
    if env_config:
        path = Path(env_config)
        if path.exists():
            return path

    search_paths = [
        Path("config/config.yaml"),
        Path("config.yaml"),
    ]

    for path in search_paths:
        if path.exists():
            return path

    return None


def _dict_to_config(data: dict, config_class, existing=None):
    """
    Convert dictionary to dataclass, preserving defaults for missing keys.

    Args:
        data: Dictionary with configuration data.
        config_class: The dataclass type to create.
        existing: Existing instance to update (optional).

    Returns:
        Instance of config_class with data applied.
    """
    if existing is None:
        existing = config_class()

    if data is None:
        return existing

    for key, value in data.items():
        if hasattr(existing, key):
            setattr(existing, key, value)

    return existing


def _parse_pairs(data) -> list[PairConfig]:
    """
    Parse the `pairs` section.

    Accepts either a list of {symbol, price_dps} mappings or a mapping
    of symbol -> {price_dps}.
    """
    if not data:
        return []

    if isinstance(data, dict):
        return [
            _dict_to_config(params or {}, PairConfig, PairConfig(symbol=symbol))
            for symbol, params in data.items()
        ]

    pairs = []
    for entry in data:
        if isinstance(entry, str):
            pairs.append(PairConfig(symbol=entry))
        else:
            pairs.append(_dict_to_config(entry, PairConfig))
    return pairs


def load_settings(config_path: Optional[str] = None) -> Settings:
    """
    Load settings from configuration file and environment.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        Settings instance with loaded configuration.

    Raises:
        ValueError: If the resulting configuration is invalid.
    """
    settings = Settings()

    # Find config file
    if config_path:
        path = Path(config_path)
    else:
        path = _find_config_file()

    # Load from file if found
    if path and path.exists():
        with open(path, "r") as f:
            data = yaml.safe_load(f)

        if data:
            settings.indicators = _dict_to_config(
                data.get("indicators"), IndicatorConfig, settings.indicators
            )
            settings.strategy = _dict_to_config(
                data.get("strategy"), StrategyConfig, settings.strategy
            )
            settings.pairs = _parse_pairs(data.get("pairs"))
            if "default_price_dps" in data:
                settings.default_price_dps = data["default_price_dps"]
            settings.logging = _dict_to_config(
                data.get("logging"), LoggingConfig, settings.logging
            )

    # Override from environment variables
    _apply_env_overrides(settings)

    validate_settings(settings)
    return settings


def _apply_env_overrides(settings: Settings) -> None:
    """
    Apply environment variable overrides to settings.

    Args:
        settings: Settings instance to modify.
    """
    # Indicator overrides
    if ma_mode := os.environ.get("MA_MODE"):
        settings.indicators.ma_mode = ma_mode.lower()

    if fast := os.environ.get("FAST_MA_PERIOD"):
        settings.indicators.fast_ma_period = int(fast)

    if slow := os.environ.get("SLOW_MA_PERIOD"):
        settings.indicators.slow_ma_period = int(slow)

    # Strategy overrides
    if enabled := os.environ.get("ENABLED_STRATEGIES"):
        settings.strategy.enabled = [s.strip() for s in enabled.split(",") if s.strip()]

    # Logging overrides
    if log_level := os.environ.get("LOG_LEVEL"):
        settings.logging.level = log_level.upper()

    if log_format := os.environ.get("LOG_FORMAT"):
        settings.logging.format = log_format.lower()


def validate_settings(settings: Settings) -> None:
    """
    Reject configurations that cannot produce indicators.

    Raises:
        ValueError: Naming the first offending key.
    """
    ind = settings.indicators
    for key in (
        "fast_ma_period",
        "slow_ma_period",
        "macd_fast_period",
        "macd_slow_period",
        "macd_signal_period",
    ):
        value = getattr(ind, key)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"indicators.{key} must be a positive integer, got {value!r}")

    if ind.macd_fast_period >= ind.macd_slow_period:
        raise ValueError(
            "indicators.macd_fast_period must be less than indicators.macd_slow_period, "
            f"got {ind.macd_fast_period} and {ind.macd_slow_period}"
        )

    if ind.ma_mode not in MA_MODES:
        raise ValueError(f"indicators.ma_mode must be one of {MA_MODES}, got {ind.ma_mode!r}")

    unknown = [s for s in settings.strategy.enabled if s not in ALL_STRATEGIES]
    if unknown:
        raise ValueError(f"strategy.enabled contains unknown strategies: {unknown}")

    if not isinstance(settings.default_price_dps, int) or settings.default_price_dps < 0:
        raise ValueError(
            f"default_price_dps must be a non-negative integer, got {settings.default_price_dps!r}"
        )

    for pair in settings.pairs:
        if not pair.symbol:
            raise ValueError("pairs entries require a symbol")
        if isinstance(pair.price_dps, bool) or not isinstance(pair.price_dps, int) or pair.price_dps < 0:
            raise ValueError(
                f"pairs.{pair.symbol}.price_dps must be a non-negative integer, got {pair.price_dps!r}"
            )

    if settings.logging.format not in LOG_FORMATS:
        raise ValueError(
            f"logging.format must be one of {LOG_FORMATS}, got {settings.logging.format!r}"
        )


# Global settings instance (lazy loaded)
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings instance.

    Returns:
        Settings instance.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reload_settings(config_path: Optional[str] = None) -> Settings:
    """
    Reload settings from configuration.

    Args:
        config_path: Optional explicit path to config file.

    Returns:
        New Settings instance.
    """
    global _settings
    _settings = load_settings(config_path)
    return _settings
