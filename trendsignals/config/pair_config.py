"""
Per-pair metadata lookup.

Builds TradingPair records from the `pairs` section of the settings,
falling back to the default price precision for unlisted symbols.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from .settings import Settings, get_settings


@dataclass(frozen=True)
class TradingPair:
    """Read-only instrument metadata."""
    symbol: str
    price_dps: int = 2  # decimal places of the quoted price

    def get_price_dps(self) -> int:
        return self.price_dps


class PairConfigManager:
    """
    Manages per-pair metadata.
    """

    def __init__(self, settings: Optional[Settings] = None):
        """
        Initialize the pair config manager.

        Args:
            settings: Settings to read pairs from. If None, loaded globally.
        """
        if settings is None:
            settings = get_settings()

        self._default_price_dps = settings.default_price_dps
        self._pairs: Dict[str, TradingPair] = {
            p.symbol: TradingPair(symbol=p.symbol, price_dps=p.price_dps)
            for p in settings.pairs
        }

    def get_pair(self, symbol: str) -> TradingPair:
        """
        Get metadata for a symbol.

        Args:
            symbol: Trading pair name.

        Returns:
            Configured TradingPair, or one with the default precision.
        """
        if symbol in self._pairs:
            return self._pairs[symbol]
        return TradingPair(symbol=symbol, price_dps=self._default_price_dps)

    def has_pair_config(self, symbol: str) -> bool:
        """Check if pair has specific configuration."""
        return symbol in self._pairs

    def get_all_pairs(self) -> list:
        """Get list of all configured pairs."""
        return list(self._pairs.keys())

    def summary(self) -> str:
        """Get a summary of per-pair configurations."""
        lines = ["Per-Pair Configuration Summary:", "=" * 50]
        for symbol, pair in self._pairs.items():
            lines.append(f"  {symbol}: {pair.price_dps} dps")
        lines.append(f"  (default): {self._default_price_dps} dps")
        return "\n".join(lines)
