"""
Streaming technical indicators.
"""

from .moving_average import (
    AverageHistory,
    AverageMode,
    MovingAverageAccumulator,
    PriceWindow,
)
from .macd import MACDIndicator, MACDPhase

__all__ = [
    # Moving averages
    "AverageHistory",
    "AverageMode",
    "MovingAverageAccumulator",
    "PriceWindow",
    # MACD
    "MACDIndicator",
    "MACDPhase",
]
