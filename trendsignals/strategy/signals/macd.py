"""
Moving Average Convergence Divergence (MACD) indicator, streaming form.

MACD Line = EMA(fast_period) - EMA(slow_period)
Signal Line = EMA(signal_period) of MACD Line

The MACD line exists once the slow EMA has warmed up. The signal line
needs a further `signal_period` MACD values on top of that.
"""

from enum import Enum
from typing import Optional

from .moving_average import AverageMode, MovingAverageAccumulator


class MACDPhase(Enum):
    """Warm-up progression of the indicator."""
    WARMING = "warming"  # slow EMA not ready yet
    ACTIVE = "active"  # MACD line defined, signal line still warming
    FULLY_ACTIVE = "fully_active"  # MACD and signal lines defined


class MACDIndicator:
    """
    MACD built from three exponential accumulators.

    Feed one close per tick via compute(); read macd_latest,
    macd_previous and signal_latest() afterwards.
    """

    def __init__(
        self,
        fast_period: int = 12,
        slow_period: int = 26,
        signal_period: int = 9
    ):
        if fast_period >= slow_period:
            raise ValueError("Fast period must be less than slow period")

        self.fast = MovingAverageAccumulator(fast_period)
        self.slow = MovingAverageAccumulator(slow_period)
        self.signal = MovingAverageAccumulator(signal_period)

        self.macd_latest: Optional[float] = None
        self.macd_previous: Optional[float] = None

    def compute(self, price: float) -> None:
        """
        Update the indicator with a new close price.

        Args:
            price: Newest close price.
        """
        self.fast.compute(price, AverageMode.EXPONENTIAL)
        self.slow.compute(price, AverageMode.EXPONENTIAL)

        slow_latest = self.slow.latest()
        if slow_latest is None:
            return

        if self.macd_latest is not None:
            self.macd_previous = self.macd_latest

        macd = self.fast.latest() - slow_latest
        self.macd_latest = macd
        self.signal.compute(macd, AverageMode.EXPONENTIAL)

    def signal_latest(self) -> Optional[float]:
        """Current signal line value."""
        return self.signal.latest()

    def histogram(self) -> Optional[float]:
        """MACD line minus signal line, when both are defined."""
        signal = self.signal.latest()
        if self.macd_latest is None or signal is None:
            return None
        return self.macd_latest - signal

    @property
    def phase(self) -> MACDPhase:
        if self.macd_latest is None:
            return MACDPhase.WARMING
        if self.signal.latest() is None:
            return MACDPhase.ACTIVE
        return MACDPhase.FULLY_ACTIVE

    def reset(self) -> None:
        """Reset indicator state."""
        self.fast.reset()
        self.slow.reset()
        self.signal.reset()
        self.macd_latest = None
        self.macd_previous = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(fast={self.fast.window_size}, "
            f"slow={self.slow.window_size}, signal={self.signal.window_size}, "
            f"phase={self.phase.value})"
        )
