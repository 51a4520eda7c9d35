"""
Streaming moving average accumulator (SMA / EMA).

Prices are pushed one at a time into a bounded window. Once the window
is full an average is produced on every tick:

SMA = sum(window) / N
EMA = Price * k + EMA_prev * (1 - k)
k = 2 / (N + 1)

The first EMA is seeded from the SMA of the window that just filled.
Only the last three averages are kept, which is enough for crossover
and reversal detection.
"""

from enum import Enum
from typing import Iterator, Optional

HISTORY_DEPTH = 3


class AverageMode(Enum):
    """Averaging method used by an accumulator."""
    SIMPLE = "sma"
    EXPONENTIAL = "ema"


class PriceWindow:
    """
    Fixed-capacity ring buffer of prices, iterated newest-first.

    When full, pushing a price overwrites the oldest slot.
    """

    def __init__(self, capacity: int):
        self._slots: list[float] = [0.0] * capacity
        self._capacity = capacity
        self._head = 0  # index the next price is written to
        self._size = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_full(self) -> bool:
        return self._size == self._capacity

    def __len__(self) -> int:
        return self._size

    def _index(self, age: int) -> int:
        # age 0 is the newest price
        return (self._head - 1 - age) % self._capacity

    def push(self, price: float) -> Optional[float]:
        """
        Admit a price, evicting the oldest one first if the window is full.

        Returns:
            The evicted price, or None if nothing was evicted.
        """
        evicted = None
        if self.is_full:
            evicted = self.oldest()
            self._size -= 1

        self._slots[self._head] = price
        self._head = (self._head + 1) % self._capacity
        self._size += 1
        return evicted

    def newest(self) -> Optional[float]:
        return self._slots[self._index(0)] if self._size else None

    def oldest(self) -> Optional[float]:
        return self._slots[self._index(self._size - 1)] if self._size else None

    def __iter__(self) -> Iterator[float]:
        for age in range(self._size):
            yield self._slots[self._index(age)]

    def clear(self) -> None:
        self._head = 0
        self._size = 0


class AverageHistory:
    """Circular buffer holding the most recent computed averages."""

    def __init__(self, depth: int = HISTORY_DEPTH):
        self._slots: list[Optional[float]] = [None] * depth
        self._depth = depth
        self._head = 0

    def push(self, value: float) -> None:
        """Record a new average; the oldest one drops out."""
        self._slots[self._head] = value
        self._head = (self._head + 1) % self._depth

    def get(self, age: int) -> Optional[float]:
        """Average computed `age` ticks ago (0 = latest)."""
        if not 0 <= age < self._depth:
            return None
        return self._slots[(self._head - 1 - age) % self._depth]

    def clear(self) -> None:
        self._slots = [None] * self._depth
        self._head = 0


class MovingAverageAccumulator:
    """
    Bounded-window moving average computed incrementally.

    Usage:
        acc = MovingAverageAccumulator(window_size=3)
        for close in closes:
            acc.compute(close, AverageMode.SIMPLE)
        acc.latest()
    """

    def __init__(self, window_size: int):
        """
        Initialize accumulator.

        Args:
            window_size: Number of prices required before an average is produced.

        Raises:
            ValueError: If window_size is not a positive integer.
        """
        if isinstance(window_size, bool) or not isinstance(window_size, int):
            raise ValueError(f"Window size must be an integer, got {window_size!r}")
        if window_size < 1:
            raise ValueError(f"Window size must be positive, got {window_size}")

        self.window_size = window_size
        self.weight = 2.0 / (window_size + 1)

        self._window = PriceWindow(window_size)
        self._history = AverageHistory()

    def latest(self) -> Optional[float]:
        """Current moving average value."""
        return self._history.get(0)

    def penultimate(self) -> Optional[float]:
        """Previous moving average value."""
        return self._history.get(1)

    def penultimate_penultimate(self) -> Optional[float]:
        """Moving average value from two ticks ago."""
        return self._history.get(2)

    @property
    def is_ready(self) -> bool:
        """True once at least one average has been produced."""
        return self.latest() is not None

    def prices(self) -> list[float]:
        """Snapshot of the buffered prices, newest first."""
        return list(self._window)

    def compute(self, price: float, mode: AverageMode = AverageMode.SIMPLE) -> None:
        """
        Advance the accumulator by one close price.

        Args:
            price: Newest close price.
            mode: SIMPLE or EXPONENTIAL averaging.
        """
        self._window.push(price)

        if not self._window.is_full:
            return

        # Naive summation; long windows accumulate rounding error.
        total = 0.0
        for cp in self._window:
            total += cp
        sma = total / self.window_size

        if mode is AverageMode.EXPONENTIAL:
            prev_ema = self.latest()
            if prev_ema is None:
                prev_ema = sma
            self._history.push(price * self.weight + prev_ema * (1 - self.weight))
        else:
            self._history.push(sma)

    def reset(self) -> None:
        """Reset accumulator state."""
        self._window.clear()
        self._history.clear()

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(window_size={self.window_size}, "
            f"latest={self.latest()})"
        )
