"""
Shared types for the signal strategies.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone
from enum import Enum


class Direction(Enum):
    """Directional classification of a tick."""
    LONG = "long"
    SHORT = "short"
    NONE = "none"  # no new directional condition this tick

    @property
    def action(self) -> str:
        """Log tag for a transition into this direction."""
        if self is Direction.LONG:
            return "BUY"
        if self is Direction.SHORT:
            return "SELL"
        return "NONE"


STRATEGY_MACD = "macd"
STRATEGY_MA_CROSS = "ma_cross"
STRATEGY_MA_TREND_CHANGE = "ma_trend_change"

ALL_STRATEGIES = (STRATEGY_MACD, STRATEGY_MA_CROSS, STRATEGY_MA_TREND_CHANGE)


@dataclass
class SignalState:
    """Last direction emitted per strategy, for one instrument."""
    macd: Direction = Direction.NONE
    ma_cross: Direction = Direction.NONE
    ma_trend_change: Direction = Direction.NONE

    def get(self, strategy: str) -> Direction:
        return getattr(self, strategy)

    def set(self, strategy: str, direction: Direction) -> None:
        if strategy not in ALL_STRATEGIES:
            raise ValueError(f"Unknown strategy: {strategy}")
        setattr(self, strategy, direction)

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, Direction.NONE)


@dataclass
class SignalChange:
    """A debounced direction transition for one strategy and instrument."""
    symbol: str
    strategy: str
    direction: Direction
    previous: Direction
    reason: str
    values: dict = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass
class TickSignals:
    """Classifications produced for a single close price."""
    symbol: str
    price: float
    directions: dict = field(default_factory=dict)  # strategy -> Direction

    def get(self, strategy: str) -> Direction:
        return self.directions.get(strategy, Direction.NONE)

    def has_signal(self) -> bool:
        """True if any strategy returned LONG or SHORT."""
        return any(d is not Direction.NONE for d in self.directions.values())
