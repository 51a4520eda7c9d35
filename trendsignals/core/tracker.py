"""
Per-instrument market data tracking.

A MarketDataTracker owns every piece of mutable indicator state for one
instrument: the fast/slow moving averages, the MACD indicator and the
last direction emitted by each strategy. Instruments never share state;
MarketDataProcessor keeps one tracker per symbol.
"""

from typing import Callable, Dict, Optional

from ..config.pair_config import PairConfigManager, TradingPair
from ..config.settings import IndicatorConfig, Settings, StrategyConfig, get_settings
from ..observability.logger import get_logger
from ..strategy.base_strategy import (
    Direction,
    SignalChange,
    SignalState,
    TickSignals,
)
from ..strategy.decisions import EVALUATORS
from ..strategy.signals.macd import MACDIndicator
from ..strategy.signals.moving_average import AverageMode, MovingAverageAccumulator

logger = get_logger(__name__)

SignalListener = Callable[[SignalChange], None]


class MarketDataTracker:
    """
    Indicator and signal state for a single instrument.

    Usage:
        tracker = MarketDataTracker(TradingPair("BTC/USD", price_dps=1))
        signals = tracker.process_close(42000.0)
    """

    def __init__(
        self,
        pair: TradingPair,
        indicators: Optional[IndicatorConfig] = None,
        strategy: Optional[StrategyConfig] = None
    ):
        """
        Initialize tracker.

        Args:
            pair: Instrument metadata.
            indicators: Indicator windows. Defaults to IndicatorConfig().
            strategy: Enabled strategies. Defaults to all of them.

        Raises:
            ValueError: If any indicator window is not positive.
        """
        if indicators is None:
            indicators = IndicatorConfig()
        if strategy is None:
            strategy = StrategyConfig()

        self.pair = pair
        self.ma_mode = AverageMode(indicators.ma_mode)
        self.fast_ma = MovingAverageAccumulator(indicators.fast_ma_period)
        self.slow_ma = MovingAverageAccumulator(indicators.slow_ma_period)
        self.macd = MACDIndicator(
            fast_period=indicators.macd_fast_period,
            slow_period=indicators.macd_slow_period,
            signal_period=indicators.macd_signal_period
        )

        self.enabled_strategies = list(strategy.enabled)
        self.signals = SignalState()
        self.ticks = 0

        self._listeners: list[SignalListener] = []

    def add_listener(self, listener: SignalListener) -> None:
        """Register a callback invoked once per direction change."""
        self._listeners.append(listener)

    def remove_listener(self, listener: SignalListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def update(self, close_price: float) -> None:
        """Feed a close price into every indicator."""
        self.fast_ma.compute(close_price, self.ma_mode)
        self.slow_ma.compute(close_price, self.ma_mode)
        self.macd.compute(close_price)
        self.ticks += 1

    def evaluate(self) -> Dict[str, Direction]:
        """Run each enabled strategy against the current indicator state."""
        return {
            name: EVALUATORS[name](self.pair, self)
            for name in self.enabled_strategies
        }

    def process_close(self, close_price: float) -> TickSignals:
        """
        Update indicators with a close price and evaluate strategies.

        Args:
            close_price: Close of the latest period.

        Returns:
            TickSignals with one direction per enabled strategy.
        """
        self.update(close_price)
        return TickSignals(
            symbol=self.pair.symbol,
            price=close_price,
            directions=self.evaluate()
        )

    def record_direction(
        self,
        pair: TradingPair,
        strategy: str,
        direction: Direction,
        reason: str,
        **values
    ) -> bool:
        """
        Record the direction a strategy returned this tick.

        Logs and notifies listeners only when it differs from the last
        recorded direction for that strategy.

        Returns:
            True if this was a direction change.
        """
        previous = self.signals.get(strategy)
        if previous == direction:
            return False

        self.signals.set(strategy, direction)

        logger.signal_change(
            direction.action,
            strategy,
            pair.symbol,
            reason,
            direction=direction.value,
            previous=previous.value,
            **values
        )

        change = SignalChange(
            symbol=pair.symbol,
            strategy=strategy,
            direction=direction,
            previous=previous,
            reason=reason,
            values=values
        )
        for listener in self._listeners:
            listener(change)

        return True

    def reset(self) -> None:
        """Clear all indicator and signal state."""
        self.fast_ma.reset()
        self.slow_ma.reset()
        self.macd.reset()
        self.signals.reset()
        self.ticks = 0

    def get_status(self) -> dict:
        """Snapshot of the tracker's indicator values."""
        return {
            "symbol": self.pair.symbol,
            "ticks": self.ticks,
            "fast_ma": self.fast_ma.latest(),
            "slow_ma": self.slow_ma.latest(),
            "macd": self.macd.macd_latest,
            "macd_signal": self.macd.signal_latest(),
            "macd_phase": self.macd.phase.value,
            "signals": {
                name: self.signals.get(name).value
                for name in self.enabled_strategies
            },
        }


class MarketDataProcessor:
    """
    Routes close prices to the tracker of their instrument.

    Trackers are created lazily on the first price for a symbol.
    """

    def __init__(self, settings: Optional[Settings] = None):
        if settings is None:
            settings = get_settings()

        self.settings = settings
        self.pair_config = PairConfigManager(settings)
        self._trackers: Dict[str, MarketDataTracker] = {}
        self._listeners: list[SignalListener] = []

    def add_listener(self, listener: SignalListener) -> None:
        """Register a callback for direction changes on every instrument."""
        self._listeners.append(listener)
        for tracker in self._trackers.values():
            tracker.add_listener(listener)

    def get_tracker(self, symbol: str) -> MarketDataTracker:
        """Get or create the tracker for a symbol."""
        tracker = self._trackers.get(symbol)
        if tracker is None:
            tracker = MarketDataTracker(
                self.pair_config.get_pair(symbol),
                indicators=self.settings.indicators,
                strategy=self.settings.strategy
            )
            for listener in self._listeners:
                tracker.add_listener(listener)
            self._trackers[symbol] = tracker
            logger.info(f"Tracking {symbol}", price_dps=tracker.pair.price_dps)
        return tracker

    def on_close(self, symbol: str, close_price: float) -> TickSignals:
        """
        Process a close price for a symbol.

        Args:
            symbol: Trading pair name.
            close_price: Close of the latest period.

        Returns:
            TickSignals for this tick.
        """
        return self.get_tracker(symbol).process_close(close_price)

    def symbols(self) -> list:
        return list(self._trackers.keys())

    def get_status(self) -> dict:
        return {symbol: t.get_status() for symbol, t in self._trackers.items()}
