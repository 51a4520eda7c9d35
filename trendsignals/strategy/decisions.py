"""
Decision rules turning indicator state into a trading direction.

Each rule returns Direction.LONG, Direction.SHORT or Direction.NONE on
every tick. NONE is also returned while the indicators it reads are
still warming up. The tracker's per-strategy state is only used to log
and broadcast a direction change once; it never alters the returned
value.
"""

from decimal import Decimal, ROUND_FLOOR
from typing import TYPE_CHECKING

from ..config.pair_config import TradingPair
from ..observability.logger import get_logger
from .base_strategy import (
    Direction,
    STRATEGY_MACD,
    STRATEGY_MA_CROSS,
    STRATEGY_MA_TREND_CHANGE,
)

if TYPE_CHECKING:
    from ..core.tracker import MarketDataTracker

logger = get_logger(__name__)


def floor_to_precision(value: float, dps: int) -> float:
    """
    Round a value down to `dps` decimal places.

    The float is rounded through its shortest decimal repr, so a value
    already at the precision (1.15 at 2 dps) is returned unchanged
    instead of losing a unit to binary representation error.

    Args:
        value: Value to round.
        dps: Number of decimal places.

    Returns:
        Largest value with at most `dps` decimals not above `value`.
    """
    quantum = Decimal(1).scaleb(-dps)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_FLOOR))


def trading_decision_macd(pair: TradingPair, tracker: "MarketDataTracker") -> Direction:
    """
    MACD line crossing the signal line.

    Returns:
        LONG on an upward cross, SHORT on a downward cross, else NONE.
    """
    macd_ind = tracker.macd
    macd = macd_ind.macd_latest
    macd_prev = macd_ind.macd_previous
    signal = macd_ind.signal_latest()

    if macd is None or macd_prev is None or signal is None:
        return Direction.NONE

    logger.evaluation("MACD", pair.symbol, macd=macd, macd_prev=macd_prev, signal=signal)

    values = {"macd": macd, "macd_prev": macd_prev, "signal": signal}

    if macd > signal and macd_prev < signal:
        tracker.record_direction(
            pair,
            STRATEGY_MACD,
            Direction.LONG,
            f"MACD({macd}) > SIGNAL({signal}) > MACD_PREV({macd_prev})",
            **values
        )
        return Direction.LONG

    if macd < signal and macd_prev > signal:
        tracker.record_direction(
            pair,
            STRATEGY_MACD,
            Direction.SHORT,
            f"MACD({macd}) < SIGNAL({signal}) < MACD_PREV({macd_prev})",
            **values
        )
        return Direction.SHORT

    return Direction.NONE


def trading_decision_ma_cross(pair: TradingPair, tracker: "MarketDataTracker") -> Direction:
    """
    Fast moving average crossing the slow one.

    Values are floored to the pair's price precision first so that
    sub-precision noise does not register as a cross.

    Returns:
        LONG if the fast MA crosses the slow from below,
        SHORT if it crosses from above, else NONE.
    """
    fast_latest = tracker.fast_ma.latest()
    fast_prev = tracker.fast_ma.penultimate()
    slow_latest = tracker.slow_ma.latest()

    if fast_latest is None or fast_prev is None or slow_latest is None:
        return Direction.NONE

    dps = pair.get_price_dps()
    fma = floor_to_precision(fast_latest, dps)
    fma_prev = floor_to_precision(fast_prev, dps)
    sma = floor_to_precision(slow_latest, dps)

    logger.evaluation("MA][CROSS", pair.symbol, fma=fma, fma_prev=fma_prev, sma=sma)

    values = {"fma": fma, "fma_prev": fma_prev, "sma": sma}

    if fma > sma and fma_prev < sma:
        tracker.record_direction(
            pair,
            STRATEGY_MA_CROSS,
            Direction.LONG,
            f"FMA({fma}) > SMA({sma}) > FMA_PREV({fma_prev})",
            **values
        )
        return Direction.LONG

    if fma < sma and fma_prev > sma:
        tracker.record_direction(
            pair,
            STRATEGY_MA_CROSS,
            Direction.SHORT,
            f"FMA({fma}) < SMA({sma}) < FMA_PREV({fma_prev})",
            **values
        )
        return Direction.SHORT

    return Direction.NONE


def trading_decision_ma_trend_change(pair: TradingPair, tracker: "MarketDataTracker") -> Direction:
    """
    Trend reversal of the fast moving average.

    The slow MA's current value is compared against the fast MA's two
    previous values: a dip in the fast MA with the slow MA now above
    the dip is a V-shaped reversal upwards, and the mirror image a
    reversal downwards.

    Returns:
        LONG if the fast MA starts to trend upwards,
        SHORT if it starts to trend downwards, else NONE.
    """
    slow = tracker.slow_ma.latest()
    fast_prev = tracker.fast_ma.penultimate()
    fast_prev_prev = tracker.fast_ma.penultimate_penultimate()

    if (
        slow is None
        or tracker.fast_ma.latest() is None
        or fast_prev is None
        or fast_prev_prev is None
    ):
        return Direction.NONE

    logger.evaluation(
        "MA][TREND",
        pair.symbol,
        fma_prev_prev=fast_prev_prev,
        fma_prev=fast_prev,
        sma=slow
    )

    values = {"sma": slow, "fma_prev": fast_prev, "fma_prev_prev": fast_prev_prev}

    if slow > fast_prev and fast_prev < fast_prev_prev:
        tracker.record_direction(
            pair,
            STRATEGY_MA_TREND_CHANGE,
            Direction.LONG,
            f"SMA({slow}) > FMA_PREV({fast_prev}) and FMA_PREV({fast_prev}) < FMA_PREV_PREV({fast_prev_prev})",
            **values
        )
        return Direction.LONG

    if slow < fast_prev and fast_prev > fast_prev_prev:
        tracker.record_direction(
            pair,
            STRATEGY_MA_TREND_CHANGE,
            Direction.SHORT,
            f"SMA({slow}) < FMA_PREV({fast_prev}) and FMA_PREV({fast_prev}) > FMA_PREV_PREV({fast_prev_prev})",
            **values
        )
        return Direction.SHORT

    return Direction.NONE


EVALUATORS = {
    STRATEGY_MACD: trading_decision_macd,
    STRATEGY_MA_CROSS: trading_decision_ma_cross,
    STRATEGY_MA_TREND_CHANGE: trading_decision_ma_trend_change,
}
