#!/usr/bin/env python3
"""
Trend Signal Engine - Main Entry Point

Replays close prices from a CSV file through the indicator engine and
reports every MACD / moving average crossover and trend reversal signal.

Signals are informational only: no orders are placed.
"""

import argparse
import sys
from typing import Optional

from dotenv import load_dotenv

from trendsignals.config.settings import get_settings, reload_settings
from trendsignals.core.tracker import MarketDataProcessor
from trendsignals.feed.price_file import load_close_prices
from trendsignals.observability.logger import configure_logging, get_logger
from trendsignals.strategy.base_strategy import Direction, SignalChange


def print_change(change: SignalChange) -> None:
    """Print a direction change as it happens."""
    print(
        f"[{change.direction.action}][{change.strategy.upper()}] "
        f"{change.symbol}: {change.previous.value} -> {change.direction.value} | {change.reason}"
    )


def show_config(config_path: Optional[str] = None) -> None:
    """Display current configuration."""
    settings = reload_settings(config_path) if config_path else get_settings()

    print("=== Current Configuration ===\n")

    print("[Indicators]")
    ind = settings.indicators
    print(f"  Fast MA: {ind.fast_ma_period} ({ind.ma_mode})")
    print(f"  Slow MA: {ind.slow_ma_period} ({ind.ma_mode})")
    print(f"  MACD: {ind.macd_fast_period}/{ind.macd_slow_period}/{ind.macd_signal_period}")

    print("\n[Strategy]")
    print(f"  Enabled: {', '.join(settings.strategy.enabled)}")

    print("\n[Pairs]")
    for pair in settings.pairs:
        print(f"  {pair.symbol}: {pair.price_dps} dps")
    print(f"  Default precision: {settings.default_price_dps} dps")

    print("\n[Logging]")
    print(f"  Level: {settings.logging.level}")
    print(f"  Format: {settings.logging.format}")
    print()


def run_replay(
    price_file: str,
    pair: str,
    column: str = "close",
    config_path: Optional[str] = None,
    log_level: Optional[str] = None
) -> int:
    """
    Replay a price file through the signal engine.

    Args:
        price_file: CSV file with close prices.
        pair: Trading pair the prices belong to.
        column: Close price column name.
        config_path: Optional path to config file.
        log_level: Optional log level overriding the config.

    Returns:
        Exit code.
    """
    try:
        settings = reload_settings(config_path) if config_path else get_settings()
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    configure_logging(
        level=log_level or settings.logging.level,
        format_type=settings.logging.format
    )
    logger = get_logger("main")

    try:
        prices = load_close_prices(price_file, column=column)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load prices: {e}")
        return 1

    processor = MarketDataProcessor(settings)
    processor.add_listener(print_change)

    logger.info(
        "Starting replay",
        pair=pair,
        ticks=len(prices),
        strategies=settings.strategy.enabled
    )

    counts = {name: {Direction.LONG: 0, Direction.SHORT: 0} for name in settings.strategy.enabled}
    for price in prices:
        tick = processor.on_close(pair, price)
        for name, direction in tick.directions.items():
            if direction is not Direction.NONE:
                counts[name][direction] += 1

    status = processor.get_tracker(pair).get_status()

    print("\n=== Replay Summary ===")
    print(f"Pair: {pair}")
    print(f"Ticks: {status['ticks']}")
    print(f"MACD phase: {status['macd_phase']}")
    for name, c in counts.items():
        print(
            f"  {name}: {c[Direction.LONG]} long ticks, {c[Direction.SHORT]} short ticks, "
            f"last direction {status['signals'][name]}"
        )
    print()

    return 0


def main() -> int:
    """Main entry point."""
    load_dotenv()

    parser = argparse.ArgumentParser(
        description="Trend Signal Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py --file data/btc_1h.csv --pair BTC/USD
  python main.py --file data/eth.csv --pair ETH/USD --column Close
  python main.py --show-config --config config/config.yaml
        """
    )

    parser.add_argument(
        "--config", "-c",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--show-config",
        action="store_true",
        help="Show current configuration"
    )
    parser.add_argument(
        "--file", "-f",
        help="CSV file of close prices to replay"
    )
    parser.add_argument(
        "--pair", "-p",
        default="BTC/USD",
        help="Trading pair the prices belong to (default: BTC/USD)"
    )
    parser.add_argument(
        "--column",
        default="close",
        help="Close price column (default: close)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the configured log level"
    )

    args = parser.parse_args()

    if args.show_config:
        try:
            show_config(args.config)
        except ValueError as e:
            print(f"Invalid configuration: {e}", file=sys.stderr)
            return 1
        return 0

    if not args.file:
        parser.error("--file is required unless --show-config is given")

    return run_replay(
        price_file=args.file,
        pair=args.pair,
        column=args.column,
        config_path=args.config,
        log_level=args.log_level
    )


if __name__ == "__main__":
    sys.exit(main())
