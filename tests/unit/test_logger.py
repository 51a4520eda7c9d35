"""
Unit tests for structured logging output.
"""

import io
import json
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..'))

from trendsignals.config.pair_config import TradingPair
from trendsignals.core.tracker import MarketDataTracker
from trendsignals.observability.logger import configure_logging, get_logger
from trendsignals.strategy.base_strategy import Direction


@pytest.fixture
def captured():
    """Route logging into a buffer, restoring stdout output afterwards."""
    buffer = io.StringIO()
    yield buffer
    configure_logging()


def json_lines(buffer: io.StringIO) -> list[dict]:
    return [json.loads(line) for line in buffer.getvalue().splitlines() if line]


class TestStructuredLogger:
    """Tests for the structured logger and formatters."""

    def test_json_extras_are_top_level(self, captured):
        """Keyword extras appear as JSON keys next to the message."""
        configure_logging(level="INFO", format_type="json", stream=captured)
        get_logger("test.json").info("Loaded prices", path="prices.csv", rows=3)

        [record] = json_lines(captured)
        assert record["message"] == "Loaded prices"
        assert record["level"] == "INFO"
        assert record["logger"] == "test.json"
        assert record["path"] == "prices.csv"
        assert record["rows"] == 3

    def test_json_reserved_keys_kept(self, captured):
        """An extra named like a reserved key does not replace it."""
        configure_logging(level="INFO", format_type="json", stream=captured)
        get_logger("test.reserved").info("real message", message="other")

        [record] = json_lines(captured)
        assert record["message"] == "real message"

    def test_text_format(self, captured):
        """Text output appends extras as key=value pairs."""
        configure_logging(level="INFO", format_type="text", include_timestamps=False, stream=captured)
        get_logger("test.text").info("Tracking BTC/USD", price_dps=2)

        assert captured.getvalue().strip() == "INFO     test.text: Tracking BTC/USD | price_dps=2"

    def test_evaluation_only_at_debug(self, captured):
        """Rule evaluations are emitted at DEBUG and dropped at INFO."""
        configure_logging(level="INFO", format_type="json", stream=captured)
        logger = get_logger("test.evaluation")
        logger.evaluation("MACD", "BTC/USD", macd=1.0, signal=0.5)
        assert captured.getvalue() == ""

        configure_logging(level="DEBUG", format_type="json", stream=captured)
        logger.evaluation("MACD", "BTC/USD", macd=1.0, signal=0.5)

        [record] = json_lines(captured)
        assert record["message"] == "[MACD] BTC/USD"
        assert record["level"] == "DEBUG"
        assert record["pair"] == "BTC/USD"
        assert record["macd"] == 1.0

    def test_direction_change_logged_once(self, captured):
        """A repeated direction logs a single signal change."""
        configure_logging(level="INFO", format_type="json", stream=captured)
        tracker = MarketDataTracker(TradingPair("BTC/USD"))
        pair = tracker.pair

        assert tracker.record_direction(pair, "ma_cross", Direction.LONG, "FMA > SMA", fma=2.0)
        assert not tracker.record_direction(pair, "ma_cross", Direction.LONG, "FMA > SMA", fma=2.1)

        [record] = json_lines(captured)
        assert record["message"] == "[BUY][MA_CROSS] BTC/USD, signal: FMA > SMA"
        assert record["action"] == "BUY"
        assert record["strategy"] == "ma_cross"
        assert record["direction"] == "long"
        assert record["previous"] == "none"
        assert record["fma"] == 2.0
