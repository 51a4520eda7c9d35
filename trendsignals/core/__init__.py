"""
Per-instrument signal tracking.
"""

from .tracker import MarketDataProcessor, MarketDataTracker

__all__ = ["MarketDataProcessor", "MarketDataTracker"]
