"""
Price sources for offline replay.
"""

from .price_file import load_close_prices

__all__ = ["load_close_prices"]
