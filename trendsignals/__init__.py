"""
Streaming technical-indicator engine for price series.
"""

__version__ = "0.1.0"
