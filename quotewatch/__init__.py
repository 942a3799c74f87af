"""
quotewatch - Multi-resolution candle tracking and price alarm core

Ingests quote snapshots, historical candle backfills and a live trade tick
stream for many securities. Maintains per-symbol OHLCV history at several
resolutions, derives moving averages and Bollinger bands on demand, and fires
one-shot price threshold alarms.
"""

__version__ = "0.1.0"
__author__ = "quotewatch team"
