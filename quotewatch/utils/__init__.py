"""
Utility functions module.

Time Semantics:
- Trade ticks and candle open times are epoch milliseconds
- Quote times and provider candle request windows are epoch seconds
- Wall-clock time is only used to anchor backfill request windows
"""
