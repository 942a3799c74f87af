"""
Per-symbol record state.

Holds the mutable state of a tracked security (prices, candle store, alarms,
listeners) and the ordered symbol containers used for watchlist and search
results.
"""
