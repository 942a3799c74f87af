"""
Market data value types.

Resolutions, candles, trade ticks, quotes and search matches as consumed from
an already-decoded provider payload, plus normalization of candle responses.
"""
