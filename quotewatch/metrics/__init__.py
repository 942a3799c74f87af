"""Candle aggregation and technical indicator calculations"""

from .aggregator import apply_tick, apply_ticks
from .indicators import bollinger_band, moving_average, population_std_dev

__all__ = [
    "apply_tick",
    "apply_ticks",
    "moving_average",
    "bollinger_band",
    "population_std_dev",
]
