"""
Canonical data models for decoded market data.

This module defines immutable data structures for the values the core
consumes from a market data source: quotes, search matches, historical
candle responses and streamed trade ticks.
"""

from dataclasses import dataclass
from datetime import datetime

from ..utils.time import millis_to_datetime

NO_DATA_STATUS = "no_data"
OK_STATUS = "ok"


@dataclass(frozen=True)
class Candle:
    """OHLCV bucket. open_time is epoch milliseconds."""
    open_time: int      # Bucket open time, epoch ms
    open: float         # Opening price
    high: float         # High price
    low: float          # Low price
    close: float        # Closing price
    volume: float       # Traded volume

    @property
    def ts(self) -> datetime:
        """Open time as a UTC datetime."""
        return millis_to_datetime(self.open_time)


@dataclass(frozen=True)
class TradeTick:
    """Single streamed trade update. time is epoch milliseconds."""
    symbol: str
    price: float
    volume: float
    time: int


@dataclass(frozen=True)
class Quote:
    """Quote snapshot. time is epoch seconds."""
    current: float
    open: float
    high: float = 0.0
    low: float = 0.0
    prev_close: float = 0.0
    time: int = 0


@dataclass(frozen=True)
class SearchMatch:
    """Single symbol search result."""
    symbol: str
    display_symbol: str
    description: str


@dataclass(frozen=True)
class CandleResponse:
    """Historical candle arrays as returned by a provider.

    The arrays are parallel; times are epoch seconds.
    """
    opens: tuple[float, ...] = ()
    highs: tuple[float, ...] = ()
    lows: tuple[float, ...] = ()
    closes: tuple[float, ...] = ()
    volumes: tuple[float, ...] = ()
    times: tuple[int, ...] = ()
    status: str = OK_STATUS

    @classmethod
    def no_data(cls) -> "CandleResponse":
        return cls(status=NO_DATA_STATUS)

    @property
    def has_data(self) -> bool:
        return self.status == OK_STATUS and len(self.times) > 0

    def __len__(self) -> int:
        if self.status != OK_STATUS:
            return 0
        return len(self.times)

