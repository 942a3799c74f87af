"""Pytest configuration and shared fixtures."""

from typing import Callable

import pytest

from quotewatch.data.models import Candle, CandleResponse, Quote, TradeTick
from quotewatch.data.resolution import Resolution
from quotewatch.providers import InMemoryMarketDataSource
from quotewatch.state.record import StockRecord

NOW = 1_700_000_000


def make_history(resolution: Resolution, count: int, end: int = NOW,
                 start_price: float = 100.0) -> CandleResponse:
    """Candle response with count entries, the last one bucket before end."""
    bucket = resolution.bucket_seconds
    times = [end - (count - i) * bucket for i in range(count)]
    closes = [start_price + i for i in range(count)]
    return CandleResponse(
        opens=tuple(closes),
        highs=tuple(c + 1.0 for c in closes),
        lows=tuple(c - 1.0 for c in closes),
        closes=tuple(closes),
        volumes=tuple(10.0 for _ in closes),
        times=tuple(times),
    )


@pytest.fixture
def now() -> int:
    """Fixed wall-clock time in epoch seconds."""
    return NOW


@pytest.fixture
def clock() -> Callable[[], int]:
    return lambda: NOW


@pytest.fixture
def sample_candle() -> Candle:
    """Sample one-minute candle opened at t=0."""
    return Candle(open_time=0, open=10.0, high=10.0, low=10.0, close=10.0, volume=1.0)


@pytest.fixture
def source() -> InMemoryMarketDataSource:
    """In-memory source knowing AAPL (with daily history) and MSFT."""
    src = InMemoryMarketDataSource()
    src.add_symbol("AAPL", Quote(current=110.0, open=100.0, time=NOW), "Apple Inc")
    src.add_symbol("MSFT", Quote(current=300.0, open=300.0, time=NOW), "Microsoft Corp")
    src.set_history("AAPL", Resolution.DAY, make_history(Resolution.DAY, 260))
    return src


@pytest.fixture
def available_record() -> StockRecord:
    """Available AAPL record at 110 with an opening price of 100."""
    return StockRecord.from_quote(
        "AAPL", "AAPL", "Apple Inc", Quote(current=110.0, open=100.0, time=NOW)
    )


@pytest.fixture
def make_tick() -> Callable[..., TradeTick]:
    """Factory for trade ticks, time in epoch milliseconds."""
    def factory(price: float, time: int, symbol: str = "AAPL", volume: float = 1.0) -> TradeTick:
        return TradeTick(symbol=symbol, price=price, volume=volume, time=time)
    return factory


@pytest.fixture
def history() -> Callable[..., CandleResponse]:
    """Factory for provider candle responses, see make_history."""
    return make_history
