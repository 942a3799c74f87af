#!/usr/bin/env python3
"""
Basic Usage Example - quotewatch

This script demonstrates the basic usage of the quotewatch registry with a
scripted in-memory market data source. It shows how to:
- Load configuration and set up logging
- Track a symbol with a daily candle backfill
- Add price alarms and present them on stdout
- Stream trade ticks and read candles and indicators back

Run: python examples/basic_usage.py
"""

from typing import List

from quotewatch.alarms import AlarmEngine
from quotewatch.config.loader import ConfigLoader
from quotewatch.data.models import CandleResponse, Quote, TradeTick
from quotewatch.data.resolution import Resolution
from quotewatch.delivery import StdoutAlertPresenter
from quotewatch.logging import configure_logging
from quotewatch.providers import InMemoryMarketDataSource
from quotewatch.registry import StockRegistry

NOW = 1_700_000_000
DAY = Resolution.DAY.bucket_seconds


def create_daily_history(count: int, start_price: float) -> CandleResponse:
    """Create a gently rising daily history ending one day before NOW."""
    times: List[int] = []
    closes: List[float] = []
    for i in range(count):
        times.append(NOW - (count - i) * DAY)
        closes.append(start_price + i * 0.25)

    return CandleResponse(
        opens=tuple(c - 0.1 for c in closes),
        highs=tuple(c + 0.5 for c in closes),
        lows=tuple(c - 0.5 for c in closes),
        closes=tuple(closes),
        volumes=tuple(1000.0 for _ in closes),
        times=tuple(times),
    )


def main() -> None:
    config = ConfigLoader.create().load()
    configure_logging(
        level=config.logging.level,
        format_json=config.logging.format_json,
        include_caller=config.logging.include_caller,
    )

    source = InMemoryMarketDataSource()
    source.add_symbol("AAPL", Quote(current=150.0, open=148.0, time=NOW), "Apple Inc")
    source.set_history("AAPL", Resolution.DAY, create_daily_history(260, 90.0))

    registry = StockRegistry(source, config, clock=lambda: NOW)
    engine = AlarmEngine(StdoutAlertPresenter(config=config.presenter))
    engine.attach(registry)

    record = registry.get_or_create("AAPL")
    print(f"Tracking {record.symbol} ({record.description}): "
          f"{record.current_price} change {record.change:+.3f}")

    registry.add_watchlist_entry("AAPL")
    registry.add_alarm("AAPL", 145.0)
    registry.add_alarm("AAPL", 155.0)

    # Streamed trades, the second one crosses the lower alarm
    t = (NOW + 60) * 1000
    source.push(TradeTick("AAPL", 149.0, 10.0, t))
    source.push(TradeTick("AAPL", 144.5, 25.0, t + 1000))

    candles = registry.get_candles("AAPL", Resolution.DAY)
    print(f"Last daily candle: {candles[-1]}")

    band = registry.bollinger_band("AAPL", Resolution.DAY)
    print(f"{band.label}: {band.min_price:.2f} .. {band.max_price:.2f}")

    print(f"Alarms left: {registry.get_alarms('AAPL')}, fired: {engine.fired_count}")
    print(f"Snapshot: {registry.snapshot()}")


if __name__ == "__main__":
    main()
