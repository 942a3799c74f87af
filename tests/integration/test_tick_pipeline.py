"""Integration tests for the complete tick processing pipeline."""

import io
import json
import threading

import pytest

from quotewatch.alarms import AlarmEngine
from quotewatch.data.models import TradeTick
from quotewatch.data.resolution import Resolution
from quotewatch.delivery import StdoutAlertPresenter
from quotewatch.registry import StockRegistry


@pytest.fixture
def stream() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def pipeline(source, clock, stream):
    """Registry wired to an alarm engine presenting on a string stream."""
    registry = StockRegistry(source, clock=clock)
    engine = AlarmEngine(StdoutAlertPresenter(stream=stream))
    engine.attach(registry)
    return registry, engine


class TestTickPipeline:
    """Test suite for provider pushes flowing into candles and alarms."""

    def test_alarm_fires_from_pushed_tick(self, pipeline, source, stream, now) -> None:
        """Test that a pushed tick crossing a threshold is presented once."""
        registry, engine = pipeline
        registry.add_alarm("AAPL", 100.0)
        registry.add_alarm("AAPL", 130.0)

        source.push(TradeTick("AAPL", 99.5, 10.0, now * 1000 + 1_000))
        source.push(TradeTick("AAPL", 98.0, 10.0, now * 1000 + 2_000))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["threshold"] == 100.0
        assert registry.get_alarms("AAPL") == (130.0,)
        assert engine.fired_count == 1

    def test_ticks_extend_backfilled_candles(self, pipeline, source, history, now) -> None:
        """Test that streamed ticks extend the backfilled intraday history."""
        registry, _ = pipeline
        source.set_history("AAPL", Resolution.ONE, history(Resolution.ONE, 240))
        before = registry.get_candles("AAPL", Resolution.ONE, 240)
        assert len(before) == 240

        # Last backfilled candle opened at now - 60s
        source.push(TradeTick("AAPL", 500.0, 3.0, now * 1000 - 30_000),
                    TradeTick("AAPL", 501.0, 2.0, now * 1000 + 5_000))

        after = registry.get_candles("AAPL", Resolution.ONE, 300)
        assert len(after) == 241
        assert after[-2].high == 500.0
        assert after[-1].open_time == now * 1000 + 5_000
        assert after[-1].close == 501.0

        daily = registry.get_candles("AAPL", Resolution.DAY, 1)
        assert daily[-1].close == 501.0

    def test_concurrent_updates_fire_alarm_once(self, pipeline, source, stream, now) -> None:
        """Test exactly-once firing when many threads cross the threshold together."""
        registry, engine = pipeline
        registry.add_alarm("AAPL", 100.0)
        barrier = threading.Barrier(8)

        def push(i: int) -> None:
            barrier.wait()
            source.push(TradeTick("AAPL", 90.0 - i, 1.0, now * 1000 + i))

        threads = [threading.Thread(target=push, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert engine.fired_count == 1
        assert len(stream.getvalue().splitlines()) == 1

    def test_reset_then_restore(self, pipeline, source, stream, now) -> None:
        """Test that a restored registry keeps presenting alarms."""
        registry, engine = pipeline
        registry.add_watchlist_entry("MSFT")
        registry.add_alarm("MSFT", 310.0)
        snapshot = registry.snapshot()

        registry.reset()
        assert registry.all_alarms() == ()

        registry.restore(snapshot)
        source.push(TradeTick("MSFT", 311.0, 1.0, now * 1000))

        assert engine.fired_count == 1
        assert registry.watchlist_symbols() == ("MSFT",)
