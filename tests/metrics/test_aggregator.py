"""Tests for tick-to-candle aggregation."""

from quotewatch.data.models import Candle
from quotewatch.data.resolution import Resolution
from quotewatch.metrics.aggregator import apply_tick, apply_ticks, candle_from_tick, merge_tick


class TestMergeTick:
    """Test suite for folding a tick into an open candle."""

    def test_merge_keeps_open_and_widens_range(self, sample_candle, make_tick) -> None:
        """Test that open is kept while high, low, close and volume update."""
        merged = merge_tick(sample_candle, make_tick(12.0, 10_000, volume=2.0))

        assert merged.open_time == 0
        assert merged.open == 10.0
        assert merged.high == 12.0
        assert merged.low == 10.0
        assert merged.close == 12.0
        assert merged.volume == 3.0

    def test_candle_from_tick(self, make_tick) -> None:
        """Test that a new candle opens at the tick's own time and price."""
        candle = candle_from_tick(make_tick(7.5, 123_000, volume=4.0))

        assert candle == Candle(open_time=123_000, open=7.5, high=7.5, low=7.5,
                                close=7.5, volume=4.0)


class TestApplyTick:
    """Test suite for applying ticks to candle sequences."""

    def test_one_minute_bucketing_scenario(self, sample_candle, make_tick) -> None:
        """Test the 30s / 45s / 61s scenario on a candle opened at t=0."""
        candles = [sample_candle]
        candles = apply_tick(candles, make_tick(11.0, 30_000), Resolution.ONE)
        candles = apply_tick(candles, make_tick(9.0, 45_000), Resolution.ONE)

        assert len(candles) == 1
        first = candles[0]
        assert (first.open, first.high, first.low, first.close) == (10.0, 11.0, 9.0, 9.0)
        assert first.volume == 3.0

        candles = apply_tick(candles, make_tick(12.0, 61_000), Resolution.ONE)

        assert len(candles) == 2
        assert candles[0] == first
        assert candles[1].open_time == 61_000
        assert candles[1].open == candles[1].close == 12.0

    def test_tick_on_bucket_boundary_merges(self, sample_candle, make_tick) -> None:
        """Test that t == open_time + bucket still belongs to the last candle."""
        candles = apply_tick([sample_candle], make_tick(13.0, 60_000), Resolution.ONE)

        assert len(candles) == 1
        assert candles[0].close == 13.0

    def test_late_tick_after_gap_opens_single_candle(self, sample_candle, make_tick) -> None:
        """Test that skipped buckets are not backfilled."""
        candles = apply_tick([sample_candle], make_tick(15.0, 500_000), Resolution.ONE)

        assert len(candles) == 2
        assert candles[1].open_time == 500_000

    def test_empty_sequence_stays_empty(self, make_tick) -> None:
        """Test that ticks do not seed an unseeded resolution."""
        assert apply_tick([], make_tick(10.0, 0), Resolution.ONE) == []
        assert apply_ticks([], [make_tick(10.0, 0)], Resolution.DAY) == []

    def test_input_sequence_not_modified(self, sample_candle, make_tick) -> None:
        """Test that aggregation is pure."""
        candles = [sample_candle]
        apply_tick(candles, make_tick(99.0, 1_000), Resolution.ONE)

        assert candles == [sample_candle]

    def test_resolution_bucket_is_respected(self, sample_candle, make_tick) -> None:
        """Test that a 90s tick opens a new 1-min candle but merges into a 5-min one."""
        t = make_tick(11.0, 90_000)

        assert len(apply_tick([sample_candle], t, Resolution.ONE)) == 2
        assert len(apply_tick([sample_candle], t, Resolution.FIVE)) == 1


class TestApplyTicks:
    """Test suite for batch application."""

    def test_fold_law(self, sample_candle, make_tick) -> None:
        """Test that applying a batch equals applying ticks one by one."""
        ticks = [
            make_tick(11.0, 30_000),
            make_tick(9.0, 45_000),
            make_tick(12.0, 61_000),
            make_tick(8.0, 200_000),
            make_tick(8.5, 230_000),
        ]

        folded = [sample_candle]
        for t in ticks:
            folded = apply_tick(folded, t, Resolution.ONE)

        assert apply_ticks([sample_candle], ticks, Resolution.ONE) == folded

    def test_open_times_non_decreasing(self, sample_candle, make_tick) -> None:
        """Test that open times never decrease, even for an out-of-order tick."""
        ticks = [make_tick(10.0 + i, t) for i, t in
                 enumerate([10_000, 70_000, 65_000, 200_000, 130_000, 400_000])]

        candles = apply_ticks([sample_candle], ticks, Resolution.ONE)

        open_times = [c.open_time for c in candles]
        assert open_times == sorted(open_times)
        assert len(set(open_times)) == len(open_times)
