"""Incremental OHLCV aggregation of trade ticks into candle sequences"""

from collections.abc import Iterable, Sequence

from ..data.models import Candle, TradeTick
from ..data.resolution import Resolution


def merge_tick(candle: Candle, tick: TradeTick) -> Candle:
    """
    Fold a tick into an open candle

    Open price and open time are kept; low/high widen to the tick price, close
    becomes the tick price and volume accumulates.
    """
    return Candle(
        open_time=candle.open_time,
        open=candle.open,
        high=max(candle.high, tick.price),
        low=min(candle.low, tick.price),
        close=tick.price,
        volume=candle.volume + tick.volume,
    )


def candle_from_tick(tick: TradeTick) -> Candle:
    """Open a new candle at the tick's own timestamp"""
    return Candle(
        open_time=tick.time,
        open=tick.price,
        high=tick.price,
        low=tick.price,
        close=tick.price,
        volume=tick.volume,
    )


def _step(candles: list[Candle], tick: TradeTick, bucket: int) -> None:
    last = candles[-1]
    if tick.time > last.open_time + bucket:
        candles.append(candle_from_tick(tick))
    else:
        candles[-1] = merge_tick(last, tick)


def apply_tick(candles: Sequence[Candle], tick: TradeTick,
               resolution: Resolution) -> list[Candle]:
    """
    Apply a single trade tick to a candle sequence

    If the tick lies beyond the last candle's bucket (t > open_time + bucket) a
    new candle is appended at the tick time. A tick arriving after any gap
    opens exactly one candle, there is no backfill of skipped buckets.
    Otherwise the last candle is replaced by its updated version.

    Args:
        candles: Candle sequence ordered by open time (not modified)
        tick: Trade tick, time in epoch milliseconds
        resolution: Resolution of the sequence

    Returns:
        New candle list; an empty input is returned as an empty list
    """
    return apply_ticks(candles, (tick,), resolution)


def apply_ticks(candles: Sequence[Candle], ticks: Iterable[TradeTick],
                resolution: Resolution) -> list[Candle]:
    """
    Apply trade ticks in order

    Each tick goes through the same step as apply_tick, so a batch equals
    applying its ticks one at a time.
    """
    result = list(candles)
    if not result:
        return result

    bucket = resolution.bucket_millis
    for tick in ticks:
        _step(result, tick, bucket)

    return result
