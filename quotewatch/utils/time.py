"""
Epoch time helpers.

Ticks and candles carry epoch milliseconds while quotes and provider candle
requests use epoch seconds; these helpers keep the conversions in one place.
"""

from datetime import datetime, timezone
from typing import Optional


def now_epoch_seconds(now: Optional[datetime] = None) -> int:
    """
    Current wall-clock time in epoch seconds.

    Args:
        now: Optional fixed time, used instead of the wall clock

    Returns:
        Epoch seconds
    """
    if now is None:
        now = datetime.now(timezone.utc)
    return int(now.timestamp())


def seconds_to_millis(seconds: int) -> int:
    return int(seconds) * 1000


def millis_to_datetime(millis: int) -> datetime:
    """Convert epoch milliseconds to a UTC datetime."""
    return datetime.fromtimestamp(millis / 1000, tz=timezone.utc)

