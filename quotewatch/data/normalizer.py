"""
Normalization of provider candle responses into candle sequences.

Converts the parallel arrays of a decoded historical candle response into an
ordered list of Candle values with millisecond open times so they can be merged
with streamed ticks.
"""

import structlog

from ..errors import MalformedDataError
from ..utils.time import seconds_to_millis
from .models import Candle, CandleResponse

logger = structlog.get_logger(__name__)


def candles_from_response(response: CandleResponse) -> list[Candle]:
    """
    Convert a provider candle response into a list of candles.

    Args:
        response: Decoded candle arrays, times in epoch seconds

    Returns:
        Candles ordered by open time ascending; empty for a no-data response

    Raises:
        MalformedDataError: If the parallel arrays differ in length
    """
    if not response.has_data:
        return []

    count = len(response.times)
    lengths = {
        "opens": len(response.opens),
        "highs": len(response.highs),
        "lows": len(response.lows),
        "closes": len(response.closes),
        "volumes": len(response.volumes),
    }
    mismatched = {name: n for name, n in lengths.items() if n != count}
    if mismatched:
        raise MalformedDataError(
            "Candle response arrays differ in length",
            expected_format=f"{count} entries per array",
            context={"times": count, **mismatched},
        )

    candles = []
    last_time = None
    for i in range(count):
        open_time = seconds_to_millis(response.times[i])
        if last_time is not None and open_time <= last_time:
            # Keep the sequence strictly ascending
            logger.warning(
                "Dropping out-of-order candle from response",
                open_time=open_time,
                previous_open_time=last_time,
            )
            continue
        candles.append(Candle(
            open_time=open_time,
            open=float(response.opens[i]),
            high=float(response.highs[i]),
            low=float(response.lows[i]),
            close=float(response.closes[i]),
            volume=float(response.volumes[i]),
        ))
        last_time = open_time

    return candles
