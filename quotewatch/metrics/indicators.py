"""Simple moving average and Bollinger band calculations"""

import math
from collections.abc import Sequence

from ..errors import InsufficientDataError


def _check_window(n: int, series: Sequence[float], name: str) -> None:
    if n < 1:
        raise ValueError(f"{name} period must be >= 1, got {n}")
    if len(series) < n:
        raise InsufficientDataError(
            f"Not enough data to calculate {name}",
            required_count=n,
            available_count=len(series),
        )


def moving_average(n: int, series: Sequence[float]) -> list[float]:
    """
    Calculate the simple moving average over a sliding window

    SMA[i] = sum(series[i:i+n]) / n

    Args:
        n: Window length
        series: Close prices in chronological order

    Returns:
        len(series) - n + 1 average values

    Raises:
        InsufficientDataError: If the series is shorter than n
        ValueError: If n < 1
    """
    _check_window(n, series, "moving average")

    length = len(series) - n + 1
    averages = []
    for i in range(length):
        averages.append(sum(series[i:i + n]) / n)
    return averages


def population_std_dev(window: Sequence[float], mean: float) -> float:
    """
    Population standard deviation of a window around a given mean

    sigma = sqrt(sum((x - mean)^2) / n)
    """
    total = 0.0
    for value in window:
        total += (value - mean) ** 2
    return math.sqrt(total / len(window))


def bollinger_band(f: float, n: int,
                   series: Sequence[float]) -> tuple[list[float], list[float], list[float]]:
    """
    Calculate Bollinger bands around the simple moving average

    upper[i] = SMA[i] + f * sigma[i]
    lower[i] = SMA[i] - f * sigma[i]

    sigma[i] is the population standard deviation (divisor n) of the i-th
    window around its own mean. A negative f swaps the upper and lower bands.

    Args:
        f: Standard deviation factor
        n: Window length
        series: Close prices in chronological order

    Returns:
        Tuple of (moving average, upper band, lower band), aligned

    Raises:
        InsufficientDataError: If the series is shorter than n
        ValueError: If n < 1
    """
    _check_window(n, series, "Bollinger band")

    averages = moving_average(n, series)
    upper = []
    lower = []
    for i, avg in enumerate(averages):
        sigma = population_std_dev(series[i:i + n], avg)
        upper.append(avg + f * sigma)
        lower.append(avg - f * sigma)

    return averages, upper, lower
