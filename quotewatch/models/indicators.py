"""Value objects for indicator results"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class SimpleMovingAverage:
    """Simple moving average values for period n"""
    n: int
    values: tuple[float, ...] = ()

    name = "SMA"

    @property
    def is_empty(self) -> bool:
        return not self.values

    @property
    def label(self) -> str:
        return f"{self.name}: {self.n}"

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class BollingerBand:
    """Bollinger band envelope around the moving average"""
    f: float
    n: int
    moving_average: tuple[float, ...] = ()
    upper: tuple[float, ...] = ()
    lower: tuple[float, ...] = ()

    name = "Bollinger Band"

    @property
    def is_empty(self) -> bool:
        return not self.moving_average

    @property
    def label(self) -> str:
        return f"{self.name}: {self.f}, {self.n}"

    @property
    def min_price(self) -> Optional[float]:
        """Lowest value of the lower band, None when empty"""
        return min(self.lower) if self.lower else None

    @property
    def max_price(self) -> Optional[float]:
        """Highest value of the upper band, None when empty"""
        return max(self.upper) if self.upper else None

    def __str__(self) -> str:
        return self.label
