"""Candle resolutions with their bucket durations and provider wire codes."""

from datetime import timedelta
from enum import Enum


class Resolution(str, Enum):
    """Candle bucket duration selector; values are provider wire codes."""
    ONE = "1"
    FIVE = "5"
    FIFTEEN = "15"
    THIRTY = "30"
    SIXTY = "60"
    DAY = "D"
    WEEK = "W"
    MONTH = "M"

    @classmethod
    def from_code(cls, code: str) -> "Resolution":
        """Look up a resolution by its wire code."""
        try:
            return cls(str(code).upper())
        except ValueError:
            raise ValueError(f"Unknown resolution code: {code!r}") from None

    @property
    def code(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def bucket(self) -> timedelta:
        return _BUCKETS[self]

    @property
    def bucket_seconds(self) -> int:
        return int(self.bucket.total_seconds())

    @property
    def bucket_millis(self) -> int:
        return self.bucket_seconds * 1000

    @property
    def is_coarse(self) -> bool:
        """WEEK and MONTH, for which providers only return limited history."""
        return self in (Resolution.WEEK, Resolution.MONTH)


# Month is approximated as 31 days
_BUCKETS = {
    Resolution.ONE: timedelta(minutes=1),
    Resolution.FIVE: timedelta(minutes=5),
    Resolution.FIFTEEN: timedelta(minutes=15),
    Resolution.THIRTY: timedelta(minutes=30),
    Resolution.SIXTY: timedelta(hours=1),
    Resolution.DAY: timedelta(days=1),
    Resolution.WEEK: timedelta(days=7),
    Resolution.MONTH: timedelta(days=31),
}

_LABELS = {
    Resolution.ONE: "1 min",
    Resolution.FIVE: "5 min",
    Resolution.FIFTEEN: "15 min",
    Resolution.THIRTY: "30 min",
    Resolution.SIXTY: "60 min",
    Resolution.DAY: "Day",
    Resolution.WEEK: "Week",
    Resolution.MONTH: "Month",
}
