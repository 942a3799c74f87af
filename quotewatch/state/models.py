"""
Record state data models.

Immutable structures describing record availability, alarm units and the
plain-value snapshot a persistence layer restores a registry from.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class RecordStatus(str, Enum):
    """Record lifecycle states."""
    UNINITIALIZED = "uninitialized"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class AlarmPosition(str, Enum):
    """Side of the threshold the price was on when the alarm was added."""
    ABOVE = "above"      # Fires once the price falls to or below the threshold
    BELOW = "below"      # Fires once the price rises to or above the threshold


@dataclass(frozen=True)
class AlarmUnit:
    """One-shot price threshold alarm.

    Unique by (symbol, threshold). The position is fixed at creation and
    never recalculated. attribute is an opaque display hint (e.g. a colour).
    """
    symbol: str
    threshold: float
    position: AlarmPosition
    attribute: Optional[Any] = None

    @property
    def key(self) -> tuple[str, float]:
        return (self.symbol, self.threshold)

    def is_crossed_by(self, price: float) -> bool:
        """Whether price has crossed the threshold in the recorded direction."""
        if self.position == AlarmPosition.ABOVE:
            return price <= self.threshold
        return price >= self.threshold

    def to_dict(self) -> dict[str, Any]:
        return {
            "symbol": self.symbol,
            "threshold": self.threshold,
            "position": self.position.value,
            "attribute": self.attribute,
        }

    def __str__(self) -> str:
        return str(self.threshold)


@dataclass(frozen=True)
class RegistrySnapshot:
    """Plain values a persistence layer needs to restore a registry."""
    active_symbols: tuple[str, ...] = ()
    watchlist_symbols: tuple[str, ...] = ()
    alarms: tuple[AlarmUnit, ...] = ()
