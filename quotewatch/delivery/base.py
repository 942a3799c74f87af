"""Base classes for alert presentation."""

from abc import ABC, abstractmethod
from typing import Any

import structlog

from ..state.models import AlarmUnit


class AlertPresentationError(Exception):
    """Base exception for alert presentation errors."""
    pass


class BaseAlertPresenter(ABC):
    """Base class for fired-alarm presenters.

    present() is fire-and-forget from the caller's point of view; failures
    are counted and logged by the caller.
    """

    def __init__(self, name: str, config: Any = None):
        self.name = name
        self.config = config
        self.logger = structlog.get_logger(f"alert.presenter.{name}")
        self._presented_count = 0
        self._error_count = 0

    @abstractmethod
    def present(self, symbol: str, alarm: AlarmUnit) -> None:
        """
        Present a fired alarm.

        Args:
            symbol: Symbol whose price crossed the threshold
            alarm: The alarm that fired
        """
        pass

    def health_check(self) -> bool:
        """Check if the presenter can currently deliver alerts."""
        return True

    def record_success(self) -> None:
        self._presented_count += 1

    def record_failure(self) -> None:
        self._error_count += 1

    def get_stats(self) -> dict[str, Any]:
        """Get presentation statistics."""
        return {
            "name": self.name,
            "presented_count": self._presented_count,
            "error_count": self._error_count,
            "success_rate": (
                self._presented_count / (self._presented_count + self._error_count)
                if (self._presented_count + self._error_count) > 0 else 0.0
            )
        }

    def reset_stats(self):
        """Reset presentation statistics."""
        self._presented_count = 0
        self._error_count = 0
