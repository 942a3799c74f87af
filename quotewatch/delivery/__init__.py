"""Alert presenters for fired alarms."""

from .base import AlertPresentationError, BaseAlertPresenter
from .stdout_delivery import StdoutAlertPresenter

__all__ = ["AlertPresentationError", "BaseAlertPresenter", "StdoutAlertPresenter"]
