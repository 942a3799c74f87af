"""
Alarm engine observing per-symbol price updates.

Subscribes to "alarm added" notifications from a registry, attaches itself as
a price listener to every record that receives an alarm, and fires alarms
through an alert presenter when the price crosses a threshold.
"""

import threading
from typing import TYPE_CHECKING

from ..delivery.base import BaseAlertPresenter
from ..logging.config import get_alarm_logger, log_alarm_fired
from ..state.models import AlarmUnit
from ..state.record import StockRecord

if TYPE_CHECKING:
    from ..registry import StockRegistry

logger = get_alarm_logger(__name__)

NO_DATA_PRICE = 0.0


class AlarmEngine:
    """Detects threshold crossings and fires one-shot alarms."""

    def __init__(self, presenter: BaseAlertPresenter) -> None:
        self.logger = logger
        self.presenter = presenter
        self._fired_lock = threading.Lock()
        self._fired_count = 0

    @property
    def fired_count(self) -> int:
        with self._fired_lock:
            return self._fired_count

    def attach(self, registry: "StockRegistry") -> None:
        """Subscribe to alarm-added notifications of a registry."""
        registry.add_alarm_listener(self.on_alarm_added)

    def detach(self, registry: "StockRegistry") -> None:
        registry.remove_alarm_listener(self.on_alarm_added)

    def on_alarm_added(self, record: StockRecord) -> None:
        """Start observing price updates of a record that received an alarm."""
        if not record.has_listener(self.on_price_update):
            record.add_listener(self.on_price_update)
            self.logger.debug("Observing record for alarms", symbol=record.symbol)

    def on_price_update(self, record: StockRecord) -> None:
        """Evaluate every alarm of a record against its current price."""
        price = record.current_price
        if price == NO_DATA_PRICE:
            return

        for alarm in record.get_alarm_units():
            if alarm.is_crossed_by(price):
                self._fire(record, alarm, price)

    def _fire(self, record: StockRecord, alarm: AlarmUnit, price: float) -> None:
        # Removal claims the alarm; a concurrent update that lost the race
        # must not present it a second time
        if not record.remove_alarm(alarm.threshold):
            return

        with self._fired_lock:
            self._fired_count += 1

        log_alarm_fired(
            self.logger,
            symbol=record.symbol,
            threshold=alarm.threshold,
            position=alarm.position.value,
            price=price
        )

        try:
            self.presenter.present(record.symbol, alarm)
        except Exception:
            self.presenter.record_failure()
            self.logger.exception(
                "Alert presenter failed",
                presenter=self.presenter.name,
                symbol=record.symbol,
                threshold=alarm.threshold
            )
