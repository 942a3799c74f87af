"""Standard output alert presenter."""

import json
import sys
from datetime import datetime, timezone
from typing import Optional, TextIO

from ..config.defaults import PresenterParams
from ..state.models import AlarmUnit
from .base import AlertPresentationError, BaseAlertPresenter


class StdoutAlertPresenter(BaseAlertPresenter):
    """Writes fired alarms to standard output."""

    def __init__(self, name: str = "stdout", config: Optional[PresenterParams] = None,
                 stream: Optional[TextIO] = None):
        super().__init__(name, config or PresenterParams())
        self.config: PresenterParams
        self.stream = stream

    def present(self, symbol: str, alarm: AlarmUnit) -> None:
        """Print a fired alarm."""
        output = self._format_alert(symbol, alarm)
        try:
            print(output, file=self.stream or sys.stdout, flush=True)
        except (OSError, ValueError) as e:
            raise AlertPresentationError(f"Failed to write alert for {symbol}: {e}") from e
        self.record_success()

        self.logger.debug(
            "Alert printed to stdout",
            presenter=self.name,
            symbol=symbol,
            threshold=alarm.threshold
        )

    def _format_alert(self, symbol: str, alarm: AlarmUnit) -> str:
        """Format alert for stdout output."""
        if self.config.format == "pretty":
            direction = "fell to" if alarm.position.value == "above" else "rose to"
            return (
                f"[{datetime.now(timezone.utc).isoformat()}] ALARM: {symbol} "
                f"{direction} threshold {alarm.threshold}"
            )

        payload = {"event": "alarm_fired", **alarm.to_dict(), "symbol": symbol}
        if self.config.include_timestamp:
            payload["presented_at"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(payload, default=str)

    def health_check(self) -> bool:
        """Check if the output stream is writable."""
        try:
            return (self.stream or sys.stdout).writable()
        except Exception:
            return False
