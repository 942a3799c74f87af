"""
Per-symbol record state.

A StockRecord owns the price history, the per-resolution candle store, the
alarm set and the listener registry of one security. All mutation goes through
a lock scoped to the record; independent records never contend. Listeners are
notified synchronously on the mutating thread after the lock is released.
"""

import threading
from collections.abc import Iterable
from typing import Any, Callable, Optional

import structlog

from ..data.models import Candle, Quote, TradeTick
from ..data.resolution import Resolution
from ..errors import InsufficientDataError
from ..metrics import aggregator, indicators
from ..models.indicators import BollingerBand, SimpleMovingAverage
from ..utils.time import seconds_to_millis
from .models import AlarmPosition, AlarmUnit, RecordStatus

logger = structlog.get_logger(__name__)

DEFAULT_DRAW_AMOUNT = 30

StockListener = Callable[["StockRecord"], None]


def round_change(change: float) -> float:
    """Round half away from zero to 3 decimals via integer truncation."""
    scaled = change * 1000.0
    scaled = scaled + 0.5 if scaled >= 0 else scaled - 0.5
    return int(scaled) / 1000.0


class StockRecord:
    """Mutable state of a single tracked security."""

    def __init__(
        self,
        symbol: str,
        display_symbol: str = "",
        description: str = "",
        draw_amount: int = DEFAULT_DRAW_AMOUNT,
    ) -> None:
        self.symbol = symbol
        self.display_symbol = display_symbol
        self.description = description
        self.draw_amount = draw_amount
        self.logger = logger.bind(symbol=symbol)

        self._lock = threading.RLock()
        self._status = RecordStatus.UNINITIALIZED

        # Exactly one level of price history
        self._current_price = 0.0
        self._current_time: Optional[int] = None
        self._previous_price = 0.0
        self._previous_time: Optional[int] = None
        self._open_price = 0.0
        self._change = 0.0

        self._loading = False
        self._candles: dict[Resolution, tuple[Candle, ...]] = {}
        self._alarms: dict[float, AlarmUnit] = {}
        self._listeners: list[StockListener] = []

    @classmethod
    def from_quote(
        cls,
        symbol: str,
        display_symbol: str,
        description: str,
        quote: Quote,
        draw_amount: int = DEFAULT_DRAW_AMOUNT,
    ) -> "StockRecord":
        """Create an available record seeded from a quote snapshot."""
        record = cls(symbol, display_symbol, description, draw_amount)
        record.apply_quote(quote)
        return record

    @classmethod
    def unavailable(cls, symbol: str, draw_amount: int = DEFAULT_DRAW_AMOUNT) -> "StockRecord":
        """Create a placeholder record for a symbol the provider has no data for."""
        record = cls(symbol, draw_amount=draw_amount)
        record.mark_unavailable()
        return record

    # Status

    @property
    def status(self) -> RecordStatus:
        with self._lock:
            return self._status

    @property
    def is_available(self) -> bool:
        return self.status == RecordStatus.AVAILABLE

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._loading

    def mark_unavailable(self) -> None:
        """Move an uninitialized record to the terminal UNAVAILABLE state."""
        with self._lock:
            if self._status == RecordStatus.AVAILABLE:
                self.logger.warning("Ignoring unavailable mark on available record")
                return
            self._status = RecordStatus.UNAVAILABLE

    # Prices

    @property
    def current_price(self) -> float:
        with self._lock:
            return self._current_price

    @property
    def current_time(self) -> Optional[int]:
        with self._lock:
            return self._current_time

    @property
    def previous_price(self) -> float:
        with self._lock:
            return self._previous_price

    @property
    def previous_time(self) -> Optional[int]:
        with self._lock:
            return self._previous_time

    @property
    def open_price(self) -> float:
        with self._lock:
            return self._open_price

    @property
    def change(self) -> float:
        """Percent change against the opening price, as a fraction."""
        with self._lock:
            return self._change

    def apply_quote(self, quote: Quote) -> bool:
        """
        Seed the opening reference and current price from a quote.

        Returns:
            False if the record is UNAVAILABLE (terminal), True otherwise
        """
        with self._lock:
            if self._status == RecordStatus.UNAVAILABLE:
                self.logger.warning("Ignoring quote for unavailable record")
                return False

            self._open_price = quote.open
            self._current_price = quote.current
            self._current_time = seconds_to_millis(quote.time)
            self._recalculate_change()
            self._status = RecordStatus.AVAILABLE

        return True

    def apply_tick(self, tick: TradeTick) -> bool:
        """
        Apply a streamed trade tick and notify listeners.

        Shifts current price to previous, sets the tick price as current,
        recomputes the change and folds the tick into every seeded resolution.

        Returns:
            False if the record is not AVAILABLE and the tick was ignored
        """
        with self._lock:
            if self._status != RecordStatus.AVAILABLE:
                self.logger.debug(
                    "Ignoring tick for record that is not available",
                    status=self._status.value,
                    price=tick.price
                )
                return False

            self._set_price(tick.price, tick.time)
            self._recalculate_change()

            for resolution in Resolution:
                candles = self._candles.get(resolution)
                if candles is not None:
                    self._candles[resolution] = tuple(
                        aggregator.apply_tick(candles, tick, resolution)
                    )

        self.notify_listeners()
        return True

    def apply_ticks(self, ticks: Iterable[TradeTick]) -> bool:
        """
        Apply a batch of ticks in order.

        Listeners are notified after every tick so that a crossing which
        reverses later in the same batch is still observed.

        Returns:
            True if at least one tick was applied
        """
        applied = False
        for tick in ticks:
            applied = self.apply_tick(tick) or applied
        return applied

    def _set_price(self, price: float, time: int) -> None:
        self._previous_price = self._current_price
        self._previous_time = self._current_time
        self._current_price = price
        self._current_time = time

    def _recalculate_change(self) -> None:
        if self._open_price == 0:
            self._change = 0.0
        else:
            self._change = round_change(self._current_price / self._open_price - 1)

    # Candles

    def put_candles(self, resolution: Resolution, candles: Iterable[Candle]) -> None:
        """Seed or reset the candle sequence of a resolution."""
        with self._lock:
            self._candles[resolution] = tuple(candles)

    def has_candles(self, resolution: Resolution, amount: Optional[int] = None) -> bool:
        """
        Check whether a resolution is populated.

        WEEK and MONTH only need to be present since providers deliver limited
        history for them; other resolutions need at least amount candles.
        """
        if amount is None:
            amount = self.draw_amount
        with self._lock:
            return self._has_candles(resolution, amount)

    def _has_candles(self, resolution: Resolution, amount: int) -> bool:
        if resolution not in self._candles:
            return False
        if resolution.is_coarse:
            return True
        return len(self._candles[resolution]) >= amount

    def seeded_resolutions(self) -> tuple[Resolution, ...]:
        with self._lock:
            return tuple(r for r in Resolution if r in self._candles)

    def get_candles(self, resolution: Resolution, amount: Optional[int] = None) -> tuple[Candle, ...]:
        """Snapshot of the last amount candles (all when amount is None)."""
        with self._lock:
            candles = self._candles.get(resolution, ())
        if amount is None or amount >= len(candles):
            return candles
        if amount <= 0:
            return ()
        return candles[-amount:]

    def close_prices(self, resolution: Resolution, amount: Optional[int] = None) -> tuple[float, ...]:
        return tuple(c.close for c in self.get_candles(resolution, amount))

    # Indicators

    def moving_average(self, resolution: Resolution, n: int) -> SimpleMovingAverage:
        """Moving average over the drawn window; empty when not enough data."""
        closes = self.close_prices(resolution, self.draw_amount + n)
        try:
            values = indicators.moving_average(n, closes)
        except InsufficientDataError as e:
            self.logger.debug(
                "Moving average not ready",
                resolution=resolution.code,
                required=e.required_count,
                available=e.available_count
            )
            return SimpleMovingAverage(n=n)
        return SimpleMovingAverage(n=n, values=tuple(values))

    def bollinger_band(self, resolution: Resolution, f: float, n: int) -> BollingerBand:
        """Bollinger band over the drawn window; empty when not enough data."""
        closes = self.close_prices(resolution, self.draw_amount + n)
        try:
            avg, upper, lower = indicators.bollinger_band(f, n, closes)
        except InsufficientDataError as e:
            self.logger.debug(
                "Bollinger band not ready",
                resolution=resolution.code,
                required=e.required_count,
                available=e.available_count
            )
            return BollingerBand(f=f, n=n)
        return BollingerBand(
            f=f,
            n=n,
            moving_average=tuple(avg),
            upper=tuple(upper),
            lower=tuple(lower),
        )

    # Loading flag

    def begin_loading(self, resolution: Resolution, amount: int) -> bool:
        """
        Atomically claim the loading flag for a backfill.

        Succeeds only when the resolution is unseeded or under-populated and
        no other fetch for this record is in flight.
        """
        with self._lock:
            if self._loading or self._has_candles(resolution, amount):
                return False
            self._loading = True
            return True

    def finish_loading(self) -> None:
        with self._lock:
            self._loading = False

    # Alarms

    def add_alarm(self, threshold: float, attribute: Optional[Any] = None) -> Optional[AlarmUnit]:
        """
        Add a one-shot alarm at threshold.

        Duplicate thresholds are ignored. A threshold equal to the current
        price is rejected since no side can be inferred.

        Returns:
            The new AlarmUnit, or None if the add was rejected
        """
        with self._lock:
            if threshold in self._alarms:
                self.logger.debug("Duplicate alarm ignored", threshold=threshold)
                return None

            if self._current_price > threshold:
                position = AlarmPosition.ABOVE
            elif self._current_price < threshold:
                position = AlarmPosition.BELOW
            else:
                self.logger.info(
                    "Ambiguous alarm rejected, threshold equals current price",
                    threshold=threshold
                )
                return None

            alarm = AlarmUnit(self.symbol, threshold, position, attribute)
            self._alarms[threshold] = alarm

        self.logger.info("Alarm added", threshold=threshold, position=position.value)
        return alarm

    def remove_alarm(self, threshold: float) -> bool:
        """Remove the alarm at threshold; returns False if there was none."""
        with self._lock:
            return self._alarms.pop(threshold, None) is not None

    def clear_alarms(self) -> None:
        with self._lock:
            self._alarms.clear()

    def get_alarms(self) -> tuple[float, ...]:
        """Thresholds of all registered alarms."""
        with self._lock:
            return tuple(self._alarms.keys())

    def get_alarm_units(self) -> tuple[AlarmUnit, ...]:
        with self._lock:
            return tuple(self._alarms.values())

    # Listeners

    def add_listener(self, listener: StockListener) -> None:
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: StockListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def has_listener(self, listener: StockListener) -> bool:
        with self._lock:
            return listener in self._listeners

    def notify_listeners(self) -> None:
        """Call every listener; a failing listener does not affect the others."""
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(self)
            except Exception:
                self.logger.exception(
                    "Stock listener failed",
                    listener=getattr(listener, "__qualname__", repr(listener))
                )

    def __repr__(self) -> str:
        return (
            f"StockRecord(symbol={self.symbol!r}, status={self.status.value}, "
            f"price={self.current_price})"
        )
