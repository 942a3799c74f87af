"""
Stock registry coordinator.

Orchestrates the lifecycle of tracked symbols: record creation from quote and
search snapshots, historical candle backfills, push subscriptions, tick
routing, watchlist and search result membership, and alarm bookkeeping.
"""

import threading
from collections.abc import Iterable, Sequence
from concurrent.futures import Executor, Future
from typing import Any, Callable, Optional

import structlog

from .config.defaults import DefaultConfig, get_default_config
from .data.models import Candle, SearchMatch, TradeTick
from .data.normalizer import candles_from_response
from .data.resolution import Resolution
from .errors import DataUnavailableError, MalformedDataError, TransportError
from .logging.config import get_feed_logger, log_backfill_attempt
from .models.indicators import BollingerBand, SimpleMovingAverage
from .providers.base import MarketDataSource
from .state.membership import SymbolList
from .state.models import AlarmUnit, RegistrySnapshot
from .state.record import StockRecord
from .utils.time import now_epoch_seconds

logger = structlog.get_logger(__name__)
feed_logger = get_feed_logger(__name__)

AlarmListener = Callable[[StockRecord], None]


class StockRegistry:
    """
    Central registry of tracked securities.

    Manages the data flow:
    Snapshots / Backfills / Ticks → StockRecord → Listeners (AlarmEngine)
    """

    def __init__(
        self,
        source: MarketDataSource,
        config: Optional[DefaultConfig] = None,
        executor: Optional[Executor] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        """
        Initialize the registry.

        Args:
            source: Market data collaborator for quotes, search, candles and pushes
            config: Configuration, defaults when omitted
            executor: Runs backfills in the background when given, inline otherwise
            clock: Returns the current time in epoch seconds
        """
        self.logger = logger
        self.feed_logger = feed_logger

        self.source = source
        self.config = config or get_default_config()
        self.backfill_params = self.config.backfill
        self.default_resolution = Resolution.from_code(self.config.registry.default_resolution)

        self._executor = executor
        self._clock = clock or now_epoch_seconds

        # Guards the record map and listener list only, never held during I/O
        self._lock = threading.Lock()
        self._records: dict[str, StockRecord] = {}
        self._alarm_listeners: list[AlarmListener] = []

        self.watchlist: SymbolList[StockRecord] = SymbolList("watchlist")
        self._search_results: SymbolList[SearchMatch] = SymbolList("search_results")

        self.source.set_tick_handler(self.handle_ticks)

        self.logger.info(
            "Stock registry initialized",
            default_resolution=self.default_resolution.code,
            background_backfill=executor is not None
        )

    # Record lifecycle

    def get_record(self, symbol: str) -> Optional[StockRecord]:
        """Look up a tracked record without creating it."""
        with self._lock:
            return self._records.get(symbol)

    def get_or_create(self, symbol: str) -> StockRecord:
        """
        Return the record for symbol, creating it on first reference.

        A new record is built from the provider's search and quote snapshots.
        Available records are push-subscribed and backfilled at the default
        resolution; symbols the provider has no data for get an UNAVAILABLE
        placeholder.
        """
        record = self.get_record(symbol)
        if record is not None:
            return record

        record = self._fetch_record(symbol)

        with self._lock:
            existing = self._records.get(symbol)
            if existing is not None:
                return existing
            self._records[symbol] = record

        self.logger.info(
            "Registered stock record",
            symbol=symbol,
            status=record.status.value,
            price=record.current_price
        )

        if record.is_available:
            if self.config.registry.subscribe_on_create:
                self.subscribe(symbol)
            self.trigger_data_generation(symbol, self.default_resolution)

        return record

    def add_stock(self, symbol: str) -> StockRecord:
        """Restore entry point; same as get_or_create."""
        return self.get_or_create(symbol)

    def _fetch_record(self, symbol: str) -> StockRecord:
        draw_amount = self.backfill_params.draw_amount

        try:
            matches = self.source.fetch_search(symbol)
        except TransportError as e:
            self.logger.warning("Search request failed", symbol=symbol, error=str(e))
            return StockRecord.unavailable(symbol, draw_amount)

        match = next((m for m in matches if m.symbol == symbol), None)
        if match is None:
            self.logger.warning("Symbol unknown to provider", symbol=symbol)
            return StockRecord.unavailable(symbol, draw_amount)

        try:
            quote = self.source.fetch_quote(symbol)
        except (TransportError, DataUnavailableError) as e:
            self.logger.warning("Quote request failed", symbol=symbol, error=str(e))
            return StockRecord.unavailable(symbol, draw_amount)

        return StockRecord.from_quote(
            symbol,
            match.display_symbol,
            match.description,
            quote,
            draw_amount
        )

    def records(self) -> tuple[StockRecord, ...]:
        with self._lock:
            return tuple(self._records.values())

    def active_symbols(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._records.keys())

    def reset(self) -> None:
        """Drop every record, the watchlist and the search results."""
        with self._lock:
            records = list(self._records.values())
            self._records.clear()

        self.watchlist.clear()
        self._search_results.clear()

        for record in records:
            if record.is_available:
                self.unsubscribe(record.symbol)

        self.logger.info("Registry reset", dropped_records=len(records))

    # Push subscriptions and ticks

    def subscribe(self, symbol: str) -> None:
        try:
            self.source.subscribe(symbol)
        except TransportError as e:
            self.feed_logger.warning("Subscribe request failed", symbol=symbol, error=str(e))

    def unsubscribe(self, symbol: str) -> None:
        try:
            self.source.unsubscribe(symbol)
        except TransportError as e:
            self.feed_logger.warning("Unsubscribe request failed", symbol=symbol, error=str(e))

    def handle_tick(self, tick: TradeTick) -> None:
        self.handle_ticks((tick,))

    def handle_ticks(self, ticks: Sequence[TradeTick]) -> None:
        """Route ticks in order to their records; untracked symbols are dropped."""
        for tick in ticks:
            record = self.get_record(tick.symbol)
            if record is None:
                self.feed_logger.debug("Dropping tick for untracked symbol", symbol=tick.symbol)
                continue
            record.apply_tick(tick)

    # Candles and backfill

    def trigger_data_generation(self, symbol: str, resolution: Resolution) -> bool:
        """
        Issue a backfill if the resolution is under-populated.

        The record's loading flag is checked and set atomically, so at most
        one backfill per record is in flight.

        Returns:
            True if a backfill was issued
        """
        record = self.get_or_create(symbol)
        if not record.is_available:
            return False

        if not record.begin_loading(resolution, self.backfill_params.required_amount):
            return False

        if self._executor is None:
            self._run_backfill(record, resolution)
            return True

        try:
            future = self._executor.submit(self._run_backfill, record, resolution)
        except RuntimeError as e:
            record.finish_loading()
            self.feed_logger.error(
                "Could not schedule backfill",
                symbol=symbol,
                resolution=resolution.code,
                error=str(e)
            )
            return False

        future.add_done_callback(self._log_backfill_failure)
        return True

    def _log_backfill_failure(self, future: Future) -> None:
        error = future.exception()
        if error is not None:
            self.feed_logger.error(
                "Background backfill failed",
                error=str(error),
                error_type=type(error).__name__
            )

    def _run_backfill(self, record: StockRecord, resolution: Resolution) -> None:
        try:
            candles = self._fetch_candle_data(record.symbol, resolution)
            if candles:
                record.put_candles(resolution, candles)
            else:
                self.feed_logger.warning(
                    "Backfill returned no candles, resolution left unseeded",
                    symbol=record.symbol,
                    resolution=resolution.code
                )
        finally:
            record.finish_loading()

    def _fetch_candle_data(self, symbol: str, resolution: Resolution) -> Optional[list[Candle]]:
        """
        Fetch historical candles with progressively wider windows.

        Stops once the entry count is sufficient for the resolution. A failed
        request ends the loop early; the last successful result is kept.

        Returns:
            Candles of the last successful attempt, or None if none succeeded
        """
        params = self.backfill_params
        now = self._clock()
        candles: Optional[list[Candle]] = None

        for attempt in range(1, params.max_attempts + 1):
            from_sec = now - self._window_seconds(resolution, attempt)

            try:
                response = self.source.fetch_candles(symbol, resolution, from_sec, now)
                received = candles_from_response(response)
            except (TransportError, MalformedDataError) as e:
                self.feed_logger.warning(
                    "Backfill request failed, keeping partial data",
                    symbol=symbol,
                    resolution=resolution.code,
                    attempt=attempt,
                    error=str(e)
                )
                break

            candles = received
            sufficient = self.is_sufficient(resolution, len(received))
            log_backfill_attempt(
                self.feed_logger,
                symbol=symbol,
                resolution=resolution.code,
                attempt=attempt,
                entries=len(received),
                sufficient=sufficient
            )
            if sufficient:
                break
        else:
            self.feed_logger.info(
                "Backfill attempts exhausted, accepting partial data",
                symbol=symbol,
                resolution=resolution.code,
                entries=len(candles) if candles is not None else 0
            )

        return candles

    def _window_seconds(self, resolution: Resolution, attempt: int) -> int:
        params = self.backfill_params
        bucket = resolution.bucket_seconds

        if resolution == Resolution.WEEK:
            return attempt * params.week_window_step * bucket
        if resolution == Resolution.MONTH:
            return attempt * params.month_window_step * bucket
        return (params.backlog_amount + params.widen_factor * attempt * params.draw_amount) * bucket

    def is_sufficient(self, resolution: Resolution, entries: int) -> bool:
        """Whether a backfill returned enough entries for the resolution."""
        params = self.backfill_params
        if resolution == Resolution.WEEK:
            return entries >= params.week_min_entries
        if resolution == Resolution.MONTH:
            return entries >= params.month_min_entries
        return entries > params.required_amount

    def get_candles(self, symbol: str, resolution: Resolution,
                    amount: Optional[int] = None) -> tuple[Candle, ...]:
        """Candle snapshot, backfilling first when the resolution is under-populated."""
        record = self.get_or_create(symbol)
        if amount is None:
            amount = self.backfill_params.draw_amount
        if not record.has_candles(resolution, amount):
            self.trigger_data_generation(symbol, resolution)
        return record.get_candles(resolution, amount)

    def moving_average(self, symbol: str, resolution: Resolution,
                       n: Optional[int] = None) -> SimpleMovingAverage:
        if n is None:
            n = self.config.indicators.sma_period
        return self.get_or_create(symbol).moving_average(resolution, n)

    def bollinger_band(self, symbol: str, resolution: Resolution,
                       f: Optional[float] = None, n: Optional[int] = None) -> BollingerBand:
        if f is None:
            f = self.config.indicators.bollinger_factor
        if n is None:
            n = self.config.indicators.bollinger_period
        return self.get_or_create(symbol).bollinger_band(resolution, f, n)

    # Search results

    def search(self, query: str) -> tuple[SearchMatch, ...]:
        """Replace the search results with the provider's matches for query."""
        self._search_results.clear()

        try:
            matches = self.source.fetch_search(query)
        except TransportError as e:
            self.logger.warning("Search request failed", query=query, error=str(e))
            return ()

        self._search_results.replace_all([(m.symbol, m) for m in matches])
        return self._search_results.items()

    def search_results(self) -> tuple[SearchMatch, ...]:
        return self._search_results.items()

    def clear_search_results(self) -> None:
        self._search_results.clear()

    # Watchlist

    def add_watchlist_entry(self, symbol: str) -> bool:
        """Add symbol to the watchlist; returns False if already present."""
        record = self.get_or_create(symbol)
        added = self.watchlist.add(symbol, record)
        if added:
            self.logger.info("Added watchlist entry", symbol=symbol)
        return added

    def remove_watchlist_entry(self, symbol: str) -> bool:
        removed = self.watchlist.remove(symbol)
        if removed:
            self.logger.info("Removed watchlist entry", symbol=symbol)
        return removed

    def clear_watchlist(self) -> None:
        self.watchlist.clear()

    def watchlist_symbols(self) -> tuple[str, ...]:
        return self.watchlist.symbols()

    # Alarms

    def add_alarm_listener(self, listener: AlarmListener) -> None:
        with self._lock:
            if listener not in self._alarm_listeners:
                self._alarm_listeners.append(listener)

    def remove_alarm_listener(self, listener: AlarmListener) -> None:
        with self._lock:
            if listener in self._alarm_listeners:
                self._alarm_listeners.remove(listener)

    def add_alarm(self, symbol: str, threshold: float,
                  attribute: Optional[Any] = None) -> Optional[AlarmUnit]:
        """
        Add an alarm to a symbol and notify alarm listeners.

        Duplicate and ambiguous thresholds are rejected silently.
        """
        record = self.get_or_create(symbol)
        alarm = record.add_alarm(threshold, attribute)
        if alarm is not None:
            self._notify_alarm_added(record)
        return alarm

    def _notify_alarm_added(self, record: StockRecord) -> None:
        with self._lock:
            listeners = list(self._alarm_listeners)

        for listener in listeners:
            try:
                listener(record)
            except Exception:
                self.logger.exception(
                    "Alarm listener failed",
                    symbol=record.symbol,
                    listener=getattr(listener, "__qualname__", repr(listener))
                )

    def remove_alarm(self, symbol: str, threshold: float) -> bool:
        record = self.get_record(symbol)
        if record is None:
            return False
        return record.remove_alarm(threshold)

    def get_alarms(self, symbol: str) -> tuple[float, ...]:
        record = self.get_record(symbol)
        if record is None:
            return ()
        return record.get_alarms()

    def clear_alarms(self, symbol: str) -> None:
        record = self.get_record(symbol)
        if record is not None:
            record.clear_alarms()

    def clear_all_alarms(self) -> None:
        for record in self.records():
            record.clear_alarms()

    def alarm_symbols(self) -> tuple[str, ...]:
        """Symbols that currently carry at least one alarm."""
        return tuple(r.symbol for r in self.records() if r.get_alarms())

    def all_alarms(self) -> tuple[AlarmUnit, ...]:
        alarms: list[AlarmUnit] = []
        for record in self.records():
            alarms.extend(record.get_alarm_units())
        return tuple(alarms)

    # Persistence support

    def snapshot(self) -> RegistrySnapshot:
        """Plain values a persistence layer can store."""
        return RegistrySnapshot(
            active_symbols=self.active_symbols(),
            watchlist_symbols=self.watchlist_symbols(),
            alarms=self.all_alarms(),
        )

    def restore(self, snapshot: RegistrySnapshot) -> None:
        """Recreate records, watchlist entries and alarms from a snapshot."""
        for symbol in snapshot.active_symbols:
            self.add_stock(symbol)
        for symbol in snapshot.watchlist_symbols:
            self.add_watchlist_entry(symbol)
        self.restore_alarms(snapshot.alarms)

        self.logger.info(
            "Registry restored",
            records=len(snapshot.active_symbols),
            watchlist=len(snapshot.watchlist_symbols),
            alarms=len(snapshot.alarms)
        )

    def restore_alarms(self, alarms: Iterable[AlarmUnit]) -> None:
        for alarm in alarms:
            self.add_alarm(alarm.symbol, alarm.threshold, alarm.attribute)
