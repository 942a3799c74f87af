"""In-memory market data source for tests, demos and replays."""

import threading
from typing import Optional

from ..data.models import CandleResponse, Quote, SearchMatch, TradeTick
from ..data.resolution import Resolution
from ..errors import DataUnavailableError, TransportError
from .base import MarketDataSource


class InMemoryMarketDataSource(MarketDataSource):
    """
    Scripted market data source.

    Quotes, search entries and candle histories are registered up front.
    Candle requests return the part of the registered history that falls
    inside the requested window, so widening requests see more data. Every
    call is recorded for inspection.
    """

    def __init__(self) -> None:
        super().__init__()
        self._lock = threading.Lock()
        self.quotes: dict[str, Quote] = {}
        self.matches: list[SearchMatch] = []
        self.histories: dict[tuple[str, Resolution], CandleResponse] = {}

        self.failing_symbols: set[str] = set()
        self.failing_operations: set[str] = set()

        self.quote_requests: list[str] = []
        self.search_requests: list[str] = []
        self.candle_requests: list[tuple[str, Resolution, int, int]] = []
        self.subscriptions: list[str] = []
        self.unsubscriptions: list[str] = []

    # Scripting

    def add_symbol(self, symbol: str, quote: Quote, description: str = "",
                   display_symbol: Optional[str] = None) -> None:
        self.quotes[symbol] = quote
        self.matches.append(SearchMatch(
            symbol=symbol,
            display_symbol=display_symbol or symbol,
            description=description,
        ))

    def set_history(self, symbol: str, resolution: Resolution, response: CandleResponse) -> None:
        self.histories[(symbol, resolution)] = response

    def fail(self, operation: str, symbol: Optional[str] = None) -> None:
        """Make an operation ("quote", "search", "candles") raise TransportError."""
        if symbol is None:
            self.failing_operations.add(operation)
        else:
            self.failing_symbols.add(f"{operation}:{symbol}")

    def push(self, *ticks: TradeTick) -> None:
        """Deliver ticks as a single provider message."""
        self.dispatch_ticks(ticks)

    def _check_failure(self, operation: str, symbol: str) -> None:
        if operation in self.failing_operations or f"{operation}:{symbol}" in self.failing_symbols:
            raise TransportError(
                f"Simulated {operation} failure",
                operation=operation,
                symbol=symbol
            )

    # MarketDataSource

    def fetch_quote(self, symbol: str) -> Quote:
        with self._lock:
            self.quote_requests.append(symbol)
        self._check_failure("quote", symbol)
        quote = self.quotes.get(symbol)
        if quote is None:
            raise DataUnavailableError(f"No quote for {symbol}", symbol=symbol)
        return quote

    def fetch_search(self, query: str) -> list[SearchMatch]:
        with self._lock:
            self.search_requests.append(query)
        self._check_failure("search", query)
        needle = query.upper()
        return [
            m for m in self.matches
            if needle in m.symbol.upper() or needle in m.description.upper()
        ]

    def fetch_candles(self, symbol: str, resolution: Resolution,
                      from_sec: int, to_sec: int) -> CandleResponse:
        with self._lock:
            self.candle_requests.append((symbol, resolution, from_sec, to_sec))
        self._check_failure("candles", symbol)

        history = self.histories.get((symbol, resolution))
        if history is None or not history.has_data:
            return CandleResponse.no_data()

        indices = [i for i, t in enumerate(history.times) if from_sec <= t <= to_sec]
        if not indices:
            return CandleResponse.no_data()

        def pick(values):
            return tuple(values[i] for i in indices)

        return CandleResponse(
            opens=pick(history.opens),
            highs=pick(history.highs),
            lows=pick(history.lows),
            closes=pick(history.closes),
            volumes=pick(history.volumes),
            times=pick(history.times),
        )

    def subscribe(self, symbol: str) -> None:
        with self._lock:
            self.subscriptions.append(symbol)

    def unsubscribe(self, symbol: str) -> None:
        with self._lock:
            self.unsubscriptions.append(symbol)
