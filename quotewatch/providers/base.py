"""Market data source contract consumed by the registry."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Callable, Optional

import structlog

from ..data.models import CandleResponse, Quote, SearchMatch, TradeTick
from ..data.resolution import Resolution

TickHandler = Callable[[Sequence[TradeTick]], None]


class MarketDataSource(ABC):
    """
    Contract for quote, search, candle and push-subscription access.

    Implementations raise TransportError when a request fails and
    DataUnavailableError when the provider has no data for a symbol. Ticks
    arrive asynchronously and are handed to the registered tick handler as
    one ordered batch per provider message.
    """

    def __init__(self) -> None:
        self.logger = structlog.get_logger(f"provider.{type(self).__name__}")
        self._tick_handler: Optional[TickHandler] = None

    @abstractmethod
    def fetch_quote(self, symbol: str) -> Quote:
        """Fetch the current quote snapshot of a symbol."""

    @abstractmethod
    def fetch_search(self, query: str) -> list[SearchMatch]:
        """Search symbols matching a query."""

    @abstractmethod
    def fetch_candles(self, symbol: str, resolution: Resolution,
                      from_sec: int, to_sec: int) -> CandleResponse:
        """Fetch historical candles between two epoch-second timestamps."""

    @abstractmethod
    def subscribe(self, symbol: str) -> None:
        """Request push updates for a symbol (fire-and-forget)."""

    @abstractmethod
    def unsubscribe(self, symbol: str) -> None:
        """Stop push updates for a symbol (fire-and-forget)."""

    def set_tick_handler(self, handler: Optional[TickHandler]) -> None:
        self._tick_handler = handler

    def dispatch_ticks(self, ticks: Sequence[TradeTick]) -> None:
        """Hand a batch of received ticks to the registered handler."""
        if self._tick_handler is None:
            self.logger.debug("No tick handler registered, dropping ticks", count=len(ticks))
            return
        self._tick_handler(ticks)
