"""Market data source contract and implementations."""

from .base import MarketDataSource, TickHandler
from .memory import InMemoryMarketDataSource

__all__ = ["MarketDataSource", "TickHandler", "InMemoryMarketDataSource"]
