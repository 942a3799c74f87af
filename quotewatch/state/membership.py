"""Ordered, idempotent symbol containers for watchlist and search results."""

import threading
from collections import OrderedDict
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SymbolList(Generic[T]):
    """Insertion-ordered membership set keyed by symbol.

    add is a no-op when the symbol is already present, remove is a no-op when
    it is absent. Reads return tuple snapshots.
    """

    def __init__(self, name: str):
        self.name = name
        self._items: "OrderedDict[str, T]" = OrderedDict()
        self._lock = threading.Lock()

    def add(self, symbol: str, item: T) -> bool:
        """Add an entry; returns False if the symbol was already present."""
        with self._lock:
            if symbol in self._items:
                return False
            self._items[symbol] = item
            return True

    def remove(self, symbol: str) -> bool:
        """Remove an entry; returns False if the symbol was absent."""
        with self._lock:
            return self._items.pop(symbol, None) is not None

    def replace_all(self, entries: list[tuple[str, T]]) -> None:
        """Replace the contents, keeping the first entry per symbol."""
        with self._lock:
            self._items.clear()
            for symbol, item in entries:
                self._items.setdefault(symbol, item)

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def get(self, symbol: str) -> Optional[T]:
        with self._lock:
            return self._items.get(symbol)

    def index_of(self, symbol: str) -> int:
        """Position of symbol in the list, -1 when absent."""
        with self._lock:
            for i, key in enumerate(self._items):
                if key == symbol:
                    return i
            return -1

    def symbols(self) -> tuple[str, ...]:
        with self._lock:
            return tuple(self._items.keys())

    def items(self) -> tuple[T, ...]:
        with self._lock:
            return tuple(self._items.values())

    def __contains__(self, symbol: object) -> bool:
        with self._lock:
            return symbol in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
