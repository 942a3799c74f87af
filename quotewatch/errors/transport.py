"""Transport failure raised by market data collaborators."""

from typing import Optional


class TransportError(Exception):
    """A quote, search or candle request failed at the transport level.

    Recoverable: a failed quote marks the record unavailable, a failed
    backfill request ends the widening loop early.
    """

    def __init__(self, message: str, operation: Optional[str] = None,
                 symbol: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.operation = operation
        self.symbol = symbol
        self.status_code = status_code
        self.recoverable = True
