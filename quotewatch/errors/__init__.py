"""
Error classification for market data ingestion and record management.

Every failure in the core degrades to an empty or "not available" result.
These exceptions are raised at the seams (provider calls, pure indicator
functions, payload normalization) and handled by the registry and records.
"""

from .data_quality import (
    DataQualityError,
    DataUnavailableError,
    InsufficientDataError,
    MalformedDataError,
)
from .system_failures import (
    ConfigurationError,
    SystemFailureError,
)
from .transport import TransportError

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "DataUnavailableError",
    "InsufficientDataError",
    "MalformedDataError",
    # Transport
    "TransportError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
]
