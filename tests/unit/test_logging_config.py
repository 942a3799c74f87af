"""Tests for structured logging helpers."""

import structlog
from structlog.testing import capture_logs

from quotewatch.logging import configure_logging, get_logger
from quotewatch.logging.config import (
    get_alarm_logger,
    get_feed_logger,
    log_alarm_fired,
    log_backfill_attempt,
)


class TestLoggingConfig:
    """Test suite for logging configuration and standard events."""

    def test_configure_logging(self) -> None:
        """Test that configuration installs the requested renderer."""
        try:
            configure_logging(level="DEBUG", format_json=True, include_caller=True)
            processors = structlog.get_config()["processors"]
            assert isinstance(processors[-1], structlog.processors.JSONRenderer)
            assert get_logger(__name__) is not None
        finally:
            structlog.reset_defaults()

    def test_alarm_fired_event(self) -> None:
        """Test the standardized alarm event."""
        with capture_logs() as logs:
            log_alarm_fired(get_alarm_logger("test"), "AAPL", 100.0, "above", 95.0,
                            context={"attribute": "red"})

        assert logs == [{
            "event": "Alarm fired",
            "log_level": "info",
            "subsystem": "alarms",
            "audit_trail": True,
            "symbol": "AAPL",
            "threshold": 100.0,
            "position": "above",
            "price": 95.0,
            "context": {"attribute": "red"},
        }]

    def test_backfill_attempt_levels(self) -> None:
        """Test that insufficient attempts log at debug and sufficient ones at info."""
        with capture_logs() as logs:
            logger = get_feed_logger("test")
            log_backfill_attempt(logger, "AAPL", "D", 1, 175, False)
            log_backfill_attempt(logger, "AAPL", "D", 2, 250, True)

        assert [e["log_level"] for e in logs] == ["debug", "info"]
        assert logs[1]["entries"] == 250
        assert logs[1]["subsystem"] == "feed"
