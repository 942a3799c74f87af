"""Tests for the stdout alert presenter."""

import io
import json

import pytest

from quotewatch.config.defaults import PresenterParams
from quotewatch.delivery import AlertPresentationError, StdoutAlertPresenter
from quotewatch.state.models import AlarmPosition, AlarmUnit


class TestStdoutAlertPresenter:
    """Test suite for stdout alert presentation."""

    def test_json_output(self) -> None:
        """Test JSON formatted alert output."""
        stream = io.StringIO()
        presenter = StdoutAlertPresenter(stream=stream)
        alarm = AlarmUnit("AAPL", 100.0, AlarmPosition.ABOVE, attribute="red")

        presenter.present("AAPL", alarm)

        payload = json.loads(stream.getvalue())
        assert payload["event"] == "alarm_fired"
        assert payload["symbol"] == "AAPL"
        assert payload["threshold"] == 100.0
        assert payload["position"] == "above"
        assert payload["attribute"] == "red"
        assert "presented_at" in payload

    def test_json_without_timestamp(self) -> None:
        """Test that the timestamp can be switched off."""
        stream = io.StringIO()
        presenter = StdoutAlertPresenter(
            config=PresenterParams(include_timestamp=False), stream=stream
        )

        presenter.present("AAPL", AlarmUnit("AAPL", 100.0, AlarmPosition.BELOW))

        assert "presented_at" not in json.loads(stream.getvalue())

    def test_pretty_output(self) -> None:
        """Test human readable alert output."""
        stream = io.StringIO()
        presenter = StdoutAlertPresenter(config=PresenterParams(format="pretty"), stream=stream)

        presenter.present("AAPL", AlarmUnit("AAPL", 100.0, AlarmPosition.ABOVE))
        presenter.present("MSFT", AlarmUnit("MSFT", 310.0, AlarmPosition.BELOW))

        lines = stream.getvalue().splitlines()
        assert "ALARM: AAPL fell to threshold 100.0" in lines[0]
        assert "ALARM: MSFT rose to threshold 310.0" in lines[1]

    def test_stats(self) -> None:
        """Test presentation statistics."""
        presenter = StdoutAlertPresenter(stream=io.StringIO())
        presenter.present("AAPL", AlarmUnit("AAPL", 100.0, AlarmPosition.ABOVE))
        presenter.record_failure()

        stats = presenter.get_stats()
        assert stats["presented_count"] == 1
        assert stats["error_count"] == 1
        assert stats["success_rate"] == 0.5
        assert presenter.health_check() is True

        presenter.reset_stats()
        assert presenter.get_stats()["presented_count"] == 0

    def test_closed_stream_raises_presentation_error(self) -> None:
        """Test that write failures surface as AlertPresentationError."""
        stream = io.StringIO()
        stream.close()
        presenter = StdoutAlertPresenter(stream=stream)

        with pytest.raises(AlertPresentationError):
            presenter.present("AAPL", AlarmUnit("AAPL", 100.0, AlarmPosition.ABOVE))

        assert presenter.get_stats()["presented_count"] == 0
