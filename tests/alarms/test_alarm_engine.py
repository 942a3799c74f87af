"""Tests for alarm evaluation and firing."""

from unittest.mock import Mock

import pytest

from quotewatch.alarms import AlarmEngine
from quotewatch.data.models import Quote
from quotewatch.delivery import BaseAlertPresenter
from quotewatch.state.models import AlarmPosition
from quotewatch.state.record import StockRecord


class RecordingPresenter(BaseAlertPresenter):
    """Presenter collecting fired alarms."""

    def __init__(self, fail: bool = False):
        super().__init__("recording")
        self.fail = fail
        self.presented = []

    def present(self, symbol, alarm) -> None:
        if self.fail:
            raise RuntimeError("display unavailable")
        self.presented.append((symbol, alarm))
        self.record_success()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def engine(presenter) -> AlarmEngine:
    return AlarmEngine(presenter)


class TestAlarmEngine:
    """Test suite for the alarm engine."""

    def test_above_alarm_fires_once(self, engine, presenter, available_record, make_tick) -> None:
        """Test that ABOVE/100 at 110 fires exactly once when a tick hits 95."""
        alarm = available_record.add_alarm(100.0)
        assert alarm.position == AlarmPosition.ABOVE
        engine.on_alarm_added(available_record)

        available_record.apply_tick(make_tick(95.0, 1))
        available_record.apply_tick(make_tick(90.0, 2))

        assert presenter.presented == [("AAPL", alarm)]
        assert available_record.get_alarms() == ()
        assert engine.fired_count == 1

    def test_below_alarm_fires_on_reaching_threshold(self, engine, presenter,
                                                     available_record, make_tick) -> None:
        """Test that BELOW fires once the price reaches the threshold."""
        alarm = available_record.add_alarm(120.0)
        engine.on_alarm_added(available_record)

        available_record.apply_tick(make_tick(119.99, 1))
        assert presenter.presented == []

        available_record.apply_tick(make_tick(120.0, 2))
        assert presenter.presented == [("AAPL", alarm)]

    def test_only_crossed_alarms_fire(self, engine, presenter, available_record, make_tick) -> None:
        """Test that untouched alarms stay registered."""
        available_record.add_alarm(100.0)
        available_record.add_alarm(105.0)
        available_record.add_alarm(130.0)
        engine.on_alarm_added(available_record)

        available_record.apply_tick(make_tick(102.0, 1))

        assert [a.threshold for _, a in presenter.presented] == [105.0]
        assert set(available_record.get_alarms()) == {100.0, 130.0}

    def test_crossing_within_batch_fires(self, engine, presenter, available_record,
                                         make_tick) -> None:
        """Test that a crossing reversed later in the same batch still fires."""
        alarm = available_record.add_alarm(100.0)
        engine.on_alarm_added(available_record)

        available_record.apply_ticks([make_tick(95.0, 1), make_tick(110.0, 2)])

        assert presenter.presented == [("AAPL", alarm)]
        assert available_record.get_alarms() == ()
        assert available_record.current_price == 110.0

    def test_zero_price_skips_evaluation(self, engine, presenter) -> None:
        """Test that a record without price data never fires."""
        record = StockRecord.from_quote("AAPL", "AAPL", "", Quote(current=0.0, open=0.0))
        record.add_alarm(10.0)
        engine.on_alarm_added(record)

        engine.on_price_update(record)

        assert presenter.presented == []
        assert record.get_alarms() == (10.0,)

    def test_listener_attached_once(self, engine, available_record) -> None:
        """Test that repeated alarm-added notifications attach one listener."""
        engine.on_alarm_added(available_record)
        engine.on_alarm_added(available_record)

        assert available_record.has_listener(engine.on_price_update)

    def test_presenter_failure_is_contained(self, available_record, make_tick) -> None:
        """Test that a failing presenter does not propagate and is counted."""
        presenter = RecordingPresenter(fail=True)
        engine = AlarmEngine(presenter)
        available_record.add_alarm(100.0)
        engine.on_alarm_added(available_record)

        available_record.apply_tick(make_tick(95.0, 1))

        assert available_record.get_alarms() == ()
        assert presenter.get_stats()["error_count"] == 1
        assert engine.fired_count == 1

    def test_attach_registers_alarm_listener(self, engine) -> None:
        """Test subscription to a registry's alarm-added notifications."""
        registry = Mock()

        engine.attach(registry)
        engine.detach(registry)

        registry.add_alarm_listener.assert_called_once_with(engine.on_alarm_added)
        registry.remove_alarm_listener.assert_called_once_with(engine.on_alarm_added)
