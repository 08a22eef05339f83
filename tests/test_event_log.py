"""Tests for the append-only event log."""

import pytest

from prospector.models.pipeline_state import Severity
from prospector.pipeline.event_log import EventLog


class TestEventLog:

    def test_append_preserves_order(self):
        log = EventLog()
        log.info("first")
        log.success("second")
        log.warning("third")

        assert [e.message for e in log.all()] == ["first", "second", "third"]
        assert [e.severity for e in log] == [Severity.INFO, Severity.SUCCESS, Severity.WARNING]

    def test_event_ids_are_unique(self):
        log = EventLog()
        events = [log.info(f"msg {i}") for i in range(50)]
        assert len({e.id for e in events}) == 50

    def test_timestamps_non_decreasing(self):
        log = EventLog()
        for i in range(10):
            log.info(str(i))
        stamps = [e.timestamp for e in log.all()]
        assert stamps == sorted(stamps)

    def test_append_accepts_severity_string(self):
        log = EventLog()
        event = log.append("boom", "error")
        assert event.severity == Severity.ERROR

    def test_unknown_severity_rejected(self):
        log = EventLog()
        with pytest.raises(ValueError):
            log.append("?", "fatal")
        assert len(log) == 0

    def test_errors_filters_by_severity(self):
        log = EventLog()
        log.info("ok")
        log.error("bad 1")
        log.warning("meh")
        log.error("bad 2")
        assert [e.message for e in log.errors()] == ["bad 1", "bad 2"]

    def test_all_is_a_snapshot(self):
        log = EventLog()
        log.info("a")
        snapshot = log.all()
        log.info("b")
        assert len(snapshot) == 1
        assert len(log) == 2

    def test_clear_empties_log(self):
        log = EventLog()
        log.info("a")
        log.clear()
        assert log.all() == []

    def test_on_append_callback_receives_events(self):
        seen = []
        log = EventLog(on_append=seen.append)
        event = log.success("done")
        assert seen == [event]
