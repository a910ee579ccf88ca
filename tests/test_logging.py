"""Tests for the logging setup and event sinks."""

import logging
import os

import pytest

from ezyvet_qa.utils import GetLog, LoggingEventSink, RecordingEventSink
from ezyvet_qa.utils import events as ev


@pytest.fixture
def fresh_log():
    """Reset the shared logger and restore the root handlers afterwards."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    GetLog.logger, GetLog.log_folder = None, None
    yield GetLog
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers = handlers
    root.setLevel(level)
    GetLog.logger, GetLog.log_folder = None, None


class TestGetLog:
    def test_shared_folder(self, fresh_log, tmp_path):
        folder = str(tmp_path / "run")

        logger = fresh_log.get_log(log_level="debug", shared_log_folder=folder)
        logger.warning("saved")

        assert fresh_log.log_folder == folder
        assert logger.level == logging.DEBUG
        assert os.path.exists(os.path.join(folder, "log.log"))
        assert os.path.exists(os.path.join(folder, "error.log"))

    def test_initialised_once(self, fresh_log, tmp_path):
        first = fresh_log.get_log(shared_log_folder=str(tmp_path / "a"))
        second = fresh_log.get_log(log_level="error", shared_log_folder=str(tmp_path / "b"))

        assert first is second
        assert fresh_log.log_folder == str(tmp_path / "a")
        assert first.level == logging.INFO


class TestEventSinks:
    def test_logging_sink(self, caplog):
        caplog.set_level(logging.INFO, logger="ezyvet_qa.events")

        LoggingEventSink().emit(ev.ENTITY_CREATED, kind="Contact", natural_key="Owner1, Test")

        record = caplog.records[-1]
        assert record.event == ev.ENTITY_CREATED
        assert record.fields == {"kind": "Contact", "natural_key": "Owner1, Test"}
        assert "entity_created kind='Contact'" in record.getMessage()

    def test_recording_sink_forwards(self):
        inner = RecordingEventSink()
        sink = RecordingEventSink(forward_to=inner)

        sink.emit(ev.LOGIN_FAILED, logging.WARNING, attempt=1)

        assert sink.names() == inner.names() == [ev.LOGIN_FAILED]
        assert inner.events[0][1] == logging.WARNING
        assert sink.of(ev.LOGIN_FAILED) == [{"attempt": 1}]
