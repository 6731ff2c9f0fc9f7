"""Tests for the standard logging integration."""

import logging
import re
import uuid

import pytest

from pylogroll.handler import RotatingSinkHandler, attach_sink, daily_logger, minute_logger
from pylogroll.sink import DailyFileSink


@pytest.fixture
def logger_name():
    """Unique logger name; handlers are closed after the test."""
    name = f"pylogroll-test.{uuid.uuid4().hex}"
    yield name
    log = logging.getLogger(name)
    for handler in list(log.handlers):
        log.removeHandler(handler)
        handler.close()


def sink_of(log):
    """Get the sink behind a logger's only sink handler."""
    handlers = [h for h in log.handlers if isinstance(h, RotatingSinkHandler)]
    assert len(handlers) == 1
    return handlers[0].sink


def read(path):
    """Read a whole log file."""
    with open(path, encoding="utf-8") as f:
        return f.read()


class TestDailyLogger:
    """Test the daily logger factory."""

    def test_messages_reach_the_file(self, tmp_path, logger_name):
        """Test formatted messages are written with level and name."""
        log = daily_logger(logger_name, str(tmp_path / "daily.txt"))
        log.info("Test message %d", 1)
        log.debug("filtered out")
        log.warning("careful")
        sink = sink_of(log)
        sink.flush()

        content = read(sink.current_filename())
        assert f"[{logger_name}] [info] Test message 1" in content
        assert f"[{logger_name}] [warning] careful" in content
        assert "filtered out" not in content

    def test_file_name_has_date_suffix(self, tmp_path, logger_name):
        """Test the file is named after the current date."""
        log = daily_logger(logger_name, str(tmp_path / "daily.txt"))
        name = sink_of(log).current_filename()
        assert re.search(r"daily_\d{4}-\d{2}-\d{2}\.txt$", name)

    def test_context_tags(self, tmp_path, logger_name):
        """Test per-call context is written as tags."""
        log = daily_logger(logger_name, str(tmp_path / "daily.txt"))
        log.info("Hello, World!", extra={"context": {"mdc_key_1": "mdc_value_1"}})
        sink = sink_of(log)
        sink.flush()
        assert "[mdc_key_1:mdc_value_1] Hello, World!" in read(sink.current_filename())

    def test_exception_text(self, tmp_path, logger_name):
        """Test tracebacks are included in the message."""
        log = daily_logger(logger_name, str(tmp_path / "daily.txt"))
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            log.exception("failed")
        sink = sink_of(log)
        sink.flush()
        content = read(sink.current_filename())
        assert "[error] failed" in content
        assert "RuntimeError: boom" in content

    def test_repeated_setup_replaces_handler(self, tmp_path, logger_name):
        """Test configuring the same logger twice does not duplicate output."""
        daily_logger(logger_name, str(tmp_path / "first.txt"))
        log = daily_logger(logger_name, str(tmp_path / "second.txt"))
        assert "second" in sink_of(log).current_filename()


class TestMinuteLogger:
    """Test the minute logger factory."""

    def test_file_name_has_minute_suffix(self, tmp_path, logger_name):
        """Test the file is named after the current minute."""
        log = minute_logger(logger_name, str(tmp_path / "min-log.txt"), minute=1)
        log.info("hello")
        sink = sink_of(log)
        sink.flush()
        assert re.search(
            r"min-log_\d{4}-\d{2}-\d{2}-\d{2}_\d{2}\.txt$", sink.current_filename()
        )
        assert "hello" in read(sink.current_filename())


class TestRotatingSinkHandler:
    """Test error handling in the handler."""

    def test_write_errors_go_to_handle_error(self, tmp_path, logger_name, monkeypatch):
        """Test sink failures are reported through Handler.handleError."""
        sink = DailyFileSink(str(tmp_path / "app.log"))
        log = attach_sink(logger_name, sink)
        handler = log.handlers[0]
        failures = []

        def boom(record):
            raise OSError("disk full")

        monkeypatch.setattr(sink, "write", boom)
        monkeypatch.setattr(handler, "handleError", failures.append)

        log.error("lost")

        assert len(failures) == 1
        assert failures[0].getMessage() == "lost"
