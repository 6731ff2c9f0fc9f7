"""Tests for records and record formats."""

import json
import logging
from datetime import datetime, timezone

import pytest

from pylogroll.formats import JsonFormat, TextFormat, get_format_by_name
from pylogroll.record import Level, LogRecord

TS = datetime(2024, 4, 26, 2, 8, 5, 40000)


class TestTextFormat:
    """Test the human-readable format."""

    def test_full_line(self):
        """Test a record with name and context."""
        record = LogRecord(
            TS, "Hello, World!", Level.INFO, "app", {"mdc_key_1": "mdc_value_1"}
        )
        assert TextFormat().format(record) == (
            b"[2024-04-26 02:08:05.040] [app] [info] [mdc_key_1:mdc_value_1] Hello, World!\n"
        )

    def test_minimal_line(self):
        """Test a record without name or context."""
        record = LogRecord(TS, "careful", Level.WARN)
        assert TextFormat().format(record) == b"[2024-04-26 02:08:05.040] [warning] careful\n"

    def test_custom_eol(self):
        """Test the line terminator is configurable."""
        record = LogRecord(TS, "x")
        assert TextFormat(eol="\r\n").format(record).endswith(b"x\r\n")

    def test_unicode(self):
        """Test messages are encoded as UTF-8."""
        record = LogRecord(TS, "héllo ✓")
        assert "héllo ✓".encode("utf-8") in TextFormat().format(record)


class TestJsonFormat:
    """Test the JSON lines format."""

    def test_fields(self):
        """Test every field is present and the line is terminated."""
        record = LogRecord(TS, "hi", Level.CRITICAL, "svc", {"user": "42"})
        encoded = JsonFormat().format(record)
        assert encoded.endswith(b"\n")
        data = json.loads(encoded)
        assert data == {
            "timestamp": "2024-04-26T02:08:05.040000",
            "level": "critical",
            "logger": "svc",
            "message": "hi",
            "context": {"user": "42"},
        }

    def test_no_context_key_when_empty(self):
        """Test the context key is omitted without tags."""
        assert "context" not in json.loads(JsonFormat().format(LogRecord(TS, "hi")))


class TestGetFormatByName:
    """Test format lookup."""

    @pytest.mark.parametrize(
        "name,expected",
        [(None, TextFormat), ("text", TextFormat), ("json", JsonFormat), ("bogus", TextFormat)],
    )
    def test_lookup(self, name, expected):
        """Test names resolve to formats with a text fallback."""
        assert isinstance(get_format_by_name(name), expected)


class TestLevel:
    """Test level conversions."""

    @pytest.mark.parametrize(
        "name,level",
        [
            ("trace", Level.TRACE),
            ("INFO", Level.INFO),
            ("warning", Level.WARN),
            ("warn", Level.WARN),
            ("err", Level.ERROR),
            ("nonsense", Level.OFF),
        ],
    )
    def test_from_str(self, name, level):
        """Test parsing level names."""
        assert Level.from_str(name) == level

    @pytest.mark.parametrize(
        "levelno,level",
        [
            (5, Level.TRACE),
            (logging.DEBUG, Level.DEBUG),
            (logging.INFO, Level.INFO),
            (logging.WARNING, Level.WARN),
            (logging.ERROR, Level.ERROR),
            (logging.CRITICAL, Level.CRITICAL),
        ],
    )
    def test_from_logging(self, levelno, level):
        """Test mapping stdlib level numbers."""
        assert Level.from_logging(levelno) == level

    def test_record_from_logging(self):
        """Test converting a stdlib record."""
        std = logging.LogRecord("svc", logging.ERROR, __file__, 1, "msg %s", ("x",), None)
        std.context = {"k": "v"}
        record = LogRecord.from_logging(std, std.getMessage())
        assert record.message == "msg x"
        assert record.level == Level.ERROR
        assert record.logger_name == "svc"
        assert record.context == {"k": "v"}
        assert record.timestamp == datetime.fromtimestamp(std.created)

    def test_aware_timestamp_becomes_local(self):
        """Test an aware timestamp is stored as naive local time."""
        aware = datetime(2024, 4, 26, 2, 8, 5, tzinfo=timezone.utc)
        record = LogRecord(aware, "utc")
        assert record.timestamp.tzinfo is None
        assert record.timestamp == aware.astimezone().replace(tzinfo=None)
