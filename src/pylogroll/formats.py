"""Record format implementations for log sinks."""

import json
from abc import ABC, abstractmethod
from typing import Optional

from .record import LogRecord


class RecordFormat(ABC):
    """Abstract base class for record formats."""

    FORMAT_TEXT = "text"  # Default format
    FORMAT_JSON = "json"
    DEFAULT_FORMAT = FORMAT_TEXT

    @abstractmethod
    def get_format_name(self) -> str:
        """Get the format name."""
        pass

    @abstractmethod
    def format(self, record: LogRecord) -> bytes:
        """Encode a record into the bytes appended to a log file."""
        pass


class TextFormat(RecordFormat):
    """Human-readable single-line format.

    Example line::

        [2024-04-26 02:08:05.040] [app] [info] [request_id:42] Hello, World!

    """

    def __init__(self, eol: str = "\n"):
        """Initialize the text format.

        Args:
        ----
            eol: Line terminator appended to every record

        """
        self.eol = eol

    def get_format_name(self) -> str:
        """Get the format name."""
        return self.FORMAT_TEXT

    def format(self, record: LogRecord) -> bytes:
        """Encode a record as one text line."""
        ts = record.timestamp
        parts = [
            f"[{ts:%Y-%m-%d %H:%M:%S}.{ts.microsecond // 1000:03d}]",
        ]
        if record.logger_name:
            parts.append(f"[{record.logger_name}]")
        parts.append(f"[{record.level.label}]")
        if record.context:
            tags = " ".join(f"{key}:{value}" for key, value in record.context.items())
            parts.append(f"[{tags}]")
        parts.append(record.message)
        return (" ".join(parts) + self.eol).encode("utf-8")


class JsonFormat(RecordFormat):
    """JSON lines format for machine processing."""

    def get_format_name(self) -> str:
        """Get the format name."""
        return self.FORMAT_JSON

    def format(self, record: LogRecord) -> bytes:
        """Encode a record as one JSON object per line."""
        data = {
            "timestamp": record.timestamp.isoformat(),
            "level": record.level.label,
            "logger": record.logger_name,
            "message": record.message,
        }
        if record.context:
            data["context"] = dict(record.context)
        return (json.dumps(data) + "\n").encode("utf-8")


def get_format_by_name(name: Optional[str] = None) -> RecordFormat:
    """Get the format for ``name``.

    Args:
    ----
        name: The format name. If None or unknown, returns the default format.

    Returns:
    -------
        A RecordFormat instance for the specified format.

    """
    format_map = {
        RecordFormat.FORMAT_TEXT: TextFormat,
        RecordFormat.FORMAT_JSON: JsonFormat,
    }
    format_class = format_map.get(name or RecordFormat.DEFAULT_FORMAT)
    if format_class is None:
        return TextFormat()
    return format_class()
