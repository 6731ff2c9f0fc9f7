"""Log records consumed by sinks."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Mapping


class Level(IntEnum):
    """Severity levels, lowest first."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    CRITICAL = 5
    OFF = 6

    @property
    def label(self) -> str:
        """Get the lowercase name written to log files."""
        return _LEVEL_LABELS[self]

    @classmethod
    def from_str(cls, name: str) -> "Level":
        """Parse a level name; unknown names map to OFF."""
        name = name.strip().lower()
        for level, label in _LEVEL_LABELS.items():
            if name == label:
                return level
        # Accept the short aliases as well.
        return {"warn": cls.WARN, "err": cls.ERROR}.get(name, cls.OFF)

    @classmethod
    def from_logging(cls, levelno: int) -> "Level":
        """Map a stdlib ``logging`` level number to a Level."""
        if levelno >= logging.CRITICAL:
            return cls.CRITICAL
        if levelno >= logging.ERROR:
            return cls.ERROR
        if levelno >= logging.WARNING:
            return cls.WARN
        if levelno >= logging.INFO:
            return cls.INFO
        if levelno >= logging.DEBUG:
            return cls.DEBUG
        return cls.TRACE


_LEVEL_LABELS = {
    Level.TRACE: "trace",
    Level.DEBUG: "debug",
    Level.INFO: "info",
    Level.WARN: "warning",
    Level.ERROR: "error",
    Level.CRITICAL: "critical",
    Level.OFF: "off",
}


@dataclass(frozen=True)
class LogRecord:
    """A single message handed to a sink.

    Sinks only look at ``timestamp`` to make rotation decisions; everything
    else is for the formatter. Timestamps are naive local time; an aware
    timestamp is converted to local time on construction. ``context`` carries per-call tags that are
    rendered next to the message.
    """

    timestamp: datetime
    message: str
    level: Level = Level.INFO
    logger_name: str = ""
    context: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        # Boundaries are naive local time; aware timestamps are converted.
        if self.timestamp.tzinfo is not None:
            local = self.timestamp.astimezone().replace(tzinfo=None)
            object.__setattr__(self, "timestamp", local)

    @classmethod
    def from_logging(cls, record: logging.LogRecord, message: str) -> "LogRecord":
        """Build a record from a stdlib ``logging.LogRecord``."""
        return cls(
            timestamp=datetime.fromtimestamp(record.created),
            message=message,
            level=Level.from_logging(record.levelno),
            logger_name=record.name,
            context=dict(getattr(record, "context", None) or {}),
        )
