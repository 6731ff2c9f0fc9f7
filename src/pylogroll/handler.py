"""Integration of rotating sinks with the standard ``logging`` module."""

import logging
from datetime import datetime
from typing import Optional

from .record import LogRecord
from .sink import DailyFileSink, MinuteFileSink, RotatingFileSink


class RotatingSinkHandler(logging.Handler):
    """A ``logging.Handler`` that forwards records to a rotating sink.

    The handler's own ``logging.Formatter`` renders the message text
    (including exception text); the sink's formatter renders the line.
    Extra ``context`` passed via ``logger.info(..., extra={"context": {...}})``
    is written as tags.
    """

    def __init__(self, sink: RotatingFileSink, level: int = logging.NOTSET):
        """Initialize the handler around ``sink``."""
        super().__init__(level)
        self.sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        """Write ``record`` to the sink."""
        try:
            self.sink.write(LogRecord.from_logging(record, self.format(record)))
        except RecursionError:
            raise
        except Exception:
            self.handleError(record)

    def flush(self) -> None:
        """Flush the sink's current file."""
        self.acquire()
        try:
            self.sink.flush()
        finally:
            self.release()

    def close(self) -> None:
        """Close the sink and release the handler."""
        self.acquire()
        try:
            self.sink.close()
        finally:
            self.release()
        super().close()


def attach_sink(
    name: str, sink: RotatingFileSink, level: int = logging.INFO
) -> logging.Logger:
    """Route logger ``name`` to ``sink``.

    Any sink handler previously attached to the logger is closed and
    replaced, so calling this twice for the same name does not duplicate
    output.
    """
    log = logging.getLogger(name)
    log.setLevel(level)

    for existing in list(log.handlers):
        if isinstance(existing, RotatingSinkHandler):
            log.removeHandler(existing)
            existing.close()

    log.addHandler(RotatingSinkHandler(sink))
    return log


def daily_logger(
    name: str,
    filename: str,
    hour: int = 0,
    minute: int = 0,
    truncate: bool = False,
    max_files: int = 0,
    delete_old_files_on_init: bool = False,
    initial_time: Optional[datetime] = None,
    level: int = logging.INFO,
    **kwargs,
) -> logging.Logger:
    """Create a logger writing to a daily rotated file.

    Args:
    ----
        name: Logger name
        filename: Base path of the rotated files
        hour: Hour of the day to rotate at
        minute: Minute of the hour to rotate at
        truncate: Clear an existing file on open instead of appending
        max_files: Number of files to retain, 0 keeps all of them
        delete_old_files_on_init: Remove files beyond ``max_files`` at startup
        initial_time: Time used to name the first file
        level: Logger level
        **kwargs: Passed to DailyFileSink (``threadsafe``, ``formatter``, ...)

    Returns:
    -------
        The configured logger

    """
    sink = DailyFileSink(
        filename,
        rotation_hour=hour,
        rotation_minute=minute,
        truncate=truncate,
        max_files=max_files,
        delete_old_files_on_init=delete_old_files_on_init,
        initial_time=initial_time,
        **kwargs,
    )
    return attach_sink(name, sink, level)


def minute_logger(
    name: str,
    filename: str,
    truncate: bool = False,
    max_files: int = 0,
    minute: int = 0,
    level: int = logging.INFO,
    **kwargs,
) -> logging.Logger:
    """Create a logger writing to a file rotated every ``minute`` minutes."""
    sink = MinuteFileSink(
        filename,
        truncate=truncate,
        max_files=max_files,
        rotation_minute=minute,
        **kwargs,
    )
    return attach_sink(name, sink, level)
