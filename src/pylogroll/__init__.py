"""Time-rotated log files with bounded retention."""

# -*- coding: utf-8 -*-
import logging

from .calculators import (
    DailyFilenameCalculator,
    FilenameCalculator,
    MinuteFilenameCalculator,
)
from .errors import (
    EmptyQueueError,
    FileOpenError,
    FileWriteError,
    InvalidConfigError,
    LogrollError,
    RetentionDeleteError,
)
from .file_helper import FileEventHandlers
from .formats import JsonFormat, RecordFormat, TextFormat
from .handler import RotatingSinkHandler, daily_logger, minute_logger
from .record import Level, LogRecord
from .retention import RetentionQueue
from .rotation import DailyRotation, MinuteRotation, RotationPolicy
from .sink import DailyFileSink, MinuteFileSink, RotatingFileSink

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "DailyFileSink",
    "MinuteFileSink",
    "RotatingFileSink",
    "RotatingSinkHandler",
    "daily_logger",
    "minute_logger",
    "FilenameCalculator",
    "DailyFilenameCalculator",
    "MinuteFilenameCalculator",
    "RotationPolicy",
    "DailyRotation",
    "MinuteRotation",
    "RetentionQueue",
    "LogRecord",
    "Level",
    "RecordFormat",
    "TextFormat",
    "JsonFormat",
    "FileEventHandlers",
    "LogrollError",
    "InvalidConfigError",
    "FileOpenError",
    "FileWriteError",
    "RetentionDeleteError",
    "EmptyQueueError",
]
