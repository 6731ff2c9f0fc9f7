"""Time-rotated file sinks with bounded retention."""

# -*- coding: utf-8 -*-
import contextlib
import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from .calculators import (
    DailyFilenameCalculator,
    FilenameCalculator,
    MinuteFilenameCalculator,
)
from .errors import InvalidConfigError, RetentionDeleteError
from .file_helper import FileEventHandlers, FileHelper, remove_if_exists
from .formats import RecordFormat, TextFormat
from .record import LogRecord
from .retention import RetentionQueue, recover_retention_queue
from .rotation import DailyRotation, MinuteRotation, RotationPolicy

logger = logging.getLogger(__name__)


class RotatingFileSink:
    """Writes records to a file that is swapped on a time boundary.

    Every :meth:`write` compares the record's timestamp with the current
    rotation boundary. Once it is reached the current file is closed and a
    new one, named for the record's time window, is opened. When
    ``max_files`` is positive only the newest ``max_files`` files (the open
    one included) are kept; older ones are deleted as rotations happen.

    Rotation is driven by message arrival, not by a timer: a sink that
    receives nothing for several periods rotates once on the next write.

    Example:
    -------
        sink = DailyFileSink("logs/app.log", rotation_hour=2, max_files=7)
        sink.write(LogRecord(datetime.now(), "started"))
        sink.flush()

    """

    def __init__(
        self,
        base_filename: str,
        policy: RotationPolicy,
        calculator: FilenameCalculator,
        truncate: bool = False,
        max_files: int = 0,
        delete_old_files_on_init: bool = False,
        initial_time: Optional[datetime] = None,
        clock: Optional[Callable[[], datetime]] = None,
        formatter: Optional[RecordFormat] = None,
        event_handlers: Optional[FileEventHandlers] = None,
        threadsafe: bool = True,
        remove_empty_initial_file: bool = False,
    ):
        """Open the initial file and recover retention state.

        Args:
        ----
            base_filename: Path the rotated file names are derived from.
            policy: When to rotate.
            calculator: How rotated files are named and recognized.
            truncate: Clear an existing file with the same name on open
                     instead of appending to it.
            max_files: Number of files to retain, 0 keeps all of them.
            delete_old_files_on_init: Remove matching files beyond
                                     ``max_files`` found at startup.
            initial_time: Time used to name the first file.
                         Default: the current time from ``clock``.
            clock: Callable returning the current time, used for every
                  boundary computation. Default: ``datetime.now``.
            formatter: Turns records into bytes. Default: TextFormat.
            event_handlers: Callbacks around file open and close.
            threadsafe: Serialize calls with a lock. Pass False only when a
                       single thread owns the sink.
            remove_empty_initial_file: Delete the file opened here on the
                                      first rotation if nothing was written
                                      to it.

        """
        if max_files < 0:
            raise InvalidConfigError(f"max_files must be >= 0, got {max_files}")

        self._base_filename = base_filename
        self._policy = policy
        self._calculator = calculator
        self._truncate = truncate
        self._max_files = max_files
        self._clock = clock or datetime.now
        self._formatter = formatter or TextFormat()
        self._lock = threading.RLock() if threadsafe else contextlib.nullcontext()

        self._file_helper = FileHelper(event_handlers)
        if initial_time is None:
            initial_time = self._clock()
        filename = self._calculator.calc_filename(self._base_filename, initial_time)
        self._file_helper.open(filename, self._truncate)
        self._remove_init_file = (
            remove_empty_initial_file and self._file_helper.size() == 0
        )
        self._rotation_time = self._policy.next_boundary(self._clock())

        self._filenames_q: Optional[RetentionQueue] = None
        if self._max_files > 0:
            self._filenames_q = recover_retention_queue(
                self._base_filename,
                self._calculator,
                self._max_files,
                delete_old_files_on_init,
            )
        # Opened files not yet queued because an eviction failed.
        self._untracked: List[str] = []

        logger.debug(
            "Initialized sink %s: file=%s, next rotation at %s, max_files=%d",
            self._base_filename,
            filename,
            self._rotation_time,
            self._max_files,
        )

    @property
    def base_filename(self) -> str:
        """Get the configured base path."""
        return self._base_filename

    @property
    def max_files(self) -> int:
        """Get the retention limit, 0 meaning unlimited."""
        return self._max_files

    @property
    def rotation_time(self) -> datetime:
        """Get the current rotation boundary."""
        with self._lock:
            return self._rotation_time

    def current_filename(self) -> str:
        """Get the name of the currently open file."""
        with self._lock:
            return self._file_helper.filename

    def retained_files(self) -> List[str]:
        """Get the files currently tracked for retention, oldest first."""
        with self._lock:
            if self._filenames_q is None:
                return []
            return list(self._filenames_q)

    def write(self, record: LogRecord) -> None:
        """Append ``record``, rotating first if its time reached the boundary.

        Raises
        ------
            FileOpenError: The new file could not be opened on rotation.
            FileWriteError: The record could not be appended.
            RetentionDeleteError: The record was written but the oldest
                                 retained file could not be deleted.

        """
        with self._lock:
            rotated = False
            if record.timestamp >= self._rotation_time:
                rotated = self._rotate(record.timestamp)

            self._file_helper.write(self._formatter.format(record))
            self._remove_init_file = False

            # Cleanup comes last since it may raise after the write succeeded.
            if rotated and self._filenames_q is not None:
                self._delete_old()

    def flush(self) -> None:
        """Flush buffered bytes of the current file."""
        with self._lock:
            self._file_helper.flush()

    def close(self) -> None:
        """Close the current file."""
        with self._lock:
            self._file_helper.close()
            logger.debug("Closed sink %s", self._base_filename)

    def __enter__(self) -> "RotatingFileSink":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _rotate(self, time: datetime) -> bool:
        """Switch to the file for ``time`` and compute the next boundary.

        Returns
        -------
            bool: True if a different file is now open

        """
        previous = self._file_helper.filename
        filename = self._calculator.calc_filename(self._base_filename, time)
        discard_previous = self._remove_init_file
        # A failed open leaves no handle; retry it even for the same name.
        reopen = (
            discard_previous
            or filename != previous
            or not self._file_helper.is_open
        )

        if discard_previous:
            self._file_helper.close()
            try:
                remove_if_exists(previous)
            except OSError as e:
                logger.warning("Could not remove empty log file %s: %s", previous, e)
            if self._filenames_q is not None:
                self._filenames_q.discard(previous)
        if reopen:
            self._file_helper.open(filename, self._truncate)

        # The next boundary follows the wall clock, not the record's time.
        self._rotation_time = self._policy.next_boundary(self._clock())
        logger.debug(
            "Rotated %s -> %s (discarded empty: %s), next rotation at %s",
            previous,
            filename,
            discard_previous,
            self._rotation_time,
        )
        return reopen

    def _delete_old(self) -> None:
        """Evict the oldest retained files and track the current one.

        Files rotated to while a deletion kept failing are tracked here too,
        oldest first, so each of them is eventually evicted. On a failed
        deletion the evicted name is restored as the oldest entry, so the
        next rotation retries it, and RetentionDeleteError is raised.
        """
        current_file = self._file_helper.filename
        if current_file not in self._untracked:
            self._untracked.append(current_file)

        while self._untracked:
            filename = self._untracked[0]
            if filename not in self._filenames_q:
                if self._filenames_q.full():
                    old_filename = self._filenames_q.pop_front()
                    try:
                        remove_if_exists(old_filename)
                    except OSError as e:
                        self._filenames_q.push_front(old_filename)
                        logger.error(
                            "Failed removing rotated file %s: %s", old_filename, e
                        )
                        raise RetentionDeleteError(old_filename, e.errno) from e
                    logger.debug("Removed rotated file %s", old_filename)
                self._filenames_q.push_back(filename)
            self._untracked.pop(0)


class DailyFileSink(RotatingFileSink):
    """Rotating sink that switches files once a day.

    Files are named ``basename_YYYY-MM-DD.ext`` unless another calculator is
    given.
    """

    def __init__(
        self,
        base_filename: str,
        rotation_hour: int = 0,
        rotation_minute: int = 0,
        truncate: bool = False,
        max_files: int = 0,
        delete_old_files_on_init: bool = False,
        initial_time: Optional[datetime] = None,
        calculator: Optional[FilenameCalculator] = None,
        **kwargs,
    ):
        """Initialize daily rotation at ``rotation_hour``:``rotation_minute``."""
        super().__init__(
            base_filename,
            DailyRotation(rotation_hour, rotation_minute),
            calculator or DailyFilenameCalculator(),
            truncate=truncate,
            max_files=max_files,
            delete_old_files_on_init=delete_old_files_on_init,
            initial_time=initial_time,
            **kwargs,
        )


class MinuteFileSink(RotatingFileSink):
    """Rotating sink that switches files every ``rotation_minute`` minutes.

    Files are named ``basename_YYYY-MM-DD-HH_MM.ext``. The file opened at
    construction is deleted on the first rotation if nothing was written to
    it, so short-lived processes do not leave empty files behind.
    """

    def __init__(
        self,
        base_filename: str,
        truncate: bool = False,
        max_files: int = 0,
        rotation_minute: int = 0,
        calculator: Optional[FilenameCalculator] = None,
        **kwargs,
    ):
        """Initialize minute-based rotation."""
        kwargs.setdefault("remove_empty_initial_file", True)
        super().__init__(
            base_filename,
            MinuteRotation(rotation_minute),
            calculator or MinuteFilenameCalculator(),
            truncate=truncate,
            max_files=max_files,
            **kwargs,
        )
