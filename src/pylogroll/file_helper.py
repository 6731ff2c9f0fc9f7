"""Ownership of the single writable log file."""

import logging
import os
from dataclasses import dataclass
from typing import BinaryIO, Callable, List, Optional

from .errors import FileOpenError, FileWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileEventHandlers:
    """Optional callbacks invoked around opening and closing log files.

    ``after_open`` receives the freshly opened file and may write a header
    to it; ``before_close`` may write a footer.
    """

    before_open: Optional[Callable[[str], None]] = None
    after_open: Optional[Callable[[str, BinaryIO], None]] = None
    before_close: Optional[Callable[[str, BinaryIO], None]] = None
    after_close: Optional[Callable[[str], None]] = None


class FileHelper:
    """Owns exactly one open, append-only binary file."""

    def __init__(self, event_handlers: Optional[FileEventHandlers] = None):
        """Initialize with optional open/close callbacks."""
        self._event_handlers = event_handlers or FileEventHandlers()
        self._fd: Optional[BinaryIO] = None
        self._filename: Optional[str] = None

    @property
    def filename(self) -> Optional[str]:
        """Get the name of the currently open file."""
        return self._filename

    @property
    def is_open(self) -> bool:
        """Check whether a file handle is currently open."""
        return self._fd is not None

    def open(self, filename: str, truncate: bool = False) -> None:
        """Open ``filename``, closing any previously open file first.

        Args:
        ----
            filename: Path of the file to open; parent directories are created
            truncate: If True, clear an existing file instead of appending

        """
        self.close()
        self._filename = filename

        if self._event_handlers.before_open:
            self._event_handlers.before_open(filename)

        try:
            directory = os.path.dirname(filename)
            if directory:
                os.makedirs(directory, exist_ok=True)
            self._fd = open(filename, "wb" if truncate else "ab")
        except OSError as e:
            logger.error("Failed opening %s: %s", filename, e)
            raise FileOpenError(filename, e.errno) from e

        if self._event_handlers.after_open:
            self._event_handlers.after_open(filename, self._fd)
        logger.debug("Opened log file %s (truncate=%s)", filename, truncate)

    def write(self, data: bytes) -> None:
        """Append ``data`` to the open file."""
        if self._fd is None:
            raise FileWriteError(str(self._filename))
        try:
            self._fd.write(data)
        except OSError as e:
            raise FileWriteError(self._filename, e.errno) from e

    def flush(self) -> None:
        """Flush buffered bytes to the operating system."""
        if self._fd is None:
            return
        try:
            self._fd.flush()
        except OSError as e:
            raise FileWriteError(self._filename, e.errno) from e

    def size(self) -> int:
        """Get the current size of the open file in bytes."""
        if self._fd is None:
            return 0
        self.flush()
        return os.fstat(self._fd.fileno()).st_size

    def close(self) -> None:
        """Close the open file, if any."""
        if self._fd is None:
            return

        if self._event_handlers.before_close:
            self._event_handlers.before_close(self._filename, self._fd)

        fd, self._fd = self._fd, None
        try:
            fd.close()
        except OSError as e:
            raise FileWriteError(self._filename, e.errno) from e

        if self._event_handlers.after_close:
            self._event_handlers.after_close(self._filename)


def remove_if_exists(filename: str) -> bool:
    """Remove ``filename``; a file that is already gone counts as success.

    Returns
    -------
        True if a file was removed, False if there was nothing to remove

    """
    try:
        os.remove(filename)
    except FileNotFoundError:
        return False
    return True


def get_directory_files(directory: str) -> List[str]:
    """List the regular files in ``directory`` as paths joined to it.

    The order is whatever the operating system returns.
    """
    listing_dir = directory or "."
    return [
        os.path.join(directory, name)
        for name in os.listdir(listing_dir)
        if os.path.isfile(os.path.join(listing_dir, name))
    ]
