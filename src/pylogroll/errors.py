"""Exception types raised by pylogroll."""

from typing import Optional


class LogrollError(Exception):
    """Base class for all pylogroll errors.

    Args:
    ----
        message: Human readable description
        errno: Underlying OS error number, if the failure came from the OS

    """

    def __init__(self, message: str, errno: Optional[int] = None):
        """Initialize the error with an optional OS error number."""
        super().__init__(message)
        self.errno = errno


class InvalidConfigError(LogrollError, ValueError):
    """Raised at construction time for out-of-range settings."""


class FileOpenError(LogrollError):
    """Raised when a log file cannot be opened."""

    def __init__(self, filename: str, errno: Optional[int] = None):
        """Initialize with the file that failed to open."""
        super().__init__(f"Failed opening file {filename} for writing", errno)
        self.filename = filename


class FileWriteError(LogrollError):
    """Raised when appending to or flushing a log file fails."""

    def __init__(self, filename: str, errno: Optional[int] = None):
        """Initialize with the file that failed to accept the write."""
        super().__init__(f"Failed writing to file {filename}", errno)
        self.filename = filename


class RetentionDeleteError(LogrollError):
    """Raised after a successful write when evicting an old file fails.

    The retention queue keeps the undeleted file at its oldest position, so
    the next rotation retries the deletion.
    """

    def __init__(self, filename: str, errno: Optional[int] = None):
        """Initialize with the rotated file that could not be removed."""
        super().__init__(f"Failed removing rotated file {filename}", errno)
        self.filename = filename


class EmptyQueueError(LogrollError, IndexError):
    """Raised when popping from an empty retention queue."""


class QueueFullError(LogrollError, OverflowError):
    """Raised when pushing onto a retention queue that is at capacity."""
