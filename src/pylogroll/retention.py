"""Bounded retention of rotated log files and its startup recovery."""

import logging
import os
from collections import deque
from typing import Deque, Iterable, Iterator, List, Tuple

from .calculators import FilenameCalculator
from .errors import EmptyQueueError, InvalidConfigError, QueueFullError
from .file_helper import get_directory_files, remove_if_exists

logger = logging.getLogger(__name__)


class RetentionQueue:
    """Bounded FIFO of retained file names, oldest first.

    The queue never silently exceeds its capacity: callers pop the oldest
    entry before pushing onto a full queue.
    """

    def __init__(self, max_files: int):
        """Initialize an empty queue.

        Args:
        ----
            max_files: Maximum number of retained names, must be positive

        """
        if max_files <= 0:
            raise InvalidConfigError("RetentionQueue capacity must be positive")
        self._max_files = max_files
        self._items: Deque[str] = deque()

    @property
    def max_files(self) -> int:
        """Get the queue capacity."""
        return self._max_files

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._items))

    def __contains__(self, name: object) -> bool:
        return name in self._items

    def full(self) -> bool:
        """Check whether the queue is at capacity."""
        return len(self._items) >= self._max_files

    def front(self) -> str:
        """Get the oldest name without removing it."""
        if not self._items:
            raise EmptyQueueError("RetentionQueue is empty")
        return self._items[0]

    def push_back(self, name: str) -> None:
        """Append ``name`` as the newest entry."""
        if self.full():
            raise QueueFullError(
                f"RetentionQueue is full ({self._max_files} files), pop first"
            )
        self._items.append(name)

    def push_front(self, name: str) -> None:
        """Put ``name`` back as the oldest entry, undoing a :meth:`pop_front`."""
        if self.full():
            raise QueueFullError(
                f"RetentionQueue is full ({self._max_files} files), pop first"
            )
        self._items.appendleft(name)

    def pop_front(self) -> str:
        """Remove and return the oldest name."""
        if not self._items:
            raise EmptyQueueError("RetentionQueue is empty")
        return self._items.popleft()

    def discard(self, name: str) -> bool:
        """Remove ``name`` wherever it is; return whether it was present."""
        try:
            self._items.remove(name)
        except ValueError:
            return False
        return True

    def seed(self, names: Iterable[str]) -> None:
        """Replace the contents with ``names`` given oldest first.

        Only the most recent ``max_files`` names are kept.
        """
        newest = deque(names, maxlen=self._max_files)
        # Unbounded copy so later pushes fail loudly instead of dropping.
        self._items = deque(newest)

    def __repr__(self) -> str:
        return f"RetentionQueue(max_files={self._max_files}, items={list(self._items)})"


def scan_rotated_files(
    base_filename: str, calculator: FilenameCalculator
) -> List[Tuple[str, str]]:
    """Find files in the base path's directory that match the name policy.

    Returns
    -------
        List of (suffix, path) tuples sorted oldest first; suffixes are
        fixed-width so lexicographic order is chronological

    """
    directory = os.path.dirname(base_filename)
    try:
        candidates = get_directory_files(directory)
    except FileNotFoundError:
        return []

    rotated = []
    for path in candidates:
        suffix = calculator.extract_suffix(base_filename, path)
        if suffix:
            rotated.append((suffix, path))
    rotated.sort()
    return rotated


def split_excess(
    rotated: List[Tuple[str, str]], max_files: int
) -> Tuple[List[str], List[str]]:
    """Split sorted (suffix, path) pairs into (excess, recent) path lists.

    ``recent`` holds the newest ``max_files`` paths; ``excess`` the older rest.
    """
    first_valid = max(len(rotated) - max_files, 0)
    paths = [path for _, path in rotated]
    return paths[:first_valid], paths[first_valid:]


def delete_files(paths: Iterable[str]) -> List[str]:
    """Best-effort removal of ``paths``.

    Failures are logged and skipped.

    Returns
    -------
        The paths that were removed or were already gone

    """
    deleted = []
    for path in paths:
        try:
            remove_if_exists(path)
        except OSError as e:
            logger.warning("Could not remove old log file %s: %s", path, e)
            continue
        deleted.append(path)
        logger.debug("Removed old log file %s", path)
    return deleted


def recover_retention_queue(
    base_filename: str,
    calculator: FilenameCalculator,
    max_files: int,
    delete_old_files_on_init: bool = False,
) -> RetentionQueue:
    """Rebuild retention state from the files already on disk.

    The queue is seeded with the newest ``max_files`` matching files that
    still exist. With ``delete_old_files_on_init`` the older files are removed
    on a best-effort basis; a failed removal never aborts recovery.

    Args:
    ----
        base_filename: The configured base path
        calculator: The name policy used to recognize rotated files
        max_files: Retention capacity, must be positive
        delete_old_files_on_init: Remove files beyond the newest ``max_files``

    Returns:
    -------
        RetentionQueue: Seeded queue, oldest first

    """
    queue = RetentionQueue(max_files)
    rotated = scan_rotated_files(base_filename, calculator)
    excess, recent = split_excess(rotated, max_files)

    # Files may vanish between listing and here; they are simply skipped.
    queue.seed(path for path in recent if os.path.exists(path))

    if delete_old_files_on_init and excess:
        deleted = delete_files(excess)
        logger.info(
            "Removed %d of %d old log files for %s",
            len(deleted),
            len(excess),
            base_filename,
        )

    logger.debug(
        "Recovered %d retained files for %s (max_files=%d)",
        len(queue),
        base_filename,
        max_files,
    )
    return queue
