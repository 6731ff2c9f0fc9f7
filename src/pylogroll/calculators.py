"""File name policies for time-rotated log files."""

import os
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import NamedTuple, Optional, Pattern, Tuple


def split_by_extension(filename: str) -> Tuple[str, str]:
    """Split a file name into its stem and extension.

    The extension starts at the last dot of the final path component.
    Hidden files ("/abc/.hidden"), names ending with a dot and dots that
    belong to a directory ("/etc/rc.d/somelog") yield an empty extension.

    Returns
    -------
        Tuple of (stem, extension), extension including the leading dot

    """
    ext_index = filename.rfind(".")
    if ext_index <= 0 or ext_index == len(filename) - 1:
        return filename, ""

    folder_index = max(filename.rfind(os.sep), filename.rfind("/"))
    if os.altsep:
        folder_index = max(folder_index, filename.rfind(os.altsep))
    if folder_index != -1 and folder_index >= ext_index - 1:
        return filename, ""

    return filename[:ext_index], filename[ext_index:]


class BaseName(NamedTuple):
    """Immutable (stem, extension) pair derived from a configured base path."""

    stem: str
    ext: str

    @classmethod
    def from_path(cls, filename: str) -> "BaseName":
        """Build the pair from a base path."""
        return cls(*split_by_extension(filename))


class FilenameCalculator(ABC):
    """Abstract base class for rotated file name policies.

    A policy maps a base path and a point in time to a concrete file name,
    and maps a candidate file name back to the suffix that produced it.
    Generated names must sort lexicographically in chronological order,
    since startup recovery orders files by their suffix.
    """

    @abstractmethod
    def calc_filename(self, base_filename: str, time: datetime) -> str:
        """Return the file name to use for the window containing ``time``."""
        pass

    @abstractmethod
    def extract_suffix(self, base_filename: str, filename: str) -> Optional[str]:
        """Return the suffix if ``filename`` was produced from ``base_filename``.

        Args:
        ----
            base_filename: The configured base path
            filename: A candidate path, typically a directory entry

        Returns:
        -------
            The sortable suffix token, or None if the name does not match.
            Never raises on malformed input.

        """
        pass


class TimeSuffixCalculator(FilenameCalculator):
    """Policy producing ``<stem><delimiter><suffix><ext>`` names."""

    delimiter = "_"
    suffix_pattern: Pattern[str]

    @abstractmethod
    def format_suffix(self, time: datetime) -> str:
        """Render the fixed-width, zero-padded suffix for ``time``."""
        pass

    def calc_filename(self, base_filename: str, time: datetime) -> str:
        """Insert the time suffix between stem and extension."""
        base = BaseName.from_path(base_filename)
        return f"{base.stem}{self.delimiter}{self.format_suffix(time)}{base.ext}"

    def extract_suffix(self, base_filename: str, filename: str) -> Optional[str]:
        """Recover the suffix of a name built by :meth:`calc_filename`."""
        base = BaseName.from_path(base_filename)
        prefix = base.stem + self.delimiter
        if not filename.startswith(prefix):
            return None

        stem, ext = split_by_extension(filename)
        if ext != base.ext or len(stem) < len(prefix):
            return None

        suffix = stem[len(prefix) :]
        if not self.suffix_pattern.fullmatch(suffix):
            return None
        return suffix


class DailyFilenameCalculator(TimeSuffixCalculator):
    """Daily file names in the form ``basename_YYYY-MM-DD.ext``."""

    suffix_pattern = re.compile(r"\d{4}-\d{2}-\d{2}")

    def format_suffix(self, time: datetime) -> str:
        """Format the date part of ``time``."""
        return f"{time.year:04d}-{time.month:02d}-{time.day:02d}"


class MinuteFilenameCalculator(TimeSuffixCalculator):
    """Per-minute file names in the form ``basename_YYYY-MM-DD-HH_MM.ext``."""

    suffix_pattern = re.compile(r"\d{4}-\d{2}-\d{2}-\d{2}_\d{2}")

    def format_suffix(self, time: datetime) -> str:
        """Format ``time`` down to the minute."""
        return (
            f"{time.year:04d}-{time.month:02d}-{time.day:02d}"
            f"-{time.hour:02d}_{time.minute:02d}"
        )
