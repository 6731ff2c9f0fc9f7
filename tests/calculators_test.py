"""Tests for rotated file name policies."""

from datetime import datetime, timedelta

import pytest

from pylogroll.calculators import (
    BaseName,
    DailyFilenameCalculator,
    MinuteFilenameCalculator,
    split_by_extension,
)


class TestSplitByExtension:
    """Test splitting a path into stem and extension."""

    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("rotated.txt", ("rotated", ".txt")),
            ("rotated", ("rotated", "")),
            ("logs/archive.tar.gz", ("logs/archive.tar", ".gz")),
            (".hidden", (".hidden", "")),
            ("/abc/.hidden", ("/abc/.hidden", "")),
            ("/etc/rc.d/somelogfile", ("/etc/rc.d/somelogfile", "")),
            ("trailing.", ("trailing.", "")),
        ],
    )
    def test_split(self, filename, expected):
        """Test extension detection edge cases."""
        assert split_by_extension(filename) == expected

    def test_base_name_from_path(self):
        """Test the immutable stem/extension pair."""
        base = BaseName.from_path("logs/app.log")
        assert base.stem == "logs/app"
        assert base.ext == ".log"


class TestDailyFilenameCalculator:
    """Test the daily ``basename_YYYY-MM-DD.ext`` policy."""

    def setup_method(self):
        """Create the calculator under test."""
        self.calc = DailyFilenameCalculator()

    def test_calc_filename_with_extension(self):
        """Test the date is inserted before the extension."""
        name = self.calc.calc_filename("logs/app.txt", datetime(2024, 1, 5, 13, 7))
        assert name == "logs/app_2024-01-05.txt"

    def test_calc_filename_without_extension(self):
        """Test base names without an extension."""
        name = self.calc.calc_filename("daily", datetime(2024, 11, 30))
        assert name == "daily_2024-11-30"

    def test_calc_filename_hidden_file(self):
        """Test a leading dot is not treated as an extension."""
        name = self.calc.calc_filename("/var/log/.app", datetime(2024, 1, 5))
        assert name == "/var/log/.app_2024-01-05"

    def test_extract_suffix_round_trip(self):
        """Test the suffix of a generated name is the truncated date."""
        now = datetime(2023, 7, 4, 23, 59, 59)
        name = self.calc.calc_filename("daily.txt", now)
        assert self.calc.extract_suffix("daily.txt", name) == "2023-07-04"

    def test_extract_suffix_unrelated_name(self):
        """Test a name not built from the base yields no match."""
        assert self.calc.extract_suffix("basename", "filename") is None

    @pytest.mark.parametrize(
        "candidate",
        [
            "logs/application_2024-01-05.txt",  # different stem
            "logs/app_2024-01-05.txt.gz",  # different extension
            "logs/app_2024-01-05.log",
            "logs/app_garbage.txt",
            "logs/app_2024-1-5.txt",  # not zero padded
            "logs/app_2024-01-05-13_07.txt",  # minute policy name
            "logs/app.txt",  # the base itself
            "",
        ],
    )
    def test_extract_suffix_rejects(self, candidate):
        """Test malformed or foreign names are rejected without raising."""
        assert self.calc.extract_suffix("logs/app.txt", candidate) is None

    def test_lexicographic_order_is_chronological(self):
        """Test sorted names follow time order across month and year ends."""
        start = datetime(2023, 12, 25)
        names = [
            self.calc.calc_filename("app.log", start + timedelta(days=i))
            for i in range(40)
        ]
        assert sorted(names) == names


class TestMinuteFilenameCalculator:
    """Test the ``basename_YYYY-MM-DD-HH_MM.ext`` policy."""

    def setup_method(self):
        """Create the calculator under test."""
        self.calc = MinuteFilenameCalculator()

    def test_calc_filename(self):
        """Test hour and minute are part of the name."""
        name = self.calc.calc_filename("logs/min-log.txt", datetime(2024, 3, 9, 7, 5, 42))
        assert name == "logs/min-log_2024-03-09-07_05.txt"

    def test_extract_suffix_round_trip(self):
        """Test the suffix of a generated name is truncated to the minute."""
        name = self.calc.calc_filename("logs/min.txt", datetime(2024, 3, 9, 7, 5, 42))
        assert self.calc.extract_suffix("logs/min.txt", name) == "2024-03-09-07_05"

    def test_extract_suffix_rejects_daily_name(self):
        """Test a daily name is not taken for a minute name."""
        assert self.calc.extract_suffix("logs/min.txt", "logs/min_2024-03-09.txt") is None

    def test_lexicographic_order_is_chronological(self):
        """Test sorted names follow time order across hour and day ends."""
        start = datetime(2024, 2, 28, 23, 50)
        names = [
            self.calc.calc_filename("min.log", start + timedelta(minutes=7 * i))
            for i in range(30)
        ]
        assert sorted(names) == names
