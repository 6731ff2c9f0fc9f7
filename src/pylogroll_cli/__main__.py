"""Command-line interface for pylogroll.

This module provides a CLI for writing to time-rotated log files and for
inspecting and pruning the rotated files already on disk.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO

import click

from pylogroll.calculators import (
    DailyFilenameCalculator,
    FilenameCalculator,
    MinuteFilenameCalculator,
)
from pylogroll.config import config as logroll_config
from pylogroll.errors import LogrollError, RetentionDeleteError
from pylogroll.formats import get_format_by_name
from pylogroll.record import Level, LogRecord
from pylogroll.retention import delete_files, scan_rotated_files, split_excess
from pylogroll.sink import DailyFileSink, MinuteFileSink, RotatingFileSink

POLICIES = ("daily", "minute")
LEVEL_CHOICES = [level.label for level in Level if level is not Level.OFF] + ["warn", "err"]


class LogrollCLI:
    """Command-line interface for time-rotated log files.

    This class holds the settings shared by all commands and implements the
    operations behind them.
    """

    def __init__(self, log_dir: Optional[str] = None, format_name: Optional[str] = None):
        """Initialize the CLI.

        Args:
        ----
            log_dir: Directory relative base names are resolved against
            format_name: Record format for written lines ("text" or "json")

        """
        self.log_dir = logroll_config.get_log_dir(log_dir)
        self.format_name = format_name or logroll_config.get_format()

    def resolve(self, base_filename: str) -> str:
        """Resolve a base name against the log directory."""
        path = Path(base_filename)
        if path.is_absolute():
            return str(path)
        return str(self.log_dir / path)

    @staticmethod
    def calculator_for(policy: str) -> FilenameCalculator:
        """Get the file name policy for a rotation policy name."""
        if policy == "minute":
            return MinuteFilenameCalculator()
        return DailyFilenameCalculator()

    def open_sink(
        self,
        base_filename: str,
        policy: str,
        hour: Optional[int],
        minute: Optional[int],
        max_files: Optional[int],
        truncate: bool,
        delete_old: bool,
    ) -> RotatingFileSink:
        """Create a sink from command-line options and configured defaults."""
        formatter = get_format_by_name(self.format_name)
        max_files = logroll_config.get_max_files(max_files)
        if policy == "minute":
            return MinuteFileSink(
                self.resolve(base_filename),
                truncate=truncate,
                max_files=max_files,
                rotation_minute=minute or 0,
                delete_old_files_on_init=delete_old,
                formatter=formatter,
            )

        default_hour, default_minute = logroll_config.get_rotation_time()
        return DailyFileSink(
            self.resolve(base_filename),
            rotation_hour=default_hour if hour is None else hour,
            rotation_minute=default_minute if minute is None else minute,
            truncate=truncate,
            max_files=max_files,
            delete_old_files_on_init=delete_old,
            formatter=formatter,
        )

    def write(self, sink: RotatingFileSink, stream: TextIO, name: str, level: Level) -> int:
        """Write every line of ``stream`` as one record.

        Returns
        -------
            Number of records written

        """
        count = 0
        for line in stream:
            record = LogRecord(
                timestamp=datetime.now(),
                message=line.rstrip("\r\n"),
                level=level,
                logger_name=name,
            )
            try:
                sink.write(record)
            except RetentionDeleteError as e:
                # The record itself was written; only the cleanup failed.
                click.echo(click.style(f"! {e}", fg="yellow"), err=True)
            count += 1
        sink.flush()
        return count

    def list_files(self, base_filename: str, policy: str) -> None:
        """List rotated files for a base name, oldest first."""
        base = self.resolve(base_filename)
        rotated = scan_rotated_files(base, self.calculator_for(policy))
        if not rotated:
            click.echo(click.style(f"No rotated files found for {base}", fg="yellow"))
            return

        max_files = logroll_config.get_max_files()
        excess, _ = split_excess(rotated, max_files) if max_files else ([], [])
        click.echo(click.style(f"Rotated files for {base}:", fg="blue"))
        for suffix, path in rotated:
            size = os.path.getsize(path) if os.path.exists(path) else 0
            marker = " (beyond max_files)" if path in excess else ""
            click.echo(f"  • {suffix}  {os.path.basename(path)}  {size:,} bytes{marker}")

    def prune(self, base_filename: str, policy: str, max_files: Optional[int], dry_run: bool) -> None:
        """Delete the oldest rotated files beyond ``max_files``."""
        base = self.resolve(base_filename)
        max_files = logroll_config.get_max_files(max_files)
        if max_files <= 0:
            click.echo(click.style("Retention is unlimited, nothing to prune", fg="blue"))
            return

        rotated = scan_rotated_files(base, self.calculator_for(policy))
        excess, _ = split_excess(rotated, max_files)
        if not excess:
            click.echo(click.style("✓ Nothing to prune", fg="green"))
            return

        if dry_run:
            click.echo(click.style(f"Would remove {len(excess)} file(s):", fg="blue"))
            for path in excess:
                click.echo(f"  • {path}")
            return

        deleted = delete_files(excess)
        click.echo(click.style(f"✓ Removed {len(deleted)} file(s)", fg="green"))
        for path in deleted:
            click.echo(f"  • {path}")
        if len(deleted) < len(excess):
            msg = f"✗ {len(excess) - len(deleted)} file(s) could not be removed"
            click.echo(click.style(msg, fg="red"), err=True)
            sys.exit(1)


def policy_option(func):
    """Add the --policy option shared by several commands."""
    return click.option(
        "--policy",
        type=click.Choice(POLICIES),
        default="daily",
        show_default=True,
        help="Rotation policy the files were written with",
    )(func)


@click.group()
@click.option("--log-dir", help="Directory relative base names are resolved against")
@click.option("--format", "format_name", type=click.Choice(["text", "json"]), help="Record format")
@click.pass_context
def cli(ctx, log_dir, format_name):
    """pylogroll - time-rotated log files with bounded retention."""
    ctx.obj = LogrollCLI(log_dir, format_name=format_name)


@cli.command()
@click.argument("base")
@policy_option
@click.option("--hour", type=int, help="Daily rotation hour (0-23)")
@click.option("--minute", type=int, help="Daily rotation minute, or minute period (0-59)")
@click.option("--max-files", type=int, help="Rotated files to keep, 0 keeps all")
@click.option("--truncate", is_flag=True, help="Truncate an existing file on open")
@click.option("--delete-old-on-init", is_flag=True, help="Remove files beyond --max-files at startup")
@click.option("--name", default="", help="Logger name written with each line")
@click.option(
    "--level",
    type=click.Choice(LEVEL_CHOICES, case_sensitive=False),
    default="info",
    help="Level written with each line",
)
@click.option("--input", "input_file", type=click.File("r"), default="-", help="File to read lines from")
@click.pass_obj
def write(cli: LogrollCLI, base, policy, hour, minute, max_files, truncate, delete_old_on_init, name, level, input_file):
    """Append lines from stdin (or --input) to a rotated log file."""
    try:
        with cli.open_sink(base, policy, hour, minute, max_files, truncate, delete_old_on_init) as sink:
            count = cli.write(sink, input_file, name, Level.from_str(level))
            current = sink.current_filename()
    except LogrollError as e:
        click.echo(click.style(f"✗ Error: {e}", fg="red"), err=True)
        sys.exit(1)
    click.echo(click.style(f"✓ Wrote {count} record(s) to {current}", fg="green"), err=True)


@cli.command(name="list")
@click.argument("base")
@policy_option
@click.pass_obj
def list_files(cli: LogrollCLI, base, policy):
    """List the rotated files of BASE, oldest first."""
    cli.list_files(base, policy)


@cli.command()
@click.argument("base")
@policy_option
@click.option("--max-files", type=int, help="Rotated files to keep")
@click.option("--dry-run", is_flag=True, help="Only show what would be removed")
@click.pass_obj
def prune(cli: LogrollCLI, base, policy, max_files, dry_run):
    """Remove the oldest rotated files of BASE beyond --max-files."""
    cli.prune(base, policy, max_files, dry_run)


@cli.group()
def config():
    """Manage configuration settings."""
    pass


@config.command()
def view():
    """View current configuration."""
    click.echo(click.style(f"Configuration ({logroll_config.config_file}):", fg="blue"))
    hour, minute = logroll_config.get_rotation_time()
    click.echo(f"  • Log directory: {logroll_config.get_log_dir()}")
    click.echo(f"  • Max files: {logroll_config.get_max_files()}")
    click.echo(f"  • Rotation time: {hour:02d}:{minute:02d}")
    click.echo(f"  • Format: {logroll_config.get_format()}")


@config.command(name="set-log-dir")
@click.argument("log_dir")
def set_log_dir(log_dir):
    """Set the default log directory."""
    logroll_config.set_log_dir(log_dir)
    click.echo(click.style(f"✓ Log directory set to {log_dir}", fg="green"))


@config.command(name="set-max-files")
@click.argument("max_files", type=int)
def set_max_files(max_files):
    """Set how many rotated files to keep (0 keeps all)."""
    try:
        logroll_config.set_max_files(max_files)
    except LogrollError as e:
        raise click.BadParameter(str(e)) from e
    click.echo(click.style(f"✓ Max files set to {max_files}", fg="green"))


@config.command(name="set-rotation-time")
@click.argument("hour", type=int)
@click.argument("minute", type=int)
def set_rotation_time(hour, minute):
    """Set the default daily rotation time."""
    try:
        logroll_config.set_rotation_time(hour, minute)
    except LogrollError as e:
        raise click.BadParameter(str(e)) from e
    click.echo(click.style(f"✓ Rotation time set to {hour:02d}:{minute:02d}", fg="green"))


@config.command(name="set-format")
@click.argument("name", type=click.Choice(["text", "json"]))
def set_format(name):
    """Set the default record format."""
    logroll_config.set_format(name)
    click.echo(click.style(f"✓ Format set to {name}", fg="green"))


@config.command()
def reset():
    """Reset all configuration settings to defaults."""
    logroll_config.reset()
    click.echo(click.style("✓ Configuration reset to defaults", fg="green"))


if __name__ == "__main__":
    cli()
