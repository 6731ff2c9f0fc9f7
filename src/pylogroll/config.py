"""Configuration management for pylogroll."""

import json
import logging
import os
import platform
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidConfigError
from .formats import RecordFormat

logger = logging.getLogger(__name__)

DEFAULT_MAX_FILES = 7


class LogrollConfig:
    """Configuration manager for pylogroll."""

    def __init__(self, config_dir: Optional[Path] = None):
        """Initialize the configuration manager.

        Args:
        ----
            config_dir: Directory holding ``config.json``. Defaults to
                       ``$PYLOGROLL_CONFIG_DIR`` or the platform location.

        """
        self.system = platform.system().lower()
        self._config_dir = config_dir
        self.config_data: Dict[str, Any] = {}
        self._load_config()

    @property
    def default_log_dir(self) -> Path:
        """Get the platform-specific default log directory."""
        if self.system == "darwin":  # macOS
            return Path.home() / "Library" / "Logs" / "pylogroll"
        elif self.system == "linux":
            return Path.home() / ".local" / "state" / "pylogroll"
        elif self.system == "windows":
            return Path(os.environ.get("LOCALAPPDATA", "C:\\ProgramData")) / "pylogroll"
        else:
            return Path.home() / ".pylogroll" / "logs"

    @property
    def config_dir(self) -> Path:
        """Get the platform-specific configuration directory."""
        if self._config_dir is not None:
            return Path(self._config_dir)
        if os.environ.get("PYLOGROLL_CONFIG_DIR"):
            return Path(os.environ["PYLOGROLL_CONFIG_DIR"])
        if self.system == "darwin":  # macOS
            return Path.home() / "Library" / "Preferences" / "pylogroll"
        elif self.system == "linux":
            return Path.home() / ".config" / "pylogroll"
        elif self.system == "windows":
            return Path(os.environ.get("APPDATA", "")) / "pylogroll"
        else:
            return Path.home() / ".pylogroll"

    @property
    def config_file(self) -> Path:
        """Get the path to the configuration file."""
        return self.config_dir / "config.json"

    def defaults(self) -> Dict[str, Any]:
        """Get the default configuration values."""
        return {
            "log_dir": str(self.default_log_dir),
            "max_files": DEFAULT_MAX_FILES,
            "rotation_hour": 0,
            "rotation_minute": 0,
            "format": RecordFormat.DEFAULT_FORMAT,
        }

    def _load_config(self) -> None:
        """Load configuration from file."""
        try:
            if self.config_file.exists():
                with open(self.config_file) as f:
                    self.config_data = {**self.defaults(), **json.load(f)}
            else:
                self.config_data = self.defaults()
                self._save_config()
        except (OSError, ValueError) as e:
            logger.warning("Could not load config file: %s", e)
            self.config_data = self.defaults()

    def _save_config(self) -> None:
        """Save configuration to file."""
        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                json.dump(self.config_data, f, indent=2)
        except OSError as e:
            logger.warning("Could not save config file: %s", e)

    def get_log_dir(self, override_dir: Optional[str] = None) -> Path:
        """Get the log directory path.

        Args:
        ----
            override_dir: Optional override directory from command line

        Returns:
        -------
            Path object for the log directory

        """
        if override_dir:
            return Path(override_dir)
        return Path(self.config_data.get("log_dir", self.default_log_dir))

    def get_max_files(self, override: Optional[int] = None) -> int:
        """Get the number of rotated files to retain."""
        if override is not None:
            return override
        return int(self.config_data.get("max_files", DEFAULT_MAX_FILES))

    def get_rotation_time(self) -> Tuple[int, int]:
        """Get the daily rotation time as (hour, minute)."""
        return (
            int(self.config_data.get("rotation_hour", 0)),
            int(self.config_data.get("rotation_minute", 0)),
        )

    def get_format(self) -> str:
        """Get the record format name."""
        return self.config_data.get("format", RecordFormat.DEFAULT_FORMAT)

    def set_log_dir(self, log_dir: str) -> None:
        """Set the log directory in configuration."""
        self.config_data["log_dir"] = log_dir
        self._save_config()

    def set_max_files(self, max_files: int) -> None:
        """Set the retention limit in configuration."""
        if max_files < 0:
            raise InvalidConfigError("max_files must be >= 0")
        self.config_data["max_files"] = max_files
        self._save_config()

    def set_rotation_time(self, hour: int, minute: int) -> None:
        """Set the daily rotation time in configuration."""
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            raise InvalidConfigError("hour must be 0-23 and minute 0-59")
        self.config_data["rotation_hour"] = hour
        self.config_data["rotation_minute"] = minute
        self._save_config()

    def set_format(self, name: str) -> None:
        """Set the record format in configuration."""
        if name not in (RecordFormat.FORMAT_TEXT, RecordFormat.FORMAT_JSON):
            raise InvalidConfigError(f"Unknown format: {name}")
        self.config_data["format"] = name
        self._save_config()

    def reset(self) -> None:
        """Restore all settings to their defaults."""
        self.config_data = self.defaults()
        self._save_config()


# Global configuration instance
config = LogrollConfig()
