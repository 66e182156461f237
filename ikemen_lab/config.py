"""
Configuration - settings file and environment overrides.
Holds logging and smart collection evaluation settings.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger("ikemenlab.config")


__all__ = ["Config", "config"]

_ENV_PREFIX = "IKEMENLAB_"


@dataclass
class Config:
    """
    Central configuration handling for the application.
    Manages the data directory, logging and evaluation cache settings.
    """

    DATA_DIR: Path = Path.home() / ".local" / "share" / "ikemen-lab"
    SETTINGS_FILE: Path | None = None

    LOG_LEVEL: str = "INFO"
    LOG_FILE: Path | None = None

    # Evaluation cache
    CACHE_MAX_ENTRIES: int = 64

    # Window used by the "Recently Added" template
    DEFAULT_RECENT_DAYS: int = 7

    load_environment: bool = True

    def __post_init__(self):
        """Apply environment overrides and load the settings file."""
        if self.load_environment:
            load_dotenv()
            env_dir = os.getenv(f"{_ENV_PREFIX}DATA_DIR")
            if env_dir:
                self.DATA_DIR = Path(env_dir)

        if self.SETTINGS_FILE is None:
            self.SETTINGS_FILE = self.DATA_DIR / "settings.json"

        self._load_settings()

        if self.load_environment:
            self._apply_env_overrides()

    def _load_settings(self) -> None:
        """Load settings from JSON file."""
        if not self.SETTINGS_FILE.exists():
            return

        try:
            with open(self.SETTINGS_FILE, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Could not load settings from %s: %s", self.SETTINGS_FILE, e)
            return

        self.LOG_LEVEL = str(data.get("log_level", self.LOG_LEVEL)).upper()

        log_file = data.get("log_file")
        if log_file:
            self.LOG_FILE = Path(log_file)

        self.CACHE_MAX_ENTRIES = self._coerce_positive_int(
            data.get("cache_max_entries"), self.CACHE_MAX_ENTRIES, "cache_max_entries"
        )
        self.DEFAULT_RECENT_DAYS = self._coerce_positive_int(
            data.get("default_recent_days"), self.DEFAULT_RECENT_DAYS, "default_recent_days"
        )

    def _apply_env_overrides(self) -> None:
        """Environment variables win over the settings file."""
        level = os.getenv(f"{_ENV_PREFIX}LOG_LEVEL")
        if level:
            self.LOG_LEVEL = level.upper()

        cache_size = os.getenv(f"{_ENV_PREFIX}CACHE_MAX_ENTRIES")
        if cache_size:
            self.CACHE_MAX_ENTRIES = self._coerce_positive_int(
                cache_size, self.CACHE_MAX_ENTRIES, f"{_ENV_PREFIX}CACHE_MAX_ENTRIES"
            )

    @staticmethod
    def _coerce_positive_int(raw: object, default: int, name: str) -> int:
        """Parse a positive integer setting, keeping the default on bad input."""
        if raw is None:
            return default
        try:
            value = int(raw)
        except (TypeError, ValueError):
            logger.warning("Ignoring invalid value for %s: %r", name, raw)
            return default
        if value <= 0:
            logger.warning("Ignoring non-positive value for %s: %r", name, raw)
            return default
        return value

    def save(self) -> None:
        """Save current configuration to JSON file."""
        data = {
            "log_level": self.LOG_LEVEL,
            "log_file": str(self.LOG_FILE) if self.LOG_FILE else "",
            "cache_max_entries": self.CACHE_MAX_ENTRIES,
            "default_recent_days": self.DEFAULT_RECENT_DAYS,
        }

        try:
            self.SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
            with open(self.SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.error("Could not save settings to %s: %s", self.SETTINGS_FILE, e)


# Global configuration instance
config = Config()
