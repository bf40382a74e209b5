"""Shell settings stored as JSON at ``~/.lash/settings.json``.

The config directory can be moved with ``LASH_CONFIG_DIR``. Keys are
camelCase in the file (``historyFile``); snake_case is accepted too.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "LASH_CONFIG_DIR"
SETTINGS_FILE_NAME = "settings.json"
HISTORY_FILE_NAME = "history.txt"

LogLevel = Literal["debug", "info", "warning", "error"]


class Settings(BaseModel):
    """User-tunable shell behaviour."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    prompt: str = "$ "
    history_file: str | None = Field(default=None, alias="historyFile")
    bell: bool = True
    candidate_separator: str = Field(default="    ", alias="candidateSeparator")
    log_level: LogLevel = Field(default="warning", alias="logLevel")
    log_file: str | None = Field(default=None, alias="logFile")
    keybindings: dict[str, str | list[str]] = Field(default_factory=dict)

    def resolve_history_file(self, config_dir: Path) -> Path:
        """History file path, defaulting to ``<config dir>/history.txt``."""
        if self.history_file:
            return Path(self.history_file).expanduser()
        return config_dir / HISTORY_FILE_NAME


def get_config_dir() -> Path:
    return Path(os.environ.get(CONFIG_DIR_ENV, Path.home() / ".lash")).expanduser()


def get_settings_path(config_dir: Path | None = None) -> Path:
    return (config_dir or get_config_dir()) / SETTINGS_FILE_NAME


def load_settings(config_dir: Path | None = None) -> Settings:
    """Load settings from disk; missing file gives defaults.

    A malformed file is reported on stderr and defaults are used.
    """
    path = get_settings_path(config_dir)
    if not path.exists():
        return Settings()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("top-level value must be an object")
        return Settings.model_validate(data)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error reading settings {path}: {e}", file=sys.stderr)
        return Settings()


def apply_overrides(settings: Settings, overrides: dict[str, Any]) -> Settings:
    """Return a copy of *settings* with non-``None`` CLI overrides applied."""
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return settings
    return settings.model_copy(update=updates)

