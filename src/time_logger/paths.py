"""Helpers for locating application directories."""

from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs


APP_NAME = "TimeLogger"
APP_AUTHOR = "TimeLogger"
RECORDS_DIR_NAME = "Time Log Records"


def get_data_dir() -> Path:
    """Return the base directory for persistent data."""
    dirs = PlatformDirs(appname=APP_NAME, appauthor=APP_AUTHOR, roaming=True)
    path = Path(dirs.user_data_path)
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_records_dir() -> Path:
    # Not created here; saving asks for it explicitly.
    return get_data_dir() / RECORDS_DIR_NAME


def get_settings_path() -> Path:
    return get_data_dir() / "appsettings.json"

