"""
Path utilities and constants.

This module provides helper functions for working with paths in the application.
"""

import platform
from pathlib import Path


APP_NAME = "orgchart"


def get_persistent_data_directory() -> Path:
    """
    Get the persistent data directory for the application (cross-platform).

    This provides a location where settings and logs can be saved
    persistently across sessions.

    Returns:
        Path to the persistent data directory.

    Platform-specific locations:
        - Windows: %APPDATA%/LocalLow/orgchart
        - macOS: ~/Library/Application Support/orgchart
        - Linux: ~/.config/orgchart
    """
    system = platform.system()

    if system == "Windows":
        base = Path.home() / "AppData" / "LocalLow"
    elif system == "Darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path.home() / ".config"

    data_dir = base / APP_NAME
    data_dir.mkdir(parents=True, exist_ok=True)

    return data_dir


def get_settings_file_path() -> Path:
    """
    Get the path to the settings file.

    Returns:
        Path to the settings.json file.
    """
    return get_persistent_data_directory() / "settings.json"


def get_log_file_path() -> Path:
    """
    Get the path to the main log file.

    Returns:
        Path to the log.txt file.
    """
    return get_persistent_data_directory() / "log.txt"


def default_delimiter_for(path: Path, fallback: str = ",") -> str:
    """
    Pick the column delimiter from a file extension.

    Args:
        path: Path of the delimited file.
        fallback: Delimiter used for anything that is not ``.tsv``.

    Returns:
        Tab for ``.tsv`` files, ``fallback`` otherwise.
    """
    if path.suffix.lower() == ".tsv":
        return "\t"
    return fallback
