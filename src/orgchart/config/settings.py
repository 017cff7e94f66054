"""
Application settings and configuration.

This module provides centralized access to application settings with automatic
persistence to disk. Settings are stored as JSON in a platform-specific location:

- Windows: %APPDATA%/LocalLow/orgchart/settings.json
- macOS: ~/Library/Application Support/orgchart/settings.json
- Linux: ~/.config/orgchart/settings.json

Settings are automatically loaded on first access and saved when updated.
Only editor preferences live here; chart data itself is never persisted.

Example:
    from orgchart.config.settings import get_settings, get_settings_manager

    settings = get_settings()
    print(settings.csv_delimiter)

    manager = get_settings_manager()
    manager.update(synthetic_root_name="Company")
"""

import json
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Optional
import logging

from ..infrastructure.paths import get_settings_file_path, get_log_file_path


@dataclass
class AppSettings:
    """Application-wide settings."""

    # Logging settings
    log_level: int = logging.INFO
    log_to_file: bool = True
    log_file_path: Optional[Path] = field(default_factory=get_log_file_path)

    # Import/export settings
    csv_delimiter: str = ","
    export_filename: str = "org-chart.csv"

    # Editor settings
    id_length: int = 8
    synthetic_root_name: str = "Organization"


class SettingsManager:
    """
    Manages loading and saving application settings.
    """

    def __init__(self, config_file: Optional[Path] = None):
        """
        Initialize the settings manager.

        Args:
            config_file: Path to configuration file. If None, uses default location.
        """
        if config_file is None:
            config_file = get_settings_file_path()

        self.config_file = config_file
        self._settings = AppSettings()
        self._logger = logging.getLogger(__name__)

    def load(self) -> AppSettings:
        """
        Load settings from configuration file.

        Returns:
            The loaded settings object.
        """
        if not self.config_file.exists():
            self._logger.info(f"Settings file not found at {self.config_file}, using defaults")
            return self._settings

        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)

            if data.get('log_file_path'):
                data['log_file_path'] = Path(data['log_file_path'])

            for key, value in data.items():
                if hasattr(self._settings, key):
                    setattr(self._settings, key, value)
                else:
                    self._logger.debug(f"Ignoring unknown setting in file: {key}")

            self._logger.info(f"Settings loaded from {self.config_file}")

        except json.JSONDecodeError as e:
            self._logger.error(f"Failed to parse settings file: {e}. Using defaults.")
        except OSError as e:
            self._logger.error(f"Failed to load settings: {e}. Using defaults.")

        return self._settings

    def save(self, settings: Optional[AppSettings] = None) -> None:
        """
        Save settings to configuration file.

        Args:
            settings: Settings object to save. If None, saves current settings.
        """
        if settings is not None:
            self._settings = settings

        try:
            self.config_file.parent.mkdir(parents=True, exist_ok=True)

            data = asdict(self._settings)
            if data.get('log_file_path'):
                data['log_file_path'] = str(Path(data['log_file_path'])).replace('\\', '/')

            # Atomic write: write to temp file, then rename
            temp_file = self.config_file.with_suffix('.tmp')
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            temp_file.replace(self.config_file)

            self._logger.info(f"Settings saved to {self.config_file}")

        except OSError as e:
            self._logger.error(f"Failed to save settings: {e}")

    def get(self) -> AppSettings:
        """
        Get the current settings.

        Returns:
            The current settings object.
        """
        return self._settings

    def update(self, **kwargs) -> None:
        """
        Update specific settings and auto-save.

        Args:
            **kwargs: Setting names and values to update.
        """
        for key, value in kwargs.items():
            if hasattr(self._settings, key):
                setattr(self._settings, key, value)
            else:
                self._logger.warning(f"Ignoring unknown setting: {key}")

        self.save()

    def reset_to_defaults(self) -> None:
        """Reset all settings to their default values and save."""
        self._settings = AppSettings()
        self.save()


# Global settings instance
_settings_manager: Optional[SettingsManager] = None


def get_settings_manager() -> SettingsManager:
    """
    Get the global settings manager instance.

    Returns:
        The global SettingsManager.
    """
    global _settings_manager
    if _settings_manager is None:
        _settings_manager = SettingsManager()
        _settings_manager.load()
    return _settings_manager


def get_settings() -> AppSettings:
    """
    Get the current application settings.

    Returns:
        The current AppSettings object.
    """
    return get_settings_manager().get()
