"""
Reads and writes the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from soundcloud_sync.exceptions import ConfigurationError
from soundcloud_sync.models.config import SyncConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> SyncConfig:
        """
        Reads the INI file, fills in keys it lacks, and applies CLI overrides on top.

        Raises:
            ConfigurationError: the file is missing, unreadable, or fails validation.
        """
        if not self.config_file_path.is_file():
            raise ConfigurationError(
                f"Configuration file not found at '{self.config_file_path}'. "
                "Run 'soundcloud-sync init' first."
            )

        try:
            self._parser.read(self.config_file_path, encoding="utf-8")
            values = self._get_config_as_dict()
        except (configparser.Error, ValueError) as e:
            raise ConfigurationError(f"Invalid configuration file: {e}") from e

        self._fill_missing_keys()
        values.update(cli_options or {})

        try:
            return SyncConfig(**values, config_path=str(self.config_file_path.parent))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Creates and saves a new configuration file.

        Args:
            settings: A dictionary of settings to save.
        """
        config = configparser.ConfigParser(interpolation=None)
        config["DEFAULT"] = {}

        defaults = SyncConfig()
        for key in sorted(SyncConfig.get_ini_keys()):
            value = settings.get(key, getattr(defaults, key))
            config["DEFAULT"][key] = self._to_ini(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                config.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    @staticmethod
    def _to_ini(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        defaults = SyncConfig()
        return {
            "token": section.get("token", ""),
            "api_base": section.get("api_base", defaults.api_base),
            "directory": section.get("directory", ""),
            "max_workers": section.getint("max_workers", defaults.max_workers),
            "single_flight": section.getboolean("single_flight", defaults.single_flight),
            "artwork_size": section.getint("artwork_size", defaults.artwork_size),
            "artwork_quality": section.getint(
                "artwork_quality", defaults.artwork_quality
            ),
        }

    def _fill_missing_keys(self) -> None:
        """Writes defaults for keys added since the file was created."""
        section = self._parser["DEFAULT"]
        missing = [key for key in sorted(SyncConfig.get_ini_keys()) if key not in section]
        if not missing:
            return

        defaults = SyncConfig()
        for key in missing:
            section[key] = self._to_ini(getattr(defaults, key))

        try:
            with open(self.config_file_path, "w", encoding="utf-8") as f:
                self._parser.write(f)
        except OSError as e:
            log.warning(f"Could not write defaults for {', '.join(missing)}: {e}")
            return
        log.info(f"Config file gained default values for: {', '.join(missing)}")
