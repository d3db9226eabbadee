"""
Configuration manager for linkleaf.
Handles loading and validation of configuration settings.
"""
import json
import logging
import os
from json.decoder import JSONDecodeError
from typing import Any, Dict, Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

# Environment variable -> dotted settings key
ENV_OVERRIDES = {
    "LINKLEAF_FEED_PATH": "feed.default_path",
    "LINKLEAF_LOG_LEVEL": "logging.level",
    "LINKLEAF_LOG_DIR": "logging.log_dir",
}

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigManager:
    """
    Manages configuration loading from defaults, a settings file and the environment.
    """

    def __init__(self, settings_path: Optional[str] = None, env_file: Optional[str] = None):
        """
        Initialize configuration manager.

        Args:
            settings_path: Optional path to a JSON settings file
            env_file: Optional .env file; the default lookup is used when None
        """
        self.settings_path = settings_path
        self.env_file = env_file
        self.settings: Dict[str, Any] = {}

        logger.debug(f"ConfigManager initialized with settings: {settings_path}, env file: {env_file}")

        self._load_all_configs()

    def _load_all_configs(self):
        """Load settings file, merge defaults, apply environment overrides and validate."""
        if self.settings_path:
            self.settings = self._load_json_file(self.settings_path)

        if not isinstance(self.settings, dict):
            raise TypeError(f"Settings file '{self.settings_path}' must contain a JSON object")

        self._set_default_settings()
        self._apply_env_overrides()
        self._validate_settings()

    def _load_json_file(self, file_path: str) -> Dict[str, Any]:
        """
        Load a JSON configuration file.

        Args:
            file_path: Path to JSON file

        Returns:
            Configuration dictionary

        Raises:
            FileNotFoundError: If the file does not exist.
            json.JSONDecodeError: If the file contains invalid JSON.
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                config = json.load(f)

            logger.info(f"Loaded settings from {file_path}")
            return config

        except FileNotFoundError:
            logger.error(f"Settings file not found: {file_path}")
            raise
        except JSONDecodeError as e:
            logger.error(f"Invalid JSON in settings file '{file_path}': {e}")
            raise

    def _apply_env_overrides(self):
        """Apply LINKLEAF_* environment variables, reading a .env file first."""
        if self.env_file:
            load_dotenv(self.env_file)
        else:
            load_dotenv(find_dotenv(usecwd=True))

        for env_name, key_path in ENV_OVERRIDES.items():
            value = os.environ.get(env_name)
            if value:
                section, key = key_path.split('.')
                self.settings[section][key] = value
                logger.debug(f"Setting '{key_path}' overridden by {env_name}")

    def _validate_settings(self):
        """Validate specific key values within settings."""
        for section in ("feed", "storage", "logging"):
            if not isinstance(self.settings.get(section), dict):
                raise TypeError(f"Invalid type for configuration section '{section}'. Expected dict")

        feed = self.settings["feed"]
        if not feed.get("default_path") or not isinstance(feed.get("default_path"), str):
            raise TypeError("Missing or invalid type for 'feed.default_path'. Expected non-empty string.")
        if not isinstance(feed.get("default_title"), str):
            raise TypeError("Invalid type for 'feed.default_title'. Expected string.")
        version = feed.get("default_version")
        if not isinstance(version, int) or isinstance(version, bool) or version < 0:
            raise TypeError("Invalid type for 'feed.default_version'. Expected non-negative int.")

        storage = self.settings["storage"]
        for key in ("file_mode", "dir_mode"):
            try:
                int(str(storage.get(key)), 8)
            except ValueError:
                raise ValueError(f"Invalid value for 'storage.{key}'. Expected octal string such as '0644'.")

        logging_settings = self.settings["logging"]
        level = logging_settings.get("level")
        if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"Invalid value for 'logging.level': {level!r}")
        log_dir = logging_settings.get("log_dir")
        if log_dir is not None and not isinstance(log_dir, str):
            raise TypeError("Invalid type for 'logging.log_dir'. Expected string or null.")

        logger.debug("Settings configuration validated")

    def _set_default_settings(self):
        """Recursively set default values for missing settings."""
        defaults = {
            "feed": {
                "default_path": "feed.pb",
                "default_title": "",
                "default_version": 1,
            },
            "storage": {
                "file_mode": "0644",
                "dir_mode": "0755",
            },
            "logging": {
                "level": "WARNING",
                "log_dir": None,
            },
        }

        def merge_dicts(source, default):
            """Recursively merges default dict into source dict."""
            for key, value in default.items():
                if key not in source:
                    source[key] = dict(value) if isinstance(value, dict) else value
                elif isinstance(value, dict) and isinstance(source[key], dict):
                    merge_dicts(source[key], value)

        merge_dicts(self.settings, defaults)

    def get_file_mode(self) -> int:
        """Permission bits for written feed files."""
        return int(str(self.get_config_value("storage.file_mode")), 8)

    def get_dir_mode(self) -> int:
        """Permission bits for created directories."""
        return int(str(self.get_config_value("storage.dir_mode")), 8)

    def get_config_value(self, key_path: str, default=None):
        """
        Get configuration value using dot notation.

        Args:
            key_path: Dot-separated path to configuration value (e.g., "feed.default_path")
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        keys = key_path.split('.')
        value = self.settings

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value
