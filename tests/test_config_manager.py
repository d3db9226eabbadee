"""
Tests for ConfigManager

Unit tests for configuration loading and validation.
"""

import json
import os
import shutil
import tempfile
import unittest
from json.decoder import JSONDecodeError
from unittest.mock import patch

from linkleaf.config_manager import ConfigManager

CLEAN_ENV = {key: value for key, value in os.environ.items() if not key.startswith('LINKLEAF_')}


@patch.dict(os.environ, CLEAN_ENV, clear=True)
class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager class."""

    def setUp(self):
        """Set up test fixtures."""
        self.temp_dir = tempfile.mkdtemp()
        self.settings_path = os.path.join(self.temp_dir, 'settings.json')
        # Keeps any .env in the working directory out of the tests
        self.env_path = os.path.join(self.temp_dir, '.env')
        with open(self.env_path, 'w') as f:
            f.write("")

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.temp_dir)

    def write_settings(self, settings):
        with open(self.settings_path, 'w') as f:
            json.dump(settings, f, indent=2)

    def test_defaults_without_settings_file(self):
        config_manager = ConfigManager(env_file=self.env_path)

        self.assertEqual(config_manager.get_config_value("feed.default_path"), "feed.pb")
        self.assertEqual(config_manager.get_config_value("feed.default_version"), 1)
        self.assertEqual(config_manager.get_config_value("feed.default_title"), "")
        self.assertEqual(config_manager.get_config_value("logging.level"), "WARNING")
        self.assertIsNone(config_manager.get_config_value("logging.log_dir"))
        self.assertEqual(config_manager.get_file_mode(), 0o644)
        self.assertEqual(config_manager.get_dir_mode(), 0o755)

    def test_settings_file_merged_over_defaults(self):
        """Test that missing settings are filled with defaults."""
        self.write_settings({"feed": {"default_path": "links/my.pb"}, "storage": {"file_mode": "0600"}})

        config_manager = ConfigManager(self.settings_path, env_file=self.env_path)

        self.assertEqual(config_manager.get_config_value("feed.default_path"), "links/my.pb")
        self.assertEqual(config_manager.get_config_value("feed.default_version"), 1)
        self.assertEqual(config_manager.get_file_mode(), 0o600)
        self.assertEqual(config_manager.get_dir_mode(), 0o755)

    def test_get_config_value_default(self):
        config_manager = ConfigManager(env_file=self.env_path)
        self.assertEqual(config_manager.get_config_value("feed.unknown", "fallback"), "fallback")
        self.assertEqual(config_manager.get_config_value("nope.nested.key", 3), 3)

    def test_environment_overrides(self):
        self.write_settings({"logging": {"level": "ERROR"}})

        with patch.dict(os.environ, {"LINKLEAF_FEED_PATH": "env.pb", "LINKLEAF_LOG_LEVEL": "DEBUG"}):
            config_manager = ConfigManager(self.settings_path, env_file=self.env_path)

        self.assertEqual(config_manager.get_config_value("feed.default_path"), "env.pb")
        self.assertEqual(config_manager.get_config_value("logging.level"), "DEBUG")

    def test_dotenv_file_overrides(self):
        with open(self.env_path, 'w') as f:
            f.write(f"LINKLEAF_LOG_DIR={self.temp_dir}\n")

        config_manager = ConfigManager(env_file=self.env_path)
        self.assertEqual(config_manager.get_config_value("logging.log_dir"), self.temp_dir)

    def test_missing_settings_file(self):
        with self.assertRaises(FileNotFoundError):
            ConfigManager(os.path.join(self.temp_dir, 'missing.json'), env_file=self.env_path)

    def test_invalid_json_format(self):
        with open(self.settings_path, 'w') as f:
            f.write('{ invalid json')

        with self.assertRaises(JSONDecodeError):
            ConfigManager(self.settings_path, env_file=self.env_path)

    def test_settings_must_be_object(self):
        self.write_settings(["not", "an", "object"])
        with self.assertRaises(TypeError):
            ConfigManager(self.settings_path, env_file=self.env_path)

    def test_invalid_version_type(self):
        self.write_settings({"feed": {"default_version": "one"}})
        with self.assertRaises(TypeError):
            ConfigManager(self.settings_path, env_file=self.env_path)

    def test_invalid_file_mode(self):
        self.write_settings({"storage": {"file_mode": "rw-r--r--"}})
        with self.assertRaises(ValueError):
            ConfigManager(self.settings_path, env_file=self.env_path)

    def test_invalid_log_level(self):
        self.write_settings({"logging": {"level": "LOUD"}})
        with self.assertRaises(ValueError):
            ConfigManager(self.settings_path, env_file=self.env_path)


if __name__ == '__main__':
    unittest.main()
