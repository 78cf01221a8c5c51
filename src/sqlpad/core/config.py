"""
Configuration manager for loading and saving application settings.

Handles config file I/O, validation and default config creation.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sqlpad.constants import DEFAULT_CONFIG_FILE
from sqlpad.models.config import AppConfig
from sqlpad.utils.file_utils import write_json_file

# Keys that are derived rather than stored
_DERIVED_KEYS = ("config_dir",)


class ConfigManager:
    """Manages application configuration file."""

    def __init__(self, config_path: Path) -> None:
        """
        Initialize ConfigManager.

        Args:
            config_path: Path to config.json file or a directory containing it
        """
        if config_path.suffix != ".json":
            self.config_path = config_path / DEFAULT_CONFIG_FILE
        else:
            self.config_path = config_path
        self._config: AppConfig | None = None
        self._extras: dict[str, Any] = {}

    @property
    def config(self) -> AppConfig:
        """Loaded configuration (loads on first access)."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def _default_config(self) -> AppConfig:
        return AppConfig(config_dir=self.config_path.parent)

    def load(self) -> AppConfig:
        """
        Load configuration from file, creating default if missing.

        Returns:
            AppConfig: Validated configuration object

        Raises:
            ValueError: If config file contains invalid JSON or invalid values
        """
        if not self.config_path.exists():
            return self._create_default_config()

        try:
            config_data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in config file: {e}") from e

        if not isinstance(config_data, dict):
            raise ValueError("Invalid configuration: expected a JSON object")

        config_data["config_dir"] = str(self.config_path.parent)

        known_fields = set(AppConfig.model_fields.keys())
        self._extras = {k: v for k, v in config_data.items() if k not in known_fields}
        try:
            app_config = AppConfig(**{k: v for k, v in config_data.items() if k in known_fields})
        except ValidationError as e:
            raise ValueError(f"Invalid configuration: {e}") from e

        self._config = app_config
        return app_config

    def save(self, config: AppConfig | None = None) -> None:
        """
        Save configuration to file.

        Args:
            config: Configuration object to save (uses last loaded if None)
        """
        if config is None:
            config = self.config
        else:
            self._config = config

        config_dict = config.model_dump(mode="json")
        for key in _DERIVED_KEYS:
            config_dict.pop(key, None)
        merged = {**config_dict, **self._extras}
        write_json_file(self.config_path, merged)

    def _create_default_config(self) -> AppConfig:
        """
        Create default configuration file.

        Returns:
            AppConfig: Default configuration object
        """
        default_config = self._default_config()
        self.save(default_config)
        return default_config

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value.

        Known fields are validated by the model; unknown keys are kept as
        extras and persisted alongside.

        Raises:
            ValueError: If the value is invalid for a known field
        """
        if key in _DERIVED_KEYS:
            raise ValueError(f"'{key}' is derived from the config file location")

        config = self.config
        if key in AppConfig.model_fields:
            try:
                setattr(config, key, value)
            except ValidationError as e:
                raise ValueError(f"Invalid value for {key}: {e}") from e
        else:
            self._extras[key] = value

    def get(self, key: str) -> Any:
        """Get a configuration value by key."""
        config = self.config
        if key in AppConfig.model_fields:
            return getattr(config, key)
        return self._extras.get(key)

    def to_dict(self) -> dict[str, Any]:
        """Get all configuration as a dictionary."""
        result = self.config.model_dump(mode="json")
        for key in _DERIVED_KEYS:
            result.pop(key, None)
        result.update(self._extras)
        return result

    def reset_to_defaults(self) -> None:
        """Reset configuration to default values."""
        self._config = self._default_config()
        self._extras.clear()

    def reset_key(self, key: str) -> None:
        """Reset a specific key to its default value."""
        if key in AppConfig.model_fields and key not in _DERIVED_KEYS:
            default = AppConfig.model_fields[key].default
            setattr(self.config, key, default)
        else:
            self._extras.pop(key, None)
