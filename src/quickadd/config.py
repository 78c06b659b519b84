"""Configuration management for quickadd."""

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "QUICKADD_CONFIG"


@dataclass
class ConfigModel:
    """Global configuration model for quickadd."""

    # Display preferences
    use_emoji: bool = True
    no_color: bool = False
    show_badges: bool = True
    date_format: str = "%Y-%m-%d"
    time_format: str = "%H:%M"

    # Behavior settings
    detect_before_parse: bool = True  # skip the full parse for plain text

    # File paths
    data_dir: str = "~/.quickadd"

    def __post_init__(self):
        """Expand user paths."""
        self.data_dir = os.path.expanduser(self.data_dir)

    @property
    def datetime_format(self) -> str:
        return f"{self.date_format} {self.time_format}"

    def to_yaml(self) -> str:
        """Serialize config to YAML."""
        return yaml.dump(asdict(self), default_flow_style=False)

    @classmethod
    def from_yaml(cls, yaml_str: str) -> "ConfigModel":
        """Deserialize config from YAML, ignoring unknown keys."""
        data = yaml.safe_load(yaml_str) or {}
        if not isinstance(data, dict):
            raise ConfigError("Configuration must be a mapping of settings")

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown config setting %r", key)
        return cls(**{key: value for key, value in data.items() if key in known})

    def get_config_path(self) -> Path:
        """Get the config file path."""
        return Path(self.data_dir) / "config.yaml"


class Config:
    """Configuration manager for quickadd."""

    _instance: Optional[ConfigModel] = None

    @classmethod
    def default_path(cls) -> Path:
        override = os.environ.get(CONFIG_ENV_VAR)
        if override:
            return Path(override).expanduser()
        return ConfigModel().get_config_path()

    @classmethod
    def load(cls, config_path: Optional[Path] = None, strict: bool = False) -> ConfigModel:
        """Load configuration from file, or fall back to defaults.

        Args:
            config_path: File to read; defaults to ``$QUICKADD_CONFIG`` or
                ``~/.quickadd/config.yaml``
            strict: Raise ``ConfigError`` for unreadable files instead of
                logging a warning and using defaults

        Returns:
            The loaded configuration, cached for later ``get`` calls
        """
        if config_path is None:
            config_path = cls.default_path()

        config = ConfigModel()
        if config_path.exists():
            try:
                config = ConfigModel.from_yaml(config_path.read_text())
                logger.debug("Loaded configuration from %s", config_path)
            except (OSError, yaml.YAMLError, ConfigError, TypeError) as e:
                if strict:
                    raise ConfigError(f"Failed to load config from {config_path}: {e}", config_path) from e
                logger.warning("Failed to load config from %s: %s; using defaults", config_path, e)
        else:
            logger.debug("No configuration at %s; using defaults", config_path)

        cls._instance = config
        return config

    @classmethod
    def save(cls, config: ConfigModel, config_path: Optional[Path] = None) -> Path:
        """Save configuration to file."""
        if config_path is None:
            config_path = cls.default_path()

        try:
            config_path.parent.mkdir(parents=True, exist_ok=True)
            config_path.write_text(config.to_yaml())
        except OSError as e:
            raise ConfigError(f"Failed to save config to {config_path}: {e}", config_path) from e
        logger.info("Configuration saved to %s", config_path)
        return config_path

    @classmethod
    def get(cls) -> ConfigModel:
        """Get the current configuration instance."""
        if cls._instance is None:
            cls._instance = cls.load()
        return cls._instance

    @classmethod
    def reload(cls) -> ConfigModel:
        """Reload configuration from file."""
        cls._instance = None
        return cls.load()


def get_config() -> ConfigModel:
    """Get the current configuration."""
    return Config.get()


def load_config(config_path: Optional[Path] = None, strict: bool = False) -> ConfigModel:
    """Load configuration from file."""
    return Config.load(config_path, strict=strict)


def save_config(config: ConfigModel, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""
    return Config.save(config, config_path)
