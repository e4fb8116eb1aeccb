"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
- Filling the API key from ELEVENLABS_API_KEY (and a .env file)
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from ..credentials import API_KEY_ENV
from . import (
    APIConfig,
    ExportConfig,
    LoggingConfig,
    PlaybackConfig,
    SessionConfig,
    VoiceSettingsConfig,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_NAME = "voicecast.yaml"


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_config = load_yaml_with_inheritance(path.parent / base_name)
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> SessionConfig:
    """Convert raw dict to typed SessionConfig dataclass."""
    root = data.get("voicecast", {}) or {}

    # YAML gives None for empty sections
    def section(key: str) -> dict[str, Any]:
        value = root.get(key, {})
        return value if value is not None else {}

    defaults = SessionConfig()
    return SessionConfig(
        voice_id=root.get("voice_id") or defaults.voice_id,
        model_id=root.get("model_id") or defaults.model_id,
        output_format=root.get("output_format") or defaults.output_format,
        speed=root.get("speed", defaults.speed),
        voice_settings=VoiceSettingsConfig(**section("voice_settings")),
        api=APIConfig(**section("api")),
        playback=PlaybackConfig(**section("playback")),
        export=ExportConfig(**section("export")),
        logging=LoggingConfig(**section("logging")),
    )


def load_env_file(start: Path | None = None) -> bool:
    """Load a .env file from ``start`` (default: cwd) or its parents.

    Returns:
        True if a .env file was loaded
    """
    current = (start or Path.cwd()).resolve()
    for _ in range(5):
        env_file = current / ".env"
        if env_file.exists():
            load_dotenv(env_file)
            logger.debug(f"Loaded .env from {env_file}")
            return True
        if current.parent == current:
            break
        current = current.parent
    return False


def apply_environment(config: SessionConfig) -> SessionConfig:
    """Fill an empty API key from the environment."""
    if not config.api.api_key:
        config.api.api_key = os.environ.get(API_KEY_ENV, "").strip()
    return config


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory searched for voicecast.yaml.
                        Defaults to the current working directory.
        """
        self._config_dir = config_dir if config_dir is not None else Path.cwd()

    def load(self, path: Path) -> SessionConfig:
        """Load configuration from file path.

        Args:
            path: Path to YAML config file

        Returns:
            Parsed SessionConfig
        """
        raw_config = load_yaml_with_inheritance(path)
        return dict_to_config(raw_config)

    def load_default(self) -> SessionConfig:
        """Load voicecast.yaml from the config directory, or defaults."""
        config_path = self._config_dir / DEFAULT_CONFIG_NAME
        if config_path.exists():
            return self.load(config_path)
        logger.debug(f"No {DEFAULT_CONFIG_NAME} in {self._config_dir}, using defaults")
        return SessionConfig()

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, use_env: bool = True) -> SessionConfig:
    """Load voicecast configuration.

    Args:
        path: Path to a YAML config file; voicecast.yaml in cwd if omitted
        use_env: Load .env and read ELEVENLABS_API_KEY for an empty key

    Returns:
        Parsed SessionConfig

    Examples:
        >>> config = load_config()
        >>> config = load_config(path="/path/to/voicecast.yaml")
    """
    loader = YAMLConfigLoader()
    config = loader.load(Path(path)) if path is not None else loader.load_default()

    if use_env:
        load_env_file()
        apply_environment(config)
    return config


__all__ = [
    "DEFAULT_CONFIG_NAME",
    "YAMLConfigLoader",
    "apply_environment",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_env_file",
    "load_yaml_with_inheritance",
]
