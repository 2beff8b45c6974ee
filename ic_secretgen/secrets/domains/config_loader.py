"""Configuration loader for ic-secretgen."""
import os
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError
from .models import GeneratorConfig

logger = logging.getLogger(__name__)

API_KEY_ENV = "IC_API_KEY"

# Config file key -> (GeneratorConfig field, expected type)
CONFIG_KEYS = {
    "namespace": ("namespace", str),
    "output_dir": ("output_dir", str),
    "suffix": ("output_suffix", str),
    "parser": ("parser", str),
    "tob64": ("to_base64", bool),
    "apikey": ("api_key", str),
}


def default_config_path() -> Path:
    """Default config location (XDG Base Directory standard)."""
    return Path.home() / ".config" / "ic-secretgen" / "config.yml"


def _get_config_path(explicit_path: Optional[str]) -> Optional[Path]:
    """
    Get config file path.

    Priority order:
    1. Path passed on the command line (must exist)
    2. Default location: ~/.config/ic-secretgen/config.yml (optional)

    Returns:
        Path to the config file, or None if no config file is in use

    Raises:
        ConfigError: If an explicitly requested config file doesn't exist
    """
    if explicit_path:
        config_path = Path(explicit_path).expanduser()
        if not config_path.is_file():
            raise ConfigError(f"Configuration file not found at: {config_path}")
        logger.info(f"Using config from command line: {config_path}")
        return config_path

    default_config = default_config_path()
    if default_config.is_file():
        logger.info(f"Using default config location: {default_config}")
        return default_config

    return None


def load_config(explicit_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and validate configuration from YAML file.

    Args:
        explicit_path: Config file path given by the user, if any

    Returns:
        Dict of GeneratorConfig field names to values; empty if no config file is in use

    Raises:
        ConfigError: If the config file is unreadable, invalid, or has unknown keys or wrong types
    """
    config_path = _get_config_path(explicit_path)
    if config_path is None:
        return {}

    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse YAML config at {config_path}: {e}")
    except OSError as e:
        raise ConfigError(f"Failed to read config file at {config_path}: {e}")

    if raw is None:
        logger.warning(f"Config file at {config_path} is empty")
        return {}

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {config_path} must contain a mapping, got {type(raw).__name__}")

    unknown = sorted(set(raw) - set(CONFIG_KEYS))
    if unknown:
        raise ConfigError(
            f"Unknown keys in config at {config_path}: {', '.join(map(str, unknown))}\n"
            f"Allowed keys: {', '.join(CONFIG_KEYS)}"
        )

    values = {}
    for key, value in raw.items():
        field_name, expected = CONFIG_KEYS[key]
        if not isinstance(value, expected):
            raise ConfigError(
                f"Config key '{key}' in {config_path} must be {expected.__name__}, got {type(value).__name__}"
            )
        values[field_name] = value

    logger.info(f"Configuration loaded successfully from {config_path}")
    return values


def build_config(
    cli_values: Mapping[str, Any],
    file_values: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> GeneratorConfig:
    """
    Merge configuration sources into a GeneratorConfig.

    Precedence: command line, then IC_API_KEY (API key only), then config file, then defaults.
    A command-line value of None means "not given".
    """
    environ = os.environ if environ is None else environ
    merged: Dict[str, Any] = dict(file_values or {})

    env_api_key = environ.get(API_KEY_ENV)
    if env_api_key:
        merged["api_key"] = env_api_key

    for key, value in cli_values.items():
        if value is not None and value != "":
            merged[key] = value

    return GeneratorConfig(**merged)
