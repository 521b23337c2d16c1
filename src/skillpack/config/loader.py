"""
Configuration loader for Skillpack.

Loads and merges configuration from multiple sources:
1. Default values
2. Global config (~/.skillpack/config.yaml)
3. Project config (./.skillpack/config.yaml)
4. Environment variables (SKILLPACK_<SECTION>__<KEY>)
"""

import logging
import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from skillpack.config.merger import deep_merge, set_nested_value
from skillpack.config.schema import Config
from skillpack.storage.paths import find_project_config, get_global_config_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "SKILLPACK_"

# Not configuration keys
_RESERVED_ENV = {"SKILLPACK_HOME"}


class ConfigurationError(Exception):
    """Raised when configuration loading or validation fails."""

    pass


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed configuration dictionary (empty if the file is missing).

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path, encoding="utf-8") as f:
            content = yaml.safe_load(f)
    except FileNotFoundError:
        return {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    except OSError as e:
        raise ConfigurationError(f"Cannot read {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigurationError(f"Configuration in {path} must be a mapping")
    return content


def save_yaml_file(path: Path, config: dict[str, Any]) -> None:
    """
    Save a configuration dictionary to a YAML file.

    Raises:
        ConfigurationError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False, allow_unicode=True)
    except OSError as e:
        raise ConfigurationError(f"Cannot write {path}: {e}") from e


def apply_env_overrides(
    config: dict[str, Any], environ: dict[str, str] | None = None
) -> dict[str, Any]:
    """
    Apply environment variable overrides to configuration.

    A double underscore separates nesting levels, so
    SKILLPACK_LINT__MAX_BODY_LINES=800 sets lint.max_body_lines.

    Args:
        config: Configuration dictionary to modify.
        environ: Environment mapping (default: os.environ).

    Returns:
        Configuration with environment overrides applied.
    """
    environ = os.environ if environ is None else environ

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key in _RESERVED_ENV:
            continue

        parts = [part.lower() for part in key[len(ENV_PREFIX) :].split("__") if part]
        if not parts:
            continue

        config_key = ".".join(parts)
        logger.debug("Config override from %s -> %s", key, config_key)
        config = set_nested_value(config, config_key, _parse_env_value(value))

    return config


def _parse_env_value(value: str) -> Any:
    """Parse an environment value to bool, int, float, list or string."""
    if value.lower() in ("true", "yes", "on"):
        return True
    if value.lower() in ("false", "no", "off"):
        return False

    if re.match(r"^-?\d+$", value):
        return int(value)

    if re.match(r"^-?\d+\.\d+$", value):
        return float(value)

    if "," in value:
        return [item.strip() for item in value.split(",") if item.strip()]

    return value


def load_config(
    project_path: Path | None = None,
    skip_project: bool = False,
    skip_env: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Args:
        project_path: Starting path to search for project config. Defaults to cwd.
        skip_project: Skip loading project configuration.
        skip_env: Skip environment variable overrides.

    Returns:
        Merged and validated Config object.

    Raises:
        ConfigurationError: If configuration is invalid.
    """
    config_dict = Config().model_dump()

    global_path = get_global_config_path()
    if global_path.exists():
        config_dict = deep_merge(config_dict, load_yaml_file(global_path))

    if not skip_project:
        project_config_path = find_project_config(project_path)
        if project_config_path:
            config_dict = deep_merge(config_dict, load_yaml_file(project_config_path))

    if not skip_env:
        config_dict = apply_env_overrides(config_dict)

    try:
        return Config.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e


def get_config_sources(project_path: Path | None = None) -> dict[str, Path | None]:
    """
    Get paths to all configuration sources.

    Returns:
        Dictionary mapping source names to paths (None if not found).
    """
    global_path = get_global_config_path()
    return {
        "global": global_path if global_path.exists() else None,
        "project": find_project_config(project_path),
    }


_cached_config: Config | None = None


def get_config(reload: bool = False) -> Config:
    """
    Get the cached configuration instance.

    Args:
        reload: Force reload configuration from disk.
    """
    global _cached_config

    if _cached_config is None or reload:
        _cached_config = load_config()

    return _cached_config


def clear_config_cache() -> None:
    """Clear the cached configuration."""
    global _cached_config
    _cached_config = None
