"""
Configuration merger for Skillpack.

Deep merge with list operations (+/- key prefixes).
"""

from typing import Any


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Deep merge two dictionaries.

    Merge rules:
    - Scalars: override replaces base
    - Dicts: recursive merge
    - Lists under a plain key: override replaces base
    - Lists under a '+key': appended to base, skipping items already present
    - Lists under a '-key': removed from base
    - None: the key is dropped from the result

    Examples:
        >>> deep_merge({"lint": {"ignore": ["SK010"]}}, {"lint": {"+ignore": ["SK011"]}})
        {'lint': {'ignore': ['SK010', 'SK011']}}
    """
    result = base.copy()

    for key, value in override.items():
        if key.startswith("+") and isinstance(value, list):
            actual_key = key[1:]
            existing = result.get(actual_key)
            if isinstance(existing, list):
                result[actual_key] = existing + [item for item in value if item not in existing]
            else:
                result[actual_key] = list(value)

        elif key.startswith("-") and isinstance(value, list):
            actual_key = key[1:]
            existing = result.get(actual_key)
            if isinstance(existing, list):
                result[actual_key] = [item for item in existing if item not in value]

        elif value is None:
            result.pop(key, None)

        elif isinstance(value, dict) and isinstance(result.get(key), dict):
            result[key] = deep_merge(result[key], value)

        else:
            result[key] = value

    return result


def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Merge configuration dictionaries in order; later ones win."""
    result: dict[str, Any] = {}
    for config in configs:
        if config:
            result = deep_merge(result, config)
    return result


def get_nested_value(config: dict[str, Any], key_path: str) -> Any:
    """
    Get a nested value by dotted path (e.g. "router.min_score").

    Returns:
        The value, or None if any segment is missing.
    """
    current: Any = config
    for key in key_path.split("."):
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return None
    return current


def set_nested_value(config: dict[str, Any], key_path: str, value: Any) -> dict[str, Any]:
    """
    Set a nested value by dotted path, creating intermediate dicts.

    Returns:
        The modified configuration dictionary.
    """
    keys = key_path.split(".")
    current = config

    for key in keys[:-1]:
        if not isinstance(current.get(key), dict):
            current[key] = {}
        current = current[key]

    current[keys[-1]] = value
    return config
