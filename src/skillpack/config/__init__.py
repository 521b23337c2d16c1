"""Configuration system for Skillpack."""

from skillpack.config.loader import (
    ConfigurationError,
    apply_env_overrides,
    clear_config_cache,
    get_config,
    get_config_sources,
    load_config,
    load_yaml_file,
    save_yaml_file,
)
from skillpack.config.merger import (
    deep_merge,
    get_nested_value,
    merge_configs,
    set_nested_value,
)
from skillpack.config.schema import (
    Config,
    GeneralConfig,
    LintConfig,
    RouterConfig,
    SkillIndexConfig,
    SkillsConfig,
)

__all__ = [
    "Config",
    "ConfigurationError",
    "GeneralConfig",
    "LintConfig",
    "RouterConfig",
    "SkillIndexConfig",
    "SkillsConfig",
    "apply_env_overrides",
    "clear_config_cache",
    "deep_merge",
    "get_config",
    "get_config_sources",
    "get_nested_value",
    "load_config",
    "load_yaml_file",
    "merge_configs",
    "save_yaml_file",
    "set_nested_value",
]
