"""Storage utilities for Skillpack."""

from skillpack.storage.paths import (
    PROJECT_DIR_NAME,
    SKILL_FILE,
    discover_skills_in_directory,
    ensure_directory,
    expand_path,
    find_project_config,
    find_project_dir,
    get_global_config_path,
    get_index_path,
    get_skillpack_home,
    get_skills_dir,
    is_skill_directory,
)

__all__ = [
    "PROJECT_DIR_NAME",
    "SKILL_FILE",
    "discover_skills_in_directory",
    "ensure_directory",
    "expand_path",
    "find_project_config",
    "find_project_dir",
    "get_global_config_path",
    "get_index_path",
    "get_skillpack_home",
    "get_skills_dir",
    "is_skill_directory",
]
