"""
Path utilities for Skillpack.

Provides consistent path resolution for configuration, skills and the index.
"""

import os
from pathlib import Path

PROJECT_DIR_NAME = ".skillpack"
SKILL_FILE = "SKILL.md"


def get_skillpack_home() -> Path:
    """
    Get the Skillpack home directory.

    Resolution order:
    1. SKILLPACK_HOME environment variable
    2. Default: ~/.skillpack

    Returns:
        Path to the Skillpack home directory.
    """
    env_home = os.environ.get("SKILLPACK_HOME")
    if env_home:
        return Path(env_home).expanduser().resolve()
    return Path.home() / PROJECT_DIR_NAME


def get_global_config_path() -> Path:
    """
    Get the path to the global configuration file.

    Returns:
        Path to ~/.skillpack/config.yaml
    """
    return get_skillpack_home() / "config.yaml"


def get_skills_dir() -> Path:
    """
    Get the global skills directory.

    Returns:
        Path to ~/.skillpack/skills/
    """
    return get_skillpack_home() / "skills"


def get_index_path() -> Path:
    """
    Get the path to the skill index file.

    Returns:
        Path to ~/.skillpack/index.json
    """
    return get_skillpack_home() / "index.json"


def find_project_dir(start_path: Path | None = None) -> Path | None:
    """
    Find the project's .skillpack directory by traversing up the tree.

    Args:
        start_path: Starting directory to search from. Defaults to cwd.

    Returns:
        Path to the .skillpack directory if found, None otherwise.
    """
    if start_path is None:
        start_path = Path.cwd()
    else:
        start_path = Path(start_path).resolve()

    home = get_skillpack_home().resolve()
    current = start_path
    while True:
        candidate = current / PROJECT_DIR_NAME
        # The global home is not a project directory
        if candidate.is_dir() and candidate.resolve() != home:
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def find_project_config(start_path: Path | None = None) -> Path | None:
    """
    Find the project configuration file.

    Args:
        start_path: Starting directory to search from. Defaults to cwd.

    Returns:
        Path to .skillpack/config.yaml if found, None otherwise.
    """
    project_dir = find_project_dir(start_path)
    if project_dir:
        config_path = project_dir / "config.yaml"
        if config_path.exists():
            return config_path
    return None


def expand_path(path: str | Path) -> Path:
    """
    Expand a path string, handling ~ and environment variables.

    Args:
        path: Path string or Path object.

    Returns:
        Expanded and resolved Path.
    """
    if isinstance(path, str):
        path = os.path.expandvars(path)
        path = os.path.expanduser(path)
    return Path(path).resolve()


def ensure_directory(path: Path, mode: int = 0o755) -> Path:
    """
    Ensure a directory exists, creating it if necessary.

    Args:
        path: Directory path.
        mode: Permission mode for created directories.

    Returns:
        The path (for chaining).
    """
    path.mkdir(parents=True, exist_ok=True, mode=mode)
    return path


def is_skill_directory(path: Path) -> bool:
    """Whether a path is a directory holding a SKILL.md."""
    return path.is_dir() and (path / SKILL_FILE).is_file()


def discover_skills_in_directory(directory: Path) -> list[Path]:
    """
    Discover the skill directories directly below a directory.

    Args:
        directory: Directory to search.

    Returns:
        Paths to skill directories, sorted by name.
    """
    if not directory.exists() or not directory.is_dir():
        return []

    return sorted(
        (item for item in directory.iterdir() if is_skill_directory(item)),
        key=lambda p: p.name,
    )
