"""
Skill loader for Skillpack.

Discovers and loads skills from the global root, the project root and
plugin or marketplace roots.
"""

import logging
from pathlib import Path

from skillpack.config import get_config
from skillpack.plugins.manifest import ManifestError, discover_plugin_skills
from skillpack.skills.models import Skill, SkillIndexEntry
from skillpack.skills.parser import SkillParseError, parse_skill_directory
from skillpack.storage.paths import (
    discover_skills_in_directory,
    expand_path,
    find_project_dir,
    get_skills_dir,
)

logger = logging.getLogger(__name__)


class SkillNotFoundError(Exception):
    """Skill not found error."""

    def __init__(self, name: str, searched_paths: list[Path] | None = None):
        self.name = name
        self.searched_paths = searched_paths or []
        paths_str = ", ".join(str(p) for p in self.searched_paths)
        super().__init__(
            f"Skill not found: {name}" + (f" (searched: {paths_str})" if paths_str else "")
        )


def get_global_skills_dir() -> Path:
    """Get the global skills directory.

    Returns:
        skills.local_path from configuration, else ~/.skillpack/skills/
    """
    local_path = get_config().skills.local_path
    if local_path:
        return expand_path(local_path)
    return get_skills_dir()


def get_project_skills_dir(start_path: Path | None = None) -> Path | None:
    """Get the project's skills directory if it exists.

    Args:
        start_path: Starting path to search from (default: cwd).

    Returns:
        Path to .skillpack/skills/ if found, None otherwise.
    """
    project_dir = find_project_dir(start_path)
    if project_dir:
        skills_dir = project_dir / "skills"
        if skills_dir.is_dir():
            return skills_dir
    return None


def get_plugin_paths(plugin_paths: list[str | Path] | None = None) -> list[Path]:
    """Plugin or marketplace roots to scan (default: skills.plugin_paths)."""
    if plugin_paths is None:
        plugin_paths = list(get_config().skills.plugin_paths)
    return [expand_path(p) for p in plugin_paths]


def discover_all_skills(
    include_project: bool = True,
    plugin_paths: list[str | Path] | None = None,
    project_path: Path | None = None,
) -> list[tuple[Path, str]]:
    """Discover all skills in global, project and plugin roots.

    Args:
        include_project: Whether to include project-level skills.
        plugin_paths: Plugin or marketplace roots (default from config).
        project_path: Where to start looking for the project directory.

    Returns:
        List of (skill_path, source) tuples in precedence order.
    """
    skills: list[tuple[Path, str]] = []

    if include_project:
        project_dir = get_project_skills_dir(project_path)
        if project_dir:
            for skill_path in discover_skills_in_directory(project_dir):
                skills.append((skill_path, "project"))

    for skill_path in discover_skills_in_directory(get_global_skills_dir()):
        skills.append((skill_path, "global"))

    for root in get_plugin_paths(plugin_paths):
        try:
            skills.extend(discover_plugin_skills(root))
        except ManifestError as e:
            logger.warning("Skipping plugin root %s: %s", root, e)

    logger.debug("Discovered %d skill directories", len(skills))
    return skills


def load_skill(
    name_or_path: str,
    project_path: Path | None = None,
    plugin_paths: list[str | Path] | None = None,
) -> Skill:
    """Load a skill by name or path.

    Resolution order:
    1. If it's a path (contains / or starts with . or ~), load from path
    2. Project skills directory (.skillpack/skills/)
    3. Global skills directory (~/.skillpack/skills/)
    4. Plugin and marketplace roots

    Raises:
        SkillNotFoundError: If skill not found.
        SkillParseError: If skill exists but cannot be parsed.
    """
    searched_paths: list[Path] = []

    if "/" in name_or_path or name_or_path.startswith(".") or name_or_path.startswith("~"):
        skill_path = Path(name_or_path).expanduser().resolve()
        if skill_path.exists():
            return parse_skill_directory(skill_path, source="path")
        raise SkillNotFoundError(name_or_path, [skill_path])

    name = name_or_path

    project_skills_dir = get_project_skills_dir(project_path)
    if project_skills_dir:
        project_skill_path = project_skills_dir / name
        searched_paths.append(project_skill_path)
        if project_skill_path.is_dir():
            return parse_skill_directory(project_skill_path, source="project")

    global_skill_path = get_global_skills_dir() / name
    searched_paths.append(global_skill_path)
    if global_skill_path.is_dir():
        return parse_skill_directory(global_skill_path, source="global")

    for root in get_plugin_paths(plugin_paths):
        searched_paths.append(root)
        try:
            for skill_path, source in discover_plugin_skills(root):
                if skill_path.name == name:
                    return parse_skill_directory(skill_path, source=source)
        except ManifestError as e:
            logger.warning("Skipping plugin root %s: %s", root, e)

    raise SkillNotFoundError(name, searched_paths)


def load_skill_from_path(skill_path: Path, source: str = "path") -> Skill:
    """Load a skill from a specific directory.

    Raises:
        SkillParseError: If skill cannot be parsed.
    """
    return parse_skill_directory(skill_path, source=source)


def list_installed_skills(
    include_project: bool = True,
    plugin_paths: list[str | Path] | None = None,
    project_path: Path | None = None,
) -> list[SkillIndexEntry]:
    """List all discoverable skills.

    The first occurrence of a name wins, so project skills shadow global
    ones and both shadow plugin skills.

    Returns:
        List of skill index entries.
    """
    entries = []
    seen_names: set[str] = set()

    for skill_path, source in discover_all_skills(include_project, plugin_paths, project_path):
        try:
            skill = parse_skill_directory(skill_path, source=source)
        except SkillParseError as e:
            logger.warning("Skipping invalid skill %s: %s", skill_path, e)
            continue

        if skill.name in seen_names:
            logger.debug("Skill %s from %s is shadowed", skill.name, source)
            continue
        seen_names.add(skill.name)
        entries.append(skill.to_index_entry())

    return entries


def skill_exists(name: str, project_path: Path | None = None) -> bool:
    """Check if a skill exists by name in the project or global root."""
    project_skills_dir = get_project_skills_dir(project_path)
    if project_skills_dir and (project_skills_dir / name).exists():
        return True

    return (get_global_skills_dir() / name).exists()
