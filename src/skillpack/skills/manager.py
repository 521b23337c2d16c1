"""
Skill manager for Skillpack.

Provides the main interface for working with skills.
"""

import logging
import re
import shutil
import tempfile
from pathlib import Path
from typing import Any

import yaml

from skillpack.config import Config, get_config
from skillpack.lint import validate_skill_directory
from skillpack.plugins.manifest import (
    load_marketplace_manifest,
    marketplace_plugin_skills,
)
from skillpack.skills.index import (
    get_skills_for_query,
    load_index,
    rebuild_index,
    remove_from_index,
    search_skills,
    update_index_entry,
)
from skillpack.skills.loader import (
    SkillNotFoundError,
    get_global_skills_dir,
    get_project_skills_dir,
    list_installed_skills,
    load_skill,
    load_skill_from_path,
)
from skillpack.skills.models import Skill, SkillIndex, SkillIndexEntry
from skillpack.skills.parser import SkillParseError, parse_skill_directory
from skillpack.storage.paths import PROJECT_DIR_NAME

logger = logging.getLogger(__name__)

INSTRUCTIONS_PREVIEW_CHARS = 500

SKILL_MD_TEMPLATE = """---
{frontmatter}---

# {title}

{description}

## When to Use

- Use case 1
- Use case 2

## Instructions

1. First, analyze the input
2. Then, apply the skill
3. Finally, deliver results

## Output Format

Return results as:
- A brief summary
- Detailed findings
- Recommendations
"""


class SkillManager:
    """Main interface for working with skills.

    Provides methods to:
    - Load skills by name or path
    - Route queries to skills (metadata first, bodies on demand)
    - Create skills from a template
    - Install skills from a directory or a marketplace plugin
    - Manage the skill index
    """

    def __init__(self, project_path: Path | None = None, config: Config | None = None):
        """Initialize the skill manager.

        Args:
            project_path: Optional project path for context.
            config: Configuration (default: the loaded global configuration).
        """
        self.project_path = project_path
        self.config = config or get_config()
        self._index: SkillIndex | None = None

    @property
    def plugin_paths(self) -> list[str]:
        return list(self.config.skills.plugin_paths)

    @property
    def index(self) -> SkillIndex:
        """The skill index (lazy loaded; rebuilt when empty)."""
        if self._index is None:
            self._index = load_index()
            if not self._index.skills and self.config.skills.index.enable:
                self._index = self.reindex()
        return self._index

    def refresh_index(self) -> None:
        """Refresh the index from disk."""
        self._index = load_index()

    def get_skill(self, name_or_path: str) -> Skill:
        """Load a skill by name or path.

        Raises:
            SkillNotFoundError: If skill not found.
            SkillParseError: If skill cannot be parsed.
        """
        return load_skill(name_or_path, self.project_path, self.plugin_paths)

    def search(self, query: str, max_results: int = 5) -> list[SkillIndexEntry]:
        """Search for skills by keyword."""
        return search_skills(
            query, max_results, index=self.index, min_score=self.config.router.min_score
        )

    # -------------------------------------------------------------------------
    # Progressive disclosure
    # -------------------------------------------------------------------------

    def get_catalog(self) -> list[SkillIndexEntry]:
        """Metadata of every skill, without reading any body."""
        return self.index.list_all()

    def get_catalog_prompt(self) -> str:
        """Startup context listing each skill's name and description."""
        entries = self.get_catalog()
        if not entries:
            return ""
        lines = ["# Available Skills", ""]
        lines.extend(f"- **{entry.name}**: {entry.description}" for entry in entries)
        return "\n".join(lines) + "\n"

    def route(self, query: str, max_skills: int | None = None) -> list[SkillIndexEntry]:
        """Entries of the skills relevant to a query."""
        return get_skills_for_query(
            query,
            max_skills or self.config.skills.index.max_skills_per_query,
            index=self.index,
            router=self.config.router,
        )

    def get_skills_for_query(self, query: str, max_skills: int | None = None) -> list[Skill]:
        """Load the full skills relevant to a query.

        Entries whose skill no longer parses are skipped.
        """
        skills = []
        for entry in self.route(query, max_skills):
            try:
                skills.append(load_skill_from_path(Path(entry.path), source=entry.source))
            except SkillParseError as e:
                logger.warning("Skipping skill %s: %s", entry.name, e)
        return skills

    def activate(self, name: str) -> str:
        """System prompt injection for one skill.

        Raises:
            SkillNotFoundError: If skill not found.
        """
        return self.get_skill(name).get_system_prompt_injection()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def list_skills(self, include_project: bool = True) -> list[SkillIndexEntry]:
        """List all discoverable skills."""
        return list_installed_skills(include_project, self.plugin_paths, self.project_path)

    def _validate_name(self, name: str) -> None:
        lint = self.config.lint
        if (
            not name
            or len(name) > lint.max_name_length
            or not re.fullmatch(lint.name_pattern, name)
        ):
            raise ValueError(f"Invalid skill name: {name}")

    def create_skill(
        self,
        name: str,
        description: str = "A new skill",
        location: str = "global",
    ) -> Path:
        """Create a new skill from template.

        Args:
            name: Skill name (used as directory name).
            description: Short description.
            location: Where to create ("global" or "project").

        Returns:
            Path to the created skill directory.

        Raises:
            ValueError: If the name is invalid, the skill already exists or
                the location is unknown.
        """
        self._validate_name(name)

        if location == "global":
            skills_dir = get_global_skills_dir()
        elif location == "project":
            skills_dir = get_project_skills_dir(self.project_path)
            if skills_dir is None:
                base = self.project_path or Path.cwd()
                skills_dir = base / PROJECT_DIR_NAME / "skills"
        else:
            raise ValueError(f"Invalid location: {location} (use 'global' or 'project')")

        skill_path = skills_dir / name
        if skill_path.exists():
            raise ValueError(f"Skill already exists: {skill_path}")

        skill_path.mkdir(parents=True)

        title = name.replace("-", " ").title()
        (skill_path / "SKILL.md").write_text(
            SKILL_MD_TEMPLATE.format(
                frontmatter=yaml.safe_dump(
                    {"name": name, "description": description},
                    sort_keys=False,
                    allow_unicode=True,
                    width=1000,
                ),
                description=description,
                title=title,
            ),
            encoding="utf-8",
        )

        try:
            update_index_entry(skill_path, source=location)
        except SkillParseError as e:
            logger.warning("Created skill %s but could not index it: %s", name, e)
        self._index = None

        return skill_path

    def install_skill(self, source: str, force: bool = False) -> Path:
        """Install a skill from a local directory into the global root.

        Raises:
            NotImplementedError: For remote sources.
            ValueError: If the source is missing or the skill already exists.
            SkillParseError: If the source is not a valid skill.
        """
        if source.startswith("github:") or source.startswith("http"):
            raise NotImplementedError(f"Remote skill installation not yet implemented: {source}")

        source_path = Path(source).expanduser().resolve()

        if not source_path.exists():
            raise ValueError(f"Source path does not exist: {source_path}")

        if not source_path.is_dir():
            raise ValueError(f"Source is not a directory: {source_path}")

        skill = self._check_installable(source_path, force)
        return self._copy_into_global(source_path, skill.name)

    def _check_installable(self, source_path: Path, force: bool) -> Skill:
        """Validate a skill directory and its destination without touching disk."""
        issues = validate_skill_directory(source_path, self.config.lint)
        errors = [i for i in issues if not i.startswith("Warning:")]
        if errors:
            raise SkillParseError(f"Invalid skill: {', '.join(errors)}", source_path)

        skill = parse_skill_directory(source_path)
        if (get_global_skills_dir() / skill.name).exists() and not force:
            raise ValueError(f"Skill already exists: {skill.name}. Use --force to overwrite.")
        return skill

    def _copy_into_global(self, source_path: Path, name: str) -> Path:
        """Copy a checked skill into the global root.

        The copy is staged in a sibling directory and swapped in, so an
        existing install is only replaced once the new one is complete.
        Installing a global skill onto itself leaves it in place.
        """
        dest_path = get_global_skills_dir() / name

        if dest_path.exists() and dest_path.resolve() == source_path.resolve():
            logger.info("Skill %s is already installed at %s", name, dest_path)
        else:
            dest_path.parent.mkdir(parents=True, exist_ok=True)
            staging = Path(tempfile.mkdtemp(prefix=f".{name}-", dir=dest_path.parent))
            try:
                shutil.copytree(source_path, staging, dirs_exist_ok=True)
                if dest_path.exists():
                    shutil.rmtree(dest_path)
                staging.rename(dest_path)
            finally:
                if staging.exists():
                    shutil.rmtree(staging, ignore_errors=True)
            logger.info("Installed skill %s to %s", name, dest_path)

        update_index_entry(dest_path, source="global")
        self._index = None

        return dest_path

    def install_plugin(
        self, marketplace_root: Path, plugin_name: str, force: bool = False
    ) -> list[Path]:
        """Install every skill of one marketplace plugin into the global root.

        Every skill is validated and checked for conflicts before the first
        one is copied; an invalid plugin installs nothing.

        Returns:
            Paths of the installed skills.

        Raises:
            ValueError: If the marketplace or plugin is unknown, or a skill
                conflicts with an installed one or another skill of the plugin.
            ManifestError: If a manifest is invalid.
            SkillParseError: If any skill of the plugin is invalid.
        """
        marketplace_root = Path(marketplace_root).expanduser().resolve()
        manifest = load_marketplace_manifest(marketplace_root)
        if manifest is None:
            raise ValueError(f"No marketplace manifest in {marketplace_root}")

        entry = manifest.get_plugin(plugin_name)
        if entry is None:
            raise ValueError(f"Plugin not found in marketplace '{manifest.name}': {plugin_name}")
        if not entry.is_local:
            raise NotImplementedError(f"Remote plugin source not supported: {plugin_name}")

        skill_dirs = marketplace_plugin_skills(marketplace_root, manifest, entry)
        skills = [self._check_installable(skill_dir, force) for skill_dir in skill_dirs]

        names = [skill.name for skill in skills]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"Plugin '{plugin_name}' ships duplicate skills: {', '.join(duplicates)}")

        return [
            self._copy_into_global(skill_dir, skill.name)
            for skill_dir, skill in zip(skill_dirs, skills)
        ]

    def remove_skill(self, name: str, confirm: bool = True) -> bool:
        """Remove an installed skill.

        The copy that ``load_skill`` resolves is the one removed: project
        before global. A copy the removed one shadowed takes its place in
        the index.

        Args:
            name: Skill name.
            confirm: If True, the skill must exist.

        Returns:
            True if removed, False if not found.

        Raises:
            SkillNotFoundError: If confirm=True and skill not found.
        """
        candidates = []
        project_dir = get_project_skills_dir(self.project_path)
        if project_dir:
            candidates.append(project_dir / name)
        candidates.append(get_global_skills_dir() / name)

        for path in candidates:
            if path.exists():
                shutil.rmtree(path)
                self._reindex_name(name)
                return True

        if confirm:
            raise SkillNotFoundError(name, candidates)

        return False

    def _reindex_name(self, name: str) -> None:
        try:
            remaining = self.get_skill(name)
        except (SkillNotFoundError, SkillParseError):
            remove_from_index(name)
        else:
            update_index_entry(remaining.path, source=remaining.source)
        self._index = None

    def validate_skill(self, path: Path) -> list[str]:
        """Validate a skill directory.

        Returns:
            List of validation issues (empty if valid).
        """
        return validate_skill_directory(path, self.config.lint)

    def reindex(self, include_project: bool | None = None) -> SkillIndex:
        """Rebuild the skill index."""
        if include_project is None:
            include_project = self.config.skills.include_project
        self._index = rebuild_index(include_project, self.plugin_paths, self.project_path)
        return self._index

    def get_skill_info(self, name: str) -> dict[str, Any]:
        """Get detailed information about a skill.

        Raises:
            SkillNotFoundError: If skill not found.
        """
        skill = self.get_skill(name)
        instructions = skill.instructions
        if len(instructions) > INSTRUCTIONS_PREVIEW_CHARS:
            instructions = instructions[:INSTRUCTIONS_PREVIEW_CHARS] + "..."

        return {
            "name": skill.name,
            "version": skill.metadata.version,
            "description": skill.description,
            "license": skill.metadata.license,
            "keywords": skill.keywords,
            "allowed_tools": skill.metadata.allowed_tools,
            "source": skill.source,
            "path": str(skill.path) if skill.path else None,
            "resources": skill.resources,
            "instructions_preview": instructions,
        }


_manager: SkillManager | None = None


def get_skill_manager(project_path: Path | None = None) -> SkillManager:
    """Get the skill manager singleton."""
    global _manager
    if _manager is None or (project_path and _manager.project_path != project_path):
        _manager = SkillManager(project_path)
    return _manager


def reset_skill_manager() -> None:
    """Drop the singleton so the next call picks up fresh configuration."""
    global _manager
    _manager = None
