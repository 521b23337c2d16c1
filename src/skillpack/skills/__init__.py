"""
Skillpack Skills System.

A skill is a directory holding a SKILL.md: YAML front matter with a
``name`` and a ``description`` (what hosts match requests against),
followed by Markdown instructions and optional bundled reference files.

Skills are disclosed progressively:
1. the index holds only metadata and is what queries are routed against
2. the SKILL.md body is read when a skill is activated
3. bundled resources are read one at a time on demand

Usage:
    from skillpack.skills import get_skill_manager

    manager = get_skill_manager()

    # Startup context: names and descriptions only
    prompt = manager.get_catalog_prompt()

    # Route a request to the relevant skills and load their bodies
    skills = manager.get_skills_for_query("design a REST API for orders")
"""

# Models
from skillpack.skills.models import (
    Skill,
    SkillFrontmatter,
    SkillIndex,
    SkillIndexEntry,
)

# Parser
from skillpack.skills.parser import (
    SkillParseError,
    SkillValidationError,
    parse_skill_directory,
    parse_skill_md,
    parse_yaml_frontmatter,
)

# Loader
from skillpack.skills.loader import (
    SkillNotFoundError,
    discover_all_skills,
    get_global_skills_dir,
    get_project_skills_dir,
    list_installed_skills,
    load_skill,
    load_skill_from_path,
    skill_exists,
)

# Index
from skillpack.skills.index import (
    STOPWORDS,
    get_index_path,
    get_skills_for_query,
    load_index,
    rebuild_index,
    remove_from_index,
    save_index,
    search_skills,
    significant_terms,
    update_index_entry,
)

# Manager
from skillpack.skills.manager import (
    SkillManager,
    get_skill_manager,
    reset_skill_manager,
)

__all__ = [
    # Models
    "Skill",
    "SkillFrontmatter",
    "SkillIndex",
    "SkillIndexEntry",
    # Parser
    "SkillParseError",
    "SkillValidationError",
    "parse_skill_directory",
    "parse_skill_md",
    "parse_yaml_frontmatter",
    # Loader
    "SkillNotFoundError",
    "discover_all_skills",
    "get_global_skills_dir",
    "get_project_skills_dir",
    "list_installed_skills",
    "load_skill",
    "load_skill_from_path",
    "skill_exists",
    # Index
    "STOPWORDS",
    "get_index_path",
    "get_skills_for_query",
    "load_index",
    "rebuild_index",
    "remove_from_index",
    "save_index",
    "search_skills",
    "significant_terms",
    "update_index_entry",
    # Manager
    "SkillManager",
    "get_skill_manager",
    "reset_skill_manager",
]
