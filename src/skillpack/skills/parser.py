"""
Skill parser for Skillpack.

Parses SKILL.md files (YAML front matter plus Markdown body) into skill models.
"""

from pathlib import Path

from pydantic import ValidationError

from skillpack.markdown import parse_yaml_frontmatter
from skillpack.skills.models import Skill, SkillFrontmatter
from skillpack.storage.paths import SKILL_FILE


class SkillParseError(Exception):
    """Error parsing a skill."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (at {path})" if path else ""))


class SkillValidationError(SkillParseError):
    """Error validating skill structure or content."""

    pass


def parse_skill_md(content: str, path: Path | None = None) -> tuple[SkillFrontmatter | None, str]:
    """Parse a SKILL.md file.

    Args:
        content: The SKILL.md file content.
        path: Optional path for error messages.

    Returns:
        Tuple of (front matter model or None, instructions content).

    Raises:
        SkillValidationError: If the front matter has no name.
        SkillParseError: If the front matter does not fit the schema.
    """
    frontmatter_dict, instructions = parse_yaml_frontmatter(content)

    if frontmatter_dict is None:
        return None, content.strip()

    if not frontmatter_dict.get("name"):
        raise SkillValidationError("SKILL.md frontmatter missing required 'name' field", path)

    try:
        frontmatter = SkillFrontmatter.model_validate(frontmatter_dict)
    except ValidationError as e:
        raise SkillParseError(f"Invalid SKILL.md frontmatter: {e}", path) from e

    return frontmatter, instructions


def read_skill_file(skill_dir: Path) -> str:
    """Read the SKILL.md of a skill directory.

    Raises:
        SkillParseError: If the directory or file is missing or unreadable.
    """
    if not skill_dir.exists():
        raise SkillParseError(f"Skill directory does not exist: {skill_dir}")

    if not skill_dir.is_dir():
        raise SkillParseError(f"Not a directory: {skill_dir}")

    skill_md_path = skill_dir / SKILL_FILE
    if not skill_md_path.exists():
        raise SkillParseError(f"Missing required file: {SKILL_FILE}", skill_dir)

    try:
        return skill_md_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise SkillParseError(f"Failed to read {SKILL_FILE}: {e}", skill_md_path) from e


def parse_skill_directory(skill_dir: Path, source: str = "global") -> Skill:
    """Parse a skill from a directory containing SKILL.md.

    Args:
        skill_dir: Path to the skill directory.
        source: Where the skill was found (global, project, plugin:<name>).

    Returns:
        Fully parsed Skill model.

    Raises:
        SkillParseError: If SKILL.md is missing or invalid.
        SkillValidationError: If the front matter is missing or its name
            does not match the directory.
    """
    skill_dir = Path(skill_dir).resolve()
    content = read_skill_file(skill_dir)
    skill_md_path = skill_dir / SKILL_FILE

    frontmatter, instructions = parse_skill_md(content, skill_md_path)

    if frontmatter is None:
        raise SkillValidationError("SKILL.md has no frontmatter", skill_md_path)

    if frontmatter.name != skill_dir.name:
        raise SkillValidationError(
            f"Name mismatch: directory is '{skill_dir.name}', SKILL.md has '{frontmatter.name}'",
            skill_dir,
        )

    return Skill(
        metadata=frontmatter,
        instructions=instructions,
        path=skill_dir,
        source=source,
    )
