"""
Skill models for Skillpack.

Defines the data structures for skills: the front matter metadata, the
loaded skill itself and the metadata-only index used for routing.
"""

from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Files in a skill directory that are never listed as resources
_NON_RESOURCE_NAMES = {"SKILL.md", ".DS_Store"}


def _split_words(value: Any) -> Any:
    """Accept either a list or a comma/space separated string."""
    if isinstance(value, str):
        return [item for item in value.replace(",", " ").split() if item]
    return value


class SkillFrontmatter(BaseModel):
    """Front matter parsed from SKILL.md.

    ``name`` and ``description`` are the fields hosts use for trigger
    matching; everything else is optional.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., description="Skill identifier (matches directory name)")
    description: str = Field(default="", description="What the skill does and when to use it")
    version: str | None = Field(default=None, description="Skill version")
    license: str | None = Field(default=None, description="License (e.g., MIT)")
    allowed_tools: list[str] = Field(
        default_factory=list,
        alias="allowed-tools",
        description="Tools the host may use while the skill is active",
    )
    keywords: list[str] = Field(default_factory=list, description="Extra trigger keywords")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Free-form metadata")

    @field_validator("allowed_tools", "keywords", mode="before")
    @classmethod
    def _coerce_word_list(cls, value: Any) -> Any:
        if value is None:
            return []
        return _split_words(value)

    @field_validator("description", mode="before")
    @classmethod
    def _coerce_description(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return " ".join(value.split())
        return value


class Skill(BaseModel):
    """A fully loaded skill: metadata plus the Markdown body."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    metadata: SkillFrontmatter = Field(..., description="Front matter metadata")
    instructions: str = Field(..., description="Body of SKILL.md")
    path: Path | None = Field(default=None, description="Path to the skill directory")
    source: str = Field(default="global", description="global, project or plugin:<name>")
    loaded_at: datetime = Field(default_factory=datetime.now)

    @property
    def name(self) -> str:
        return self.metadata.name

    @property
    def description(self) -> str:
        return self.metadata.description

    @property
    def keywords(self) -> list[str]:
        return self.metadata.keywords

    @property
    def resources(self) -> list[str]:
        """Relative paths of the supporting files bundled with the skill."""
        if self.path is None or not self.path.is_dir():
            return []
        return sorted(
            item.relative_to(self.path).as_posix()
            for item in self.path.rglob("*")
            if item.is_file() and item.name not in _NON_RESOURCE_NAMES
        )

    def read_resource(self, relative_path: str) -> str:
        """Read a bundled resource on demand.

        Raises:
            SkillParseError: If the skill has no directory, the path escapes
                it, or the file cannot be read.
        """
        # Late import: parser imports these models
        from skillpack.skills.parser import SkillParseError

        if self.path is None:
            raise SkillParseError(f"Skill '{self.name}' has no directory")

        root = self.path.resolve()
        target = (root / relative_path).resolve()
        if not target.is_relative_to(root):
            raise SkillParseError(f"Resource escapes skill directory: {relative_path}", root)

        try:
            return target.read_text(encoding="utf-8")
        except OSError as e:
            raise SkillParseError(f"Failed to read resource: {e}", target) from e

    def get_system_prompt_injection(self) -> str:
        """Get the content to inject into the system prompt."""
        return f"""## Skill: {self.metadata.name}

{self.metadata.description}

{self.instructions}
"""

    def to_index_entry(self) -> "SkillIndexEntry":
        return SkillIndexEntry(
            name=self.name,
            version=self.metadata.version or "",
            description=self.description,
            keywords=self.keywords,
            path=str(self.path) if self.path else "",
            source=self.source,
        )


class SkillIndexEntry(BaseModel):
    """Metadata-only view of a skill, loaded without reading the body."""

    name: str = Field(..., description="Skill name")
    version: str = Field(default="", description="Skill version")
    description: str = Field(default="", description="Short description")
    keywords: list[str] = Field(default_factory=list, description="Keywords for discovery")
    path: str = Field(..., description="Path to the skill directory")
    source: str = Field(default="global", description="Where the skill was discovered")
    indexed_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_global(self) -> bool:
        return self.source == "global"


class SkillIndex(BaseModel):
    """The skill index for fast discovery.

    Stored at ~/.skillpack/index.json
    """

    version: str = Field(default="1.0.0", description="Index format version")
    skills: dict[str, SkillIndexEntry] = Field(default_factory=dict)
    updated_at: datetime = Field(default_factory=datetime.now)

    def add_skill(self, entry: SkillIndexEntry) -> None:
        """Add or update a skill in the index."""
        self.skills[entry.name] = entry
        self.updated_at = datetime.now()

    def remove_skill(self, name: str) -> bool:
        """Remove a skill from the index.

        Returns:
            True if the skill was removed, False if not found.
        """
        if name in self.skills:
            del self.skills[name]
            self.updated_at = datetime.now()
            return True
        return False

    def score(self, entry: SkillIndexEntry, query: str) -> int:
        """Lexical relevance of an entry for a query (0 means no match)."""
        query_lower = query.lower().strip()
        if not query_lower:
            return 0
        query_words = set(query_lower.split())
        name_lower = entry.name.lower()
        description_lower = entry.description.lower()
        score = 0

        if name_lower == query_lower:
            score += 100

        if query_lower in name_lower:
            score += 50

        for keyword in (k.lower() for k in entry.keywords):
            if query_lower == keyword:
                score += 30
            elif query_lower in keyword or keyword in query_lower:
                score += 15
            for word in query_words:
                if word in keyword:
                    score += 5

        if query_lower in description_lower:
            score += 10
        for word in query_words:
            if word in description_lower:
                score += 3

        return score

    def search(self, query: str, max_results: int = 5, min_score: int = 1) -> list[SkillIndexEntry]:
        """Search skills by keyword matching.

        Args:
            query: Search query (matched against name, description, keywords)
            max_results: Maximum number of results to return
            min_score: Entries scoring below this are dropped

        Returns:
            Matching skills, best first; ties are ordered by name.
        """
        scored: list[tuple[int, SkillIndexEntry]] = []
        for entry in self.skills.values():
            score = self.score(entry, query)
            if score >= min_score and score > 0:
                scored.append((score, entry))

        scored.sort(key=lambda x: (-x[0], x[1].name))
        return [entry for _, entry in scored[:max_results]]

    def list_all(self) -> list[SkillIndexEntry]:
        """List all skills in the index, sorted by name."""
        return sorted(self.skills.values(), key=lambda e: e.name)
