"""
Skill index for Skillpack.

Keeps the metadata of every discoverable skill in one JSON file so queries
can be routed to skills without reading any SKILL.md body.
"""

import json
import logging
import re
from pathlib import Path

from pydantic import ValidationError

from skillpack.config import RouterConfig, get_config
from skillpack.skills.loader import list_installed_skills
from skillpack.skills.models import SkillIndex, SkillIndexEntry
from skillpack.skills.parser import parse_skill_directory
from skillpack.storage import paths

logger = logging.getLogger(__name__)

STOPWORDS = frozenset(
    {
        "a", "an", "the", "is", "are", "was", "were", "be", "been", "have", "has",
        "had", "do", "does", "did", "will", "would", "could", "should", "may",
        "might", "must", "shall", "can", "to", "of", "in", "for", "on", "with",
        "at", "by", "from", "up", "about", "into", "over", "after", "beneath",
        "under", "above", "i", "you", "he", "she", "it", "we", "they", "me",
        "him", "her", "us", "them", "my", "your", "his", "its", "our", "their",
        "this", "that", "these", "those", "what", "which", "who", "whom", "whose",
        "where", "when", "why", "how", "and", "but", "or", "nor", "so", "yet",
        "both", "either", "neither", "not", "only", "just", "also", "please",
        "help", "some", "any", "all", "need", "want", "make", "get", "let",
    }
)  # fmt: skip

_WORD_RE = re.compile(r"[a-z0-9][a-z0-9+#.-]*")


def get_index_path() -> Path:
    """Get the path to the skill index file.

    Returns:
        Path to ~/.skillpack/index.json
    """
    return paths.get_index_path()


def load_index() -> SkillIndex:
    """Load the skill index from disk.

    Returns:
        SkillIndex (empty if the file doesn't exist or is invalid).
    """
    index_path = get_index_path()

    if not index_path.exists():
        return SkillIndex()

    try:
        data = json.loads(index_path.read_text(encoding="utf-8"))
        return SkillIndex.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Ignoring unreadable skill index %s: %s", index_path, e)
        return SkillIndex()


def save_index(index: SkillIndex) -> None:
    """Save the skill index to disk."""
    index_path = get_index_path()
    index_path.parent.mkdir(parents=True, exist_ok=True)
    index_path.write_text(
        json.dumps(index.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )


def rebuild_index(
    include_project: bool = True,
    plugin_paths: list[str | Path] | None = None,
    project_path: Path | None = None,
) -> SkillIndex:
    """Rebuild the skill index from scratch and save it.

    Args:
        include_project: Whether to include project-level skills.
        plugin_paths: Plugin or marketplace roots (default from config).
        project_path: Where to start looking for the project directory.

    Returns:
        The rebuilt index.
    """
    index = SkillIndex()
    for entry in list_installed_skills(include_project, plugin_paths, project_path):
        index.add_skill(entry)

    save_index(index)
    logger.debug("Indexed %d skills into %s", len(index.skills), get_index_path())
    return index


def update_index_entry(skill_path: Path, source: str = "global") -> SkillIndex:
    """Update or add a single skill to the index.

    Raises:
        SkillParseError: If the skill cannot be parsed.
    """
    index = load_index()
    skill = parse_skill_directory(skill_path, source=source)
    index.add_skill(skill.to_index_entry())
    save_index(index)
    return index


def remove_from_index(name: str) -> bool:
    """Remove a skill from the index.

    Returns:
        True if removed, False if not found.
    """
    index = load_index()

    if index.remove_skill(name):
        save_index(index)
        return True

    return False


def search_skills(
    query: str,
    max_results: int = 5,
    index: SkillIndex | None = None,
    min_score: int = 1,
) -> list[SkillIndexEntry]:
    """Search for skills by keyword."""
    if index is None:
        index = load_index()
    return index.search(query, max_results, min_score=min_score)


def significant_terms(query: str, router: RouterConfig | None = None) -> list[str]:
    """Words of a query worth searching on their own, in query order."""
    router = router or RouterConfig()
    stopwords = STOPWORDS | {w.lower() for w in router.extra_stopwords}

    terms: list[str] = []
    for word in _WORD_RE.findall(query.lower()):
        word = word.strip(".-")
        if len(word) > 2 and word not in stopwords and word not in terms:
            terms.append(word)
    return terms


def get_skills_for_query(
    query: str,
    max_skills: int | None = None,
    index: SkillIndex | None = None,
    router: RouterConfig | None = None,
) -> list[SkillIndexEntry]:
    """Route a user query to the most relevant skills.

    The full query is searched first; each significant word is then
    searched on its own so long prompts still hit short keywords.

    Args:
        query: User's query/prompt.
        max_skills: Maximum number of skills (default from config).
        index: Index to search (default: the saved index).
        router: Router settings (default from config).

    Returns:
        Relevant skill entries, best first, without duplicates.
    """
    config = get_config()
    router = router or config.router
    if max_skills is None:
        max_skills = config.skills.index.max_skills_per_query
    if index is None:
        index = load_index()

    results = search_skills(query, max_skills * 2, index=index, min_score=router.min_score)

    for word in significant_terms(query, router)[: router.max_terms]:
        results.extend(search_skills(word, max_skills, index=index, min_score=router.min_score))

    seen: set[str] = set()
    unique_results = []
    for entry in results:
        if entry.name not in seen:
            seen.add(entry.name)
            unique_results.append(entry)

    return unique_results[:max_skills]
