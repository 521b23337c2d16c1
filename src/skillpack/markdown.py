"""
Markdown helpers shared by the parser and the linter.
"""

import re
from typing import Any

import yaml

_FENCE_RE = re.compile(r"^\s*(```|~~~)")
_INLINE_CODE_RE = re.compile(r"`[^`]*`")
_LINK_RE = re.compile(r"!?\[[^\]]*\]\(\s*<?([^)\s>]+)>?(?:\s+[\"'][^\"']*[\"'])?\s*\)")


def parse_yaml_frontmatter(content: str) -> tuple[dict[str, Any] | None, str]:
    """Parse YAML front matter from a markdown file.

    Front matter is delimited by --- at the very start and a closing line
    that is exactly ---.

    Args:
        content: The full markdown content.

    Returns:
        Tuple of (front matter dict or None, remaining content).
    """
    text = content.lstrip("\ufeff").replace("\r\n", "\n")

    lines = text.split("\n")
    if lines[0].strip() != "---":
        return None, content

    end_index = None
    for i, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            end_index = i
            break

    if end_index is None:
        return None, content

    frontmatter_text = "\n".join(lines[1:end_index])
    remaining_content = "\n".join(lines[end_index + 1 :]).strip()

    try:
        frontmatter = yaml.safe_load(frontmatter_text)
    except yaml.YAMLError:
        return None, content

    if not isinstance(frontmatter, dict):
        return None, content
    return frontmatter, remaining_content


def extract_links(body: str) -> list[str]:
    """Link and image targets of a Markdown body, skipping code."""
    targets: list[str] = []
    in_fence = False
    for line in body.splitlines():
        if _FENCE_RE.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        targets.extend(_LINK_RE.findall(_INLINE_CODE_RE.sub("", line)))
    return targets
