"""
Lint entry points.

Detects what kind of tree a path is and runs the matching checks.
"""

import logging
from pathlib import Path

from skillpack.config import LintConfig, get_config
from skillpack.lint.checks import lint_marketplace, lint_plugin, lint_skill, lint_skills
from skillpack.lint.models import LintReport, Severity
from skillpack.plugins.manifest import (
    get_marketplace_manifest_path,
    get_plugin_manifest_path,
)
from skillpack.storage.paths import discover_skills_in_directory, is_skill_directory

logger = logging.getLogger(__name__)


def detect_layout(root: Path) -> str:
    """Classify a path as marketplace, plugin, skill or directory."""
    if get_marketplace_manifest_path(root).exists():
        return "marketplace"
    if get_plugin_manifest_path(root).exists() or (root / "skills").is_dir():
        return "plugin"
    if is_skill_directory(root):
        return "skill"
    return "directory"


def lint_path(root: Path, settings: LintConfig | None = None) -> LintReport:
    """Lint any skill tree: a marketplace, a plugin, one skill or a folder of skills.

    Issue codes in ``settings.ignore`` are dropped from the report.

    Raises:
        FileNotFoundError: If the path does not exist or is not a directory.
    """
    settings = settings or get_config().lint
    root = Path(root).expanduser().resolve()

    if not root.is_dir():
        raise FileNotFoundError(f"Not a directory: {root}")

    layout = detect_layout(root)
    logger.debug("Linting %s as %s", root, layout)

    if layout == "marketplace":
        report = lint_marketplace(root, settings)
    elif layout == "plugin":
        report = lint_plugin(root, settings)
    elif layout == "skill":
        report = LintReport(issues=lint_skill(root, settings), checked_skills=1)
    else:
        report = lint_skills(discover_skills_in_directory(root), settings)

    report.root = str(root)
    return report.filter(settings.ignore)


def validate_skill_directory(skill_dir: Path, settings: LintConfig | None = None) -> list[str]:
    """Validate a skill directory and return any issues as text.

    Warnings are prefixed with ``Warning:``; everything else is an error.

    Returns:
        List of validation issues (empty if valid).
    """
    settings = settings or get_config().lint
    ignored = set(settings.ignore)
    messages = []
    for issue in lint_skill(Path(skill_dir).resolve(), settings):
        if issue.code in ignored:
            continue
        if issue.severity is Severity.WARNING:
            messages.append(f"Warning: {issue.message}")
        else:
            messages.append(issue.message)
    return messages
