"""
Skillpack content lint.

Checks that skills carry usable front matter, that manifests are valid and
that every path they reference exists.

Usage:
    from skillpack.lint import lint_path

    report = lint_path(Path("./my-marketplace"))
    for issue in report.errors:
        print(issue.format())
"""

from skillpack.lint.checks import (
    lint_marketplace,
    lint_plugin,
    lint_skill,
    lint_skills,
)
from skillpack.lint.models import LintIssue, LintReport, Severity
from skillpack.lint.runner import detect_layout, lint_path, validate_skill_directory
from skillpack.markdown import extract_links

__all__ = [
    "LintIssue",
    "LintReport",
    "Severity",
    "detect_layout",
    "extract_links",
    "lint_marketplace",
    "lint_path",
    "lint_plugin",
    "lint_skill",
    "lint_skills",
    "validate_skill_directory",
]
