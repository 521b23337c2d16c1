"""
Content checks for skills, plugins and marketplaces.

Every check returns LintIssue objects instead of raising, so one run can
report everything wrong with a tree at once.
"""

import re
from collections import Counter
from pathlib import Path
from typing import Any
from urllib.parse import unquote

from skillpack.config import LintConfig
from skillpack.lint.models import LintIssue, LintReport, Severity
from skillpack.markdown import extract_links, parse_yaml_frontmatter
from skillpack.plugins.manifest import (
    ManifestError,
    expand_skill_paths,
    get_marketplace_manifest_path,
    get_plugin_manifest_path,
    load_marketplace_manifest,
    load_plugin_manifest,
    resolve_plugin_root,
)
from skillpack.plugins.models import DEFAULT_SKILLS_PATH
from skillpack.storage.paths import SKILL_FILE

_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:", "data:", "#")

TRIGGER_DESCRIPTION_MIN = 20

# Optional front matter fields and the shapes SkillFrontmatter accepts
_STRING_FIELDS = ("version", "license")
_WORD_LIST_FIELDS = ("keywords", "allowed-tools", "allowed_tools")


def _issue(
    code: str, message: str, path: Path | None, severity: Severity = Severity.ERROR
) -> LintIssue:
    return LintIssue(
        code=code, severity=severity, message=message, path=str(path) if path else None
    )


def check_links(skill_dir: Path, body: str, skill_md: Path) -> list[LintIssue]:
    """SK008: relative link targets that do not exist."""
    issues = []
    for target in extract_links(body):
        if target.lower().startswith(_EXTERNAL_PREFIXES) or "://" in target:
            continue
        relative = unquote(target.split("#", 1)[0].split("?", 1)[0])
        if not relative:
            continue
        if not (skill_dir / relative).exists():
            issues.append(_issue("SK008", f"Broken link: {target}", skill_md))
    return issues


def check_field_types(frontmatter: dict[str, Any], skill_md: Path) -> list[LintIssue]:
    """SK001: optional front matter fields whose type the loader rejects."""
    issues = []
    for field in _STRING_FIELDS:
        value = frontmatter.get(field)
        if value is not None and not isinstance(value, str):
            issues.append(
                _issue("SK001", f"Frontmatter '{field}' must be a string", skill_md)
            )
    for field in _WORD_LIST_FIELDS:
        value = frontmatter.get(field)
        if value is None or isinstance(value, str):
            continue
        if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
            issues.append(
                _issue(
                    "SK001",
                    f"Frontmatter '{field}' must be a list of strings or a comma separated string",
                    skill_md,
                )
            )
    if "metadata" in frontmatter and not isinstance(frontmatter["metadata"], dict):
        issues.append(_issue("SK001", "Frontmatter 'metadata' must be a mapping", skill_md))
    return issues


def lint_skill_with_name(skill_dir: Path, settings: LintConfig) -> tuple[list[LintIssue], str | None]:
    """Lint one skill directory.

    Returns:
        Tuple of (issues, declared skill name or None).
    """
    skill_dir = Path(skill_dir)
    skill_md = skill_dir / SKILL_FILE
    issues: list[LintIssue] = []

    if not skill_dir.is_dir():
        return [_issue("SK001", f"Directory does not exist: {skill_dir}", skill_dir)], None

    if not skill_md.is_file():
        return [_issue("SK001", f"Missing required file: {SKILL_FILE}", skill_dir)], None

    try:
        content = skill_md.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return [_issue("SK001", f"Cannot read {SKILL_FILE}: {e}", skill_md)], None

    frontmatter, body = parse_yaml_frontmatter(content)
    if frontmatter is None:
        return [_issue("SK001", f"{SKILL_FILE} has no frontmatter", skill_md)], None

    name = frontmatter.get("name")
    if name is None or (isinstance(name, str) and not name.strip()):
        issues.append(_issue("SK002", "Frontmatter missing required 'name' field", skill_md))
        name = None
    elif not isinstance(name, str):
        issues.append(_issue("SK004", f"Invalid name {name!r}: must be a string", skill_md))
        name = None
    else:
        if len(name) > settings.max_name_length or not re.fullmatch(settings.name_pattern, name):
            issues.append(
                _issue(
                    "SK004",
                    f"Invalid name '{name}': must match {settings.name_pattern} "
                    f"and be at most {settings.max_name_length} characters",
                    skill_md,
                )
            )
        if name != skill_dir.name:
            issues.append(
                _issue(
                    "SK005",
                    f"Name mismatch: directory is '{skill_dir.name}', {SKILL_FILE} has '{name}'",
                    skill_md,
                )
            )

    description = frontmatter.get("description")
    if description is not None and not isinstance(description, str):
        issues.append(
            _issue(
                "SK003",
                f"Frontmatter 'description' must be a string, got {type(description).__name__}",
                skill_md,
            )
        )
    elif not description or not description.strip():
        issues.append(_issue("SK003", "Frontmatter missing required 'description' field", skill_md))
    else:
        description = " ".join(description.split())
        if len(description) > settings.max_description_length:
            issues.append(
                _issue(
                    "SK006",
                    f"Description is {len(description)} characters "
                    f"(max {settings.max_description_length})",
                    skill_md,
                )
            )
        elif len(description) < TRIGGER_DESCRIPTION_MIN and not frontmatter.get("keywords"):
            issues.append(
                _issue(
                    "SK011",
                    "Short description and no keywords; the skill will rarely be triggered",
                    skill_md,
                    Severity.WARNING,
                )
            )

    issues.extend(check_field_types(frontmatter, skill_md))

    if not body.strip():
        issues.append(_issue("SK007", f"{SKILL_FILE} has no instructions content", skill_md))
    else:
        line_count = len(body.splitlines())
        if line_count > settings.max_body_lines:
            issues.append(
                _issue(
                    "SK010",
                    f"Body has {line_count} lines (recommended max {settings.max_body_lines}); "
                    "move detail into bundled reference files",
                    skill_md,
                    Severity.WARNING,
                )
            )
        if settings.check_links:
            issues.extend(check_links(skill_dir, body, skill_md))

    return issues, name


def lint_skill(skill_dir: Path, settings: LintConfig | None = None) -> list[LintIssue]:
    """Lint one skill directory."""
    issues, _ = lint_skill_with_name(skill_dir, settings or LintConfig())
    return issues


def lint_skills(skill_dirs: list[Path], settings: LintConfig) -> LintReport:
    """Lint several skills and flag duplicate names among them (SK009)."""
    report = LintReport()
    names: dict[str, list[Path]] = {}

    for skill_dir in skill_dirs:
        issues, name = lint_skill_with_name(skill_dir, settings)
        report.issues.extend(issues)
        report.checked_skills += 1
        if name:
            names.setdefault(name, []).append(skill_dir)

    for name, dirs in names.items():
        if len(dirs) > 1:
            locations = ", ".join(str(d) for d in dirs)
            report.issues.append(_issue("SK009", f"Duplicate skill name '{name}': {locations}", dirs[0]))

    return report


def _plugin_skill_dirs(
    root: Path,
    declared: list[str],
    missing_code: str,
    manifest_path: Path,
    report: LintReport,
) -> list[Path]:
    skill_dirs, missing = expand_skill_paths(root, declared)
    for path in missing:
        report.issues.append(_issue(missing_code, f"Skill path does not exist: {path}", manifest_path))
    return skill_dirs


def check_plugin(root: Path) -> tuple[LintReport, list[Path]]:
    """Manifest checks for one plugin root (PL001-PL003).

    Returns:
        Tuple of (manifest issues, skill directories to lint).
    """
    root = Path(root)
    manifest_path = get_plugin_manifest_path(root)
    report = LintReport(root=str(root), checked_plugins=1)

    try:
        manifest = load_plugin_manifest(root)
    except ManifestError as e:
        report.issues.append(_issue("PL001", str(e), manifest_path))
        return report, []

    declared = manifest.skills if manifest else [DEFAULT_SKILLS_PATH]
    skill_dirs = _plugin_skill_dirs(root, declared, "PL002", manifest_path, report)

    if not skill_dirs:
        report.issues.append(_issue("PL003", "Plugin has no skills", root, Severity.WARNING))

    return report, skill_dirs


def lint_plugin(root: Path, settings: LintConfig | None = None) -> LintReport:
    """Lint a plugin root and all of its skills."""
    settings = settings or LintConfig()
    report, skill_dirs = check_plugin(root)
    report.extend(lint_skills(skill_dirs, settings))
    return report


def lint_marketplace(root: Path, settings: LintConfig | None = None) -> LintReport:
    """Lint a marketplace root, every local plugin it lists and their skills."""
    settings = settings or LintConfig()
    root = Path(root)
    manifest_path = get_marketplace_manifest_path(root)
    report = LintReport(root=str(root))

    try:
        manifest = load_marketplace_manifest(root)
    except ManifestError as e:
        report.issues.append(_issue("MK001", str(e), manifest_path))
        return report

    if manifest is None:
        report.issues.append(_issue("MK001", "Missing marketplace manifest", manifest_path))
        return report

    counts = Counter(entry.name for entry in manifest.plugins)
    for name, count in counts.items():
        if count > 1:
            report.issues.append(
                _issue("MK003", f"Duplicate plugin name '{name}' ({count} entries)", manifest_path)
            )

    all_skill_dirs: list[Path] = []
    for entry in manifest.plugins:
        plugin_root = resolve_plugin_root(root, manifest, entry)
        if plugin_root is None:
            report.issues.append(
                _issue(
                    "MK006",
                    f"Plugin '{entry.name}' has a remote source and was not checked",
                    manifest_path,
                    Severity.WARNING,
                )
            )
            continue

        if not plugin_root.is_dir():
            report.issues.append(
                _issue(
                    "MK002",
                    f"Plugin '{entry.name}' source does not exist: {entry.source}",
                    manifest_path,
                )
            )
            continue

        report.checked_plugins += 1
        plugin_manifest_path = get_plugin_manifest_path(plugin_root)
        try:
            plugin_manifest = load_plugin_manifest(plugin_root)
        except ManifestError as e:
            report.issues.append(_issue("PL001", str(e), plugin_manifest_path))
            plugin_manifest = None

        if entry.strict and entry.skills is None and not plugin_manifest_path.exists():
            report.issues.append(
                _issue(
                    "PL001",
                    f"Plugin '{entry.name}' has no plugin.json and is marked strict",
                    plugin_root,
                )
            )

        if (
            plugin_manifest is not None
            and entry.version
            and plugin_manifest.version
            and entry.version != plugin_manifest.version
        ):
            report.issues.append(
                _issue(
                    "MK005",
                    f"Plugin '{entry.name}' version {entry.version} differs from "
                    f"plugin.json version {plugin_manifest.version}",
                    manifest_path,
                    Severity.WARNING,
                )
            )

        if entry.skills is not None:
            skill_dirs = _plugin_skill_dirs(plugin_root, entry.skills, "MK004", manifest_path, report)
        else:
            declared = plugin_manifest.skills if plugin_manifest else [DEFAULT_SKILLS_PATH]
            skill_dirs = _plugin_skill_dirs(plugin_root, declared, "PL002", plugin_manifest_path, report)

        if not skill_dirs:
            report.issues.append(
                _issue("PL003", f"Plugin '{entry.name}' has no skills", plugin_root, Severity.WARNING)
            )

        for skill_dir in skill_dirs:
            if skill_dir not in all_skill_dirs:
                all_skill_dirs.append(skill_dir)

    report.extend(lint_skills(all_skill_dirs, settings))
    return report
