"""
Plugin and marketplace manifest loading.

Resolves the skill directories a plugin or marketplace declares.
"""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

from pydantic import ValidationError

from skillpack.plugins.models import (
    DEFAULT_SKILLS_PATH,
    MarketplaceManifest,
    MarketplacePlugin,
    PluginManifest,
)
from skillpack.storage.paths import discover_skills_in_directory, is_skill_directory

logger = logging.getLogger(__name__)

MANIFEST_DIR = ".claude-plugin"
PLUGIN_MANIFEST = "plugin.json"
MARKETPLACE_MANIFEST = "marketplace.json"


class ManifestError(Exception):
    """Error reading or validating a manifest."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        super().__init__(f"{message}" + (f" (at {path})" if path else ""))


def get_plugin_manifest_path(root: Path) -> Path:
    return Path(root) / MANIFEST_DIR / PLUGIN_MANIFEST


def get_marketplace_manifest_path(root: Path) -> Path:
    return Path(root) / MANIFEST_DIR / MARKETPLACE_MANIFEST


def _read_json(path: Path) -> dict:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ManifestError(f"Invalid JSON: {e}", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestError(f"Cannot read manifest: {e}", path) from e

    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a JSON object", path)
    return data


def load_plugin_manifest(root: Path) -> PluginManifest | None:
    """Load plugin.json from a plugin root.

    Returns:
        The manifest, or None if the root has no plugin.json.

    Raises:
        ManifestError: If the manifest is unreadable or invalid.
    """
    path = get_plugin_manifest_path(root)
    if not path.exists():
        return None

    try:
        return PluginManifest.model_validate(_read_json(path))
    except ValidationError as e:
        raise ManifestError(f"Invalid plugin manifest: {e}", path) from e


def load_marketplace_manifest(root: Path) -> MarketplaceManifest | None:
    """Load marketplace.json from a marketplace root.

    Returns:
        The manifest, or None if the root has no marketplace.json.

    Raises:
        ManifestError: If the manifest is unreadable or invalid.
    """
    path = get_marketplace_manifest_path(root)
    if not path.exists():
        return None

    try:
        return MarketplaceManifest.model_validate(_read_json(path))
    except ValidationError as e:
        raise ManifestError(f"Invalid marketplace manifest: {e}", path) from e


def resolve_plugin_root(
    marketplace_root: Path,
    manifest: MarketplaceManifest,
    entry: MarketplacePlugin,
) -> Path | None:
    """Resolve the local directory of a marketplace plugin.

    Returns:
        The plugin directory, or None for remote sources.
    """
    if not entry.is_local:
        return None

    base = Path(marketplace_root)
    if manifest.metadata.plugin_root:
        base = base / manifest.metadata.plugin_root
    return (base / entry.source).resolve()


def expand_skill_paths(root: Path, paths: list[str]) -> tuple[list[Path], list[str]]:
    """Expand manifest skill paths into skill directories.

    A path holding SKILL.md is a skill; any other directory is a container
    whose immediate subdirectories are skills.

    Returns:
        Tuple of (skill directories, declared paths that do not exist).
    """
    skill_dirs: list[Path] = []
    missing: list[str] = []

    for declared in paths:
        path = (Path(root) / declared).resolve()
        if not path.is_dir():
            missing.append(declared)
            continue
        if is_skill_directory(path):
            candidates = [path]
        else:
            candidates = discover_skills_in_directory(path)
        for candidate in candidates:
            if candidate not in skill_dirs:
                skill_dirs.append(candidate)

    return skill_dirs, missing


def plugin_skill_roots(root: Path, manifest: PluginManifest | None) -> list[Path]:
    """Existing skill directories of a plugin."""
    paths = manifest.skills if manifest else [DEFAULT_SKILLS_PATH]
    skill_dirs, missing = expand_skill_paths(root, paths)
    for declared in missing:
        logger.warning("Plugin skill path does not exist: %s (in %s)", declared, root)
    return skill_dirs


def marketplace_plugin_skills(
    marketplace_root: Path,
    manifest: MarketplaceManifest,
    entry: MarketplacePlugin,
) -> list[Path]:
    """Skill directories of one marketplace plugin.

    The entry's own ``skills`` list wins over the plugin's plugin.json.

    Raises:
        ManifestError: If the plugin's plugin.json is invalid, or the plugin
            has none while the entry is strict.
    """
    plugin_root = resolve_plugin_root(marketplace_root, manifest, entry)
    if plugin_root is None:
        logger.debug("Skipping remote plugin source: %s", entry.name)
        return []
    if not plugin_root.is_dir():
        logger.warning("Plugin source does not exist: %s", plugin_root)
        return []

    if entry.skills is not None:
        skill_dirs, missing = expand_skill_paths(plugin_root, entry.skills)
        for declared in missing:
            logger.warning("Marketplace skill path does not exist: %s (%s)", declared, entry.name)
        return skill_dirs

    plugin_manifest = load_plugin_manifest(plugin_root)
    if plugin_manifest is None and entry.strict:
        raise ManifestError(
            f"Plugin '{entry.name}' has no {PLUGIN_MANIFEST} and is marked strict",
            plugin_root,
        )
    return plugin_skill_roots(plugin_root, plugin_manifest)


def discover_plugin_skills(root: Path) -> Iterator[tuple[Path, str]]:
    """Yield (skill_dir, source) for every skill a plugin or marketplace ships.

    Invalid marketplace plugins are logged and skipped so one broken entry
    does not hide the rest.

    Raises:
        ManifestError: If the root's own manifest is invalid.
    """
    root = Path(root).expanduser().resolve()

    marketplace = load_marketplace_manifest(root)
    if marketplace is not None:
        for entry in marketplace.plugins:
            try:
                skill_dirs = marketplace_plugin_skills(root, marketplace, entry)
            except ManifestError as e:
                logger.warning("Skipping plugin %s: %s", entry.name, e)
                continue
            for skill_dir in skill_dirs:
                yield skill_dir, f"plugin:{entry.name}"
        return

    manifest = load_plugin_manifest(root)
    plugin_name = manifest.name if manifest else root.name
    for skill_dir in plugin_skill_roots(root, manifest):
        yield skill_dir, f"plugin:{plugin_name}"


PLUGIN_JSON_TEMPLATE = {
    "name": "",
    "version": "0.1.0",
    "description": "",
    "skills": DEFAULT_SKILLS_PATH,
}


def create_plugin(root: Path, name: str, description: str = "") -> Path:
    """Scaffold a plugin: .claude-plugin/plugin.json and an empty skills/.

    Returns:
        Path to the written plugin.json.

    Raises:
        ValueError: If the root already has a plugin manifest.
    """
    root = Path(root)
    manifest_path = get_plugin_manifest_path(root)
    if manifest_path.exists():
        raise ValueError(f"Plugin manifest already exists: {manifest_path}")

    manifest = dict(PLUGIN_JSON_TEMPLATE, name=name, description=description)
    # Validates the name before anything is written
    PluginManifest.model_validate(manifest)

    manifest_path.parent.mkdir(parents=True, exist_ok=True)
    (root / "skills").mkdir(parents=True, exist_ok=True)
    manifest_path.write_text(json.dumps(manifest, indent=2) + "\n", encoding="utf-8")
    return manifest_path
