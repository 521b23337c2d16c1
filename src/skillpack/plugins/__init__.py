"""
Skillpack plugin manifests.

A plugin is a directory with ``.claude-plugin/plugin.json`` and one or more
skill directories. A marketplace is a repository whose
``.claude-plugin/marketplace.json`` lists plugins by source path.
"""

from skillpack.plugins.manifest import (
    MANIFEST_DIR,
    ManifestError,
    create_plugin,
    discover_plugin_skills,
    expand_skill_paths,
    get_marketplace_manifest_path,
    get_plugin_manifest_path,
    load_marketplace_manifest,
    load_plugin_manifest,
    marketplace_plugin_skills,
    plugin_skill_roots,
    resolve_plugin_root,
)
from skillpack.plugins.models import (
    Author,
    MarketplaceManifest,
    MarketplaceMetadata,
    MarketplacePlugin,
    PluginManifest,
)

__all__ = [
    "MANIFEST_DIR",
    "Author",
    "ManifestError",
    "MarketplaceManifest",
    "MarketplaceMetadata",
    "MarketplacePlugin",
    "PluginManifest",
    "create_plugin",
    "discover_plugin_skills",
    "expand_skill_paths",
    "get_marketplace_manifest_path",
    "get_plugin_manifest_path",
    "load_marketplace_manifest",
    "load_plugin_manifest",
    "marketplace_plugin_skills",
    "plugin_skill_roots",
    "resolve_plugin_root",
]
