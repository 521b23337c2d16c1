"""CLI command modules."""

from skillpack.cli.commands import config, plugin, skill

__all__ = ["config", "plugin", "skill"]
