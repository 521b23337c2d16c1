"""
Manifest models for skill plugins and marketplaces.

A plugin root carries ``.claude-plugin/plugin.json``; a marketplace root
carries ``.claude-plugin/marketplace.json`` listing installable plugins.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SKILLS_PATH = "./skills"


class Author(BaseModel):
    """Plugin author or marketplace owner."""

    model_config = ConfigDict(extra="allow")

    name: str
    email: str | None = None
    url: str | None = None


def _coerce_author(value: Any) -> Any:
    if isinstance(value, str):
        return {"name": value}
    return value


class PluginManifest(BaseModel):
    """Contents of plugin.json."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str = Field(..., min_length=1)
    version: str | None = None
    description: str = ""
    author: Author | None = None
    homepage: str | None = None
    repository: str | None = None
    license: str | None = None
    keywords: list[str] = Field(default_factory=list)
    skills: list[str] = Field(
        default_factory=lambda: [DEFAULT_SKILLS_PATH],
        description="Skill paths relative to the plugin root",
    )

    @field_validator("author", mode="before")
    @classmethod
    def _author(cls, value: Any) -> Any:
        return _coerce_author(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, value: Any) -> Any:
        if value is None:
            return [DEFAULT_SKILLS_PATH]
        if isinstance(value, str):
            return [value]
        return value


class MarketplaceMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    description: str = ""
    version: str | None = None
    plugin_root: str | None = Field(default=None, alias="pluginRoot")


class MarketplacePlugin(BaseModel):
    """One entry of a marketplace's plugin list."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    source: str | dict[str, Any]
    description: str = ""
    version: str | None = None
    author: Author | None = None
    category: str | None = None
    keywords: list[str] = Field(default_factory=list)
    strict: bool = True
    skills: list[str] | None = None

    @field_validator("author", mode="before")
    @classmethod
    def _author(cls, value: Any) -> Any:
        return _coerce_author(value)

    @field_validator("skills", mode="before")
    @classmethod
    def _skills(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def is_local(self) -> bool:
        """Whether the source is a path inside the marketplace repository."""
        return isinstance(self.source, str) and "://" not in self.source


class MarketplaceManifest(BaseModel):
    """Contents of marketplace.json."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1)
    owner: Author | None = None
    metadata: MarketplaceMetadata = Field(default_factory=MarketplaceMetadata)
    plugins: list[MarketplacePlugin] = Field(default_factory=list)

    @field_validator("owner", mode="before")
    @classmethod
    def _owner(cls, value: Any) -> Any:
        return _coerce_author(value)

    def get_plugin(self, name: str) -> MarketplacePlugin | None:
        for plugin in self.plugins:
            if plugin.name == name:
                return plugin
        return None
