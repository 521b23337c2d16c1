"""
Pydantic configuration schema for Skillpack.

This module defines all configuration models with validation.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_NAME_PATTERN = r"^[a-z0-9]+(-[a-z0-9]+)*$"

# =============================================================================
# Skills Configuration
# =============================================================================


class SkillIndexConfig(BaseModel):
    """Skill index configuration."""

    enable: bool = True
    max_skills_per_query: int = Field(default=3, ge=1, le=10)


class SkillsConfig(BaseModel):
    """Skill discovery configuration."""

    model_config = ConfigDict(extra="allow")

    local_path: str | None = Field(
        default=None,
        description="Global skill root (default: <SKILLPACK_HOME>/skills)",
    )
    plugin_paths: list[str] = Field(
        default_factory=list,
        description="Plugin or marketplace roots whose skills are discovered",
    )
    include_project: bool = True
    index: SkillIndexConfig = Field(default_factory=SkillIndexConfig)


# =============================================================================
# Router Configuration
# =============================================================================


class RouterConfig(BaseModel):
    """Keyword routing of queries to skills."""

    min_score: int = Field(default=1, ge=1)
    max_terms: int = Field(
        default=5,
        ge=0,
        le=20,
        description="How many significant query words are searched on their own",
    )
    extra_stopwords: list[str] = Field(default_factory=list)


# =============================================================================
# Lint Configuration
# =============================================================================


class LintConfig(BaseModel):
    """Content lint thresholds."""

    model_config = ConfigDict(extra="allow")

    name_pattern: str = DEFAULT_NAME_PATTERN
    max_name_length: int = Field(default=64, ge=1)
    max_description_length: int = Field(default=1024, ge=1)
    max_body_lines: int = Field(default=500, ge=1)
    check_links: bool = True
    ignore: list[str] = Field(default_factory=list, description="Issue codes to suppress")


# =============================================================================
# General Configuration
# =============================================================================


class GeneralConfig(BaseModel):
    """General settings configuration."""

    model_config = ConfigDict(extra="allow")

    output: Literal["rich", "plain", "json"] = "rich"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


# =============================================================================
# Root Configuration Model
# =============================================================================


class Config(BaseModel):
    """
    Root configuration model for Skillpack.

    Loaded from YAML files and environment variables, merged in order of
    priority.
    """

    model_config = ConfigDict(extra="allow")

    skills: SkillsConfig = Field(default_factory=SkillsConfig)
    router: RouterConfig = Field(default_factory=RouterConfig)
    lint: LintConfig = Field(default_factory=LintConfig)
    general: GeneralConfig = Field(default_factory=GeneralConfig)
