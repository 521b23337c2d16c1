"""
Pytest configuration and fixtures for skillpack tests.
"""

import json
import tempfile
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from skillpack.config import clear_config_cache
from skillpack.skills import reset_skill_manager


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Typer CLI test runner."""
    return CliRunner()


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir).resolve()


@pytest.fixture
def skillpack_home(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[Path, None, None]:
    """Point SKILLPACK_HOME at an empty directory and run from a clean cwd."""
    home = temp_dir / ".skillpack"
    (home / "skills").mkdir(parents=True)

    workdir = temp_dir / "work"
    workdir.mkdir()

    monkeypatch.setenv("SKILLPACK_HOME", str(home))
    monkeypatch.chdir(workdir)
    clear_config_cache()
    reset_skill_manager()

    yield home

    clear_config_cache()
    reset_skill_manager()


@pytest.fixture
def mock_project_dir(skillpack_home: Path) -> Path:
    """Provide a project directory with .skillpack/skills/, used as cwd."""
    project_dir = Path.cwd()
    (project_dir / ".skillpack" / "skills").mkdir(parents=True)
    return project_dir


@pytest.fixture
def sample_skill_md() -> str:
    """Provide sample SKILL.md content."""
    return """---
name: test-skill
description: A test skill for unit tests of the skill loader
keywords:
  - test
  - example
---

# Test Skill

This is a test skill for unit testing.

## Instructions

1. Do something
2. Do something else

## Output Format

Return results in a specific format.
"""


@pytest.fixture
def make_skill() -> Callable[..., Path]:
    """Factory writing a skill directory under a root."""

    def _make_skill(
        root: Path,
        name: str,
        description: str = "Helps with things in a test scenario",
        keywords: list[str] | None = None,
        body: str = "# Instructions\n\nFollow the steps.\n",
        dir_name: str | None = None,
    ) -> Path:
        skill_dir = root / (dir_name or name)
        skill_dir.mkdir(parents=True, exist_ok=True)
        lines = ["---", f"name: {name}", f"description: {description}"]
        if keywords:
            lines.append("keywords:")
            lines.extend(f"  - {keyword}" for keyword in keywords)
        lines.append("---")
        (skill_dir / "SKILL.md").write_text("\n".join(lines) + "\n\n" + body, encoding="utf-8")
        return skill_dir

    return _make_skill


def _write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path


@pytest.fixture
def write_json() -> Callable[[Path, dict], Path]:
    """Provide a helper writing a JSON manifest, creating parent dirs."""
    return _write_json


@pytest.fixture
def sample_plugin(temp_dir: Path, make_skill: Callable[..., Path]) -> Path:
    """Provide a plugin root with two skills under ./skills."""
    root = temp_dir / "doc-tools"
    _write_json(
        root / ".claude-plugin" / "plugin.json",
        {"name": "doc-tools", "version": "1.0.0", "description": "Document helpers"},
    )
    make_skill(root / "skills", "pdf", "Extract text and tables from PDF files", ["pdf"])
    make_skill(root / "skills", "xlsx", "Create and edit spreadsheets with formulas", ["excel"])
    return root


@pytest.fixture
def sample_marketplace(temp_dir: Path, make_skill: Callable[..., Path]) -> Path:
    """Provide a marketplace with one strict plugin and one skills-list plugin."""
    root = temp_dir / "market"
    _write_json(
        root / ".claude-plugin" / "marketplace.json",
        {
            "name": "acme-skills",
            "owner": {"name": "Acme"},
            "plugins": [
                {
                    "name": "document-skills",
                    "source": "./plugins/documents",
                    "version": "1.0.0",
                },
                {
                    "name": "example-skills",
                    "source": "./",
                    "strict": False,
                    "skills": ["./examples/brand-guidelines"],
                },
            ],
        },
    )

    plugin_root = root / "plugins" / "documents"
    _write_json(
        plugin_root / ".claude-plugin" / "plugin.json",
        {"name": "document-skills", "version": "1.0.0"},
    )
    make_skill(plugin_root / "skills", "docx", "Create and edit Word documents", ["word"])
    make_skill(
        root / "examples",
        "brand-guidelines",
        "Apply the Acme brand colors and typography",
        ["brand"],
    )
    return root
