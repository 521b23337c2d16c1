"""
Unit tests for content lint.
"""

import pytest

from skillpack.config import LintConfig
from skillpack.lint import (
    LintIssue,
    LintReport,
    Severity,
    detect_layout,
    extract_links,
    lint_marketplace,
    lint_path,
    lint_plugin,
    lint_skill,
    lint_skills,
    validate_skill_directory,
)
from skillpack.skills import SkillParseError, parse_skill_directory


def codes(issues: list[LintIssue]) -> list[str]:
    return sorted(issue.code for issue in issues)


def write_skill_md(skill_dir, content: str):
    skill_dir.mkdir(parents=True, exist_ok=True)
    (skill_dir / "SKILL.md").write_text(content)
    return skill_dir


# =============================================================================
# Link Extraction Tests
# =============================================================================


class TestExtractLinks:
    """Tests for Markdown link extraction."""

    def test_links_and_images(self):
        """Test inline links and images are found."""
        body = 'See [forms](reference/forms.md) and ![logo](assets/logo.png "Logo").'
        assert extract_links(body) == ["reference/forms.md", "assets/logo.png"]

    def test_code_is_skipped(self):
        """Test links inside code are ignored."""
        body = "\n".join(
            [
                "```markdown",
                "[fenced](fenced.md)",
                "```",
                "Use `[inline](inline.md)` literally.",
                "[real](real.md)",
            ]
        )
        assert extract_links(body) == ["real.md"]


# =============================================================================
# Skill Checks
# =============================================================================


class TestLintSkill:
    """Tests for single-skill checks."""

    def test_valid_skill(self, temp_dir, make_skill):
        """Test a clean skill has no issues."""
        skill_dir = make_skill(temp_dir, "good-skill", keywords=["good"])
        assert lint_skill(skill_dir) == []

    def test_missing_directory(self, temp_dir):
        """Test SK001 for a directory that does not exist."""
        assert codes(lint_skill(temp_dir / "missing")) == ["SK001"]

    def test_missing_skill_md(self, temp_dir):
        """Test SK001 for a directory without SKILL.md."""
        skill_dir = temp_dir / "empty"
        skill_dir.mkdir()
        assert codes(lint_skill(skill_dir)) == ["SK001"]

    def test_no_frontmatter(self, temp_dir):
        """Test SK001 for SKILL.md without front matter."""
        skill_dir = write_skill_md(temp_dir / "plain", "# Plain\n")
        assert codes(lint_skill(skill_dir)) == ["SK001"]

    def test_missing_name(self, temp_dir):
        """Test SK002 for a missing name."""
        skill_dir = write_skill_md(
            temp_dir / "nameless",
            "---\ndescription: A skill without any name at all\n---\n\nBody\n",
        )
        assert codes(lint_skill(skill_dir)) == ["SK002"]

    def test_missing_description(self, temp_dir):
        """Test SK003 for a missing description."""
        skill_dir = write_skill_md(temp_dir / "quiet", "---\nname: quiet\n---\n\nBody\n")
        assert codes(lint_skill(skill_dir)) == ["SK003"]

    def test_non_string_name(self, temp_dir):
        """Test SK004 when YAML reads the name as a number."""
        skill_dir = write_skill_md(
            temp_dir / "123",
            "---\nname: 123\ndescription: A skill whose name YAML reads as an int\n---\n\nBody\n",
        )
        assert codes(lint_skill(skill_dir)) == ["SK004"]
        with pytest.raises(SkillParseError):
            parse_skill_directory(skill_dir)

    def test_non_string_description(self, temp_dir):
        """Test SK003 when the description is a list."""
        skill_dir = write_skill_md(
            temp_dir / "listed",
            "---\nname: listed\ndescription:\n  - first\n  - second\n---\n\nBody\n",
        )
        issues = lint_skill(skill_dir)
        assert codes(issues) == ["SK003"]
        assert "must be a string" in issues[0].message

    def test_optional_field_types(self, temp_dir):
        """Test SK001 for optional fields the loader would reject."""
        skill_dir = write_skill_md(
            temp_dir / "typed",
            "---\nname: typed\ndescription: Optional fields with the wrong types\n"
            "version: 1.5\nkeywords:\n  - 7\nmetadata: plain\n---\n\nBody\n",
        )
        assert codes(lint_skill(skill_dir)) == ["SK001", "SK001", "SK001"]
        with pytest.raises(SkillParseError):
            parse_skill_directory(skill_dir)

    def test_clean_skill_loads(self, temp_dir):
        """Test a skill that lints clean also parses."""
        skill_dir = write_skill_md(
            temp_dir / "loose",
            "---\nname: loose\ndescription: Accepts words given as one string\n"
            "version: '1.5'\nkeywords: pdf, forms\nallowed-tools: Read\n---\n\nBody\n",
        )
        assert lint_skill(skill_dir) == []
        assert parse_skill_directory(skill_dir).keywords == ["pdf", "forms"]

    def test_invalid_name(self, temp_dir, make_skill):
        """Test SK004 for names that are not lowercase hyphenated words."""
        skill_dir = make_skill(temp_dir, "Bad_Name")
        assert codes(lint_skill(skill_dir)) == ["SK004"]

    def test_name_too_long(self, temp_dir, make_skill):
        """Test SK004 for names over the length limit."""
        skill_dir = make_skill(temp_dir, "abcdef")
        assert codes(lint_skill(skill_dir, LintConfig(max_name_length=5))) == ["SK004"]

    def test_name_mismatch(self, temp_dir, make_skill):
        """Test SK005 when the directory is named differently."""
        skill_dir = make_skill(temp_dir, "alpha", dir_name="beta")
        assert codes(lint_skill(skill_dir)) == ["SK005"]

    def test_description_too_long(self, temp_dir, make_skill):
        """Test SK006 for descriptions over the limit."""
        skill_dir = make_skill(temp_dir, "wordy", description="word " * 20)
        assert codes(lint_skill(skill_dir, LintConfig(max_description_length=50))) == ["SK006"]

    def test_empty_body(self, temp_dir, make_skill):
        """Test SK007 when there are no instructions."""
        skill_dir = make_skill(temp_dir, "hollow", body="")
        assert codes(lint_skill(skill_dir)) == ["SK007"]

    def test_broken_link(self, temp_dir, make_skill):
        """Test SK008 for relative links that do not exist."""
        body = (
            "Read [forms](reference/forms.md#fields), [missing](missing.md), "
            "[site](https://example.com) and [top](#usage).\n"
        )
        skill_dir = make_skill(temp_dir, "linked", body=body)
        (skill_dir / "reference").mkdir()
        (skill_dir / "reference" / "forms.md").write_text("# Forms")

        issues = lint_skill(skill_dir)
        assert codes(issues) == ["SK008"]
        assert "missing.md" in issues[0].message

    def test_percent_encoded_link(self, temp_dir, make_skill):
        """Test encoded link targets are decoded before the existence check."""
        skill_dir = make_skill(temp_dir, "spaced", body="See [notes](my%20notes.md).\n")
        (skill_dir / "my notes.md").write_text("# Notes")
        assert lint_skill(skill_dir) == []

    def test_links_not_checked_when_disabled(self, temp_dir, make_skill):
        """Test check_links=False skips SK008."""
        skill_dir = make_skill(temp_dir, "linked", body="[missing](missing.md)\n")
        assert lint_skill(skill_dir, LintConfig(check_links=False)) == []

    def test_long_body_warning(self, temp_dir, make_skill):
        """Test SK010 warns about long bodies."""
        skill_dir = make_skill(temp_dir, "long", body="line\n" * 10)
        issues = lint_skill(skill_dir, LintConfig(max_body_lines=3))
        assert codes(issues) == ["SK010"]
        assert issues[0].severity is Severity.WARNING

    def test_short_description_warning(self, temp_dir, make_skill):
        """Test SK011 warns about skills that will rarely trigger."""
        skill_dir = make_skill(temp_dir, "terse", description="Does PDFs")
        issues = lint_skill(skill_dir)
        assert codes(issues) == ["SK011"]
        assert not issues[0].is_error

        with_keywords = make_skill(temp_dir, "terse-kw", description="Does PDFs", keywords=["pdf"])
        assert lint_skill(with_keywords) == []

    def test_duplicate_names(self, temp_dir, make_skill):
        """Test SK009 for two skills with the same name."""
        first = make_skill(temp_dir / "a", "shared")
        second = make_skill(temp_dir / "b", "shared")

        report = lint_skills([first, second], LintConfig())
        assert codes(report.issues) == ["SK009"]
        assert report.checked_skills == 2


# =============================================================================
# Plugin and Marketplace Checks
# =============================================================================


class TestLintPlugin:
    """Tests for plugin checks."""

    def test_valid_plugin(self, sample_plugin):
        """Test a clean plugin."""
        report = lint_plugin(sample_plugin)
        assert report.ok
        assert report.issues == []
        assert report.checked_plugins == 1
        assert report.checked_skills == 2

    def test_invalid_manifest(self, temp_dir, write_json):
        """Test PL001 for a manifest that does not validate."""
        write_json(temp_dir / "p" / ".claude-plugin" / "plugin.json", {"name": ""})
        report = lint_plugin(temp_dir / "p")
        assert codes(report.issues) == ["PL001"]

    def test_missing_skill_path(self, temp_dir, write_json, make_skill):
        """Test PL002 for declared skill paths that do not exist."""
        root = temp_dir / "p"
        write_json(root / ".claude-plugin" / "plugin.json", {"name": "p", "skills": ["./skills", "./gone"]})
        make_skill(root / "skills", "alpha")
        report = lint_plugin(root)
        assert codes(report.issues) == ["PL002"]

    def test_no_skills(self, temp_dir, write_json):
        """Test PL003 warns about empty plugins."""
        root = temp_dir / "p"
        write_json(root / ".claude-plugin" / "plugin.json", {"name": "p"})
        (root / "skills").mkdir()
        report = lint_plugin(root)
        assert codes(report.issues) == ["PL003"]
        assert report.ok

    def test_skill_issues_included(self, sample_plugin):
        """Test skill problems inside a plugin are reported."""
        (sample_plugin / "skills" / "pdf" / "SKILL.md").write_text("---\nname: pdf\n---\n\nBody\n")
        report = lint_plugin(sample_plugin)
        assert codes(report.issues) == ["SK003"]
        assert not report.ok


class TestLintMarketplace:
    """Tests for marketplace checks."""

    def test_valid_marketplace(self, sample_marketplace):
        """Test a clean marketplace."""
        report = lint_marketplace(sample_marketplace)
        assert report.issues == []
        assert report.checked_plugins == 2
        assert report.checked_skills == 2

    def test_invalid_manifest(self, temp_dir):
        """Test MK001 for broken marketplace JSON."""
        path = temp_dir / ".claude-plugin" / "marketplace.json"
        path.parent.mkdir()
        path.write_text("{oops")
        assert codes(lint_marketplace(temp_dir).issues) == ["MK001"]

    def test_missing_manifest(self, temp_dir):
        """Test MK001 when there is no marketplace.json."""
        assert codes(lint_marketplace(temp_dir).issues) == ["MK001"]

    def test_entry_problems(self, temp_dir, write_json, make_skill):
        """Test MK002 through MK006 on one marketplace."""
        root = temp_dir / "market"
        write_json(
            root / ".claude-plugin" / "marketplace.json",
            {
                "name": "m",
                "plugins": [
                    {"name": "gone", "source": "./gone"},
                    {"name": "docs", "source": "./docs", "version": "2.0.0"},
                    {"name": "docs", "source": "./docs", "skills": ["./missing"]},
                    {"name": "remote", "source": {"source": "github", "repo": "o/r"}},
                ],
            },
        )
        write_json(root / "docs" / ".claude-plugin" / "plugin.json", {"name": "docs", "version": "1.0.0"})
        make_skill(root / "docs" / "skills", "alpha")

        report = lint_marketplace(root)
        found = codes(report.issues)
        for code in ("MK002", "MK003", "MK004", "MK005", "MK006"):
            assert code in found
        assert not report.ok

    def test_strict_entry_without_plugin_json(self, temp_dir, write_json, make_skill):
        """Test PL001 for strict entries missing plugin.json."""
        root = temp_dir / "market"
        write_json(
            root / ".claude-plugin" / "marketplace.json",
            {"name": "m", "plugins": [{"name": "bare", "source": "./bare"}]},
        )
        make_skill(root / "bare" / "skills", "alpha")

        report = lint_marketplace(root)
        assert codes(report.issues) == ["PL001"]


# =============================================================================
# Runner Tests
# =============================================================================


class TestLintPath:
    """Tests for layout detection and the lint entry point."""

    def test_detect_layout(self, temp_dir, sample_plugin, sample_marketplace, make_skill):
        """Test each layout is recognised."""
        assert detect_layout(sample_marketplace) == "marketplace"
        assert detect_layout(sample_plugin) == "plugin"
        assert detect_layout(sample_plugin / "skills" / "pdf") == "skill"
        assert detect_layout(sample_plugin / "skills") == "directory"

    def test_lint_path_skill(self, temp_dir, make_skill):
        """Test linting a single skill directory."""
        skill_dir = make_skill(temp_dir, "alpha", dir_name="beta")
        report = lint_path(skill_dir, LintConfig())
        assert codes(report.issues) == ["SK005"]
        assert report.checked_skills == 1
        assert report.root == str(skill_dir)

    def test_lint_path_directory(self, temp_dir, make_skill):
        """Test linting a plain folder of skills."""
        folder = temp_dir / "collection"
        make_skill(folder, "alpha")
        make_skill(folder, "beta")
        report = lint_path(folder, LintConfig())
        assert report.ok
        assert report.checked_skills == 2

    def test_lint_path_ignore(self, temp_dir, make_skill):
        """Test ignored codes are dropped from the report."""
        skill_dir = make_skill(temp_dir, "terse", description="Short")
        report = lint_path(skill_dir, LintConfig(ignore=["sk011"]))
        assert report.issues == []

    def test_lint_path_missing(self, temp_dir):
        """Test a path that is not a directory."""
        with pytest.raises(FileNotFoundError):
            lint_path(temp_dir / "missing", LintConfig())

    def test_validate_skill_directory(self, temp_dir, make_skill):
        """Test the string form used by the skill manager."""
        skill_dir = make_skill(temp_dir, "terse", description="Short", dir_name="other")
        messages = validate_skill_directory(skill_dir, LintConfig())
        assert any(m.startswith("Name mismatch") for m in messages)
        assert any(m.startswith("Warning: ") for m in messages)


class TestLintModels:
    """Tests for lint result models."""

    def test_issue_format(self):
        """Test the one-line issue rendering."""
        issue = LintIssue(code="SK003", message="Missing description", path="/s/SKILL.md")
        assert issue.format() == "SK003 error: Missing description [/s/SKILL.md]"

    def test_report_counts(self):
        """Test errors and warnings are split."""
        report = LintReport(
            issues=[
                LintIssue(code="SK003", message="x"),
                LintIssue(code="SK010", severity=Severity.WARNING, message="y"),
            ]
        )
        assert len(report.errors) == 1
        assert len(report.warnings) == 1
        assert not report.ok
        assert report.filter(["SK003"]).ok
