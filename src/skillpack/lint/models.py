"""
Lint result models.
"""

from enum import Enum

from pydantic import BaseModel, Field


class Severity(str, Enum):
    """Issue severity."""

    ERROR = "error"
    WARNING = "warning"


class LintIssue(BaseModel):
    """A single content-lint finding."""

    code: str = Field(..., description="Stable issue code, e.g. SK003")
    severity: Severity = Severity.ERROR
    message: str
    path: str | None = Field(default=None, description="File or directory the issue is about")

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR

    def format(self) -> str:
        location = f" [{self.path}]" if self.path else ""
        return f"{self.code} {self.severity.value}: {self.message}{location}"


class LintReport(BaseModel):
    """All findings for one lint run."""

    root: str | None = None
    issues: list[LintIssue] = Field(default_factory=list)
    checked_skills: int = 0
    checked_plugins: int = 0

    @property
    def errors(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity is Severity.ERROR]

    @property
    def warnings(self) -> list[LintIssue]:
        return [i for i in self.issues if i.severity is Severity.WARNING]

    @property
    def ok(self) -> bool:
        return not self.errors

    def extend(self, other: "LintReport") -> None:
        self.issues.extend(other.issues)
        self.checked_skills += other.checked_skills
        self.checked_plugins += other.checked_plugins

    def filter(self, ignore: list[str] | set[str]) -> "LintReport":
        """Copy of the report without issues whose code is ignored."""
        ignored = {code.upper() for code in ignore}
        return self.model_copy(
            update={"issues": [i for i in self.issues if i.code not in ignored]}
        )
