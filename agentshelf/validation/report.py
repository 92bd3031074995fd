"""Validation issues and reports."""
from dataclasses import dataclass, field

ERROR = "error"
WARNING = "warning"


@dataclass(frozen=True)
class Issue:
    """A single problem found in a document."""

    severity: str
    code: str
    message: str
    path: str | None = None

    def __str__(self) -> str:
        location = f"{self.path}: " if self.path else ""
        return f"{location}{self.severity}: {self.message} [{self.code}]"


@dataclass
class ValidationReport:
    """Issues collected over one or more documents."""

    issues: list[Issue] = field(default_factory=list)
    checked: int = 0

    @property
    def errors(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == ERROR]

    @property
    def warnings(self) -> list[Issue]:
        return [i for i in self.issues if i.severity == WARNING]

    @property
    def ok(self) -> bool:
        """True when no errors were found."""
        return not self.errors

    def failed(self, strict: bool = False) -> bool:
        """Whether the report should fail a check run."""
        return bool(self.errors) or (strict and bool(self.warnings))

    def add(self, severity: str, code: str, message: str, path: str | None = None) -> None:
        self.issues.append(Issue(severity, code, message, path))

    def merge(self, other: "ValidationReport") -> "ValidationReport":
        """Add another report's issues and document count to this one."""
        self.issues.extend(other.issues)
        self.checked += other.checked
        return self
