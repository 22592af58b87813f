"""Base classes for validation results."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..template.sections import section_rank


class Severity(str, Enum):
    """Severity level of a validation issue."""

    ERROR = "Error"
    WARNING = "Warning"


class DiagnosticCode(str, Enum):
    """Every kind of issue the validators report."""

    # Resource schema checks
    UNKNOWN_RESOURCE_TYPE = "UnknownResourceType"
    UNKNOWN_PROPERTY = "UnknownProperty"
    PROPERTY_KIND_MISMATCH = "PropertyKindMismatch"

    # Reference checks
    DANGLING_REFERENCE = "DanglingReference"
    UNKNOWN_ATTRIBUTE = "UnknownAttribute"
    DEPENDENCY_CYCLE = "DependencyCycle"
    MALFORMED_REFERENCE = "MalformedReference"

    # Naming and declarations
    DUPLICATE_NAME = "DuplicateName"
    UNUSED_PARAMETER = "UnusedParameter"
    INVALID_PARAMETER_TYPE = "InvalidParameterType"

    # Template structure
    UNKNOWN_SECTION = "UnknownSection"
    MALFORMED_SECTION = "MalformedSection"
    MALFORMED_RESOURCE = "MalformedResource"
    UNKNOWN_RESOURCE_KEY = "UnknownResourceKey"


@dataclass
class ValidationIssue:
    """A single diagnostic.

    ``section`` and ``name`` locate the declaration; ``path`` is the dotted
    location inside the template (``Resources.Web.Properties.Tags[0]``).
    """

    code: DiagnosticCode
    message: str
    severity: Severity
    section: str | None = None
    name: str | None = None
    path: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        if self.path:
            return self.path
        if self.section and self.name:
            return f"{self.section}.{self.name}"
        return self.section or self.name or ""

    def sort_key(self) -> tuple[int, str, str]:
        return (section_rank(self.section or ""), self.name or "", self.path or "")

    def to_line(self) -> str:
        """Format as ``<severity>\\t<code>\\t<path>\\t<message>``."""
        return "\t".join(
            [self.severity.value, self.code.value, self.location, self.message]
        )

    def __str__(self) -> str:
        location = f" [{self.location}]" if self.location else ""
        return f"{self.severity.value.upper()}: {self.code.value}{location} - {self.message}"


@dataclass
class ValidationResult:
    """Result of running validation on a template."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        """Get all error-level issues."""
        return [i for i in self.issues if i.severity == Severity.ERROR]

    @property
    def warnings(self) -> list[ValidationIssue]:
        """Get all warning-level issues."""
        return [i for i in self.issues if i.severity == Severity.WARNING]

    @property
    def has_errors(self) -> bool:
        """Check if there are any errors."""
        return len(self.errors) > 0

    @property
    def has_warnings(self) -> bool:
        """Check if there are any warnings."""
        return len(self.warnings) > 0

    @property
    def is_valid(self) -> bool:
        """Check if the template is valid (no errors)."""
        return not self.has_errors

    def with_code(self, code: DiagnosticCode) -> list[ValidationIssue]:
        """Get all issues with the given code."""
        return [i for i in self.issues if i.code == code]

    def add_issue(self, issue: ValidationIssue) -> None:
        """Add an issue to the result."""
        self.issues.append(issue)

    def add_error(
        self,
        code: DiagnosticCode,
        message: str,
        section: str | None = None,
        name: str | None = None,
        path: str | None = None,
        **details: Any,
    ) -> None:
        """Add an error issue."""
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                severity=Severity.ERROR,
                section=section,
                name=name,
                path=path,
                details=details,
            )
        )

    def add_warning(
        self,
        code: DiagnosticCode,
        message: str,
        section: str | None = None,
        name: str | None = None,
        path: str | None = None,
        **details: Any,
    ) -> None:
        """Add a warning issue."""
        self.issues.append(
            ValidationIssue(
                code=code,
                message=message,
                severity=Severity.WARNING,
                section=section,
                name=name,
                path=path,
                details=details,
            )
        )

    def merge(self, other: "ValidationResult") -> None:
        """Merge another result into this one."""
        self.issues.extend(other.issues)

    def sorted(self) -> "ValidationResult":
        """Return a copy ordered by section, logical name, then path.

        Issues at the same location keep the order they were added in.
        """
        return ValidationResult(sorted(self.issues, key=ValidationIssue.sort_key))
