"""Validation result data structures.

These classes capture the output of validation rules and aggregate
them into reports for CLI display and JSON export.

Outcomes are immutable: adding a diagnostic returns a new outcome.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any


class Severity(Enum):
    """Severity level for diagnostics.

    ERROR: The bundle does not meet the publishing criteria
    WARNING: Non-blocking issue
    """

    ERROR = "error"
    WARNING = "warning"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Diagnostic:
    """A single finding produced by a rule.

    Attributes:
        severity: ERROR or WARNING.
        message: Human-readable description of the problem.
        name: Name of the object the finding is about (CSV name), may be empty.
    """

    severity: Severity
    message: str
    name: str = ""

    def __str__(self) -> str:
        return f"{self.severity.label}: Value : ({self.name}) {self.message}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "severity": self.severity.value,
            "name": self.name,
            "message": self.message,
        }


@dataclass(frozen=True)
class PolicyOutcome:
    """Result of running one rule against one object.

    Attributes:
        name: Name of the validated bundle ("" when there was no bundle).
        errors: Error diagnostics, in the order they were produced.
        warnings: Warning diagnostics, in the order they were produced.
    """

    name: str = ""
    errors: tuple[Diagnostic, ...] = ()
    warnings: tuple[Diagnostic, ...] = ()

    @property
    def passed(self) -> bool:
        """True if there are no errors."""
        return not self.errors

    def with_name(self, name: str) -> PolicyOutcome:
        return replace(self, name=name)

    def with_error(self, message: str, name: str = "") -> PolicyOutcome:
        """Return a new outcome with one more error."""
        diagnostic = Diagnostic(Severity.ERROR, message, name)
        return replace(self, errors=(*self.errors, diagnostic))

    def with_warning(self, message: str, name: str = "") -> PolicyOutcome:
        """Return a new outcome with one more warning."""
        diagnostic = Diagnostic(Severity.WARNING, message, name)
        return replace(self, warnings=(*self.warnings, diagnostic))

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "name": self.name,
            "passed": self.passed,
            "errors": [str(d) for d in self.errors],
            "warnings": [str(d) for d in self.warnings],
        }


@dataclass
class ValidationReport:
    """Aggregate of all outcomes from one validation run.

    Attributes:
        outcomes: Outcomes in object-then-rule order.
    """

    outcomes: list[PolicyOutcome] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        """True if no outcome has errors."""
        return all(o.passed for o in self.outcomes)

    @property
    def errors(self) -> list[Diagnostic]:
        """Return every error across outcomes."""
        return [d for o in self.outcomes for d in o.errors]

    @property
    def warnings(self) -> list[Diagnostic]:
        """Return every warning across outcomes."""
        return [d for o in self.outcomes for d in o.warnings]

    def to_dict(self) -> dict[str, Any]:
        """Convert to JSON-serializable dict for --json output."""
        return {
            "passed": self.passed,
            "error_count": len(self.errors),
            "warning_count": len(self.warnings),
            "outcomes": [o.to_dict() for o in self.outcomes],
        }
