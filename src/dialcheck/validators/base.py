"""Diagnostic models and run state for dialplan validation.

Provides the issue/result dataclasses shared by every check, the mutable
per-run ValidationState, and the lookup table holding the exact wording of
every diagnostic the validator can emit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from dialcheck.config import DEFAULT_CONTEXT_NAME_LIMIT

Severity = Literal["error", "warning"]

# Diagnostic wording, keyed by defect kind. Placeholders are filled with
# str.format(); the text must stay byte-compatible with existing tooling that
# greps validator output.
MESSAGES: dict[str, str] = {
    "unbalanced_closing": "Unbalanced delimiters (too many closing)",
    "unclosed_quote": "Unclosed quote",
    "unbalanced_delimiters": (
        "Unbalanced delimiters (parens={parens}, brackets={brackets}, braces={braces})"
    ),
    "unclosed_variable": "Unclosed ${{...}} variable reference",
    "unclosed_expression": "Unclosed $[...] expression",
    "malformed_context": "Malformed context (missing ']')",
    "empty_context": "Empty context name",
    "extension_missing_arrow": "Missing '=>' in extension definition",
    "unknown_keyword": "Unknown keyword (expected 'exten' or 'same')",
    "extension_format": "Extension must have format: exten => pattern,priority,app(args)",
    "invalid_priority": "Invalid priority '{value}' (must be number, 'n', or 'hint')",
    "priority_range": "Priority must be >= 1",
    "include_missing_arrow": "Missing '=>' in include statement",
    "include_empty_context": "Empty context in include statement",
    "switch_missing_arrow": "Missing '=>' in switch statement",
    "unknown_directive": "Warning: Unknown directive '{text}'",
}


@dataclass
class ValidationIssue:
    """A single defect found in the dialplan source.

    Attributes:
        check: Defect kind, one of the keys of MESSAGES (e.g., "unclosed_quote").
        severity: Severity level of the issue ("error" or "warning").
        message: Exact diagnostic text.
        line: 1-based physical line number the defect was found on.
        file: Optional path of the source the line came from.
    """

    check: str
    severity: Severity
    message: str
    line: int
    file: str | None = None

    def format(self) -> str:
        """Render the issue the way it is printed on the diagnostic stream."""
        return f"Line {self.line}: {self.message}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "line": self.line,
            "check": self.check,
            "severity": self.severity,
            "message": self.message,
        }


@dataclass
class ValidatorResult:
    """Result of validating one dialplan source.

    Attributes:
        name: Name of the validator (e.g., "dialplan-validator").
        status: Overall status ("pass" or "fail").
        issues: Validation issues in source order.
        errors: Number of error-severity issues.
        warnings: Number of warning-severity issues.
        lines_checked: Number of physical lines read.
        source: Name of the source that was validated.
        contexts: Context names in the order their headers appeared.
    """

    name: str
    status: Literal["pass", "fail"]
    issues: list[ValidationIssue]
    errors: int
    warnings: int
    lines_checked: int
    source: str = ""
    contexts: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        """True when the source produced no diagnostics at all."""
        return self.errors == 0 and self.warnings == 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "source": self.source,
            "status": self.status,
            "errors": self.errors,
            "warnings": self.warnings,
            "lines_checked": self.lines_checked,
            "contexts": list(self.contexts),
            "issues": [issue.to_dict() for issue in self.issues],
        }


@dataclass
class ValidationState:
    """Mutable accumulator for one validation run.

    Owned by the driver and handed to every parser it calls. Counters only
    ever grow; line_num is advanced by the driver before each line is
    classified so diagnostics carry the physical line number.

    Attributes:
        errors: Number of errors recorded so far.
        warnings: Number of warnings recorded so far.
        line_num: 1-based number of the line being processed (0 before the first).
        current_context: Name of the most recent section header, "" until one is seen.
        context_name_limit: Maximum number of characters kept in current_context.
        source: Name of the source, copied onto every issue.
        contexts: Every context name stored, in order.
        issues: Every issue recorded, in the order found.
    """

    errors: int = 0
    warnings: int = 0
    line_num: int = 0
    current_context: str = ""
    context_name_limit: int = DEFAULT_CONTEXT_NAME_LIMIT
    source: str | None = None
    issues: list[ValidationIssue] = field(default_factory=list)
    contexts: list[str] = field(default_factory=list)

    def error(self, check: str, **params: Any) -> ValidationIssue:
        """Record an error of the given kind on the current line."""
        self.errors += 1
        return self._record(check, "error", params)

    def warning(self, check: str, **params: Any) -> ValidationIssue:
        """Record a warning of the given kind on the current line."""
        self.warnings += 1
        return self._record(check, "warning", params)

    def set_context(self, name: str) -> None:
        self.current_context = name[: self.context_name_limit]
        self.contexts.append(self.current_context)

    def _record(self, check: str, severity: Severity, params: dict[str, Any]) -> ValidationIssue:
        issue = ValidationIssue(
            check=check,
            severity=severity,
            message=MESSAGES[check].format(**params),
            line=self.line_num,
            file=self.source,
        )
        self.issues.append(issue)
        return issue
