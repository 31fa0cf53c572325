"""Dialplan validator: classifies each line and dispatches it to its parser.

Lines are routed in a fixed priority order:

1. ``[name]`` context headers
2. ``key=value`` assignments, only before the first header
3. ``exten``/``same`` entries
4. ``include`` statements
5. ``switch``/``eswitch``/``lswitch`` clauses
6. anything else, which is a warning inside a context and ignored before one
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Literal

from dialcheck.config import DialcheckConfig
from dialcheck.validators.base import ValidationState, ValidatorResult
from dialcheck.validators.clauses import ARROW, ENTRY_KEYWORDS, match_keyword, parse_extension
from dialcheck.validators.directives import (
    INCLUDE_KEYWORDS,
    SWITCH_KEYWORDS,
    parse_context,
    parse_include,
    parse_switch,
)
from dialcheck.validators.text import normalize

LineKind = Literal["context", "assignment", "extension", "include", "switch", "unknown", "ignored"]

_PARSERS: dict[str, Callable[[str, ValidationState], bool]] = {
    "extension": parse_extension,
    "include": parse_include,
    "switch": parse_switch,
}


class SourceReadError(Exception):
    """Raised when the dialplan source cannot be opened or read."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open file '{path}'")


def classify_line(line: str, in_context: bool) -> LineKind:
    """Decide which kind of statement a trimmed, non-blank line is.

    Args:
        line: Trimmed line with comments and blanks already filtered out.
        in_context: Whether a context header has been seen yet.

    Returns:
        The line kind; "ignored" for unrecognized lines before any header.
    """
    if line.startswith("["):
        return "context"
    if not in_context and "=" in line and ARROW not in line:
        return "assignment"
    if match_keyword(line, ENTRY_KEYWORDS):
        return "extension"
    if match_keyword(line, INCLUDE_KEYWORDS):
        return "include"
    if match_keyword(line, SWITCH_KEYWORDS):
        return "switch"
    return "unknown" if in_context else "ignored"


class DialplanValidator:
    """Validate the syntax of one extensions.conf style source.

    Every line is checked, whatever was found on earlier lines; all
    diagnostics end up in the returned ValidatorResult in source order.

    Attributes:
        name: Validator name reported in results.
        config: Settings controlling context-name length and strictness.
    """

    name = "dialplan-validator"

    def __init__(self, config: DialcheckConfig | None = None) -> None:
        """Initialize validator.

        Args:
            config: Settings to use. Defaults to DialcheckConfig().
        """
        self.config = config or DialcheckConfig()

    def validate(self, path: Path) -> ValidatorResult:
        """Validate the file at path.

        Lines are split on ``\\n`` only and decoded leniently; undecodable
        bytes never abort the run.

        Raises:
            SourceReadError: If the file cannot be opened or read. No
                diagnostics are produced in that case.
        """
        try:
            with open(path, "rb") as f:
                raw_lines = [raw.decode("utf-8", errors="replace") for raw in f]
        except OSError as e:
            raise SourceReadError(path, e.strerror or str(e)) from e

        return self.validate_lines(raw_lines, source=str(path))

    def validate_lines(self, lines: Iterable[str], source: str = "<string>") -> ValidatorResult:
        """Validate a sequence of raw lines, in order.

        Args:
            lines: Raw records, with or without trailing newlines.
            source: Name used in issues and in the result.

        Returns:
            ValidatorResult with every issue found.
        """
        state = ValidationState(
            context_name_limit=self.config.context_name_limit,
            source=source,
        )
        in_context = False

        for raw in lines:
            state.line_num += 1
            ignorable, line = normalize(raw)
            if ignorable:
                continue

            kind = classify_line(line, in_context)
            if kind == "context":
                parse_context(line, state)
                # a malformed header still opens a context
                in_context = True
            elif kind in _PARSERS:
                _PARSERS[kind](line, state)
            elif kind == "unknown":
                state.warning("unknown_directive", text=line)

        return self._build_result(state)

    def _build_result(self, state: ValidationState) -> ValidatorResult:
        failed = state.errors > 0 or (self.config.fail_on_warnings and state.warnings > 0)
        return ValidatorResult(
            name=self.name,
            status="fail" if failed else "pass",
            issues=list(state.issues),
            errors=state.errors,
            warnings=state.warnings,
            lines_checked=state.line_num,
            source=state.source or "",
            contexts=list(state.contexts),
        )
