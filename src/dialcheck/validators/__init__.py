"""Syntax validators for Asterisk-style dialplans.

Provides the line router and the per-statement checks it dispatches to,
along with the shared diagnostic models.
"""

from __future__ import annotations

from dialcheck.validators.base import (
    MESSAGES,
    Severity,
    ValidationIssue,
    ValidationState,
    ValidatorResult,
)
from dialcheck.validators.clauses import Clauses, check_priority, parse_extension, split_clauses
from dialcheck.validators.delimiters import check_balanced
from dialcheck.validators.dialplan_validator import (
    DialplanValidator,
    SourceReadError,
    classify_line,
)
from dialcheck.validators.directives import parse_context, parse_include, parse_switch
from dialcheck.validators.variables import check_variable_syntax

__all__ = [
    # Base types
    "MESSAGES",
    "Severity",
    "ValidationIssue",
    "ValidationState",
    "ValidatorResult",
    # Checks
    "Clauses",
    "check_balanced",
    "check_priority",
    "check_variable_syntax",
    "parse_context",
    "parse_extension",
    "parse_include",
    "parse_switch",
    "split_clauses",
    # Driver
    "DialplanValidator",
    "SourceReadError",
    "classify_line",
]
