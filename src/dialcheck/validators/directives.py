"""Parsers for context headers, include statements and switch clauses."""

from __future__ import annotations

from dialcheck.validators.base import ValidationState
from dialcheck.validators.clauses import ARROW
from dialcheck.validators.text import trim

INCLUDE_KEYWORDS = ("include",)
SWITCH_KEYWORDS = ("switch", "eswitch", "lswitch")


def parse_context(line: str, state: ValidationState) -> bool:
    """Parse a ``[name]`` header and make it the current context.

    The name is the text between the leading ``[`` and the first ``]``;
    anything after the ``]`` (such as template markers) is ignored.

    Args:
        line: Trimmed line starting with ``[``.
        state: Run state to update.

    Returns:
        True if a non-empty name was found and stored.
    """
    end = line.find("]")
    if end == -1:
        state.error("malformed_context")
        return False

    name = trim(line[1:end])
    if not name:
        state.error("empty_context")
        return False

    state.set_context(name)
    return True


def parse_include(line: str, state: ValidationState) -> bool:
    """Check ``include => context`` has an arrow and a non-empty target."""
    arrow = line.find(ARROW)
    if arrow == -1:
        state.error("include_missing_arrow")
        return False

    if not trim(line[arrow + len(ARROW) :]):
        state.error("include_empty_context")
        return False

    return True


def parse_switch(line: str, state: ValidationState) -> bool:
    """Check a switch/eswitch/lswitch clause. Only the arrow is required."""
    if ARROW not in line:
        state.error("switch_missing_arrow")
        return False
    return True
