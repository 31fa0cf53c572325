"""Parsing of extension entries: ``exten => pattern,priority,app(args)``.

An entry is split into its three clauses at the first two top-level commas,
then checked in a fixed order. The first structural fault is reported and
ends the checks for that line; variable references are scanned whenever the
clauses could be located at all.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from dialcheck.validators.base import ValidationState
from dialcheck.validators.delimiters import check_balanced
from dialcheck.validators.text import trim
from dialcheck.validators.variables import check_variable_syntax

ARROW = "=>"
ENTRY_KEYWORDS = ("exten", "same")

# Leading integer the way strtol(..., 10) reads it: optional sign, ASCII digits.
_LEADING_INT = re.compile(r"[+-]?[0-9]+")


@dataclass
class Clauses:
    """The three comma-separated parts of an entry, trimmed.

    Attributes:
        pattern: Extension pattern (e.g., "_1XXX", "100", "s").
        priority: Priority text (e.g., "1", "n", "hint", "2(label)").
        action: Application call, including any further commas (e.g., "Dial(SIP/100,20)").
    """

    pattern: str
    priority: str
    action: str


def find_top_level_commas(data: str, limit: int = 2) -> list[int]:
    """Return positions of up to ``limit`` commas outside () and [] groups.

    Depths are plain counters with no quote awareness and may go negative;
    a comma only counts while both are exactly zero.
    """
    positions: list[int] = []
    parens = brackets = 0

    for i, ch in enumerate(data):
        if ch == "(":
            parens += 1
        elif ch == ")":
            parens -= 1
        elif ch == "[":
            brackets += 1
        elif ch == "]":
            brackets -= 1
        elif ch == "," and parens == 0 and brackets == 0:
            positions.append(i)
            if len(positions) == limit:
                break

    return positions


def split_clauses(data: str, state: ValidationState, is_continuation: bool = False) -> Clauses | None:
    """Split entry data into pattern, priority and action.

    A continuation (``same``) entry inherits the previous pattern, so its data
    is only ``priority,action`` and the pattern comes back empty.

    Args:
        data: Trimmed text following the ``=>`` token.
        state: Run state receiving the diagnostic.
        is_continuation: Whether the entry is a ``same`` line.

    Returns:
        Clauses on success, None (with an error recorded) if too few
        top-level commas exist.
    """
    needed = 1 if is_continuation else 2
    commas = find_top_level_commas(data, limit=needed)
    if len(commas) < needed:
        state.error("extension_format")
        return None

    if is_continuation:
        (first,) = commas
        return Clauses(pattern="", priority=trim(data[:first]), action=trim(data[first + 1 :]))

    first, second = commas
    return Clauses(
        pattern=trim(data[:first]),
        priority=trim(data[first + 1 : second]),
        action=trim(data[second + 1 :]),
    )


def parse_priority(priority: str) -> tuple[int, str]:
    """Read a leading base-10 integer from priority.

    Returns:
        (value, rest). When no digits are present the value is 0 and rest is
        the whole input.
    """
    match = _LEADING_INT.match(priority)
    if match is None:
        return 0, priority
    return int(match.group()), priority[match.end() :]


def check_priority(priority: str, state: ValidationState) -> bool:
    """Validate the priority clause of a full (``exten``) entry.

    ``hint`` and ``n`` are accepted verbatim. Otherwise the clause must be an
    integer >= 1; text after the numeral is tolerated only when it begins with
    ``(``, as in labelled priorities like ``1(start)``. The label group
    itself is not checked.
    """
    if priority in ("hint", "n"):
        return True

    value, rest = parse_priority(priority)
    if rest and not rest.startswith("("):
        state.error("invalid_priority", value=priority)
        return False
    if value < 1:
        state.error("priority_range")
        return False
    return True


def match_keyword(line: str, keywords: tuple[str, ...]) -> str | None:
    """Return the keyword line starts with, compared case-insensitively."""
    lowered = line.lower()
    for keyword in keywords:
        if lowered.startswith(keyword):
            return keyword
    return None


def parse_extension(line: str, state: ValidationState) -> bool:
    """Validate an ``exten``/``same`` entry line.

    Args:
        line: Trimmed source line.
        state: Run state receiving the diagnostics.

    Returns:
        True if the entry's structure was accepted. Findings of the variable
        scan do not affect the return value.
    """
    arrow = line.find(ARROW)
    if arrow == -1:
        state.error("extension_missing_arrow")
        return False

    keyword = match_keyword(trim(line), ENTRY_KEYWORDS)
    if keyword is None:
        state.error("unknown_keyword")
        return False

    is_continuation = keyword == "same"
    data = trim(line[arrow + len(ARROW) :])
    clauses = split_clauses(data, state, is_continuation)
    if clauses is None:
        return False

    accepted = _check_clauses(clauses, is_continuation=is_continuation, state=state)
    check_variable_syntax(data, state)
    return accepted


def _check_clauses(clauses: Clauses, *, is_continuation: bool, state: ValidationState) -> bool:
    # priority grammar applies to 'exten' lines only
    if not is_continuation and not check_priority(clauses.priority, state):
        return False

    if clauses.action and "(" in clauses.action:
        return check_balanced(clauses.action, state)
    return True
