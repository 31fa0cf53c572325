"""Delimiter balance checking for application argument lists."""

from __future__ import annotations

from dialcheck.validators.base import ValidationState

QUOTES = ('"', "'")

_OPENERS = {"(": "parens", "[": "brackets", "{": "braces"}
_CLOSERS = {")": "parens", "]": "brackets", "}": "braces"}


def check_balanced(text: str, state: ValidationState) -> bool:
    """Check that (), [] and {} are matched outside quoted regions.

    A closing quote only ends the quoted region when the character right
    before it is not a backslash. Only one character is looked back, so a
    quote preceded by an escaped backslash (``\\\\"``) stays open.

    Reports at most one error: the first closing delimiter that has no
    opener, an unterminated quote, or non-zero counts at the end.

    Args:
        text: Span to scan, usually an application call such as ``Dial(SIP/100,20)``.
        state: Run state receiving the diagnostic.

    Returns:
        True if the span is balanced.
    """
    counts = {"parens": 0, "brackets": 0, "braces": 0}
    quote_char = ""

    for i, ch in enumerate(text):
        if quote_char:
            if ch == quote_char and text[i - 1] != "\\":
                quote_char = ""
            continue

        if ch in QUOTES:
            quote_char = ch
        elif ch in _OPENERS:
            counts[_OPENERS[ch]] += 1
        elif ch in _CLOSERS:
            counts[_CLOSERS[ch]] -= 1
            if counts[_CLOSERS[ch]] < 0:
                state.error("unbalanced_closing")
                return False

    if quote_char:
        state.error("unclosed_quote")
        return False

    if any(counts.values()):
        state.error("unbalanced_delimiters", **counts)
        return False

    return True
