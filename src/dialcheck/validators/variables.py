"""Scanner for ${...} variable references and $[...] expressions."""

from __future__ import annotations

from dialcheck.validators.base import ValidationState

# opening char after '$' -> (closing char, defect kind)
_SPANS = {
    "{": ("}", "unclosed_variable"),
    "[": ("]", "unclosed_expression"),
}


def _span_end(text: str, start: int, opener: str, closer: str) -> int | None:
    """Return the index just past the closer matching an already-open span.

    Only the span's own opener/closer pair is counted, so ``$[1+${x}]`` is
    closed by its single ``]``. Returns None if the text ends first.
    """
    depth = 1
    pos = start
    while pos < len(text) and depth > 0:
        if text[pos] == opener:
            depth += 1
        elif text[pos] == closer:
            depth -= 1
        pos += 1
    return pos if depth == 0 else None


def check_variable_syntax(text: str, state: ValidationState) -> bool:
    """Check that every ${ and $[ in text is closed.

    Every unclosed span is reported separately; scanning resumes after the
    consumed span (or at the end of text), so one bad reference does not
    hide later ones.

    Args:
        text: Span to scan.
        state: Run state receiving the diagnostics.

    Returns:
        True if no unclosed span was found.
    """
    valid = True
    pos = text.find("$")

    while pos != -1:
        opener = text[pos + 1 : pos + 2]
        if opener in _SPANS:
            closer, check = _SPANS[opener]
            end = _span_end(text, pos + 2, opener, closer)
            if end is None:
                state.error(check)
                valid = False
                break
            pos = text.find("$", end)
        else:
            pos = text.find("$", pos + 1)

    return valid
