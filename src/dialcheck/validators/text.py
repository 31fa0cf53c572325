"""Line normalization helpers.

Whitespace is the C-locale set so that trimming matches what other
dialplan tooling considers blank, not Python's wider Unicode notion.
"""

from __future__ import annotations

WHITESPACE = " \t\n\v\f\r"
COMMENT_MARKERS = (";", "#")


def strip_newline(raw: str) -> str:
    """Cut the record at its first newline, if any."""
    newline = raw.find("\n")
    return raw if newline == -1 else raw[:newline]


def trim(text: str) -> str:
    return text.strip(WHITESPACE)


def is_comment_or_blank(line: str) -> bool:
    """Check whether a line carries no dialplan content.

    Args:
        line: Raw line with or without its newline.

    Returns:
        True if the line is empty, all whitespace, or its first
        non-whitespace character is a comment marker.
    """
    stripped = line.lstrip(WHITESPACE)
    return not stripped or stripped.startswith(COMMENT_MARKERS)


def normalize(raw: str) -> tuple[bool, str]:
    """Condition a raw record for classification.

    Returns:
        (ignorable, trimmed) where trimmed is the line without its newline
        and surrounding whitespace.
    """
    line = strip_newline(raw)
    return is_comment_or_blank(line), trim(line)
