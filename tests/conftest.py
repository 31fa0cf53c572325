"""Pytest configuration and fixtures for dialcheck tests."""

import os
from collections.abc import Callable
from pathlib import Path

import pytest

# Set a fixed terminal width to prevent line wrapping issues in CI
# This must be set before any Rich imports
os.environ.setdefault("COLUMNS", "200")
os.environ.setdefault("LINES", "50")
# Disable Rich's terminal detection to ensure consistent output
os.environ.setdefault("TERM", "dumb")

from dialcheck.validators.base import ValidationState  # noqa: E402


@pytest.fixture
def state() -> ValidationState:
    """Fresh validation state positioned on line 1."""
    return ValidationState(line_num=1)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep DIALCHECK_* variables from the outer environment out of tests."""
    for name in list(os.environ):
        if name.startswith("DIALCHECK_"):
            monkeypatch.delenv(name)


@pytest.fixture
def write_dialplan(tmp_path: Path) -> Callable[..., Path]:
    """Write dialplan text to a file under tmp_path and return its path."""

    def _write(content: str, name: str = "extensions.conf") -> Path:
        path = tmp_path / name
        path.write_text(content)
        return path

    return _write
