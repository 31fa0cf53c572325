"""Settings for a dialcheck run.

Two knobs exist: how much of a context name is kept, and whether warnings
fail the run. Each can come from the command line, a DIALCHECK_* variable,
a .dialcheckrc file or pyproject.toml, in that order of strength.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

# tomllib is only available in Python 3.11+
if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found]

# Context names longer than this are truncated when stored.
DEFAULT_CONTEXT_NAME_LIMIT = 79

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


@dataclass
class DialcheckConfig:
    """Resolved dialcheck settings.

    Attributes:
        context_name_limit: Characters of a context name kept in the run state.
        fail_on_warnings: Exit 1 when only warnings were found (--strict).
    """

    context_name_limit: int = DEFAULT_CONTEXT_NAME_LIMIT
    fail_on_warnings: bool = False

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Raise ValueError for a wrongly typed or out-of-range setting."""
        # bool is an int subclass, reject it explicitly
        if isinstance(self.context_name_limit, bool) or not isinstance(self.context_name_limit, int):
            raise ValueError("context_name_limit must be an integer")
        if self.context_name_limit < 1:
            raise ValueError("context_name_limit must be >= 1")

        if not isinstance(self.fail_on_warnings, bool):
            raise ValueError("fail_on_warnings must be a boolean")


def _config_keys() -> set[str]:
    return {f.name for f in fields(DialcheckConfig)}


def find_config_file(filename: str = ".dialcheckrc", start_dir: Path | None = None) -> Path | None:
    """Return the nearest ``filename`` at or above start_dir, or None.

    The walk begins in start_dir (the working directory when omitted) and
    stops at the filesystem root. A dialplan under /etc/asterisk therefore
    picks up /etc/asterisk/.dialcheckrc before /etc/.dialcheckrc.
    """
    directory = (start_dir or Path.cwd()).resolve()

    for candidate_dir in (directory, *directory.parents):
        candidate = candidate_dir / filename
        if candidate.is_file():
            return candidate
    return None


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        data: dict[str, Any] = tomllib.load(f)
        return data


def _read_settings(filename: str, start_dir: Path | None, table: tuple[str, ...] = ()) -> dict[str, Any]:
    """Known dialcheck keys from the nearest ``filename``, optionally under a nested table.

    Unreadable or malformed files count as absent.
    """
    path = find_config_file(filename, start_dir)
    if path is None:
        return {}

    try:
        section = _read_toml(path)
    except (tomllib.TOMLDecodeError, OSError):
        return {}

    for key in table:
        section = section.get(key, {})
        if not isinstance(section, dict):
            return {}
    known = _config_keys()
    return {k: v for k, v in section.items() if k in known}


def _load_from_dialcheckrc(start_dir: Path | None = None) -> dict[str, Any]:
    """Settings from a top-level ``.dialcheckrc`` TOML file."""
    return _read_settings(".dialcheckrc", start_dir)


def _load_from_pyproject(start_dir: Path | None = None) -> dict[str, Any]:
    """Settings from the ``[tool.dialcheck]`` table of pyproject.toml."""
    return _read_settings("pyproject.toml", start_dir, table=("tool", "dialcheck"))


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {value!r}")


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


# Environment variable -> (config key, parser)
_ENV_SETTINGS = {
    "DIALCHECK_CONTEXT_NAME_LIMIT": ("context_name_limit", _parse_int),
    "DIALCHECK_FAIL_ON_WARNINGS": ("fail_on_warnings", _parse_bool),
}


def _load_from_env() -> dict[str, Any]:
    """Settings from ``DIALCHECK_*`` variables, converted to their field types.

    A value that does not convert raises ValueError rather than being ignored.
    """
    result: dict[str, Any] = {}
    for env_var, (key, parse) in _ENV_SETTINGS.items():
        raw = os.environ.get(env_var)
        if raw is not None:
            result[key] = parse(env_var, raw)
    return result


def _merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
    """Fold layers from lowest to highest precedence; None never overrides."""
    result: dict[str, Any] = {}
    for config in configs:
        result.update({k: v for k, v in config.items() if v is not None})
    return result


def load_config(
    cli_overrides: dict[str, Any] | None = None,
    start_dir: Path | None = None,
) -> DialcheckConfig:
    """Resolve the settings for one run.

    Layers, strongest first: cli_overrides, DIALCHECK_* variables,
    .dialcheckrc, pyproject.toml [tool.dialcheck], then the dataclass
    defaults. Config files are looked up from start_dir upwards; the CLI
    passes the directory of the dialplan being checked.

    Raises:
        ValueError: If an environment value does not parse or the merged
            settings fail DialcheckConfig validation.
    """
    known = _config_keys()
    cli_config = {k: v for k, v in (cli_overrides or {}).items() if k in known}

    merged = _merge_configs(
        _load_from_pyproject(start_dir),
        _load_from_dialcheckrc(start_dir),
        _load_from_env(),
        cli_config,
    )
    return DialcheckConfig(**merged)
