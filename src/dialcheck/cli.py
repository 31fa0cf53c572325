"""dialcheck CLI - Main entry point."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, NoReturn

import typer
from rich.console import Console

from dialcheck import __version__
from dialcheck.config import DialcheckConfig, load_config
from dialcheck.validators import DialplanValidator, SourceReadError, ValidatorResult

app = typer.Typer(
    name="dialcheck",
    help="Static syntax checker for Asterisk extensions.conf dialplans.",
    add_completion=False,
)

# Unknown options are collected with the sources so they end in the usage text.
CHECK_CONTEXT_SETTINGS = {"ignore_unknown_options": True}

# Rich console for JSON output; text lines go through typer.echo unprocessed
console = Console()

# Exit code conventions
EXIT_SUCCESS = 0
EXIT_USER_ERROR = 1  # Errors found, unreadable source, bad usage or config

USAGE_LINES = (
    "Usage: dialcheck <extensions.conf>",
    "Example: dialcheck /etc/asterisk/extensions-test.conf",
)


# -----------------------------------------------------------------------------
# Output Helpers
# -----------------------------------------------------------------------------


def _output_error(message: str) -> None:
    """Print an error message to stderr."""
    styled_prefix = typer.style("Error:", fg=typer.colors.RED, bold=True)
    typer.echo(f"{styled_prefix} {message}", err=True)


def _output_diagnostic(text: str) -> None:
    """Print a diagnostic line to stderr exactly as given."""
    typer.echo(text, err=True)


def _output_info(message: str) -> None:
    """Print a plain line to stdout exactly as given."""
    typer.echo(message)


def _exit_error(message: str, exit_code: int = EXIT_USER_ERROR) -> NoReturn:
    """Print error and exit."""
    _output_error(message)
    raise typer.Exit(code=exit_code)


def _exit_usage() -> NoReturn:
    for line in USAGE_LINES:
        _output_diagnostic(line)
    raise typer.Exit(code=EXIT_USER_ERROR)


def _print_report(result: ValidatorResult) -> None:
    """Print diagnostics to stderr and the summary to stdout."""
    for issue in result.issues:
        _output_diagnostic(issue.format())

    _output_info("")
    if result.is_clean:
        check_mark = typer.style("✓", fg=typer.colors.GREEN)
        _output_info(f"{check_mark} Syntax valid: {result.source}")
    else:
        _output_info(
            f"Validation complete: {result.errors} error(s), {result.warnings} warning(s)"
        )


def _wire_config(source: Path, strict: bool) -> DialcheckConfig:
    """Load configuration for a run, looking for config files next to the source."""
    cli_overrides: dict[str, Any] = {}
    if strict:
        cli_overrides["fail_on_warnings"] = True

    try:
        return load_config(cli_overrides=cli_overrides, start_dir=source.resolve().parent)
    except ValueError as e:
        _exit_error(f"Invalid configuration: {e}")


# -----------------------------------------------------------------------------
# Version Callback
# -----------------------------------------------------------------------------


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dialcheck version {__version__}")
        raise typer.Exit()


# -----------------------------------------------------------------------------
# Check Command
# -----------------------------------------------------------------------------


@app.command(context_settings=CHECK_CONTEXT_SETTINGS)
def check(
    sources: list[str] | None = typer.Argument(
        None,
        help="Dialplan file to validate, e.g. /etc/asterisk/extensions.conf.",
        show_default=False,
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output the result as JSON instead of the text report.",
    ),
    strict: bool = typer.Option(
        False,
        "--strict",
        help="Fail (exit 1) on warnings as well as errors.",
    ),
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit.",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """Check the syntax of a dialplan file.

    Every defect is reported as 'Line N: message' on stderr, followed by a
    summary on stdout. Errors make the command exit with status 1; warnings
    (unknown directives inside a context) do not, unless --strict is given.
    """
    if not sources or len(sources) != 1 or sources[0].startswith("-"):
        _exit_usage()

    source = Path(sources[0])
    config = _wire_config(source, strict)

    try:
        result = DialplanValidator(config).validate(source)
    except SourceReadError as e:
        _exit_error(str(e))

    if json_output:
        console.print_json(json.dumps(result.to_dict()))
    else:
        _print_report(result)

    if result.status == "fail":
        raise typer.Exit(code=EXIT_USER_ERROR)
