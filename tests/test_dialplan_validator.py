"""Tests for dialcheck.validators.dialplan_validator module."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from dialcheck.config import DialcheckConfig
from dialcheck.validators import DialplanValidator, SourceReadError, classify_line

SAMPLE_DIALPLAN = """\
; sample extensions.conf
static=yes
writeprotect=no

[from-internal]
include => parkedcalls
exten => _1XXX,1,Answer()
 same => n,Set(COUNT=$[${COUNT}+1])
 same => n,Dial(SIP/${EXTEN},20,tT)
 same => n,Hangup()
exten => 100,hint,SIP/100
exten => s,1(start),Playback("hello, world")
switch => Realtime/from-internal@extensions
"""


def _lines(text: str) -> list[str]:
    return text.splitlines(keepends=True)


class TestClassifyLine:
    """Tests for line classification order."""

    @pytest.mark.parametrize(
        ("line", "in_context", "expected"),
        [
            ("[default]", False, "context"),
            ("[default]", True, "context"),
            ("static=yes", False, "assignment"),
            ("static=yes", True, "unknown"),
            ("exten => 1,1,NoOp()", False, "extension"),
            ("exten=1,1,NoOp()", False, "assignment"),
            ("exten=1,1,NoOp()", True, "extension"),
            ("SAME => n,NoOp()", True, "extension"),
            ("Include => other", True, "include"),
            ("switch => foo", True, "switch"),
            ("eswitch => foo", True, "switch"),
            ("lswitch => foo", True, "switch"),
            ("foo-bar-baz", True, "unknown"),
            ("foo-bar-baz", False, "ignored"),
            ("foo => bar", False, "ignored"),
        ],
    )
    def test_classification(self, line: str, in_context: bool, expected: str) -> None:
        """Test each line lands in exactly one category."""
        assert classify_line(line, in_context) == expected


class TestValidateLines:
    """Tests for the line-by-line driver."""

    def test_sample_dialplan_is_clean(self) -> None:
        """Test a realistic dialplan produces no diagnostics."""
        result = DialplanValidator().validate_lines(_lines(SAMPLE_DIALPLAN))
        assert result.issues == []
        assert result.status == "pass"
        assert result.is_clean
        assert result.lines_checked == len(_lines(SAMPLE_DIALPLAN))
        assert result.contexts == ["from-internal"]

    def test_context_header_only(self) -> None:
        """Test a lone header is accepted."""
        result = DialplanValidator().validate_lines(["[default]\n"])
        assert result.is_clean

    def test_valid_entry_in_context(self) -> None:
        """Test a valid entry produces zero errors."""
        result = DialplanValidator().validate_lines(["[default]\n", "exten => 100,1,Answer()\n"])
        assert result.errors == 0
        assert result.status == "pass"

    def test_unbalanced_entry_fails(self) -> None:
        """Test a missing closing paren fails the run."""
        result = DialplanValidator().validate_lines(
            ["[default]\n", "exten => 100,1,Playback(hello\n"]
        )
        assert result.errors == 1
        assert result.status == "fail"
        assert result.issues[0].format() == (
            "Line 2: Unbalanced delimiters (parens=1, brackets=0, braces=0)"
        )

    def test_continuation_entry(self) -> None:
        """Test same-lines skip the numeric priority check."""
        result = DialplanValidator().validate_lines(["[default]\n", "same => n,Hangup()\n"])
        assert result.is_clean

    def test_include_statements(self) -> None:
        """Test includes with and without targets."""
        result = DialplanValidator().validate_lines(
            ["[default]\n", "include => other-context\n", "include =>\n"]
        )
        assert result.errors == 1
        assert result.issues[0].format() == "Line 3: Empty context in include statement"

    def test_unknown_directive_is_a_warning(self) -> None:
        """Test unrecognized lines inside a context warn but pass."""
        result = DialplanValidator().validate_lines(["[default]\n", "foo-bar-baz\n"])
        assert result.errors == 0
        assert result.warnings == 1
        assert result.status == "pass"
        assert result.issues[0].severity == "warning"
        assert result.issues[0].format() == "Line 2: Warning: Unknown directive 'foo-bar-baz'"

    def test_unknown_line_before_context_is_ignored(self) -> None:
        """Test unrecognized lines before any header are not reported."""
        result = DialplanValidator().validate_lines(["foo-bar-baz\n", "[default]\n"])
        assert result.is_clean

    def test_assignments_only_before_first_context(self) -> None:
        """Test key=value lines warn once a context is open."""
        result = DialplanValidator().validate_lines(
            ["static=yes\n", "[globals]\n", "TRUNK=SIP/provider\n"]
        )
        assert result.warnings == 1
        assert result.issues[0].line == 3

    def test_malformed_header_still_opens_context(self) -> None:
        """Test lines after a malformed header are treated as inside a context."""
        result = DialplanValidator().validate_lines(["[broken\n", "foo\n"])
        assert [issue.check for issue in result.issues] == ["malformed_context", "unknown_directive"]

    def test_line_numbers_count_comments_and_blanks(self) -> None:
        """Test diagnostics carry physical line numbers."""
        lines = ["; header comment\n", "\n", "[default]\n", "   \n", "exten => 1,x,NoOp()\n"]
        result = DialplanValidator().validate_lines(lines)
        assert result.issues[0].line == 5
        assert result.lines_checked == 5

    def test_every_line_is_checked(self) -> None:
        """Test defects on several lines are all reported."""
        lines = [
            "[default]\n",
            "exten => 100\n",
            "exten 100,1,NoOp()\n",
            "switch Realtime\n",
            "include\n",
            "mystery\n",
            "exten => 1,1,Set(x=${y)\n",
        ]
        result = DialplanValidator().validate_lines(lines)
        assert [issue.format() for issue in result.issues] == [
            "Line 2: Extension must have format: exten => pattern,priority,app(args)",
            "Line 3: Missing '=>' in extension definition",
            "Line 4: Missing '=>' in switch statement",
            "Line 5: Missing '=>' in include statement",
            "Line 6: Warning: Unknown directive 'mystery'",
            "Line 7: Unbalanced delimiters (parens=0, brackets=0, braces=1)",
            "Line 7: Unclosed ${...} variable reference",
        ]
        assert result.errors == 6
        assert result.warnings == 1

    def test_validation_is_idempotent(self) -> None:
        """Test validating the same input twice gives the same diagnostics."""
        lines = ["[default]\n", "exten => 1,0,NoOp(\n", "what\n"]
        validator = DialplanValidator()
        first = validator.validate_lines(lines)
        second = validator.validate_lines(lines)
        assert first == second

    def test_strict_mode_fails_on_warnings(self) -> None:
        """Test warnings fail the run when fail_on_warnings is set."""
        validator = DialplanValidator(DialcheckConfig(fail_on_warnings=True))
        result = validator.validate_lines(["[default]\n", "foo\n"])
        assert result.errors == 0
        assert result.status == "fail"

    def test_context_name_limit_from_config(self) -> None:
        """Test the configured limit is applied to the run state."""
        validator = DialplanValidator(DialcheckConfig(context_name_limit=3))
        result = validator.validate_lines(["[abcdef]\n"])
        assert result.is_clean
        assert result.contexts == ["abc"]


class TestValidateFile:
    """Tests for validating files on disk."""

    def test_validate_file(self, write_dialplan: Callable[..., Path]) -> None:
        """Test a file is read line by line."""
        path = write_dialplan(SAMPLE_DIALPLAN)
        result = DialplanValidator().validate(path)
        assert result.is_clean
        assert result.source == str(path)

    def test_crlf_line_endings(self, write_dialplan: Callable[..., Path]) -> None:
        """Test carriage returns are trimmed away."""
        path = write_dialplan("[default]\r\nexten => 1,1,NoOp()\r\n")
        assert DialplanValidator().validate(path).is_clean

    def test_undecodable_bytes_do_not_abort(self, tmp_path: Path) -> None:
        """Test invalid UTF-8 is treated as opaque text."""
        path = tmp_path / "extensions.conf"
        path.write_bytes(b"[default]\nexten => 1,1,Playback(\xff\xfe)\n")
        assert DialplanValidator().validate(path).is_clean

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test an unreadable source raises SourceReadError."""
        missing = tmp_path / "nope.conf"
        with pytest.raises(SourceReadError, match="Cannot open file"):
            DialplanValidator().validate(missing)

    def test_directory_is_unreadable(self, tmp_path: Path) -> None:
        """Test a directory cannot be validated."""
        with pytest.raises(SourceReadError):
            DialplanValidator().validate(tmp_path)
