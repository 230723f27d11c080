"""Tests for script loading, comment stripping and minver checks."""

import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from appetit.core.errors import AppetitError, ErrorCategory
from appetit.engine.preprocessor import (
    is_shebang,
    load_script,
    prepare_script,
    strip_comments,
    validate_minver,
)


class TestStripComments:
    """Test comment and blank line normalisation."""

    def test_line_count_preserved(self):
        """Output always has as many lines as input."""
        lines = ["- note", "  - indented note", "", "   ", 'writeln "x"']

        assert len(strip_comments(lines)) == len(lines)

    def test_comments_become_marker(self):
        """Comment lines (after trimming) become '-'."""
        assert strip_comments(["- note", "   - indented"]) == ["-", "-"]

    def test_blank_lines_become_space(self):
        """Empty and whitespace-only lines become a single space."""
        assert strip_comments(["", "\t  "]) == [" ", " "]

    def test_code_untouched(self):
        """Other lines are returned as-is, indentation included."""
        lines = ['  writeln "x"', "exit"]

        assert strip_comments(lines) == lines


class TestShebang:
    """Test shebang detection."""

    def test_shebang(self):
        assert is_shebang("#!/usr/bin/appetit")

    def test_not_shebang(self):
        assert not is_shebang("# heading")
        assert not is_shebang(' #!/usr/bin/appetit')


class TestValidateMinver:
    """Test minver placement and count checks."""

    def test_no_minver(self):
        """Scripts without minver are fine."""
        assert validate_minver(['writeln "x"', "exit"]) == (True, "")

    def test_minver_first(self):
        """minver on the first statement line is fine."""
        assert validate_minver(["minver 1", 'writeln "x"']) == (True, "")

    def test_minver_after_comments_and_blanks(self):
        """Comment and blank lines before minver are ignored."""
        lines = strip_comments(["- header", "", "minver 1", "exit"])

        assert validate_minver(lines) == (True, "")

    def test_minver_after_shebang(self):
        """minver may follow a shebang line."""
        lines = ["#!/usr/bin/appetit", "minver 1", "exit"]

        assert validate_minver(lines) == (True, "")

    def test_multiple_minver(self):
        """More than one minver reports the count."""
        ok, message = validate_minver(["minver 1", "exit", "minver 1"])

        assert not ok
        assert "specifically 2" in message

    def test_misplaced_minver(self):
        """minver after another statement is rejected."""
        ok, message = validate_minver(['writeln "x"', "minver 1"])

        assert not ok
        assert "Move your minver statement to the top" in message

    def test_second_without_shebang(self):
        """minver second is only allowed after a shebang."""
        ok, _ = validate_minver(['write "x"', "minver 1"])

        assert not ok


class TestLoadScript:
    """Test reading scripts from disk."""

    def test_load_splits_lines(self, tmp_path):
        """Content is split on newlines; a trailing newline gives a blank line."""
        script = tmp_path / "hello.apt"
        script.write_text('minver 1\nwriteln "Hello"\n')

        assert load_script(str(script)) == ["minver 1", 'writeln "Hello"', ""]

    def test_missing_file(self, tmp_path):
        """Missing scripts raise an unknown-file error."""
        path = str(tmp_path / "missing.apt")

        with pytest.raises(AppetitError) as exc_info:
            load_script(path)

        assert exc_info.value.message == f"Unknown file: {path}."
        assert exc_info.value.category == ErrorCategory.RUNTIME
        assert exc_info.value.line_number is None

    def test_prepare_strips(self, tmp_path):
        """prepare_script loads and normalises in one step."""
        script = tmp_path / "script.apt"
        script.write_text("- comment\n\nexit")

        assert prepare_script(str(script)) == ["-", " ", "exit"]
