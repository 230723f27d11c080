"""Tests for diagnostic formatting."""

import io
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from appetit.core.errors import AppetitError, StatementError, StructureError
from appetit.engine.diagnostics import LOC_TITLE, RED, DiagnosticFormatter


class TestDiagnosticFormatter:
    """Test the [Error] block layout."""

    @pytest.fixture
    def formatter(self):
        return DiagnosticFormatter(colour=False)

    def test_general_error(self, formatter):
        """Errors without a line get a bare header."""
        error = StructureError("Move your minver statement to the top.")

        assert formatter.format_error(error) == (
            "[Error]\n\nMove your minver statement to the top."
        )

    def test_positioned_error(self, formatter):
        """Positioned errors point a caret at the column."""
        error = StatementError(
            "Bad name",
            line_number=3,
            position="5",
            full_line='set b_x = "1"',
        )

        lines = formatter.format_error(error).split("\n")

        assert lines[0] == "[Error on line 3, position 5]"
        assert lines[2] == LOC_TITLE + 'set b_x = "1"'
        assert lines[3] == " " * (len(LOC_TITLE) + 4) + "^"
        assert lines[3].index("^") == lines[2].index("b_x")
        assert lines[5] == "Bad name"

    def test_line_only_error(self, formatter):
        """n/a positions echo the line without a caret."""
        error = StatementError(
            "Wrong arity",
            line_number=2,
            full_line="set name",
        )

        assert formatter.format_error(error) == (
            "[Error on line 2]\n\nLine of Code: set name\n\nWrong arity"
        )

    def test_first_column_caret(self, formatter):
        """Column 1 puts the caret under the first character."""
        text = formatter.format_location("bogus", 1)

        assert text.split("\n")[1] == " " * len(LOC_TITLE) + "^"

    def test_colour(self):
        """Colour wraps the header in ANSI codes."""
        formatter = DiagnosticFormatter(colour=True)

        assert formatter.format_header(1, 2).startswith(RED)
        assert formatter.format_header(1, 2).endswith("\033[0m")

    def test_emit(self, formatter):
        """emit() surrounds the block with blank lines."""
        stream = io.StringIO()

        formatter.emit(AppetitError("boom"), stream)

        assert stream.getvalue() == "\n[Error]\n\nboom\n\n"
