"""Tests for the interpreter driver and dispatcher."""

import io
import os
import sys

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from appetit.core.config import InterpreterConfig
from appetit.core.errors import (
    ExecutionError,
    LexicalError,
    NO_POSITION,
    StatementError,
    StructureError,
)
from appetit.engine.preprocessor import strip_comments
from appetit.engine.tokenizer import tokenize
from appetit.interpreter import Interpreter


class TestInterpreter:
    """Test running whole scripts."""

    @pytest.fixture
    def interpreter(self):
        return Interpreter(stdin=io.StringIO(), stdout=io.StringIO())

    def output(self, interpreter):
        return interpreter.context.stdout.getvalue()

    def test_run_file(self, interpreter, tmp_path):
        """A complete script runs top to bottom."""
        script = tmp_path / "hello.apt"
        script.write_text(
            "#!/usr/bin/appetit\n"
            "minver 1\n"
            "\n"
            "- Say hello\n"
            'set lang = "Appetit"\n'
            'set version = "1"\n'
            'writeln "Hello from #lang v#version!"\n'
        )

        interpreter.run_file(str(script))

        assert self.output(interpreter) == "Hello from Appetit v1!\n"
        assert interpreter.context.shebang_present

    def test_no_shebang(self, interpreter):
        interpreter.run_lines(['writeln "x"'])

        assert not interpreter.context.shebang_present

    def test_unknown_statement(self, interpreter):
        """Unknown keywords list the valid statements."""
        lines = strip_comments(["minver 1", "- comment", "bogus thing"])

        with pytest.raises(StatementError) as exc_info:
            interpreter.run_lines(lines)

        error = exc_info.value
        assert error.line_number == 3
        assert error.position == "1"
        assert error.full_line == "bogus thing"
        assert "The statement passed - bogus - is not a valid statement" in error.message
        assert "ask, copydirectory, copyfile, deletedirectory" in error.message

    def test_indented_unknown_statement(self, interpreter):
        """The caret column follows indentation."""
        with pytest.raises(StatementError) as exc_info:
            interpreter.run_lines(["   bogus"])

        assert exc_info.value.position == "4"

    def test_lexical_error_line(self, interpreter):
        """Lines before a lexical error have already run."""
        with pytest.raises(LexicalError) as exc_info:
            interpreter.run_lines(['writeln "ok"', 'writeln "oops'])

        assert exc_info.value.line_number == 2
        assert exc_info.value.position == NO_POSITION
        assert self.output(interpreter) == "ok\n"

    def test_misplaced_minver(self, interpreter):
        """minver problems stop the script before anything runs."""
        with pytest.raises(StructureError) as exc_info:
            interpreter.run_lines(['writeln "early"', "minver 1"])

        assert exc_info.value.line_number is None
        assert self.output(interpreter) == ""

    def test_statement_errors_located(self, interpreter, tmp_path):
        """Runtime errors carry the failing line."""
        line = f'deletefile "{tmp_path / "missing.txt"}"'

        with pytest.raises(ExecutionError) as exc_info:
            interpreter.run_lines([" ", line])

        assert exc_info.value.line_number == 2
        assert exc_info.value.full_line == line

    def test_token_tree(self, interpreter):
        """Every non-comment line is recorded, blank lines included."""
        interpreter.run_lines(strip_comments(["- c", 'writeln "a"', ""]))

        tree = interpreter.context.token_tree
        assert len(tree) == 4
        assert [t.non_comment_line_number for t in tree] == [1, 1, 1, 2]
        assert [t.line_number for t in tree] == [2, 2, 2, 3]


class TestDispatch:
    """Test dispatching single lines."""

    @pytest.fixture
    def interpreter(self):
        return Interpreter(stdout=io.StringIO())

    def test_returns_value(self, interpreter):
        """Statements return their value."""
        assert interpreter.dispatch(tokenize('set x = "1+1"', 1, 1)) == "2"

    def test_blank_line(self, interpreter):
        assert interpreter.dispatch(tokenize(" ", 1, 1)) is None

    def test_shebang_line(self, interpreter):
        """Shebang lines set the flag and do nothing else."""
        assert interpreter.dispatch(tokenize("#!/usr/bin/appetit", 1, 1)) is None
        assert interpreter.context.shebang_present

    def test_clock_refreshed(self, interpreter, monkeypatch):
        """The clock is refreshed before each non-blank line."""
        calls = []
        monkeypatch.setattr(
            interpreter.context.variables, "refresh_clock",
            lambda: calls.append(1),
        )

        interpreter.run_lines(['write "a"', " ", 'write "b"'])

        assert len(calls) == 2


class TestDeveloperMode:
    """Test --dev token printing."""

    @pytest.fixture
    def interpreter(self):
        return Interpreter(
            config=InterpreterConfig(dev=True),
            stdout=io.StringIO(),
        )

    def test_prints_tokens(self, interpreter):
        """Tokens are printed and the statement isn't run."""
        interpreter.run_lines(['writeln "Hi"'])

        text = interpreter.context.stdout.getvalue()
        assert text.startswith("\n\nLine 1\n")
        assert '  :: Full Line of Code: writeln "Hi"\n' in text
        assert "  :: Position: 9\n" in text
        assert "  :: Type: string\n" in text
        assert '  :: Value: "Hi"\n' in text
        assert "Hi\n" not in text.replace('"Hi"', "")

    def test_invalid_statements_not_checked(self, interpreter):
        """Developer mode only tokenizes."""
        interpreter.run_lines(["bogus"])

        assert "  :: Value: bogus" in interpreter.context.stdout.getvalue()

    def test_token_summary(self, interpreter):
        interpreter.run_lines(['writeln "Hi"', " "])

        summary = interpreter.token_summary()
        assert summary["total_tokens"] == 4
        assert summary["token_bytes"] > 0
        assert summary["token_tree_bytes"] >= summary["token_bytes"] * 4
        assert summary["gc_collections"] >= 0
