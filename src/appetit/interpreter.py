"""Interpreter - drives preprocessing, tokenizing and statement dispatch."""

import gc
import sys
import time
from typing import Any, Optional, TextIO

import httpx
import structlog

from .core.config import InterpreterConfig
from .core.context import InterpreterContext
from .core.errors import AppetitError, StatementError, StructureError
from .core.symbols import SYMBOL_COMMENT
from .engine.preprocessor import is_shebang, prepare_script, validate_minver
from .engine.tokenizer import Token, tokenize
from .engine.variables import VariableStore
from .statements.checks import locate, token_location
from .statements.registry import StatementRegistry


logger = structlog.get_logger()


class Interpreter:
    """
    Runs Appetit scripts.

    Flow for each script:
    1. Load the file and strip comments
    2. Check minver placement and count
    3. Tokenize each line that isn't a comment
    4. Dispatch the tokens to the statement named by the first token

    All errors are raised as AppetitError subclasses; nothing here prints a
    diagnostic or exits. Nested `run` statements re-enter run_file() with the
    same context.
    """

    def __init__(
        self,
        config: Optional[InterpreterConfig] = None,
        statements: Optional[StatementRegistry] = None,
        variables: Optional[VariableStore] = None,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        http_transport: Optional[httpx.BaseTransport] = None,
    ):
        self.config = config or InterpreterConfig()
        self.context = InterpreterContext(
            config=self.config,
            statements=statements if statements is not None else StatementRegistry(),
            variables=variables if variables is not None else VariableStore(),
            stdin=stdin or sys.stdin,
            stdout=stdout or sys.stdout,
            http_transport=http_transport,
        )
        self.context.script_runner = self.run_file

    def run_file(self, path: str) -> None:
        """Load, preprocess and run a script file."""
        start_time = time.monotonic()
        lines = prepare_script(path)

        logger.info("script_started", path=path, depth=self.context.run_depth)
        self.run_lines(lines)
        logger.info(
            "script_finished",
            path=path,
            duration_ms=(time.monotonic() - start_time) * 1000,
        )

    def run_lines(self, lines: list[str]) -> None:
        """
        Run preprocessed lines.

        Raises:
            StructureError: If minver is duplicated or misplaced
            AppetitError: From tokenizing or any statement
        """
        ok, message = validate_minver(lines)
        if not ok:
            raise StructureError(message)

        non_comment_line_number = 1
        for index, line in enumerate(lines):
            if line.startswith(SYMBOL_COMMENT):
                continue

            tokens = self.tokenize_line(line, index + 1, non_comment_line_number)
            non_comment_line_number += 1

            if self.config.dev:
                self.print_token_info(tokens)
            else:
                self.dispatch(tokens)

    def tokenize_line(
        self,
        line: str,
        line_number: int,
        non_comment_line_number: int,
    ) -> list[Token]:
        """Tokenize a line and record it in the token tree."""
        tokens = tokenize(line, line_number, non_comment_line_number)
        self.context.token_tree.extend(tokens)
        return tokens

    def dispatch(self, tokens: list[Token]) -> Optional[str]:
        """
        Hand a tokenized line to its statement.

        Returns:
            The statement's value, or None for blank and shebang lines
        """
        if len(tokens) == 1:
            return None

        self.context.variables.refresh_clock()

        if is_shebang(tokens[0].full_line_of_code):
            self.context.shebang_present = True
            return None

        keyword = tokens[1].token_value
        statement = self.context.statements.get(keyword)
        if statement is None:
            raise StatementError(
                f"The statement passed - {keyword} - is not a valid statement. "
                "Valid statements include "
                f"{', '.join(self.context.statements.names())}.",
                statement=keyword,
                **token_location(tokens[1]),
            )

        logger.info(
            "statement_dispatched",
            statement=keyword,
            line_number=tokens[0].line_number,
        )
        try:
            return statement(tokens, self.context)
        except AppetitError as e:
            raise locate(e, tokens[0], positioned=False)

    def print_token_info(self, tokens: list[Token]) -> None:
        """Print the tokens of a line (developer mode)."""
        write = self.context.write
        for index, token in enumerate(tokens):
            if not token.token_value:
                continue
            if index == 1:
                write(f"\n\nLine {token.line_number}\n")
            else:
                write("\n")
            write(f"  :: Full Line of Code: {token.full_line_of_code}\n")
            write(f"  :: Position: {token.token_position}\n")
            write(f"  :: Type: {token.token_type}\n")
            write(f"  :: Value: {token.token_value}\n")
            write(f"  :: Line Number: {token.line_number}\n")

    def token_summary(self) -> dict[str, Any]:
        """Token and memory statistics for developer mode."""
        tree = self.context.token_tree
        token_size = sys.getsizeof(tree[0]) if tree else 0
        return {
            "total_tokens": len(tree),
            "token_tree_bytes": sys.getsizeof(tree) + token_size * len(tree),
            "token_bytes": token_size,
            "peak_memory_kb": peak_memory_kb(),
            "gc_collections": sum(s["collections"] for s in gc.get_stats()),
        }


def peak_memory_kb() -> Optional[int]:
    """Peak resident memory of this process in KB, where available."""
    try:
        import resource
    except ImportError:
        return None

    usage = resource.getrusage(resource.RUSAGE_SELF)
    # maxrss is in KB on Linux, bytes on macOS
    if sys.platform == "darwin":
        return usage.ru_maxrss // 1024
    return usage.ru_maxrss
