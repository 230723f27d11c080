"""Interpreter context shared by the dispatcher and every statement."""

import sys
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, TextIO, TYPE_CHECKING

import httpx

from .config import InterpreterConfig

if TYPE_CHECKING:
    from ..engine.variables import VariableStore
    from ..engine.tokenizer import Token
    from ..statements.registry import StatementRegistry


@dataclass
class InterpreterContext:
    """
    State for one interpreter run.

    Nested `run` statements share the same context, so variables set by a
    sub-script stay visible to its caller and the shebang flag never resets.
    """
    config: InterpreterConfig
    statements: "StatementRegistry"
    variables: "VariableStore"
    stdin: TextIO = field(default_factory=lambda: sys.stdin)
    stdout: TextIO = field(default_factory=lambda: sys.stdout)

    # Every tokenized line, kept for --dev introspection only
    token_tree: list["Token"] = field(default_factory=list)

    shebang_present: bool = False
    run_depth: int = 0

    # Set by the interpreter; used by the run statement to re-enter it
    script_runner: Optional[Callable[[str], Any]] = None

    # Overrides the network transport for download (tests)
    http_transport: Optional[httpx.BaseTransport] = None

    def write(self, text: str) -> None:
        """Write script output and flush so prompts show before input."""
        self.stdout.write(text)
        self.stdout.flush()
