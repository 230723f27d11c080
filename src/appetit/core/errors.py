"""Interpreter error definitions."""

from typing import Optional, Any
from enum import Enum


class ErrorCategory(Enum):
    """Error categories, by the stage that detected them."""
    LEXICAL = "lexical"           # Tokenizer - bad literals, comments, escapes
    STRUCTURAL = "structural"     # Preprocessor - minver placement/count
    SEMANTIC = "semantic"         # Dispatcher/statements - arity, keywords, names
    RUNTIME = "runtime"           # Statements - files, network, archives, input
    CONFIG = "config"             # Interpreter configuration


# Position value used when no column is available.
NO_POSITION = "n/a"


class AppetitError(Exception):
    """
    Base exception for all interpreter errors.

    Every error is fatal: the top-level driver formats it with the
    diagnostic reporter and ends the run. Errors raised while handling a
    line carry that line's number, the column of the offending token and
    the full source line so the report can point at the problem.
    """

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.SEMANTIC,
        line_number: Optional[int] = None,
        position: str = NO_POSITION,
        full_line: Optional[str] = None,
        context: Optional[dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.line_number = line_number
        self.position = position
        self.full_line = full_line
        self.context = context or {}

    @property
    def column(self) -> Optional[int]:
        """Column as an integer, or None when unknown."""
        try:
            return int(self.position)
        except (TypeError, ValueError):
            return None

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for logging."""
        return {
            "type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "line_number": self.line_number,
            "position": self.position,
            "full_line": self.full_line,
            "context": self.context,
        }


class LexicalError(AppetitError):
    """A line could not be tokenized."""

    def __init__(self, message: str, kind: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.LEXICAL)
        super().__init__(message, **kwargs)
        self.kind = kind
        self.context["kind"] = kind


class StructureError(AppetitError):
    """Script-level structure problem (no line context)."""

    def __init__(self, message: str, **kwargs):
        kwargs.setdefault("category", ErrorCategory.STRUCTURAL)
        super().__init__(message, **kwargs)


class StatementError(AppetitError):
    """A statement call is malformed or not allowed."""

    def __init__(self, message: str, statement: Optional[str] = None, **kwargs):
        kwargs.setdefault("category", ErrorCategory.SEMANTIC)
        super().__init__(message, **kwargs)
        self.context["statement"] = statement


class ExecutionError(AppetitError):
    """A statement failed while touching the filesystem, network or user."""

    def __init__(self, message: str, statement: Optional[str] = None, **kwargs):
        kwargs.setdefault("category", ErrorCategory.RUNTIME)
        super().__init__(message, **kwargs)
        self.context["statement"] = statement


class ConfigError(AppetitError):
    """Configuration loading or validation error."""

    def __init__(self, message: str, config_path: Optional[str] = None, **kwargs):
        kwargs.setdefault("category", ErrorCategory.CONFIG)
        super().__init__(message, **kwargs)
        self.context["config_path"] = config_path


class ScriptExit(Exception):
    """Raised by the exit statement to end the run normally."""
