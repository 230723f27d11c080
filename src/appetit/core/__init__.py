"""Core interpreter components."""

from .config import ConfigLoader, InterpreterConfig
from .errors import (
    AppetitError,
    ConfigError,
    ExecutionError,
    LexicalError,
    ScriptExit,
    StatementError,
    StructureError,
)

__all__ = [
    "ConfigLoader",
    "InterpreterConfig",
    "AppetitError",
    "ConfigError",
    "ExecutionError",
    "LexicalError",
    "ScriptExit",
    "StatementError",
    "StructureError",
]
