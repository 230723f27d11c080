"""Execution engine building blocks."""

from .tokenizer import Token, tokenize
from .preprocessor import (
    is_shebang,
    load_script,
    prepare_script,
    strip_comments,
    validate_minver,
)
from .variables import VariableStore, evaluate
from .diagnostics import DiagnosticFormatter

__all__ = [
    "Token",
    "tokenize",
    "is_shebang",
    "load_script",
    "prepare_script",
    "strip_comments",
    "validate_minver",
    "VariableStore",
    "evaluate",
    "DiagnosticFormatter",
]
