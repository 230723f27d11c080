"""Statement implementations and registry."""

from .base import Statement
from .registry import StatementRegistry

__all__ = ["Statement", "StatementRegistry"]
