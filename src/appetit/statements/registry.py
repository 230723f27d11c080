"""Statement registry."""

from typing import Optional

from .base import Statement
from .archives import ZipDirectoryStatement, ZipFileStatement
from .assign import SetStatement
from .console import AskStatement, WriteStatement, WritelnStatement
from .control import (
    ExecuteStatement,
    ExitStatement,
    MinverStatement,
    PauseStatement,
    RunStatement,
)
from .directories import (
    CopyDirectoryStatement,
    DeleteDirectoryStatement,
    MakeDirectoryStatement,
    MoveDirectoryStatement,
)
from .files import (
    CopyFileStatement,
    DeleteFileStatement,
    MakeFileStatement,
    MoveFileStatement,
)
from .network import DownloadStatement


BUILTIN_STATEMENTS: tuple[type[Statement], ...] = (
    AskStatement,
    CopyDirectoryStatement,
    CopyFileStatement,
    DeleteDirectoryStatement,
    DeleteFileStatement,
    DownloadStatement,
    ExecuteStatement,
    ExitStatement,
    MakeDirectoryStatement,
    MakeFileStatement,
    MinverStatement,
    MoveDirectoryStatement,
    MoveFileStatement,
    PauseStatement,
    RunStatement,
    SetStatement,
    WriteStatement,
    WritelnStatement,
    ZipDirectoryStatement,
    ZipFileStatement,
)


class StatementRegistry:
    """
    Registry of statements by keyword.

    Membership is the only contract: the dispatcher looks keywords up here,
    and the sorted name list is what users see when a keyword is unknown.
    """

    def __init__(self, builtins: bool = True):
        self._statements: dict[str, Statement] = {}
        if builtins:
            self._register_builtin_statements()

    def register(self, statement: Statement) -> None:
        """Register a statement under its keyword."""
        self._statements[statement.name.lower()] = statement

    def unregister(self, name: str) -> None:
        """Unregister a statement."""
        self._statements.pop(name, None)

    def get(self, name: str) -> Optional[Statement]:
        """Get the statement for a keyword."""
        return self._statements.get(name)

    def names(self) -> list[str]:
        """All registered keywords, sorted."""
        return sorted(self._statements)

    def __contains__(self, name: str) -> bool:
        return name in self._statements

    def __len__(self) -> int:
        return len(self._statements)

    def _register_builtin_statements(self) -> None:
        """Register built-in statements."""
        for statement_class in BUILTIN_STATEMENTS:
            self.register(statement_class())
