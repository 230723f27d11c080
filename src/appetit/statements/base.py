"""Statement interface."""

from abc import ABC, abstractmethod
from typing import Optional, TYPE_CHECKING

from .checks import check_arity

if TYPE_CHECKING:
    from ..core.context import InterpreterContext
    from ..engine.tokenizer import Token


class Statement(ABC):
    """
    A statement keyword and its behaviour.

    Subclasses set:
        name: Lowercase keyword
        arity: Number of tokens after the sentinel, keyword included
        form: Expected shape of the line
        example: A working line

    Calling a statement checks its arity and then runs execute().
    """

    name: str = ""
    arity: int = 0
    form: str = ""
    example: str = ""

    def __call__(
        self,
        tokens: list["Token"],
        context: "InterpreterContext",
    ) -> Optional[str]:
        check_arity(self, tokens)
        return self.execute(tokens, context)

    @abstractmethod
    def execute(
        self,
        tokens: list["Token"],
        context: "InterpreterContext",
    ) -> Optional[str]:
        """Run the statement; returns its value, if it has one."""

    def usage(self) -> str:
        """Usage text shown when the statement is called wrongly."""
        return (
            f"The {self.name} statement needs to follow the form:\n\n"
            f"\t{self.form}\n\n"
            f"An example of a working version might be:\n\n"
            f"\t{self.example}"
        )

    def __repr__(self) -> str:
        return f"<Statement {self.name}/{self.arity}>"
