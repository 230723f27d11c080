"""Checks and fixes shared by statement implementations."""

import os
import re
from typing import Any, TYPE_CHECKING

from ..core.errors import AppetitError, NO_POSITION, StatementError
from ..core.symbols import SYMBOL_ACTION, SYMBOL_ASSIGNMENT

if TYPE_CHECKING:
    from ..core.context import InterpreterContext
    from ..engine.tokenizer import Token
    from .base import Statement


VARIABLE_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


def token_location(token: "Token", positioned: bool = True) -> dict[str, Any]:
    """Error keyword arguments pointing at token."""
    return {
        "line_number": token.line_number,
        "position": token.token_position if positioned else NO_POSITION,
        "full_line": token.full_line_of_code,
    }


def locate(error: AppetitError, token: "Token", positioned: bool = True) -> AppetitError:
    """Attach token's location to an error that has none."""
    if error.line_number is None:
        location = token_location(token, positioned)
        error.line_number = location["line_number"]
        error.position = location["position"]
        error.full_line = location["full_line"]
    return error


def check_arity(statement: "Statement", tokens: list["Token"]) -> None:
    """
    Check the number of tokens after the sentinel.

    Raises:
        StatementError: With the statement's usage when the count is wrong
    """
    if len(tokens) - 1 == statement.arity:
        return

    raise StatementError(
        statement.usage()
        + "\n\nYour line of code looks like the following:\n\n\t"
        + tokens[0].full_line_of_code,
        statement=statement.name,
        context={"expected": statement.arity, "actual": len(tokens) - 1},
        **token_location(tokens[0], positioned=False),
    )


def check_action(token: "Token") -> None:
    """Check that token is the action separator."""
    if token.token_value != SYMBOL_ACTION:
        raise StatementError(
            "An action was made using an invalid action statement "
            f"({token.token_value}), please ensure that you use {SYMBOL_ACTION}.",
            **token_location(token),
        )


def check_assignment(token: "Token") -> None:
    """Check that token is the assignment operator."""
    if token.token_value != SYMBOL_ASSIGNMENT:
        raise StatementError(
            "An assignment was made using an invalid operator "
            f"({token.token_value}), please ensure that you use "
            f"{SYMBOL_ASSIGNMENT}.",
            **token_location(token),
        )


def check_variable_name(
    name: str,
    token: "Token",
    context: "InterpreterContext",
) -> None:
    """
    Check that a variable name is assignable.

    Names are letters, digits and underscores, not starting with a digit.

    Raises:
        StatementError: On an invalid name, the reserved prefix or a
            statement keyword
    """
    if not VARIABLE_NAME.fullmatch(name):
        raise StatementError(
            f"The variable name - {name} - is not valid. Variable names can "
            "only use letters, digits and underscores, and can't be empty or "
            "start with a digit.",
            context={"variable": name},
            **token_location(token),
        )

    try:
        context.variables.check_reserved_prefix(name)
    except StatementError as e:
        raise locate(e, token)

    if name in context.statements:
        raise StatementError(
            f"The variable - {name} - is not a valid variable name as it "
            "conflicts with a statement name.",
            context={"variable": name},
            **token_location(token),
        )


def fix_string(value: str) -> str:
    """
    Strip one pair of surrounding double quotes and unescape \\", \\n
    and \\r.
    """
    if len(value) >= 2 and value[0] == '"' and value[-1] == '"':
        value = value[1:-1]
    return (
        value.replace('\\"', '"')
        .replace("\\n", "\n")
        .replace("\\r", "\r")
    )


def fix_path_separator(path: str) -> str:
    """Ensure path ends with the OS path separator."""
    if path.endswith(os.sep):
        return path
    return path + os.sep


def argument(token: "Token", context: "InterpreterContext") -> str:
    """Fixed and templated value of a string argument."""
    return context.variables.substitute(fix_string(token.token_value))
