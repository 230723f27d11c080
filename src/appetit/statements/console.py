"""Statements that talk to the user: write, writeln and ask."""

import structlog

from ..core.errors import ExecutionError
from ..engine.variables import evaluate
from .base import Statement
from .checks import (
    argument,
    check_action,
    check_variable_name,
    fix_string,
    token_location,
)


logger = structlog.get_logger()


class WriteStatement(Statement):
    """Print text without a trailing newline."""

    name = "write"
    arity = 2
    form = 'write "[content to be written]"'
    example = 'write "Hello World"'

    def execute(self, tokens, context):
        text = argument(tokens[2], context)
        context.write(text)
        return text


class WritelnStatement(Statement):
    """Print text followed by a newline."""

    name = "writeln"
    arity = 2
    form = 'writeln "[content to be written]"'
    example = 'writeln "Hello World"'

    def execute(self, tokens, context):
        text = argument(tokens[2], context) + "\n"
        context.write(text)
        return text


class AskStatement(Statement):
    """
    Prompt the user and store the answer in a variable.

    The answer is folded as arithmetic when possible, like set.
    """

    name = "ask"
    arity = 4
    form = 'ask "[question/prompt]" to "[variable name]"'
    example = 'ask "What is your name?" to "name"'

    def execute(self, tokens, context):
        prompt = argument(tokens[2], context)
        check_action(tokens[3])

        variable_name = fix_string(tokens[4].token_value)
        check_variable_name(variable_name, tokens[4], context)

        logger.info("asking_user", prompt=prompt, variable=variable_name)
        context.write(prompt)

        try:
            answer = context.stdin.readline()
        except (OSError, ValueError) as e:
            raise ExecutionError(
                f"There was an error getting the user input: {e}",
                statement=self.name,
                **token_location(tokens[0], positioned=False),
            )

        if answer == "":
            raise ExecutionError(
                "There was an error getting the user input: the input stream "
                "ended before an answer was given.",
                statement=self.name,
                **token_location(tokens[0], positioned=False),
            )

        value = evaluate(answer.rstrip("\r\n"))
        context.variables.set(variable_name, value)
        return value
