"""The set statement."""

import structlog

from ..engine.variables import evaluate
from .base import Statement
from .checks import argument, check_assignment, check_variable_name, fix_string


logger = structlog.get_logger()


class SetStatement(Statement):
    """
    Assign a value to a variable: set name = "value".

    The value is fixed, templated and then folded as arithmetic, so
    set total = "#a + 2" stores the computed number.
    """

    name = "set"
    arity = 4
    form = 'set [variable name] = "[value]"'
    example = 'set name = "Appetit"'

    def execute(self, tokens, context):
        variable_name = fix_string(tokens[2].token_value)
        check_variable_name(variable_name, tokens[2], context)
        check_assignment(tokens[3])

        value = evaluate(argument(tokens[4], context))
        context.variables.set(variable_name, value)

        logger.info("variable_set", variable=variable_name, value=value)
        return value
