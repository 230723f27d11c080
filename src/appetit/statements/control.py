"""Statements that steer the run: minver, exit, pause, run and execute."""

import os
import re
import subprocess
import time

import structlog

from .. import LANG_VERSION
from ..core.errors import ExecutionError, ScriptExit, StatementError
from .base import Statement
from .checks import argument, token_location


logger = structlog.get_logger()

WHOLE_NUMBER = re.compile(r"^[0-9]+$")


class MinverStatement(Statement):
    """Require a minimum interpreter version."""

    name = "minver"
    arity = 2
    form = "minver [version number]"
    example = "minver 1"

    def execute(self, tokens, context):
        value = tokens[2].token_value
        if not WHOLE_NUMBER.match(value) or int(value) <= 0:
            raise StatementError(
                f"The {self.name} statement needs to include a valid non-zero "
                "positive integer. Make sure that you have none of the "
                f"following for the {self.name} statement value:\n\t"
                "- Negative number\n\t- Float (ie. decimal number)\n\t"
                "- String\n\t- No value",
                statement=self.name,
                **token_location(tokens[2]),
            )

        required = int(value)
        if required > LANG_VERSION:
            raise StatementError(
                "The script you're running here requires a newer version of "
                f"the interpreter. You are running version {LANG_VERSION} but "
                f"the script requires at least version {required}. Check to "
                "see if a newer version is available.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("minimum_version_checked", required=required, running=LANG_VERSION)
        return str(required)


class ExitStatement(Statement):
    """End the script."""

    name = "exit"
    arity = 1
    form = "exit"
    example = "exit"

    def execute(self, tokens, context):
        logger.info("script_exit", line_number=tokens[0].line_number)
        raise ScriptExit()


class PauseStatement(Statement):
    """Sleep for a whole number of seconds."""

    name = "pause"
    arity = 2
    form = "pause [seconds]"
    example = "pause 3"

    def execute(self, tokens, context):
        value = tokens[2].token_value
        if not WHOLE_NUMBER.match(value):
            raise StatementError(
                f"The pause length {value} is not valid. You need to use a "
                "whole number of seconds (0 or more).",
                statement=self.name,
                **token_location(tokens[2]),
            )

        seconds = int(value)
        logger.info("pausing", seconds=seconds)
        time.sleep(seconds)
        return value


class RunStatement(Statement):
    """
    Run another script in the current context.

    The sub-script shares variables and the shebang flag with its caller.
    Nesting is limited by config.max_run_depth, or by the Python stack when
    that runs out first.
    """

    name = "run"
    arity = 2
    form = 'run "[script]"'
    example = 'run "backup.apt"'

    def execute(self, tokens, context):
        script = argument(tokens[2], context)

        if not os.path.isfile(script):
            raise ExecutionError(
                f"The script - {script} - does not exist and/or can't be "
                "accessed. Double check to verify that the script exists.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        if context.run_depth >= context.config.max_run_depth:
            raise self.nesting_error(
                script, context.config.max_run_depth, context.run_depth, tokens,
            )

        if context.script_runner is None:
            raise ExecutionError(
                "Scripts can't be run from here as no interpreter is attached.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("running_script", script=script, depth=context.run_depth + 1)
        context.run_depth += 1
        try:
            context.script_runner(script)
        except RecursionError:
            raise self.nesting_error(
                script, context.run_depth, context.run_depth, tokens,
            )
        finally:
            context.run_depth -= 1
        return script

    def nesting_error(self, script, limit, depth, tokens) -> StatementError:
        return StatementError(
            f"The script - {script} - could not be run as scripts are "
            f"nested more than {limit} deep. Check for scripts that run "
            "themselves or each other.",
            statement=self.name,
            context={"depth": depth},
            **token_location(tokens[2]),
        )


class ExecuteStatement(Statement):
    """Run a system command and print its output (needs allow_exec)."""

    name = "execute"
    arity = 2
    form = 'execute "[command]"'
    example = 'execute "ls -l"'

    def execute(self, tokens, context):
        command = argument(tokens[2], context)

        if not context.config.allow_exec:
            raise StatementError(
                "You are unable to execute system commands. If you would like "
                "to do so, you need to run with the --allowexec flag.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        args = [part for part in command.split(" ") if part]
        if not args:
            raise StatementError(
                "The execute statement needs a command to run.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("executing_command", command=command)
        try:
            result = subprocess.run(
                args, capture_output=True, text=True, check=True,
            )
        except FileNotFoundError:
            raise ExecutionError(
                f"The application {command} was not found. Perhaps it was a typo?",
                statement=self.name,
                **token_location(tokens[2]),
            )
        except subprocess.CalledProcessError as e:
            raise ExecutionError(
                f"The command {command} failed with exit status {e.returncode}.",
                statement=self.name,
                context={"stderr": e.stderr},
                **token_location(tokens[2]),
            )
        except OSError as e:
            raise ExecutionError(
                f"The command {command} could not be run: {e}",
                statement=self.name,
                **token_location(tokens[2]),
            )

        context.write(result.stdout + "\n")
        return result.stdout
