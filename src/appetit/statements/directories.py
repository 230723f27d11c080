"""Directory statements: copy, move, delete and make."""

import os
import shutil

import structlog

from ..core.errors import ExecutionError
from .base import Statement
from .checks import argument, check_action, fix_path_separator, token_location


logger = structlog.get_logger()


def nested_destination(source: str, destination: str) -> str:
    """Path of source's directory once placed inside destination."""
    name = os.path.basename(source.rstrip(os.sep))
    return fix_path_separator(fix_path_separator(destination) + name)


def require_directory(path: str, token) -> None:
    if not os.path.isdir(path):
        raise ExecutionError(
            f"The directory - {path} - does not exist. Check the path and "
            "try again.",
            **token_location(token),
        )


def copy_directory(source: str, target: str, tokens) -> None:
    try:
        shutil.copytree(source, target, dirs_exist_ok=True)
    except (OSError, shutil.Error) as e:
        raise ExecutionError(
            f"There was an error copying {source} to {target}. Perhaps you "
            f"don't have read or write permissions? {e}",
            **token_location(tokens[4]),
        )


class CopyDirectoryStatement(Statement):
    """Copy a directory into another directory."""

    name = "copydirectory"
    arity = 4
    form = 'copydirectory "[path]" to "[path]"'
    example = 'copydirectory "/Users/user/Documents/" to "/Volumes/backup/"'

    def execute(self, tokens, context):
        source = fix_path_separator(argument(tokens[2], context))
        check_action(tokens[3])
        target = nested_destination(source, argument(tokens[4], context))

        require_directory(source, tokens[2])
        copy_directory(source, target, tokens)

        logger.info("directory_copied", source=source, destination=target)
        return target


class MoveDirectoryStatement(Statement):
    """Move a directory into another directory."""

    name = "movedirectory"
    arity = 4
    form = 'movedirectory "[path]" to "[path]"'
    example = 'movedirectory "/Users/user/Downloads/old/" to "/Users/user/Archive/"'

    def execute(self, tokens, context):
        source = fix_path_separator(argument(tokens[2], context))
        check_action(tokens[3])
        target = nested_destination(source, argument(tokens[4], context))

        require_directory(source, tokens[2])

        parent = os.path.dirname(target.rstrip(os.sep))
        try:
            os.makedirs(parent, exist_ok=True)
            os.rename(source.rstrip(os.sep), target.rstrip(os.sep))
        except OSError as e:
            logger.info("rename_failed", source=source, error=str(e))
            copy_directory(source, target, tokens)
            try:
                shutil.rmtree(source)
            except OSError:
                raise ExecutionError(
                    f"There was an error removing the source directory: "
                    f"{source}. It will be worth trying to remove it manually.",
                    **token_location(tokens[2]),
                )

        logger.info("directory_moved", source=source, destination=target)
        return target


class DeleteDirectoryStatement(Statement):
    """Delete a directory and everything in it."""

    name = "deletedirectory"
    arity = 2
    form = 'deletedirectory "[path]"'
    example = 'deletedirectory "/Users/user/Downloads/old/"'

    def execute(self, tokens, context):
        path = argument(tokens[2], context)
        require_directory(path, tokens[2])

        try:
            shutil.rmtree(path)
        except OSError as e:
            raise ExecutionError(
                f"There was an error deleting the directory: {path}. Check to "
                f"make sure that you have the right permissions ({e.strerror}).",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("directory_deleted", path=path)
        return path


class MakeDirectoryStatement(Statement):
    """Create a directory and any missing parents."""

    name = "makedirectory"
    arity = 2
    form = 'makedirectory "[path]"'
    example = 'makedirectory "/Users/user/Documents/new/"'

    def execute(self, tokens, context):
        path = argument(tokens[2], context)

        try:
            os.makedirs(path, exist_ok=True)
        except OSError as e:
            raise ExecutionError(
                f"The directory - {path} - could not be made: {e.strerror}",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("directory_made", path=path)
        return path
