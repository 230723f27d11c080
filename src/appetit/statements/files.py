"""File statements: copyfile, movefile, deletefile and makefile."""

import os
import shutil
import stat

import structlog

from ..core.errors import ExecutionError
from .base import Statement
from .checks import argument, check_action, token_location


logger = structlog.get_logger()


def resolve_destination(source: str, destination: str) -> str:
    """A destination ending in a separator gets the source file name."""
    if destination.endswith(os.sep):
        return destination + os.path.basename(source)
    return destination


def copy_file(source: str, destination: str, tokens) -> int:
    """
    Copy one file, reporting failures against the statement's tokens.

    Returns:
        Number of bytes written
    """
    if not os.path.isfile(source):
        raise ExecutionError(
            f"Can't open {source}! Are you sure that the file exists?",
            **token_location(tokens[2]),
        )

    try:
        shutil.copyfile(source, destination)
    except IsADirectoryError:
        raise ExecutionError(
            f"The destination - {destination} - is a directory. If you're "
            "trying to copy to a directory, make sure to put in a trailing "
            f"{os.sep}",
            **token_location(tokens[4]),
        )
    except shutil.SameFileError:
        raise ExecutionError(
            f"The source and destination - {destination} - are the same file.",
            **token_location(tokens[4]),
        )
    except OSError as e:
        raise ExecutionError(
            f"The destination - {destination} - is invalid. Are you sure that "
            "the destination exists? If you're trying to copy to a directory, "
            f"make sure to put in a trailing {os.sep} ({e.strerror})",
            **token_location(tokens[4]),
        )

    return os.path.getsize(destination)


class CopyFileStatement(Statement):
    """Copy a file."""

    name = "copyfile"
    arity = 4
    form = 'copyfile "[path]" to "[path]"'
    example = 'copyfile "test.txt" to "test_new.txt"'

    def execute(self, tokens, context):
        source = argument(tokens[2], context)
        check_action(tokens[3])
        destination = resolve_destination(source, argument(tokens[4], context))

        written = copy_file(source, destination, tokens)
        logger.info(
            "file_copied", source=source, destination=destination, bytes=written,
        )
        return destination


class MoveFileStatement(Statement):
    """Move a file, falling back to copy and delete across devices."""

    name = "movefile"
    arity = 4
    form = 'movefile "[path]" to "[path]"'
    example = 'movefile "test.txt" to "archive/"'

    def execute(self, tokens, context):
        source = argument(tokens[2], context)
        check_action(tokens[3])
        destination = resolve_destination(source, argument(tokens[4], context))

        try:
            os.rename(source, destination)
        except OSError as e:
            logger.info("rename_failed", source=source, error=str(e))
            copy_file(source, destination, tokens)
            try:
                os.remove(source)
            except OSError:
                raise ExecutionError(
                    f"There was an error removing the source file: {source}. "
                    "It will be worth trying to remove it manually.",
                    **token_location(tokens[2]),
                )

        logger.info("file_moved", source=source, destination=destination)
        return destination


class DeleteFileStatement(Statement):
    """Delete a file."""

    name = "deletefile"
    arity = 2
    form = 'deletefile "[path]"'
    example = 'deletefile "test.txt"'

    def execute(self, tokens, context):
        path = argument(tokens[2], context)

        if not os.path.lexists(path):
            raise ExecutionError(
                f"{path} does not exist.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        try:
            os.remove(path)
        except OSError as e:
            try:
                mode = stat.filemode(os.lstat(path).st_mode)
            except OSError:
                raise ExecutionError(
                    f"There was an error deleting {path} and its details "
                    f"couldn't be read either ({e.strerror}).",
                    statement=self.name,
                    **token_location(tokens[2]),
                )
            raise ExecutionError(
                f"There was an error deleting the file: {path}. It looks like "
                f"the permissions on the file are {mode}. Check to make sure "
                "that you have the right permissions to delete the file.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("file_deleted", path=path)
        return path


class MakeFileStatement(Statement):
    """Create an empty file."""

    name = "makefile"
    arity = 2
    form = 'makefile "[path]"'
    example = 'makefile "test.txt"'

    def execute(self, tokens, context):
        path = argument(tokens[2], context)

        if os.path.lexists(path):
            raise ExecutionError(
                f"{path} exists already.",
                statement=self.name,
                **token_location(tokens[2]),
            )

        try:
            with open(path, "x"):
                pass
        except OSError as e:
            raise ExecutionError(
                f"{path} could not be created: {e.strerror}",
                statement=self.name,
                **token_location(tokens[2]),
            )

        logger.info("file_made", path=path)
        return path
