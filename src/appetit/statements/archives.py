"""Archive statements: zipfile and zipdirectory."""

import os
import zipfile

import structlog

from ..core.errors import ExecutionError
from .base import Statement
from .checks import argument, check_action, token_location


logger = structlog.get_logger()


def open_archive(destination: str, token) -> zipfile.ZipFile:
    try:
        return zipfile.ZipFile(destination, "w", compression=zipfile.ZIP_DEFLATED)
    except OSError as e:
        raise ExecutionError(
            f"The archive name you provided - {destination} - could not be "
            f"created. Is it possible that you can't write to that path? "
            f"({e.strerror})",
            **token_location(token),
        )


class ZipFileStatement(Statement):
    """Archive a single file under its base name."""

    name = "zipfile"
    arity = 4
    form = 'zipfile "[path]" to "[archive path]"'
    example = 'zipfile "/Users/user/test.txt" to "test.zip"'

    def execute(self, tokens, context):
        source = argument(tokens[2], context)
        check_action(tokens[3])
        destination = argument(tokens[4], context)

        if not os.path.isfile(source):
            raise ExecutionError(
                f"Couldn't open {source}! Is it possible that this file "
                "doesn't exist?",
                statement=self.name,
                **token_location(tokens[2]),
            )

        with open_archive(destination, tokens[4]) as archive:
            try:
                archive.write(source, arcname=os.path.basename(source))
            except OSError as e:
                raise ExecutionError(
                    f"Couldn't add {source} to {destination}. Check to make "
                    f"sure that the original file can be read ({e.strerror}).",
                    statement=self.name,
                    **token_location(tokens[4]),
                )

        logger.info("file_zipped", source=source, archive=destination)
        return destination


class ZipDirectoryStatement(Statement):
    """Archive a directory's contents, relative to the directory."""

    name = "zipdirectory"
    arity = 4
    form = 'zipdirectory "[path]" to "[archive path]"'
    example = 'zipdirectory "/Users/user/test_dir/" to "test_dir.zip"'

    def execute(self, tokens, context):
        source = argument(tokens[2], context)
        check_action(tokens[3])
        destination = argument(tokens[4], context)

        if not os.path.isdir(source):
            raise ExecutionError(
                f"Couldn't open {source}! Is it possible that this directory "
                "doesn't exist?",
                statement=self.name,
                **token_location(tokens[2]),
            )

        archive_path = os.path.abspath(destination)
        count = 0
        with open_archive(destination, tokens[4]) as archive:
            for root, dirs, files in os.walk(source):
                dirs.sort()
                for name in sorted(files):
                    path = os.path.join(root, name)
                    # Never add the archive to itself
                    if os.path.abspath(path) == archive_path:
                        continue
                    try:
                        archive.write(path, arcname=os.path.relpath(path, source))
                    except OSError as e:
                        raise ExecutionError(
                            f"Couldn't add {path} to {destination}. Check to "
                            "make sure that the file can be read "
                            f"({e.strerror}).",
                            statement=self.name,
                            **token_location(tokens[2]),
                        )
                    count += 1

        logger.info(
            "directory_zipped", source=source, archive=destination, files=count,
        )
        return destination
