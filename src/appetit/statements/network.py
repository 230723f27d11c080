"""The download statement."""

import os
import posixpath
import shutil
import tempfile

import httpx
import structlog

from ..core.errors import ExecutionError
from .base import Statement
from .checks import argument, check_action, token_location


logger = structlog.get_logger()

CHUNK_SIZE = 64 * 1024


def remote_file_name(url: httpx.URL) -> str:
    """Last path segment of a URL, or a generic name when it has none."""
    return posixpath.basename(url.path) or "download"


def format_progress(received: int, total: int) -> str:
    percentage = received / total * 100 if total else 100.0
    return (
        f"\rDownloaded {percentage:.2f}% "
        f"({received / 1024:,.2f} KB of {total / 1024:,.2f} KB)"
    )


class DownloadStatement(Statement):
    """
    Download a URL to a path.

    The body is streamed to a temporary file first and moved into place
    once complete. A directory destination gets the remote file name.
    """

    name = "download"
    arity = 4
    form = 'download "[url]" to "[path]"'
    example = 'download "https://example.com/file.zip" to "/Users/user/Downloads/"'

    def execute(self, tokens, context):
        url = argument(tokens[2], context)
        check_action(tokens[3])
        destination = argument(tokens[4], context)

        config = context.config
        handle, temp_path = tempfile.mkstemp(prefix="appetit_dl_temp")
        logger.info("download_started", url=url, temp_file=temp_path)

        try:
            with os.fdopen(handle, "wb") as temp_file, httpx.Client(
                transport=context.http_transport,
                timeout=config.download_timeout_seconds,
                headers={"User-Agent": config.download_user_agent},
                follow_redirects=True,
            ) as client:
                with client.stream("GET", url) as response:
                    response.raise_for_status()
                    remote_name = remote_file_name(response.url)
                    total = int(response.headers.get("Content-Length", 0) or 0)

                    context.write(f"Downloading {remote_name}\n")
                    received = 0
                    for chunk in response.iter_bytes(CHUNK_SIZE):
                        temp_file.write(chunk)
                        received += len(chunk)
                        if total:
                            context.write(format_progress(received, total))
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            _discard(temp_path)
            raise ExecutionError(
                f"There was an error initiating the request to {url}. Make "
                f"sure that the URL is valid. ({e})",
                statement=self.name,
                **token_location(tokens[2]),
            )
        except httpx.HTTPStatusError as e:
            _discard(temp_path)
            raise ExecutionError(
                f"There was an error getting the file - {url}. The server "
                f"responded with status {e.response.status_code}.",
                statement=self.name,
                context={"status_code": e.response.status_code},
                **token_location(tokens[2]),
            )
        except httpx.HTTPError as e:
            _discard(temp_path)
            raise ExecutionError(
                f"There was an error getting the file - {url}. Make sure that "
                f"the URL is valid. ({e})",
                statement=self.name,
                **token_location(tokens[2]),
            )
        except OSError as e:
            _discard(temp_path)
            raise ExecutionError(
                f"There was an error saving the downloaded data: {e}",
                statement=self.name,
                **token_location(tokens[1]),
            )

        if os.path.isdir(destination):
            destination = os.path.join(destination, remote_name)

        try:
            shutil.move(temp_path, destination)
        except OSError as e:
            _discard(temp_path)
            raise ExecutionError(
                f"The download couldn't be moved to {destination}: {e}",
                statement=self.name,
                **token_location(tokens[4]),
            )

        context.write(f"\nFile downloaded to {destination}\n")
        logger.info("download_finished", url=url, destination=destination, bytes=received)
        return destination


def _discard(path: str) -> None:
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
