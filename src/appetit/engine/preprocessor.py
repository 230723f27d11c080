"""Script loading and whole-script checks run before any line executes."""

from pathlib import Path

import structlog

from ..core.errors import AppetitError, ErrorCategory
from ..core.symbols import BLANK_LINE, MINVER_KEYWORD, SHEBANG, SYMBOL_COMMENT


logger = structlog.get_logger()


def strip_comments(lines: list[str]) -> list[str]:
    """
    Replace comment lines with the comment symbol and blank lines with a
    single space. The line count never changes.
    """
    stripped = []
    for line in lines:
        trimmed = line.strip()
        if trimmed.startswith(SYMBOL_COMMENT):
            stripped.append(SYMBOL_COMMENT)
        elif not trimmed:
            stripped.append(BLANK_LINE)
        else:
            stripped.append(line)
    return stripped


def is_shebang(line: str) -> bool:
    """Check whether a line is a shebang line."""
    return line.startswith(SHEBANG)


def validate_minver(lines: list[str]) -> tuple[bool, str]:
    """
    Check that minver, if present, appears once and first.

    The first word of every non-comment, non-blank line is collected. A
    single minver must be the first of those words, or the second when the
    first line is a shebang.

    Returns:
        (ok, message) where message explains the problem when not ok
    """
    statement_names = [
        line.strip().split(" ")[0]
        for line in lines
        if line not in (SYMBOL_COMMENT, BLANK_LINE)
    ]

    minver_count = statement_names.count(MINVER_KEYWORD)
    if minver_count == 0:
        return True, ""

    if minver_count > 1:
        return False, (
            f"There are multiple {MINVER_KEYWORD} calls in your script, "
            f"specifically {minver_count}. Ensure that you only have one and "
            "ensure that it is the first line of your script."
        )

    if statement_names[0] == MINVER_KEYWORD:
        return True, ""
    if statement_names[1] == MINVER_KEYWORD and is_shebang(statement_names[0]):
        return True, ""

    return False, (
        f"The {MINVER_KEYWORD} statement needs to be the first line of the "
        "script. This helps to ensure that the script is able to execute and "
        f"doesn't fail part of the way through. Move your {MINVER_KEYWORD} "
        "statement to the top of the script."
    )


def load_script(path: str) -> list[str]:
    """
    Read a script and split it into lines.

    Raises:
        AppetitError: If the file is missing or unreadable
    """
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.info("script_load_failed", path=path, error=str(e))
        raise AppetitError(
            f"Unknown file: {path}.",
            category=ErrorCategory.RUNTIME,
            context={"path": path},
        )

    lines = content.split("\n")
    logger.info("script_loaded", path=path, lines=len(lines))
    return lines


def prepare_script(path: str) -> list[str]:
    """Load a script and strip its comments."""
    return strip_comments(load_script(path))
