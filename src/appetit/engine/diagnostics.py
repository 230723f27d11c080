"""
Diagnostic reporter - formats fatal errors for the terminal.

Every interpreter error is fatal. The reporter only formats and writes a
block; deciding to stop is left to the top-level driver.
"""

from typing import Optional, TextIO

from ..core.errors import AppetitError


LOC_TITLE = "Line of Code: "

# ANSI colour codes
RED = "\033[31m"
MAGENTA = "\033[35m"
RESET = "\033[0m"


class DiagnosticFormatter:
    """
    Formats AppetitError instances as diagnostic blocks.

    Layout:
        [Error on line N, position P]   header (line and position optional)
        <blank>
        Line of Code: <line>            only when the line is known
                      ^                 caret under the offending column
        <blank>
        <message>
    """

    def __init__(self, colour: bool = True):
        self.colour = colour

    def _paint(self, text: str, code: str) -> str:
        if not self.colour:
            return text
        return f"{code}{text}{RESET}"

    def format_header(
        self,
        line_number: Optional[int] = None,
        column: Optional[int] = None,
    ) -> str:
        """Format the [Error ...] header."""
        if line_number is None:
            header = "[Error]"
        elif column is None:
            header = f"[Error on line {line_number}]"
        else:
            header = f"[Error on line {line_number}, position {column}]"
        return self._paint(header, RED)

    def format_location(self, full_line: str, column: Optional[int] = None) -> str:
        """Echo the line of code, with a caret under column when known."""
        text = self._paint(LOC_TITLE, MAGENTA) + full_line
        if column is not None and column >= 1:
            caret = " " * (len(LOC_TITLE) + column - 1) + "^"
            text += "\n" + self._paint(caret, RED)
        return text

    def format_error(self, error: AppetitError) -> str:
        """
        Format an error as a diagnostic block.

        Args:
            error: The error to render

        Returns:
            Multi-line block, without a trailing newline
        """
        column = error.column if error.line_number is not None else None
        parts = [self.format_header(error.line_number, column)]

        if error.full_line is not None:
            parts.append(self.format_location(error.full_line, column))

        parts.append(error.message)
        return "\n\n".join(parts)

    def emit(self, error: AppetitError, stream: TextIO) -> None:
        """Write a formatted diagnostic to stream."""
        stream.write("\n" + self.format_error(error) + "\n\n")
        stream.flush()
