"""
Per-line tokenizer.

Splits one line of a script into lexical tokens using conventional C-like
scanning rules:
- Identifiers (letter or underscore, then letters, digits, underscores)
- Integers (decimal, hex, octal, binary) and decimal floats
- Double-quoted strings, kept verbatim with their quotes and escapes
- Back-quoted raw strings and single-quoted character literals
- // and /* */ comments, which are skipped
- Any other character as a one-character symbol

Every tokenized line starts with a sentinel token that has no value and
carries the line metadata used by diagnostics.
"""

from dataclasses import dataclass, asdict
from typing import Any

from ..core.errors import LexicalError


# Token types
TYPE_LINE = "line"
TYPE_IDENTIFIER = "identifier"
TYPE_INT = "int"
TYPE_FLOAT = "float"
TYPE_STRING = "string"
TYPE_RAW_STRING = "raw_string"
TYPE_CHAR = "char"
TYPE_SYMBOL = "symbol"

# Lexical error kinds
LITERAL_NOT_TERMINATED = "literal not terminated"
INVALID_CHAR_LITERAL = "invalid char literal"
COMMENT_NOT_TERMINATED = "comment not terminated"
INVALID_CHAR_ESCAPE = "invalid char escape"

WHITESPACE = " \t\r\n"

SIMPLE_ESCAPES = "abfnrtv\\"

# Escape letter -> number of hex digits that must follow
HEX_ESCAPES = {"x": 2, "u": 4, "U": 8}

DECIMAL_DIGITS = "0123456789"
OCTAL_DIGITS = "01234567"
HEX_DIGITS = "0123456789abcdefABCDEF"


@dataclass
class Token:
    """A single lexical token with the line context needed for diagnostics."""
    full_line_of_code: str
    line_number: int
    token_position: str          # 1-based column; "0" for the sentinel
    token_value: str
    token_type: str
    non_comment_line_number: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def lexical_message(kind: str, line_number: int) -> str:
    """User-facing description of a lexical error."""
    if kind == LITERAL_NOT_TERMINATED:
        return (
            f"Line {line_number} has an incomplete string. Did you forget an "
            "opening or closing quotation mark? Something like the following "
            "line of code will trigger this error:\n\n"
            "\twriteln \"Hello world"
        )
    if kind == INVALID_CHAR_LITERAL:
        return (
            "Your line of code uses single quotation marks instead of the "
            "required double quotation marks. See the example:\n\n"
            "\twriteln 'Hello world' <- (notice the lack of double quotation "
            "marks here)."
        )
    if kind == COMMENT_NOT_TERMINATED:
        return (
            "You've started a /* block comment without closing it, which is "
            "not valid. Comments are single line and take the following "
            "form:\n\n\t- This is a comment."
        )
    if kind == INVALID_CHAR_ESCAPE:
        return (
            "You've included an invalid character escape. You need to use "
            "one of the following: \\n (for new line), \\t (for tab "
            "indentation)."
        )
    return f"{kind}. Please report this error with the erroneous line of code."


def _is_digit(ch: str) -> bool:
    return ch != "" and ch in DECIMAL_DIGITS


class Scanner:
    """
    Scanner over a single line.

    Usage:
        scanner = Scanner(line, line_number)
        for value, token_type, column in scanner.scan():
            ...
    """

    def __init__(self, line: str, line_number: int = 0):
        self.line = line
        self.line_number = line_number
        self.pos = 0

    def _peek(self, offset: int = 0) -> str:
        idx = self.pos + offset
        if idx >= len(self.line):
            return ""
        return self.line[idx]

    def _error(self, kind: str) -> LexicalError:
        return LexicalError(
            lexical_message(kind, self.line_number),
            kind=kind,
            line_number=self.line_number,
            full_line=self.line,
        )

    def scan(self):
        """Yield (value, token_type, column) for each token on the line."""
        while True:
            self._skip_whitespace_and_comments()
            if self.pos >= len(self.line):
                return

            start = self.pos
            ch = self._peek()

            if ch.isalpha() or ch == "_":
                token_type = self._scan_identifier()
            elif _is_digit(ch) or (ch == "." and _is_digit(self._peek(1))):
                token_type = self._scan_number()
            elif ch == '"':
                self._scan_quoted('"')
                token_type = TYPE_STRING
            elif ch == "`":
                self._scan_raw_string()
                token_type = TYPE_RAW_STRING
            elif ch == "'":
                if self._scan_quoted("'") != 1:
                    raise self._error(INVALID_CHAR_LITERAL)
                token_type = TYPE_CHAR
            else:
                self.pos += 1
                token_type = TYPE_SYMBOL

            yield self.line[start:self.pos], token_type, start + 1

    def _skip_whitespace_and_comments(self) -> None:
        while self.pos < len(self.line):
            ch = self._peek()
            if ch in WHITESPACE:
                self.pos += 1
            elif ch == "/" and self._peek(1) == "/":
                newline = self.line.find("\n", self.pos)
                self.pos = len(self.line) if newline == -1 else newline
            elif ch == "/" and self._peek(1) == "*":
                end = self.line.find("*/", self.pos + 2)
                if end == -1:
                    raise self._error(COMMENT_NOT_TERMINATED)
                self.pos = end + 2
            else:
                return

    def _scan_identifier(self) -> str:
        while self._peek() and (self._peek().isalnum() or self._peek() == "_"):
            self.pos += 1
        return TYPE_IDENTIFIER

    def _scan_digits(self, digits: str = DECIMAL_DIGITS) -> None:
        while self._peek() and (self._peek() == "_" or self._peek() in digits):
            self.pos += 1

    def _scan_number(self) -> str:
        if self._peek() == "0" and self._peek(1) and self._peek(1) in "xXbBoO":
            prefix = self._peek(1).lower()
            self.pos += 2
            self._scan_digits({"x": HEX_DIGITS, "b": "01", "o": OCTAL_DIGITS}[prefix])
            return TYPE_INT

        token_type = TYPE_INT
        self._scan_digits()
        if self._peek() == ".":
            token_type = TYPE_FLOAT
            self.pos += 1
            self._scan_digits()
        if self._peek() in ("e", "E"):
            sign = 1 if self._peek(1) in ("+", "-") else 0
            if _is_digit(self._peek(1 + sign)):
                token_type = TYPE_FLOAT
                self.pos += 1 + sign
                self._scan_digits()
        return token_type

    def _scan_escape(self, quote: str) -> None:
        """Consume the escape sequence after a backslash."""
        ch = self._peek()
        if ch == "":
            raise self._error(LITERAL_NOT_TERMINATED)
        if ch in SIMPLE_ESCAPES or ch == quote:
            self.pos += 1
            return
        if ch in OCTAL_DIGITS:
            count, digits = 3, OCTAL_DIGITS
        elif ch in HEX_ESCAPES:
            self.pos += 1
            count, digits = HEX_ESCAPES[ch], HEX_DIGITS
        else:
            raise self._error(INVALID_CHAR_ESCAPE)

        for _ in range(count):
            if self._peek() == "":
                raise self._error(LITERAL_NOT_TERMINATED)
            if self._peek() not in digits:
                raise self._error(INVALID_CHAR_ESCAPE)
            self.pos += 1

    def _scan_quoted(self, quote: str) -> int:
        """Consume a quoted literal; returns the number of characters in it."""
        self.pos += 1
        count = 0
        while True:
            ch = self._peek()
            if ch == "" or ch == "\n":
                raise self._error(LITERAL_NOT_TERMINATED)
            self.pos += 1
            if ch == quote:
                return count
            if ch == "\\":
                self._scan_escape(quote)
            count += 1

    def _scan_raw_string(self) -> None:
        end = self.line.find("`", self.pos + 1)
        if end == -1:
            raise self._error(LITERAL_NOT_TERMINATED)
        self.pos = end + 1


def tokenize(
    line: str,
    line_number: int,
    non_comment_line_number: int,
) -> list[Token]:
    """
    Tokenize one line of a script.

    Args:
        line: The raw line of code
        line_number: 1-based line number in the script
        non_comment_line_number: Running count of tokenized lines

    Returns:
        Sentinel token followed by the lexical tokens of the line

    Raises:
        LexicalError: On unterminated literals or comments, bad character
            literals and unknown escapes
    """
    tokens = [
        Token(
            full_line_of_code=line,
            line_number=line_number,
            token_position="0",
            token_value="",
            token_type=TYPE_LINE,
            non_comment_line_number=non_comment_line_number,
        )
    ]

    for value, token_type, column in Scanner(line, line_number).scan():
        tokens.append(
            Token(
                full_line_of_code=line,
                line_number=line_number,
                token_position=str(column),
                token_value=value,
                token_type=token_type,
                non_comment_line_number=non_comment_line_number,
            )
        )

    return tokens
