"""
Lexical layer for the statement language.

Works directly on the source text with a cursor that tracks line and
column. Provides whitespace and comment skipping, quoted and unquoted
string literals (with concatenation and multi-line de-indentation),
identifiers and fixed-width date literals.
"""

import re
from datetime import date
from pathlib import Path

from .errors import ParseError, make_parse_error, source_snippet
from .ir.location import Position
from .settings import DEFAULT_SETTINGS, IdentifierPolicy, ParserSettings

WHITESPACE_CHARS = " \t\r\n"
# Characters that end an unquoted string besides whitespace
UNQUOTED_STOP_CHARS = ";{}"
QUOTE_CHARS = "\"'"

# Escape sequences recognised inside double-quoted strings
ESCAPES = {"\\": "\\", '"': '"', "n": "\n", "r": "\r", "t": "\t"}

LEGACY_FORBIDDEN_START = "XxMmLl"

_LINE_BREAK = re.compile(r"\r\n?|\n")


def is_identifier_start(ch: str) -> bool:
    return ch.isascii() and (ch.isalpha() or ch == "_")


def is_identifier_char(ch: str) -> bool:
    return ch.isascii() and (ch.isalnum() or ch in "_-.")


def dedent_string_literal(value: str, column: int, tab_width: int = 8) -> str:
    """
    Strip the layout whitespace of a multi-line string literal.

    Line endings are normalized to ``\\n`` and trailing whitespace is removed
    from every line followed by a line break. Every line after the first
    loses its leading whitespace up to ``column`` (the 1-indexed column of
    the opening quote), tabs counting as ``tab_width`` columns. Lines
    indented less than that lose all of their leading whitespace; any
    indentation beyond it is kept as spaces.
    """
    lines = _LINE_BREAK.split(value)
    if len(lines) == 1:
        return value

    for i in range(len(lines) - 1):
        lines[i] = lines[i].rstrip()

    for i in range(1, len(lines)):
        line = lines[i]
        text = line.lstrip()
        lead = line[: len(line) - len(text)]
        if not lead:
            continue
        width = len(lead) + (tab_width - 1) * lead.count("\t")
        lines[i] = " " * max(0, width - column) + text

    return "\n".join(lines)


class Lexer:
    """
    Cursor over the source text.

    All ``read_*`` methods either consume what they recognise or raise a
    ParseError; ``mark``/``reset`` let the grammar backtrack over the few
    optional constructs that need it.
    """

    def __init__(
        self,
        text: str,
        file: Path | None = None,
        settings: ParserSettings = DEFAULT_SETTINGS,
    ):
        """
        Initialize lexer.

        Args:
            text: Source text
            file: Source file path (for error reporting)
            settings: Identifier policy and tab width
        """
        self.text = text
        self.file = file
        self.settings = settings
        self.pos = 0
        self.line = 1
        self.column = 1

    # ------------------------------------------------------------------
    # Cursor
    # ------------------------------------------------------------------

    def current_char(self) -> str | None:
        """Get current character or None if at end."""
        if self.pos >= len(self.text):
            return None
        return self.text[self.pos]

    def peek_char(self, offset: int = 1) -> str | None:
        """Peek ahead at character."""
        pos = self.pos + offset
        if pos >= len(self.text):
            return None
        return self.text[pos]

    def startswith(self, s: str) -> bool:
        return self.text.startswith(s, self.pos)

    def at_end(self) -> bool:
        return self.pos >= len(self.text)

    def advance(self) -> None:
        """Move to next character, updating line/column."""
        if self.pos < len(self.text):
            ch = self.text[self.pos]
            # A lone "\r" ends a line; in "\r\n" only the "\n" does
            if ch == "\n" or (ch == "\r" and self.peek_char() != "\n"):
                self.line += 1
                self.column = 1
            else:
                self.column += 1
            self.pos += 1

    def position(self) -> Position:
        return Position(line=self.line, column=self.column)

    def mark(self) -> tuple[int, int, int]:
        return (self.pos, self.line, self.column)

    def reset(self, mark: tuple[int, int, int]) -> None:
        self.pos, self.line, self.column = mark

    def error(
        self,
        message: str,
        expected: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> ParseError:
        """Build a ParseError at the cursor (or at the given position)."""
        line = self.line if line is None else line
        column = self.column if column is None else column
        return make_parse_error(
            message,
            self.file,
            line,
            column,
            snippet=source_snippet(self.text, line),
            expected=expected,
        )

    def _describe_current(self) -> str:
        ch = self.current_char()
        return "end of input" if ch is None else repr(ch)

    # ------------------------------------------------------------------
    # Whitespace and comments
    # ------------------------------------------------------------------

    def _at_block_comment(self) -> bool:
        # An unterminated "/*" is ordinary text, not a comment
        return self.startswith("/*") and self.text.find("*/", self.pos + 2) != -1

    def at_whitespace(self) -> bool:
        """True if whitespace or a comment starts at the cursor."""
        ch = self.current_char()
        if ch is None:
            return False
        return ch in WHITESPACE_CHARS or self.startswith("//") or self._at_block_comment()

    def skip_line_comment(self) -> None:
        """Skip comment (from // to end of line, newline included)."""
        while self.current_char() is not None and self.current_char() not in "\r\n":
            self.advance()
        self.advance()

    def skip_block_comment(self) -> None:
        """Skip a /* ... */ comment. Block comments do not nest."""
        start_line, start_col = self.line, self.column
        end = self.text.find("*/", self.pos + 2)
        if end == -1:
            raise self.error(
                "Unterminated block comment",
                expected="'*/'",
                line=start_line,
                column=start_col,
            )
        while self.pos < end + 2:
            self.advance()

    def skip_whitespace(self) -> bool:
        """
        Skip whitespace and comments.

        Returns:
            True if anything was consumed
        """
        start = self.pos
        while True:
            ch = self.current_char()
            if ch is None:
                break
            if ch in WHITESPACE_CHARS:
                self.advance()
            elif self.startswith("//"):
                self.skip_line_comment()
            elif self.startswith("/*"):
                self.skip_block_comment()
            else:
                break
        return self.pos > start

    # ------------------------------------------------------------------
    # Strings
    # ------------------------------------------------------------------

    def read_quoted_segment(self) -> str:
        """Read one quoted string; escapes are processed in double quotes only."""
        start_line = self.line
        start_col = self.column
        quote = self.current_char()
        self.advance()  # skip opening quote

        chars = []
        while True:
            current = self.current_char()
            if current is None:
                raise self.error(
                    "Unterminated string literal",
                    expected=f"closing {quote}",
                    line=start_line,
                    column=start_col,
                )
            if current == quote:
                self.advance()
                break

            if current == "\\" and quote == '"':
                escape_char = self.peek_char()
                if escape_char is None or escape_char not in ESCAPES:
                    raise self.error(
                        f"Invalid escape sequence \\{escape_char or ''}",
                        expected="one of \\\\ \\\" \\n \\r \\t",
                    )
                chars.append(ESCAPES[escape_char])
                self.advance()
                self.advance()
            else:
                chars.append(current)
                self.advance()

        return "".join(chars)

    def _at_unquoted_end(self) -> bool:
        ch = self.current_char()
        return ch is None or ch in UNQUOTED_STOP_CHARS or self.at_whitespace()

    def read_unquoted_string(self) -> str:
        """Read a run of characters up to whitespace, a comment, ';', '{', '}' or the end."""
        chars = [self.current_char() or ""]
        self.advance()
        while not self._at_unquoted_end():
            chars.append(self.current_char() or "")
            self.advance()
        return "".join(chars)

    def read_string_literal(self) -> str | None:
        """
        Read a string literal, quoted or unquoted.

        Quoted strings may be joined with ``+``. The result is de-indented
        relative to the column of the first character of the literal.

        Returns:
            The string value, or None (nothing consumed) if no string starts here
        """
        column = self.column
        ch = self.current_char()

        if ch is not None and ch in QUOTE_CHARS:
            segments = [self.read_quoted_segment()]
            while True:
                mark = self.mark()
                self.skip_whitespace()
                if self.current_char() != "+":
                    self.reset(mark)
                    break
                self.advance()
                self.skip_whitespace()
                next_char = self.current_char()
                if next_char is None or next_char not in QUOTE_CHARS:
                    raise self.error(
                        f"Expected quoted string after '+', got {self._describe_current()}",
                        expected="quoted string",
                    )
                segments.append(self.read_quoted_segment())
            value = "".join(segments)
        elif ch is not None and ch not in UNQUOTED_STOP_CHARS and not self.at_whitespace():
            value = self.read_unquoted_string()
        else:
            return None

        return dedent_string_literal(value, column, self.settings.tab_width)

    # ------------------------------------------------------------------
    # Identifiers
    # ------------------------------------------------------------------

    def at_identifier_start(self) -> bool:
        ch = self.current_char()
        if ch is None or not is_identifier_start(ch):
            return False
        if self.settings.identifier_policy == IdentifierPolicy.LEGACY:
            return ch not in LEGACY_FORBIDDEN_START
        return True

    def read_identifier(self) -> str:
        """
        Read an identifier.

        Raises:
            ParseError: If no valid identifier starts at the cursor
        """
        start_line, start_col = self.line, self.column
        if not self.at_identifier_start():
            raise self.error(
                f"Expected identifier, got {self._describe_current()}",
                expected="identifier",
            )

        chars = []
        current = self.current_char()
        while current is not None and is_identifier_char(current):
            chars.append(current)
            self.advance()
            current = self.current_char()
        value = "".join(chars)

        if (
            self.settings.identifier_policy == IdentifierPolicy.YANG
            and value[:3].lower() == "xml"
        ):
            raise self.error(
                f"Identifier {value!r} must not start with 'xml'",
                expected="identifier",
                line=start_line,
                column=start_col,
            )
        return value

    # ------------------------------------------------------------------
    # Dates
    # ------------------------------------------------------------------

    def read_fixed_uint(self, width: int) -> int:
        """Read exactly ``width`` ASCII digits as a non-negative integer."""
        digits = []
        for _ in range(width):
            ch = self.current_char()
            if ch is None or ch not in "0123456789":
                raise self.error(
                    f"Expected {width}-digit number, got {self._describe_current()}",
                    expected=f"{width} digits",
                )
            digits.append(ch)
            self.advance()
        return int("".join(digits))

    def expect_char(self, ch: str) -> None:
        if self.current_char() != ch:
            raise self.error(
                f"Expected {ch!r}, got {self._describe_current()}",
                expected=repr(ch),
            )
        self.advance()

    def read_date(self) -> date:
        """
        Read a ``YYYY-MM-DD`` date literal.

        Raises:
            ParseError: If the text is malformed or not a calendar date
        """
        start_line, start_col = self.line, self.column
        year = self.read_fixed_uint(4)
        self.expect_char("-")
        month = self.read_fixed_uint(2)
        self.expect_char("-")
        day = self.read_fixed_uint(2)
        try:
            return date(year, month, day)
        except ValueError as e:
            raise self.error(
                f"Invalid date {year:04d}-{month:02d}-{day:02d}: {e}",
                expected="date",
                line=start_line,
                column=start_col,
            ) from e
