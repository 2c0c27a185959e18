"""
Error types for yangkit parsing, argument handling and configuration.

Input-driven failures derive from :class:`YangkitError`. Broken internal
preconditions (using an unconfigured decimal64, re-parenting a statement,
reading an unresolved type reference) derive from :class:`ContractViolation`
instead, so callers never catch them by accident together with bad input.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional


class YangkitError(Exception):
    """Base exception for all input-driven yangkit errors."""

    def __init__(self, message: str, context: Optional["ErrorContext"] = None):
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format error message with context if available."""
        if self.context:
            return f"{self.context.format()}\n{self.message}"
        return self.message


class ParseError(YangkitError):
    """
    Raised when statement syntax cannot be parsed.

    Parsing is fail-fast: the first divergence from the grammar raises one
    ParseError carrying the position and what was expected there.
    """

    def __init__(
        self,
        message: str,
        context: Optional["ErrorContext"] = None,
        expected: str | None = None,
    ):
        self.expected = expected
        super().__init__(message, context)

    @property
    def line(self) -> int | None:
        return self.context.line if self.context else None

    @property
    def column(self) -> int | None:
        return self.context.column if self.context else None


class ArgumentSyntaxError(YangkitError):
    """
    Raised when a statement argument (range, length, date, ...) is malformed.

    Builders catch it and record an ``ArgumentParserError`` schema error.
    """

    pass


class ConfigError(YangkitError):
    """Raised when a yangkit.toml file holds invalid settings."""

    pass


class ContractViolation(RuntimeError):
    """Base class for programming errors: a caller broke an API precondition."""

    pass


class StatementAlreadyParentedError(ContractViolation, ValueError):
    """Raised when a statement that already has a parent is inserted again."""

    pass


class Decimal64NotConfiguredError(ContractViolation):
    """Raised when decimal64 is used before its fraction digits are set."""

    pass


class MissingCodecError(ContractViolation):
    """Raised when no type in a chain knows how to parse or serialize."""

    pass


class UnresolvedTypeError(ContractViolation):
    """Raised when a type reference is read before it has been resolved."""

    pass


class NamespaceNotAssignedError(ContractViolation):
    """Raised when a module's qualified name is needed before its namespace."""

    pass


@dataclass
class ErrorContext:
    """
    Context information for an error, including source location.

    Attributes:
        file: Path to the source file, or None for in-memory text
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional source lines around the error location
    """

    file: Path | None
    line: int
    column: int
    snippet: str | None = None

    def format(self) -> str:
        """
        Format error context as a human-readable string.

        Returns:
            Formatted string like: "model.yang:10:5"
        """
        location = f"{self.file or '<string>'}:{self.line}:{self.column}"
        if self.snippet:
            return f"{location}\n{self._format_snippet()}"
        return location

    def _format_snippet(self) -> str:
        """Format code snippet with line numbers and error marker."""
        if not self.snippet:
            return ""

        lines = self.snippet.split("\n")
        formatted = []

        # Snippet starts two lines above the error line
        start_line = max(1, self.line - 2)

        for i, line in enumerate(lines):
            line_num = start_line + i
            prefix = f"{line_num:4d} | "
            formatted.append(prefix + line)

            if line_num == self.line:
                marker_pos = len(prefix) + self.column - 1
                formatted.append(" " * marker_pos + "^^^")

        return "\n".join(formatted)


def source_snippet(text: str, line: int, context_lines: int = 2) -> str:
    """Return the lines of ``text`` surrounding ``line`` (1-indexed)."""
    lines = text.splitlines()
    start = max(0, line - 1 - context_lines)
    end = min(len(lines), line + context_lines)
    return "\n".join(lines[start:end])


def make_parse_error(
    message: str,
    file: Path | None,
    line: int,
    column: int,
    snippet: str | None = None,
    expected: str | None = None,
) -> ParseError:
    """
    Helper to create a ParseError with context.

    Args:
        message: Error description
        file: Source file path, or None for in-memory text
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        snippet: Optional code snippet
        expected: Description of the token the grammar expected

    Returns:
        ParseError with context attached
    """
    context = ErrorContext(file=file, line=line, column=column, snippet=snippet)
    return ParseError(message, context, expected=expected)
