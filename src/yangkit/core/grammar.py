"""
Statement grammar.

Statement parser over the lexical layer:

    statement := (identifier ':')? identifier (ws1 string)? ws
                 ( ';' | '{' ws statement* '}' ) ws

Parsing is single pass and fail-fast: the first point where the input
diverges from the grammar raises one ParseError and the whole parse stops.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from .errors import make_parse_error, source_snippet
from .ir.location import Position
from .lexer import Lexer
from .settings import DEFAULT_SETTINGS, ParserSettings
from .statements import Statement, StatementTree

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """
    Result of parsing one top-level statement.

    Attributes:
        tree: Arena holding every parsed statement
        root: The top-level statement
        offset: Index of the first character not consumed by the parse
        end: Line and column of that character
        text: The parsed source text
    """

    tree: StatementTree
    root: Statement
    offset: int
    end: Position
    text: str

    @property
    def remainder(self) -> str:
        """Input left after the statement and its trailing whitespace."""
        return self.text[self.offset :]


class StatementParser:
    """Builds a statement tree from a lexer positioned at a statement."""

    def __init__(self, lexer: Lexer, tree: StatementTree | None = None):
        self.lexer = lexer
        self.tree = tree if tree is not None else StatementTree()

    def parse_statement(self) -> Statement:
        """
        Parse one statement with its children and trailing whitespace.

        Open blocks are kept on an explicit stack, so nesting depth is
        bounded only by memory.

        Raises:
            ParseError: If the input does not match the grammar
        """
        lx = self.lexer
        root = self._parse_header()
        open_blocks = [root] if self._parse_terminator(root) else []

        while open_blocks:
            parent = open_blocks[-1]
            ch = lx.current_char()
            if ch == "}":
                lx.advance()
                lx.skip_whitespace()
                open_blocks.pop()
                continue
            if not lx.at_identifier_start():
                raise lx.error(
                    f"Expected statement or '}}' in block of {parent.keyword!r}, "
                    f"got {'end of input' if ch is None else repr(ch)}",
                    expected="statement or '}'",
                )
            child = self._parse_header()
            self.tree.append_child(parent.id, child.id)
            if self._parse_terminator(child):
                open_blocks.append(child)

        return root

    def _parse_header(self) -> Statement:
        """Keyword, optional prefix and optional argument of a statement."""
        lx = self.lexer
        position = lx.position()

        # Keyword, optionally prefixed
        prefix = None
        name = lx.read_identifier()
        if lx.current_char() == ":":
            lx.advance()
            prefix = name
            name = lx.read_identifier()

        # Argument: needs at least one whitespace before it
        argument = None
        mark = lx.mark()
        if lx.skip_whitespace():
            argument = lx.read_string_literal()
            if argument is None:
                lx.reset(mark)
        lx.skip_whitespace()

        return self.tree.new(name, position, prefix=prefix, argument=argument)

    def _parse_terminator(self, stmt: Statement) -> bool:
        """Consume ';' or '{' after a header. Returns True if a block opened."""
        lx = self.lexer
        ch = lx.current_char()
        if ch == ";":
            lx.advance()
            lx.skip_whitespace()
            return False
        if ch == "{":
            lx.advance()
            lx.skip_whitespace()
            return True
        raise lx.error(
            f"Expected ';' or '{{' after statement {stmt.keyword!r}, "
            f"got {'end of input' if ch is None else repr(ch)}",
            expected="';' or '{'",
        )


def parse_statement(
    text: str,
    file: Path | None = None,
    settings: ParserSettings = DEFAULT_SETTINGS,
) -> ParseResult:
    """
    Parse the first statement of ``text``.

    Leading whitespace is skipped. Input after the statement is left
    untouched and reported through ``ParseResult.offset``.

    Raises:
        ParseError: On the first syntax error
    """
    lexer = Lexer(text, file, settings)
    lexer.skip_whitespace()
    parser = StatementParser(lexer)
    root = parser.parse_statement()
    parser.tree.root = root.id
    logger.debug(
        "Parsed %d statements from %s (root %r)",
        len(parser.tree),
        file or "<string>",
        root.keyword,
    )
    return ParseResult(
        tree=parser.tree,
        root=root,
        offset=lexer.pos,
        end=lexer.position(),
        text=text,
    )


def parse_document(
    text: str,
    file: Path | None = None,
    settings: ParserSettings = DEFAULT_SETTINGS,
) -> ParseResult:
    """
    Parse a document that must consist of exactly one top-level statement.

    Raises:
        ParseError: On a syntax error or trailing content after the statement
    """
    result = parse_statement(text, file, settings)
    if result.offset < len(text):
        raise make_parse_error(
            "Unexpected trailing content after top-level statement",
            file,
            result.end.line,
            result.end.column,
            snippet=source_snippet(text, result.end.line),
            expected="end of input",
        )
    return result


def parse_file(path: Path, settings: ParserSettings = DEFAULT_SETTINGS) -> ParseResult:
    """Read a UTF-8 file and parse it as a document."""
    logger.debug("Parsing %s", path)
    return parse_document(path.read_text(encoding="utf-8"), path, settings)
