"""
Semantic schema errors.

Unlike syntax errors, schema errors are values: builders collect them in a
list and keep going, so one run reports every problem in a document. The
set of variants is closed; each renders as

    Statement "<name>" (<line>:<column>): <detail>

or just the detail when no statement is involved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar

from .errors import ParseError
from .ir.location import Position, StatementOrigin
from .ir.module import YangModule
from .ir.restrictions import Restriction
from .ir.types import YangType
from .statements import Statement


@dataclass(frozen=True)
class SchemaError(ABC):
    """Base of all schema error variants."""

    kind: ClassVar[str] = "schema_error"

    def subject(self) -> Statement | StatementOrigin | None:
        """Statement the error is reported against, if any."""
        return getattr(self, "statement", None)

    @abstractmethod
    def detail(self) -> str:
        """Message text without the statement prefix."""
        ...

    def __str__(self) -> str:
        subject = self.subject()
        if subject is None:
            return self.detail()
        name = subject.name if isinstance(subject, Statement) else subject.keyword
        return f'Statement "{name}" ({subject.position}): {self.detail()}'


def _origin_position(origin: StatementOrigin | None) -> str | None:
    return str(origin.position) if origin else None


@dataclass(frozen=True)
class SyntaxFailure(SchemaError):
    message: str
    position: Position | None = None

    kind: ClassVar[str] = "syntax_error"

    @classmethod
    def from_parse_error(cls, error: ParseError) -> SyntaxFailure:
        position = None
        if error.line is not None and error.column is not None:
            position = Position(line=error.line, column=error.column)
        return cls(message=error.message, position=position)

    def detail(self) -> str:
        if self.position is None:
            return self.message
        return f"Syntax error at {self.position}: {self.message}"


@dataclass(frozen=True)
class UnsupportedYangVersion(SchemaError):
    statement: Statement
    version: str

    kind: ClassVar[str] = "unsupported_yang_version"

    def detail(self) -> str:
        return f"Unsupported YANG version {self.version}."


@dataclass(frozen=True)
class ArgumentExpected(SchemaError):
    statement: Statement

    kind: ClassVar[str] = "argument_expected"

    def detail(self) -> str:
        return f'Statement "{self.statement.name}" expects an argument.'


@dataclass(frozen=True)
class NoArgumentExpected(SchemaError):
    statement: Statement

    kind: ClassVar[str] = "no_argument_expected"

    def detail(self) -> str:
        return f'Statement "{self.statement.name}" does not expect an argument.'


@dataclass(frozen=True)
class ArgumentParserError(SchemaError):
    statement: Statement
    message: str

    kind: ClassVar[str] = "argument_parser_error"

    def detail(self) -> str:
        return f'Error parsing argument for statement "{self.statement.name}":\n{self.message}'


@dataclass(frozen=True)
class ExpectedStatement(SchemaError):
    statement: Statement
    expected: str

    kind: ClassVar[str] = "expected_statement"

    def detail(self) -> str:
        return f'Expected "{self.expected}" statement, but got "{self.statement.name}".'


@dataclass(frozen=True)
class UnexpectedStatement(SchemaError):
    statement: Statement

    kind: ClassVar[str] = "unexpected_statement"

    def detail(self) -> str:
        return f'Unexpected statement "{self.statement.name}".'


@dataclass(frozen=True)
class MissingRequiredStatement(SchemaError):
    statement: Statement
    missing: str

    kind: ClassVar[str] = "missing_required_statement"

    def detail(self) -> str:
        return f'Missing required statement "{self.missing}".'


@dataclass(frozen=True)
class TooManyInstancesOfStatement(SchemaError):
    statement: Statement

    kind: ClassVar[str] = "too_many_instances"

    def detail(self) -> str:
        return f'Too many instances of the "{self.statement.name}" statement.'


@dataclass(frozen=True)
class AlreadyUsedModuleName(SchemaError):
    statement: Statement
    module: YangModule

    kind: ClassVar[str] = "already_used_module_name"

    def detail(self) -> str:
        position = _origin_position(self.module.origin)
        if position:
            return f"Module name already used by module at {position}."
        return "Module name already used."


@dataclass(frozen=True)
class UnknownPrefix(SchemaError):
    statement: Statement
    prefix: str

    kind: ClassVar[str] = "unknown_prefix"

    def detail(self) -> str:
        return f'Unknown prefix "{self.prefix}".'


@dataclass(frozen=True)
class AlreadyUsedPrefix(SchemaError):
    statement: Statement
    previous: Statement

    kind: ClassVar[str] = "already_used_prefix"

    def detail(self) -> str:
        return f"Prefix already registered. See statement at {self.previous.position}"


@dataclass(frozen=True)
class AlreadyUsedNamespace(SchemaError):
    statement: Statement
    module: YangModule

    kind: ClassVar[str] = "already_used_namespace"

    def detail(self) -> str:
        name = self.module.unqualified_name
        position = _origin_position(self.module.origin)
        if position:
            return f'Namespace already registered by module "{name}" ({position}).'
        return f'Namespace already registered by module "{name}".'


@dataclass(frozen=True)
class ShadowedType(SchemaError):
    statement: Statement
    shadowed: YangType

    kind: ClassVar[str] = "shadowed_type"

    def detail(self) -> str:
        position = _origin_position(self.shadowed.origin)
        if position:
            return f"This type shadows the type {self.shadowed.name} defined at {position}."
        return "This type shadows a type defined in an higher scope."


@dataclass(frozen=True)
class InvalidDefault(SchemaError):
    type: YangType
    restriction: Restriction

    kind: ClassVar[str] = "invalid_default"

    def subject(self) -> StatementOrigin | None:
        return self.type.origin

    def detail(self) -> str:
        origin = self.restriction.origin
        where = str(origin) if origin else "<position not available>"
        return f"This type has an invalid default value. See restriction at {where}."


@dataclass(frozen=True)
class UnresolvedTypeRef(SchemaError):
    statement: Statement
    type_name: str

    kind: ClassVar[str] = "unresolved_type_ref"

    def detail(self) -> str:
        return f"Cannot find type {self.type_name}."


SCHEMA_ERROR_TYPES: tuple[type[SchemaError], ...] = (
    SyntaxFailure,
    UnsupportedYangVersion,
    ArgumentExpected,
    NoArgumentExpected,
    ArgumentParserError,
    ExpectedStatement,
    UnexpectedStatement,
    MissingRequiredStatement,
    TooManyInstancesOfStatement,
    AlreadyUsedModuleName,
    UnknownPrefix,
    AlreadyUsedPrefix,
    AlreadyUsedNamespace,
    ShadowedType,
    InvalidDefault,
    UnresolvedTypeRef,
)
