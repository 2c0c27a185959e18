"""Core yangkit functionality: lexer, statement grammar, type system, validation, builders."""

from . import ir
from .errors import (
    ArgumentSyntaxError,
    ConfigError,
    ContractViolation,
    ErrorContext,
    ParseError,
    YangkitError,
)
from .grammar import ParseResult, parse_document, parse_file, parse_statement
from .modules import build_module
from .primitives import PRIMITIVE_TYPES, lookup_primitive
from .schema_errors import SchemaError
from .settings import DEFAULT_SETTINGS, IdentifierPolicy, ParserSettings, find_settings, load_settings
from .statements import Statement, StatementTree
from .typedefs import TypeBuilder
from .validation import check_default, parse_value, serialize_value, validate_value

__all__ = [
    "ir",
    # Errors
    "YangkitError",
    "ParseError",
    "ArgumentSyntaxError",
    "ConfigError",
    "ContractViolation",
    "ErrorContext",
    "SchemaError",
    # Parsing
    "ParseResult",
    "Statement",
    "StatementTree",
    "parse_statement",
    "parse_document",
    "parse_file",
    # Settings
    "DEFAULT_SETTINGS",
    "IdentifierPolicy",
    "ParserSettings",
    "load_settings",
    "find_settings",
    # Types
    "PRIMITIVE_TYPES",
    "lookup_primitive",
    "validate_value",
    "parse_value",
    "serialize_value",
    "check_default",
    # Builders
    "TypeBuilder",
    "build_module",
]
