"""
Builds type chains from ``typedef`` and ``type`` statements.

The builder works on one scope (typically a module's top level). Errors are
collected in ``errors`` rather than raised, so a single pass reports every
problem in the scope. A typedef that cannot be built is skipped; typedefs
that follow it are still processed.

Example:
    typedef percent {
        type uint8 { range "0..100"; }
        default 50;
        units "%";
    }
"""

import logging
from collections.abc import Mapping

from pydantic import ValidationError as PydanticValidationError

from .arguments import (
    parse_fraction_digits,
    parse_length_argument,
    parse_range_argument,
    parse_status_argument,
)
from .errors import ArgumentSyntaxError
from .ir.names import Namespace, QualifiedName
from .ir.restrictions import LengthRestriction, PatternRestriction, RangeRestriction, Restriction
from .ir.types import Decimal64Type, TypeReference, YangType
from .primitives import PRIMITIVE_NAMES, is_integer_type, lookup_primitive, numeric_bounds
from .schema_errors import (
    ArgumentExpected,
    ArgumentParserError,
    InvalidDefault,
    MissingRequiredStatement,
    SchemaError,
    ShadowedType,
    TooManyInstancesOfStatement,
    UnexpectedStatement,
    UnknownPrefix,
    UnresolvedTypeRef,
)
from .statements import Statement, StatementTree
from .validation import check_default, parse_value

logger = logging.getLogger(__name__)

# Sub-statements allowed inside typedef, with whether more than one is allowed
TYPEDEF_SUBSTATEMENTS = {
    "type": False,
    "default": False,
    "description": False,
    "reference": False,
    "status": False,
    "units": False,
}

TYPE_SUBSTATEMENTS = {
    "range": False,
    "length": False,
    "pattern": True,
    "fraction-digits": False,
}

RESTRICTION_SUBSTATEMENTS = {
    "error-message": False,
    "error-app-tag": False,
    "description": False,
    "reference": False,
}

STRING_LIKE = frozenset({"string", "binary"})


class TypeBuilder:
    """
    Turns typedef/type statements of one scope into :class:`YangType` chains.

    Attributes:
        namespace: Namespace given to every typedef built here
        prefix: Prefix that refers to ``namespace`` itself, if any
        imports: Prefix -> namespace of other modules
        external_types: Types of other modules, looked up by qualified name
        typedefs: Typedefs built so far, by qualified name
        errors: Schema errors collected so far
    """

    def __init__(
        self,
        namespace: Namespace,
        prefix: str | None = None,
        imports: Mapping[str, Namespace] | None = None,
        external_types: Mapping[QualifiedName, YangType] | None = None,
    ):
        self.namespace = namespace
        self.prefix = prefix
        self.imports = dict(imports or {})
        self.external_types = dict(external_types or {})
        self.typedefs: dict[QualifiedName, YangType] = {}
        self.errors: list[SchemaError] = []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _substatements(
        self, tree: StatementTree, stmt: Statement, allowed: Mapping[str, bool]
    ) -> dict[str, list[Statement]]:
        """Group children by keyword, reporting unknown and repeated ones."""
        grouped: dict[str, list[Statement]] = {}
        for child in tree.children_of(stmt.id):
            if child.prefix is not None:
                # Extension statements are not interpreted here
                continue
            if child.name not in allowed:
                self.errors.append(UnexpectedStatement(child))
                continue
            found = grouped.setdefault(child.name, [])
            if found and not allowed[child.name]:
                self.errors.append(TooManyInstancesOfStatement(child))
                continue
            found.append(child)
        return grouped

    def _argument(self, stmt: Statement) -> str | None:
        if stmt.argument is None:
            self.errors.append(ArgumentExpected(stmt))
        return stmt.argument

    def _single_argument(self, grouped: dict[str, list[Statement]], keyword: str) -> str | None:
        found = grouped.get(keyword)
        if not found:
            return None
        return self._argument(found[0])

    def knows_prefix(self, prefix: str | None) -> bool:
        return prefix is None or prefix == self.prefix or prefix in self.imports

    def lookup(self, reference: TypeReference) -> YangType | None:
        """
        Find the type a reference names.

        Unprefixed names and names using this scope's own prefix look in the
        scope's typedefs; unprefixed names then fall back to primitives.
        """
        prefix, name = reference.prefix, reference.name
        if prefix is None or prefix == self.prefix:
            local = self.typedefs.get(QualifiedName(namespace=self.namespace, name=name))
            if local is not None:
                return local
            if prefix is None:
                return lookup_primitive(name)
            return None

        namespace = self.imports.get(prefix)
        if namespace is None:
            return None
        return self.external_types.get(QualifiedName(namespace=namespace, name=name))

    # ------------------------------------------------------------------
    # type statements
    # ------------------------------------------------------------------

    def _restriction_metadata(self, tree: StatementTree, stmt: Statement) -> dict[str, str | None]:
        grouped = self._substatements(tree, stmt, RESTRICTION_SUBSTATEMENTS)
        return {
            "error_message": self._single_argument(grouped, "error-message"),
            "error_app_tag": self._single_argument(grouped, "error-app-tag"),
            "description": self._single_argument(grouped, "description"),
            "reference": self._single_argument(grouped, "reference"),
            "origin": stmt.origin,
        }

    def _build_restriction(
        self, tree: StatementTree, stmt: Statement, base: YangType
    ) -> Restriction | None:
        argument = self._argument(stmt)
        if argument is None:
            return None
        primitive_name = base.primitive_type.name.name

        try:
            match stmt.name:
                case "range":
                    bounds = numeric_bounds(base)
                    if bounds is None:
                        self.errors.append(UnexpectedStatement(stmt))
                        return None
                    ranges = parse_range_argument(
                        argument, bounds[0], bounds[1], integer=is_integer_type(base)
                    )
                    return RangeRestriction(ranges=ranges, **self._restriction_metadata(tree, stmt))
                case "length":
                    if primitive_name not in STRING_LIKE:
                        self.errors.append(UnexpectedStatement(stmt))
                        return None
                    ranges = parse_length_argument(argument)
                    return LengthRestriction(ranges=ranges, **self._restriction_metadata(tree, stmt))
                case "pattern":
                    if primitive_name != "string":
                        self.errors.append(UnexpectedStatement(stmt))
                        return None
                    return PatternRestriction(
                        pattern=argument, **self._restriction_metadata(tree, stmt)
                    )
        except ArgumentSyntaxError as e:
            self.errors.append(ArgumentParserError(stmt, e.message))
        except PydanticValidationError as e:
            self.errors.append(ArgumentParserError(stmt, _first_message(e)))
        return None

    def resolve_type_statement(
        self, tree: StatementTree, stmt: Statement
    ) -> tuple[YangType, list[Restriction]] | None:
        """
        Resolve the base type named by a ``type`` statement and build the
        restrictions listed under it.

        Returns:
            ``(base, restrictions)``, or None if the base cannot be resolved
        """
        argument = self._argument(stmt)
        if argument is None:
            return None

        prefix, _, name = argument.rpartition(":")
        reference = TypeReference(name, prefix or None, origin=stmt.origin)
        if not self.knows_prefix(reference.prefix):
            self.errors.append(UnknownPrefix(stmt, prefix))
            return None
        found = self.lookup(reference)
        if found is None:
            self.errors.append(UnresolvedTypeRef(stmt, argument))
            return None
        reference.resolve(found)
        base = reference.resolved_type

        grouped = self._substatements(tree, stmt, TYPE_SUBSTATEMENTS)

        digits_stmts = grouped.get("fraction-digits", [])
        if isinstance(base, Decimal64Type) and base.fraction_digits is None:
            if not digits_stmts:
                self.errors.append(MissingRequiredStatement(stmt, "fraction-digits"))
                return None
            digits_text = self._argument(digits_stmts[0])
            if digits_text is None:
                return None
            try:
                base.configure_fraction_digits(parse_fraction_digits(digits_text))
            except ArgumentSyntaxError as e:
                self.errors.append(ArgumentParserError(digits_stmts[0], e.message))
                return None
        elif digits_stmts:
            self.errors.append(UnexpectedStatement(digits_stmts[0]))

        restrictions: list[Restriction] = []
        for keyword in ("range", "length", "pattern"):
            for restriction_stmt in grouped.get(keyword, []):
                restriction = self._build_restriction(tree, restriction_stmt, base)
                if restriction is not None:
                    restrictions.append(restriction)

        return base, restrictions

    def build_type(
        self,
        tree: StatementTree,
        stmt_id: int,
        name: QualifiedName | None = None,
    ) -> YangType | None:
        """
        Build the type described by a ``type`` statement (e.g. of a leaf).

        Without restrictions and without a name, the referenced type itself
        is returned; otherwise a new type deriving from it.
        """
        stmt = tree[stmt_id]
        resolved = self.resolve_type_statement(tree, stmt)
        if resolved is None:
            return None
        base, restrictions = resolved
        if not restrictions and name is None:
            return base
        return YangType(
            name or base.name,
            base_type=base,
            restrictions=restrictions,
            origin=stmt.origin,
        )

    # ------------------------------------------------------------------
    # typedef statements
    # ------------------------------------------------------------------

    def add_typedef(self, tree: StatementTree, stmt_id: int) -> YangType | None:
        """
        Build a typedef and register it in this scope.

        Returns:
            The new type, or None if errors prevented building it
        """
        stmt = tree[stmt_id]
        name = self._argument(stmt)
        if name is None:
            return None

        qualified = QualifiedName(namespace=self.namespace, name=name)
        shadowed = self.typedefs.get(qualified)
        if shadowed is None and name in PRIMITIVE_NAMES:
            shadowed = lookup_primitive(name)
        if shadowed is not None:
            self.errors.append(ShadowedType(stmt, shadowed))
            return None

        grouped = self._substatements(tree, stmt, TYPEDEF_SUBSTATEMENTS)
        type_stmts = grouped.get("type")
        if not type_stmts:
            self.errors.append(MissingRequiredStatement(stmt, "type"))
            return None

        resolved = self.resolve_type_statement(tree, type_stmts[0])
        if resolved is None:
            return None
        base, restrictions = resolved

        type_ = YangType(qualified, base_type=base, restrictions=restrictions, origin=stmt.origin)
        self._apply_properties(type_, grouped)
        self._check_default(type_, grouped)

        self.typedefs[qualified] = type_
        logger.debug("Built typedef %s deriving from %s", qualified, base.name)
        return type_

    def add_typedefs(self, tree: StatementTree, parent_id: int) -> list[YangType]:
        """Build every ``typedef`` child of a statement, in document order."""
        built = []
        for stmt in tree.find_children(parent_id, "typedef"):
            type_ = self.add_typedef(tree, stmt.id)
            if type_ is not None:
                built.append(type_)
        return built

    def _apply_properties(self, type_: YangType, grouped: dict[str, list[Statement]]) -> None:
        for keyword in ("default", "description", "reference", "units"):
            value = self._single_argument(grouped, keyword)
            if value is not None:
                setattr(type_, keyword, value)

        status_stmts = grouped.get("status")
        if status_stmts:
            text = self._argument(status_stmts[0])
            if text is not None:
                try:
                    type_.status = parse_status_argument(text)
                except ArgumentSyntaxError as e:
                    self.errors.append(ArgumentParserError(status_stmts[0], e.message))

    def _check_default(self, type_: YangType, grouped: dict[str, list[Statement]]) -> None:
        default = type_.default
        if default is None:
            return
        if parse_value(type_, default) is None:
            # Only report against a local default statement; inherited ones
            # were reported when the base typedef was built
            default_stmts = grouped.get("default")
            if default_stmts:
                self.errors.append(
                    ArgumentParserError(
                        default_stmts[0],
                        f"{default!r} is not a valid {type_.primitive_type.name.name} value",
                    )
                )
            return
        violated = check_default(type_)
        if violated is not None:
            self.errors.append(InvalidDefault(type_, violated))


def _first_message(error: PydanticValidationError) -> str:
    errors = error.errors()
    if not errors:
        return str(error)
    return str(errors[0].get("msg", error))
