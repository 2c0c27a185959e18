"""
Single-module builder.

Reads the header of a ``module`` statement (namespace, prefix, meta data,
revisions) and builds its top-level typedefs into a :class:`YangModule`.
Data definition statements and imports are left alone; only one module is
looked at, so names imported from other modules stay unresolved.
"""

import logging

from .arguments import parse_date_argument
from .errors import ArgumentSyntaxError
from .ir.module import ModuleRevision, YangModule
from .schema_errors import (
    ArgumentExpected,
    ArgumentParserError,
    ExpectedStatement,
    MissingRequiredStatement,
    SchemaError,
    TooManyInstancesOfStatement,
    UnexpectedStatement,
    UnsupportedYangVersion,
)
from .statements import Statement, StatementTree
from .typedefs import TypeBuilder

logger = logging.getLogger(__name__)

SUPPORTED_YANG_VERSIONS = frozenset({"1"})

HEADER_STATEMENTS = frozenset(
    {"yang-version", "namespace", "prefix", "organization", "contact", "description", "reference"}
)
REVISION_SUBSTATEMENTS = frozenset({"description", "reference"})


def _single(
    tree: StatementTree, stmt: Statement, keyword: str, errors: list[SchemaError]
) -> Statement | None:
    found = tree.find_children(stmt.id, keyword)
    for extra in found[1:]:
        errors.append(TooManyInstancesOfStatement(extra))
    return found[0] if found else None


def _argument_of(stmt: Statement | None, errors: list[SchemaError]) -> str | None:
    if stmt is None:
        return None
    if stmt.argument is None:
        errors.append(ArgumentExpected(stmt))
    return stmt.argument


def _build_revision(
    tree: StatementTree, stmt: Statement, errors: list[SchemaError]
) -> ModuleRevision | None:
    text = _argument_of(stmt, errors)
    if text is None:
        return None
    try:
        revision_date = parse_date_argument(text)
    except ArgumentSyntaxError as e:
        errors.append(ArgumentParserError(stmt, e.message))
        return None

    for child in tree.children_of(stmt.id):
        if child.prefix is None and child.name not in REVISION_SUBSTATEMENTS:
            errors.append(UnexpectedStatement(child))

    return ModuleRevision(
        date=revision_date,
        description=_argument_of(_single(tree, stmt, "description", errors), errors),
        reference=_argument_of(_single(tree, stmt, "reference", errors), errors),
        origin=stmt.origin,
    )


def build_module(
    tree: StatementTree, root_id: int | None = None
) -> tuple[YangModule | None, list[SchemaError]]:
    """
    Build a module from a parsed ``module`` statement.

    Args:
        tree: Parsed statement tree
        root_id: The module statement; defaults to the tree's root

    Returns:
        Tuple of (module or None, schema errors). The module is None only
        when the statement is not a named module; otherwise it holds
        whatever could be built despite the errors.
    """
    errors: list[SchemaError] = []
    stmt = tree[root_id] if root_id is not None else tree.root_statement

    if stmt.prefix is not None or stmt.name != "module":
        errors.append(ExpectedStatement(stmt, "module"))
        return None, errors
    name = _argument_of(stmt, errors)
    if name is None:
        return None, errors

    module = YangModule(unqualified_name=name, origin=stmt.origin)

    version = _argument_of(_single(tree, stmt, "yang-version", errors), errors)
    if version is not None and version not in SUPPORTED_YANG_VERSIONS:
        errors.append(UnsupportedYangVersion(tree.first_child(stmt.id, "yang-version"), version))

    namespace_stmt = _single(tree, stmt, "namespace", errors)
    if namespace_stmt is None:
        errors.append(MissingRequiredStatement(stmt, "namespace"))
    else:
        uri = _argument_of(namespace_stmt, errors)
        if uri is not None:
            module.assign_namespace(uri)

    prefix_stmt = _single(tree, stmt, "prefix", errors)
    if prefix_stmt is None:
        errors.append(MissingRequiredStatement(stmt, "prefix"))
    module.prefix = _argument_of(prefix_stmt, errors)

    module.organization = _argument_of(_single(tree, stmt, "organization", errors), errors)
    module.contact = _argument_of(_single(tree, stmt, "contact", errors), errors)
    module.description = _argument_of(_single(tree, stmt, "description", errors), errors)
    module.reference = _argument_of(_single(tree, stmt, "reference", errors), errors)

    for revision_stmt in tree.find_children(stmt.id, "revision"):
        revision = _build_revision(tree, revision_stmt, errors)
        if revision is not None:
            module.revisions.append(revision)

    if module.namespace.is_valid:
        builder = TypeBuilder(module.namespace, prefix=module.prefix)
        for type_ in builder.add_typedefs(tree, stmt.id):
            module.export_type(type_)
        errors.extend(builder.errors)
    else:
        logger.debug("Skipping typedefs of module %s: no namespace", name)

    skipped = [
        child.keyword
        for child in tree.children_of(stmt.id)
        if child.name not in HEADER_STATEMENTS and child.name not in {"revision", "typedef"}
    ]
    if skipped:
        logger.debug("Module %s: not interpreting %s", name, ", ".join(skipped))

    logger.debug(
        "Built module %s: %d types, %d errors", name, len(module.exported_types), len(errors)
    )
    return module, errors
