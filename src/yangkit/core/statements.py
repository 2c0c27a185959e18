"""
Generic statement tree.

Statements are the universal syntax unit: a keyword with an optional
prefix, an optional argument and ordered child statements. Nodes live in a
:class:`StatementTree` arena and refer to each other by id, never by live
reference. The arena owns the parent/child wiring: every structural
operation updates the affected child's parent id in the same call, and a
statement can only ever have one parent.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from .errors import ContractViolation, StatementAlreadyParentedError
from .ir.location import Position, StatementOrigin

StatementId = int

INDENT = "  "


@dataclass(eq=False)
class Statement:
    """
    A single node of the statement tree.

    Attributes:
        id: Stable id of the node inside its tree
        name: Statement keyword
        position: Where the statement starts (its prefix, if any)
        prefix: Optional namespace prefix of the keyword
        argument: Optional argument string
        parent: Id of the owning statement, None for roots and detached nodes
    """

    id: StatementId
    name: str
    position: Position
    prefix: str | None = None
    argument: str | None = None
    parent: StatementId | None = field(default=None, init=False)
    _children: list[StatementId] = field(default_factory=list, init=False, repr=False)

    @property
    def children(self) -> tuple[StatementId, ...]:
        return tuple(self._children)

    @property
    def keyword(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name

    @property
    def origin(self) -> StatementOrigin:
        return StatementOrigin(keyword=self.name, prefix=self.prefix, position=self.position)

    def __str__(self) -> str:
        return f'Statement "{self.keyword}" ({self.position})'


class StatementTree:
    """
    Arena owning every statement produced by one parse.

    Statements are created with :meth:`new` and wired together with the
    child operations below. ``root`` is the id of the top-level statement
    once the grammar has produced one.
    """

    def __init__(self) -> None:
        self._nodes: dict[StatementId, Statement] = {}
        self._next_id: StatementId = 0
        self.root: StatementId | None = None

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, stmt_id: object) -> bool:
        return stmt_id in self._nodes

    def __getitem__(self, stmt_id: StatementId) -> Statement:
        try:
            return self._nodes[stmt_id]
        except KeyError:
            raise ContractViolation(f"No statement with id {stmt_id} in this tree") from None

    def get(self, stmt_id: StatementId) -> Statement | None:
        return self._nodes.get(stmt_id)

    @property
    def root_statement(self) -> Statement:
        if self.root is None:
            raise ContractViolation("Statement tree has no root")
        return self[self.root]

    def new(
        self,
        name: str,
        position: Position,
        prefix: str | None = None,
        argument: str | None = None,
    ) -> Statement:
        """Create a detached statement in this tree."""
        stmt = Statement(
            id=self._next_id,
            name=name,
            position=position,
            prefix=prefix,
            argument=argument,
        )
        self._nodes[stmt.id] = stmt
        self._next_id += 1
        return stmt

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def parent_of(self, stmt_id: StatementId) -> Statement | None:
        parent = self[stmt_id].parent
        return None if parent is None else self[parent]

    def children_of(self, stmt_id: StatementId) -> list[Statement]:
        return [self._nodes[c] for c in self[stmt_id]._children]

    def find_children(
        self, stmt_id: StatementId, name: str, prefix: str | None = None
    ) -> list[Statement]:
        """Children with the given keyword (and prefix, compared exactly)."""
        return [c for c in self.children_of(stmt_id) if c.name == name and c.prefix == prefix]

    def first_child(
        self, stmt_id: StatementId, name: str, prefix: str | None = None
    ) -> Statement | None:
        found = self.find_children(stmt_id, name, prefix)
        return found[0] if found else None

    def ancestors(self, stmt_id: StatementId) -> Iterator[Statement]:
        """Yield the parent, grandparent, ... of a statement."""
        node = self.parent_of(stmt_id)
        while node is not None:
            yield node
            node = self.parent_of(node.id)

    def walk(self, stmt_id: StatementId | None = None) -> Iterator[Statement]:
        """Pre-order traversal starting at ``stmt_id`` (the root by default)."""
        start = self.root_statement.id if stmt_id is None else stmt_id
        stack = [start]
        while stack:
            stmt = self[stack.pop()]
            yield stmt
            stack.extend(reversed(stmt._children))

    # ------------------------------------------------------------------
    # Structural operations
    # ------------------------------------------------------------------

    def _check_insertable(self, parent_id: StatementId, child_id: StatementId) -> Statement:
        child = self[child_id]
        if child.parent is not None:
            raise StatementAlreadyParentedError(
                f"{child} already has a parent; remove it from its parent first"
            )
        if child_id == parent_id or any(a.id == child_id for a in self.ancestors(parent_id)):
            raise ContractViolation(f"{child} cannot become a descendant of itself")
        return child

    def insert_child(self, parent_id: StatementId, index: int, child_id: StatementId) -> None:
        """Insert a detached statement at ``index`` among the parent's children."""
        parent = self[parent_id]
        child = self._check_insertable(parent_id, child_id)
        parent._children.insert(index, child_id)
        child.parent = parent_id

    def append_child(self, parent_id: StatementId, child_id: StatementId) -> None:
        self.insert_child(parent_id, len(self[parent_id]._children), child_id)

    def replace_child(
        self, parent_id: StatementId, index: int, child_id: StatementId
    ) -> Statement:
        """Replace the child at ``index``; the replaced statement is detached and returned."""
        parent = self[parent_id]
        child = self._check_insertable(parent_id, child_id)
        old = self._nodes[parent._children[index]]
        old.parent = None
        parent._children[index] = child_id
        child.parent = parent_id
        return old

    def remove_child(self, parent_id: StatementId, index: int) -> Statement:
        """Remove the child at ``index``; it stays in the arena, detached."""
        parent = self[parent_id]
        old = self._nodes[parent._children.pop(index)]
        old.parent = None
        return old

    def detach(self, stmt_id: StatementId) -> Statement:
        """Remove a statement from its parent, if it has one."""
        stmt = self[stmt_id]
        if stmt.parent is not None:
            siblings = self[stmt.parent]._children
            self.remove_child(stmt.parent, siblings.index(stmt_id))
        return stmt

    def clear_children(self, parent_id: StatementId) -> None:
        parent = self[parent_id]
        for child_id in parent._children:
            self._nodes[child_id].parent = None
        parent._children.clear()

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def render(self, stmt_id: StatementId | None = None) -> str:
        """
        Render a subtree as canonical source text.

        Arguments are always double-quoted. Continuation lines of multi-line
        arguments are padded so that re-parsing the output strips exactly
        the padding and yields the same argument.
        """
        start = self.root_statement.id if stmt_id is None else stmt_id
        lines: list[str] = []
        # Entries are (statement, depth, closing brace pending)
        stack: list[tuple[StatementId, int, bool]] = [(start, 0, False)]
        while stack:
            current, depth, closing = stack.pop()
            if closing:
                lines.append(INDENT * depth + "}")
                continue
            stmt = self[current]
            head = INDENT * depth + stmt.keyword
            if stmt.argument is not None:
                head += " "
                # Opening quote column, 1-indexed
                head += quote_argument(stmt.argument, len(head) + 1)
            if not stmt._children:
                lines.append(head + ";")
                continue
            lines.append(head + " {")
            stack.append((current, depth, True))
            stack.extend((child_id, depth + 1, False) for child_id in reversed(stmt._children))
        return "\n".join(lines) + "\n"

    @staticmethod
    def _node_dict(stmt: Statement, positions: bool) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": stmt.name,
            "prefix": stmt.prefix,
            "argument": stmt.argument,
        }
        if positions:
            data["line"] = stmt.position.line
            data["column"] = stmt.position.column
        data["children"] = []
        return data

    def to_dict(self, stmt_id: StatementId | None = None, positions: bool = True) -> dict[str, Any]:
        """JSON-compatible nested representation of a subtree."""
        top = self[self.root_statement.id if stmt_id is None else stmt_id]
        result = self._node_dict(top, positions)
        stack = [(top, result)]
        while stack:
            stmt, data = stack.pop()
            for child_id in stmt._children:
                child = self[child_id]
                child_data = self._node_dict(child, positions)
                data["children"].append(child_data)
                stack.append((child, child_data))
        return result


_ESCAPES = {"\\": "\\\\", '"': '\\"', "\t": "\\t", "\r": "\\r"}


def quote_argument(argument: str, column: int) -> str:
    """
    Double-quote an argument that will be emitted at ``column``.

    Each line break is written as ``\\n`` followed by ``column`` spaces, which
    the string de-indentation removes again on parse.
    """
    parts = []
    for ch in argument:
        if ch == "\n":
            parts.append("\\n" + " " * column)
        else:
            parts.append(_ESCAPES.get(ch, ch))
    return '"' + "".join(parts) + '"'
