"""
Module-level model entities.

Only the data holders live here. Building the cross-module graph (prefix
tables, imports, type export between modules) is the job of a semantic
builder outside this package.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..errors import NamespaceNotAssignedError
from .location import StatementOrigin
from .names import INVALID_NAMESPACE, Namespace, QualifiedName
from .types import YangType


@dataclass
class ModuleRevision:
    """A ``revision`` entry of a module."""

    date: date
    description: str | None = None
    reference: str | None = None
    origin: StatementOrigin | None = None


@dataclass(eq=False)
class YangModule:
    """
    A schema module.

    The namespace starts out as the invalid sentinel and must be assigned
    before the module's qualified name is available.
    """

    unqualified_name: str
    namespace: Namespace = INVALID_NAMESPACE
    prefix: str | None = None
    contact: str | None = None
    organization: str | None = None
    description: str | None = None
    reference: str | None = None
    revisions: list[ModuleRevision] = field(default_factory=list)
    exported_types: dict[QualifiedName, YangType] = field(default_factory=dict)
    origin: StatementOrigin | None = None

    @property
    def qualified_name(self) -> QualifiedName:
        if not self.namespace.is_valid:
            raise NamespaceNotAssignedError(
                f"Cannot retrieve the qualified name of module {self.unqualified_name!r} "
                "before its namespace is set"
            )
        return QualifiedName(namespace=self.namespace, name=self.unqualified_name)

    @property
    def latest_revision(self) -> ModuleRevision | None:
        if not self.revisions:
            return None
        return max(self.revisions, key=lambda r: r.date)

    def assign_namespace(self, uri: str) -> Namespace:
        """Create and assign the namespace owned by this module."""
        self.namespace = Namespace(module=self.unqualified_name, uri=uri)
        return self.namespace

    def export_type(self, type_: YangType) -> None:
        self.exported_types[type_.name] = type_
