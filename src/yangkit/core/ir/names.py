"""
Qualified names and namespaces.

Names are never compared by their local part alone: two types called
``percent`` in different modules are different entities, so every lookup
key is the (namespace, name) pair.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

YANG_BUILTIN_URI = "urn:ietf:params:xml:ns:yang:1"


class Namespace(BaseModel):
    """
    Namespace of a module.

    Attributes:
        module: Name of the module that owns the namespace (None for built-ins)
        uri: Namespace URI, None only for the invalid sentinel
    """

    module: str | None = None
    uri: str | None = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_valid(self) -> bool:
        return self.uri is not None

    def __str__(self) -> str:
        return f"{{{self.uri or ''}}}"


DEFAULT_NAMESPACE = Namespace(module=None, uri=YANG_BUILTIN_URI)
INVALID_NAMESPACE = Namespace(module=None, uri=None)


class QualifiedName(BaseModel):
    """Local name qualified by its namespace."""

    namespace: Namespace
    name: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def builtin(cls, name: str) -> QualifiedName:
        """Name in the default built-in namespace."""
        return cls(namespace=DEFAULT_NAMESPACE, name=name)

    def __str__(self) -> str:
        return f"{self.namespace}{self.name}"
