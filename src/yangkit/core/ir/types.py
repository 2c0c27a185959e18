"""
Type nodes for the yangkit type model.

A type is a node in a single-inheritance chain: a derived type holds an
explicit reference to its base type, and every question about the type
(its default value, whether a value is valid, how to parse it) is answered
by walking that chain from the derived type down to the primitive at its
root. Built-in primitives are process-wide singletons and are shared as
the base of many chains.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, NamedTuple, TypeVar, overload

from ..errors import ContractViolation, Decimal64NotConfiguredError, UnresolvedTypeError
from .location import StatementOrigin
from .names import QualifiedName
from .restrictions import Restriction

T = TypeVar("T")

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class YangStatus(str, Enum):
    """
    Status of a schema node.

    A current node cannot reference deprecated or obsolete nodes, and a
    deprecated node cannot reference obsolete ones.
    """

    CURRENT = "current"
    DEPRECATED = "deprecated"
    OBSOLETE = "obsolete"


class PrimitiveCodec(NamedTuple):
    """Parse and serialize functions of a primitive type.

    Both return None when the input cannot be represented.
    """

    parse: Callable[[str], Any | None]
    serialize: Callable[[Any], str | None]


@dataclass
class Inherited(Generic[T]):
    """
    Local override slot of an inheritable property.

    ``is_set`` distinguishes "not overridden here" from an explicit value,
    so that a derived type can shadow its base even with a falsy value.
    """

    value: T | None = None
    is_set: bool = False

    def set(self, value: T) -> None:
        self.value = value
        self.is_set = True

    def clear(self) -> None:
        self.value = None
        self.is_set = False


# Value returned when no type in the chain overrides a property
PROPERTY_FALLBACKS: dict[str, Any] = {
    "default": None,
    "description": None,
    "reference": None,
    "status": YangStatus.CURRENT,
    "units": None,
}


class InheritedProperty(Generic[T]):
    """
    Descriptor exposing an inheritable property on :class:`YangType`.

    Reading resolves through the base chain; assigning sets the local
    override; deleting removes it.
    """

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    @overload
    def __get__(self, instance: None, owner: type) -> InheritedProperty[T]: ...
    @overload
    def __get__(self, instance: YangType, owner: type) -> T | None: ...

    def __get__(self, instance: YangType | None, owner: type) -> Any:
        if instance is None:
            return self
        return resolve_property(instance, self.name)

    def __set__(self, instance: YangType, value: T) -> None:
        instance.local(self.name).set(value)

    def __delete__(self, instance: YangType) -> None:
        instance.local(self.name).clear()


@dataclass(frozen=True)
class ValidationResult:
    """
    Outcome of validating a value against a type chain.

    Attributes:
        violated: First restriction that rejected the value, None on success
        level: Type in the chain that owns the violated restriction
    """

    violated: Restriction | None = None
    level: YangType | None = None

    @property
    def ok(self) -> bool:
        return self.violated is None

    def __bool__(self) -> bool:
        return self.ok


class YangType:
    """
    A type in the schema: either a primitive or a type derived from a base.

    Attributes:
        name: Qualified name of the type
        base_type: Type this one derives from, None for primitives
        restrictions: Restrictions added at this level of the chain
        codec: Parse/serialize functions, set on primitives only
        origin: Statement the type was built from, if any
    """

    default = InheritedProperty[Any]()
    description = InheritedProperty[str]()
    reference = InheritedProperty[str]()
    status = InheritedProperty[YangStatus]()
    units = InheritedProperty[str]()

    def __init__(
        self,
        name: QualifiedName,
        base_type: YangType | None = None,
        restrictions: list[Restriction] | None = None,
        codec: PrimitiveCodec | None = None,
        origin: StatementOrigin | None = None,
    ):
        self.name = name
        self._base_type: YangType | None = None
        self.base_type = base_type
        self.restrictions: list[Restriction] = list(restrictions or [])
        self._codec = codec
        self.origin = origin
        self._locals: dict[str, Inherited[Any]] = {
            prop: Inherited() for prop in PROPERTY_FALLBACKS
        }

    def __repr__(self) -> str:
        base = f" <- {self._base_type.name.name}" if self._base_type else ""
        return f"YangType({self.name.name}{base})"

    @property
    def base_type(self) -> YangType | None:
        return self._base_type

    @base_type.setter
    def base_type(self, base: YangType | None) -> None:
        node = base
        while node is not None:
            if node is self:
                raise ContractViolation(f"Type {self.name} cannot derive from itself")
            node = node.base_type
        self._base_type = base

    @property
    def codec(self) -> PrimitiveCodec | None:
        return self._codec

    @property
    def is_primitive(self) -> bool:
        return self._base_type is None

    @property
    def primitive_type(self) -> YangType:
        """Root of the chain."""
        node = self
        while node._base_type is not None:
            node = node._base_type
        return node

    def local(self, prop: str) -> Inherited[Any]:
        """Local override slot of an inheritable property."""
        try:
            return self._locals[prop]
        except KeyError:
            raise ContractViolation(f"{prop!r} is not an inheritable property") from None

    def chain(self) -> Iterator[YangType]:
        """Yield this type, then its base, down to the primitive."""
        return iter_chain(self)

    def is_valid(self, value: Any) -> ValidationResult:
        from ..validation import validate_value

        return validate_value(self, value)

    def parse(self, text: str) -> Any | None:
        from ..validation import parse_value

        return parse_value(self, text)

    def serialize(self, value: Any) -> str | None:
        from ..validation import serialize_value

        return serialize_value(self, value)


class Decimal64Type(YangType):
    """
    The ``decimal64`` type.

    A decimal64 is a signed 64-bit integer scaled by ``10**-fraction_digits``.
    It is built in two phases: construction, then
    :meth:`configure_fraction_digits`. Parsing or serializing in between is
    a programming error.
    """

    def __init__(self, origin: StatementOrigin | None = None):
        super().__init__(QualifiedName.builtin("decimal64"), origin=origin)
        self.fraction_digits: int | None = None
        self.min_value = 0.0
        self.max_value = 0.0

    def configure_fraction_digits(self, digits: int) -> None:
        """
        Set the number of fraction digits.

        Raises:
            ValueError: If ``digits`` is outside ``[1, 18]``
        """
        if not 1 <= digits <= 18:
            raise ValueError(f"fraction-digits must be between 1 and 18, got {digits}")
        self.fraction_digits = digits
        self.min_value = float(INT64_MIN) / (10.0**digits)
        self.max_value = float(INT64_MAX) / (10.0**digits)
        from ..primitives import decimal64_codec

        self._codec = decimal64_codec(digits, self.min_value, self.max_value)

    @property
    def codec(self) -> PrimitiveCodec | None:
        if self.fraction_digits is None:
            raise Decimal64NotConfiguredError(
                "Cannot parse or serialize decimal64 before setting fraction digits"
            )
        return self._codec


def iter_chain(type_: YangType) -> Iterator[YangType]:
    """Walk a type chain from derived to base."""
    node: YangType | None = type_
    while node is not None:
        yield node
        node = node.base_type


def resolve_property(type_: YangType, prop: str) -> Any:
    """
    Resolve an inheritable property.

    Returns the local override of the first type in the chain that has one,
    else the fallback for the property (``current`` for status, None for
    the others).
    """
    for node in iter_chain(type_):
        slot = node.local(prop)
        if slot.is_set:
            return slot.value
    return PROPERTY_FALLBACKS[prop]


class TypeReference:
    """
    Reference to a type by (optionally prefixed) name, resolved later.

    Builders create references while walking statements and resolve them
    once every typedef in scope is known.
    """

    def __init__(self, name: str, prefix: str | None = None, origin: StatementOrigin | None = None):
        self.name = name
        self.prefix = prefix
        self.origin = origin
        self._resolved: YangType | None = None

    def __repr__(self) -> str:
        return f"TypeReference({self.text!r}, resolved={self.is_resolved})"

    @property
    def text(self) -> str:
        return f"{self.prefix}:{self.name}" if self.prefix else self.name

    @property
    def is_resolved(self) -> bool:
        return self._resolved is not None

    @property
    def resolved_type(self) -> YangType:
        if self._resolved is None:
            raise UnresolvedTypeError(f"Type reference {self.text!r} has not been resolved")
        return self._resolved

    def resolve(self, type_: YangType) -> None:
        self._resolved = type_
