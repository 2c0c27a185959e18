"""
Built-in primitive types.

Every type chain ends at one of these. The registry is read-only; the
primitives are process-wide singletons shared by all chains. decimal64 is
the exception: it needs its fraction digits before it can be used, so each
lookup returns a fresh, unconfigured node.
"""

import base64
import binascii
import re
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from .ir.names import QualifiedName
from .ir.types import Decimal64Type, PrimitiveCodec, YangType

_INTEGER_TEXT = re.compile(r"\s*[+-]?[0-9]+\s*", re.ASCII)
_DECIMAL_TEXT = re.compile(r"\s*[+-]?[0-9]+\.[0-9]+\s*", re.ASCII)

# (min, max) of the built-in integer types
INTEGER_BOUNDS: dict[str, tuple[int, int]] = {
    "int8": (-(2**7), 2**7 - 1),
    "int16": (-(2**15), 2**15 - 1),
    "int32": (-(2**31), 2**31 - 1),
    "int64": (-(2**63), 2**63 - 1),
    "uint8": (0, 2**8 - 1),
    "uint16": (0, 2**16 - 1),
    "uint32": (0, 2**32 - 1),
    "uint64": (0, 2**64 - 1),
}


def _integer_codec(low: int, high: int) -> PrimitiveCodec:
    def parse(text: str) -> int | None:
        if not isinstance(text, str) or not _INTEGER_TEXT.fullmatch(text):
            return None
        value = int(text)
        return value if low <= value <= high else None

    def serialize(value: Any) -> str | None:
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return str(value) if low <= value <= high else None

    return PrimitiveCodec(parse, serialize)


def _parse_empty(text: str) -> None:
    return None


def _serialize_empty(value: Any) -> None:
    return None


def _parse_boolean(text: str) -> bool | None:
    if text == "true":
        return True
    if text == "false":
        return False
    return None


def _serialize_boolean(value: Any) -> str | None:
    if not isinstance(value, bool):
        return None
    return "true" if value else "false"


def _parse_string(text: str) -> str | None:
    return text if isinstance(text, str) else None


def _serialize_string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _parse_binary(text: str) -> bytes | None:
    if not isinstance(text, str):
        return None
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError):
        return None


def _serialize_binary(value: Any) -> str | None:
    if not isinstance(value, (bytes, bytearray)):
        return None
    return base64.b64encode(value).decode("ascii")


def decimal64_codec(digits: int, min_value: float, max_value: float) -> PrimitiveCodec:
    """
    Codec of a decimal64 with ``digits`` fraction digits.

    The textual form always has a decimal point with at least one digit on
    each side; plain integers are rejected. Values are floats that must lie
    within ``[min_value, max_value]``.
    """

    def parse(text: str) -> float | None:
        if not isinstance(text, str) or not _DECIMAL_TEXT.fullmatch(text):
            return None
        value = float(text)
        return value if min_value <= value <= max_value else None

    def serialize(value: Any) -> str | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not min_value <= value <= max_value:
            return None
        return f"{value:.{digits}f}"

    return PrimitiveCodec(parse, serialize)


def _primitive(name: str, codec: PrimitiveCodec) -> YangType:
    return YangType(QualifiedName.builtin(name), codec=codec)


EMPTY = _primitive("empty", PrimitiveCodec(_parse_empty, _serialize_empty))
BOOLEAN = _primitive("boolean", PrimitiveCodec(_parse_boolean, _serialize_boolean))
INT8 = _primitive("int8", _integer_codec(*INTEGER_BOUNDS["int8"]))
INT16 = _primitive("int16", _integer_codec(*INTEGER_BOUNDS["int16"]))
INT32 = _primitive("int32", _integer_codec(*INTEGER_BOUNDS["int32"]))
INT64 = _primitive("int64", _integer_codec(*INTEGER_BOUNDS["int64"]))
UINT8 = _primitive("uint8", _integer_codec(*INTEGER_BOUNDS["uint8"]))
UINT16 = _primitive("uint16", _integer_codec(*INTEGER_BOUNDS["uint16"]))
UINT32 = _primitive("uint32", _integer_codec(*INTEGER_BOUNDS["uint32"]))
UINT64 = _primitive("uint64", _integer_codec(*INTEGER_BOUNDS["uint64"]))
STRING = _primitive("string", PrimitiveCodec(_parse_string, _serialize_string))
BINARY = _primitive("binary", PrimitiveCodec(_parse_binary, _serialize_binary))

PRIMITIVE_TYPES: MappingProxyType[str, YangType] = MappingProxyType(
    {
        t.name.name: t
        for t in (
            EMPTY,
            BOOLEAN,
            INT8,
            INT16,
            INT32,
            INT64,
            UINT8,
            UINT16,
            UINT32,
            UINT64,
            STRING,
            BINARY,
        )
    }
)

# Primitives that need per-use configuration are created on lookup
PRIMITIVE_FACTORIES: MappingProxyType[str, Callable[[], YangType]] = MappingProxyType(
    {"decimal64": Decimal64Type}
)

PRIMITIVE_NAMES = frozenset(PRIMITIVE_TYPES) | frozenset(PRIMITIVE_FACTORIES)


def lookup_primitive(name: str) -> YangType | None:
    """
    Find a primitive type by name.

    Returns:
        The shared primitive, a new unconfigured node for decimal64, or None
        if ``name`` is not a primitive type
    """
    if name in PRIMITIVE_TYPES:
        return PRIMITIVE_TYPES[name]
    factory = PRIMITIVE_FACTORIES.get(name)
    return factory() if factory else None


def is_integer_type(type_: YangType) -> bool:
    return type_.primitive_type.name.name in INTEGER_BOUNDS


def numeric_bounds(type_: YangType) -> tuple[float, float] | None:
    """``min``/``max`` of the primitive at the root of a chain, if numeric."""
    root = type_.primitive_type
    if isinstance(root, Decimal64Type):
        if root.fraction_digits is None:
            return None
        return (root.min_value, root.max_value)
    bounds = INTEGER_BOUNDS.get(root.name.name)
    if bounds is None:
        return None
    return (float(bounds[0]), float(bounds[1]))
