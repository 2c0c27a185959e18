"""
Validation engine for type chains.

Each function walks the explicit ``base_type`` chain of a type instead of
relying on method overriding, so the order in which levels are consulted is
visible here:

- restrictions are checked level by level, derived type first; each level's
  own list is checked in full before moving to its base, and the first
  failing restriction is reported;
- parsing and serializing use the codec of the nearest type that has one,
  which in practice is the primitive at the root of the chain.
"""

import functools
import re
from typing import Any

from .errors import MissingCodecError
from .ir.restrictions import LengthRestriction, PatternRestriction, RangeRestriction, Restriction
from .ir.types import PrimitiveCodec, ValidationResult, YangType, iter_chain


@functools.lru_cache(maxsize=256)
def _compiled(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def range_allows(restriction: RangeRestriction, value: Any) -> bool:
    """A value is in range if it converts to a float inside any interval."""
    if value is None:
        return False
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return False
    return any(number in r for r in restriction.ranges)


def length_allows(restriction: LengthRestriction, value: Any) -> bool:
    """Characters of a string, bytes of binary data; anything else fails."""
    if isinstance(value, str):
        length = len(value)
    elif isinstance(value, (bytes, bytearray)):
        length = len(value)
    else:
        return False
    return any(length in r for r in restriction.ranges)


def pattern_allows(restriction: PatternRestriction, value: Any) -> bool:
    """Strings fully matching the pattern; anything else fails."""
    if not isinstance(value, str):
        return False
    return _compiled(restriction.pattern).fullmatch(value) is not None


def restriction_allows(restriction: Restriction, value: Any) -> bool:
    """Check a single restriction against a value."""
    match restriction:
        case RangeRestriction():
            return range_allows(restriction, value)
        case LengthRestriction():
            return length_allows(restriction, value)
        case PatternRestriction():
            return pattern_allows(restriction, value)
    raise TypeError(f"Unknown restriction kind: {type(restriction).__name__}")


def validate_value(type_: YangType, value: Any) -> ValidationResult:
    """
    Validate a run-time value against a type and all of its bases.

    Returns:
        A successful result, or one naming the first violated restriction
        (derived-to-base order) and the type that owns it
    """
    for level in iter_chain(type_):
        for restriction in level.restrictions:
            if not restriction_allows(restriction, value):
                return ValidationResult(violated=restriction, level=level)
    return ValidationResult()


def _codec_of(type_: YangType) -> PrimitiveCodec:
    for level in iter_chain(type_):
        codec = level.codec
        if codec is not None:
            return codec
    raise MissingCodecError(f"Missing parsing logic for type {type_.name}")


def parse_value(type_: YangType, text: str) -> Any | None:
    """Parse text with the chain's codec; None if the text is not a valid literal."""
    return _codec_of(type_).parse(text)


def serialize_value(type_: YangType, value: Any) -> str | None:
    """Serialize with the chain's codec; None if the value is not representable."""
    return _codec_of(type_).serialize(value)


def check_default(type_: YangType) -> Restriction | None:
    """
    Validate the resolved default value of a type.

    Returns:
        The restriction violated by the default, or None when the type has
        no default or the default is valid. A default that does not parse
        is reported as None here; builders report it separately.
    """
    default = type_.default
    if default is None:
        return None
    value = parse_value(type_, default) if isinstance(default, str) else default
    if value is None:
        return None
    return validate_value(type_, value).violated
