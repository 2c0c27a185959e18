"""
yangkit model types.

Types are organized into submodules and re-exported from this package.
"""

from .location import Position, StatementOrigin
from .module import ModuleRevision, YangModule
from .names import (
    DEFAULT_NAMESPACE,
    INVALID_NAMESPACE,
    YANG_BUILTIN_URI,
    Namespace,
    QualifiedName,
)
from .restrictions import (
    Interval,
    LengthRestriction,
    PatternRestriction,
    RangeRestriction,
    Restriction,
    RestrictionBase,
)
from .types import (
    INT64_MAX,
    INT64_MIN,
    PROPERTY_FALLBACKS,
    Decimal64Type,
    Inherited,
    InheritedProperty,
    PrimitiveCodec,
    TypeReference,
    ValidationResult,
    YangStatus,
    YangType,
    iter_chain,
    resolve_property,
)

__all__ = [
    # Location
    "Position",
    "StatementOrigin",
    # Names
    "DEFAULT_NAMESPACE",
    "INVALID_NAMESPACE",
    "YANG_BUILTIN_URI",
    "Namespace",
    "QualifiedName",
    # Restrictions
    "Interval",
    "LengthRestriction",
    "PatternRestriction",
    "RangeRestriction",
    "Restriction",
    "RestrictionBase",
    # Types
    "INT64_MAX",
    "INT64_MIN",
    "PROPERTY_FALLBACKS",
    "Decimal64Type",
    "Inherited",
    "InheritedProperty",
    "PrimitiveCodec",
    "TypeReference",
    "ValidationResult",
    "YangStatus",
    "YangType",
    "iter_chain",
    "resolve_property",
    # Modules
    "ModuleRevision",
    "YangModule",
]
