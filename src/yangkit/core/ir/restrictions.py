"""
Restriction definitions for yangkit types.

The set of restrictions is closed: range, length and pattern. They form a
discriminated union on ``kind`` so that every consumer can match on all
three variants explicitly. The matching logic lives in
:mod:`yangkit.core.validation`.
"""

from __future__ import annotations

import re
from typing import Annotated, Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .location import StatementOrigin

N = TypeVar("N", int, float)


class Interval(BaseModel, Generic[N]):
    """Inclusive ``[low, high]`` interval."""

    low: N
    high: N

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_order(self) -> Interval[N]:
        if self.low > self.high:
            raise ValueError(f"Interval lower bound {self.low} exceeds upper bound {self.high}")
        return self

    def __contains__(self, value: object) -> bool:
        return self.low <= value <= self.high  # type: ignore[operator]

    def __str__(self) -> str:
        if self.low == self.high:
            return _format_bound(self.low)
        return f"{_format_bound(self.low)}..{_format_bound(self.high)}"


def _format_bound(value: float) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class RestrictionBase(BaseModel):
    """Diagnostic metadata shared by every restriction kind."""

    error_message: str | None = None
    error_app_tag: str | None = None
    description: str | None = None
    reference: str | None = None
    origin: StatementOrigin | None = None

    model_config = ConfigDict(frozen=True)


class RangeRestriction(RestrictionBase):
    """
    Restricts a numeric value to a set of inclusive ranges.

    Example:
        range "1..10 | 20..max": RangeRestriction(ranges=[Interval(1, 10), Interval(20, 255)])
    """

    kind: Literal["range"] = "range"
    ranges: list[Interval[float]] = Field(min_length=1)

    def __str__(self) -> str:
        return "range " + " | ".join(str(r) for r in self.ranges)


class LengthRestriction(RestrictionBase):
    """Restricts the character count of a string or byte count of binary data."""

    kind: Literal["length"] = "length"
    ranges: list[Interval[int]] = Field(min_length=1)

    @field_validator("ranges")
    @classmethod
    def validate_non_negative(cls, v: list[Interval[int]]) -> list[Interval[int]]:
        for interval in v:
            if interval.low < 0:
                raise ValueError(f"Length bound {interval.low} is negative")
        return v

    def __str__(self) -> str:
        return "length " + " | ".join(str(r) for r in self.ranges)


class PatternRestriction(RestrictionBase):
    """Restricts a string value to those fully matching a regular expression."""

    kind: Literal["pattern"] = "pattern"
    pattern: str

    @field_validator("pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid pattern {v!r}: {e}") from e
        return v

    def __str__(self) -> str:
        return f"pattern {self.pattern!r}"


Restriction = Annotated[
    RangeRestriction | LengthRestriction | PatternRestriction,
    Field(discriminator="kind"),
]
