"""
Parsers for structured statement arguments.

The grammar treats every argument as an opaque string. These helpers give
meaning to the arguments of specific statements: ``revision`` dates,
``range`` and ``length`` expressions, ``fraction-digits`` and ``status``.
All of them raise :class:`ArgumentSyntaxError` on malformed input.
"""

import re
from datetime import date

from .errors import ArgumentSyntaxError, ParseError
from .ir.restrictions import Interval
from .ir.types import YangStatus
from .lexer import Lexer

LENGTH_MAX = 2**64 - 1

_NUMBER = re.compile(r"[+-]?[0-9]+(\.[0-9]+)?", re.ASCII)
_UINT = re.compile(r"[0-9]+", re.ASCII)


def parse_date_argument(text: str) -> date:
    """
    Parse a ``YYYY-MM-DD`` argument.

    Raises:
        ArgumentSyntaxError: If the text is not exactly one valid date
    """
    lexer = Lexer(text)
    try:
        value = lexer.read_date()
    except ParseError as e:
        raise ArgumentSyntaxError(f"Invalid date {text!r}: {e.message}") from e
    if not lexer.at_end():
        raise ArgumentSyntaxError(f"Invalid date {text!r}: unexpected text after the date")
    return value


def _split_parts(text: str, what: str) -> list[tuple[str, str]]:
    parts = []
    for raw_part in text.split("|"):
        part = raw_part.strip()
        if not part:
            raise ArgumentSyntaxError(f"Empty {what} part in {text!r}")
        if ".." in part:
            low, _, high = part.partition("..")
            low, high = low.strip(), high.strip()
            if not low or not high or ".." in high:
                raise ArgumentSyntaxError(f"Malformed {what} part {part!r} in {text!r}")
        else:
            low = high = part
        parts.append((low, high))
    return parts


def _check_ascending(intervals: list[Interval], text: str, what: str) -> None:
    for previous, current in zip(intervals, intervals[1:]):
        if current.low <= previous.high:
            raise ArgumentSyntaxError(
                f"{what.capitalize()} parts in {text!r} must be disjoint and in ascending order"
            )


def parse_range_argument(
    text: str,
    lower: float,
    upper: float,
    integer: bool = False,
) -> list[Interval[float]]:
    """
    Parse a ``range`` argument such as ``"1..10 | 20..max"``.

    Args:
        text: The argument
        lower: Value of the ``min`` keyword (lowest value of the base type)
        upper: Value of the ``max`` keyword (highest value of the base type)
        integer: Reject bounds with a fractional part

    Raises:
        ArgumentSyntaxError: On malformed bounds, bounds outside
            ``[lower, upper]``, or overlapping/unordered parts
    """

    def bound(token: str) -> float:
        if token == "min":
            return lower
        if token == "max":
            return upper
        if not _NUMBER.fullmatch(token):
            raise ArgumentSyntaxError(f"Invalid range bound {token!r} in {text!r}")
        if integer and "." in token:
            raise ArgumentSyntaxError(f"Range bound {token!r} must be an integer")
        value = float(token)
        if not lower <= value <= upper:
            raise ArgumentSyntaxError(
                f"Range bound {token!r} is outside the base type range {lower:g}..{upper:g}"
            )
        return value

    intervals: list[Interval[float]] = []
    for low, high in _split_parts(text, "range"):
        low_value, high_value = bound(low), bound(high)
        if low_value > high_value:
            raise ArgumentSyntaxError(f"Range part {low}..{high} has its bounds reversed")
        intervals.append(Interval[float](low=low_value, high=high_value))
    _check_ascending(intervals, text, "range")
    return intervals


def parse_length_argument(text: str) -> list[Interval[int]]:
    """
    Parse a ``length`` argument such as ``"1..255"`` or ``"0 | 4..max"``.

    Raises:
        ArgumentSyntaxError: On malformed or unordered bounds
    """

    def bound(token: str) -> int:
        if token == "min":
            return 0
        if token == "max":
            return LENGTH_MAX
        if not _UINT.fullmatch(token):
            raise ArgumentSyntaxError(f"Invalid length bound {token!r} in {text!r}")
        value = int(token)
        if value > LENGTH_MAX:
            raise ArgumentSyntaxError(f"Length bound {token!r} is too large")
        return value

    intervals: list[Interval[int]] = []
    for low, high in _split_parts(text, "length"):
        low_value, high_value = bound(low), bound(high)
        if low_value > high_value:
            raise ArgumentSyntaxError(f"Length part {low}..{high} has its bounds reversed")
        intervals.append(Interval[int](low=low_value, high=high_value))
    _check_ascending(intervals, text, "length")
    return intervals


def parse_fraction_digits(text: str) -> int:
    """Parse a ``fraction-digits`` argument (an integer in ``[1, 18]``)."""
    if not _UINT.fullmatch(text):
        raise ArgumentSyntaxError(f"Invalid fraction-digits {text!r}")
    value = int(text)
    if not 1 <= value <= 18:
        raise ArgumentSyntaxError(f"fraction-digits must be between 1 and 18, got {value}")
    return value


def parse_status_argument(text: str) -> YangStatus:
    try:
        return YangStatus(text)
    except ValueError:
        allowed = ", ".join(s.value for s in YangStatus)
        raise ArgumentSyntaxError(f"Invalid status {text!r} (expected one of: {allowed})") from None
