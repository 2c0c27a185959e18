"""Tests for restriction matching and chain validation."""

import pytest

from yangkit.core.errors import MissingCodecError
from yangkit.core.ir.names import Namespace, QualifiedName
from yangkit.core.ir.restrictions import (
    Interval,
    LengthRestriction,
    PatternRestriction,
    RangeRestriction,
)
from yangkit.core.ir.types import YangType
from yangkit.core.primitives import BINARY, STRING
from yangkit.core.validation import (
    check_default,
    length_allows,
    parse_value,
    pattern_allows,
    range_allows,
    restriction_allows,
    serialize_value,
    validate_value,
)

NS = Namespace(module="test", uri="urn:test")


def derived(name: str, base: YangType, *restrictions) -> YangType:
    return YangType(QualifiedName(namespace=NS, name=name), base_type=base, restrictions=list(restrictions))


def range_of(*pairs: tuple[float, float]) -> RangeRestriction:
    return RangeRestriction(ranges=[Interval[float](low=low, high=high) for low, high in pairs])


def length_of(*pairs: tuple[int, int]) -> LengthRestriction:
    return LengthRestriction(ranges=[Interval[int](low=low, high=high) for low, high in pairs])


# ---------------------------------------------------------------------------
# Single restrictions
# ---------------------------------------------------------------------------


class TestRangeRestriction:
    def test_bounds_are_inclusive(self):
        restriction = range_of((1, 10))
        assert range_allows(restriction, 1)
        assert range_allows(restriction, 10)
        assert not range_allows(restriction, 0)
        assert not range_allows(restriction, 11)

    def test_any_interval_matches(self):
        restriction = range_of((1, 2), (5, 6))
        assert range_allows(restriction, 5.5)
        assert not range_allows(restriction, 3)

    def test_value_must_convert_to_float(self):
        restriction = range_of((1, 10))
        assert range_allows(restriction, "5")
        assert not range_allows(restriction, "five")
        assert not range_allows(restriction, None)
        assert not range_allows(restriction, [5])

    def test_requires_at_least_one_interval(self):
        with pytest.raises(ValueError):
            RangeRestriction(ranges=[])

    def test_interval_containment(self):
        interval = Interval[float](low=-1.5, high=2)
        assert -1.5 in interval
        assert 2 in interval
        assert 2.01 not in interval

    def test_interval_bounds_must_be_ordered(self):
        with pytest.raises(ValueError):
            Interval[float](low=5, high=1)

    def test_str(self):
        assert str(range_of((1, 10), (20, 20))) == "range 1..10 | 20"


class TestLengthRestriction:
    def test_string_character_count(self):
        restriction = length_of((2, 3))
        assert length_allows(restriction, "ab")
        assert length_allows(restriction, "äöü")
        assert not length_allows(restriction, "a")

    def test_binary_byte_count(self):
        restriction = length_of((4, 4))
        assert length_allows(restriction, b"\x00\x01\x02\x03")
        assert not length_allows(restriction, b"\x00")

    def test_other_values_fail(self):
        assert not length_allows(length_of((0, 10)), 5)

    def test_negative_bounds_rejected(self):
        with pytest.raises(ValueError):
            length_of((-1, 5))


class TestPatternRestriction:
    def test_full_match_required(self):
        restriction = PatternRestriction(pattern="[a-z]+")
        assert pattern_allows(restriction, "abc")
        assert not pattern_allows(restriction, "abc1")
        assert not pattern_allows(restriction, "1abc")

    def test_only_strings(self):
        assert not pattern_allows(PatternRestriction(pattern=".*"), b"abc")

    def test_invalid_regex_rejected(self):
        with pytest.raises(ValueError):
            PatternRestriction(pattern="[a-")


class TestRestrictionDispatch:
    @pytest.mark.parametrize(
        ("restriction", "value", "expected"),
        [
            (range_of((0, 5)), 3, True),
            (length_of((0, 2)), "abc", False),
            (PatternRestriction(pattern="x+"), "xx", True),
        ],
    )
    def test_matches_every_kind(self, restriction, value, expected):
        assert restriction_allows(restriction, value) is expected

    def test_discriminated_on_kind(self):
        restriction = RangeRestriction.model_validate(
            {"kind": "range", "ranges": [{"low": 1, "high": 2}], "error_message": "bad"}
        )
        assert restriction.kind == "range"
        assert restriction.error_message == "bad"


# ---------------------------------------------------------------------------
# Chains
# ---------------------------------------------------------------------------


class TestChainValidation:
    def test_derived_narrows_base(self, bounded_int):
        narrow = range_of((1, 5))
        small = derived("small", bounded_int, narrow)

        result = validate_value(small, 7)
        assert not result.ok
        assert result.violated is narrow
        assert result.level is small
        # The base alone accepts it
        assert validate_value(bounded_int, 7).ok

        assert validate_value(small, 3).ok

    def test_base_restriction_still_applies(self, bounded_int):
        wide = derived("wide", bounded_int, range_of((0, 100)))
        result = validate_value(wide, 50)
        assert result.level is bounded_int

    def test_derived_without_restrictions_defers_to_base(self, bounded_int):
        alias = derived("alias", bounded_int)
        assert not validate_value(alias, 11).ok
        assert validate_value(alias, 10).ok

    def test_all_restrictions_of_a_level_are_checked(self):
        first = length_of((1, 3))
        second = PatternRestriction(pattern="[0-9]+")
        code = derived("code", STRING, first, second)
        assert validate_value(code, "12").ok
        assert validate_value(code, "1234").violated is first
        assert validate_value(code, "ab").violated is second

    def test_result_truthiness(self, bounded_int):
        assert validate_value(bounded_int, 5)
        assert not validate_value(bounded_int, 50)

    def test_is_valid_method(self, bounded_int):
        assert bounded_int.is_valid(5).ok
        assert bounded_int.is_valid(0).violated is not None


class TestCodecDelegation:
    def test_parse_and_serialize_use_primitive(self, bounded_int):
        assert parse_value(bounded_int, "7") == 7
        assert serialize_value(bounded_int, 7) == "7"
        assert bounded_int.parse("x") is None

    def test_parse_does_not_check_restrictions(self, bounded_int):
        assert bounded_int.parse("50") == 50

    def test_binary_chain(self):
        key = derived("key", BINARY, length_of((2, 2)))
        value = key.parse("AAE=")
        assert value == b"\x00\x01"
        assert key.is_valid(value).ok

    def test_chain_without_codec(self):
        rootless = YangType(QualifiedName(namespace=NS, name="abstract"))
        with pytest.raises(MissingCodecError):
            parse_value(rootless, "1")


class TestCheckDefault:
    def test_valid_default(self, bounded_int):
        bounded_int.default = "5"
        assert check_default(bounded_int) is None

    def test_invalid_default_reports_restriction(self, bounded_int):
        narrow = range_of((1, 3))
        small = derived("small", bounded_int, narrow)
        small.default = "5"
        assert check_default(small) is narrow

    def test_inherited_default_checked_against_derived(self, bounded_int):
        bounded_int.default = "8"
        narrow = range_of((1, 5))
        small = derived("small", bounded_int, narrow)
        assert check_default(small) is narrow

    def test_no_default(self, bounded_int):
        assert check_default(bounded_int) is None

    def test_unparsable_default_is_left_to_caller(self, bounded_int):
        bounded_int.default = "many"
        assert check_default(bounded_int) is None
