"""Tests for the built-in primitive types and decimal64."""

import pytest

from yangkit.core.errors import Decimal64NotConfiguredError
from yangkit.core.ir.names import DEFAULT_NAMESPACE
from yangkit.core.ir.types import INT64_MAX, Decimal64Type
from yangkit.core.primitives import (
    BINARY,
    BOOLEAN,
    EMPTY,
    INT8,
    PRIMITIVE_NAMES,
    PRIMITIVE_TYPES,
    STRING,
    UINT64,
    is_integer_type,
    lookup_primitive,
    numeric_bounds,
)


class TestRegistry:
    def test_all_primitives_registered(self):
        assert PRIMITIVE_NAMES == {
            "empty",
            "boolean",
            "int8",
            "int16",
            "int32",
            "int64",
            "uint8",
            "uint16",
            "uint32",
            "uint64",
            "string",
            "binary",
            "decimal64",
        }

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PRIMITIVE_TYPES["custom"] = STRING  # type: ignore[index]

    def test_lookup_returns_shared_singletons(self):
        assert lookup_primitive("string") is STRING
        assert lookup_primitive("string") is lookup_primitive("string")

    def test_lookup_unknown(self):
        assert lookup_primitive("percent") is None

    def test_decimal64_lookup_returns_fresh_node(self):
        first = lookup_primitive("decimal64")
        second = lookup_primitive("decimal64")
        assert isinstance(first, Decimal64Type)
        assert first is not second
        assert first.fraction_digits is None

    def test_primitives_live_in_default_namespace(self):
        assert all(t.name.namespace == DEFAULT_NAMESPACE for t in PRIMITIVE_TYPES.values())
        assert all(t.is_primitive for t in PRIMITIVE_TYPES.values())

    def test_numeric_helpers(self):
        assert is_integer_type(INT8)
        assert not is_integer_type(STRING)
        assert numeric_bounds(INT8) == (-128.0, 127.0)
        assert numeric_bounds(STRING) is None


class TestCodecs:
    def test_empty_never_parses(self):
        assert EMPTY.parse("") is None
        assert EMPTY.serialize(None) is None

    def test_boolean(self):
        assert BOOLEAN.parse("true") is True
        assert BOOLEAN.parse("false") is False
        assert BOOLEAN.parse("True") is None
        assert BOOLEAN.parse("1") is None
        assert BOOLEAN.serialize(False) == "false"
        assert BOOLEAN.serialize(1) is None

    @pytest.mark.parametrize(
        ("text", "expected"),
        [("127", 127), ("-128", -128), ("+5", 5), ("128", None), ("1.0", None), ("0x10", None), ("", None)],
    )
    def test_int8_parse(self, text, expected):
        assert INT8.parse(text) == expected

    def test_integer_serialize(self):
        assert INT8.serialize(-7) == "-7"
        assert INT8.serialize(300) is None
        assert INT8.serialize(True) is None
        assert INT8.serialize("7") is None

    def test_uint64_full_range(self):
        assert UINT64.parse("18446744073709551615") == 2**64 - 1
        assert UINT64.parse("18446744073709551616") is None
        assert UINT64.parse("-1") is None

    def test_non_ascii_digits_rejected(self):
        assert INT8.parse("١٢") is None

    def test_string_is_verbatim(self):
        assert STRING.parse("  any text ") == "  any text "
        assert STRING.serialize("x") == "x"
        assert STRING.serialize(5) is None

    def test_binary(self):
        assert BINARY.parse("aGVsbG8=") == b"hello"
        assert BINARY.parse("not base64!") is None
        assert BINARY.serialize(b"hello") == "aGVsbG8="
        assert BINARY.serialize("hello") is None


class TestDecimal64:
    @pytest.fixture
    def money(self) -> Decimal64Type:
        type_ = Decimal64Type()
        type_.configure_fraction_digits(2)
        return type_

    def test_parse(self, money):
        assert money.parse("12.34") == pytest.approx(12.34)
        assert money.parse("-0.5") == pytest.approx(-0.5)

    @pytest.mark.parametrize("text", ["1234", "12.", ".5", "1.2.3", "12,34", "abc", ""])
    def test_parse_requires_digits_around_one_point(self, money, text):
        assert money.parse(text) is None

    def test_bounds(self, money):
        assert money.max_value == pytest.approx(INT64_MAX / 100)
        assert money.min_value == pytest.approx(-(2**63) / 100)

    def test_overflow_rejected(self, money):
        assert money.parse("100000000000000000.00") is None
        assert money.parse("-100000000000000000.00") is None
        assert money.serialize(1e17) is None

    def test_serialize_pads_fraction_digits(self, money):
        assert money.serialize(12.3) == "12.30"
        assert money.serialize(5) == "5.00"
        assert money.serialize("12.3") is None

    def test_unconfigured_is_a_contract_violation(self):
        type_ = Decimal64Type()
        with pytest.raises(Decimal64NotConfiguredError):
            type_.parse("1.0")
        with pytest.raises(Decimal64NotConfiguredError):
            type_.serialize(1.0)

    @pytest.mark.parametrize("digits", [0, 19])
    def test_fraction_digits_range(self, digits):
        with pytest.raises(ValueError):
            Decimal64Type().configure_fraction_digits(digits)

    def test_bounds_shrink_with_digits(self):
        type_ = Decimal64Type()
        type_.configure_fraction_digits(18)
        assert type_.max_value == pytest.approx(9.223372036854775807)
        assert type_.parse("9.1") == pytest.approx(9.1)
        assert type_.parse("10.0") is None
