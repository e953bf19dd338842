"""Tests for token unit conversion."""

from decimal import Decimal

import pytest

from points_app.utils.units import format_units, parse_decimal, parse_units

WEI = 10 ** 18


class TestParseDecimal:
    """Test parse_decimal."""

    def test_strips_whitespace(self):
        assert parse_decimal("  2.50 ") == Decimal("2.50")

    @pytest.mark.parametrize("raw", ["", "   ", "abc", "1.2.3", "NaN", "inf", "-Infinity"])
    def test_rejects_non_finite_or_non_numeric(self, raw):
        with pytest.raises(ValueError):
            parse_decimal(raw)

    def test_rejects_bool(self):
        with pytest.raises(ValueError):
            parse_decimal(True)


class TestParseUnits:
    """Test parse_units."""

    def test_whole_amount(self):
        assert parse_units("100") == 100 * WEI

    def test_fractional_amount(self):
        assert parse_units("1.5") == 1_500_000_000_000_000_000

    def test_smallest_unit(self):
        assert parse_units("0.000000000000000001") == 1

    def test_exponent_notation(self):
        assert parse_units("1e3") == 1000 * WEI

    def test_large_amount_is_exact(self):
        # 31 significant digits, beyond the default Decimal context precision
        assert parse_units("1234567890123.123456789012345678") == 1234567890123123456789012345678

    def test_too_many_decimals(self):
        with pytest.raises(ValueError, match="decimal places"):
            parse_units("0.0000000000000000001")

    @pytest.mark.parametrize("raw", ["1e999999", "-1e999999", "1e80", "115792089237316195423570985008687907853269984665640564039458"])
    def test_out_of_range(self, raw):
        with pytest.raises(ValueError, match="out of range"):
            parse_units(raw)

    def test_largest_uint256(self):
        assert parse_units(str(2 ** 256 - 1), decimals=0) == 2 ** 256 - 1

    def test_custom_decimals(self):
        assert parse_units("1.25", decimals=2) == 125
        with pytest.raises(ValueError):
            parse_units("1.255", decimals=2)


class TestFormatUnits:
    """Test format_units."""

    def test_whole_amount_keeps_one_fraction_digit(self):
        assert format_units(100 * WEI) == "100.0"

    def test_zero(self):
        assert format_units(0) == "0.0"

    def test_fraction_drops_trailing_zeros(self):
        assert format_units(WEI // 2) == "0.5"

    def test_smallest_unit(self):
        assert format_units(1) == "0.000000000000000001"

    def test_negative(self):
        assert format_units(-WEI // 4) == "-0.25"

    def test_zero_decimals(self):
        assert format_units(42, decimals=0) == "42"


class TestRoundTrip:
    """Amounts survive parse/format at 18 decimals."""

    @pytest.mark.parametrize("amount", ["10", "0.1", "123.456", "0.000000000000000001", "99999999.999999999999999999"])
    def test_decimal_round_trip(self, amount):
        assert Decimal(format_units(parse_units(amount))) == Decimal(amount)

    @pytest.mark.parametrize("value", [0, 1, WEI, 123 * WEI + 7, 2 ** 255])
    def test_units_round_trip(self, value):
        assert parse_units(format_units(value)) == value
