"""Tests for user input validation."""

import pytest

from points_app.errors import InvalidAmount, InvalidRateInput
from points_app.workflow.inputs import parse_amount, parse_rate


class TestParseRate:
    """Test rate proposal validation."""

    @pytest.mark.parametrize("raw,expected", [("2", 2), (" 5 ", 5), ("2.0", 2), ("1e2", 100), (3, 3)])
    def test_valid_rates(self, raw, expected):
        assert parse_rate(raw) == expected

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-1", "2.5", "inf", "NaN", None, "1e80", "1e999999"])
    def test_invalid_rates(self, raw):
        with pytest.raises(InvalidRateInput) as exc_info:
            parse_rate(raw)
        assert exc_info.value.recoverable is True

    def test_error_keeps_raw_value(self):
        with pytest.raises(InvalidRateInput) as exc_info:
            parse_rate("2.5")
        assert exc_info.value.raw_value == "2.5"
        assert "whole number" in str(exc_info.value)


class TestParseAmount:
    """Test amount validation."""

    def test_valid_amount(self):
        assert parse_amount("10") == 10 * 10 ** 18

    @pytest.mark.parametrize("raw", ["", "abc", "0", "-10", "0.0", "inf", None, "1e-19", "1e80", "1e999999"])
    def test_invalid_amounts(self, raw):
        with pytest.raises(InvalidAmount):
            parse_amount(raw)

    def test_zero_message(self):
        with pytest.raises(InvalidAmount, match="greater than zero"):
            parse_amount("0")

    def test_overflow_message(self):
        with pytest.raises(InvalidAmount, match="out of range") as exc_info:
            parse_amount("1e999999")
        assert exc_info.value.raw_value == "1e999999"


class TestRateBounds:
    """Test the uint256 ceiling on rate proposals."""

    def test_largest_rate_accepted(self):
        assert parse_rate(str(2 ** 256 - 1)) == 2 ** 256 - 1

    def test_rate_above_uint256(self):
        with pytest.raises(InvalidRateInput, match="too large"):
            parse_rate(str(2 ** 256))
