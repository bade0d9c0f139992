"""
Test suite for fixed-point units

Tests base-unit parsing and formatting, checked arithmetic and the burn split.
"""

import pytest
from decimal import Decimal

from token_ledger.units import (
    BASE_UNIT, DECIMALS, INITIAL_SUPPLY, UINT256_MAX, AmountOverflowError, BurnSplit,
    checked_add, checked_mul, checked_sub, compute_burn_split, format_units,
    is_valid_amount, parse_units
)


class TestParseUnits:
    """Test conversion of human quantities to base units"""

    def test_whole_tokens(self):
        """Test whole token quantities"""
        assert parse_units("1") == BASE_UNIT
        assert parse_units("1000000") == INITIAL_SUPPLY == 10 ** 24

    def test_fractional_tokens(self):
        """Test fractional quantities"""
        assert parse_units("999997.5") == 999_997_500_000_000_000_000_000
        assert parse_units("0.000000000000000001") == 1
        assert parse_units(".5") == BASE_UNIT // 2

    def test_int_and_decimal_inputs(self):
        """Test non-string inputs"""
        assert parse_units(100) == 100 * BASE_UNIT
        assert parse_units(Decimal("47.5")) == 47_500_000_000_000_000_000

    def test_custom_decimals(self):
        """Test tokens with fewer decimals"""
        assert parse_units("1.25", decimals=2) == 125

    def test_underscores_and_whitespace(self):
        """Test tolerant string parsing"""
        assert parse_units(" 1_000 ") == 1000 * BASE_UNIT

    @pytest.mark.parametrize("value", ["", "abc", "-1", "1e5", "1.2.3", "0.0000000000000000001"])
    def test_rejects_malformed(self, value):
        """Test malformed or too precise quantities"""
        with pytest.raises(ValueError):
            parse_units(value)

    def test_rejects_float(self):
        """Test that floats are never accepted"""
        with pytest.raises(ValueError, match="float"):
            parse_units(1.5)

    def test_rejects_negative_decimal(self):
        """Test negative Decimal quantities"""
        with pytest.raises(ValueError):
            parse_units(Decimal("-1"))


class TestFormatUnits:
    """Test rendering of base units"""

    def test_format(self):
        """Test common amounts"""
        assert format_units(parse_units("47.5")) == "47.5"
        assert format_units(INITIAL_SUPPLY) == "1000000"
        assert format_units(1) == "0.000000000000000001"
        assert format_units(0) == "0"

    def test_format_zero_decimals(self):
        """Test tokens without fractional digits"""
        assert format_units(42, decimals=0) == "42"

    def test_format_rejects_non_int(self):
        """Test that only base-unit integers are formatted"""
        with pytest.raises(ValueError):
            format_units(Decimal("1.5"))


class TestCheckedArithmetic:
    """Test overflow and underflow detection"""

    def test_in_range(self):
        """Test ordinary arithmetic"""
        assert checked_add(1, 2) == 3
        assert checked_sub(5, 5) == 0
        assert checked_mul(10, 5) == 50

    def test_add_overflow(self):
        """Test addition past 2**256 - 1"""
        with pytest.raises(AmountOverflowError, match="overflow"):
            checked_add(UINT256_MAX, 1)

    def test_sub_underflow(self):
        """Test subtraction below zero"""
        with pytest.raises(AmountOverflowError, match="underflow"):
            checked_sub(1, 2)

    def test_mul_overflow(self):
        """Test multiplication past 2**256 - 1"""
        with pytest.raises(AmountOverflowError):
            checked_mul(UINT256_MAX, 2)

    def test_overflow_error_types(self):
        """Test that overflow errors are both ValueError and ArithmeticError"""
        assert issubclass(AmountOverflowError, ValueError)
        assert issubclass(AmountOverflowError, ArithmeticError)


class TestBurnSplit:
    """Test the burn computation"""

    @pytest.mark.parametrize("amount,net,burn", [
        (100 * BASE_UNIT, 95 * BASE_UNIT, 5 * BASE_UNIT),
        (50 * BASE_UNIT, 47_500_000_000_000_000_000, 2_500_000_000_000_000_000),
        (20, 19, 1),
        (19, 19, 0),
        (39, 38, 1),
        (1, 1, 0),
    ])
    def test_five_percent(self, amount, net, burn):
        """Test the default 5% split and truncation"""
        split = compute_burn_split(amount)
        assert split.net == net
        assert split.burn == burn
        assert split.net + split.burn == amount

    def test_custom_percent(self):
        """Test other burn rates"""
        assert compute_burn_split(1000, 0).burn == 0
        assert compute_burn_split(1000, 100).net == 0
        assert compute_burn_split(1000, 10).burn == 100

    def test_invalid_percent(self):
        """Test out-of-range burn rates"""
        with pytest.raises(ValueError):
            compute_burn_split(100, 101)
        with pytest.raises(ValueError):
            compute_burn_split(100, -1)

    def test_overflowing_amount(self):
        """Test that amount * percent overflow fails loudly"""
        with pytest.raises(AmountOverflowError):
            compute_burn_split(UINT256_MAX)

    def test_split_must_add_up(self):
        """Test BurnSplit validation"""
        with pytest.raises(ValueError, match="does not add up"):
            BurnSplit(amount=100, net=90, burn=5)


class TestIsValidAmount:
    """Test amount validation"""

    def test_valid(self):
        """Test accepted amounts"""
        assert is_valid_amount(0)
        assert is_valid_amount(UINT256_MAX)
        assert is_valid_amount(1, allow_zero=False)

    def test_invalid(self):
        """Test rejected amounts"""
        assert not is_valid_amount(0, allow_zero=False)
        assert not is_valid_amount(-1)
        assert not is_valid_amount(UINT256_MAX + 1)
        assert not is_valid_amount(True)
        assert not is_valid_amount(1.0)
        assert not is_valid_amount("1")

    def test_decimals_constant(self):
        """Test the fixed-point scale"""
        assert DECIMALS == 18
        assert BASE_UNIT == 10 ** 18
