"""
Fixed-Point Units Module

Token amounts are plain integers in base units with 18 implied decimals.
Arithmetic on amounts is checked against the unsigned 256-bit range and fails
loudly instead of wrapping. NEVER uses float for token values.
"""

from decimal import Decimal, InvalidOperation, getcontext
from dataclasses import dataclass
from typing import Union
import re

# Enough precision for 78-digit integers plus 18 fractional digits
getcontext().prec = 100

DECIMALS = 18
BASE_UNIT = 10 ** DECIMALS
UINT256_MAX = 2 ** 256 - 1
INITIAL_SUPPLY_TOKENS = 1_000_000
INITIAL_SUPPLY = INITIAL_SUPPLY_TOKENS * BASE_UNIT
BURN_PERCENT = 5


class AmountOverflowError(ValueError, ArithmeticError):
    """Raised when checked arithmetic leaves the [0, UINT256_MAX] range"""
    pass


@dataclass(frozen=True)
class BurnSplit:
    """
    The two fragments of a transfer: what the recipient receives and what
    the burn sink absorbs. net + burn always equals the requested amount.
    """
    amount: int
    net: int
    burn: int

    def __post_init__(self):
        if self.net + self.burn != self.amount:
            raise ValueError(f"Burn split does not add up: {self.net} + {self.burn} != {self.amount}")


def is_valid_amount(value, allow_zero: bool = True) -> bool:
    """Check that value is an int base-unit amount inside the uint256 range"""
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    lower = 0 if allow_zero else 1
    return lower <= value <= UINT256_MAX


def _check_range(result: int, operation: str) -> int:
    if result < 0:
        raise AmountOverflowError(f"Arithmetic underflow in {operation}: result {result} is negative")
    if result > UINT256_MAX:
        raise AmountOverflowError(f"Arithmetic overflow in {operation}: result exceeds 2**256 - 1")
    return result


def checked_add(a: int, b: int) -> int:
    """Add two amounts, failing on overflow"""
    return _check_range(a + b, "add")


def checked_sub(a: int, b: int) -> int:
    """Subtract b from a, failing on underflow"""
    return _check_range(a - b, "sub")


def checked_mul(a: int, b: int) -> int:
    """Multiply two amounts, failing on overflow"""
    return _check_range(a * b, "mul")


def compute_burn_split(amount: int, burn_percent: int = BURN_PERCENT) -> BurnSplit:
    """
    Split a transfer amount into the recipient fragment and the burn fragment

    The burn fragment is floor(amount * burn_percent / 100); the recipient gets
    the remainder so no base unit is lost to rounding.

    Args:
        amount: Transfer amount in base units
        burn_percent: Integer burn percentage (0-100)

    Returns:
        BurnSplit with net + burn == amount

    Raises:
        AmountOverflowError: If amount * burn_percent leaves the uint256 range
        ValueError: If burn_percent is outside 0-100
    """
    if burn_percent < 0 or burn_percent > 100:
        raise ValueError(f"Burn percent must be between 0 and 100, got {burn_percent}")

    burn = checked_mul(amount, burn_percent) // 100
    net = checked_sub(amount, burn)
    return BurnSplit(amount=amount, net=net, burn=burn)


def parse_units(value: Union[str, int, Decimal], decimals: int = DECIMALS) -> int:
    """
    Convert a human-readable token quantity into base units

    parse_units("999997.5") == 999997500000000000000000

    Args:
        value: Quantity as a decimal string, int or Decimal
        decimals: Number of implied decimals

    Returns:
        Integer amount in base units

    Raises:
        ValueError: If the value is malformed, negative or has more
            fractional digits than the token supports
    """
    if isinstance(value, bool) or isinstance(value, float):
        raise ValueError("Token quantities must be given as str, int or Decimal, not float")

    if isinstance(value, str):
        clean_value = value.strip().replace('_', '')
        if not re.fullmatch(r'\d+(\.\d*)?|\.\d+', clean_value):
            raise ValueError(f"Cannot convert '{value}' to a token amount")
        try:
            quantity = Decimal(clean_value)
        except InvalidOperation:
            raise ValueError(f"Cannot convert '{value}' to a token amount")
    else:
        quantity = Decimal(value)

    if quantity < 0:
        raise ValueError(f"Token quantity cannot be negative: {value}")

    scaled = quantity.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"'{value}' has more than {decimals} fractional digits")

    return _check_range(int(scaled), "parse_units")


def format_units(amount: int, decimals: int = DECIMALS) -> str:
    """
    Render a base-unit amount as a decimal string without trailing zeros

    format_units(47500000000000000000) == "47.5"
    """
    if not isinstance(amount, int) or isinstance(amount, bool):
        raise ValueError("Amount must be an integer number of base units")

    sign = "-" if amount < 0 else ""
    whole, fraction = divmod(abs(amount), 10 ** decimals)
    if decimals == 0 or fraction == 0:
        return f"{sign}{whole}"

    fraction_str = str(fraction).rjust(decimals, '0').rstrip('0')
    return f"{sign}{whole}.{fraction_str}"
