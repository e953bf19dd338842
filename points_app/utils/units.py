"""
Token unit conversion.

Contracts deal in integer smallest units; users type and read decimal
strings. All conversion goes through Decimal so nothing is ever rounded
through a float.
"""

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

DEFAULT_DECIMALS = 18

# Enough significant digits that scaling a uint256 amount never rounds.
SCALE_PRECISION = 100

# Largest value a uint256 contract argument can hold.
MAX_UINT256 = 2 ** 256 - 1


def parse_decimal(value: Union[str, int, Decimal]) -> Decimal:
    """
    Parse free-form user input into a finite Decimal.

    Args:
        value: Text as typed by the user, or an already numeric value

    Returns:
        Parsed Decimal

    Raises:
        ValueError: If the input is empty, not numeric, NaN or infinite
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a number: {value!r}")

    text = str(value).strip()
    if not text:
        raise ValueError("Empty input")

    try:
        number = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"Not a number: {text!r}") from None

    if not number.is_finite():
        raise ValueError(f"Not a finite number: {text!r}")

    return number


def parse_units(value: Union[str, int, Decimal], decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Convert a decimal amount to integer smallest units.

    Args:
        value: Decimal amount, e.g. "10.5"
        decimals: Token decimal places

    Returns:
        Amount in smallest units

    Raises:
        ValueError: If the value is not a finite number, has more
            fractional digits than the token supports or does not fit
            in a uint256
    """
    number = parse_decimal(value)

    with localcontext() as ctx:
        ctx.prec = SCALE_PRECISION
        try:
            scaled = number.scaleb(decimals)
        except ArithmeticError:
            raise ValueError(f"Amount out of range: {value!r}") from None

    if scaled != scaled.to_integral_value():
        raise ValueError(f"Too many decimal places for {decimals}-decimal token: {value!r}")

    if abs(scaled) > MAX_UINT256:
        raise ValueError(f"Amount out of range: {value!r}")

    return int(scaled)


def format_units(units: int, decimals: int = DEFAULT_DECIMALS) -> str:
    """
    Convert integer smallest units to a decimal string.

    Whole amounts keep one fractional digit ("100.0") and trailing zeros
    are otherwise dropped ("0.5").
    """
    sign = "-" if units < 0 else ""
    whole, fraction = divmod(abs(int(units)), 10 ** decimals)

    if decimals == 0:
        return f"{sign}{whole}"

    fraction_text = str(fraction).rjust(decimals, "0").rstrip("0") or "0"
    return f"{sign}{whole}.{fraction_text}"
