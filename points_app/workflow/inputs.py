"""Validation of free-form user input before anything reaches the chain."""

from decimal import Decimal
from typing import Optional, Union

from ..errors import InvalidAmount, InvalidRateInput
from ..utils.units import DEFAULT_DECIMALS, MAX_UINT256, parse_decimal, parse_units


def parse_rate(proposal: Optional[Union[str, int]]) -> int:
    """
    Parse a proposed exchange rate.

    Rates are stored on chain as positive integers, so "2" and "2.0" are
    accepted while "2.5", "0" and "-1" are not.

    Raises:
        InvalidRateInput: If the proposal is missing, not numeric, not
            finite, not positive, not a whole number or larger than a
            uint256
    """
    if proposal is None:
        raise InvalidRateInput("Enter an exchange rate, e.g. 2 for 1 RLP = 2 UPT")

    try:
        number = parse_decimal(proposal)
    except ValueError as e:
        raise InvalidRateInput(f"Invalid exchange rate: {e}", raw_value=str(proposal)) from None

    if number <= 0:
        raise InvalidRateInput("Exchange rate must be greater than zero", raw_value=str(proposal))

    if number > MAX_UINT256:
        raise InvalidRateInput("Exchange rate is too large", raw_value=str(proposal))

    if number != number.to_integral_value():
        raise InvalidRateInput("Exchange rate must be a whole number", raw_value=str(proposal))

    return int(number)


def parse_amount(amount: Optional[Union[str, Decimal]], decimals: int = DEFAULT_DECIMALS) -> int:
    """
    Parse a token amount into smallest units.

    Raises:
        InvalidAmount: If the amount is missing, not numeric, not finite,
            not positive, more precise than the token allows or too large
    """
    if amount is None:
        raise InvalidAmount("Enter an amount")

    try:
        units = parse_units(amount, decimals)
    except ValueError as e:
        raise InvalidAmount(f"Invalid amount: {e}", raw_value=str(amount)) from None

    if units <= 0:
        raise InvalidAmount("Amount must be greater than zero", raw_value=str(amount))

    return units
