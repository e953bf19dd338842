"""
Caller-input validation errors.

Raised before anything is submitted to the chain. Always recoverable by
prompting the user again.
"""

from typing import Optional

from .base import PointsAppError


class InputValidationError(PointsAppError):
    """Base class for rejected user input."""

    code = "invalid_input"

    def __init__(self, message: str, raw_value: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.raw_value = raw_value
        self.recoverable = True


class InvalidRateInput(InputValidationError):
    """Proposed exchange rate is not a finite positive integer."""

    code = "invalid_rate"


class InvalidAmount(InputValidationError):
    """Requested amount is not a positive finite decimal."""

    code = "invalid_amount"


class InsufficientBalance(InvalidAmount):
    """Requested amount exceeds the account's token balance."""

    code = "insufficient_balance"

    def __init__(self, message: str, requested_units: Optional[int] = None,
                 available_units: Optional[int] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.requested_units = requested_units
        self.available_units = available_units


class InvalidAddressError(InputValidationError):
    """Token address is not a valid contract address."""

    code = "invalid_address"
