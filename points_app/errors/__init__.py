"""
Error classification for the points exchange workflow.

Input and precondition problems are recoverable by asking the user again;
chain failures are terminal for the workflow invocation that raised them.
Nothing in this package retries automatically.
"""

from .base import PointsAppError
from .input_validation import (
    InputValidationError,
    InvalidRateInput,
    InvalidAmount,
    InsufficientBalance,
    InvalidAddressError,
)
from .session import (
    SessionPreconditionError,
    WalletNotConnected,
    NoTokenLoaded,
    RateRequired,
)
from .chain_failures import (
    ChainFailureError,
    RemoteReadError,
    ConfirmationTimeoutError,
    TransactionRejectedError,
    ExchangeFailed,
)

__all__ = [
    "PointsAppError",
    # Input validation
    "InputValidationError",
    "InvalidRateInput",
    "InvalidAmount",
    "InsufficientBalance",
    "InvalidAddressError",
    # Session preconditions
    "SessionPreconditionError",
    "WalletNotConnected",
    "NoTokenLoaded",
    "RateRequired",
    # Chain failures
    "ChainFailureError",
    "RemoteReadError",
    "ConfirmationTimeoutError",
    "TransactionRejectedError",
    "ExchangeFailed",
]
