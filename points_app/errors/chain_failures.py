"""
Chain failure classifications.

These represent reads that could not complete and transactions that were
declined, reverted or never confirmed. They end the current workflow
invocation; a retry is always a fresh user action.
"""

from typing import Optional

from .base import PointsAppError


class ChainFailureError(PointsAppError):
    """Base class for failures talking to the chain."""

    code = "chain_failure"


class RemoteReadError(ChainFailureError):
    """A contract read or RPC call could not complete."""

    code = "remote_read_failed"

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation


class ConfirmationTimeoutError(RemoteReadError):
    """A submitted transaction was not confirmed within the configured timeout."""

    code = "confirmation_timeout"

    def __init__(self, message: str, tx_hash: Optional[str] = None,
                 timeout_seconds: Optional[float] = None, **kwargs):
        super().__init__(message, operation="wait_for_confirmation", **kwargs)
        self.tx_hash = tx_hash
        self.timeout_seconds = timeout_seconds


class TransactionRejectedError(ChainFailureError):
    """The signer declined the transaction or the node rejected or reverted it."""

    code = "transaction_rejected"

    def __init__(self, message: str, method: Optional[str] = None,
                 tx_hash: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.method = method
        self.tx_hash = tx_hash


class ExchangeFailed(ChainFailureError):
    """The exchange transaction did not reach confirmation."""

    code = "exchange_failed"

    def __init__(self, message: str, token_address: Optional[str] = None,
                 cause: Optional[Exception] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.token_address = token_address
        self.cause = cause
