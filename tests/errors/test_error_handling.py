"""
Error classification tests for the points exchange workflow.

Covers the hierarchy, recoverability flags and the codes the engine uses to
build user-visible messages.
"""

import pytest

from points_app.errors import (
    ChainFailureError,
    ConfirmationTimeoutError,
    ExchangeFailed,
    InputValidationError,
    InsufficientBalance,
    InvalidAddressError,
    InvalidAmount,
    InvalidRateInput,
    NoTokenLoaded,
    PointsAppError,
    RateRequired,
    RemoteReadError,
    SessionPreconditionError,
    TransactionRejectedError,
    WalletNotConnected,
)


class TestErrorClassification:
    """Test error classification system."""

    def test_input_errors_are_recoverable(self):
        """Input validation errors can be fixed by asking the user again."""
        for error_cls in (InvalidRateInput, InvalidAmount, InsufficientBalance, InvalidAddressError):
            error = error_cls("bad input", raw_value="x")
            assert isinstance(error, InputValidationError)
            assert isinstance(error, PointsAppError)
            assert error.recoverable is True
            assert error.raw_value == "x"

    def test_insufficient_balance_is_invalid_amount(self):
        error = InsufficientBalance("too much", requested_units=10, available_units=5)
        assert isinstance(error, InvalidAmount)
        assert error.requested_units == 10
        assert error.available_units == 5
        assert error.code == "insufficient_balance"

    def test_precondition_errors(self):
        for error_cls in (WalletNotConnected, NoTokenLoaded, RateRequired):
            error = error_cls("do something first")
            assert isinstance(error, SessionPreconditionError)
            assert error.recoverable is True

        rate_required = RateRequired("need a rate", token_address="0xabc")
        assert rate_required.token_address == "0xabc"

    def test_chain_failures_are_terminal(self):
        for error in (
            RemoteReadError("rpc down", operation="balanceOf"),
            TransactionRejectedError("declined", method="exchange"),
            ExchangeFailed("failed", token_address="0xabc"),
        ):
            assert isinstance(error, ChainFailureError)
            assert error.recoverable is False

    def test_confirmation_timeout_is_remote_read_error(self):
        error = ConfirmationTimeoutError("stalled", tx_hash="0x01", timeout_seconds=5.0)
        assert isinstance(error, RemoteReadError)
        assert error.operation == "wait_for_confirmation"
        assert error.tx_hash == "0x01"
        assert error.timeout_seconds == 5.0

    def test_exchange_failed_keeps_cause(self):
        cause = TransactionRejectedError("reverted", method="exchange", tx_hash="0x02")
        error = ExchangeFailed("Exchange failed: reverted", token_address="0xabc", cause=cause)
        assert error.cause is cause
        assert error.message == "Exchange failed: reverted"

    def test_context_defaults_to_empty_dict(self):
        assert PointsAppError("base").context == {}
        assert RemoteReadError("x", context={"rpc": "local"}).context == {"rpc": "local"}

    @pytest.mark.parametrize("error_cls,code", [
        (InvalidRateInput, "invalid_rate"),
        (InvalidAmount, "invalid_amount"),
        (NoTokenLoaded, "no_token_loaded"),
        (RateRequired, "rate_required"),
        (RemoteReadError, "remote_read_failed"),
        (TransactionRejectedError, "transaction_rejected"),
        (ExchangeFailed, "exchange_failed"),
    ])
    def test_error_codes(self, error_cls, code):
        assert error_cls("message").code == code
