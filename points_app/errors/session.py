"""
Session precondition errors.

The session is not in a state where the operation can run; the user is
guided to the step that has to happen first.
"""

from typing import Optional

from .base import PointsAppError


class SessionPreconditionError(PointsAppError):
    """Base class for operations attempted out of order."""

    code = "precondition"

    def __init__(self, message: str, **kwargs):
        super().__init__(message, **kwargs)
        self.recoverable = True


class WalletNotConnected(SessionPreconditionError):
    """No wallet session is active."""

    code = "wallet_not_connected"


class NoTokenLoaded(SessionPreconditionError):
    """No regular points token has been loaded into the session."""

    code = "no_token_loaded"


class RateRequired(SessionPreconditionError):
    """The token has no exchange rate and the caller must propose one."""

    code = "rate_required"

    def __init__(self, message: str, token_address: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.token_address = token_address
