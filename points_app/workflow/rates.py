"""
Exchange rate resolution and negotiation.

The exchange contract is the only authority for rates. A stored rate of zero
means no rate was ever committed for the token and is reported as UNSET,
never as a 0:1 rate.
"""

from typing import Optional, Union

from ..logging.config import get_workflow_logger, log_workflow_step
from ..state.models import UNSET, RateResolution, RateStatus, Unset
from ..state.session import SessionState
from .inputs import parse_rate

workflow_logger = get_workflow_logger(__name__)


class RateResolver:
    """Reads the committed rate for a regular token."""

    def __init__(self, session: SessionState):
        self.session = session

    def resolve(self, token_address: str) -> Union[int, Unset]:
        """
        Current rate for token_address, or UNSET.

        Raises:
            RemoteReadError: If the exchange contract cannot be read
        """
        rate = self.session.exchange.exchange_rate(token_address)

        if rate == 0:
            log_workflow_step(workflow_logger, "resolve_rate", "unset", token_address)
            return UNSET

        self.session.remember_rate(token_address, rate)
        log_workflow_step(
            workflow_logger, "resolve_rate", "resolved", token_address, {"rate": rate}
        )
        return rate

    def resolution(self, token_address: str) -> RateResolution:
        """
        First phase of negotiation: the rate, or a request for one.

        Carries the rate this session last saw for the token so the UI can
        show when it changed or was cleared on chain.
        """
        last_known = self.session.last_known_rate(token_address)
        rate = self.resolve(token_address)
        if rate is UNSET:
            return RateResolution(
                token_address=token_address,
                status=RateStatus.RATE_REQUIRED,
                last_known_rate=last_known,
            )
        return RateResolution(
            token_address=token_address,
            status=RateStatus.COMMITTED,
            rate=rate,
            last_known_rate=last_known,
        )


class RateNegotiator:
    """Commits a caller-proposed rate for a token that has none."""

    def __init__(self, session: SessionState, confirmation_timeout: Optional[float] = None):
        self.session = session
        self.confirmation_timeout = confirmation_timeout

    def negotiate(self, token_address: str, proposal: Optional[Union[str, int]]) -> int:
        """
        Validate proposal, submit it and wait for one confirmation.

        Returns:
            The committed rate

        Raises:
            InvalidRateInput: Before any submission, if proposal is invalid
            TransactionRejectedError: If the signer or node rejected it
            ConfirmationTimeoutError: If confirmation did not arrive in time
        """
        rate = parse_rate(proposal)

        log_workflow_step(
            workflow_logger, "negotiate_rate", "submit", token_address, {"rate": rate}
        )
        tx = self.session.exchange.set_exchange_rate(token_address, rate)
        receipt = tx.wait(self.confirmation_timeout)

        self.session.remember_rate(token_address, rate)
        log_workflow_step(
            workflow_logger,
            "negotiate_rate",
            "confirmed",
            token_address,
            {"rate": rate, "tx_hash": receipt.tx_hash},
        )
        return rate
