"""
Exchange execution.

Runs one conversion of regular points into universal points. The steps run
strictly in order and any of them can end the attempt:

    token loaded → rate resolved (negotiated once if unset) → amount valid
    → balance sufficient → exchange submitted → exchange confirmed

Nothing is retried. A failure after submission is reported as ExchangeFailed;
the caller reconciles balances either way.
"""

from typing import Optional

from ..errors import (
    ChainFailureError,
    ExchangeFailed,
    InsufficientBalance,
    RateRequired,
)
from ..logging.config import get_workflow_logger, log_workflow_step
from ..state.models import UNSET, ConfirmedExchange, ConversionRequest
from ..state.session import SessionState
from ..utils.units import DEFAULT_DECIMALS
from .inputs import parse_amount
from .rates import RateNegotiator, RateResolver

workflow_logger = get_workflow_logger(__name__)


class ExchangeExecutor:
    """Validates and submits conversion requests."""

    def __init__(
        self,
        session: SessionState,
        resolver: RateResolver,
        negotiator: RateNegotiator,
        decimals: int = DEFAULT_DECIMALS,
        confirmation_timeout: Optional[float] = None,
    ):
        self.session = session
        self.resolver = resolver
        self.negotiator = negotiator
        self.decimals = decimals
        self.confirmation_timeout = confirmation_timeout

    def execute(self, request: ConversionRequest) -> ConfirmedExchange:
        """
        Convert request.amount of the loaded regular token.

        Raises:
            NoTokenLoaded: No regular token is loaded
            RateRequired: The rate is unset and the request carries no proposal
            InvalidRateInput: The proposal was needed and is invalid
            TransactionRejectedError: Committing the proposed rate was rejected
            InvalidAmount: The amount is not a positive decimal
            InsufficientBalance: The amount exceeds the regular token balance
            RemoteReadError: A read before submission failed
            ExchangeFailed: The exchange transaction did not confirm
        """
        token = self.session.require_regular_token()
        token_address = token.address

        rate = self.resolver.resolve(token_address)
        negotiated = False
        if rate is UNSET:
            if request.proposed_rate is None:
                raise RateRequired(
                    f"No exchange rate set for {token_address}; propose one to continue",
                    token_address=token_address,
                )
            rate = self.negotiator.negotiate(token_address, request.proposed_rate)
            negotiated = True

        amount_units = parse_amount(request.amount, self.decimals)

        available = token.contract.balance_of(self.session.account)
        if amount_units > available:
            raise InsufficientBalance(
                "Amount exceeds your regular points balance",
                raw_value=request.amount,
                requested_units=amount_units,
                available_units=available,
            )

        log_workflow_step(
            workflow_logger,
            "execute",
            "submit",
            token_address,
            {"amount_units": amount_units, "rate": rate},
        )
        try:
            tx = self.session.exchange.exchange(token_address, amount_units)
            receipt = tx.wait(self.confirmation_timeout)
        except ChainFailureError as e:
            log_workflow_step(
                workflow_logger, "execute", "failed", token_address, {"error": str(e)}
            )
            raise ExchangeFailed(
                f"Exchange failed: {e}", token_address=token_address, cause=e
            ) from e

        log_workflow_step(
            workflow_logger,
            "execute",
            "confirmed",
            token_address,
            {"tx_hash": receipt.tx_hash, "amount_units": amount_units},
        )
        return ConfirmedExchange(
            token_address=token_address,
            amount=str(request.amount).strip(),
            amount_units=amount_units,
            rate=rate,
            universal_credited_units=amount_units * rate,
            tx_hash=receipt.tx_hash,
            negotiated_rate=negotiated,
        )
