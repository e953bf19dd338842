"""Balance reads and reconciliation of the session's cached balances."""

import structlog

from ..chain.contracts import TokenContract
from ..logging.config import log_balance_refresh
from ..state.models import PendingBalance
from ..state.session import SessionState
from ..utils.units import DEFAULT_DECIMALS, format_units

logger = structlog.get_logger(__name__)


class BalanceReader:
    """Reads token balances and overwrites the session's PendingBalance."""

    def __init__(self, decimals: int = DEFAULT_DECIMALS):
        self.decimals = decimals

    def read(self, contract: TokenContract, account: str) -> str:
        """Balance of account on contract as a decimal string."""
        return format_units(contract.balance_of(account), self.decimals)

    def refresh(self, session: SessionState, trigger: str) -> PendingBalance:
        """
        Re-read both balances and overwrite the cache.

        Always a full re-read; nothing is carried over from the previous
        snapshot. Raises RemoteReadError without touching the cache if
        either read fails.
        """
        with session.serialized():
            universal = self.read(session.universal.contract, session.account)

            regular = None
            if session.regular is not None:
                regular = self.read(session.regular.contract, session.account)

            balances = PendingBalance(
                account=session.account,
                universal=universal,
                regular=regular,
                regular_token_address=session.regular_token_address,
            )
            session.update_balances(balances)

        log_balance_refresh(logger, session.account, universal, regular, trigger)
        return balances
