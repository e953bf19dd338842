"""
Session state for one connected wallet.

A SessionState is created on wallet connect and closed on disconnect. It is
the single owner of the loaded token reference and the cached balances;
callers take ``serialized()`` around any sequence of reads and writes so a
balance refresh and a token reload can never interleave.
"""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional

import structlog

from ..chain.contracts import ContractProvider, ExchangeContract
from ..errors import NoTokenLoaded
from .models import PendingBalance, TokenHandle, TokenKind

logger = structlog.get_logger(__name__)


class SessionState:
    """Account, contract handles and cached balances for one wallet session."""

    def __init__(self, provider: ContractProvider):
        self.provider = provider
        self.account: str = provider.account

        universal = provider.universal_token()
        self.universal = TokenHandle(
            address=universal.address, kind=TokenKind.UNIVERSAL, contract=universal
        )
        self.exchange: ExchangeContract = provider.exchange_contract()
        self.regular: Optional[TokenHandle] = None

        self.balances = PendingBalance(account=self.account)
        self.last_known_rates: dict[str, int] = {}
        self.closed = False

        self._lock = threading.RLock()

        logger.info(
            "Session opened",
            account=self.account,
            universal_token=self.universal.address,
            exchange=self.exchange.address,
        )

    @contextmanager
    def serialized(self) -> Iterator["SessionState"]:
        """Hold the session lock for the duration of a workflow."""
        with self._lock:
            yield self

    @property
    def regular_token_address(self) -> Optional[str]:
        return self.regular.address if self.regular else None

    def require_regular_token(self) -> TokenHandle:
        """Return the loaded regular token or raise NoTokenLoaded."""
        if self.regular is None:
            raise NoTokenLoaded("Load a regular points contract before continuing")
        return self.regular

    def set_regular_token(self, handle: TokenHandle) -> None:
        """Swap the loaded regular token."""
        with self._lock:
            previous = self.regular_token_address
            self.regular = handle
            logger.info(
                "Regular token loaded",
                account=self.account,
                previous_token=previous,
                token=handle.address,
            )

    def update_balances(self, balances: PendingBalance) -> None:
        """Overwrite the cached balances with a fresh read."""
        with self._lock:
            self.balances = balances

    def remember_rate(self, token_address: str, rate: int) -> None:
        """Cache the last rate seen on chain for display."""
        with self._lock:
            self.last_known_rates[token_address] = rate

    def last_known_rate(self, token_address: str) -> Optional[int]:
        return self.last_known_rates.get(token_address)

    def close(self) -> None:
        """Tear the session down on wallet disconnect."""
        with self._lock:
            if self.closed:
                return
            self.provider.close()
            self.regular = None
            self.balances = PendingBalance()
            self.last_known_rates.clear()
            self.closed = True
            logger.info("Session closed", account=self.account)
