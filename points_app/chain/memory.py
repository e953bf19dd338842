"""
In-process ledger with the same semantics as the deployed contracts.

Balances, rates and confirmations live in plain dicts so tests and demos run
without a node. Effects are applied when a transaction is confirmed, not when
it is submitted. Fault injection hooks let callers simulate a declining
signer, a reverting transaction, a stalled confirmation or a dead RPC.
"""

import itertools
from dataclasses import dataclass
from typing import Any, Callable, Optional

import structlog
from eth_utils import is_address, keccak, to_checksum_address

from ..errors import ConfirmationTimeoutError, RemoteReadError, TransactionRejectedError
from .contracts import (
    ContractProvider,
    ExchangeContract,
    PendingTransaction,
    TokenContract,
    TransactionReceipt,
)

logger = structlog.get_logger(__name__)

UNIVERSAL_POINTS_ADDRESS = "0xCaCe0E8567a2dfA74aA4694d1edD91d1F8C2093A"
POINTS_EXCHANGE_ADDRESS = "0xBa1441620233b87dC32562E1f27C8F5cE5a098f7"


class _Revert(Exception):
    """Raised inside a ledger effect to revert the transaction."""


@dataclass(frozen=True)
class Submission:
    """One call that reached the submission channel."""
    method: str
    sender: str
    args: tuple
    tx_hash: str


class InMemoryLedger:
    """Deterministic stand-in for the universal token, regular tokens and exchange."""

    def __init__(
        self,
        universal_address: str = UNIVERSAL_POINTS_ADDRESS,
        exchange_address: str = POINTS_EXCHANGE_ADDRESS,
    ):
        self.universal_address = to_checksum_address(universal_address)
        self.exchange_address = to_checksum_address(exchange_address)

        self.balances: dict[tuple[str, str], int] = {}
        self.rates: dict[str, int] = {}
        self.tokens: dict[str, str] = {self.universal_address: "UPT"}
        self.submissions: list[Submission] = []
        self.block_number = 0

        self._token_counter = itertools.count(1)
        self._tx_counter = itertools.count(1)
        self._faults: dict[str, set[str]] = {"reject": set(), "revert": set(), "stall": set()}
        self.reads_failing = False

    # Setup

    def deploy_token(self, symbol: str = "RLP") -> str:
        """Register a new regular token and return its address."""
        seed = f"regular-points-{next(self._token_counter)}".encode()
        address = to_checksum_address("0x" + keccak(seed)[-20:].hex())
        self.tokens[address] = symbol
        logger.debug("Deployed in-memory token", address=address, symbol=symbol)
        return address

    def connect(self, account: str) -> "InMemoryProvider":
        """Open a wallet session for account."""
        return InMemoryProvider(self, to_checksum_address(account))

    # Fault injection

    def reject_next(self, method: str) -> None:
        """Make the signer decline the next submission of method."""
        self._faults["reject"].add(method)

    def revert_next(self, method: str) -> None:
        """Make the next confirmed transaction of method revert."""
        self._faults["revert"].add(method)

    def stall_next(self, method: str) -> None:
        """Make the next transaction of method never confirm."""
        self._faults["stall"].add(method)

    def fail_reads(self, enabled: bool = True) -> None:
        """Make every contract read fail as if the RPC were down."""
        self.reads_failing = enabled

    # Reads

    def balance_of(self, token: str, account: str) -> int:
        self._check_read("balanceOf")
        token = to_checksum_address(token)
        if token not in self.tokens:
            raise RemoteReadError(f"No contract deployed at {token}", operation="balanceOf")
        return self.balances.get((token, to_checksum_address(account)), 0)

    def exchange_rate(self, token: str) -> int:
        self._check_read("exchangeRates")
        return self.rates.get(to_checksum_address(token), 0)

    def submissions_for(self, method: str) -> list[Submission]:
        return [s for s in self.submissions if s.method == method]

    def _check_read(self, operation: str) -> None:
        if self.reads_failing:
            raise RemoteReadError("RPC endpoint unreachable", operation=operation)

    # Writes

    def submit(self, method: str, sender: str, args: tuple,
               effect: Callable[[], None]) -> "InMemoryTransaction":
        """Record a submission and return its pending transaction."""
        tx_hash = "0x" + keccak(f"tx-{next(self._tx_counter)}".encode()).hex()
        self.submissions.append(Submission(method=method, sender=sender, args=args, tx_hash=tx_hash))

        if self._take_fault("reject", method):
            logger.info("Signer declined transaction", method=method, sender=sender)
            raise TransactionRejectedError(
                f"User rejected {method} transaction", method=method
            )

        return InMemoryTransaction(
            ledger=self,
            tx_hash=tx_hash,
            method=method,
            effect=effect,
            reverts=self._take_fault("revert", method),
            stalls=self._take_fault("stall", method),
        )

    def _take_fault(self, kind: str, method: str) -> bool:
        pending = self._faults[kind]
        if method in pending:
            pending.discard(method)
            return True
        return False

    def _credit(self, token: str, account: str, amount: int) -> None:
        key = (token, account)
        self.balances[key] = self.balances.get(key, 0) + amount

    def _debit(self, token: str, account: str, amount: int) -> None:
        key = (token, account)
        available = self.balances.get(key, 0)
        if available < amount:
            raise _Revert("ERC20: burn amount exceeds balance")
        self.balances[key] = available - amount


class InMemoryTransaction(PendingTransaction):
    """Pending transaction whose effect runs on confirmation."""

    def __init__(self, ledger: InMemoryLedger, tx_hash: str, method: str,
                 effect: Callable[[], None], reverts: bool = False, stalls: bool = False):
        super().__init__(tx_hash, method)
        self._ledger = ledger
        self._effect = effect
        self._reverts = reverts
        self._stalls = stalls
        self._receipt: Optional[TransactionReceipt] = None

    def wait(self, timeout: Optional[float] = None) -> TransactionReceipt:
        if self._receipt is not None:
            return self._receipt

        if self._stalls:
            raise ConfirmationTimeoutError(
                f"Transaction {self.tx_hash} not confirmed after {timeout}s",
                tx_hash=self.tx_hash,
                timeout_seconds=timeout,
            )

        self._ledger.block_number += 1
        try:
            if self._reverts:
                raise _Revert("execution reverted")
            self._effect()
        except _Revert as e:
            raise TransactionRejectedError(
                f"{self.method} reverted: {e}", method=self.method, tx_hash=self.tx_hash
            ) from None

        self._receipt = TransactionReceipt(
            tx_hash=self.tx_hash, block_number=self._ledger.block_number, status=1
        )
        return self._receipt


class InMemoryToken(TokenContract):
    """Token handle bound to a sender."""

    def __init__(self, ledger: InMemoryLedger, address: str, sender: str):
        super().__init__(to_checksum_address(address))
        self._ledger = ledger
        self._sender = sender

    def balance_of(self, account: str) -> int:
        return self._ledger.balance_of(self.address, account)

    def mint(self, account: str, amount_units: int) -> PendingTransaction:
        token = self.address
        recipient = to_checksum_address(account)

        def effect() -> None:
            if token not in self._ledger.tokens:
                raise _Revert("no contract at address")
            if amount_units <= 0:
                raise _Revert("mint amount must be positive")
            self._ledger._credit(token, recipient, amount_units)

        return self._ledger.submit("mint", self._sender, (token, recipient, amount_units), effect)


class InMemoryExchange(ExchangeContract):
    """Exchange handle bound to a sender."""

    def __init__(self, ledger: InMemoryLedger, sender: str):
        super().__init__(ledger.exchange_address)
        self._ledger = ledger
        self._sender = sender

    def exchange_rate(self, token_address: str) -> int:
        return self._ledger.exchange_rate(token_address)

    def set_exchange_rate(self, token_address: str, rate: int) -> PendingTransaction:
        token = to_checksum_address(token_address)

        def effect() -> None:
            if rate <= 0:
                raise _Revert("rate must be positive")
            self._ledger.rates[token] = rate

        return self._ledger.submit("setExchangeRate", self._sender, (token, rate), effect)

    def exchange(self, token_address: str, amount_units: int) -> PendingTransaction:
        ledger = self._ledger
        token = to_checksum_address(token_address)
        sender = self._sender

        def effect() -> None:
            rate = ledger.rates.get(token, 0)
            if rate == 0:
                raise _Revert("exchange rate not set")
            ledger._debit(token, sender, amount_units)
            ledger._credit(ledger.universal_address, sender, amount_units * rate)

        return ledger.submit("exchange", sender, (token, amount_units), effect)


class InMemoryProvider(ContractProvider):
    """Wallet session over an InMemoryLedger."""

    def __init__(self, ledger: InMemoryLedger, account: str):
        self.ledger = ledger
        self._account = account

    @property
    def account(self) -> str:
        return self._account

    def universal_token(self) -> TokenContract:
        return InMemoryToken(self.ledger, self.ledger.universal_address, self._account)

    def exchange_contract(self) -> ExchangeContract:
        return InMemoryExchange(self.ledger, self._account)

    def regular_token(self, address: str) -> TokenContract:
        return InMemoryToken(self.ledger, address, self._account)

    def is_valid_address(self, address: Any) -> bool:
        return isinstance(address, str) and is_address(address)
