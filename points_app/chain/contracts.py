"""Base classes for contract handles and the wallet provider that issues them."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class TransactionReceipt:
    """Confirmed transaction receipt."""
    tx_hash: str
    block_number: Optional[int] = None
    status: int = 1


class PendingTransaction(ABC):
    """A submitted transaction that has not been confirmed yet."""

    def __init__(self, tx_hash: str, method: str):
        self.tx_hash = tx_hash
        self.method = method

    @abstractmethod
    def wait(self, timeout: Optional[float] = None) -> TransactionReceipt:
        """
        Block until the transaction is confirmed.

        Args:
            timeout: Seconds to wait before giving up; None waits forever

        Returns:
            Receipt of the confirmed transaction

        Raises:
            TransactionRejectedError: If the transaction reverted
            ConfirmationTimeoutError: If the timeout expired first
        """
        pass


class TokenContract(ABC):
    """ERC20-like points token."""

    def __init__(self, address: str):
        self.address = address

    @abstractmethod
    def balance_of(self, account: str) -> int:
        """Balance of account in smallest units."""
        pass

    @abstractmethod
    def mint(self, account: str, amount_units: int) -> PendingTransaction:
        """Mint amount_units to account."""
        pass


class ExchangeContract(ABC):
    """Exchange contract holding per-token rates and the conversion operation."""

    def __init__(self, address: str):
        self.address = address

    @abstractmethod
    def exchange_rate(self, token_address: str) -> int:
        """Stored rate for token_address; zero when unset."""
        pass

    @abstractmethod
    def set_exchange_rate(self, token_address: str, rate: int) -> PendingTransaction:
        """Commit a rate for token_address."""
        pass

    @abstractmethod
    def exchange(self, token_address: str, amount_units: int) -> PendingTransaction:
        """Convert amount_units of token_address into universal points."""
        pass


class ContractProvider(ABC):
    """
    Wallet session collaborator.

    Supplies the connected account and contract handles bound to its signer.
    """

    @property
    @abstractmethod
    def account(self) -> str:
        """Connected externally-owned account."""
        pass

    @abstractmethod
    def universal_token(self) -> TokenContract:
        """Handle for the universal points token."""
        pass

    @abstractmethod
    def exchange_contract(self) -> ExchangeContract:
        """Handle for the points exchange contract."""
        pass

    @abstractmethod
    def regular_token(self, address: str) -> TokenContract:
        """Handle for a regular points token at address."""
        pass

    @abstractmethod
    def is_valid_address(self, address: str) -> bool:
        """Whether address is a well-formed contract address."""
        pass

    def close(self) -> None:
        """Release provider resources on disconnect."""
        pass
