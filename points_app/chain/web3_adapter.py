"""
web3.py implementation of the contract handles.

Reads go through eth_call; writes are either signed by the node
(``transact``) or, when a private key is configured, signed locally and sent
raw. Every web3 failure is translated into the points app error taxonomy at
this boundary so the workflow never sees web3 exception types.
"""

import time
from typing import Any, Optional

import structlog
from eth_utils import is_address, to_checksum_address
from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, Web3Exception

from ..errors import (
    ConfirmationTimeoutError,
    RemoteReadError,
    TransactionRejectedError,
    WalletNotConnected,
)
from .contracts import (
    ContractProvider,
    ExchangeContract,
    PendingTransaction,
    TokenContract,
    TransactionReceipt,
)

logger = structlog.get_logger(__name__)

# Only the functions the workflow calls.
POINTS_TOKEN_ABI = [
    {
        "type": "function",
        "name": "balanceOf",
        "stateMutability": "view",
        "inputs": [{"name": "account", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "mint",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "to", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [],
    },
]

POINTS_EXCHANGE_ABI = [
    {
        "type": "function",
        "name": "exchangeRates",
        "stateMutability": "view",
        "inputs": [{"name": "token", "type": "address"}],
        "outputs": [{"name": "", "type": "uint256"}],
    },
    {
        "type": "function",
        "name": "setExchangeRate",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "token", "type": "address"},
            {"name": "rate", "type": "uint256"},
        ],
        "outputs": [],
    },
    {
        "type": "function",
        "name": "exchange",
        "stateMutability": "nonpayable",
        "inputs": [
            {"name": "token", "type": "address"},
            {"name": "amount", "type": "uint256"},
        ],
        "outputs": [],
    },
]


class Web3Transaction(PendingTransaction):
    """Submitted transaction awaiting its receipt."""

    def __init__(self, web3: Web3, tx_hash: str, method: str,
                 confirmations: int = 1, poll_latency: float = 0.5):
        super().__init__(tx_hash, method)
        self.web3 = web3
        self.confirmations = confirmations
        self.poll_latency = poll_latency

    def wait(self, timeout: Optional[float] = None) -> TransactionReceipt:
        started = time.monotonic()
        kwargs: dict[str, Any] = {"poll_latency": self.poll_latency}
        if timeout is not None:
            kwargs["timeout"] = timeout

        try:
            receipt = self.web3.eth.wait_for_transaction_receipt(self.tx_hash, **kwargs)
        except TimeExhausted:
            raise ConfirmationTimeoutError(
                f"Transaction {self.tx_hash} not confirmed after {timeout}s",
                tx_hash=self.tx_hash,
                timeout_seconds=timeout,
            ) from None
        except (Web3Exception, OSError) as e:
            raise RemoteReadError(
                f"Could not fetch receipt for {self.tx_hash}: {e}",
                operation="wait_for_transaction_receipt",
            ) from e

        if receipt["status"] != 1:
            raise TransactionRejectedError(
                f"{self.method} reverted in block {receipt['blockNumber']}",
                method=self.method,
                tx_hash=self.tx_hash,
            )

        block_number = receipt["blockNumber"]
        if self.confirmations > 1:
            self._wait_for_depth(block_number, started, timeout)

        return TransactionReceipt(tx_hash=self.tx_hash, block_number=block_number, status=1)

    def _wait_for_depth(self, block_number: int, started: float, timeout: Optional[float]) -> None:
        """Poll until the receipt block is buried under the configured confirmations."""
        target = block_number + self.confirmations - 1
        while True:
            try:
                current = self.web3.eth.block_number
            except (Web3Exception, OSError) as e:
                raise RemoteReadError(
                    f"Could not read block number: {e}", operation="eth_blockNumber"
                ) from e

            if current >= target:
                return

            if timeout is not None and time.monotonic() - started > timeout:
                raise ConfirmationTimeoutError(
                    f"Transaction {self.tx_hash} reached {current - block_number + 1} "
                    f"of {self.confirmations} confirmations after {timeout}s",
                    tx_hash=self.tx_hash,
                    timeout_seconds=timeout,
                )
            time.sleep(self.poll_latency)


class Web3Signer:
    """Submits contract function calls for one account."""

    def __init__(self, web3: Web3, account: str, private_key: Optional[str] = None,
                 chain_id: Optional[int] = None, confirmations: int = 1,
                 poll_latency: float = 0.5):
        self.web3 = web3
        self.account = account
        self.private_key = private_key
        self.chain_id = chain_id
        self.confirmations = confirmations
        self.poll_latency = poll_latency

    def call(self, function: Any, operation: str) -> Any:
        """Run a read-only contract call."""
        try:
            return function.call({"from": self.account})
        except (Web3Exception, OSError) as e:
            raise RemoteReadError(f"{operation} call failed: {e}", operation=operation) from e

    def bind(self, contract: Any, method: str, *args: Any) -> Any:
        """Build a contract function call, rejecting arguments the ABI cannot encode."""
        try:
            return getattr(contract.functions, method)(*args)
        except Web3Exception as e:
            raise TransactionRejectedError(f"{method} arguments rejected: {e}", method=method) from e

    def submit(self, function: Any, method: str) -> Web3Transaction:
        """Sign and send a state-changing contract call."""
        try:
            if self.private_key:
                tx_hash = self._send_signed(function)
            else:
                tx_hash = function.transact({"from": self.account})
        except ContractLogicError as e:
            raise TransactionRejectedError(f"{method} would revert: {e}", method=method) from e
        except Web3Exception as e:
            raise TransactionRejectedError(f"{method} rejected: {e}", method=method) from e
        except OSError as e:
            raise RemoteReadError(f"{method} could not be submitted: {e}", operation=method) from e

        tx_hash_hex = Web3.to_hex(tx_hash)
        logger.info("Transaction submitted", method=method, tx_hash=tx_hash_hex, sender=self.account)
        return Web3Transaction(
            self.web3,
            tx_hash_hex,
            method,
            confirmations=self.confirmations,
            poll_latency=self.poll_latency,
        )

    def _send_signed(self, function: Any) -> bytes:
        params: dict[str, Any] = {
            "from": self.account,
            "nonce": self.web3.eth.get_transaction_count(self.account, "pending"),
        }
        if self.chain_id is not None:
            params["chainId"] = self.chain_id

        transaction = function.build_transaction(params)
        signed = self.web3.eth.account.sign_transaction(transaction, self.private_key)
        return self.web3.eth.send_raw_transaction(signed.raw_transaction)


class Web3Token(TokenContract):
    """Points token reached through web3."""

    def __init__(self, signer: Web3Signer, address: str):
        super().__init__(to_checksum_address(address))
        self.signer = signer
        self.contract = signer.web3.eth.contract(address=self.address, abi=POINTS_TOKEN_ABI)

    def balance_of(self, account: str) -> int:
        return int(self.signer.call(
            self.contract.functions.balanceOf(to_checksum_address(account)), "balanceOf"
        ))

    def mint(self, account: str, amount_units: int) -> PendingTransaction:
        function = self.signer.bind(self.contract, "mint", to_checksum_address(account), amount_units)
        return self.signer.submit(function, "mint")


class Web3Exchange(ExchangeContract):
    """Points exchange reached through web3."""

    def __init__(self, signer: Web3Signer, address: str):
        super().__init__(to_checksum_address(address))
        self.signer = signer
        self.contract = signer.web3.eth.contract(address=self.address, abi=POINTS_EXCHANGE_ABI)

    def exchange_rate(self, token_address: str) -> int:
        return int(self.signer.call(
            self.contract.functions.exchangeRates(to_checksum_address(token_address)),
            "exchangeRates",
        ))

    def set_exchange_rate(self, token_address: str, rate: int) -> PendingTransaction:
        function = self.signer.bind(
            self.contract, "setExchangeRate", to_checksum_address(token_address), rate
        )
        return self.signer.submit(function, "setExchangeRate")

    def exchange(self, token_address: str, amount_units: int) -> PendingTransaction:
        function = self.signer.bind(
            self.contract, "exchange", to_checksum_address(token_address), amount_units
        )
        return self.signer.submit(function, "exchange")


class Web3ContractProvider(ContractProvider):
    """Wallet session backed by a JSON-RPC node."""

    def __init__(self, web3: Web3, signer: Web3Signer,
                 universal_address: str, exchange_address: str):
        self.web3 = web3
        self.signer = signer
        self.universal_address = to_checksum_address(universal_address)
        self.exchange_address = to_checksum_address(exchange_address)

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "Web3ContractProvider":
        """Connect to the configured node and resolve the signing account."""
        chain = config["chain"]
        confirmation = config["confirmation"]
        private_key = config.get("signer", {}).get("private_key")

        web3 = Web3(Web3.HTTPProvider(
            chain["rpc_url"],
            request_kwargs={"timeout": chain.get("request_timeout_seconds", 30.0)},
        ))

        if private_key:
            account = web3.eth.account.from_key(private_key).address
        else:
            try:
                accounts = web3.eth.accounts
            except (Web3Exception, OSError) as e:
                raise RemoteReadError(
                    f"Could not list node accounts: {e}", operation="eth_accounts"
                ) from e
            if not accounts:
                raise WalletNotConnected("Node exposes no unlocked accounts and no private key is configured")
            account = accounts[0]

        signer = Web3Signer(
            web3,
            to_checksum_address(account),
            private_key=private_key,
            chain_id=chain.get("chain_id"),
            confirmations=confirmation.get("confirmations", 1),
            poll_latency=confirmation.get("poll_latency_seconds", 0.5),
        )
        logger.info("Connected to node", rpc_url=chain["rpc_url"], account=signer.account)

        return cls(
            web3,
            signer,
            config["contracts"]["universal_points_address"],
            config["contracts"]["points_exchange_address"],
        )

    @property
    def account(self) -> str:
        return self.signer.account

    def universal_token(self) -> TokenContract:
        return Web3Token(self.signer, self.universal_address)

    def exchange_contract(self) -> ExchangeContract:
        return Web3Exchange(self.signer, self.exchange_address)

    def regular_token(self, address: str) -> TokenContract:
        return Web3Token(self.signer, address)

    def is_valid_address(self, address: Any) -> bool:
        return isinstance(address, str) and is_address(address)
