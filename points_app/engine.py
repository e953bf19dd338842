"""
Main points exchange engine.

The only surface the UI talks to. Owns the wallet session and the workflow
components built on it, runs every operation under the session lock, turns
every workflow failure into a user-visible outcome, and reconciles cached
balances after every operation that could have changed them, whether it
succeeded or not.
"""

from typing import Any, Callable, Optional

import structlog
from eth_utils import to_checksum_address

from .chain.contracts import ContractProvider
from .chain.web3_adapter import Web3ContractProvider
from .config.loader import ConfigLoader
from .config.validation import ConfigValidator
from .errors import (
    InvalidAddressError,
    NoTokenLoaded,
    PointsAppError,
    RemoteReadError,
    WalletNotConnected,
)
from .logging.config import configure_logging, get_workflow_logger
from .state.models import (
    ConfirmedExchange,
    ConversionRequest,
    MintResult,
    PendingBalance,
    RateResolution,
    RateStatus,
    TokenHandle,
    TokenKind,
    WorkflowOutcome,
)
from .state.session import SessionState
from .utils.units import format_units
from .workflow.balances import BalanceReader
from .workflow.exchange import ExchangeExecutor
from .workflow.inputs import parse_amount
from .workflow.rates import RateNegotiator, RateResolver

logger = structlog.get_logger(__name__)
workflow_logger = get_workflow_logger(__name__)


class PointsExchangeEngine:
    """
    Coordinator for one user's points exchange session.

    Manages the workflow:
    Connect → Load token → Mint / Resolve rate → Negotiate → Exchange → Reconcile
    """

    def __init__(
        self,
        config: Optional[dict[str, Any]] = None,
        config_dir: Optional[str] = None,
    ) -> None:
        """Initialize the engine from layered configuration."""
        self.logger = logger

        self.config = ConfigLoader.create(config_dir).merge_config(config)
        validation_errors = ConfigValidator.validate_config(self.config)
        if validation_errors:
            error_msgs = [f"{err.field}: {err.message} (got: {err.value})" for err in validation_errors]
            self.logger.error("Configuration validation failed", errors=error_msgs)
            raise ValueError("Invalid configuration: " + "; ".join(error_msgs))

        logging_config = self.config["logging"]
        configure_logging(
            level=logging_config["level"],
            format_json=logging_config["format_json"],
        )

        self.decimals: int = self.config["token"]["decimals"]
        self.universal_symbol: str = self.config["token"]["universal_symbol"]
        self.regular_symbol: str = self.config["token"]["regular_symbol"]
        self.confirmation_timeout: float = self.config["confirmation"]["timeout_seconds"]

        self.session: Optional[SessionState] = None
        self.balance_reader = BalanceReader(self.decimals)
        self.resolver: Optional[RateResolver] = None
        self.negotiator: Optional[RateNegotiator] = None
        self.executor: Optional[ExchangeExecutor] = None

        self.logger.info("Points exchange engine initialized")

    @property
    def balances(self) -> PendingBalance:
        """Last reconciled balances, empty when no wallet is connected."""
        return self.session.balances if self.session else PendingBalance()

    # Session lifecycle

    def connect(self, provider: Optional[ContractProvider] = None) -> WorkflowOutcome:
        """
        Open a session for the wallet behind provider.

        Without a provider, connects to the configured JSON-RPC node.
        """
        if self.session is not None:
            self.disconnect()

        try:
            if provider is None:
                provider = Web3ContractProvider.from_config(self.config)
            session = SessionState(provider)
        except PointsAppError as e:
            return self._failure("connect", e, PendingBalance())

        self.session = session
        self.resolver = RateResolver(session)
        self.negotiator = RateNegotiator(session, self.confirmation_timeout)
        self.executor = ExchangeExecutor(
            session,
            self.resolver,
            self.negotiator,
            decimals=self.decimals,
            confirmation_timeout=self.confirmation_timeout,
        )

        return self._run(
            "connect",
            lambda s: s.account,
            success_message=lambda account: f"Connected account: {account}",
        )

    def disconnect(self) -> None:
        """Close the session and drop every component bound to it."""
        session = self.session
        if session is None:
            return

        # Waits for an in-flight operation to finish before tearing down.
        with session.serialized():
            session.close()
            self.session = None
            self.resolver = None
            self.negotiator = None
            self.executor = None

    # Operations

    def load_token(self, address: str) -> WorkflowOutcome:
        """Load the regular points contract at address into the session."""
        def action(session: SessionState) -> str:
            if not address or not session.provider.is_valid_address(address):
                raise InvalidAddressError("Invalid contract address", raw_value=address)

            contract = session.provider.regular_token(address)
            # Probe before swapping so a bad address leaves the previous token loaded.
            contract.balance_of(session.account)
            session.set_regular_token(
                TokenHandle(address=contract.address, kind=TokenKind.REGULAR, contract=contract)
            )
            return contract.address

        return self._run(
            "load_token",
            action,
            success_message=lambda token: f"Loaded regular points contract {token}",
        )

    def mint(self, amount: str) -> WorkflowOutcome:
        """Mint amount of the loaded regular token to the session account."""
        def action(session: SessionState) -> MintResult:
            token = session.require_regular_token()
            amount_units = parse_amount(amount, self.decimals)

            tx = token.contract.mint(session.account, amount_units)
            receipt = tx.wait(self.confirmation_timeout)
            self.logger.info(
                "Mint confirmed",
                token=token.address,
                amount_units=amount_units,
                tx_hash=receipt.tx_hash,
            )
            return MintResult(
                token_address=token.address,
                amount=str(amount).strip(),
                amount_units=amount_units,
                tx_hash=receipt.tx_hash,
            )

        return self._run(
            "mint",
            action,
            success_message=lambda result: f"Minted {result.amount} {self.regular_symbol}",
        )

    def resolve_or_negotiate_rate(self, token_address: Optional[str] = None) -> WorkflowOutcome:
        """
        First phase of rate negotiation.

        The outcome value is a RateResolution: either the committed rate or
        RATE_REQUIRED, in which case the caller collects a proposal and
        calls negotiate_rate.
        """
        def action(session: SessionState) -> RateResolution:
            return self.resolver.resolution(self._token_address(session, token_address))

        def message(resolution: RateResolution) -> str:
            last_known = resolution.last_known_rate
            if resolution.status == RateStatus.RATE_REQUIRED:
                text = "No exchange rate set"
                if last_known is not None:
                    text += f" (last seen: 1 {self.regular_symbol} = {last_known} {self.universal_symbol})"
                return f"{text}; enter one (e.g. 1 {self.regular_symbol} = 2 {self.universal_symbol})"
            text = f"Exchange rate: 1 {self.regular_symbol} = {resolution.rate} {self.universal_symbol}"
            if last_known is not None and last_known != resolution.rate:
                text += f" (was {last_known})"
            return text

        return self._run("resolve_rate", action, success_message=message, reconcile=False)

    def negotiate_rate(self, proposal: str, token_address: Optional[str] = None) -> WorkflowOutcome:
        """Second phase of rate negotiation: commit the caller's proposal."""
        def action(session: SessionState) -> int:
            return self.negotiator.negotiate(self._token_address(session, token_address), proposal)

        return self._run(
            "negotiate_rate",
            action,
            success_message=lambda rate: (
                f"Exchange rate set to 1 {self.regular_symbol} = {rate} {self.universal_symbol}"
            ),
        )

    def execute(self, request: ConversionRequest) -> WorkflowOutcome:
        """Convert regular points into universal points."""
        def message(result: ConfirmedExchange) -> str:
            credited = format_units(result.universal_credited_units, self.decimals)
            return (
                f"Exchanged {result.amount} {self.regular_symbol} "
                f"for {credited} {self.universal_symbol}"
            )

        return self._run(
            "execute",
            lambda session: self.executor.execute(request),
            success_message=message,
        )

    def refresh_balances(self) -> WorkflowOutcome:
        """Re-read both balances on demand."""
        return self._run(
            "refresh_balances",
            lambda session: self.balance_reader.refresh(session, "refresh_balances"),
            reconcile=False,
        )

    # Internals

    def _token_address(self, session: SessionState, token_address: Optional[str]) -> str:
        if token_address is None:
            return session.require_regular_token().address
        if not session.provider.is_valid_address(token_address):
            raise InvalidAddressError("Invalid contract address", raw_value=token_address)
        return to_checksum_address(token_address)

    def _run(
        self,
        operation: str,
        action: Callable[[SessionState], Any],
        success_message: Optional[Callable[[Any], str]] = None,
        reconcile: bool = True,
    ) -> WorkflowOutcome:
        """
        Run action under the session lock and convert the result.

        Reconciliation runs in ``finally`` so it also happens when action
        raises something outside the taxonomy; that exception still
        propagates.
        """
        session = self.session
        if session is None:
            return self._failure(
                operation, WalletNotConnected("Connect a wallet first"), PendingBalance()
            )

        value: Any = None
        error: Optional[PointsAppError] = None
        refresh_error: Optional[RemoteReadError] = None

        with session.serialized():
            if session.closed:
                return self._failure(
                    operation, WalletNotConnected("Wallet disconnected"), PendingBalance()
                )

            try:
                value = action(session)
            except PointsAppError as e:
                error = e
            finally:
                if reconcile:
                    refresh_error = self._reconcile(session, operation)

        if error is not None:
            if refresh_error is not None:
                error.context["refresh_error"] = str(refresh_error)
            return self._failure(operation, error, session.balances)

        if refresh_error is not None:
            return WorkflowOutcome(
                operation=operation,
                success=False,
                balances=session.balances,
                value=value,
                error_code=refresh_error.code,
                message=f"{operation} completed but balances could not be refreshed: {refresh_error}",
                recoverable=refresh_error.recoverable,
            )

        return WorkflowOutcome(
            operation=operation,
            success=True,
            balances=session.balances,
            value=value,
            message=success_message(value) if success_message else None,
        )

    def _reconcile(self, session: SessionState, operation: str) -> Optional[RemoteReadError]:
        try:
            self.balance_reader.refresh(session, operation)
        except RemoteReadError as e:
            self.logger.warning(
                "Balance reconciliation failed",
                operation=operation,
                error=str(e),
            )
            return e
        return None

    def _failure(
        self, operation: str, error: PointsAppError, balances: PendingBalance
    ) -> WorkflowOutcome:
        log = self.logger.warning if error.recoverable else self.logger.error
        log(
            "Workflow operation failed",
            operation=operation,
            error_code=error.code,
            error=error.message,
            context=error.context or None,
        )

        message = error.message
        if isinstance(error, NoTokenLoaded):
            message = f"{message} (enter a contract address and load it)"
        if "refresh_error" in error.context:
            message = f"{message}; balances could not be refreshed"

        return WorkflowOutcome(
            operation=operation,
            success=False,
            balances=balances,
            error_code=error.code,
            message=message,
            recoverable=error.recoverable,
        )
