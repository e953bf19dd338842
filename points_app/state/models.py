"""
Data models for the points exchange workflow.

Immutable records for token handles, cached balances, conversion requests
and workflow outcomes.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from ..chain.contracts import TokenContract


class TokenKind(str, Enum):
    """Which of the two token roles a handle plays."""
    UNIVERSAL = "universal"
    REGULAR = "regular"


class RateStatus(str, Enum):
    """Result of resolving a token's rate without committing one."""
    COMMITTED = "committed"
    RATE_REQUIRED = "rate_required"


class Unset:
    """Sentinel for an exchange rate that has never been committed."""

    _instance: Optional["Unset"] = None

    def __new__(cls) -> "Unset":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


UNSET = Unset()


@dataclass(frozen=True)
class TokenHandle:
    """Reference to a deployed points token contract."""
    address: str
    kind: TokenKind
    contract: TokenContract = field(repr=False, compare=False)


@dataclass(frozen=True)
class PendingBalance:
    """Cached decimal-string balances for the session account."""
    account: Optional[str] = None
    universal: str = "0.0"
    regular: Optional[str] = None                    # None when no regular token is loaded
    regular_token_address: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "account": self.account,
            "universal": self.universal,
            "regular": self.regular,
            "regular_token_address": self.regular_token_address,
        }


@dataclass(frozen=True)
class ConversionRequest:
    """
    A single exchange attempt as entered by the user.

    proposed_rate is only consulted when the token has no committed rate.
    """
    amount: str
    proposed_rate: Optional[str] = None


@dataclass(frozen=True)
class RateResolution:
    """Outcome of the first phase of rate negotiation."""
    token_address: str
    status: RateStatus
    rate: Optional[int] = None
    last_known_rate: Optional[int] = None    # rate seen by this session before the read


@dataclass(frozen=True)
class ConfirmedExchange:
    """A confirmed conversion of regular points into universal points."""
    token_address: str
    amount: str
    amount_units: int
    rate: int
    universal_credited_units: int
    tx_hash: str
    negotiated_rate: bool = False


@dataclass(frozen=True)
class MintResult:
    """A confirmed mint of regular points to the session account."""
    token_address: str
    amount: str
    amount_units: int
    tx_hash: str


@dataclass(frozen=True)
class WorkflowOutcome:
    """Result-or-failure returned to the UI for every engine operation."""
    operation: str
    success: bool
    balances: PendingBalance
    value: Any = None
    error_code: Optional[str] = None
    message: Optional[str] = None
    recoverable: bool = True

    @property
    def failed(self) -> bool:
        return not self.success
