"""Default configuration parameters for the points exchange workflow."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ChainParams:
    """JSON-RPC endpoint parameters."""
    rpc_url: str = "http://127.0.0.1:8545"
    chain_id: Optional[int] = None                   # None = accept whatever the node reports
    request_timeout_seconds: float = 30.0


@dataclass(frozen=True)
class ContractParams:
    """Addresses of the fixed contracts every session talks to."""
    universal_points_address: str = "0xCaCe0E8567a2dfA74aA4694d1edD91d1F8C2093A"
    points_exchange_address: str = "0xBa1441620233b87dC32562E1f27C8F5cE5a098f7"


@dataclass(frozen=True)
class TokenParams:
    """Token unit parameters."""
    decimals: int = 18
    universal_symbol: str = "UPT"
    regular_symbol: str = "RLP"


@dataclass(frozen=True)
class ConfirmationParams:
    """Transaction confirmation wait parameters."""
    confirmations: int = 1
    timeout_seconds: float = 120.0                   # Stalled waits become ConfirmationTimeoutError
    poll_latency_seconds: float = 0.5


@dataclass(frozen=True)
class LoggingParams:
    """Logging output parameters."""
    level: str = "INFO"
    format_json: bool = False


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    chain: ChainParams
    contracts: ContractParams
    token: TokenParams
    confirmation: ConfirmationParams
    logging: LoggingParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        chain=ChainParams(),
        contracts=ContractParams(),
        token=TokenParams(),
        confirmation=ConfirmationParams(),
        logging=LoggingParams(),
    )
