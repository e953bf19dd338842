"""Pytest configuration and shared fixtures."""

import pytest
from eth_utils import to_checksum_address

from points_app.chain.memory import InMemoryLedger, InMemoryProvider
from points_app.engine import PointsExchangeEngine
from points_app.state.models import TokenHandle, TokenKind
from points_app.state.session import SessionState

ACCOUNT = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"
OTHER_ACCOUNT = "0xFFcf8FDEE72ac11b5c542428B35EEF5769C409f0"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer environment variables out of configuration tests."""
    monkeypatch.delenv("POINTS_PRIVATE_KEY", raising=False)
    monkeypatch.delenv("POINTS_RPC_URL", raising=False)


@pytest.fixture
def account() -> str:
    """Checksummed test account."""
    return to_checksum_address(ACCOUNT)


@pytest.fixture
def ledger() -> InMemoryLedger:
    """Fresh in-memory ledger."""
    return InMemoryLedger()


@pytest.fixture
def token_address(ledger: InMemoryLedger) -> str:
    """Address of a regular points token deployed on the ledger."""
    return ledger.deploy_token("RLP")


@pytest.fixture
def provider(ledger: InMemoryLedger) -> InMemoryProvider:
    """Wallet session for the test account."""
    return ledger.connect(ACCOUNT)


@pytest.fixture
def session(provider: InMemoryProvider) -> SessionState:
    """Session with no regular token loaded."""
    return SessionState(provider)


@pytest.fixture
def loaded_session(session: SessionState, provider: InMemoryProvider, token_address: str) -> SessionState:
    """Session with the test token loaded."""
    contract = provider.regular_token(token_address)
    session.set_regular_token(
        TokenHandle(address=contract.address, kind=TokenKind.REGULAR, contract=contract)
    )
    return session


@pytest.fixture
def engine(tmp_path) -> PointsExchangeEngine:
    """Engine with default configuration and no network.yaml."""
    return PointsExchangeEngine(config_dir=str(tmp_path))


@pytest.fixture
def connected_engine(engine: PointsExchangeEngine, provider: InMemoryProvider) -> PointsExchangeEngine:
    """Engine connected to the in-memory wallet, no token loaded."""
    outcome = engine.connect(provider)
    assert outcome.success
    return engine


@pytest.fixture
def loaded_engine(connected_engine: PointsExchangeEngine, token_address: str) -> PointsExchangeEngine:
    """Connected engine with the test token loaded and 100 RLP minted."""
    assert connected_engine.load_token(token_address).success
    assert connected_engine.mint("100").success
    return connected_engine
