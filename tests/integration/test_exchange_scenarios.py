"""End-to-end exchange scenarios against the in-memory ledger."""

import threading

import pytest

from points_app.chain.memory import InMemoryLedger
from points_app.engine import PointsExchangeEngine
from points_app.state.models import ConversionRequest, RateStatus

ACCOUNT = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"
WEI = 10 ** 18


@pytest.fixture
def scenario(tmp_path):
    """Ledger plus an engine connected to it with a fresh token loaded."""
    ledger = InMemoryLedger()
    token = ledger.deploy_token("RLP")
    engine = PointsExchangeEngine(config_dir=str(tmp_path))
    assert engine.connect(ledger.connect(ACCOUNT)).success
    assert engine.load_token(token).success
    return ledger, engine, token


@pytest.mark.integration
class TestFirstExchange:
    """A user exchanging from a token nobody has priced yet."""

    def test_propose_rate_mint_and_exchange(self, scenario):
        ledger, engine, token = scenario

        resolution = engine.resolve_or_negotiate_rate()
        assert resolution.value.status == RateStatus.RATE_REQUIRED

        minted = engine.mint("100")
        assert minted.balances.regular == "100.0"
        assert minted.balances.universal == "0.0"

        outcome = engine.execute(ConversionRequest(amount="10", proposed_rate="2"))

        assert outcome.success
        assert outcome.value.negotiated_rate is True
        assert outcome.balances.universal == "20.0"
        assert outcome.balances.regular == "90.0"
        assert len(ledger.submissions_for("setExchangeRate")) == 1
        assert len(ledger.submissions_for("exchange")) == 1

    def test_second_exchange_reuses_committed_rate(self, scenario):
        ledger, engine, token = scenario
        engine.mint("100")
        engine.execute(ConversionRequest(amount="10", proposed_rate="2"))

        outcome = engine.execute(ConversionRequest(amount="5", proposed_rate="7"))

        assert outcome.success
        assert outcome.value.rate == 2
        assert outcome.value.negotiated_rate is False
        assert outcome.balances.universal == "30.0"
        assert outcome.balances.regular == "85.0"
        assert len(ledger.submissions_for("setExchangeRate")) == 1

    def test_two_phase_negotiation(self, scenario):
        ledger, engine, token = scenario
        engine.mint("1.5")

        pending = engine.execute(ConversionRequest(amount="1.5"))
        assert pending.error_code == "rate_required"

        assert engine.negotiate_rate("3").success
        outcome = engine.execute(ConversionRequest(amount="1.5"))

        assert outcome.success
        assert outcome.balances.universal == "4.5"
        assert outcome.balances.regular == "0.0"


@pytest.mark.integration
class TestFailedAttempts:
    """Failures leave the ledger and the cached balances consistent."""

    def test_rejected_negotiation_leaves_rate_unset(self, scenario):
        ledger, engine, token = scenario
        engine.mint("100")
        ledger.reject_next("setExchangeRate")

        outcome = engine.execute(ConversionRequest(amount="10", proposed_rate="2"))

        assert outcome.error_code == "transaction_rejected"
        assert ledger.submissions_for("exchange") == []
        assert engine.resolve_or_negotiate_rate().value.status == RateStatus.RATE_REQUIRED
        assert outcome.balances.regular == "100.0"

    @pytest.mark.parametrize("amount", ["", "abc", "0", "-5", "NaN", "0.0000000000000000001"])
    def test_invalid_amount_submits_nothing(self, scenario, amount):
        ledger, engine, token = scenario
        ledger.rates[token] = 2

        outcome = engine.execute(ConversionRequest(amount=amount))

        assert outcome.error_code == "invalid_amount"
        assert outcome.recoverable is True
        assert ledger.submissions == []

    def test_amount_above_balance_submits_nothing(self, scenario):
        ledger, engine, token = scenario
        ledger.rates[token] = 2
        engine.mint("5")
        submitted = len(ledger.submissions)

        outcome = engine.execute(ConversionRequest(amount="6"))

        assert outcome.error_code == "insufficient_balance"
        assert len(ledger.submissions) == submitted

    def test_reverted_exchange_reconciles(self, scenario):
        ledger, engine, token = scenario
        ledger.rates[token] = 2
        engine.mint("100")
        ledger.revert_next("exchange")

        outcome = engine.execute(ConversionRequest(amount="10"))

        assert outcome.error_code == "exchange_failed"
        assert outcome.recoverable is False
        assert outcome.balances.regular == "100.0"
        assert outcome.balances.universal == "0.0"

    def test_stalled_exchange_reconciles(self, scenario):
        ledger, engine, token = scenario
        ledger.rates[token] = 2
        engine.mint("100")
        ledger.stall_next("exchange")

        outcome = engine.execute(ConversionRequest(amount="10"))

        assert outcome.error_code == "exchange_failed"
        assert "not confirmed" in outcome.message
        assert outcome.balances.regular == "100.0"


@pytest.mark.integration
class TestTokenSwitching:
    """Rates are per token and balances follow the loaded token."""

    def test_switching_tokens_refreshes_regular_balance(self, scenario):
        ledger, engine, token = scenario
        engine.mint("100")
        other = ledger.deploy_token("RLP2")

        outcome = engine.load_token(other)

        assert outcome.balances.regular == "0.0"
        assert outcome.balances.regular_token_address == other
        assert engine.resolve_or_negotiate_rate().value.status == RateStatus.RATE_REQUIRED

    def test_concurrent_mints_are_serialized(self, scenario):
        ledger, engine, token = scenario
        outcomes = []

        def mint() -> None:
            outcomes.append(engine.mint("1"))

        threads = [threading.Thread(target=mint) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert all(outcome.success for outcome in outcomes)
        assert engine.balances.regular == "8.0"
        assert ledger.balances[(token, ACCOUNT)] == 8 * WEI
