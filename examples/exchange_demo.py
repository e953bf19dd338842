#!/usr/bin/env python3
"""
Exchange Demo - Points Exchange Workflow

Runs the full workflow against the in-memory ledger:
- Connect a wallet and load a freshly deployed regular points token
- Mint 100 RLP
- Discover that no exchange rate is set and commit one
- Exchange 10 RLP into UPT and show the reconciled balances

Run: python examples/exchange_demo.py
"""

from points_app.chain.memory import InMemoryLedger
from points_app.engine import PointsExchangeEngine
from points_app.state.models import ConversionRequest, RateStatus, WorkflowOutcome

DEMO_ACCOUNT = "0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1"


def show(outcome: WorkflowOutcome) -> None:
    """Print an outcome the way a UI would."""
    marker = "✅" if outcome.success else "❌"
    print(f"{marker} {outcome.operation}: {outcome.message}")
    balances = outcome.balances
    print(f"   UPT balance: {balances.universal}")
    print(f"   RLP balance: {balances.regular if balances.regular is not None else '-'}")


def main() -> None:
    ledger = InMemoryLedger()
    token_address = ledger.deploy_token("RLP")

    engine = PointsExchangeEngine(config={"logging": {"level": "WARNING"}})
    show(engine.connect(ledger.connect(DEMO_ACCOUNT)))
    show(engine.load_token(token_address))
    show(engine.mint("100"))

    # Exchanging before a rate exists asks for one instead of prompting.
    show(engine.execute(ConversionRequest(amount="10")))

    resolution = engine.resolve_or_negotiate_rate()
    show(resolution)
    if resolution.value.status == RateStatus.RATE_REQUIRED:
        show(engine.negotiate_rate("2"))

    show(engine.execute(ConversionRequest(amount="10")))

    # Validation failures never reach the chain.
    show(engine.execute(ConversionRequest(amount="-5")))
    print(f"\nTransactions submitted: {len(ledger.submissions)}")

    engine.disconnect()


if __name__ == "__main__":
    main()
