"""
Points App - Points Token Exchange Workflow

Lets a wallet-holding user mint a custom points token, register or discover
its exchange rate against the universal points token, and convert holdings
through the exchange contract while keeping cached balances consistent with
on-chain state.
"""

__version__ = "0.1.0"
__author__ = "Points Team"
