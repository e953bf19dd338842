"""
Chain access module.

Abstract contract handles the workflow depends on, with a web3.py
implementation for real nodes and an in-process ledger for tests and demos.
"""
