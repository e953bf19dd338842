"""
Session state module.

Holds the connected account, loaded contract handles and cached balances
for one wallet session, behind a single serialization lock.
"""
