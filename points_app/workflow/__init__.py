"""
Exchange workflow module.

Rate resolution and negotiation, exchange execution and balance
reconciliation over a SessionState.
"""
