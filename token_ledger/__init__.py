"""
Token Ledger

A fungible-token ledger with integer balances, delegated spending allowances,
owner-gated supply control, and a hash-chained event log for indexers.
"""

__version__ = "1.0.0"
