"""
Token Ledger

A single-asset fungible token ledger with allowance-based delegated transfers,
a deterministic 5% burn on every transfer, exact fixed-point integer amounts
and a hash-chained audit trail.
"""

__version__ = "1.0.0"
