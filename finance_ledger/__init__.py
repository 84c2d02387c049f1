"""
Finance Ledger - Source Package

A personal finance ledger that tracks cash and bank balances,
income and expense transactions, and money lent or borrowed.

DESIGN PRINCIPLES:
1. Balances are always derived from recorded effects
2. Fail early, fail visibly
3. No partial mutations
4. Every command is persisted before it is visible
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Finance Ledger Team"
