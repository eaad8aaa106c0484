"""
PigCoin - Source Package

Local-first personal finance ledger: income/expense transactions,
a running balance, and savings goals broken into installments.

DESIGN PRINCIPLES:
1. Derived values are recomputed after every mutation
2. Invalid input is rejected before state is touched
3. In-memory state is the source of truth for a session
4. Storage is swappable and best-effort
"""

__version__ = "1.0.0"
__author__ = "PigCoin Team"
