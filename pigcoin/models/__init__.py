"""
Data Models Package

This package contains all Pydantic models used by PigCoin.
Everything the ledger stores or emits conforms to these schemas.
"""

from pigcoin.models.finance import (
    Goal,
    GoalProgress,
    GoalType,
    Installment,
    Transaction,
    TransactionType,
    new_id,
    utc_now,
)
from pigcoin.models.events import (
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
    LedgerSeverity,
)

__all__ = [
    # Finance models
    "Goal",
    "GoalProgress",
    "GoalType",
    "Installment",
    "Transaction",
    "TransactionType",
    "new_id",
    "utc_now",
    # Event models
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
    "LedgerSeverity",
]
