"""Core ledger package: schedules, goals and transactions."""

from pigcoin.ledger.goals import GoalKindError, GoalLedger, crossed_target
from pigcoin.ledger.schedule import (
    MAX_INSTALLMENTS,
    REMAINDER_TOLERANCE,
    ScheduleTooLargeError,
    build_schedule,
    fixed_schedule,
    grid_schedule,
)
from pigcoin.ledger.transactions import TransactionLedger

__all__ = [
    "GoalKindError",
    "GoalLedger",
    "crossed_target",
    "MAX_INSTALLMENTS",
    "REMAINDER_TOLERANCE",
    "ScheduleTooLargeError",
    "build_schedule",
    "fixed_schedule",
    "grid_schedule",
    "TransactionLedger",
]
