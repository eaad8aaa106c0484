"""
Core Data Models for PigCoin

These models define the strict schemas for everything the ledger holds.
They are designed to:
1. Enforce type safety and value ranges at runtime
2. Be immutable, so every mutation produces a new snapshot
3. Serialize to the same camelCase JSON the mobile app always stored

DESIGN DECISION: Money is Decimal end to end. Installment schedules are
partitions of a target amount, and binary floats would make the
"sum equals target" law approximate instead of exact.
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Opaque unique identifier for a new entity."""
    return uuid4().hex


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps in old snapshots were written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction relative to the balance."""
    EXPENSE = "expense"
    INCOME = "income"


class GoalType(str, Enum):
    """
    How a goal's installment schedule is generated.
    
    GRID and FIXED goals are installment driven: their current value is
    always the sum of paid installments. JAR goals have no schedule and
    are moved up and down freely.
    """
    GRID = "grid"    # Installment k costs k units (triangular numbers)
    FIXED = "fixed"  # Equal installments plus a remainder slot
    JAR = "jar"      # Plain savings jar, no schedule
    
    @property
    def has_schedule(self) -> bool:
        return self is not GoalType.JAR


class LedgerModel(BaseModel):
    """Shared configuration for persisted entities."""
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(LedgerModel):
    """
    A single income or expense entry.
    
    Transactions are never edited in place. They are created and,
    eventually, removed.
    """
    
    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque unique transaction ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text label"
    )
    value: Decimal = Field(
        ...,
        gt=0,
        description="Positive magnitude of the transaction"
    )
    type: TransactionType = Field(
        ...,
        description="Expense or income"
    )
    date: datetime = Field(
        default_factory=utc_now,
        description="When the transaction was recorded"
    )
    
    @field_validator("date")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        return _as_utc(v)
    
    @property
    def signed_value(self) -> Decimal:
        """Contribution of this transaction to the balance."""
        if self.type == TransactionType.INCOME:
            return self.value
        return -self.value


# =============================================================================
# GOALS
# =============================================================================

class Installment(LedgerModel):
    """One discrete slot of a goal's payment schedule."""
    
    number: int = Field(
        ...,
        ge=1,
        description="1-based position within the parent goal"
    )
    value: Decimal = Field(
        ...,
        ge=0,
        description="Amount this slot represents"
    )
    paid: bool = Field(
        default=False,
        description="Whether the slot has been paid"
    )


class Goal(LedgerModel):
    """
    A savings target, optionally broken into installments.
    
    INVARIANT (GRID/FIXED): current_value == sum of paid installment values.
    The ledger recomputes current_value after every installment change,
    it is never adjusted incrementally.
    """
    
    id: str = Field(
        default_factory=new_id,
        min_length=1,
        description="Opaque unique goal ID"
    )
    name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Free-text label"
    )
    total_value: Decimal = Field(
        ...,
        gt=0,
        description="Target amount"
    )
    current_value: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Accumulated amount"
    )
    type: GoalType = Field(
        default=GoalType.GRID,
        description="Schedule kind"
    )
    installments: tuple[Installment, ...] = Field(
        default=(),
        description="Installments in creation order"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the goal was created"
    )
    
    @field_validator("created_at")
    @classmethod
    def ensure_timezone(cls, v: datetime) -> datetime:
        return _as_utc(v)
    
    @property
    def paid_total(self) -> Decimal:
        """Sum of the values of all paid installments."""
        return sum((i.value for i in self.installments if i.paid), Decimal("0"))
    
    @property
    def paid_count(self) -> int:
        return sum(1 for i in self.installments if i.paid)
    
    @property
    def remaining(self) -> Decimal:
        """Amount still missing to reach the target (never negative)."""
        return max(self.total_value - self.current_value, Decimal("0"))
    
    @property
    def is_completed(self) -> bool:
        return self.current_value >= self.total_value
    
    @property
    def progress_percent(self) -> float:
        """Completion percentage, capped at 100."""
        return min(float(self.current_value / self.total_value * 100), 100.0)
    
    @property
    def next_installment_number(self) -> int:
        """Number for an appended installment, unique within the goal."""
        return max((i.number for i in self.installments), default=0) + 1
    
    def find_installment(self, number: int) -> Optional[Installment]:
        for installment in self.installments:
            if installment.number == number:
                return installment
        return None


class GoalProgress(BaseModel):
    """
    Result of an installment mutation.
    
    `completed` is True only when this very mutation moved the goal
    from below its target to at-or-above it.
    """
    model_config = ConfigDict(frozen=True)
    
    goal: Goal
    completed: bool = False
