"""
Ledger Event Models for PigCoin

Every state change in the ledger is described by a LedgerEvent and
written to the structured log. Events are NOT persisted: the stored
snapshots are the only history the application keeps.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class LedgerEventType(str, Enum):
    """Types of events the ledger emits."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_REMOVED = "transaction_removed"
    
    # Goals
    GOAL_CREATED = "goal_created"
    GOAL_DELETED = "goal_deleted"
    INSTALLMENT_TOGGLED = "installment_toggled"
    PROGRESS_ADDED = "progress_added"
    GOAL_AMOUNT_UPDATED = "goal_amount_updated"
    GOAL_COMPLETED = "goal_completed"
    
    # Boundary
    INPUT_REJECTED = "input_rejected"
    
    # Persistence
    SNAPSHOT_LOADED = "snapshot_loaded"
    SNAPSHOT_SAVED = "snapshot_saved"
    LOAD_FAILED = "load_failed"
    SAVE_FAILED = "save_failed"


class LedgerSeverity(str, Enum):
    """Severity level for ledger events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """A single ledger event."""
    
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )
    event_type: LedgerEventType
    severity: LedgerSeverity = LedgerSeverity.INFO
    
    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'goal', 'transaction', 'snapshot')"
    )
    entity_id: Optional[str] = None
    
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    
    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class LedgerEventBuilder:
    """
    Helper class to build ledger events with common patterns.
    
    Usage:
        event = LedgerEventBuilder.goal_created(goal)
        event = LedgerEventBuilder.save_failed(key, error)
    
    Amounts go into details as strings so Decimal precision survives
    JSON rendering.
    """
    
    @staticmethod
    def transaction_added(
        transaction_id: str,
        name: str,
        value: str,
        transaction_type: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction added: {name}",
            details={
                "value": value,
                "type": transaction_type,
            },
        )
    
    @staticmethod
    def transaction_removed(transaction_id: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.TRANSACTION_REMOVED,
            entity_type="transaction",
            entity_id=transaction_id,
            description="Transaction removed",
        )
    
    @staticmethod
    def goal_created(
        goal_id: str,
        name: str,
        goal_type: str,
        total_value: str,
        installment_count: int,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.GOAL_CREATED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Goal created: {name}",
            details={
                "type": goal_type,
                "total_value": total_value,
                "installments": installment_count,
            },
        )
    
    @staticmethod
    def goal_deleted(goal_id: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.GOAL_DELETED,
            entity_type="goal",
            entity_id=goal_id,
            description="Goal deleted",
        )
    
    @staticmethod
    def installment_toggled(
        goal_id: str,
        number: int,
        paid: bool,
        current_value: str,
    ) -> LedgerEvent:
        state = "paid" if paid else "unpaid"
        return LedgerEvent(
            event_type=LedgerEventType.INSTALLMENT_TOGGLED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Installment {number} marked {state}",
            details={
                "number": number,
                "paid": paid,
                "current_value": current_value,
            },
        )
    
    @staticmethod
    def progress_added(
        goal_id: str,
        requested: str,
        applied: str,
        current_value: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PROGRESS_ADDED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Progress of {applied} added",
            details={
                "requested": requested,
                "applied": applied,
                "current_value": current_value,
            },
        )
    
    @staticmethod
    def goal_amount_updated(
        goal_id: str,
        delta: str,
        current_value: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.GOAL_AMOUNT_UPDATED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Goal amount adjusted by {delta}",
            details={
                "delta": delta,
                "current_value": current_value,
            },
        )
    
    @staticmethod
    def goal_completed(goal_id: str, name: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.GOAL_COMPLETED,
            entity_type="goal",
            entity_id=goal_id,
            description=f"Goal reached its target: {name}",
        )
    
    @staticmethod
    def input_rejected(
        operation: str,
        field: str,
        error_message: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.INPUT_REJECTED,
            severity=LedgerSeverity.WARNING,
            description=f"Rejected input for {operation}",
            details={
                "operation": operation,
                "field": field,
            },
            error_message=error_message,
        )
    
    @staticmethod
    def snapshot_loaded(key: str, count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_LOADED,
            severity=LedgerSeverity.DEBUG,
            entity_type="snapshot",
            entity_id=key,
            description=f"Loaded {count} records",
            details={"count": count},
        )
    
    @staticmethod
    def snapshot_saved(key: str, count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SNAPSHOT_SAVED,
            severity=LedgerSeverity.DEBUG,
            entity_type="snapshot",
            entity_id=key,
            description=f"Saved {count} records",
            details={"count": count},
        )
    
    @staticmethod
    def load_failed(key: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LOAD_FAILED,
            severity=LedgerSeverity.WARNING,
            entity_type="snapshot",
            entity_id=key,
            description="Stored snapshot unreadable, starting empty",
            error_message=error_message,
        )
    
    @staticmethod
    def save_failed(key: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.SAVE_FAILED,
            severity=LedgerSeverity.ERROR,
            entity_type="snapshot",
            entity_id=key,
            description="Snapshot could not be saved",
            error_message=error_message,
        )
