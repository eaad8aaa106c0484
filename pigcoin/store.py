"""
Finance Store

This module ties the ledgers, the storage backend and the event log
together. The store is the single owner of the transaction and goal
collections; rendering code receives it explicitly and never holds
state of its own.

Lifecycle:
1. Create the store with a storage backend
2. load() - read stored snapshots, or start empty
3. Mutate - in-memory state changes first, then the snapshot is saved
4. aclose() - flush both snapshots

DESIGN DECISION: Saves are best-effort. A failed save is logged and the
session continues on the in-memory state; nothing is rolled back and
nothing is retried. Loads that fail or find malformed JSON start from
empty collections.
"""

from contextlib import contextmanager
from decimal import Decimal
from pathlib import Path
from typing import Callable, Iterator, Optional, Union

from pigcoin.config import Settings, get_settings
from pigcoin.events import EventLogger
from pigcoin.ledger import GoalLedger, TransactionLedger
from pigcoin.models.events import LedgerEventBuilder
from pigcoin.models.finance import (
    Goal,
    GoalProgress,
    GoalType,
    Transaction,
    TransactionType,
)
from pigcoin.services.storage import (
    JsonFileStorage,
    KeyValueStorageInterface,
    StorageError,
    decode_goals,
    decode_transactions,
    encode_goals,
    encode_transactions,
)
from pigcoin.validation import AmountInput, InvalidInputError


class FinanceStore:
    """
    Owns the in-memory ledgers and keeps storage in step with them.

    Reads are synchronous snapshots. Mutations are coroutines because
    each one ends by saving the affected collection.
    """

    def __init__(
        self,
        storage: KeyValueStorageInterface,
        event_logger: Optional[EventLogger] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self._storage = storage
        self._events = event_logger or EventLogger()
        self._transactions_key = settings.transactions_key
        self._goals_key = settings.goals_key
        self._transaction_ledger = TransactionLedger()
        self._goal_ledger = GoalLedger()
        self._loaded = False
        self._last_save_error: Optional[str] = None

    @classmethod
    async def open(
        cls,
        storage: KeyValueStorageInterface,
        event_logger: Optional[EventLogger] = None,
        settings: Optional[Settings] = None,
    ) -> "FinanceStore":
        """Create a store and load its stored snapshots."""
        store = cls(storage, event_logger=event_logger, settings=settings)
        await store.load()
        return store

    async def __aenter__(self) -> "FinanceStore":
        if not self._loaded:
            await self.load()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # =========================================================================
    # Snapshot accessors
    # =========================================================================

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transaction_ledger.transactions

    @property
    def goals(self) -> tuple[Goal, ...]:
        return self._goal_ledger.goals

    @property
    def events(self) -> EventLogger:
        return self._events

    @property
    def last_save_error(self) -> Optional[str]:
        """Message of the most recent failed save, cleared by the next success."""
        return self._last_save_error

    def total_balance(self) -> Decimal:
        return self._transaction_ledger.total_balance()

    def goal_totals(self) -> tuple[Decimal, Decimal]:
        return self._goal_ledger.totals()

    def get_goal(self, goal_id: str) -> Optional[Goal]:
        return self._goal_ledger.get(goal_id)

    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        return self._transaction_ledger.get(transaction_id)

    # =========================================================================
    # Persistence
    # =========================================================================

    async def _load_collection(self, key: str, decode: Callable[[Optional[str]], list]) -> list:
        try:
            blob = await self._storage.load(key)
            items = decode(blob)
        except (StorageError, OSError) as e:
            self._events.log(LedgerEventBuilder.load_failed(key, str(e)))
            return []
        self._events.log(LedgerEventBuilder.snapshot_loaded(key, len(items)))
        return items

    async def load(self) -> None:
        """Replace in-memory state with the stored snapshots (or empty ones)."""
        transactions = await self._load_collection(self._transactions_key, decode_transactions)
        goals = await self._load_collection(self._goals_key, decode_goals)
        self._transaction_ledger = TransactionLedger(transactions)
        self._goal_ledger = GoalLedger(goals)
        self._loaded = True

    async def _save(self, key: str, encode: Callable[[], str], count: int) -> bool:
        try:
            await self._storage.save(key, encode())
        except (StorageError, OSError, ValueError) as e:
            # In-memory state stays authoritative for this session
            self._last_save_error = str(e)
            self._events.log(LedgerEventBuilder.save_failed(key, str(e)))
            return False
        self._last_save_error = None
        self._events.log(LedgerEventBuilder.snapshot_saved(key, count))
        return True

    async def save_transactions(self) -> bool:
        transactions = self.transactions
        return await self._save(
            self._transactions_key,
            lambda: encode_transactions(transactions),
            len(transactions),
        )

    async def save_goals(self) -> bool:
        goals = self.goals
        return await self._save(
            self._goals_key,
            lambda: encode_goals(goals),
            len(goals),
        )

    async def flush(self) -> bool:
        """Save both collections. Returns True only if both saves succeeded."""
        transactions_ok = await self.save_transactions()
        goals_ok = await self.save_goals()
        return transactions_ok and goals_ok

    async def aclose(self) -> None:
        """Flush on exit."""
        if self._loaded:
            await self.flush()

    @contextmanager
    def _rejections(self, operation: str) -> Iterator[None]:
        try:
            yield
        except InvalidInputError as e:
            self._events.log(
                LedgerEventBuilder.input_rejected(operation, e.field, str(e))
            )
            raise

    def _log_progress(self, progress: GoalProgress) -> None:
        if progress.completed:
            self._events.log(
                LedgerEventBuilder.goal_completed(progress.goal.id, progress.goal.name)
            )

    # =========================================================================
    # Transactions
    # =========================================================================

    async def add_transaction(
        self,
        name: str,
        value: AmountInput,
        transaction_type: Union[str, TransactionType],
    ) -> Transaction:
        """
        Add a transaction and save.

        Raises:
            InvalidInputError: If the input is rejected (nothing changes)
        """
        with self._rejections("add_transaction"):
            transaction = self._transaction_ledger.add_transaction(
                name, value, transaction_type
            )
        self._events.log(
            LedgerEventBuilder.transaction_added(
                transaction_id=transaction.id,
                name=transaction.name,
                value=str(transaction.value),
                transaction_type=transaction.type.value,
            )
        )
        await self.save_transactions()
        return transaction

    async def remove_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction and save. Unknown ids are a no-op."""
        if not self._transaction_ledger.remove_transaction(transaction_id):
            return False
        self._events.log(LedgerEventBuilder.transaction_removed(transaction_id))
        await self.save_transactions()
        return True

    # =========================================================================
    # Goals
    # =========================================================================

    async def create_goal(
        self,
        name: str,
        total_value: AmountInput,
        goal_type: Union[str, GoalType] = GoalType.GRID,
        installment_value: Optional[AmountInput] = None,
    ) -> Goal:
        """
        Create a goal with its installment schedule and save.

        Raises:
            InvalidInputError: If the input is rejected (nothing changes)
        """
        with self._rejections("create_goal"):
            goal = self._goal_ledger.create_goal(
                name, total_value, goal_type, installment_value
            )
        self._events.log(
            LedgerEventBuilder.goal_created(
                goal_id=goal.id,
                name=goal.name,
                goal_type=goal.type.value,
                total_value=str(goal.total_value),
                installment_count=len(goal.installments),
            )
        )
        await self.save_goals()
        return goal

    async def toggle_installment(
        self,
        goal_id: str,
        installment_number: int,
        value: Optional[AmountInput] = None,
    ) -> Optional[GoalProgress]:
        """Flip an installment's paid flag and save. None if nothing matched."""
        with self._rejections("toggle_installment"):
            progress = self._goal_ledger.toggle_installment(
                goal_id, installment_number, value
            )
        if progress is None:
            return None

        installment = progress.goal.find_installment(installment_number)
        self._events.log(
            LedgerEventBuilder.installment_toggled(
                goal_id=goal_id,
                number=installment_number,
                paid=installment.paid,
                current_value=str(progress.goal.current_value),
            )
        )
        self._log_progress(progress)
        await self.save_goals()
        return progress

    async def add_progress(
        self,
        goal_id: str,
        amount: AmountInput,
    ) -> Optional[GoalProgress]:
        """Deposit into a goal and save. None if the goal does not exist."""
        with self._rejections("add_progress"):
            before = self._goal_ledger.get(goal_id)
            progress = self._goal_ledger.add_progress(goal_id, amount)
        if progress is None:
            return None

        applied = progress.goal.current_value - before.current_value
        self._events.log(
            LedgerEventBuilder.progress_added(
                goal_id=goal_id,
                requested=str(amount),
                applied=str(applied),
                current_value=str(progress.goal.current_value),
            )
        )
        self._log_progress(progress)
        await self.save_goals()
        return progress

    async def update_goal_amount(
        self,
        goal_id: str,
        delta: AmountInput,
    ) -> Optional[GoalProgress]:
        """
        Adjust a savings jar and save. None if the goal does not exist.

        Raises:
            GoalKindError: If the goal is installment driven
        """
        with self._rejections("update_goal_amount"):
            progress = self._goal_ledger.update_goal_amount(goal_id, delta)
        if progress is None:
            return None

        self._events.log(
            LedgerEventBuilder.goal_amount_updated(
                goal_id=goal_id,
                delta=str(delta),
                current_value=str(progress.goal.current_value),
            )
        )
        self._log_progress(progress)
        await self.save_goals()
        return progress

    async def delete_goal(self, goal_id: str) -> bool:
        """Delete a goal and save. Unknown ids are a no-op."""
        if not self._goal_ledger.delete_goal(goal_id):
            return False
        self._events.log(LedgerEventBuilder.goal_deleted(goal_id))
        await self.save_goals()
        return True


def create_store(
    data_dir: Optional[Path] = None,
    settings: Optional[Settings] = None,
) -> FinanceStore:
    """
    Factory for the application store backed by JSON files.

    The returned store is not loaded yet; await `load()` (or use it as an
    async context manager) before reading from it.

    Args:
        data_dir: Where snapshots live. Defaults to PIGCOIN_DATA_DIR.
        settings: Settings override, mainly for tests
    """
    settings = settings or get_settings()
    storage = JsonFileStorage(data_dir or settings.data_dir)
    return FinanceStore(storage, event_logger=EventLogger(), settings=settings)
