"""
Transaction Ledger

Owns the transaction collection. The balance is a signed sum that is
recomputed on demand, so it can never drift from the stored entries.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from pigcoin.models.finance import Transaction, TransactionType, utc_now
from pigcoin.validation.validator import AmountInput, validate_transaction_input


class TransactionLedger:
    """In-memory transaction collection, newest first."""

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self._transactions: tuple[Transaction, ...] = tuple(transactions)

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._transactions

    def __len__(self) -> int:
        return len(self._transactions)

    def get(self, transaction_id: str) -> Optional[Transaction]:
        for transaction in self._transactions:
            if transaction.id == transaction_id:
                return transaction
        return None

    def add_transaction(
        self,
        name: str,
        value: AmountInput,
        transaction_type: Union[str, TransactionType],
        now: Optional[datetime] = None,
    ) -> Transaction:
        """
        Record a new transaction.

        `value` may be text using a comma decimal separator.

        Raises:
            InvalidInputError: If the name is empty, the value does not
                parse or is not positive, or the type is unknown
        """
        clean_name, amount, kind = validate_transaction_input(
            name, value, transaction_type
        )
        transaction = Transaction(
            name=clean_name,
            value=amount,
            type=kind,
            date=now or utc_now(),
        )
        self._transactions = (transaction,) + self._transactions
        return transaction

    def remove_transaction(self, transaction_id: str) -> bool:
        """Remove a transaction. Returns False if it did not exist."""
        remaining = tuple(
            t for t in self._transactions if t.id != transaction_id
        )
        removed = len(remaining) != len(self._transactions)
        self._transactions = remaining
        return removed

    def total_balance(self) -> Decimal:
        """Income minus expenses over the current set."""
        return sum(
            (t.signed_value for t in self._transactions), Decimal("0")
        )
