"""
Snapshot Codec

Serializes the transaction and goal collections to the JSON arrays kept
in storage, and back.

Format:
- One JSON array of entity objects per collection
- camelCase field names (totalValue, currentValue, createdAt, ...)
- Amounts as decimal strings, timestamps as ISO-8601

Numeric amounts and "Z"-suffixed timestamps written by older versions
of the app load fine.
"""

from typing import Iterable, Optional

from pydantic import TypeAdapter, ValidationError

from pigcoin.models.finance import Goal, Transaction
from pigcoin.services.storage.interface import StorageReadError

_transactions_adapter = TypeAdapter(list[Transaction])
_goals_adapter = TypeAdapter(list[Goal])


class SnapshotDecodeError(StorageReadError):
    """A stored blob is not a valid snapshot."""
    pass


def encode_transactions(transactions: Iterable[Transaction]) -> str:
    return _transactions_adapter.dump_json(list(transactions), by_alias=True).decode("utf-8")


def encode_goals(goals: Iterable[Goal]) -> str:
    return _goals_adapter.dump_json(list(goals), by_alias=True).decode("utf-8")


def decode_transactions(blob: Optional[str]) -> list[Transaction]:
    """
    Parse a stored transaction array.
    
    Returns an empty list when nothing is stored.
    
    Raises:
        SnapshotDecodeError: If the blob is malformed
    """
    if not blob:
        return []
    try:
        return _transactions_adapter.validate_json(blob)
    except ValidationError as e:
        raise SnapshotDecodeError(f"Invalid transaction snapshot: {e.error_count()} errors")


def decode_goals(blob: Optional[str]) -> list[Goal]:
    """
    Parse a stored goal array.
    
    Raises:
        SnapshotDecodeError: If the blob is malformed
    """
    if not blob:
        return []
    try:
        return _goals_adapter.validate_json(blob)
    except ValidationError as e:
        raise SnapshotDecodeError(f"Invalid goal snapshot: {e.error_count()} errors")
