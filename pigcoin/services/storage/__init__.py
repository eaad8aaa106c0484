"""
Storage Services Package

Provides the abstract key-value interface, concrete backends and the
JSON snapshot codec.
"""

from pigcoin.services.storage.interface import (
    KeyValueStorageInterface,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from pigcoin.services.storage.codec import (
    SnapshotDecodeError,
    decode_goals,
    decode_transactions,
    encode_goals,
    encode_transactions,
)
from pigcoin.services.storage.json_file import JsonFileStorage, safe_filename
from pigcoin.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorageInterface",
    # Exceptions
    "SnapshotDecodeError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Codec
    "decode_goals",
    "decode_transactions",
    "encode_goals",
    "encode_transactions",
    # Backends
    "InMemoryStorage",
    "JsonFileStorage",
    "safe_filename",
]
