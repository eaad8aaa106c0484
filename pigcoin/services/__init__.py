"""Services package."""

from pigcoin.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorageInterface,
    SnapshotDecodeError,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorageInterface",
    "SnapshotDecodeError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
