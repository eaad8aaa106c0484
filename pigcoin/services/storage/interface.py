"""
Abstract Storage Interface

DESIGN DECISION: Persistence is a plain key-value contract.
The ledger only ever needs to:
1. Load the serialized blob stored under a key (or learn there is none)
2. Replace the blob stored under a key

Keeping the interface this small means:
1. A JSON file per key works on any machine
2. In-memory storage is trivial for testing
3. A device key-value store can be dropped in later

Serialization is NOT the storage layer's concern; see codec.py.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorageInterface(ABC):
    """
    Abstract interface for durable key-value storage.
    
    Any backend (files, sqlite, a device store) must implement these methods.
    """
    
    @abstractmethod
    async def load(self, key: str) -> Optional[str]:
        """
        Read the blob stored under a key.
        
        Args:
            key: Logical storage key
            
        Returns:
            The stored UTF-8 text, or None if nothing is stored
            
        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass
    
    @abstractmethod
    async def save(self, key: str, blob: str) -> bool:
        """
        Replace the blob stored under a key.
        
        Args:
            key: Logical storage key
            blob: UTF-8 text to store
            
        Returns:
            True if saved successfully
            
        Raises:
            StorageWriteError: If the write fails
        """
        pass
    
    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Remove whatever is stored under a key.
        
        Returns:
            True if something was removed
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read or decoded."""
    pass


class StorageWriteError(StorageError):
    """Data could not be written to storage."""
    pass
