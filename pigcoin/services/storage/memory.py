"""In-memory storage backend, used for tests and throwaway sessions."""

from typing import Optional

from pigcoin.services.storage.interface import KeyValueStorageInterface


class InMemoryStorage(KeyValueStorageInterface):
    """Keeps blobs in a dict for the lifetime of the object."""
    
    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})
    
    async def load(self, key: str) -> Optional[str]:
        return self._data.get(key)
    
    async def save(self, key: str, blob: str) -> bool:
        self._data[key] = blob
        return True
    
    async def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None
    
    def keys(self) -> list[str]:
        return sorted(self._data)
