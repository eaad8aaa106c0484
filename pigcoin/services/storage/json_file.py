"""
JSON File Storage Implementation

Each key is stored as one UTF-8 file under the data directory.
Writes go to a temporary file in the same directory first and are then
moved into place, so a crash mid-write leaves the previous snapshot intact.
"""

import asyncio
import os
import tempfile
from pathlib import Path
from typing import Optional

from pigcoin.config import get_settings
from pigcoin.services.storage.interface import (
    KeyValueStorageInterface,
    StorageReadError,
    StorageWriteError,
)


def safe_filename(key: str, default: str = "data") -> str:
    """
    Turn a storage key into a file name.
    
    Example:
        >>> safe_filename("@pigcoin_goals")
        'pigcoin_goals'
    """
    cleaned = "".join(c for c in key if c.isalnum() or c in {"_", "-", " "})
    cleaned = cleaned.strip().replace(" ", "_")
    while "__" in cleaned:
        cleaned = cleaned.replace("__", "_")
    cleaned = cleaned.strip("_")
    return cleaned or default


class JsonFileStorage(KeyValueStorageInterface):
    """
    File-per-key storage rooted at `data_dir`.
    
    Blocking file I/O runs in a worker thread so the event loop stays free.
    """
    
    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir) if data_dir else get_settings().data_dir
    
    @property
    def data_dir(self) -> Path:
        return self._data_dir
    
    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{safe_filename(key)}.json"
    
    def _read_file(self, path: Path) -> Optional[str]:
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageReadError(f"Failed to read {path}: {e}")
    
    def _write_file(self, path: Path, blob: str) -> None:
        try:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._data_dir, prefix=f".{path.stem}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(blob)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageWriteError(f"Failed to write {path}: {e}")
    
    def _remove_file(self, path: Path) -> bool:
        try:
            path.unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise StorageWriteError(f"Failed to delete {path}: {e}")
    
    async def load(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read_file, self.path_for(key))
    
    async def save(self, key: str, blob: str) -> bool:
        await asyncio.to_thread(self._write_file, self.path_for(key), blob)
        return True
    
    async def delete(self, key: str) -> bool:
        return await asyncio.to_thread(self._remove_file, self.path_for(key))
