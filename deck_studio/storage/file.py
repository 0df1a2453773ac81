"""
File Storage - one file per key under a local directory.

Capacity bounded like browser local storage. Blocking file I/O runs in a
worker thread so callers stay on the event loop.
"""

import asyncio
import logging
import re
from pathlib import Path
from typing import Optional

from deck_studio.errors import StorageError, StorageQuotaExceeded
from .base import encoded_size

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class FileStorage:
    """
    Directory-backed key-value storage.

    Each key is stored as `<root>/<key>.json`. Writes go through a temporary
    file and an atomic rename so a failed write never truncates the old value.
    """

    def __init__(self, root: str | Path, quota_bytes: Optional[int] = None):
        self.root = Path(root)
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.root / f"{key}.json"

    def _used_bytes(self, exclude: Path) -> int:
        if not self.root.exists():
            return 0
        return sum(p.stat().st_size for p in self.root.glob("*.json") if p != exclude)

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e

    def _write(self, key: str, value: str) -> None:
        path = self._path(key)
        if self.quota_bytes is not None:
            needed = self._used_bytes(exclude=path) + encoded_size(value)
            if needed > self.quota_bytes:
                raise StorageQuotaExceeded(
                    f"Writing {key!r} needs {needed} bytes, quota is {self.quota_bytes}"
                )
        tmp_path = path.with_suffix(".tmp")
        try:
            self.root.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(value, encoding="utf-8")
            tmp_path.replace(path)
        except OSError as e:
            tmp_path.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {path}: {e}") from e

    def _remove(self, key: str) -> None:
        path = self._path(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to remove {path}: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)

    async def close(self) -> None:
        logger.debug(f"File storage at {self.root} closed")
