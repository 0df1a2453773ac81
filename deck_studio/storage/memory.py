"""
In-memory key-value storage.

Process-local, optionally capacity bounded. Used for ephemeral sessions and tests.
"""

import logging
from typing import Dict, Optional

from deck_studio.errors import StorageQuotaExceeded
from .base import encoded_size

logger = logging.getLogger(__name__)


class InMemoryStorage:
    """Dict-backed storage with an optional byte quota over all stored values."""

    def __init__(self, quota_bytes: Optional[int] = None, initial: Optional[Dict[str, str]] = None):
        self.quota_bytes = quota_bytes
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(encoded_size(v) for k, v in self._data.items() if k != key)
            needed = used + encoded_size(value)
            if needed > self.quota_bytes:
                raise StorageQuotaExceeded(
                    f"Writing {key!r} needs {needed} bytes, quota is {self.quota_bytes}"
                )
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    async def close(self) -> None:
        logger.debug("In-memory storage closed")
