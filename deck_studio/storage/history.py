"""
History Store

Persists HistoryItem snapshots as a single JSON array under one storage key,
most recently updated first. Quota failures evict the oldest item and retry
once; persistence problems are reported as a False return, never raised, so
editing continues with a stale or missing durable copy.
"""

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter

from deck_studio.constants import HISTORY_STORAGE_KEY
from deck_studio.errors import StorageError, StorageQuotaExceeded
from deck_studio.utils.schemas import HistoryItem
from .base import KeyValueStorage

logger = logging.getLogger(__name__)

_HISTORY_ADAPTER = TypeAdapter(List[HistoryItem])


class HistoryStore:
    """Ordered, capacity-bounded history of saved presentations."""

    def __init__(self, storage: KeyValueStorage, key: str = HISTORY_STORAGE_KEY):
        self.storage = storage
        self.key = key

    async def list(self) -> List[HistoryItem]:
        """
        Load the saved history.

        Returns:
            Items ordered most recent first; empty when nothing is stored or
            the payload cannot be parsed.
        """
        raw = await self.storage.get(self.key)
        if not raw:
            return []
        try:
            return _HISTORY_ADAPTER.validate_python(json.loads(raw))
        except ValueError as e:
            logger.error(f"[HISTORY] Failed to parse history: {e}")
            return []

    async def get(self, item_id: str) -> Optional[HistoryItem]:
        for item in await self.list():
            if item.id == item_id:
                return item
        return None

    async def upsert(self, item: HistoryItem) -> bool:
        """
        Insert or replace an item and move it to the front.

        Args:
            item: Snapshot to persist

        Returns:
            True if the write landed, False otherwise
        """
        try:
            history = [h for h in await self.list() if h.id != item.id]
            history.insert(0, item)

            try:
                await self._write(history)
                logger.debug(f"[HISTORY] Saved {item.id} ({len(history)} items)")
                return True
            except StorageQuotaExceeded:
                if len(history) <= 1:
                    logger.error("[HISTORY] Presentation too large to save locally")
                    return False

                evicted = history.pop()
                logger.warning(f"[HISTORY] Storage full, evicting oldest item {evicted.id}")
                try:
                    await self._write(history)
                    return True
                except StorageError as retry_error:
                    logger.error(f"[HISTORY] Still failed to save after cleanup: {retry_error}")
                    return False

        except StorageError as e:
            logger.error(f"[HISTORY] Failed to save history: {e}")
            return False

    async def delete(self, item_id: str) -> List[HistoryItem]:
        """
        Remove an item by id. Storage errors propagate to the caller.

        Returns:
            The resulting history
        """
        history = await self.list()
        remaining = [h for h in history if h.id != item_id]
        if len(remaining) != len(history):
            await self._write(remaining)
            logger.info(f"[HISTORY] Deleted {item_id}")
        return remaining

    async def _write(self, history: List[HistoryItem]) -> None:
        payload = json.dumps([h.to_record() for h in history], ensure_ascii=False)
        await self.storage.set(self.key, payload)
