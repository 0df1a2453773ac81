"""
MongoDB Storage - Async key-value wrapper over a MongoDB collection.

Each key is one document `{_id: key, value: str, updated_at}`. The BSON
document size limit (or an optional byte quota) is reported as
StorageQuotaExceeded so the history store can evict and retry.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection
from pymongo.errors import DocumentTooLarge, PyMongoError, WriteError

from deck_studio.constants import MONGODB_DATABASE, MONGODB_COLLECTION
from deck_studio.errors import StorageError, StorageQuotaExceeded
from .base import encoded_size

logger = logging.getLogger(__name__)

# Server-side "object too large" error code
BSON_OBJECT_TOO_LARGE = 10334


class MongoKeyValueStorage:
    """
    MongoDB-backed key-value storage.

    The client is created lazily on initialize() unless one is injected.
    """

    def __init__(
        self,
        connection_string: str = "mongodb://localhost:27017",
        database_name: str = MONGODB_DATABASE,
        collection_name: str = MONGODB_COLLECTION,
        quota_bytes: Optional[int] = None,
        client: Optional[Any] = None,
    ):
        self.connection_string = connection_string
        self.database_name = database_name
        self.collection_name = collection_name
        self.quota_bytes = quota_bytes
        self.client = client
        self._initialized = client is not None

    async def initialize(self):
        """Initialize MongoDB connection."""
        if self._initialized:
            logger.debug("MongoDB already initialized")
            return

        try:
            self.client = AsyncIOMotorClient(self.connection_string)
            self._initialized = True
            logger.info(f"MongoDB initialized (database: {self.database_name})")
        except PyMongoError as e:
            logger.error(f"MongoDB initialization failed: {e}")
            raise StorageError(f"MongoDB initialization failed: {e}") from e

    def get_collection(self) -> AsyncIOMotorCollection:
        if not self._initialized or self.client is None:
            raise RuntimeError("MongoDB not initialized. Call await storage.initialize() first.")
        return self.client[self.database_name][self.collection_name]

    async def get(self, key: str) -> Optional[str]:
        await self.initialize()
        try:
            doc = await self.get_collection().find_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to read {key!r}: {e}") from e
        return doc.get("value") if doc else None

    async def set(self, key: str, value: str) -> None:
        await self.initialize()
        if self.quota_bytes is not None and encoded_size(value) > self.quota_bytes:
            raise StorageQuotaExceeded(f"Value for {key!r} exceeds quota of {self.quota_bytes} bytes")

        try:
            await self.get_collection().replace_one(
                {"_id": key},
                {"_id": key, "value": value, "updated_at": datetime.now(timezone.utc)},
                upsert=True,
            )
        except DocumentTooLarge as e:
            raise StorageQuotaExceeded(f"Value for {key!r} is too large: {e}") from e
        except WriteError as e:
            if e.code == BSON_OBJECT_TOO_LARGE:
                raise StorageQuotaExceeded(f"Value for {key!r} is too large: {e}") from e
            raise StorageError(f"Failed to write {key!r}: {e}") from e
        except PyMongoError as e:
            raise StorageError(f"Failed to write {key!r}: {e}") from e

    async def remove(self, key: str) -> None:
        await self.initialize()
        try:
            result = await self.get_collection().delete_one({"_id": key})
        except PyMongoError as e:
            raise StorageError(f"Failed to remove {key!r}: {e}") from e
        if result.deleted_count:
            logger.debug(f"Deleted {key!r} from {self.collection_name}")

    async def close(self):
        """Close MongoDB connection."""
        if self.client:
            self.client.close()
            logger.info("MongoDB connection closed")
