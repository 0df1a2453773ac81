"""
Storage services for Deck Studio.

Key-value backends (memory, file, MongoDB) and the history store built on them.
"""

from typing import Optional

from deck_studio.config import Settings, get_settings
from .base import KeyValueStorage
from .memory import InMemoryStorage
from .file import FileStorage
from .mongodb import MongoKeyValueStorage
from .history import HistoryStore


def get_storage(settings: Optional[Settings] = None) -> KeyValueStorage:
    """Create the key-value backend selected by STORAGE_BACKEND."""
    settings = settings or get_settings()
    if settings.storage_backend == "memory":
        return InMemoryStorage(quota_bytes=settings.storage_quota_bytes)
    if settings.storage_backend == "mongodb":
        return MongoKeyValueStorage(
            connection_string=settings.mongodb_uri,
            database_name=settings.mongodb_database,
            collection_name=settings.mongodb_collection,
        )
    return FileStorage(settings.storage_path, quota_bytes=settings.storage_quota_bytes)


__all__ = [
    'KeyValueStorage',
    'InMemoryStorage',
    'FileStorage',
    'MongoKeyValueStorage',
    'HistoryStore',
    'get_storage',
]
