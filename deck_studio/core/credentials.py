"""
Credential and preference stores.

Both keep their values in the shared key-value storage.
"""

import logging

from deck_studio.constants import API_KEY_STORAGE_KEY, LANGUAGE_STORAGE_KEY
from deck_studio.storage.base import KeyValueStorage
from deck_studio.utils.schemas import Language, PRIMARY_LANGUAGE

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Holds the opaque AI credential.

    An empty or whitespace value counts as missing. `fallback` (usually
    GEMINI_API_KEY from the environment) is used while nothing is stored.
    """

    def __init__(self, storage: KeyValueStorage, key: str = API_KEY_STORAGE_KEY, fallback: str = ""):
        self.storage = storage
        self.key = key
        self.fallback = (fallback or "").strip()

    async def get_credential(self) -> str:
        stored = await self.storage.get(self.key)
        return (stored or "").strip() or self.fallback

    async def set_credential(self, value: str) -> None:
        await self.storage.set(self.key, (value or "").strip())
        logger.info("API credential updated")

    async def has_credential(self) -> bool:
        return bool(await self.get_credential())


class PreferenceStore:
    """Persists the preferred output language."""

    def __init__(self, storage: KeyValueStorage, key: str = LANGUAGE_STORAGE_KEY):
        self.storage = storage
        self.key = key

    async def get_language(self) -> Language:
        stored = await self.storage.get(self.key)
        try:
            return Language(stored) if stored else PRIMARY_LANGUAGE
        except ValueError:
            logger.warning(f"Ignoring unknown language preference: {stored!r}")
            return PRIMARY_LANGUAGE

    async def set_language(self, language: Language) -> None:
        await self.storage.set(self.key, Language(language).value)
