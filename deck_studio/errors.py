"""
Error taxonomy for Deck Studio.

Every error carries an ErrorKind so the generation orchestrator can translate
it into a tagged OperationResult without inspecting messages.
"""

from deck_studio.utils.schemas import ErrorKind


class DeckStudioError(Exception):
    """Base class for all Deck Studio errors."""

    kind: ErrorKind = ErrorKind.GENERATION_FAILURE


class CredentialMissing(DeckStudioError):
    """No API credential configured. Raised before any network call."""

    kind = ErrorKind.CREDENTIAL_MISSING

    def __init__(self, message: str = "API key is missing"):
        super().__init__(message)


class GenerationFailure(DeckStudioError):
    """Outline job failed or returned an unusable payload."""

    kind = ErrorKind.GENERATION_FAILURE


class ImageGenerationFailure(DeckStudioError):
    """Image job failed or returned no image data."""

    kind = ErrorKind.IMAGE_GENERATION_FAILURE


class PersistenceFailure(DeckStudioError):
    kind = ErrorKind.PERSISTENCE_FAILURE


class StorageError(PersistenceFailure):
    """Key-value backend could not complete a read or write."""


class StorageQuotaExceeded(StorageError):
    """Write rejected because the backend is out of capacity."""
