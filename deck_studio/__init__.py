"""
Deck Studio Package

Turns a topic into an editable slide deck: outline and image generation,
document model, debounced autosave and a capacity-bounded history store.
"""

# Schemas
from deck_studio.utils.schemas import (
    SlideLayout,
    GenerationState,
    GenerationStatus,
    Language,
    ErrorKind,
    SlideDraft,
    Slide,
    Presentation,
    HistoryItem,
    BatchReport,
    OperationResult,
)

# Errors
from deck_studio.errors import (
    DeckStudioError,
    CredentialMissing,
    GenerationFailure,
    ImageGenerationFailure,
    PersistenceFailure,
    StorageError,
    StorageQuotaExceeded,
)

# Core services
from deck_studio.core import (
    CredentialStore,
    PreferenceStore,
    PresentationDocument,
    GenerationObserver,
    GenerationOrchestrator,
    AutosaveScheduler,
)

# Storage services
from deck_studio.storage import (
    InMemoryStorage,
    FileStorage,
    MongoKeyValueStorage,
    HistoryStore,
    get_storage,
)

# AI client
from deck_studio.models import AIClient, GeminiClient

# Unified orchestrator
from deck_studio.orchestrator import DeckStudio

__all__ = [
    # Schemas
    "SlideLayout",
    "GenerationState",
    "GenerationStatus",
    "Language",
    "ErrorKind",
    "SlideDraft",
    "Slide",
    "Presentation",
    "HistoryItem",
    "BatchReport",
    "OperationResult",
    # Errors
    "DeckStudioError",
    "CredentialMissing",
    "GenerationFailure",
    "ImageGenerationFailure",
    "PersistenceFailure",
    "StorageError",
    "StorageQuotaExceeded",
    # Core services
    "CredentialStore",
    "PreferenceStore",
    "PresentationDocument",
    "GenerationObserver",
    "GenerationOrchestrator",
    "AutosaveScheduler",
    # Storage services
    "InMemoryStorage",
    "FileStorage",
    "MongoKeyValueStorage",
    "HistoryStore",
    "get_storage",
    # AI client
    "AIClient",
    "GeminiClient",
    # Orchestrator
    "DeckStudio",
]
