"""
Deck Studio Unified Orchestrator

Unified interface for all deck operations with mode-based execution.
Supports: outline, example, image, images, open, delete, and history modes.
"""

import logging
from typing import Any, List, Literal, Optional

from deck_studio.config import Settings, get_settings
from deck_studio.core.autosave import AutosaveScheduler, Scheduler
from deck_studio.core.credentials import CredentialStore, PreferenceStore
from deck_studio.core.document import PresentationDocument
from deck_studio.core.events import GenerationObserver
from deck_studio.core.generation import GenerationOrchestrator
from deck_studio.models.base import AIClient
from deck_studio.models.gemini import GeminiClient
from deck_studio.storage import HistoryStore, KeyValueStorage, get_storage
from deck_studio.utils.schemas import (
    ErrorKind,
    GenerationStatus,
    HistoryItem,
    Language,
    OperationResult,
    Presentation,
)

logger = logging.getLogger(__name__)

# Mode type
Mode = Literal["outline", "example", "image", "images", "open", "delete", "history"]


class DeckStudio:
    """
    Unified orchestrator for topic-to-deck generation.

    Modes:
    - 'outline': Generate a new presentation from a topic
    - 'example': Load the built-in sample deck
    - 'image': Generate the image of one slide
    - 'images': Generate images for every slide missing one
    - 'open': Load a saved presentation from history
    - 'delete': Delete a saved presentation from history
    - 'history': List saved presentations

    Edits go directly through `document`; autosave picks them up.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        storage: Optional[KeyValueStorage] = None,
        ai_client: Optional[AIClient] = None,
        scheduler: Optional[Scheduler] = None,
        observer: Optional[GenerationObserver] = None,
    ):
        """
        Initialize unified orchestrator.

        Args:
            settings: Runtime settings (if None, read from environment)
            storage: Key-value backend (if None, created from settings)
            ai_client: AI client (if None, a GeminiClient over the credential store)
            scheduler: Delayed-task scheduler for autosave (if None, the event loop)
            observer: Receiver of status, progress and history events
        """
        self.settings = settings or get_settings()
        self.storage = storage or get_storage(self.settings)
        self.observer = observer or GenerationObserver()

        self.credentials = CredentialStore(self.storage, fallback=self.settings.gemini_api_key)
        self.preferences = PreferenceStore(self.storage)
        self.history = HistoryStore(self.storage)
        self.document = PresentationDocument()

        self.ai_client = ai_client or GeminiClient(self.credentials, self.settings)
        self.generation = GenerationOrchestrator(
            self.document,
            self.ai_client,
            self.credentials,
            observer=self.observer,
        )
        self.autosave = AutosaveScheduler(
            self.document,
            self.history,
            scheduler=scheduler,
            delay_ms=self.settings.autosave_delay_ms,
            observer=self.observer,
        )
        self._initialized = False

        logger.info(f"DeckStudio initialized (storage: {type(self.storage).__name__})")

    @property
    def status(self) -> GenerationStatus:
        return self.generation.status

    @property
    def presentation(self) -> Optional[Presentation]:
        return self.document.presentation

    async def _ensure_initialized(self):
        """Load the history listing once before the first operation."""
        if self._initialized:
            return
        await self.autosave.refresh()
        self._initialized = True
        logger.info(f"Loaded {len(self.autosave.items)} history items")

    async def execute(self, mode: Mode, **kwargs) -> Any:
        """
        Execute operation based on mode.

        Args:
            mode: Operation mode
            **kwargs: Mode-specific parameters

        Returns:
            Mode-specific results

        Raises:
            ValueError: If mode is invalid
        """
        await self._ensure_initialized()

        if mode == "outline":
            return await self._execute_outline(**kwargs)
        elif mode == "example":
            return await self._execute_example(**kwargs)
        elif mode == "image":
            return await self._execute_image(**kwargs)
        elif mode == "images":
            return await self._execute_images(**kwargs)
        elif mode == "open":
            return await self._execute_open(**kwargs)
        elif mode == "delete":
            return await self._execute_delete(**kwargs)
        elif mode == "history":
            return await self._execute_history(**kwargs)
        else:
            raise ValueError(
                f"Invalid mode: {mode}. Must be one of: outline, example, image, images, open, delete, history"
            )

    async def _resolve_language(self, language: Optional[Language]) -> Language:
        return Language(language) if language else await self.preferences.get_language()

    async def _execute_outline(self, topic: str, language: Optional[Language] = None, **kwargs) -> OperationResult:
        language = await self._resolve_language(language)
        logger.info(f"[OUTLINE] Topic: '{topic}' ({language.value})")
        return await self.generation.generate_outline(topic, language)

    async def _execute_example(self, language: Optional[Language] = None, **kwargs) -> Presentation:
        language = await self._resolve_language(language)
        presentation = self.generation.load_sample(language)
        logger.info(f"[EXAMPLE] ✅ Loaded sample deck {presentation.id}")
        return presentation

    async def _execute_image(self, slide_id: str, **kwargs) -> OperationResult:
        return await self.generation.generate_image(slide_id)

    async def _execute_images(self, **kwargs) -> OperationResult:
        return await self.generation.generate_all_images()

    async def _execute_open(self, history_id: str, **kwargs) -> OperationResult:
        """
        Load a saved presentation into the document.

        Slides are hydrated: missing layouts become CONTENT_RIGHT and every
        slide starts Idle.
        """
        if self.generation.is_busy:
            return OperationResult.failure(ErrorKind.BUSY, f"Generation already running ({self.status.value})")

        item = await self.history.get(history_id)
        if item is None:
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"No saved presentation with id {history_id}")

        presentation = item.to_presentation()
        self.generation.load_presentation(presentation)
        logger.info(f"[OPEN] ✅ Opened {presentation.id} ({len(presentation.slides)} slides)")
        return OperationResult.success(presentation)

    async def _execute_delete(self, history_id: str, **kwargs) -> List[HistoryItem]:
        items = await self.history.delete(history_id)
        self.autosave.items = items
        self.observer.on_history_changed(items)
        return items

    async def _execute_history(self, **kwargs) -> List[HistoryItem]:
        return await self.autosave.refresh()

    async def set_language(self, language: Language) -> None:
        await self.preferences.set_language(language)

    async def set_credential(self, value: str) -> None:
        await self.credentials.set_credential(value)

    async def close(self):
        """Flush a pending autosave and close storage."""
        await self.autosave.flush()
        self.autosave.stop()
        await self.storage.close()
        logger.info("DeckStudio closed")
