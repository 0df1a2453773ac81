"""
Generation Orchestrator

Sequences outline and image jobs against the AI client, updates the document,
and tracks document-level status and per-slide generation state. Job failures
are converted into OperationResult values and state transitions here; nothing
raised by the AI client escapes this boundary.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Tuple

from deck_studio.errors import DeckStudioError
from deck_studio.models.base import AIClient
from deck_studio.utils.schemas import (
    BatchReport,
    ErrorKind,
    GenerationState,
    GenerationStatus,
    Language,
    OperationResult,
    Presentation,
)
from .credentials import CredentialStore
from .document import PresentationDocument, now_ms, presentation_from_drafts
from .events import GenerationObserver
from .sample_deck import sample_presentation

logger = logging.getLogger(__name__)

NOTHING_TO_DO = "nothing to do"


class GenerationOrchestrator:
    """
    Drives outline and image generation for one document.

    Status machine:
        IDLE -> GENERATING_STRUCTURE -> COMPLETE | ERROR
        IDLE | COMPLETE | ERROR -> GENERATING_IMAGES -> COMPLETE

    Outline generation and batch image runs exclude each other. A manual
    single-slide regeneration may overlap a batch run; the last job to
    resolve for a slide wins.
    """

    def __init__(
        self,
        document: PresentationDocument,
        ai_client: AIClient,
        credentials: CredentialStore,
        observer: Optional[GenerationObserver] = None,
    ):
        self.document = document
        self.ai_client = ai_client
        self.credentials = credentials
        self.observer = observer or GenerationObserver()

        self.status = GenerationStatus.IDLE
        self.error_message: Optional[str] = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def is_busy(self) -> bool:
        return self.status in (GenerationStatus.GENERATING_STRUCTURE, GenerationStatus.GENERATING_IMAGES)

    def _set_status(self, status: GenerationStatus) -> None:
        self.status = status
        self.observer.on_status_changed(status)

    def _mark(self, slide_id: str, state: GenerationState, image_url: Optional[str] = None) -> bool:
        applied = self.document.apply_generation(slide_id, state, image_url)
        if applied:
            self.observer.on_slide_progress(slide_id, state)
        return applied

    def _fail(self, kind: ErrorKind, message: str) -> OperationResult:
        self.error_message = message
        self.observer.on_error(kind, message)
        return OperationResult.failure(kind, message)

    async def _invoke(self, call: Awaitable, fallback: ErrorKind = ErrorKind.GENERATION_FAILURE) -> OperationResult:
        """Await a remote call and tag its outcome. Untyped client errors get the `fallback` kind."""
        try:
            return OperationResult.success(await call)
        except DeckStudioError as e:
            return OperationResult.failure(e.kind, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error from AI client: {e!r}")
            return OperationResult.failure(fallback, str(e) or type(e).__name__)

    # ------------------------------------------------------------------
    # Outline
    # ------------------------------------------------------------------

    async def generate_outline(self, topic: str, language: Language) -> OperationResult:
        """
        Generate a new presentation for a topic.

        On success the new presentation replaces the active one. On failure
        the active presentation is left untouched.

        Args:
            topic: Presentation subject, must not be blank
            language: Output language for titles and bullets

        Returns:
            OperationResult carrying the new Presentation
        """
        topic = (topic or "").strip()
        if not topic:
            return OperationResult.failure(ErrorKind.INVALID_INPUT, "Topic must not be empty")
        if self.is_busy:
            return OperationResult.failure(ErrorKind.BUSY, f"Generation already running ({self.status.value})")

        if not await self.credentials.has_credential():
            logger.warning("[OUTLINE] API key missing")
            return self._fail(ErrorKind.CREDENTIAL_MISSING, "API key is missing")

        self.error_message = None
        self._set_status(GenerationStatus.GENERATING_STRUCTURE)
        logger.info(f"[OUTLINE] Generating structure for '{topic}'")

        result = await self._invoke(self.ai_client.generate_outline(topic, Language(language)))
        if not result.ok:
            logger.error(f"[OUTLINE] Failed: {result.message}")
            self._fail(result.error, result.message or "Failed to generate structure")
            self._set_status(GenerationStatus.ERROR)
            return result

        presentation = presentation_from_drafts(topic, result.value, now_ms())
        self.document.load(presentation)
        self._set_status(GenerationStatus.COMPLETE)

        logger.info(f"[OUTLINE] ✅ Created presentation {presentation.id} with {len(presentation.slides)} slides")
        return OperationResult.success(presentation)

    def load_sample(self, language: Language) -> Presentation:
        """Load the built-in sample deck as the active presentation."""
        presentation = sample_presentation(Language(language))
        self.document.load(presentation)
        self.error_message = None
        self._set_status(GenerationStatus.COMPLETE)
        return presentation

    def load_presentation(self, presentation: Presentation) -> None:
        """Make a hydrated presentation (e.g. from history) the active one."""
        self.document.load(presentation)
        self.error_message = None
        self._set_status(GenerationStatus.COMPLETE)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    async def _run_image_job(self, slide_id: str, prompt: str) -> OperationResult:
        """Run one image job for a slide that is already Pending and record its outcome."""
        result = await self._invoke(self.ai_client.generate_image(prompt), ErrorKind.IMAGE_GENERATION_FAILURE)
        if result.ok:
            self._mark(slide_id, GenerationState.READY, result.value)
        elif result.error is ErrorKind.CREDENTIAL_MISSING:
            self._mark(slide_id, GenerationState.IDLE)
        else:
            self._mark(slide_id, GenerationState.FAILED)
        return result

    async def generate_image(self, slide_id: str) -> OperationResult:
        """
        Generate (or regenerate) the image of one slide.

        The new image replaces any existing one. Failures raise an alert on
        the observer and leave the previous image in place.

        Returns:
            OperationResult carrying the data URI
        """
        slide = self.document.get_slide(slide_id)
        if slide is None:
            return OperationResult.failure(ErrorKind.NOT_FOUND, f"No slide with id {slide_id}")

        if not await self.credentials.has_credential():
            return self._fail(ErrorKind.CREDENTIAL_MISSING, "API key is missing")

        logger.info(f"[IMAGE] Generating image for slide {slide_id}")
        self._mark(slide_id, GenerationState.PENDING)
        result = await self._run_image_job(slide_id, slide.image_prompt)

        if result.ok:
            logger.info(f"[IMAGE] ✅ Slide {slide_id} ready")
        elif result.error is ErrorKind.CREDENTIAL_MISSING:
            self._fail(result.error, result.message)
        else:
            logger.error(f"[IMAGE] Slide {slide_id} failed: {result.message}")
            self.observer.on_alert(slide_id, f"Image Generation Failed: {result.message}")
        return result

    async def generate_all_images(self) -> OperationResult:
        """
        Generate images for every slide that has none, one job at a time.

        The set of slides is fixed when the call starts. Each slide is marked
        Pending up front, then a single worker drains a queue in snapshot
        order. Individual failures are logged and the run continues.

        Returns:
            OperationResult carrying a BatchReport
        """
        if self.is_busy:
            return OperationResult.failure(ErrorKind.BUSY, f"Generation already running ({self.status.value})")

        snapshot = [(slide.id, slide.image_prompt) for slide in self.document.slides_missing_image()]
        if not snapshot:
            logger.info(f"[BATCH] All slides have images, {NOTHING_TO_DO}")
            return OperationResult.success(BatchReport(), message=NOTHING_TO_DO)

        if not await self.credentials.has_credential():
            return self._fail(ErrorKind.CREDENTIAL_MISSING, "API key is missing")

        report = BatchReport(requested=len(snapshot))
        queue: asyncio.Queue[Tuple[str, str]] = asyncio.Queue()

        self._set_status(GenerationStatus.GENERATING_IMAGES)
        try:
            for slide_id, prompt in snapshot:
                self._mark(slide_id, GenerationState.PENDING)
                queue.put_nowait((slide_id, prompt))

            logger.info(f"[BATCH] Generating {len(snapshot)} images")
            await asyncio.create_task(self._image_worker(queue, report))
        finally:
            self._set_status(GenerationStatus.COMPLETE)

        logger.info(
            f"[BATCH] ✅ Done: {report.succeeded} succeeded, {report.failed} failed, {report.skipped} skipped"
        )
        return OperationResult.success(report)

    async def _image_worker(self, queue: "asyncio.Queue[Tuple[str, str]]", report: BatchReport) -> None:
        while not queue.empty():
            slide_id, prompt = queue.get_nowait()
            try:
                if self.document.get_slide(slide_id) is None:
                    logger.info(f"[BATCH] Slide {slide_id} removed before its turn, skipping")
                    report.skipped += 1
                    continue

                result = await self._run_image_job(slide_id, prompt)
                if self.document.get_slide(slide_id) is None:
                    report.skipped += 1
                elif result.ok:
                    report.succeeded += 1
                else:
                    report.failed += 1
                    logger.error(f"[BATCH] Failed for slide {slide_id}: {result.message}")
            finally:
                queue.task_done()
