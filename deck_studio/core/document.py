"""
Presentation Document

Holds the active presentation, applies user edits and job completions, and
notifies listeners after every mutation (the autosave scheduler is one).
"""

import logging
import time
import uuid
from typing import Callable, List, Optional, Sequence

from deck_studio.utils.schemas import (
    GenerationState,
    Presentation,
    Slide,
    SlideDraft,
    SlideLayout,
)

logger = logging.getLogger(__name__)

DocumentListener = Callable[[Optional[Presentation]], None]


def now_ms() -> int:
    return int(time.time() * 1000)


def new_slide_id(index: int, created_at: int) -> str:
    """Timestamp + batch index + random suffix; unique within a batch even in one millisecond."""
    return f"slide-{created_at}-{index}-{uuid.uuid4().hex[:6]}"


def new_presentation_id(created_at: int) -> str:
    return f"{created_at}{uuid.uuid4().hex[:9]}"


def presentation_from_drafts(topic: str, drafts: Sequence[SlideDraft], created_at: Optional[int] = None) -> Presentation:
    """Build a new presentation from outline drafts, assigning fresh ids."""
    created_at = created_at if created_at is not None else now_ms()
    slides = [
        Slide(
            id=new_slide_id(index, created_at),
            title=draft.title,
            content=list(draft.content),
            image_prompt=draft.image_prompt,
            layout=draft.layout,
        )
        for index, draft in enumerate(drafts)
    ]
    return Presentation(
        id=new_presentation_id(created_at),
        topic=topic,
        slides=slides,
        updated_at=created_at,
    )


class PresentationDocument:
    """
    Single-owner container for the active presentation.

    User edits may change title, content, image prompt and layout. Only the
    generation orchestrator writes generation state and image URLs, through
    apply_generation().
    """

    def __init__(self, presentation: Optional[Presentation] = None):
        self.presentation = presentation
        self._listeners: List[DocumentListener] = []

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    def subscribe(self, listener: DocumentListener) -> Callable[[], None]:
        """Register a mutation listener. Returns an unsubscribe callable."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.presentation)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def slides(self) -> List[Slide]:
        return self.presentation.slides if self.presentation else []

    def get_slide(self, slide_id: str) -> Optional[Slide]:
        for slide in self.slides:
            if slide.id == slide_id:
                return slide
        return None

    def slides_missing_image(self) -> List[Slide]:
        return [slide for slide in self.slides if not slide.image_url]

    # ------------------------------------------------------------------
    # Whole-document operations
    # ------------------------------------------------------------------

    def load(self, presentation: Presentation) -> None:
        """Replace the active presentation. The previous one is discarded."""
        ids = [slide.id for slide in presentation.slides]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate slide ids in presentation {presentation.id}")
        self.presentation = presentation
        logger.info(f"Loaded presentation {presentation.id} ({len(ids)} slides)")
        self._notify()

    def set_topic(self, topic: str) -> None:
        self._require()
        self.presentation.topic = topic
        self._notify()

    # ------------------------------------------------------------------
    # User edits
    # ------------------------------------------------------------------

    def update_slide(
        self,
        slide_id: str,
        *,
        title: Optional[str] = None,
        content: Optional[Sequence[str]] = None,
        image_prompt: Optional[str] = None,
        layout: Optional[SlideLayout] = None,
    ) -> Optional[Slide]:
        """
        Apply a user edit to one slide.

        Returns:
            The edited slide, or None if no slide has that id
        """
        slide = self.get_slide(slide_id)
        if slide is None:
            return None
        if title is not None:
            slide.title = title
        if content is not None:
            slide.content = list(content)
        if image_prompt is not None:
            slide.image_prompt = image_prompt
        if layout is not None:
            slide.layout = SlideLayout(layout)
        self._notify()
        return slide

    def add_slide(self, after_id: Optional[str] = None, layout: SlideLayout = SlideLayout.CONTENT_RIGHT) -> Slide:
        """Insert a blank slide after `after_id` (or at the end)."""
        self._require()
        created_at = now_ms()
        slide = Slide(id=new_slide_id(len(self.slides), created_at), layout=layout)
        while self.get_slide(slide.id) is not None:
            slide.id = new_slide_id(len(self.slides), created_at)

        position = len(self.slides)
        if after_id is not None:
            for index, existing in enumerate(self.slides):
                if existing.id == after_id:
                    position = index + 1
                    break
        self.presentation.slides.insert(position, slide)
        self._notify()
        return slide

    def remove_slide(self, slide_id: str) -> bool:
        slide = self.get_slide(slide_id)
        if slide is None:
            return False
        self.presentation.slides.remove(slide)
        self._notify()
        return True

    # ------------------------------------------------------------------
    # Job completions
    # ------------------------------------------------------------------

    def apply_generation(
        self,
        slide_id: str,
        state: GenerationState,
        image_url: Optional[str] = None,
    ) -> bool:
        """
        Write an image job's state (and image on success) to a slide.

        Writes addressed to a slide that is no longer present are dropped.

        Returns:
            False if the slide has vanished
        """
        slide = self.get_slide(slide_id)
        if slide is None:
            logger.debug(f"Dropping {state.value} for vanished slide {slide_id}")
            return False
        slide.generation_state = state
        if image_url is not None:
            slide.image_url = image_url
        self._notify()
        return True

    def _require(self) -> None:
        if self.presentation is None:
            raise RuntimeError("No active presentation")
