import logging
from typing import List

from deck_studio.utils.schemas import ErrorKind, GenerationState, GenerationStatus, HistoryItem

logger = logging.getLogger(__name__)


class GenerationObserver:
    """
    Receives progress events from the orchestrator and autosave scheduler.

    The default implementation only logs. Presentation layers subclass it and
    override what they render.
    """

    def on_status_changed(self, status: GenerationStatus) -> None:
        logger.debug(f"Status -> {status.value}")

    def on_slide_progress(self, slide_id: str, state: GenerationState) -> None:
        logger.debug(f"Slide {slide_id} -> {state.value}")

    def on_error(self, kind: ErrorKind, message: str) -> None:
        """Blocking failures (outline, missing credential)."""
        logger.debug(f"Error {kind.value}: {message}")

    def on_alert(self, slide_id: str, message: str) -> None:
        """Manual single-slide image failure."""
        logger.debug(f"Alert for {slide_id}: {message}")

    def on_history_changed(self, items: List[HistoryItem]) -> None:
        logger.debug(f"History now has {len(items)} items")
