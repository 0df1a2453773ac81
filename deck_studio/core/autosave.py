"""
Autosave Scheduler

Debounces document mutations into history writes. Each mutation re-arms a
single delayed task; only the state present when the task fires is saved.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, Optional, Protocol, Set

from deck_studio.constants import AUTOSAVE_DELAY_MS, UNTITLED_TOPIC
from deck_studio.storage.history import HistoryStore
from deck_studio.utils.schemas import HistoryItem, Presentation
from .document import PresentationDocument, now_ms
from .events import GenerationObserver

logger = logging.getLogger(__name__)

AsyncCallback = Callable[[], Awaitable[None]]


class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs an async callback after a delay (seconds)."""

    def call_later(self, delay: float, callback: AsyncCallback) -> TimerHandle:
        ...


class _UnscheduledHandle:
    """Handle for a callback that could not be timed because no loop was running."""

    def cancel(self) -> None:
        pass


class AsyncioScheduler:
    """
    Scheduler backed by the running event loop.

    Outside a running loop nothing is timed: the returned handle stays armed
    so the callback still runs on the next re-arm inside a loop or on flush.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def call_later(self, delay: float, callback: AsyncCallback) -> TimerHandle:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("[AUTOSAVE] No running event loop, save deferred until flush")
            return _UnscheduledHandle()
        return loop.call_later(delay, self._spawn, callback)

    def _spawn(self, callback: AsyncCallback) -> None:
        task = asyncio.ensure_future(callback())
        self._tasks.add(task)
        task.add_done_callback(self._done)

    def _done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"[AUTOSAVE] Scheduled task failed: {task.exception()!r}")


class Debouncer:
    """Arm/cancel wrapper around one delayed task."""

    def __init__(self, scheduler: Scheduler, delay_ms: int):
        self.scheduler = scheduler
        self.delay_ms = delay_ms
        self._handle: Optional[TimerHandle] = None
        self._callback: Optional[AsyncCallback] = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, callback: AsyncCallback) -> None:
        """(Re)schedule `callback`, cancelling any pending one."""
        self.cancel()
        self._callback = callback
        self._handle = self.scheduler.call_later(self.delay_ms / 1000, self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None

    async def fire_now(self) -> bool:
        """Run the pending callback immediately. Returns False if nothing was armed."""
        if not self.armed:
            return False
        await self._fire()
        return True

    async def _fire(self) -> None:
        callback = self._callback
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._callback = None
        if callback is not None:
            await callback()


class AutosaveScheduler:
    """
    Watches a document and persists it to the history store after a quiet period.

    Saves happen only for presentations with an id and at least one slide.
    Writes are serialized so at most one is in flight.
    """

    def __init__(
        self,
        document: PresentationDocument,
        history: HistoryStore,
        scheduler: Optional[Scheduler] = None,
        delay_ms: int = AUTOSAVE_DELAY_MS,
        observer: Optional[GenerationObserver] = None,
        clock: Callable[[], int] = now_ms,
    ):
        self.document = document
        self.history = history
        self.observer = observer or GenerationObserver()
        self.clock = clock
        self.items: List[HistoryItem] = []
        self.last_save_ok: Optional[bool] = None

        self._debouncer = Debouncer(scheduler or AsyncioScheduler(), delay_ms)
        self._lock = asyncio.Lock()
        self._unsubscribe = document.subscribe(self._on_document_changed)

    @property
    def pending(self) -> bool:
        return self._debouncer.armed

    def _on_document_changed(self, presentation: Optional[Presentation]) -> None:
        if presentation is None or not presentation.id or not presentation.slides:
            return
        self._debouncer.arm(self._save)

    async def refresh(self) -> List[HistoryItem]:
        """Reload the history listing and notify the observer."""
        self.items = await self.history.list()
        self.observer.on_history_changed(self.items)
        return self.items

    async def flush(self) -> bool:
        """Persist a pending save right away. Returns False if none was pending."""
        return await self._debouncer.fire_now()

    def stop(self) -> None:
        """Cancel any pending save and stop watching the document."""
        self._debouncer.cancel()
        self._unsubscribe()

    async def _save(self) -> None:
        async with self._lock:
            presentation = self.document.presentation
            if presentation is None or not presentation.slides:
                return

            item = HistoryItem.from_presentation(
                presentation,
                updated_at=self.clock(),
                topic=presentation.topic or UNTITLED_TOPIC,
            )
            self.last_save_ok = await self.history.upsert(item)
            if self.last_save_ok:
                logger.info(f"[AUTOSAVE] Saved {item.id} ({len(item.slides)} slides)")
            else:
                logger.warning(f"[AUTOSAVE] Could not persist {item.id}, keeping in-memory copy only")

            await self.refresh()
