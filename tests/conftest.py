"""
Pytest Configuration and Fixtures

Fakes for the AI client, the key-value medium and the autosave clock.
"""

import asyncio
import json
from typing import Dict, List, Optional

import pytest

from deck_studio.constants import API_KEY_STORAGE_KEY
from deck_studio.core.credentials import CredentialStore
from deck_studio.core.document import PresentationDocument
from deck_studio.errors import StorageQuotaExceeded
from deck_studio.storage.memory import InMemoryStorage
from deck_studio.utils.schemas import (
    HistoryItem,
    Language,
    Presentation,
    Slide,
    SlideDraft,
    SlideLayout,
)


def make_drafts(count: int = 6, title: Optional[str] = None) -> List[SlideDraft]:
    layouts = list(SlideLayout)
    return [
        SlideDraft(
            title=title or f"Slide {i + 1}",
            content=[f"Point {i + 1}.{j + 1}" for j in range(3 + i % 2)],
            image_prompt=f"prompt {i + 1}",
            layout=layouts[i % len(layouts)],
        )
        for i in range(count)
    ]


def make_presentation(slides: List[Slide], presentation_id: str = "p1", topic: str = "Topic") -> Presentation:
    return Presentation(id=presentation_id, topic=topic, slides=slides, updated_at=1)


def make_history_item(item_id: str, updated_at: int = 1, topic: str = "Topic") -> HistoryItem:
    return HistoryItem(
        id=item_id,
        topic=topic,
        slides=[Slide(id=f"{item_id}-s1", title="Title", content=["a", "b", "c"], image_prompt="p")],
        updated_at=updated_at,
    )


class FakeAIClient:
    """Scripted AI client that records call order and concurrency."""

    def __init__(
        self,
        drafts: Optional[List[SlideDraft]] = None,
        outline_error: Optional[Exception] = None,
        image_errors: Optional[Dict[str, Exception]] = None,
        delay: float = 0.01,
    ):
        self.drafts = drafts if drafts is not None else make_drafts()
        self.outline_error = outline_error
        self.image_errors = dict(image_errors or {})
        self.delay = delay

        self.outline_calls: List[tuple] = []
        self.image_calls: List[str] = []
        self.events: List[tuple] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def generate_outline(self, topic: str, language: Language) -> List[SlideDraft]:
        self.outline_calls.append((topic, language))
        await asyncio.sleep(0)
        if self.outline_error is not None:
            raise self.outline_error
        return [draft.model_copy(deep=True) for draft in self.drafts]

    async def generate_image(self, prompt: str) -> str:
        loop = asyncio.get_running_loop()
        self.image_calls.append(prompt)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.events.append(("start", prompt, loop.time()))
        try:
            await asyncio.sleep(self.delay)
            if prompt in self.image_errors:
                raise self.image_errors[prompt]
            return f"data:image/png;base64,{prompt.replace(' ', '_')}"
        finally:
            self.in_flight -= 1
            self.events.append(("end", prompt, loop.time()))


class _VirtualTimer:
    def __init__(self, due: float, seq: int, callback):
        self.due = due
        self.seq = seq
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualScheduler:
    """Deterministic scheduler; time only moves through advance()."""

    def __init__(self):
        self.now = 0.0
        self._timers: List[_VirtualTimer] = []
        self._seq = 0

    def call_later(self, delay: float, callback) -> _VirtualTimer:
        timer = _VirtualTimer(self.now + delay, self._seq, callback)
        self._seq += 1
        self._timers.append(timer)
        return timer

    @property
    def pending(self) -> List[_VirtualTimer]:
        return [t for t in self._timers if not t.cancelled]

    async def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = sorted(
                (t for t in self._timers if not t.cancelled and t.due <= target),
                key=lambda t: (t.due, t.seq),
            )
            if not due:
                break
            timer = due[0]
            self._timers.remove(timer)
            self.now = timer.due
            await timer.callback()
        self.now = target


class RecordingStorage(InMemoryStorage):
    """In-memory storage that records every write."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.writes: List[tuple] = []

    async def set(self, key: str, value: str) -> None:
        self.writes.append((key, value))
        await super().set(key, value)


class CappedStorage(InMemoryStorage):
    """Rejects history payloads holding more than `max_items` entries."""

    def __init__(self, max_items: int, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.max_items = max_items
        self.attempts = 0

    async def set(self, key: str, value: str) -> None:
        self.attempts += 1
        if len(json.loads(value)) > self.max_items:
            raise StorageQuotaExceeded("QuotaExceededError")
        await super().set(key, value)


@pytest.fixture
def storage() -> InMemoryStorage:
    return InMemoryStorage(initial={API_KEY_STORAGE_KEY: "test-key"})


@pytest.fixture
def credentials(storage) -> CredentialStore:
    return CredentialStore(storage)


@pytest.fixture
def missing_credentials() -> CredentialStore:
    return CredentialStore(InMemoryStorage())


@pytest.fixture
def document() -> PresentationDocument:
    return PresentationDocument()


@pytest.fixture
def ai_client() -> FakeAIClient:
    return FakeAIClient()


@pytest.fixture
def scheduler() -> VirtualScheduler:
    return VirtualScheduler()
