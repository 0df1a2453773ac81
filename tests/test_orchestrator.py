"""
Tests for the DeckStudio facade: generation, autosave and history wired together.
"""

import json

import pytest

from deck_studio.config import Settings
from deck_studio.constants import API_KEY_STORAGE_KEY, HISTORY_STORAGE_KEY
from deck_studio.orchestrator import DeckStudio
from deck_studio.storage.memory import InMemoryStorage
from deck_studio.utils.schemas import (
    ErrorKind,
    GenerationState,
    GenerationStatus,
    Language,
    SlideLayout,
)

from conftest import FakeAIClient, VirtualScheduler


@pytest.fixture
def studio_parts():
    storage = InMemoryStorage(initial={API_KEY_STORAGE_KEY: "key"})
    scheduler = VirtualScheduler()
    client = FakeAIClient(delay=0)
    studio = DeckStudio(
        settings=Settings(storage_backend="memory"),
        storage=storage,
        ai_client=client,
        scheduler=scheduler,
    )
    return studio, storage, scheduler, client


class TestDeckStudio:

    @pytest.mark.asyncio
    async def test_outline_then_autosave(self, studio_parts):
        studio, storage, scheduler, _ = studio_parts

        result = await studio.execute(mode="outline", topic="Future of AI", language=Language.EN)
        assert result.ok
        assert studio.status is GenerationStatus.COMPLETE
        assert await storage.get(HISTORY_STORAGE_KEY) is None

        await scheduler.advance(1)

        history = await studio.execute(mode="history")
        assert [item.id for item in history] == [result.value.id]
        assert history[0].topic == "Future of AI"

    @pytest.mark.asyncio
    async def test_outline_uses_language_preference(self, studio_parts):
        studio, _, _, client = studio_parts
        await studio.set_language(Language.EN)

        await studio.execute(mode="outline", topic="Topic")

        assert client.outline_calls == [("Topic", Language.EN)]

    @pytest.mark.asyncio
    async def test_images_are_persisted(self, studio_parts):
        studio, storage, scheduler, client = studio_parts
        await studio.execute(mode="example", language=Language.EN)

        result = await studio.execute(mode="images")
        await scheduler.advance(1)

        assert result.value.succeeded == 5
        assert client.max_in_flight == 1
        records = json.loads(await storage.get(HISTORY_STORAGE_KEY))
        assert all(slide["imageUrl"].startswith("data:image/png;base64,") for slide in records[0]["slides"])
        assert all("generationState" not in slide for slide in records[0]["slides"])

    @pytest.mark.asyncio
    async def test_single_image(self, studio_parts):
        studio, _, _, _ = studio_parts
        await studio.execute(mode="example", language=Language.ZH)

        result = await studio.execute(mode="image", slide_id="ex-2")

        assert result.ok
        assert studio.document.get_slide("ex-2").generation_state is GenerationState.READY

    @pytest.mark.asyncio
    async def test_open_hydrates_and_resaves(self, studio_parts):
        studio, storage, scheduler, _ = studio_parts
        legacy = [{
            "id": "old",
            "topic": "Legacy",
            "updatedAt": 1,
            "slides": [{"id": "s1", "title": "T", "content": ["a"], "imagePrompt": "p"}],
        }]
        await storage.set(HISTORY_STORAGE_KEY, json.dumps(legacy))

        result = await studio.execute(mode="open", history_id="old")
        await scheduler.advance(1)

        assert result.ok
        assert studio.presentation.slides[0].layout is SlideLayout.CONTENT_RIGHT
        assert studio.status is GenerationStatus.COMPLETE
        records = json.loads(await storage.get(HISTORY_STORAGE_KEY))
        assert records[0]["slides"][0]["layout"] == "CONTENT_RIGHT"
        assert records[0]["updatedAt"] > 1

    @pytest.mark.asyncio
    async def test_open_unknown(self, studio_parts):
        studio, _, _, _ = studio_parts
        result = await studio.execute(mode="open", history_id="nope")
        assert result.error is ErrorKind.NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_is_independent_of_open_document(self, studio_parts):
        studio, _, scheduler, _ = studio_parts
        presentation = await studio.execute(mode="example", language=Language.EN)
        await scheduler.advance(1)

        remaining = await studio.execute(mode="delete", history_id=presentation.id)

        assert remaining == []
        assert studio.autosave.items == []
        assert studio.presentation is presentation

    @pytest.mark.asyncio
    async def test_edits_are_autosaved(self, studio_parts):
        studio, storage, scheduler, _ = studio_parts
        await studio.execute(mode="example", language=Language.EN)
        await scheduler.advance(1)

        studio.document.update_slide("ex-1", title="Edited")
        await scheduler.advance(1)

        records = json.loads(await storage.get(HISTORY_STORAGE_KEY))
        assert records[0]["slides"][0]["title"] == "Edited"

    @pytest.mark.asyncio
    async def test_missing_credential(self):
        studio = DeckStudio(
            settings=Settings(storage_backend="memory"),
            storage=InMemoryStorage(),
            ai_client=FakeAIClient(),
            scheduler=VirtualScheduler(),
        )

        result = await studio.execute(mode="outline", topic="Topic")

        assert result.error is ErrorKind.CREDENTIAL_MISSING

        await studio.set_credential("now-set")
        assert (await studio.execute(mode="outline", topic="Topic")).ok

    @pytest.mark.asyncio
    async def test_invalid_mode(self, studio_parts):
        studio, _, _, _ = studio_parts
        with pytest.raises(ValueError):
            await studio.execute(mode="export")

    @pytest.mark.asyncio
    async def test_close_flushes_pending_save(self, studio_parts):
        studio, storage, _, _ = studio_parts
        await studio.execute(mode="example", language=Language.EN)

        await studio.close()

        records = json.loads(await storage.get(HISTORY_STORAGE_KEY))
        assert records[0]["topic"] == "Presentation Layout Examples"
