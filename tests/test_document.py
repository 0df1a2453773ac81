"""
Tests for the presentation document model and schemas.
"""

import json

import pytest

from deck_studio.core.document import (
    PresentationDocument,
    new_presentation_id,
    presentation_from_drafts,
)
from deck_studio.core.sample_deck import sample_presentation
from deck_studio.utils.schemas import (
    GenerationState,
    HistoryItem,
    Language,
    Slide,
    SlideLayout,
)

from conftest import make_drafts, make_presentation


class TestIds:
    """Tests for id assignment."""

    def test_slide_ids_unique_with_colliding_titles_in_same_millisecond(self):
        drafts = make_drafts(8, title="Same Title")
        presentation = presentation_from_drafts("Topic", drafts, created_at=1700000000000)

        ids = [slide.id for slide in presentation.slides]
        assert len(ids) == 8
        assert len(set(ids)) == 8
        assert all(slide_id.startswith("slide-1700000000000-") for slide_id in ids)

    def test_slide_ids_carry_sequence_index(self):
        presentation = presentation_from_drafts("Topic", make_drafts(3), created_at=42)
        for index, slide in enumerate(presentation.slides):
            assert slide.id.startswith(f"slide-42-{index}-")

    def test_presentation_ids_differ_for_same_timestamp(self):
        assert new_presentation_id(5) != new_presentation_id(5)

    def test_drafts_are_copied_in_order(self):
        drafts = make_drafts(5)
        presentation = presentation_from_drafts("AI", drafts, created_at=10)

        assert presentation.topic == "AI"
        assert presentation.updated_at == 10
        assert [s.title for s in presentation.slides] == [d.title for d in drafts]
        assert [s.layout for s in presentation.slides] == [d.layout for d in drafts]
        assert all(s.image_url is None for s in presentation.slides)
        assert all(s.generation_state is GenerationState.IDLE for s in presentation.slides)


class TestPresentationDocument:
    """Tests for document edits and notifications."""

    @pytest.fixture
    def loaded(self):
        document = PresentationDocument()
        document.load(make_presentation([
            Slide(id="a", title="A", content=["1", "2", "3"], image_prompt="pa"),
            Slide(id="b", title="B", content=["1", "2", "3"], image_prompt="pb", image_url="data:image/png;base64,xx"),
        ]))
        return document

    def test_listeners_see_every_mutation(self, loaded):
        seen = []
        loaded.subscribe(lambda presentation: seen.append(presentation.topic))

        loaded.set_topic("New")
        loaded.update_slide("a", title="A2")

        assert seen == ["New", "New"]

    def test_unsubscribe(self, loaded):
        seen = []
        unsubscribe = loaded.subscribe(lambda p: seen.append(p))
        unsubscribe()
        loaded.set_topic("x")
        assert seen == []

    def test_update_slide_edits_user_fields_only(self, loaded):
        slide = loaded.update_slide(
            "b",
            title="Edited",
            content=["x", "y"],
            image_prompt="new prompt",
            layout=SlideLayout.FULL_IMAGE,
        )

        assert slide.title == "Edited"
        assert slide.content == ["x", "y"]
        assert slide.image_prompt == "new prompt"
        assert slide.layout is SlideLayout.FULL_IMAGE
        assert slide.image_url == "data:image/png;base64,xx"

    def test_update_unknown_slide_returns_none(self, loaded):
        assert loaded.update_slide("missing", title="x") is None

    def test_slides_missing_image(self, loaded):
        assert [s.id for s in loaded.slides_missing_image()] == ["a"]

    def test_add_slide_after(self, loaded):
        slide = loaded.add_slide(after_id="a")
        assert [s.id for s in loaded.slides] == ["a", slide.id, "b"]

    def test_add_slide_at_end(self, loaded):
        slide = loaded.add_slide()
        assert loaded.slides[-1] is slide
        assert slide.layout is SlideLayout.CONTENT_RIGHT

    def test_remove_slide(self, loaded):
        assert loaded.remove_slide("a") is True
        assert loaded.remove_slide("a") is False
        assert [s.id for s in loaded.slides] == ["b"]

    def test_apply_generation_to_vanished_slide_is_dropped(self, loaded):
        loaded.remove_slide("a")
        assert loaded.apply_generation("a", GenerationState.READY, "data:image/png;base64,zz") is False
        assert loaded.get_slide("a") is None

    def test_apply_generation_sets_image(self, loaded):
        assert loaded.apply_generation("a", GenerationState.READY, "data:image/png;base64,zz")
        slide = loaded.get_slide("a")
        assert slide.image_url == "data:image/png;base64,zz"
        assert slide.generation_state is GenerationState.READY

    def test_load_rejects_duplicate_ids(self):
        document = PresentationDocument()
        with pytest.raises(ValueError):
            document.load(make_presentation([Slide(id="a"), Slide(id="a")]))

    def test_edits_without_presentation(self):
        document = PresentationDocument()
        assert document.slides == []
        with pytest.raises(RuntimeError):
            document.set_topic("x")


class TestSerialization:
    """Tests for the persisted layout."""

    def test_round_trip(self):
        presentation = make_presentation([
            Slide(id="a", title="A", content=["1", "2", "3"], image_prompt="pa", layout=SlideLayout.TITLE),
            Slide(id="b", title="B", content=["x"], image_prompt="pb", image_url="data:image/png;base64,QQ=="),
        ])
        item = HistoryItem.from_presentation(presentation, updated_at=123)

        restored = HistoryItem.model_validate(json.loads(json.dumps(item.to_record()))).to_presentation()

        assert restored.id == presentation.id
        assert restored.topic == presentation.topic
        assert restored.updated_at == 123
        assert restored.slides == presentation.slides

    def test_record_layout(self):
        slide = Slide(id="a", title="A", content=["1"], image_prompt="p", generation_state=GenerationState.PENDING)
        record = slide.to_record()

        assert record == {
            "id": "a",
            "title": "A",
            "content": ["1"],
            "imagePrompt": "p",
            "layout": "CONTENT_RIGHT",
        }

    def test_missing_layout_hydrates_to_content_right(self):
        item = HistoryItem.model_validate({
            "id": "h1",
            "topic": "T",
            "updatedAt": 5,
            "slides": [
                {"id": "s1", "title": "t", "content": [], "imagePrompt": "p"},
                {"id": "s2", "title": "t", "content": [], "imagePrompt": "p", "layout": None},
                {"id": "s3", "title": "t", "content": [], "imagePrompt": "p", "layout": "DIAGONAL"},
            ],
        })

        assert [s.layout for s in item.slides] == [SlideLayout.CONTENT_RIGHT] * 3

    def test_hydration_resets_generation_state(self):
        item = HistoryItem(id="h", slides=[Slide(id="s", generation_state=GenerationState.PENDING)])
        assert item.to_presentation().slides[0].generation_state is GenerationState.IDLE


class TestSampleDeck:
    """Tests for the built-in sample deck."""

    @pytest.mark.parametrize("language", list(Language))
    def test_covers_every_layout(self, language):
        presentation = sample_presentation(language, created_at=7)

        assert presentation.id == "example-7"
        assert {s.layout for s in presentation.slides} == set(SlideLayout)
        assert presentation.slides[0].layout is SlideLayout.TITLE

    def test_language(self):
        assert sample_presentation(Language.EN).topic == "Presentation Layout Examples"
        assert sample_presentation(Language.ZH).topic == "演示文稿布局示例"
