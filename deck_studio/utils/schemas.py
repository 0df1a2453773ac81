"""
Deck Studio Schemas

Pydantic models for presentations, slides, history items and operation results.
Field aliases follow the persisted camelCase layout.
"""

from enum import Enum
from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SlideLayout(str, Enum):
    """Visual arrangement of a slide."""
    TITLE = "TITLE"
    CONTENT_RIGHT = "CONTENT_RIGHT"  # text left, image right
    CONTENT_LEFT = "CONTENT_LEFT"  # image left, text right
    FULL_IMAGE = "FULL_IMAGE"  # image background, text overlay
    IMAGE_ONLY = "IMAGE_ONLY"  # dedicated infographic


DEFAULT_LAYOUT = SlideLayout.CONTENT_RIGHT


class GenerationState(str, Enum):
    """Per-slide image job state. Runtime only, never persisted."""
    IDLE = "IDLE"
    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"


class GenerationStatus(str, Enum):
    """Document-level generation status."""
    IDLE = "IDLE"
    GENERATING_STRUCTURE = "GENERATING_STRUCTURE"
    GENERATING_IMAGES = "GENERATING_IMAGES"
    COMPLETE = "COMPLETE"
    ERROR = "ERROR"


class Language(str, Enum):
    """Output language for generated slide text."""
    ZH = "zh"
    EN = "en"

    @property
    def instruction(self) -> str:
        return "Chinese (Simplified)" if self is Language.ZH else "English"


PRIMARY_LANGUAGE = Language.ZH
SECONDARY_LANGUAGE = Language.EN


class ErrorKind(str, Enum):
    CREDENTIAL_MISSING = "CREDENTIAL_MISSING"
    GENERATION_FAILURE = "GENERATION_FAILURE"
    IMAGE_GENERATION_FAILURE = "IMAGE_GENERATION_FAILURE"
    PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
    INVALID_INPUT = "INVALID_INPUT"
    BUSY = "BUSY"
    NOT_FOUND = "NOT_FOUND"


def _coerce_layout(value: Any) -> Any:
    """Missing, null or unknown layouts hydrate to CONTENT_RIGHT."""
    if isinstance(value, SlideLayout):
        return value
    try:
        return SlideLayout(value)
    except ValueError:
        return DEFAULT_LAYOUT


class SlideDraft(BaseModel):
    """Single slide proposal returned by the outline job, before ids are assigned."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1)
    content: List[str]
    image_prompt: str = Field(alias="imagePrompt")
    layout: SlideLayout = DEFAULT_LAYOUT

    @field_validator("layout", mode="before")
    @classmethod
    def _layout(cls, value: Any) -> Any:
        return _coerce_layout(value)


class Slide(BaseModel):
    """A slide of the active presentation."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str = ""
    content: List[str] = Field(default_factory=list, description="Bullets, order significant")
    image_prompt: str = Field(default="", alias="imagePrompt")
    image_url: Optional[str] = Field(default=None, alias="imageUrl", description="data: URI of the generated image")
    layout: SlideLayout = DEFAULT_LAYOUT
    generation_state: GenerationState = Field(default=GenerationState.IDLE, exclude=True)

    @field_validator("layout", mode="before")
    @classmethod
    def _layout(cls, value: Any) -> Any:
        return _coerce_layout(value)

    @property
    def is_pending(self) -> bool:
        return self.generation_state is GenerationState.PENDING

    def to_record(self) -> dict:
        """Persisted projection: camelCase, no runtime state, imageUrl only when set."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Presentation(BaseModel):
    """The in-memory document being edited."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    topic: str = ""
    slides: List[Slide] = Field(default_factory=list)
    updated_at: int = Field(default=0, alias="updatedAt", description="Epoch milliseconds")


class HistoryItem(BaseModel):
    """Persisted snapshot of a presentation. Identity is the presentation id."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    topic: str = ""
    slides: List[Slide] = Field(default_factory=list)
    updated_at: int = Field(default=0, alias="updatedAt", description="Epoch milliseconds")

    @classmethod
    def from_presentation(cls, presentation: Presentation, updated_at: int, topic: Optional[str] = None) -> "HistoryItem":
        return cls(
            id=presentation.id,
            topic=topic if topic is not None else presentation.topic,
            slides=[slide.model_copy(deep=True) for slide in presentation.slides],
            updated_at=updated_at,
        )

    def to_presentation(self) -> Presentation:
        """Hydrate into a fresh presentation; every slide starts Idle."""
        return Presentation(
            id=self.id,
            topic=self.topic,
            slides=[slide.model_copy(deep=True, update={"generation_state": GenerationState.IDLE}) for slide in self.slides],
            updated_at=self.updated_at,
        )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "topic": self.topic,
            "updatedAt": self.updated_at,
            "slides": [slide.to_record() for slide in self.slides],
        }


class BatchReport(BaseModel):
    """Outcome counts of one batch image run."""
    requested: int = 0
    succeeded: int = 0
    failed: int = 0
    skipped: int = Field(default=0, description="Slides removed before their job resolved")


T = TypeVar("T")


class OperationResult(BaseModel, Generic[T]):
    """Tagged result of an orchestrated operation: ok with a value, or an error kind."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    ok: bool
    value: Optional[T] = None
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None, message: Optional[str] = None) -> "OperationResult":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: ErrorKind, message: Optional[str] = None) -> "OperationResult":
        return cls(ok=False, error=error, message=message)
