"""
Deck Studio Utils Package

Provides the schemas shared by every layer.
"""

from .schemas import (
    SlideLayout,
    DEFAULT_LAYOUT,
    GenerationState,
    GenerationStatus,
    Language,
    PRIMARY_LANGUAGE,
    SECONDARY_LANGUAGE,
    ErrorKind,
    SlideDraft,
    Slide,
    Presentation,
    HistoryItem,
    BatchReport,
    OperationResult,
)

__all__ = [
    "SlideLayout",
    "DEFAULT_LAYOUT",
    "GenerationState",
    "GenerationStatus",
    "Language",
    "PRIMARY_LANGUAGE",
    "SECONDARY_LANGUAGE",
    "ErrorKind",
    "SlideDraft",
    "Slide",
    "Presentation",
    "HistoryItem",
    "BatchReport",
    "OperationResult",
]
