"""
Deck Studio Core Module

Document model, generation orchestrator and autosave.
"""

from .credentials import CredentialStore, PreferenceStore
from .document import PresentationDocument, presentation_from_drafts
from .events import GenerationObserver
from .generation import GenerationOrchestrator
from .autosave import AutosaveScheduler, AsyncioScheduler, Debouncer

__all__ = [
    "CredentialStore",
    "PreferenceStore",
    "PresentationDocument",
    "presentation_from_drafts",
    "GenerationObserver",
    "GenerationOrchestrator",
    "AutosaveScheduler",
    "AsyncioScheduler",
    "Debouncer",
]
