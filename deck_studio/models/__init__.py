"""
Deck Studio Models Module

AI model integrations.
"""

from .base import AIClient
from .gemini import GeminiClient

__all__ = [
    "AIClient",
    "GeminiClient",
]
