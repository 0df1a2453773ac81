from .outline import OUTLINE_PROMPT, OUTLINE_SCHEMA

__all__ = [
    "OUTLINE_PROMPT",
    "OUTLINE_SCHEMA",
]
