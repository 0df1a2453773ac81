from typing import List, Protocol, runtime_checkable

from deck_studio.utils.schemas import Language, SlideDraft


@runtime_checkable
class AIClient(Protocol):
    """
    Remote generation capability.

    generate_outline raises CredentialMissing or GenerationFailure.
    generate_image returns a `data:<mime>;base64,<payload>` URI or raises
    CredentialMissing or ImageGenerationFailure.
    """

    async def generate_outline(self, topic: str, language: Language) -> List[SlideDraft]:
        ...

    async def generate_image(self, prompt: str) -> str:
        ...
