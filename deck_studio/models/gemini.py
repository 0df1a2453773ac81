import re
import json
import base64
import logging
from typing import Any, List, Optional

from google import genai
from google.genai.types import (
    GenerateContentConfig,
    HttpOptions,
    ImageConfig,
)
from pydantic import TypeAdapter, ValidationError

from deck_studio.config import Settings, get_settings
from deck_studio.constants import MIN_OUTLINE_SLIDES, MAX_OUTLINE_SLIDES, MIN_BULLETS, MAX_BULLETS
from deck_studio.core.credentials import CredentialStore
from deck_studio.errors import CredentialMissing, GenerationFailure, ImageGenerationFailure
from deck_studio.prompts import OUTLINE_PROMPT, OUTLINE_SCHEMA
from deck_studio.utils.schemas import Language, SlideDraft

logger = logging.getLogger(__name__)

_DRAFTS_ADAPTER = TypeAdapter(List[SlideDraft])


def clean_response_text(text: str) -> str:
    """Strip thinking tokens and markdown fences around a JSON payload."""
    return re.sub(r'^.*?</think>\s*|```json\s*|\s*```', '', text, flags=re.DOTALL).strip()


def parse_outline(text: Optional[str]) -> List[SlideDraft]:
    """
    Validate an outline payload into slide drafts.

    Raises:
        GenerationFailure: Empty payload, invalid JSON or wrong shape
    """
    if not text or not text.strip():
        raise GenerationFailure("No data returned from AI")

    try:
        raw = json.loads(clean_response_text(text))
    except json.JSONDecodeError as e:
        raise GenerationFailure(f"Outline is not valid JSON: {e}") from e

    try:
        drafts = _DRAFTS_ADAPTER.validate_python(raw)
    except ValidationError as e:
        raise GenerationFailure(f"Outline has an unexpected shape: {e.error_count()} errors") from e

    if not drafts:
        raise GenerationFailure("Outline contains no slides")

    if not MIN_OUTLINE_SLIDES <= len(drafts) <= MAX_OUTLINE_SLIDES:
        logger.warning(f"[OUTLINE] Expected {MIN_OUTLINE_SLIDES}-{MAX_OUTLINE_SLIDES} slides, got {len(drafts)}")
    for draft in drafts:
        if not MIN_BULLETS <= len(draft.content) <= MAX_BULLETS:
            logger.warning(f"[OUTLINE] Slide '{draft.title}' has {len(draft.content)} bullets")

    return drafts


def image_data_uri(response: Any) -> str:
    """
    Extract the first inline image of a response as a data URI.

    Raises:
        ImageGenerationFailure: No image part in the response
    """
    candidates = getattr(response, "candidates", None) or []
    content = getattr(candidates[0], "content", None) if candidates else None
    for part in getattr(content, "parts", None) or []:
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            data = inline.data
            if isinstance(data, bytes):
                data = base64.b64encode(data).decode("ascii")
            return f"data:{inline.mime_type};base64,{data}"

    raise ImageGenerationFailure("No image data found in response")


class GeminiClient:
    """
    Gemini implementation of the AI client capability.

    A new genai.Client is built for every call so the credential currently in
    the store is always the one used. Calls are not retried.
    """

    def __init__(self, credentials: CredentialStore, settings: Optional[Settings] = None):
        self.credentials = credentials
        self.settings = settings or get_settings()

    async def _client(self) -> genai.Client:
        api_key = await self.credentials.get_credential()
        if not api_key:
            raise CredentialMissing()

        http_options = HttpOptions(base_url=self.settings.gemini_base_url) if self.settings.gemini_base_url else None
        return genai.Client(api_key=api_key, http_options=http_options)

    async def generate_outline(self, topic: str, language: Language) -> List[SlideDraft]:
        client = await self._client()
        logger.info(f"[OUTLINE] Requesting outline for '{topic}' ({language.value})")

        try:
            response = await client.aio.models.generate_content(
                model=self.settings.outline_model,
                contents=OUTLINE_PROMPT(topic, language),
                config=GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=OUTLINE_SCHEMA,
                ),
            )
        except Exception as e:
            logger.error(f"[OUTLINE] Error generating structure: {e}")
            raise GenerationFailure(str(e)) from e

        drafts = parse_outline(response.text)
        logger.info(f"[OUTLINE] ✅ Received {len(drafts)} slides")
        return drafts

    async def generate_image(self, prompt: str) -> str:
        client = await self._client()
        logger.info(f"[IMAGE] Requesting image: {prompt[:60]}...")

        try:
            response = await client.aio.models.generate_content(
                model=self.settings.image_model,
                contents=prompt,
                config=GenerateContentConfig(
                    image_config=ImageConfig(
                        aspect_ratio=self.settings.image_aspect_ratio,
                        image_size=self.settings.image_size,
                    ),
                ),
            )
        except Exception as e:
            logger.error(f"[IMAGE] Error generating image: {e}")
            raise ImageGenerationFailure(str(e)) from e

        return image_data_uri(response)
