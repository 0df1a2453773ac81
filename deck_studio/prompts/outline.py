from deck_studio.constants import MIN_OUTLINE_SLIDES, MAX_OUTLINE_SLIDES, MIN_BULLETS, MAX_BULLETS
from deck_studio.utils.schemas import Language, SlideLayout


def OUTLINE_PROMPT(topic: str, language: Language) -> str:
    lang = language.instruction
    return f"""
## Objective
Create a presentation outline for the topic: "{topic}".
Generate {MIN_OUTLINE_SLIDES} to {MAX_OUTLINE_SLIDES} slides.
Output language: {lang}.

## Per Slide
1. A catchy title (in {lang}).
2. {MIN_BULLETS}-{MAX_BULLETS} concise bullet points (in {lang}).
3. A highly detailed, descriptive image prompt for an AI image generator, written in English.
4. A layout, chosen by the function of the slide:
   - 'TITLE': only for the first slide (the cover).
   - 'CONTENT_RIGHT': standard content, text on the left and image on the right.
   - 'CONTENT_LEFT': standard content, image on the left and text on the right.
   - 'FULL_IMAGE': high visual impact, image background with a text overlay.
   - 'IMAGE_ONLY': complex concepts, processes, summaries or data that need a dedicated infographic.

## Image Prompts for 'IMAGE_ONLY'
Act as a world-class infographic designer. The prompt MUST describe an explanatory infographic:
- Art style: flat vector illustration, corporate Memphis style, clean lines, minimal shading.
- Palette: cream/off-white background (about #FDFBF7) with distinct section colors: mustard yellow, teal/mint, coral red, purple.
- Layout: a header area with large typography, visual comparisons or flowchart-like connections.
- Elements: stylized icons (brains, gears, documents), rounded UI containers, connection lines.
- Content: visualize the concept of the slide ("{topic}" or the slide sub-topic).

Example: "Flat vector illustration infographic. Cream background. Header text 'Growth'. A flowchart showing a mustard yellow seed connecting to a teal tree..."

For the other layouts use high-quality photorealistic, cinematic or 3D render styles that suit the theme.

Return JSON only.
"""


OUTLINE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {"type": "STRING"},
            "content": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
            },
            "imagePrompt": {"type": "STRING"},
            "layout": {
                "type": "STRING",
                "enum": [layout.value for layout in SlideLayout],
            },
        },
        "required": ["title", "content", "imagePrompt", "layout"],
    },
}
