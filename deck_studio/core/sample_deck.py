"""Bilingual sample deck showing every slide layout."""

from typing import Optional

from deck_studio.utils.schemas import Language, Presentation, Slide, SlideLayout
from .document import now_ms

_TOPIC = {
    Language.ZH: "演示文稿布局示例",
    Language.EN: "Presentation Layout Examples",
}

# (id, layout, {lang: title}, {lang: bullets}, image prompt)
_SLIDES = [
    (
        "ex-1",
        SlideLayout.TITLE,
        {Language.ZH: "未来科技趋势", Language.EN: "Future Tech Trends"},
        {
            Language.ZH: ["探索2025年的可能性", "演讲者：AI 助手"],
            Language.EN: ["Exploring the possibilities of 2025", "Presented by: AI Assistant"],
        },
        "A futuristic city skyline at sunset with flying cars, cyberpunk style, neon lights, highly detailed, 8k",
    ),
    (
        "ex-2",
        SlideLayout.CONTENT_RIGHT,
        {Language.ZH: "人工智能革命", Language.EN: "The AI Revolution"},
        {
            Language.ZH: ["自动化效率提升 300%", "深度学习突破瓶颈", "人机协作新模式"],
            Language.EN: [
                "Automation increases efficiency by 300%",
                "Deep learning breakthroughs",
                "New modes of human-machine collaboration",
            ],
        },
        "A robot hand shaking a human hand, digital particles, glowing blue connections, macro shot",
    ),
    (
        "ex-3",
        SlideLayout.CONTENT_LEFT,
        {Language.ZH: "可持续能源", Language.EN: "Sustainable Energy"},
        {
            Language.ZH: ["太阳能板效率翻倍", "全球碳中和目标", "绿色城市的崛起"],
            Language.EN: [
                "Solar panel efficiency doubled",
                "Global carbon neutrality goals",
                "The rise of green cities",
            ],
        },
        "Wind turbines in a green field with flowers, sunny blue sky, photorealistic, cinematic lighting",
    ),
    (
        "ex-4",
        SlideLayout.FULL_IMAGE,
        {Language.ZH: "展望未来", Language.EN: "Vision for Tomorrow"},
        {
            Language.ZH: ["科技为了更美好的生活", "连接每一个人"],
            Language.EN: ["Technology for a better life", "Connecting everyone everywhere"],
        },
        "An astronaut looking at earth from space, stars, galaxy background, awe-inspiring, wide angle",
    ),
    (
        "ex-5",
        SlideLayout.IMAGE_ONLY,
        {Language.ZH: "数据可视化", Language.EN: "Data Visualization"},
        {Language.ZH: [], Language.EN: []},
        "Flat vector illustration infographic in corporate Memphis style. Cream background. "
        "Header text 'DATA'. A large teal magnifying glass analyzing mustard yellow data blocks. "
        "Coral red connection lines forming a network. Clean lines, minimal shading, explanatory chart aesthetic.",
    ),
]


def sample_presentation(language: Language, created_at: Optional[int] = None) -> Presentation:
    created_at = created_at if created_at is not None else now_ms()
    return Presentation(
        id=f"example-{created_at}",
        topic=_TOPIC[language],
        slides=[
            Slide(
                id=slide_id,
                title=titles[language],
                content=list(bullets[language]),
                image_prompt=prompt,
                layout=layout,
            )
            for slide_id, layout, titles, bullets, prompt in _SLIDES
        ],
        updated_at=created_at,
    )
