"""Visual style catalog: rendering hints for each of the five styles."""

from pydantic import BaseModel

from .state import Language, VisualStyle


class StyleConfig(BaseModel):
    id: VisualStyle
    name: dict[Language, str]
    description: dict[Language, str]
    icon: str
    preview_colors: list[str]
    prompt_keywords: str
    color_palette: str
    negative_prompt: str
    emphasis: str

    def localized_name(self, language: Language) -> str:
        return self.name[language]


VISUAL_STYLES: dict[VisualStyle, StyleConfig] = {
    VisualStyle.SKETCH: StyleConfig(
        id=VisualStyle.SKETCH,
        name={Language.EN: "Hand-drawn Sketch", Language.ZH: "手绘清新"},
        description={
            Language.EN: "Warm marker style with soft colors and doodle elements",
            Language.ZH: "马克笔手绘风格，柔和配色，涂鸦元素",
        },
        icon="✏️",
        preview_colors=["#FFE4E1", "#98D8C8", "#F7DC6F", "#AED6F1"],
        prompt_keywords=(
            "hand-drawn style, marker pen illustration, soft pastel colors, cute doodles, "
            "warm and friendly, sketch notes style, whiteboard illustration"
        ),
        color_palette="soft pastels, warm tones, mint green, coral pink, light blue",
        negative_prompt="photorealistic, 3D render, dark colors, complex gradients",
        emphasis="Make it look hand-drawn with visible pen strokes and a warm, personal feel.",
    ),
    VisualStyle.BUSINESS: StyleConfig(
        id=VisualStyle.BUSINESS,
        name={Language.EN: "Professional Business", Language.ZH: "商务专业"},
        description={
            Language.EN: "Clean lines with navy blue palette and icon-based design",
            Language.ZH: "简洁线条，深蓝配色，图标化设计",
        },
        icon="💼",
        preview_colors=["#1E3A5F", "#FFFFFF", "#D4AF37", "#E8E8E8"],
        prompt_keywords=(
            "professional infographic, clean minimal design, corporate style, navy blue and white, "
            "icon-based, data visualization, business presentation"
        ),
        color_palette="navy blue, white, light gray, accent gold",
        negative_prompt="cartoon, childish, hand-drawn, messy",
        emphasis="Keep it professional and polished with precise alignment and corporate aesthetics.",
    ),
    VisualStyle.CUTE: StyleConfig(
        id=VisualStyle.CUTE,
        name={Language.EN: "Cute Illustration", Language.ZH: "可爱插画"},
        description={
            Language.EN: "Cartoon characters with rainbow colors and sticker-like feel",
            Language.ZH: "卡通人物，彩虹配色，贴纸感",
        },
        icon="🌈",
        preview_colors=["#FFB6C1", "#FFFACD", "#DDA0DD", "#87CEEB"],
        prompt_keywords=(
            "kawaii style, cute cartoon illustration, rainbow colors, sticker art, chibi characters, "
            "playful design, social media friendly"
        ),
        color_palette="rainbow colors, pink, yellow, light purple, bright and cheerful",
        negative_prompt="realistic, dark, serious, corporate",
        emphasis="Add adorable characters and playful elements that make learning fun.",
    ),
    VisualStyle.MINIMAL: StyleConfig(
        id=VisualStyle.MINIMAL,
        name={Language.EN: "Minimal Line Art", Language.ZH: "极简线稿"},
        description={
            Language.EN: "Black and white lines with geometric shapes and whitespace",
            Language.ZH: "黑白线条，几何形状，大量留白",
        },
        icon="⚪",
        preview_colors=["#FFFFFF", "#2C2C2C", "#E0E0E0", "#F5F5F5"],
        prompt_keywords=(
            "minimalist line art, black and white, geometric shapes, lots of white space, "
            "clean typography, modern design, abstract"
        ),
        color_palette="black, white, light gray",
        negative_prompt="colorful, detailed, complex, busy",
        emphasis="Embrace negative space and let the design breathe with elegant simplicity.",
    ),
    VisualStyle.CHALKBOARD: StyleConfig(
        id=VisualStyle.CHALKBOARD,
        name={Language.EN: "Vintage Chalkboard", Language.ZH: "复古黑板"},
        description={
            Language.EN: "Chalkboard background with chalk text and hand-written feel",
            Language.ZH: "黑板背景，粉笔字，手写风格",
        },
        icon="📚",
        preview_colors=["#2D4A3E", "#FFFFFF", "#F4D03F", "#E8DAEF"],
        prompt_keywords=(
            "chalkboard style, chalk drawing, blackboard background, hand-written text, "
            "educational, vintage classroom, teacher notes"
        ),
        color_palette="dark green or black background, white and colored chalk",
        negative_prompt="digital, modern, clean lines, bright colors",
        emphasis="Create an authentic classroom feel with chalk texture and educational charm.",
    ),
}


def get_style_config(style: VisualStyle | str) -> StyleConfig:
    """Look up a style; raises ValueError for unknown identifiers."""
    return VISUAL_STYLES[VisualStyle(style)]


def get_all_styles() -> list[StyleConfig]:
    return list(VISUAL_STYLES.values())


def get_default_style() -> VisualStyle:
    return VisualStyle.SKETCH
