"""
Designer: renders one structured card into an image-generation instruction.

Pure functions of their inputs. Module ``content`` never reaches the
instruction; the image shows headings and keywords only.
"""

from typing import Literal

from pydantic import BaseModel

from core.images import ImageProvider

from .prompts import (
    COMPACT_TEMPLATE,
    DETAILED_TEMPLATE,
    OUTPUT_LANGUAGE_LINES,
    PROVIDER_LINE_LIMITS,
    PROVIDER_SUFFIXES,
    SECTION_BLOCK,
    SIGNATURE_LINE,
    UNIVERSAL_NEGATIVE_SUFFIX,
)
from .state import GenerateMode, Language, LeftBrainData, VisualStyle
from .styles import get_style_config

MAX_KEYWORDS_PER_SECTION = 3
MAX_COMPACT_KEYWORDS = 6

Complexity = Literal["simple", "medium", "complex"]


class DesignedPrompt(BaseModel):
    prompt: str
    negative_prompt: str


def _quoted(items: list[str]) -> str:
    return ", ".join(f'"{item}"' for item in items)


def _signature_block(signature: str | None) -> str:
    if not signature or not signature.strip():
        return ""
    return f"\n{SIGNATURE_LINE.format(signature=signature.strip())}\n"


def _detailed_prompt(
    structure: LeftBrainData,
    style: VisualStyle,
    language: Language,
    signature: str | None,
) -> str:
    style_config = get_style_config(style)
    sections = "\n\n".join(
        SECTION_BLOCK.format(
            index=index,
            heading=module.heading,
            labels=_quoted(module.keywords[:MAX_KEYWORDS_PER_SECTION]),
        )
        for index, module in enumerate(structure.modules, start=1)
    )
    return DETAILED_TEMPLATE.format(
        title=structure.title,
        section_count=len(structure.modules),
        sections=sections,
        summary_context=structure.summary_context,
        signature_block=_signature_block(signature),
        style_keywords=style_config.prompt_keywords,
        color_palette=style_config.color_palette,
        language_line=OUTPUT_LANGUAGE_LINES[language],
        theme_keywords=structure.visual_theme_keywords,
    )


def _compact_prompt(
    structure: LeftBrainData,
    style: VisualStyle,
    language: Language,
    signature: str | None,
) -> str:
    style_config = get_style_config(style)
    keywords = [kw for module in structure.modules for kw in module.keywords]
    return COMPACT_TEMPLATE.format(
        title=structure.title,
        summary_context=structure.summary_context,
        keywords=_quoted(keywords[:MAX_COMPACT_KEYWORDS]),
        signature_block=_signature_block(signature),
        style_keywords=style_config.prompt_keywords,
        color_palette=style_config.color_palette,
        language_line=OUTPUT_LANGUAGE_LINES[language],
    )


_TEMPLATES = {
    GenerateMode.DETAILED: _detailed_prompt,
    GenerateMode.COMPACT: _compact_prompt,
}


def get_negative_prompt(style: VisualStyle) -> str:
    """Style negative prompt followed by the universal exclusion list."""
    return f"{get_style_config(style).negative_prompt}{UNIVERSAL_NEGATIVE_SUFFIX}"


def design_prompt(
    structure: LeftBrainData,
    style: VisualStyle,
    language: Language,
    mode: GenerateMode = GenerateMode.DETAILED,
    signature: str | None = None,
) -> DesignedPrompt:
    """Render the instruction and negative instruction for one card.

    Args:
        structure: Organizer output for the card
        style: Visual style
        language: Language of the text shown in the image
        mode: DETAILED renders one block per section; COMPACT flattens up to
            six keywords into a single illustration
        signature: Stamped bottom-right; omitted when None or blank

    Returns:
        DesignedPrompt (identical for identical inputs)
    """
    render = _TEMPLATES[GenerateMode(mode)]
    return DesignedPrompt(
        prompt=render(structure, style, language, signature),
        negative_prompt=get_negative_prompt(style),
    )


def design_prompts(
    structures: list[LeftBrainData],
    style: VisualStyle,
    language: Language,
    mode: GenerateMode = GenerateMode.DETAILED,
    signature: str | None = None,
) -> list[DesignedPrompt]:
    return [
        design_prompt(structure, style, language, mode, signature)
        for structure in structures
    ]


def optimize_prompt_for_style(base_prompt: str, style: VisualStyle) -> str:
    """Append the style's emphasis sentence."""
    return f"{base_prompt}\n\nSTYLE EMPHASIS: {get_style_config(style).emphasis}"


def assess_complexity(structure: LeftBrainData) -> Complexity:
    """Rough size class from section count and total content length."""
    module_count = len(structure.modules)
    content_length = sum(len(module.content) for module in structure.modules)

    if module_count <= 2 and content_length < 200:
        return "simple"
    if module_count <= 3 and content_length < 400:
        return "medium"
    return "complex"


def format_prompt_for_provider(prompt: str, provider: ImageProvider | str) -> str:
    """Adapt an instruction to a provider's prompt conventions."""
    name = ImageProvider(provider).value

    line_limit = PROVIDER_LINE_LIMITS.get(name)
    if line_limit is not None:
        return "\n".join(prompt.split("\n")[:line_limit])

    suffix = PROVIDER_SUFFIXES.get(name)
    if suffix:
        return f"{prompt}\n\n{suffix}"

    return prompt
