"""Prompt templates for the note pipeline.

Organizer prompts ask the text model for a strict JSON decomposition; designer
templates render one card into an image-generation instruction. Only section
headings and keywords are ever placed in image instructions.
"""

from .state import GenerateMode, Language

# =============================================================================
# Organizer
# =============================================================================

ORGANIZER_MODE_INSTRUCTIONS: dict[GenerateMode, dict[Language, str]] = {
    GenerateMode.COMPACT: {
        Language.EN: (
            "[STRICT] User selected compact mode. You MUST output only 1 card "
            "with max 4 sections. Pick the most important content."
        ),
        Language.ZH: "【强制要求】用户选择了精简模式，你必须只生成1张卡片，最多4个知识点。选择最重要的内容。",
    },
    GenerateMode.DETAILED: {
        Language.EN: (
            "[DETAILED MODE] Decide card count by knowledge points: <=4 points = 1 card, "
            ">4 points = multiple cards (each <=4 sections)"
        ),
        Language.ZH: "【详细模式】根据知识点数量决定卡片数量：≤4个知识点=1张图，>4个知识点=多张图（每张≤4个Section）",
    },
}

ORGANIZER_PROMPT_EN = """You are a Visual Note Architect, expert at transforming long text into structured visual notes.

{mode_instruction}

## Analysis Steps
1. **Extract Knowledge Points**: Read the text, identify all core points
2. **Quantity Decision**: Count points, decide how many cards to generate
3. **Content Restructure**: Reorganize into complete short sentences, separated by semicolons
4. **Structured Output**: Output JSON in the required format

## Output Rules
- Max {max_sections} sections per card
- **heading**: at most 8 words, a concise summary
- **keywords**: 2-3 understandable phrases of 5-10 words each. These are displayed on the image, so they must be phrases, not single words
- **summary**: 2-3 complete sentences for reference during editing. NOT displayed on the image

## Text to Analyze
\"\"\"
{text}
\"\"\"

## Response Format (strict JSON)
**IMPORTANT**: All heading, keywords, and summary MUST be in English.

{{
  "totalKnowledgePoints": 3,
  "cards": [
    {{
      "cardIndex": 1,
      "cardTitle": "RAG Retrieval Augmented Generation",
      "sections": [
        {{
          "heading": "Retrieval Stage",
          "keywords": ["Retrieve docs from knowledge base", "Match user query", "Return relevant chunks"],
          "summary": "First retrieve relevant documents from the knowledge base; find the closest chunks by semantic matching."
        }}
      ]
    }}
  ]
}}

Return ONLY the JSON, no explanations or markdown code blocks."""

ORGANIZER_PROMPT_ZH = """你是一位视觉笔记架构师，专精于将长文转化为结构化的视觉笔记。

{mode_instruction}

## 分析步骤
1. **知识点提取**：阅读全文，识别所有核心知识点
2. **数量决策**：统计知识点数量，决定生成几张卡片
3. **内容重组**：将原文重组为多个完整短句，用分号分隔
4. **结构输出**：按格式输出JSON

## 输出规则
- 每张卡片最多{max_sections}个Section
- **heading（标题）**：≤8字，精炼概括
- **keywords（关键短语）**：2-3个可理解的短语，每个5-10字。这是图片上显示的核心内容，必须是短语而不是单词
- **summary（详细说明）**：30-50字，2-3个完整句子，用于编辑时参考，不会显示在图片上

## 待分析文本
\"\"\"
{text}
\"\"\"

## 返回格式（严格JSON）
**重要提示**：所有 heading、keywords 和 summary 都必须使用中文。

{{
  "totalKnowledgePoints": 3,
  "cards": [
    {{
      "cardIndex": 1,
      "cardTitle": "RAG检索增强生成",
      "sections": [
        {{
          "heading": "检索阶段",
          "keywords": ["从知识库检索文档", "匹配用户问题", "返回相关片段"],
          "summary": "先根据用户问题从知识库中检索相关文档；通过语义匹配找到最相关的内容片段。"
        }}
      ]
    }}
  ]
}}

只返回JSON，不要任何解释或markdown代码块标记。"""

ORGANIZER_PROMPTS: dict[Language, str] = {
    Language.EN: ORGANIZER_PROMPT_EN,
    Language.ZH: ORGANIZER_PROMPT_ZH,
}


def get_organizer_prompt(
    text: str,
    language: Language,
    mode: GenerateMode,
    max_sections: int = 4,
) -> str:
    return ORGANIZER_PROMPTS[language].format(
        mode_instruction=ORGANIZER_MODE_INSTRUCTIONS[mode][language],
        max_sections=max_sections,
        text=text,
    )


# =============================================================================
# Designer
# =============================================================================

UNIVERSAL_NEGATIVE_SUFFIX = (
    ", blurry, low quality, distorted text, watermark, multiple frames, "
    "comic panels, photo-realistic"
)

OUTPUT_LANGUAGE_LINES: dict[Language, str] = {
    Language.EN: "All text in the image must be in English.",
    Language.ZH: "All text in the image must be in Simplified Chinese.",
}

SIGNATURE_LINE = 'Bottom right corner: "{signature}"'

SECTION_BLOCK = """Section {index}: "{heading}"
Icon: A cute hand-drawn icon representing "{heading}"
Text labels: {labels}"""

DETAILED_TEMPLATE = """A cute hand-drawn notebook style infographic showing "{title}".

Main title: "{title}"

{section_count} main sections with cute icons:

{sections}

Center connecting element: "{summary_context}" with flowing arrows connecting all sections
{signature_block}
Style: {style_keywords}
Color palette: {color_palette}

Design requirements:
- Hand-drawn sketchy lines with warm, personal feel
- Clear visual hierarchy with the title at top
- Each section has its own cute icon and section title
- Display the text labels clearly in each section (readable short phrases)
- Text in speech bubbles or text boxes with clean handwritten font
- Balanced layout: icons + text labels, not too crowded
- Clean and easy to scan at a glance
- {language_line}
- Aspect ratio: 3:4 (portrait, suitable for mobile)
- Theme: {theme_keywords}"""

COMPACT_TEMPLATE = """A cute hand-drawn visual note card about "{title}".

Central focus: {summary_context}

Key points displayed with cute icons:
{keywords}
{signature_block}
Style: {style_keywords}
Colors: {color_palette}

Requirements:
- Single cohesive illustration
- Hand-drawn aesthetic with warm colors
- Clear, readable text labels
- {language_line}
- Aspect ratio: 3:4 (portrait)"""

PROVIDER_SUFFIXES: dict[str, str] = {
    "replicate": "Quality tags: masterpiece, best quality, highly detailed",
    "fal": "high quality, detailed illustration",
}

# Line budget for providers that prefer short prompts
PROVIDER_LINE_LIMITS: dict[str, int] = {
    "openai": 10,
}
