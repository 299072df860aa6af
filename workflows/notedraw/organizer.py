"""
Organizer: decomposes input text into card structures with one model call.

The text model returns a JSON object with cards and sections; the result is
parsed tolerantly, validated, then normalised so every card carries 1-4
sections regardless of what the model produced.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaValidationError

from workflows.shared.llm_utils import (
    DEFAULT_TEXT_MODEL,
    TextModel,
    extract_json_from_response,
    extract_response_content,
    get_llm,
)

from .config import NoteDrawConfig, get_notedraw_config
from .errors import OrganizerError, ValidationError
from .prompts import get_organizer_prompt
from .state import ContentModule, GenerateMode, Language, LeftBrainData

logger = logging.getLogger(__name__)

MAX_KEYWORDS = 3
MAX_THEME_KEYWORDS = 5

SUMMARY_SEPARATORS: dict[Language, str] = {
    Language.EN: ", ",
    Language.ZH: "、",
}


# =============================================================================
# Text completion client
# =============================================================================


class TextCompletionClient(Protocol):
    """Single-shot text completion: instruction in, generated text out."""

    async def complete(self, prompt: str, model: str) -> str: ...


class LangChainCompletionClient:
    """TextCompletionClient backed by the shared LangChain model factory."""

    def __init__(self, temperature: float = 0.1, max_tokens: int = 4096):
        self.temperature = temperature
        self.max_tokens = max_tokens

    async def complete(self, prompt: str, model: str) -> str:
        llm = get_llm(model, max_tokens=self.max_tokens, temperature=self.temperature)
        response = await llm.ainvoke([{"role": "user", "content": prompt}])
        return extract_response_content(response)


# =============================================================================
# Response schema
# =============================================================================


class AnalysisSection(BaseModel):
    model_config = ConfigDict(extra="ignore")

    heading: str = ""
    summary: str = ""
    keywords: list[str] = Field(default_factory=list)

    @field_validator("heading", "summary", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("keywords", mode="before")
    @classmethod
    def _coerce_keywords(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            value = value.replace("，", ",").split(",")
        return [str(item).strip() for item in value if str(item).strip()]


class AnalysisCard(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    card_index: Optional[int] = Field(default=None, alias="cardIndex")
    card_title: str = Field(default="", alias="cardTitle")
    sections: list[AnalysisSection] = Field(default_factory=list)


class AnalysisResponse(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    total_knowledge_points: Optional[int] = Field(default=None, alias="totalKnowledgePoints")
    cards: list[AnalysisCard]

    @field_validator("total_knowledge_points", mode="before")
    @classmethod
    def _coerce_total(cls, value: Any) -> Optional[int]:
        try:
            return int(value)
        except (TypeError, ValueError):
            return None


# =============================================================================
# Result
# =============================================================================


@dataclass
class OrganizeResult:
    """Organizer outcome.

    On failure ``error`` is set and ``structures`` holds a single localized
    fallback card, so downstream code always has one unit to report on.
    Check ``failed`` rather than inspecting titles.
    """

    total_knowledge_points: int
    structures: list[LeftBrainData]
    raw_analysis: Optional[Any] = None
    error: Optional[str] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(
        cls,
        structures: list[LeftBrainData],
        total_knowledge_points: int,
        raw_analysis: Optional[Any] = None,
        warnings: Optional[list[str]] = None,
    ) -> "OrganizeResult":
        return cls(
            total_knowledge_points=total_knowledge_points,
            structures=structures,
            raw_analysis=raw_analysis,
            warnings=warnings or [],
        )

    @classmethod
    def err(cls, error: str, language: Language) -> "OrganizeResult":
        return cls(
            total_knowledge_points=0,
            structures=[fallback_structure(language, error)],
            error=error,
        )


def fallback_structure(language: Language, message: str) -> LeftBrainData:
    """Localized card reporting an analysis failure."""
    is_zh = language == Language.ZH
    return LeftBrainData(
        title="分析失败" if is_zh else "Analysis Failed",
        summary_context="请重试或简化输入内容" if is_zh else "Please retry or simplify input",
        visual_theme_keywords="error, retry",
        modules=[
            ContentModule(
                id="1",
                heading="错误信息" if is_zh else "Error Info",
                content=message,
                keywords=[],
            )
        ],
    )


def mock_structures(text: str, language: Language) -> list[LeftBrainData]:
    """Deterministic structures for development runs without a text model."""
    is_zh = language == Language.ZH
    card_count = 2 if len(text) > 500 else 1
    excerpt = text[:100] + ("..." if len(text) > 100 else "")

    structures = []
    for index in range(1, card_count + 1):
        structures.append(
            LeftBrainData(
                title=f"开发模式卡片 {index}/{card_count}" if is_zh else f"Dev Mode Card {index}/{card_count}",
                summary_context=(
                    f"这是开发占位模式生成的模拟数据。原文长度: {len(text)}字符"
                    if is_zh
                    else f"This is mock data from dev placeholder mode. Input length: {len(text)} chars"
                ),
                visual_theme_keywords="development, placeholder, mock, test",
                modules=[
                    ContentModule(
                        id="1",
                        heading="模拟知识点 1" if is_zh else "Mock Point 1",
                        content=excerpt,
                        keywords=["mock", "dev", "test"],
                    ),
                    ContentModule(
                        id="2",
                        heading="模拟知识点 2" if is_zh else "Mock Point 2",
                        content="开发模式下不调用真实AI API" if is_zh else "Real AI API is not called in dev mode",
                        keywords=["placeholder", "development"],
                    ),
                ],
            )
        )
    return structures


# =============================================================================
# Normalisation
# =============================================================================


@dataclass
class NormalizedCard:
    title: str
    sections: list[AnalysisSection]


def _clean_sections(sections: list[AnalysisSection]) -> list[AnalysisSection]:
    cleaned = []
    for section in sections:
        heading = section.heading.strip()
        if not heading:
            continue
        cleaned.append(
            AnalysisSection(
                heading=heading,
                summary=section.summary.strip(),
                keywords=section.keywords[:MAX_KEYWORDS],
            )
        )
    return cleaned


def normalize_cards(
    response: AnalysisResponse,
    mode: GenerateMode,
    max_sections: int = 4,
    compact_max_cards: int = 1,
) -> tuple[list[NormalizedCard], list[str]]:
    """Enforce the per-mode card shape.

    Returns:
        Tuple of (cards, warnings)
    """
    warnings: list[str] = []
    cards: list[NormalizedCard] = []
    for card in response.cards:
        sections = _clean_sections(card.sections)
        if not sections:
            warnings.append(f"Dropped card '{card.card_title}' with no usable sections")
            continue
        title = card.card_title.strip() or sections[0].heading
        cards.append(NormalizedCard(title=title, sections=sections))

    if mode == GenerateMode.COMPACT:
        if len(cards) > compact_max_cards:
            warnings.append(f"Compact mode: kept {compact_max_cards} of {len(cards)} cards")
            cards = cards[:compact_max_cards]
        for card in cards:
            if len(card.sections) > max_sections:
                warnings.append(
                    f"Compact mode: truncated '{card.title}' from {len(card.sections)} to {max_sections} sections"
                )
                card.sections = card.sections[:max_sections]
        return cards, warnings

    split: list[NormalizedCard] = []
    for card in cards:
        if len(card.sections) <= max_sections:
            split.append(card)
            continue
        warnings.append(
            f"Split '{card.title}' with {len(card.sections)} sections into cards of {max_sections}"
        )
        for start in range(0, len(card.sections), max_sections):
            split.append(NormalizedCard(title=card.title, sections=card.sections[start : start + max_sections]))
    return split, warnings


def to_left_brain_data(card: NormalizedCard, index: int, total: int, language: Language) -> LeftBrainData:
    """Map a normalised card to LeftBrainData (index is 1-based)."""
    suffix = f" ({index}/{total})" if total > 1 else ""
    keywords = [kw for section in card.sections for kw in section.keywords]
    return LeftBrainData(
        title=f"{card.title}{suffix}",
        summary_context=SUMMARY_SEPARATORS[language].join(s.heading for s in card.sections),
        visual_theme_keywords=", ".join(keywords[:MAX_THEME_KEYWORDS]),
        modules=[
            ContentModule(
                id=str(position),
                heading=section.heading,
                content=section.summary,
                keywords=section.keywords,
            )
            for position, section in enumerate(card.sections, start=1)
        ],
    )


# =============================================================================
# Organizer
# =============================================================================


class Organizer:
    """Turns input text into card structures.

    Usage:
        organizer = Organizer()
        result = await organizer.organize(text, Language.EN, GenerateMode.DETAILED)
        if result.failed:
            ...
    """

    def __init__(
        self,
        client: TextCompletionClient | None = None,
        config: NoteDrawConfig | None = None,
        model: TextModel | str = DEFAULT_TEXT_MODEL,
    ):
        self._client = client or LangChainCompletionClient()
        self._config = config or get_notedraw_config()
        self._model = model

    def validate_input(self, text: str | None) -> str:
        """Return the stripped text or raise ValidationError."""
        if text is None or not text.strip():
            raise ValidationError("Input text is empty")
        if len(text) > self._config.max_input_length:
            raise ValidationError(
                f"Text too long. Maximum {self._config.max_input_length} characters allowed."
            )
        stripped = text.strip()
        if len(stripped) < self._config.min_input_length:
            raise ValidationError(
                f"Text too short. Minimum {self._config.min_input_length} characters required."
            )
        return stripped

    def parse_response(
        self,
        response: str,
        language: Language,
        mode: GenerateMode,
    ) -> OrganizeResult:
        """Parse and normalise a raw model response.

        Raises:
            OrganizerError: Unparseable output, schema mismatch or no usable cards
        """
        try:
            data = extract_json_from_response(response)
        except ValueError as e:
            raise OrganizerError(f"Failed to parse analysis response: {e}") from e

        try:
            analysis = AnalysisResponse.model_validate(data)
        except SchemaValidationError as e:
            raise OrganizerError(
                f"Analysis response has unexpected shape: {e.error_count()} errors"
            ) from e

        cards, warnings = normalize_cards(
            analysis,
            mode,
            max_sections=self._config.max_sections_per_card,
            compact_max_cards=self._config.compact_max_cards,
        )
        for warning in warnings:
            logger.warning(warning)

        if not cards:
            raise OrganizerError("No cards generated")

        structures = [
            to_left_brain_data(card, index, len(cards), language)
            for index, card in enumerate(cards, start=1)
        ]

        total = analysis.total_knowledge_points
        if total is None or total <= 0:
            total = sum(len(s.modules) for s in structures)

        return OrganizeResult.ok(structures, total, raw_analysis=data, warnings=warnings)

    async def organize(
        self,
        text: str,
        language: Language,
        mode: GenerateMode = GenerateMode.DETAILED,
        model: TextModel | str | None = None,
    ) -> OrganizeResult:
        """Analyse text into 1..N card structures.

        Raises:
            ValidationError: Empty, too short or too long input (before any call)

        Returns:
            OrganizeResult; model, network and parse failures come back as
            ``OrganizeResult.err`` with the fallback structure
        """
        text = self.validate_input(text)
        language = Language(language)
        mode = GenerateMode(mode)
        logger.info(f"Starting analysis, mode: {mode.value}, text length: {len(text)}")

        if self._config.mock_analysis:
            logger.info("Mock analysis enabled, returning canned structures")
            structures = mock_structures(text, language)
            return OrganizeResult.ok(
                structures,
                len(structures) * 2,
                raw_analysis={"mock": True, "input_length": len(text)},
            )

        model_name = getattr(model or self._model, "value", model or self._model)
        prompt = get_organizer_prompt(
            text, language, mode, max_sections=self._config.max_sections_per_card
        )

        try:
            response = await self._client.complete(prompt, model_name)
            logger.debug(f"Raw analysis response: {response[:500]}")
            result = self.parse_response(response, language, mode)
        except OrganizerError as e:
            logger.error(f"Analysis failed: {e.message}")
            return OrganizeResult.err(e.message, language)
        except Exception as e:
            logger.error(f"Analysis call failed: {e}")
            return OrganizeResult.err(str(e) or type(e).__name__, language)

        logger.info(
            f"Parsed: {result.total_knowledge_points} knowledge points, "
            f"{len(result.structures)} cards"
        )
        return result
