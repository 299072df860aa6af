"""Tests for the Organizer: validation, parsing, normalisation and fallbacks."""

import json

import pytest

from workflows.notedraw import (
    GenerateMode,
    Language,
    NoteDrawConfig,
    OrganizerError,
    Organizer,
    ValidationError,
)
from workflows.notedraw.organizer import AnalysisResponse, normalize_cards


class StubCompletionClient:
    """Returns a canned response (or raises) and records prompts."""

    def __init__(self, response: str | Exception):
        self.response = response
        self.calls: list[tuple[str, str]] = []

    async def complete(self, prompt: str, model: str) -> str:
        self.calls.append((prompt, model))
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


def section(n: int, keywords: list[str] | None = None) -> dict:
    return {
        "heading": f"Point {n}",
        "summary": f"Explanation of point {n}",
        "keywords": keywords if keywords is not None else [f"k{n}"],
    }


def card(title: str, sections: list[dict], index: int = 1) -> dict:
    return {"cardIndex": index, "cardTitle": title, "sections": sections}


SEVEN_POINT_RESPONSE = json.dumps(
    {
        "totalKnowledgePoints": 7,
        "cards": [
            card("Cell Biology", [section(n) for n in range(1, 5)], 1),
            card("Cell Biology", [section(n) for n in range(5, 8)], 2),
        ],
    }
)

INPUT_TEXT = "Cells are the basic unit of life. " * 10


def organizer_with(response, config: NoteDrawConfig) -> tuple[Organizer, StubCompletionClient]:
    client = StubCompletionClient(response)
    return Organizer(client=client, config=config), client


class TestValidation:
    def test_empty_text(self, notedraw_config):
        organizer, client = organizer_with("{}", notedraw_config)
        with pytest.raises(ValidationError, match="Input text is empty"):
            organizer.validate_input("   ")

    def test_too_short(self, notedraw_config):
        organizer, _ = organizer_with("{}", notedraw_config)
        with pytest.raises(ValidationError, match="Text too short"):
            organizer.validate_input("tiny")

    def test_too_long(self, notedraw_config):
        organizer, _ = organizer_with("{}", notedraw_config)
        with pytest.raises(ValidationError, match="Maximum 10000 characters"):
            organizer.validate_input("x" * 10001)

    async def test_rejected_before_any_call(self, notedraw_config):
        organizer, client = organizer_with(SEVEN_POINT_RESPONSE, notedraw_config)
        with pytest.raises(ValidationError):
            await organizer.organize("", Language.EN, GenerateMode.DETAILED)
        assert client.calls == []


class TestOrganize:
    async def test_seven_points_make_two_cards(self, notedraw_config):
        organizer, client = organizer_with(SEVEN_POINT_RESPONSE, notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.EN, GenerateMode.DETAILED)

        assert not result.failed
        assert result.total_knowledge_points == 7
        assert len(result.structures) >= 2
        assert all(1 <= len(s.modules) <= 4 for s in result.structures)
        assert result.structures[0].title == "Cell Biology (1/2)"
        assert result.structures[1].title == "Cell Biology (2/2)"
        assert result.structures[0].summary_context == "Point 1, Point 2, Point 3, Point 4"
        assert [m.id for m in result.structures[1].modules] == ["1", "2", "3"]

        prompt, model = client.calls[0]
        assert INPUT_TEXT.strip() in prompt
        assert model == "glm-4-flash"

    async def test_explicit_model_is_used(self, notedraw_config):
        organizer, client = organizer_with(SEVEN_POINT_RESPONSE, notedraw_config)
        await organizer.organize(INPUT_TEXT, Language.EN, model="deepseek-chat")
        assert client.calls[0][1] == "deepseek-chat"

    async def test_compact_mode_forces_one_card(self, notedraw_config):
        organizer, _ = organizer_with(SEVEN_POINT_RESPONSE, notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.EN, GenerateMode.COMPACT)

        assert len(result.structures) == 1
        assert len(result.structures[0].modules) <= 4
        assert result.structures[0].title == "Cell Biology"
        assert result.warnings

    async def test_oversized_card_is_split(self, notedraw_config):
        response = json.dumps({"cards": [card("Big", [section(n) for n in range(1, 10)])]})
        organizer, _ = organizer_with(response, notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.EN)

        assert [len(s.modules) for s in result.structures] == [4, 4, 1]
        assert result.structures[2].title == "Big (3/3)"
        # total falls back to the section count when the model omits it
        assert result.total_knowledge_points == 9

    async def test_chinese_summary_separator(self, notedraw_config):
        response = json.dumps({"cards": [card("细胞", [section(1), section(2)])]})
        organizer, _ = organizer_with(response, notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.ZH)

        assert result.structures[0].summary_context == "Point 1、Point 2"

    async def test_fenced_response_with_chatter(self, notedraw_config):
        response = f"Here you go:\n```json\n{SEVEN_POINT_RESPONSE}\n```"
        organizer, _ = organizer_with(response, notedraw_config)
        result = await organizer.organize(INPUT_TEXT, Language.EN)
        assert not result.failed

    async def test_keywords_capped_and_coerced(self, notedraw_config):
        response = json.dumps(
            {"cards": [card("K", [section(1, keywords="a, b，c, d")])]}
        )
        organizer, _ = organizer_with(response, notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.EN)

        assert result.structures[0].modules[0].keywords == ["a", "b", "c"]


class TestFallback:
    @pytest.mark.parametrize(
        "response",
        [
            "I'm sorry, I can't do that.",
            json.dumps({"cards": []}),
            json.dumps({"cards": [card("Empty", [{"heading": "  ", "keywords": []}])]}),
            json.dumps({"totalKnowledgePoints": 3}),
        ],
    )
    async def test_unusable_output_returns_fallback(self, notedraw_config, response):
        organizer, _ = organizer_with(response, notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.EN)

        assert result.failed
        assert len(result.structures) == 1
        assert result.structures[0].title == "Analysis Failed"
        assert result.structures[0].modules[0].content == result.error

    async def test_client_exception_returns_localized_fallback(self, notedraw_config):
        organizer, _ = organizer_with(ConnectionError("network unreachable"), notedraw_config)

        result = await organizer.organize(INPUT_TEXT, Language.ZH)

        assert result.failed
        assert result.error == "network unreachable"
        assert result.structures[0].title == "分析失败"

    def test_parse_response_raises(self, notedraw_config):
        organizer, _ = organizer_with("", notedraw_config)
        with pytest.raises(OrganizerError):
            organizer.parse_response("not json", Language.EN, GenerateMode.DETAILED)


class TestMockAnalysis:
    async def test_mock_mode_skips_the_model(self, notedraw_config):
        config = notedraw_config.model_copy(update={"mock_analysis": True})
        organizer, client = organizer_with(SEVEN_POINT_RESPONSE, config)

        short = await organizer.organize(INPUT_TEXT, Language.EN)
        long = await organizer.organize("word " * 200, Language.EN)

        assert client.calls == []
        assert len(short.structures) == 1
        assert len(long.structures) == 2
        assert long.total_knowledge_points == 4


class TestNormalizeCards:
    def test_blank_title_uses_first_heading(self):
        response = AnalysisResponse.model_validate({"cards": [card("  ", [section(1)])]})
        cards, _ = normalize_cards(response, GenerateMode.DETAILED)
        assert cards[0].title == "Point 1"

    def test_compact_truncates_sections(self):
        response = AnalysisResponse.model_validate(
            {"cards": [card("Many", [section(n) for n in range(1, 7)])]}
        )
        cards, warnings = normalize_cards(response, GenerateMode.COMPACT)
        assert len(cards) == 1
        assert len(cards[0].sections) == 4
        assert any("truncated" in w for w in warnings)


class TestDesignerRoundTrip:
    async def test_structures_design_in_every_combination(self, notedraw_config):
        from workflows.notedraw import VisualStyle, design_prompt

        organizer, _ = organizer_with(SEVEN_POINT_RESPONSE, notedraw_config)
        for mode in GenerateMode:
            for language in Language:
                result = await organizer.organize(INPUT_TEXT, language, mode)
                for structure in result.structures:
                    for style in VisualStyle:
                        designed = design_prompt(structure, style, language, mode)
                        assert designed.prompt
                        for module in structure.modules:
                            assert module.heading in designed.prompt
