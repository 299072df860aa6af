"""End-to-end tests for the pipeline orchestrator with scripted collaborators."""

import json

import pytest

from core.images import ImageProvider, PaintRequest, PaintResult
from workflows.notedraw import (
    AIConfig,
    CallbackProgressSink,
    GenerateMode,
    GenerateRequest,
    InMemoryCreditLedger,
    Language,
    Organizer,
    PipelineFailed,
    PipelineOrchestrator,
    RecordingProgressSink,
    StageChanged,
    StateTransitionError,
    UnitCompleted,
    UnitStarted,
    UnitStatus,
    ValidationError,
    VisualStyle,
)

TEXT = "Photosynthesis turns light into chemical energy inside plant cells. " * 5

TWO_CARD_RESPONSE = json.dumps(
    {
        "totalKnowledgePoints": 6,
        "cards": [
            {
                "cardTitle": "Photosynthesis",
                "sections": [
                    {"heading": f"Step {n}", "summary": "details", "keywords": [f"k{n}"]}
                    for n in range(1, 5)
                ],
            },
            {
                "cardTitle": "Photosynthesis",
                "sections": [
                    {"heading": f"Step {n}", "summary": "details", "keywords": [f"k{n}"]}
                    for n in range(5, 7)
                ],
            },
        ],
    }
)


class StubCompletionClient:
    def __init__(self, response: str):
        self.response = response

    async def complete(self, prompt: str, model: str) -> str:
        return self.response


class StubPainter:
    """Succeeds with numbered URLs, or fails with a fixed message."""

    def __init__(self, fail_with: str | None = None):
        self.fail_with = fail_with
        self.requests: list[PaintRequest] = []

    async def paint(self, request: PaintRequest) -> PaintResult:
        self.requests.append(request)
        if self.fail_with:
            return PaintResult.failure(self.fail_with, "provider")
        return PaintResult.from_url(f"https://cdn.test/{len(self.requests)}.png")


class ExplodingOrganizer(Organizer):
    async def organize(self, text, language, mode=GenerateMode.DETAILED, model=None):
        raise RuntimeError("database unavailable")


class FailOnDoneSink(RecordingProgressSink):
    def emit(self, event):
        super().emit(event)
        if isinstance(event, StageChanged) and event.stage == "done":
            raise RuntimeError("sink disconnected")


def make_orchestrator(config, painter=None, response=TWO_CARD_RESPONSE, credits=None, organizer=None):
    organizer = organizer or Organizer(client=StubCompletionClient(response), config=config)
    return PipelineOrchestrator(
        organizer=organizer,
        painter=painter or StubPainter(),
        config=config,
        credits=credits,
    )


def request(**kwargs) -> GenerateRequest:
    return GenerateRequest(input_text=TEXT, **kwargs)


class TestGenerate:
    async def test_happy_path(self, notedraw_config):
        painter = StubPainter()
        sink = RecordingProgressSink()
        orchestrator = make_orchestrator(notedraw_config, painter)

        units = await orchestrator.generate(
            request(ai_config=AIConfig(api_provider=ImageProvider.FAL, image_model="flux-pro")),
            sink,
        )

        assert [u.order for u in units] == [0, 1]
        assert all(u.status == UnitStatus.COMPLETED for u in units)
        assert [u.image_ref for u in units] == ["https://cdn.test/1.png", "https://cdn.test/2.png"]
        assert all(u.instruction and u.negative_instruction for u in units)
        assert all(u.original_text == TEXT for u in units)
        assert painter.requests[0].provider == ImageProvider.FAL
        assert painter.requests[0].model == "flux-pro"
        assert painter.requests[0].negative_instruction == units[0].negative_instruction
        assert sink.of_type(PipelineFailed) == []

    async def test_event_order(self, notedraw_config):
        sink = RecordingProgressSink()
        await make_orchestrator(notedraw_config).generate(request(), sink)

        kinds = [
            event.stage if isinstance(event, StageChanged) else type(event).__name__
            for event in sink.events
        ]
        assert kinds == [
            "organizing",
            "designing",
            "UnitStarted",
            "painting",
            "UnitCompleted",
            "UnitStarted",
            "painting",
            "UnitCompleted",
            "done",
        ]
        assert sink.of_type(UnitStarted)[1] == UnitStarted(1, 2)
        assert sink.events[3].message == "Creating visual note 1 of 2..."

    async def test_painter_always_fails(self, notedraw_config):
        sink = RecordingProgressSink()
        orchestrator = make_orchestrator(notedraw_config, StubPainter(fail_with="quota exceeded"))

        units = await orchestrator.generate(request(), sink)

        assert len(units) == 2
        assert all(u.status == UnitStatus.FAILED for u in units)
        assert all(u.error_message == "quota exceeded" for u in units)
        assert sink.of_type(PipelineFailed) == []
        assert sink.events[-1] == StageChanged("done", "All visual notes generated!")

    async def test_organizer_soft_failure(self, notedraw_config):
        painter = StubPainter()
        sink = RecordingProgressSink()
        orchestrator = make_orchestrator(notedraw_config, painter, response="no json at all")

        units = await orchestrator.generate(request(), sink)

        assert len(units) == 1
        assert units[0].status == UnitStatus.FAILED
        assert units[0].structure.title == "Analysis Failed"
        assert units[0].error_message
        assert painter.requests == []
        assert len(sink.of_type(UnitCompleted)) == 1
        assert sink.of_type(PipelineFailed) == []

    async def test_hard_failure_before_units(self, notedraw_config):
        sink = RecordingProgressSink()
        organizer = ExplodingOrganizer(config=notedraw_config)
        orchestrator = make_orchestrator(notedraw_config, organizer=organizer)

        units = await orchestrator.generate(request(language=Language.ZH), sink)

        assert len(units) == 1
        assert units[0].status == UnitStatus.FAILED
        assert units[0].error_message == "database unavailable"
        assert units[0].structure.title == "分析失败"
        failures = sink.of_type(PipelineFailed)
        assert len(failures) == 1
        assert failures[0].message == "database unavailable"

    async def test_hard_failure_after_painting_keeps_units(self, notedraw_config):
        sink = FailOnDoneSink()
        units = await make_orchestrator(notedraw_config).generate(request(), sink)

        assert all(u.status == UnitStatus.COMPLETED for u in units)
        assert len(sink.of_type(PipelineFailed)) == 1

    async def test_validation_error_raises_before_events(self, notedraw_config):
        sink = RecordingProgressSink()
        orchestrator = make_orchestrator(notedraw_config)
        with pytest.raises(ValidationError):
            await orchestrator.generate(GenerateRequest(input_text="short"), sink)
        assert sink.events == []

    async def test_compact_mode_single_unit(self, notedraw_config):
        units = await make_orchestrator(notedraw_config).generate(request(mode=GenerateMode.COMPACT))
        assert len(units) == 1
        assert "Key points displayed with cute icons" in units[0].instruction

    async def test_signature_falls_back_to_config(self, notedraw_config):
        config = notedraw_config.model_copy(update={"default_signature": "NoteDraw"})
        units = await make_orchestrator(config).generate(request())
        assert 'Bottom right corner: "NoteDraw"' in units[0].instruction

        units = await make_orchestrator(config).generate(request(signature="Ada"))
        assert 'Bottom right corner: "Ada"' in units[0].instruction

    async def test_callback_sink(self, notedraw_config):
        stages, started, completed, errors = [], [], [], []
        sink = CallbackProgressSink(
            on_stage_change=lambda stage, message: stages.append(stage),
            on_unit_start=lambda index, total: started.append((index, total)),
            on_unit_complete=lambda index, unit: completed.append(unit.status),
            on_error=errors.append,
        )
        await make_orchestrator(notedraw_config).generate(request(), sink)

        assert stages[0] == "organizing"
        assert stages[-1] == "done"
        assert started == [(0, 2), (1, 2)]
        assert completed == [UnitStatus.COMPLETED, UnitStatus.COMPLETED]
        assert errors == []


class TestPlaceholder:
    async def test_placeholder_skips_painter_and_credits(self, notedraw_config):
        painter = StubPainter()
        ledger = InMemoryCreditLedger(balance=100)
        orchestrator = make_orchestrator(notedraw_config, painter, credits=ledger)

        units = await orchestrator.generate(request(ai_config=AIConfig(use_placeholder=True)))

        assert all(u.status == UnitStatus.COMPLETED for u in units)
        assert all(u.image_ref.startswith("data:image/svg+xml;base64,") for u in units)
        assert painter.requests == []
        assert ledger.charges == [(1, "content analysis")]


class TestCredits:
    async def test_image_credits_gate_each_unit(self, notedraw_config):
        ledger = InMemoryCreditLedger(balance=6)
        painter = StubPainter()
        orchestrator = make_orchestrator(notedraw_config, painter, credits=ledger)

        units = await orchestrator.generate(request())

        assert units[0].status == UnitStatus.COMPLETED
        assert units[1].status == UnitStatus.FAILED
        assert units[1].error_message == "Insufficient credits"
        assert len(painter.requests) == 1
        assert ledger.balance == 0

    async def test_failed_images_are_not_charged(self, notedraw_config):
        ledger = InMemoryCreditLedger(balance=100)
        orchestrator = make_orchestrator(notedraw_config, StubPainter(fail_with="boom"), credits=ledger)

        await orchestrator.generate(request())

        assert ledger.charges == [(1, "content analysis")]

    async def test_no_credits_for_analysis_is_a_hard_failure(self, notedraw_config):
        sink = RecordingProgressSink()
        orchestrator = make_orchestrator(notedraw_config, credits=InMemoryCreditLedger(balance=0))

        units = await orchestrator.generate(request(), sink)

        assert len(units) == 1
        assert units[0].error_message == "Insufficient credits"
        failures = sink.of_type(PipelineFailed)
        assert len(failures) == 1
        assert failures[0].user_message == "Not enough credits. Please top up to continue."


class TestRegenerate:
    async def test_regenerate_leaves_siblings_untouched(self, notedraw_config):
        painter = StubPainter()
        orchestrator = make_orchestrator(notedraw_config, painter)
        units = await orchestrator.generate(request())
        sibling_before = units[0].model_copy()

        unit = await orchestrator.regenerate_unit(units[1], VisualStyle.CHALKBOARD, Language.EN)

        assert unit is units[1]
        assert unit.status == UnitStatus.COMPLETED
        assert unit.image_ref == "https://cdn.test/3.png"
        assert units[0] == sibling_before

    async def test_completed_events_keep_their_snapshot(self, notedraw_config):
        sink = RecordingProgressSink()
        orchestrator = make_orchestrator(notedraw_config)
        units = await orchestrator.generate(request(), sink)

        await orchestrator.regenerate_unit(units[1], VisualStyle.SKETCH, Language.EN)

        second = sink.of_type(UnitCompleted)[1]
        assert second.unit is not units[1]
        assert second.unit.image_ref == "https://cdn.test/2.png"
        assert units[1].image_ref == "https://cdn.test/3.png"

    async def test_regenerate_uses_detailed_mode(self, notedraw_config):
        orchestrator = make_orchestrator(notedraw_config)
        units = await orchestrator.generate(request(mode=GenerateMode.COMPACT))

        await orchestrator.regenerate_unit(units[0], VisualStyle.SKETCH, Language.EN)

        assert "main sections with cute icons" in units[0].instruction

    async def test_regenerate_failed_unit(self, notedraw_config):
        painter = StubPainter(fail_with="provider down")
        orchestrator = make_orchestrator(notedraw_config, painter)
        units = await orchestrator.generate(request())
        assert units[0].status == UnitStatus.FAILED

        painter.fail_with = None
        await orchestrator.regenerate_unit(units[0], VisualStyle.SKETCH, Language.EN)

        assert units[0].status == UnitStatus.COMPLETED
        assert units[0].error_message is None

    async def test_regenerate_requires_structure(self, notedraw_config):
        from workflows.notedraw import NoteUnit

        orchestrator = make_orchestrator(notedraw_config)
        with pytest.raises(ValidationError):
            await orchestrator.regenerate_unit(
                NoteUnit(order=0, original_text=TEXT), VisualStyle.SKETCH, Language.EN
            )

    async def test_regenerate_generating_unit_rejected(self, notedraw_config):
        orchestrator = make_orchestrator(notedraw_config)
        units = await orchestrator.generate(request())
        units[0].mark_generating()

        with pytest.raises(StateTransitionError):
            await orchestrator.regenerate_unit(units[0], VisualStyle.SKETCH, Language.EN)


class TestCustomInstruction:
    async def test_success_replaces_instruction(self, notedraw_config):
        painter = StubPainter()
        orchestrator = make_orchestrator(notedraw_config, painter)
        units = await orchestrator.generate(request())

        await orchestrator.regenerate_with_custom_instruction(units[0], "A single red apple")

        assert units[0].status == UnitStatus.COMPLETED
        assert units[0].instruction == "A single red apple"
        assert painter.requests[-1].instruction == "A single red apple"
        assert painter.requests[-1].negative_instruction == units[0].negative_instruction

    async def test_failure_keeps_previous_instruction(self, notedraw_config):
        painter = StubPainter()
        orchestrator = make_orchestrator(notedraw_config, painter)
        units = await orchestrator.generate(request())
        previous = units[0].instruction

        painter.fail_with = "content policy violation"
        await orchestrator.regenerate_with_custom_instruction(units[0], "Something else")

        assert units[0].status == UnitStatus.FAILED
        assert units[0].instruction == previous
        assert units[0].error_message == "content policy violation"

    @pytest.mark.parametrize("instruction", ["", "   ", "x" * 2001])
    async def test_invalid_instruction(self, notedraw_config, instruction):
        orchestrator = make_orchestrator(notedraw_config)
        units = await orchestrator.generate(request())

        with pytest.raises(ValidationError):
            await orchestrator.regenerate_with_custom_instruction(units[0], instruction)
        assert units[0].status == UnitStatus.COMPLETED
