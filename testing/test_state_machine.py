"""Tests for NoteUnit status transitions and request models."""

import pydantic
import pytest

from workflows.notedraw import (
    ContentModule,
    GenerateRequest,
    LeftBrainData,
    NoteUnit,
    StateTransitionError,
    UnitStatus,
)


def make_unit() -> NoteUnit:
    return NoteUnit(order=0, original_text="Some text to draw")


class TestUnitTransitions:
    def test_new_unit_is_pending(self):
        unit = make_unit()
        assert unit.status == UnitStatus.PENDING
        assert unit.id.startswith("unit-")
        assert not unit.is_terminal

    def test_happy_path(self):
        unit = make_unit()
        unit.mark_generating()
        unit.mark_completed("https://cdn.test/1.png")
        assert unit.status == UnitStatus.COMPLETED
        assert unit.image_ref == "https://cdn.test/1.png"
        assert unit.error_message is None
        assert unit.is_terminal

    def test_failure_sets_message(self):
        unit = make_unit()
        unit.mark_generating()
        unit.mark_failed("provider down")
        assert unit.status == UnitStatus.FAILED
        assert unit.error_message == "provider down"

    def test_pending_can_fail_directly(self):
        unit = make_unit()
        unit.mark_failed(None)
        assert unit.error_message == "Unknown error"

    def test_regeneration_clears_error(self):
        unit = make_unit()
        unit.mark_generating()
        unit.mark_failed("first attempt failed")
        unit.mark_generating()
        assert unit.status == UnitStatus.GENERATING
        assert unit.error_message is None

    def test_completed_can_be_regenerated(self):
        unit = make_unit()
        unit.mark_generating()
        unit.mark_completed("ref")
        unit.mark_generating()
        assert unit.status == UnitStatus.GENERATING

    def test_illegal_transitions(self):
        unit = make_unit()
        with pytest.raises(StateTransitionError):
            unit.mark_completed("ref")

        unit.mark_generating()
        with pytest.raises(StateTransitionError) as exc_info:
            unit.mark_generating()
        assert exc_info.value.current == "generating"
        assert exc_info.value.target == "generating"

    def test_unit_ids_are_unique(self):
        assert len({make_unit().id for _ in range(50)}) == 50


class TestStructures:
    def test_module_keywords_capped(self):
        with pytest.raises(pydantic.ValidationError):
            ContentModule(id="1", heading="H", keywords=["a", "b", "c", "d"])

    def test_card_section_bounds(self):
        module = ContentModule(id="1", heading="H")
        with pytest.raises(pydantic.ValidationError):
            LeftBrainData(title="T", summary_context="", visual_theme_keywords="", modules=[])
        with pytest.raises(pydantic.ValidationError):
            LeftBrainData(
                title="T", summary_context="", visual_theme_keywords="", modules=[module] * 5
            )

    def test_signature_length_limit(self):
        GenerateRequest(input_text="text", signature="x" * 50)
        with pytest.raises(pydantic.ValidationError):
            GenerateRequest(input_text="text", signature="x" * 51)
