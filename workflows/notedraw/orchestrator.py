"""
Pipeline orchestrator: generate, regenerate and custom-instruction repaint.

Provides the public entry points. ``generate`` runs the LangGraph pipeline
and always returns a non-empty unit list; validation errors are the only
exceptions that reach the caller.
"""

import logging
from datetime import datetime

from core.images import Painter, get_painter
from workflows.shared.tracing import (
    add_trace_metadata,
    merge_trace_config,
    workflow_traceable,
)

from .billing import CreditLedger
from .config import NoteDrawConfig, get_notedraw_config
from .designer import design_prompt
from .error_messages import user_message
from .errors import ValidationError
from .graph import notedraw_graph
from .organizer import Organizer, fallback_structure
from .progress import NullProgressSink, PipelineFailed, ProgressSink
from .runtime import PipelineRun, render_unit, run_config
from .state import (
    AIConfig,
    GenerateMode,
    GenerateRequest,
    Language,
    NoteDrawState,
    NoteUnit,
    UnitStatus,
    VisualStyle,
)

logger = logging.getLogger(__name__)


class PipelineOrchestrator:
    """Composes Organizer -> (Designer -> Painter per unit).

    Usage:
        orchestrator = PipelineOrchestrator()
        units = await orchestrator.generate(request, sink=RecordingProgressSink())
        await orchestrator.regenerate_unit(units[0], VisualStyle.CUTE, Language.EN)
    """

    def __init__(
        self,
        organizer: Organizer | None = None,
        painter: Painter | None = None,
        config: NoteDrawConfig | None = None,
        credits: CreditLedger | None = None,
    ):
        self._config = config or get_notedraw_config()
        self._organizer = organizer or Organizer(config=self._config)
        self._painter = painter or get_painter()
        self._credits = credits

    def _render_kwargs(self, ai_config: AIConfig | None) -> dict:
        return {
            "painter": self._painter,
            "config": self._config,
            "ai_config": ai_config or AIConfig(),
            "credits": self._credits,
        }

    @workflow_traceable(name="NoteDrawGenerate", workflow_type="notedraw")
    async def generate(
        self,
        request: GenerateRequest,
        sink: ProgressSink | None = None,
    ) -> list[NoteUnit]:
        """Run the full pipeline for one request.

        Args:
            request: Input text, language, style, mode and provider selection
            sink: Receives progress events (defaults to a no-op sink)

        Returns:
            Units in ascending order, each completed or failed

        Raises:
            ValidationError: Input rejected before any state is created
        """
        self._organizer.validate_input(request.input_text)

        run = PipelineRun(
            organizer=self._organizer,
            painter=self._painter,
            sink=sink or NullProgressSink(),
            config=self._config,
            ai_config=request.ai_config or AIConfig(),
            credits=self._credits,
        )

        add_trace_metadata({
            "mode": request.mode.value,
            "style": request.visual_style.value,
            "language": request.language.value,
            "provider": run.ai_config.api_provider.value,
        })

        initial_state = NoteDrawState(
            request=request,
            unit_count=0,
            total_knowledge_points=0,
            organizer_error=None,
            started_at=datetime.utcnow(),
            completed_at=None,
            current_phase="starting",
            raw_analysis=None,
        )

        logger.info(
            f"Starting generation (mode: {request.mode.value}, style: "
            f"{request.visual_style.value}, language: {request.language.value})"
        )

        try:
            await notedraw_graph.ainvoke(
                initial_state, config=merge_trace_config(run_config(run))
            )
        except Exception as e:
            self._fail_run(run, request, e)

        completed = sum(1 for unit in run.units if unit.status == UnitStatus.COMPLETED)
        logger.info(f"Generation finished: {completed}/{len(run.units)} units completed")
        return run.units

    def _fail_run(self, run: PipelineRun, request: GenerateRequest, error: Exception) -> None:
        """Hard failure: fail every non-terminal unit and report once."""
        message = getattr(error, "message", None) or str(error) or type(error).__name__
        logger.error(f"Generation failed: {message}")

        if not run.units:
            run.units.append(
                NoteUnit(
                    order=0,
                    original_text=request.input_text,
                    structure=fallback_structure(request.language, message),
                )
            )

        for unit in run.units:
            if unit.status in (UnitStatus.PENDING, UnitStatus.GENERATING):
                unit.mark_failed(message)

        run.emit(PipelineFailed(message, user_message(message, request.language)))

    async def regenerate_unit(
        self,
        unit: NoteUnit,
        style: VisualStyle,
        language: Language,
        ai_config: AIConfig | None = None,
        signature: str | None = None,
    ) -> NoteUnit:
        """Re-design (always detailed mode) and repaint one unit.

        Raises:
            ValidationError: Unit has no structure
            StateTransitionError: Unit is already generating
        """
        if unit.structure is None:
            raise ValidationError("Unit has no structure data")

        unit.mark_generating()
        designed = design_prompt(
            unit.structure,
            style,
            language,
            GenerateMode.DETAILED,
            signature or self._config.default_signature,
        )
        unit.instruction = designed.prompt
        unit.negative_instruction = designed.negative_prompt

        await self._render(unit, designed.prompt, designed.negative_prompt, ai_config)
        logger.info(f"Regenerated unit {unit.id}: {unit.status.value}")
        return unit

    async def regenerate_with_custom_instruction(
        self,
        unit: NoteUnit,
        instruction: str,
        ai_config: AIConfig | None = None,
    ) -> NoteUnit:
        """Repaint one unit from a caller-supplied instruction, bypassing the Designer.

        The stored instruction is replaced only when painting succeeds.

        Raises:
            ValidationError: Blank or overlong instruction
            StateTransitionError: Unit is already generating
        """
        if instruction is None or not instruction.strip():
            raise ValidationError("Custom instruction is empty")
        limit = self._config.max_custom_instruction_length
        if len(instruction) > limit:
            raise ValidationError(
                f"Custom instruction too long. Maximum {limit} characters allowed."
            )

        unit.mark_generating()
        succeeded = await self._render(unit, instruction, unit.negative_instruction, ai_config)
        if succeeded:
            unit.instruction = instruction
        logger.info(f"Repainted unit {unit.id} from custom instruction: {unit.status.value}")
        return unit

    async def _render(
        self,
        unit: NoteUnit,
        instruction: str,
        negative_instruction: str | None,
        ai_config: AIConfig | None,
    ) -> bool:
        try:
            return await render_unit(
                unit, instruction, negative_instruction, **self._render_kwargs(ai_config)
            )
        except Exception as e:
            logger.exception(f"Repaint of unit {unit.id} failed: {e}")
            if unit.status == UnitStatus.GENERATING:
                unit.mark_failed(getattr(e, "message", None) or str(e) or type(e).__name__)
            return False


_orchestrator: PipelineOrchestrator | None = None


def get_orchestrator() -> PipelineOrchestrator:
    """Get global PipelineOrchestrator instance."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = PipelineOrchestrator()
    return _orchestrator
