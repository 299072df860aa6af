"""Paint node: design and paint every unit, strictly in order."""

import logging
from typing import Any

from langchain_core.runnables import RunnableConfig

from ..designer import design_prompt
from ..progress import StageChanged, UnitCompleted, UnitStarted
from ..runtime import PipelineRun, get_run, render_unit
from ..state import GenerateRequest, NoteDrawState, NoteUnit, UnitStatus

logger = logging.getLogger(__name__)


async def _process_unit(
    run: PipelineRun,
    request: GenerateRequest,
    unit: NoteUnit,
    total: int,
    signature: str | None,
) -> None:
    unit.mark_generating()
    designed = design_prompt(
        unit.structure,
        request.visual_style,
        request.language,
        request.mode,
        signature,
    )
    unit.instruction = designed.prompt
    unit.negative_instruction = designed.negative_prompt
    logger.debug(f"Card {unit.order + 1} prompt generated ({len(designed.prompt)} chars)")

    run.emit(
        StageChanged("painting", f"Creating visual note {unit.order + 1} of {total}...")
    )
    await render_unit(
        unit,
        designed.prompt,
        designed.negative_prompt,
        painter=run.painter,
        config=run.config,
        ai_config=run.ai_config,
        credits=run.credits,
    )


async def paint_units(state: NoteDrawState, config: RunnableConfig) -> dict[str, Any]:
    """Run Designer then Painter for each unit.

    A failing unit is marked failed and the loop moves on. When the organizer
    soft-failed, its fallback unit is failed with the organizer message
    without painting.
    """
    run = get_run(config)
    request = state["request"]
    organizer_error = state.get("organizer_error")
    signature = request.signature or run.config.default_signature
    total = len(run.units)

    run.emit(StageChanged("designing", "Designing visual layouts..."))

    for index, unit in enumerate(run.units):
        run.emit(UnitStarted(index, total))

        if organizer_error is not None:
            unit.mark_generating()
            unit.mark_failed(organizer_error)
        else:
            try:
                await _process_unit(run, request, unit, total, signature)
            except Exception as e:
                logger.exception(f"Unit {index + 1} failed: {e}")
                message = getattr(e, "message", None) or str(e) or type(e).__name__
                if unit.status in (UnitStatus.PENDING, UnitStatus.GENERATING):
                    unit.mark_failed(message)

        run.emit(UnitCompleted(index, unit.model_copy(deep=True)))

    completed = sum(1 for unit in run.units if unit.status == UnitStatus.COMPLETED)
    logger.info(f"Painted {completed}/{total} units")
    return {"current_phase": "painted"}
