"""Organize node: one text-model call, then one pending unit per card."""

import logging
from typing import Any

from langchain_core.runnables import RunnableConfig

from ..errors import InsufficientCreditsError
from ..progress import StageChanged
from ..runtime import get_run
from ..state import NoteDrawState, NoteUnit

logger = logging.getLogger(__name__)


async def organize_content(state: NoteDrawState, config: RunnableConfig) -> dict[str, Any]:
    """Analyse the input text and create the units.

    Exceptions propagate; the orchestrator treats them as a hard failure.
    A soft organizer failure is carried in ``organizer_error`` instead.
    """
    run = get_run(config)
    request = state["request"]
    run.emit(StageChanged("organizing", "Analyzing and structuring your content..."))

    analysis_cost = run.config.credits_per_analysis
    if run.credits is not None and not await run.credits.has_enough_credits(analysis_cost):
        raise InsufficientCreditsError()

    result = await run.organizer.organize(
        request.input_text,
        request.language,
        request.mode,
        model=run.ai_config.text_model,
    )

    for order, structure in enumerate(result.structures):
        run.units.append(
            NoteUnit(
                order=order,
                original_text=request.input_text,
                structure=structure,
            )
        )

    if result.failed:
        logger.warning(f"Organizer returned fallback structure: {result.error}")
    elif run.credits is not None:
        await run.credits.consume_credits(analysis_cost, "content analysis")

    logger.info(
        f"Organize result: {result.total_knowledge_points} knowledge points, "
        f"{len(run.units)} cards"
    )

    return {
        "unit_count": len(run.units),
        "total_knowledge_points": result.total_knowledge_points,
        "organizer_error": result.error,
        "raw_analysis": result.raw_analysis,
        "current_phase": "organized",
    }
