"""Per-run collaborators and the shared unit rendering step.

The graph nodes and the regeneration operations both paint through
``render_unit`` so credit gating, placeholder handling and status updates
behave identically everywhere.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from langchain_core.runnables import RunnableConfig

from core.images import Painter, PaintRequest, render_placeholder_svg

from .billing import CreditLedger
from .config import NoteDrawConfig
from .errors import InsufficientCreditsError
from .organizer import Organizer
from .progress import ProgressEvent, ProgressSink
from .state import AIConfig, NoteUnit

logger = logging.getLogger(__name__)


@dataclass
class PipelineRun:
    """Everything one generate() call needs, carried in the graph config."""

    organizer: Organizer
    painter: Painter
    sink: ProgressSink
    config: NoteDrawConfig
    ai_config: AIConfig
    credits: CreditLedger | None = None
    units: list[NoteUnit] = field(default_factory=list)

    @property
    def use_placeholder(self) -> bool:
        return self.config.use_placeholder or self.ai_config.use_placeholder

    def emit(self, event: ProgressEvent) -> None:
        self.sink.emit(event)


def get_run(config: RunnableConfig) -> PipelineRun:
    return config["configurable"]["run"]


def run_config(run: PipelineRun) -> dict[str, Any]:
    return {"configurable": {"run": run}}


async def render_unit(
    unit: NoteUnit,
    instruction: str,
    negative_instruction: str | None,
    *,
    painter: Painter,
    config: NoteDrawConfig,
    ai_config: AIConfig,
    credits: CreditLedger | None = None,
) -> bool:
    """Paint one unit that is already generating and record the outcome.

    Returns:
        True when the unit ended completed
    """
    title = unit.structure.title if unit.structure else "Visual Note"

    if config.use_placeholder or ai_config.use_placeholder:
        logger.info(f"Using placeholder image for unit {unit.order + 1}")
        unit.mark_completed(render_placeholder_svg(instruction, title))
        return True

    cost = config.credits_per_image
    if credits is not None and not await credits.has_enough_credits(cost):
        logger.warning(f"Insufficient credits for unit {unit.order + 1}")
        unit.mark_failed(InsufficientCreditsError().message)
        return False

    result = await painter.paint(
        PaintRequest(
            instruction=instruction,
            negative_instruction=negative_instruction,
            model=ai_config.image_model,
            provider=ai_config.api_provider,
            custom_provider=ai_config.custom_provider,
        )
    )

    if not result.success:
        unit.mark_failed(result.error_message or "Image generation failed")
        return False

    unit.mark_completed(result.display_ref())
    if credits is not None:
        await credits.consume_credits(cost, f"image for {unit.id}")
    return True
