"""
Data model for the note pipeline.

Request/unit models are pydantic; the graph state is a TypedDict like the
other workflows. Units are mutated in place by the graph nodes and the
regeneration operations, always through the status transition methods.
"""

import uuid
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from typing_extensions import TypedDict

from pydantic import BaseModel, Field

from core.images import CustomProviderConfig, ImageModel, ImageProvider
from workflows.shared.llm_utils import DEFAULT_TEXT_MODEL, TextModel

from .errors import StateTransitionError


class Language(str, Enum):
    EN = "en"
    ZH = "zh"


class VisualStyle(str, Enum):
    SKETCH = "sketch"
    BUSINESS = "business"
    CUTE = "cute"
    MINIMAL = "minimal"
    CHALKBOARD = "chalkboard"


class GenerateMode(str, Enum):
    """COMPACT forces a single card; DETAILED lets the point count decide."""

    COMPACT = "compact"
    DETAILED = "detailed"


# =============================================================================
# Structures
# =============================================================================


class ContentModule(BaseModel):
    """One section of a card. Only heading and keywords reach the image."""

    id: str
    heading: str
    content: str = ""
    keywords: list[str] = Field(default_factory=list, max_length=3)


class LeftBrainData(BaseModel):
    """Structured decomposition of one card."""

    title: str
    summary_context: str
    visual_theme_keywords: str
    modules: list[ContentModule] = Field(min_length=1, max_length=4)


# =============================================================================
# Units
# =============================================================================


class UnitStatus(str, Enum):
    PENDING = "pending"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


ALLOWED_TRANSITIONS: dict[UnitStatus, frozenset[UnitStatus]] = {
    UnitStatus.PENDING: frozenset({UnitStatus.GENERATING, UnitStatus.FAILED}),
    UnitStatus.GENERATING: frozenset({UnitStatus.COMPLETED, UnitStatus.FAILED}),
    UnitStatus.COMPLETED: frozenset({UnitStatus.GENERATING}),
    UnitStatus.FAILED: frozenset({UnitStatus.GENERATING}),
}


def new_unit_id() -> str:
    return f"unit-{uuid.uuid4().hex[:12]}"


class NoteUnit(BaseModel):
    """One card to be produced.

    ``error_message`` is only set while the unit is failed. ``image_ref`` is
    a displayable reference: a data URI for inline images, otherwise a URL.
    """

    id: str = Field(default_factory=new_unit_id)
    order: int = Field(ge=0)
    original_text: str
    structure: Optional[LeftBrainData] = None
    instruction: Optional[str] = None
    negative_instruction: Optional[str] = None
    image_ref: Optional[str] = None
    status: UnitStatus = UnitStatus.PENDING
    error_message: Optional[str] = None

    @property
    def is_terminal(self) -> bool:
        return self.status in (UnitStatus.COMPLETED, UnitStatus.FAILED)

    def _transition(self, target: UnitStatus) -> None:
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise StateTransitionError(self.id, self.status.value, target.value)
        self.status = target

    def mark_generating(self) -> None:
        self._transition(UnitStatus.GENERATING)
        self.error_message = None

    def mark_completed(self, image_ref: str) -> None:
        self._transition(UnitStatus.COMPLETED)
        self.image_ref = image_ref
        self.error_message = None

    def mark_failed(self, message: str | None) -> None:
        self._transition(UnitStatus.FAILED)
        self.error_message = message or "Unknown error"


# =============================================================================
# Requests
# =============================================================================


class AIConfig(BaseModel):
    """Provider and model selection for one request."""

    api_provider: ImageProvider = ImageProvider.APIMART
    image_model: ImageModel | str = ImageModel.GPT_4O_IMAGE
    text_model: TextModel | str = DEFAULT_TEXT_MODEL
    use_placeholder: bool = False
    custom_provider: Optional[CustomProviderConfig] = None


class GenerateRequest(BaseModel):
    """Input to one full pipeline run."""

    input_text: str
    language: Language = Language.EN
    visual_style: VisualStyle = VisualStyle.SKETCH
    mode: GenerateMode = GenerateMode.DETAILED
    ai_config: Optional[AIConfig] = None
    signature: Optional[str] = Field(default=None, max_length=50)


# =============================================================================
# Graph state
# =============================================================================


class NoteDrawState(TypedDict):
    """LangGraph state for one generate() run.

    The NoteUnit objects live on the PipelineRun passed through
    ``config["configurable"]["run"]`` so callers keep the same instances
    even when a node raises.
    """

    request: GenerateRequest
    unit_count: int
    total_knowledge_points: int
    organizer_error: Optional[str]
    started_at: datetime
    completed_at: Optional[datetime]
    current_phase: str
    raw_analysis: Optional[Any]
