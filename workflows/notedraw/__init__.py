"""
NoteDraw: turns free text into hand-drawn-style visual note images.

Three stages per request:
1. Organizer - one text-model call splits the text into 1..N cards
2. Designer - renders each card into an image instruction (pure)
3. Painter - drives an image provider to a finished image

Example:
    from workflows.notedraw import GenerateRequest, PipelineOrchestrator

    units = await PipelineOrchestrator().generate(
        GenerateRequest(input_text=text, language="en", visual_style="sketch")
    )
"""

from .billing import CreditLedger, InMemoryCreditLedger
from .config import NoteDrawConfig, get_notedraw_config
from .designer import (
    DesignedPrompt,
    assess_complexity,
    design_prompt,
    design_prompts,
    format_prompt_for_provider,
    get_negative_prompt,
    optimize_prompt_for_style,
)
from .error_messages import user_message
from .errors import (
    InsufficientCreditsError,
    NoteDrawError,
    OrganizerError,
    StateTransitionError,
    ValidationError,
)
from .orchestrator import PipelineOrchestrator, get_orchestrator
from .organizer import (
    LangChainCompletionClient,
    OrganizeResult,
    Organizer,
    TextCompletionClient,
)
from .progress import (
    CallbackProgressSink,
    LoggingProgressSink,
    NullProgressSink,
    PipelineFailed,
    ProgressEvent,
    ProgressSink,
    RecordingProgressSink,
    StageChanged,
    UnitCompleted,
    UnitStarted,
)
from .state import (
    AIConfig,
    ContentModule,
    GenerateMode,
    GenerateRequest,
    Language,
    LeftBrainData,
    NoteUnit,
    UnitStatus,
    VisualStyle,
)
from .styles import StyleConfig, get_all_styles, get_default_style, get_style_config

__all__ = [
    # Orchestration
    "PipelineOrchestrator",
    "get_orchestrator",
    # Organizer
    "Organizer",
    "OrganizeResult",
    "TextCompletionClient",
    "LangChainCompletionClient",
    # Designer
    "DesignedPrompt",
    "design_prompt",
    "design_prompts",
    "get_negative_prompt",
    "optimize_prompt_for_style",
    "assess_complexity",
    "format_prompt_for_provider",
    # Styles
    "StyleConfig",
    "get_style_config",
    "get_all_styles",
    "get_default_style",
    # State
    "AIConfig",
    "ContentModule",
    "GenerateMode",
    "GenerateRequest",
    "Language",
    "LeftBrainData",
    "NoteUnit",
    "UnitStatus",
    "VisualStyle",
    # Progress
    "ProgressEvent",
    "ProgressSink",
    "StageChanged",
    "UnitStarted",
    "UnitCompleted",
    "PipelineFailed",
    "NullProgressSink",
    "CallbackProgressSink",
    "LoggingProgressSink",
    "RecordingProgressSink",
    # Config, billing, errors
    "NoteDrawConfig",
    "get_notedraw_config",
    "CreditLedger",
    "InMemoryCreditLedger",
    "user_message",
    "NoteDrawError",
    "ValidationError",
    "OrganizerError",
    "StateTransitionError",
    "InsufficientCreditsError",
]
