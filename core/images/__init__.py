"""Image generation across hosted providers.

Providers come in two shapes: synchronous (gemini, openai) and task-based
(apimart, fal, replicate, custom), the latter polled until completion.

Example:
    from core.images import PaintRequest, paint

    result = await paint(PaintRequest(instruction="hand-drawn mind map of photosynthesis"))
    if result.success:
        print(result.display_ref())
    else:
        print(result.failure_reason, result.error_message)

Environment Variables:
    GEMINI_IMAGE_API_KEY, APIMART_API_KEY, OPENAI_IMAGE_API_KEY, FAL_KEY,
    REPLICATE_API_TOKEN: provider credentials (see PainterConfig)
"""

from .config import PainterConfig, get_painter_config
from .errors import (
    ContentPolicyError,
    PainterError,
    PollTimeoutError,
    ProviderError,
    ProviderNotConfiguredError,
    RateLimitError,
    TransientPainterError,
)
from .placeholder import render_placeholder_svg
from .polling import poll_until_complete
from .service import Painter, get_painter
from .types import (
    CustomProviderConfig,
    GeneratedImage,
    ImageModel,
    ImageProvider,
    PaintRequest,
    PaintResult,
    TaskHandle,
    TaskState,
    TaskStatus,
    aspect_ratio_for,
    base64_to_data_url,
)


async def paint(request: PaintRequest) -> PaintResult:
    """Generate one image with the global painter.

    Never raises for provider failures; check ``result.success``.
    """
    return await get_painter().paint(request)


__all__ = [
    # Main function
    "paint",
    # Service
    "Painter",
    "get_painter",
    "poll_until_complete",
    "render_placeholder_svg",
    # Types
    "CustomProviderConfig",
    "GeneratedImage",
    "ImageModel",
    "ImageProvider",
    "PaintRequest",
    "PaintResult",
    "TaskHandle",
    "TaskState",
    "TaskStatus",
    "aspect_ratio_for",
    "base64_to_data_url",
    # Config
    "PainterConfig",
    "get_painter_config",
    # Errors
    "PainterError",
    "TransientPainterError",
    "RateLimitError",
    "ProviderError",
    "ContentPolicyError",
    "ProviderNotConfiguredError",
    "PollTimeoutError",
]
