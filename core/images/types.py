"""Type definitions for image generation."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class ImageProvider(str, Enum):
    """Supported image generation providers."""

    GEMINI = "gemini"
    APIMART = "apimart"
    FAL = "fal"
    REPLICATE = "replicate"
    OPENAI = "openai"
    CUSTOM = "custom"


class ImageModel(str, Enum):
    """Image generation models selectable by callers."""

    GEMINI_FLASH_IMAGE = "gemini-2.0-flash-preview-image-generation"
    GPT_4O_IMAGE = "gpt-4o-image"
    GEMINI_PRO_IMAGE = "gemini-3-pro-image-preview"
    FLUX_PRO = "flux-pro"
    DALL_E_3 = "dall-e-3"


FailureReason = Literal[
    "timeout",
    "content_policy",
    "provider",
    "transient",
    "configuration",
]


class CustomProviderConfig(BaseModel):
    """Self-described task API: base URL, key and optional model name only."""

    name: str = "custom"
    base_url: str = Field(min_length=1)
    api_key: str = Field(min_length=1)
    model: str | None = None


class PaintRequest(BaseModel):
    """A single image generation request."""

    instruction: str = Field(min_length=1)
    negative_instruction: str | None = None
    model: ImageModel | str | None = None
    provider: ImageProvider = ImageProvider.APIMART
    custom_provider: CustomProviderConfig | None = None
    aspect_ratio: str | None = Field(
        default=None,
        description="Overrides width/height; falls back to the configured default",
    )
    width: int | None = Field(default=None, gt=0)
    height: int | None = Field(default=None, gt=0)

    def resolved_aspect_ratio(self, default: str) -> str:
        if self.aspect_ratio:
            return self.aspect_ratio
        if self.width and self.height:
            return aspect_ratio_for(self.width, self.height)
        return default


class PaintResult(BaseModel):
    """Outcome of a paint call. Exactly one of image_base64/image_url on success."""

    success: bool
    image_base64: str | None = None
    image_url: str | None = None
    mime_type: str = "image/png"
    error_message: str | None = None
    failure_reason: FailureReason | None = None
    provider: ImageProvider | None = None
    model: str | None = None

    @classmethod
    def from_base64(cls, data: str, mime_type: str = "image/png", **kwargs) -> "PaintResult":
        return cls(success=True, image_base64=data, mime_type=mime_type, **kwargs)

    @classmethod
    def from_url(cls, url: str, **kwargs) -> "PaintResult":
        return cls(success=True, image_url=url, **kwargs)

    @classmethod
    def failure(cls, message: str, reason: FailureReason, **kwargs) -> "PaintResult":
        return cls(success=False, error_message=message, failure_reason=reason, **kwargs)

    def display_ref(self) -> str | None:
        """Displayable reference: data URI for inline images, else the URL."""
        if self.image_base64:
            return base64_to_data_url(self.image_base64, self.mime_type)
        return self.image_url


class TaskState(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GeneratedImage(BaseModel):
    """Image returned by a provider, inline or by reference."""

    image_base64: str | None = None
    image_url: str | None = None
    mime_type: str = "image/png"


class TaskStatus(BaseModel):
    """One poll observation of an asynchronous generation task."""

    state: TaskState
    image: GeneratedImage | None = None
    error: str | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state != TaskState.PENDING


def base64_to_data_url(data: str, mime_type: str = "image/png") -> str:
    """Wrap base64 image data in a data URI."""
    return f"data:{mime_type};base64,{data}"


# Ratio thresholds (width / height), checked top-down
_ASPECT_RATIOS: list[tuple[float, str]] = [
    (2.2, "21:9"),
    (1.6, "16:9"),
    (1.4, "3:2"),
    (1.2, "4:3"),
    (1.1, "5:4"),
    (0.9, "1:1"),
    (0.75, "4:5"),
    (0.7, "3:4"),
    (0.6, "2:3"),
]


def aspect_ratio_for(width: int | None, height: int | None) -> str:
    """Map pixel dimensions to the closest supported aspect ratio string."""
    if not width or not height:
        return "4:3"
    ratio = width / height
    for threshold, label in _ASPECT_RATIOS:
        if ratio >= threshold:
            return label
    return "9:16"


class TaskHandle(BaseModel):
    """Opaque reference to a submitted asynchronous task."""

    task_id: str
    status_url: str | None = None
    result_url: str | None = None
