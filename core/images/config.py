"""Configuration for image generation providers."""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.environ.get(name, default)


@dataclass
class PainterConfig:
    """Configuration for the painter service.

    Environment Variables:
        GEMINI_IMAGE_API_KEY / GEMINI_IMAGE_BASE_URL: Gemini image generation
        APIMART_API_KEY / APIMART_BASE_URL: apimart task API
            (falls back to OPENAI_API_KEY / OPENAI_BASE_URL like the original deployment)
        OPENAI_IMAGE_API_KEY / OPENAI_IMAGE_BASE_URL: OpenAI images API
        FAL_KEY / FAL_QUEUE_URL: fal.ai queue API
        REPLICATE_API_TOKEN / REPLICATE_BASE_URL: Replicate predictions API
        PAINTER_TIMEOUT: HTTP timeout in seconds (default: 60)
        PAINTER_POLL_INTERVAL: Seconds between task polls (default: 2)
        PAINTER_MAX_POLL_ATTEMPTS: Poll ceiling (default: 60)
        PAINTER_MAX_RETRIES: Retries after the first attempt (default: 2)
    """

    gemini_api_key: str | None = field(
        default_factory=lambda: _env("GEMINI_IMAGE_API_KEY") or _env("GEMINI_API_KEY")
    )
    gemini_base_url: str | None = field(
        default_factory=lambda: _env("GEMINI_IMAGE_BASE_URL")
    )
    apimart_api_key: str | None = field(
        default_factory=lambda: _env("APIMART_API_KEY") or _env("OPENAI_API_KEY")
    )
    apimart_base_url: str = field(
        default_factory=lambda: _env("APIMART_BASE_URL")
        or _env("OPENAI_BASE_URL", "https://api.apimart.ai/v1")
    )
    openai_api_key: str | None = field(
        default_factory=lambda: _env("OPENAI_IMAGE_API_KEY") or _env("OPENAI_API_KEY")
    )
    openai_base_url: str = field(
        default_factory=lambda: _env("OPENAI_IMAGE_BASE_URL", "https://api.openai.com/v1")
    )
    fal_api_key: str | None = field(default_factory=lambda: _env("FAL_KEY"))
    fal_queue_url: str = field(
        default_factory=lambda: _env("FAL_QUEUE_URL", "https://queue.fal.run")
    )
    replicate_api_token: str | None = field(
        default_factory=lambda: _env("REPLICATE_API_TOKEN")
    )
    replicate_base_url: str = field(
        default_factory=lambda: _env("REPLICATE_BASE_URL", "https://api.replicate.com/v1")
    )

    timeout: float = field(
        default_factory=lambda: float(_env("PAINTER_TIMEOUT", "60"))
    )
    poll_interval: float = field(
        default_factory=lambda: float(_env("PAINTER_POLL_INTERVAL", "2"))
    )
    max_poll_attempts: int = field(
        default_factory=lambda: int(_env("PAINTER_MAX_POLL_ATTEMPTS", "60"))
    )
    max_retries: int = field(
        default_factory=lambda: int(_env("PAINTER_MAX_RETRIES", "2"))
    )
    retry_backoff: float = 2.0
    default_aspect_ratio: str = "3:4"


_config: PainterConfig | None = None


def get_painter_config() -> PainterConfig:
    """Get global PainterConfig instance."""
    global _config
    if _config is None:
        _config = PainterConfig()
    return _config
