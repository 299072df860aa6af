"""Limits and switches for the note pipeline."""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field

load_dotenv()


def _env_int(name: str, default: int) -> int:
    return int(os.environ.get(name, default))


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").lower() in ("1", "true", "yes")


class NoteDrawConfig(BaseModel):
    """Pipeline configuration.

    Defaults come from the environment so deployments can tune limits without
    code changes; tests construct instances directly.
    """

    max_input_length: int = Field(
        default_factory=lambda: _env_int("NOTEDRAW_MAX_INPUT_LENGTH", 10000),
        ge=1,
        description="Maximum input text length in characters",
    )
    min_input_length: int = Field(
        default_factory=lambda: _env_int("NOTEDRAW_MIN_INPUT_LENGTH", 10),
        ge=1,
        description="Minimum input text length in characters",
    )
    max_sections_per_card: int = Field(
        default_factory=lambda: _env_int("NOTEDRAW_MAX_SECTIONS", 4),
        ge=1,
        le=4,
        description="Section ceiling per card",
    )
    compact_max_cards: int = Field(
        default_factory=lambda: _env_int("NOTEDRAW_COMPACT_MAX_CARDS", 1),
        ge=1,
        description="Cards kept in compact mode",
    )
    use_placeholder: bool = Field(
        default_factory=lambda: _env_flag("USE_PLACEHOLDER_IMAGE"),
        description="Render SVG placeholders instead of calling image providers",
    )
    mock_analysis: bool = Field(
        default_factory=lambda: _env_flag("DEV_PLACEHOLDER_MODE"),
        description="Return canned structures instead of calling the text model",
    )
    default_signature: str | None = Field(
        default_factory=lambda: os.environ.get("NOTEDRAW_DEFAULT_SIGNATURE") or None,
        max_length=50,
        description="Signature stamped when the request carries none",
    )
    credits_per_image: int = Field(
        default_factory=lambda: _env_int("NOTEDRAW_CREDITS_IMAGE", 5),
        ge=0,
    )
    credits_per_analysis: int = Field(
        default_factory=lambda: _env_int("NOTEDRAW_CREDITS_ANALYSIS", 1),
        ge=0,
    )
    max_custom_instruction_length: int = Field(
        default=2000,
        ge=1,
        description="Limit for caller-supplied image instructions",
    )


_config: NoteDrawConfig | None = None


def get_notedraw_config() -> NoteDrawConfig:
    """Get global NoteDrawConfig instance."""
    global _config
    if _config is None:
        _config = NoteDrawConfig()
    return _config
