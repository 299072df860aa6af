"""LLM utilities for the note pipeline.

- Text model selection across Anthropic and OpenAI-compatible endpoints
  (GLM, DeepSeek, OpenAI)
- Tolerant JSON extraction from model output
"""

from .models import DEFAULT_TEXT_MODEL, TextModel, get_llm
from .response_parsing import (
    extract_json_from_response,
    extract_json_object,
    extract_response_content,
    strip_code_fences,
)

__all__ = [
    "DEFAULT_TEXT_MODEL",
    "TextModel",
    "get_llm",
    "extract_json_from_response",
    "extract_json_object",
    "extract_response_content",
    "strip_code_fences",
]
