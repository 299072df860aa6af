"""Shared utilities for workflows."""

from .llm_utils import TextModel, extract_json_from_response, get_llm
from .tracing import get_trace_config, workflow_traceable

__all__ = [
    # LLM utilities
    "TextModel",
    "extract_json_from_response",
    "get_llm",
    # Tracing
    "get_trace_config",
    "workflow_traceable",
]
