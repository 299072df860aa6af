"""Text model definitions and LLM initialization."""

import os
from enum import Enum
from typing import Any

from dotenv import load_dotenv

load_dotenv()

from core.config import configure_langsmith

configure_langsmith()

from langchain_anthropic import ChatAnthropic
from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI


class TextModel(str, Enum):
    """Text-completion models available to the organizer.

    GLM and DeepSeek speak the OpenAI chat protocol behind their own base URLs;
    Claude models go through the Anthropic API.
    """

    GLM_4_FLASH = "glm-4-flash"
    GPT_4O_MINI = "gpt-4o-mini"
    GPT_4O = "gpt-4o"
    DEEPSEEK_CHAT = "deepseek-chat"
    CLAUDE_HAIKU = "claude-haiku-4-5-20251001"
    CLAUDE_SONNET = "claude-sonnet-4-5-20250929"


DEFAULT_TEXT_MODEL = TextModel.GLM_4_FLASH

# Prefix -> (key env var, base URL env var, default base URL)
_OPENAI_COMPATIBLE: dict[str, tuple[str, str, str | None]] = {
    "glm-": ("GLM_API_KEY", "GLM_BASE_URL", "https://open.bigmodel.cn/api/paas/v4"),
    "deepseek-": ("DEEPSEEK_API_KEY", "DEEPSEEK_BASE_URL", "https://api.deepseek.com"),
    "gpt-": ("OPENAI_API_KEY", "OPENAI_BASE_URL", None),
}


def get_llm(
    model: TextModel | str = DEFAULT_TEXT_MODEL,
    max_tokens: int = 4096,
    temperature: float = 0.3,
) -> BaseChatModel:
    """
    Get a configured chat model for the given text model name.

    Args:
        model: TextModel or raw model name. Names starting with "claude-" use
               Anthropic; "glm-", "deepseek-" and "gpt-" use OpenAI-compatible
               endpoints. Unknown names go to the OpenAI endpoint.
        max_tokens: Maximum output tokens
        temperature: Sampling temperature

    Returns:
        LangChain chat model

    Raises:
        ValueError: If the required API key is not set
    """
    name = model.value if isinstance(model, TextModel) else model

    if name.startswith("claude-"):
        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise ValueError("ANTHROPIC_API_KEY not set")
        return ChatAnthropic(
            model=name,
            api_key=api_key,
            max_tokens=max_tokens,
            temperature=temperature,
        )

    key_var, url_var, default_url = _OPENAI_COMPATIBLE["gpt-"]
    for prefix, settings in _OPENAI_COMPATIBLE.items():
        if name.startswith(prefix):
            key_var, url_var, default_url = settings
            break

    api_key = os.getenv(key_var)
    if not api_key:
        raise ValueError(f"{key_var} not set")

    kwargs: dict[str, Any] = {
        "model": name,
        "api_key": api_key,
        "max_tokens": max_tokens,
        "temperature": temperature,
    }
    base_url = os.getenv(url_var) or default_url
    if base_url:
        kwargs["base_url"] = base_url

    return ChatOpenAI(**kwargs)
