"""User-facing, localized messages for pipeline errors."""

import re

from .state import Language

_ERROR_MAPPINGS: list[tuple[re.Pattern[str], dict[Language, str]]] = [
    (
        re.compile(r"insufficient credits", re.IGNORECASE),
        {
            Language.EN: "Not enough credits. Please top up to continue.",
            Language.ZH: "积分不足，请充值后继续使用。",
        },
    ),
    (
        re.compile(r"unauthorized", re.IGNORECASE),
        {
            Language.EN: "You do not have permission to perform this action.",
            Language.ZH: "您没有权限执行此操作。",
        },
    ),
    (
        re.compile(r"not found", re.IGNORECASE),
        {
            Language.EN: "The requested resource was not found.",
            Language.ZH: "请求的资源不存在。",
        },
    ),
    (
        re.compile(r"network|connection|timeout|timed out", re.IGNORECASE),
        {
            Language.EN: "Network error. Please check your connection and try again.",
            Language.ZH: "网络连接失败，请检查网络后重试。",
        },
    ),
    (
        re.compile(r"rate limit|too many requests|429", re.IGNORECASE),
        {
            Language.EN: "Too many requests. Please wait a moment and try again.",
            Language.ZH: "请求过于频繁，请稍后再试。",
        },
    ),
    (
        re.compile(r"api error|service unavailable|503|500", re.IGNORECASE),
        {
            Language.EN: "Service temporarily unavailable. Please try again later.",
            Language.ZH: "服务暂时不可用，请稍后重试。",
        },
    ),
    (
        re.compile(r"image generation|paint|painting failed", re.IGNORECASE),
        {
            Language.EN: "Image generation failed. Try adjusting your prompt.",
            Language.ZH: "图片生成失败，请尝试调整描述内容。",
        },
    ),
    (
        re.compile(r"content policy|moderation|inappropriate|blocked", re.IGNORECASE),
        {
            Language.EN: "Content does not comply with usage policy. Please revise.",
            Language.ZH: "内容不符合使用规范，请修改后重试。",
        },
    ),
    (
        re.compile(r"too long|too short|max length|character limit|input text is empty", re.IGNORECASE),
        {
            Language.EN: "Input text length is not supported. Please adjust it.",
            Language.ZH: "输入内容长度不符合要求，请调整后重试。",
        },
    ),
    (
        re.compile(r"analysis failed|organize|organizer|no cards generated", re.IGNORECASE),
        {
            Language.EN: "Content analysis failed. Try rephrasing your text.",
            Language.ZH: "内容分析失败，请尝试调整文本表述。",
        },
    ),
]

_GENERIC: dict[Language, str] = {
    Language.EN: "Something went wrong. Please try again.",
    Language.ZH: "操作失败，请稍后重试。",
}


def user_message(error: BaseException | str | None, language: Language | str = Language.EN) -> str:
    """Map an error or raw message to a friendly localized message."""
    language = Language(language)
    if isinstance(error, BaseException):
        text = getattr(error, "message", None) or str(error)
    else:
        text = error or ""

    for pattern, messages in _ERROR_MAPPINGS:
        if pattern.search(text):
            return messages[language]
    return _GENERIC[language]
