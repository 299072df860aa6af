"""Exception classes for image generation."""

from core.utils.http_errors import HTTPRequestError

from .types import FailureReason

_CONTENT_POLICY_MARKERS = (
    "content policy",
    "content_policy",
    "safety",
    "moderation",
    "nsfw",
    "prohibited",
    "blocked",
)


class PainterError(Exception):
    """Base image generation exception."""

    transient: bool = False
    reason: FailureReason = "provider"

    def __init__(self, message: str, provider: str | None = None):
        self.message = message
        self.provider = provider
        super().__init__(message)


class TransientPainterError(PainterError):
    """Network error or 5xx; eligible for retry."""

    transient = True
    reason: FailureReason = "transient"


class RateLimitError(TransientPainterError):
    """API rate limit exceeded."""

    pass


class ProviderError(PainterError):
    """Provider rejected the request or reported a hard failure."""

    pass


class ContentPolicyError(ProviderError):
    """Provider refused the instruction on content-policy grounds."""

    reason: FailureReason = "content_policy"


class ProviderNotConfiguredError(ProviderError):
    """Missing API key or base URL."""

    reason: FailureReason = "configuration"


class PollTimeoutError(PainterError):
    """Task did not reach a terminal state within the poll ceiling."""

    reason: FailureReason = "timeout"


def looks_like_content_policy(text: str | None) -> bool:
    if not text:
        return False
    lowered = text.lower()
    return any(marker in lowered for marker in _CONTENT_POLICY_MARKERS)


def from_http_error(error: HTTPRequestError, provider: str) -> PainterError:
    """Translate an HTTP failure into the painter error taxonomy."""
    if error.status_code == 429:
        return RateLimitError(f"{provider} rate limit exceeded", provider=provider)
    if error.transient:
        return TransientPainterError(f"{provider} API error: {error.message}", provider=provider)
    if looks_like_content_policy(error.body):
        return ContentPolicyError(
            f"{provider} rejected the prompt (content policy): {error.message}",
            provider=provider,
        )
    return ProviderError(f"{provider} API error: {error.message}", provider=provider)


def task_failure(message: str | None, provider: str) -> ProviderError:
    """Error for a task the provider reported as failed."""
    text = message or "Task failed"
    if looks_like_content_policy(text):
        return ContentPolicyError(text, provider=provider)
    return ProviderError(text, provider=provider)
