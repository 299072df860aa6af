"""Painter service: drives one image provider to a finished image."""

import asyncio
import logging
from typing import Awaitable, Callable

import httpx

from core.utils.async_http_client import register_cleanup
from core.utils.retry import with_retry

from .config import PainterConfig, get_painter_config
from .errors import PainterError, ProviderNotConfiguredError
from .polling import poll_until_complete
from .providers import (
    PROVIDER_REGISTRY,
    BaseImageProvider,
    PolledImageProvider,
    SyncImageProvider,
)
from .types import (
    GeneratedImage,
    ImageProvider,
    PaintRequest,
    PaintResult,
    TaskHandle,
    TaskStatus,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class Painter:
    """Unified image generation across providers.

    Each provider call (sync generate, task submit, every poll) is retried on
    transient failures only. Failures never propagate: they come back as
    ``PaintResult.failure`` with a ``failure_reason``.

    Usage:
        painter = get_painter()
        result = await painter.paint(PaintRequest(instruction="..."))
        if result.success:
            ref = result.display_ref()
    """

    def __init__(
        self,
        config: PainterConfig | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self._config = config or get_painter_config()
        self._client = client
        self._sleep = sleep
        self._providers: dict[ImageProvider, BaseImageProvider] = {}
        self._custom_providers: dict[str, BaseImageProvider] = {}

    def _get_provider(self, request: PaintRequest) -> BaseImageProvider:
        """Get or create provider (lazy initialization)."""
        provider_class = PROVIDER_REGISTRY[request.provider]

        if request.provider == ImageProvider.CUSTOM:
            custom = request.custom_provider
            if custom is None:
                raise ProviderNotConfiguredError(
                    "Custom provider configuration is incomplete: base URL and API key are required",
                    provider=ImageProvider.CUSTOM.value,
                )
            key = custom.model_dump_json()
            if key not in self._custom_providers:
                self._custom_providers[key] = provider_class(
                    self._config, custom=custom, client=self._client
                )
            return self._custom_providers[key]

        if request.provider not in self._providers:
            self._providers[request.provider] = provider_class(
                self._config, client=self._client
            )
        return self._providers[request.provider]

    async def _call(self, fn, label: str):
        return await with_retry(
            fn,
            max_attempts=self._config.max_retries + 1,
            backoff_factor=self._config.retry_backoff,
            retry_on=(PainterError,),
            should_retry=lambda e: getattr(e, "transient", False),
            sleep=self._sleep,
            label=label,
        )

    async def _run(
        self,
        provider: BaseImageProvider,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> GeneratedImage:
        if isinstance(provider, SyncImageProvider):
            return await self._call(
                lambda: provider.generate(request, model, aspect_ratio),
                label=f"{provider.name} generate",
            )

        if isinstance(provider, PolledImageProvider):
            handle: TaskHandle = await self._call(
                lambda: provider.submit(request, model, aspect_ratio),
                label=f"{provider.name} submit",
            )

            async def poll_once() -> TaskStatus:
                return await self._call(
                    lambda: provider.poll(handle),
                    label=f"{provider.name} poll",
                )

            return await poll_until_complete(
                poll_once,
                interval=self._config.poll_interval,
                max_attempts=self._config.max_poll_attempts,
                sleep=self._sleep,
                provider=provider.name,
            )

        raise TypeError(f"Unsupported provider shape: {type(provider).__name__}")

    async def paint(self, request: PaintRequest) -> PaintResult:
        """Generate one image.

        Args:
            request: Instruction, provider/model selection and sizing

        Returns:
            PaintResult; on failure ``error_message`` and ``failure_reason`` are set
        """
        try:
            provider = self._get_provider(request)
            model = provider.resolve_model(request.model)
            aspect_ratio = request.resolved_aspect_ratio(self._config.default_aspect_ratio)
            logger.info(
                f"Painting with {provider.name} (model={model}, aspect={aspect_ratio})"
            )
            image = await self._run(provider, request, model, aspect_ratio)
        except PainterError as e:
            logger.warning(f"Paint failed ({e.reason}): {e.message}")
            return PaintResult.failure(
                e.message, e.reason, provider=request.provider
            )
        except Exception as e:
            logger.exception(f"Unexpected painter error: {e}")
            return PaintResult.failure(
                str(e) or "Unknown error", "provider", provider=request.provider
            )

        logger.info(f"Image generated by {provider.name}")
        if image.image_base64:
            return PaintResult.from_base64(
                image.image_base64,
                mime_type=image.mime_type,
                provider=request.provider,
                model=model,
            )
        return PaintResult.from_url(
            image.image_url,
            mime_type=image.mime_type,
            provider=request.provider,
            model=model,
        )

    async def close(self) -> None:
        """Close all provider connections."""
        for provider in [*self._providers.values(), *self._custom_providers.values()]:
            await provider.close()
        self._providers.clear()
        self._custom_providers.clear()

    async def __aenter__(self) -> "Painter":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


# Module singleton
_painter: Painter | None = None


def get_painter() -> Painter:
    """Get global Painter instance."""
    global _painter
    if _painter is None:
        _painter = Painter()
        register_cleanup("Painter", _close_painter)
    return _painter


async def _close_painter() -> None:
    """Close the global Painter."""
    global _painter
    if _painter:
        await _painter.close()
        _painter = None
