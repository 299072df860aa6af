"""Base provider classes for image generation.

Two capability shapes exist:
- SyncImageProvider: one request returns the image.
- PolledImageProvider: submit returns a task handle, poll reports progress.
The painter service depends only on these interfaces.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar

import httpx

from core.utils.http_errors import HTTPRequestError, safe_http_request

from ..config import PainterConfig
from ..errors import ProviderError, from_http_error
from ..types import (
    CustomProviderConfig,
    GeneratedImage,
    ImageProvider,
    PaintRequest,
    TaskHandle,
    TaskStatus,
)

logger = logging.getLogger(__name__)


class BaseImageProvider(ABC):
    """Abstract base for image providers.

    Usable as ``async with provider:`` to close the HTTP client on exit.
    """

    source: ClassVar[ImageProvider]
    supported_models: ClassVar[tuple[str, ...]] = ()
    default_model: ClassVar[str]

    def __init__(
        self,
        config: PainterConfig,
        custom: CustomProviderConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._config = config
        self._custom = custom
        self._client = client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client (lazy initialization)."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._config.timeout)
        return self._client

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether provider credentials are configured."""
        pass

    @property
    def name(self) -> str:
        return self.source.value

    def resolve_model(self, requested: str | None) -> str:
        """Pick the model to send; unsupported requests fall back to the default."""
        if requested is None:
            return self.default_model
        model = getattr(requested, "value", requested)
        if model in self.supported_models:
            return model
        logger.warning(
            f"Model {model} not supported by {self.name}, using {self.default_model}"
        )
        return self.default_model

    def build_prompt(self, request: PaintRequest) -> str:
        """Instruction text sent to the provider.

        None of the adapters expose a separate negative-prompt field, so the
        negative instruction travels as a trailing "Avoid:" line.
        """
        if request.negative_instruction:
            return f"{request.instruction}\n\nAvoid: {request.negative_instruction}"
        return request.instruction

    async def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        """HTTP request with errors mapped into the painter taxonomy."""
        client = await self._get_client()
        try:
            return await safe_http_request(client, method, url, **kwargs)
        except HTTPRequestError as e:
            raise from_http_error(e, self.name) from e

    def _json(self, response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"{self.name} returned invalid JSON", provider=self.name) from e
        if not isinstance(data, dict):
            raise ProviderError(f"{self.name} returned unexpected payload", provider=self.name)
        return data

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class SyncImageProvider(BaseImageProvider):
    """Provider whose response contains the finished image."""

    @abstractmethod
    async def generate(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> GeneratedImage:
        """Generate one image.

        Raises:
            PainterError: On any provider failure
        """
        pass


class PolledImageProvider(BaseImageProvider):
    """Provider that runs generation as an asynchronous task."""

    @abstractmethod
    async def submit(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> TaskHandle:
        """Create a generation task and return its handle."""
        pass

    @abstractmethod
    async def poll(self, handle: TaskHandle) -> TaskStatus:
        """Observe the task once."""
        pass
