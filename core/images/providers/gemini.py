"""Gemini image generation provider (google-genai SDK)."""

import base64
import logging

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from ..errors import (
    ContentPolicyError,
    ProviderError,
    ProviderNotConfiguredError,
    RateLimitError,
    TransientPainterError,
)
from ..types import GeneratedImage, ImageModel, ImageProvider, PaintRequest
from .base import SyncImageProvider

logger = logging.getLogger(__name__)


class GeminiProvider(SyncImageProvider):
    """Gemini native image output via generate_content.

    Returns inline image bytes (base64 encoded on the way out) or, for some
    proxies, a file URI.

    Environment:
        GEMINI_IMAGE_API_KEY: API key (falls back to GEMINI_API_KEY)
        GEMINI_IMAGE_BASE_URL: Optional proxy base URL
    """

    source = ImageProvider.GEMINI
    supported_models = (
        ImageModel.GEMINI_PRO_IMAGE.value,
        ImageModel.GEMINI_FLASH_IMAGE.value,
    )
    default_model = ImageModel.GEMINI_PRO_IMAGE.value

    _genai_client: genai.Client | None = None

    @property
    def is_available(self) -> bool:
        return bool(self._config.gemini_api_key)

    def _get_genai_client(self) -> genai.Client:
        if self._genai_client is None:
            http_options = None
            if self._config.gemini_base_url:
                http_options = types.HttpOptions(base_url=self._config.gemini_base_url)
            self._genai_client = genai.Client(
                api_key=self._config.gemini_api_key,
                http_options=http_options,
            )
        return self._genai_client

    async def close(self) -> None:
        self._genai_client = None
        await super().close()

    async def generate(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> GeneratedImage:
        if not self.is_available:
            raise ProviderNotConfiguredError(
                "GEMINI_IMAGE_API_KEY not configured", provider=self.name
            )

        prompt = f"{self.build_prompt(request)}\n\nAspect ratio: {aspect_ratio}"
        client = self._get_genai_client()

        try:
            response = await client.aio.models.generate_content(
                model=model,
                contents=prompt,
                config=types.GenerateContentConfig(
                    response_modalities=["TEXT", "IMAGE"],
                ),
            )
        except genai_errors.APIError as e:
            raise self._map_api_error(e) from e
        except httpx.TransportError as e:
            raise TransientPainterError(
                f"Gemini request failed: {e}", provider=self.name
            ) from e

        return self._extract_image(response)

    def _map_api_error(self, error: genai_errors.APIError) -> Exception:
        message = f"Gemini API error: {error.code} - {error.message}"
        if error.code == 429:
            return RateLimitError("Gemini rate limit exceeded", provider=self.name)
        if isinstance(error, genai_errors.ServerError):
            return TransientPainterError(message, provider=self.name)
        return ProviderError(message, provider=self.name)

    def _extract_image(self, response: types.GenerateContentResponse) -> GeneratedImage:
        feedback = response.prompt_feedback
        if feedback is not None and feedback.block_reason:
            raise ContentPolicyError(
                f"Gemini blocked the prompt: {feedback.block_reason}",
                provider=self.name,
            )

        candidates = response.candidates or []
        if not candidates:
            raise ProviderError("No candidates in Gemini response", provider=self.name)

        candidate = candidates[0]
        if candidate.finish_reason == types.FinishReason.SAFETY:
            raise ContentPolicyError(
                "Gemini stopped generation for safety reasons", provider=self.name
            )

        parts = candidate.content.parts if candidate.content else None
        if not parts:
            raise ProviderError("No parts in Gemini response", provider=self.name)

        for part in parts:
            if part.inline_data and part.inline_data.data:
                data = part.inline_data.data
                encoded = (
                    base64.b64encode(data).decode("ascii")
                    if isinstance(data, bytes)
                    else data
                )
                return GeneratedImage(
                    image_base64=encoded,
                    mime_type=part.inline_data.mime_type or "image/png",
                )

        for part in parts:
            if part.file_data and part.file_data.file_uri:
                return GeneratedImage(image_url=part.file_data.file_uri)

        raise ProviderError("No image found in Gemini response", provider=self.name)
