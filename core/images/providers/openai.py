"""OpenAI images API provider."""

import logging

from ..errors import ProviderError, ProviderNotConfiguredError
from ..types import GeneratedImage, ImageModel, ImageProvider, PaintRequest
from .base import SyncImageProvider

logger = logging.getLogger(__name__)

# dall-e-3 accepts only these three sizes
_PORTRAIT_RATIOS = {"2:3", "3:4", "4:5", "9:16"}
_LANDSCAPE_RATIOS = {"3:2", "4:3", "5:4", "16:9", "21:9"}


def size_for_aspect_ratio(aspect_ratio: str) -> str:
    if aspect_ratio in _PORTRAIT_RATIOS:
        return "1024x1792"
    if aspect_ratio in _LANDSCAPE_RATIOS:
        return "1792x1024"
    return "1024x1024"


class OpenAIProvider(SyncImageProvider):
    """OpenAI images/generations with inline base64 output.

    Environment:
        OPENAI_IMAGE_API_KEY: API key (falls back to OPENAI_API_KEY)
        OPENAI_IMAGE_BASE_URL: Base URL (default: https://api.openai.com/v1)
    """

    source = ImageProvider.OPENAI
    supported_models = (ImageModel.DALL_E_3.value,)
    default_model = ImageModel.DALL_E_3.value

    @property
    def is_available(self) -> bool:
        return bool(self._config.openai_api_key)

    async def generate(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> GeneratedImage:
        if not self.is_available:
            raise ProviderNotConfiguredError(
                "OPENAI_IMAGE_API_KEY not configured", provider=self.name
            )

        base_url = self._config.openai_base_url.rstrip("/")
        response = await self._request(
            "POST",
            f"{base_url}/images/generations",
            headers={"Authorization": f"Bearer {self._config.openai_api_key}"},
            json={
                "model": model,
                "prompt": self.build_prompt(request),
                "size": size_for_aspect_ratio(aspect_ratio),
                "n": 1,
                "response_format": "b64_json",
            },
        )
        data = self._json(response)

        items = data.get("data") or []
        if not items:
            raise ProviderError("No image data in OpenAI response", provider=self.name)

        item = items[0]
        if item.get("b64_json"):
            return GeneratedImage(image_base64=item["b64_json"])
        if item.get("url"):
            return GeneratedImage(image_url=item["url"])

        raise ProviderError("No image found in OpenAI response", provider=self.name)
