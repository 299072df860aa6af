"""fal.ai queue API provider."""

import logging

from ..errors import ProviderError, ProviderNotConfiguredError
from ..types import (
    GeneratedImage,
    ImageModel,
    ImageProvider,
    PaintRequest,
    TaskHandle,
    TaskState,
    TaskStatus,
)
from .base import PolledImageProvider

logger = logging.getLogger(__name__)

# Model name -> fal application path
FAL_MODELS: dict[str, str] = {
    ImageModel.FLUX_PRO.value: "fal-ai/flux-pro",
}

_IMAGE_SIZES: dict[str, str] = {
    "1:1": "square_hd",
    "3:4": "portrait_4_3",
    "4:5": "portrait_4_3",
    "2:3": "portrait_4_3",
    "9:16": "portrait_16_9",
    "4:3": "landscape_4_3",
    "5:4": "landscape_4_3",
    "3:2": "landscape_4_3",
    "16:9": "landscape_16_9",
    "21:9": "landscape_16_9",
}


def image_size_for(aspect_ratio: str) -> str:
    return _IMAGE_SIZES.get(aspect_ratio, "square_hd")


class FalProvider(PolledImageProvider):
    """fal.ai queue: submit, poll status_url, then fetch response_url.

    Environment:
        FAL_KEY: API key
        FAL_QUEUE_URL: Queue base URL (default: https://queue.fal.run)
    """

    source = ImageProvider.FAL
    supported_models = tuple(FAL_MODELS)
    default_model = ImageModel.FLUX_PRO.value

    @property
    def is_available(self) -> bool:
        return bool(self._config.fal_api_key)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Key {self._config.fal_api_key}"}

    async def submit(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> TaskHandle:
        if not self.is_available:
            raise ProviderNotConfiguredError("FAL_KEY not configured", provider=self.name)

        app = FAL_MODELS.get(model, FAL_MODELS[self.default_model])
        base_url = self._config.fal_queue_url.rstrip("/")
        response = await self._request(
            "POST",
            f"{base_url}/{app}",
            headers=self._headers(),
            json={
                "prompt": self.build_prompt(request),
                "image_size": image_size_for(aspect_ratio),
                "num_images": 1,
            },
        )
        data = self._json(response)

        request_id = data.get("request_id")
        if not request_id:
            raise ProviderError("No request_id in fal response", provider=self.name)

        return TaskHandle(
            task_id=request_id,
            status_url=data.get("status_url") or f"{base_url}/{app}/requests/{request_id}/status",
            result_url=data.get("response_url") or f"{base_url}/{app}/requests/{request_id}",
        )

    async def poll(self, handle: TaskHandle) -> TaskStatus:
        response = await self._request("GET", handle.status_url, headers=self._headers())
        data = self._json(response)
        status = data.get("status")

        if status in ("IN_QUEUE", "IN_PROGRESS"):
            return TaskStatus(state=TaskState.PENDING)
        if status != "COMPLETED":
            return TaskStatus(
                state=TaskState.FAILED,
                error=data.get("error") or f"fal task ended with status {status}",
            )

        result = self._json(
            await self._request("GET", handle.result_url, headers=self._headers())
        )
        if result.get("error") or result.get("detail"):
            return TaskStatus(
                state=TaskState.FAILED,
                error=str(result.get("error") or result.get("detail")),
            )

        images = result.get("images") or []
        if images and images[0].get("url"):
            return TaskStatus(
                state=TaskState.SUCCEEDED,
                image=GeneratedImage(
                    image_url=images[0]["url"],
                    mime_type=images[0].get("content_type") or "image/png",
                ),
            )
        return TaskStatus(state=TaskState.SUCCEEDED, error="No image URL in fal response")
