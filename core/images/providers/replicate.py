"""Replicate predictions API provider."""

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

REPLICATE_MODELS: dict[str, str] = {
    ImageModel.FLUX_PRO.value: "black-forest-labs/flux-pro",
}


class ReplicateProvider(PolledImageProvider):
    """Replicate predictions: create, then poll until succeeded/failed/canceled.

    Environment:
        REPLICATE_API_TOKEN: API token
        REPLICATE_BASE_URL: Base URL (default: https://api.replicate.com/v1)
    """

    source = ImageProvider.REPLICATE
    supported_models = tuple(REPLICATE_MODELS)
    default_model = ImageModel.FLUX_PRO.value

    @property
    def is_available(self) -> bool:
        return bool(self._config.replicate_api_token)

    @property
    def base_url(self) -> str:
        return self._config.replicate_base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._config.replicate_api_token}"}

    async def submit(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> TaskHandle:
        if not self.is_available:
            raise ProviderNotConfiguredError(
                "REPLICATE_API_TOKEN not configured", provider=self.name
            )

        slug = REPLICATE_MODELS.get(model, REPLICATE_MODELS[self.default_model])
        response = await self._request(
            "POST",
            f"{self.base_url}/models/{slug}/predictions",
            headers=self._headers(),
            json={
                "input": {
                    "prompt": self.build_prompt(request),
                    "aspect_ratio": aspect_ratio,
                }
            },
        )
        data = self._json(response)

        prediction_id = data.get("id")
        if not prediction_id:
            raise ProviderError("No prediction id in Replicate response", provider=self.name)

        status_url = (data.get("urls") or {}).get("get") or (
            f"{self.base_url}/predictions/{prediction_id}"
        )
        return TaskHandle(task_id=prediction_id, status_url=status_url)

    async def poll(self, handle: TaskHandle) -> TaskStatus:
        url = handle.status_url or f"{self.base_url}/predictions/{handle.task_id}"
        data = self._json(await self._request("GET", url, headers=self._headers()))
        status = data.get("status")

        if status == "succeeded":
            output = data.get("output")
            if isinstance(output, list):
                output = output[0] if output else None
            if output:
                return TaskStatus(
                    state=TaskState.SUCCEEDED, image=GeneratedImage(image_url=output)
                )
            return TaskStatus(state=TaskState.SUCCEEDED, error="No output in Replicate prediction")

        if status in ("failed", "canceled"):
            return TaskStatus(
                state=TaskState.FAILED,
                error=data.get("error") or f"Prediction {status}",
            )

        return TaskStatus(state=TaskState.PENDING)
