"""apimart.ai task API provider.

Submission returns a task id; ``GET /tasks/{id}`` reports status with the
result nested under ``data``.
"""

import logging
from typing import Any
from urllib.parse import quote

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

_SUCCESS_STATES = {"completed", "success", "succeeded"}
_FAILURE_STATES = {"failed", "error"}


def _first(value: Any) -> Any:
    """URL fields may be a string or a list of strings."""
    if isinstance(value, list):
        return value[0] if value else None
    return value


def extract_task_id(data: dict) -> str | None:
    items = data.get("data")
    if isinstance(items, list) and items and isinstance(items[0], dict):
        task_id = items[0].get("task_id")
        if task_id:
            return str(task_id)
    if data.get("task_id"):
        return str(data["task_id"])
    return None


def extract_image_url(task: dict) -> str | None:
    """Find the image URL in a completed task payload."""
    result = task.get("result") if isinstance(task.get("result"), dict) else {}
    output = task.get("output") if isinstance(task.get("output"), dict) else {}

    images = result.get("images")
    if isinstance(images, list) and images and isinstance(images[0], dict):
        url = _first(images[0].get("url"))
        if url:
            return url

    for candidate in (
        result.get("image_url"),
        result.get("url"),
        output.get("image_url"),
        output.get("url"),
        task.get("image_url"),
        task.get("url"),
    ):
        url = _first(candidate)
        if url:
            return url

    nested = task.get("data")
    if isinstance(nested, list) and nested and isinstance(nested[0], dict):
        return _first(nested[0].get("url") or nested[0].get("image_url"))

    return None


def parse_task_status(data: dict) -> TaskStatus:
    """Translate a task status payload into a TaskStatus."""
    task = data.get("data") if isinstance(data.get("data"), dict) else data
    status = str(
        task.get("status") or task.get("state") or data.get("status") or "unknown"
    ).lower()

    if status in _SUCCESS_STATES:
        url = extract_image_url(task)
        if url:
            return TaskStatus(state=TaskState.SUCCEEDED, image=GeneratedImage(image_url=url))
        return TaskStatus(state=TaskState.SUCCEEDED, error="No image URL in response")

    if status in _FAILURE_STATES:
        error = task.get("error") or task.get("message") or data.get("error") or data.get("message")
        if isinstance(error, dict):
            error = error.get("message")
        return TaskStatus(state=TaskState.FAILED, error=str(error) if error else "Task failed")

    return TaskStatus(state=TaskState.PENDING)


class ApimartProvider(PolledImageProvider):
    """apimart.ai asynchronous image tasks.

    Environment:
        APIMART_API_KEY: API key (falls back to OPENAI_API_KEY)
        APIMART_BASE_URL: Base URL (falls back to OPENAI_BASE_URL,
            then https://api.apimart.ai/v1)
    """

    source = ImageProvider.APIMART
    supported_models = (
        ImageModel.GPT_4O_IMAGE.value,
        ImageModel.GEMINI_PRO_IMAGE.value,
        ImageModel.GEMINI_FLASH_IMAGE.value,
    )
    default_model = ImageModel.GPT_4O_IMAGE.value

    @property
    def api_key(self) -> str | None:
        return self._config.apimart_api_key

    @property
    def base_url(self) -> str:
        return self._config.apimart_base_url.rstrip("/")

    @property
    def is_available(self) -> bool:
        return bool(self.api_key and self.base_url)

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}"}

    async def submit(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> TaskHandle:
        if not self.is_available:
            raise ProviderNotConfiguredError(
                f"{self.name} API key not configured", provider=self.name
            )

        response = await self._request(
            "POST",
            f"{self.base_url}/images/generations",
            headers=self._headers(),
            json={
                "model": model,
                "prompt": self.build_prompt(request),
                "size": aspect_ratio,
                "n": 1,
            },
        )
        task_id = extract_task_id(self._json(response))
        if not task_id:
            raise ProviderError("Unexpected response format", provider=self.name)

        logger.debug(f"{self.name} task created: {task_id}")
        return TaskHandle(task_id=task_id)

    async def poll(self, handle: TaskHandle) -> TaskStatus:
        response = await self._request(
            "GET",
            f"{self.base_url}/tasks/{quote(handle.task_id, safe='')}",
            headers=self._headers(),
        )
        return parse_task_status(self._json(response))
