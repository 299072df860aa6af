"""Self-described provider speaking the apimart-style task protocol."""

from ..errors import ProviderNotConfiguredError
from ..types import ImageProvider, PaintRequest, TaskHandle
from .apimart import ApimartProvider


class CustomProvider(ApimartProvider):
    """Task API configured only by base URL, API key and optional model."""

    source = ImageProvider.CUSTOM
    default_model = "gpt-4o-image"

    @property
    def api_key(self) -> str | None:
        return self._custom.api_key if self._custom else None

    @property
    def base_url(self) -> str:
        return self._custom.base_url.rstrip("/") if self._custom else ""

    @property
    def name(self) -> str:
        return self._custom.name if self._custom else self.source.value

    def resolve_model(self, requested: str | None) -> str:
        # The configured model wins; anything else passes through untouched
        if self._custom and self._custom.model:
            return self._custom.model
        if requested is None:
            return self.default_model
        return getattr(requested, "value", requested)

    async def submit(
        self,
        request: PaintRequest,
        model: str,
        aspect_ratio: str,
    ) -> TaskHandle:
        if not self.is_available:
            raise ProviderNotConfiguredError(
                "Custom provider requires a base URL and an API key",
                provider=self.name,
            )
        return await super().submit(request, model, aspect_ratio)
