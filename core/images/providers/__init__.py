"""Image provider registry."""

from ..types import ImageProvider
from .apimart import ApimartProvider
from .base import BaseImageProvider, PolledImageProvider, SyncImageProvider
from .custom import CustomProvider
from .fal import FalProvider
from .gemini import GeminiProvider
from .openai import OpenAIProvider
from .replicate import ReplicateProvider

PROVIDER_REGISTRY: dict[ImageProvider, type[BaseImageProvider]] = {
    ImageProvider.GEMINI: GeminiProvider,
    ImageProvider.APIMART: ApimartProvider,
    ImageProvider.OPENAI: OpenAIProvider,
    ImageProvider.FAL: FalProvider,
    ImageProvider.REPLICATE: ReplicateProvider,
    ImageProvider.CUSTOM: CustomProvider,
}

__all__ = [
    "BaseImageProvider",
    "SyncImageProvider",
    "PolledImageProvider",
    "ApimartProvider",
    "CustomProvider",
    "FalProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "ReplicateProvider",
    "PROVIDER_REGISTRY",
]
