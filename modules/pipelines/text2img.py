"""Text-to-image service backed by the OpenAI Images API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from config.settings import AppConfig
from modules.pipelines.openai_client import first_image_url


@dataclass(slots=True)
class PromptRequest:
    """Request data for text-to-image generation."""

    prompt: str
    count: int = 1
    size: Optional[str] = None
    quality: Optional[str] = None
    style: Optional[str] = None


@dataclass(slots=True)
class ImageResult:
    """Locator of an image produced by the upstream service."""

    image_url: str
    prompt: str


class Text2ImageService:
    """Facade around ``client.images.generate``."""

    def __init__(self, config: AppConfig, client: Any) -> None:
        self.config = config
        self._client = client

    def generate(self, request: PromptRequest) -> ImageResult:
        """Generate an image from a text prompt."""
        response = self._client.images.generate(
            model=self.config.generation_model,
            prompt=request.prompt,
            n=request.count,
            size=request.size or self.config.image_size,
            quality=request.quality or self.config.image_quality,
            style=request.style or self.config.image_style,
        )
        return ImageResult(image_url=first_image_url(response), prompt=request.prompt)
