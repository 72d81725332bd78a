"""Image-to-image services (variation and masked edit) backed by OpenAI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from config.settings import AppConfig
from modules.pipelines.openai_client import first_image_url
from modules.pipelines.text2img import ImageResult


@dataclass(slots=True)
class VariationRequest:
    """Request data for producing a variation of an image."""

    image: bytes
    count: int = 1
    size: Optional[str] = None


@dataclass(slots=True)
class EditRequest:
    """Request data for a masked, prompt-driven edit."""

    image: bytes
    mask: bytes
    prompt: str
    count: int = 1
    size: Optional[str] = None


class Image2ImageService:
    """Facade around ``client.images.create_variation`` and ``client.images.edit``."""

    def __init__(self, config: AppConfig, client: Any) -> None:
        self.config = config
        self._client = client

    @staticmethod
    def _as_file(name: str, payload: bytes) -> tuple[str, bytes, str]:
        # the SDK accepts (filename, content, mime) tuples as multipart files
        return (name, payload, "image/png")

    def vary(self, request: VariationRequest) -> ImageResult:
        """Produce a variation of the given image."""
        kwargs: Dict[str, Any] = {
            "image": self._as_file("image.png", request.image),
            "n": request.count,
            "size": request.size or self.config.image_size,
        }
        variation_model = self.config.metadata.get("variation_model")
        if variation_model:
            kwargs["model"] = variation_model

        response = self._client.images.create_variation(**kwargs)
        return ImageResult(image_url=first_image_url(response), prompt="")

    def edit(self, request: EditRequest) -> ImageResult:
        """Edit the image wherever the mask allows, following the prompt."""
        response = self._client.images.edit(
            image=self._as_file("image.png", request.image),
            mask=self._as_file("mask.png", request.mask),
            prompt=request.prompt,
            n=request.count,
            size=request.size or self.config.image_size,
        )
        return ImageResult(image_url=first_image_url(response), prompt=request.prompt)
