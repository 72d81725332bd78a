"""Server-side adapter between the JSON endpoints and the image services."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Union

from config.settings import AppConfig
from modules.errors import UpstreamError, ValidationError
from modules.pipelines.img2img import EditRequest, Image2ImageService, VariationRequest
from modules.pipelines.text2img import PromptRequest, Text2ImageService
from modules.utils.image_utils import build_full_mask, decode_data_url

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TextToImage:
    """Generate a fresh image from the prompt alone."""

    prompt: str


@dataclass(frozen=True, slots=True)
class ImageVariation:
    """Produce a variation of an uploaded image."""

    image: bytes


GenerationMode = Union[TextToImage, ImageVariation]


def resolve_generation_mode(prompt: str, source_image: Optional[str]) -> GenerationMode:
    """Pick the upstream operation for a generate request.

    Raises:
        ConversionError: the source image is not valid base64
    """
    if source_image:
        return ImageVariation(image=decode_data_url(source_image))
    return TextToImage(prompt=prompt)


class ImageOperationAdapter:
    """Validate requests, call the upstream service and return image URLs."""

    def __init__(
        self,
        config: AppConfig,
        text_service: Text2ImageService,
        image_service: Image2ImageService,
    ) -> None:
        self.config = config
        self.text_service = text_service
        self.image_service = image_service

    def generate_or_vary(self, prompt: Optional[str], source_image: Optional[str] = None) -> str:
        """Return the URL of a new image, or of a variation of ``source_image``."""
        if not prompt or not prompt.strip():
            raise ValidationError("Prompt is required", field="prompt")

        try:
            mode = resolve_generation_mode(prompt, source_image)
            if isinstance(mode, ImageVariation):
                logger.info("Requesting variation of a %d byte image", len(mode.image))
                result = self.image_service.vary(VariationRequest(image=mode.image))
            else:
                logger.info("Requesting text-to-image generation")
                result = self.text_service.generate(PromptRequest(prompt=mode.prompt))
        except Exception as exc:
            logger.exception("Error generating image")
            raise UpstreamError("Failed to generate image") from exc
        return result.image_url

    def edit(self, prompt: Optional[str], source_image: Optional[str]) -> str:
        """Return the URL of ``source_image`` edited according to ``prompt``."""
        if not prompt or not prompt.strip() or not source_image:
            raise ValidationError("Both prompt and source image are required")

        try:
            image = decode_data_url(source_image)
            mask = build_full_mask(image, self.config.mask_byte_limit)
            logger.info("Requesting edit of a %d byte image (mask %d bytes)", len(image), len(mask))
            result = self.image_service.edit(EditRequest(image=image, mask=mask, prompt=prompt))
        except Exception as exc:
            logger.exception("Error editing image")
            raise UpstreamError("Failed to edit image") from exc
        return result.image_url


def build_adapter(config: AppConfig, client: object) -> ImageOperationAdapter:
    """Wire the adapter to a configured OpenAI client."""
    return ImageOperationAdapter(
        config,
        text_service=Text2ImageService(config, client),
        image_service=Image2ImageService(config, client),
    )

