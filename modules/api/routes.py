"""
Image API endpoints.

Routes:
- POST /generate-image - Generate a new image, or a variation of an uploaded one
- POST /edit-image - Edit an image according to a prompt
- GET /health - Liveness probe

Both image routes answer ``{"imageUrl": ...}`` on success and
``{"error": ...}`` with status 400 (bad request) or 500 (upstream failure).
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from modules.api.adapter import ImageOperationAdapter
from modules.errors import UpstreamError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["images"])


class ImageRequest(BaseModel):
    """Body shared by both image endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    prompt: Optional[str] = None
    source_image: Optional[str] = Field(default=None, alias="sourceImage")


class ImageResponse(BaseModel):
    """Locator of the produced image."""

    model_config = ConfigDict(populate_by_name=True)

    image_url: str = Field(alias="imageUrl")


def get_adapter(request: Request) -> ImageOperationAdapter:
    """Return the adapter stored on the application state."""
    return request.app.state.adapter


@router.post("/generate-image", response_model=ImageResponse, response_model_by_alias=True)
def generate_image(
    body: ImageRequest,
    adapter: ImageOperationAdapter = Depends(get_adapter),
) -> ImageResponse:
    """
    Generate an image from a prompt, or a variation when a source is given.

    Raises:
        ValidationError: prompt missing or blank (400)
        UpstreamError: the image service failed (500)
    """
    image_url = adapter.generate_or_vary(body.prompt, body.source_image)
    return ImageResponse(image_url=image_url)


@router.post("/edit-image", response_model=ImageResponse, response_model_by_alias=True)
def edit_image(
    body: ImageRequest,
    adapter: ImageOperationAdapter = Depends(get_adapter),
) -> ImageResponse:
    """
    Edit the source image over its whole area according to the prompt.

    Raises:
        ValidationError: prompt or source image missing (400)
        UpstreamError: the image service failed (500)
    """
    image_url = adapter.edit(body.prompt, body.source_image)
    return ImageResponse(image_url=image_url)


@router.get("/health")
def health() -> dict[str, str]:
    """Basic liveness check."""
    return {"status": "healthy"}


async def _validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    logger.info("Rejected %s: %s", request.url.path, exc.message)
    return JSONResponse(status_code=400, content={"error": exc.message})


async def _upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    return JSONResponse(status_code=500, content={"error": exc.message})


async def _malformed_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("Malformed body on %s: %s", request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_api_app(adapter: ImageOperationAdapter) -> FastAPI:
    """Build the FastAPI application serving the image endpoints."""
    app = FastAPI(title="Ghiblify API")
    app.state.adapter = adapter
    app.include_router(router)
    app.add_exception_handler(ValidationError, _validation_error_handler)
    app.add_exception_handler(UpstreamError, _upstream_error_handler)
    app.add_exception_handler(RequestValidationError, _malformed_body_handler)
    return app
