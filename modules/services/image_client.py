"""HTTP client for the generate/edit endpoints."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from modules.errors import ConversionError, FetchError, RequestError, ResponseError
from modules.utils.image_utils import DEFAULT_MIME, encode_bytes

logger = logging.getLogger(__name__)


class ImageOperationClient:
    """Submit image operations and return their results as data URLs.

    Every call makes two round-trips: the POST to the API, then a GET of the
    image URL it returns. Failures are raised immediately, without retries.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 120.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()

    def generate_or_transform(self, source_image: str, prompt: str) -> str:
        """Generate a new image, or transform ``source_image`` when given."""
        return self._run("/generate-image", source_image, prompt, verb="generate", noun="generated")

    def edit_existing(self, source_image: str, prompt: str) -> str:
        """Edit ``source_image`` according to ``prompt``."""
        return self._run("/edit-image", source_image, prompt, verb="edit", noun="edited")

    def _run(self, path: str, source_image: str, prompt: str, verb: str, noun: str) -> str:
        payload: Dict[str, Any] = {"prompt": prompt}
        if source_image:
            payload["sourceImage"] = source_image

        image_url = self._submit(path, payload, f"Failed to {verb} image")
        return self._fetch_as_data_url(image_url, f"Failed to fetch {noun} image")

    def _submit(self, path: str, payload: Dict[str, Any], fallback: str) -> str:
        try:
            response = self._session.post(
                f"{self.base_url}{path}",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            logger.warning("Request to %s failed: %s", path, exc)
            raise RequestError(fallback) from exc

        if not response.ok:
            raise RequestError(self._error_message(response, fallback), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as exc:
            raise ResponseError("Invalid response from API") from exc

        image_url = data.get("imageUrl") if isinstance(data, dict) else None
        if not image_url:
            raise ResponseError("No image URL returned from API")
        return str(image_url)

    @staticmethod
    def _error_message(response: requests.Response, fallback: str) -> str:
        try:
            data = response.json()
        except ValueError:
            return fallback
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return fallback

    def _fetch_as_data_url(self, image_url: str, failure: str) -> str:
        try:
            response = self._session.get(image_url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("Fetching generated image failed: %s", exc)
            raise FetchError(failure) from exc

        if not response.ok:
            raise FetchError(failure, {"status_code": response.status_code})

        content_type = response.headers.get("Content-Type", "")
        mime = content_type.split(";", 1)[0].strip()
        if not mime.startswith("image/"):
            mime = DEFAULT_MIME
        try:
            return encode_bytes(response.content, mime)
        except (TypeError, ValueError) as exc:
            raise ConversionError("Failed to convert image to base64") from exc
