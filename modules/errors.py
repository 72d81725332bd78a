"""Exception hierarchy shared by the API, the image client and the UI."""

from __future__ import annotations

from typing import Any, Optional


class GhiblifyError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(GhiblifyError):
    """Client supplied an incomplete request (HTTP 400)."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class UpstreamError(GhiblifyError):
    """The image service rejected or failed a call (HTTP 500).

    Only ``message`` is ever shown to clients; the underlying cause is kept
    on ``__cause__`` and logged server-side.
    """


class MissingCredentialError(GhiblifyError):
    """No API key is configured for the image service."""


class ConversionError(GhiblifyError):
    """Binary data could not be converted to or from a data URL."""


class ImageClientError(GhiblifyError):
    """Base class for failures seen by the remote image client."""


class RequestError(ImageClientError):
    """The generate/edit request failed or returned a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        details = {"status_code": status_code} if status_code is not None else None
        super().__init__(message, details)
        self.status_code = status_code


class ResponseError(ImageClientError):
    """A success response did not carry an image URL."""


class FetchError(ImageClientError):
    """The generated image could not be downloaded."""
