"""Construction of the OpenAI client used for all image operations."""

from __future__ import annotations

from typing import Any, Dict

from openai import OpenAI

from config.settings import AppConfig
from modules.errors import MissingCredentialError


def build_openai_client(config: AppConfig) -> OpenAI:
    """Return an OpenAI client for ``config`` or fail when no key is set."""
    if not config.openai_key:
        raise MissingCredentialError(
            "OPENAI_API_KEY is not set; add it to the environment or .env file."
        )

    client_kwargs: Dict[str, Any] = {"api_key": config.openai_key}
    if config.openai_base_url:
        client_kwargs["base_url"] = config.openai_base_url
    return OpenAI(**client_kwargs)


def first_image_url(response: Any) -> str:
    """Pull ``data[0].url`` out of an images response, or ``""``."""
    data = getattr(response, "data", None) or []
    if not data:
        return ""
    return getattr(data[0], "url", None) or ""
