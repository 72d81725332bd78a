"""Configuration helpers for the Ghiblify project."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

DEFAULT_PROMPT = "convert this image into studio ghibli style anime"


@dataclass(slots=True)
class AppConfig:
    """Centralized application configuration."""

    assets_dir: Path = Path("assets")
    log_dir: Path = Path("logs")
    openai_key: Optional[str] = None
    openai_base_url: Optional[str] = None
    generation_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_quality: str = "standard"
    image_style: str = "vivid"
    mask_byte_limit: int = 1024 * 1024
    host: str = "127.0.0.1"
    port: int = 7860
    api_base_url: str = "http://127.0.0.1:7860"
    request_timeout: float = 120.0
    default_prompt: str = DEFAULT_PROMPT
    metadata: dict[str, Any] = field(default_factory=dict)


def _load_env_file(path: Path) -> None:
    """Populate environment variables from a simple KEY=VALUE .env file."""
    if not path.exists():
        return

    for line in path.read_text(encoding="utf-8").splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            continue
        key, value = stripped.split("=", 1)
        os.environ[key.strip()] = value.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Return an AppConfig instance with environment-aware settings."""
    env_path = Path(config_path) if config_path else Path(".env")
    _load_env_file(env_path)

    host = os.getenv("HOST", "127.0.0.1")
    port = _env_int("PORT", 7860)
    api_base_url = os.getenv("API_BASE_URL") or f"http://{host}:{port}"

    metadata: dict[str, Any] = {}
    variation_model = os.getenv("OPENAI_VARIATION_MODEL")
    if variation_model:
        metadata["variation_model"] = variation_model

    return AppConfig(
        assets_dir=Path(os.getenv("ASSETS_DIR", "assets")),
        log_dir=Path(os.getenv("LOG_DIR", "logs")),
        openai_key=os.getenv("OPENAI_API_KEY") or None,
        openai_base_url=os.getenv("OPENAI_BASE_URL") or None,
        generation_model=os.getenv("OPENAI_IMAGE_MODEL", "dall-e-3"),
        image_size=os.getenv("IMAGE_SIZE", "1024x1024"),
        image_quality=os.getenv("IMAGE_QUALITY", "standard"),
        image_style=os.getenv("IMAGE_STYLE", "vivid"),
        mask_byte_limit=_env_int("MASK_BYTE_LIMIT", 1024 * 1024),
        host=host,
        port=port,
        api_base_url=api_base_url.rstrip("/"),
        request_timeout=_env_float("REQUEST_TIMEOUT", 120.0),
        metadata=metadata,
    )
