"""Application entry point for the Ghiblify project."""

from __future__ import annotations

from typing import Any, Optional

import gradio as gr
import uvicorn

from config.settings import AppConfig, load_config
from modules.api.adapter import build_adapter
from modules.api.routes import create_api_app
from modules.pipelines.openai_client import build_openai_client
from modules.services.image_client import ImageOperationClient
from modules.ui.controller import InteractionController
from modules.ui.layout import SWIPE_SCRIPT, build_app
from modules.utils.logging import setup_logging


def create_application(config: AppConfig, openai_client: Optional[Any] = None) -> Any:
    """Build the API and mount the Gradio UI on it.

    Raises ``MissingCredentialError`` when no OpenAI key is configured and no
    client is supplied.
    """
    client = openai_client or build_openai_client(config)
    api = create_api_app(build_adapter(config, client))

    image_client = ImageOperationClient(config.api_base_url, timeout=config.request_timeout)
    demo = build_app(config, InteractionController(image_client))
    demo.queue()
    # the page head belongs to the mount, Blocks no longer carries it
    return gr.mount_gradio_app(api, demo, path="/", head=SWIPE_SCRIPT)


def main(config_path: Optional[str] = None) -> None:
    """Load configuration and serve the API and the interface."""
    config = load_config(config_path)
    logger = setup_logging(config)
    app = create_application(config)
    logger.info("Serving Ghiblify on http://%s:%d", config.host, config.port)
    uvicorn.run(app, host=config.host, port=config.port)


if __name__ == "__main__":
    main()
