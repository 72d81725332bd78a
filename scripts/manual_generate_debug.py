"""One-off script for debugging the generate/edit round-trip against a running server."""

from __future__ import annotations

import argparse
from pathlib import Path

from config.settings import load_config
from modules.services.image_client import ImageOperationClient
from modules.ui.controller import InteractionController, SessionState
from modules.utils.image_utils import decode_data_url, encode_file
from modules.utils.logging import setup_logging


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run one generate (and optional edit) through the API.")
    parser.add_argument("--image", type=Path, help="source image to transform")
    parser.add_argument("--prompt", default="convert this image into studio ghibli style anime")
    parser.add_argument("--edit-prompt", help="follow-up edit applied to the generated image")
    parser.add_argument("--out", type=Path, default=Path("debug_output"))
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    config = load_config()
    setup_logging(config)

    controller = InteractionController(
        ImageOperationClient(config.api_base_url, timeout=config.request_timeout)
    )
    session = SessionState()
    if args.image is not None:
        if not args.image.exists():
            raise FileNotFoundError(f"Missing source image: {args.image}")
        controller.stage_image(session, encode_file(args.image))

    notice = controller.generate(session, args.prompt)
    print("Generate:", notice)
    if args.edit_prompt and session.history.current() is not None:
        print("Edit:", controller.edit(session, args.edit_prompt))

    args.out.mkdir(parents=True, exist_ok=True)
    for index, record in enumerate(session.history):
        path = args.out / f"result_{index}.png"
        path.write_bytes(decode_data_url(record.result))
        print("Saved:", path.resolve())


if __name__ == "__main__":
    main()
