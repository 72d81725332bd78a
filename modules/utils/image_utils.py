"""Data URL helpers shared by the API and the UI.

Images travel through the app as ``data:<mime>;base64,<payload>`` strings: the
upload widget produces one, the API accepts one, and every generated image is
downloaded and re-encoded into one so results can be fed back in as sources.
"""

from __future__ import annotations

import base64
import binascii
import io
import mimetypes
import re
from pathlib import Path
from typing import Any, Union

from PIL import Image, UnidentifiedImageError

from modules.errors import ConversionError

DATA_URL_PREFIX = re.compile(r"^data:image/[a-z]+;base64,")
DEFAULT_MIME = "image/png"
MASK_BYTE_LIMIT = 1024 * 1024


def encode_bytes(raw: bytes, mime: str = DEFAULT_MIME) -> str:
    """Wrap raw bytes in a base64 data URL."""
    payload = base64.b64encode(raw).decode("ascii")
    return f"data:{mime or DEFAULT_MIME};base64,{payload}"


def guess_mime(name: Union[str, Path]) -> str:
    """Guess an image MIME type from a file name, falling back to PNG."""
    mime, _ = mimetypes.guess_type(str(name))
    if mime and mime.startswith("image/"):
        return mime
    return DEFAULT_MIME


def encode_file(path: Union[str, Path]) -> str:
    """Read a picked file and return it as a data URL."""
    file_path = Path(path)
    return encode_bytes(file_path.read_bytes(), guess_mime(file_path))


def encode_pil(image: Any) -> str:
    """PNG-encode a Pillow image into a data URL."""
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return encode_bytes(buffer.getvalue(), "image/png")


def strip_data_prefix(data_url: str) -> str:
    """Drop the ``data:image/<subtype>;base64,`` prefix if present."""
    return DATA_URL_PREFIX.sub("", data_url, count=1)


def decode_data_url(data_url: str) -> bytes:
    """Recover the raw bytes carried by a data URL (or bare base64)."""
    try:
        return base64.b64decode(strip_data_prefix(data_url), validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ConversionError("Failed to decode image data") from exc


def to_pil_image(data_url: str) -> Image.Image:
    """Decode a data URL into a Pillow image for display."""
    raw = decode_data_url(data_url)
    try:
        image = Image.open(io.BytesIO(raw))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ConversionError("Failed to read image data") from exc
    return image


def build_full_mask(source: bytes, limit: int = MASK_BYTE_LIMIT) -> bytes:
    """Return a mask that lets the edit touch every pixel.

    The mask is a run of ``0xFF`` bytes as long as the source image, capped
    at ``limit`` bytes.
    """
    size = max(0, min(len(source), limit))
    return b"\xff" * size
