"""PNG encode/decode helpers shared by the HTTP layer and the batch driver."""

from __future__ import annotations

import base64
import binascii
import io
from pathlib import Path

import numpy as np
from numpy.typing import NDArray
from PIL import Image, UnidentifiedImageError


def decode_png(data: bytes) -> NDArray[np.uint8]:
    """Decode image bytes to an RGBA array."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return np.array(img.convert("RGBA"), dtype=np.uint8)
    except UnidentifiedImageError as e:
        raise ValueError(f"not a decodable image: {e}") from e


def decode_mask_png(data: bytes) -> NDArray[np.uint8]:
    """Decode a grayscale instance-id image; each pixel value is an instance id."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            return np.array(img.convert("L"), dtype=np.uint8)
    except UnidentifiedImageError as e:
        raise ValueError(f"not a decodable mask image: {e}") from e


def encode_png(image: NDArray[np.uint8]) -> bytes:
    buf = io.BytesIO()
    Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8)).save(buf, format="PNG")
    return buf.getvalue()


def b64_to_bytes(text: str) -> bytes:
    """Accept plain base64 or a data: URL."""
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"invalid base64 payload: {e}") from e


def bytes_to_b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def load_image(path: Path) -> NDArray[np.uint8]:
    return decode_png(Path(path).read_bytes())


def load_mask(path: Path) -> NDArray[np.uint8]:
    return decode_mask_png(Path(path).read_bytes())


def save_png(image: NDArray[np.uint8], path: Path) -> None:
    Path(path).write_bytes(encode_png(image))
