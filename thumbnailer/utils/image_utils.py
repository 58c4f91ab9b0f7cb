"""
Image utility functions for captured frames.

This module provides utilities for:
- Decoding the base64 JPEG data URL exported by the browser canvas
- Structural JPEG validation (SOI/EOI markers)
- Reading pixel dimensions of the captured frame with Pillow
"""

import base64
import binascii
import io
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError

from thumbnailer.errors import FrameCaptureError


JPEG_DATA_URL_PREFIX = "data:image/jpeg;base64,"

JPEG_SOI = b"\xff\xd8"
JPEG_EOI = b"\xff\xd9"


def decode_jpeg_data_url(data_url: str) -> bytes:
    """
    Strip the JPEG data URL prefix and decode the base64 payload.

    Args:
        data_url: String returned by canvas.toDataURL('image/jpeg', ...)

    Returns:
        Raw JPEG bytes

    Raises:
        FrameCaptureError: If the payload is empty or not valid base64
    """
    payload = data_url
    if payload.startswith(JPEG_DATA_URL_PREFIX):
        payload = payload[len(JPEG_DATA_URL_PREFIX):]
    elif payload.startswith("data:"):
        # Canvas falls back to PNG when JPEG encoding is unsupported
        mime = payload[5:].split(";", 1)[0].split(",", 1)[0]
        raise FrameCaptureError(f"Canvas exported {mime or 'unknown data'} instead of image/jpeg")

    if not payload:
        raise FrameCaptureError("Canvas exported an empty image")

    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise FrameCaptureError(f"Invalid base64 image payload: {e}") from e


def is_valid_jpeg(data: bytes) -> bool:
    """Check for a non-empty buffer with JPEG SOI header and EOI footer."""
    return len(data) > 4 and data.startswith(JPEG_SOI) and data.endswith(JPEG_EOI)


def get_jpeg_dimensions(data: bytes) -> Optional[Tuple[int, int]]:
    """
    Read (width, height) of a JPEG image.

    Returns None when Pillow cannot identify the buffer or it holds
    another image format.
    """
    try:
        with Image.open(io.BytesIO(data)) as im:
            if im.format != "JPEG":
                return None
            return im.size
    except (UnidentifiedImageError, OSError):
        return None
