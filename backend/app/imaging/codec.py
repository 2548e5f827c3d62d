"""Decoding, encoding and dimension probing of image bytes."""

from __future__ import annotations

import io
import logging

from PIL import Image, UnidentifiedImageError

from ..constants import FORMAT_MIME_TYPES
from ..exceptions import DecodeError
from ..models import Dimensions, RasterImage

logger = logging.getLogger("squareedit.imaging.codec")


def decode_image(data: bytes, mime_type: str | None = None) -> RasterImage:
    """Wrap raw image bytes as a RasterImage.

    Args:
        data: Encoded image bytes.
        mime_type: Declared MIME type; sniffed from the bytes when omitted.

    Returns:
        RasterImage holding the original bytes.

    Raises:
        DecodeError: If the bytes are not a decodable image.
    """
    if not data:
        raise DecodeError("Image data is empty")

    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            width, height = img.size
            fmt = img.format
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Failed to decode image ({len(data)} bytes): {e}") from e

    if width <= 0 or height <= 0:
        raise DecodeError(f"Decoded image has no pixels: {width}x{height}")

    sniffed = FORMAT_MIME_TYPES.get(fmt or "", "application/octet-stream")
    return RasterImage(
        data=data,
        width=width,
        height=height,
        mime_type=mime_type or sniffed,
    )


def probe_dimensions(data: bytes) -> Dimensions:
    """Read the intrinsic width and height of encoded image bytes.

    Raises:
        DecodeError: If the bytes are not a decodable image.
    """
    image = decode_image(data)
    logger.debug("Probed %s image: %dx%d", image.mime_type, image.width, image.height)
    return Dimensions(image.width, image.height)


def load_image_file(path: str) -> RasterImage:
    """Read an image file from disk.

    Raises:
        DecodeError: If the file cannot be read or decoded.
    """
    try:
        with open(path, "rb") as fh:
            data = fh.read()
    except OSError as e:
        raise DecodeError(f"Failed to read image '{path}': {e}") from e
    return decode_image(data)
