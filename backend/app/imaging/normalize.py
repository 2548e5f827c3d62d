"""Square normalization: fit any image into a padded square canvas."""

from __future__ import annotations

import logging

from PIL import Image

from ..config import Config
from ..models import NormalizedSquare, RasterImage
from .geometry import compute_content_box
from .resize import high_quality_resize

logger = logging.getLogger("squareedit.imaging.normalize")


def normalize_to_square(
    image: RasterImage, target: int = Config.TARGET_DIMENSION
) -> NormalizedSquare:
    """Scale ``image`` into a centered ``target x target`` padded canvas.

    The padding is ``Config.PADDING_COLOR`` and transparent source pixels are
    flattened onto it. Output is always ``Config.OUTPUT_FORMAT`` so every
    square reaches the model in the same encoding.

    Args:
        image: Source image of any size and format.
        target: Side of the square canvas.

    Returns:
        NormalizedSquare carrying the canvas and its content box.
    """
    original = image.dimensions
    box = compute_content_box(original, target)
    left, top, right, bottom = box.to_pixel_rect()

    canvas = Image.new("RGB", (target, target), Config.PADDING_COLOR)
    try:
        with image.to_pil() as source:
            rgba = source.convert("RGBA")
        scaled = high_quality_resize(rgba, (right - left, bottom - top))
        try:
            canvas.paste(scaled, (left, top), scaled)
        finally:
            if scaled is not rgba:
                scaled.close()
            rgba.close()
        square = RasterImage.from_pil(canvas, Config.OUTPUT_FORMAT, Config.JPEG_QUALITY)
    finally:
        canvas.close()

    logger.debug(
        "Normalized %dx%d into %dx%d, content at (%d, %d, %d, %d)",
        original.width, original.height, target, target, left, top, right, bottom,
    )
    return NormalizedSquare(image=square, content_box=box, original=original, target=target)
