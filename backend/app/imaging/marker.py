"""Marker annotation for model localization."""

from __future__ import annotations

import logging

from PIL import ImageDraw

from ..config import Config
from ..constants import MARKER_FILL, MARKER_OUTLINE
from ..models import NormalizedSquare, PixelPosition, RasterImage, RelativePosition
from .geometry import to_pixel

logger = logging.getLogger("squareedit.imaging.marker")


def marker_radius(width: int, height: int) -> float:
    """Radius proportional to the canvas, never below the configured minimum."""
    return max(Config.MARKER_MIN_RADIUS, Config.MARKER_RADIUS_RATIO * min(width, height))


def draw_marker(square: NormalizedSquare, position: RelativePosition) -> RasterImage:
    """Draw a red, white-ringed dot at ``position`` on a copy of the square.

    The position is relative to the content box, so it lands on the same
    scene feature whatever padding the normalization added.

    Returns:
        A new image; ``square`` is left untouched.
    """
    pixel = to_pixel(position, square.content_box)
    return draw_marker_at(square.image, pixel)


def draw_marker_at(image: RasterImage, pixel: PixelPosition) -> RasterImage:
    """Draw the marker at an absolute canvas pixel."""
    with image.to_pil() as src:
        canvas = src.convert("RGB")

    try:
        radius = marker_radius(canvas.width, canvas.height)
        outline = max(1, round(radius * Config.MARKER_OUTLINE_RATIO))
        draw = ImageDraw.Draw(canvas)
        draw.ellipse(
            (pixel.x - radius, pixel.y - radius, pixel.x + radius, pixel.y + radius),
            fill=MARKER_FILL,
            outline=MARKER_OUTLINE,
            width=outline,
        )
        marked = RasterImage.from_pil(canvas, Config.OUTPUT_FORMAT, Config.JPEG_QUALITY)
    finally:
        canvas.close()

    logger.debug("Marker r=%.1f at (%.1f, %.1f)", radius, pixel.x, pixel.y)
    return marked
