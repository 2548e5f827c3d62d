"""Inverse of normalization: recover original proportions from a square."""

from __future__ import annotations

import logging

from ..config import Config
from ..exceptions import CropGeometryError
from ..models import Dimensions, RasterImage
from .geometry import compute_content_box
from .resize import high_quality_resize

logger = logging.getLogger("squareedit.imaging.crop")


def crop_to_original(
    square: RasterImage,
    original: Dimensions,
    target: int = Config.TARGET_DIMENSION,
    restore_size: bool = True,
) -> RasterImage:
    """Cut the content box out of a padded square.

    The box is re-derived from ``original`` and ``target`` exactly as during
    normalization. Models sometimes answer with a square of another side
    (e.g. 1024 asked, 768 returned); the box is then scaled to that side.

    Args:
        square: Square image, typically the model output.
        original: Dimensions of the image before normalization.
        target: Canvas side used during normalization.
        restore_size: Resize the extracted region back to ``original``.

    Returns:
        The content region, re-encoded as ``Config.OUTPUT_FORMAT``.

    Raises:
        CropGeometryError: If the image is not square or the content
            rectangle falls outside it.
    """
    if square.width != square.height:
        raise CropGeometryError(
            f"Expected a square image to crop, got {square.width}x{square.height}"
        )

    box = compute_content_box(original, target)
    if square.width != target:
        box = box.scale(square.width / target)

    left, top, right, bottom = box.to_pixel_rect()
    if left < 0 or top < 0 or right > square.width or bottom > square.height:
        raise CropGeometryError(
            f"Content rectangle ({left}, {top}, {right}, {bottom}) exceeds "
            f"{square.width}x{square.height} image"
        )

    with square.to_pil() as img:
        cropped = img.crop((left, top, right, bottom))
    region = cropped.convert("RGB")
    cropped.close()

    output = region
    try:
        if restore_size:
            output = high_quality_resize(region, original.to_tuple())
        result = RasterImage.from_pil(output, Config.OUTPUT_FORMAT, Config.JPEG_QUALITY)
    finally:
        if output is not region:
            output.close()
        region.close()

    logger.debug(
        "Cropped (%d, %d, %d, %d) from %dx%d -> %dx%d",
        left, top, right, bottom, square.width, square.height, result.width, result.height,
    )
    return result
