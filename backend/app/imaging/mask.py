"""Binary mask handling: binarization, square fitting and compositing."""

from __future__ import annotations

import logging

import cv2
import numpy as np
from PIL import Image

from ..config import Config
from ..constants import MASK_BLACK, MASK_WHITE
from ..enums import MaskMode
from ..exceptions import DimensionMismatchError
from ..models import RasterImage
from .geometry import compute_content_box

logger = logging.getLogger("squareedit.imaging.mask")


def _binary_array(image: Image.Image, threshold: int = Config.MASK_THRESHOLD) -> np.ndarray:
    """Grey levels >= threshold become 255, everything else 0.

    Alpha, when present, counts as black where transparent.
    """
    if image.mode in ("RGBA", "LA", "PA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        flattened = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
        flattened.alpha_composite(rgba)
        grey = np.array(flattened.convert("L"))
    else:
        grey = np.array(image.convert("L"))

    _, binary = cv2.threshold(grey, threshold - 1, MASK_WHITE, cv2.THRESH_BINARY)
    return binary


def binarize_mask(mask: RasterImage, threshold: int = Config.MASK_THRESHOLD) -> RasterImage:
    """Force a mask to pure black and white (hard edges).

    Model masks often come back anti-aliased or JPEG-compressed.
    """
    with mask.to_pil() as img:
        binary = _binary_array(img, threshold)
    return RasterImage.from_pil(Image.fromarray(binary), Config.CUTOUT_FORMAT)


def is_binary_mask(mask: RasterImage) -> bool:
    """True when every pixel is pure white or pure black."""
    with mask.to_pil() as img:
        arr = np.array(img.convert("L"))
    return bool(np.isin(arr, (MASK_BLACK, MASK_WHITE)).all())


def normalize_mask(mask: RasterImage, target: int = Config.TARGET_DIMENSION) -> RasterImage:
    """Fit a mask into a ``target`` square with the same geometry as its scene.

    Padding is black (unselected) and NEAREST resampling keeps edges hard,
    so the mask stays aligned with a scene normalized to the same target.
    """
    box = compute_content_box(mask.dimensions, target)
    left, top, right, bottom = box.to_pixel_rect()

    with mask.to_pil() as img:
        binary = Image.fromarray(_binary_array(img))

    scaled = binary.resize((right - left, bottom - top), Image.Resampling.NEAREST)
    canvas = Image.new("L", (target, target), MASK_BLACK)
    canvas.paste(scaled, (left, top))
    return RasterImage.from_pil(canvas, Config.CUTOUT_FORMAT)


def apply_mask(
    scene: RasterImage, mask: RasterImage, mode: MaskMode = MaskMode.CUTOUT
) -> RasterImage:
    """Make scene pixels transparent according to a binary mask.

    In CUTOUT mode pixels under white survive; in BACKGROUND mode pixels
    under black survive.

    Args:
        scene: Scene image, usually a normalized square.
        mask: Binary mask with the same pixel dimensions.
        mode: Which side of the mask to keep.

    Returns:
        RGBA PNG of the scene's size.

    Raises:
        DimensionMismatchError: If scene and mask sizes differ.
    """
    if scene.size != mask.size:
        raise DimensionMismatchError(
            f"Mask is {mask.width}x{mask.height} but scene is {scene.width}x{scene.height}"
        )

    with scene.to_pil() as scene_img, mask.to_pil() as mask_img:
        rgba = np.array(scene_img.convert("RGBA"))
        selected = _binary_array(mask_img) == MASK_WHITE

    keep = selected if mode == MaskMode.CUTOUT else ~selected
    rgba[:, :, 3] = np.where(keep, rgba[:, :, 3], 0)

    logger.debug(
        "Applied %s mask: kept %d of %d pixels", mode.value, int(keep.sum()), keep.size
    )
    return RasterImage.from_pil(Image.fromarray(rgba), Config.CUTOUT_FORMAT)
