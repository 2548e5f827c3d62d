"""High-quality image resize with gamma correction."""

from __future__ import annotations

import logging

import numpy as np
from PIL import Image

from ..config import Config

logger = logging.getLogger("squareedit.imaging.resize")


def high_quality_resize(
    image: Image.Image,
    target_size: tuple[int, int],
    resample: Image.Resampling | None = None,
) -> Image.Image:
    """High-quality resize with gamma correction.

    Color images are resized in linear light. Single-channel images (masks)
    are resized directly, so a NEAREST ``resample`` keeps their edges hard.

    Args:
        image: Source PIL image.
        target_size: Target (width, height).
        resample: Resampling filter, defaults to ``Config.RESIZE_QUALITY``.

    Returns:
        Resized image, or the source itself when the size already matches.
    """
    if target_size[0] <= 0 or target_size[1] <= 0:
        return image

    resample = Config.RESIZE_QUALITY if resample is None else resample

    if image.mode in ("L", "1"):
        if image.size == target_size:
            return image.convert("L")
        return image.convert("L").resize(target_size, resample)

    # Ensure image is in a supported mode
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")

    if image.size == target_size:
        return image

    logger.debug("Resizing %dx%d -> %dx%d", *image.size, *target_size)

    # Convert to numpy for gamma correction
    arr = np.array(image).astype(np.float32) / 255.0

    # Gamma decode (to linear)
    rgb = arr[:, :, :3]
    alpha = arr[:, :, 3:4] if arr.shape[2] == 4 else None

    linear = np.power(np.clip(rgb, 0, 1), Config.GAMMA)

    if alpha is not None:
        linear = np.concatenate([linear, alpha], axis=2)

    pil_linear = Image.fromarray(np.round(linear * 255).astype(np.uint8))
    resized = pil_linear.resize(target_size, resample)

    # Gamma encode (back to sRGB)
    arr_resized = np.array(resized).astype(np.float32) / 255.0
    encoded = np.power(np.clip(arr_resized[:, :, :3], 0, 1), 1.0 / Config.GAMMA)

    if alpha is not None:
        encoded = np.concatenate([encoded, arr_resized[:, :, 3:4]], axis=2)
        return Image.fromarray(np.round(encoded * 255).astype(np.uint8))

    return Image.fromarray(np.round(encoded * 255).astype(np.uint8))
