"""Global configuration for SquareEdit."""

from __future__ import annotations

import logging
import os

from PIL import Image

logger = logging.getLogger("squareedit.config")


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer, using %d", name, value, default)
        return default


class Config:
    """Global configuration."""

    # Model input canvas
    TARGET_DIMENSION = _env_int("SQUAREEDIT_TARGET_DIMENSION", 1024)
    MAX_TARGET_DIMENSION = 4096
    PADDING_COLOR = (0, 0, 0)  # Neutral fill behind the content box

    # Encoding
    OUTPUT_FORMAT = "JPEG"  # Normalized squares and cropped results
    CUTOUT_FORMAT = "PNG"  # Cutouts need an alpha channel
    JPEG_QUALITY = 95

    # Marker
    MARKER_MIN_RADIUS = 5
    MARKER_RADIUS_RATIO = 0.015  # Of the shorter canvas side
    MARKER_OUTLINE_RATIO = 0.2  # Outline width relative to radius

    # Masks
    MASK_THRESHOLD = 128  # Grey levels >= threshold become white

    # Quality
    RESIZE_QUALITY = Image.Resampling.LANCZOS
    GAMMA = 2.2

    # Models
    TEXT_MODEL = os.environ.get("SQUAREEDIT_TEXT_MODEL", "gemini-2.5-flash")
    IMAGE_MODEL = os.environ.get("SQUAREEDIT_IMAGE_MODEL", "gemini-2.5-flash-image")
    PRODUCT_IMAGE_MODEL = "imagen-4.0-generate-001"
    CHAT_MODEL = "gemini-2.5-flash"

    # Credentials (first non-empty wins)
    API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

    # Concurrency
    NORMALIZE_WORKERS = 2  # Composite normalizes scene and object together
