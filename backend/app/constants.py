"""Shared constants for SquareEdit."""

from __future__ import annotations

from .enums import EditOperation

# Substituted when the location description call fails
FALLBACK_DESCRIPTIONS = {
    EditOperation.COMPOSITE: "at the specified location.",
    EditOperation.PAINT: "the area at the specified location",
    EditOperation.ERASE: "the object at the specified location",
}

# Pillow format name -> MIME type
FORMAT_MIME_TYPES = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "WEBP": "image/webp",
    "GIF": "image/gif",
    "BMP": "image/bmp",
    "TIFF": "image/tiff",
}

# Marker ring colors (fill, outline)
MARKER_FILL = (255, 0, 0)
MARKER_OUTLINE = (255, 255, 255)

# Mask pixel values
MASK_WHITE = 255
MASK_BLACK = 0
