"""Pillow/NumPy/OpenCV implementation of RasterOps."""

from __future__ import annotations

from ..enums import MaskMode
from ..models import Dimensions, NormalizedSquare, RasterImage, RelativePosition
from .base_ops import RasterOps
from .codec import probe_dimensions
from .crop import crop_to_original
from .marker import draw_marker
from .mask import apply_mask, normalize_mask
from .normalize import normalize_to_square


class PillowRasterOps(RasterOps):
    """Raster operations backed by Pillow, with NumPy/OpenCV for masks."""

    def probe(self, data: bytes) -> Dimensions:
        return probe_dimensions(data)

    def normalize_to_square(self, image: RasterImage, target: int) -> NormalizedSquare:
        return normalize_to_square(image, target)

    def crop(self, square: RasterImage, original: Dimensions, target: int) -> RasterImage:
        return crop_to_original(square, original, target)

    def draw_marker(self, square: NormalizedSquare, position: RelativePosition) -> RasterImage:
        return draw_marker(square, position)

    def apply_mask(self, scene: RasterImage, mask: RasterImage, mode: MaskMode) -> RasterImage:
        return apply_mask(scene, mask, mode)

    def normalize_mask(self, mask: RasterImage, target: int) -> RasterImage:
        return normalize_mask(mask, target)
