"""Abstract raster operations used by the edit pipeline."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..enums import MaskMode
from ..models import Dimensions, NormalizedSquare, RasterImage, RelativePosition


class RasterOps(ABC):
    """Imaging capabilities the orchestrator depends on.

    Geometry (content boxes, coordinate mapping) is backend independent;
    implementations only supply pixel work.
    """

    @abstractmethod
    def probe(self, data: bytes) -> Dimensions:
        """Return intrinsic dimensions of encoded image bytes."""
        ...

    @abstractmethod
    def normalize_to_square(self, image: RasterImage, target: int) -> NormalizedSquare:
        """Fit ``image`` centered into a padded ``target`` square."""
        ...

    @abstractmethod
    def crop(self, square: RasterImage, original: Dimensions, target: int) -> RasterImage:
        """Extract the content box of ``square`` at the original proportions."""
        ...

    @abstractmethod
    def draw_marker(self, square: NormalizedSquare, position: RelativePosition) -> RasterImage:
        """Return a copy of the square with a marker at ``position``."""
        ...

    @abstractmethod
    def apply_mask(self, scene: RasterImage, mask: RasterImage, mode: MaskMode) -> RasterImage:
        """Keep scene pixels selected by ``mask`` according to ``mode``."""
        ...

    @abstractmethod
    def normalize_mask(self, mask: RasterImage, target: int) -> RasterImage:
        """Fit a binary mask into a padded ``target`` square."""
        ...
