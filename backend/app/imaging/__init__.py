"""Image geometry and pixel operations for SquareEdit."""

from .base_ops import RasterOps
from .codec import decode_image, load_image_file, probe_dimensions
from .crop import crop_to_original
from .geometry import compute_content_box, to_pixel, to_relative
from .marker import draw_marker
from .mask import apply_mask, binarize_mask, is_binary_mask, normalize_mask
from .normalize import normalize_to_square
from .pillow_ops import PillowRasterOps

__all__ = [
    "RasterOps",
    "PillowRasterOps",
    "apply_mask",
    "binarize_mask",
    "compute_content_box",
    "crop_to_original",
    "decode_image",
    "draw_marker",
    "is_binary_mask",
    "load_image_file",
    "normalize_mask",
    "normalize_to_square",
    "probe_dimensions",
    "to_pixel",
    "to_relative",
]
