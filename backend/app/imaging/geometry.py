"""Content-box geometry and coordinate mapping for padded squares.

A source of any aspect ratio is scaled to fit a ``target x target`` square
and centered. The content box records where the scaled source sits; it is a
pure function of the source dimensions and the target, so normalizing,
marking and cropping all agree on the same rectangle without storing it.
"""

from __future__ import annotations

from ..models import ContentBox, Dimensions, PixelPosition, RelativePosition
from ..validators import validate_target


def compute_content_box(dimensions: Dimensions, target: int) -> ContentBox:
    """Derive where content of ``dimensions`` lives inside a padded square.

    Landscape sources span the full width; portrait and square sources span
    the full height.

    Args:
        dimensions: Original (unpadded) image size.
        target: Side of the square canvas.

    Returns:
        ContentBox with float offsets and extents.
    """
    validate_target(target)

    aspect = dimensions.width / dimensions.height
    if aspect > 1:
        content_width = float(target)
        content_height = target / aspect
    else:
        content_height = float(target)
        content_width = target * aspect

    return ContentBox(
        offset_x=(target - content_width) / 2,
        offset_y=(target - content_height) / 2,
        content_width=content_width,
        content_height=content_height,
    )


def to_pixel(position: RelativePosition, box: ContentBox) -> PixelPosition:
    """Map a content-relative position onto canvas pixels."""
    return PixelPosition(
        x=box.offset_x + (position.x_percent / 100) * box.content_width,
        y=box.offset_y + (position.y_percent / 100) * box.content_height,
    )


def to_relative(pixel: PixelPosition, box: ContentBox) -> RelativePosition:
    """Map a canvas pixel back to a content-relative position.

    Points in the padding are clamped onto the nearest content edge.
    """
    x_percent = (pixel.x - box.offset_x) / box.content_width * 100
    y_percent = (pixel.y - box.offset_y) / box.content_height * 100
    return RelativePosition(
        x_percent=min(100.0, max(0.0, x_percent)),
        y_percent=min(100.0, max(0.0, y_percent)),
    )
