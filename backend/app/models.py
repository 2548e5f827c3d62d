"""Data structures for SquareEdit."""

from __future__ import annotations

import io
from dataclasses import dataclass, field

from PIL import Image as PILImage

from .constants import FORMAT_MIME_TYPES
from .enums import EditOperation
from .exceptions import ValidationError


@dataclass(frozen=True)
class Dimensions:
    """Intrinsic pixel size of an image."""
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValidationError(
                f"Dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def is_square(self) -> bool:
        return self.width == self.height

    def to_tuple(self) -> tuple[int, int]:
        return (self.width, self.height)


@dataclass(frozen=True)
class RasterImage:
    """Encoded image bytes plus their decoded size and MIME type."""
    data: bytes = field(repr=False)
    width: int
    height: int
    mime_type: str

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def dimensions(self) -> Dimensions:
        return Dimensions(self.width, self.height)

    def to_pil(self) -> PILImage.Image:
        """Decode into a fully loaded PIL image owned by the caller."""
        image = PILImage.open(io.BytesIO(self.data))
        image.load()
        return image

    @classmethod
    def from_pil(
        cls, image: PILImage.Image, fmt: str = "PNG", quality: int = 95
    ) -> RasterImage:
        """Encode a PIL image.

        JPEG output drops any alpha channel, so RGBA/LA/P inputs are
        flattened to RGB first.
        """
        fmt = fmt.upper()
        if fmt == "JPEG" and image.mode not in ("RGB", "L"):
            image = image.convert("RGB")

        buffer = io.BytesIO()
        if fmt == "JPEG":
            image.save(buffer, format=fmt, quality=quality)
        else:
            image.save(buffer, format=fmt)

        return cls(
            data=buffer.getvalue(),
            width=image.width,
            height=image.height,
            mime_type=FORMAT_MIME_TYPES.get(fmt, f"image/{fmt.lower()}"),
        )


@dataclass(frozen=True)
class ContentBox:
    """Where the original content lives inside a padded square canvas."""
    offset_x: float
    offset_y: float
    content_width: float
    content_height: float

    @property
    def center(self) -> tuple[float, float]:
        return (
            self.offset_x + self.content_width / 2,
            self.offset_y + self.content_height / 2,
        )

    def scale(self, factor: float) -> ContentBox:
        return ContentBox(
            offset_x=self.offset_x * factor,
            offset_y=self.offset_y * factor,
            content_width=self.content_width * factor,
            content_height=self.content_height * factor,
        )

    def to_pixel_rect(self) -> tuple[int, int, int, int]:
        """Integer (left, top, right, bottom) rectangle, at least 1px each way."""
        left = round(self.offset_x)
        top = round(self.offset_y)
        right = max(left + 1, round(self.offset_x + self.content_width))
        bottom = max(top + 1, round(self.offset_y + self.content_height))
        return (left, top, right, bottom)


@dataclass(frozen=True)
class NormalizedSquare:
    """A target x target canvas and the box its content occupies."""
    image: RasterImage
    content_box: ContentBox
    original: Dimensions
    target: int


@dataclass(frozen=True)
class RelativePosition:
    """Position as percentages of the content area (not the padded square)."""
    x_percent: float
    y_percent: float

    def __post_init__(self) -> None:
        for name, value in (("x_percent", self.x_percent), ("y_percent", self.y_percent)):
            if not 0 <= value <= 100:
                raise ValidationError(f"{name} must be within [0, 100], got {value}")


@dataclass(frozen=True)
class PixelPosition:
    """Position in canvas pixel space."""
    x: float
    y: float


@dataclass(frozen=True)
class Description:
    """Outcome of the location description step.

    ``fallback_used`` is True when the model call failed and ``text`` holds
    the generic phrase for the operation.
    """
    text: str
    fallback_used: bool = False
    error: str | None = None


@dataclass(frozen=True)
class PaintColor:
    """A named paint color."""
    name: str
    hex: str


@dataclass(frozen=True)
class EditRequest:
    """Inputs for one orchestrated edit.

    Only the fields relevant to ``operation`` are read.
    """
    operation: EditOperation
    scene: RasterImage
    position: RelativePosition | None = None
    object_image: RasterImage | None = None
    object_description: str = ""
    scene_description: str = ""
    color: PaintColor | None = None
    mask: RasterImage | None = None
    instruction: str = ""


@dataclass(frozen=True)
class PipelineResult:
    """Externally visible output of one orchestrated edit."""
    final_image: RasterImage
    prompt_used: str
    operation: EditOperation
    debug_image: RasterImage | None = None
    description: Description | None = None


@dataclass(frozen=True)
class MoveResult:
    """Output of the apply-move sub-pipeline."""
    inpainted: PipelineResult
    cutout: RasterImage
    mask: RasterImage


@dataclass(frozen=True)
class ProductSuggestion:
    """A product that fits an analyzed style."""
    name: str
    description: str


@dataclass
class StyleMatchResults:
    """Style analysis of an inspiration image."""
    products: list[ProductSuggestion] = field(default_factory=list)
    paint_colors: list[PaintColor] = field(default_factory=list)
