"""Custom exception hierarchy for SquareEdit."""

from __future__ import annotations


class SquareEditError(Exception):
    """Base exception for all SquareEdit errors."""


class ValidationError(SquareEditError):
    """Raised when input validation fails."""


class ConfigurationError(SquareEditError):
    """Raised when the generation client cannot be configured."""


class DecodeError(SquareEditError):
    """Raised when image bytes cannot be decoded."""


class GeometryError(SquareEditError):
    """Raised when an image geometry invariant is violated.

    These indicate a programming error (mismatched targets or sizes), not a
    model availability problem.
    """


class DimensionMismatchError(GeometryError):
    """Raised when a mask and a scene differ in pixel dimensions."""


class CropGeometryError(GeometryError):
    """Raised when a computed crop rectangle exceeds the image bounds."""


class ModelError(SquareEditError):
    """Raised when the generation service does not deliver a usable result.

    Carries the operation and step so callers can tell which call failed.
    """

    def __init__(
        self, message: str, operation: str | None = None, step: str | None = None
    ) -> None:
        self.operation = operation
        self.step = step
        context = ", ".join(
            f"{key}={value}"
            for key, value in (("operation", operation), ("step", step))
            if value
        )
        super().__init__(f"{message} ({context})" if context else message)


class DescriptionUnavailable(ModelError):
    """Raised when the location description step fails. Non-fatal."""


class GenerationFailedError(ModelError):
    """Raised when a mandatory generation step returns no image."""


class SegmentationFailedError(ModelError):
    """Raised when the model returns no segmentation mask."""


class StyleAnalysisError(ModelError):
    """Raised when style analysis returns no usable structured result."""
