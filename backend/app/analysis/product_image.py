"""Product image generation from a text description."""

from __future__ import annotations

import logging

from ..enums import EditStep
from ..exceptions import GenerationFailedError, SquareEditError
from ..models import RasterImage
from ..service.client import GenerationClient
from ..validators import validate_instruction

logger = logging.getLogger("squareedit.analysis.product_image")


class ProductImageGenerator:
    """Generate a square PNG of a product described in words."""

    OPERATION = "product-image"

    def __init__(self, client: GenerationClient) -> None:
        self.client = client

    def generate(self, description: str) -> RasterImage:
        """Generate one product image.

        Raises:
            ValidationError: If the description is empty.
            GenerationFailedError: If no image comes back.
        """
        prompt = validate_instruction(description, "description")
        step = EditStep.GENERATE.value
        try:
            image = self.client.generate_standalone_image(prompt)
        except SquareEditError:
            raise
        except Exception as e:
            raise GenerationFailedError(
                f"Product image generation failed: {e}", self.OPERATION, step
            ) from e
        if image is None:
            raise GenerationFailedError(
                "Failed to generate a product image from the description",
                self.OPERATION,
                step,
            )
        logger.info("Generated %dx%d product image", image.width, image.height)
        return image
