"""Style analysis and product image generation."""

from .product_image import ProductImageGenerator
from .style_match import StyleMatcher

__all__ = ["ProductImageGenerator", "StyleMatcher"]
