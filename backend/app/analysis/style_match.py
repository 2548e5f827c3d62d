"""Inspiration image analysis: product suggestions and a paint palette."""

from __future__ import annotations

import logging
from typing import Any

from ..enums import EditStep
from ..exceptions import ModelError, SquareEditError, StyleAnalysisError, ValidationError
from ..models import PaintColor, ProductSuggestion, RasterImage, StyleMatchResults
from ..service.client import GenerationClient
from ..service.prompts import STYLE_MATCH_PROMPT, STYLE_MATCH_SCHEMA
from ..validators import validate_hex_color

logger = logging.getLogger("squareedit.analysis.style_match")


class StyleMatcher:
    """Turn an inspiration photo into products and colors that fit its style."""

    OPERATION = "style-match"

    def __init__(self, client: GenerationClient) -> None:
        self.client = client

    def analyze(self, image: RasterImage) -> StyleMatchResults:
        """Analyze ``image`` with a JSON-constrained model call.

        Entries with a blank name or an invalid hex code are dropped.

        Raises:
            StyleAnalysisError: If the request fails, the response is not
                JSON, or it lacks the ``products``/``paintColors`` keys.
        """
        step = EditStep.ANALYZE.value
        try:
            payload = self.client.generate_json([image, STYLE_MATCH_PROMPT], STYLE_MATCH_SCHEMA)
        except ModelError as e:
            raise StyleAnalysisError(
                f"The model failed to return valid style suggestions: {e}", self.OPERATION, step
            ) from e
        except SquareEditError:
            raise
        except Exception as e:
            raise StyleAnalysisError(
                f"Style analysis request failed: {e}", self.OPERATION, step
            ) from e

        if "products" not in payload or "paintColors" not in payload:
            raise StyleAnalysisError(
                "Response is missing required 'products' or 'paintColors' keys",
                self.OPERATION,
                step,
            )

        results = StyleMatchResults(
            products=self._parse_products(payload["products"]),
            paint_colors=self._parse_colors(payload["paintColors"]),
        )
        logger.info(
            "Style match: %d products, %d colors",
            len(results.products), len(results.paint_colors),
        )
        return results

    @staticmethod
    def _parse_products(raw: Any) -> list[ProductSuggestion]:
        products = []
        for item in raw if isinstance(raw, list) else []:
            if not isinstance(item, dict):
                continue
            name = str(item.get("name") or "").strip()
            if name:
                products.append(
                    ProductSuggestion(name=name, description=str(item.get("description") or "").strip())
                )
        return products

    @staticmethod
    def _parse_colors(raw: Any) -> list[PaintColor]:
        colors = []
        for item in raw if isinstance(raw, list) else []:
            if not isinstance(item, dict):
                continue
            name = str(item.get("name") or "").strip()
            try:
                hex_code = validate_hex_color(item.get("hex", ""))
            except ValidationError as e:
                logger.debug("Skipping color %r: %s", name, e)
                continue
            if name:
                colors.append(PaintColor(name=name, hex=hex_code))
        return colors
