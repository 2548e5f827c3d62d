"""Edit orchestrator: sequences model calls around square normalization."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from ..config import Config
from ..enums import EditOperation, EditStep, MaskMode
from ..exceptions import (
    DescriptionUnavailable,
    DimensionMismatchError,
    GenerationFailedError,
    SegmentationFailedError,
    SquareEditError,
    ValidationError,
)
from ..imaging.base_ops import RasterOps
from ..imaging.pillow_ops import PillowRasterOps
from ..models import (
    Description,
    Dimensions,
    EditRequest,
    MoveResult,
    NormalizedSquare,
    PaintColor,
    PipelineResult,
    RasterImage,
    RelativePosition,
)
from ..service.client import GenerationClient, Part
from ..service.prompts import SEGMENTATION_PROMPT
from ..validators import validate_target
from .strategies import STRATEGIES, OperationStrategy

logger = logging.getLogger("squareedit.pipeline")


class EditOrchestrator:
    """Run named edit operations against a generation service.

    Every operation follows the same chain:

    1. Probe the scene's original dimensions.
    2. Normalize the scene (and the object or mask) to a padded square.
    3. For marker-based operations, mark the scene and ask the model what
       sits under the marker. A failure here falls back to a generic phrase.
    4. Generate from the clean square(s). No image is a hard failure.
    5. Crop the generated square back to the original proportions.

    The orchestrator keeps no per-edit state, so one instance can serve
    concurrent callers.
    """

    def __init__(
        self,
        client: GenerationClient,
        raster_ops: RasterOps | None = None,
        target: int = Config.TARGET_DIMENSION,
    ) -> None:
        validate_target(target)
        self.client = client
        self.ops = raster_ops or PillowRasterOps()
        self.target = target

    # ------------------------------------------------------------------
    # Unified entry point
    # ------------------------------------------------------------------

    def run(self, request: EditRequest) -> PipelineResult | MoveResult:
        """Execute one edit request.

        Returns:
            PipelineResult, or MoveResult for ``object-move``.

        Raises:
            ValidationError: If the request is missing inputs.
            DecodeError: If an input image cannot be decoded.
            GenerationFailedError: If the model returns no edited image.
            SegmentationFailedError: If ``object-move`` gets no mask.
            GeometryError: On mask/scene mismatches or crop violations.
        """
        if request.operation == EditOperation.OBJECT_MOVE:
            if request.position is None:
                raise ValidationError("object-move requires a position")
            return self.object_move(request.scene, request.position)

        strategy = STRATEGIES[request.operation]
        strategy.validate(request)
        operation = request.operation.value
        logger.info("Starting %s", operation)

        original = self.ops.probe(request.scene.data)
        scene_square, companion = self._normalize_inputs(request, strategy)

        debug_image = None
        description = None
        if strategy.marks_scene:
            logger.info("[%s] Marking scene at (%.1f%%, %.1f%%)",
                        operation, request.position.x_percent, request.position.y_percent)
            debug_image = self.ops.draw_marker(scene_square, request.position)
            description = self.describe(debug_image, strategy)

        prompt = strategy.build_prompt(
            request, description.text if description is not None else None
        )
        parts = strategy.generation_parts(scene_square.image, companion, prompt)
        generated = self._generate(parts, operation)

        logger.info("[%s] Cropping %dx%d result to %dx%d",
                    operation, generated.width, generated.height,
                    original.width, original.height)
        final_image = self.ops.crop(generated, original, self.target)

        return PipelineResult(
            final_image=final_image,
            prompt_used=prompt,
            operation=request.operation,
            debug_image=debug_image,
            description=description,
        )

    # ------------------------------------------------------------------
    # Named operations
    # ------------------------------------------------------------------

    def composite(
        self,
        object_image: RasterImage,
        scene: RasterImage,
        position: RelativePosition,
        object_description: str = "",
        scene_description: str = "",
    ) -> PipelineResult:
        """Place ``object_image`` into ``scene`` at ``position``."""
        return self.run(EditRequest(
            operation=EditOperation.COMPOSITE,
            scene=scene,
            position=position,
            object_image=object_image,
            object_description=object_description,
            scene_description=scene_description,
        ))

    def paint(
        self, scene: RasterImage, color: PaintColor, position: RelativePosition
    ) -> PipelineResult:
        """Repaint the surface at ``position`` with ``color``."""
        return self.run(EditRequest(
            operation=EditOperation.PAINT, scene=scene, position=position, color=color,
        ))

    def erase(self, scene: RasterImage, position: RelativePosition) -> PipelineResult:
        """Remove the object at ``position``."""
        return self.run(EditRequest(
            operation=EditOperation.ERASE, scene=scene, position=position,
        ))

    def inpaint(self, scene: RasterImage, mask: RasterImage) -> PipelineResult:
        """Fill the white region of ``mask`` from the surrounding scene."""
        return self.run(EditRequest(
            operation=EditOperation.INPAINT, scene=scene, mask=mask,
        ))

    def text_edit(self, scene: RasterImage, instruction: str) -> PipelineResult:
        """Apply a free-form text instruction to the whole scene."""
        return self.run(EditRequest(
            operation=EditOperation.TEXT_EDIT, scene=scene, instruction=instruction,
        ))

    def masked_edit(
        self, scene: RasterImage, mask: RasterImage, instruction: str
    ) -> PipelineResult:
        """Apply a text instruction confined to the white region of ``mask``."""
        return self.run(EditRequest(
            operation=EditOperation.MASKED_EDIT, scene=scene, mask=mask,
            instruction=instruction,
        ))

    # ------------------------------------------------------------------
    # Object move
    # ------------------------------------------------------------------

    def generate_object_mask(
        self, scene: RasterImage, position: RelativePosition
    ) -> RasterImage:
        """Segment the object under ``position``.

        Returns:
            Binary PNG mask, ``target`` square, aligned with the normalized scene.

        Raises:
            SegmentationFailedError: If the model returns no mask or a
                non-square one.
        """
        operation = EditOperation.OBJECT_MOVE.value
        square = self.ops.normalize_to_square(scene, self.target)
        marked = self.ops.draw_marker(square, position)

        logger.info("[%s] Requesting segmentation mask", operation)
        try:
            mask = self.client.generate_image([marked, SEGMENTATION_PROMPT])
        except SquareEditError:
            raise
        except Exception as e:
            raise SegmentationFailedError(
                f"Mask generation failed: {e}", operation, EditStep.SEGMENT.value
            ) from e
        if mask is None:
            raise SegmentationFailedError(
                "The model did not return a mask", operation, EditStep.SEGMENT.value
            )
        # A non-square mask cannot be mapped back onto the square it was drawn on
        if mask.width != mask.height:
            raise SegmentationFailedError(
                f"Expected a square mask, got {mask.width}x{mask.height}",
                operation,
                EditStep.SEGMENT.value,
            )

        return self.ops.normalize_mask(mask, self.target)

    def apply_move(self, scene: RasterImage, mask: RasterImage) -> MoveResult:
        """Cut the masked object out and inpaint the hole it leaves.

        The cutout comes from the normalized scene; the inpaint runs on the
        original-resolution scene so its result is cropped back to full size.
        """
        operation = EditOperation.OBJECT_MOVE.value
        original = self.ops.probe(scene.data)
        square = self.ops.normalize_to_square(scene, self.target)
        square_mask = self._normalize_mask(original, mask)

        logger.info("[%s] Cutting out object", operation)
        cutout = self.ops.apply_mask(square.image, square_mask, MaskMode.CUTOUT)

        logger.info("[%s] Inpainting vacated area", operation)
        inpainted = self.inpaint(scene, square_mask)
        return MoveResult(inpainted=inpainted, cutout=cutout, mask=square_mask)

    def object_move(self, scene: RasterImage, position: RelativePosition) -> MoveResult:
        """Segment the object at ``position``, then cut it out and inpaint."""
        mask = self.generate_object_mask(scene, position)
        return self.apply_move(scene, mask)

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def describe(self, marked: RasterImage, strategy: OperationStrategy) -> Description:
        """Ask the model what sits under the marker.

        Never raises; any failure yields the operation's fallback phrase.
        """
        operation = strategy.operation.value
        try:
            text = self._request_description(marked, strategy)
        except DescriptionUnavailable as e:
            logger.warning("[%s] Using fallback description: %s", operation, e)
            return Description(
                text=strategy.fallback_description, fallback_used=True, error=str(e)
            )
        logger.info("[%s] Location description: %s", operation, text)
        return Description(text=text)

    def _request_description(self, marked: RasterImage, strategy: OperationStrategy) -> str:
        operation = strategy.operation.value
        step = EditStep.DESCRIBE.value
        try:
            text = self.client.generate_text([strategy.description_prompt, marked])
        except Exception as e:
            raise DescriptionUnavailable(str(e) or type(e).__name__, operation, step) from e
        if not text or not text.strip():
            raise DescriptionUnavailable("Empty description", operation, step)
        return text.strip()

    def _generate(self, parts: list[Part], operation: str) -> RasterImage:
        step = EditStep.GENERATE.value
        logger.info("[%s] Sending %d parts for generation", operation, len(parts))
        try:
            image = self.client.generate_image(parts)
        except SquareEditError:
            raise
        except Exception as e:
            raise GenerationFailedError(
                f"Image generation failed: {e}", operation, step
            ) from e
        if image is None:
            raise GenerationFailedError(
                "The model did not return an image", operation, step
            )
        return image

    def _normalize_inputs(
        self, request: EditRequest, strategy: OperationStrategy
    ) -> tuple[NormalizedSquare, RasterImage | None]:
        if strategy.needs_object:
            # Scene and object are independent; normalize them side by side
            with ThreadPoolExecutor(max_workers=Config.NORMALIZE_WORKERS) as pool:
                scene_future = pool.submit(self.ops.normalize_to_square, request.scene, self.target)
                object_future = pool.submit(
                    self.ops.normalize_to_square, request.object_image, self.target
                )
                return scene_future.result(), object_future.result().image

        scene_square = self.ops.normalize_to_square(request.scene, self.target)
        if strategy.needs_mask:
            return scene_square, self._normalize_mask(scene_square.original, request.mask)
        return scene_square, None

    def _normalize_mask(self, scene_dims: Dimensions, mask: RasterImage) -> RasterImage:
        """Bring a mask onto the scene's square canvas.

        Accepts masks drawn at the scene's own resolution or already
        normalized to ``target``.

        Raises:
            DimensionMismatchError: For any other mask size.
        """
        already_square = mask.width == mask.height == self.target
        if mask.dimensions != scene_dims and not already_square:
            raise DimensionMismatchError(
                f"Mask is {mask.width}x{mask.height}; expected the scene size "
                f"{scene_dims.width}x{scene_dims.height} or {self.target}x{self.target}"
            )
        return self.ops.normalize_mask(mask, self.target)
