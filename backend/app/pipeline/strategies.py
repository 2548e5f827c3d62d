"""Per-operation behavior plugged into the edit orchestrator.

Each strategy declares what extra inputs its operation needs, whether the
scene is marked and described first, and how the generation prompt and
parts are assembled. The orchestrator owns the shared
normalize -> (mark -> describe) -> generate -> crop skeleton.
"""

from __future__ import annotations

from ..constants import FALLBACK_DESCRIPTIONS
from ..enums import EditOperation
from ..exceptions import ValidationError
from ..models import EditRequest, RasterImage
from ..service.client import Part
from ..service import prompts
from ..validators import validate_hex_color, validate_instruction


class OperationStrategy:
    """Defaults for an operation that sends the clean scene and a prompt."""

    operation: EditOperation
    description_prompt: str | None = None  # Set for marker-based operations
    needs_object = False
    needs_mask = False

    @property
    def marks_scene(self) -> bool:
        return self.description_prompt is not None

    @property
    def fallback_description(self) -> str:
        return FALLBACK_DESCRIPTIONS[self.operation]

    def validate(self, request: EditRequest) -> None:
        """Check the request carries what this operation reads.

        Raises:
            ValidationError: If a required input is missing.
        """
        if request.operation != self.operation:
            raise ValidationError(
                f"{type(self).__name__} cannot run {request.operation.value}"
            )
        if self.marks_scene and request.position is None:
            raise ValidationError(f"{self.operation.value} requires a position")
        if self.needs_object and request.object_image is None:
            raise ValidationError(f"{self.operation.value} requires an object image")
        if self.needs_mask and request.mask is None:
            raise ValidationError(f"{self.operation.value} requires a mask")

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        raise NotImplementedError

    def generation_parts(
        self, scene: RasterImage, companion: RasterImage | None, prompt: str
    ) -> list[Part]:
        """Scene first, then the mask when there is one, then the prompt."""
        if companion is None:
            return [scene, prompt]
        return [scene, companion, prompt]


class CompositeStrategy(OperationStrategy):
    operation = EditOperation.COMPOSITE
    description_prompt = prompts.COMPOSITE_DESCRIPTION_PROMPT
    needs_object = True

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        return prompts.composite_prompt(
            location or self.fallback_description,
            request.object_description.strip(),
            request.scene_description.strip(),
        )

    def generation_parts(
        self, scene: RasterImage, companion: RasterImage | None, prompt: str
    ) -> list[Part]:
        # Product image goes first; the prompt refers to it as "the first image"
        return [companion, scene, prompt]


class PaintStrategy(OperationStrategy):
    operation = EditOperation.PAINT
    description_prompt = prompts.PAINT_DESCRIPTION_PROMPT

    def validate(self, request: EditRequest) -> None:
        super().validate(request)
        if request.color is None:
            raise ValidationError("paint requires a color")
        validate_hex_color(request.color.hex)

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        return prompts.paint_prompt(location or self.fallback_description, request.color)


class EraseStrategy(OperationStrategy):
    operation = EditOperation.ERASE
    description_prompt = prompts.ERASE_DESCRIPTION_PROMPT

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        return prompts.erase_prompt(location or self.fallback_description)


class InpaintStrategy(OperationStrategy):
    operation = EditOperation.INPAINT
    needs_mask = True

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        return prompts.INPAINT_PROMPT


class TextEditStrategy(OperationStrategy):
    operation = EditOperation.TEXT_EDIT

    def validate(self, request: EditRequest) -> None:
        super().validate(request)
        validate_instruction(request.instruction)

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        return prompts.text_edit_prompt(request.instruction.strip())


class MaskedEditStrategy(OperationStrategy):
    operation = EditOperation.MASKED_EDIT
    needs_mask = True

    def validate(self, request: EditRequest) -> None:
        super().validate(request)
        validate_instruction(request.instruction)

    def build_prompt(self, request: EditRequest, location: str | None) -> str:
        return prompts.masked_edit_prompt(request.instruction.strip())


STRATEGIES: dict[EditOperation, OperationStrategy] = {
    strategy.operation: strategy
    for strategy in (
        CompositeStrategy(),
        PaintStrategy(),
        EraseStrategy(),
        InpaintStrategy(),
        TextEditStrategy(),
        MaskedEditStrategy(),
    )
}
