"""Tests for the edit orchestrator against an in-memory generation client."""

import pytest

from backend.app.constants import FALLBACK_DESCRIPTIONS
from backend.app.enums import EditOperation, EditStep
from backend.app.exceptions import (
    ConfigurationError,
    DimensionMismatchError,
    GenerationFailedError,
    SegmentationFailedError,
    ValidationError,
)
from backend.app.imaging.mask import is_binary_mask
from backend.app.models import EditRequest, MoveResult, PaintColor, RasterImage, RelativePosition
from backend.app.pipeline.orchestrator import EditOrchestrator

CLICK = RelativePosition(10, 90)


def _images(parts: list) -> list[RasterImage]:
    return [p for p in parts if isinstance(p, RasterImage)]


def _texts(parts: list) -> list[str]:
    return [p for p in parts if isinstance(p, str)]


class TestPositionalOperations:
    def setup_method(self) -> None:
        self.target = 1024

    def test_composite_end_to_end(self, fake_client, landscape_scene, product_image):
        orchestrator = EditOrchestrator(fake_client, target=self.target)
        result = orchestrator.composite(product_image, landscape_scene, CLICK)

        assert result.operation == EditOperation.COMPOSITE
        assert result.final_image.size == (1920, 1080)
        assert result.debug_image.size == (1024, 1024)
        assert fake_client.text in result.prompt_used
        assert result.description.fallback_used is False

    def test_composite_sends_object_then_clean_scene(self, fake_client, landscape_scene, product_image):
        orchestrator = EditOrchestrator(fake_client)
        result = orchestrator.composite(product_image, landscape_scene, CLICK)

        parts = fake_client.image_calls[0]
        images = _images(parts)
        assert len(images) == 2
        assert all(img.size == (1024, 1024) for img in images)
        # The marked image only goes to the description call
        assert result.debug_image.data not in [img.data for img in images]
        assert _texts(parts) == [result.prompt_used]
        assert isinstance(parts[-1], str)

    def test_description_call_uses_marked_image(self, fake_client, landscape_scene):
        orchestrator = EditOrchestrator(fake_client)
        result = orchestrator.erase(landscape_scene, CLICK)

        description_parts = fake_client.text_calls[0]
        assert _images(description_parts)[0].data == result.debug_image.data

    def test_description_failure_falls_back(self, fake_client, landscape_scene):
        fake_client.text_error = RuntimeError("quota exceeded")
        orchestrator = EditOrchestrator(fake_client)
        result = orchestrator.erase(landscape_scene, CLICK)

        fallback = FALLBACK_DESCRIPTIONS[EditOperation.ERASE]
        assert result.description.fallback_used is True
        assert result.description.text == fallback
        assert "quota exceeded" in result.description.error
        assert fallback in result.prompt_used
        assert result.final_image.size == (1920, 1080)

    def test_empty_description_falls_back(self, fake_client, landscape_scene, product_image):
        fake_client.text = "   "
        result = EditOrchestrator(fake_client).composite(product_image, landscape_scene, CLICK)
        assert result.description.fallback_used is True
        assert "at the specified location." in result.prompt_used

    def test_paint_embeds_color(self, fake_client, portrait_scene):
        color = PaintColor(name="Deep Teal", hex="#1F6F78")
        result = EditOrchestrator(fake_client).paint(portrait_scene, color, RelativePosition(50, 50))

        assert "Deep Teal" in result.prompt_used
        assert "#1F6F78" in result.prompt_used
        assert result.final_image.size == (600, 900)

    def test_paint_without_color_rejected(self, fake_client, portrait_scene):
        request = EditRequest(EditOperation.PAINT, portrait_scene, position=CLICK)
        with pytest.raises(ValidationError, match="color"):
            EditOrchestrator(fake_client).run(request)
        assert fake_client.image_calls == []

    def test_paint_with_bad_hex_rejected(self, fake_client, portrait_scene):
        with pytest.raises(ValidationError, match="hex"):
            EditOrchestrator(fake_client).paint(portrait_scene, PaintColor("Red", "red"), CLICK)

    def test_missing_position_rejected(self, fake_client, landscape_scene):
        with pytest.raises(ValidationError, match="position"):
            EditOrchestrator(fake_client).run(EditRequest(EditOperation.ERASE, landscape_scene))


class TestGenerationFailures:
    def test_no_image_is_fatal(self, fake_client, landscape_scene):
        fake_client.image = None
        with pytest.raises(GenerationFailedError) as exc_info:
            EditOrchestrator(fake_client).erase(landscape_scene, CLICK)
        assert exc_info.value.operation == "erase"
        assert exc_info.value.step == EditStep.GENERATE.value

    def test_client_exception_is_wrapped(self, fake_client, landscape_scene):
        fake_client.image_error = ConnectionError("service unavailable")
        with pytest.raises(GenerationFailedError, match="service unavailable") as exc_info:
            EditOrchestrator(fake_client).text_edit(landscape_scene, "make it night")
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_configuration_error_propagates_unchanged(self, fake_client, landscape_scene):
        fake_client.image_error = ConfigurationError("no key")
        with pytest.raises(ConfigurationError):
            EditOrchestrator(fake_client).text_edit(landscape_scene, "make it night")


class TestDirectOperations:
    def test_text_edit_skips_description(self, fake_client, landscape_scene):
        result = EditOrchestrator(fake_client).text_edit(landscape_scene, "add a rug")

        assert fake_client.text_calls == []
        assert result.debug_image is None
        assert result.description is None
        assert '"add a rug"' in result.prompt_used
        assert result.final_image.size == (1920, 1080)

    def test_empty_instruction_rejected(self, fake_client, landscape_scene):
        with pytest.raises(ValidationError):
            EditOrchestrator(fake_client).text_edit(landscape_scene, "  ")

    def test_inpaint_sends_scene_then_normalized_mask(self, fake_client, landscape_scene, mask_factory):
        mask = mask_factory(1920, 1080, box=(100, 100, 400, 400))
        result = EditOrchestrator(fake_client).inpaint(landscape_scene, mask)

        scene_part, mask_part, prompt = fake_client.image_calls[0]
        assert scene_part.mime_type == "image/jpeg"
        assert mask_part.size == (1024, 1024)
        assert is_binary_mask(mask_part)
        assert prompt == result.prompt_used
        assert result.final_image.size == (1920, 1080)

    def test_inpaint_mask_size_mismatch(self, fake_client, mask_factory, image_factory):
        with pytest.raises(DimensionMismatchError):
            EditOrchestrator(fake_client).inpaint(image_factory(800, 600), mask_factory(800, 601))
        assert fake_client.image_calls == []

    def test_masked_edit(self, fake_client, portrait_scene, mask_factory):
        mask = mask_factory(600, 900, box=(0, 0, 299, 449))
        result = EditOrchestrator(fake_client, target=512).masked_edit(
            portrait_scene, mask, "turn the wall blue"
        )
        assert len(_images(fake_client.image_calls[0])) == 2
        assert "turn the wall blue" in result.prompt_used
        assert result.final_image.size == (600, 900)

    def test_model_square_of_other_size_is_cropped(self, fake_client, landscape_scene, image_factory):
        fake_client.image = image_factory(768, 768)
        result = EditOrchestrator(fake_client).text_edit(landscape_scene, "brighter")
        assert result.final_image.size == (1920, 1080)


class TestObjectMove:
    def test_generate_object_mask(self, fake_client, landscape_scene, mask_factory):
        fake_client.image = mask_factory(1024, 1024, box=(400, 400, 600, 600))
        mask = EditOrchestrator(fake_client).generate_object_mask(landscape_scene, CLICK)

        assert mask.size == (1024, 1024)
        assert is_binary_mask(mask)
        marked, prompt = fake_client.image_calls[0]
        assert marked.size == (1024, 1024)
        assert "segmentation" in prompt

    def test_missing_mask_raises_segmentation_error(self, fake_client, landscape_scene):
        fake_client.image = None
        with pytest.raises(SegmentationFailedError) as exc_info:
            EditOrchestrator(fake_client).generate_object_mask(landscape_scene, CLICK)
        assert exc_info.value.step == EditStep.SEGMENT.value

    def test_non_square_mask_rejected(self, fake_client, landscape_scene, mask_factory):
        fake_client.image = mask_factory(1024, 768, box=(0, 0, 1023, 767))
        with pytest.raises(SegmentationFailedError, match="square") as exc_info:
            EditOrchestrator(fake_client).generate_object_mask(landscape_scene, CLICK)
        assert exc_info.value.step == EditStep.SEGMENT.value

    def test_smaller_square_mask_fills_target(self, fake_client, landscape_scene, mask_factory):
        fake_client.image = mask_factory(512, 512, box=(0, 0, 511, 511))
        mask = EditOrchestrator(fake_client).generate_object_mask(landscape_scene, CLICK)

        with mask.to_pil() as img:
            assert img.size == (1024, 1024)
            assert img.getpixel((512, 0)) == 255
            assert img.getpixel((512, 1023)) == 255

    def test_apply_move_returns_cutout_and_inpainted_scene(
        self, fake_client, landscape_scene, mask_factory
    ):
        mask = mask_factory(1024, 1024, box=(400, 400, 600, 600))
        move = EditOrchestrator(fake_client).apply_move(landscape_scene, mask)

        assert isinstance(move, MoveResult)
        assert move.cutout.size == (1024, 1024)
        assert move.cutout.mime_type == "image/png"
        assert move.inpainted.operation == EditOperation.INPAINT
        assert move.inpainted.final_image.size == (1920, 1080)

    def test_object_move_runs_both_stages(self, fake_client, landscape_scene):
        move = EditOrchestrator(fake_client).run(
            EditRequest(EditOperation.OBJECT_MOVE, landscape_scene, position=CLICK)
        )
        assert isinstance(move, MoveResult)
        # One segmentation call, one inpaint call
        assert len(fake_client.image_calls) == 2


class TestOrchestratorConfig:
    def test_invalid_target_rejected(self, fake_client):
        with pytest.raises(ValidationError):
            EditOrchestrator(fake_client, target=-1)

    def test_repeated_calls_are_independent(self, fake_client, landscape_scene, portrait_scene):
        orchestrator = EditOrchestrator(fake_client)
        first = orchestrator.erase(landscape_scene, CLICK)
        second = orchestrator.erase(portrait_scene, CLICK)
        assert first.final_image.size == (1920, 1080)
        assert second.final_image.size == (600, 900)
