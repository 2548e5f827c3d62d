"""Tests for normalization, cropping, markers and the resize helper."""

import pytest
from PIL import Image

from backend.app.config import Config
from backend.app.exceptions import CropGeometryError, DecodeError
from backend.app.imaging.codec import decode_image, probe_dimensions
from backend.app.imaging.crop import crop_to_original
from backend.app.imaging.marker import draw_marker, marker_radius
from backend.app.imaging.normalize import normalize_to_square
from backend.app.imaging.pillow_ops import PillowRasterOps
from backend.app.imaging.resize import high_quality_resize
from backend.app.models import Dimensions, RasterImage, RelativePosition


def _pixel(image: RasterImage, xy: tuple[int, int]) -> tuple:
    with image.to_pil() as img:
        return img.convert("RGB").getpixel(xy)


def _close(a: tuple, b: tuple, tolerance: int = 12) -> bool:
    return all(abs(x - y) <= tolerance for x, y in zip(a, b))


class TestCodec:
    def test_probe_dimensions(self, image_factory):
        image = image_factory(640, 480)
        assert probe_dimensions(image.data) == Dimensions(640, 480)

    def test_decode_sniffs_mime_type(self, image_factory):
        jpeg = image_factory(10, 10, fmt="JPEG")
        assert decode_image(jpeg.data).mime_type == "image/jpeg"

    def test_garbage_bytes_rejected(self):
        with pytest.raises(DecodeError):
            probe_dimensions(b"definitely not an image")

    def test_empty_bytes_rejected(self):
        with pytest.raises(DecodeError, match="empty"):
            decode_image(b"")


class TestHighQualityResize:
    def test_resize_rgb_image(self):
        result = high_quality_resize(Image.new("RGB", (200, 100), (255, 0, 0)), (100, 50))
        assert result.size == (100, 50)
        assert result.mode == "RGB"

    def test_resize_rgba_keeps_alpha(self):
        result = high_quality_resize(Image.new("RGBA", (200, 100), (0, 0, 255, 128)), (50, 25))
        assert result.mode == "RGBA"
        assert abs(result.getpixel((10, 10))[3] - 128) <= 1

    def test_grayscale_resized_without_gamma(self):
        result = high_quality_resize(
            Image.new("L", (100, 100), 255), (10, 10), Image.Resampling.NEAREST
        )
        assert result.mode == "L"
        assert result.getpixel((5, 5)) == 255

    def test_zero_target_returns_original(self):
        img = Image.new("RGBA", (100, 100))
        assert high_quality_resize(img, (0, 50)).size == (100, 100)


class TestNormalizeToSquare:
    def test_output_is_target_square_jpeg(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        assert square.image.size == (1024, 1024)
        assert square.image.mime_type == "image/jpeg"
        assert square.original == Dimensions(1920, 1080)

    def test_padding_is_neutral_and_content_centered(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        assert _close(_pixel(square.image, (512, 10)), Config.PADDING_COLOR)
        assert _close(_pixel(square.image, (512, 1013)), Config.PADDING_COLOR)
        assert _close(_pixel(square.image, (512, 512)), (180, 160, 140))

    def test_portrait_padded_left_and_right(self, portrait_scene):
        square = normalize_to_square(portrait_scene, 300)
        assert square.content_box.offset_y == 0
        assert square.content_box.offset_x == pytest.approx(50)
        assert _close(_pixel(square.image, (10, 150)), Config.PADDING_COLOR)
        assert _close(_pixel(square.image, (150, 150)), (90, 90, 200))

    def test_transparency_flattened_onto_padding(self, product_image):
        square = normalize_to_square(product_image, 400)
        # Corner of the content box was transparent in the source
        assert _close(_pixel(square.image, (5, 60)), Config.PADDING_COLOR)


class TestCropToOriginal:
    def test_end_to_end_scenario(self, landscape_scene, image_factory):
        square = normalize_to_square(landscape_scene, 1024)
        generated = image_factory(1024, 1024, (30, 30, 30))
        final = crop_to_original(generated, square.original, 1024)
        assert final.size == (1920, 1080)
        assert final.mime_type == "image/jpeg"

    @pytest.mark.parametrize("dims", [(1920, 1080), (600, 900), (1000, 1000), (1021, 17), (17, 1021)])
    def test_round_trip_preserves_dimensions(self, dims, image_factory):
        square = normalize_to_square(image_factory(*dims), 512)
        final = crop_to_original(square.image, Dimensions(*dims), 512)
        assert abs(final.width - dims[0]) <= 1
        assert abs(final.height - dims[1]) <= 1

    def test_without_restore_returns_content_box(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        region = crop_to_original(square.image, square.original, 1024, restore_size=False)
        assert region.size == (1024, 576)

    def test_crop_excludes_padding(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        final = crop_to_original(square.image, square.original, 1024)
        assert _close(_pixel(final, (960, 2)), (180, 160, 140), tolerance=20)
        assert _close(_pixel(final, (960, 1077)), (180, 160, 140), tolerance=20)

    def test_smaller_model_square_is_scaled(self, image_factory):
        final = crop_to_original(image_factory(768, 768), Dimensions(1920, 1080), 1024)
        assert final.size == (1920, 1080)

    def test_non_square_input_rejected(self, image_factory):
        with pytest.raises(CropGeometryError, match="square"):
            crop_to_original(image_factory(1024, 1000), Dimensions(1920, 1080), 1024)


class TestMarker:
    def test_marker_drawn_at_mapped_pixel(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        marked = draw_marker(square, RelativePosition(10, 90))
        assert marked.size == (1024, 1024)
        assert _close(_pixel(marked, (102, 742)), (255, 0, 0), tolerance=40)

    def test_original_square_untouched(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        draw_marker(square, RelativePosition(50, 50))
        assert _close(_pixel(square.image, (512, 512)), (180, 160, 140))

    def test_far_from_marker_unchanged(self, landscape_scene):
        square = normalize_to_square(landscape_scene, 1024)
        marked = draw_marker(square, RelativePosition(10, 90))
        assert _close(_pixel(marked, (900, 300)), (180, 160, 140))

    def test_radius_scales_with_canvas(self):
        assert marker_radius(1024, 1024) == pytest.approx(15.36)

    def test_radius_has_minimum(self):
        assert marker_radius(100, 100) == Config.MARKER_MIN_RADIUS


class TestPillowRasterOps:
    def test_ops_round_trip(self, landscape_scene):
        ops = PillowRasterOps()
        original = ops.probe(landscape_scene.data)
        square = ops.normalize_to_square(landscape_scene, 256)
        final = ops.crop(square.image, original, 256)
        assert final.size == original.to_tuple()


class TestIntermediateRelease:
    @staticmethod
    def _spy_resize(monkeypatch, module: str) -> list:
        from backend.app.imaging import resize

        seen = []

        def spy(image, target_size, resample=None):
            out = resize.high_quality_resize(image, target_size, resample)
            seen.extend([image, out])
            return out

        monkeypatch.setattr(f"backend.app.imaging.{module}.high_quality_resize", spy)
        return seen

    @staticmethod
    def _assert_closed(images: list) -> None:
        assert images
        for img in images:
            with pytest.raises(ValueError):
                img.getpixel((0, 0))

    def test_normalize_closes_scaled_images(self, monkeypatch, landscape_scene):
        seen = self._spy_resize(monkeypatch, "normalize")
        normalize_to_square(landscape_scene, 256)
        self._assert_closed(seen)

    def test_crop_closes_region(self, monkeypatch, landscape_scene):
        seen = self._spy_resize(monkeypatch, "crop")
        square = normalize_to_square(landscape_scene, 256)
        crop_to_original(square.image, square.original, 256)
        self._assert_closed(seen)
