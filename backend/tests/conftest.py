"""Shared pytest fixtures for SquareEdit tests."""

from __future__ import annotations

from typing import Any

import pytest
from PIL import Image, ImageDraw

from backend.app.models import RasterImage
from backend.app.service.client import ChatHandle, GenerationClient


def make_image(
    width: int, height: int, color: tuple = (200, 100, 50), fmt: str = "PNG"
) -> RasterImage:
    """Solid-color test image."""
    mode = "RGBA" if len(color) == 4 else "RGB"
    return RasterImage.from_pil(Image.new(mode, (width, height), color), fmt)


def make_mask(
    width: int, height: int, box: tuple[int, int, int, int] | None = None
) -> RasterImage:
    """Black mask with an optional white rectangle."""
    img = Image.new("L", (width, height), 0)
    if box is not None:
        ImageDraw.Draw(img).rectangle(box, fill=255)
    return RasterImage.from_pil(img, "PNG")


class FakeChat(ChatHandle):
    def __init__(self) -> None:
        self.messages: list[str] = []

    def send(self, message: str) -> str:
        self.messages.append(message)
        return f"reply {len(self.messages)}"


class FakeGenerationClient(GenerationClient):
    """In-memory stand-in for the generation service.

    Records every call. ``text``/``image``/``json_payload`` set the answers;
    assigning an exception to ``text_error``/``image_error`` makes the call
    raise it.
    """

    def __init__(self, image_side: int = 1024) -> None:
        self.text = "on the oak floor next to the sofa"
        self.text_error: Exception | None = None
        self.image: RasterImage | None = make_image(image_side, image_side, (10, 120, 30))
        self.image_error: Exception | None = None
        self.json_payload: dict[str, Any] = {"products": [], "paintColors": []}
        self.standalone_image: RasterImage | None = make_image(512, 512)
        self.text_calls: list[list] = []
        self.image_calls: list[list] = []
        self.json_calls: list[list] = []
        self.chats: list[FakeChat] = []

    def generate_text(self, parts, model=None) -> str:
        self.text_calls.append(list(parts))
        if self.text_error is not None:
            raise self.text_error
        return self.text

    def generate_image(self, parts, model=None):
        self.image_calls.append(list(parts))
        if self.image_error is not None:
            raise self.image_error
        return self.image

    def generate_json(self, parts, schema, model=None):
        self.json_calls.append(list(parts))
        return self.json_payload

    def generate_standalone_image(self, prompt, model=None):
        return self.standalone_image

    def start_chat(self, system_instruction, model=None) -> ChatHandle:
        chat = FakeChat()
        self.chats.append(chat)
        return chat


@pytest.fixture
def fake_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def landscape_scene() -> RasterImage:
    """1920x1080 JPEG scene."""
    return make_image(1920, 1080, (180, 160, 140), fmt="JPEG")


@pytest.fixture
def portrait_scene() -> RasterImage:
    return make_image(600, 900, (90, 90, 200))


@pytest.fixture
def product_image() -> RasterImage:
    """Product on a transparent background."""
    img = Image.new("RGBA", (400, 300), (0, 0, 0, 0))
    ImageDraw.Draw(img).ellipse((50, 50, 350, 250), fill=(220, 20, 20, 255))
    return RasterImage.from_pil(img, "PNG")


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def mask_factory():
    return make_mask
