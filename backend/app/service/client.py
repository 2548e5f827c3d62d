"""Generation service clients."""

from __future__ import annotations

import base64
import binascii
import json
import logging
import os
import threading
from abc import ABC, abstractmethod
from typing import Any, Union

from google import genai
from google.genai import types

from ..config import Config
from ..exceptions import ConfigurationError, DecodeError, ModelError
from ..imaging.codec import decode_image
from ..models import RasterImage

logger = logging.getLogger("squareedit.service.client")

# An ordered request: images and text in the order the model should see them
Part = Union[RasterImage, str]

_RAW_IMAGE_SIGNATURES = (b"\x89PNG", b"\xff\xd8\xff", b"RIFF", b"GIF8")


class ChatHandle(ABC):
    """A conversation that keeps its history between messages."""

    @abstractmethod
    def send(self, message: str) -> str:
        """Send one user message and return the model's reply."""
        ...


class GenerationClient(ABC):
    """Contract of the multimodal generation service.

    Every call is a single attempt. Image calls return None when the
    response carries no image part; callers decide whether that is fatal.
    """

    @abstractmethod
    def generate_text(self, parts: list[Part], model: str | None = None) -> str:
        """Return the text of the model's answer."""
        ...

    @abstractmethod
    def generate_image(
        self, parts: list[Part], model: str | None = None
    ) -> RasterImage | None:
        """Return the first image part of an image-only response."""
        ...

    @abstractmethod
    def generate_json(
        self, parts: list[Part], schema: dict[str, Any], model: str | None = None
    ) -> dict[str, Any]:
        """Return a JSON object constrained by ``schema``.

        Raises:
            ModelError: If the response is not a JSON object.
        """
        ...

    @abstractmethod
    def generate_standalone_image(
        self, prompt: str, model: str | None = None
    ) -> RasterImage | None:
        """Generate a square PNG from text alone."""
        ...

    @abstractmethod
    def start_chat(self, system_instruction: str, model: str | None = None) -> ChatHandle:
        """Open a conversation with a fixed system instruction."""
        ...


def resolve_api_key(api_key: str | None = None) -> str:
    """Pick the explicit key, else the first configured environment variable.

    Raises:
        ConfigurationError: If no key is available.
    """
    if api_key:
        return api_key
    for name in Config.API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    raise ConfigurationError(
        f"Gemini API key is not set. Pass api_key or set one of: {', '.join(Config.API_KEY_ENV_VARS)}"
    )


class _GeminiChat(ChatHandle):
    def __init__(self, chat: Any) -> None:
        self._chat = chat
        self._lock = threading.Lock()

    def send(self, message: str) -> str:
        # Chat history is ordered; one message in flight at a time
        with self._lock:
            response = self._chat.send_message(message)
        return response.text or ""


class GeminiClient(GenerationClient):
    """GenerationClient backed by the ``google-genai`` SDK.

    The SDK client is created on first use and then shared by every call
    made through this instance. Use :meth:`with_api_key` to switch
    credentials; it returns a new client rather than mutating this one.
    """

    def __init__(
        self,
        api_key: str | None = None,
        text_model: str = Config.TEXT_MODEL,
        image_model: str = Config.IMAGE_MODEL,
    ) -> None:
        self._api_key = api_key
        self.text_model = text_model
        self.image_model = image_model
        self._sdk: genai.Client | None = None
        self._sdk_lock = threading.Lock()

    def with_api_key(self, api_key: str) -> GeminiClient:
        return GeminiClient(api_key, self.text_model, self.image_model)

    def _client(self) -> genai.Client:
        if self._sdk is None:
            with self._sdk_lock:
                if self._sdk is None:
                    key = resolve_api_key(self._api_key)
                    self._sdk = genai.Client(api_key=key)
                    logger.info("Gemini client initialized")
        return self._sdk

    @staticmethod
    def _to_sdk_parts(parts: list[Part]) -> list[types.Part]:
        sdk_parts = []
        for part in parts:
            if isinstance(part, RasterImage):
                sdk_parts.append(types.Part.from_bytes(data=part.data, mime_type=part.mime_type))
            else:
                sdk_parts.append(types.Part.from_text(text=part))
        return sdk_parts

    def generate_text(self, parts: list[Part], model: str | None = None) -> str:
        response = self._client().models.generate_content(
            model=model or self.text_model,
            contents=self._to_sdk_parts(parts),
        )
        text = response.text
        if not text:
            raise ModelError("Model returned no text")
        return text.strip()

    def generate_image(
        self, parts: list[Part], model: str | None = None
    ) -> RasterImage | None:
        response = self._client().models.generate_content(
            model=model or self.image_model,
            contents=self._to_sdk_parts(parts),
            config=types.GenerateContentConfig(response_modalities=["IMAGE"]),
        )
        return extract_image(response)

    def generate_json(
        self, parts: list[Part], schema: dict[str, Any], model: str | None = None
    ) -> dict[str, Any]:
        response = self._client().models.generate_content(
            model=model or self.text_model,
            contents=self._to_sdk_parts(parts),
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        try:
            payload = json.loads(response.text or "")
        except json.JSONDecodeError as e:
            raise ModelError(f"Model response is not valid JSON: {e}") from e
        if not isinstance(payload, dict):
            raise ModelError(f"Expected a JSON object, got {type(payload).__name__}")
        return payload

    def generate_standalone_image(
        self, prompt: str, model: str | None = None
    ) -> RasterImage | None:
        response = self._client().models.generate_images(
            model=model or Config.PRODUCT_IMAGE_MODEL,
            prompt=prompt,
            config=types.GenerateImagesConfig(
                number_of_images=1,
                output_mime_type="image/png",
                aspect_ratio="1:1",
            ),
        )
        generated = response.generated_images or []
        if not generated or generated[0].image is None or not generated[0].image.image_bytes:
            return None
        return _decode_payload(generated[0].image.image_bytes, "image/png")

    def start_chat(self, system_instruction: str, model: str | None = None) -> ChatHandle:
        chat = self._client().chats.create(
            model=model or Config.CHAT_MODEL,
            config=types.GenerateContentConfig(system_instruction=system_instruction),
        )
        return _GeminiChat(chat)


def extract_image(response: Any) -> RasterImage | None:
    """First inline image of a ``generate_content`` response, if any."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates or candidates[0].content is None:
        logger.warning("Response has no candidates")
        return None

    for part in candidates[0].content.parts or []:
        if getattr(part, "text", None):
            logger.debug("Model text alongside image: %s", part.text[:200])
        inline = getattr(part, "inline_data", None)
        if inline is not None and inline.data:
            return _decode_payload(inline.data, inline.mime_type or "image/png")

    logger.warning("Response carried no image part")
    return None


def _decode_payload(data: bytes | str, mime_type: str) -> RasterImage | None:
    # The SDK normally hands over raw bytes, but base64 text has been seen
    if isinstance(data, str):
        data = data.encode("ascii")
    if not data.startswith(_RAW_IMAGE_SIGNATURES):
        try:
            data = base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            pass
    try:
        return decode_image(data, mime_type)
    except DecodeError as e:
        logger.warning("Discarding undecodable image part: %s", e)
        return None
