"""Generation service access for SquareEdit."""

from .chat import DesignChat
from .client import ChatHandle, GeminiClient, GenerationClient, Part, resolve_api_key

__all__ = [
    "ChatHandle",
    "DesignChat",
    "GeminiClient",
    "GenerationClient",
    "Part",
    "resolve_api_key",
]
