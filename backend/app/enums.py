"""Enumerations shared across SquareEdit."""

from __future__ import annotations

from enum import Enum


class EditOperation(Enum):
    """Named edit operations handled by the orchestrator."""
    COMPOSITE = "composite"
    PAINT = "paint"
    ERASE = "erase"
    INPAINT = "inpaint"
    TEXT_EDIT = "text-edit"
    MASKED_EDIT = "masked-edit"
    OBJECT_MOVE = "object-move"


class EditStep(Enum):
    """Steps of an orchestrated edit, used to tag failures."""
    DESCRIBE = "describe"
    GENERATE = "generate"
    SEGMENT = "segment"
    ANALYZE = "analyze"


class MaskMode(Enum):
    """How a binary mask is applied to a scene."""
    CUTOUT = "cutout"  # Keep pixels under white, transparent elsewhere
    BACKGROUND = "background"  # Keep pixels under black, transparent elsewhere
