"""Input validation for SquareEdit."""

from __future__ import annotations

import re

from .config import Config
from .exceptions import ValidationError

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def validate_target(target: int) -> None:
    """Validate the square canvas side.

    Args:
        target: Side of the square canvas in pixels.

    Raises:
        ValidationError: If the target is not a positive integer within limits.
    """
    if isinstance(target, bool) or not isinstance(target, int):
        raise ValidationError(f"Target must be an integer, got {type(target).__name__}")
    if target <= 0:
        raise ValidationError(f"Target must be positive, got {target}")
    if target > Config.MAX_TARGET_DIMENSION:
        raise ValidationError(
            f"Target exceeds maximum {Config.MAX_TARGET_DIMENSION}, got {target}"
        )


def validate_hex_color(value: str) -> str:
    """Validate a ``#RRGGBB`` color and return it upper-cased.

    Raises:
        ValidationError: If the value is not a six-digit hex color.
    """
    if not isinstance(value, str) or not _HEX_COLOR.match(value.strip()):
        raise ValidationError(f"Invalid hex color: {value!r}")
    return value.strip().upper()


def validate_instruction(text: str, field_name: str = "instruction") -> str:
    """Validate a free-text edit instruction and return it stripped.

    Raises:
        ValidationError: If the text is empty.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValidationError(f"{field_name} must be a non-empty string")
    return text.strip()
