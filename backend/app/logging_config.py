"""Structured logging configuration for SquareEdit."""

from __future__ import annotations

import logging
import os
import sys

# Third-party loggers that log every HTTP round trip at INFO
_NOISY_LOGGERS = ("google_genai", "httpx", "httpcore", "PIL")


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure structured logging for the application.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR). Defaults to
            the SQUAREEDIT_LOG_LEVEL environment variable, then INFO.

    Returns:
        The root squareedit logger.
    """
    level = level or os.environ.get("SQUAREEDIT_LOG_LEVEL", "INFO")
    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)-30s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger("squareedit")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Avoid duplicate handlers on repeated calls
    if not root_logger.handlers:
        root_logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return root_logger
