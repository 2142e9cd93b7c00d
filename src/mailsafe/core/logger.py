"""Console logging setup shared by the CLI, the web app and start.py."""

from __future__ import annotations

import logging
import sys

_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stderr handler to the ``mailsafe`` logger."""
    logger = logging.getLogger("mailsafe")
    logger.setLevel(level.upper())
    # Prevent double logging if configured twice
    if logger.handlers:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
