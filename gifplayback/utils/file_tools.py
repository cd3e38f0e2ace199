"""Filesystem helpers."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_directory(path: Path) -> Path:
    """Create a directory if it does not exist."""

    path.mkdir(parents=True, exist_ok=True)
    logger.debug("Ensured directory exists: %s", path)
    return path


def default_output_path(source_path: Path, suffix: str = ".png") -> Path:
    """Return a default atlas path next to the source animation."""

    if not suffix.startswith("."):
        suffix = "." + suffix
    return source_path.with_name(f"{source_path.stem}_atlas{suffix}")
