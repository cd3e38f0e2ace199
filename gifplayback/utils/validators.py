"""Validation helpers for user inputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..core.errors import SourceUnavailableError, ValidationError

ALLOWED_ANIMATION_EXTENSIONS = {".gif"}
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_animation_path(path: Path) -> Path:
    """Ensure the animation source exists and is a regular file."""

    if not path:
        raise SourceUnavailableError(Path("<unset>"), reason="No path provided")
    if not path.exists():
        raise SourceUnavailableError(path, reason="File not found")
    if not path.is_file():
        raise SourceUnavailableError(path, reason="Not a file")
    return path


def parse_optional_float(value: str | None, field: str) -> Optional[float]:
    """Parse a positive float from a string value, if provided."""

    if value is None or value == "":
        return None
    try:
        parsed = float(value)
    except ValueError as exc:
        raise ValidationError(f"{field} must be a number") from exc
    if parsed <= 0:
        raise ValidationError(f"{field} must be greater than zero")
    return parsed


def parse_positive_float(value: str) -> float:
    """argparse ``type=`` hook for strictly positive numbers."""

    parsed = parse_optional_float(value, "Value")
    if parsed is None:
        raise ValidationError("Value must be greater than zero")
    return parsed


def parse_log_level(value: str | None, default: int = logging.INFO) -> int:
    """Map a level name like 'debug' to its logging constant."""

    if value is None or value.strip() == "":
        return default
    name = value.strip().upper()
    if name not in LOG_LEVELS:
        raise ValidationError(f"Log level must be one of {', '.join(LOG_LEVELS)}")
    return getattr(logging, name)


def validate_tick_interval(value: int) -> None:
    """Ensure the preview timer interval is usable."""

    if value <= 0 or value > 1000:
        raise ValidationError("Tick interval must be between 1 and 1000 ms")
