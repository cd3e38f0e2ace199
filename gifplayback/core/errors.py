"""Domain-specific exceptions for animation loading and playback."""

from pathlib import Path


class AnimationLoadError(Exception):
    """Base class for failures that abort loading an animation."""


class SourceUnavailableError(AnimationLoadError, OSError):
    """Raised when the animation source is missing or cannot be read."""

    def __init__(self, path: Path, reason: str | None = None):
        message = f"Animation source unavailable: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
        self.reason = reason


class DecodeFailedError(AnimationLoadError, RuntimeError):
    """Raised when the decoder rejects the source format."""

    def __init__(self, path: Path, reason: str | None = None):
        message = f"Could not decode animation: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.path = path
        self.reason = reason


class InvalidAnimationError(AnimationLoadError, ValueError):
    """Raised when decoded data violates the structural preconditions."""


class ValidationError(ValueError):
    """Raised when user-provided settings fail validation."""
