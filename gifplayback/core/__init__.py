"""Core data model for animation compositing and playback."""

__all__ = [
    "DisposalMethod",
    "FrameRect",
    "RawFrame",
    "ResolvedFrame",
    "AnimationMetadata",
    "PlaybackState",
    "PlaybackSettings",
    "FrameInfo",
]

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Optional

import numpy as np
from PIL import Image

from .errors import InvalidAnimationError

TRANSPARENT = (0, 0, 0, 0)


class DisposalMethod(IntEnum):
    """How a frame is merged with the frames before it."""

    NONE = 0
    DO_NOT_DISPOSE = 1
    RESTORE_BACKGROUND = 2
    RESTORE_PREVIOUS = 3

    @classmethod
    def from_code(cls, code: int) -> "DisposalMethod":
        try:
            return cls(int(code))
        except ValueError as exc:
            raise InvalidAnimationError(f"Unknown disposal code: {code}") from exc


@dataclass(frozen=True)
class FrameRect:
    """Axis-aligned rectangle in pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    def as_box(self) -> tuple[int, int, int, int]:
        """Return a Pillow-style (left, upper, right, lower) box."""

        return (self.x, self.y, self.right, self.bottom)


@dataclass(frozen=True, eq=False)
class RawFrame:
    """A decoded frame as handed over by the decoder.

    ``pixels`` covers only ``rect``; samples outside the rectangle read as
    fully transparent.
    """

    pixels: np.ndarray
    rect: FrameRect
    disposal: DisposalMethod = DisposalMethod.NONE

    @classmethod
    def from_image(
        cls,
        image: Image.Image,
        disposal: DisposalMethod = DisposalMethod.NONE,
        offset: tuple[int, int] = (0, 0),
    ) -> "RawFrame":
        rgba = np.asarray(image.convert("RGBA"), dtype=np.uint8)
        rect = FrameRect(offset[0], offset[1], image.width, image.height)
        return cls(pixels=rgba, rect=rect, disposal=DisposalMethod(disposal))

    def matches_rect(self) -> bool:
        return self.pixels.ndim == 3 and self.pixels.shape == (self.rect.height, self.rect.width, 4)

    def sample(self, x: int, y: int) -> tuple[int, int, int, int]:
        """Return the RGBA sample at canvas position (x, y)."""

        if not (self.rect.x <= x < self.rect.right and self.rect.y <= y < self.rect.bottom):
            return TRANSPARENT
        r, g, b, a = self.pixels[y - self.rect.y, x - self.rect.x]
        return (int(r), int(g), int(b), int(a))

    def to_canvas(self, bounds: FrameRect) -> np.ndarray:
        """Place this frame's samples on a transparent canvas covering ``bounds``."""

        canvas = np.zeros((bounds.height, bounds.width, 4), dtype=np.uint8)
        left = max(self.rect.x, bounds.x)
        top = max(self.rect.y, bounds.y)
        right = min(self.rect.right, bounds.right)
        bottom = min(self.rect.bottom, bounds.bottom)
        if right <= left or bottom <= top:
            return canvas
        canvas[top - bounds.y : bottom - bounds.y, left - bounds.x : right - bounds.x] = self.pixels[
            top - self.rect.y : bottom - self.rect.y, left - self.rect.x : right - self.rect.x
        ]
        return canvas


class ResolvedFrame:
    """Read-only RGBA buffer holding exactly what is visible for one frame."""

    __slots__ = ("_pixels",)

    def __init__(self, pixels: np.ndarray):
        buffer = np.array(pixels, dtype=np.uint8, copy=True)
        buffer.setflags(write=False)
        self._pixels = buffer

    @property
    def pixels(self) -> np.ndarray:
        return self._pixels

    @property
    def width(self) -> int:
        return self._pixels.shape[1]

    @property
    def height(self) -> int:
        return self._pixels.shape[0]

    def pixel(self, x: int, y: int) -> tuple[int, int, int, int]:
        r, g, b, a = self._pixels[y, x]
        return (int(r), int(g), int(b), int(a))

    def to_bytes(self) -> bytes:
        """Row-major, top-to-bottom, left-to-right RGBA, 8 bits per channel."""

        return self._pixels.tobytes()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self._pixels.copy())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedFrame):
            return NotImplemented
        return np.array_equal(self._pixels, other._pixels)

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"ResolvedFrame({self.width}x{self.height})"


@dataclass(frozen=True)
class AnimationMetadata:
    """Geometry and timing fixed at load time."""

    width: int
    height: int
    frame_count: int
    delays: tuple[int, ...]
    disposals: tuple[DisposalMethod, ...]


@dataclass(frozen=True)
class PlaybackState:
    """Snapshot of the playback cursor."""

    index: int = 0
    elapsed: float = 0.0


@dataclass
class PlaybackSettings:
    """User-configurable settings for loading, exporting and previewing."""

    source_path: Path
    output_path: Optional[Path] = None
    generate_manifest: bool = False
    manifest_path: Optional[Path] = None
    speed: float = 1.0
    tick_interval_ms: int = 16


@dataclass
class FrameInfo:
    """Placement of a resolved frame inside an atlas."""

    index: int
    delay: int
    disposal: DisposalMethod
    width: int
    height: int
    x: int = 0
    y: int = 0
