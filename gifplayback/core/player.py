"""Clock-driven playback cursor over resolved frames."""

from __future__ import annotations

import logging
from typing import Optional, Protocol, Sequence

from . import AnimationMetadata, DisposalMethod, FrameRect, PlaybackState, ResolvedFrame
from .errors import InvalidAnimationError
from .resources import ResourceRegistry

logger = logging.getLogger(__name__)

TICKS_PER_SECOND = 100


class FrameTexture(Protocol):
    """Renderer-side surface fed with the current buffer."""

    def update(self, frame: ResolvedFrame) -> None: ...

    def unload(self) -> None: ...


def frame_rectangle(index: int, width: int, height: int) -> FrameRect:
    """Tile rectangle for ``index`` when frames sit side by side in one row."""

    return FrameRect(width * index, 0, width, height)


class AnimationPlayer:
    """Owns resolved frames and advances through them on elapsed time.

    Delays are in hundredths of a second. ``advance`` moves at most one frame
    per call; leftover time carries into the next call. One writer only: the
    caller serializes ``advance``/``reset``.
    """

    def __init__(
        self,
        frames: Sequence[ResolvedFrame],
        delays: Sequence[int],
        disposals: Sequence[DisposalMethod],
        registry: Optional[ResourceRegistry] = None,
    ):
        frames = tuple(frames)
        if not frames:
            raise InvalidAnimationError("Cannot play an animation with no frames")
        if not (len(delays) == len(disposals) == len(frames)):
            raise InvalidAnimationError(
                f"Table lengths differ: {len(frames)} frames, {len(delays)} delays, {len(disposals)} disposals"
            )
        width, height = frames[0].width, frames[0].height
        for index, frame in enumerate(frames):
            if (frame.width, frame.height) != (width, height):
                raise InvalidAnimationError(
                    f"Frame {index} is {frame.width}x{frame.height}, expected {width}x{height}"
                )

        self._frames = frames
        self.metadata = AnimationMetadata(
            width=width,
            height=height,
            frame_count=len(frames),
            delays=tuple(int(delay) for delay in delays),
            disposals=tuple(DisposalMethod.from_code(code) for code in disposals),
        )
        self._index = 0
        self._elapsed = 0.0
        self._texture: Optional[FrameTexture] = None
        self._unloaded = False
        self._registry = registry
        if registry is not None:
            registry.register(self)

    @property
    def width(self) -> int:
        return self.metadata.width

    @property
    def height(self) -> int:
        return self.metadata.height

    @property
    def frame_count(self) -> int:
        return self.metadata.frame_count

    @property
    def frames(self) -> tuple[ResolvedFrame, ...]:
        return self._frames

    @property
    def state(self) -> PlaybackState:
        return PlaybackState(index=self._index, elapsed=self._elapsed)

    def advance(self, delta_seconds: float) -> bool:
        """Add elapsed time and step one frame if the current delay has run out.

        Returns True when the current frame changed.
        """

        if delta_seconds < 0:
            raise ValueError(f"delta_seconds must be non-negative, got {delta_seconds}")
        self._elapsed += delta_seconds * TICKS_PER_SECOND
        if self._elapsed - self.current_delay() >= 0:
            self.next_frame()
            return True
        return False

    def next_frame(self) -> None:
        """Move to the following frame, wrapping to 0 after the last one."""

        self._elapsed -= max(self.current_delay(), 0)
        self._index = (self._index + 1) % self.frame_count
        if self._elapsed < 0:
            self._elapsed = 0.0
        if self._texture is not None:
            self._texture.update(self.current_buffer())

    def reset(self) -> None:
        self._index = 0
        self._elapsed = 0.0

    def current_frame(self) -> int:
        return self._index

    def current_delay(self) -> int:
        return self.metadata.delays[self._index]

    def current_buffer(self) -> ResolvedFrame:
        return self._frames[self._index]

    def frame_rectangle(self, index: int) -> FrameRect:
        return frame_rectangle(index, self.width, self.height)

    def bind_texture(self, texture: FrameTexture) -> None:
        """Attach a renderer surface and push the current buffer to it."""

        if self._unloaded and self._registry is not None:
            self._registry.register(self)
        self._texture = texture
        self._unloaded = False
        texture.update(self.current_buffer())

    def unload(self) -> None:
        """Release the bound texture. Safe to call more than once."""

        if self._unloaded:
            return
        self._unloaded = True
        if self._texture is not None:
            self._texture.unload()
            self._texture = None
        if self._registry is not None:
            self._registry.remove(self)
        logger.debug("Unloaded player (%s frames)", self.frame_count)

    def __repr__(self) -> str:
        return f"AnimationPlayer({self.width}x{self.height}, frames={self.frame_count})"
