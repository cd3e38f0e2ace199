"""Disposal-aware compositing of raw frames into visible buffers."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from . import DisposalMethod, FrameRect, RawFrame, ResolvedFrame
from .errors import InvalidAnimationError

logger = logging.getLogger(__name__)


def compute_canvas_bounds(raw_frames: Sequence[RawFrame]) -> FrameRect:
    """Bounding box of every frame rectangle (min of the mins, max of the maxes)."""

    if not raw_frames:
        raise InvalidAnimationError("Animation has no frames")

    left = min(frame.rect.x for frame in raw_frames)
    top = min(frame.rect.y for frame in raw_frames)
    right = max(frame.rect.right for frame in raw_frames)
    bottom = max(frame.rect.bottom for frame in raw_frames)
    width = right - left
    height = bottom - top
    if width <= 0 or height <= 0:
        raise InvalidAnimationError(f"Animation bounds must be positive, got {width}x{height}")
    return FrameRect(left, top, width, height)


def resolve(
    raw_frames: Sequence[RawFrame],
    width: int,
    height: int,
    origin: tuple[int, int] = (0, 0),
) -> list[ResolvedFrame]:
    """Resolve every raw frame into the buffer that should be on screen.

    Frames are processed in index order. ``accumulation`` is the composited
    canvas as of the last ``NONE`` or ``DO_NOT_DISPOSE`` frame, and
    ``last_non_disposed`` is the index of the most recent frame whose own
    disposal is not ``RESTORE_PREVIOUS``.
    """

    _validate(raw_frames, width, height)
    bounds = FrameRect(origin[0], origin[1], width, height)

    accumulation = np.zeros((height, width, 4), dtype=np.uint8)
    first_canvas = raw_frames[0].to_canvas(bounds)
    first_disposal = raw_frames[0].disposal
    last_non_disposed = 0

    resolved: list[ResolvedFrame] = []
    for index, frame in enumerate(raw_frames):
        canvas = first_canvas if index == 0 else frame.to_canvas(bounds)
        transparent = canvas[..., 3] == 0
        disposal = frame.disposal

        if disposal == DisposalMethod.NONE:
            pixels = canvas.copy()
        elif disposal == DisposalMethod.DO_NOT_DISPOSE:
            pixels = np.where(transparent[..., None], accumulation, canvas)
        elif disposal == DisposalMethod.RESTORE_BACKGROUND:
            if first_disposal == DisposalMethod.DO_NOT_DISPOSE:
                pixels = np.where(transparent[..., None], first_canvas, canvas)
            else:
                pixels = canvas.copy()
        elif disposal == DisposalMethod.RESTORE_PREVIOUS:
            previous = first_canvas if last_non_disposed == 0 else raw_frames[last_non_disposed].to_canvas(bounds)
            pixels = np.where(transparent[..., None], previous, canvas)
        else:
            raise InvalidAnimationError(f"Frame {index} has unknown disposal {disposal!r}")

        if disposal in (DisposalMethod.NONE, DisposalMethod.DO_NOT_DISPOSE):
            accumulation = pixels
        if disposal != DisposalMethod.RESTORE_PREVIOUS:
            last_non_disposed = index

        resolved.append(ResolvedFrame(pixels))

    logger.debug("Resolved %s frames at %sx%s", len(resolved), width, height)
    return resolved


def resolve_all(raw_frames: Sequence[RawFrame]) -> tuple[FrameRect, list[ResolvedFrame]]:
    """Derive the canvas bounds and resolve against them."""

    bounds = compute_canvas_bounds(raw_frames)
    return bounds, resolve(raw_frames, bounds.width, bounds.height, (bounds.x, bounds.y))


def _validate(raw_frames: Sequence[RawFrame], width: int, height: int) -> None:
    if not raw_frames:
        raise InvalidAnimationError("Animation has no frames")
    if width <= 0 or height <= 0:
        raise InvalidAnimationError(f"Animation dimensions must be positive, got {width}x{height}")
    for index, frame in enumerate(raw_frames):
        if not frame.matches_rect():
            raise InvalidAnimationError(
                f"Frame {index} samples {tuple(frame.pixels.shape)} do not match its "
                f"{frame.rect.width}x{frame.rect.height} rectangle"
            )
        if not isinstance(frame.disposal, DisposalMethod):
            DisposalMethod.from_code(frame.disposal)
