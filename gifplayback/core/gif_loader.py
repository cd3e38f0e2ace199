"""Animation decoding through Pillow and player construction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, ImageSequence, UnidentifiedImageError

from . import AnimationMetadata, DisposalMethod, RawFrame
from . import compositor
from .errors import DecodeFailedError, SourceUnavailableError
from .player import AnimationPlayer
from .resources import ResourceRegistry
from ..utils import validators

logger = logging.getLogger(__name__)

MS_PER_TICK = 10


@dataclass
class DecodedAnimation:
    """Raw decoder output: frames plus their delay and disposal tables."""

    frames: list[RawFrame]
    delays: list[int]
    disposal_codes: list[int]


def decode_animation(path: Path) -> DecodedAnimation:
    """Decode every frame of ``path`` into RGBA raw frames.

    Each frame is cropped to the rectangle it updates (Pillow's
    ``dispose_extent``) and placed at that offset, so pixels outside the
    rectangle read as transparent and disposal is left to the compositor.
    """

    validated_path = validators.validate_animation_path(path)
    try:
        image = Image.open(validated_path)
    except UnidentifiedImageError as exc:
        raise DecodeFailedError(validated_path, reason=str(exc)) from exc
    except OSError as exc:
        raise SourceUnavailableError(validated_path, reason=str(exc)) from exc

    frames: list[RawFrame] = []
    delays: list[int] = []
    codes: list[int] = []
    try:
        with image:
            for frame in ImageSequence.Iterator(image):
                code = _disposal_code(frame)
                extent = _frame_extent(frame)
                frames.append(RawFrame.from_image(frame.crop(extent), DisposalMethod(code), offset=extent[:2]))
                delays.append(int(frame.info.get("duration", 0)) // MS_PER_TICK)
                codes.append(code)
    except (OSError, SyntaxError, ValueError) as exc:
        raise DecodeFailedError(validated_path, reason=str(exc)) from exc

    logger.info("Decoded %s frames from %s", len(frames), validated_path)
    return DecodedAnimation(frames=frames, delays=delays, disposal_codes=codes)


def load_animation(path: Path, registry: Optional[ResourceRegistry] = None) -> AnimationPlayer:
    """Decode, resolve and wrap an animation in a player."""

    decoded = decode_animation(path)
    bounds, resolved = compositor.resolve_all(decoded.frames)
    player = AnimationPlayer(resolved, decoded.delays, decoded.disposal_codes, registry=registry)
    logger.info(
        "Loaded %s -> %sx%s, %s frames",
        path,
        bounds.width,
        bounds.height,
        player.frame_count,
    )
    return player


def load_metadata(path: Path) -> AnimationMetadata:
    """Return geometry and timing without keeping the player around."""

    return load_animation(path).metadata


def _disposal_code(frame: Image.Image) -> int:
    code = getattr(frame, "disposal_method", 0) or 0
    if code not in (0, 1, 2, 3):
        logger.warning("Unsupported disposal code %s; treating as none", code)
        return 0
    return int(code)


def _frame_extent(frame: Image.Image) -> tuple[int, int, int, int]:
    """Rectangle the current frame updates; the whole image when the decoder has none."""

    extent = getattr(frame, "dispose_extent", None)
    if not extent:
        return (0, 0, frame.width, frame.height)
    return tuple(int(value) for value in extent)
