"""Manifest writing logic."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field

from . import AnimationMetadata, FrameInfo, PlaybackSettings
from ..utils import file_tools

logger = logging.getLogger(__name__)


class ManifestFrame(BaseModel):
    x: int
    y: int
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    delay: int
    disposal: str


class ManifestMeta(BaseModel):
    width: int = Field(gt=0)
    height: int = Field(gt=0)
    frame_count: int = Field(ge=1)
    atlas: str


class AtlasManifest(BaseModel):
    source: str
    frames: dict[str, ManifestFrame]
    meta: ManifestMeta


def build_manifest(
    infos: Iterable[FrameInfo],
    settings: PlaybackSettings,
    metadata: AnimationMetadata,
) -> AtlasManifest:
    atlas_path = (settings.output_path or settings.source_path).with_suffix(".png")
    frames = {
        f"frame_{info.index:04d}": ManifestFrame(
            x=info.x,
            y=info.y,
            width=info.width,
            height=info.height,
            delay=info.delay,
            disposal=info.disposal.name.lower(),
        )
        for info in infos
    }
    return AtlasManifest(
        source=str(settings.source_path),
        frames=frames,
        meta=ManifestMeta(
            width=metadata.width,
            height=metadata.height,
            frame_count=metadata.frame_count,
            atlas=str(atlas_path),
        ),
    )


def write_manifest(
    infos: Iterable[FrameInfo],
    settings: PlaybackSettings,
    metadata: AnimationMetadata,
) -> Path:
    """Create a JSON manifest describing frame coordinates and timing."""

    if not settings.generate_manifest:
        raise ValueError("Manifest generation requested without flag set.")

    manifest_path = (settings.manifest_path or settings.output_path or settings.source_path).with_suffix(".json")
    file_tools.ensure_directory(manifest_path.parent)

    manifest = build_manifest(infos, settings, metadata)
    manifest_path.write_text(manifest.model_dump_json(indent=2), encoding="utf-8")
    logger.info("Wrote manifest to %s", manifest_path)
    return manifest_path
