"""Side-by-side atlas composition using Pillow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from PIL import Image

from . import FrameInfo
from .player import AnimationPlayer
from ..utils import file_tools

logger = logging.getLogger(__name__)


def build_atlas(player: AnimationPlayer, output_path: Path) -> Tuple[Path, Image.Image, List[FrameInfo]]:
    """Pack every resolved frame into one row and persist it as PNG."""

    output_path = output_path.with_suffix(".png")
    file_tools.ensure_directory(output_path.parent)

    meta = player.metadata
    sheet = Image.new("RGBA", (meta.width * meta.frame_count, meta.height), (0, 0, 0, 0))

    infos: list[FrameInfo] = []
    for index, frame in enumerate(player.frames):
        rect = player.frame_rectangle(index)
        sheet.paste(frame.to_image(), (rect.x, rect.y))
        infos.append(
            FrameInfo(
                index=index,
                delay=meta.delays[index],
                disposal=meta.disposals[index],
                width=rect.width,
                height=rect.height,
                x=rect.x,
                y=rect.y,
            )
        )

    sheet.save(output_path)
    logger.info("Wrote atlas to %s", output_path)
    return output_path, sheet, infos
