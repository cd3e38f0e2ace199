"""Command-line entry point for decoding, exporting and previewing animations."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .core import PlaybackSettings
from .core import atlas_builder, gif_loader, manifest_writer
from .core.errors import AnimationLoadError, ValidationError
from .main import configure_logging, run
from .utils import file_tools, validators

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gifplayback",
        description="Composite animated GIF frames, export them as an atlas, or preview playback.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=validators.LOG_LEVELS,
        help="Logging level (default: $GIFPLAYBACK_LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse arguments and show plan without loading anything",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    info = commands.add_parser("info", help="Print geometry and timing of an animation")
    info.add_argument("input", type=Path, help="Path to the animated image")

    atlas = commands.add_parser("atlas", help="Write resolved frames side by side into a PNG")
    atlas.add_argument("input", type=Path, help="Path to the animated image")
    atlas.add_argument("output", type=Path, nargs="?", help="Destination atlas path (PNG)")
    atlas.add_argument(
        "--manifest",
        type=Path,
        nargs="?",
        const=True,
        help="Also write a JSON manifest (optionally to the given path)",
    )

    play = commands.add_parser("play", help="Open a preview window")
    play.add_argument("input", type=Path, help="Path to the animated image")
    play.add_argument(
        "--speed",
        type=validators.parse_positive_float,
        default=1.0,
        help="Playback speed multiplier (default: 1)",
    )
    play.add_argument(
        "--tick",
        type=int,
        default=16,
        help="Preview timer interval in milliseconds (default: 16)",
    )
    return parser


def settings_from_args(args: argparse.Namespace) -> PlaybackSettings:
    settings = PlaybackSettings(source_path=args.input)
    if args.command == "atlas":
        settings.output_path = args.output or file_tools.default_output_path(args.input)
        if args.manifest:
            settings.generate_manifest = True
            if isinstance(args.manifest, Path):
                settings.manifest_path = args.manifest
    elif args.command == "play":
        validators.validate_tick_interval(args.tick)
        settings.speed = args.speed
        settings.tick_interval_ms = args.tick
    return settings


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        configure_logging(args.log_level)
        settings = settings_from_args(args)
    except ValidationError as exc:
        parser.error(str(exc))

    if args.dry_run:
        print(f"{args.command}: {settings}")
        return 0

    if args.command == "play":
        return run(settings)

    try:
        if args.command == "info":
            meta = gif_loader.load_metadata(settings.source_path)
        else:
            player = gif_loader.load_animation(settings.source_path)
    except AnimationLoadError as exc:
        logger.error("%s", exc)
        return 2

    if args.command == "info":
        print(f"{settings.source_path}: {meta.width}x{meta.height}, {meta.frame_count} frames")
        for index, (delay, disposal) in enumerate(zip(meta.delays, meta.disposals)):
            print(f"  frame {index:4d}: delay={delay} disposal={disposal.name.lower()}")
        return 0

    meta = player.metadata
    output_path, _, infos = atlas_builder.build_atlas(player, settings.output_path)
    print(output_path)
    if settings.generate_manifest:
        print(manifest_writer.write_manifest(infos, settings, meta))
    return 0


if __name__ == "__main__":
    sys.exit(main())
