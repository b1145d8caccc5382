"""Accordion tiler - command line entry point."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from .config_manager import ConfigManager
from .errors import TilerError
from .image_processing import ImageProcessor
from .models import (
    PRESETS,
    EditorParameters,
    RemainderPolicy,
    ResampleMethod,
    TilerConfig,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="accordion-tiler",
        description="Slice an image into vertical strips, stack them with every "
        "other strip mirrored, and tile the result side by side.",
    )
    parser.add_argument("path", nargs="?", help="Source image (.png/.jpg/.gif/...)")
    parser.add_argument("-o", "--output", help="Output file (default: from config)")
    parser.add_argument("--scale", help="Horizontal scale multiplier")
    parser.add_argument("--splits", help="Number of vertical slices")
    parser.add_argument("--repeat", help="Horizontal repeat count")
    parser.add_argument(
        "--preset",
        choices=sorted(PRESETS),
        help="Start from a named parameter preset instead of the stored defaults",
    )
    parser.add_argument(
        "--remainder",
        choices=[policy.value for policy in RemainderPolicy],
        help="What to do with columns left over after slicing",
    )
    parser.add_argument(
        "--resample",
        choices=[method.value for method in ResampleMethod],
        help="Resampling filter used when scaling",
    )
    parser.add_argument("--format", dest="output_format", help="Output format (PNG, WEBP, ...)")
    parser.add_argument("--workers", type=int, help="Worker threads for compositing (1 = serial)")
    parser.add_argument("--config", metavar="PATH", help="Configuration file to use")
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Store the effective settings as the new defaults",
    )
    parser.add_argument("--gui", action="store_true", help="Open the editor window")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.epilog = "Without arguments the editor window is launched."
    return parser


def launch_gui(config_manager: ConfigManager) -> int:
    from .ui import run_editor

    return run_editor(config_manager)


def resolve_config(args: argparse.Namespace, config: TilerConfig) -> TilerConfig:
    """Apply command line overrides on top of the stored configuration."""
    base = PRESETS[args.preset] if args.preset else config.parameters
    # Command line values go through the same clamp law as the editor inputs
    params = EditorParameters(
        scale=args.scale if args.scale is not None else base.scale,
        num_splits=args.splits if args.splits is not None else base.num_splits,
        horizontal_repeat=(
            args.repeat if args.repeat is not None else base.horizontal_repeat
        ),
    )
    resolved = replace(config, parameters=params)
    if args.remainder:
        resolved.remainder_policy = RemainderPolicy(args.remainder)
    if args.resample:
        resolved.resample = ResampleMethod(args.resample)
    if args.output_format:
        resolved.output_format = args.output_format.upper()
    if args.workers is not None:
        resolved.max_workers = max(1, args.workers)
    return resolved


def run(args: argparse.Namespace, config_manager: ConfigManager) -> int:
    config = resolve_config(args, config_manager.load())
    params = config.parameters
    output = Path(args.output or config.output_filename)

    print(
        f"Processing {args.path} (scale={params.scale:g}, "
        f"splits={params.num_splits}, repeat={params.horizontal_repeat})..."
    )
    processor = ImageProcessor(config)
    result = processor.process_file(args.path, params)
    output.write_bytes(result.data)

    width, height = result.output_size
    print(f"Saved {width}x{height} image to {output}")

    if args.save_config:
        ok, error = config_manager.save(config)
        if not ok:
            print(f"Warning: Could not save config file: {error}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run the tiler from the command line."""
    if argv is None:
        argv = sys.argv[1:]
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    config_manager = ConfigManager(Path(args.config)) if args.config else ConfigManager()

    if not argv or args.gui:
        return launch_gui(config_manager)
    if not args.path:
        print("Missing image path. Use --help for usage.", file=sys.stderr)
        return 2

    try:
        return run(args, config_manager)
    except TilerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 2
    except OSError as exc:
        print(f"Error: could not write output: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
