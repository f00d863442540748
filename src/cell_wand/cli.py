"""
Command-line interface for polar outline tracing.

Usage:
    cell-wand convert R THETA --center CX CY --bounds MAX_X MAX_Y
    cell-wand trace path/to/trace.yaml [--output outputs] [--timestamp TS] [--no-mask]
    cell-wand validate path/to/trace.yaml [--verbose]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .config import TraceConfig, load_trace_config
from .core import convert, is_four_connected, outline_to_mask, trace_outline
from .exporters import export_trace_outputs

Logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="%(message)s")


def add_shared_config_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "config",
        type=Path,
        help="Path to the YAML file describing the image, center and sweep.",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cell-wand",
        description="Convert polar samples to pixels and trace 4-connected outlines.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # convert command
    convert_parser = subparsers.add_parser(
        "convert",
        help="Convert a single (radius, angle) sample to a clamped pixel coordinate.",
    )
    convert_parser.add_argument("r", type=float, help="Radius in pixels.")
    convert_parser.add_argument("theta", type=float, help="Angle in radians.")
    convert_parser.add_argument(
        "--center", type=int, nargs=2, metavar=("CX", "CY"), required=True, help="Sweep center."
    )
    convert_parser.add_argument(
        "--bounds",
        type=int,
        nargs=2,
        metavar=("MAX_X", "MAX_Y"),
        required=True,
        help="Inclusive maximum pixel index on each axis.",
    )

    # trace command
    trace_parser = subparsers.add_parser(
        "trace",
        help="Trace an outline from a sweep and export it (.csv, .json, optional mask .png).",
    )
    add_shared_config_argument(trace_parser)
    trace_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Root directory for exported artefacts (defaults to CELL_WAND_OUTPUT_ROOT or outputs/).",
    )
    trace_parser.add_argument(
        "--timestamp",
        type=str,
        default=None,
        help="Override timestamp component of the output directory (mainly for testing).",
    )
    trace_parser.add_argument(
        "--no-mask",
        action="store_true",
        help="Skip filling and exporting the region mask.",
    )

    # validate command
    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate a trace configuration; prints a summary without exporting.",
    )
    add_shared_config_argument(validate_parser)

    return parser


def summarize_configuration(config_path: Path, config: Optional[TraceConfig] = None) -> str:
    if config is None:
        config = load_trace_config(config_path)
    radii = config.sweep.radii
    angle_desc = (
        "explicit angles"
        if config.sweep.angles is not None
        else f"evenly spaced from {config.sweep.start_angle_rad:.3f} rad"
    )
    lines = [
        f"Configuration: {config_path}",
        f"  Image: {config.image.width}x{config.image.height} px "
        f"(bounds x<={config.image.max_x}, y<={config.image.max_y})",
        f"  Center: {config.center}",
        f"  Sweep: {len(radii)} samples, {angle_desc}, radius {min(radii):.2f}-{max(radii):.2f} px",
        f"  Epsilon: {config.resolved_epsilon():g} | Max depth: {config.resolved_max_depth()}",
    ]
    return "\n".join(lines)


def convert_command(args: argparse.Namespace) -> int:
    try:
        pixel = convert(args.r, args.theta, args.center[0], args.center[1], args.bounds[0], args.bounds[1])
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Convert failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1

    print(json.dumps({"x": pixel.x, "y": pixel.y, "r": pixel.r, "theta": pixel.theta}))
    return 0


def trace_command(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = load_trace_config(config_path)
        cx, cy = config.center
        outline = trace_outline(
            config.sweep.radii,
            config.sweep.resolved_angles(),
            cx,
            cy,
            config.image.max_x,
            config.image.max_y,
            epsilon=config.resolved_epsilon(),
            max_depth=config.resolved_max_depth(),
        )
        if not is_four_connected(outline):
            Logger.warning(
                "Traced outline is not 4-connected; some gaps stayed open after %d subdivisions.",
                config.resolved_max_depth(),
            )

        mask = None if args.no_mask else outline_to_mask(outline, config.image.max_x, config.image.max_y)
        output_dir = export_trace_outputs(
            outline,
            config,
            mask=mask,
            output_root=args.output,
            timestamp=args.timestamp,
        )
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Trace failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1

    Logger.info("Trace complete: %d outline pixels. Artefacts written to: %s", len(outline), output_dir)
    return 0


def validate_command(args: argparse.Namespace) -> int:
    config_path: Path = args.config
    if not config_path.exists():
        Logger.error("Configuration file not found: %s", config_path)
        return 2

    try:
        config = load_trace_config(config_path)
        print(summarize_configuration(config_path, config=config))
    except Exception as exc:  # pylint: disable=broad-except
        Logger.error("Validation failed: %s", exc)
        if Logger.isEnabledFor(logging.DEBUG):
            Logger.exception("Stack trace")
        return 1

    Logger.info("Validation succeeded.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "convert":
        return convert_command(args)
    if args.command == "trace":
        return trace_command(args)
    if args.command == "validate":
        return validate_command(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
