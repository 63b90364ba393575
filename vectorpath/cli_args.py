# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
CLI argument parsing for VectorPath.

Handles command-line argument definition and turns parsed arguments into
an EngineConfig and a StrokeStyle.
"""

from __future__ import annotations

import argparse
import math
from importlib import metadata

from .core import types as vp
from .core.config import DEFAULT_CONFIG, EngineConfig

_CAPS = {"butt": vp.LineCap.BUTT, "round": vp.LineCap.ROUND, "square": vp.LineCap.SQUARE}
_JOINS = {"miter": vp.LineJoin.MITER, "round": vp.LineJoin.ROUND, "bevel": vp.LineJoin.BEVEL}
_ARROWS = {"none": vp.Arrowhead.NONE, "triangle": vp.Arrowhead.TRIANGLE,
           "circle": vp.Arrowhead.CIRCLE}
_FILL_RULES = {"nonzero": vp.FillRule.NON_ZERO, "evenodd": vp.FillRule.EVEN_ODD}


def _parse_dash(spec: str) -> tuple[float, ...]:
    """Parse a dash specification such as ``5,3`` or ``4 2 1 2``.

    Args:
        spec: Comma and/or space separated non-negative lengths.

    Returns:
        Tuple of dash lengths.

    Raises:
        ValueError: If the specification is malformed.
    """
    lengths = []
    for part in spec.replace(",", " ").split():
        try:
            value = float(part)
        except ValueError:
            raise ValueError(f"Invalid dash length: '{part}'")
        if value < 0 or not math.isfinite(value):
            raise ValueError(f"Dash lengths must be non-negative numbers: '{part}'")
        lengths.append(value)
    if not lengths:
        raise ValueError("Empty dash specification")
    return tuple(lengths)


def _get_version() -> str:
    try:
        return metadata.version("vectorpath")
    except metadata.PackageNotFoundError:
        return "unknown"


def _add_stroke_arguments(parser: argparse.ArgumentParser, width_default: float) -> None:
    parser.add_argument(
        "-w", "--width", type=float, default=width_default,
        help=f"Stroke width (default: {width_default:g})"
    )
    parser.add_argument("--cap", choices=sorted(_CAPS), default="butt", help="Line cap (default: butt)")
    parser.add_argument("--join", choices=sorted(_JOINS), default="miter", help="Line join (default: miter)")
    parser.add_argument(
        "--miter-limit", type=float, default=vp.DEFAULT_MITER_LIMIT,
        help=f"Miter limit (default: {vp.DEFAULT_MITER_LIMIT:g})"
    )
    parser.add_argument("--dash", help="Dash lengths, e.g. 5,3 (default: solid)")
    parser.add_argument("--dash-phase", type=float, default=0.0, help="Dash phase (default: 0)")
    parser.add_argument("--start-arrow", choices=sorted(_ARROWS), default="none",
                        help="Arrowhead at the start of open subpaths")
    parser.add_argument("--end-arrow", choices=sorted(_ARROWS), default="none",
                        help="Arrowhead at the end of open subpaths")
    parser.add_argument("--arrow-scale", type=float, default=3.0,
                        help="Arrowhead size as a multiple of the stroke width (default: 3)")


def build_argument_parser() -> argparse.ArgumentParser:
    """
    Create and configure the VectorPath argument parser.

    Returns:
        Configured ArgumentParser instance.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-o", "--output", dest="outputfile", help="Write to this file instead of stdout"
    )
    common.add_argument(
        "--svg", action="store_true", help="Write a complete SVG document instead of path data"
    )
    common.add_argument(
        "-p", "--precision", type=int, default=DEFAULT_CONFIG.path_data_precision,
        help=f"Decimal places in path data (default: {DEFAULT_CONFIG.path_data_precision})"
    )
    common.add_argument(
        "--flatness", type=float,
        help="Flattening tolerance for curves (default: per operation)"
    )
    common.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging on stderr"
    )

    parser = argparse.ArgumentParser(
        prog="vectorpath",
        description="VectorPath - Vector Path Authoring Engine",
    )
    parser.add_argument(
        "-V", "--version", action="version",
        version=f"VectorPath {_get_version()}"
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    fit_parser = subparsers.add_parser(
        "fit", parents=[common],
        help="Fit cubic beziers to a JSON list of points",
    )
    fit_parser.add_argument("points", help="JSON file of [x, y] pairs ('-' for stdin)")
    fit_parser.add_argument(
        "-t", "--tolerance", type=float, default=1.0, help="Maximum fit error (default: 1)"
    )
    fit_parser.add_argument(
        "--close", action="store_true", help="Close the curve when its ends are within tolerance"
    )
    fit_parser.add_argument(
        "--corner-angle", type=float,
        help="Turn in degrees at which a sample becomes a corner "
             f"(default: {math.degrees(DEFAULT_CONFIG.fit_corner_angle):g})"
    )
    fit_parser.add_argument(
        "--max-depth", type=int, default=DEFAULT_CONFIG.fit_max_depth,
        help=f"Subdivision ceiling (default: {DEFAULT_CONFIG.fit_max_depth})"
    )
    _add_stroke_arguments(fit_parser, 1.0)

    outline_parser = subparsers.add_parser(
        "outline", parents=[common],
        help="Convert a stroked path into its filled outline",
    )
    outline_parser.add_argument("d", help="SVG path data of the centerline")
    _add_stroke_arguments(outline_parser, 1.0)

    erase_parser = subparsers.add_parser(
        "erase", parents=[common],
        help="Subtract the eraser's region from the subject",
    )
    erase_parser.add_argument("subject", help="SVG path data of the subject")
    erase_parser.add_argument("eraser", help="SVG path data of the eraser")
    erase_parser.add_argument("--subject-rule", choices=sorted(_FILL_RULES), default="nonzero",
                              help="Fill rule of the subject (default: nonzero)")
    erase_parser.add_argument("--eraser-rule", choices=sorted(_FILL_RULES), default="nonzero",
                              help="Fill rule of the eraser (default: nonzero)")

    simplify_parser = subparsers.add_parser(
        "simplify", parents=[common],
        help="Refit a path with fewer segments",
    )
    simplify_parser.add_argument("d", help="SVG path data")
    simplify_parser.add_argument(
        "-t", "--tolerance", type=float, required=True, help="Maximum deviation"
    )
    _add_stroke_arguments(simplify_parser, 1.0)

    return parser


def build_config(args: argparse.Namespace) -> EngineConfig:
    """
    EngineConfig for the parsed arguments.

    Raises:
        ValueError: If an option value is out of range.
    """
    changes = {"path_data_precision": args.precision}
    if args.flatness is not None:
        if args.flatness <= 0:
            raise ValueError(f"Flatness must be positive, got {args.flatness:g}")
        changes["default_flatness"] = args.flatness
        changes["erase_flatness"] = args.flatness
    if getattr(args, "corner_angle", None) is not None:
        if not 0 < args.corner_angle <= 180:
            raise ValueError(f"Corner angle must be in (0, 180], got {args.corner_angle:g}")
        changes["fit_corner_angle"] = math.radians(args.corner_angle)
    if getattr(args, "max_depth", None) is not None:
        changes["fit_max_depth"] = args.max_depth
    return DEFAULT_CONFIG.replace(**changes)


def build_style(args: argparse.Namespace) -> vp.StrokeStyle | None:
    """
    StrokeStyle for commands that take stroke options, None otherwise.

    Raises:
        ValueError: If an option value is out of range.
    """
    if not hasattr(args, "width"):
        return None
    if not math.isfinite(args.width) or args.width < 0:
        raise ValueError(f"Stroke width must be a non-negative number, got {args.width:g}")
    if args.miter_limit < 1:
        raise ValueError(f"Miter limit must be at least 1, got {args.miter_limit:g}")
    dash = None
    if args.dash:
        dash = vp.DashPattern(_parse_dash(args.dash), args.dash_phase)
    return vp.StrokeStyle(
        width=args.width,
        cap=_CAPS[args.cap],
        join=_JOINS[args.join],
        miter_limit=args.miter_limit,
        dash=dash,
        start_arrowhead=_ARROWS[args.start_arrow],
        end_arrowhead=_ARROWS[args.end_arrow],
        arrowhead_scale=args.arrow_scale,
    )


def fill_rule(name: str) -> vp.FillRule:
    return _FILL_RULES[name]
