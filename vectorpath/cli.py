#!/usr/bin/env python3
# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
VectorPath - command line entry point

Runs one engine operation per invocation and writes the resulting shapes
as SVG path data (one line per shape) or as a complete SVG document.

Usage:
    vectorpath fit points.json -t 0.5 --close
    vectorpath outline "M 0 0 L 100 0" --width 10 --cap round
    vectorpath erase "M 0 0 L 10 0 L 10 10 L 0 10 Z" "M 5 -1 L 15 -1 L 15 11 L 5 11 Z"
    vectorpath simplify "M 0 0 L 1 0.01 L 2 0 L 3 0.01" -t 0.1

Exit codes: 0 on success, 1 when the engine rejects the input, 2 for
invalid arguments or unreadable input files.
"""

from __future__ import annotations

import json
import logging
import sys

from .algorithms.curve_fit_algorithm import fit
from .cli_args import build_argument_parser, build_config, build_style, fill_rule
from .core import error as vp_error
from .devices.svg.path_data import parse_path_data, to_path_data
from .devices.svg.svg import svg_document

logger = logging.getLogger(__name__)


def _load_points(source: str) -> list[tuple[float, float]]:
    """Read ``[[x, y], ...]`` or ``[{"x": .., "y": ..}, ...]`` from a file or stdin."""
    if source == "-":
        data = json.load(sys.stdin)
    else:
        with open(source, "r", encoding="utf-8") as f:
            data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Points file must contain a JSON array")
    points = []
    for item in data:
        if isinstance(item, dict):
            if "x" not in item or "y" not in item:
                raise ValueError(f"Point missing x or y coordinate: {item}")
            points.append((float(item["x"]), float(item["y"])))
        elif isinstance(item, (list, tuple)) and len(item) == 2:
            points.append((float(item[0]), float(item[1])))
        else:
            raise ValueError(f"Invalid point: {item!r}")
    return points


def _run_fit(args, config, style):
    points = _load_points(args.points)
    logger.debug("fit: %d points, tolerance %g", len(points), args.tolerance)
    return [fit(points, args.tolerance, args.close, config=config)], style


def _run_outline(args, config, style):
    shape = parse_path_data(args.d)
    return [shape.to_outline_path(style, config)], None


def _run_erase(args, config, style):
    subject = parse_path_data(args.subject, fill_rule(args.subject_rule))
    eraser = parse_path_data(args.eraser, fill_rule(args.eraser_rule))
    return subject.erase(eraser, config), None


def _run_simplify(args, config, style):
    shape = parse_path_data(args.d)
    shape.simplify(args.tolerance, config)
    return [shape], style


_COMMANDS = {
    "fit": _run_fit,
    "outline": _run_outline,
    "erase": _run_erase,
    "simplify": _run_simplify,
}


def main(argv=None) -> int:
    """
    Main entry point for the VectorPath command line.

    Returns:
        Exit code: 0 for success, 1 for an engine error, 2 for bad input
    """
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        config = build_config(args)
        style = build_style(args)
        shapes, preview_style = _COMMANDS[args.command](args, config, style)
    except vp_error.PathEngineError as e:
        print(f"VectorPath Error: {e}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(f"VectorPath Error: {e}", file=sys.stderr)
        return 2

    if args.svg:
        output = svg_document(shapes, preview_style, args.precision, config)
    else:
        output = "\n".join(to_path_data(shape, args.precision, config) for shape in shapes)
        if output:
            output += "\n"

    if args.outputfile:
        try:
            with open(args.outputfile, "w", encoding="utf-8") as f:
                f.write(output)
        except OSError as e:
            print(f"VectorPath Error: cannot write '{args.outputfile}': {e}", file=sys.stderr)
            return 2
    else:
        sys.stdout.write(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
