# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
SVG Path Data

Serializes a PathShape to SVG path ``d`` text and parses ``d`` text back
into a PathShape.

Output uses absolute ``M``/``L``/``C``/``Z`` commands only, with fixed
decimal numbers (never exponent notation) so the text is identical on every
platform and locale. A closed subpath's final straight segment back to its
start is implied by ``Z``.

Parsing is delegated to svgpathtools. Quadratic segments are degree-elevated
to cubics and elliptical arcs are converted to cubics (at most 90° each).
"""

from __future__ import annotations

import math

from svgpathtools import Arc, CubicBezier, Line, QuadraticBezier, parse_path

from ...core import error as vp_error
from ...core import types as vp
from ...core.config import resolve


def fmt_number(value: float, precision: int) -> str:
    """Fixed-point text for a coordinate, trailing zeros stripped, -0 as 0."""
    if not math.isfinite(value):
        raise vp_error.PathDataError(f"Cannot serialize non-finite coordinate {value}")
    formatted = f'{value:.{precision}f}'
    if '.' in formatted:
        formatted = formatted.rstrip('0').rstrip('.')
    if formatted in ('-0', ''):
        formatted = '0'
    return formatted


def to_path_data(shape: vp.PathShape, precision: int | None = None, config=None) -> str:
    """
    SVG path data for every subpath of *shape*.

    Args:
        shape: Shape to serialize.
        precision: Decimal places; defaults to the configured
            ``path_data_precision``.
        config: EngineConfig; DEFAULT_CONFIG when None.
    """
    if precision is None:
        precision = resolve(config).path_data_precision

    def pt(p: vp.Point) -> str:
        return f'{fmt_number(p.x, precision)} {fmt_number(p.y, precision)}'

    commands = []
    for sp in shape:
        commands.append(f'M {pt(sp.start)}')
        for seg in sp.segments:
            if seg.is_line:
                commands.append(f'L {pt(seg.end)}')
            else:
                commands.append(f'C {pt(seg.c1)} {pt(seg.c2)} {pt(seg.end)}')
        if sp.closed:
            commands.append('Z')
    return ' '.join(commands)


def _point(z: complex) -> vp.Point:
    return vp.Point(float(z.real), float(z.imag))


def _cubics(segment) -> list[tuple[vp.Point, vp.Point, vp.Point, vp.Point]]:
    """(start, c1, c2, end) tuples for one svgpathtools segment."""
    if isinstance(segment, Line):
        a, b = _point(segment.start), _point(segment.end)
        return [(a, a, b, b)]
    if isinstance(segment, CubicBezier):
        return [(_point(segment.start), _point(segment.control1),
                 _point(segment.control2), _point(segment.end))]
    if isinstance(segment, QuadraticBezier):
        # Degree elevation: cubic controls sit 2/3 of the way to the quadratic control
        p0, q, p2 = _point(segment.start), _point(segment.control), _point(segment.end)
        return [(p0, p0 + (q - p0) * (2.0 / 3.0), p2 + (q - p2) * (2.0 / 3.0), p2)]
    if isinstance(segment, Arc):
        pieces = max(1, int(math.ceil(abs(segment.delta) / 90.0)))
        result = [(_point(c.start), _point(c.control1), _point(c.control2), _point(c.end))
                  for c in segment.as_cubic_curves(pieces)]
        if result:
            s, c1, c2, _ = result[-1]
            result[-1] = (s, c1, c2, _point(segment.end))
        return result
    raise vp_error.PathDataError(f"Unsupported path segment {type(segment).__name__}")


def _subpath(svg_subpath) -> vp.Subpath | None:
    segments: list[vp.BezierSegment] = []
    for svg_segment in svg_subpath:
        for start, c1, c2, end in _cubics(svg_segment):
            if segments:
                # Chain exactly onto the previous end
                start = segments[-1].end
            if start == c1 == c2 == end:
                continue
            if c1 == start and c2 == end:
                segments.append(vp.BezierSegment.line(start, end))
            else:
                segments.append(vp.BezierSegment(start, c1, c2, end))
    if not segments:
        return None

    closed = svg_subpath.isclosed() and len(segments) > 1
    if closed and segments[-1].end != segments[0].start:
        last = segments[-1]
        segments[-1] = vp.BezierSegment(last.start, last.c1, last.c2, segments[0].start)
    return vp.Subpath(tuple(segments), closed)


def parse_path_data(d: str, fill_rule: vp.FillRule = vp.FillRule.NON_ZERO) -> vp.PathShape:
    """
    PathShape from SVG path data.

    A subpath is closed when it ends where it starts (``Z`` included).

    Raises:
        PathDataError: *d* is not valid path data.
    """
    shape = vp.PathShape(fill_rule=fill_rule)
    if not d or not d.strip():
        return shape

    try:
        svg_path = parse_path(d)
    except (ValueError, IndexError, TypeError) as e:
        raise vp_error.PathDataError(f"Invalid path data {d!r}: {e}") from e

    for svg_subpath in svg_path.continuous_subpaths():
        sp = _subpath(svg_subpath)
        if sp is not None:
            shape.add_subpath(sp)
    return shape
