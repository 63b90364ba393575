# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Arrowhead geometry for the ends of open subpaths.

Markers are sized by ``width * arrowhead_scale`` and oriented along the end
tangents. All marker subpaths are counter-clockwise (y-up), matching the
stroke outlines, so they union under the non-zero rule.
"""

from __future__ import annotations

from ..core.types import Arrowhead, PathShape, Point, Subpath, polygon_area


def arrowhead_subpath(kind: Arrowhead, point: Point, direction: Point,
                      width: float, scale: float) -> Subpath | None:
    """
    Marker outline at *point* facing *direction*.

    TRIANGLE: tip half a line width beyond the endpoint (covering any cap),
    base one marker size behind the tip.
    CIRCLE: centered on the endpoint, diameter equal to the marker size.
    """
    kind = Arrowhead(kind)
    if kind == Arrowhead.NONE:
        return None

    size = width * scale
    if size <= 0:
        return None

    if kind == Arrowhead.CIRCLE:
        r = size / 2.0
        return PathShape.ellipse(point.x, point.y, r, r).subpath(0)

    u = direction.normalized()
    if u.length() == 0:
        return None
    n = Point(-u.y, u.x)
    tip = point + u * (width / 2.0)
    base = tip - u * size
    pts = [tip, base + n * (size / 2.0), base - n * (size / 2.0)]
    if polygon_area(pts) < 0:
        pts.reverse()
    return Subpath.from_points(pts, closed=True)


def arrowhead_subpaths(shape: PathShape, style) -> list[tuple[str, Subpath]]:
    """(which, subpath) pairs for every open subpath; which is "start" or "end"."""
    result = []
    if not style.has_arrowheads:
        return result

    for sp in shape:
        if sp.closed or sp.is_empty:
            continue
        first = sp.segments[0]
        last = sp.segments[-1]

        marker = arrowhead_subpath(style.start_arrowhead, sp.start, -first.start_tangent,
                                   style.width, style.arrowhead_scale)
        if marker is not None:
            result.append(("start", marker))

        marker = arrowhead_subpath(style.end_arrowhead, sp.end, last.end_tangent,
                                   style.width, style.arrowhead_scale)
        if marker is not None:
            result.append(("end", marker))
    return result


def arrowhead_elements(shape: PathShape, style) -> list[Subpath]:
    """Outline hook adding arrowhead geometry to a stroke outline."""
    return [sp for _, sp in arrowhead_subpaths(shape, style)]
