# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Boolean erase: subject minus eraser, clipped with pyclipper.

1. Bounding-box rejection (disjoint inputs return the subject itself)
2. Flatten both shapes at a shared tolerance and snap the polygons onto an
   integer grid whose pitch is the intersection epsilon
3. An intersection pass finds whether the shapes share any area; when they
   do not (touching edges included) the subject itself is returned
4. A difference pass builds the result tree: every outer contour together
   with its holes becomes one non-zero shape

Closed subject subpaths bound the subject region under the subject's fill
rule. Open subject subpaths are clipped one at a time as polylines and
every surviving run becomes its own shape, oriented like its source. The
eraser region uses the eraser's fill rule with all subpaths implicitly
closed.
"""

from __future__ import annotations

import logging

import pyclipper

from ..core.config import resolve
from ..core.types import FillRule, PathShape, Point, Subpath, point_segment_distance, polygon_area

logger = logging.getLogger(__name__)

_FILL_TYPES = {
    FillRule.NON_ZERO: pyclipper.PFT_NONZERO,
    FillRule.EVEN_ODD: pyclipper.PFT_EVENODD,
}


def _grid_scale(eps: float) -> int:
    return max(1, round(1.0 / eps))


def _to_ints(points, scale: int) -> list[tuple[int, int]]:
    return [(round(p.x * scale), round(p.y * scale)) for p in points]


def _from_ints(path, scale: int) -> list[Point]:
    return [Point(x / scale, y / scale) for x, y in path]


def _add_path(pc: pyclipper.Pyclipper, points, poly_type, closed: bool, scale: int) -> bool:
    path = _to_ints(points, scale)
    try:
        pc.AddPath(path, poly_type, closed)
    except pyclipper.ClipperException:
        # Too few distinct vertices once snapped to the grid
        logger.debug("erase: skipping degenerate %s path of %d points",
                     "closed" if closed else "open", len(path))
        return False
    return True


def _clipper(subject_polys, eraser_polys, scale: int) -> pyclipper.Pyclipper:
    pc = pyclipper.Pyclipper()
    for poly in subject_polys:
        _add_path(pc, poly.points, pyclipper.PT_SUBJECT, poly.closed, scale)
    for poly in eraser_polys:
        _add_path(pc, poly.points, pyclipper.PT_CLIP, True, scale)
    return pc


def _lowest_first(points: list[Point]) -> list[Point]:
    """Rotate a ring so it starts at its lowest (then leftmost) vertex."""
    i = min(range(len(points)), key=lambda k: (points[k].y, points[k].x))
    return points[i:] + points[:i]


def _ring(contour, scale: int, counter_clockwise: bool) -> Subpath:
    points = _from_ints(contour, scale)
    if (polygon_area(points) > 0) != counter_clockwise:
        points.reverse()
    return Subpath.from_points(_lowest_first(points), closed=True)


def _region_shapes(tree, scale: int) -> list[PathShape]:
    """One non-zero shape per outer contour of a PyPolyNode tree, holes included."""
    shapes = []
    pending = list(tree.Childs)
    while pending:
        outer = pending.pop(0)
        if outer.IsOpen:
            continue
        subpaths = [_ring(outer.Contour, scale, True)]
        for hole in outer.Childs:
            subpaths.append(_ring(hole.Contour, scale, False))
            # Islands inside a hole are outer contours of their own
            pending.extend(hole.Childs)
        shapes.append(PathShape(subpaths, FillRule.NON_ZERO))
    return shapes


def _arc_position(points, p: Point) -> float:
    """Distance along a polyline to the vertex-or-edge point nearest p."""
    best = None
    travelled = 0.0
    for a, b in zip(points, points[1:]):
        d = point_segment_distance(p, a, b)
        if best is None or d < best[0]:
            best = (d, travelled + (p - a).length())
        travelled += (b - a).length()
    return best[1] if best is not None else 0.0


def _clip_open(subpath: Subpath, poly, eraser_polys, eraser_fill,
               scale: int) -> tuple[bool, list[Subpath]]:
    """Runs of one open polyline lying outside the eraser, in the polyline's direction."""
    pc = _clipper([poly], eraser_polys, scale)
    inside = pc.Execute2(pyclipper.CT_INTERSECTION, pyclipper.PFT_NONZERO, eraser_fill)
    if not inside.Childs:
        return False, [subpath]

    outside = pc.Execute2(pyclipper.CT_DIFFERENCE, pyclipper.PFT_NONZERO, eraser_fill)
    runs = []
    for path in pyclipper.OpenPathsFromPolyTree(outside):
        run = _from_ints(path, scale)
        if len(run) < 2:
            continue
        if _arc_position(poly.points, run[0]) > _arc_position(poly.points, run[-1]):
            run.reverse()
        runs.append(Subpath.from_points(run))
    return True, runs


def erase(subject: PathShape, eraser: PathShape, config=None) -> list[PathShape]:
    """
    Subject minus the region covered by eraser.

    Returns the subject itself when the eraser cannot touch it, an empty
    list when the eraser covers it, and otherwise one new non-zero shape per
    outer boundary (with its holes) plus one shape per surviving run of an
    open subpath.
    """
    cfg = resolve(config)
    sb = subject.bounds
    eb = eraser.bounds
    if sb is None:
        return []
    if eb is None or not sb.intersects(eb, cfg.intersection_epsilon):
        return [subject]

    scale = _grid_scale(cfg.intersection_epsilon)
    tolerance = cfg.erase_flatness
    pairs = list(zip(subject.subpaths, subject.flatten(tolerance)))
    closed_pairs = [(sp, poly) for sp, poly in pairs if sp.closed]
    open_pairs = [(sp, poly) for sp, poly in pairs if not sp.closed and len(poly) > 1]
    eraser_polys = eraser.flatten(tolerance)

    subject_fill = _FILL_TYPES[subject.fill_rule]
    eraser_fill = _FILL_TYPES[eraser.fill_rule]

    pc = _clipper([poly for _, poly in closed_pairs], eraser_polys, scale)
    region_touched = bool(pc.Execute2(pyclipper.CT_INTERSECTION, subject_fill, eraser_fill).Childs)

    open_runs: list[Subpath] = []
    open_touched = False
    for sp, poly in open_pairs:
        touched, runs = _clip_open(sp, poly, eraser_polys, eraser_fill, scale)
        open_touched = open_touched or touched
        open_runs.extend(runs)

    if not region_touched and not open_touched:
        logger.debug("erase: no shared area between shapes")
        return [subject]

    if region_touched:
        tree = pc.Execute2(pyclipper.CT_DIFFERENCE, subject_fill, eraser_fill)
        results = _region_shapes(tree, scale)
    elif closed_pairs:
        results = [PathShape([sp for sp, _ in closed_pairs], subject.fill_rule)]
    else:
        results = []
    results.extend(PathShape([run], subject.fill_rule) for run in open_runs)

    logger.debug("erase: %d subject and %d eraser polygons -> %d shapes",
                 len(pairs), len(eraser_polys), len(results))
    return results
