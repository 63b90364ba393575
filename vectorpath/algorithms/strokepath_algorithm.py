# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Strokepath algorithm: converts a stroked path into a filled outline.

Works on the flattened centerline and produces line/cubic geometry (round
joins and caps stay true cubic arcs).

Components:
1. Dash pattern processor (arc-length walk over the polyline)
2. Polyline offset at ±width/2
3. Line joins (miter/round/bevel; inside joins trimmed or pivoted)
4. Line caps (butt/round/projecting square)
5. Outline assembly

Open runs become one closed ring: right offset forward, end cap, left
offset backward, start cap. Closed subpaths become two rings (outer and
reversed inner) so the non-zero rule leaves the interior unpainted.
Self-overlaps are left in place; the non-zero fill absorbs them.
"""

from __future__ import annotations

import logging
import math

from ..core import error as vp_error
from ..core.config import resolve
from ..core.types import (
    EPSILON,
    POINT_EPSILON,
    BezierSegment,
    FillRule,
    LineCap,
    LineJoin,
    PathShape,
    Point,
    Subpath,
)

logger = logging.getLogger(__name__)

# Turn below which two consecutive edges are treated as collinear
_COLLINEAR_CROSS = 1e-9


# ---------------------------------------------------------------------------
# Outline pen
# ---------------------------------------------------------------------------

class _Pen:
    """Accumulates continuous segments for one closed outline ring."""

    def __init__(self, start: Point) -> None:
        self.start = start
        self.current = start
        self.segments: list[BezierSegment] = []

    def line_to(self, p: Point) -> None:
        if p == self.current:
            return
        self.segments.append(BezierSegment.line(self.current, p))
        self.current = p

    def curve_to(self, c1: Point, c2: Point, p: Point) -> None:
        self.segments.append(BezierSegment(self.current, c1, c2, p))
        self.current = p

    def trim_end(self, p: Point) -> bool:
        """Move the end of the last straight segment to p."""
        if not self.segments or not self.segments[-1].is_line:
            return False
        last = self.segments[-1]
        if p == last.start:
            self.segments.pop()
        else:
            self.segments[-1] = BezierSegment.line(last.start, p)
        self.current = p
        return True

    def arc(self, center: Point, radius: float, start_angle: float, sweep: float,
            end: Point | None = None) -> None:
        """Cubic approximation of a circular arc (max 90° per segment)."""
        n_segs = max(1, int(math.ceil(abs(sweep) / (math.pi / 2) - 1e-9)))
        seg_angle = sweep / n_segs
        alpha = 4.0 * math.tan(seg_angle / 4.0) / 3.0

        for i in range(n_segs):
            a0 = start_angle + i * seg_angle
            a1 = a0 + seg_angle
            cos0, sin0 = math.cos(a0), math.sin(a0)
            cos1, sin1 = math.cos(a1), math.sin(a1)

            c1 = Point(center.x + radius * (cos0 - alpha * sin0),
                       center.y + radius * (sin0 + alpha * cos0))
            c2 = Point(center.x + radius * (cos1 + alpha * sin1),
                       center.y + radius * (sin1 - alpha * cos1))
            if i == n_segs - 1 and end is not None:
                p3 = end
            else:
                p3 = Point(center.x + radius * cos1, center.y + radius * sin1)
            self.curve_to(c1, c2, p3)

    def close(self) -> Subpath | None:
        self.line_to(self.start)
        if not self.segments:
            return None
        return Subpath(tuple(self.segments), True)


def _right_normal(d: Point) -> Point:
    """Unit normal to the right of travel in y-up space."""
    ln = d.length()
    if ln < EPSILON:
        return Point(0.0, 0.0)
    return Point(d.y / ln, -d.x / ln)


def _angle(v: Point) -> float:
    return math.atan2(v.y, v.x)


def circle_subpath(center: Point, radius: float) -> Subpath:
    return PathShape.ellipse(center.x, center.y, radius, radius).subpath(0)


# ---------------------------------------------------------------------------
# Dash pattern processor
# ---------------------------------------------------------------------------

def apply_dash_pattern(points: list[Point], closed: bool, dash) -> list[tuple[list[Point], bool]]:
    """
    Partition a polyline into dash "on" runs by cumulative arc length.

    Returns a list of (points, closed) runs. Odd-length patterns are doubled,
    the phase shifts the starting position in the pattern, and on a closed
    polyline a dash that straddles the start point is merged into one run.
    A pattern with no gaps returns the input unchanged.
    """
    pattern = list(dash.lengths)
    if len(pattern) % 2 == 1:
        pattern = pattern * 2
    period = sum(pattern)
    if not pattern or period < EPSILON or len(points) < 2:
        return [(list(points), closed)]

    edges = list(zip(points, points[1:]))
    if closed and len(points) > 2:
        edges.append((points[-1], points[0]))

    offset = dash.phase % period
    idx = 0
    while offset >= pattern[idx]:
        offset -= pattern[idx]
        idx = (idx + 1) % len(pattern)

    drawing = idx % 2 == 0
    starts_drawing = drawing
    remaining = pattern[idx] - offset

    runs: list[list[Point]] = []
    run: list[Point] | None = [points[0]] if drawing else None
    toggled = False

    for a, b in edges:
        seg_len = (b - a).length()
        if seg_len < EPSILON:
            continue
        pos = 0.0
        while seg_len - pos > remaining:
            pos += remaining
            split_pt = a.lerp(b, pos / seg_len)
            if drawing:
                run.append(split_pt)
                runs.append(run)
                run = None
            else:
                run = [split_pt]
            drawing = not drawing
            toggled = True
            idx = (idx + 1) % len(pattern)
            remaining = pattern[idx]
        remaining -= seg_len - pos
        if drawing:
            run.append(b)

    ends_mid_dash = drawing and run is not None
    if ends_mid_dash:
        runs.append(run)

    if closed and not toggled:
        return [(list(points), True)] if starts_drawing else []

    if closed and starts_drawing and ends_mid_dash and len(runs) >= 2:
        # The closure point sits inside a dash: join last and first
        last = runs.pop()
        first = runs[0]
        runs[0] = last + first[1:]

    return [(r, False) for r in runs]


# ---------------------------------------------------------------------------
# Joins and caps
# ---------------------------------------------------------------------------

def _join(pen: _Pen, vertex: Point, d_prev: Point, d_next: Point, half_width: float,
          style, len_prev: float, len_next: float) -> Point:
    """
    Connect the right offset of the edge ending at *vertex* to the right
    offset of the edge leaving it. Returns the point the next edge's offset
    should be drawn from (the pen's current point).
    """
    u_prev = d_prev.normalized()
    u_next = d_next.normalized()
    n_prev = _right_normal(u_prev)
    n_next = _right_normal(u_next)
    next_start = vertex + n_next * half_width

    cross = u_prev.cross(u_next)
    dot = u_prev.dot(u_next)

    if abs(cross) <= _COLLINEAR_CROSS and dot > 0:
        pen.line_to(next_start)
        return pen.current

    # The right side is outside the turn when turning left; U-turns are
    # outside on both sides.
    is_outside = cross > _COLLINEAR_CROSS or (abs(cross) <= _COLLINEAR_CROSS and dot < 0)

    if not is_outside:
        trim = _inner_join_point(pen.current, u_prev, next_start, u_next, len_prev, len_next)
        if trim is not None and pen.trim_end(trim):
            return pen.current
        # Route through the centerline vertex; the overlap is absorbed by non-zero fill
        pen.line_to(vertex)
        pen.line_to(next_start)
        return pen.current

    if style.join == LineJoin.BEVEL:
        pen.line_to(next_start)
        return pen.current

    if style.join == LineJoin.ROUND:
        a0 = _angle(n_prev)
        sweep = math.atan2(n_prev.cross(n_next), n_prev.dot(n_next))
        if sweep <= 0:
            sweep = math.pi  # U-turn: go around the front of the vertex
        pen.arc(vertex, half_width, a0, sweep, end=next_start)
        return pen.current

    # Miter: miter_length / line_width = 1 / sin(phi / 2), phi being the
    # angle between the segments; sin(phi / 2) = sqrt((1 + dot) / 2).
    cos_half = math.sqrt(max(0.0, (1.0 + dot) / 2.0))
    if cos_half < EPSILON or 1.0 / cos_half > style.miter_limit:
        pen.line_to(next_start)
        return pen.current

    denom = u_prev.cross(u_next)
    if abs(denom) < EPSILON:
        pen.line_to(next_start)
        return pen.current
    t = (next_start - pen.current).cross(u_next) / denom
    pen.line_to(pen.current + u_prev * t)
    pen.line_to(next_start)
    return pen.current


def _inner_join_point(prev_end: Point, u_prev: Point, next_start: Point, u_next: Point,
                      len_prev: float, len_next: float) -> Point | None:
    """Intersection of the two inner offset edges when it lies on both of them."""
    denom = u_prev.cross(u_next)
    if abs(denom) < 1e-6:
        return None
    diff = next_start - prev_end
    t = diff.cross(u_next) / denom        # along the previous edge, from its end
    s = diff.cross(u_prev) / denom        # along the next edge, from its start
    # The trim point must lie backward on the previous edge and forward on the next
    if t > 0 or -t > len_prev or s < 0 or s > len_next:
        return None
    return prev_end + u_prev * t


def _cap(pen: _Pen, point: Point, direction: Point, half_width: float, cap: LineCap) -> None:
    """Cap from the right offset of *point* around to its left offset, facing *direction*."""
    u = direction.normalized()
    n = _right_normal(u)
    left = point - n * half_width

    if cap == LineCap.ROUND:
        # Semicircle through the point ahead of the endpoint
        pen.arc(point, half_width, _angle(n), math.pi, end=left)
        return

    if cap == LineCap.SQUARE:
        ext = u * half_width
        pen.line_to(point + n * half_width + ext)
        pen.line_to(left + ext)
        pen.line_to(left)
        return

    pen.line_to(left)


# ---------------------------------------------------------------------------
# Outline assembly
# ---------------------------------------------------------------------------

def _dedupe(points) -> list[Point]:
    result: list[Point] = []
    for p in points:
        if not result or not p.is_close(result[-1], POINT_EPSILON):
            result.append(p)
    return result


def _offset_side(pen: _Pen, pts: list[Point], half_width: float, style, cyclic: bool) -> None:
    """Draw the right-hand offset of pts; the pen must already be at the first edge's offset start."""
    n_pts = len(pts)
    edge_count = n_pts if cyclic else n_pts - 1
    dirs = [pts[(i + 1) % n_pts] - pts[i] for i in range(edge_count)]
    lengths = [d.length() for d in dirs]

    for i in range(edge_count):
        end = pts[(i + 1) % n_pts]
        pen.line_to(end + _right_normal(dirs[i]) * half_width)
        if i < edge_count - 1:
            _join(pen, end, dirs[i], dirs[i + 1], half_width, style, lengths[i], lengths[i + 1])
        elif cyclic:
            _join_closing(pen, end, dirs[i], dirs[0], half_width, style)


def _join_closing(pen: _Pen, vertex: Point, d_prev: Point, d_next: Point,
                  half_width: float, style) -> None:
    # The ring starts exactly at the first edge's offset, so an inside join
    # here cannot be trimmed; pivot through the vertex instead.
    cross = d_prev.normalized().cross(d_next.normalized())
    if cross < -_COLLINEAR_CROSS:
        pen.line_to(vertex)
        pen.line_to(pen.start)
        return
    _join(pen, vertex, d_prev, d_next, half_width, style, 0.0, 0.0)
    pen.line_to(pen.start)


def _outline_open_run(pts: list[Point], style) -> Subpath | None:
    hw = style.half_width
    pts = _dedupe(pts)
    if len(pts) < 2:
        if pts and style.cap == LineCap.ROUND:
            return circle_subpath(pts[0], hw)
        return None

    first_dir = pts[1] - pts[0]
    last_dir = pts[-1] - pts[-2]

    pen = _Pen(pts[0] + _right_normal(first_dir) * hw)
    _offset_side(pen, pts, hw, style, cyclic=False)
    _cap(pen, pts[-1], last_dir, hw, style.cap)

    back = pts[::-1]
    pen.line_to(back[0] + _right_normal(back[1] - back[0]) * hw)
    _offset_side(pen, back, hw, style, cyclic=False)
    _cap(pen, pts[0], -first_dir, hw, style.cap)
    return pen.close()


def _outline_closed_run(pts: list[Point], style) -> list[Subpath]:
    hw = style.half_width
    pts = _dedupe(pts)
    if len(pts) > 1 and pts[-1].is_close(pts[0], POINT_EPSILON):
        pts.pop()
    if len(pts) < 3:
        sp = _outline_open_run(pts + pts[:1], style)
        return [sp] if sp is not None else []

    rings = []
    for ring_pts in (pts, pts[::-1]):
        pen = _Pen(ring_pts[0] + _right_normal(ring_pts[1] - ring_pts[0]) * hw)
        _offset_side(pen, ring_pts, hw, style, cyclic=True)
        ring = pen.close()
        if ring is not None:
            rings.append(ring)
    return rings


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def default_can_outline(shape: PathShape, style, config=None) -> bool:
    """Positive width and at least one subpath spanning two distinct points."""
    if not (style.width > 0 and math.isfinite(style.width)):
        return False
    tolerance = resolve(config).stroke_flatness(style.width)
    return any(len(_dedupe(poly.points)) >= 2 for poly in shape.flatten(tolerance))


def _configured_can_outline(shape: PathShape, style, cfg) -> bool:
    if cfg.outline_predicate is not None:
        return bool(cfg.outline_predicate(shape, style))
    return default_can_outline(shape, style, cfg)


def can_outline(shape: PathShape, style, config=None) -> bool:
    return _configured_can_outline(shape, style, resolve(config))


def outline(shape: PathShape, style, *, config=None, can_outline=None,
            extra_elements=None) -> PathShape:
    """
    Outline of the region a stroke with *style* paints along *shape*.

    Args:
        shape: Centerline; not modified.
        style: Immutable StrokeStyle.
        config: EngineConfig; DEFAULT_CONFIG when None.
        can_outline: Predicate (shape, style) -> bool replacing the
            configured one for this call.
        extra_elements: Hook (shape, style) -> iterable of Subpath whose
            results are added to the outline. Defaults to the arrowhead
            geometry the style requests.

    Returns:
        A new non-zero PathShape.

    Raises:
        NotOutlinableError: the predicate rejected the shape or style.
    """
    cfg = resolve(config)
    if can_outline is not None:
        allowed = can_outline(shape, style)
    else:
        allowed = _configured_can_outline(shape, style, cfg)
    if not allowed:
        raise vp_error.NotOutlinableError(
            f"Cannot outline {shape!r} with stroke width {style.width}")

    tolerance = cfg.stroke_flatness(style.width)
    result = PathShape(fill_rule=FillRule.NON_ZERO)

    for poly in shape.flatten(tolerance):
        pts = _dedupe(poly.points)
        if style.is_dashed:
            runs = apply_dash_pattern(pts, poly.closed, style.dash)
        else:
            runs = [(pts, poly.closed)]

        for run_pts, run_closed in runs:
            if run_closed:
                for ring in _outline_closed_run(run_pts, style):
                    result.add_subpath(ring)
            else:
                ring = _outline_open_run(run_pts, style)
                if ring is not None:
                    result.add_subpath(ring)

    if extra_elements is None:
        from .arrowhead_algorithm import arrowhead_elements
        extra_elements = arrowhead_elements
    for sp in extra_elements(shape, style):
        result.add_subpath(sp)

    logger.debug("outline: %d subpaths -> %d rings (width=%g, flatness=%g)",
                 shape.subpath_count, result.subpath_count, style.width, tolerance)
    return result
