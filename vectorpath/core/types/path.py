# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Path data model: Subpath, FlattenedPolygon and PathShape.

A Subpath is an immutable run of BezierSegments that share exact endpoint
coordinates. A PathShape owns an ordered list of non-empty subpaths plus a
fill rule, and memoizes flattened polygons per tolerance. Every PathShape
mutator clears the memo before it returns; nothing is recomputed eagerly.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from .. import error as vp_error
from .constants import DEFAULT_FLATNESS, FLATTEN_CACHE_SIZE, KAPPA, FillRule
from .geometry import BezierSegment, Bounds, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FlattenedPolygon:
    """Polyline approximation of one subpath. Closed polygons do not repeat their first vertex."""

    points: tuple[Point, ...]
    closed: bool

    def __len__(self) -> int:
        return len(self.points)

    def __getitem__(self, index):
        return self.points[index]

    def __iter__(self):
        return iter(self.points)

    def edges(self):
        """Yield (a, b) vertex pairs, including the closing edge when closed."""
        pts = self.points
        for i in range(len(pts) - 1):
            yield pts[i], pts[i + 1]
        if self.closed and len(pts) > 2:
            yield pts[-1], pts[0]

    def length(self) -> float:
        return sum((b - a).length() for a, b in self.edges())

    def bounds(self) -> Bounds | None:
        return Bounds.from_points(self.points)


@dataclass(frozen=True)
class Subpath:
    segments: tuple[BezierSegment, ...] = ()
    closed: bool = False

    def __post_init__(self) -> None:
        segs = tuple(self.segments)
        object.__setattr__(self, "segments", segs)
        for i in range(1, len(segs)):
            if segs[i].start != segs[i - 1].end:
                raise vp_error.DiscontinuousSegmentError(
                    f"Segment {i} starts at {segs[i].start} but segment {i - 1} "
                    f"ends at {segs[i - 1].end}")
        if self.closed:
            if not segs:
                raise vp_error.DegenerateInputError("A closed subpath needs at least one segment")
            if segs[-1].end != segs[0].start:
                raise vp_error.DiscontinuousSegmentError(
                    f"Closed subpath ends at {segs[-1].end}, not at its start {segs[0].start}")

    # -- construction -------------------------------------------------------

    @classmethod
    def from_points(cls, points: Iterable, closed: bool = False) -> Subpath:
        """Polyline through the points; consecutive duplicates are skipped."""
        pts: list[Point] = []
        for p in points:
            p = Point.coerce(p)
            if not pts or p != pts[-1]:
                pts.append(p)
        if closed and len(pts) > 1 and pts[-1] == pts[0]:
            pts.pop()
        segments = [BezierSegment.line(pts[i], pts[i + 1]) for i in range(len(pts) - 1)]
        if closed and len(pts) > 2:
            segments.append(BezierSegment.line(pts[-1], pts[0]))
            return cls(tuple(segments), True)
        return cls(tuple(segments), False)

    def appended(self, segment: BezierSegment) -> Subpath:
        if self.closed:
            raise vp_error.DiscontinuousSegmentError("Cannot append to a closed subpath")
        if self.segments and segment.start != self.segments[-1].end:
            raise vp_error.DiscontinuousSegmentError(
                f"Segment starts at {segment.start} but the subpath ends at {self.segments[-1].end}")
        return Subpath(self.segments + (segment,), False)

    def closing(self) -> Subpath:
        """Closed copy; adds a straight closing segment when the ends differ."""
        if self.closed:
            return self
        if not self.segments:
            raise vp_error.DegenerateInputError("Cannot close an empty subpath")
        segs = self.segments
        if segs[-1].end != segs[0].start:
            segs = segs + (BezierSegment.line(segs[-1].end, segs[0].start),)
        return Subpath(segs, True)

    def reversed(self) -> Subpath:
        return Subpath(tuple(seg.reversed() for seg in reversed(self.segments)), self.closed)

    # -- queries ------------------------------------------------------------

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    @property
    def start(self) -> Point | None:
        return self.segments[0].start if self.segments else None

    @property
    def end(self) -> Point | None:
        return self.segments[-1].end if self.segments else None

    @property
    def nodes(self) -> list[Point]:
        """Anchor points; a closed subpath does not repeat its first node."""
        if not self.segments:
            return []
        pts = [self.segments[0].start] + [seg.end for seg in self.segments]
        if self.closed:
            pts.pop()
        return pts

    @property
    def node_count(self) -> int:
        if not self.segments:
            return 0
        return len(self.segments) if self.closed else len(self.segments) + 1

    def control_bounds(self) -> Bounds | None:
        result = None
        for seg in self.segments:
            b = seg.control_bounds()
            result = b if result is None else result.union(b)
        return result

    def flatten(self, tolerance: float) -> FlattenedPolygon:
        if not self.segments:
            return FlattenedPolygon((), self.closed)
        pts = [self.segments[0].start]
        for seg in self.segments:
            for p in seg.flatten(tolerance):
                if p != pts[-1]:
                    pts.append(p)
        if self.closed and len(pts) > 1 and pts[-1] == pts[0]:
            pts.pop()
        return FlattenedPolygon(tuple(pts), self.closed)

    # -- node editing (returns new subpaths) --------------------------------

    def _check_node(self, node_index: int) -> int:
        count = self.node_count
        if node_index < 0:
            node_index += count
        if not 0 <= node_index < count:
            raise IndexError(f"Node index {node_index} out of range for {count} nodes")
        return node_index

    def with_node_inserted(self, segment_index: int, t: float = 0.5) -> Subpath:
        if not 0.0 < t < 1.0:
            raise ValueError(f"Split parameter must be inside (0, 1), got {t}")
        segs = list(self.segments)
        left, right = segs[segment_index].split(t)
        segs[segment_index:segment_index + 1] = [left, right]
        return Subpath(tuple(segs), self.closed)

    def with_node_removed(self, node_index: int) -> Subpath:
        """Drop an anchor, joining its two segments (or trimming an open end)."""
        node_index = self._check_node(node_index)
        segs = list(self.segments)

        if not self.closed:
            if node_index == 0:
                return Subpath(tuple(segs[1:]), False)
            if node_index == len(segs):
                return Subpath(tuple(segs[:-1]), False)
            merged = _merge_segments(segs[node_index - 1], segs[node_index])
            segs[node_index - 1:node_index + 1] = [merged]
            return Subpath(tuple(segs), False)

        if len(segs) <= 2:
            # One anchor left: nothing to enclose
            return Subpath((), False)
        if node_index == 0:
            merged = _merge_segments(segs[-1], segs[0])
            return Subpath(tuple(segs[1:-1]) + (merged,), True)
        merged = _merge_segments(segs[node_index - 1], segs[node_index])
        segs[node_index - 1:node_index + 1] = [merged]
        return Subpath(tuple(segs), True)

    def with_node_moved(self, node_index: int, point: Point) -> Subpath:
        """Move an anchor, carrying its adjacent control points along."""
        node_index = self._check_node(node_index)
        point = Point.coerce(point)
        segs = list(self.segments)
        n = len(segs)
        old = self.nodes[node_index]
        delta = point - old

        incoming = node_index - 1 if node_index > 0 else (n - 1 if self.closed else None)
        outgoing = node_index if node_index < n else None

        if incoming is not None:
            s = segs[incoming]
            segs[incoming] = BezierSegment(s.start, s.c1, s.c2 + delta, point)
        if outgoing is not None:
            s = segs[outgoing]
            segs[outgoing] = BezierSegment(point, s.c1 + delta, s.c2, s.end)
        return Subpath(tuple(segs), self.closed)


def _merge_segments(a: BezierSegment, b: BezierSegment) -> BezierSegment:
    if a.is_line and b.is_line:
        return BezierSegment.line(a.start, b.end)
    return BezierSegment(a.start, a.c1, b.c2, b.end)


class PathShape:
    """Ordered subpaths plus a fill rule."""

    def __init__(self, subpaths: Iterable[Subpath] = (), fill_rule: FillRule = FillRule.NON_ZERO) -> None:
        self._subpaths: list[Subpath] = []
        self._fill_rule = FillRule(fill_rule)
        self._flatten_cache: dict[float, tuple[FlattenedPolygon, ...]] = {}
        for sp in subpaths:
            self.add_subpath(sp)

    # -- construction helpers -----------------------------------------------

    @classmethod
    def from_points(cls, points: Iterable, closed: bool = False,
                    fill_rule: FillRule = FillRule.NON_ZERO) -> PathShape:
        return cls([Subpath.from_points(points, closed)], fill_rule)

    @classmethod
    def rectangle(cls, x: float, y: float, width: float, height: float) -> PathShape:
        return cls.from_points([(x, y), (x + width, y), (x + width, y + height), (x, y + height)],
                               closed=True)

    @classmethod
    def ellipse(cls, cx: float, cy: float, rx: float, ry: float) -> PathShape:
        """Four-cubic ellipse, counter-clockwise in y-up space."""
        kx = rx * KAPPA
        ky = ry * KAPPA
        e = Point(cx + rx, cy)
        n = Point(cx, cy + ry)
        w = Point(cx - rx, cy)
        s = Point(cx, cy - ry)
        segs = (
            BezierSegment(e, Point(cx + rx, cy + ky), Point(cx + kx, cy + ry), n),
            BezierSegment(n, Point(cx - kx, cy + ry), Point(cx - rx, cy + ky), w),
            BezierSegment(w, Point(cx - rx, cy - ky), Point(cx - kx, cy - ry), s),
            BezierSegment(s, Point(cx + kx, cy - ry), Point(cx + rx, cy - ky), e),
        )
        return cls([Subpath(segs, True)])

    # -- basic access -------------------------------------------------------

    @property
    def fill_rule(self) -> FillRule:
        return self._fill_rule

    @fill_rule.setter
    def fill_rule(self, value: FillRule) -> None:
        self._fill_rule = FillRule(value)

    @property
    def subpaths(self) -> tuple[Subpath, ...]:
        return tuple(self._subpaths)

    @property
    def subpath_count(self) -> int:
        return len(self._subpaths)

    def subpath(self, index: int) -> Subpath:
        return self._subpaths[index]

    def __len__(self) -> int:
        return len(self._subpaths)

    def __iter__(self):
        return iter(tuple(self._subpaths))

    @property
    def is_empty(self) -> bool:
        return not self._subpaths

    def __eq__(self, other) -> bool:
        if not isinstance(other, PathShape):
            return NotImplemented
        return self._fill_rule == other._fill_rule and self._subpaths == other._subpaths

    __hash__ = None

    def __repr__(self) -> str:
        return (f"PathShape(subpaths={self.subpath_count}, "
                f"segments={sum(len(sp) for sp in self._subpaths)}, "
                f"fill_rule={self._fill_rule.name})")

    def copy(self) -> PathShape:
        return PathShape(self._subpaths, self._fill_rule)

    # -- structural editing -------------------------------------------------

    def _invalidate(self) -> None:
        self._flatten_cache.clear()

    def _commit(self, subpath: Subpath) -> Subpath:
        if not isinstance(subpath, Subpath):
            raise TypeError(f"Expected Subpath, got {type(subpath).__name__}")
        if subpath.is_empty:
            raise vp_error.DegenerateInputError("Cannot add a subpath with no segments")
        return subpath

    def add_subpath(self, subpath: Subpath) -> None:
        self._subpaths.append(self._commit(subpath))
        self._invalidate()

    def insert_subpath(self, index: int, subpath: Subpath) -> None:
        self._subpaths.insert(index, self._commit(subpath))
        self._invalidate()

    def remove_subpath(self, index: int) -> Subpath:
        removed = self._subpaths.pop(index)
        self._invalidate()
        return removed

    def _replace_subpath(self, index: int, subpath: Subpath) -> None:
        if subpath.is_empty:
            del self._subpaths[index]
        else:
            self._subpaths[index] = subpath
        self._invalidate()

    def append_segment(self, subpath_index: int, segment: BezierSegment) -> None:
        """Extend an open subpath; the segment must start at the subpath's end."""
        self._replace_subpath(subpath_index, self._subpaths[subpath_index].appended(segment))

    def close_subpath(self, subpath_index: int) -> None:
        self._replace_subpath(subpath_index, self._subpaths[subpath_index].closing())

    def insert_node(self, subpath_index: int, segment_index: int, t: float = 0.5) -> None:
        self._replace_subpath(subpath_index,
                              self._subpaths[subpath_index].with_node_inserted(segment_index, t))

    def remove_node(self, subpath_index: int, node_index: int) -> None:
        """Remove an anchor; a subpath left without segments is removed too."""
        self._replace_subpath(subpath_index,
                              self._subpaths[subpath_index].with_node_removed(node_index))

    def move_node(self, subpath_index: int, node_index: int, point) -> None:
        self._replace_subpath(subpath_index,
                              self._subpaths[subpath_index].with_node_moved(node_index, point))

    def reverse_subpath(self, subpath_index: int) -> None:
        self._replace_subpath(subpath_index, self._subpaths[subpath_index].reversed())

    def reversed(self) -> PathShape:
        return PathShape([sp.reversed() for sp in self._subpaths], self._fill_rule)

    # -- derived geometry ---------------------------------------------------

    def flatten(self, tolerance: float = DEFAULT_FLATNESS) -> list[FlattenedPolygon]:
        """Flattened polygons, one per subpath, memoized for the most recent tolerances."""
        if tolerance < 0 or math.isnan(tolerance):
            raise vp_error.DegenerateInputError(f"Flattening tolerance must be >= 0, got {tolerance}")
        key = float(tolerance)
        cached = self._flatten_cache.pop(key, None)
        if cached is None:
            cached = tuple(sp.flatten(key) for sp in self._subpaths)
            while len(self._flatten_cache) >= FLATTEN_CACHE_SIZE:
                # Insertion order: the first key is the least recently used
                del self._flatten_cache[next(iter(self._flatten_cache))]
        self._flatten_cache[key] = cached
        return list(cached)

    @property
    def bounds(self) -> Bounds | None:
        """Control-point bounds; never smaller than the true curve bounds."""
        result = None
        for sp in self._subpaths:
            b = sp.control_bounds()
            if b is not None:
                result = b if result is None else result.union(b)
        return result

    def contains_point(self, point, tolerance: float = DEFAULT_FLATNESS) -> bool:
        """Fill-rule aware insideness; open subpaths are implicitly closed."""
        from ...algorithms.insideness_algorithm import point_in_polygons

        p = Point.coerce(point)
        b = self.bounds
        if b is None or p.x < b.min_x or p.x > b.max_x or p.y < b.min_y or p.y > b.max_y:
            return False
        return point_in_polygons(self.flatten(tolerance), p.x, p.y,
                                 self._fill_rule == FillRule.EVEN_ODD)

    # -- in-place rewrites --------------------------------------------------

    def flatten_in_place(self, tolerance: float = DEFAULT_FLATNESS) -> None:
        """Replace every curve with straight segments."""
        self._subpaths = [_polyline_subpath(poly) for poly in self.flatten(tolerance) if len(poly) > 1]
        self._invalidate()

    def path_by_flattening(self, tolerance: float = DEFAULT_FLATNESS) -> PathShape:
        flat = self.copy()
        flat.flatten_in_place(tolerance)
        return flat

    def simplify(self, tolerance: float, config=None) -> None:
        """Refit every subpath with fewer segments, deviating at most ~tolerance."""
        from ...algorithms.curve_fit_algorithm import fit_subpath

        if tolerance <= 0:
            raise vp_error.DegenerateInputError(f"Simplify tolerance must be > 0, got {tolerance}")

        result = []
        for sp in self._subpaths:
            poly = sp.flatten(tolerance / 4.0)
            points = list(poly.points)
            if sp.closed and points:
                points.append(points[0])
            try:
                fitted = fit_subpath(points, tolerance, sp.closed, config=config)
            except vp_error.DegenerateInputError:
                logger.debug("simplify: keeping degenerate subpath with %d segments", len(sp))
                fitted = sp
            result.append(fitted)
        self._subpaths = result
        self._invalidate()

    # -- stroke outline & erase ---------------------------------------------

    def can_outline_stroke(self, style, config=None) -> bool:
        from ...algorithms.strokepath_algorithm import can_outline

        return can_outline(self, style, config=config)

    def to_outline_path(self, style, config=None, extra_elements=None) -> PathShape:
        """The filled region a stroke with *style* paints along this path."""
        from ...algorithms.strokepath_algorithm import outline

        return outline(self, style, config=config, extra_elements=extra_elements)

    def erase(self, eraser: PathShape, config=None) -> list[PathShape]:
        from ...algorithms.erase_algorithm import erase

        return erase(self, eraser, config=config)


def _polyline_subpath(poly: FlattenedPolygon) -> Subpath:
    return Subpath.from_points(poly.points, poly.closed)


def shapes_bounds(shapes: Sequence[PathShape]) -> Bounds | None:
    result = None
    for shape in shapes:
        b = shape.bounds
        if b is not None:
            result = b if result is None else result.union(b)
    return result
