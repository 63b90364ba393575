# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Geometry primitives: Point, Bounds and BezierSegment.

All three are immutable values. A BezierSegment whose control points
coincide with its endpoints is a straight line; everything else is a cubic
curve whose control points may overshoot the endpoints.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import NamedTuple

from .constants import EPSILON, MAX_FLATTEN_DEPTH, TANGENT_EPSILON


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, s: float) -> Point:
        return Point(self.x * s, self.y * s)

    def __rmul__(self, s: float) -> Point:
        return self.__mul__(s)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def __iter__(self):
        yield self.x
        yield self.y

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def normalized(self) -> Point:
        ln = self.length()
        if ln < EPSILON:
            return Point(0.0, 0.0)
        return Point(self.x / ln, self.y / ln)

    def dot(self, other: Point) -> float:
        return self.x * other.x + self.y * other.y

    def cross(self, other: Point) -> float:
        return self.x * other.y - self.y * other.x

    def lerp(self, other: Point, t: float) -> Point:
        return Point(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def is_close(self, other: Point, tol: float) -> bool:
        return abs(self.x - other.x) <= tol and abs(self.y - other.y) <= tol

    @classmethod
    def coerce(cls, value) -> Point:
        """Accept a Point or any (x, y) pair."""
        if isinstance(value, Point):
            return value
        x, y = value
        return cls(float(x), float(y))


class Bounds(NamedTuple):
    """Axis-aligned box; compares equal to a plain 4-tuple."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @classmethod
    def from_points(cls, points) -> Bounds | None:
        it = iter(points)
        try:
            first = next(it)
        except StopIteration:
            return None
        min_x = max_x = first.x
        min_y = max_y = first.y
        for p in it:
            if p.x < min_x:
                min_x = p.x
            elif p.x > max_x:
                max_x = p.x
            if p.y < min_y:
                min_y = p.y
            elif p.y > max_y:
                max_y = p.y
        return cls(min_x, min_y, max_x, max_y)

    def union(self, other: Bounds | None) -> Bounds:
        if other is None:
            return self
        return Bounds(min(self.min_x, other.min_x), min(self.min_y, other.min_y),
                      max(self.max_x, other.max_x), max(self.max_y, other.max_y))

    def intersects(self, other: Bounds, tol: float = 0.0) -> bool:
        return not (other.min_x > self.max_x + tol or other.max_x < self.min_x - tol
                    or other.min_y > self.max_y + tol or other.max_y < self.min_y - tol)


@dataclass(frozen=True)
class BezierSegment:
    start: Point
    c1: Point
    c2: Point
    end: Point

    @classmethod
    def line(cls, start: Point, end: Point) -> BezierSegment:
        return cls(start, start, end, end)

    @property
    def is_line(self) -> bool:
        return self.c1 == self.start and self.c2 == self.end

    def point_at(self, t: float) -> Point:
        u = 1.0 - t
        b0 = u * u * u
        b1 = 3.0 * u * u * t
        b2 = 3.0 * u * t * t
        b3 = t * t * t
        return Point(b0 * self.start.x + b1 * self.c1.x + b2 * self.c2.x + b3 * self.end.x,
                     b0 * self.start.y + b1 * self.c1.y + b2 * self.c2.y + b3 * self.end.y)

    def split(self, t: float) -> tuple[BezierSegment, BezierSegment]:
        """Split at parameter t (de Casteljau)."""
        p0, p1, p2, p3 = self.start, self.c1, self.c2, self.end
        q0 = p0.lerp(p1, t)
        q1 = p1.lerp(p2, t)
        q2 = p2.lerp(p3, t)
        r0 = q0.lerp(q1, t)
        r1 = q1.lerp(q2, t)
        s = r0.lerp(r1, t)
        if self.is_line:
            return BezierSegment.line(p0, s), BezierSegment.line(s, p3)
        return BezierSegment(p0, q0, r0, s), BezierSegment(s, r1, q2, p3)

    def reversed(self) -> BezierSegment:
        return BezierSegment(self.end, self.c2, self.c1, self.start)

    @property
    def start_tangent(self) -> Point:
        """Direction of travel at the start, skipping coincident control points."""
        for p in (self.c1, self.c2, self.end):
            t = p - self.start
            if t.length() >= TANGENT_EPSILON:
                return t
        return self.end - self.start

    @property
    def end_tangent(self) -> Point:
        """Direction of travel at the end, skipping coincident control points."""
        for p in (self.c2, self.c1, self.start):
            t = self.end - p
            if t.length() >= TANGENT_EPSILON:
                return t
        return self.end - self.start

    def control_bounds(self) -> Bounds:
        return Bounds.from_points((self.start, self.c1, self.c2, self.end))

    def flatten(self, tolerance: float) -> list[Point]:
        """
        Flatten into line segment endpoints (excluding the start point).

        Subdivides with de Casteljau until both control points are within
        *tolerance* of the chord, or the depth cap is reached, so a zero
        tolerance still terminates.
        """
        if self.is_line:
            return [self.end]

        points = []
        stack = [(self.start, self.c1, self.c2, self.end, 0)]

        while stack:
            p0, p1, p2, p3, depth = stack.pop()

            dx = p3.x - p0.x
            dy = p3.y - p0.y
            chord_len = math.hypot(dx, dy)

            if chord_len < EPSILON:
                # Endpoints coincide: measure control points from the start
                d = max((p1 - p0).length(), (p2 - p0).length())
            else:
                d1 = abs((p1.x - p0.x) * dy - (p1.y - p0.y) * dx) / chord_len
                d2 = abs((p2.x - p0.x) * dy - (p2.y - p0.y) * dx) / chord_len
                d = max(d1, d2)

            if d <= tolerance or depth >= MAX_FLATTEN_DEPTH:
                points.append(p3)
                continue

            p01 = Point((p0.x + p1.x) / 2, (p0.y + p1.y) / 2)
            p12 = Point((p1.x + p2.x) / 2, (p1.y + p2.y) / 2)
            p23 = Point((p2.x + p3.x) / 2, (p2.y + p3.y) / 2)
            p012 = Point((p01.x + p12.x) / 2, (p01.y + p12.y) / 2)
            p123 = Point((p12.x + p23.x) / 2, (p12.y + p23.y) / 2)
            p0123 = Point((p012.x + p123.x) / 2, (p012.y + p123.y) / 2)

            # Push second half first so first half is processed next
            stack.append((p0123, p123, p23, p3, depth + 1))
            stack.append((p0, p01, p012, p0123, depth + 1))

        return points


def point_segment_distance(p: Point, a: Point, b: Point) -> float:
    """Distance from p to the closed line segment a-b."""
    d = b - a
    len_sq = d.dot(d)
    if len_sq < EPSILON:
        return (p - a).length()
    t = max(0.0, min(1.0, (p - a).dot(d) / len_sq))
    return (p - (a + d * t)).length()


def polygon_area(points: list[Point]) -> float:
    """Signed shoelace area; positive for counter-clockwise in y-up space."""
    area = 0.0
    n = len(points)
    for i in range(n):
        p = points[i]
        q = points[(i + 1) % n]
        area += p.x * q.y - q.x * p.y
    return area / 2.0
