# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Curve fitting algorithm: turns sampled points into cubic Bézier segments.

Schneider-style fitting ("An Algorithm for Automatically Fitting Digitized
Curves", Graphics Gems 1990):

1. Split the samples at sharp corners and estimate unit tangents at the
   ends of each run
2. Chord-length parameterize the samples and solve the 2x2 least-squares
   system for the control-point distances along those tangents
3. Measure the worst sample error; accept the cubic when within tolerance
   and its flattening at that same tolerance still is, otherwise try a few
   Newton-Raphson reparameterizations
4. Split at the worst sample and recurse, re-estimating the tangent at the
   split from its neighbours (one-sided at corners)

Runs of two samples and collinear runs become straight segments. Depth and
output size are capped; exceeding either raises FitConvergenceError.
"""

from __future__ import annotations

import logging
import math

import numpy as np

from ..core import error as vp_error
from ..core.config import resolve
from ..core.types import BezierSegment, PathShape, Point, POINT_EPSILON, Subpath

logger = logging.getLogger(__name__)

# Reparameterization is only worth trying when the first fit is this close
_REPARAMETERIZE_FACTOR = 4.0


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def fit(points, tolerance: float, close_hint: bool = False, config=None) -> PathShape:
    """Fit *points* with cubic segments; returns a one-subpath PathShape."""
    return PathShape([fit_subpath(points, tolerance, close_hint, config=config)])


def fit_subpath(points, tolerance: float, close_hint: bool = False, config=None) -> Subpath:
    """
    Fit an ordered run of samples to a minimal chain of cubic segments.

    Args:
        points: Sequence of Point or (x, y) pairs, at least two distinct.
        tolerance: Maximum distance between a sample and the fitted curve.
            Zero is allowed and keeps every sample as a node.
        close_hint: Try to produce a closed subpath. The result is closed
            only when the loop has at least three samples and its last
            sample is within max(tolerance, close_snap_distance) of the first.

    Raises:
        DegenerateInputError: fewer than two distinct points, or a negative
            tolerance.
        FitConvergenceError: the subdivision ceiling was reached.
    """
    cfg = resolve(config)
    if tolerance is None or math.isnan(tolerance) or tolerance < 0:
        raise vp_error.DegenerateInputError(f"Fit tolerance must be >= 0, got {tolerance}")

    pts = _dedupe(_as_array(points))
    if len(pts) < 2:
        raise vp_error.DegenerateInputError(
            f"Curve fitting needs at least 2 distinct points, got {len(pts)}")

    closed = False
    if close_hint and len(pts) >= 3:
        gap = float(np.hypot(*(pts[-1] - pts[0])))
        if gap <= max(tolerance, cfg.close_snap_distance):
            loop = pts[:-1]
            if len(loop) >= 3:
                pts = loop
                closed = True

    if closed:
        t_start, t_end = _join_tangents(pts, cfg.fit_corner_angle)
        samples = np.vstack([pts, pts[:1]])
    else:
        t_start = _unit(pts[1] - pts[0])
        t_end = _unit(pts[-2] - pts[-1])
        samples = pts

    # Sharp corners split the run up front: a cubic through a corner can
    # interpolate the corner sample exactly and still bulge between samples.
    corners = _corner_indices(samples, cfg.fit_corner_angle)
    fitter = _Fitter(tolerance, cfg)
    for i, j in zip(corners, corners[1:]):
        t1 = t_start if i == 0 else _unit(samples[i + 1] - samples[i])
        t2 = t_end if j == len(samples) - 1 else _unit(samples[j - 1] - samples[j])
        fitter.fit(samples[i:j + 1], t1, t2, 0)

    logger.debug("fit: %d samples -> %d segments (tolerance=%g, closed=%s, max depth=%d)",
                 len(samples), len(fitter.segments), tolerance, closed, fitter.max_depth_seen)
    return Subpath(tuple(fitter.segments), closed)


# ---------------------------------------------------------------------------
# Recursive fitter
# ---------------------------------------------------------------------------

class _Fitter:
    def __init__(self, tolerance: float, cfg) -> None:
        self.tolerance = tolerance
        self.cfg = cfg
        self.segments: list[BezierSegment] = []
        self.max_depth_seen = 0
        # Shared Point objects keep adjacent segment endpoints identical
        self._last_end: Point | None = None

    def _point(self, row) -> Point:
        return Point(float(row[0]), float(row[1]))

    def _emit(self, p0, p1, p2, p3, straight: bool) -> None:
        if len(self.segments) >= self.cfg.fit_max_segments:
            raise vp_error.FitConvergenceError(
                f"Curve fit exceeded {self.cfg.fit_max_segments} segments",
                depth=self.max_depth_seen, segments=len(self.segments))
        start = self._last_end if self._last_end is not None else self._point(p0)
        end = self._point(p3)
        if straight:
            seg = BezierSegment.line(start, end)
        else:
            seg = BezierSegment(start, self._point(p1), self._point(p2), end)
        self.segments.append(seg)
        self._last_end = end

    def fit(self, pts: np.ndarray, t1: np.ndarray, t2: np.ndarray, depth: int) -> None:
        self.max_depth_seen = max(self.max_depth_seen, depth)
        n = len(pts)
        tol = self.tolerance

        if n == 2 or _is_straight_run(pts, tol):
            self._emit(pts[0], None, None, pts[-1], straight=True)
            return

        u = _chord_length_parameterize(pts)
        bez = _generate_bezier(pts, u, t1, t2)
        err, split = _max_error(pts, bez, u)
        if err <= tol and _flattened_error(pts, bez, tol) <= tol:
            self._emit(*bez, straight=False)
            return

        if err <= tol * _REPARAMETERIZE_FACTOR:
            for _ in range(self.cfg.fit_reparameterize_steps):
                u = _reparameterize(pts, bez, u)
                bez = _generate_bezier(pts, u, t1, t2)
                err, split = _max_error(pts, bez, u)
                if err <= tol and _flattened_error(pts, bez, tol) <= tol:
                    self._emit(*bez, straight=False)
                    return

        if depth >= self.cfg.fit_max_depth:
            raise vp_error.FitConvergenceError(
                f"Curve fit reached subdivision depth {depth} with error {err:.6g}",
                depth=depth, segments=len(self.segments))

        split = max(1, min(n - 2, split))
        left_t2, right_t1 = _split_tangents(pts, split, self.cfg.fit_corner_angle)
        self.fit(pts[:split + 1], t1, left_t2, depth + 1)
        self.fit(pts[split:], right_t1, t2, depth + 1)


# ---------------------------------------------------------------------------
# Numeric helpers
# ---------------------------------------------------------------------------

def _as_array(points) -> np.ndarray:
    rows = []
    for p in points:
        if isinstance(p, Point):
            rows.append((p.x, p.y))
        else:
            x, y = p
            rows.append((float(x), float(y)))
    arr = np.array(rows, dtype=np.float64).reshape(-1, 2)
    if not np.all(np.isfinite(arr)):
        raise vp_error.DegenerateInputError("Curve fitting input contains non-finite coordinates")
    return arr


def _dedupe(pts: np.ndarray) -> np.ndarray:
    if len(pts) < 2:
        return pts
    keep = [0]
    for i in range(1, len(pts)):
        if np.hypot(*(pts[i] - pts[keep[-1]])) > POINT_EPSILON:
            keep.append(i)
    return pts[keep]


def _unit(v: np.ndarray) -> np.ndarray:
    n = float(np.hypot(v[0], v[1]))
    if n < 1e-12:
        return np.zeros(2)
    return v / n


def _turn_angle(v_in: np.ndarray, v_out: np.ndarray) -> float:
    return math.acos(max(-1.0, min(1.0, float(np.dot(v_in, v_out)))))


def _local_tangents(prev: np.ndarray, cur: np.ndarray, nxt: np.ndarray,
                    corner_angle: float) -> tuple[np.ndarray, np.ndarray]:
    """Tangents at an interior sample: (backwards for the run ending here, forwards for the run starting here)."""
    v_in = _unit(cur - prev)
    v_out = _unit(nxt - cur)
    if _turn_angle(v_in, v_out) > corner_angle:
        return -v_in, v_out
    center = _unit(v_in + v_out)
    if not center.any():
        center = v_in
    return -center, center


def _corner_indices(pts: np.ndarray, corner_angle: float) -> list[int]:
    """Run boundaries: both ends plus every interior sample that turns sharper than corner_angle."""
    result = [0]
    for i in range(1, len(pts) - 1):
        if _turn_angle(_unit(pts[i] - pts[i - 1]), _unit(pts[i + 1] - pts[i])) > corner_angle:
            result.append(i)
    result.append(len(pts) - 1)
    return result


def _split_tangents(pts: np.ndarray, i: int, corner_angle: float) -> tuple[np.ndarray, np.ndarray]:
    return _local_tangents(pts[i - 1], pts[i], pts[i + 1], corner_angle)


def _join_tangents(pts: np.ndarray, corner_angle: float) -> tuple[np.ndarray, np.ndarray]:
    """Start and end tangents for a closed loop whose join is pts[0]."""
    back, forward = _local_tangents(pts[-1], pts[0], pts[1], corner_angle)
    return forward, back


def _is_straight_run(pts: np.ndarray, tol: float) -> bool:
    """All samples within tol of the chord and progressing along it."""
    p0 = pts[0]
    d = pts[-1] - p0
    length = float(np.hypot(d[0], d[1]))
    if length < 1e-12:
        return False
    direction = d / length
    rel = pts - p0
    along = rel @ direction
    across = np.abs(rel[:, 0] * direction[1] - rel[:, 1] * direction[0])
    slack = max(tol, 1e-9 * length)
    if float(across.max()) > slack:
        return False
    if float(along.min()) < -slack or float(along.max()) > length + slack:
        return False
    return bool(np.all(np.diff(along) >= -slack))


def _chord_length_parameterize(pts: np.ndarray) -> np.ndarray:
    dists = np.hypot(*np.diff(pts, axis=0).T)
    u = np.concatenate([[0.0], np.cumsum(dists)])
    total = u[-1]
    if total < 1e-12:
        return np.linspace(0.0, 1.0, len(pts))
    return u / total


def _bernstein(u: np.ndarray) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    v = 1.0 - u
    return v * v * v, 3.0 * v * v * u, 3.0 * v * u * u, u * u * u


def _evaluate(bez, u: np.ndarray) -> np.ndarray:
    p0, p1, p2, p3 = bez
    b0, b1, b2, b3 = _bernstein(u)
    return (b0[:, None] * p0 + b1[:, None] * p1 + b2[:, None] * p2 + b3[:, None] * p3)


def _generate_bezier(pts: np.ndarray, u: np.ndarray, t1: np.ndarray, t2: np.ndarray):
    """Least-squares control points for fixed end tangents."""
    p0 = pts[0]
    p3 = pts[-1]
    b0, b1, b2, b3 = _bernstein(u)

    a1 = b1[:, None] * t1
    a2 = b2[:, None] * t2
    c = np.array([[np.sum(a1 * a1), np.sum(a1 * a2)],
                  [np.sum(a1 * a2), np.sum(a2 * a2)]])
    tmp = pts - (b0 + b1)[:, None] * p0 - (b2 + b3)[:, None] * p3
    x = np.array([np.sum(a1 * tmp), np.sum(a2 * tmp)])

    seg_length = float(np.hypot(*(p3 - p0)))
    epsilon = 1e-6 * seg_length

    alpha_l = alpha_r = 0.0
    det = c[0, 0] * c[1, 1] - c[0, 1] * c[1, 0]
    if abs(det) > 1e-12:
        alpha_l, alpha_r = np.linalg.solve(c, x)

    # Wildly small or negative alphas mean the least-squares system is
    # meaningless; fall back to Wu/Barsky's heuristic.
    if (not math.isfinite(alpha_l) or not math.isfinite(alpha_r)
            or alpha_l < epsilon or alpha_r < epsilon):
        alpha_l = alpha_r = seg_length / 3.0

    return p0, p0 + t1 * alpha_l, p3 + t2 * alpha_r, p3


def _max_error(pts: np.ndarray, bez, u: np.ndarray) -> tuple[float, int]:
    """Largest sample distance and its index (interior samples only)."""
    n = len(pts)
    if n <= 2:
        return 0.0, n // 2
    curve = _evaluate(bez, u)
    dist = np.hypot(*(curve - pts).T)
    interior = dist[1:-1]
    i = int(np.argmax(interior))
    return float(interior[i]), i + 1


def _reparameterize(pts: np.ndarray, bez, u: np.ndarray) -> np.ndarray:
    """One Newton-Raphson step towards each sample's closest curve parameter."""
    p0, p1, p2, p3 = bez
    v = 1.0 - u
    q = _evaluate(bez, u)
    q1 = (3.0 * (v * v)[:, None] * (p1 - p0) + 6.0 * (v * u)[:, None] * (p2 - p1)
          + 3.0 * (u * u)[:, None] * (p3 - p2))
    q2 = 6.0 * v[:, None] * (p2 - 2.0 * p1 + p0) + 6.0 * u[:, None] * (p3 - 2.0 * p2 + p1)
    diff = q - pts
    numerator = np.sum(diff * q1, axis=1)
    denominator = np.sum(q1 * q1, axis=1) + np.sum(diff * q2, axis=1)
    safe = np.abs(denominator) > 1e-12
    step = np.zeros_like(u)
    step[safe] = numerator[safe] / denominator[safe]
    result = np.clip(u - step, 0.0, 1.0)
    result[0] = 0.0
    result[-1] = 1.0
    return result


def _flattened_error(pts: np.ndarray, bez, tol: float) -> float:
    """Largest sample distance to the cubic as it flattens at *tol*."""
    seg = BezierSegment(*(Point(float(p[0]), float(p[1])) for p in bez))
    poly = np.array([(p.x, p.y) for p in [seg.start] + seg.flatten(tol)])
    a = poly[:-1]
    d = poly[1:] - a
    len_sq = np.sum(d * d, axis=1)
    rel = pts[:, None, :] - a[None, :, :]
    t = np.clip(np.sum(rel * d[None, :, :], axis=2) / np.where(len_sq > 0, len_sq, 1.0), 0.0, 1.0)
    gap = rel - t[:, :, None] * d[None, :, :]
    return float(np.hypot(gap[..., 0], gap[..., 1]).min(axis=1).max())
