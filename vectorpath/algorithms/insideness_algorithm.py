# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Point-in-polygon insideness testing.

Implements ray-casting for point-in-fill tests (winding number and even-odd
rules). Operates on already-flattened polygons: sequences of objects with
``x`` / ``y`` attributes, each implicitly closed back to its first vertex.
"""

from __future__ import annotations


def crossing_counts(polygons, px: float, py: float) -> tuple[int, int]:
    """Cast a horizontal ray from (px, py) towards +x.

    Returns (winding, crossings): the signed winding number and the raw
    number of edge crossings.
    """
    winding = 0
    crossings = 0

    for poly in polygons:
        n = len(poly)
        if n < 2:
            continue
        for i in range(n):
            a = poly[i]
            b = poly[(i + 1) % n]
            x0, y0, x1, y1 = a.x, a.y, b.x, b.y

            # Count a crossing when exactly one endpoint is strictly below
            # py.  This avoids double-counting shared vertices and skips
            # horizontal edges.
            if (y0 < py) == (y1 < py):
                continue

            t = (py - y0) / (y1 - y0)
            x_intercept = x0 + t * (x1 - x0)

            if x_intercept > px:
                crossings += 1
                if y1 > y0:
                    winding += 1  # upward crossing
                else:
                    winding -= 1  # downward crossing

    return winding, crossings


def point_in_polygons(polygons, px: float, py: float, even_odd: bool) -> bool:
    """True if (px, py) is inside the region the polygons enclose.

    Args:
        polygons: Iterable of vertex sequences, each implicitly closed.
        px, py: Test point.
        even_odd: True for the even-odd rule, False for non-zero winding.
            A FillRule value can be passed directly.
    """
    winding, crossings = crossing_counts(polygons, px, py)
    if even_odd:
        return (crossings % 2) == 1
    return winding != 0
