# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
VectorPath Types Package - Public API

Re-exports every engine value type so callers can use a single namespace:

```python
from vectorpath.core import types as vp

shape = vp.PathShape.rectangle(0, 0, 10, 10)
style = vp.StrokeStyle(width=2, cap=vp.LineCap.ROUND)
```

**Internal Module Organization:**
- constants.py: thresholds and the FillRule / LineCap / LineJoin / Arrowhead enums
- geometry.py: Point, Bounds, BezierSegment
- path.py: Subpath, FlattenedPolygon, PathShape
- style.py: DashPattern, StrokeStyle
"""

from .constants import *
from .geometry import BezierSegment, Bounds, Point, point_segment_distance, polygon_area
from .style import DashPattern, StrokeStyle
from .path import FlattenedPolygon, PathShape, Subpath, shapes_bounds
