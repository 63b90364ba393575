# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
VectorPath Types Constants Module

Numeric thresholds and the small closed enums (fill rule, cap, join,
arrowhead) that the algorithms branch on. The integer values of the enums
match the PostScript ``setlinecap`` / ``setlinejoin`` operands, and a
FillRule can be passed anywhere a "use even-odd" boolean is expected.
"""

from enum import IntEnum

# Length below which a vector is treated as zero
EPSILON = 1e-12

# Distance below which two points are the same vertex
POINT_EPSILON = 1e-9

# Tangent estimation falls back to the next control point below this length
TANGENT_EPSILON = 1e-4

# Default curve flattening tolerance (drawing units)
DEFAULT_FLATNESS = 0.1

# Hard cap on de Casteljau subdivision depth while flattening one segment
MAX_FLATTEN_DEPTH = 16

# Distinct tolerances a PathShape keeps flattened polygons for
FLATTEN_CACHE_SIZE = 4

# Default miter limit (PostScript default)
DEFAULT_MITER_LIMIT = 10.0

# Magic constant for approximating a quarter circle with one cubic
KAPPA = 0.5522847498307936


class FillRule(IntEnum):
    NON_ZERO = 0
    EVEN_ODD = 1


class LineCap(IntEnum):
    BUTT = 0
    ROUND = 1
    SQUARE = 2


class LineJoin(IntEnum):
    MITER = 0
    ROUND = 1
    BEVEL = 2


class Arrowhead(IntEnum):
    NONE = 0
    TRIANGLE = 1
    CIRCLE = 2
