# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Cairo Path Adapter

Replays PathShapes into a ``cairo.Context`` so any Cairo surface (image,
PDF, SVG, on-screen) can draw engine geometry. Stroke outlines are filled
rather than stroked so the result matches the engine's own outline
geometry exactly.
"""

import cairo

from ...core import types as vp


def append_path(cairo_ctx, shape: vp.PathShape) -> None:
    """Append every subpath of *shape* to the context's current path."""
    for sp in shape:
        start = sp.start
        cairo_ctx.move_to(start.x, start.y)
        for seg in sp.segments:
            if seg.is_line:
                cairo_ctx.line_to(seg.end.x, seg.end.y)
            else:
                cairo_ctx.curve_to(
                    seg.c1.x, seg.c1.y,
                    seg.c2.x, seg.c2.y,
                    seg.end.x, seg.end.y,
                )
        if sp.closed:
            cairo_ctx.close_path()


def set_fill_rule(cairo_ctx, fill_rule: vp.FillRule) -> None:
    if fill_rule == vp.FillRule.EVEN_ODD:
        cairo_ctx.set_fill_rule(cairo.FILL_RULE_EVEN_ODD)
    else:
        cairo_ctx.set_fill_rule(cairo.FILL_RULE_WINDING)


def fill_shape(cairo_ctx, shape: vp.PathShape, preserve: bool = False) -> None:
    """Fill *shape* with the current source using the shape's fill rule."""
    cairo_ctx.new_path()
    append_path(cairo_ctx, shape)
    set_fill_rule(cairo_ctx, shape.fill_rule)
    if preserve:
        cairo_ctx.fill_preserve()
    else:
        cairo_ctx.fill()


def append_stroke_outline(cairo_ctx, shape: vp.PathShape, style: vp.StrokeStyle,
                          config=None) -> vp.PathShape:
    """
    Append the stroke outline of *shape* and select the non-zero rule.

    Returns the outline so callers can reuse it (hit-testing, export).
    """
    outline = shape.to_outline_path(style, config)
    append_path(cairo_ctx, outline)
    set_fill_rule(cairo_ctx, outline.fill_rule)
    return outline
