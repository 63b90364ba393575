# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
SVG Document Output

Wraps one or more PathShapes in a standalone SVG document. Filled shapes
carry their fill rule; with a StrokeStyle the shapes are drawn as strokes
and any requested arrowheads are appended as marker paths.

Coordinates are written as-is (no Y flip); the viewBox is the union of
the shapes' control bounds plus a margin.
"""

import xml.etree.ElementTree as ET

from ...core import types as vp
from .arrowheads import emit_arrowheads
from .path_data import fmt_number, to_path_data

# SVG namespace
_SVG_NS = 'http://www.w3.org/2000/svg'

_CAP_NAMES = {vp.LineCap.BUTT: 'butt', vp.LineCap.ROUND: 'round', vp.LineCap.SQUARE: 'square'}
_JOIN_NAMES = {vp.LineJoin.MITER: 'miter', vp.LineJoin.ROUND: 'round', vp.LineJoin.BEVEL: 'bevel'}


def svg_document(shapes, style: vp.StrokeStyle | None = None, precision=None,
                 config=None, margin: float = 10.0) -> str:
    """
    Render shapes as an SVG document string.

    Args:
        shapes: Sequence of PathShape.
        style: When given, shapes are stroked with it instead of filled.
        precision: Decimal places for coordinates.
        config: EngineConfig; DEFAULT_CONFIG when None.
        margin: Space added around the shapes' bounds.
    """
    ET.register_namespace('', _SVG_NS)

    bounds = vp.shapes_bounds(shapes)
    if style is not None and bounds is not None:
        pad = style.half_width * max(1.0, style.arrowhead_scale)
        bounds = vp.Bounds(bounds.min_x - pad, bounds.min_y - pad,
                           bounds.max_x + pad, bounds.max_y + pad)
    if bounds is None:
        bounds = vp.Bounds(0.0, 0.0, 0.0, 0.0)

    x = bounds.min_x - margin
    y = bounds.min_y - margin
    w = bounds.width + 2 * margin
    h = bounds.height + 2 * margin
    p = 3 if precision is None else precision

    root = ET.Element(f'{{{_SVG_NS}}}svg', {
        'version': '1.1',
        'width': fmt_number(w, p),
        'height': fmt_number(h, p),
        'viewBox': ' '.join(fmt_number(v, p) for v in (x, y, w, h)),
    })

    for shape in shapes:
        attrs = {'d': to_path_data(shape, precision, config)}
        if style is None:
            attrs['fill'] = 'black'
            attrs['fill-rule'] = 'evenodd' if shape.fill_rule == vp.FillRule.EVEN_ODD else 'nonzero'
        else:
            attrs['fill'] = 'none'
            attrs['stroke'] = 'black'
            attrs['stroke-width'] = fmt_number(style.width, p)
            attrs['stroke-linecap'] = _CAP_NAMES[style.cap]
            attrs['stroke-linejoin'] = _JOIN_NAMES[style.join]
            if style.join == vp.LineJoin.MITER:
                attrs['stroke-miterlimit'] = fmt_number(style.miter_limit, p)
            if style.is_dashed:
                attrs['stroke-dasharray'] = ','.join(fmt_number(v, p) for v in style.dash.lengths)
                if style.dash.phase:
                    attrs['stroke-dashoffset'] = fmt_number(style.dash.phase, p)
        ET.SubElement(root, f'{{{_SVG_NS}}}path', attrs)

        if style is not None and style.has_arrowheads:
            group = ET.SubElement(root, f'{{{_SVG_NS}}}g', {'fill': 'black'})
            if not emit_arrowheads(shape, style, group, precision, config):
                root.remove(group)

    ET.indent(root)
    return ET.tostring(root, encoding='unicode', xml_declaration=True)
