# VectorPath - Vector Path Authoring Engine
# Copyright (c) 2025-2026 Scott Bowman
# SPDX-License-Identifier: AGPL-3.0-or-later

"""SVG arrowhead markers for the open ends of stroked paths."""

import xml.etree.ElementTree as ET

from ...algorithms.arrowhead_algorithm import arrowhead_subpaths
from ...core import types as vp
from .path_data import to_path_data


def _child_tag(group: ET.Element, name: str) -> str:
    # Match the sink's namespace so markers land in the same SVG namespace
    if group.tag.startswith('{'):
        return group.tag[:group.tag.index('}') + 1] + name
    return name


def emit_arrowheads(shape: vp.PathShape, style: vp.StrokeStyle, group: ET.Element,
                    precision=None, config=None) -> int:
    """
    Append one ``<path>`` per arrowhead to *group*.

    Markers are classed ``arrowhead-start`` / ``arrowhead-end``. Closed
    subpaths and styles without arrowheads emit nothing.

    Returns:
        Number of marker elements appended.
    """
    count = 0
    for which, marker in arrowhead_subpaths(shape, style):
        ET.SubElement(group, _child_tag(group, 'path'), {
            'class': f'arrowhead-{which}',
            'd': to_path_data(vp.PathShape([marker]), precision, config),
        })
        count += 1
    return count
