"""Tests for stroke outlining: caps, joins, dashes and the outline predicate."""

import pytest

from vectorpath.algorithms.strokepath_algorithm import apply_dash_pattern, can_outline, outline
from vectorpath.core import error as vp_error
from vectorpath.core import types as vp
from vectorpath.core.config import DEFAULT_CONFIG
from vectorpath.core.types import (
    BezierSegment,
    DashPattern,
    LineCap,
    LineJoin,
    PathShape,
    Point,
    StrokeStyle,
    Subpath,
)

ELBOW = [(0, 0), (10, 0), (10, 10)]


def _elbow_outline(**style_args) -> PathShape:
    return PathShape.from_points(ELBOW).to_outline_path(StrokeStyle(width=2, **style_args))


class TestOpenOutline:
    def test_butt_line_is_a_rectangle(self, horizontal_line) -> None:
        result = horizontal_line.to_outline_path(StrokeStyle(width=10))
        assert result.subpath_count == 1
        assert result.fill_rule == vp.FillRule.NON_ZERO
        sp = result.subpath(0)
        assert sp.closed
        assert len(sp) == 4
        assert all(seg.is_line for seg in sp.segments)
        assert sp.nodes == [Point(0, -5), Point(100, -5), Point(100, 5), Point(0, 5)]

    def test_outline_is_counter_clockwise(self, horizontal_line) -> None:
        result = horizontal_line.to_outline_path(StrokeStyle(width=10))
        assert vp.polygon_area(list(result.flatten()[0])) == pytest.approx(1000)

    def test_round_cap_extends_half_width(self, horizontal_line) -> None:
        result = horizontal_line.to_outline_path(StrokeStyle(width=10, cap=LineCap.ROUND))
        b = result.bounds
        assert b.min_x == pytest.approx(-5)
        assert b.max_x == pytest.approx(105)
        assert b.min_y == pytest.approx(-5)
        assert b.max_y == pytest.approx(5)
        assert result.contains_point((103, 0), 0.01)
        assert not result.contains_point((104.5, 4.5), 0.01)

    def test_square_cap_extends_half_width(self, horizontal_line) -> None:
        result = horizontal_line.to_outline_path(StrokeStyle(width=10, cap=LineCap.SQUARE))
        assert tuple(result.bounds) == pytest.approx((-5, -5, 105, 5))
        assert result.contains_point((104.5, 4.5))

    def test_input_is_not_modified(self, horizontal_line) -> None:
        before = horizontal_line.copy()
        horizontal_line.to_outline_path(StrokeStyle(width=4, cap=LineCap.ROUND))
        assert horizontal_line == before

    def test_curve_outline_follows_the_curve(self) -> None:
        seg = BezierSegment(Point(0, 0), Point(0, 50), Point(100, 50), Point(100, 0))
        shape = PathShape([Subpath((seg,))])
        result = shape.to_outline_path(StrokeStyle(width=4))
        mid = seg.point_at(0.5)
        assert result.contains_point(mid, 0.01)
        assert result.contains_point((mid.x, mid.y + 1.5), 0.01)
        assert not result.contains_point((mid.x, mid.y + 3), 0.01)
        assert not result.contains_point((50, 10), 0.01)


class TestJoins:
    def test_miter_join_reaches_the_corner(self) -> None:
        assert _elbow_outline(join=LineJoin.MITER).contains_point((10.9, -0.9), 0.01)

    def test_bevel_join_cuts_the_corner(self) -> None:
        assert not _elbow_outline(join=LineJoin.BEVEL).contains_point((10.9, -0.9), 0.01)

    def test_miter_limit_falls_back_to_bevel(self) -> None:
        result = _elbow_outline(join=LineJoin.MITER, miter_limit=1.2)
        assert not result.contains_point((10.9, -0.9), 0.01)

    def test_round_join(self) -> None:
        assert _elbow_outline(join=LineJoin.ROUND).contains_point((10.6, -0.6), 0.01)
        assert not _elbow_outline(join=LineJoin.BEVEL).contains_point((10.6, -0.6), 0.01)

    def test_inside_of_the_turn_is_covered(self) -> None:
        result = _elbow_outline(join=LineJoin.MITER)
        assert result.contains_point((9.5, 0.5), 0.01)
        assert not result.contains_point((8, 2), 0.01)

    def test_wider_stroke_contains_narrower(self) -> None:
        shape = PathShape.from_points([(0, 0), (50, 20), (100, 0)])
        narrow = shape.to_outline_path(StrokeStyle(width=2, cap=LineCap.ROUND))
        wide = shape.to_outline_path(StrokeStyle(width=6, cap=LineCap.ROUND))
        for poly in narrow.flatten(0.01):
            for p in poly:
                assert wide.contains_point(p, 0.01)


class TestClosedOutline:
    def test_closed_square_has_two_rings(self, square) -> None:
        result = square.to_outline_path(StrokeStyle(width=2))
        assert result.subpath_count == 2
        assert result.contains_point((0, 5))
        assert result.contains_point((10.5, 10.5))
        assert result.contains_point((10.9, -0.9))
        assert not result.contains_point((5, 5))
        assert not result.contains_point((-1.5, 5))

    def test_closed_ellipse_ring(self) -> None:
        result = PathShape.ellipse(0, 0, 20, 20).to_outline_path(StrokeStyle(width=2))
        assert result.contains_point((20, 0), 0.01)
        assert result.contains_point((0, -20.5), 0.01)
        assert not result.contains_point((0, 0), 0.01)
        assert not result.contains_point((22, 0), 0.01)


class TestDegenerateRuns:
    def test_zero_length_subpath_with_round_cap_is_a_dot(self) -> None:
        dot = Subpath((BezierSegment.line(Point(50, 50), Point(50, 50)),))
        shape = PathShape([Subpath.from_points([(0, 0), (10, 0)]), dot])
        result = shape.to_outline_path(StrokeStyle(width=4, cap=LineCap.ROUND))
        assert result.subpath_count == 2
        assert result.contains_point((50, 50))
        assert result.contains_point((51.5, 50), 0.01)

    def test_zero_length_subpath_with_butt_cap_paints_nothing(self) -> None:
        dot = Subpath((BezierSegment.line(Point(50, 50), Point(50, 50)),))
        shape = PathShape([Subpath.from_points([(0, 0), (10, 0)]), dot])
        result = shape.to_outline_path(StrokeStyle(width=4))
        assert result.subpath_count == 1
        assert not result.contains_point((50, 50))


class TestDashes:
    def test_dashed_line(self, horizontal_line) -> None:
        style = StrokeStyle(width=2, dash=DashPattern((10, 10)))
        result = horizontal_line.to_outline_path(style)
        assert result.subpath_count == 5
        assert result.contains_point((5, 0))
        assert not result.contains_point((15, 0))
        assert result.contains_point((85, 0))

    def test_phase_shifts_the_pattern(self, horizontal_line) -> None:
        style = StrokeStyle(width=2, dash=DashPattern((10, 10), phase=5))
        result = horizontal_line.to_outline_path(style)
        assert result.contains_point((2, 0))
        assert not result.contains_point((7, 0))
        assert result.contains_point((17, 0))

    def test_odd_pattern_is_doubled(self) -> None:
        pts = [Point(0, 0), Point(30, 0)]
        runs = apply_dash_pattern(pts, False, DashPattern((5,)))
        assert [r[0][0].x for r in runs] == pytest.approx([0, 10, 20])
        assert [r[0][-1].x for r in runs] == pytest.approx([5, 15, 25])
        assert all(not closed for _, closed in runs)

    def test_closed_polyline_merges_dash_across_start(self) -> None:
        pts = [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
        runs = apply_dash_pattern(pts, True, DashPattern((15, 10)))
        assert len(runs) == 1
        run, closed = runs[0]
        assert not closed
        assert run == [Point(5, 10), Point(0, 10), Point(0, 0), Point(10, 0), Point(10, 5)]

    def test_pattern_without_gaps_keeps_closed_polyline(self) -> None:
        pts = [Point(0, 0), Point(10, 0), Point(10, 10)]
        runs = apply_dash_pattern(pts, True, DashPattern((100, 0)))
        assert runs == [(pts, True)]

    def test_all_zero_pattern_is_solid(self, horizontal_line) -> None:
        style = StrokeStyle(width=2, dash=DashPattern((0, 0)))
        assert not style.is_dashed
        assert horizontal_line.to_outline_path(style).subpath_count == 1


class TestOutlinePredicate:
    def test_zero_width_is_rejected(self, horizontal_line) -> None:
        assert not horizontal_line.can_outline_stroke(StrokeStyle(width=0))
        with pytest.raises(vp_error.NotOutlinableError):
            horizontal_line.to_outline_path(StrokeStyle(width=0))

    def test_single_point_path_is_rejected(self) -> None:
        dot = PathShape([Subpath((BezierSegment.line(Point(1, 1), Point(1, 1)),))])
        assert not can_outline(dot, StrokeStyle(width=2))
        with pytest.raises(vp_error.NotOutlinableError):
            outline(dot, StrokeStyle(width=2))

    def test_configured_predicate_replaces_default(self, horizontal_line) -> None:
        cfg = DEFAULT_CONFIG.replace(outline_predicate=lambda shape, style: False)
        assert not can_outline(horizontal_line, StrokeStyle(width=2), config=cfg)
        with pytest.raises(vp_error.NotOutlinableError):
            outline(horizontal_line, StrokeStyle(width=2), config=cfg)

    def test_call_predicate_overrides_configuration(self, horizontal_line) -> None:
        cfg = DEFAULT_CONFIG.replace(outline_predicate=lambda shape, style: False)
        result = outline(horizontal_line, StrokeStyle(width=2), config=cfg,
                         can_outline=lambda shape, style: True)
        assert result.subpath_count == 1


class TestExtraElements:
    def test_arrowheads_added_by_default(self, horizontal_line) -> None:
        style = StrokeStyle(width=2, end_arrowhead=vp.Arrowhead.TRIANGLE)
        result = horizontal_line.to_outline_path(style)
        assert result.subpath_count == 2
        assert result.contains_point((100.5, 0))

    def test_custom_hook_replaces_arrowheads(self, horizontal_line) -> None:
        style = StrokeStyle(width=2, end_arrowhead=vp.Arrowhead.TRIANGLE)
        marker = Subpath.from_points([(200, 0), (210, 0), (210, 10)], closed=True)
        result = horizontal_line.to_outline_path(style, extra_elements=lambda s, st: [marker])
        assert result.subpath_count == 2
        assert result.subpath(1) == marker
        assert not result.contains_point((100.5, 0))
