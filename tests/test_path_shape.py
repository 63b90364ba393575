"""Tests for Subpath and PathShape editing, flattening and queries."""

import pytest

from vectorpath.core import error as vp_error
from vectorpath.core import types as vp
from vectorpath.core.types import BezierSegment, PathShape, Point, Subpath


class TestSubpath:
    def test_from_points_skips_duplicates(self) -> None:
        sp = Subpath.from_points([(0, 0), (0, 0), (5, 0), (5, 0), (5, 5)])
        assert len(sp) == 2
        assert sp.nodes == [Point(0, 0), Point(5, 0), Point(5, 5)]

    def test_from_points_closed_drops_repeated_start(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0), (10, 10), (0, 0)], closed=True)
        assert sp.closed
        assert len(sp) == 3
        assert sp.node_count == 3

    def test_two_points_cannot_close(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0)], closed=True)
        assert not sp.closed

    def test_discontinuous_segments_rejected(self) -> None:
        with pytest.raises(vp_error.DiscontinuousSegmentError):
            Subpath((BezierSegment.line(Point(0, 0), Point(1, 0)),
                     BezierSegment.line(Point(2, 0), Point(3, 0))))

    def test_closed_must_end_at_start(self) -> None:
        with pytest.raises(vp_error.DiscontinuousSegmentError):
            Subpath((BezierSegment.line(Point(0, 0), Point(1, 0)),), closed=True)

    def test_appended_rejects_gap(self) -> None:
        sp = Subpath.from_points([(0, 0), (1, 0)])
        with pytest.raises(vp_error.DiscontinuousSegmentError):
            sp.appended(BezierSegment.line(Point(5, 5), Point(6, 6)))

    def test_closing_adds_closing_segment(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0), (10, 10)]).closing()
        assert sp.closed
        assert len(sp) == 3
        assert sp.segments[-1] == BezierSegment.line(Point(10, 10), Point(0, 0))

    def test_reversed(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0), (10, 10)])
        assert sp.reversed().nodes == [Point(10, 10), Point(10, 0), Point(0, 0)]

    def test_remove_end_nodes_of_open_subpath(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0), (10, 10)])
        assert sp.with_node_removed(0).nodes == [Point(10, 0), Point(10, 10)]
        assert sp.with_node_removed(-1).nodes == [Point(0, 0), Point(10, 0)]

    def test_remove_interior_node_merges_lines(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0), (10, 10)])
        merged = sp.with_node_removed(1)
        assert len(merged) == 1
        assert merged.segments[0].is_line

    def test_closed_two_segment_subpath_collapses(self) -> None:
        sp = Subpath((BezierSegment.line(Point(0, 0), Point(10, 0)),
                      BezierSegment.line(Point(10, 0), Point(0, 0))), closed=True)
        assert len(sp.with_node_removed(1)) == 0
        assert len(sp.with_node_removed(0)) == 0

    def test_removing_node_of_closed_two_segment_subpath_drops_it(self) -> None:
        sp = Subpath((BezierSegment.line(Point(0, 0), Point(10, 0)),
                      BezierSegment(Point(10, 0), Point(10, 5), Point(0, 5), Point(0, 0))), closed=True)
        shape = PathShape([sp, Subpath.from_points([(20, 0), (30, 0)])])
        shape.remove_node(0, 1)
        assert shape.subpath_count == 1
        assert shape.subpath(0).start == Point(20, 0)

    def test_node_index_out_of_range(self) -> None:
        sp = Subpath.from_points([(0, 0), (10, 0)])
        with pytest.raises(IndexError):
            sp.with_node_removed(2)


class TestPathShapeEditing:
    def test_rectangle(self, square) -> None:
        assert square.subpath_count == 1
        sp = square.subpath(0)
        assert sp.closed
        assert sp.nodes == [Point(0, 0), Point(10, 0), Point(10, 10), Point(0, 10)]
        assert square.bounds == (0, 0, 10, 10)

    def test_empty_subpath_rejected(self) -> None:
        with pytest.raises(vp_error.DegenerateInputError):
            PathShape([Subpath()])

    def test_wrong_type_rejected(self) -> None:
        shape = PathShape()
        with pytest.raises(TypeError):
            shape.add_subpath([(0, 0), (1, 1)])

    def test_append_segment_and_close(self) -> None:
        shape = PathShape.from_points([(0, 0), (10, 0)])
        shape.append_segment(0, BezierSegment.line(Point(10, 0), Point(10, 10)))
        shape.close_subpath(0)
        sp = shape.subpath(0)
        assert sp.closed
        assert len(sp) == 3

    def test_insert_node_keeps_geometry(self, square) -> None:
        square.insert_node(0, 0, 0.5)
        sp = square.subpath(0)
        assert len(sp) == 5
        assert sp.nodes[1] == Point(5, 0)
        assert square.bounds == (0, 0, 10, 10)

    def test_insert_node_parameter_range(self, square) -> None:
        with pytest.raises(ValueError):
            square.insert_node(0, 0, 1.0)

    def test_move_node_keeps_line_segments_straight(self, square) -> None:
        square.move_node(0, 2, (12, 12))
        sp = square.subpath(0)
        assert sp.nodes[2] == Point(12, 12)
        assert all(seg.is_line for seg in sp.segments)

    def test_move_node_carries_controls(self) -> None:
        seg = BezierSegment(Point(0, 0), Point(0, 5), Point(10, 5), Point(10, 0))
        shape = PathShape([Subpath((seg,))])
        shape.move_node(0, 1, (20, 0))
        moved = shape.subpath(0).segments[0]
        assert moved.end == Point(20, 0)
        assert moved.c2 == Point(20, 5)
        assert moved.c1 == Point(0, 5)

    def test_removing_last_node_drops_subpath(self) -> None:
        shape = PathShape.from_points([(0, 0), (10, 0)])
        shape.remove_node(0, 0)
        assert shape.is_empty

    def test_reverse_subpath(self, square) -> None:
        square.reverse_subpath(0)
        assert vp.polygon_area(list(square.flatten()[0])) == pytest.approx(-100)

    def test_copy_is_independent(self, square) -> None:
        other = square.copy()
        assert other == square
        other.move_node(0, 0, (-5, -5))
        assert other != square

    def test_remove_subpath(self, square) -> None:
        removed = square.remove_subpath(0)
        assert removed.closed
        assert square.is_empty
        assert square.bounds is None


class TestFlattenMemo:
    def test_same_tolerance_returns_cached_polygons(self, square) -> None:
        first = square.flatten(0.1)
        second = square.flatten(0.1)
        assert first[0] is second[0]

    def test_edit_invalidates_cache(self, square) -> None:
        before = square.flatten(0.1)
        square.move_node(0, 2, (20, 20))
        after = square.flatten(0.1)
        assert after[0] is not before[0]
        assert Point(20, 20) in after[0].points

    def test_memo_keeps_only_recent_tolerances(self, square) -> None:
        first = square.flatten(0.1)
        for i in range(1, 20):
            square.flatten(0.1 + i * 0.01)
        assert len(square._flatten_cache) == vp.FLATTEN_CACHE_SIZE
        assert square.flatten(0.1)[0] is not first[0]

    def test_recently_used_tolerance_survives(self, square) -> None:
        first = square.flatten(0.1)
        for i in range(1, 20):
            square.flatten(0.1 + i * 0.01)
            square.flatten(0.1)
        assert square.flatten(0.1)[0] is first[0]

    def test_negative_tolerance_rejected(self, square) -> None:
        with pytest.raises(vp_error.DegenerateInputError):
            square.flatten(-1)

    def test_closed_polygon_does_not_repeat_start(self, square) -> None:
        poly = square.flatten()[0]
        assert poly.closed
        assert len(poly) == 4
        assert poly.length() == pytest.approx(40)

    def test_ellipse_flattening_is_counter_clockwise(self) -> None:
        poly = PathShape.ellipse(0, 0, 10, 5).flatten(0.01)[0]
        assert vp.polygon_area(list(poly)) > 0

    def test_flatten_in_place_removes_curves(self) -> None:
        shape = PathShape.ellipse(0, 0, 10, 10)
        shape.flatten_in_place(0.1)
        sp = shape.subpath(0)
        assert sp.closed
        assert all(seg.is_line for seg in sp.segments)
        assert len(sp) > 8

    def test_path_by_flattening_leaves_original(self) -> None:
        shape = PathShape.ellipse(0, 0, 10, 10)
        flat = shape.path_by_flattening(0.1)
        assert not shape.subpath(0).segments[0].is_line
        assert flat.subpath(0).segments[0].is_line


class TestContainsPoint:
    def test_square(self, square) -> None:
        assert square.contains_point((5, 5))
        assert not square.contains_point((15, 5))
        assert not square.contains_point((-1, 5))

    def test_nested_squares_fill_rules(self) -> None:
        outer = Subpath.from_points([(0, 0), (30, 0), (30, 30), (0, 30)], closed=True)
        inner = Subpath.from_points([(10, 10), (20, 10), (20, 20), (10, 20)], closed=True)
        shape = PathShape([outer, inner], vp.FillRule.NON_ZERO)
        assert shape.contains_point((15, 15))

        shape.fill_rule = vp.FillRule.EVEN_ODD
        assert not shape.contains_point((15, 15))
        assert shape.contains_point((5, 5))

    def test_opposite_winding_hole_under_non_zero(self) -> None:
        outer = Subpath.from_points([(0, 0), (30, 0), (30, 30), (0, 30)], closed=True)
        inner = Subpath.from_points([(10, 10), (10, 20), (20, 20), (20, 10)], closed=True)
        shape = PathShape([outer, inner])
        assert not shape.contains_point((15, 15))
        assert shape.contains_point((5, 15))

    def test_open_subpath_is_implicitly_closed(self) -> None:
        shape = PathShape.from_points([(0, 0), (10, 0), (10, 10), (0, 10)])
        assert shape.contains_point((5, 5))

    def test_empty_shape(self) -> None:
        assert not PathShape().contains_point((0, 0))


class TestSimplify:
    def test_collinear_points_become_one_segment(self) -> None:
        shape = PathShape.from_points([(i, 0) for i in range(11)])
        shape.simplify(0.1)
        sp = shape.subpath(0)
        assert len(sp) == 1
        assert sp.nodes == [Point(0, 0), Point(10, 0)]

    def test_square_with_midpoints(self) -> None:
        pts = [(0, 0), (5, 0), (10, 0), (10, 5), (10, 10), (5, 10), (0, 10), (0, 5)]
        shape = PathShape.from_points(pts, closed=True)
        shape.simplify(0.1)
        sp = shape.subpath(0)
        assert sp.closed
        assert len(sp) == 4
        assert shape.bounds == (0, 0, 10, 10)

    def test_tolerance_must_be_positive(self, square) -> None:
        with pytest.raises(vp_error.DegenerateInputError):
            square.simplify(0)


class TestContinuityAfterEdits:
    def test_mutation_sequence_keeps_segments_chained(self) -> None:
        """Every public mutator leaves each subpath continuous."""
        shape = PathShape.ellipse(0, 0, 10, 10)
        shape.add_subpath(Subpath.from_points([(20, 0), (30, 0), (30, 10)]))
        shape.insert_node(0, 1, 0.3)
        shape.move_node(0, 0, (12, 1))
        shape.remove_node(0, 2)
        shape.append_segment(1, BezierSegment(Point(30, 10), Point(30, 15), Point(25, 20), Point(20, 20)))
        shape.move_node(1, -1, (18, 22))
        shape.close_subpath(1)
        shape.insert_node(1, 0)
        shape.reverse_subpath(0)

        for sp in shape:
            for a, b in zip(sp.segments, sp.segments[1:]):
                assert a.end == b.start
            if sp.closed:
                assert sp.segments[-1].end == sp.segments[0].start
