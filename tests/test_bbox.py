"""
Unit tests for the bounding box algebra.
"""

import itertools
import random

import pytest

from voxelcsg import (
    BoundingBox, BoundingBoxPayload, Corner, EmptyInputError, InvalidModeError,
    JointBoundingBox, JointBoxMode, compile_corners, correct, intersect, is_inside,
)
from voxelcsg.bbox import corner_bit, corners_from_extents, empty_corners, is_correctable


def box(lo, hi):
    return BoundingBox.from_corners(corners_from_extents(lo, hi))


class TestBoundingBoxConstruction:
    """Building boxes from points and corners."""

    def test_single_point(self):
        """A single point gives a zero range box."""
        b = BoundingBox.from_points([(3, -1, 2)])
        assert b.lows == (3, -1, 2)
        assert b.highs == (3, -1, 2)
        assert b.ranges == (0, 0, 0)
        assert all(c == (3, -1, 2) for c in b.corners)

    def test_empty_points_raises(self):
        """At least one voxel is required."""
        with pytest.raises(EmptyInputError) as exc:
            BoundingBox.from_points([])
        assert exc.value.code == "V001"

    def test_corner_labels(self):
        """Corner bits select the high side of x, y and z."""
        b = BoundingBox.from_points([(0, 0, 0), (1, 2, 3)])
        assert b.corners[Corner.FLB] == (0, 0, 0)
        assert b.corners[Corner.FRB] == (1, 0, 0)
        assert b.corners[Corner.FLT] == (0, 2, 0)
        assert b.corners[Corner.BLB] == (0, 0, 3)
        assert b.corners[Corner.BRT] == (1, 2, 3)

    def test_extents_match_points(self):
        """Per-axis min and max equal the extremes of the input."""
        rng = random.Random(7)
        for _ in range(20):
            pts = [tuple(rng.randint(-20, 20) for _ in range(3)) for _ in range(rng.randint(1, 30))]
            b = BoundingBox.from_points(pts)
            for axis in range(3):
                assert b.low(axis) == min(p[axis] for p in pts)
                assert b.high(axis) == max(p[axis] for p in pts)
            assert all(is_inside(p, b.corners) for p in pts)

    def test_range_ordering(self):
        """Axes are ordered by range, largest first."""
        b = BoundingBox.from_points([(0, 0, 0), (4, 1, 2)])
        assert b.biggest_range_index == [0, 2, 1]
        assert b.biggest_range_labels == ["xRange", "zRange", "yRange"]
        assert b.biggest_range_low == ["xLow", "zLow", "yLow"]
        assert b.biggest_range_high == ["xHigh", "zHigh", "yHigh"]

    def test_range_ordering_ties(self):
        """Equal ranges keep x, y, z order."""
        b = BoundingBox.from_points([(0, 0, 0), (2, 5, 2)])
        assert b.biggest_range_index == [1, 0, 2]
        cube = BoundingBox.from_points([(0, 0, 0), (1, 1, 1)])
        assert cube.biggest_range_index == [0, 1, 2]

    def test_from_corners_recomputes(self):
        """Corner input recomputes the extents and ordering."""
        b = BoundingBox(corners_from_extents((1, 1, 1), (2, 6, 3)), BoundingBoxPayload.CORNERS)
        assert b.lows == (1, 1, 1)
        assert b.highs == (2, 6, 3)
        assert b.biggest_range_index[0] == 1

    def test_invalid_payload_mode(self):
        with pytest.raises(InvalidModeError):
            BoundingBox([(0, 0, 0)], "points")

    def test_set_corners(self):
        b = BoundingBox.from_points([(0, 0, 0)])
        b.set_corners(corners_from_extents((0, 0, 0), (5, 1, 1)))
        assert b.x_range == 5
        assert b.biggest_range_labels[0] == "xRange"

    def test_copy_is_equal(self):
        b = BoundingBox.from_points([(0, 0, 0), (2, 3, 4)])
        c = b.copy()
        assert c == b
        assert c is not b

    def test_compile_corners(self):
        partial = empty_corners()
        partial[Corner.FRB] = (1, 0, 0)
        partial[Corner.BRT] = (1, 1, 1)
        assert compile_corners(partial) == [(1, 0, 0), (1, 1, 1)]


class TestIntersect:
    """Box intersection."""

    def test_self_intersection(self):
        """A box intersected with itself is unchanged."""
        rng = random.Random(3)
        for _ in range(25):
            lo = [rng.randint(-10, 10) for _ in range(3)]
            hi = [v + rng.randint(0, 6) for v in lo]
            b = corners_from_extents(lo, hi)
            ok, result = intersect(b, b)
            assert ok
            assert result == b

    def test_disjoint_boxes(self):
        """Boxes separated on any one axis do not intersect."""
        a = corners_from_extents((0, 0, 0), (2, 2, 2))
        for shift in ((5, 0, 0), (0, 5, 0), (0, 0, 5), (-5, 1, 1)):
            b = corners_from_extents(shift, tuple(s + 2 for s in shift))
            ok, _ = intersect(a, b)
            assert not ok

    def test_overlap_matches_intervals(self):
        """The overlap is the per-axis interval intersection."""
        rng = random.Random(11)
        checked = 0
        while checked < 200:
            lo1 = [rng.randint(-8, 8) for _ in range(3)]
            hi1 = [v + rng.randint(0, 8) for v in lo1]
            lo2 = [rng.randint(-8, 8) for _ in range(3)]
            hi2 = [v + rng.randint(0, 8) for v in lo2]
            lo = [max(a, b) for a, b in zip(lo1, lo2)]
            hi = [min(a, b) for a, b in zip(hi1, hi2)]
            ok, corners = intersect(corners_from_extents(lo1, hi1), corners_from_extents(lo2, hi2))
            if all(l <= h for l, h in zip(lo, hi)):
                assert ok
                assert corners == corners_from_extents(lo, hi)
            else:
                assert not ok
            checked += 1

    def test_contained_box(self):
        """A box inside another is its own intersection."""
        outer = corners_from_extents((0, 0, 0), (10, 10, 10))
        inner = corners_from_extents((2, 3, 4), (5, 6, 7))
        assert intersect(outer, inner) == (True, inner)
        assert intersect(inner, outer) == (True, inner)

    def test_crossing_boxes(self):
        """Two slabs crossing with no corner inside each other."""
        a = corners_from_extents((0, 3, 3), (10, 5, 5))
        b = corners_from_extents((4, 0, 0), (6, 10, 10))
        ok, corners = intersect(a, b)
        assert ok
        assert corners == corners_from_extents((4, 3, 3), (6, 5, 5))

    def test_touching_boxes(self):
        """Boxes sharing a face meet in a flat box."""
        a = corners_from_extents((0, 0, 0), (2, 2, 2))
        b = corners_from_extents((2, 0, 0), (4, 2, 2))
        ok, corners = intersect(a, b)
        assert ok
        assert corners == corners_from_extents((2, 0, 0), (2, 2, 2))

    def test_method_form(self):
        a = box((0, 0, 0), (4, 4, 4))
        assert a.intersect(box((2, 2, 2), (6, 6, 6))) == box((2, 2, 2), (4, 4, 4))
        assert a.intersect(box((5, 5, 5), (6, 6, 6))) is None


class TestCorrect:
    """Rebuilding complete boxes from partial corner sets."""

    full = corners_from_extents((1, 2, 3), (4, 6, 9))

    def test_idempotent_on_complete(self):
        ok, corners = correct(list(self.full))
        assert ok
        assert corners == self.full

    def test_too_few_corners(self):
        """Zero or one defined corner cannot be corrected."""
        assert not correct(empty_corners())[0]
        partial = empty_corners()
        partial[3] = self.full[3]
        assert not correct(partial)[0]

    def test_space_diagonal(self):
        partial = empty_corners()
        partial[Corner.FLB] = self.full[Corner.FLB]
        partial[Corner.BRT] = self.full[Corner.BRT]
        ok, corners = correct(partial)
        assert ok
        assert corners == self.full

    def test_face_diagonal_is_not_enough(self):
        """Two corners of one face leave the third axis unknown."""
        partial = empty_corners()
        partial[Corner.FLB] = self.full[Corner.FLB]
        partial[Corner.FRT] = self.full[Corner.FRT]
        ok, result = correct(partial)
        assert not ok
        assert compile_corners(result) == [self.full[Corner.FLB], self.full[Corner.FRT]]

    def test_every_corner_pattern(self):
        """Exactly the patterns witnessing both sides of every axis succeed."""
        for size in range(2, 9):
            for labels in itertools.combinations(range(8), size):
                partial = empty_corners()
                for c in labels:
                    partial[c] = self.full[c]
                witnessed = all({corner_bit(c, a) for c in labels} == {0, 1} for a in range(3))
                ok, corners = correct(partial)
                assert ok == witnessed == is_correctable(partial)
                if ok:
                    assert corners == self.full

    def test_input_not_mutated(self):
        partial = empty_corners()
        partial[0] = self.full[0]
        partial[7] = self.full[7]
        correct(partial)
        assert compile_corners(partial) == [self.full[0], self.full[7]]


class TestJointBoundingBox:
    """Several boxes treated as one region."""

    def test_empty_region(self):
        assert not JointBoundingBox().is_inside((0, 0, 0))

    def test_is_inside_any_member(self):
        joint = JointBoundingBox([box((0, 0, 0), (1, 1, 1)), box((5, 5, 5), (6, 6, 6))])
        assert joint.is_inside((1, 1, 1))
        assert joint.is_inside((6, 5, 5))
        assert not joint.is_inside((3, 3, 3))

    def test_export_modes(self):
        a = box((0, 0, 0), (1, 1, 1))
        b = box((2, 2, 2), (3, 3, 3))
        joint = JointBoundingBox([a, b])

        full = joint.export(JointBoxMode.FULL_DIRECTORY)
        assert full == [a, b]
        assert full[0] is not a

        assert joint.export(JointBoxMode.CORNERS_DIRECTORY) == [a.corners, b.corners]

        flat = joint.export(JointBoxMode.VOXELS)
        assert len(flat) == 16
        assert flat[:8] == list(a.corners)

    def test_export_accepts_mode_value(self):
        joint = JointBoundingBox([box((0, 0, 0), (1, 1, 1))])
        assert len(joint.export("RETURN_MODE_VOXELS")) == 8

    def test_invalid_mode(self):
        with pytest.raises(InvalidModeError):
            JointBoundingBox().export("RETURN_MODE_EVERYTHING")
