"""
Unit tests for voxel sets, rasterization and point lookup.
"""

import random

import pytest

from voxelcsg import (
    DeletedObjectError, VoxelSet, add_origin, find_point, graph3d_parametric,
)
from voxelcsg.voxels import unique_voxels

from conftest import cube_voxels


class TestGraph3dParametric:
    """Line rasterization."""

    def test_axis_aligned(self):
        assert graph3d_parametric((0, 0, 0), (5, 0, 0)) == [(x, 0, 0) for x in range(6)]

    def test_diagonal(self):
        assert graph3d_parametric((0, 0, 0), (3, 3, 0)) == [
            (0, 0, 0), (1, 1, 0), (2, 2, 0), (3, 3, 0)]

    def test_negative_direction(self):
        assert graph3d_parametric((0, 0, 4), (0, 0, 0)) == [(0, 0, z) for z in range(4, -1, -1)]

    def test_same_point(self):
        """Zero change returns just the end point."""
        assert graph3d_parametric((2, 2, 2), (2, 2, 2)) == [(2, 2, 2)]

    def test_shallow_slope(self):
        assert graph3d_parametric((0, 0, 0), (3, 1, 0)) == [
            (0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 1, 0)]

    def test_length_and_endpoints(self):
        """Always max |delta| + 1 voxels, unit steps, from start to end."""
        rng = random.Random(5)
        for _ in range(200):
            p1 = tuple(rng.randint(-10, 10) for _ in range(3))
            p2 = tuple(rng.randint(-10, 10) for _ in range(3))
            path = graph3d_parametric(p1, p2)
            span = max(abs(a - b) for a, b in zip(p1, p2))
            assert len(path) == span + 1
            assert path[-1] == p2
            if span:
                assert path[0] == p1
            for a, b in zip(path, path[1:]):
                assert max(abs(u - v) for u, v in zip(a, b)) == 1

    def test_direction_asymmetry(self):
        """Reversing the endpoints can change the interior voxels."""
        forward = graph3d_parametric((0, 0, 0), (4, 1, 0))
        backward = graph3d_parametric((4, 1, 0), (0, 0, 0))
        assert forward == [(0, 0, 0), (1, 0, 0), (2, 0, 0), (3, 0, 0), (4, 1, 0)]
        assert backward == [(4, 1, 0), (3, 1, 0), (2, 1, 0), (1, 1, 0), (0, 0, 0)]
        assert set(forward) != set(backward)


class TestVoxelSet:
    """Voxel set storage and derived state."""

    def test_origin_is_applied(self, registry):
        vs = VoxelSet(registry, (1, 2, 3), [(0, 0, 0), (1, 0, 0)])
        assert vs.get_fill_voxels() == [(1, 2, 3), (2, 2, 3)]
        assert vs.get_origin() == (1, 2, 3)

    def test_fill_voxels_are_copies(self, registry):
        vs = VoxelSet(registry, (0, 0, 0), [(0, 0, 0)])
        out = vs.get_fill_voxels()
        out.append((9, 9, 9))
        assert vs.get_fill_voxels() == [(0, 0, 0)]

    def test_empty_set(self, registry):
        """An empty set is a valid zero-volume value."""
        vs = VoxelSet(registry)
        assert vs.bounding_box is None
        assert len(vs.joint_bounding_box) == 0
        assert vs.sorted_directory == {}
        assert vs.is_empty
        assert (0, 0, 0) not in vs

    def test_set_origin_recomputes(self, registry):
        vs = VoxelSet(registry, (0, 0, 0), [(0, 0, 0), (2, 0, 0)])
        vs.set_origin((10, 0, 0))
        assert vs.bounding_box.lows == (10, 0, 0)
        assert sorted(vs.sorted_directory) == [10, 11, 12]

    def test_directory_covers_range(self, registry):
        """Every integer of the dominant axis gets a bucket, empty or not."""
        vs = VoxelSet(registry, (0, 0, 0), [(0, 0, 0), (4, 1, 0), (4, 0, 1)])
        assert vs.sort_axes[0] == 0
        assert sorted(vs.sorted_directory) == [0, 1, 2, 3, 4]
        assert vs.sorted_directory[2] == []
        assert vs.sorted_directory[4] == [(4, 0, 1), (4, 1, 0)]
        assert len(vs.joint_bounding_box) == 2

    def test_buckets_sorted(self, registry):
        rng = random.Random(1)
        voxels = unique_voxels(tuple(rng.randint(0, 6) for _ in range(3)) for _ in range(80))
        vs = VoxelSet(registry, (0, 0, 0), voxels)
        _, a1, a2 = vs.sort_axes
        for bucket in vs.sorted_directory.values():
            keys = [(v[a1], v[a2]) for v in bucket]
            assert keys == sorted(keys)

    def test_set_and_add_fill_voxels(self, registry):
        vs = VoxelSet(registry, (1, 0, 0))
        vs.set_fill_voxels([(0, 0, 0)])
        vs.add_fill_voxels([(1, 0, 0)])
        assert vs.get_fill_voxels() == [(1, 0, 0), (2, 0, 0)]
        assert len(vs) == 2
        assert list(vs) == [(1, 0, 0), (2, 0, 0)]

    def test_registered(self, registry):
        vs = VoxelSet(registry)
        assert vs.id in registry
        assert registry.lookup(vs.id) is vs

    def test_delete(self, registry):
        vs = VoxelSet(registry, (0, 0, 0), [(0, 0, 0)])
        uid = vs.id
        vs.delete()
        assert uid not in registry
        assert vs.deleted
        with pytest.raises(DeletedObjectError) as exc:
            vs.get_fill_voxels()
        assert exc.value.code == "V003"
        with pytest.raises(DeletedObjectError):
            vs.set_origin((1, 1, 1))


class TestFindPoint:
    """Directory lookup."""

    def test_finds_members_rejects_others(self, registry):
        rng = random.Random(9)
        members = unique_voxels(tuple(rng.randint(-5, 5) for _ in range(3)) for _ in range(150))
        vs = VoxelSet(registry, (0, 0, 0), members)
        member_set = set(members)
        for v in members:
            assert find_point(vs, v) != -1
            assert v in vs
        for x in range(-6, 7):
            for y in range(-6, 7):
                p = (x, y, 3)
                assert (find_point(vs, p) != -1) == (p in member_set)

    def test_index_points_into_bucket(self, registry):
        vs = VoxelSet(registry, (0, 0, 0), cube_voxels(3))
        p = (1, 2, 0)
        index = find_point(vs, p)
        assert vs.sorted_directory[p[vs.sort_axes[0]]][index] == p

    def test_uses_origin(self, registry):
        vs = VoxelSet(registry, (5, 5, 5), [(0, 0, 0), (1, 0, 0)])
        assert find_point(vs, (6, 5, 5)) != -1
        assert find_point(vs, (1, 0, 0)) == -1

    def test_empty(self, registry):
        assert find_point(VoxelSet(registry), (0, 0, 0)) == -1


class TestHelpers:

    def test_add_origin(self):
        assert add_origin([(0, 0, 0), (1, 2, 3)], (1, 1, 1)) == [(1, 1, 1), (2, 3, 4)]

    def test_unique_voxels_keeps_first(self):
        assert unique_voxels([(1, 0, 0), (0, 0, 0), (1, 0, 0), [0, 0, 0]]) == [(1, 0, 0), (0, 0, 0)]
